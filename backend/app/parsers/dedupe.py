from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .records import VehicleRecord

DedupeKey = Tuple[str, str, str, Optional[str]]


def dedupe_key(vehicle: VehicleRecord) -> DedupeKey:
    """Identity used to collapse repeated listings.

    Vehicles with no VIN, stock number or detail URL fall back to
    year/make/model alone, so two such cars of the same model share a key.
    """
    identity = vehicle.vin or vehicle.stock_number or vehicle.detail_url
    return (vehicle.year, vehicle.make, vehicle.model, identity)


def deduplicate_vehicles(vehicles: Iterable[VehicleRecord]) -> List[VehicleRecord]:
    seen: set[DedupeKey] = set()
    unique: List[VehicleRecord] = []
    for vehicle in vehicles:
        key = dedupe_key(vehicle)
        if key in seen:
            continue
        seen.add(key)
        unique.append(vehicle)
    return unique
