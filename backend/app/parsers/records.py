"""Value types produced by the inventory extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

UNKNOWN = "Unknown"


def _camel(value: str) -> str:
    components = value.split("_")
    if not components:
        return value
    return components[0] + "".join(c.title() for c in components[1:])


@dataclass(frozen=True)
class VehicleRecord:
    id: str
    year: str
    make: str = UNKNOWN
    model: str = UNKNOWN
    trim: Optional[str] = None
    price: Optional[str] = None
    mileage: Optional[str] = None
    exterior_color: Optional[str] = None
    interior_color: Optional[str] = None
    engine: Optional[str] = None
    transmission: Optional[str] = None
    drivetrain: Optional[str] = None
    fuel_type: Optional[str] = None
    vin: Optional[str] = None
    stock_number: Optional[str] = None
    image_url: Optional[str] = None
    detail_url: Optional[str] = None
    features: Optional[Tuple[str, ...]] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """camelCase mapping with absent optional fields left out."""
        payload: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            if isinstance(value, tuple):
                value = list(value)
            payload[_camel(item.name)] = value
        return payload


@dataclass(frozen=True)
class InventorySnapshot:
    dealership_name: str
    dealership_url: str
    vehicles: Tuple[VehicleRecord, ...]
    scraped_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dealershipName": self.dealership_name,
            "dealershipUrl": self.dealership_url,
            "vehicles": [vehicle.to_dict() for vehicle in self.vehicles],
            "scrapedAt": self.scraped_at.isoformat(),
        }


__all__ = ["UNKNOWN", "VehicleRecord", "InventorySnapshot"]
