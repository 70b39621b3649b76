from __future__ import annotations

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from backend.app.api.deps import get_venice_client
from backend.app.parsers.records import VehicleRecord
from backend.app.services.ad_generation import GenerationError, generate_scripts
from backend.app.services.venice_client import VeniceClient

router = APIRouter()


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VehicleIn(CamelModel):
    id: Optional[str] = None
    year: Union[str, int]
    make: str
    model: str
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
    features: Optional[List[str]] = None
    description: Optional[str] = None

    def to_record(self) -> VehicleRecord:
        data = self.model_dump(exclude={"id", "year", "features"})
        return VehicleRecord(
            id=self.id or self.vin or self.stock_number or "vehicle",
            year=str(self.year),
            features=tuple(self.features) if self.features else None,
            **data,
        )


class GenerateRequest(CamelModel):
    vehicle: Optional[VehicleIn] = None
    dealership_name: Optional[str] = None
    ad_types: List[str] = []


@router.post("")
async def generate(body: GenerateRequest, client: VeniceClient = Depends(get_venice_client)):
    if body.vehicle is None or not body.dealership_name or not body.ad_types:
        raise HTTPException(status_code=400, detail="Vehicle, dealership name, and ad types are required")

    try:
        scripts = await generate_scripts(
            body.vehicle.to_record(),
            body.dealership_name,
            body.ad_types,
            client=client,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except GenerationError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return {
        "scripts": [script.to_dict() for script in scripts],
        "vehicle": body.vehicle.model_dump(by_alias=True, exclude_none=True),
    }
