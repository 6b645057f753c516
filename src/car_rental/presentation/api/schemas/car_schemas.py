"""Pydantic schemas for car catalog endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from .common import CamelModel
from ....domain.entities.car import Car


class CarResponse(CamelModel):
    """Response model for a car."""
    id: UUID
    name: str
    brand: str
    type: str
    fuel_type: str
    seats: int
    price_per_day: float
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, car: Car) -> "CarResponse":
        return cls(
            id=car.id,
            name=car.name,
            brand=car.brand,
            type=car.car_type.value,
            fuel_type=car.fuel_type.value,
            seats=car.seats,
            price_per_day=car.price_per_day,
            image_url=car.image_url,
            created_at=car.created_at,
            updated_at=car.updated_at
        )


class CarListResponse(CamelModel):
    """Response model for the filtered catalog."""
    message: str = "Success"
    count: int
    data: List[CarResponse]
