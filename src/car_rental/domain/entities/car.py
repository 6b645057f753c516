"""Car entity for the rental catalog."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4
from typing import Optional

from ..value_objects.rental_period import utcnow


class CarType(Enum):
    """Car body type enumeration."""
    SEDAN = "SEDAN"
    SUV = "SUV"
    HATCHBACK = "HATCHBACK"
    VAN = "VAN"
    TRUCK = "TRUCK"
    COUPE = "COUPE"
    CONVERTIBLE = "CONVERTIBLE"


class FuelType(Enum):
    """Fuel type enumeration."""
    PETROL = "PETROL"
    DIESEL = "DIESEL"
    ELECTRIC = "ELECTRIC"
    HYBRID = "HYBRID"


class Car:
    """Car entity representing a rentable vehicle."""

    def __init__(
        self,
        name: str,
        brand: str,
        car_type: CarType,
        fuel_type: FuelType,
        seats: int,
        price_per_day: float,
        car_id: Optional[UUID] = None,
        image_url: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        if seats <= 0:
            raise ValueError("Seats must be a positive number")
        if price_per_day <= 0:
            raise ValueError("Price per day must be positive")

        self._id = car_id or uuid4()
        self._name = name.strip()
        self._brand = brand.strip()
        self._car_type = car_type
        self._fuel_type = fuel_type
        self._seats = seats
        self._price_per_day = price_per_day
        self._image_url = image_url
        self._created_at = created_at or utcnow()
        self._updated_at = updated_at or utcnow()

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def brand(self) -> str:
        return self._brand

    @property
    def car_type(self) -> CarType:
        return self._car_type

    @property
    def fuel_type(self) -> FuelType:
        return self._fuel_type

    @property
    def seats(self) -> int:
        return self._seats

    @property
    def price_per_day(self) -> float:
        return self._price_per_day

    @property
    def image_url(self) -> Optional[str]:
        return self._image_url

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def update_details(
        self,
        name: Optional[str] = None,
        brand: Optional[str] = None,
        car_type: Optional[CarType] = None,
        fuel_type: Optional[FuelType] = None,
        seats: Optional[int] = None,
        price_per_day: Optional[float] = None,
        image_url: Optional[str] = None
    ) -> None:
        """Apply a partial update; only supplied fields change."""
        if seats is not None and seats <= 0:
            raise ValueError("Seats must be a positive number")
        if price_per_day is not None and price_per_day <= 0:
            raise ValueError("Price per day must be positive")

        if name:
            self._name = name.strip()
        if brand:
            self._brand = brand.strip()
        if car_type is not None:
            self._car_type = car_type
        if fuel_type is not None:
            self._fuel_type = fuel_type
        if seats is not None:
            self._seats = seats
        if price_per_day is not None:
            self._price_per_day = price_per_day
        if image_url:
            self._image_url = image_url
        self._updated_at = utcnow()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Car):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        return f"Car({self._id}, {self._brand} {self._name})"
