"""Catalog search criteria."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities.car import Car, CarType, FuelType


@dataclass(frozen=True)
class CarFilter:
    """AND-combined catalog filters; a None field imposes no constraint."""

    car_type: Optional["CarType"] = None
    brand: Optional[str] = None
    fuel_type: Optional["FuelType"] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    seats: Optional[int] = None

    def matches(self, car: "Car") -> bool:
        """Evaluate the filter against a single car."""
        if self.car_type is not None and car.car_type != self.car_type:
            return False
        if self.brand and self.brand.lower() not in car.brand.lower():
            return False
        if self.fuel_type is not None and car.fuel_type != self.fuel_type:
            return False
        if self.min_price is not None and car.price_per_day < self.min_price:
            return False
        if self.max_price is not None and car.price_per_day > self.max_price:
            return False
        if self.seats is not None and car.seats != self.seats:
            return False
        return True
