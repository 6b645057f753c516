"""Car catalog service."""

import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING
from uuid import UUID

from src.car_rental.domain.entities.car import Car, CarType, FuelType
from src.car_rental.domain.exceptions import InvalidOperationError, ResourceNotFoundError
from src.car_rental.domain.value_objects.car_filter import CarFilter
from src.car_rental.domain.value_objects.upload import CAR_IMAGE_UPLOAD_POLICY, UploadPolicy
from src.car_rental.infrastructure.logging import get_logger, log_with_extra

if TYPE_CHECKING:
    from src.car_rental.application.ports.repositories import CarRepository
    from src.car_rental.application.ports.storage import FileStorage


CAR_IMAGE_FOLDER = "cars"


@dataclass(frozen=True)
class CarUpdate:
    """Fields of a partial car update; None means unchanged."""
    name: Optional[str] = None
    brand: Optional[str] = None
    car_type: Optional[CarType] = None
    fuel_type: Optional[FuelType] = None
    seats: Optional[int] = None
    price_per_day: Optional[float] = None


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded image file."""
    content: bytes
    content_type: Optional[str]


class CarService:
    """Application service for catalog browsing and maintenance."""

    def __init__(
        self,
        car_repository: "CarRepository",
        file_storage: "FileStorage",
        image_policy: UploadPolicy = CAR_IMAGE_UPLOAD_POLICY
    ):
        self._car_repository = car_repository
        self._file_storage = file_storage
        self._image_policy = image_policy
        self._logger = get_logger(__name__)

    async def list_cars(self, car_filter: CarFilter) -> List[Car]:
        """List cars matching all supplied filters, newest first."""
        return await self._car_repository.find_all(car_filter)

    async def get_car(self, car_id: UUID) -> Car:
        car = await self._car_repository.find_by_id(car_id)
        if not car:
            raise ResourceNotFoundError("Car not found")
        return car

    async def update_car(
        self,
        car_id: UUID,
        update: CarUpdate,
        image: Optional[ImageUpload] = None
    ) -> Car:
        """Apply a partial update and optionally replace the car image."""
        car = await self.get_car(car_id)

        has_image = image is not None and bool(image.content)
        if has_image:
            self._image_policy.validate(image.content_type, len(image.content))

        # Field checks run before anything is written to storage
        try:
            car.update_details(
                name=update.name,
                brand=update.brand,
                car_type=update.car_type,
                fuel_type=update.fuel_type,
                seats=update.seats,
                price_per_day=update.price_per_day
            )
        except ValueError as e:
            raise InvalidOperationError(str(e)) from e

        image_url = None
        if has_image:
            image_url = await self._file_storage.save(
                image.content,
                folder=CAR_IMAGE_FOLDER,
                extension=UploadPolicy.extension_for(image.content_type)
            )
            car.update_details(image_url=image_url)

        log_with_extra(self._logger, logging.INFO, f"Updated car {car_id}",
                       car_id=str(car_id), image_replaced=image_url is not None)
        return await self._car_repository.save(car)

    async def delete_car(self, car_id: UUID) -> None:
        """Delete a car after checking that it exists."""
        await self.get_car(car_id)
        await self._car_repository.delete(car_id)
        self._logger.info(f"Deleted car {car_id}")
