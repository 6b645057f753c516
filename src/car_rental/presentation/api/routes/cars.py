"""Car catalog endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from ..middleware.auth import get_current_user_id, get_services
from ..schemas.car_schemas import CarListResponse, CarResponse
from ..schemas.common import DataResponse, MessageResponse, parse_enum, read_upload
from ....application.services.car_service import CarUpdate, ImageUpload
from ....domain.entities.car import CarType, FuelType
from ....domain.value_objects.car_filter import CarFilter
from ....infrastructure.services import BaseServiceFactory

router = APIRouter(dependencies=[Depends(get_current_user_id)])


@router.get("")
async def list_cars(
    type: Optional[str] = Query(None),
    brand: Optional[str] = Query(None),
    fuel_type: Optional[str] = Query(None, alias="fuelType"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    seats: Optional[int] = Query(None, ge=1),
    services: BaseServiceFactory = Depends(get_services)
) -> CarListResponse:
    """List cars matching all supplied filters, newest first."""
    car_filter = CarFilter(
        car_type=parse_enum(CarType, type, "type"),
        brand=brand.strip() if brand else None,
        fuel_type=parse_enum(FuelType, fuel_type, "fuelType"),
        min_price=min_price,
        max_price=max_price,
        seats=seats
    )

    async with services.get_car_service() as car_service:
        cars = await car_service.list_cars(car_filter)

    return CarListResponse(count=len(cars), data=[CarResponse.from_entity(car) for car in cars])


@router.get("/{car_id}")
async def get_car(
    car_id: UUID,
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[CarResponse]:
    async with services.get_car_service() as car_service:
        car = await car_service.get_car(car_id)

    return DataResponse[CarResponse](message="Success", data=CarResponse.from_entity(car))


@router.put("/{car_id}")
async def update_car(
    car_id: UUID,
    name: Optional[str] = Form(None),
    brand: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    fuel_type: Optional[str] = Form(None, alias="fuelType"),
    seats: Optional[int] = Form(None),
    price_per_day: Optional[float] = Form(None, alias="pricePerDay"),
    image: Optional[UploadFile] = File(None),
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[CarResponse]:
    """Partially update a car; an "image" file replaces the current picture."""
    update = CarUpdate(
        name=name,
        brand=brand,
        car_type=parse_enum(CarType, type, "type"),
        fuel_type=parse_enum(FuelType, fuel_type, "fuelType"),
        seats=seats,
        price_per_day=price_per_day
    )

    upload = None
    if image is not None:
        upload = ImageUpload(
            content=await read_upload(image, services.image_policy),
            content_type=image.content_type
        )

    async with services.get_car_service() as car_service:
        car = await car_service.update_car(car_id, update, image=upload)

    return DataResponse[CarResponse](message="Car updated successfully", data=CarResponse.from_entity(car))


@router.delete("/{car_id}")
async def delete_car(
    car_id: UUID,
    services: BaseServiceFactory = Depends(get_services)
) -> MessageResponse:
    async with services.get_car_service() as car_service:
        await car_service.delete_car(car_id)

    return MessageResponse(message="Successfully deleted car")
