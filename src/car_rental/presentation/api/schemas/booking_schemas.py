"""Pydantic schemas for booking API requests and responses."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, ValidationInfo, field_validator

from .common import CamelModel, CarSummary, UserSummary
from ....application.services.booking_service import BookingView
from ....domain.value_objects.rental_period import RentalPeriod, to_naive_utc, utcnow


class BookingRequest(CamelModel):
    """Request model for creating a booking."""
    car_id: UUID = Field(..., description="ID of the car to reserve")
    start_date: datetime = Field(..., description="Rental start, ISO 8601")
    end_date: datetime = Field(..., description="Rental end, ISO 8601")

    @field_validator('start_date')
    @classmethod
    def validate_start_date(cls, v: datetime) -> datetime:
        """Validate start date is not in the past."""
        v = to_naive_utc(v)
        if v < utcnow():
            raise ValueError('Start date cannot be in the past')
        return v

    @field_validator('end_date')
    @classmethod
    def validate_end_date(cls, v: datetime, info: ValidationInfo) -> datetime:
        """Validate end date is after start date."""
        v = to_naive_utc(v)
        start_date = info.data.get('start_date')
        if start_date is not None and v <= start_date:
            raise ValueError('End date must be after start date')
        return v

    @property
    def period(self) -> RentalPeriod:
        return RentalPeriod(start=self.start_date, end=self.end_date)


class BookingResponse(CamelModel):
    """Response model for a booking with its computed totals."""
    id: UUID
    user_id: UUID
    car_id: UUID
    start_date: datetime
    end_date: datetime
    status: str
    created_at: datetime
    updated_at: datetime
    total_days: int
    total_price: Optional[float] = None
    car: Optional[CarSummary] = None
    user: Optional[UserSummary] = None

    @classmethod
    def from_view(cls, view: BookingView) -> "BookingResponse":
        booking = view.booking
        car = None
        if view.car is not None:
            car = CarSummary(
                id=view.car.id,
                name=view.car.name,
                brand=view.car.brand,
                type=view.car.car_type.value,
                price_per_day=view.car.price_per_day,
                image_url=view.car.image_url
            )
        user = None
        if view.user is not None:
            user = UserSummary(
                id=view.user.id,
                name=view.user.name,
                email=view.user.email,
                phone=view.user.phone
            )

        return cls(
            id=booking.id,
            user_id=booking.user_id,
            car_id=booking.car_id,
            start_date=booking.start_date,
            end_date=booking.end_date,
            status=booking.status.value,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            total_days=view.total_days,
            total_price=view.total_price,
            car=car,
            user=user
        )
