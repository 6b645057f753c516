"""Booking service implementing reservation use cases."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, TYPE_CHECKING
from uuid import UUID

from src.car_rental.domain.entities.booking import Booking
from src.car_rental.domain.entities.car import Car
from src.car_rental.domain.entities.user import User
from src.car_rental.domain.exceptions import (
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError
)
from src.car_rental.domain.value_objects.pagination import Page, PageRequest
from src.car_rental.domain.value_objects.rental_period import RentalPeriod, utcnow
from src.car_rental.infrastructure.logging import (
    get_logger,
    log_booking_event,
    log_business_rule_violation
)

if TYPE_CHECKING:
    from src.car_rental.application.ports.repositories import (
        BookingRepository,
        CarRepository,
        UserRepository
    )


@dataclass(frozen=True)
class BookingView:
    """A booking together with the records needed to render it."""

    booking: Booking
    car: Optional[Car] = None
    user: Optional[User] = None

    @property
    def total_days(self) -> int:
        return self.booking.total_days

    @property
    def total_price(self) -> Optional[float]:
        if self.car is None:
            return None
        return self.booking.total_price(self.car.price_per_day)


async def build_views(
    bookings: Iterable[Booking],
    car_repository: "CarRepository",
    user_repository: Optional["UserRepository"] = None
) -> List[BookingView]:
    """Attach cars (and optionally users) to bookings with one lookup per table."""
    bookings = list(bookings)
    cars: Dict[UUID, Car] = {
        car.id: car for car in await car_repository.find_by_ids({b.car_id for b in bookings})
    }
    users: Dict[UUID, User] = {}
    if user_repository is not None:
        users = {
            user.id: user for user in await user_repository.find_by_ids({b.user_id for b in bookings})
        }
    return [
        BookingView(booking=b, car=cars.get(b.car_id), user=users.get(b.user_id))
        for b in bookings
    ]


class BookingService:
    """Application service for booking management."""

    def __init__(
        self,
        booking_repository: "BookingRepository",
        car_repository: "CarRepository",
        user_repository: "UserRepository",
        clock: Callable[[], datetime] = utcnow
    ):
        self._booking_repository = booking_repository
        self._car_repository = car_repository
        self._user_repository = user_repository
        self._clock = clock
        self._logger = get_logger(__name__)

    async def create_booking(self, user_id: UUID, car_id: UUID, period: RentalPeriod) -> BookingView:
        """Reserve a car for a period if no active booking overlaps it.

        The car row stays locked until the surrounding transaction commits, so
        two concurrent requests for the same car are checked one after the other.
        """
        if not await self._user_repository.find_by_id(user_id):
            raise ResourceNotFoundError("User not found")

        car = await self._car_repository.find_by_id_for_update(car_id)
        if not car:
            raise ResourceNotFoundError("Car not found")

        overlapping = await self._booking_repository.find_overlapping(car_id, period)
        if overlapping:
            log_business_rule_violation(
                self._logger,
                "booking_overlap",
                f"Car {car_id} already booked by {overlapping.id}",
                car_id=str(car_id),
                requested_start=period.start.isoformat(),
                requested_end=period.end.isoformat()
            )
            raise ConflictError("Car is not available for the selected dates")

        booking = Booking(user_id=user_id, car_id=car_id, period=period)
        saved_booking = await self._booking_repository.save(booking)

        log_booking_event(self._logger, "created", saved_booking.id,
                          car_id=str(car_id), user_id=str(user_id), total_days=period.total_days)
        return BookingView(booking=saved_booking, car=car)

    async def list_user_bookings(self, user_id: UUID, page_request: PageRequest) -> Page[BookingView]:
        """Page through the caller's own bookings, newest first."""
        page = await self._booking_repository.find_page(page_request, user_id=user_id)
        views = await build_views(page.items, self._car_repository)
        return Page(items=views, total=page.total, request=page.request)

    async def get_booking(self, booking_id: UUID, requester_id: UUID) -> BookingView:
        """Fetch a booking visible to its owner or to an administrator."""
        booking = await self._find_booking(booking_id)

        if not booking.is_owned_by(requester_id):
            requester = await self._user_repository.find_by_id(requester_id)
            if requester is None or not requester.is_admin:
                raise PermissionDeniedError("Unauthorized access")

        [view] = await build_views([booking], self._car_repository)
        return view

    async def cancel_booking(self, booking_id: UUID, user_id: UUID) -> BookingView:
        """Cancel the caller's own booking before its start date."""
        booking = await self._find_booking(booking_id)

        if not booking.is_owned_by(user_id):
            raise PermissionDeniedError("Unauthorized access")

        booking.cancel(now=self._clock())
        saved_booking = await self._booking_repository.save(booking)

        log_booking_event(self._logger, "cancelled", booking_id, user_id=str(user_id))
        [view] = await build_views([saved_booking], self._car_repository)
        return view

    async def _find_booking(self, booking_id: UUID) -> Booking:
        booking = await self._booking_repository.find_by_id(booking_id)
        if not booking:
            raise ResourceNotFoundError("Booking not found")
        return booking
