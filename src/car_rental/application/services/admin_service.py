"""Administrator use cases: user and booking oversight, booking approval."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
from uuid import UUID

from src.car_rental.application.services.booking_service import BookingView, build_views
from src.car_rental.domain.entities.booking import BookingStatus
from src.car_rental.domain.entities.user import User, UserRole
from src.car_rental.domain.exceptions import PermissionDeniedError, ResourceNotFoundError
from src.car_rental.domain.value_objects.pagination import Page, PageRequest
from src.car_rental.infrastructure.logging import get_logger, log_booking_event

if TYPE_CHECKING:
    from src.car_rental.application.ports.repositories import (
        BookingRepository,
        CarRepository,
        UserRepository
    )


@dataclass(frozen=True)
class UserListing:
    """A user with the number of bookings they have made."""
    user: User
    booking_count: int


class AdminService:
    """Application service backing the admin panel."""

    def __init__(
        self,
        user_repository: "UserRepository",
        booking_repository: "BookingRepository",
        car_repository: "CarRepository"
    ):
        self._user_repository = user_repository
        self._booking_repository = booking_repository
        self._car_repository = car_repository
        self._logger = get_logger(__name__)

    async def require_admin(self, user_id: UUID) -> User:
        """Return the user if they hold the ADMIN role."""
        user = await self._user_repository.find_by_id(user_id)
        if not user:
            raise ResourceNotFoundError("User not found")
        if not user.is_admin:
            self._logger.warning(f"Non-admin user {user_id} attempted an admin operation")
            raise PermissionDeniedError("Admin access required")
        return user

    async def list_users(self, page_request: PageRequest, role: Optional[UserRole] = None) -> Page[UserListing]:
        """Page through users newest first, optionally filtered by role."""
        page = await self._user_repository.find_page_with_booking_counts(page_request, role=role)
        return page.map(lambda row: UserListing(user=row[0], booking_count=row[1]))

    async def list_bookings(
        self,
        page_request: PageRequest,
        status: Optional[BookingStatus] = None
    ) -> Page[BookingView]:
        """Page through all bookings newest first, optionally filtered by status."""
        page = await self._booking_repository.find_page(page_request, status=status)
        views = await build_views(page.items, self._car_repository, self._user_repository)
        return Page(items=views, total=page.total, request=page.request)

    async def approve_booking(self, booking_id: UUID) -> BookingView:
        """Confirm a pending booking."""
        booking = await self._booking_repository.find_by_id(booking_id)
        if not booking:
            raise ResourceNotFoundError("Booking not found")

        booking.approve()
        saved_booking = await self._booking_repository.save(booking)

        log_booking_event(self._logger, "approved", booking_id)
        [view] = await build_views([saved_booking], self._car_repository, self._user_repository)
        return view
