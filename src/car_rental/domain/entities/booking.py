"""Booking entity and its status transition table."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4
from typing import Dict, Optional, Tuple

from ..exceptions import InvalidOperationError
from ..value_objects.rental_period import RentalPeriod, utcnow


class BookingStatus(Enum):
    """Booking status enumeration."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class TransitionActor(Enum):
    """Who is requesting a status change."""
    OWNER = "owner"
    ADMIN = "admin"


# Statuses that block a car for their rental period.
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

TERMINAL_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})

ALLOWED_TRANSITIONS: Dict[BookingStatus, Dict[BookingStatus, TransitionActor]] = {
    BookingStatus.PENDING: {
        BookingStatus.CONFIRMED: TransitionActor.ADMIN,
        BookingStatus.CANCELLED: TransitionActor.OWNER,
    },
    BookingStatus.CONFIRMED: {
        BookingStatus.CANCELLED: TransitionActor.OWNER,
    },
    BookingStatus.CANCELLED: {},
    BookingStatus.COMPLETED: {},
}

REJECTION_MESSAGES: Dict[Tuple[BookingStatus, BookingStatus], str] = {
    (BookingStatus.CONFIRMED, BookingStatus.CONFIRMED): "Booking is already confirmed",
    (BookingStatus.CANCELLED, BookingStatus.CONFIRMED): "Cannot approve a cancelled booking",
    (BookingStatus.COMPLETED, BookingStatus.CONFIRMED): "Booking is already completed",
    (BookingStatus.CANCELLED, BookingStatus.CANCELLED): "Booking is already cancelled",
    (BookingStatus.COMPLETED, BookingStatus.CANCELLED): "Cannot cancel a completed booking",
}


class Booking:
    """Booking entity representing a car reservation for a rental period."""

    def __init__(
        self,
        user_id: UUID,
        car_id: UUID,
        period: RentalPeriod,
        booking_id: Optional[UUID] = None,
        status: BookingStatus = BookingStatus.PENDING,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self._id = booking_id or uuid4()
        self._user_id = user_id
        self._car_id = car_id
        self._period = period
        self._status = status
        self._created_at = created_at or utcnow()
        self._updated_at = updated_at or utcnow()

    @property
    def id(self) -> UUID:
        """Get booking ID."""
        return self._id

    @property
    def user_id(self) -> UUID:
        """Get owning user ID."""
        return self._user_id

    @property
    def car_id(self) -> UUID:
        """Get booked car ID."""
        return self._car_id

    @property
    def period(self) -> RentalPeriod:
        return self._period

    @property
    def start_date(self) -> datetime:
        return self._period.start

    @property
    def end_date(self) -> datetime:
        return self._period.end

    @property
    def status(self) -> BookingStatus:
        """Get booking status."""
        return self._status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def total_days(self) -> int:
        return self._period.total_days

    def total_price(self, price_per_day: float) -> float:
        """Price of the whole booking at the given daily rate."""
        return self._period.price_for(price_per_day)

    def is_active(self) -> bool:
        """Check if the booking still blocks its car."""
        return self._status in ACTIVE_STATUSES

    def is_owned_by(self, user_id: UUID) -> bool:
        return self._user_id == user_id

    def can_transition_to(self, target: BookingStatus, actor: TransitionActor) -> bool:
        """Check the transition table without mutating the booking."""
        return ALLOWED_TRANSITIONS[self._status].get(target) == actor

    def transition_to(self, target: BookingStatus, actor: TransitionActor) -> None:
        """Move to a new status if the transition table allows it for this actor."""
        required_actor = ALLOWED_TRANSITIONS[self._status].get(target)
        if required_actor is None:
            message = REJECTION_MESSAGES.get(
                (self._status, target),
                f"Cannot change booking from {self._status.value} to {target.value}"
            )
            raise InvalidOperationError(message)
        if required_actor != actor:
            raise InvalidOperationError(
                f"Only the {required_actor.value} can change booking to {target.value}"
            )
        self._status = target
        self._updated_at = utcnow()

    def approve(self) -> None:
        """Confirm a pending booking (administrator action)."""
        self.transition_to(BookingStatus.CONFIRMED, TransitionActor.ADMIN)

    def cancel(self, now: Optional[datetime] = None) -> None:
        """Cancel the booking (owner action) before its rental period starts."""
        if self._status not in TERMINAL_STATUSES and self._period.has_started(now or utcnow()):
            raise InvalidOperationError("Cannot cancel a booking that has already started")
        self.transition_to(BookingStatus.CANCELLED, TransitionActor.OWNER)

    def __eq__(self, other: object) -> bool:
        """Check equality based on booking ID."""
        if not isinstance(other, Booking):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        """Hash based on booking ID."""
        return hash(self._id)

    def __str__(self) -> str:
        """String representation."""
        return f"Booking({self._id}, car={self._car_id}, {self._status.value})"
