"""Port interfaces for repositories (Dependency Inversion Principle)."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from src.car_rental.domain.entities.booking import Booking, BookingStatus
    from src.car_rental.domain.entities.car import Car
    from src.car_rental.domain.entities.user import User, UserRole
    from src.car_rental.domain.value_objects.car_filter import CarFilter
    from src.car_rental.domain.value_objects.pagination import Page, PageRequest
    from src.car_rental.domain.value_objects.rental_period import RentalPeriod


class UserRepository(ABC):
    """Port interface for user repository."""

    @abstractmethod
    async def save(self, user: "User") -> "User":
        """Save a user (create or update)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, user_id: UUID) -> Optional["User"]:
        """Find user by ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional["User"]:
        """Find user by (lower-cased) email."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_ids(self, user_ids: Iterable[UUID]) -> List["User"]:
        """Find all users whose ID is in user_ids."""
        raise NotImplementedError

    @abstractmethod
    async def find_page_with_booking_counts(
        self,
        page_request: "PageRequest",
        role: Optional["UserRole"] = None
    ) -> "Page[Tuple[User, int]]":
        """Page through users newest first, each paired with its booking count."""
        raise NotImplementedError


class CarRepository(ABC):
    """Port interface for car repository."""

    @abstractmethod
    async def save(self, car: "Car") -> "Car":
        """Save a car (create or update)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, car_id: UUID) -> Optional["Car"]:
        """Find car by ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id_for_update(self, car_id: UUID) -> Optional["Car"]:
        """Find car by ID and lock it until the current transaction ends."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_ids(self, car_ids: Iterable[UUID]) -> List["Car"]:
        """Find all cars whose ID is in car_ids."""
        raise NotImplementedError

    @abstractmethod
    async def find_all(self, car_filter: "CarFilter") -> List["Car"]:
        """Find cars matching the filter, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, car_id: UUID) -> bool:
        """Delete a car; returns False if it did not exist."""
        raise NotImplementedError


class BookingRepository(ABC):
    """Port interface for booking repository."""

    @abstractmethod
    async def save(self, booking: "Booking") -> "Booking":
        """Save a booking (create or update)."""
        raise NotImplementedError

    @abstractmethod
    async def find_by_id(self, booking_id: UUID) -> Optional["Booking"]:
        """Find booking by ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_overlapping(self, car_id: UUID, period: "RentalPeriod") -> Optional["Booking"]:
        """Find an active booking for the car whose period overlaps the given one."""
        raise NotImplementedError

    @abstractmethod
    async def find_page(
        self,
        page_request: "PageRequest",
        user_id: Optional[UUID] = None,
        status: Optional["BookingStatus"] = None
    ) -> "Page[Booking]":
        """Page through bookings newest first, optionally scoped to a user or status."""
        raise NotImplementedError
