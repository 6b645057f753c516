"""In-memory repository implementations for testing and development."""

from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from src.car_rental.application.ports.repositories import BookingRepository, CarRepository, UserRepository
from src.car_rental.domain.entities.booking import Booking, BookingStatus
from src.car_rental.domain.entities.car import Car
from src.car_rental.domain.entities.user import User, UserRole
from src.car_rental.domain.value_objects.car_filter import CarFilter
from src.car_rental.domain.value_objects.pagination import Page, PageRequest
from src.car_rental.domain.value_objects.rental_period import RentalPeriod


def _newest_first(records: Iterable) -> List:
    # Ties on created_at keep the most recently inserted record first
    return sorted(reversed(list(records)), key=lambda record: record.created_at, reverse=True)


def _slice(records: List, page_request: PageRequest) -> List:
    return records[page_request.offset:page_request.offset + page_request.page_size]


class InMemoryStore:
    """Shared tables so repositories built for one request see each other's writes."""

    def __init__(self):
        self.users: Dict[UUID, User] = {}
        self.cars: Dict[UUID, Car] = {}
        self.bookings: Dict[UUID, Booking] = {}


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of user repository."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    async def save(self, user: User) -> User:
        self._store.users[user.id] = user
        return user

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        return self._store.users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        email = email.lower().strip()
        for user in self._store.users.values():
            if user.email == email:
                return user
        return None

    async def find_by_ids(self, user_ids: Iterable[UUID]) -> List[User]:
        return [self._store.users[user_id] for user_id in user_ids if user_id in self._store.users]

    async def find_page_with_booking_counts(
        self,
        page_request: PageRequest,
        role: Optional[UserRole] = None
    ) -> Page[Tuple[User, int]]:
        users = [user for user in self._store.users.values() if role is None or user.role == role]
        users = _newest_first(users)

        rows = [
            (user, sum(1 for booking in self._store.bookings.values() if booking.user_id == user.id))
            for user in _slice(users, page_request)
        ]
        return Page(items=rows, total=len(users), request=page_request)


class InMemoryCarRepository(CarRepository):
    """In-memory implementation of car repository."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    async def save(self, car: Car) -> Car:
        self._store.cars[car.id] = car
        return car

    async def find_by_id(self, car_id: UUID) -> Optional[Car]:
        return self._store.cars.get(car_id)

    async def find_by_id_for_update(self, car_id: UUID) -> Optional[Car]:
        # Callers hold the store lock for the whole unit of work
        return self._store.cars.get(car_id)

    async def find_by_ids(self, car_ids: Iterable[UUID]) -> List[Car]:
        return [self._store.cars[car_id] for car_id in car_ids if car_id in self._store.cars]

    async def find_all(self, car_filter: CarFilter) -> List[Car]:
        return _newest_first(car for car in self._store.cars.values() if car_filter.matches(car))

    async def delete(self, car_id: UUID) -> bool:
        if car_id not in self._store.cars:
            return False

        del self._store.cars[car_id]
        for booking_id in [b.id for b in self._store.bookings.values() if b.car_id == car_id]:
            del self._store.bookings[booking_id]
        return True


class InMemoryBookingRepository(BookingRepository):
    """In-memory implementation of booking repository."""

    def __init__(self, store: InMemoryStore):
        self._store = store

    async def save(self, booking: Booking) -> Booking:
        self._store.bookings[booking.id] = booking
        return booking

    async def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        return self._store.bookings.get(booking_id)

    async def find_overlapping(self, car_id: UUID, period: RentalPeriod) -> Optional[Booking]:
        for booking in self._store.bookings.values():
            if booking.car_id == car_id and booking.is_active() and period.overlaps(booking.period):
                return booking
        return None

    async def find_page(
        self,
        page_request: PageRequest,
        user_id: Optional[UUID] = None,
        status: Optional[BookingStatus] = None
    ) -> Page[Booking]:
        bookings = [
            booking for booking in self._store.bookings.values()
            if (user_id is None or booking.user_id == user_id)
            and (status is None or booking.status == status)
        ]
        bookings = _newest_first(bookings)
        return Page(items=_slice(bookings, page_request), total=len(bookings), request=page_request)
