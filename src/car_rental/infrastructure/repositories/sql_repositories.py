"""SQLAlchemy repository implementations."""

from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.car_rental.infrastructure.logging import (
    get_logger,
    log_database_operation
)

from src.car_rental.application.ports.repositories import BookingRepository, CarRepository, UserRepository
from src.car_rental.domain.entities.booking import ACTIVE_STATUSES, Booking, BookingStatus
from src.car_rental.domain.entities.car import Car
from src.car_rental.domain.entities.user import User, UserRole
from src.car_rental.domain.value_objects.car_filter import CarFilter
from src.car_rental.domain.value_objects.pagination import Page, PageRequest
from src.car_rental.domain.value_objects.rental_period import RentalPeriod
from src.car_rental.infrastructure.database.models import BookingModel, CarModel, UserModel


class SQLAlchemyUserRepository(UserRepository):
    """SQLAlchemy implementation of user repository."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._logger = get_logger(__name__)

    async def save(self, user: User) -> User:
        """Insert or update a user row."""
        log_database_operation(self._logger, "UPSERT", "UserModel", user_id=str(user.id))

        model = await self._session.get(UserModel, user.id)
        if model is None:
            model = UserModel(id=user.id, created_at=user.created_at)
            self._session.add(model)

        model.email = user.email
        model.password_hash = user.password_hash
        model.name = user.name
        model.phone = user.phone
        model.role = user.role
        model.license_url = user.license_url
        model.updated_at = user.updated_at

        await self._session.flush()
        return self._model_to_entity(model)

    async def find_by_id(self, user_id: UUID) -> Optional[User]:
        log_database_operation(self._logger, "SELECT", "UserModel", user_id=str(user_id))
        model = await self._session.get(UserModel, user_id)
        return self._model_to_entity(model) if model else None

    async def find_by_email(self, email: str) -> Optional[User]:
        log_database_operation(self._logger, "SELECT", "UserModel", lookup="email")
        stmt = select(UserModel).where(UserModel.email == email.lower().strip())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def find_by_ids(self, user_ids: Iterable[UUID]) -> List[User]:
        user_ids = list(user_ids)
        if not user_ids:
            return []
        stmt = select(UserModel).where(UserModel.id.in_(user_ids))
        result = await self._session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def find_page_with_booking_counts(
        self,
        page_request: PageRequest,
        role: Optional[UserRole] = None
    ) -> Page[Tuple[User, int]]:
        log_database_operation(
            self._logger, "SELECT", "UserModel",
            page=page_request.page, page_size=page_request.page_size,
            role=role.value if role else None
        )

        booking_count = (
            select(func.count(BookingModel.id))
            .where(BookingModel.user_id == UserModel.id)
            .correlate(UserModel)
            .scalar_subquery()
        )

        conditions = []
        if role is not None:
            conditions.append(UserModel.role == role)

        stmt = (
            select(UserModel, booking_count)
            .where(*conditions)
            .order_by(desc(UserModel.created_at))
            .offset(page_request.offset)
            .limit(page_request.page_size)
        )
        count_stmt = select(func.count(UserModel.id)).where(*conditions)

        rows = (await self._session.execute(stmt)).all()
        total = await self._session.scalar(count_stmt)

        return Page(
            items=[(self._model_to_entity(model), count) for model, count in rows],
            total=total or 0,
            request=page_request
        )

    def _model_to_entity(self, model: UserModel) -> User:
        return User(
            email=model.email,
            name=model.name,
            password_hash=model.password_hash,
            user_id=model.id,
            role=model.role,
            phone=model.phone,
            license_url=model.license_url,
            created_at=model.created_at,
            updated_at=model.updated_at
        )


class SQLAlchemyCarRepository(CarRepository):
    """SQLAlchemy implementation of car repository."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._logger = get_logger(__name__)

    async def save(self, car: Car) -> Car:
        """Insert or update a car row."""
        log_database_operation(self._logger, "UPSERT", "CarModel", car_id=str(car.id))

        model = await self._session.get(CarModel, car.id)
        if model is None:
            model = CarModel(id=car.id, created_at=car.created_at)
            self._session.add(model)

        model.name = car.name
        model.brand = car.brand
        model.type = car.car_type
        model.fuel_type = car.fuel_type
        model.seats = car.seats
        model.price_per_day = car.price_per_day
        model.image_url = car.image_url
        model.updated_at = car.updated_at

        await self._session.flush()
        return self._model_to_entity(model)

    async def find_by_id(self, car_id: UUID) -> Optional[Car]:
        log_database_operation(self._logger, "SELECT", "CarModel", car_id=str(car_id))
        model = await self._session.get(CarModel, car_id)
        return self._model_to_entity(model) if model else None

    async def find_by_id_for_update(self, car_id: UUID) -> Optional[Car]:
        """Select the car row with a row lock held until commit or rollback."""
        log_database_operation(self._logger, "SELECT FOR UPDATE", "CarModel", car_id=str(car_id))
        stmt = select(CarModel).where(CarModel.id == car_id).with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def find_by_ids(self, car_ids: Iterable[UUID]) -> List[Car]:
        car_ids = list(car_ids)
        if not car_ids:
            return []
        stmt = select(CarModel).where(CarModel.id.in_(car_ids))
        result = await self._session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def find_all(self, car_filter: CarFilter) -> List[Car]:
        log_database_operation(self._logger, "SELECT", "CarModel", car_filter=str(car_filter))

        conditions = []
        if car_filter.car_type is not None:
            conditions.append(CarModel.type == car_filter.car_type)
        if car_filter.brand:
            conditions.append(CarModel.brand.icontains(car_filter.brand, autoescape=True))
        if car_filter.fuel_type is not None:
            conditions.append(CarModel.fuel_type == car_filter.fuel_type)
        if car_filter.min_price is not None:
            conditions.append(CarModel.price_per_day >= car_filter.min_price)
        if car_filter.max_price is not None:
            conditions.append(CarModel.price_per_day <= car_filter.max_price)
        if car_filter.seats is not None:
            conditions.append(CarModel.seats == car_filter.seats)

        stmt = select(CarModel).where(*conditions).order_by(desc(CarModel.created_at))
        result = await self._session.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def delete(self, car_id: UUID) -> bool:
        log_database_operation(self._logger, "DELETE", "CarModel", car_id=str(car_id))

        # Bookings go with the car
        await self._session.execute(delete(BookingModel).where(BookingModel.car_id == car_id))
        result = await self._session.execute(delete(CarModel).where(CarModel.id == car_id))
        return result.rowcount > 0

    def _model_to_entity(self, model: CarModel) -> Car:
        return Car(
            name=model.name,
            brand=model.brand,
            car_type=model.type,
            fuel_type=model.fuel_type,
            seats=model.seats,
            price_per_day=model.price_per_day,
            car_id=model.id,
            image_url=model.image_url,
            created_at=model.created_at,
            updated_at=model.updated_at
        )


class SQLAlchemyBookingRepository(BookingRepository):
    """SQLAlchemy implementation of booking repository."""

    def __init__(self, session: AsyncSession):
        self._session = session
        self._logger = get_logger(__name__)

    async def save(self, booking: Booking) -> Booking:
        """Insert or update a booking row."""
        log_database_operation(self._logger, "UPSERT", "BookingModel", booking_id=str(booking.id))

        model = await self._session.get(BookingModel, booking.id)
        if model is None:
            model = BookingModel(
                id=booking.id,
                user_id=booking.user_id,
                car_id=booking.car_id,
                created_at=booking.created_at
            )
            self._session.add(model)

        model.start_date = booking.start_date
        model.end_date = booking.end_date
        model.status = booking.status
        model.updated_at = booking.updated_at

        await self._session.flush()
        return self._model_to_entity(model)

    async def find_by_id(self, booking_id: UUID) -> Optional[Booking]:
        log_database_operation(self._logger, "SELECT", "BookingModel", booking_id=str(booking_id))
        model = await self._session.get(BookingModel, booking_id)
        return self._model_to_entity(model) if model else None

    async def find_overlapping(self, car_id: UUID, period: RentalPeriod) -> Optional[Booking]:
        """Find an active booking whose [start, end] intersects the period (bounds inclusive)."""
        log_database_operation(
            self._logger, "SELECT", "BookingModel",
            car_id=str(car_id), operation="overlap_check",
            requested_start=str(period.start), requested_end=str(period.end)
        )

        stmt = select(BookingModel).where(
            BookingModel.car_id == car_id,
            BookingModel.status.in_(list(ACTIVE_STATUSES)),
            or_(
                and_(BookingModel.start_date <= period.start, BookingModel.end_date >= period.start),
                and_(BookingModel.start_date <= period.end, BookingModel.end_date >= period.end),
                and_(BookingModel.start_date >= period.start, BookingModel.end_date <= period.end),
            )
        ).limit(1)

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def find_page(
        self,
        page_request: PageRequest,
        user_id: Optional[UUID] = None,
        status: Optional[BookingStatus] = None
    ) -> Page[Booking]:
        log_database_operation(
            self._logger, "SELECT", "BookingModel",
            page=page_request.page, page_size=page_request.page_size,
            user_id=str(user_id) if user_id else None,
            status=status.value if status else None
        )

        conditions = []
        if user_id is not None:
            conditions.append(BookingModel.user_id == user_id)
        if status is not None:
            conditions.append(BookingModel.status == status)

        stmt = (
            select(BookingModel)
            .where(*conditions)
            .order_by(desc(BookingModel.created_at))
            .offset(page_request.offset)
            .limit(page_request.page_size)
        )
        count_stmt = select(func.count(BookingModel.id)).where(*conditions)

        result = await self._session.execute(stmt)
        total = await self._session.scalar(count_stmt)

        return Page(
            items=[self._model_to_entity(model) for model in result.scalars().all()],
            total=total or 0,
            request=page_request
        )

    def _model_to_entity(self, model: BookingModel) -> Booking:
        return Booking(
            user_id=model.user_id,
            car_id=model.car_id,
            period=RentalPeriod(start=model.start_date, end=model.end_date),
            booking_id=model.id,
            status=model.status,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
