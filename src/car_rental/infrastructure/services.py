"""Dependency injection and service factory."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import replace
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncGenerator, NamedTuple

from src.car_rental.application.ports.repositories import BookingRepository, CarRepository, UserRepository
from src.car_rental.application.ports.storage import FileStorage
from src.car_rental.application.services.admin_service import AdminService
from src.car_rental.application.services.auth_service import AuthenticationService
from src.car_rental.application.services.booking_service import BookingService
from src.car_rental.application.services.car_service import CarService
from src.car_rental.application.services.user_service import UserService
from src.car_rental.domain.value_objects.upload import (
    CAR_IMAGE_UPLOAD_POLICY,
    LICENSE_UPLOAD_POLICY,
    MAX_FILE_SIZE,
    UploadPolicy
)
from src.car_rental.infrastructure.database.connection import DatabaseManager
from src.car_rental.infrastructure.logging import get_logger
from src.car_rental.infrastructure.repositories.memory_repositories import (
    InMemoryBookingRepository,
    InMemoryCarRepository,
    InMemoryStore,
    InMemoryUserRepository
)
from src.car_rental.infrastructure.repositories.sql_repositories import (
    SQLAlchemyBookingRepository,
    SQLAlchemyCarRepository,
    SQLAlchemyUserRepository
)
from src.car_rental.infrastructure.security import JWTTokenService

logger = get_logger(__name__)


class Repositories(NamedTuple):
    """Repositories sharing one unit of work."""
    users: UserRepository
    cars: CarRepository
    bookings: BookingRepository


class BaseServiceFactory(ABC):
    """Builds application services on top of one unit of work per context."""

    def __init__(
        self,
        token_service: JWTTokenService,
        file_storage: FileStorage,
        max_upload_size: int = MAX_FILE_SIZE
    ):
        self._token_service = token_service
        self._file_storage = file_storage
        self._license_policy = replace(LICENSE_UPLOAD_POLICY, max_size=max_upload_size)
        self._image_policy = replace(CAR_IMAGE_UPLOAD_POLICY, max_size=max_upload_size)

    @property
    def token_service(self) -> JWTTokenService:
        return self._token_service

    @property
    def license_policy(self) -> UploadPolicy:
        return self._license_policy

    @property
    def image_policy(self) -> UploadPolicy:
        return self._image_policy

    async def initialize(self) -> None:
        """Acquire long-lived resources."""

    async def shutdown(self) -> None:
        """Release long-lived resources."""

    @abstractmethod
    def _unit_of_work(self) -> AsyncContextManager[Repositories]:
        """Open a transaction and yield repositories bound to it."""

    @asynccontextmanager
    async def get_auth_service(self) -> AsyncGenerator[AuthenticationService, None]:
        async with self._unit_of_work() as repos:
            yield AuthenticationService(user_repository=repos.users, token_service=self._token_service)

    @asynccontextmanager
    async def get_user_service(self) -> AsyncGenerator[UserService, None]:
        async with self._unit_of_work() as repos:
            yield UserService(
                user_repository=repos.users,
                file_storage=self._file_storage,
                license_policy=self._license_policy
            )

    @asynccontextmanager
    async def get_car_service(self) -> AsyncGenerator[CarService, None]:
        async with self._unit_of_work() as repos:
            yield CarService(
                car_repository=repos.cars,
                file_storage=self._file_storage,
                image_policy=self._image_policy
            )

    @asynccontextmanager
    async def get_booking_service(self) -> AsyncGenerator[BookingService, None]:
        async with self._unit_of_work() as repos:
            yield BookingService(
                booking_repository=repos.bookings,
                car_repository=repos.cars,
                user_repository=repos.users
            )

    @asynccontextmanager
    async def get_admin_service(self) -> AsyncGenerator[AdminService, None]:
        async with self._unit_of_work() as repos:
            yield AdminService(
                user_repository=repos.users,
                booking_repository=repos.bookings,
                car_repository=repos.cars
            )


class ServiceFactory(BaseServiceFactory):
    """Factory for creating application services backed by PostgreSQL."""

    def __init__(
        self,
        database_manager: DatabaseManager,
        token_service: JWTTokenService,
        file_storage: FileStorage,
        max_upload_size: int = MAX_FILE_SIZE,
        auto_create_tables: bool = False
    ):
        super().__init__(token_service, file_storage, max_upload_size)
        self.database_manager = database_manager
        self._auto_create_tables = auto_create_tables
        self._connected = False

    async def initialize(self) -> None:
        """Open the engine and optionally create missing tables."""
        if not self._connected:
            await self.database_manager.connect()
            self._connected = True
            if self._auto_create_tables:
                await self.database_manager.create_tables()
                logger.info("Database tables ensured")

    async def shutdown(self) -> None:
        """Dispose of the engine."""
        if self._connected:
            await self.database_manager.disconnect()
            self._connected = False

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncGenerator[Repositories, None]:
        async with self.database_manager.get_session() as session:
            yield Repositories(
                users=SQLAlchemyUserRepository(session),
                cars=SQLAlchemyCarRepository(session),
                bookings=SQLAlchemyBookingRepository(session)
            )


class InMemoryServiceFactory(BaseServiceFactory):
    """Factory for creating services over process-local storage.

    Service contexts run one at a time, which gives the same isolation for
    check-then-insert sequences that the row lock gives on PostgreSQL.
    """

    def __init__(
        self,
        token_service: JWTTokenService,
        file_storage: FileStorage,
        max_upload_size: int = MAX_FILE_SIZE
    ):
        super().__init__(token_service, file_storage, max_upload_size)
        self.store = InMemoryStore()
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncGenerator[Repositories, None]:
        async with self._lock:
            yield Repositories(
                users=InMemoryUserRepository(self.store),
                cars=InMemoryCarRepository(self.store),
                bookings=InMemoryBookingRepository(self.store)
            )
