"""Shared fixtures: in-memory repositories and entity builders."""

import pytest

from src.car_rental.domain.entities.car import Car, CarType, FuelType
from src.car_rental.domain.entities.user import User, UserRole
from src.car_rental.domain.value_objects.auth import PasswordHasher
from src.car_rental.infrastructure.repositories.memory_repositories import (
    InMemoryBookingRepository,
    InMemoryCarRepository,
    InMemoryStore,
    InMemoryUserRepository
)
from src.car_rental.infrastructure.security import JWTTokenService

TEST_SECRET = "test-secret-key"
TEST_PASSWORD = "password123"


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def user_repository(store):
    return InMemoryUserRepository(store)


@pytest.fixture
def car_repository(store):
    return InMemoryCarRepository(store)


@pytest.fixture
def booking_repository(store):
    return InMemoryBookingRepository(store)


@pytest.fixture
def token_service():
    return JWTTokenService(secret_key=TEST_SECRET)


@pytest.fixture
def make_user(store):
    """Build a user and put it straight into the store."""

    def _make_user(email="john@example.com", name="John Doe", role=UserRole.USER, password=TEST_PASSWORD):
        user = User(
            email=email,
            name=name,
            password_hash=PasswordHasher.create_password_hash(password),
            role=role
        )
        store.users[user.id] = user
        return user

    return _make_user


@pytest.fixture
def make_car(store):
    """Build a car and put it straight into the store."""

    def _make_car(name="Corolla", brand="Toyota", car_type=CarType.SEDAN,
                  fuel_type=FuelType.PETROL, seats=5, price_per_day=50.0):
        car = Car(
            name=name,
            brand=brand,
            car_type=car_type,
            fuel_type=fuel_type,
            seats=seats,
            price_per_day=price_per_day
        )
        store.cars[car.id] = car
        return car

    return _make_car
