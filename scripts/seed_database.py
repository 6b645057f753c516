"""Script to seed development users and cars.

Existing rows are left alone: users are matched by email and cars by brand
and name, so the script can be re-run safely.
"""

import asyncio

from src.car_rental.domain.entities.car import Car, CarType, FuelType
from src.car_rental.domain.entities.user import User, UserRole
from src.car_rental.domain.value_objects.auth import PasswordHasher
from src.car_rental.domain.value_objects.car_filter import CarFilter
from src.car_rental.infrastructure.database.connection import DatabaseManager
from src.car_rental.infrastructure.repositories.sql_repositories import (
    SQLAlchemyCarRepository,
    SQLAlchemyUserRepository
)
from src.car_rental.presentation.api.config import get_settings


SEED_USERS = [
    {"name": "Admin User", "email": "admin@carrental.com", "password": "admin123",
     "phone": "+977-9800000001", "role": UserRole.ADMIN},
    {"name": "John Doe", "email": "john@example.com", "password": "password123",
     "phone": "+977-9800000002", "role": UserRole.USER},
    {"name": "Jane Smith", "email": "jane@example.com", "password": "password123",
     "phone": "+977-9800000003", "role": UserRole.USER},
]

SEED_CARS = [
    ("Corolla", "Toyota", CarType.SEDAN, FuelType.PETROL, 5, 50),
    ("Civic", "Honda", CarType.SEDAN, FuelType.PETROL, 5, 55),
    ("CR-V", "Honda", CarType.SUV, FuelType.DIESEL, 7, 80),
    ("Fortuner", "Toyota", CarType.SUV, FuelType.DIESEL, 7, 100),
    ("Swift", "Suzuki", CarType.HATCHBACK, FuelType.PETROL, 5, 35),
    ("Model 3", "Tesla", CarType.SEDAN, FuelType.ELECTRIC, 5, 120),
    ("Prius", "Toyota", CarType.HATCHBACK, FuelType.HYBRID, 5, 60),
    ("Hiace", "Toyota", CarType.VAN, FuelType.DIESEL, 12, 90),
    ("Hilux", "Toyota", CarType.TRUCK, FuelType.DIESEL, 5, 85),
    ("Ranger", "Ford", CarType.TRUCK, FuelType.DIESEL, 5, 90),
]


async def seed_database():
    """Insert the seed users and cars that are not present yet."""
    settings = get_settings()
    database_manager = DatabaseManager(settings.database_url)
    await database_manager.connect()

    try:
        async with database_manager.get_session() as session:
            user_repo = SQLAlchemyUserRepository(session)
            car_repo = SQLAlchemyCarRepository(session)

            for data in SEED_USERS:
                if await user_repo.find_by_email(data["email"]):
                    print(f"   - User {data['email']} already exists")
                    continue

                user = User(
                    email=data["email"],
                    name=data["name"],
                    password_hash=PasswordHasher.create_password_hash(data["password"]),
                    role=data["role"],
                    phone=data["phone"]
                )
                await user_repo.save(user)
                print(f"   ✓ Created user: {user.email} ({user.role.value})")

            for name, brand, car_type, fuel_type, seats, price_per_day in SEED_CARS:
                same_brand = await car_repo.find_all(CarFilter(brand=brand))
                if any(car.name == name for car in same_brand):
                    print(f"   - Car {brand} {name} already exists")
                    continue

                car = Car(
                    name=name,
                    brand=brand,
                    car_type=car_type,
                    fuel_type=fuel_type,
                    seats=seats,
                    price_per_day=price_per_day
                )
                await car_repo.save(car)
                print(f"   ✓ Created car: {brand} {name}")

        print("✅ Seed completed successfully!")

    except Exception as e:
        print(f"❌ Seed failed: {e}")
        raise
    finally:
        await database_manager.disconnect()


if __name__ == "__main__":
    asyncio.run(seed_database())
