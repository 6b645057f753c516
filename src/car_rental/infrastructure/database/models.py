"""SQLAlchemy database models."""

from uuid import uuid4

from sqlalchemy import Column, String, DateTime, Integer, Float, Enum as SQLEnum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID as PostgresUUID
from sqlalchemy.orm import declarative_base, relationship

from src.car_rental.domain.entities.booking import BookingStatus
from src.car_rental.domain.entities.car import CarType, FuelType
from src.car_rental.domain.entities.user import UserRole
from src.car_rental.domain.value_objects.rental_period import utcnow

Base = declarative_base()


def _enum_column(enum_class, name: str) -> SQLEnum:
    return SQLEnum(enum_class, name=name, values_callable=lambda obj: [e.value for e in obj])


class UserModel(Base):
    """SQLAlchemy model for users."""

    __tablename__ = "users"

    id = Column(PostgresUUID(as_uuid=True), primary_key=True, default=uuid4)

    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(150), nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(_enum_column(UserRole, "user_role"), nullable=False, default=UserRole.USER)
    license_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    bookings = relationship("BookingModel", back_populates="user")

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email='{self.email}', role='{self.role}')>"


class CarModel(Base):
    """SQLAlchemy model for cars."""

    __tablename__ = "cars"

    id = Column(PostgresUUID(as_uuid=True), primary_key=True, default=uuid4)

    name = Column(String(100), nullable=False)
    brand = Column(String(100), nullable=False, index=True)
    type = Column(_enum_column(CarType, "car_type"), nullable=False)
    fuel_type = Column(_enum_column(FuelType, "fuel_type"), nullable=False)
    seats = Column(Integer, nullable=False)
    price_per_day = Column(Float, nullable=False)
    image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    bookings = relationship("BookingModel", back_populates="car", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<CarModel(id={self.id}, brand='{self.brand}', name='{self.name}')>"


class BookingModel(Base):
    """SQLAlchemy model for bookings."""

    __tablename__ = "bookings"

    id = Column(PostgresUUID(as_uuid=True), primary_key=True, default=uuid4)

    user_id = Column(PostgresUUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    car_id = Column(PostgresUUID(as_uuid=True), ForeignKey("cars.id", ondelete="CASCADE"), nullable=False, index=True)

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    status = Column(_enum_column(BookingStatus, "booking_status"), nullable=False, default=BookingStatus.PENDING, index=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("UserModel", back_populates="bookings")
    car = relationship("CarModel", back_populates="bookings")

    def __repr__(self) -> str:
        return f"<BookingModel(id={self.id}, car_id={self.car_id}, status='{self.status}')>"
