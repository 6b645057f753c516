"""User entity for renters and administrators."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4
from typing import Optional

from ..value_objects.rental_period import utcnow


class UserRole(Enum):
    """User role enumeration."""
    USER = "USER"
    ADMIN = "ADMIN"


class User:
    """User entity representing a registered account."""

    def __init__(
        self,
        email: str,
        name: str,
        password_hash: str,
        user_id: Optional[UUID] = None,
        role: UserRole = UserRole.USER,
        phone: Optional[str] = None,
        license_url: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self._id = user_id or uuid4()
        self._email = email.lower().strip()
        self._name = name.strip()
        self._password_hash = password_hash
        self._role = role
        self._phone = phone.strip() if phone else None
        self._license_url = license_url
        self._created_at = created_at or utcnow()
        self._updated_at = updated_at or utcnow()

    @property
    def id(self) -> UUID:
        """Get user ID."""
        return self._id

    @property
    def email(self) -> str:
        """Get user email."""
        return self._email

    @property
    def name(self) -> str:
        """Get user display name."""
        return self._name

    @property
    def password_hash(self) -> str:
        """Get stored password hash."""
        return self._password_hash

    @property
    def role(self) -> UserRole:
        """Get user role."""
        return self._role

    @property
    def phone(self) -> Optional[str]:
        """Get user phone."""
        return self._phone

    @property
    def license_url(self) -> Optional[str]:
        """Get uploaded driving license URL."""
        return self._license_url

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def is_admin(self) -> bool:
        """Check whether the user has administrator privileges."""
        return self._role == UserRole.ADMIN

    def update_profile(
        self,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        password_hash: Optional[str] = None
    ) -> None:
        """Apply a partial profile update; None leaves a field unchanged."""
        if name:
            self._name = name.strip()
        if phone:
            self._phone = phone.strip()
        if password_hash:
            self._password_hash = password_hash
        self._updated_at = utcnow()

    def attach_license(self, license_url: str) -> None:
        """Record the location of an uploaded driving license."""
        self._license_url = license_url
        self._updated_at = utcnow()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        return f"User({self._id}, {self._email}, {self._role.value})"
