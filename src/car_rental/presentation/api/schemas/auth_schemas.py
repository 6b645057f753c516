"""Pydantic schemas for authentication and profile endpoints."""

import re
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from .common import CamelModel
from ....domain.entities.user import User

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"^(\+?\d{1,3}[-.\s]?)?\(?\d{1,4}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9}$")


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


class RegisterRequest(CamelModel):
    """Request model for account registration."""
    name: str = Field(..., min_length=2, max_length=150)
    email: str
    password: str = Field(..., min_length=8, max_length=50)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError('Name must be at least 2 characters')
        return v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)


class LoginRequest(CamelModel):
    """Request model for login."""
    email: str
    password: str = Field(..., min_length=8, max_length=50)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _normalize_email(v)


class UpdateProfileRequest(CamelModel):
    """Request model for a partial profile update."""
    name: Optional[str] = Field(None, min_length=2, max_length=150)
    phone: Optional[str] = Field(None, min_length=7, max_length=20)
    password: Optional[str] = Field(None, min_length=8, max_length=50)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else v

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not PHONE_PATTERN.match(v):
            raise ValueError('Invalid phone number format')
        return v


class RegisteredUser(CamelModel):
    """Public fields returned after registration."""
    id: UUID
    email: str
    name: str
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "RegisteredUser":
        return cls(id=user.id, email=user.email, name=user.name, created_at=user.created_at)


class AccountResponse(CamelModel):
    """Account fields returned by GET /auth/me."""
    id: UUID
    email: str
    name: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "AccountResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            created_at=user.created_at,
            updated_at=user.updated_at
        )


class UserProfile(CamelModel):
    """Full public profile of a user."""
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    license_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=user.role.value,
            license_url=user.license_url,
            created_at=user.created_at,
            updated_at=user.updated_at
        )


class TokenData(CamelModel):
    """Issued session token."""
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime


class UploadResponse(CamelModel):
    """Response returned after a successful upload."""
    message: str
    url: str
