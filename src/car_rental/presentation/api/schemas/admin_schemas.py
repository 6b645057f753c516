"""Pydantic schemas for the admin panel."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from .common import CamelModel
from ....application.services.admin_service import UserListing


class AdminUserResponse(CamelModel):
    """A user row in the admin listing."""
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    license_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    booking_count: int

    @classmethod
    def from_listing(cls, listing: UserListing) -> "AdminUserResponse":
        user = listing.user
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            role=user.role.value,
            license_url=user.license_url,
            created_at=user.created_at,
            updated_at=user.updated_at,
            booking_count=listing.booking_count
        )
