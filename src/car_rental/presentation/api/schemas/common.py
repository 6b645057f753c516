"""Shared response envelopes and base models."""

from enum import Enum
from typing import Generic, List, Optional, Type, TypeVar
from uuid import UUID

from fastapi import Query, UploadFile
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ....domain.exceptions import InvalidOperationError
from ....domain.value_objects.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, Page, PageRequest
from ....domain.value_objects.upload import UploadPolicy

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys; accepts either form on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(CamelModel):
    """Response carrying only a message."""
    message: str


class DataResponse(CamelModel, Generic[T]):
    """Response carrying a message and a payload."""
    message: str
    data: T


class PaginationMeta(CamelModel):
    """Pagination block of a paged response."""
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page) -> "PaginationMeta":
        return cls(
            total=page.total,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages
        )


class PagedResponse(CamelModel, Generic[T]):
    """Response carrying one page of results."""
    message: str
    data: List[T]
    pagination: PaginationMeta


class FieldError(CamelModel):
    """A single field-level validation failure."""
    field: str
    message: str


class ValidationErrorResponse(CamelModel):
    """Response returned when request validation fails."""
    message: str = "Validation failed"
    errors: List[FieldError]


class CarSummary(CamelModel):
    """Car fields embedded in booking responses."""
    id: UUID
    name: str
    brand: str
    type: Optional[str] = None
    price_per_day: float
    image_url: Optional[str] = None


class UserSummary(CamelModel):
    """User fields embedded in admin booking responses."""
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None


def pagination_params(
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize")
) -> PageRequest:
    """Dependency reading page and pageSize query parameters."""
    return PageRequest(page=page, page_size=page_size)


def parse_enum(enum_class: Type[E], value: Optional[str], field: str) -> Optional[E]:
    """Parse a case-insensitive enum value from a query or form field."""
    if value is None or value == "":
        return None
    try:
        return enum_class(value.strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_class)
        raise InvalidOperationError(f"Invalid {field}. Allowed: {allowed}") from None


async def read_upload(upload: UploadFile, policy: UploadPolicy) -> bytes:
    """Read an uploaded file, rejecting it up front when its declared size or type is not allowed."""
    if upload.size:
        policy.validate(upload.content_type, upload.size)
    return await upload.read()
