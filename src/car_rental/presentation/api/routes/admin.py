"""Admin panel endpoints; every route requires an ADMIN session."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from ..middleware.auth import get_current_admin, get_services
from ..schemas.admin_schemas import AdminUserResponse
from ..schemas.booking_schemas import BookingResponse
from ..schemas.common import DataResponse, PagedResponse, PaginationMeta, pagination_params, parse_enum
from ....domain.entities.booking import BookingStatus
from ....domain.entities.user import UserRole
from ....domain.value_objects.pagination import PageRequest
from ....infrastructure.services import BaseServiceFactory

router = APIRouter(dependencies=[Depends(get_current_admin)])


@router.get("/users")
async def list_users(
    page_request: PageRequest = Depends(pagination_params),
    role: Optional[str] = Query(None),
    services: BaseServiceFactory = Depends(get_services)
) -> PagedResponse[AdminUserResponse]:
    """List users with their booking counts, newest first."""
    async with services.get_admin_service() as admin_service:
        page = await admin_service.list_users(page_request, role=parse_enum(UserRole, role, "role"))

    return PagedResponse[AdminUserResponse](
        message="Successfully retrieved users",
        data=[AdminUserResponse.from_listing(listing) for listing in page.items],
        pagination=PaginationMeta.from_page(page)
    )


@router.get("/bookings")
async def list_bookings(
    page_request: PageRequest = Depends(pagination_params),
    status: Optional[str] = Query(None),
    services: BaseServiceFactory = Depends(get_services)
) -> PagedResponse[BookingResponse]:
    """List all bookings with car and user summaries, newest first."""
    async with services.get_admin_service() as admin_service:
        page = await admin_service.list_bookings(
            page_request,
            status=parse_enum(BookingStatus, status, "status")
        )

    return PagedResponse[BookingResponse](
        message="Successfully retrieved bookings",
        data=[BookingResponse.from_view(view) for view in page.items],
        pagination=PaginationMeta.from_page(page)
    )


@router.put("/bookings/{booking_id}/approve")
async def approve_booking(
    booking_id: UUID,
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[BookingResponse]:
    async with services.get_admin_service() as admin_service:
        view = await admin_service.approve_booking(booking_id)

    return DataResponse[BookingResponse](
        message="Booking approved successfully",
        data=BookingResponse.from_view(view)
    )
