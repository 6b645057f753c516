"""Booking endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..middleware.auth import get_current_user_id, get_services
from ..schemas.booking_schemas import BookingRequest, BookingResponse
from ..schemas.common import DataResponse, PagedResponse, PaginationMeta, pagination_params
from ....domain.value_objects.pagination import PageRequest
from ....infrastructure.services import BaseServiceFactory

router = APIRouter()


@router.post("/create", status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: BookingRequest,
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[BookingResponse]:
    """Reserve a car; the booking starts out PENDING."""
    async with services.get_booking_service() as booking_service:
        view = await booking_service.create_booking(user_id, request.car_id, request.period)

    return DataResponse[BookingResponse](
        message="Booking created successfully",
        data=BookingResponse.from_view(view)
    )


@router.get("")
async def list_my_bookings(
    page_request: PageRequest = Depends(pagination_params),
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> PagedResponse[BookingResponse]:
    """List the caller's bookings, newest first."""
    async with services.get_booking_service() as booking_service:
        page = await booking_service.list_user_bookings(user_id, page_request)

    return PagedResponse[BookingResponse](
        message="Successfully retrieved all booking",
        data=[BookingResponse.from_view(view) for view in page.items],
        pagination=PaginationMeta.from_page(page)
    )


@router.get("/{booking_id}")
async def get_booking(
    booking_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[BookingResponse]:
    """Booking detail, visible to its owner and to administrators."""
    async with services.get_booking_service() as booking_service:
        view = await booking_service.get_booking(booking_id, requester_id=user_id)

    return DataResponse[BookingResponse](
        message="Successfully retrieved the Booking details",
        data=BookingResponse.from_view(view)
    )


@router.put("/{booking_id}/cancel")
async def cancel_booking(
    booking_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[BookingResponse]:
    async with services.get_booking_service() as booking_service:
        view = await booking_service.cancel_booking(booking_id, user_id)

    return DataResponse[BookingResponse](
        message="Booking cancelled successfully",
        data=BookingResponse.from_view(view)
    )
