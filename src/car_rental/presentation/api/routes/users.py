"""User profile endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile

from ..middleware.auth import get_current_user_id, get_services
from ..schemas.auth_schemas import UpdateProfileRequest, UploadResponse, UserProfile
from ..schemas.common import DataResponse, read_upload
from ....infrastructure.services import BaseServiceFactory

router = APIRouter()


@router.get("/me")
async def get_my_profile(
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[UserProfile]:
    async with services.get_user_service() as user_service:
        user = await user_service.get_user(user_id)

    return DataResponse[UserProfile](message="Success", data=UserProfile.from_entity(user))


@router.put("/me")
async def update_my_profile(
    request: UpdateProfileRequest,
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[UserProfile]:
    """Update only the supplied profile fields."""
    async with services.get_user_service() as user_service:
        user = await user_service.update_profile(
            user_id,
            name=request.name,
            phone=request.phone,
            password=request.password
        )

    return DataResponse[UserProfile](message="Profile updated", data=UserProfile.from_entity(user))


@router.post("/upload")
async def upload_license(
    license: Optional[UploadFile] = File(None),
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> UploadResponse:
    """Upload the driving license document (multipart field "license")."""
    content = await read_upload(license, services.license_policy) if license is not None else None
    content_type = license.content_type if license is not None else None

    async with services.get_user_service() as user_service:
        url = await user_service.upload_license(user_id, content, content_type)

    return UploadResponse(message="License uploaded successfully", url=url)
