"""Authentication endpoints: registration, login, logout and session profile."""

from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from ..config import Settings
from ..middleware.auth import get_app_settings, get_current_user_id, get_services
from ..schemas.auth_schemas import (
    AccountResponse,
    LoginRequest,
    RegisteredUser,
    RegisterRequest,
    TokenData
)
from ..schemas.common import DataResponse, MessageResponse
from ....domain.value_objects.auth import LoginCredentials
from ....infrastructure.services import BaseServiceFactory

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[RegisteredUser]:
    """Create a user account."""
    async with services.get_auth_service() as auth_service:
        user = await auth_service.register(
            email=request.email,
            name=request.name,
            password=request.password
        )

    return DataResponse[RegisteredUser](
        message="User registered successfully",
        data=RegisteredUser.from_entity(user)
    )


@router.post("/login")
async def login(
    request: LoginRequest,
    response: Response,
    services: BaseServiceFactory = Depends(get_services),
    settings: Settings = Depends(get_app_settings)
) -> DataResponse[TokenData]:
    """Authenticate and issue a session token, also set as an HTTP-only cookie."""
    credentials = LoginCredentials(email=request.email, password=request.password)

    async with services.get_auth_service() as auth_service:
        _, auth_token = await auth_service.login(credentials)

    response.set_cookie(
        key=settings.access_token_cookie_name,
        value=auth_token.token,
        max_age=int(services.token_service.expires_in.total_seconds()),
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/"
    )

    return DataResponse[TokenData](
        message="Login successful",
        data=TokenData(access_token=auth_token.token, expires_at=auth_token.expires_at)
    )


@router.post("/logout")
async def logout(
    response: Response,
    settings: Settings = Depends(get_app_settings)
) -> MessageResponse:
    """Clear the session cookie."""
    response.delete_cookie(key=settings.access_token_cookie_name, path="/")
    return MessageResponse(message="Logout successful")


@router.get("/me")
async def get_me(
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> DataResponse[AccountResponse]:
    """Get the account of the authenticated user."""
    async with services.get_auth_service() as auth_service:
        user = await auth_service.get_profile(user_id)

    return DataResponse[AccountResponse](message="Success", data=AccountResponse.from_entity(user))
