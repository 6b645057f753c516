"""
Authentication dependencies for the car rental API.

Protected routes resolve the session token from the ``Authorization: Bearer``
header first and from the session cookie otherwise, then receive the
authenticated user id. Admin routes additionally load the user and check its
role.
"""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import Settings
from ....domain.entities.user import User
from ....domain.exceptions import AuthenticationError
from ....infrastructure.services import BaseServiceFactory


# Security scheme for bearer token authentication; the cookie is the fallback
security = HTTPBearer(auto_error=False)


def get_services(request: Request) -> BaseServiceFactory:
    """Service factory created for this application instance."""
    return request.app.state.services


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    services: BaseServiceFactory = Depends(get_services),
    settings: Settings = Depends(get_app_settings)
) -> UUID:
    """
    FastAPI dependency resolving the authenticated user id.

    Raises:
        AuthenticationError: no token was sent, or it is expired or invalid
    """
    if credentials and credentials.credentials:
        token = credentials.credentials
    else:
        token = request.cookies.get(settings.access_token_cookie_name)

    if not token:
        raise AuthenticationError("Authentication required")

    return services.token_service.decode(token)


async def get_current_admin(
    user_id: UUID = Depends(get_current_user_id),
    services: BaseServiceFactory = Depends(get_services)
) -> User:
    """
    Dependency for endpoints that require admin privileges.

    Session resolution runs first, so a bad token fails with 401 before the
    role check is reached.
    """
    async with services.get_admin_service() as admin_service:
        return await admin_service.require_admin(user_id)
