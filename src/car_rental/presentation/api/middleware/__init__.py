"""Middleware module for the car rental API."""

from .auth import get_current_admin, get_current_user_id, get_services
from .logging import RequestResponseLoggingMiddleware

__all__ = [
    "get_current_admin",
    "get_current_user_id",
    "get_services",
    "RequestResponseLoggingMiddleware"
]
