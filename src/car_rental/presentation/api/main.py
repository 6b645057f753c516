"""FastAPI main application module."""

import os
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .middleware.logging import RequestResponseLoggingMiddleware
from .routes import admin, auth, bookings, cars, health, users
from .schemas.common import FieldError, ValidationErrorResponse
from ...domain.exceptions import (
    AuthenticationError,
    CarRentalError,
    ConflictError,
    InvalidOperationError,
    PermissionDeniedError,
    ResourceNotFoundError
)
from ...infrastructure.database.connection import DatabaseManager
from ...infrastructure.logging import LoggingConfig, get_logger
from ...infrastructure.security import JWTTokenService
from ...infrastructure.services import BaseServiceFactory, ServiceFactory
from ...infrastructure.storage import LocalFileStorage

logger = get_logger(__name__)

API_TITLE = "Car Rental API"
API_VERSION = health.API_VERSION

ERROR_STATUS_CODES = {
    InvalidOperationError: 400,
    AuthenticationError: 401,
    PermissionDeniedError: 403,
    ResourceNotFoundError: 404,
    ConflictError: 409,
}

# Request sections FastAPI prefixes to validation error locations
LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def build_service_factory(settings: Settings) -> ServiceFactory:
    """Wire the PostgreSQL-backed service factory from settings."""
    database_manager = DatabaseManager(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        echo=settings.db_echo
    )
    token_service = JWTTokenService(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        expires_in=timedelta(days=settings.access_token_expire_days)
    )
    file_storage = LocalFileStorage(settings.upload_dir, settings.upload_url_prefix)

    return ServiceFactory(
        database_manager=database_manager,
        token_service=token_service,
        file_storage=file_storage,
        max_upload_size=settings.max_upload_size,
        auto_create_tables=settings.auto_create_tables
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    settings: Settings = app.state.settings
    LoggingConfig(
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file=settings.log_enable_file
    ).setup_logging()

    # Startup
    logger.info("Starting Car Rental API")
    services: BaseServiceFactory = app.state.services
    await services.initialize()

    yield

    # Shutdown
    logger.info("Shutting down Car Rental API")
    await services.shutdown()


def format_validation_errors(exc: RequestValidationError) -> List[FieldError]:
    """Flatten pydantic errors into {field, message} pairs."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in LOCATION_PREFIXES:
            location = location[1:]

        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]

        errors.append(FieldError(field=".".join(location), message=message))
    return errors


def add_exception_handlers(app: FastAPI) -> None:
    """Add custom exception handlers to the FastAPI application."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle request schema violations."""
        body = ValidationErrorResponse(errors=format_validation_errors(exc))
        logger.warning(f"Validation error on {request.url.path}: {[error.field for error in body.errors]}")
        return JSONResponse(status_code=400, content=body.model_dump(by_alias=True))

    @app.exception_handler(CarRentalError)
    async def domain_error_handler(request: Request, exc: CarRentalError):
        """Handle domain errors raised by services and dependencies."""
        status_code = next(
            (code for error_class, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_class)),
            400
        )
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(status_code=status_code, content={"message": exc.message}, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        """Log unexpected failures; the client only gets a generic message."""
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    service_factory: Optional[BaseServiceFactory] = None
) -> FastAPI:
    """Create and configure FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=API_TITLE,
        description="REST backend for car rentals: accounts, catalog, bookings and admin panel",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.services = service_factory or build_service_factory(settings)

    # Add custom exception handlers
    add_exception_handlers(app)

    # Served uploads are not access-logged
    app.add_middleware(RequestResponseLoggingMiddleware, quiet_prefixes=(f"{settings.api_prefix}/uploads/",))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.allowed_methods,
        allow_headers=settings.allowed_headers,
    )

    # Include routers
    prefix = settings.api_prefix
    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["authentication"])
    app.include_router(users.router, prefix=f"{prefix}/user", tags=["users"])
    app.include_router(cars.router, prefix=f"{prefix}/car", tags=["cars"])
    app.include_router(bookings.router, prefix=f"{prefix}/booking", tags=["bookings"])
    app.include_router(admin.router, prefix=f"{prefix}/admin", tags=["admin"])

    # Uploaded files are served back as-is
    os.makedirs(settings.upload_dir, exist_ok=True)
    app.mount(f"{prefix}/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    return app


# Create app instance
app = create_app()
