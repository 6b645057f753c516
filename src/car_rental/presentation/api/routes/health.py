"""Health check endpoints."""

from fastapi import APIRouter

from ....infrastructure.logging import SERVICE_NAME

router = APIRouter()

API_VERSION = "1.0.0"


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Car Rental API", "version": API_VERSION}
