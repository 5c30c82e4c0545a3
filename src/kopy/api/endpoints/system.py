"""System endpoints for the Kopy API."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from kopy.api.dependencies import PasteStoreDep
from kopy.core.settings import settings

router = APIRouter(tags=["system"])


@router.get("/health")
def health_check(store: PasteStoreDep) -> JSONResponse:
    """Report whether the paste store is reachable.

    Args:
        store: Paste store owned by the application

    Returns:
        ``{"status": "connected"}`` or a 500 with ``{"status": "error"}``
    """
    if store.test_connection():
        return JSONResponse({"status": "connected"})
    return JSONResponse(
        {"status": "error", "message": "Database connection failed"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Self-destructing encrypted paste store",
        "docs": "/docs",
    }
