# src/kopy/main.py
"""Main entry point for the Kopy application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from kopy.api import pastes_router, system_router
from kopy.core.settings import settings
from kopy.db.session import create_db_engine
from kopy.errors import PasteError
from kopy.repositories.paste_store import PasteStore

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Apply the process-wide log format once."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Self-destructing encrypted paste store",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

app.include_router(system_router)
app.include_router(pastes_router)


@app.exception_handler(PasteError)
async def paste_error_handler(request: Request, exc: PasteError) -> JSONResponse:
    """Render domain errors as ``{"error": message}`` with their status."""
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as plain 400s."""
    logger.debug(
        "Rejected request to %s: %s",
        request.url.path,
        [(error.get("loc"), error.get("type")) for error in exc.errors()],
    )
    return JSONResponse(
        {"error": "Invalid request"},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Hide unexpected failures behind an opaque 500."""
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=exc)
    return JSONResponse(
        {"error": "Internal server error"},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    engine = create_db_engine(
        settings.database_url_sync,
        echo=settings.sql_debug,
        pool_timeout=settings.db_pool_timeout_seconds,
    )
    store = PasteStore(engine)
    if settings.auto_create_tables:
        store.create_schema()
    app.state.paste_store = store
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    store: PasteStore | None = getattr(app.state, "paste_store", None)
    if store:
        store.dispose()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("kopy.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
