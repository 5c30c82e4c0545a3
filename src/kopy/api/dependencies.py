"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Request

from kopy.core.settings import settings
from kopy.repositories.paste_store import PasteStore
from kopy.services.paste_service import PasteService


def get_paste_store(request: Request) -> PasteStore:
    """Return the store constructed at application startup."""
    return request.app.state.paste_store


PasteStoreDep = Annotated[PasteStore, Depends(get_paste_store)]


def get_paste_service(store: PasteStoreDep) -> PasteService:
    """Build the lifecycle service around the application's store."""
    return PasteService(store)


PasteServiceDep = Annotated[PasteService, Depends(get_paste_service)]


def resolve_base_url(request: Request) -> str:
    """Return the public origin used to build shareable links.

    Priority: configured ``BASE_URL``, then reverse-proxy forwarding
    headers, then the ``Host`` header, then the request's own origin.
    """
    if settings.base_url:
        return settings.base_url.rstrip("/")

    proto = request.headers.get("x-forwarded-proto") or "https"
    forwarded_host = request.headers.get("x-forwarded-host")
    if forwarded_host:
        return f"{proto}://{forwarded_host}"

    host = request.headers.get("host")
    if host:
        return f"{proto}://{host}"

    return str(request.base_url).rstrip("/")


BaseUrlDep = Annotated[str, Depends(resolve_base_url)]
