"""Paste creation and retrieval endpoints for the Kopy API."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Form, status

from kopy.api.dependencies import BaseUrlDep, PasteServiceDep
from kopy.errors import ValidationError
from kopy.schemas.paste import ErrorResponse, PasteCreated, PasteOut, PasteUnlock
from kopy.services.paste_service import Retrieval, RetrievalState


router = APIRouter(prefix="/paste", tags=["pastes"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _serialize_paste(retrieval: Retrieval) -> PasteOut:
    """Serialize a live paste into API payload form."""
    paste = retrieval.paste
    return PasteOut(
        id=paste.id,
        ciphertext=paste.encrypted_content,
        sender_name=paste.sender_name,
        password_hash=paste.password_hash,
        content_type=paste.content_type,
        created_at=paste.created_at,
        expires_at=paste.expires_at,
        state=retrieval.state.value,
    )


@router.get("")
def describe_paste_api(service: PasteServiceDep) -> dict[str, Any]:
    """Describe how to create a paste."""
    allowed = ", ".join(str(m) for m in service.allowed_expiration_minutes)
    default = service.config.default_expiration_minutes
    return {
        "message": "Kopy API - POST endpoint for creating secure pastes",
        "usage": {
            "method": "POST",
            "endpoint": "/paste",
            "contentType": "multipart/form-data",
            "fields": {
                "content": "string (required) - The text content to share",
                "senderName": "string (optional) - Author name",
                "password": "string (optional) - Password protection",
                "expirationMinutes": (
                    f"number (optional, default: {default}) - One of: {allowed}"
                ),
                "contentType": 'string (optional, default: "text") - "text" or "markdown"',
            },
        },
    }


@router.post("", response_model=PasteCreated, responses=_ERROR_RESPONSES)
def create_paste(
    service: PasteServiceDep,
    base_url: BaseUrlDep,
    content: Annotated[str | None, Form()] = None,
    sender_name: Annotated[str | None, Form(alias="senderName")] = None,
    password: Annotated[str | None, Form()] = None,
    expiration_minutes: Annotated[str | None, Form(alias="expirationMinutes")] = None,
    content_type: Annotated[str | None, Form(alias="contentType")] = None,
) -> PasteCreated:
    """Encrypt content and store it until its expiry deadline."""
    created = service.create_paste(
        content,
        sender_name=sender_name,
        password=password,
        expiration_minutes=expiration_minutes,
        content_type=content_type,
    )
    return PasteCreated(
        url=created.locator(base_url),
        id=created.id,
        expires_at=created.expires_at,
        content_type=created.content_type.value,
        has_password=created.has_password,
    )


@router.get("/{paste_id}", response_model=PasteOut, responses=_ERROR_RESPONSES)
def get_paste(paste_id: str, service: PasteServiceDep) -> PasteOut:
    """Return the ciphertext and metadata of a live paste."""
    retrieval = service.retrieve_paste(paste_id)
    return _serialize_paste(retrieval)


@router.post("/{paste_id}/unlock", response_model=PasteUnlock, responses=_ERROR_RESPONSES)
def unlock_paste(
    paste_id: str,
    service: PasteServiceDep,
    password: Annotated[str | None, Form()] = None,
) -> PasteUnlock:
    """Check a paste password on the server.

    An incorrect password is a normal 200 outcome; the caller may retry.
    A paste without a password is reported as ``available``.
    """
    if not password:
        raise ValidationError("Password is required")
    retrieval = service.retrieve_paste(paste_id, password)
    if retrieval.state is RetrievalState.PASSWORD_INCORRECT:
        return PasteUnlock(state=retrieval.state.value)
    return PasteUnlock(state=retrieval.state.value, paste=_serialize_paste(retrieval))
