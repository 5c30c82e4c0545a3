"""Paste-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from kopy.db.time import as_utc


class PasteOut(BaseModel):
    """Stored paste as returned to the client holding the key.

    ``password_hash`` is exposed so clients can verify locally before
    decrypting; raw passwords and keys are never part of this payload.
    """

    id: str
    ciphertext: str = Field(..., description="Base64 AES-GCM blob")
    sender_name: str | None = None
    password_hash: str | None = None
    content_type: str
    created_at: datetime
    expires_at: datetime
    state: Literal["available", "password_required", "password_verified"]

    @field_serializer("created_at", "expires_at")
    def serialize_timestamp(self, value: datetime) -> str:
        """Render timestamps as ISO-8601 UTC."""
        return as_utc(value).isoformat().replace("+00:00", "Z")


class PasteCreated(BaseModel):
    """Response for a successful create."""

    success: bool = True
    url: str = Field(..., description="Shareable link; the key is in the fragment")
    id: str
    expires_at: datetime = Field(..., alias="expiresAt")
    content_type: str = Field(..., alias="contentType")
    has_password: bool = Field(..., alias="hasPassword")

    model_config = ConfigDict(populate_by_name=True)

    @field_serializer("expires_at")
    def serialize_expires_at(self, value: datetime) -> str:
        """Render the deadline as ISO-8601 UTC."""
        return as_utc(value).isoformat().replace("+00:00", "Z")


class PasteUnlock(BaseModel):
    """Response for a server-side password check."""

    state: Literal["available", "password_verified", "password_incorrect"]
    paste: PasteOut | None = None


class ErrorResponse(BaseModel):
    """Error body shared by every failing endpoint."""

    error: str
