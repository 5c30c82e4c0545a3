"""Client for the Kopy API that keeps decryption on the caller's side.

The server only ever sees paste ids. Keys travel in the locator fragment
and are used here, locally, to open the ciphertext.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

import httpx

from kopy.db.time import as_utc, utcnow
from kopy.errors import DecryptionError, PasteError, StoreError, ValidationError
from kopy.services.crypto import CryptoService
from kopy.services.locator import parse_locator

logger = logging.getLogger(__name__)

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_NOT_FOUND = 404

DECRYPT_FAILED_MESSAGE = "Failed to decrypt content. The link may be corrupted."
NOT_FOUND_MESSAGE = "Paste not found or has expired"
EXPIRED_MESSAGE = "This paste has expired"


class ViewState(str, Enum):
    """States a viewer moves through while opening a paste."""

    LOADING = "loading"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    PASSWORD_REQUIRED = "password_required"
    PASSWORD_INCORRECT = "password_incorrect"
    DECRYPTED = "decrypted"
    ERROR = "error"


@dataclass(frozen=True)
class PasteView:
    """What a viewer can show for a locator."""

    state: ViewState
    paste_id: str
    content: str | None = None
    content_type: str | None = None
    sender_name: str | None = None
    expires_at: datetime | None = None
    error: str | None = None

    def time_left(self, now: datetime | None = None) -> timedelta:
        """Remaining lifetime, never negative."""
        if self.expires_at is None:
            return timedelta(0)
        remaining = self.expires_at - as_utc(now or utcnow())
        return max(remaining, timedelta(0))


def _parse_timestamp(value: str) -> datetime:
    return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if not isinstance(body, dict):
        return response.reason_phrase
    return str(body.get("error") or response.reason_phrase)


class KopyClient:
    """Create and open pastes against a Kopy server.

    Args:
        http: Configured ``httpx.Client`` whose ``base_url`` points at the API
        clock: Source of the current time for client-side expiry checks
    """

    def __init__(
        self,
        http: httpx.Client,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._http = http
        self._clock = clock

    def create_paste(
        self,
        content: str,
        *,
        sender_name: str | None = None,
        password: str | None = None,
        expiration_minutes: int | None = None,
        content_type: str = "text",
    ) -> dict[str, Any]:
        """Submit a paste and return the server's response body.

        Raises:
            ValidationError: If the server rejected the input.
            StoreError: If the server failed to store the paste.
        """
        form: dict[str, str] = {"content": content, "contentType": content_type}
        if sender_name:
            form["senderName"] = sender_name
        if password:
            form["password"] = password
        if expiration_minutes is not None:
            form["expirationMinutes"] = str(expiration_minutes)

        response = self._http.post("/paste", data=form)
        if response.status_code == HTTP_BAD_REQUEST:
            raise ValidationError(_error_message(response))
        if response.status_code != HTTP_OK:
            raise StoreError(_error_message(response))
        return response.json()

    def fetch_paste(self, paste_id: str) -> dict[str, Any] | None:
        """Return the raw paste record, or None when missing or expired."""
        response = self._http.get(f"/paste/{paste_id}")
        if response.status_code == HTTP_NOT_FOUND:
            return None
        if response.status_code == HTTP_BAD_REQUEST:
            raise ValidationError(_error_message(response))
        if response.status_code != HTTP_OK:
            raise PasteError(_error_message(response))
        return response.json()

    def open_paste(self, url: str, password: str | None = None) -> PasteView:
        """Fetch the paste behind ``url`` and decrypt it locally.

        Password-protected pastes are checked against their published hash
        before the key is used. A failed decryption is final; no other key is
        ever tried.

        Raises:
            ValidationError: If ``url`` carries no key fragment.
        """
        paste_id, key = parse_locator(url)
        record = self.fetch_paste(paste_id)
        if record is None:
            return PasteView(ViewState.NOT_FOUND, paste_id, error=NOT_FOUND_MESSAGE)

        expires_at = _parse_timestamp(record["expires_at"])
        if expires_at <= as_utc(self._clock()):
            return PasteView(
                ViewState.EXPIRED, paste_id, expires_at=expires_at, error=EXPIRED_MESSAGE
            )

        details: dict[str, Any] = {
            "content_type": record.get("content_type"),
            "sender_name": record.get("sender_name"),
            "expires_at": expires_at,
        }
        password_hash = record.get("password_hash")
        if password_hash:
            if not password:
                return PasteView(ViewState.PASSWORD_REQUIRED, paste_id, **details)
            if not CryptoService.verify_password(password, password_hash):
                return PasteView(
                    ViewState.PASSWORD_INCORRECT,
                    paste_id,
                    error="Incorrect password. Please try again.",
                    **details,
                )

        try:
            content = CryptoService.decrypt(record["ciphertext"], key)
        except DecryptionError:
            logger.warning("Could not decrypt paste %s", paste_id)
            return PasteView(ViewState.ERROR, paste_id, error=DECRYPT_FAILED_MESSAGE, **details)
        return PasteView(ViewState.DECRYPTED, paste_id, content=content, **details)
