"""Domain exceptions raised by the paste services.

Every error carries the HTTP status it maps to and a message that is safe to
show to callers. Detailed causes belong in the server log, not in ``message``.
"""

from __future__ import annotations

from fastapi import status


class PasteError(RuntimeError):
    """Base exception for all paste-related failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PasteError):
    """Raised when caller input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundOrExpired(PasteError):
    """Raised for any lookup miss.

    Never-created and expired pastes are reported identically.
    """

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Paste not found or has expired"


class DecryptionError(PasteError):
    """Raised when ciphertext cannot be opened with the supplied key.

    The message never says whether the key was wrong or the data corrupted.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Decryption failed"


class StoreError(PasteError):
    """Raised when the paste store fails to read or write."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Failed to access paste storage"


class StoreUnavailable(StoreError):
    """Raised when the store cannot be reached in time; safe to retry."""

    default_message = "Paste storage is temporarily unavailable"
