"""Paste lifecycle: creation and gated retrieval."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from kopy.core.settings import Settings, settings
from kopy.db.time import as_utc, utcnow
from kopy.errors import NotFoundOrExpired, ValidationError
from kopy.models.paste import Paste
from kopy.repositories.paste_store import PasteStore
from kopy.services.crypto import CryptoService
from kopy.services.locator import build_locator

logger = logging.getLogger(__name__)

PASTE_ID_PATTERN = re.compile(r"^[0-9a-f]{16,64}$")


class ContentType(str, Enum):
    """How the client should render a paste. The server never interprets it."""

    TEXT = "text"
    MARKDOWN = "markdown"

    @classmethod
    def parse(cls, value: str | None) -> ContentType:
        """Return the content type named by ``value``; ``None`` means text.

        Raises:
            ValidationError: If the value is not a supported type.
        """
        if value is None or value == "":
            return cls.TEXT
        normalized = value.strip().lower()
        if normalized == "plain":
            return cls.TEXT
        try:
            return cls(normalized)
        except ValueError as err:
            raise ValidationError(
                'Invalid content type. Must be "text" or "markdown"'
            ) from err


class RetrievalState(str, Enum):
    """Outcome of a retrieval as seen by the caller."""

    AVAILABLE = "available"
    PASSWORD_REQUIRED = "password_required"
    PASSWORD_INCORRECT = "password_incorrect"
    PASSWORD_VERIFIED = "password_verified"


@dataclass(frozen=True)
class CreatedPaste:
    """Result of a successful create.

    ``key`` exists only here and in the locator; it is never persisted.
    """

    id: str
    key: str
    created_at: datetime
    expires_at: datetime
    content_type: ContentType
    has_password: bool

    def locator(self, base_url: str) -> str:
        return build_locator(base_url, self.id, self.key)


@dataclass(frozen=True)
class Retrieval:
    """A live paste together with the state of its password gate."""

    state: RetrievalState
    paste: Paste

    @property
    def unlocked(self) -> bool:
        return self.state in (RetrievalState.AVAILABLE, RetrievalState.PASSWORD_VERIFIED)


class PasteService:
    """Orchestrates encryption, persistence and the password gate."""

    def __init__(
        self,
        store: PasteStore,
        *,
        config: Settings = settings,
        clock: Callable[[], datetime] = utcnow,
        crypto: type[CryptoService] = CryptoService,
    ) -> None:
        self.store = store
        self.config = config
        self.clock = clock
        self.crypto = crypto

    @property
    def allowed_expiration_minutes(self) -> Sequence[int]:
        return self.config.allowed_expiration_minutes

    def _parse_expiration(self, value: int | str | None) -> int:
        if value is None or (isinstance(value, str) and not value.strip()):
            return self.config.default_expiration_minutes
        try:
            minutes = int(value)
        except (TypeError, ValueError) as err:
            raise ValidationError("expirationMinutes must be a whole number") from err
        if minutes not in self.allowed_expiration_minutes:
            allowed = ", ".join(str(m) for m in self.allowed_expiration_minutes)
            raise ValidationError(f"expirationMinutes must be one of: {allowed}")
        return minutes

    def _validate_content(self, content: str | None) -> str:
        if content is None or not content.strip():
            raise ValidationError("Content is required")
        if len(content.encode("utf-8")) > self.config.max_content_bytes:
            raise ValidationError("Content exceeds the maximum allowed size")
        return content

    def _validate_sender_name(self, sender_name: str | None) -> str | None:
        if sender_name is None:
            return None
        cleaned = sender_name.strip()
        if not cleaned:
            return None
        if len(cleaned) > self.config.max_sender_name_length:
            raise ValidationError(
                f"senderName must be at most {self.config.max_sender_name_length} characters"
            )
        if not cleaned.isprintable():
            raise ValidationError("senderName must not contain control characters")
        return cleaned

    def create_paste(
        self,
        content: str | None,
        *,
        sender_name: str | None = None,
        password: str | None = None,
        expiration_minutes: int | str | None = None,
        content_type: str | None = None,
    ) -> CreatedPaste:
        """Encrypt and store a new paste.

        All input is validated before anything touches storage.

        Raises:
            ValidationError: If any input is rejected.
            StoreError: If the paste could not be persisted.
        """
        body = self._validate_content(content)
        kind = ContentType.parse(content_type)
        minutes = self._parse_expiration(expiration_minutes)
        name = self._validate_sender_name(sender_name)

        key = self.crypto.generate_key()
        ciphertext = self.crypto.encrypt(body, key)
        paste_id = self.crypto.generate_id()
        created_at = as_utc(self.clock())
        expires_at = created_at + timedelta(minutes=minutes)
        password_hash = self.crypto.hash_password(password) if password else None

        self.store.insert(
            Paste(
                id=paste_id,
                encrypted_content=ciphertext,
                sender_name=name,
                password_hash=password_hash,
                content_type=kind.value,
                created_at=created_at,
                expires_at=expires_at,
            )
        )
        logger.info("Created paste %s expiring in %d minutes", paste_id, minutes)

        return CreatedPaste(
            id=paste_id,
            key=key,
            created_at=created_at,
            expires_at=expires_at,
            content_type=kind,
            has_password=password_hash is not None,
        )

    @staticmethod
    def validate_paste_id(paste_id: str | None) -> str:
        """Return ``paste_id`` if it has the shape of a generated id."""
        if not paste_id or not PASTE_ID_PATTERN.match(paste_id):
            raise ValidationError("Invalid paste id")
        return paste_id

    def retrieve_paste(self, paste_id: str, password: str | None = None) -> Retrieval:
        """Fetch a live paste and evaluate its password gate.

        The ciphertext is returned in every state; only the key holder can
        open it. ``password=None`` means no password was offered.

        Raises:
            ValidationError: If the id is malformed.
            NotFoundOrExpired: If the paste is missing or expired.
            StoreError: If the store failed.
        """
        self.validate_paste_id(paste_id)
        paste = self.store.get_if_valid(paste_id, as_utc(self.clock()))
        if paste is None:
            logger.info("Paste not found or expired: %s", paste_id)
            raise NotFoundOrExpired()

        if paste.password_hash is None:
            state = RetrievalState.AVAILABLE
        elif password is None:
            state = RetrievalState.PASSWORD_REQUIRED
        elif self.crypto.verify_password(password, paste.password_hash):
            state = RetrievalState.PASSWORD_VERIFIED
        else:
            state = RetrievalState.PASSWORD_INCORRECT
        return Retrieval(state=state, paste=paste)
