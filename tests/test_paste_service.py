"""Tests for the paste lifecycle service."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from kopy.core.settings import Settings
from kopy.errors import NotFoundOrExpired, StoreError, ValidationError
from kopy.repositories.paste_store import PasteStore
from kopy.services.crypto import CryptoService
from kopy.services.paste_service import (
    ContentType,
    PasteService,
    RetrievalState,
)


class TestCreate:
    def test_create_persists_only_ciphertext(self, paste_service, store, clock) -> None:
        created = paste_service.create_paste(
            "hello world",
            sender_name="  Alice  ",
            expiration_minutes=60,
            content_type="markdown",
        )

        paste = store.get_if_valid(created.id, clock())
        assert paste is not None
        assert paste.encrypted_content != "hello world"
        assert created.key not in paste.encrypted_content
        assert CryptoService.decrypt(paste.encrypted_content, created.key) == "hello world"
        assert paste.sender_name == "Alice"
        assert paste.content_type == "markdown"
        assert paste.password_hash is None
        assert created.content_type is ContentType.MARKDOWN
        assert created.has_password is False

    def test_expiry_is_creation_plus_ttl(self, paste_service, clock) -> None:
        created = paste_service.create_paste("x", expiration_minutes="1440")
        assert created.created_at == clock()
        assert created.expires_at == clock() + timedelta(days=1)

    def test_default_expiration_is_ten_minutes(self, paste_service, clock) -> None:
        created = paste_service.create_paste("x")
        assert created.expires_at - created.created_at == timedelta(minutes=10)
        assert created.content_type is ContentType.TEXT

    def test_password_is_stored_as_hash(self, paste_service, store, clock) -> None:
        created = paste_service.create_paste("x", password="secret123")

        paste = store.get_if_valid(created.id, clock())
        assert created.has_password is True
        assert paste.password_hash == CryptoService.hash_password("secret123")
        assert paste.password_hash != "secret123"

    def test_empty_password_means_unprotected(self, paste_service) -> None:
        assert paste_service.create_paste("x", password="").has_password is False

    def test_blank_sender_name_is_dropped(self, paste_service, store, clock) -> None:
        created = paste_service.create_paste("x", sender_name="   ")
        assert store.get_if_valid(created.id, clock()).sender_name is None

    def test_locator_carries_key_in_fragment(self, paste_service) -> None:
        created = paste_service.create_paste("x")
        url = created.locator("https://kopy.example/")
        assert url == f"https://kopy.example/view/{created.id}#{created.key}"

    def test_plain_is_an_alias_for_text(self, paste_service) -> None:
        assert paste_service.create_paste("x", content_type="plain").content_type is ContentType.TEXT

    @pytest.mark.parametrize("content", [None, "", "   ", "\n\t"])
    def test_empty_content_is_rejected(self, paste_service, content) -> None:
        with pytest.raises(ValidationError, match="Content is required"):
            paste_service.create_paste(content)

    def test_unknown_content_type_is_rejected(self, paste_service) -> None:
        with pytest.raises(ValidationError, match="Invalid content type"):
            paste_service.create_paste("x", content_type="xml")

    @pytest.mark.parametrize("minutes", ["abc", "1.5", 7, -10, 0, "100000"])
    def test_unsupported_expiration_is_rejected(self, paste_service, minutes) -> None:
        with pytest.raises(ValidationError, match="expirationMinutes"):
            paste_service.create_paste("x", expiration_minutes=minutes)

    def test_oversized_content_is_rejected(self, store, clock) -> None:
        config = Settings(MAX_CONTENT_BYTES=8)
        service = PasteService(store, config=config, clock=clock)
        with pytest.raises(ValidationError, match="maximum allowed size"):
            service.create_paste("123456789")

    def test_long_sender_name_is_rejected(self, paste_service) -> None:
        with pytest.raises(ValidationError, match="senderName"):
            paste_service.create_paste("x", sender_name="n" * 101)

    def test_validation_happens_before_storage(self, clock) -> None:
        store = MagicMock(spec=PasteStore)
        service = PasteService(store, clock=clock)
        with pytest.raises(ValidationError):
            service.create_paste("", content_type="xml")
        store.insert.assert_not_called()

    def test_store_failure_propagates(self, clock) -> None:
        store = MagicMock(spec=PasteStore)
        store.insert.side_effect = StoreError("Failed to save paste to database")
        service = PasteService(store, clock=clock)
        with pytest.raises(StoreError):
            service.create_paste("hello")


class TestRetrieve:
    def test_unprotected_paste_is_available(self, paste_service) -> None:
        created = paste_service.create_paste("hello")

        retrieval = paste_service.retrieve_paste(created.id)
        assert retrieval.state is RetrievalState.AVAILABLE
        assert retrieval.unlocked
        assert CryptoService.decrypt(retrieval.paste.encrypted_content, created.key) == "hello"

    def test_protected_paste_requires_password(self, paste_service) -> None:
        created = paste_service.create_paste("hello", password="secret123")

        retrieval = paste_service.retrieve_paste(created.id)
        assert retrieval.state is RetrievalState.PASSWORD_REQUIRED
        assert not retrieval.unlocked
        # Ciphertext is still handed out; only the key holder can use it.
        assert retrieval.paste.encrypted_content

    def test_wrong_password_can_be_retried(self, paste_service) -> None:
        created = paste_service.create_paste("hello", password="secret123")

        first = paste_service.retrieve_paste(created.id, "wrong")
        second = paste_service.retrieve_paste(created.id, "secret123")
        assert first.state is RetrievalState.PASSWORD_INCORRECT
        assert second.state is RetrievalState.PASSWORD_VERIFIED
        assert second.unlocked

    def test_missing_and_expired_are_indistinguishable(self, paste_service, clock) -> None:
        created = paste_service.create_paste("hello", expiration_minutes=10)
        clock.advance(minutes=10, seconds=1)

        with pytest.raises(NotFoundOrExpired) as expired:
            paste_service.retrieve_paste(created.id)
        with pytest.raises(NotFoundOrExpired) as missing:
            paste_service.retrieve_paste("f" * 32)
        assert str(expired.value) == str(missing.value)
        assert expired.value.status_code == missing.value.status_code == 404

    def test_paste_readable_until_deadline(self, paste_service, clock) -> None:
        created = paste_service.create_paste("hello", expiration_minutes=10)

        clock.advance(minutes=9, seconds=59)
        assert paste_service.retrieve_paste(created.id).state is RetrievalState.AVAILABLE

    @pytest.mark.parametrize(
        "paste_id",
        ["", "short", "ABCDEF0123456789ABCDEF0123456789", "g" * 32, "a" * 65, "../etc/passwd"],
    )
    def test_malformed_id_is_rejected(self, paste_service, paste_id) -> None:
        with pytest.raises(ValidationError, match="Invalid paste id"):
            paste_service.retrieve_paste(paste_id)


@pytest.mark.parametrize("name", ["Bob\x00", "A\nB", "tab\there", "bell\x07"])
def test_sender_name_with_control_characters_is_rejected(paste_service, name) -> None:
    with pytest.raises(ValidationError, match="control characters"):
        paste_service.create_paste("x", sender_name=name)
