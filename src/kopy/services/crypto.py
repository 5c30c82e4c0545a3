# src/kopy/services/crypto.py
"""Cryptographic services for Kopy."""

from __future__ import annotations

import base64
import binascii
import hashlib
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from kopy.errors import DecryptionError

KEY_LENGTH_BYTES = 32
PASTE_ID_LENGTH_BYTES = 16
NONCE_LENGTH_BYTES = 12
TAG_LENGTH_BYTES = 16


class CryptoService:
    """Service handling paste encryption, identifiers and password digests.

    Keys and ids are lowercase hex so they embed in URLs without escaping.
    """

    @staticmethod
    def _decode_key(key: str) -> bytes:
        try:
            raw = bytes.fromhex(key.strip())
        except (AttributeError, ValueError) as err:
            raise ValueError("Invalid key encoding") from err
        if len(raw) != KEY_LENGTH_BYTES:
            raise ValueError("Keys must be 32 bytes")
        return raw

    @staticmethod
    def generate_key() -> str:
        """Generate a fresh 256-bit content key.

        Returns:
            Hex-encoded key (64 characters)
        """
        return secrets.token_hex(KEY_LENGTH_BYTES)

    @staticmethod
    def generate_id() -> str:
        """Generate a 128-bit paste identifier.

        No uniqueness check is made against the store; collisions are
        negligible at this size.

        Returns:
            Hex-encoded identifier (32 characters)
        """
        return secrets.token_hex(PASTE_ID_LENGTH_BYTES)

    @staticmethod
    def encrypt(plaintext: str, key: str) -> str:
        """Encrypt text with AES-256-GCM.

        Args:
            plaintext: Text to protect
            key: Hex-encoded key from `generate_key`

        Returns:
            Base64 text of ``nonce || ciphertext || tag``

        Raises:
            ValueError: If the key is not a 32-byte hex string
        """
        aead = AESGCM(CryptoService._decode_key(key))
        nonce = secrets.token_bytes(NONCE_LENGTH_BYTES)
        sealed = aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        return base64.b64encode(nonce + sealed).decode("ascii")

    @staticmethod
    def decrypt(ciphertext: str, key: str) -> str:
        """Decrypt text produced by `encrypt`.

        Args:
            ciphertext: Base64 blob from `encrypt`
            key: Hex-encoded key

        Returns:
            The original plaintext

        Raises:
            DecryptionError: For any failure. Wrong keys, corrupt or truncated
                blobs and empty results are indistinguishable to the caller.
        """
        if not ciphertext or not key:
            raise DecryptionError()
        try:
            aead = AESGCM(CryptoService._decode_key(key))
            blob = base64.b64decode(ciphertext, validate=True)
            if len(blob) < NONCE_LENGTH_BYTES + TAG_LENGTH_BYTES:
                raise ValueError("Ciphertext truncated")
            nonce, sealed = blob[:NONCE_LENGTH_BYTES], blob[NONCE_LENGTH_BYTES:]
            plaintext = aead.decrypt(nonce, sealed, None).decode("utf-8")
        except (InvalidTag, binascii.Error, ValueError, TypeError) as err:
            raise DecryptionError() from err
        # Creation rejects empty content, so an empty result is suspect.
        if not plaintext:
            raise DecryptionError()
        return plaintext

    @staticmethod
    def hash_password(password: str) -> str:
        """Return the SHA-256 hex digest of a paste password.

        This is a fast digest kept for compatibility with existing clients
        that verify locally; it is not a password KDF.
        """
        return hashlib.sha256(password.encode("utf-8")).hexdigest()

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        """Check a password against a digest from `hash_password`."""
        candidate = CryptoService.hash_password(password)
        return secrets.compare_digest(candidate, password_hash.strip().lower())
