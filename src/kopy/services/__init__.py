# src/kopy/services/__init__.py
"""Business logic services for the Kopy application."""

from .crypto import CryptoService
from .locator import build_locator, parse_locator
from .paste_service import (
    ContentType,
    CreatedPaste,
    PasteService,
    Retrieval,
    RetrievalState,
)

__all__ = [
    "ContentType",
    "CreatedPaste",
    "CryptoService",
    "PasteService",
    "Retrieval",
    "RetrievalState",
    "build_locator",
    "parse_locator",
]
