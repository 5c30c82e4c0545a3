"""Persistence collaborators."""

from .paste_store import PasteStore

__all__ = ["PasteStore"]
