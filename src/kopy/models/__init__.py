"""SQLAlchemy models for the Kopy application."""

from .paste import Paste

__all__ = ["Paste"]
