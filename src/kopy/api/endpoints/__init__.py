# src/kopy/api/endpoints/__init__.py
"""API endpoint modules."""

from .pastes import router as pastes_router
from .system import router as system_router

__all__ = [
    "pastes_router",
    "system_router",
]
