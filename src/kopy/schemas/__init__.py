"""
Pydantic schemas for API responses.

These schemas define the JSON contract consumed by presentation clients.
"""

from .paste import ErrorResponse, PasteCreated, PasteOut, PasteUnlock

__all__ = [
    "ErrorResponse",
    "PasteCreated",
    "PasteOut",
    "PasteUnlock",
]
