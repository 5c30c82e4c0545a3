"""HTTP API for Kopy."""

from .endpoints import pastes_router, system_router

__all__ = ["pastes_router", "system_router"]
