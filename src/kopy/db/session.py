"""Database engine configuration."""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

_MEMORY_SQLITE_URLS = frozenset({"sqlite://", "sqlite:///:memory:"})


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def create_db_engine(
    url: str,
    *,
    echo: bool = False,
    pool_timeout: float | None = None,
) -> Engine:
    """Build an engine for the given URL.

    SQLite engines get ``check_same_thread`` disabled so FastAPI's threadpool
    can share connections, and in-memory databases are pinned to a single
    connection. Other backends get a bounded pool wait. Bound parameters
    never appear in exception messages or echo output.
    """
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in _MEMORY_SQLITE_URLS:
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, hide_parameters=True, **kwargs)

    options: dict[str, Any] = {"pool_pre_ping": True, "echo": echo, "hide_parameters": True}
    if pool_timeout is not None:
        options["pool_timeout"] = pool_timeout
    return create_engine(url, **options)


def create_tables(engine: Engine) -> None:
    """Create all database tables."""
    # Ensure model modules are imported so that metadata is populated.
    import kopy.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """Drop all database tables."""
    Base.metadata.drop_all(bind=engine)
