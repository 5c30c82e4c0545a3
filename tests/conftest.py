# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

os.environ.setdefault("DATABASE_URL", "sqlite://")

from kopy.api.dependencies import get_paste_service, get_paste_store
from kopy.db.session import Base, create_db_engine, create_tables
from kopy.main import app as fastapi_app
from kopy.models import Paste
from kopy.repositories.paste_store import PasteStore
from kopy.services.paste_service import PasteService

TEST_DB_URL = "sqlite://"
START_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class FrozenClock:
    """Controllable stand-in for ``utcnow``."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_db_engine(TEST_DB_URL)
    create_tables(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(START_TIME)


@pytest.fixture()
def store(engine: Engine, clock: FrozenClock) -> Iterator[PasteStore]:
    try:
        yield PasteStore(engine, clock=clock)
    finally:
        # Ensure each test sees a clean database.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def paste_service(store: PasteStore, clock: FrozenClock) -> PasteService:
    return PasteService(store, clock=clock)


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_store_dependencies(
    app: FastAPI,
    store: PasteStore,
    paste_service: PasteService,
) -> Iterator[None]:
    app.dependency_overrides[get_paste_store] = lambda: store
    app.dependency_overrides[get_paste_service] = lambda: paste_service
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_paste_store, None)
        app.dependency_overrides.pop(get_paste_service, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_paste(
    paste_id: str,
    *,
    created_at: datetime = START_TIME,
    ttl_minutes: int = 10,
    password_hash: str | None = None,
) -> Paste:
    return Paste(
        id=paste_id,
        encrypted_content="b3BhcXVl",
        sender_name=None,
        password_hash=password_hash,
        content_type="text",
        created_at=created_at,
        expires_at=created_at + timedelta(minutes=ttl_minutes),
    )


@pytest.fixture()
def make_paste() -> Callable[..., Paste]:
    """Return a builder for unsaved paste rows with placeholder ciphertext."""
    return _make_paste
