"""Expiration-aware storage for paste records."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import delete, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from kopy.db.session import create_tables
from kopy.db.time import utcnow
from kopy.errors import StoreError, StoreUnavailable
from kopy.models.paste import Paste

__all__ = ["PasteStore"]

logger = logging.getLogger(__name__)


class PasteStore:
    """Sole owner of the engine and connection pool backing paste records.

    Records are only ever inserted and deleted. Reads purge expired rows in
    the same transaction, so no separate scheduler is required.
    """

    def __init__(self, engine: Engine, *, clock: Callable[[], datetime] = utcnow) -> None:
        """Initialize the store with an engine it will own exclusively."""
        self._engine = engine
        self._clock = clock
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """Yield a session and commit it, translating driver failures."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except (PoolTimeoutError, OperationalError) as exc:
            session.rollback()
            logger.error(
                "Paste store unavailable: %s: %s",
                type(exc).__name__,
                getattr(exc, "orig", exc),
            )
            raise StoreUnavailable() from exc
        except IntegrityError as exc:
            session.rollback()
            logger.error(
                "Paste store constraint violation: %s: %s", type(exc).__name__, exc.orig
            )
            raise StoreError("Failed to save paste to database") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Paste store error: %s", type(exc).__name__)
            raise StoreError() from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self) -> None:
        """Create the pastes table if it does not exist."""
        create_tables(self._engine)

    def insert(self, paste: Paste) -> None:
        """Persist a new paste.

        Raises:
            StoreError: On constraint violations (duplicate id) or driver errors.
            StoreUnavailable: When the backend cannot be reached in time.
        """
        with self._transaction() as session:
            session.add(paste)
        logger.debug("Stored paste %s", paste.id)

    def get_if_valid(self, paste_id: str, now: datetime | None = None) -> Paste | None:
        """Return the paste if it exists and has not expired.

        Expired rows (``expires_at <= now``) are purged first, in the same
        transaction and against the same ``now``. Missing and expired pastes
        both yield None.
        """
        now = now or self._clock()
        with self._transaction() as session:
            self._delete_expired(session, now)
            paste = session.scalars(
                select(Paste).where(Paste.id == paste_id, Paste.expires_at > now)
            ).first()
        return paste

    def purge_expired(self, now: datetime | None = None) -> int:
        """Delete every paste whose deadline has passed.

        Returns:
            Number of rows removed. Repeating the call is harmless.
        """
        now = now or self._clock()
        with self._transaction() as session:
            removed = self._delete_expired(session, now)
        if removed:
            logger.info("Purged %d expired pastes", removed)
        return removed

    @staticmethod
    def _delete_expired(session: Session, now: datetime) -> int:
        result = session.execute(
            delete(Paste)
            .where(Paste.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def test_connection(self) -> bool:
        """Liveness probe; never raises."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.error("Database connection test failed: %s", exc)
            return False
        return True

    def dispose(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()
