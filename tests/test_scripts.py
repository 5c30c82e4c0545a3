"""Tests for maintenance scripts."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, inspect

from kopy.core.settings import settings
from kopy.scripts import ensure_db
from kopy.scripts.ensure_db import normalize_to_psycopg, split_db_url
from kopy.scripts.migrate import run_upgrade_head
from kopy.scripts.purge import run_purge


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgresql+psycopg://u:p@db:5432/kopy", "postgresql://u:p@db:5432/kopy"),
        ("'postgresql://u@db/kopy'", "postgresql://u@db/kopy"),
        ("  postgres://db/kopy  ", "postgres://db/kopy"),
    ],
)
def test_normalize_to_psycopg(raw: str, expected: str) -> None:
    assert normalize_to_psycopg(raw) == expected


@pytest.mark.parametrize("raw", ["", "sqlite:///./kopy.db"])
def test_normalize_rejects_non_postgres(raw: str) -> None:
    with pytest.raises(ValueError):
        normalize_to_psycopg(raw)


def test_split_db_url_targets_maintenance_database() -> None:
    admin_url, target = split_db_url("postgresql+psycopg://u:p@db:5432/kopy")
    assert admin_url == "postgresql://u:p@db:5432/postgres"
    assert target == "kopy"


def test_run_purge(store, make_paste, clock, capsys) -> None:
    store.insert(make_paste("a" * 32, created_at=clock(), ttl_minutes=10))
    clock.advance(minutes=30)

    assert run_purge(store) == 1
    assert "removed 1 expired paste(s)" in capsys.readouterr().out


def test_drop_tables_also_clears_migration_marker(monkeypatch, capsys) -> None:
    connect = MagicMock()
    monkeypatch.setattr(ensure_db.psycopg, "connect", connect)

    ensure_db.drop_pastes_table("postgresql://u@db/kopy")

    cursor = connect.return_value.__enter__.return_value.cursor.return_value.__enter__.return_value
    statements = [c.args[0] for c in cursor.execute.call_args_list]
    assert statements == ["DROP TABLE IF EXISTS pastes", "DROP TABLE IF EXISTS alembic_version"]
    assert "alembic_version" in capsys.readouterr().out


def test_migrations_create_pastes_table(tmp_path, monkeypatch) -> None:
    db_url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setattr(settings, "database_url", db_url)
    monkeypatch.setattr(settings, "use_testing_database", False)

    run_upgrade_head()

    engine = create_engine(db_url)
    try:
        tables = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    assert {"pastes", "alembic_version"} <= tables
