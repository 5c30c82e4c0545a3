# src/kopy/scripts/migrate.py
from __future__ import annotations

import os

from alembic import command
from alembic.config import Config

from kopy.core.settings import settings

_PROJECT_ROOT = os.path.join(os.path.dirname(__file__), "..", "..", "..")


def run_upgrade_head() -> None:
    """Apply every pending migration to the configured database."""
    script_location = os.path.abspath(os.path.join(_PROJECT_ROOT, "migrations"))
    cfg = Config()
    cfg.set_main_option("script_location", script_location)
    # Inject sync URL for Alembic (psycopg driver)
    cfg.set_main_option("sqlalchemy.url", settings.database_url_sync)
    command.upgrade(cfg, "head")


if __name__ == "__main__":
    run_upgrade_head()
