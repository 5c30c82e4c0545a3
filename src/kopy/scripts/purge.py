"""Delete expired pastes from the configured database.

Reads already purge lazily; run this from cron to reclaim space on quiet
deployments.
"""
from __future__ import annotations

import argparse
import sys

from kopy.core.settings import settings
from kopy.db.session import create_db_engine
from kopy.errors import StoreError
from kopy.repositories.paste_store import PasteStore


def run_purge(store: PasteStore) -> int:
    """Purge once and return the number of removed pastes."""
    removed = store.purge_expired()
    print(f"[purge] removed {removed} expired paste(s)")
    return removed


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Delete expired pastes")
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args(argv)

    store = PasteStore(create_db_engine(args.url or settings.database_url_sync))
    try:
        run_purge(store)
    except StoreError as exc:
        print(f"[purge] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.dispose()


if __name__ == "__main__":
    main()
