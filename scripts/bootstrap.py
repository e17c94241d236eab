"""Utility script to initialize the database schema and the storage buckets.

Run any time after configuring your .env, e.g.:
    python scripts/bootstrap.py
    python scripts/bootstrap.py --skip-buckets
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import inspect

# Ensure the project root is on sys.path so `catalog_admin` imports resolve
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from catalog_admin.core.config import get_settings
from catalog_admin.db.models import Base
from catalog_admin.db.session import database_engine
from catalog_admin.services.storage import BUCKET_NAMES, ensure_buckets


def create_tables() -> list[str]:
    """Create all database tables defined on the metadata and return the new ones."""
    existing = set(inspect(database_engine).get_table_names())
    Base.metadata.create_all(bind=database_engine, checkfirst=True)
    return sorted(set(Base.metadata.tables) - existing)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Setup database tables and storage buckets.")
    parser.add_argument(
        "--skip-tables",
        action="store_true",
        help="Skip creating tables (useful when migrations manage the schema).",
    )
    parser.add_argument(
        "--skip-buckets",
        action="store_true",
        help="Skip creating storage bucket directories.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    # Ensure settings are loaded so environment variables are validated early.
    settings = get_settings()
    print(f"Using database: {settings.database_url}")

    if not args.skip_tables:
        print("Creating database tables (no-op if already present)...")
        created = create_tables()
        print(f"Tables ensured. New tables: {', '.join(created) or 'none'}.")
    else:
        print("Skipping table creation.")

    if not args.skip_buckets:
        print(f"Creating storage buckets under {settings.storage_root}...")
        created_dirs = ensure_buckets()
        print(f"{len(created_dirs)} of {len(BUCKET_NAMES)} buckets created.")
    else:
        print("Skipping bucket creation.")

    print("Bootstrap complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
