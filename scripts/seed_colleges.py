#!/usr/bin/env python3
"""Load a college JSON export into a SQL database.

Creates the College table if needed and inserts every coercible row.
Rows without an id get the slug as their id.

Usage:
    python scripts/seed_colleges.py --database-url sqlite:///colleges.db
    python scripts/seed_colleges.py --export data/colleges.json --database-url postgresql://...
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path for src imports
_SCRIPT_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _SCRIPT_DIR.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from src.config import database_url  # noqa: E402
from src.paths import COLLEGES_EXPORT_PATH  # noqa: E402
from src.store import JsonCollegeStore, SqlCollegeStore, StoreUnavailableError  # noqa: E402

logger = logging.getLogger(__name__)


def seed(export_path: Path, url: str) -> int:
    """Copy every record in ``export_path`` into the database at ``url``."""
    source = JsonCollegeStore(export_path)
    records = [
        r if r.id is not None else r.model_copy(update={"id": r.slug})
        for r in source.fetch_all()
    ]
    target = SqlCollegeStore(url=url)
    target.create_schema()
    return target.insert_records(records)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed a college database from a JSON export")
    parser.add_argument("--export", type=Path, default=COLLEGES_EXPORT_PATH,
                        help="JSON export to load")
    parser.add_argument("--database-url", type=str,
                        help="Target SQLAlchemy URL (default: $COLLEGE_DATABASE_URL)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    url = args.database_url or database_url()
    if not url:
        print("ERROR: pass --database-url or set COLLEGE_DATABASE_URL")
        return 1

    try:
        count = seed(args.export, url)
    except StoreUnavailableError as exc:
        print(f"ERROR: {exc}")
        return 1
    print(f"Seeded {count} colleges")
    return 0


if __name__ == "__main__":
    sys.exit(main())
