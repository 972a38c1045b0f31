"""College record stores.

Exports:
    CollegeStore          -- abstract read/update interface keyed by slug
    JsonCollegeStore      -- JSON export file
    SqlCollegeStore       -- relational database via SQLAlchemy
    StoreUnavailableError -- backing store cannot be reached
    open_store            -- pick a store from a path or database URL
"""

from pathlib import Path

from src.store.base import CollegeStore, StoreUnavailableError
from src.store.json_store import JsonCollegeStore
from src.store.sql_store import SqlCollegeStore


def open_store(source: str | Path) -> CollegeStore:
    """Return a store for ``source``.

    A value containing "://" is treated as a SQLAlchemy database URL;
    anything else is a path to a JSON export.
    """
    text = str(source)
    if "://" in text:
        return SqlCollegeStore(url=text)
    return JsonCollegeStore(Path(text))


__all__ = [
    "CollegeStore",
    "JsonCollegeStore",
    "SqlCollegeStore",
    "StoreUnavailableError",
    "open_store",
]
