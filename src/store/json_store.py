"""College store backed by a JSON export file.

Accepted layouts: a top-level list of row objects, or an object with a
``colleges`` list. Updates rewrite the file atomically (tmp file +
os.replace) and preserve the original layout.
"""

import json
import logging
import os
from pathlib import Path

from src.store.base import CollegeStore, StoreUnavailableError

logger = logging.getLogger(__name__)

# Refuse to parse exports larger than this
MAX_EXPORT_BYTES = 50 * 1024 * 1024


class JsonCollegeStore(CollegeStore):
    """Read and patch college rows in a JSON export.

    Args:
        path: Export file location.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def _load_document(self) -> tuple[object, list[dict]]:
        try:
            size = self.path.stat().st_size
        except OSError as exc:
            raise StoreUnavailableError(self.location, str(exc)) from exc
        if size > MAX_EXPORT_BYTES:
            raise StoreUnavailableError(self.location, f"export too large ({size} bytes)")

        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as exc:
            raise StoreUnavailableError(self.location, f"not valid JSON ({exc})") from exc
        except OSError as exc:
            raise StoreUnavailableError(self.location, str(exc)) from exc

        rows = document.get("colleges") if isinstance(document, dict) else document
        if not isinstance(rows, list):
            raise StoreUnavailableError(self.location, "expected a list of college rows")
        return document, [r for r in rows if isinstance(r, dict)]

    def _read_rows(self) -> list[dict]:
        _, rows = self._load_document()
        return rows

    def _read_row(self, slug: str) -> dict | None:
        _, rows = self._load_document()
        return next((r for r in rows if r.get("slug") == slug), None)

    def _write_fields(self, slug: str, fields: dict[str, object]) -> bool:
        document, rows = self._load_document()
        row = next((r for r in rows if r.get("slug") == slug), None)
        if row is None:
            return False
        row.update(fields)
        self._save_document(document)
        return True

    def _save_document(self, document: object) -> None:
        tmp_path = self.path.with_suffix(".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(str(tmp_path), str(self.path))
        except OSError as exc:
            if tmp_path.exists():
                tmp_path.unlink()
            raise StoreUnavailableError(self.location, f"write failed ({exc})") from exc
