"""Data store interface for college records.

Stores expose an unordered bulk read, a lookup by slug, and a partial
update by slug. A column whose value cannot be coerced loads as None and
is reported against its record. A row that still cannot be coerced is
skipped and counted. An unreachable backing store raises
StoreUnavailableError, which is the only condition allowed to abort a
validation run.
"""

import logging
from abc import ABC, abstractmethod

from pydantic import ValidationError

from src.schemas.models import CollegeRecord

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """Raised when the backing file or database cannot be read or written.

    Attributes:
        location: Path or URL of the store (credentials redacted).
    """

    def __init__(self, location: str, reason: str):
        self.location = location
        super().__init__(f"College store unavailable at {location}: {reason}")


WRITABLE_FIELDS: frozenset[str] = frozenset(
    info.alias or attr
    for attr, info in CollegeRecord.model_fields.items()
    if attr not in ("id", "slug")
)
"""Wire names that update() may change (identity columns excluded)."""


class CollegeStore(ABC):
    """Abstract base class for college record stores."""

    def __init__(self) -> None:
        self.skipped_count = 0

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location used in logs and errors."""
        ...

    @abstractmethod
    def _read_rows(self) -> list[dict]:
        """Return every stored row as a wire-named dict."""
        ...

    @abstractmethod
    def _read_row(self, slug: str) -> dict | None:
        """Return the row for ``slug``, or None."""
        ...

    @abstractmethod
    def _write_fields(self, slug: str, fields: dict[str, object]) -> bool:
        """Persist ``fields`` on the row for ``slug``. Return False if absent."""
        ...

    def fetch_all(self) -> list[CollegeRecord]:
        """Load every record. Rows that cannot be coerced at all are skipped and counted.

        Raises:
            StoreUnavailableError: The backing store cannot be read.
        """
        rows = self._read_rows()
        records: list[CollegeRecord] = []
        skipped = 0
        for row in rows:
            record = self._coerce(row)
            if record is None:
                skipped += 1
            else:
                records.append(record)
        self.skipped_count = skipped
        logger.info(
            "Loaded %d college records from %s (%d skipped)",
            len(records), self.location, skipped,
        )
        return records

    def get(self, slug: str) -> CollegeRecord | None:
        """Load one record by slug, or None if absent or uncoercible."""
        row = self._read_row(slug)
        if row is None:
            return None
        return self._coerce(row)

    def update(self, slug: str, fields: dict[str, object]) -> bool:
        """Update wire-named ``fields`` on the record for ``slug``.

        Returns:
            True if a record was updated, False if the slug is not stored.

        Raises:
            ValueError: A field name is unknown or not writable.
            StoreUnavailableError: The backing store cannot be written.
        """
        unknown = sorted(set(fields) - WRITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(unknown)}")
        updated = self._write_fields(slug, fields)
        if updated:
            logger.info("Updated %s: %s", slug, ", ".join(sorted(fields)))
        else:
            logger.warning("No record with slug %s in %s", slug, self.location)
        return updated

    @staticmethod
    def _coerce(row: dict) -> CollegeRecord | None:
        try:
            record = CollegeRecord.model_validate(row)
        except ValidationError as exc:
            logger.warning(
                "Skipping college row %s: %d invalid field(s)",
                row.get("slug", "<no slug>"), exc.error_count(),
            )
            return None
        if record.invalid_fields:
            logger.warning(
                "College row %s: unusable value(s) loaded as null: %s",
                record.slug, ", ".join(record.invalid_fields),
            )
        return record
