"""College store backed by the site's relational database.

Uses SQLAlchemy Core against the ``College`` table with camelCase column
names. Column types are derived from the CollegeRecord model so the table
definition cannot drift from the record schema.
"""

import logging
import typing

from sqlalchemy import (
    Boolean,
    Column,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from src.schemas.models import CollegeRecord
from src.store.base import CollegeStore, StoreUnavailableError

logger = logging.getLogger(__name__)

TABLE_NAME = "College"

_SQL_TYPES = {int: Integer, float: Float, bool: Boolean, str: Text}


def _column_type(annotation: object):
    args = [a for a in typing.get_args(annotation) if a is not type(None)]
    base = args[0] if args else annotation
    return _SQL_TYPES.get(base, Text)


def build_college_table(metadata: MetaData) -> Table:
    """Define the College table on ``metadata``."""
    columns = [Column("id", String, primary_key=True)]
    for attr, info in CollegeRecord.model_fields.items():
        if attr == "id":
            continue
        wire = info.alias or attr
        if attr == "slug":
            columns.append(Column(wire, String, unique=True, index=True))
        else:
            columns.append(Column(wire, _column_type(info.annotation)))
    return Table(TABLE_NAME, metadata, *columns)


class SqlCollegeStore(CollegeStore):
    """Read and patch college rows through SQLAlchemy.

    Args:
        url: SQLAlchemy database URL (e.g., "postgresql://...", "sqlite:///dev.db").
        engine: Pre-built engine; overrides ``url`` (used by tests).
    """

    def __init__(self, url: str | None = None, engine: Engine | None = None):
        super().__init__()
        if engine is None:
            if not url:
                raise ValueError("SqlCollegeStore requires a url or an engine")
            try:
                engine = create_engine(url)
            except (ArgumentError, ImportError) as exc:
                raise StoreUnavailableError(self._redact(url), str(exc)) from exc
        self.engine = engine
        self.metadata = MetaData()
        self.table = build_college_table(self.metadata)

    @staticmethod
    def _redact(url: str) -> str:
        try:
            return make_url(url).render_as_string(hide_password=True)
        except ArgumentError:
            return "<invalid url>"

    @property
    def location(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)

    def create_schema(self) -> None:
        """Create the College table if it does not exist."""
        try:
            self.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(self.location, str(exc)) from exc

    def insert_records(self, records: list[CollegeRecord]) -> int:
        """Insert records (ids must be set). Returns the number inserted."""
        rows = [r.model_dump(by_alias=True) for r in records]
        if not rows:
            return 0
        try:
            with self.engine.begin() as conn:
                conn.execute(insert(self.table), rows)
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(self.location, str(exc)) from exc
        logger.info("Inserted %d college records into %s", len(rows), self.location)
        return len(rows)

    def _read_rows(self) -> list[dict]:
        try:
            with self.engine.connect() as conn:
                result = conn.execute(select(self.table))
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(self.location, str(exc)) from exc

    def _read_row(self, slug: str) -> dict | None:
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    select(self.table).where(self.table.c.slug == slug)
                ).mappings().first()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(self.location, str(exc)) from exc
        return dict(row) if row is not None else None

    def _write_fields(self, slug: str, fields: dict[str, object]) -> bool:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    update(self.table).where(self.table.c.slug == slug).values(**fields)
                )
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(self.location, str(exc)) from exc
        return result.rowcount > 0

