"""Field accessor table for name-driven completeness rules.

Reference configuration lists fields by their wire (column) names. Rules
iterate those lists and read values through this table instead of calling
``getattr`` with arbitrary strings, so an unknown name is caught when the
configuration loads rather than when a record is validated.

Sub-document columns are read through the JSON parser: a column whose text
is not valid JSON reads as absent.
"""

from collections.abc import Callable
from operator import attrgetter

from src.schemas.models import SUBDOCUMENT_FIELDS, CollegeRecord
from src.validation.subdocuments import parse_subdocument

Accessor = Callable[[CollegeRecord], object]


def _scalar(attr: str) -> Accessor:
    return attrgetter(attr)


def _subdocument(attr: str) -> Accessor:
    getter = attrgetter(attr)

    def read(record: CollegeRecord) -> object:
        return parse_subdocument(getter(record))

    return read


def _build_table() -> dict[str, Accessor]:
    table: dict[str, Accessor] = {}
    for attr, info in CollegeRecord.model_fields.items():
        wire = info.alias or attr
        if wire in SUBDOCUMENT_FIELDS:
            table[wire] = _subdocument(attr)
        else:
            table[wire] = _scalar(attr)
    return table


FIELD_ACCESSORS: dict[str, Accessor] = _build_table()
"""Wire field name -> getter returning the field's effective value."""


def read_field(record: CollegeRecord, field: str) -> object:
    """Return the effective value of ``field`` on ``record``.

    Raises:
        KeyError: ``field`` is not a known column.
    """
    return FIELD_ACCESSORS[field](record)


def unknown_fields(names: set[str] | list[str]) -> list[str]:
    """Return the sorted subset of ``names`` that no accessor covers."""
    return sorted(n for n in set(names) if n not in FIELD_ACCESSORS)
