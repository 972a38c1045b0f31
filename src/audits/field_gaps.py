"""Dataset-wide completeness audits.

Answers "which fields are we missing, and where" across the whole
collection rather than per record:
- important-field gap census (US colleges only)
- colleges with no SAT score data, most selective first
- colleges whose race/ethnicity map lacks a canonical group

International colleges are excluded from the first two audits because
they are not expected to report CDS fields.
"""

import logging

from src.schemas.models import CollegeRecord, ReferenceData
from src.utils import format_number, is_blank
from src.validation.accessors import read_field
from src.validation.subdocuments import missing_race_groups, parse_subdocument

logger = logging.getLogger(__name__)


def _us_records(records: list[CollegeRecord], reference: ReferenceData) -> list[CollegeRecord]:
    international = reference.exception_sets.international
    return [r for r in records if r.slug not in international]


def important_field_gaps(
    records: list[CollegeRecord], reference: ReferenceData
) -> list[tuple[str, int]]:
    """Count US colleges missing each important field.

    Returns:
        (field, missing_count) pairs for fields missing at least once,
        sorted by count descending then field name.
    """
    us = _us_records(records, reference)
    gaps = []
    for field in reference.important_fields:
        count = sum(1 for r in us if is_blank(read_field(r, field)))
        if count:
            gaps.append((field, count))
    gaps.sort(key=lambda kv: (-kv[1], kv[0]))
    logger.info("Field gap census: %d US colleges, %d fields with gaps", len(us), len(gaps))
    return gaps


def missing_sat_scores(
    records: list[CollegeRecord], reference: ReferenceData
) -> list[CollegeRecord]:
    """US colleges with no usable SAT data, lowest acceptance rate first."""
    missing = [
        r for r in _us_records(records, reference)
        if is_blank(read_field(r, "satScores"))
    ]
    missing.sort(key=lambda r: (
        r.students_admitted_percent is None,
        r.students_admitted_percent or 0.0,
        r.slug or "",
    ))
    return missing


def incomplete_race_data(records: list[CollegeRecord]) -> list[tuple[CollegeRecord, list[str]]]:
    """Colleges with race/ethnicity data that lacks a canonical group.

    Colleges with no race data at all are not listed (that gap shows up
    in the field census). An unparseable map is reported as missing every
    group.
    """
    incomplete = []
    for record in records:
        if is_blank(record.race_ethnicity):
            continue
        parsed = parse_subdocument(record.race_ethnicity)
        if not isinstance(parsed, dict):
            incomplete.append((record, ["unparseable"]))
            continue
        missing = missing_race_groups(parsed)
        if missing:
            incomplete.append((record, missing))
    return incomplete


def format_field_gaps(gaps: list[tuple[str, int]], us_count: int) -> str:
    lines = [f"US colleges: {us_count}", "", "Missing important fields (US colleges):"]
    if not gaps:
        lines.append("  (none)")
    lines.extend(f"  {count:>3} - {field}" for field, count in gaps)
    return "\n".join(lines)


def format_missing_sat(records: list[CollegeRecord]) -> str:
    lines = [f"US colleges missing SAT scores: {len(records)}"]
    for r in records:
        rate = (
            f"{format_number(r.students_admitted_percent)}%"
            if r.students_admitted_percent is not None else "n/a"
        )
        lines.append(f"  - {r.slug} | {rate} | {r.test_policy or 'n/a'}")
    return "\n".join(lines)


def format_incomplete_race(entries: list[tuple[CollegeRecord, list[str]]]) -> str:
    lines = [f"Colleges with incomplete race data: {len(entries)}"]
    for record, missing in entries:
        lines.append(f"  - {record.slug} | {record.location or 'n/a'}")
        lines.append(f"    Missing: {', '.join(missing)}")
        lines.append(f"    Data: {record.race_ethnicity}")
    return "\n".join(lines)
