"""Batch aggregation over a collection of college records.

Runs the validator over every record, sorts verdicts worst first, and
computes the pass/fail split and mean score. Also derives the
issue-category frequency table used by the reports.
"""

import logging
from collections import Counter
from collections.abc import Iterable

from src.config import PASS_THRESHOLD
from src.schemas.models import BatchResult, CollegeRecord, ValidationVerdict
from src.validation.validator import RecordValidator

logger = logging.getLogger(__name__)


def aggregate(
    verdicts: Iterable[ValidationVerdict],
    threshold: int = PASS_THRESHOLD,
    skipped_records: int = 0,
) -> BatchResult:
    """Combine per-record verdicts into a BatchResult.

    Verdicts are sorted by ascending score, ties broken by slug, so the
    output order does not depend on store read order.

    Args:
        verdicts: One verdict per record.
        threshold: Minimum passing score.
        skipped_records: Rows the store could not load, carried into the result.
    """
    results = sorted(verdicts, key=lambda v: (v.score, v.slug or ""))
    total = len(results)
    passed = sum(1 for v in results if v.passed(threshold))
    average = sum(v.score for v in results) / total if total else 0.0

    return BatchResult(
        total_colleges=total,
        passed_colleges=passed,
        failed_colleges=total - passed,
        average_score=average,
        threshold=threshold,
        results=tuple(results),
        skipped_records=skipped_records,
    )


def run_batch(
    records: Iterable[CollegeRecord],
    validator: RecordValidator,
    threshold: int = PASS_THRESHOLD,
    skipped_records: int = 0,
) -> BatchResult:
    """Validate every record and aggregate the verdicts.

    Per-record evaluation is independent; a problem in one record never
    stops the batch.
    """
    verdicts = [validator.validate(record) for record in records]
    result = aggregate(verdicts, threshold=threshold, skipped_records=skipped_records)
    logger.info(
        "Validated %d colleges: %d passed, %d failed, mean score %.1f",
        result.total_colleges,
        result.passed_colleges,
        result.failed_colleges,
        result.average_score,
    )
    return result


def issue_frequencies(result: BatchResult, limit: int | None = None) -> list[tuple[str, int]]:
    """Count issues per summary label across all verdicts.

    Returns:
        (label, count) pairs sorted by count descending, then label.
    """
    counts: Counter[str] = Counter()
    for verdict in result.results:
        for issue in verdict.issues:
            counts[issue.summary_label] += 1
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return ranked[:limit] if limit is not None else ranked
