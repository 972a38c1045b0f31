"""College Data Validator — command-line entry point.

Pipeline: Load reference data -> Read store -> Validate -> Aggregate -> Report

Usage:
    python -m src.main                                  # Validate all, console + JSON report
    python -m src.main --source sqlite:///colleges.db   # Read from a database
    python -m src.main --markdown                       # Also write the Markdown report
    python -m src.main --slug harvard-university        # Validate one college
    python -m src.main --audit fields                   # Important-field gap census
    python -m src.main --audit early-admission          # Verify early-admission policies
"""

import argparse
import logging
import sys
from pathlib import Path

from src.audits.early_admission import (
    format_ea_groups,
    format_verification,
    group_early_action_types,
    verify_policies,
)
from src.audits.field_gaps import (
    format_field_gaps,
    format_incomplete_race,
    format_missing_sat,
    important_field_gaps,
    incomplete_race_data,
    missing_sat_scores,
)
from src.config import PASS_THRESHOLD, database_url
from src.paths import COLLEGES_EXPORT_PATH
from src.reports.generator import ValidationReportGenerator
from src.schemas.models import ReferenceData
from src.store import CollegeStore, StoreUnavailableError, open_store
from src.validation import (
    RecordValidator,
    ReferenceDataError,
    load_reference_data,
    run_batch,
)

logger = logging.getLogger(__name__)

AUDITS = ("fields", "scores", "race", "early-admission", "ea-types")


def resolve_source(source: str | None) -> str:
    """Pick the store location: flag, then environment, then bundled export."""
    return source or database_url() or str(COLLEGES_EXPORT_PATH)


def validate_all(
    store: CollegeStore,
    reference: ReferenceData,
    threshold: int,
    report_path: Path | None = None,
    markdown: bool = False,
) -> int:
    """Validate every stored record, print and write reports. Returns exit code."""
    records = store.fetch_all()
    validator = RecordValidator(reference)
    result = run_batch(records, validator, threshold=threshold,
                       skipped_records=store.skipped_count)

    reporter = ValidationReportGenerator(source=store.location)
    print(reporter.format_console(result))
    try:
        json_path = reporter.write_json(result, report_path)
        print(f"\nDetailed results saved to: {json_path}")
        if markdown:
            md_path = reporter.write_markdown(result, json_path.with_suffix(".md"))
            print(f"Markdown report saved to: {md_path}")
    except OSError as exc:
        logger.error("Report could not be written: %s", exc)
        print(f"\nVALIDATION FAILED: report could not be written ({exc})")
        return 1

    print()
    if result.passed:
        print("VALIDATION PASSED")
        return 0
    print(f"VALIDATION FAILED: Average score below {threshold}%")
    return 1


def validate_one(store: CollegeStore, reference: ReferenceData, slug: str, threshold: int) -> int:
    """Validate a single record by slug and print its verdict."""
    record = store.get(slug)
    if record is None:
        print(f"College not found: {slug}")
        return 1
    verdict = RecordValidator(reference).validate(record)
    print(f"{verdict.college_name} ({verdict.slug})")
    print(f"  Score: {verdict.score}%")
    for tag, issues in (("ERROR", verdict.errors), ("WARN ", verdict.warnings)):
        for issue in issues:
            suffix = f" (-{issue.deduction})" if issue.deduction else ""
            print(f"  [{tag}] {issue.message}{suffix}")
    return 0 if verdict.passed(threshold) else 1


def run_audit(name: str, store: CollegeStore, reference: ReferenceData) -> int:
    """Run one dataset audit and print its findings. Returns exit code."""
    if name == "early-admission":
        outcome = verify_policies(store, reference.early_admission_policies)
        print(format_verification(outcome))
        return 0 if outcome.passed else 1

    records = store.fetch_all()
    if name == "fields":
        us_count = sum(1 for r in records if r.slug not in reference.exception_sets.international)
        print(format_field_gaps(important_field_gaps(records, reference), us_count))
    elif name == "scores":
        print(format_missing_sat(missing_sat_scores(records, reference)))
    elif name == "race":
        print(format_incomplete_race(incomplete_race_data(records)))
    elif name == "ea-types":
        print(format_ea_groups(group_early_action_types(records)))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    parser = argparse.ArgumentParser(
        description="College Data Validator — rule-based quality scoring for college records"
    )
    parser.add_argument("--source", type=str,
                        help="JSON export path or database URL (default: $COLLEGE_DATABASE_URL, "
                             "then the bundled export)")
    parser.add_argument("--reference", type=Path, help="Reference data JSON file")
    parser.add_argument("--report-path", type=Path, help="Where to write the JSON report")
    parser.add_argument("--markdown", action="store_true",
                        help="Also write a Markdown report next to the JSON report")
    parser.add_argument("--threshold", type=int, default=PASS_THRESHOLD,
                        help=f"Minimum passing score (default: {PASS_THRESHOLD})")
    parser.add_argument("--slug", type=str, help="Validate a single college by slug")
    parser.add_argument("--audit", choices=AUDITS, help="Run a dataset audit instead of validation")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        reference = load_reference_data(args.reference)
        store = open_store(resolve_source(args.source))
        if args.audit:
            return run_audit(args.audit, store, reference)
        if args.slug:
            return validate_one(store, reference, args.slug, args.threshold)
        return validate_all(store, reference, args.threshold,
                            report_path=args.report_path, markdown=args.markdown)
    except (ReferenceDataError, StoreUnavailableError) as exc:
        logger.error("%s", exc)
        print(f"\nValidation failed: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
