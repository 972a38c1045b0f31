#!/usr/bin/env python3
"""
Data Integrity Validator for the College Data Validator

Validates the reference configuration before it is trusted by a run:
- config/reference_data.json parses as JSON
- ReferenceData (Pydantic schema validation)
- field lists name real college record fields
- required and important field lists do not overlap
- every numeric range and sub-document bound has min <= max
- known-value slugs are not also international (they would never be checked)
- known-value slugs exist in the college export (when the export is present)
"""

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from src.paths import COLLEGES_EXPORT_PATH, REFERENCE_DATA_PATH
from src.schemas.models import ReferenceData
from src.validation.accessors import unknown_fields


class ValidationReport:
    """Tracks validation results."""

    def __init__(self):
        self.checks = []
        self.failed_checks = []

    def add_check(self, name: str, passed: bool, details: str = ""):
        """Add a validation check result."""
        status = "PASS" if passed else "FAIL"
        self.checks.append({
            "name": name,
            "status": status,
            "details": details
        })
        if not passed:
            self.failed_checks.append(name)

    def print_report(self):
        """Print formatted validation report."""
        print("\n" + "="*80)
        print("COLLEGE DATA VALIDATOR - REFERENCE DATA INTEGRITY REPORT")
        print("="*80 + "\n")

        for check in self.checks:
            status_symbol = "[+]" if check["status"] == "PASS" else "[X]"
            print(f"{status_symbol} [{check['status']}] {check['name']}")
            if check["details"]:
                for line in check["details"].split("\n"):
                    if line.strip():
                        print(f"    {line}")
            print()

        print("="*80)
        print(f"SUMMARY: {len(self.checks)} checks, {len(self.failed_checks)} failed")
        print("="*80 + "\n")

        return len(self.failed_checks) == 0


def check_json_validity(report: ValidationReport, reference_path: Path) -> dict | None:
    """Check 1: The reference file parses as a JSON object."""
    try:
        with open(reference_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        report.add_check("JSON Validity", False, f"{reference_path}: {e}")
        return None

    if not isinstance(data, dict):
        report.add_check("JSON Validity", False, f"{reference_path}: top level is not an object")
        return None

    report.add_check("JSON Validity", True, f"{reference_path.name} is valid JSON")
    return data


def check_schema_validation(report: ValidationReport, data: dict) -> ReferenceData | None:
    """Check 2: Validate the document against the ReferenceData Pydantic schema."""
    try:
        reference = ReferenceData.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()[:10]
        ]
        report.add_check("Reference Schema Validation", False, "\n".join(errors))
        return None

    report.add_check(
        "Reference Schema Validation", True,
        f"{len(reference.known_values)} known-value entries, "
        f"{len(reference.numeric_ranges)} numeric ranges, "
        f"{len(reference.early_admission_policies)} early-admission policies",
    )
    return reference


def check_field_names(report: ValidationReport, data: dict):
    """Check 3: Every field list names a real college record field."""
    elite = data.get("elite_fields", {})
    names = set(data.get("required_fields", []))
    names |= set(data.get("important_fields", []))
    names |= set(data.get("international_basic_fields", []))
    for group in ("early_decision", "early_action", "always"):
        names |= set(elite.get(group, []))
    names |= {r.get("field") for r in data.get("numeric_ranges", []) if r.get("field")}

    unknown = unknown_fields(names)
    if unknown:
        details = "Unknown record fields:\n" + "\n".join(f"  - {f}" for f in unknown)
    else:
        details = f"All {len(names)} referenced fields exist"
    report.add_check("Field Name References", not unknown, details)


def check_field_list_overlap(report: ValidationReport, data: dict):
    """Check 4: Required and important field lists are disjoint."""
    overlap = set(data.get("required_fields", [])) & set(data.get("important_fields", []))
    if overlap:
        details = "Fields listed as both required and important:\n" + "\n".join(
            f"  - {f}" for f in sorted(overlap)
        )
    else:
        details = "Required and important field lists are disjoint"
    report.add_check("Field List Overlap", not overlap, details)


def check_range_ordering(report: ValidationReport, data: dict):
    """Check 5: Every numeric range and sub-document bound has min <= max."""
    errors = []
    for entry in data.get("numeric_ranges", []):
        lo, hi = entry.get("min"), entry.get("max")
        if lo is not None and hi is not None and lo > hi:
            errors.append(f"numeric_ranges.{entry.get('field')}: min {lo} > max {hi}")

    for name, bound in data.get("subdocument_bounds", {}).items():
        if not isinstance(bound, dict):
            continue
        lo, hi = bound.get("min"), bound.get("max")
        if lo is not None and hi is not None and lo > hi:
            errors.append(f"subdocument_bounds.{name}: min {lo} > max {hi}")

    details = "\n".join(errors) if errors else "All ranges are ordered"
    report.add_check("Range Ordering", not errors, details)


def check_known_values_reachable(report: ValidationReport, data: dict):
    """Check 6: Known-value slugs are not in the international set.

    International colleges return before the drift rules run, so a known
    value for one of them would never be compared.
    """
    known = set(data.get("known_values", {}))
    international = set(data.get("exception_sets", {}).get("international", []))
    unreachable = known & international

    if unreachable:
        details = "Known-value slugs that are also international:\n" + "\n".join(
            f"  - {s}" for s in sorted(unreachable)
        )
    else:
        details = f"All {len(known)} known-value slugs are reachable"
    report.add_check("Known Values Reachable", not unreachable, details)


def check_known_values_in_export(report: ValidationReport, data: dict, export_path: Path):
    """Check 7: Known-value slugs exist in the college export, if present."""
    if not export_path.exists():
        report.add_check("Known Values In Export", True,
                         f"{export_path} not found, check skipped")
        return

    try:
        with open(export_path, 'r', encoding='utf-8') as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        report.add_check("Known Values In Export", False, f"{export_path}: {e}")
        return

    rows = document.get("colleges", []) if isinstance(document, dict) else document
    exported = {r.get("slug") for r in rows if isinstance(r, dict)}
    known = set(data.get("known_values", {}))
    missing = sorted(known - exported)

    # Missing slugs are reported but do not fail: exports are often partial.
    if missing:
        details = (
            f"{len(known) - len(missing)}/{len(known)} known-value slugs found in export\n"
            "Not in export:\n" + "\n".join(f"  - {s}" for s in missing)
        )
    else:
        details = f"All {len(known)} known-value slugs found in export"
    report.add_check("Known Values In Export", True, details)


def run_checks(reference_path: Path, export_path: Path) -> ValidationReport:
    """Run every check and return the populated report."""
    report = ValidationReport()
    data = check_json_validity(report, reference_path)
    if data is None:
        return report

    check_schema_validation(report, data)
    check_field_names(report, data)
    check_field_list_overlap(report, data)
    check_range_ordering(report, data)
    check_known_values_reachable(report, data)
    check_known_values_in_export(report, data, export_path)
    return report


def main(argv: list[str] | None = None) -> int:
    """Run all validation checks."""
    parser = argparse.ArgumentParser(description="Validate reference data integrity")
    parser.add_argument("--reference", type=Path, default=REFERENCE_DATA_PATH,
                        help="Reference data JSON file")
    parser.add_argument("--export", type=Path, default=COLLEGES_EXPORT_PATH,
                        help="College export used to cross-check known-value slugs")
    args = parser.parse_args(argv)

    report = run_checks(args.reference, args.export)
    all_passed = report.print_report()

    if all_passed:
        print("All integrity checks passed!")
        return 0
    print(f"FAILED: {len(report.failed_checks)} check(s) failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
