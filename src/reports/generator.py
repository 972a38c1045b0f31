"""Validation report generator.

Produces the console report, the structured JSON report, and a Markdown
rendering from a BatchResult. The console and Markdown views truncate
(failing records capped, warnings per record capped, top issue
categories only); the JSON report keeps every issue.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from src.config import (
    CDS_CYCLE,
    FAILING_DISPLAY_LIMIT,
    ISSUE_SUMMARY_LIMIT,
    WARNING_DISPLAY_LIMIT,
)
from src.paths import VALIDATION_MARKDOWN_PATH, VALIDATION_RESULTS_PATH
from src.schemas.models import BatchResult, ValidationVerdict
from src.utils import format_percent
from src.validation.batch import issue_frequencies

logger = logging.getLogger(__name__)

RULE = "=" * 80


def _atomic_write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(str(tmp_path), str(path))
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


class ValidationReportGenerator:
    """Render and persist reports for one validation run.

    Args:
        source: Store location the records came from (recorded in metadata).
        generated_at: Timestamp override for deterministic output in tests.
    """

    def __init__(self, source: str = "", generated_at: datetime | None = None):
        self.source = source
        self.generated_at = generated_at or datetime.now(timezone.utc)

    # -- Console --

    def format_console(self, result: BatchResult) -> str:
        """Build the human-readable console report."""
        lines = [RULE, "COLLEGE DATA VALIDATION REPORT", RULE, ""]
        lines.extend(self._totals(result))
        lines.append("")

        lines.extend([RULE, f"COLLEGES NEEDING ATTENTION (Score < {result.threshold}%)", RULE])
        for verdict in result.failing()[:FAILING_DISPLAY_LIMIT]:
            lines.append("")
            lines.extend(self._verdict_block(verdict))

        lines.extend(["", RULE, "ISSUE SUMMARY", RULE])
        for label, count in issue_frequencies(result, ISSUE_SUMMARY_LIMIT):
            lines.append(f"  {count:>3} - {label}")
        return "\n".join(lines)

    @staticmethod
    def _totals(result: BatchResult) -> list[str]:
        total = result.total_colleges
        lines = [
            f"Total Colleges: {total}",
            f"Passed (>={result.threshold}%): {result.passed_colleges} "
            f"({format_percent(result.passed_colleges, total)})",
            f"Failed (<{result.threshold}%): {result.failed_colleges} "
            f"({format_percent(result.failed_colleges, total)})",
            f"Average Score: {result.average_score:.1f}%",
        ]
        if result.skipped_records:
            lines.append(f"Skipped (unloadable rows): {result.skipped_records}")
        return lines

    @staticmethod
    def _verdict_block(verdict: ValidationVerdict) -> list[str]:
        lines = [
            f"{verdict.college_name} ({verdict.slug})",
            f"  Score: {verdict.score}%",
        ]
        errors = verdict.error_messages()
        warnings = verdict.warning_messages()
        if errors:
            lines.append("  ERRORS:")
            lines.extend(f"    - {e}" for e in errors)
        if warnings:
            lines.append("  WARNINGS:")
            lines.extend(f"    - {w}" for w in warnings[:WARNING_DISPLAY_LIMIT])
            if len(warnings) > WARNING_DISPLAY_LIMIT:
                lines.append(
                    f"    ... and {len(warnings) - WARNING_DISPLAY_LIMIT} more warnings"
                )
        return lines

    # -- JSON --

    def build_json(self, result: BatchResult) -> dict:
        """Build the structured report (every issue, every record)."""
        return {
            "generatedAt": self.generated_at.isoformat(),
            "cdsCycle": CDS_CYCLE,
            "source": self.source,
            "threshold": result.threshold,
            "totalColleges": result.total_colleges,
            "passedColleges": result.passed_colleges,
            "failedColleges": result.failed_colleges,
            "averageScore": round(result.average_score, 2),
            "skippedRecords": result.skipped_records,
            "issueSummary": [
                {"category": label, "count": count}
                for label, count in issue_frequencies(result)
            ],
            "results": [v.to_report_dict() for v in result.results],
        }

    def write_json(self, result: BatchResult, path: Path | None = None) -> Path:
        """Write the JSON report atomically. Returns the path written."""
        path = path or VALIDATION_RESULTS_PATH
        _atomic_write(path, json.dumps(self.build_json(result), indent=2))
        logger.info("JSON report written: %s", path)
        return path

    # -- Markdown --

    def build_markdown(self, result: BatchResult) -> str:
        """Build a Markdown rendering of the console report."""
        stamp = self.generated_at.strftime("%Y-%m-%d")
        lines = [
            f"# College Data Validation Report — {stamp}",
            "",
            f"**CDS Cycle:** {CDS_CYCLE}  ",
            f"**Source:** {self.source or 'n/a'}  ",
            f"**Result:** {'PASSED' if result.passed else 'FAILED'}",
            "",
            "## Summary",
            "",
            "| Metric | Value |",
            "|--------|------:|",
            f"| Total colleges | {result.total_colleges} |",
            f"| Passed (>={result.threshold}) | {result.passed_colleges} "
            f"({format_percent(result.passed_colleges, result.total_colleges)}) |",
            f"| Failed | {result.failed_colleges} "
            f"({format_percent(result.failed_colleges, result.total_colleges)}) |",
            f"| Average score | {result.average_score:.1f} |",
        ]
        if result.skipped_records:
            lines.append(f"| Skipped rows | {result.skipped_records} |")
        lines.append("")

        failing = result.failing()
        if failing:
            lines.append("## Colleges Needing Attention")
            lines.append("")
            for verdict in failing[:FAILING_DISPLAY_LIMIT]:
                lines.append(f"### {verdict.college_name} (`{verdict.slug}`) — {verdict.score}")
                lines.append("")
                for message in verdict.error_messages():
                    lines.append(f"- **Error:** {message}")
                warnings = verdict.warning_messages()
                for message in warnings[:WARNING_DISPLAY_LIMIT]:
                    lines.append(f"- Warning: {message}")
                if len(warnings) > WARNING_DISPLAY_LIMIT:
                    lines.append(f"- _... and {len(warnings) - WARNING_DISPLAY_LIMIT} more warnings_")
                lines.append("")

        frequencies = issue_frequencies(result, ISSUE_SUMMARY_LIMIT)
        if frequencies:
            lines.append("## Issue Summary")
            lines.append("")
            lines.append("| Issue | Count |")
            lines.append("|-------|------:|")
            for label, count in frequencies:
                lines.append(f"| {label} | {count} |")
            lines.append("")

        return "\n".join(lines)

    def write_markdown(self, result: BatchResult, path: Path | None = None) -> Path:
        """Write the Markdown report atomically. Returns the path written."""
        path = path or VALIDATION_MARKDOWN_PATH
        _atomic_write(path, self.build_markdown(result))
        logger.info("Markdown report written: %s", path)
        return path
