"""Runtime configuration for the College Data Quality toolkit.

Computes the current Common Data Set (CDS) reporting cycle based on the
July 1 boundary used by institutional research offices:
    - Before July 1: the cycle that started the previous calendar year
    - July 1 onward: the cycle that starts this calendar year

Also holds the batch thresholds and display caps used by the reports, and
resolves the data store location from the environment.

Example:
    October 15, 2025 -> "2025-2026"
    June 30, 2025 -> "2024-2025"
"""

import os
from datetime import date

DATABASE_URL_ENV: str = "COLLEGE_DATABASE_URL"
"""Environment variable holding the SQLAlchemy URL of the college database."""


def _compute_cds_cycle(today: date | None = None) -> str:
    """Compute the CDS reporting cycle label for a given date.

    Args:
        today: Date to compute for. Defaults to today's date.

    Returns:
        Cycle label as "YYYY-YYYY" (e.g., "2025-2026").
    """
    if today is None:
        today = date.today()
    start = today.year if today.month >= 7 else today.year - 1
    return f"{start}-{start + 1}"


def database_url() -> str | None:
    """Return the configured database URL, or None when unset or blank."""
    value = os.environ.get(DATABASE_URL_ENV, "").strip()
    return value or None


CDS_CYCLE: str = _compute_cds_cycle()
"""Current CDS reporting cycle (e.g., "2025-2026")."""

PASS_THRESHOLD: int = 80
"""Minimum score for a record to pass, and minimum mean score for a passing run."""

FAILING_DISPLAY_LIMIT: int = 50
"""Maximum number of failing records listed in the console report."""

WARNING_DISPLAY_LIMIT: int = 5
"""Warnings shown per record in the console report before truncation."""

ISSUE_SUMMARY_LIMIT: int = 20
"""Rows in the issue-category frequency table."""
