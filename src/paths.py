"""Centralized path constants for the College Data Quality toolkit.

Every file and directory path used by the validator, audits, and fixup
scripts is defined here as a module-level constant. Source files import
from this module instead of constructing ad-hoc ``Path(...)`` literals.

Design rules:
  1. This module imports ONLY ``pathlib.Path`` -- no project imports, no
     config imports, no runtime validation.  This keeps the module
     importable at any point without circular-import chains.
  2. Constants are grouped by purpose (config, data, outputs, scripts).
  3. No path existence checks at import time.  Callers create directories
     as needed (``mkdir(parents=True, exist_ok=True)``).
"""

from pathlib import Path

# ---------------------------------------------------------------------------
# -- Project Root --
# ---------------------------------------------------------------------------

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
"""Absolute path to the project root directory (one level above ``src/``)."""

# ---------------------------------------------------------------------------
# -- Config Paths --
# ---------------------------------------------------------------------------

CONFIG_DIR: Path = PROJECT_ROOT / "config"
"""Directory containing validator configuration files."""

REFERENCE_DATA_PATH: Path = CONFIG_DIR / "reference_data.json"
"""Known-good values, exception sets, bound tables, and field lists."""

# ---------------------------------------------------------------------------
# -- Data Paths --
# ---------------------------------------------------------------------------

DATA_DIR: Path = PROJECT_ROOT / "data"
"""Top-level data directory for college exports."""

COLLEGES_EXPORT_PATH: Path = DATA_DIR / "colleges.json"
"""JSON export of the college table (fallback store when no database URL is set)."""

# ---------------------------------------------------------------------------
# -- Output Paths --
# ---------------------------------------------------------------------------

OUTPUTS_DIR: Path = PROJECT_ROOT / "outputs"
"""Top-level output directory for validation reports."""

VALIDATION_RESULTS_PATH: Path = OUTPUTS_DIR / "college-validation-results.json"
"""Structured JSON report of the most recent validation run."""

VALIDATION_MARKDOWN_PATH: Path = OUTPUTS_DIR / "college-validation-report.md"
"""Markdown rendering of the most recent validation run."""

# ---------------------------------------------------------------------------
# -- Scripts Paths --
# ---------------------------------------------------------------------------

SCRIPTS_DIR: Path = PROJECT_ROOT / "scripts"
"""Maintenance scripts that patch records through the store."""
