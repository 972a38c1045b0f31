"""College record validation engine.

Exports:
    RecordValidator     -- ordered rule groups producing a scored verdict
    validate            -- one-shot convenience wrapper
    run_batch           -- validate a collection and aggregate
    aggregate           -- combine existing verdicts into a BatchResult
    issue_frequencies   -- issue-category frequency table
    load_reference_data -- load reference configuration from JSON
    ReferenceDataError  -- invalid reference configuration
"""

from src.validation.batch import aggregate, issue_frequencies, run_batch
from src.validation.reference import (
    ReferenceDataError,
    build_reference_data,
    load_reference_data,
)
from src.validation.validator import RecordValidator, validate

__all__ = [
    "RecordValidator",
    "ReferenceDataError",
    "aggregate",
    "build_reference_data",
    "issue_frequencies",
    "load_reference_data",
    "run_batch",
    "validate",
]
