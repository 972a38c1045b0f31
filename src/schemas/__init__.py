"""Pydantic v2 schema models for the College Data Quality toolkit.

Provides validation models for all core data structures:
- CollegeRecord: one row of the college table
- SATScores / ACTScores / GenderDistribution: JSON sub-documents
- ReferenceData: known values, exception sets, bound tables, field lists
- ValidationIssue / ValidationVerdict / BatchResult: validator output

Stored records are permissive (every column nullable); configuration
models are strict, so a malformed reference file fails at startup.
"""

from src.schemas.models import (
    ACTScores,
    ADMISSION_LEVELS,
    BatchResult,
    CollegeRecord,
    EARLY_ACTION_TYPES,
    EarlyAdmissionPolicy,
    EliteFields,
    ExceptionSets,
    GenderDistribution,
    IssueCategory,
    KnownValues,
    NumericRange,
    ReferenceData,
    SATScores,
    ScoreRange,
    Severity,
    SUBDOCUMENT_FIELDS,
    SubdocumentBounds,
    ValidationIssue,
    ValidationVerdict,
)

__all__ = [
    "ACTScores",
    "ADMISSION_LEVELS",
    "BatchResult",
    "CollegeRecord",
    "EARLY_ACTION_TYPES",
    "EarlyAdmissionPolicy",
    "EliteFields",
    "ExceptionSets",
    "GenderDistribution",
    "IssueCategory",
    "KnownValues",
    "NumericRange",
    "ReferenceData",
    "SATScores",
    "ScoreRange",
    "Severity",
    "SUBDOCUMENT_FIELDS",
    "SubdocumentBounds",
    "ValidationIssue",
    "ValidationVerdict",
]
