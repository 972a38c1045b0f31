"""Pydantic v2 validation models for the College Data Quality toolkit.

Each model maps directly to a stored row, a JSON sub-document held inside
a row, a configuration file, or a validator output. Wire names follow the
college table's camelCase columns; Python attributes are snake_case with
an explicit alias per field.

Data sources modeled:
- College table / colleges.json -> CollegeRecord
- satScores, actScores, genderDistribution columns -> SATScores, ACTScores,
  GenderDistribution (parsed on demand, never at load time)
- reference_data.json -> ReferenceData
- validator output -> ValidationIssue, ValidationVerdict, BatchResult
"""

from __future__ import annotations

import enum
import json
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    Field,
    PrivateAttr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

from src.utils import format_number


# ── Enumerations ──

# Valid admission-factor importance levels (CDS section C7)
ADMISSION_LEVELS = frozenset({
    "Very Important",
    "Important",
    "Considered",
    "Not Considered",
})

# Valid early action program types
EARLY_ACTION_TYPES = frozenset({"EA", "SCEA", "REA"})

# Columns holding serialized JSON sub-documents
SUBDOCUMENT_FIELDS = frozenset({
    "satScores",
    "actScores",
    "gpaDistribution",
    "popularMajors",
    "admissionConsiderations",
    "raceEthnicity",
    "genderDistribution",
    "athletics",
})


class Severity(enum.Enum):
    """Whether an issue blocks a record (error) or flags it (warning)."""

    ERROR = "error"
    WARNING = "warning"


class IssueCategory(enum.Enum):
    """Structured tag attached to every issue at creation time.

    The value is the display label used to group issues in the summary
    frequency table.
    """

    INTERNATIONAL = "International school"
    INVALID_FIELD = "Invalid field value"
    MISSING_REQUIRED = "Missing required field"
    MISSING_IMPORTANT = "Missing important field"
    ELITE_MISSING = "Elite school missing field"
    OUT_OF_RANGE = "Value out of range"
    SAT_SCORES = "SAT scores"
    ACT_SCORES = "ACT scores"
    POPULAR_MAJORS = "Popular majors"
    ADMISSION_FACTORS = "Admission considerations"
    GENDER_DISTRIBUTION = "Gender distribution"
    RACE_ETHNICITY = "Race/ethnicity"
    ACCEPTANCE_RATE_DRIFT = "Acceptance rate mismatch"
    SECTOR_DRIFT = "Sector mismatch"
    TEST_POLICY_DRIFT = "Test policy may be outdated"
    ACCEPTANCE_RATE_INCONSISTENT = "Acceptance rate inconsistent"
    ED_RATE_INCONSISTENT = "ED admit rate inconsistent"
    COST_DIFFERENTIAL = "Public school cost differential"
    DESCRIPTION_LENGTH = "Description length"
    WEBSITE_FORMAT = "Website URL format"
    SELECTIVITY_MISMATCH = "Selectivity mismatch"
    RULE_FAILURE = "Rule failure"


# ── College Record (College table) ──

class CollegeRecord(BaseModel):
    """One row of the college table.

    Every attribute is nullable: the validator exists to report what is
    missing, so absence must survive loading. Sub-document columns stay
    raw strings here and are parsed by the validator on demand.
    """

    id: Optional[Union[str, int]] = Field(default=None, description="Primary key from the data store")
    name: Optional[str] = Field(
        default=None,
        description="Display name",
        examples=["Harvard University"],
    )
    slug: Optional[str] = Field(
        default=None,
        description="Unique URL identifier",
        examples=["harvard-university", "mit"],
    )
    location: Optional[str] = Field(default=None, examples=["Cambridge, MA"])
    setting: Optional[str] = Field(default=None, examples=["Urban", "Suburban"])
    institutional_sector: Optional[str] = Field(
        default=None,
        alias="institutionalSector",
        examples=["Private", "Public"],
    )
    undergraduate_enrollment: Optional[int] = Field(default=None, alias="undergraduateEnrollment")
    students_admitted_percent: Optional[float] = Field(
        default=None,
        alias="studentsAdmittedPercent",
        description="Stated overall acceptance rate in percent (0-100)",
    )
    cost_of_attendance_in_state: Optional[float] = Field(default=None, alias="costOfAttendanceInState")
    cost_of_attendance_out_of_state: Optional[float] = Field(
        default=None, alias="costOfAttendanceOutOfState"
    )
    student_faculty_ratio: Optional[str] = Field(
        default=None, alias="studentFacultyRatio", examples=["6:1"]
    )
    admissions_selectivity: Optional[str] = Field(
        default=None,
        alias="admissionsSelectivity",
        examples=["Most Selective", "Very Selective"],
    )
    test_policy: Optional[str] = Field(
        default=None,
        alias="testPolicy",
        examples=["Test Optional", "Test Required", "Test Blind"],
    )
    retention_rate: Optional[float] = Field(default=None, alias="retentionRate")
    graduation_rate_4yr: Optional[float] = Field(default=None, alias="graduationRate4yr")
    graduation_rate_6yr: Optional[float] = Field(default=None, alias="graduationRate6yr")
    median_earnings_10yr: Optional[float] = Field(default=None, alias="medianEarnings10yr")
    total_applicants: Optional[int] = Field(default=None, alias="totalApplicants")
    total_admitted: Optional[int] = Field(default=None, alias="totalAdmitted")
    total_enrolled: Optional[int] = Field(default=None, alias="totalEnrolled")
    yield_rate: Optional[float] = Field(default=None, alias="yieldRate")
    early_decision_applied: Optional[int] = Field(default=None, alias="earlyDecisionApplied")
    early_decision_admitted: Optional[int] = Field(default=None, alias="earlyDecisionAdmitted")
    early_decision_admit_rate: Optional[float] = Field(default=None, alias="earlyDecisionAdmitRate")
    early_action_applied: Optional[int] = Field(default=None, alias="earlyActionApplied")
    early_action_admitted: Optional[int] = Field(default=None, alias="earlyActionAdmitted")
    early_action_admit_rate: Optional[float] = Field(default=None, alias="earlyActionAdmitRate")
    early_action_type: Optional[str] = Field(
        default=None,
        alias="earlyActionType",
        description="EA, SCEA (single-choice), or REA (restrictive); null means regular EA",
    )
    regular_decision_applied: Optional[int] = Field(default=None, alias="regularDecisionApplied")
    regular_decision_admitted: Optional[int] = Field(default=None, alias="regularDecisionAdmitted")
    regular_decision_admit_rate: Optional[float] = Field(
        default=None, alias="regularDecisionAdmitRate"
    )
    sat_scores: Optional[str] = Field(default=None, alias="satScores")
    act_scores: Optional[str] = Field(default=None, alias="actScores")
    gpa_distribution: Optional[str] = Field(default=None, alias="gpaDistribution")
    popular_majors: Optional[str] = Field(default=None, alias="popularMajors")
    admission_considerations: Optional[str] = Field(default=None, alias="admissionConsiderations")
    description: Optional[str] = Field(default=None)
    website: Optional[str] = Field(default=None, examples=["https://www.harvard.edu"])
    application_fee: Optional[float] = Field(default=None, alias="applicationFee")
    rd_deadline: Optional[str] = Field(default=None, alias="rdDeadline")
    ed_deadline: Optional[str] = Field(default=None, alias="edDeadline")
    ea_deadline: Optional[str] = Field(default=None, alias="eaDeadline")
    fafsa_required: Optional[bool] = Field(default=None, alias="fafsaRequired")
    css_profile_required: Optional[bool] = Field(default=None, alias="cssProfileRequired")
    average_net_price: Optional[float] = Field(default=None, alias="averageNetPrice")
    financial_aid_deadline: Optional[str] = Field(default=None, alias="financialAidDeadline")
    race_ethnicity: Optional[str] = Field(default=None, alias="raceEthnicity")
    gender_distribution: Optional[str] = Field(default=None, alias="genderDistribution")
    out_of_state_percent: Optional[float] = Field(default=None, alias="outOfStatePercent")
    athletics: Optional[str] = Field(default=None)
    primary_color: Optional[str] = Field(default=None, alias="primaryColor")

    _invalid_fields: tuple[str, ...] = PrivateAttr(default=())

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
        "frozen": True,
        "allow_inf_nan": False,
    }

    @model_validator(mode="wrap")
    @classmethod
    def null_invalid_fields(
        cls, data: Any, handler: ValidatorFunctionWrapHandler
    ) -> "CollegeRecord":
        """Load a row even when some of its columns hold unusable values.

        A column whose value cannot be coerced to the field type (a number
        in a text column, NaN or Infinity in a numeric one) is loaded as
        None and its wire name is kept in ``invalid_fields`` so the
        validator can report it against this record.
        """
        try:
            return handler(data)
        except ValidationError as exc:
            if not isinstance(data, dict):
                raise
            bad_keys = {err["loc"][0] for err in exc.errors() if err["loc"]}
            if not bad_keys:
                raise

        invalid = []
        cleaned = dict(data)
        for attr, info in cls.model_fields.items():
            wire = info.alias or attr
            if attr in bad_keys or wire in bad_keys:
                invalid.append(wire)
                for key in (attr, wire):
                    if key in cleaned:
                        cleaned[key] = None

        record = handler(cleaned)
        record._invalid_fields = tuple(sorted(invalid))
        return record

    @property
    def invalid_fields(self) -> tuple[str, ...]:
        """Wire names of columns that were loaded as None because their value was unusable."""
        return self._invalid_fields

    @field_validator(
        "sat_scores",
        "act_scores",
        "gpa_distribution",
        "popular_majors",
        "admission_considerations",
        "race_ethnicity",
        "gender_distribution",
        "athletics",
        mode="before",
    )
    @classmethod
    def serialize_structured_columns(cls, v: object) -> object:
        """Accept already-decoded JSON columns and store them serialized.

        Some stores (SQL JSON columns, hand-edited exports) hand back the
        decoded object instead of the text form.
        """
        if isinstance(v, (dict, list)):
            return json.dumps(v)
        return v


# ── Sub-documents (parsed from JSON columns) ──

class ScoreRange(BaseModel):
    """Middle-50% score band (25th to 75th percentile)."""

    min: float
    max: float


class SATScores(BaseModel):
    """satScores column: section and total bands plus submission rate."""

    reading_writing: Optional[ScoreRange] = Field(default=None, alias="readingWriting")
    math: Optional[ScoreRange] = None
    total: Optional[ScoreRange] = None
    percent_submitted: Optional[float] = Field(default=None, alias="percentSubmitted")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class ACTScores(BaseModel):
    """actScores column: composite and section bands plus submission rate."""

    composite: Optional[ScoreRange] = None
    english: Optional[ScoreRange] = None
    math: Optional[ScoreRange] = None
    percent_submitted: Optional[float] = Field(default=None, alias="percentSubmitted")

    model_config = {"populate_by_name": True, "extra": "ignore"}


class GenderDistribution(BaseModel):
    """genderDistribution column: undergraduate percentages."""

    women: Optional[float] = None
    men: Optional[float] = None

    model_config = {"extra": "ignore"}


# ── Reference Data (reference_data.json) ──

class KnownValues(BaseModel):
    """Trusted snapshot of selected fields for one college (CDS 2023-2024).

    Only acceptance rate, sector, and test policy are compared against the
    stored record; the remaining fields document the snapshot.
    """

    students_admitted_percent: Optional[float] = Field(default=None, alias="studentsAdmittedPercent")
    institutional_sector: Optional[str] = Field(default=None, alias="institutionalSector")
    test_policy: Optional[str] = Field(default=None, alias="testPolicy")
    undergraduate_enrollment: Optional[int] = Field(default=None, alias="undergraduateEnrollment")
    cost_of_attendance_in_state: Optional[float] = Field(
        default=None, alias="costOfAttendanceInState"
    )
    retention_rate: Optional[float] = Field(default=None, alias="retentionRate")
    graduation_rate_4yr: Optional[float] = Field(default=None, alias="graduationRate4yr")

    model_config = {"populate_by_name": True, "extra": "forbid", "frozen": True}


class ExceptionSets(BaseModel):
    """Named slug sets that opt colleges out of specific rules."""

    international: frozenset[str] = Field(
        default=frozenset(),
        description="Non-US institutions: only basic completeness is checked",
    )
    free_tuition: frozenset[str] = Field(
        default=frozenset(),
        description="Service academies and work colleges: no cost-differential check",
    )
    special_admission: frozenset[str] = Field(
        default=frozenset(),
        description="Non-standard admissions: no early-round completeness check",
    )

    model_config = {"frozen": True}


class NumericRange(BaseModel):
    """Valid [min, max] bound for one numeric column."""

    field: str = Field(..., examples=["studentsAdmittedPercent"])
    label: str = Field(..., examples=["Acceptance rate"])
    min: float
    max: float
    unit: str = Field(
        default="",
        description="'%' renders as a suffix, '$' as a prefix, '' renders bare",
    )
    deduction: int = Field(default=5, ge=0)

    model_config = {"frozen": True}

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v: str) -> str:
        if v not in ("", "%", "$"):
            raise ValueError(f"Invalid unit '{v}'. Must be one of: '', '%', '$'")
        return v

    @model_validator(mode="after")
    def validate_bounds(self) -> "NumericRange":
        if self.min > self.max:
            raise ValueError(f"Range for '{self.field}': min {self.min} > max {self.max}")
        return self

    def render(self, value: float) -> str:
        """Render an offending value with this range's unit."""
        text = format_number(value)
        if self.unit == "%":
            return f"{text}%"
        if self.unit == "$":
            return f"${text}"
        return text


class EliteFields(BaseModel):
    """Fields checked for highly selective colleges."""

    early_decision: list[str] = Field(default_factory=list)
    early_action: list[str] = Field(default_factory=list)
    always: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class SubdocumentBounds(BaseModel):
    """Domain bounds for JSON sub-document contents."""

    sat_section: ScoreRange = ScoreRange(min=400, max=800)
    sat_total: ScoreRange = ScoreRange(min=400, max=1600)
    act: ScoreRange = ScoreRange(min=15, max=36)
    popular_majors_min: int = 3
    popular_majors_max: int = 15
    gender_total: ScoreRange = ScoreRange(min=98, max=102)

    model_config = {"frozen": True}


class EarlyAdmissionPolicy(BaseModel):
    """Verified early-round policy for one college."""

    slug: str
    name: str
    expected_ea_type: Optional[str] = None
    has_ed: bool
    has_ea: bool
    source: str = ""

    model_config = {"frozen": True}

    @field_validator("expected_ea_type")
    @classmethod
    def validate_ea_type(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in EARLY_ACTION_TYPES:
            raise ValueError(
                f"Invalid expected_ea_type '{v}'. Must be one of: {sorted(EARLY_ACTION_TYPES)}"
            )
        return v


class ReferenceData(BaseModel):
    """Read-only inputs of the validator, loaded once per process."""

    known_values: dict[str, KnownValues] = Field(default_factory=dict)
    exception_sets: ExceptionSets = Field(default_factory=ExceptionSets)
    numeric_ranges: list[NumericRange] = Field(default_factory=list)
    required_fields: list[str] = Field(default_factory=list)
    important_fields: list[str] = Field(default_factory=list)
    international_basic_fields: list[str] = Field(
        default_factory=lambda: ["name", "slug", "location", "description"]
    )
    elite_fields: EliteFields = Field(default_factory=EliteFields)
    elite_acceptance_threshold: float = Field(default=20.0, gt=0, le=100)
    subdocument_bounds: SubdocumentBounds = Field(default_factory=SubdocumentBounds)
    early_admission_policies: list[EarlyAdmissionPolicy] = Field(default_factory=list)

    model_config = {"frozen": True}

    def referenced_fields(self) -> set[str]:
        """Every record field name that a rule reads by name."""
        fields = set(self.required_fields) | set(self.important_fields)
        fields |= set(self.international_basic_fields)
        fields |= set(self.elite_fields.early_decision)
        fields |= set(self.elite_fields.early_action)
        fields |= set(self.elite_fields.always)
        fields |= {r.field for r in self.numeric_ranges}
        return fields


# ── Validator output ──

class ValidationIssue(BaseModel):
    """One finding against one record."""

    category: IssueCategory
    severity: Severity
    message: str
    deduction: int = Field(default=0, ge=0)
    label: Optional[str] = Field(
        default=None,
        description="Summary-table label when finer than the category (e.g. per numeric range)",
    )

    model_config = {"frozen": True}

    @property
    def summary_label(self) -> str:
        return self.label or self.category.value


class ValidationVerdict(BaseModel):
    """Outcome of validating one record. Immutable once returned."""

    slug: Optional[str]
    college_name: Optional[str] = Field(alias="collegeName")
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()
    score: int = Field(..., ge=0, le=100)

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def issues(self) -> tuple[ValidationIssue, ...]:
        return self.errors + self.warnings

    def error_messages(self) -> list[str]:
        return [i.message for i in self.errors]

    def warning_messages(self) -> list[str]:
        return [i.message for i in self.warnings]

    def passed(self, threshold: int) -> bool:
        return self.score >= threshold

    def to_report_dict(self) -> dict:
        """Serialize in the JSON report layout (messages plus tagged issues)."""
        return {
            "collegeName": self.college_name,
            "slug": self.slug,
            "errors": self.error_messages(),
            "warnings": self.warning_messages(),
            "score": self.score,
            "issues": [i.model_dump(mode="json") for i in self.issues],
        }


class BatchResult(BaseModel):
    """Aggregate over one validation run, results sorted worst first."""

    total_colleges: int = Field(..., ge=0)
    passed_colleges: int = Field(..., ge=0)
    failed_colleges: int = Field(..., ge=0)
    average_score: float
    threshold: int
    results: tuple[ValidationVerdict, ...] = ()
    skipped_records: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    @property
    def passed(self) -> bool:
        """True when the mean score meets the threshold."""
        return self.total_colleges > 0 and self.average_score >= self.threshold

    def failing(self) -> list[ValidationVerdict]:
        return [r for r in self.results if not r.passed(self.threshold)]
