"""Rule-based quality scorer for college records.

A record starts at 100 points. An ordered sequence of independent rule
groups appends errors and warnings, each deducting a fixed number of
points; the score is floored at 0 and no rule ever adds points.

Every record, international or not, first gets an error per column that
was loaded as None because its stored value was unusable (wrong type,
NaN, Infinity).

Rule order:
  0. Exception routing -- international colleges get a reduced basic
     check and return immediately
  1. Required-field completeness (errors)
  2. Important-field completeness (warnings)
  3. Early-round completeness for highly selective colleges
  4. Numeric range bounds (errors)
  5. JSON sub-document structure (warnings, one deduction per document)
  6. Drift against the known-values snapshot
  7. Cross-field consistency

The deduction weights are historical and carried over unchanged for
output compatibility. Rebalancing them is a policy decision.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from src.schemas.models import (
    CollegeRecord,
    IssueCategory,
    ReferenceData,
    ValidationVerdict,
)
from src.utils import format_number, is_blank
from src.validation import subdocuments
from src.validation.accessors import read_field
from src.validation.issues import IssueLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deductions:
    """Points removed per issue type (numeric ranges carry their own)."""

    invalid_field: int = 5
    missing_required: int = 5
    missing_important: int = 2
    elite_missing: int = 1
    sat_scores: int = 2
    act_scores: int = 2
    popular_majors: int = 1
    admission_considerations: int = 2
    gender_distribution: int = 1
    race_ethnicity: int = 1
    acceptance_rate_drift: int = 10
    sector_drift: int = 5
    test_policy_drift: int = 3
    acceptance_rate_inconsistent: int = 3
    ed_rate_inconsistent: int = 2
    cost_inversion: int = 3
    missing_out_of_state_cost: int = 2
    short_description: int = 2
    critically_short_description: int = 5
    website_protocol: int = 1
    selectivity_mismatch: int = 2


DEDUCTIONS = Deductions()

INTERNATIONAL_NOTICE = "International school - relaxed validation applied"

RATE_TOLERANCE = 2.0
"""Percentage points allowed between a stated and a derived/known rate."""

SHORT_DESCRIPTION_CHARS = 100
CRITICAL_DESCRIPTION_CHARS = 50

MOST_SELECTIVE = "Most Selective"
VERY_SELECTIVE = "Very Selective"
MOST_SELECTIVE_BELOW = 15.0
VERY_SELECTIVE_BELOW = 35.0


def _show(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


class RecordValidator:
    """Validate college records against one set of reference data.

    The validator holds no per-record state: ``validate`` builds a fresh
    IssueLog each call, so the same instance can score any number of
    records, in any order, with identical results.

    Args:
        reference: Frozen reference data (known values, exception sets,
                   bounds, field lists).
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference
        self._rule_groups: list[tuple[str, Callable[[CollegeRecord, IssueLog], None]]] = [
            ("required_fields", self._check_required_fields),
            ("important_fields", self._check_important_fields),
            ("elite_fields", self._check_elite_fields),
            ("numeric_ranges", self._check_numeric_ranges),
            ("subdocuments", self._check_subdocuments),
            ("known_values", self._check_known_values),
            ("consistency", self._check_consistency),
        ]

    def validate(self, record: CollegeRecord) -> ValidationVerdict:
        """Score one record. Never raises on record content."""
        log = IssueLog()
        self._check_field_values(record, log)

        if self.is_international(record):
            self._check_international(record, log)
            return log.verdict(record)

        for name, rule in self._rule_groups:
            try:
                rule(record, log)
            except Exception as exc:
                logger.exception("Rule group %s failed for %s", name, record.slug)
                log.error(
                    IssueCategory.RULE_FAILURE,
                    f"Rule failure: {name} ({type(exc).__name__})",
                )

        verdict = log.verdict(record)
        logger.debug("%s scored %d", record.slug, verdict.score)
        return verdict

    def is_international(self, record: CollegeRecord) -> bool:
        return record.slug in self.reference.exception_sets.international

    @staticmethod
    def _check_field_values(record: CollegeRecord, log: IssueLog) -> None:
        for field in record.invalid_fields:
            log.error(
                IssueCategory.INVALID_FIELD,
                f"Invalid field value: {field}",
                DEDUCTIONS.invalid_field,
            )

    # -- 0. Exception routing --

    def _check_international(self, record: CollegeRecord, log: IssueLog) -> None:
        for field in self.reference.international_basic_fields:
            if is_blank(read_field(record, field)):
                log.error(
                    IssueCategory.MISSING_REQUIRED,
                    f"Missing required field: {field}",
                    DEDUCTIONS.missing_required,
                )
        log.warning(IssueCategory.INTERNATIONAL, INTERNATIONAL_NOTICE)

    # -- 1-2. Completeness --

    def _check_required_fields(self, record: CollegeRecord, log: IssueLog) -> None:
        for field in self.reference.required_fields:
            if is_blank(read_field(record, field)):
                log.error(
                    IssueCategory.MISSING_REQUIRED,
                    f"Missing required field: {field}",
                    DEDUCTIONS.missing_required,
                )

    def _check_important_fields(self, record: CollegeRecord, log: IssueLog) -> None:
        for field in self.reference.important_fields:
            if is_blank(read_field(record, field)):
                log.warning(
                    IssueCategory.MISSING_IMPORTANT,
                    f"Missing important field: {field}",
                    DEDUCTIONS.missing_important,
                )

    # -- 3. Highly selective colleges --

    def _check_elite_fields(self, record: CollegeRecord, log: IssueLog) -> None:
        rate = record.students_admitted_percent
        if not (rate and rate < self.reference.elite_acceptance_threshold):
            return

        elite = self.reference.elite_fields
        fields: list[str] = []
        if record.slug not in self.reference.exception_sets.special_admission:
            if record.ed_deadline:
                fields += elite.early_decision
            if record.ea_deadline:
                fields += elite.early_action
        fields += elite.always

        for field in fields:
            if is_blank(read_field(record, field)):
                log.warning(
                    IssueCategory.ELITE_MISSING,
                    f"Elite school missing field: {field}",
                    DEDUCTIONS.elite_missing,
                )

    # -- 4. Numeric ranges --

    def _check_numeric_ranges(self, record: CollegeRecord, log: IssueLog) -> None:
        for bound in self.reference.numeric_ranges:
            value = read_field(record, bound.field)
            if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            if value < bound.min or value > bound.max:
                log.error(
                    IssueCategory.OUT_OF_RANGE,
                    f"{bound.label} out of range: {bound.render(value)}",
                    bound.deduction,
                    label=f"{bound.label} out of range",
                )

    # -- 5. JSON sub-documents --

    def _check_subdocuments(self, record: CollegeRecord, log: IssueLog) -> None:
        bounds = self.reference.subdocument_bounds
        checks = [
            (record.sat_scores, IssueCategory.SAT_SCORES, DEDUCTIONS.sat_scores,
             lambda raw: subdocuments.check_sat_scores(raw, bounds)),
            (record.act_scores, IssueCategory.ACT_SCORES, DEDUCTIONS.act_scores,
             lambda raw: subdocuments.check_act_scores(raw, bounds)),
            (record.popular_majors, IssueCategory.POPULAR_MAJORS, DEDUCTIONS.popular_majors,
             lambda raw: subdocuments.check_popular_majors(raw, bounds)),
            (record.admission_considerations, IssueCategory.ADMISSION_FACTORS,
             DEDUCTIONS.admission_considerations,
             subdocuments.check_admission_considerations),
            (record.gender_distribution, IssueCategory.GENDER_DISTRIBUTION,
             DEDUCTIONS.gender_distribution,
             lambda raw: subdocuments.check_gender_distribution(raw, bounds)),
        ]
        if not self.is_international(record):
            checks.append((
                record.race_ethnicity, IssueCategory.RACE_ETHNICITY,
                DEDUCTIONS.race_ethnicity, subdocuments.check_race_ethnicity,
            ))

        for raw, category, deduction, check in checks:
            if is_blank(raw):
                continue
            problems = check(raw)
            if problems:
                log.warn_group(category, problems, deduction)

    # -- 6. Known-values drift --

    def _check_known_values(self, record: CollegeRecord, log: IssueLog) -> None:
        known = self.reference.known_values.get(record.slug or "")
        if known is None:
            return

        stated = record.students_admitted_percent
        if known.students_admitted_percent is not None and stated is not None:
            if abs(known.students_admitted_percent - stated) > RATE_TOLERANCE:
                log.error(
                    IssueCategory.ACCEPTANCE_RATE_DRIFT,
                    f"Acceptance rate mismatch: expected "
                    f"~{_show(known.students_admitted_percent)}%, got {_show(stated)}%",
                    DEDUCTIONS.acceptance_rate_drift,
                )

        if known.institutional_sector and record.institutional_sector != known.institutional_sector:
            log.error(
                IssueCategory.SECTOR_DRIFT,
                f"Sector mismatch: expected {known.institutional_sector}, "
                f"got {_show(record.institutional_sector)}",
                DEDUCTIONS.sector_drift,
            )

        if known.test_policy and record.test_policy != known.test_policy:
            log.warning(
                IssueCategory.TEST_POLICY_DRIFT,
                f"Test policy may be outdated: expected {known.test_policy}, "
                f"got {_show(record.test_policy)}",
                DEDUCTIONS.test_policy_drift,
            )

    # -- 7. Cross-field consistency --

    def _check_consistency(self, record: CollegeRecord, log: IssueLog) -> None:
        self._check_rate(
            log,
            IssueCategory.ACCEPTANCE_RATE_INCONSISTENT,
            "Acceptance rate inconsistent",
            record.total_applicants,
            record.total_admitted,
            record.students_admitted_percent,
            DEDUCTIONS.acceptance_rate_inconsistent,
        )
        self._check_rate(
            log,
            IssueCategory.ED_RATE_INCONSISTENT,
            "ED admit rate inconsistent",
            record.early_decision_applied,
            record.early_decision_admitted,
            record.early_decision_admit_rate,
            DEDUCTIONS.ed_rate_inconsistent,
        )
        self._check_cost_differential(record, log)
        self._check_description(record, log)
        self._check_website(record, log)
        self._check_selectivity(record, log)

    @staticmethod
    def _check_rate(
        log: IssueLog,
        category: IssueCategory,
        label: str,
        applied: int | None,
        admitted: int | None,
        stated: float | None,
        deduction: int,
    ) -> None:
        if not (applied and admitted and stated):
            return
        calculated = admitted / applied * 100
        diff = abs(calculated - stated)
        if diff > RATE_TOLERANCE:
            log.warning(
                category,
                f"{label}: stated {_show(stated)}%, calculated {calculated:.1f}% "
                f"({diff:.1f} point difference)",
                deduction,
            )

    def _check_cost_differential(self, record: CollegeRecord, log: IssueLog) -> None:
        if record.institutional_sector != "Public":
            return
        if record.slug in self.reference.exception_sets.free_tuition:
            return

        in_state = record.cost_of_attendance_in_state
        out_of_state = record.cost_of_attendance_out_of_state
        if in_state and out_of_state:
            if in_state >= out_of_state:
                log.warning(
                    IssueCategory.COST_DIFFERENTIAL,
                    f"Public school: in-state cost should be less than out-of-state "
                    f"(${_show(in_state)} vs ${_show(out_of_state)})",
                    DEDUCTIONS.cost_inversion,
                )
        elif not out_of_state:
            log.warning(
                IssueCategory.COST_DIFFERENTIAL,
                "Public school missing out-of-state cost",
                DEDUCTIONS.missing_out_of_state_cost,
            )

    @staticmethod
    def _check_description(record: CollegeRecord, log: IssueLog) -> None:
        description = record.description
        if not description:
            return
        if len(description) < SHORT_DESCRIPTION_CHARS:
            log.warning(
                IssueCategory.DESCRIPTION_LENGTH,
                f"Description too short (< {SHORT_DESCRIPTION_CHARS} chars)",
                DEDUCTIONS.short_description,
            )
        if len(description) < CRITICAL_DESCRIPTION_CHARS:
            log.error(
                IssueCategory.DESCRIPTION_LENGTH,
                f"Description critically short (< {CRITICAL_DESCRIPTION_CHARS} chars)",
                DEDUCTIONS.critically_short_description,
            )

    @staticmethod
    def _check_website(record: CollegeRecord, log: IssueLog) -> None:
        website = record.website
        if website and not website.startswith(("http://", "https://")):
            log.warning(
                IssueCategory.WEBSITE_FORMAT,
                f"Website URL missing protocol: {website}",
                DEDUCTIONS.website_protocol,
            )

    @staticmethod
    def _check_selectivity(record: CollegeRecord, log: IssueLog) -> None:
        # Only the two most selective bands are checked.
        rate = record.students_admitted_percent
        label = record.admissions_selectivity
        if not (rate and label):
            return

        expected = None
        if rate < MOST_SELECTIVE_BELOW and label != MOST_SELECTIVE:
            expected = MOST_SELECTIVE
        elif (
            MOST_SELECTIVE_BELOW <= rate < VERY_SELECTIVE_BELOW
            and label not in (VERY_SELECTIVE, MOST_SELECTIVE)
        ):
            expected = VERY_SELECTIVE

        if expected:
            log.warning(
                IssueCategory.SELECTIVITY_MISMATCH,
                f'Selectivity mismatch: {_show(rate)}% should be "{expected}", not "{label}"',
                DEDUCTIONS.selectivity_mismatch,
            )


def validate(record: CollegeRecord, reference: ReferenceData) -> ValidationVerdict:
    """Score one record against ``reference`` (convenience wrapper)."""
    return RecordValidator(reference).validate(record)
