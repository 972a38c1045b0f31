"""JSON sub-document parsing and content checks.

Several college columns hold serialized JSON (test score bands, majors,
admission factors, demographics). Each check below takes the raw column
text and returns a list of problem messages; an empty list means the
sub-document is well-formed. Malformed JSON is never raised: it comes back
as a "not parseable or missing" message.
"""

import json
import logging

from pydantic import BaseModel, ValidationError

from src.schemas.models import (
    ADMISSION_LEVELS,
    ACTScores,
    GenderDistribution,
    SATScores,
    ScoreRange,
    SubdocumentBounds,
)
from src.utils import format_number

logger = logging.getLogger(__name__)

# Canonical CDS C7 factors and the key spellings accepted for each
# (compared case-insensitively).
ADMISSION_FACTORS: list[tuple[str, tuple[str, ...]]] = [
    ("Academic GPA", ("academic gpa",)),
    ("Rigor of secondary school record", ("rigor of secondary school record",)),
    ("Standardized test scores", ("standardized test scores",)),
    ("Application essay", ("application essay",)),
    ("Recommendation(s)", ("recommendation(s)", "recommendations")),
    ("Extracurricular activities", ("extracurricular activities",)),
]

# Canonical race/ethnicity groups and the exact keys accepted for each.
RACE_GROUPS: list[tuple[str, tuple[str, ...]]] = [
    ("White", ("White",)),
    ("Asian", ("Asian",)),
    ("Hispanic", ("Hispanic", "Hispanic/Latino")),
    ("Black", ("Black", "Black/African American")),
]


def parse_subdocument(raw: str | None) -> object | None:
    """Decode a JSON column, returning None when absent or malformed."""
    if raw is None or raw == "":
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.debug("Unparseable sub-document: %.60r", raw)
        return None


def _load_model(raw: str | None, model: type[BaseModel]) -> BaseModel | None:
    parsed = parse_subdocument(raw)
    if not isinstance(parsed, dict):
        return None
    try:
        return model.model_validate(parsed)
    except ValidationError:
        return None


def _band(r: ScoreRange) -> str:
    return f"{format_number(r.min)}-{format_number(r.max)}"


def _check_range(label: str, r: ScoreRange, bound: ScoreRange) -> list[str]:
    problems = []
    if r.min < bound.min or r.max > bound.max:
        problems.append(f"{label} out of range: {_band(r)}")
    if r.min > r.max:
        problems.append(f"{label} min > max")
    return problems


def check_sat_scores(raw: str | None, bounds: SubdocumentBounds) -> list[str]:
    """Validate the satScores column.

    At least one band must be present. Section bands (reading/writing and
    math) are bounded by ``bounds.sat_section``, the total band by
    ``bounds.sat_total``.
    """
    sat = _load_model(raw, SATScores)
    if sat is None:
        return ["SAT scores not parseable or missing"]

    problems = []
    if sat.reading_writing is None and sat.math is None and sat.total is None:
        problems.append("SAT scores missing all score ranges")
    if sat.reading_writing is not None:
        problems += _check_range("SAT R&W", sat.reading_writing, bounds.sat_section)
    if sat.math is not None:
        problems += _check_range("SAT Math", sat.math, bounds.sat_section)
    if sat.total is not None:
        problems += _check_range("SAT total", sat.total, bounds.sat_total)
    return problems


def check_act_scores(raw: str | None, bounds: SubdocumentBounds) -> list[str]:
    """Validate the actScores column. The composite band is mandatory."""
    act = _load_model(raw, ACTScores)
    if act is None:
        return ["ACT scores not parseable or missing"]

    problems = []
    if act.composite is None:
        problems.append("ACT composite scores missing")
    for label, band in (
        ("ACT composite", act.composite),
        ("ACT English", act.english),
        ("ACT Math", act.math),
    ):
        if band is not None:
            problems += _check_range(label, band, bounds.act)
    return problems


def check_popular_majors(raw: str | None, bounds: SubdocumentBounds) -> list[str]:
    """Validate the popularMajors column (a list of 3-15 names)."""
    parsed = parse_subdocument(raw)
    if parsed is None:
        return ["Popular majors not parseable or missing"]
    if not isinstance(parsed, list):
        return ["Popular majors is not an array"]
    if len(parsed) < bounds.popular_majors_min:
        return [
            f"Only {len(parsed)} popular majors listed "
            f"(should have at least {bounds.popular_majors_min})"
        ]
    if len(parsed) > bounds.popular_majors_max:
        return [f"Too many popular majors listed ({len(parsed)})"]
    return []


def check_admission_considerations(raw: str | None) -> list[str]:
    """Validate the admissionConsiderations column.

    All six canonical factors must be present (case-insensitive, with
    aliases) and every level must be one of ADMISSION_LEVELS.
    """
    parsed = parse_subdocument(raw)
    if not isinstance(parsed, dict):
        return ["Admission considerations not parseable or missing"]

    problems = []
    lowered = {str(k).lower() for k in parsed}
    missing = [
        name for name, keys in ADMISSION_FACTORS
        if not any(k in lowered for k in keys)
    ]
    if missing:
        problems.append(f"Missing admission factors: {', '.join(missing)}")

    for factor, level in parsed.items():
        if not isinstance(level, str) or level not in ADMISSION_LEVELS:
            problems.append(f'Invalid level "{level}" for factor "{factor}"')
    return problems


def check_gender_distribution(raw: str | None, bounds: SubdocumentBounds) -> list[str]:
    """Validate the genderDistribution column (women + men within tolerance of 100)."""
    gender = _load_model(raw, GenderDistribution)
    if gender is None:
        return ["Gender distribution not parseable or missing"]

    if gender.women is None or gender.men is None:
        return ["Missing women or men percentage"]
    total = gender.women + gender.men
    if total < bounds.gender_total.min or total > bounds.gender_total.max:
        return [f"Gender percentages don't add up ({format_number(total)}%)"]
    return []


def missing_race_groups(parsed: dict) -> list[str]:
    """Return canonical race groups with no accepted key in ``parsed``."""
    return [
        name for name, keys in RACE_GROUPS
        if not any(k in parsed for k in keys)
    ]


def check_race_ethnicity(raw: str | None) -> list[str]:
    """Validate the raceEthnicity column (all four canonical groups present)."""
    parsed = parse_subdocument(raw)
    if not isinstance(parsed, dict):
        return ["Race/ethnicity not parseable or missing"]

    missing = missing_race_groups(parsed)
    if missing:
        return [f"Missing race/ethnicity groups: {', '.join(missing)}"]
    return []
