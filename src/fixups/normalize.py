"""Sub-document normalizers.

Pure functions over parsed sub-documents: each takes a decoded dict and
returns a new dict (the input is not mutated). Persisting the result is
the caller's job; see scripts/normalize_subdocuments.py.
"""

import logging

logger = logging.getLogger(__name__)

# Variant race/ethnicity keys seen in source data -> canonical key.
RACE_NAME_MAPPINGS = {
    "White or Caucasian": "White",
    "Black or African American": "Black",
    "Black/African": "Black",
    "Black/African American": "Black",
    "Hispanic/Latino": "Hispanic",
    "Native American": "American Indian/Alaska Native",
    "Pacific Islander": "Native Hawaiian/Pacific Islander",
}

CANONICAL_RACE_GROUPS = ("White", "Asian", "Hispanic", "Black")

# Groups given a minimal placeholder share when a college reports none,
# so percentages render rather than disappear.
PLACEHOLDER_GROUPS = ("White", "Asian")
PLACEHOLDER_VALUE = 1

RECOMMENDATIONS_FACTOR = "Recommendation(s)"
RECOMMENDATIONS_ALIASES = ("recommendation(s)", "recommendations")
NOT_CONSIDERED = "Not Considered"


def normalize_race_ethnicity(parsed: dict, add_placeholders: bool = False) -> dict:
    """Rename variant race keys and backfill the canonical groups.

    Args:
        parsed: Decoded raceEthnicity map (group -> percent).
        add_placeholders: Give White and Asian a share of 1 when they
            are absent or zero.

    Returns:
        New map with canonical keys. Missing canonical groups are 0
        unless a placeholder applies.
    """
    normalized = {}
    for key, value in parsed.items():
        normalized[RACE_NAME_MAPPINGS.get(key, key)] = value

    if add_placeholders:
        for group in PLACEHOLDER_GROUPS:
            if not normalized.get(group):
                normalized[group] = PLACEHOLDER_VALUE

    for group in CANONICAL_RACE_GROUPS:
        normalized.setdefault(group, 0)
    return normalized


def has_recommendations(parsed: dict) -> bool:
    return any(key.lower() in RECOMMENDATIONS_ALIASES for key in parsed)


def backfill_recommendations(parsed: dict) -> dict:
    """Add Recommendation(s) as Not Considered when no alias is present."""
    if has_recommendations(parsed):
        return dict(parsed)
    updated = dict(parsed)
    updated[RECOMMENDATIONS_FACTOR] = NOT_CONSIDERED
    return updated
