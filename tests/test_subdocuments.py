"""Tests for JSON sub-document parsing and content checks."""

import json

from src.schemas.models import SubdocumentBounds
from src.validation.subdocuments import (
    check_act_scores,
    check_admission_considerations,
    check_gender_distribution,
    check_popular_majors,
    check_race_ethnicity,
    check_sat_scores,
    missing_race_groups,
    parse_subdocument,
)
from tests.factories import ADMISSION_FACTORS_OK

BOUNDS = SubdocumentBounds()


class TestParseSubdocument:

    def test_blank_is_none(self):
        assert parse_subdocument(None) is None
        assert parse_subdocument("") is None

    def test_malformed_is_none(self):
        assert parse_subdocument("{oops") is None

    def test_valid_json(self):
        assert parse_subdocument('["a", "b"]') == ["a", "b"]


class TestSatScores:

    def test_valid(self):
        raw = json.dumps({"math": {"min": 650, "max": 760}, "total": {"min": 1300, "max": 1510}})
        assert check_sat_scores(raw, BOUNDS) == []

    def test_no_bands(self):
        assert check_sat_scores(json.dumps({"percentSubmitted": 40}), BOUNDS) == [
            "SAT scores missing all score ranges"
        ]

    def test_total_uses_total_bound(self):
        """A 1500 total is valid even though it exceeds the section bound."""
        raw = json.dumps({"total": {"min": 1400, "max": 1550}})
        assert check_sat_scores(raw, BOUNDS) == []

    def test_total_out_of_range(self):
        raw = json.dumps({"total": {"min": 300, "max": 1700}})
        assert check_sat_scores(raw, BOUNDS) == ["SAT total out of range: 300-1700"]

    def test_unparseable(self):
        assert check_sat_scores("nope", BOUNDS) == ["SAT scores not parseable or missing"]

    def test_array_is_unparseable(self):
        assert check_sat_scores("[1, 2]", BOUNDS) == ["SAT scores not parseable or missing"]


class TestActScores:

    def test_valid(self):
        raw = json.dumps({"composite": {"min": 31, "max": 35}, "math": {"min": 30, "max": 35}})
        assert check_act_scores(raw, BOUNDS) == []

    def test_out_of_range_and_inverted_bands(self):
        raw = json.dumps({"composite": {"min": 10, "max": 40}, "math": {"min": 34, "max": 30}})
        assert check_act_scores(raw, BOUNDS) == [
            "ACT composite out of range: 10-40",
            "ACT Math min > max",
        ]


class TestPopularMajors:

    def test_not_a_list(self):
        assert check_popular_majors(json.dumps({"a": 1}), BOUNDS) == [
            "Popular majors is not an array"
        ]

    def test_too_many(self):
        raw = json.dumps([f"Major {i}" for i in range(16)])
        assert check_popular_majors(raw, BOUNDS) == ["Too many popular majors listed (16)"]

    def test_bounds_inclusive(self):
        assert check_popular_majors(json.dumps(["a", "b", "c"]), BOUNDS) == []
        assert check_popular_majors(json.dumps([str(i) for i in range(15)]), BOUNDS) == []


class TestAdmissionConsiderations:

    def test_valid(self):
        assert check_admission_considerations(json.dumps(ADMISSION_FACTORS_OK)) == []

    def test_missing_factors_listed(self):
        raw = json.dumps({"Academic GPA": "Important"})
        problems = check_admission_considerations(raw)
        assert problems == [
            "Missing admission factors: Rigor of secondary school record, "
            "Standardized test scores, Application essay, Recommendation(s), "
            "Extracurricular activities"
        ]

    def test_non_string_level(self):
        factors = dict(ADMISSION_FACTORS_OK, **{"Application essay": 3})
        assert check_admission_considerations(json.dumps(factors)) == [
            'Invalid level "3" for factor "Application essay"'
        ]

    def test_list_is_unparseable(self):
        assert check_admission_considerations("[]") == [
            "Admission considerations not parseable or missing"
        ]


class TestGenderDistribution:

    def test_within_tolerance(self):
        assert check_gender_distribution(json.dumps({"women": 50.5, "men": 48}), BOUNDS) == []

    def test_missing_half(self):
        assert check_gender_distribution(json.dumps({"women": 55}), BOUNDS) == [
            "Missing women or men percentage"
        ]


class TestRaceEthnicity:

    def test_aliases(self):
        parsed = {"White": 1, "Asian": 1, "Hispanic/Latino": 1, "Black/African American": 1}
        assert missing_race_groups(parsed) == []

    def test_alias_match_is_exact(self):
        """Only the listed spellings count; case variants do not."""
        parsed = {"white": 1, "Asian": 1, "Hispanic": 1, "Black": 1}
        assert missing_race_groups(parsed) == ["White"]

    def test_missing_groups_message(self):
        assert check_race_ethnicity(json.dumps({"White": 80})) == [
            "Missing race/ethnicity groups: Asian, Hispanic, Black"
        ]

    def test_unparseable(self):
        assert check_race_ethnicity("White: 80") == ["Race/ethnicity not parseable or missing"]
