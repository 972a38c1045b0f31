"""Tests for the dataset audits (field gaps, SAT coverage, race data, early admission)."""

import json

import pytest

from src.audits.early_admission import (
    check_policy,
    format_ea_groups,
    format_verification,
    group_early_action_types,
    verify_policies,
)
from src.audits.field_gaps import (
    format_field_gaps,
    format_incomplete_race,
    format_missing_sat,
    important_field_gaps,
    incomplete_race_data,
    missing_sat_scores,
)
from src.schemas.models import CollegeRecord, EarlyAdmissionPolicy
from src.store import JsonCollegeStore
from tests.factories import minimal_reference


@pytest.fixture
def reference():
    return minimal_reference()


# ---------------------------------------------------------------------------
# Field gaps
# ---------------------------------------------------------------------------


class TestImportantFieldGaps:

    def test_counts_us_colleges_only(self, reference):
        records = [
            CollegeRecord(slug="a", setting="Urban"),
            CollegeRecord(slug="b"),
            CollegeRecord(slug="overseas-university"),
        ]
        assert important_field_gaps(records, reference) == [("satScores", 2), ("setting", 1)]

    def test_malformed_subdocument_counts_as_gap(self, reference):
        records = [CollegeRecord(slug="a", setting="Urban", satScores="{bad")]
        assert important_field_gaps(records, reference) == [("satScores", 1)]

    def test_no_gaps(self, reference):
        records = [CollegeRecord(slug="a", setting="Urban", satScores="{}")]
        assert important_field_gaps(records, reference) == []
        assert "(none)" in format_field_gaps([], 1)

    def test_format(self):
        text = format_field_gaps([("satScores", 12)], 40)
        assert "US colleges: 40" in text
        assert "   12 - satScores" in text


class TestMissingSatScores:

    def test_sorted_by_rate_nulls_last(self, reference):
        records = [
            CollegeRecord(slug="no-rate"),
            CollegeRecord(slug="open", studentsAdmittedPercent=80.0),
            CollegeRecord(slug="selective", studentsAdmittedPercent=8.0),
            CollegeRecord(slug="has-sat", satScores=json.dumps({"math": {"min": 600, "max": 700}})),
            CollegeRecord(slug="overseas-university"),
        ]
        assert [r.slug for r in missing_sat_scores(records, reference)] == [
            "selective", "open", "no-rate",
        ]

    def test_format(self):
        text = format_missing_sat([
            CollegeRecord(slug="x", studentsAdmittedPercent=12.0, testPolicy="Test Optional"),
            CollegeRecord(slug="y"),
        ])
        assert "US colleges missing SAT scores: 2" in text
        assert "  - x | 12% | Test Optional" in text
        assert "  - y | n/a | n/a" in text


class TestIncompleteRaceData:

    def test_lists_missing_groups(self):
        records = [
            CollegeRecord(slug="full", raceEthnicity=json.dumps(
                {"White": 1, "Asian": 1, "Hispanic": 1, "Black": 1})),
            CollegeRecord(slug="partial", raceEthnicity=json.dumps({"White": 90})),
            CollegeRecord(slug="broken", raceEthnicity="White=90"),
            CollegeRecord(slug="none"),
        ]
        result = incomplete_race_data(records)
        assert [(r.slug, missing) for r, missing in result] == [
            ("partial", ["Asian", "Hispanic", "Black"]),
            ("broken", ["unparseable"]),
        ]

    def test_format(self):
        record = CollegeRecord(slug="p", location="X", raceEthnicity='{"White": 90}')
        text = format_incomplete_race([(record, ["Asian"])])
        assert "  - p | X" in text
        assert "    Missing: Asian" in text


# ---------------------------------------------------------------------------
# Early admission
# ---------------------------------------------------------------------------


def _policy(**overrides):
    fields = {"slug": "harvard-university", "name": "Harvard", "expected_ea_type": "SCEA",
              "has_ed": False, "has_ea": True}
    fields.update(overrides)
    return EarlyAdmissionPolicy(**fields)


class TestCheckPolicy:

    def test_matching_record(self):
        record = CollegeRecord(slug="harvard-university", earlyActionType="SCEA",
                               eaDeadline="November 1")
        assert check_policy(record, _policy()) == []

    def test_wrong_type_and_missing_deadline(self):
        record = CollegeRecord(slug="harvard-university", earlyActionType="EA")
        assert check_policy(record, _policy()) == [
            "EA Type: expected SCEA, got EA",
            "Should have EA deadline but doesn't",
        ]

    def test_unexpected_ed(self):
        record = CollegeRecord(slug="harvard-university", earlyActionType="SCEA",
                               eaDeadline="November 1", edDeadline="November 1",
                               earlyDecisionApplied=900)
        assert check_policy(record, _policy()) == [
            "Has ED deadline but shouldn't: November 1",
            "Has ED application data but shouldn't: 900 applied",
        ]

    def test_ed_only_school(self):
        policy = _policy(slug="duke-university", name="Duke", expected_ea_type=None,
                         has_ed=True, has_ea=False)
        record = CollegeRecord(slug="duke-university", eaDeadline="November 1")
        assert check_policy(record, policy) == [
            "Has EA deadline but shouldn't: November 1",
            "Should have ED deadline but doesn't",
        ]


class TestVerifyPolicies:

    def test_outcome_buckets(self, tmp_path):
        path = tmp_path / "colleges.json"
        path.write_text(json.dumps([
            {"slug": "harvard-university", "earlyActionType": "SCEA", "eaDeadline": "Nov 1"},
            {"slug": "yale-university", "earlyActionType": "EA", "eaDeadline": "Nov 1"},
        ]), encoding="utf-8")
        policies = [
            _policy(),
            _policy(slug="yale-university", name="Yale"),
            _policy(slug="mit", name="MIT", expected_ea_type="EA"),
        ]
        outcome = verify_policies(JsonCollegeStore(path), policies)
        assert outcome.verified == ["harvard-university"]
        assert outcome.errors == {"yale-university": ["EA Type: expected SCEA, got EA"]}
        assert outcome.not_found == ["mit"]
        assert not outcome.passed

        text = format_verification(outcome)
        assert "[X] yale-university:" in text
        assert "[!] mit: NOT FOUND IN STORE" in text
        assert "Warnings: 1" in text

    def test_not_found_alone_passes(self, tmp_path):
        path = tmp_path / "colleges.json"
        path.write_text("[]", encoding="utf-8")
        outcome = verify_policies(JsonCollegeStore(path), [_policy()])
        assert outcome.passed


class TestGroupEarlyActionTypes:

    def test_groups(self):
        records = [
            CollegeRecord(name="Yale", earlyActionType="SCEA", eaDeadline="Nov 1"),
            CollegeRecord(name="Stanford", earlyActionType="REA", eaDeadline="Nov 1"),
            CollegeRecord(name="MIT", earlyActionType="EA", eaDeadline="Nov 1"),
            CollegeRecord(name="Caltech", eaDeadline="Nov 1"),
            CollegeRecord(name="Duke", edDeadline="Nov 1"),
        ]
        groups = group_early_action_types(records)
        assert [r.name for r in groups["SCEA"]] == ["Yale"]
        assert [r.name for r in groups["REA"]] == ["Stanford"]
        assert [r.name for r in groups["EA"]] == ["Caltech", "MIT"]

    def test_format_truncates_regular_ea(self):
        records = [CollegeRecord(name=f"College {i:02d}", eaDeadline="Nov 1") for i in range(32)]
        text = format_ea_groups(group_early_action_types(records))
        assert "=== Regular EA (32 schools) ===" in text
        assert "  College 00: null" in text
        assert "  ... and 2 more" in text
