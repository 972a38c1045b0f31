"""Tests for the maintenance scripts (sub-document normalization, seeding)."""

import json

import pytest

from scripts.normalize_subdocuments import (
    fix_early_admission,
    fix_race_ethnicity,
    fix_recommendations,
)
from scripts.normalize_subdocuments import main as normalize_main
from scripts.seed_colleges import main as seed_main
from scripts.seed_colleges import seed
from src.schemas.models import EarlyAdmissionPolicy
from src.store import JsonCollegeStore, SqlCollegeStore
from tests.factories import perfect_row


@pytest.fixture
def store(tmp_path):
    path = tmp_path / "colleges.json"
    rows = [
        {"slug": "morehouse-college",
         "raceEthnicity": json.dumps({"Black or African American": 95, "Hispanic/Latino": 2})},
        {"slug": "university-of-florida",
         "admissionConsiderations": json.dumps({"Application essay": "Considered"})},
        {"slug": "already-clean",
         "raceEthnicity": json.dumps({"White": 50, "Asian": 20, "Hispanic": 20, "Black": 10}),
         "admissionConsiderations": json.dumps({"Recommendations": "Important"})},
    ]
    path.write_text(json.dumps({"colleges": rows}), encoding="utf-8")
    return JsonCollegeStore(path)


class TestFixRaceEthnicity:

    def test_writes_normalized_map(self, store):
        count = fix_race_ethnicity(store, ["morehouse-college"], {"morehouse-college"})
        assert count == 1
        stored = json.loads(store.get("morehouse-college").race_ethnicity)
        assert stored == {"Black": 95, "Hispanic": 2, "White": 1, "Asian": 1}

    def test_dry_run_writes_nothing(self, store):
        before = store.path.read_text(encoding="utf-8")
        assert fix_race_ethnicity(store, ["morehouse-college"], set(), dry_run=True) == 0
        assert store.path.read_text(encoding="utf-8") == before

    def test_skips_clean_missing_and_blank(self, store):
        slugs = ["already-clean", "nowhere", "university-of-florida"]
        assert fix_race_ethnicity(store, slugs, set()) == 0


class TestFixRecommendations:

    def test_backfills_missing_factor(self, store):
        assert fix_recommendations(store, ["university-of-florida", "already-clean"]) == 1
        stored = json.loads(store.get("university-of-florida").admission_considerations)
        assert stored["Recommendation(s)"] == "Not Considered"

    def test_cli_requires_an_action(self):
        with pytest.raises(SystemExit):
            normalize_main([])

    def test_cli_dry_run(self, store, capsys):
        args = ["--source", str(store.path), "--recommendations",
                "--slug", "university-of-florida", "--dry-run"]
        assert normalize_main(args) == 0
        assert "Dry run: no records were written" in capsys.readouterr().out


@pytest.fixture
def early_store(tmp_path):
    path = tmp_path / "colleges.json"
    rows = [
        {"slug": "harvard-university", "earlyActionType": "EA", "eaDeadline": "November 1",
         "earlyDecisionApplied": 900, "edDeadline": "November 1"},
        {"slug": "some-college", "eaDeadline": "November 15"},
        {"slug": "no-early-rounds"},
    ]
    path.write_text(json.dumps({"colleges": rows}), encoding="utf-8")
    return JsonCollegeStore(path)


HARVARD = EarlyAdmissionPolicy(slug="harvard-university", name="Harvard",
                               expected_ea_type="SCEA", has_ed=False, has_ea=True)


class TestFixEarlyAdmission:

    def test_writes_policy_and_default(self, early_store):
        assert fix_early_admission(early_store, [HARVARD]) == 2
        harvard = early_store.get("harvard-university")
        assert harvard.early_action_type == "SCEA"
        assert harvard.early_decision_applied is None
        assert harvard.ed_deadline is None
        assert harvard.ea_deadline == "November 1"
        assert early_store.get("some-college").early_action_type == "EA"

    def test_second_run_changes_nothing(self, early_store):
        fix_early_admission(early_store, [HARVARD])
        assert fix_early_admission(early_store, [HARVARD]) == 0

    def test_slug_filter(self, early_store):
        assert fix_early_admission(early_store, [HARVARD], slugs=["some-college"]) == 1
        assert early_store.get("harvard-university").early_action_type == "EA"

    def test_dry_run_writes_nothing(self, early_store):
        before = early_store.path.read_text(encoding="utf-8")
        assert fix_early_admission(early_store, [HARVARD], dry_run=True) == 0
        assert early_store.path.read_text(encoding="utf-8") == before

    def test_cli_dry_run(self, early_store, capsys):
        args = ["--source", str(early_store.path), "--early-admission", "--dry-run"]
        assert normalize_main(args) == 0
        out = capsys.readouterr().out
        assert "Early admission: updated 0 colleges" in out
        assert "Dry run: no records were written" in out

    def test_cli_bad_reference(self, early_store, tmp_path, capsys):
        bad = tmp_path / "reference.json"
        bad.write_text("{", encoding="utf-8")
        args = ["--source", str(early_store.path), "--early-admission", "--reference", str(bad)]
        assert normalize_main(args) == 1
        assert "ERROR:" in capsys.readouterr().out

class TestSeed:

    def test_seed_sqlite(self, tmp_path):
        export = tmp_path / "colleges.json"
        row = perfect_row()
        row.pop("id", None)
        export.write_text(json.dumps({"colleges": [row]}), encoding="utf-8")
        url = f"sqlite:///{tmp_path / 'colleges.db'}"

        assert seed(export, url) == 1
        record = SqlCollegeStore(url=url).get("william-and-mary")
        assert record.id == "william-and-mary"
        assert record.name == "William & Mary"

    def test_cli_requires_url(self, monkeypatch, capsys):
        monkeypatch.delenv("COLLEGE_DATABASE_URL", raising=False)
        assert seed_main([]) == 1
        assert "--database-url" in capsys.readouterr().out
