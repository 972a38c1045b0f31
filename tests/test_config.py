"""Tests for CDS cycle computation and environment configuration."""

from datetime import date

from src.config import (
    CDS_CYCLE,
    DATABASE_URL_ENV,
    PASS_THRESHOLD,
    _compute_cds_cycle,
    database_url,
)


class TestCdsCycle:

    def test_before_july_uses_previous_year(self):
        assert _compute_cds_cycle(date(2025, 6, 30)) == "2024-2025"

    def test_july_first_starts_new_cycle(self):
        assert _compute_cds_cycle(date(2025, 7, 1)) == "2025-2026"

    def test_january(self):
        assert _compute_cds_cycle(date(2026, 1, 15)) == "2025-2026"

    def test_module_constant_format(self):
        start, end = CDS_CYCLE.split("-")
        assert int(end) == int(start) + 1


class TestDatabaseUrl:

    def test_unset(self, monkeypatch):
        monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
        assert database_url() is None

    def test_blank_is_unset(self, monkeypatch):
        monkeypatch.setenv(DATABASE_URL_ENV, "   ")
        assert database_url() is None

    def test_value_stripped(self, monkeypatch):
        monkeypatch.setenv(DATABASE_URL_ENV, " sqlite:///colleges.db ")
        assert database_url() == "sqlite:///colleges.db"


def test_pass_threshold():
    assert PASS_THRESHOLD == 80
