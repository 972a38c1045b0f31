"""Tests for the shared formatting helpers."""

from src.utils import format_number, format_percent, is_blank


class TestFormatNumber:

    def test_integral_float_drops_decimal(self):
        assert format_number(150.0) == "150"

    def test_fraction_kept(self):
        assert format_number(12.5) == "12.5"

    def test_int_unchanged(self):
        assert format_number(1600) == "1600"


class TestFormatPercent:

    def test_one_decimal(self):
        assert format_percent(1, 3) == "33.3%"

    def test_zero_whole(self):
        assert format_percent(0, 0) == "0.0%"


class TestIsBlank:

    def test_none_and_empty_string(self):
        assert is_blank(None)
        assert is_blank("")

    def test_falsy_values_are_present(self):
        assert not is_blank(0)
        assert not is_blank(False)
        assert not is_blank([])
        assert not is_blank(" ")
