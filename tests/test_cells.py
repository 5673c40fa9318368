"""
Tests for cell classification, the numeric grammar and cell ordering.
"""

import pytest

from parsers.cells import (
    MISSING, Missing, Number, Text,
    classify_cell, classify_grid_value, format_number, parse_number, sort_key,
)


class TestParseNumber:

    @pytest.mark.parametrize("text, expected", [
        ("42", 42.0),
        ("-3.5", -3.5),
        ("+7", 7.0),
        (" 12 ", 12.0),
        ("1e3", 1000.0),
        ("2.5E-2", 0.025),
        (".5", 0.5),
        ("5.", 5.0),
    ])
    def test_accepts_full_decimal_numbers(self, text, expected):
        assert parse_number(text) == pytest.approx(expected)

    @pytest.mark.parametrize("text", [
        "12abc", "abc", "", "   ", "1,000", "nan", "NaN", "inf", "-Infinity",
        "1e", "--1", "0x1A", "1 2", "1e999",
    ])
    def test_rejects_partial_or_non_numbers(self, text):
        assert parse_number(text) is None

    def test_non_string_input(self):
        assert parse_number(None) is None


class TestClassifyCell:

    def test_number(self):
        assert classify_cell("3.25") == Number(3.25)

    def test_text(self):
        assert classify_cell("North") == Text("North")

    def test_partial_number_is_text(self):
        assert classify_cell("12abc") == Text("12abc")

    def test_empty_is_missing(self):
        assert classify_cell("") is MISSING
        assert classify_cell("  ") is MISSING
        assert classify_cell('""') is MISSING
        assert classify_cell(None) is MISSING

    def test_quotes_removed_before_parse(self):
        assert classify_cell('"15"') == Number(15.0)
        assert classify_cell('"a, b"') == Text("a, b")

    def test_missing_is_singleton_and_falsy(self):
        assert Missing() is MISSING
        assert not MISSING
        assert MISSING.to_json() is None


class TestClassifyGridValue:

    def test_native_numbers(self):
        assert classify_grid_value(5) == Number(5.0)
        assert classify_grid_value(2.5) == Number(2.5)

    def test_nan_is_missing(self):
        assert classify_grid_value(float('nan')) is MISSING

    def test_bool_is_text(self):
        assert classify_grid_value(True) == Text("TRUE")

    def test_numeric_string(self):
        assert classify_grid_value(" 8 ") == Number(8.0)

    def test_numpy_scalar(self):
        np = pytest.importorskip("numpy")
        assert classify_grid_value(np.int64(4)) == Number(4.0)


class TestFormattingAndOrdering:

    def test_integral_numbers_drop_fraction(self):
        assert format_number(5.0) == "5"
        assert format_number(-12.0) == "-12"

    def test_fractional_numbers_round_trip(self):
        assert float(format_number(0.1)) == 0.1
        assert format_number(2.5) == "2.5"

    def test_sort_key_orders_numbers_text_missing(self):
        cells = [MISSING, Text("b"), Number(10.0), Text("a"), Number(-1.0)]
        ordered = sorted(cells, key=sort_key)
        assert ordered == [Number(-1.0), Number(10.0), Text("a"), Text("b"), MISSING]
