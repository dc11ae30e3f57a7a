"""
Tests for the numeric prefix parser.
"""

import math

import pytest

from numcoerce import parse_numeric_prefix


class TestWholeNumbers:
    """Strings that are entirely numeric."""

    def test_integer(self):
        parsed = parse_numeric_prefix("12345")
        assert parsed.value == 12345.0
        assert parsed.consumed == 5
        assert parsed.integer == 12345
        assert parsed.is_integer

    def test_signed_integers(self):
        assert parse_numeric_prefix("-2345").integer == -2345
        assert parse_numeric_prefix("+7").integer == 7

    def test_scientific_notation(self):
        parsed = parse_numeric_prefix("12.3456789000e10")
        assert parsed.value == 1.23456789e11
        assert parsed.consumed == 16
        assert parsed.integer is None

    def test_negative_exponent(self):
        assert parse_numeric_prefix("12.3456789000E-10").value == pytest.approx(1.23456789e-9)

    def test_leading_dot(self):
        parsed = parse_numeric_prefix(".5")
        assert parsed.value == 0.5
        assert parsed.consumed == 2

    def test_signed_leading_dot(self):
        assert parse_numeric_prefix("+.5").value == 0.5
        assert parse_numeric_prefix("-.5").value == -0.5

    def test_trailing_dot(self):
        parsed = parse_numeric_prefix("5.")
        assert parsed.value == 5.0
        assert parsed.consumed == 2
        assert parsed.integer is None

    def test_exponent_without_fraction(self):
        parsed = parse_numeric_prefix("1e3")
        assert parsed.value == 1000.0
        assert parsed.integer is None

    def test_dot_then_exponent(self):
        assert parse_numeric_prefix("1.e5").value == 100000.0

    def test_bytes_input(self):
        assert parse_numeric_prefix(b"42").integer == 42


class TestPrefixes:
    """Only the leading numeric part counts."""

    def test_trailing_garbage(self):
        parsed = parse_numeric_prefix("12abc")
        assert parsed.value == 12.0
        assert parsed.consumed == 2
        assert parsed.integer == 12

    def test_incomplete_exponent_is_not_consumed(self):
        for text in ("1e", "1e+", "1E-x"):
            parsed = parse_numeric_prefix(text)
            assert parsed.value == 1.0
            assert parsed.consumed == 1

    def test_float_with_suffix(self):
        parsed = parse_numeric_prefix("-2.5x")
        assert parsed.value == -2.5
        assert parsed.consumed == 4


class TestNoPrefix:
    """Inputs without a numeric prefix silently give zero."""

    @pytest.mark.parametrize("text", ["", "abc", "abcxyz", "abc\nxyz", ".", "-", "+", ".e5", "e5"])
    def test_zero(self, text):
        parsed = parse_numeric_prefix(text)
        assert parsed.value == 0.0
        assert parsed.consumed == 0
        assert not parsed.is_numeric

    def test_leading_whitespace_is_not_skipped(self):
        assert parse_numeric_prefix(" 5").consumed == 0
        assert parse_numeric_prefix("\t5").value == 0.0


class TestRange:
    """Values beyond native ranges."""

    def test_integer_beyond_64_bits_becomes_float(self):
        parsed = parse_numeric_prefix("99999999999999999999")
        assert parsed.integer is None
        assert parsed.value == 1e20

    def test_very_long_integer_prefix(self):
        parsed = parse_numeric_prefix("9" * 5000)
        assert parsed.integer is None
        assert parsed.consumed == 5000
        assert math.isinf(parsed.value)

    def test_very_long_integer_prefix_with_suffix(self):
        parsed = parse_numeric_prefix("1" * 4400 + "abc")
        assert parsed.integer is None
        assert parsed.consumed == 4400
        assert math.isinf(parsed.value)

    def test_nineteen_digits_stay_exact(self):
        parsed = parse_numeric_prefix("9223372036854775807")
        assert parsed.integer == 2 ** 63 - 1

    def test_float_overflow_is_infinite(self):
        assert math.isinf(parse_numeric_prefix("1e999").value)
        assert parse_numeric_prefix("-1e999").value == -math.inf
