# tests/test_literals.py
"""
Tests for the integer / float literal parsers.
"""

import pytest

from kdlcore.document import KdlValue
from kdlcore.errors import ErrorCode, KdlParseError
from kdlcore.literals import (
    I64_MAX,
    I64_MIN,
    parse_float,
    parse_integer,
    parse_number,
)


class TestParseInteger:

    @pytest.mark.parametrize("text,expected", [
        ("0", 0),
        ("42", 42),
        ("-17", -17),
        ("+8", 8),
        ("1_000_000", 1000000),
        ("0xff", 255),
        ("0xDEAD_BEEF", 0xDEADBEEF),
        ("-0x10", -16),
        ("0o755", 0o755),
        ("0b1010", 10),
        ("-0b1", -1),
    ])
    def test_values(self, text, expected):
        assert parse_integer(text, 0) == (len(text), KdlValue.integer(expected))

    def test_stops_at_token_end(self):
        assert parse_integer("n 12;", 2) == (4, KdlValue.integer(12))

    def test_i64_bounds(self):
        assert parse_integer(str(I64_MAX), 0)[1].value == I64_MAX
        assert parse_integer(str(I64_MIN), 0)[1].value == I64_MIN

    def test_overflow_is_conversion_failure(self):
        text = "port=99999999999999999999"
        with pytest.raises(KdlParseError) as info:
            parse_integer(text, 5)
        err = info.value
        assert err.pos == 5
        assert err.kind.code is ErrorCode.PARSE_INT
        assert err.kind.message == "number too large to fit in target type"
        assert isinstance(err.kind.source, OverflowError)

    def test_underflow_is_conversion_failure(self):
        with pytest.raises(KdlParseError) as info:
            parse_integer(str(I64_MIN - 1), 0)
        assert info.value.kind.message == "number too small to fit in target type"

    @pytest.mark.parametrize("text", ["", "abc", "-", "_1", ".5"])
    def test_no_digits_is_grammar_mismatch(self, text):
        with pytest.raises(KdlParseError) as info:
            parse_integer(text, 0)
        assert info.value.kind is None
        assert info.value.pos == 0


class TestParseFloat:

    @pytest.mark.parametrize("text,expected", [
        ("1.5", 1.5),
        ("-0.25", -0.25),
        ("1e3", 1000.0),
        ("2.5E-2", 0.025),
        ("+1_000.000_1", 1000.0001),
    ])
    def test_values(self, text, expected):
        pos, value = parse_float(text, 0)
        assert pos == len(text)
        assert value == KdlValue.float_(expected)

    def test_requires_fraction_or_exponent(self):
        with pytest.raises(KdlParseError) as info:
            parse_float("12", 0)
        assert info.value.kind is None

    def test_out_of_range_is_conversion_failure(self):
        with pytest.raises(KdlParseError) as info:
            parse_float("x=1e999", 2)
        err = info.value
        assert err.pos == 2
        assert err.kind.code is ErrorCode.PARSE_FLOAT
        assert err.kind.message == "float literal out of range"


class TestParseNumber:

    def test_integer(self):
        assert parse_number("7", 0) == (1, KdlValue.integer(7))

    def test_float(self):
        assert parse_number("7.0", 0) == (3, KdlValue.float_(7.0))

    def test_hex_is_not_float(self):
        assert parse_number("0x1e5", 0) == (5, KdlValue.integer(0x1E5))

    def test_trailing_dot_leaves_dot(self):
        assert parse_number("1.", 0) == (1, KdlValue.integer(1))
