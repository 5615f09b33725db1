# tests/test_convert.py
"""
Tests for the fallible KdlValue → Python scalar conversions.
"""

import pytest

from kdlcore.convert import to_bool, to_float, to_int, to_str, try_into
from kdlcore.document import KdlValue
from kdlcore.errors import TryFromKdlValueError


class TestConverters:

    def test_matching_kinds(self):
        assert to_int(KdlValue.integer(8080)) == 8080
        assert to_float(KdlValue.float_(1.5)) == 1.5
        assert to_str(KdlValue.string("x")) == "x"
        assert to_bool(KdlValue.boolean(False)) is False

    def test_type_annotation_ignored(self):
        assert to_int(KdlValue.integer(7, ty="u8")) == 7

    @pytest.mark.parametrize("converter,value,expected,variant", [
        (to_int, KdlValue.string("8080"), "int", "String"),
        (to_int, KdlValue.float_(1.0), "int", "Float"),
        (to_int, KdlValue.boolean(True), "int", "Boolean"),
        (to_float, KdlValue.integer(1), "float", "Int"),
        (to_str, KdlValue.null(), "str", "Null"),
        (to_bool, KdlValue.integer(0), "bool", "Int"),
    ])
    def test_mismatch(self, converter, value, expected, variant):
        with pytest.raises(TryFromKdlValueError) as info:
            converter(value)
        assert info.value.expected == expected
        assert info.value.variant == variant
        assert str(info.value) == (
            f"Failed to convert from KdlValue::{variant} to {expected}."
        )


class TestTryInto:

    @pytest.mark.parametrize("target,value,expected", [
        (int, KdlValue.integer(3), 3),
        (float, KdlValue.float_(2.5), 2.5),
        (str, KdlValue.string("s"), "s"),
        (bool, KdlValue.boolean(True), True),
    ])
    def test_dispatch(self, target, value, expected):
        assert try_into(value, target) == expected

    def test_mismatch(self):
        with pytest.raises(TryFromKdlValueError):
            try_into(KdlValue.string("3"), int)

    def test_unsupported_target(self):
        with pytest.raises(TypeError):
            try_into(KdlValue.integer(3), list)
