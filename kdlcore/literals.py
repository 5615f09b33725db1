"""
literals.py — integer and float literal parsers
===============================================

Pure ``(text, pos) -> (new_pos, KdlValue)`` functions.  The token shape comes
from :data:`kdlcore.grammar.KDL_GRAMMAR`; the numeric value comes from Python's
own ``int()`` / ``float()``.  When that conversion fails the native exception
is lifted into the failure state at the first character of the literal::

    >>> parse_number("port=0x1F", 5)
    (9, KdlValue(kind=<ValueKind.INT: 'Int'>, value=31, ty=None))

A position where no literal starts raises a plain grammar mismatch (no cause).
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping, Tuple

from .document import KdlValue
from .errors import ErrorCode, KdlParseError
from .grammar import expect_rule, match_rule

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

RADIX_PREFIXES: Mapping[str, int] = MappingProxyType({
    "0x": 16,
    "0o": 8,
    "0b": 2,
})


def _to_i64(literal: str) -> int:
    digits = literal.replace("_", "")
    sign = ""
    if digits[:1] in "+-":
        sign, digits = digits[0], digits[1:]
    radix = RADIX_PREFIXES.get(digits[:2], 10)
    if radix != 10:
        digits = digits[2:]
    value = int(sign + digits, radix)
    if value > I64_MAX:
        raise OverflowError("number too large to fit in target type")
    if value < I64_MIN:
        raise OverflowError("number too small to fit in target type")
    return value


def _to_f64(literal: str) -> float:
    value = float(literal.replace("_", ""))
    if not math.isfinite(value):
        raise OverflowError("float literal out of range")
    return value


def parse_integer(text: str, pos: int) -> Tuple[int, KdlValue]:
    """Parse a decimal, hex, octal or binary integer literal at *pos*."""
    node = expect_rule("integer_literal", text, pos)
    try:
        value = _to_i64(node.text)
    except (ValueError, OverflowError) as exc:
        raise KdlParseError.from_external_error(pos, exc, ErrorCode.PARSE_INT) from exc
    return node.end, KdlValue.integer(value)


def parse_float(text: str, pos: int) -> Tuple[int, KdlValue]:
    """Parse a float literal (fraction and/or exponent required) at *pos*."""
    node = expect_rule("float_literal", text, pos)
    try:
        value = _to_f64(node.text)
    except (ValueError, OverflowError) as exc:
        raise KdlParseError.from_external_error(pos, exc, ErrorCode.PARSE_FLOAT) from exc
    return node.end, KdlValue.float_(value)


def parse_number(text: str, pos: int) -> Tuple[int, KdlValue]:
    if match_rule("float_literal", text, pos) is not None:
        return parse_float(text, pos)
    return parse_integer(text, pos)
