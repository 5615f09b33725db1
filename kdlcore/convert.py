"""
convert.py — fallible KdlValue → Python scalar conversions
==========================================================

Each converter accepts exactly one :class:`ValueKind`; anything else raises
:class:`~kdlcore.errors.TryFromKdlValueError` naming the expected Python type
and the actual variant.  These errors carry no source position.

    >>> to_int(KdlValue.integer(8080))
    8080
    >>> to_int(KdlValue.string("8080"))
    Traceback (most recent call last):
      ...
    kdlcore.errors.TryFromKdlValueError: Failed to convert from KdlValue::String to int.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping

from .document import KdlValue, ValueKind
from .errors import TryFromKdlValueError


def _expect(value: KdlValue, kind: ValueKind, expected: str) -> Any:
    if value.kind is not kind:
        raise TryFromKdlValueError(expected, value.kind.value)
    return value.value


def to_int(value: KdlValue) -> int:
    return _expect(value, ValueKind.INT, "int")


def to_float(value: KdlValue) -> float:
    return _expect(value, ValueKind.FLOAT, "float")


def to_str(value: KdlValue) -> str:
    return _expect(value, ValueKind.STRING, "str")


def to_bool(value: KdlValue) -> bool:
    return _expect(value, ValueKind.BOOLEAN, "bool")


CONVERTERS: Mapping[type, Callable[[KdlValue], Any]] = MappingProxyType({
    int: to_int,
    float: to_float,
    str: to_str,
    bool: to_bool,
})


def try_into(value: KdlValue, target_type: type) -> Any:
    """Convert *value* to ``target_type`` (one of ``int, float, str, bool``)."""
    try:
        converter = CONVERTERS[target_type]
    except KeyError:
        raise TypeError(f"no KdlValue conversion to {target_type!r}") from None
    return converter(value)
