# tests/test_context.py
"""
Tests for the context() decorator that labels sub-parser failures.
"""

import pytest

from kdlcore.context import context
from kdlcore.errors import ContextLabel, ErrorCode, KdlParseError


def _fails_at(pos):
    def parser(_pos):
        raise KdlParseError.from_error_kind(pos)
    return parser


class TestContext:

    def test_success_passes_through(self):
        @context(ContextLabel.VALUE)
        def parser(pos):
            return pos + 3, "abc"

        assert parser(2) == (5, "abc")

    def test_failure_gets_label(self):
        parser = context(ContextLabel.VALUE)(_fails_at(7))
        with pytest.raises(KdlParseError) as info:
            parser(0)
        assert info.value.pos == 7
        assert info.value.context is ContextLabel.VALUE

    def test_innermost_label_wins(self):
        inner = context(ContextLabel.VALUE)(_fails_at(4))
        middle = context(ContextLabel.PROPERTY)(inner)
        outer = context(ContextLabel.NODE)(middle)
        with pytest.raises(KdlParseError) as info:
            outer(0)
        assert info.value.context is ContextLabel.VALUE

    def test_conversion_cause_untouched(self):
        @context(ContextLabel.NUMBER)
        def parser(pos):
            raise KdlParseError.from_external_error(
                pos, OverflowError("number too large to fit in target type"),
                ErrorCode.PARSE_INT)

        with pytest.raises(KdlParseError) as info:
            context(ContextLabel.VALUE)(parser)(9)
        err = info.value
        assert err.pos == 9
        assert err.kind.code is ErrorCode.PARSE_INT
        assert err.finalize().code is ErrorCode.PARSE_INT

    def test_other_exceptions_propagate(self):
        @context(ContextLabel.VALUE)
        def parser(pos):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            parser(0)

    def test_wraps_metadata(self):
        @context(ContextLabel.STRING)
        def quoted(pos):
            """Parse a quoted string."""
            return pos, ""

        assert quoted.__name__ == "quoted"
        assert quoted.__doc__ == "Parse a quoted string."

    def test_works_on_methods(self):
        class Parser:
            @context(ContextLabel.CHILDREN)
            def children(self, pos):
                raise KdlParseError.from_error_kind(pos + 1)

        with pytest.raises(KdlParseError) as info:
            Parser().children(1)
        assert info.value.pos == 2
        assert info.value.context is ContextLabel.CHILDREN
