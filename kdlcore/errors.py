# kdlcore/errors.py
"""
KDL Diagnostic Model

Error values produced while parsing KDL text, plus the transient failure
state that the grammar productions pass between each other.

Overview:
─────────
    KdlError            - public diagnostic: original input, char offset, cause
    KdlErrorKind        - the classified cause of a KdlError
    ErrorCode           - stable diagnostic codes (``kdl::parse_int`` ...)
    ContextLabel        - fixed set of grammar-production labels
    KdlParseError       - internal failure state raised between productions
    TryFromKdlValueError- value conversion mismatch (no source position)

Cause precedence:
─────────────────
A failure path carries at most one conversion cause and at most one context
label. ``add_context`` only fills in a missing label and never touches a
conversion cause, so the cause reported at the top is

    conversion failure  >  innermost context label  >  unspecified

Example Usage:
──────────────
    from kdlcore import parse_document, KdlError

    try:
        parse_document("server port=abc")
    except KdlError as err:
        print(err.offset)        # 12
        print(err.kind.message)  # Expected a value.
        print(err.render())
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, unique
from functools import total_ordering
from typing import Any, Dict, Optional, Tuple


# ═══════════════════════════════════════════════════════════════════════════════
# CODES AND LABELS
# ═══════════════════════════════════════════════════════════════════════════════

@unique
class ErrorCode(Enum):
    """Diagnostic codes attached to every :class:`KdlErrorKind`."""

    PARSE_INT = "kdl::parse_int"
    PARSE_FLOAT = "kdl::parse_float"
    PARSE_COMPONENT = "kdl::parse_component"
    OTHER = "kdl::other"

    def __str__(self) -> str:
        return self.value


@unique
class ContextLabel(Enum):
    """
    Static descriptions of the grammar productions.

    The value completes the sentence ``"Expected {value}."``.
    """

    NODE = "a node"
    NODE_IDENTIFIER = "a node identifier"
    TYPE_ANNOTATION = "a type annotation"
    ENTRY = "a property or argument"
    PROPERTY = "a property"
    VALUE = "a value"
    STRING = "a string"
    NUMBER = "a number"
    CHILDREN = "a children block"
    CLOSING_BRACE = "a closing '}'"
    NESTING_DEPTH = "children blocks nested no deeper than the parser limit"
    NODE_TERMINATOR = "a node terminator"
    END_OF_INPUT = "end of input"

    def __str__(self) -> str:
        return self.value


# ═══════════════════════════════════════════════════════════════════════════════
# CAUSE
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class KdlErrorKind:
    """
    Additional information specific to the type of parse failure.

    Use the named constructors rather than building instances directly:

        KdlErrorKind.parse_int(exc)             integer literal conversion failed
        KdlErrorKind.parse_float(exc)           float literal conversion failed
        KdlErrorKind.from_context(label)        a grammar production did not match
        KdlErrorKind.other()                    nothing more specific is known

    The native conversion exception is kept in ``source`` for callers that
    want it; equality only looks at its text.
    """

    code: ErrorCode
    context: Optional[ContextLabel] = None
    detail: str = ""
    source: Optional[BaseException] = field(default=None, compare=False, repr=False)

    @classmethod
    def parse_int(cls, exc: BaseException) -> "KdlErrorKind":
        return cls(ErrorCode.PARSE_INT, detail=str(exc), source=exc)

    @classmethod
    def parse_float(cls, exc: BaseException) -> "KdlErrorKind":
        return cls(ErrorCode.PARSE_FLOAT, detail=str(exc), source=exc)

    @classmethod
    def from_context(cls, label: ContextLabel) -> "KdlErrorKind":
        return cls(ErrorCode.PARSE_COMPONENT, context=label)

    @classmethod
    def other(cls) -> "KdlErrorKind":
        return cls(ErrorCode.OTHER)

    @property
    def is_conversion_failure(self) -> bool:
        return self.code in (ErrorCode.PARSE_INT, ErrorCode.PARSE_FLOAT)

    @property
    def message(self) -> str:
        """Human-readable text for this cause."""
        if self.is_conversion_failure:
            return self.detail
        if self.code is ErrorCode.PARSE_COMPONENT and self.context is not None:
            return f"Expected {self.context.value}."
        # Call sites should add context where this shows up.
        return "An unspecified error occurred."

    def sort_key(self) -> Tuple[str, str, str]:
        label = self.context.name if self.context is not None else ""
        return (self.code.value, label, self.detail)

    def __str__(self) -> str:
        return self.message


# ═══════════════════════════════════════════════════════════════════════════════
# PUBLIC DIAGNOSTIC
# ═══════════════════════════════════════════════════════════════════════════════

ERROR_POINTER_CHAR = "^"

# Same set as the grammar's ``newline`` rule.
NEWLINE_RE = re.compile(r"\r\n|[\r\n\u0085\u000C\u2028\u2029]")


@total_ordering
class KdlError(Exception):
    """
    An error that occurred while parsing a KDL document.

    Carries the full source text so a presentation layer can render a
    snippet, the offset (in characters) of the failure site, and the
    :class:`KdlErrorKind` describing why parsing failed.
    """

    def __init__(self, input: str, offset: int, kind: KdlErrorKind) -> None:
        if not 0 <= offset <= len(input):
            raise ValueError(
                f"Error offset {offset} is outside of the input "
                f"(length {len(input)})"
            )
        super().__init__(input, offset, kind)
        self._input = input
        self._offset = offset
        self._kind = kind

    @property
    def input(self) -> str:
        """Source string for the KDL document that failed to parse."""
        return self._input

    @property
    def offset(self) -> int:
        """Offset in chars of the error."""
        return self._offset

    @property
    def kind(self) -> KdlErrorKind:
        return self._kind

    @property
    def code(self) -> ErrorCode:
        return self._kind.code

    # ── Location ────────────────────────────────────────────────────────

    @property
    def line(self) -> int:
        """1-indexed line of the failure site."""
        return self._location()[0]

    @property
    def column(self) -> int:
        """1-indexed column (in chars) of the failure site."""
        return self._location()[1]

    def _location(self) -> Tuple[int, int]:
        line, line_start = 1, 0
        for match in NEWLINE_RE.finditer(self._input, 0, self._offset):
            line += 1
            line_start = match.end()
        return line, self._offset - line_start + 1

    def source_line(self) -> str:
        """The full line of input containing the failure site."""
        lines = NEWLINE_RE.split(self._input)
        index = self.line - 1
        if index < len(lines):
            return lines[index]
        return ""

    # ── Presentation ────────────────────────────────────────────────────

    def render(self) -> str:
        """
        Format the diagnostic with a caret under the offending character.

        Example::

            error[kdl::parse_component]: Expected a value.
             --> 1:13
              |
            1 | server port=abc
              |             ^ here
        """
        line_num = self.line
        column = self.column
        gutter = " " * len(str(line_num))
        return "\n".join([
            f"error[{self.code}]: {self._kind.message}",
            f"{gutter}--> {line_num}:{column}",
            f"{gutter} |",
            f"{line_num} | {self.source_line()}",
            f"{gutter} | {' ' * (column - 1)}{ERROR_POINTER_CHAR} here",
        ])

    def to_json(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "code": self.code.value,
            "message": self._kind.message,
            "offset": self._offset,
            "line": self.line,
            "column": self.column,
            "context": self._kind.context.name if self._kind.context else None,
        }

    # ── Value semantics ─────────────────────────────────────────────────

    def _key(self) -> Tuple[str, int, KdlErrorKind]:
        return (self._input, self._offset, self._kind)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KdlError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: "KdlError") -> bool:
        if not isinstance(other, KdlError):
            return NotImplemented
        return (self._offset, self._kind.sort_key(), self._input) < (
            other._offset, other._kind.sort_key(), other._input
        )

    def __str__(self) -> str:
        return self._kind.message

    def __repr__(self) -> str:
        return f"KdlError(offset={self._offset}, kind={self._kind!r})"


# ═══════════════════════════════════════════════════════════════════════════════
# INTERNAL FAILURE STATE
# ═══════════════════════════════════════════════════════════════════════════════

class KdlParseError(Exception):
    """
    Failure state raised between grammar productions.

    Only lives while a parse is unwinding; :func:`kdlcore.parser.parse_document`
    turns it into a :class:`KdlError` with :meth:`into_error`.

    Attributes:
        pos:     offset in the input where the failing production started
        context: first (innermost) context label applied on the way out
        kind:    conversion cause, if a literal conversion failed
    """

    def __init__(
        self,
        pos: int,
        context: Optional[ContextLabel] = None,
        kind: Optional[KdlErrorKind] = None,
    ) -> None:
        super().__init__(pos, context, kind)
        self.pos = pos
        self.context = context
        self.kind = kind

    @classmethod
    def from_error_kind(cls, pos: int) -> "KdlParseError":
        """A grammar mismatch at ``pos``; carries no cause yet."""
        return cls(pos)

    @classmethod
    def from_external_error(
        cls, pos: int, exc: BaseException, code: ErrorCode
    ) -> "KdlParseError":
        """Lift a native conversion failure for the literal starting at ``pos``."""
        if code is ErrorCode.PARSE_INT:
            kind = KdlErrorKind.parse_int(exc)
        elif code is ErrorCode.PARSE_FLOAT:
            kind = KdlErrorKind.parse_float(exc)
        else:
            raise ValueError(f"{code} is not a conversion error code")
        return cls(pos, kind=kind)

    def add_context(self, label: ContextLabel) -> "KdlParseError":
        """Return a copy labelled with ``label`` unless a label is already set."""
        return KdlParseError(
            self.pos,
            self.context if self.context is not None else label,
            self.kind,
        )

    def finalize(self) -> KdlErrorKind:
        """Pick the single cause that survives to the public error."""
        if self.kind is not None:
            return self.kind
        if self.context is not None:
            return KdlErrorKind.from_context(self.context)
        return KdlErrorKind.other()

    def into_error(self, input: str) -> KdlError:
        offset = len(input) - len(input[self.pos:])
        return KdlError(input, offset, self.finalize())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KdlParseError):
            return NotImplemented
        return (self.pos, self.context, self.kind) == (
            other.pos, other.context, other.kind
        )

    def __hash__(self) -> int:
        return hash((self.pos, self.context, self.kind))

    def __repr__(self) -> str:
        return (
            f"KdlParseError(pos={self.pos}, context={self.context}, "
            f"kind={self.kind!r})"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# CONVERSION ERRORS
# ═══════════════════════════════════════════════════════════════════════════════

class TryFromKdlValueError(Exception):
    """Conversion of a :class:`~kdlcore.document.KdlValue` to a Python type failed."""

    def __init__(self, expected: str, variant: str) -> None:
        super().__init__(expected, variant)
        self.expected = expected
        self.variant = variant

    def __str__(self) -> str:
        return (
            f"Failed to convert from KdlValue::{self.variant} "
            f"to {self.expected}."
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TryFromKdlValueError):
            return NotImplemented
        return (self.expected, self.variant) == (other.expected, other.variant)

    def __hash__(self) -> int:
        return hash((self.expected, self.variant))
