"""
grammar.py — KDL token grammar (Parsimonious PEG)
=================================================

The lexical layer of the parser: whitespace, comments, identifiers, strings,
numbers and keywords, following the KDL 1.0 grammar.  The structural layer
(nodes, entries, children) is driven by :mod:`kdlcore.parser`, which matches
individual rules of :data:`KDL_GRAMMAR` at explicit positions::

    node = KDL_GRAMMAR["identifier"].match(text, pos)
    name = TOKENS.visit(node)

:class:`TokenVisitor` turns matched string / identifier / keyword trees into
Python values.

Depends on:
    - parsimonious (PEG parser)
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from parsimonious.exceptions import ParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import Node, NodeVisitor

from .errors import KdlParseError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  PART 1 — KDL TOKEN GRAMMAR
# ═══════════════════════════════════════════════════════════════════

KDL_GRAMMAR = Grammar(r'''
    # ─────────────────────────────────────────────────────────────
    # Whitespace, Newlines & Comments
    # ─────────────────────────────────────────────────────────────

    linespace           = newline / ws / single_line_comment
    node_space          = (ws* escline ws*) / ws+
    ws                  = bom / unicode_space / multi_line_comment
    bom                 = "\uFEFF"
    unicode_space       = ~r"[\t \u00A0\u1680\u2000-\u200A\u202F\u205F\u3000]"
    newline             = "\r\n" / ~r"[\r\n\u0085\u000C\u2028\u2029]"
    eof                 = !~r"."s

    single_line_comment = "//" ~r"[^\r\n\u0085\u000C\u2028\u2029]*" (newline / eof)
    multi_line_comment  = "/*" comment_body* "*/"
    comment_body        = multi_line_comment / ~r"\*(?!/)" / ~r"/(?!\*)" / ~r"[^*/]+"
    escline             = "\\" ws* (single_line_comment / newline)

    slashdash           = "/-" node_space*
    node_terminator     = single_line_comment / newline / ";" / &"}" / eof

    # ─────────────────────────────────────────────────────────────
    # Identifiers
    # ─────────────────────────────────────────────────────────────

    identifier          = string / bare_identifier
    bare_identifier     = !keyword ~r"(?![+-]?[0-9])[^\s\\/(){}<>;\[\]=,\"\uFEFF]+"
    identifier_char     = ~r"[^\s\\/(){}<>;\[\]=,\"\uFEFF]"

    # ─────────────────────────────────────────────────────────────
    # Strings
    # ─────────────────────────────────────────────────────────────

    string              = raw_string / escaped_string
    string_start        = ~r'r#*"' / '"'
    raw_string          = ~r'r(#*)"(.*?)"\1's
    escaped_string      = '"' string_character* '"'
    string_character    = escape / ~r'[^"\\]+'
    escape              = "\\" (simple_escape / unicode_escape)
    simple_escape       = ~r'["\\/bfnrt]'
    unicode_escape      = "u{" ~r"[0-9a-fA-F]{1,6}" "}"

    # ─────────────────────────────────────────────────────────────
    # Numbers
    # ─────────────────────────────────────────────────────────────

    number              = float_literal / integer_literal
    number_start        = ~r"[+-]?[0-9]"
    float_literal       = ~r"[+-]?[0-9][0-9_]*(?:\.[0-9][0-9_]*(?:[eE][+-]?[0-9][0-9_]*)?|[eE][+-]?[0-9][0-9_]*)"
    integer_literal     = hex / octal / binary / decimal
    hex                 = ~r"[+-]?0x[0-9a-fA-F][0-9a-fA-F_]*"
    octal               = ~r"[+-]?0o[0-7][0-7_]*"
    binary              = ~r"[+-]?0b[01][01_]*"
    decimal             = ~r"[+-]?[0-9][0-9_]*"

    # ─────────────────────────────────────────────────────────────
    # Keywords
    # ─────────────────────────────────────────────────────────────

    keyword             = boolean / null
    boolean             = ("true" / "false") !identifier_char
    null                = "null" !identifier_char
''')


SIMPLE_ESCAPES: Mapping[str, str] = MappingProxyType({
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
})

MAX_CODE_POINT = 0x10FFFF


def match_rule(rule: str, text: str, pos: int) -> Optional[Node]:
    """Match grammar *rule* at *pos*; ``None`` when it does not match there."""
    try:
        return KDL_GRAMMAR[rule].match(text, pos)
    except ParseError:
        return None


def expect_rule(rule: str, text: str, pos: int) -> Node:
    """Match grammar *rule* at *pos* or raise a grammar-mismatch failure."""
    node = match_rule(rule, text, pos)
    if node is None:
        raise KdlParseError.from_error_kind(pos)
    return node


def is_bare_identifier(text: str) -> bool:
    """True when *text* would parse back as a bare (unquoted) identifier."""
    node = match_rule("bare_identifier", text, 0)
    return node is not None and node.end == len(text)


# ═══════════════════════════════════════════════════════════════════
#  PART 2 — TOKEN VISITOR (Parse Tree → Python values)
# ═══════════════════════════════════════════════════════════════════

class TokenVisitor(NodeVisitor):
    """Transforms matched identifier / string / keyword trees into values."""

    grammar = KDL_GRAMMAR
    unwrapped_exceptions = (KdlParseError,)

    def generic_visit(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children or node.text

    # ── Identifiers ─────────────────────────────────────────────

    def visit_identifier(self, node: Node, visited_children: List[Any]) -> str:
        return visited_children[0]

    def visit_bare_identifier(self, node: Node, visited_children: List[Any]) -> str:
        return node.text

    # ── Strings ─────────────────────────────────────────────────

    def visit_string(self, node: Node, visited_children: List[Any]) -> str:
        return visited_children[0]

    def visit_raw_string(self, node: Node, visited_children: List[Any]) -> str:
        return node.match.group(2)

    def visit_escaped_string(self, node: Node, visited_children: List[Any]) -> str:
        _, characters, _ = visited_children
        if isinstance(characters, str):
            # Empty string: the quantifier node had nothing to visit.
            return ""
        return "".join(characters)

    def visit_string_character(self, node: Node, visited_children: List[Any]) -> str:
        child = visited_children[0]
        return child if isinstance(child, str) else node.text

    def visit_escape(self, node: Node, visited_children: List[Any]) -> str:
        _, (escaped,) = visited_children
        return escaped

    def visit_simple_escape(self, node: Node, visited_children: List[Any]) -> str:
        return SIMPLE_ESCAPES[node.text]

    def visit_unicode_escape(self, node: Node, visited_children: List[Any]) -> str:
        _, digits, _ = visited_children
        code_point = int(digits, 16)
        if code_point > MAX_CODE_POINT or 0xD800 <= code_point <= 0xDFFF:
            logger.debug("Invalid code point U+%X in escape at %d",
                         code_point, node.start)
            # Point at the backslash that starts the escape.
            raise KdlParseError.from_error_kind(node.start - 1)
        return chr(code_point)

    # ── Keywords ────────────────────────────────────────────────

    def visit_keyword(self, node: Node, visited_children: List[Any]) -> Any:
        return visited_children[0]

    def visit_boolean(self, node: Node, visited_children: List[Any]) -> bool:
        return node.text == "true"

    def visit_null(self, node: Node, visited_children: List[Any]) -> None:
        return None


TOKENS = TokenVisitor()
