"""
parser.py — KDL structural parser
=================================

Recursive-descent driver over the token rules of
:data:`kdlcore.grammar.KDL_GRAMMAR`.  Every production is a method
``(pos) -> (new_pos, result)`` wrapped with a :class:`ContextLabel`, so a
failure unwinds with the innermost label that was active::

    document        → linespace* (node linespace*)* EOF
    node            → ('/-' node_space*)? type? identifier
                      (node_space+ entry)*
                      (node_space* children ws*)? node_space* node_terminator
    entry           → ('/-' node_space*)? (property | value)
    property        → identifier '=' value
    value           → type? (string | number | keyword)
    type            → '(' identifier ')'
    children        → ('/-' node_space*)? '{' node* '}'

Choices commit as soon as their first token matches; a failure after that
point is reported, never retried against another alternative.

Usage::

    from kdlcore import parse_document

    doc = parse_document("server port=8080 { tls enabled=true }")
    doc.get("server").get("port")      # KdlValue.integer(8080)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from parsimonious.nodes import Node

from .context import context
from .document import KdlDocument, KdlNode, KdlValue
from .errors import ContextLabel, KdlParseError
from .grammar import TOKENS, expect_rule, match_rule
from .literals import parse_number

logger = logging.getLogger(__name__)

Entry = Union[KdlValue, Tuple[str, KdlValue]]

# Each level costs a handful of Python frames; stay well under the
# interpreter's default recursion limit.
MAX_NESTING_DEPTH = 100


class _Parser:
    """One-shot parser over a single input string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._depth = 0

    # ── Token helpers ───────────────────────────────────────────

    def _match(self, rule: str, pos: int) -> Optional[Node]:
        return match_rule(rule, self._text, pos)

    def _skip(self, rule: str, pos: int) -> int:
        """Consume zero or more repetitions of *rule*."""
        while True:
            node = self._match(rule, pos)
            if node is None or node.end == pos:
                return pos
            pos = node.end

    def _literal(self, literal: str, pos: int) -> int:
        if not self._text.startswith(literal, pos):
            raise KdlParseError.from_error_kind(pos)
        return pos + len(literal)

    def _at_end(self, pos: int) -> bool:
        return pos >= len(self._text)

    # ── Document ────────────────────────────────────────────────

    def document(self) -> List[KdlNode]:
        pos, nodes = self._nodes(0)
        self._end_of_input(pos)
        return nodes

    def _nodes(self, pos: int) -> Tuple[int, List[KdlNode]]:
        nodes: List[KdlNode] = []
        pos = self._skip("linespace", pos)
        while not self._at_end(pos) and not self._text.startswith("}", pos):
            slashdash = self._match("slashdash", pos)
            if slashdash is not None:
                pos, _ = self._node(slashdash.end)
            else:
                pos, node = self._node(pos)
                nodes.append(node)
            pos = self._skip("linespace", pos)
        return pos, nodes

    @context(ContextLabel.END_OF_INPUT)
    def _end_of_input(self, pos: int) -> Tuple[int, None]:
        expect_rule("eof", self._text, pos)
        return pos, None

    # ── Nodes ───────────────────────────────────────────────────

    @context(ContextLabel.NODE)
    def _node(self, pos: int) -> Tuple[int, KdlNode]:
        start = pos
        pos, ty = self._maybe_type(pos)
        pos, name = self._node_identifier(pos)

        values: List[KdlValue] = []
        properties: Dict[str, KdlValue] = {}
        while True:
            entry_pos = self._skip("node_space", pos)
            if entry_pos == pos:
                break
            slashdash = self._match("slashdash", entry_pos)
            if slashdash is not None:
                entry_pos = slashdash.end
            if not self._at_entry(entry_pos):
                if slashdash is not None and not self._text.startswith("{", entry_pos):
                    # A slashdash must comment something out.
                    raise KdlParseError.from_error_kind(entry_pos).add_context(
                        ContextLabel.ENTRY)
                break
            pos, entry = self._entry(entry_pos)
            if slashdash is not None:
                continue
            if isinstance(entry, KdlValue):
                values.append(entry)
            else:
                key, value = entry
                properties[key] = value

        children: Optional[List[KdlNode]] = None
        block_pos = self._skip("node_space", pos)
        slashdash = self._match("slashdash", block_pos)
        if slashdash is not None:
            block_pos = slashdash.end
        if self._text.startswith("{", block_pos) or slashdash is not None:
            pos, nodes = self._children(block_pos)
            if slashdash is None:
                children = nodes
            pos = self._skip("ws", pos)

        pos = self._skip("node_space", pos)
        pos, _ = self._node_terminator(pos)
        logger.debug("Parsed node %r at %d", name, start)
        return pos, KdlNode(name, values, properties, children, ty)

    @context(ContextLabel.NODE_IDENTIFIER)
    def _node_identifier(self, pos: int) -> Tuple[int, str]:
        return self._identifier(pos)

    @context(ContextLabel.NODE_TERMINATOR)
    def _node_terminator(self, pos: int) -> Tuple[int, None]:
        node = expect_rule("node_terminator", self._text, pos)
        return node.end, None

    @context(ContextLabel.CHILDREN)
    def _children(self, pos: int) -> Tuple[int, List[KdlNode]]:
        if self._depth >= MAX_NESTING_DEPTH:
            logger.debug("Children nested deeper than %d at %d",
                         MAX_NESTING_DEPTH, pos)
            raise KdlParseError.from_error_kind(pos).add_context(
                ContextLabel.NESTING_DEPTH)
        self._depth += 1
        try:
            pos = self._literal("{", pos)
            pos, nodes = self._nodes(pos)
            pos, _ = self._closing_brace(pos)
        finally:
            self._depth -= 1
        return pos, nodes

    @context(ContextLabel.CLOSING_BRACE)
    def _closing_brace(self, pos: int) -> Tuple[int, None]:
        return self._literal("}", pos), None

    # ── Entries ─────────────────────────────────────────────────

    def _at_entry(self, pos: int) -> bool:
        """True when a property or an argument starts at *pos*."""
        ident = self._match("identifier", pos)
        if ident is not None and self._text.startswith("=", ident.end):
            return True
        return self._at_value(pos)

    def _at_value(self, pos: int) -> bool:
        return (
            self._text.startswith("(", pos)
            or self._match("string_start", pos) is not None
            or self._match("number_start", pos) is not None
            or self._match("keyword", pos) is not None
        )

    @context(ContextLabel.ENTRY)
    def _entry(self, pos: int) -> Tuple[int, Entry]:
        ident = self._match("identifier", pos)
        if ident is not None and self._text.startswith("=", ident.end):
            return self._property(pos)
        return self._value(pos)

    @context(ContextLabel.PROPERTY)
    def _property(self, pos: int) -> Tuple[int, Tuple[str, KdlValue]]:
        pos, key = self._identifier(pos)
        pos = self._literal("=", pos)
        pos, value = self._value(pos)
        return pos, (key, value)

    @context(ContextLabel.VALUE)
    def _value(self, pos: int) -> Tuple[int, KdlValue]:
        pos, ty = self._maybe_type(pos)
        if self._match("string_start", pos) is not None:
            pos, text = self._string(pos)
            value = KdlValue.string(text)
        elif self._match("number_start", pos) is not None:
            pos, value = self._number(pos)
        else:
            keyword = expect_rule("keyword", self._text, pos)
            literal = TOKENS.visit(keyword)
            if literal is None:
                value = KdlValue.null()
            else:
                value = KdlValue.boolean(literal)
            pos = keyword.end
        if ty is not None:
            value = value.with_type(ty)
        return pos, value

    @context(ContextLabel.NUMBER)
    def _number(self, pos: int) -> Tuple[int, KdlValue]:
        return parse_number(self._text, pos)

    # ── Identifiers, strings, annotations ───────────────────────

    def _identifier(self, pos: int) -> Tuple[int, str]:
        if self._match("string_start", pos) is not None:
            return self._string(pos)
        node = expect_rule("bare_identifier", self._text, pos)
        return node.end, node.text

    @context(ContextLabel.STRING)
    def _string(self, pos: int) -> Tuple[int, str]:
        node = expect_rule("string", self._text, pos)
        return node.end, TOKENS.visit(node)

    def _maybe_type(self, pos: int) -> Tuple[int, Optional[str]]:
        if self._text.startswith("(", pos):
            return self._type_annotation(pos)
        return pos, None

    @context(ContextLabel.TYPE_ANNOTATION)
    def _type_annotation(self, pos: int) -> Tuple[int, str]:
        pos = self._literal("(", pos)
        pos, ty = self._identifier(pos)
        pos = self._literal(")", pos)
        return pos, ty


# ═══════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════

def parse_document(text: str) -> KdlDocument:
    """
    Parse KDL *text* into a :class:`KdlDocument`.

    Raises:
        KdlError: anchored at the failure offset, carrying the most specific
            cause recorded on the failure path.
    """
    logger.debug("Parsing KDL document (%d chars)", len(text))
    try:
        nodes = _Parser(text).document()
    except KdlParseError as err:
        error = err.into_error(text)
        logger.debug("Parse failed at offset %d: %s", error.offset, error)
        raise error from None
    logger.debug("Parsed %d top-level node(s)", len(nodes))
    return KdlDocument(nodes)


def parse_file(path: Union[str, "os.PathLike[str]"], encoding: str = "utf-8") -> KdlDocument:
    """Read *path* and parse its contents with :func:`parse_document`."""
    text = Path(path).read_text(encoding=encoding)
    logger.info("Parsing %s", path)
    return parse_document(text)
