"""
formatter.py — render KDL trees back to text
============================================

Output re-parses to an equal tree::

    parse_document(format_document(doc)) == doc

Layout is fixed: one node per line, entries separated by single spaces,
children indented by :attr:`FormatConfig.indent`.  Comments and original
spacing are not preserved.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from .document import KdlDocument, KdlNode, KdlValue, ValueKind
from .grammar import is_bare_identifier

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


@dataclass(frozen=True)
class FormatConfig:
    """Rendering options."""
    indent: str = "    "

    def __post_init__(self) -> None:
        if self.indent.strip(" \t"):
            raise ValueError(f"indent must be spaces or tabs, got {self.indent!r}")


DEFAULT_CONFIG = FormatConfig()


def escape_string(text: str) -> str:
    """Quote *text* as a KDL escaped string."""
    out = ['"']
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def format_identifier(name: str) -> str:
    if is_bare_identifier(name):
        return name
    return escape_string(name)


def _format_annotation(ty: Optional[str]) -> str:
    return "" if ty is None else f"({format_identifier(ty)})"


def format_value(value: KdlValue) -> str:
    """Render a single argument or property value."""
    if value.kind is ValueKind.STRING:
        body = escape_string(value.value)
    elif value.kind is ValueKind.INT:
        body = str(value.value)
    elif value.kind is ValueKind.FLOAT:
        if not math.isfinite(value.value):
            raise ValueError(f"{value.value!r} has no KDL representation")
        body = repr(value.value)
    elif value.kind is ValueKind.BOOLEAN:
        body = "true" if value.value else "false"
    else:
        body = "null"
    return _format_annotation(value.ty) + body


def format_node(node: KdlNode, config: FormatConfig = DEFAULT_CONFIG,
                depth: int = 0) -> str:
    """Render *node* and its children, indented *depth* levels."""
    prefix = config.indent * depth
    parts = [_format_annotation(node.ty) + format_identifier(node.name)]
    parts.extend(format_value(v) for v in node.values)
    parts.extend(f"{format_identifier(k)}={format_value(v)}"
                 for k, v in node.properties.items())
    line = prefix + " ".join(parts)

    if node.children is None:
        return line
    if not node.children:
        return line + " {}"
    lines: List[str] = [line + " {"]
    lines.extend(format_node(child, config, depth + 1) for child in node.children)
    lines.append(prefix + "}")
    return "\n".join(lines)


def format_document(document: KdlDocument,
                    config: FormatConfig = DEFAULT_CONFIG) -> str:
    """Render a whole document; non-empty output ends with a newline."""
    if not document.nodes:
        return ""
    return "\n".join(format_node(node, config) for node in document.nodes) + "\n"
