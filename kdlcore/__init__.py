"""
kdlcore — KDL document parsing core
===================================

Parses text in the KDL document language into an immutable tree and reports
failures as a single :class:`KdlError` anchored at a character offset.

Quick start
-----------
>>> from kdlcore import parse_document
>>> doc = parse_document("server port=8080 { tls enabled=true }")
>>> doc.get("server").get("port").value
8080

Package layout
--------------
errors      diagnostics (``KdlError``) and the internal failure state
context     context labels for grammar productions
grammar     parsimonious token grammar
literals    integer / float literal parsers
parser      structural parser, ``parse_document`` / ``parse_file``
document    ``KdlDocument`` / ``KdlNode`` / ``KdlValue``
formatter   KDL text rendering
convert     ``KdlValue`` → Python scalar conversions
main        command-line interface
"""

__version__ = "0.1.0"

from .convert import to_bool, to_float, to_int, to_str, try_into
from .document import KdlDocument, KdlNode, KdlValue, ValueKind
from .errors import (
    ContextLabel,
    ErrorCode,
    KdlError,
    KdlErrorKind,
    KdlParseError,
    TryFromKdlValueError,
)
from .formatter import FormatConfig, format_document, format_node, format_value
from .parser import parse_document, parse_file

__all__ = [
    "__version__",
    # parsing
    "parse_document",
    "parse_file",
    # tree
    "KdlDocument",
    "KdlNode",
    "KdlValue",
    "ValueKind",
    # diagnostics
    "ContextLabel",
    "ErrorCode",
    "KdlError",
    "KdlErrorKind",
    "KdlParseError",
    "TryFromKdlValueError",
    # rendering
    "FormatConfig",
    "format_document",
    "format_node",
    "format_value",
    # conversions
    "to_bool",
    "to_float",
    "to_int",
    "to_str",
    "try_into",
]
