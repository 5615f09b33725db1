#!/usr/bin/env python3
"""kdlcore/main.py — CLI entry-point for kdlcore.

Usage examples
--------------
    # Parse a document and print its canonical KDL form
    python -m kdlcore parse config.kdl

    # Same, as JSON, two-space indented, into a file
    python -m kdlcore parse config.kdl --format json --indent 2 -o config.json

    # Validate several files, reporting a diagnostic per broken file
    python -m kdlcore check a.kdl b.kdl --diagnostics json

    # Show version and exit
    python -m kdlcore --version

Exit codes
----------
    0   Success (every file parsed).
    1   At least one file failed to parse.
    2   Infrastructure failure (missing file, unreadable input, etc.).

The module doubles as ``python -m kdlcore`` via the companion
``kdlcore/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from . import __version__
from .errors import KdlError
from .formatter import FormatConfig, format_document
from .parser import parse_document

_log = logging.getLogger("kdlcore")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``kdlcore`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("kdlcore")
    root.setLevel(level)
    # main() may run more than once per process (tests, embedding).
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)


def _read_source(raw: str) -> str:
    """Read *raw* as UTF-8 text, raising ``SystemExit(EXIT_INFRA)`` on failure."""
    p = Path(raw).expanduser()
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _log.error("cannot read %s: %s", p, exc)
        raise SystemExit(EXIT_INFRA)


def _open_output(dest: Optional[str]) -> TextIO:
    """Return a writable text stream.

    *dest* ``None`` or ``"-"`` → ``sys.stdout``; otherwise open the path
    for writing (creating parent directories as needed).
    """
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _emit_diagnostic(path: str, error: KdlError, fmt: str, stream: TextIO) -> None:
    if fmt == "json":
        payload = {"file": path}
        payload.update(error.to_json())
        stream.write(json.dumps(payload) + "\n")
    else:
        stream.write(f"{path}:\n{error.render()}\n")


# ===========================================================================
# Commands
# ===========================================================================

def cmd_parse(args: argparse.Namespace) -> int:
    """Parse one KDL file and print it back in canonical form."""
    source = _read_source(args.file)
    try:
        document = parse_document(source)
    except KdlError as exc:
        _emit_diagnostic(args.file, exc, "text", sys.stderr)
        return EXIT_ERROR

    out = _open_output(args.output)
    try:
        if args.format == "json":
            out.write(json.dumps(document.to_dict(), indent=args.indent) + "\n")
        else:
            config = FormatConfig(indent=" " * args.indent)
            out.write(format_document(document, config))
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_OK


def cmd_check(args: argparse.Namespace) -> int:
    """Validate KDL files; one diagnostic per file that fails."""
    failed: List[str] = []
    for path in args.files:
        source = _read_source(path)
        try:
            document = parse_document(source)
        except KdlError as exc:
            failed.append(path)
            _emit_diagnostic(path, exc, args.diagnostics, sys.stdout)
            continue
        _log.info("%s: ok (%d top-level node(s))", path, len(document))

    if args.diagnostics == "text":
        sys.stdout.write(f"--- {len(args.files)} file(s), "
                         f"{len(failed)} error(s) ---\n")
    return EXIT_ERROR if failed else EXIT_OK


# ===========================================================================
# Argument parsing
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    parser = argparse.ArgumentParser(
        prog="kdlcore",
        description="kdlcore — parse and validate KDL documents.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              kdlcore parse config.kdl
              kdlcore parse config.kdl --format json -o config.json
              kdlcore check *.kdl
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # --- parse -------------------------------------------------------------
    p_parse = subparsers.add_parser(
        "parse",
        help="Parse a KDL file and print it back.",
    )
    p_parse.add_argument("file", metavar="FILE", help="KDL document to parse.")
    p_parse.add_argument(
        "-f", "--format",
        choices=["kdl", "json"],
        default="kdl",
        help="Output format (default: kdl).",
    )
    p_parse.add_argument(
        "--indent",
        type=int,
        default=4,
        metavar="N",
        help="Spaces per indentation level (default: 4).",
    )
    p_parse.add_argument(
        "-o", "--output",
        default=None,
        metavar="FILE",
        help='Output file ("-" or omit for stdout).',
    )
    p_parse.set_defaults(func=cmd_parse)

    # --- check -------------------------------------------------------------
    p_check = subparsers.add_parser(
        "check",
        help="Validate KDL files and report diagnostics.",
    )
    p_check.add_argument("files", nargs="+", metavar="FILE",
                         help="KDL documents to validate.")
    p_check.add_argument(
        "--diagnostics",
        choices=["text", "json"],
        default="text",
        help="Diagnostic output format (default: text).",
    )
    p_check.set_defaults(func=cmd_check)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the kdlcore CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    # No subcommand given → print help.
    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
