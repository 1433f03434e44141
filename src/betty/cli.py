"""Command-line entry point: ``betty FILE`` / ``python -m betty``.

Reads an ArchieML document from a file (or stdin) and prints the parsed
tree as JSON, or re-serialised as ArchieML with ``--aml``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import IO, Any, Sequence

from .document import parse
from .errors import BettyError
from .options import ParseOptions
from .values import coerce_scalar
from .writer import dumps


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="betty",
        description="Parse an ArchieML document and print the result.",
    )
    parser.add_argument("file", nargs="?", help="document to read (default: stdin)")
    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument("--json", dest="format", action="store_const", const="json",
                     help="print JSON (default)")
    fmt.add_argument("--aml", dest="format", action="store_const", const="aml",
                     help="print ArchieML")
    parser.add_argument("--lower-keys", action="store_true",
                        help="lower-case every key segment")
    parser.add_argument("--coerce", action="store_true",
                        help="convert booleans, numbers and timestamps")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="trace instructions to stderr")
    parser.set_defaults(format="json")
    return parser


def _read_source(path: str | None) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as fh:
        return fh.read()


def _options(args: argparse.Namespace) -> ParseOptions:
    overrides: dict[str, Any] = {"verbose": args.verbose}
    if args.lower_keys:
        overrides["on_field_name"] = str.lower
    if args.coerce:
        overrides["on_value"] = coerce_scalar
    return ParseOptions(**overrides)


def render(data: dict[str, Any], fmt: str) -> str:
    """Format a parsed tree for display."""
    if fmt == "aml":
        return dumps(data).rstrip("\n")
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def main(argv: Sequence[str] | None = None, dest: IO[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    dest = dest or sys.stdout

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        text = _read_source(args.file)
    except OSError as exc:
        print(f"Error reading '{args.file}': {exc}", file=sys.stderr)
        return 1

    try:
        output = render(parse(text, _options(args)), args.format)
    except BettyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(output, file=dest)
    return 0


if __name__ == "__main__":
    sys.exit(main())
