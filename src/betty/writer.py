"""Writer: serialise a parsed tree back to ArchieML text.

``parse(dumps(tree))`` reproduces ``tree`` for any tree the grammar can
express.  Trees it cannot express (keys with whitespace or dots, mixed-type
arrays, rows that would merge) raise :class:`SerializationError`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from .errors import SerializationError
from .reader import is_valid_key

# characters that would be read as sigils or path separators inside a key
_KEY_SIGILS_RE = re.compile(r"[.+{}\[\]:*\\]")

# prose that the reader would not treat as plain text
_STRUCTURAL_LINE_RE = re.compile(r"""^\s*(?:[{\[*:\\]|[^\s:?/="']+:)""")


def dumps(data: Mapping[str, Any]) -> str:
    """Return ArchieML text for the object *data*."""
    lines: list[str] = []
    _write_fields(data, lines, relative=False)
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, datetime):
        if value.utcoffset() == timedelta(0):
            return value.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        return value.isoformat()
    return str(value)


def _write_scalar(key: str, value: Any, lines: list[str]) -> None:
    text = format_scalar(value).strip()
    if text and "\n" not in text:
        lines.append(f"{key}: {text}")
        return
    # empty and multi-line values both use the block form
    ender = key.casefold()
    for line in text.split("\n"):
        stripped = line.strip()
        if stripped.startswith("::") and stripped[2:].strip().casefold() == ender:
            raise SerializationError(f"value of {key!r} contains its own end tag")
    lines.append(f"{key}::")
    if text:
        lines.append(text)
    lines.append(f"::{key}")


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------

def _check_key(key: Any) -> str:
    if not isinstance(key, str) or not is_valid_key(key) or _KEY_SIGILS_RE.search(key):
        raise SerializationError(f"key {key!r} cannot be written as ArchieML")
    return key


def _write_fields(obj: Mapping[str, Any], lines: list[str], relative: bool) -> None:
    prefix = "." if relative else ""
    for key, value in obj.items():
        key = _check_key(key)
        if isinstance(value, Mapping):
            lines.append(f"{{{prefix}{key}}}")
            _write_fields(value, lines, relative=True)
            lines.append("{}")
        elif isinstance(value, list):
            _write_array(prefix, key, value, lines)
        else:
            _write_scalar(key, value, lines)


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------

def _is_record(item: Any) -> bool:
    return isinstance(item, Mapping) and set(item) == {"type", "value"}


def _write_array(prefix: str, key: str, items: list[Any], lines: list[str]) -> None:
    if items and all(_is_record(item) for item in items):
        lines.append(f"[{prefix}+{key}]")
        _write_freeform(items, lines)
    elif items and all(isinstance(item, Mapping) for item in items):
        lines.append(f"[{prefix}{key}]")
        _write_rows(key, items, lines)
    elif all(not isinstance(item, (Mapping, list)) for item in items):
        lines.append(f"[{prefix}{key}]")
        for item in items:
            text = format_scalar(item)
            if "\n" in text:
                raise SerializationError(f"list item in {key!r} spans several lines")
            lines.append(f"* {text}")
    else:
        raise SerializationError(f"array {key!r} mixes item types")
    lines.append("[]")


def _write_rows(key: str, rows: list[Mapping[str, Any]], lines: list[str]) -> None:
    previous: Mapping[str, Any] | None = None
    for row in rows:
        if not row:
            raise SerializationError(f"array {key!r} contains an empty row")
        first = next(iter(row))
        if previous is not None and first not in previous:
            # the row would be merged into the one before it
            raise SerializationError(
                f"row in {key!r} must start with a key used by the previous row"
            )
        _write_fields(row, lines, relative=True)
        previous = row


def _write_freeform(records: list[Mapping[str, Any]], lines: list[str]) -> None:
    for record in records:
        kind, value = record["type"], record["value"]
        if kind == "text" and not isinstance(value, (Mapping, list)):
            text = format_scalar(value)
            if not text.strip() or "\n" in text or _STRUCTURAL_LINE_RE.match(text):
                raise SerializationError(f"text {text!r} would not read back as prose")
            lines.append(text)
            continue
        kind = _check_key(kind)
        if isinstance(value, Mapping):
            lines.append(f"{{.{kind}}}")
            _write_fields(value, lines, relative=True)
            lines.append("{}")
        elif isinstance(value, list):
            raise SerializationError(f"freeform record {kind!r} holds an array")
        else:
            _write_scalar(kind, value, lines)
