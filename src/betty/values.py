"""Scalar coercion helpers usable as an ``on_value`` transform."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?\d+\.\d+$")
_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$")


def coerce_scalar(value: str, key: str = "") -> Any:
    """Convert a trimmed string to bool, int, float or datetime when it looks like one.

    - ``true`` / ``false`` → bool
    - ``42`` / ``-5`` → int, ``3.14`` → float
    - ``2020-02-10T15:00:00.000Z`` → timezone-aware datetime
    - everything else, including impossible dates, is returned unchanged
    """
    if value in ("true", "false"):
        return value == "true"
    if _INT_RE.match(value):
        return int(value)
    if _FLOAT_RE.match(value):
        return float(value)
    if _TIMESTAMP_RE.match(value):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            # shaped like a timestamp but not a real date (month 13, Feb 30)
            return value
    return value
