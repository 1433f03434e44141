"""Dotted key path resolution against the assembled tree."""

from __future__ import annotations

from typing import Any, Callable

from .options import ParseOptions
from .scope import NodeTable


class _Missing:
    """Singleton returned when a key path does not resolve."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Missing"

    def __bool__(self) -> bool:
        return False


Missing = _Missing()


def normalize_keypath(keypath: str,
                      on_field_name: Callable[[str], str] | None = None) -> list[str]:
    """Split ``a.b.c`` into segments, dropping empty ones (so ``.a`` → ``["a"]``).

    *on_field_name* is applied to every segment.  ``+`` markers are kept; use
    :func:`strip_marker` before indexing.
    """
    segments = [s for s in keypath.split(".") if s]
    if on_field_name is not None:
        segments = [on_field_name(s) for s in segments]
    return segments


def strip_marker(segment: str) -> str:
    return segment.replace("+", "")


def get_path(node: Any, segments: list[str]) -> Any:
    """Follow *segments* from *node*; returns :data:`Missing` on any miss."""
    branch = node
    for segment in segments:
        segment = strip_marker(segment)
        if not segment:
            continue
        if not isinstance(branch, dict) or segment not in branch:
            return Missing
        branch = branch[segment]
    return branch


def has_path(node: Any, segments: list[str]) -> bool:
    return get_path(node, segments) is not Missing


def set_path(node: dict[str, Any], segments: list[str], value: Any,
             table: NodeTable, options: ParseOptions) -> dict[str, Any] | None:
    """Store *value* at *segments* below *node* and return the receiving dict.

    Intermediate segments that are missing or not objects are replaced by
    fresh objects.  String values are trimmed and passed through
    ``options.on_value``; containers are registered under their new parent.
    Returns None when there is no key to store under.
    """
    if not segments:
        return None
    *branches, terminal = segments
    terminal = strip_marker(terminal)

    branch = node
    for segment in branches:
        segment = strip_marker(segment)
        if not segment:
            continue
        child = branch.get(segment)
        if not isinstance(child, dict):
            child = {}
            branch[segment] = child
            table.register(child, branch, segment)
        branch = child

    if isinstance(value, (dict, list)):
        table.register(value, branch)
        branch[terminal] = value
        return branch

    if (
        not options.allow_duplicate_keys
        and terminal in branch
        and not isinstance(branch[terminal], (dict, list))
    ):
        return branch

    if isinstance(value, str):
        value = options.on_value(value.strip(), terminal)
    branch[terminal] = value
    return branch
