"""ParseOptions — caller-supplied configuration for a parse."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable

from .errors import OptionsError


def _identity_field_name(name: str) -> str:
    return name


def _identity_value(value: str, key: str) -> Any:
    return value


# camelCase spellings accepted for callers porting option objects verbatim.
_ALIASES: dict[str, str] = {
    "onFieldName": "on_field_name",
    "onValue": "on_value",
    "allowDuplicateKeys": "allow_duplicate_keys",
}


@dataclass(frozen=True)
class ParseOptions:
    """Options recognised by :func:`betty.parse`.

    ``on_field_name`` is applied to every key path segment before it indexes
    into an object.  ``on_value`` receives ``(trimmed_value, terminal_key)``
    for every scalar right before storage.
    """

    verbose: bool = False
    on_field_name: Callable[[str], str] = field(default=_identity_field_name)
    on_value: Callable[[str, str], Any] = field(default=_identity_value)
    allow_duplicate_keys: bool = True

    def __post_init__(self) -> None:
        if not callable(self.on_field_name):
            raise OptionsError(
                f"on_field_name must be callable, got {type(self.on_field_name).__name__}"
            )
        if not callable(self.on_value):
            raise OptionsError(
                f"on_value must be callable, got {type(self.on_value).__name__}"
            )

    @classmethod
    def coerce(cls, options: ParseOptions | Mapping[str, Any] | None = None,
               **overrides: Any) -> ParseOptions:
        """Build a ParseOptions from ``None``, a mapping or an instance.

        Keyword *overrides* win over whatever *options* holds.  Unknown names
        raise :class:`OptionsError`.
        """
        if options is None:
            base = cls()
        elif isinstance(options, ParseOptions):
            base = options
        elif isinstance(options, Mapping):
            base = cls(**_normalize_names(options))
        else:
            raise OptionsError(
                f"options must be a ParseOptions or a mapping, got {type(options).__name__}"
            )
        if not overrides:
            return base
        return replace(base, **_normalize_names(overrides))

    def trace(self, log: logging.Logger, message: str) -> None:
        """Write *message* to *log* at DEBUG when verbose tracing is on.

        Newlines and tabs are escaped so each trace stays on one line.
        """
        if not self.verbose:
            return
        log.debug(message.replace("\n", "\\n").replace("\t", "\\t"))


def _normalize_names(raw: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(ParseOptions)}
    result: dict[str, Any] = {}
    for name, value in raw.items():
        name = _ALIASES.get(name, name)
        if name not in known:
            raise OptionsError(f"unknown parse option: {name!r}")
        result[name] = value
    return result
