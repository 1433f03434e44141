"""Document — the result of running the full parse pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .assembler import Assembler
from .errors import OptionsError
from .instruction import Instruction
from .options import ParseOptions
from .preprocess import preprocess
from .reader import Reader
from .tokenizer import tokenize


@dataclass
class Document:
    """Holds the assembled tree along with how it was built."""

    data: dict[str, Any] = field(default_factory=dict)
    instructions: list[Instruction] = field(default_factory=list)
    halted: bool = False  # True when ``:ignore`` cut the document short


def parse_document(text: str,
                   options: ParseOptions | Mapping[str, Any] | None = None,
                   **overrides: Any) -> Document:
    """Parse *text* and return a :class:`Document`.

    Every stage is a fresh instance, so separate calls share no state.
    """
    if not isinstance(text, str):
        raise OptionsError(f"text must be a str, got {type(text).__name__}")
    opts = ParseOptions.coerce(options, **overrides)

    tokens = tokenize(text.replace("\r", ""))
    reader = Reader(opts)
    instructions = preprocess(reader.read(tokens), opts)
    data = Assembler(opts).assemble(instructions)
    return Document(data=data, instructions=instructions, halted=reader.halted)


def parse(text: str,
          options: ParseOptions | Mapping[str, Any] | None = None,
          **overrides: Any) -> dict[str, Any]:
    """Parse ArchieML *text* into nested dicts, lists and scalars.

    Usage::

        parse("key: value")                       # → {"key": "value"}
        parse(text, on_field_name=str.lower)
        parse(text, {"onValue": coerce_scalar})
    """
    return parse_document(text, options, **overrides).data
