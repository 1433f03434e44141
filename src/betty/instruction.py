"""Instruction — intermediate representation between reader and assembler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InstructionType(Enum):
    VALUE = "value"
    SIMPLE = "simple"
    OBJECT = "object"
    CLOSE_OBJECT = "closeObject"
    ARRAY = "array"
    CLOSE_ARRAY = "closeArray"
    BUFFER = "buffer"
    FLUSH = "flush"
    SKIPPED = "skipped"


# Instructions that open or close a container.
STRUCTURAL = frozenset({
    InstructionType.OBJECT,
    InstructionType.ARRAY,
    InstructionType.CLOSE_OBJECT,
    InstructionType.CLOSE_ARRAY,
})


@dataclass
class Instruction:
    type: InstructionType
    key: str | None = None    # None for buffers, flushes and unnamed closes
    value: str | None = None

    def __str__(self) -> str:
        parts = [self.type.value]
        if self.key:
            parts.append(self.key)
        if self.value:
            parts.append(self.value)
        return "/".join(parts)
