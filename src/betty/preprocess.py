"""Instruction preprocessing: merge runs of free text into single buffers.

The reader emits one ``buffer`` per unmatched line.  Before assembly those
lines are merged so that a prose paragraph is one logical block, and text
closed by ``:end`` is appended to the value it continues.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from .instruction import STRUCTURAL, Instruction, InstructionType
from .options import ParseOptions

logger = logging.getLogger(__name__)

# first backslash at the start of any line in a merged block
_LEADING_BACKSLASH_RE = re.compile(r"^\\", re.MULTILINE)


def merge_buffer(parts: list[str]) -> str:
    """Join buffered fragments, removing one line-leading escape backslash."""
    return _LEADING_BACKSLASH_RE.sub("", "".join(parts), count=1)


def preprocess(instructions: list[Instruction],
               options: ParseOptions | None = None) -> list[Instruction]:
    """Return a new instruction list with buffered text merged.

    Value instructions are copied before being extended by ``:end``, so the
    input list is left untouched.
    """
    options = ParseOptions.coerce(options)
    processed: list[Instruction] = []
    pending: list[str] = []
    open_value: Instruction | None = None

    def flush_pending() -> None:
        merged = merge_buffer(pending)
        if merged.strip():
            processed.append(Instruction(InstructionType.BUFFER, None, merged))
        pending.clear()

    def absorb_buffers(start: int) -> int:
        # merge every buffer directly following *start*; returns the last index used
        i = start
        while i + 1 < len(instructions) and instructions[i + 1].type == InstructionType.BUFFER:
            i += 1
            pending.append(instructions[i].value or "")
        return i

    options.trace(logger, "Preprocessing...")
    i = 0
    while i < len(instructions):
        instruction = instructions[i]
        kind = instruction.type

        if kind == InstructionType.SIMPLE:
            if open_value is None or open_value.type == InstructionType.SIMPLE:
                flush_pending()
                open_value = replace(instruction)
                processed.append(open_value)
            else:
                # a list item inside an open value is just more text
                options.trace(logger, "  Simple item folded into open value")
                pending.append((instruction.key or "") + (instruction.value or ""))
                i = absorb_buffers(i)

        elif kind == InstructionType.BUFFER:
            options.trace(logger, "  Merging buffer instructions...")
            pending.append(instruction.value or "")
            i = absorb_buffers(i)

        elif kind == InstructionType.VALUE:
            if open_value is not None and open_value.type == InstructionType.SIMPLE:
                pending.append(f"{instruction.key}:{instruction.value}")
            else:
                options.trace(logger, f"  Value encountered: {instruction.key}")
                flush_pending()
                open_value = replace(instruction)
                processed.append(open_value)

        elif kind == InstructionType.FLUSH:
            if pending:
                merged = merge_buffer(pending)
                if open_value is not None and merged.strip():
                    open_value.value = (open_value.value or "") + merged
                else:
                    processed.append(Instruction(InstructionType.BUFFER, None, merged))
            pending.clear()

        elif kind in STRUCTURAL:
            flush_pending()
            options.trace(logger, f"  Encountered {kind.value}, clearing buffer")
            open_value = None
            processed.append(instruction)

        else:
            open_value = None
            processed.append(instruction)

        i += 1

    options.trace(logger, "Clearing out dangling buffer items...")
    flush_pending()
    return processed
