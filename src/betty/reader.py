"""Reader layer: groups tokens into lines and recognises ArchieML productions.

The output is a flat list of :class:`Instruction` objects in document order.
Lines that fit no production become ``buffer`` instructions; deciding what
that text means is left to the preprocessor and the assembler.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Callable

from .instruction import Instruction, InstructionType
from .options import ParseOptions
from .tokenizer import Token, TokenType

logger = logging.getLogger(__name__)

_IGNORE_RE = re.compile(r"ignore", re.IGNORECASE)
_SKIP_RE = re.compile(r"skip", re.IGNORECASE)
_ENDSKIP_RE = re.compile(r"endskip", re.IGNORECASE)
_END_RE = re.compile(r"end(?!skip)", re.IGNORECASE)

# Characters that disqualify a token from being used as a key.
_INVALID_KEY_RE = re.compile(r"[\s?/=\"']")

_T = TokenType


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------

def split_lines(tokens: list[Token]) -> list[list[Token]]:
    """Regroup *tokens* into lines, keeping each newline token in its line.

    A token following a backslash on the same line is replaced by a copy
    flagged ``escaped``; the input tokens are left unchanged.
    """
    lines: list[list[Token]] = []
    line: list[Token] = []
    for token in tokens:
        if line and line[-1].type == TokenType.BACKSLASH and not line[-1].escaped:
            token = replace(token, escaped=True)
        line.append(token)
        if token.is_newline:
            lines.append(line)
            line = []
    if line:
        lines.append(line)
    return lines


def trim_start(line: list[Token]) -> list[Token]:
    """Return *line* without its leading whitespace-only tokens."""
    i = 0
    while i < len(line) and line[i].is_blank:
        i += 1
    return line[i:]


def combine(tokens: list[Token]) -> str:
    return "".join(t.value for t in tokens)


def is_valid_key(key: str) -> bool:
    """A key must be non-empty and free of whitespace and ``? / = " '``."""
    return bool(key) and not _INVALID_KEY_RE.search(key)


def _kind(token: Token) -> TokenType:
    # escaped sigils only ever count as text
    return TokenType.TEXT if token.escaped else token.type


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

class Reader:
    """Line-oriented recogniser producing the instruction stream.

    A Reader holds per-document state; create one per parse.
    """

    def __init__(self, options: ParseOptions | None = None) -> None:
        self.options = ParseOptions.coerce(options)
        self.lines: list[list[Token]] = []
        self.index = 0
        self.instructions: list[Instruction] = []
        self.halted = False

    def read(self, tokens: list[Token]) -> list[Instruction]:
        self.lines = split_lines(tokens)
        self.index = 0
        self.instructions = []
        self.halted = False

        while self.index < len(self.lines):
            if self._match_directive(_IGNORE_RE):
                self._log("Encountered ignore tag, discarding the rest of the document")
                self.halted = True
                break

            if self._match_directive(_SKIP_RE):
                self._skip_command()
                continue

            if self._match_production():
                continue

            if self._match_directive(_END_RE):
                self._flush_buffer()
                continue

            self._buffer()

        return self.instructions

    # -- Token matching -------------------------------------------------

    def _peek(self) -> list[Token]:
        return trim_start(self.lines[self.index])

    def _advance(self) -> list[Token]:
        line = self.lines[self.index]
        self.index += 1
        return line

    def _match_types(self, *types: TokenType) -> bool:
        line = self._peek()
        if len(line) < len(types):
            return False
        return all(_kind(token) == t for token, t in zip(line, types))

    def _match_directive(self, pattern: re.Pattern[str]) -> bool:
        """Match ``:word`` at the start of the current line."""
        line = self._peek()
        return (
            len(line) >= 2
            and _kind(line[0]) == TokenType.COLON
            and _kind(line[1]) == TokenType.TEXT
            and pattern.match(line[1].value) is not None
        )

    def _match_production(self) -> bool:
        productions: tuple[tuple[Callable[[], bool], tuple[TokenType, ...]], ...] = (
            (self._single_value, (_T.TEXT, _T.COLON, _T.TEXT)),
            (self._multiline_value, (_T.TEXT, _T.COLON, _T.COLON, _T.TEXT)),
            (self._simple_list_value, (_T.STAR, _T.TEXT)),
            (self._object_open, (_T.LEFT_BRACE, _T.TEXT, _T.RIGHT_BRACE)),
            (self._object_close, (_T.LEFT_BRACE, _T.RIGHT_BRACE)),
            (self._array_open, (_T.LEFT_BRACKET, _T.TEXT, _T.RIGHT_BRACKET)),
            (self._array_close, (_T.LEFT_BRACKET, _T.RIGHT_BRACKET)),
        )
        for handler, types in productions:
            # a handler returns False to reject the match
            if self._match_types(*types) and handler():
                return True
        return False

    # -- Output ---------------------------------------------------------

    def _emit(self, type_: InstructionType, key: str | None = None,
              value: str | None = None) -> None:
        instruction = Instruction(type_, key, value)
        self._log(f"  {instruction}")
        self.instructions.append(instruction)

    def _log(self, message: str) -> None:
        self.options.trace(logger, message)

    # -- Productions ----------------------------------------------------

    def _skip_command(self) -> None:
        """``:skip`` through ``:endskip`` (inclusive) is dropped."""
        self._log("Encountered skip tag")
        self._advance()
        while self.index < len(self.lines):
            ended = self._match_directive(_ENDSKIP_RE)
            skipped = self._advance()
            if ended:
                break
            self._log(f" > Skipping text: {combine(skipped)!r}")
        self._emit(InstructionType.SKIPPED)

    def _single_value(self) -> bool:
        """key: value"""
        key, _colon, *rest = self._peek()
        k = key.value.strip()
        if not is_valid_key(k):
            return False
        self._emit(InstructionType.VALUE, k, combine(rest))
        self._advance()
        return True

    def _multiline_value(self) -> bool:
        """key:: any number of lines ::key"""
        key, _c1, _c2, *values = self._peek()
        k = key.value.strip()
        if not is_valid_key(k):
            return False
        self._advance()
        ender = k.casefold()
        while self.index < len(self.lines):
            if self._is_multiline_end(ender):
                self._advance()
                break
            values.extend(self._advance())
        self._emit(InstructionType.VALUE, k, combine(values))
        return True

    def _is_multiline_end(self, ender: str) -> bool:
        if not self._match_types(_T.COLON, _T.COLON, _T.TEXT):
            return False
        return self._peek()[2].value.strip().casefold() == ender

    def _simple_list_value(self) -> bool:
        """* item"""
        star, *rest = trim_start(self._advance())
        self._emit(InstructionType.SIMPLE, star.value, combine(rest))
        return True

    def _object_open(self) -> bool:
        """{key}, {} or {/key}"""
        return self._open(InstructionType.OBJECT, InstructionType.CLOSE_OBJECT)

    def _object_close(self) -> bool:
        self._emit(InstructionType.CLOSE_OBJECT)
        self._advance()
        return True

    def _array_open(self) -> bool:
        """[key], [+key], [] or [/key]"""
        return self._open(InstructionType.ARRAY, InstructionType.CLOSE_ARRAY)

    def _array_close(self) -> bool:
        self._emit(InstructionType.CLOSE_ARRAY)
        self._advance()
        return True

    def _open(self, open_type: InstructionType, close_type: InstructionType) -> bool:
        _bracket, key, *_ = self._peek()
        k = key.value.strip()
        if k.startswith("/"):
            # named close; an empty name is just a plain close
            self._emit(close_type, k[1:].strip() or None)
        elif k:
            self._emit(open_type, k)
        else:
            self._emit(close_type)
        self._advance()
        return True

    def _buffer(self) -> None:
        # text is kept verbatim; its meaning depends on what came before
        self._emit(InstructionType.BUFFER, None, combine(self._advance()))

    def _flush_buffer(self) -> None:
        self._emit(InstructionType.FLUSH)
        self._advance()


def read_instructions(tokens: list[Token],
                      options: ParseOptions | None = None) -> list[Instruction]:
    """Convenience wrapper: run a fresh :class:`Reader` over *tokens*."""
    return Reader(options).read(tokens)
