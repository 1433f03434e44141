"""Tokenizer: raw ArchieML text → flat token sequence."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    LEFT_BRACKET = auto()
    RIGHT_BRACKET = auto()
    COLON = auto()
    STAR = auto()
    BACKSLASH = auto()
    TEXT = auto()


@dataclass(slots=True)
class Token:
    type: TokenType
    value: str
    escaped: bool = False  # set on reader copies when preceded by a backslash

    @property
    def is_newline(self) -> bool:
        return self.type == TokenType.TEXT and self.value == "\n"

    @property
    def is_blank(self) -> bool:
        return not self.value.strip()


# Single characters that always become their own token.  The newline is a
# TEXT token so it survives into buffered values verbatim.
_QUICK: dict[str, TokenType] = {
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ":": TokenType.COLON,
    "*": TokenType.STAR,
    "\\": TokenType.BACKSLASH,
    "\n": TokenType.TEXT,
}


def tokenize(text: str) -> list[Token]:
    """Split *text* into quick tokens and runs of TEXT.

    The document is stripped of surrounding whitespace first; nothing else is
    normalised.  Every character is classified, so this never fails.
    """
    tokens: list[Token] = []
    pending: list[str] = []

    for char in text.strip():
        kind = _QUICK.get(char)
        if kind is None:
            pending.append(char)
            continue
        if pending:
            tokens.append(Token(TokenType.TEXT, "".join(pending)))
            pending = []
        tokens.append(Token(kind, char))

    if pending:
        tokens.append(Token(TokenType.TEXT, "".join(pending)))

    return tokens
