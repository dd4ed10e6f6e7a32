"""Escape-aware bracket tokenizer for yUML expression lines."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

DEFAULT_ESCAPE = "\\"

CLOSERS = {
    "(": ")",
    "[": "]",
    "<": ">",
    "|": "|",
}


class TokenKind(str, Enum):
    """Delimiter family of a token."""

    PAREN = "paren"
    ANGLE = "angle"
    PIPE = "pipe"
    BRACKET = "bracket"
    BARE = "bare"


KIND_BY_OPENER = {
    "(": TokenKind.PAREN,
    "<": TokenKind.ANGLE,
    "|": TokenKind.PIPE,
    "[": TokenKind.BRACKET,
}


@dataclass(frozen=True)
class Token:
    """A trimmed slice of an expression line."""

    text: str
    kind: TokenKind = TokenKind.BARE

    @property
    def inner(self) -> str:
        """Text between the delimiters, or the whole text for bare tokens."""
        if self.kind is TokenKind.BARE:
            return self.text
        return self.text[1:-1]

    def __str__(self) -> str:
        return self.text


def tokenize(line: str, openers: Iterable[str], escape: str = DEFAULT_ESCAPE) -> list[Token]:
    """Split a line into bracketed and bare tokens.

    Text outside brackets (arrows, connectors, guard labels in grammars that
    do not open on ``[``) becomes a bare token. An escape character copies
    itself and the next character verbatim. An opener that is never closed
    swallows the rest of the line into one trailing bare token.

    Args:
        line: One expression line
        openers: Characters that start a bracketed token
        escape: Escape character

    Returns:
        Tokens in line order, trimmed, with empty ones dropped
    """
    openers = set(openers)
    tokens: list[Token] = []
    word = ""
    opener: Optional[str] = None

    def flush(text: str, kind: TokenKind = TokenKind.BARE):
        text = text.strip()
        if text:
            tokens.append(Token(text, kind))

    i = 0
    while i < len(line):
        char = line[i]

        if char == escape and i + 1 < len(line):
            word += char + line[i + 1]
            i += 2
            continue

        if opener is None and char in openers:
            flush(word)
            opener = char
            word = char
        elif opener is not None and char == CLOSERS[opener]:
            flush(word.strip() + char, KIND_BY_OPENER[opener])
            opener = None
            word = ""
        else:
            word += char
        i += 1

    flush(word)
    return tokens
