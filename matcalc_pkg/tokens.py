"""Token kinds and the token record produced by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    NUMBER = "Number"
    ADD = "Add"  # +
    SUB = "Sub"  # -
    MULT = "Mult"  # *
    DIV = "Div"  # /
    EXP = "Exp"  # ^
    DOT = "Dot"  # .
    CROSS = "Cross"  # x or ×
    CHAR = "Char"  # ( ) [ ] , ; T


# Characters surfaced as CHAR tokens; the parser interprets the literal text
CHAR_TOKENS = frozenset("()[],;T")


@dataclass(frozen=True)
class Token:
    """A single lexer token.

    ``start``/``end`` are half-open character offsets into the source text,
    so ``text == source[start:end]``.
    """

    kind: TokenKind
    text: str
    start: int
    end: int

    def is_char(self, char: str) -> bool:
        return self.kind is TokenKind.CHAR and self.text == char

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "text": self.text,
            "start": self.start,
            "end": self.end,
        }
