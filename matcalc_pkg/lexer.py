"""Tokenizer for the expression language.

Scans left to right without backtracking. Whitespace and unrecognized
characters produce no token; the lexer never raises.
"""

from __future__ import annotations

from .logging_config import get_logger
from .tokens import CHAR_TOKENS, Token, TokenKind

logger = get_logger("lexer")

OPERATOR_KINDS = {
    "+": TokenKind.ADD,
    "-": TokenKind.SUB,
    "*": TokenKind.MULT,
    "/": TokenKind.DIV,
    "^": TokenKind.EXP,
    "x": TokenKind.CROSS,
    "×": TokenKind.CROSS,
}


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _scan_digits(text: str, i: int) -> int:
    """Return the index just past the digit run starting at ``i``."""
    while i < len(text) and _is_digit(text[i]):
        i += 1
    return i


def lex(text: str) -> list[Token]:
    """Split ``text`` into tokens.

    Args:
        text: Raw expression text (e.g., "[1,2;3,4]^T")

    Returns:
        Tokens in input order, each spanning exactly the characters it consumed
    """
    tokens: list[Token] = []
    i = 0
    length = len(text)

    while i < length:
        char = text[i]
        start = i

        if char.isspace():
            i += 1
            continue

        if _is_digit(char):
            i = _scan_digits(text, i)
            if i < length and text[i] == ".":
                i = _scan_digits(text, i + 1)
            tokens.append(Token(TokenKind.NUMBER, text[start:i], start, i))
            continue

        if char == ".":
            if i + 1 < length and _is_digit(text[i + 1]):
                i = _scan_digits(text, i + 1)
                tokens.append(Token(TokenKind.NUMBER, text[start:i], start, i))
            else:
                i += 1
                tokens.append(Token(TokenKind.DOT, char, start, i))
            continue

        kind = OPERATOR_KINDS.get(char)
        if kind is not None:
            i += 1
            tokens.append(Token(kind, char, start, i))
            continue

        if char in CHAR_TOKENS:
            i += 1
            tokens.append(Token(TokenKind.CHAR, char, start, i))
            continue

        # Unsupported character: dropped
        i += 1

    logger.debug("Lexed %d characters into %d tokens", length, len(tokens))
    return tokens
