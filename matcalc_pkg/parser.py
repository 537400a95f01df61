"""Recursive-descent parser producing a position-annotated AST.

Precedence, lowest to highest:

    AddSub    := MultDiv (('+'|'-') MultDiv)*
    MultDiv   := Exp (('*'|'/') Exp)*
    Exp       := DotCross ('^' DotCross)*
    DotCross  := Atom (('.'|'×') Atom)*
    Atom      := Matrix | Paren | Literal | 'T'

Every binary level folds left, so ``2^3^2`` groups as ``(2^3)^2``.

Parsing is total: missing tokens are recorded as diagnostics and replaced
by synthesized nodes (zero literals or placeholders with zero-width spans),
so a tree is always returned. Nesting past ``MAX_NESTING_DEPTH`` is skipped
over and replaced by a single Placeholder, which bounds the recursion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from .ast_nodes import (
    BinaryExpression,
    CharLiteral,
    Expression,
    MatrixExpression,
    NumberLiteral,
    ParenExpression,
    Placeholder,
)
from .config import MAX_NESTING_DEPTH
from .logging_config import get_logger
from .tokens import Token, TokenKind

logger = get_logger("parser")

_ADD_SUB_OPS = {TokenKind.ADD: "+", TokenKind.SUB: "-"}
_MULT_DIV_OPS = {TokenKind.MULT: "*", TokenKind.DIV: "/"}
_EXP_OPS = {TokenKind.EXP: "^"}
_DOT_CROSS_OPS = {TokenKind.DOT: ".", TokenKind.CROSS: "×"}

_SEPARATORS = (",", ";")


@dataclass
class _ParseContext:
    """Cursor over the token list plus the diagnostics collected so far."""

    tokens: Sequence[Token]
    index: int = 0
    diagnostics: list[str] = field(default_factory=list)
    last_end: int = 0  # end offset of the last consumed token
    depth: int = 0  # brackets and minus signs currently open

    def peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        self.last_end = token.end
        return token

    def error(self, message: str) -> None:
        self.diagnostics.append(message)


_Operand = Callable[[_ParseContext, Optional[Token]], Expression]


def _starts_atom(token: Token) -> bool:
    if token.kind in (TokenKind.NUMBER, TokenKind.SUB):
        return True
    return token.kind is TokenKind.CHAR and token.text in ("(", "[", "T")


def _missing(ctx: _ParseContext, after_op: Optional[Token]) -> Expression:
    """Synthesize a node where an atom was expected but not found.

    Right after an operator this is a Placeholder at the operator's end;
    elsewhere it is a zero literal collapsed onto the expected position.
    """
    if after_op is not None:
        ctx.error("Expected operand")
        return Placeholder(after_op.end, after_op.end)
    token = ctx.peek()
    position = token.start if token is not None else ctx.last_end
    ctx.error("Expected Number")
    return NumberLiteral(0.0, position, position)


def _parse_binary(
    ctx: _ParseContext,
    operand: _Operand,
    operators: dict[TokenKind, str],
    after_op: Optional[Token],
) -> Expression:
    left = operand(ctx, after_op)
    while True:
        token = ctx.peek()
        if token is None or token.kind not in operators:
            break
        ctx.advance()
        right = operand(ctx, token)
        left = BinaryExpression(
            op=operators[token.kind],
            left=left,
            right=right,
            start=left.start,
            end=right.end,
            op_start=token.start,
            op_end=token.end,
        )
    return left


def _parse_add_sub(ctx: _ParseContext, after_op: Optional[Token] = None) -> Expression:
    return _parse_binary(ctx, _parse_mult_div, _ADD_SUB_OPS, after_op)


def _parse_mult_div(ctx: _ParseContext, after_op: Optional[Token] = None) -> Expression:
    return _parse_binary(ctx, _parse_exp, _MULT_DIV_OPS, after_op)


def _parse_exp(ctx: _ParseContext, after_op: Optional[Token] = None) -> Expression:
    return _parse_binary(ctx, _parse_dot_cross, _EXP_OPS, after_op)


def _parse_dot_cross(ctx: _ParseContext, after_op: Optional[Token] = None) -> Expression:
    return _parse_binary(ctx, _parse_atom, _DOT_CROSS_OPS, after_op)


def _parse_atom(ctx: _ParseContext, after_op: Optional[Token] = None) -> Expression:
    token = ctx.peek()
    if token is None or not _starts_atom(token):
        return _missing(ctx, after_op)
    if token.is_char("T"):
        ctx.advance()
        return CharLiteral("T", token.start, token.end)
    if token.kind is TokenKind.NUMBER:
        ctx.advance()
        return NumberLiteral(float(token.text), token.start, token.end)

    if ctx.depth >= MAX_NESTING_DEPTH:
        return _skip_atom(ctx)
    ctx.depth += 1
    try:
        if token.is_char("["):
            return _parse_matrix(ctx)
        if token.is_char("("):
            return _parse_paren(ctx)
        return _parse_negation(ctx)
    finally:
        ctx.depth -= 1


def _skip_atom(ctx: _ParseContext) -> Placeholder:
    """Consume one atom, brackets balanced, without building it."""
    ctx.error(f"Expression nested too deeply (>{MAX_NESTING_DEPTH} levels)")
    start = ctx.peek().start
    while ctx.peek() is not None and ctx.peek().kind is TokenKind.SUB:
        ctx.advance()
    balance = 0
    while True:
        token = ctx.peek()
        if token is None:
            break
        if token.is_char("(") or token.is_char("["):
            balance += 1
        elif token.is_char(")") or token.is_char("]"):
            if balance == 0:
                break
            balance -= 1
        elif balance == 0 and not _starts_atom(token):
            break
        ctx.advance()
        if balance == 0:
            break
    return Placeholder(start, ctx.last_end)


def _parse_negation(ctx: _ParseContext) -> Expression:
    """Parse a leading minus.

    ``-`` followed by a number folds into the literal. Followed by a
    parenthesis, matrix or another minus it becomes ``-1 * operand``.
    A bare minus degrades to a zero literal spanning the minus itself.
    """
    minus = ctx.advance()
    token = ctx.peek()
    if token is not None and token.kind is TokenKind.NUMBER:
        ctx.advance()
        return NumberLiteral(-float(token.text), minus.start, token.end)
    if token is not None and (
        token.is_char("(") or token.is_char("[") or token.kind is TokenKind.SUB
    ):
        operand = _parse_atom(ctx)
        return BinaryExpression(
            op="*",
            left=NumberLiteral(-1.0, minus.start, minus.end),
            right=operand,
            start=minus.start,
            end=operand.end,
            op_start=minus.start,
            op_end=minus.end,
        )
    ctx.error("Expected Number")
    return NumberLiteral(0.0, minus.start, minus.end)


def _parse_paren(ctx: _ParseContext) -> ParenExpression:
    lparen = ctx.advance()
    inner = _parse_add_sub(ctx)
    token = ctx.peek()
    if token is not None and token.is_char(")"):
        ctx.advance()
        return ParenExpression(inner, lparen.start, token.end)
    ctx.error("Expected RParen")
    return ParenExpression(inner, lparen.start, inner.end)


def _parse_matrix(ctx: _ParseContext) -> MatrixExpression:
    """Parse ``[`` ... ``]`` into rows.

    Elements and separators are first collected as a flat list, then folded
    into rows by :func:`_fold_rows`.
    """
    lbracket = ctx.advance()
    items: list[Expression] = []
    close: Optional[Token] = None
    while True:
        token = ctx.peek()
        if token is None:
            ctx.error("Expected RBracket")
            break
        if token.is_char("]"):
            close = ctx.advance()
            break
        if token.kind is TokenKind.CHAR and token.text in _SEPARATORS:
            ctx.advance()
            items.append(CharLiteral(token.text, token.start, token.end))
            continue
        if token.is_char(")"):
            ctx.advance()
            ctx.error("Unexpected token ')'")
            continue
        items.append(_parse_add_sub(ctx))

    rows = _fold_rows(ctx, items, lbracket, close)
    if close is not None:
        end = close.end
    elif items:
        end = items[-1].end
    else:
        end = lbracket.end
    return MatrixExpression(rows, lbracket.start, end)


def _is_separator(item: Expression) -> bool:
    return isinstance(item, CharLiteral) and item.value in _SEPARATORS


def _fold_rows(
    ctx: _ParseContext,
    items: list[Expression],
    lbracket: Token,
    close: Optional[Token],
) -> tuple[tuple[Expression, ...], ...]:
    rows: list[list[Expression]] = [[]]
    expecting_expr = True
    for item in items:
        if _is_separator(item):
            if expecting_expr:
                rows[-1].append(Placeholder(item.start, item.start))
            if item.value == ";":
                rows.append([])
            expecting_expr = True
        elif expecting_expr:
            rows[-1].append(item)
            expecting_expr = False
        else:
            ctx.error("Expected ',' or ';'")

    if expecting_expr:
        if close is not None:
            position = close.start
        elif items:
            position = items[-1].end
        else:
            position = lbracket.end
        rows[-1].append(Placeholder(position, position))

    return tuple(tuple(row) for row in rows)


def parse(tokens: Sequence[Token]) -> tuple[Expression, list[str]]:
    """Parse a token sequence into an expression tree.

    Args:
        tokens: Output of :func:`matcalc_pkg.lexer.lex`

    Returns:
        Tuple of (root expression, diagnostics). The tree is usable even
        when diagnostics is non-empty.
    """
    ctx = _ParseContext(tokens)
    expr = _parse_add_sub(ctx)
    leftover = ctx.peek()
    if leftover is not None:
        ctx.error(f"Unexpected token '{leftover.text}'")
    if ctx.diagnostics:
        logger.debug("Parsed %d tokens with diagnostics: %s", len(tokens), ctx.diagnostics)
    return expr, ctx.diagnostics
