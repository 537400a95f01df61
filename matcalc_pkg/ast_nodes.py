"""Abstract syntax tree nodes for the expression language.

Every node carries a half-open ``[start, end)`` span into the source text.
Nodes are frozen dataclasses: the parser and simplifier build new nodes and
never modify existing ones.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterator, Union

# Binary operators in the order of the dispatch table
OPERATORS = ("+", "-", "*", "/", "^", ".", "×")


@dataclass(frozen=True)
class NumberLiteral:
    """A numeric literal, or a computed scalar value."""

    value: float
    start: int = 0
    end: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        value: Any = self.value
        if math.isnan(self.value) or math.isinf(self.value):
            value = str(self.value)
        return {
            "kind": "NumberLiteral",
            "value": value,
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class CharLiteral:
    """A punctuation or marker character surfaced into the tree.

    Used for matrix separators while parsing and for the transpose marker
    ``T``. An empty value marks a syntactically invalid slot.
    """

    value: str
    start: int = 0
    end: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "CharLiteral",
            "value": self.value,
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class BinaryExpression:
    """``left op right``; ``op_start``/``op_end`` locate the operator token."""

    op: str
    left: Expression
    right: Expression
    start: int = 0
    end: int = 0
    op_start: int = 0
    op_end: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "BinaryExpression",
            "op": self.op,
            "opStart": self.op_start,
            "opEnd": self.op_end,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class ParenExpression:
    expr: Expression
    start: int = 0
    end: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "ParenExpression",
            "expr": self.expr.to_dict(),
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class MatrixExpression:
    """Rows of element expressions. Rows may be ragged for in-progress input."""

    matrix: tuple[tuple[Expression, ...], ...]
    start: int = 0
    end: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": "MatrixExpression",
            "matrix": [[element.to_dict() for element in row] for row in self.matrix],
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class Placeholder:
    """An empty slot: an elided matrix element or a missing operand."""

    start: int = 0
    end: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "Placeholder", "start": self.start, "end": self.end}


Expression = Union[
    NumberLiteral,
    CharLiteral,
    BinaryExpression,
    ParenExpression,
    MatrixExpression,
    Placeholder,
]

Value = Union[NumberLiteral, MatrixExpression]


def nan_literal(start: int = 0, end: int = 0) -> NumberLiteral:
    """Build the sentinel returned by every invalid operation."""
    return NumberLiteral(math.nan, start, end)


def is_nan(value: Expression) -> bool:
    return isinstance(value, NumberLiteral) and math.isnan(value.value)


def matrix_shape(matrix: MatrixExpression) -> tuple[int, int]:
    """Return (rows, cols) using the first row's length as the column count."""
    rows = len(matrix.matrix)
    cols = len(matrix.matrix[0]) if rows else 0
    return rows, cols


def is_valid_matrix(matrix: MatrixExpression) -> bool:
    """Check that the matrix is non-empty and every row has the same length."""
    rows, cols = matrix_shape(matrix)
    if rows == 0 or cols == 0:
        return False
    return all(len(row) == cols for row in matrix.matrix)


def children(expr: Expression) -> Iterator[Expression]:
    """Yield the direct children of ``expr`` in source order."""
    if isinstance(expr, BinaryExpression):
        yield expr.left
        yield expr.right
    elif isinstance(expr, ParenExpression):
        yield expr.expr
    elif isinstance(expr, MatrixExpression):
        for row in expr.matrix:
            yield from row


def iter_nodes(expr: Expression) -> Iterator[Expression]:
    """Walk the tree in pre-order."""
    yield expr
    for child in children(expr):
        yield from iter_nodes(child)


def node_at(expr: Expression, offset: int) -> Expression | None:
    """Find the deepest node whose span contains ``offset``.

    Spans are treated as closed on both ends so a caret sitting right after
    a node (``offset == end``) still maps to it.

    Args:
        expr: Root of the tree to search
        offset: Caret position in the source text

    Returns:
        The innermost matching node, or None if the root does not contain it
    """
    if not expr.start <= offset <= expr.end:
        return None
    for child in children(expr):
        found = node_at(child, offset)
        if found is not None:
            return found
    return expr


def expression_depth(expr: Expression) -> int:
    """Count the levels of the tree; a lone leaf has depth 1.

    Walks with an explicit stack so arbitrarily deep trees can be measured.
    """
    deepest = 0
    stack = [(expr, 1)]
    while stack:
        node, level = stack.pop()
        deepest = max(deepest, level)
        stack.extend((child, level + 1) for child in children(node))
    return deepest
