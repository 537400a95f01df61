"""Tree-walking evaluator reducing an AST to a scalar or a matrix.

``simplify`` never raises. Every invalid operation (shape mismatch,
non-scalar element, division by zero, unsupported operand) collapses the
whole result to the NaN scalar returned by :func:`nan_literal`, and so does
a matrix with any NaN cell. Matrix cells are computed with numpy arrays.
Recursion follows the tree, so callers bound its depth (see
:data:`matcalc_pkg.config.MAX_EXPRESSION_DEPTH`).

Internal helpers return ``None`` for an invalid result; only the
dispatcher converts that into the NaN sentinel.
"""

from __future__ import annotations

import math
import operator
from typing import Any, Callable, Optional

import numpy as np

from .ast_nodes import (
    BinaryExpression,
    CharLiteral,
    Expression,
    MatrixExpression,
    NumberLiteral,
    ParenExpression,
    Value,
    is_valid_matrix,
    matrix_shape,
    nan_literal,
)
from .logging_config import get_logger

logger = get_logger("simplifier")

_Grid = list[list[float]]


def simplify(expr: Expression) -> Value:
    """Evaluate an expression tree.

    Args:
        expr: Any expression node

    Returns:
        A NumberLiteral or a MatrixExpression spanning ``expr``
    """
    if isinstance(expr, NumberLiteral):
        return expr
    if isinstance(expr, ParenExpression):
        return simplify(expr.expr)
    if isinstance(expr, MatrixExpression):
        if is_valid_matrix(expr):
            return expr
        logger.debug("Ragged or empty matrix at %d..%d", expr.start, expr.end)
        return nan_literal(expr.start, expr.end)
    if isinstance(expr, BinaryExpression):
        handler = _BINARY_HANDLERS.get(expr.op)
        if handler is not None:
            result = handler(expr)
            if result is not None:
                return result
        logger.debug("Operator %r at %d poisoned the result", expr.op, expr.op_start)
        return nan_literal(expr.start, expr.end)
    # Placeholder, CharLiteral and anything else has no value
    return nan_literal(expr.start, expr.end)


def matrix_values(value: Expression) -> Optional[_Grid]:
    """Extract a valid matrix's elements as floats.

    Every element is simplified and must reduce to a non-NaN scalar.

    Returns:
        Rows of floats, or None if ``value`` is not a valid all-scalar matrix
    """
    if not isinstance(value, MatrixExpression) or not is_valid_matrix(value):
        return None
    grid: _Grid = []
    for row in value.matrix:
        out_row = []
        for element in row:
            reduced = simplify(element)
            if not isinstance(reduced, NumberLiteral) or math.isnan(reduced.value):
                return None
            out_row.append(reduced.value)
        grid.append(out_row)
    return grid


def _array(value: Expression) -> Optional[np.ndarray]:
    grid = matrix_values(value)
    if grid is None:
        return None
    return np.array(grid, dtype=float)


def _build_matrix(array: np.ndarray, expr: Expression) -> Optional[MatrixExpression]:
    """Wrap computed cells as a matrix; None if any cell came out NaN."""
    if np.isnan(array).any():
        return None
    rows = tuple(
        tuple(NumberLiteral(float(value), expr.start, expr.end) for value in row)
        for row in array
    )
    return MatrixExpression(rows, expr.start, expr.end)


def _scalar(value: float, expr: Expression) -> NumberLiteral:
    return NumberLiteral(float(value), expr.start, expr.end)


def _elementwise(
    expr: BinaryExpression, operation: Callable[[Any, Any], Any]
) -> Optional[Value]:
    """Shared rule for ``+`` and ``-``."""
    left = simplify(expr.left)
    right = simplify(expr.right)
    if isinstance(left, NumberLiteral) and isinstance(right, NumberLiteral):
        return _scalar(operation(left.value, right.value), expr)

    left_arr = _array(left)
    right_arr = _array(right)
    # No broadcasting: shapes must match exactly
    if left_arr is None or right_arr is None or left_arr.shape != right_arr.shape:
        return None
    with np.errstate(all="ignore"):
        return _build_matrix(operation(left_arr, right_arr), expr)


def _simplify_addition(expr: BinaryExpression) -> Optional[Value]:
    return _elementwise(expr, operator.add)


def _simplify_subtraction(expr: BinaryExpression) -> Optional[Value]:
    return _elementwise(expr, operator.sub)


def _simplify_multiplication(expr: BinaryExpression) -> Optional[Value]:
    left = simplify(expr.left)
    right = simplify(expr.right)
    if isinstance(left, NumberLiteral) and isinstance(right, NumberLiteral):
        return _scalar(left.value * right.value, expr)

    if isinstance(left, NumberLiteral) or isinstance(right, NumberLiteral):
        factor, matrix = (left, right) if isinstance(left, NumberLiteral) else (right, left)
        array = _array(matrix)
        if array is None:
            return None
        with np.errstate(all="ignore"):
            return _build_matrix(array * factor.value, expr)

    left_arr = _array(left)
    right_arr = _array(right)
    if left_arr is None or right_arr is None:
        return None
    if left_arr.shape[1] != right_arr.shape[0]:
        return None
    with np.errstate(all="ignore"):
        return _build_matrix(left_arr @ right_arr, expr)


def _simplify_division(expr: BinaryExpression) -> Optional[Value]:
    right = simplify(expr.right)
    if not isinstance(right, NumberLiteral) or right.value == 0:
        return None
    left = simplify(expr.left)
    if isinstance(left, NumberLiteral):
        return _scalar(left.value / right.value, expr)
    array = _array(left)
    if array is None:
        return None
    with np.errstate(all="ignore"):
        return _build_matrix(array / right.value, expr)


def _power(base: float, exponent: float) -> float:
    """IEEE power: ``0^-1`` is inf, a negative base with a fractional exponent is NaN."""
    with np.errstate(all="ignore"):
        return float(np.power(np.float64(base), np.float64(exponent)))


def _transpose(matrix: MatrixExpression, expr: Expression) -> MatrixExpression:
    """Swap rows and columns, keeping the element nodes as they are."""
    cells = np.empty(matrix_shape(matrix), dtype=object)
    for i, row in enumerate(matrix.matrix):
        for j, element in enumerate(row):
            cells[i, j] = element
    rows = tuple(tuple(row) for row in cells.T)
    return MatrixExpression(rows, expr.start, expr.end)


def _simplify_exponent(expr: BinaryExpression) -> Optional[Value]:
    left = simplify(expr.left)

    if isinstance(expr.right, CharLiteral):
        if expr.right.value == "T" and isinstance(left, MatrixExpression):
            return _transpose(left, expr)
        return None

    right = simplify(expr.right)
    if not isinstance(right, NumberLiteral):
        return None
    if isinstance(left, NumberLiteral):
        return _scalar(_power(left.value, right.value), expr)

    rows, cols = matrix_shape(left)
    exponent = right.value
    if rows != cols or not exponent.is_integer():
        return None
    if exponent == -1:
        # Inverse is not supported
        return None
    if exponent < 1:
        return None
    if exponent == 1:
        return left

    array = _array(left)
    if array is None:
        return None
    # Repeated squaring; same cells as chaining '*'
    with np.errstate(all="ignore"):
        return _build_matrix(np.linalg.matrix_power(array, int(exponent)), expr)


def _vectors(expr: BinaryExpression) -> Optional[tuple[np.ndarray, np.ndarray]]:
    """Both operands as same-shape single-row or single-column arrays."""
    left = _array(simplify(expr.left))
    right = _array(simplify(expr.right))
    if left is None or right is None or left.shape != right.shape:
        return None
    if 1 not in left.shape:
        return None
    return left, right


def _simplify_dot(expr: BinaryExpression) -> Optional[Value]:
    operands = _vectors(expr)
    if operands is None:
        return None
    left, right = operands
    with np.errstate(all="ignore"):
        product = np.dot(left.ravel(), right.ravel())
    if np.isnan(product):
        return None
    return _scalar(product, expr)


def _simplify_cross(expr: BinaryExpression) -> Optional[Value]:
    operands = _vectors(expr)
    if operands is None:
        return None
    left, right = operands
    if left.size != 3:
        return None
    with np.errstate(all="ignore"):
        product = np.cross(left.ravel(), right.ravel())
    return _build_matrix(product.reshape(left.shape), expr)


_BINARY_HANDLERS: dict[str, Callable[[BinaryExpression], Optional[Value]]] = {
    "+": _simplify_addition,
    "-": _simplify_subtraction,
    "*": _simplify_multiplication,
    "/": _simplify_division,
    "^": _simplify_exponent,
    ".": _simplify_dot,
    "×": _simplify_cross,
}
