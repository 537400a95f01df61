"""Rendering of expressions and simplified values.

This module handles:
- Number formatting with configurable precision
- LaTeX for parsed expression trees (placeholders shown as boxes)
- LaTeX and pretty text for simplified values, via SymPy
"""

from __future__ import annotations

import math
from typing import Any

import sympy as sp

from .ast_nodes import (
    BinaryExpression,
    CharLiteral,
    Expression,
    MatrixExpression,
    NumberLiteral,
    ParenExpression,
    Placeholder,
)
from .config import OUTPUT_PRECISION
from .simplifier import simplify

PLACEHOLDER_LATEX = r"\square"

_LATEX_OPERATORS = {
    "+": "+",
    "-": "-",
    "*": r"\cdot",
    ".": r"\cdot",
    "×": r"\times",
}


def format_number(val: Any, precision: int = OUTPUT_PRECISION) -> str:
    """Format a numeric value with specified precision.

    Args:
        val: Numeric value to format
        precision: Number of significant digits (default: OUTPUT_PRECISION)

    Returns:
        Formatted string representation of the number
    """
    try:
        fmt = "{:." + str(int(precision)) + "g}"
        return fmt.format(float(val))
    except (ValueError, TypeError, OverflowError):
        # Fallback for non-numeric or invalid values
        return str(val)


def expression_to_latex(expr: Expression) -> str:
    """Render a parsed expression tree as LaTeX.

    Args:
        expr: Any expression node, complete or not

    Returns:
        LaTeX source (e.g., ``\\frac{1}{2}`` for ``1/2``)
    """
    if isinstance(expr, NumberLiteral):
        return format_number(expr.value)
    if isinstance(expr, CharLiteral):
        if expr.value == "T":
            return r"\mathsf{T}"
        return expr.value or PLACEHOLDER_LATEX
    if isinstance(expr, Placeholder):
        return PLACEHOLDER_LATEX
    if isinstance(expr, ParenExpression):
        return r"\left(" + expression_to_latex(expr.expr) + r"\right)"
    if isinstance(expr, MatrixExpression):
        rows = [
            " & ".join(expression_to_latex(element) for element in row)
            for row in expr.matrix
        ]
        return r"\begin{bmatrix}" + r" \\ ".join(rows) + r"\end{bmatrix}"
    if isinstance(expr, BinaryExpression):
        left = expression_to_latex(expr.left)
        right = expression_to_latex(expr.right)
        if expr.op == "/":
            return r"\frac{" + left + "}{" + right + "}"
        if expr.op == "^":
            return "{" + left + "}^{" + right + "}"
        return f"{left} {_LATEX_OPERATORS[expr.op]} {right}"
    return PLACEHOLDER_LATEX


def _number_to_sympy(value: float, precision: int) -> sp.Expr:
    if math.isnan(value):
        return sp.nan
    if math.isinf(value):
        return sp.oo if value > 0 else -sp.oo
    if value.is_integer():
        return sp.Integer(int(value))
    return sp.Float(value, precision)


def value_to_sympy(value: Expression, precision: int = OUTPUT_PRECISION) -> Any:
    """Convert a simplified value into a SymPy object.

    Scalars become ``Integer``/``Float`` (``nan``/``oo`` for non-finite
    values); matrices become ``Matrix``. Elements that do not reduce to a
    number (e.g. placeholders) become the symbol ``□``.
    """
    if isinstance(value, NumberLiteral):
        return _number_to_sympy(value.value, precision)
    if isinstance(value, MatrixExpression):
        return sp.Matrix(
            [[_element_to_sympy(element, precision) for element in row] for row in value.matrix]
        )
    return sp.nan


def _element_to_sympy(element: Expression, precision: int) -> Any:
    if not isinstance(element, Placeholder):
        reduced = simplify(element)
        if isinstance(reduced, NumberLiteral):
            return _number_to_sympy(reduced.value, precision)
    return sp.Symbol("□")


def value_to_latex(value: Expression, precision: int = OUTPUT_PRECISION) -> str:
    """Render a simplified value as LaTeX with bracketed matrices."""
    return sp.latex(value_to_sympy(value, precision), mat_delim="[")


def format_value(value: Expression, precision: int = OUTPUT_PRECISION) -> str:
    """Human-readable text for a simplified value.

    Args:
        value: Result of :func:`matcalc_pkg.simplifier.simplify`
        precision: Number of significant digits

    Returns:
        The formatted scalar, or a multi-line pretty-printed matrix
    """
    if isinstance(value, NumberLiteral):
        return format_number(value.value, precision)
    if isinstance(value, MatrixExpression):
        return sp.pretty(value_to_sympy(value, precision), use_unicode=True)
    return format_number(math.nan, precision)
