"""Public API for matcalc - returns structured objects without side effects."""

from __future__ import annotations

from typing import Mapping, Optional

from .ast_nodes import Expression, expression_depth, is_nan
from .config import MAX_EXPRESSION_DEPTH, MAX_INPUT_LENGTH, OUTPUT_PRECISION
from .coordinates import Viewport
from .lexer import lex
from .logging_config import get_logger, preview_expression
from .parser import parse
from .plotting import plot_vectors
from .renderer import expression_to_latex, format_value, value_to_latex
from .simplifier import simplify
from .tokens import Token
from .types import EvalResult, ValidationError

logger = get_logger("api")

__all__ = [
    "lex",
    "parse",
    "simplify",
    "tokenize",
    "parse_expression",
    "evaluate",
    "validate_expression",
    "render_latex",
    "plot",
]


def _check_length(text: str) -> None:
    if len(text) > MAX_INPUT_LENGTH:
        raise ValidationError(
            f"Input too long (>{MAX_INPUT_LENGTH} characters)", "TOO_LONG"
        )


def tokenize(text: str) -> list[Token]:
    """Split text into tokens.

    Example:
        >>> from matcalc_pkg.api import tokenize
        >>> [token.text for token in tokenize("[1, 2]")]
        ['[', '1', ',', '2', ']']
    """
    return lex(text)


def _check_depth(tree: Expression) -> None:
    if expression_depth(tree) > MAX_EXPRESSION_DEPTH:
        raise ValidationError(
            f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)", "TOO_DEEP"
        )


def parse_expression(text: str) -> tuple[Expression, list[str]]:
    """Lex and parse text into (tree, diagnostics).

    Raises:
        ValidationError: ``TOO_LONG`` past MAX_INPUT_LENGTH characters, or
            ``TOO_DEEP`` when the tree is deeper than MAX_EXPRESSION_DEPTH
            (e.g. a long chain of ``+``), which the recursive simplifier
            and renderers could not walk
    """
    _check_length(text)
    tree, diagnostics = parse(lex(text))
    _check_depth(tree)
    return tree, diagnostics


def evaluate(expression: str, precision: Optional[int] = None) -> EvalResult:
    """Evaluate an expression to a scalar or matrix.

    Args:
        expression: Expression text (e.g., "(2+3)*4", "[1,2;3,4]^T")
        precision: Significant digits for the text result (default: OUTPUT_PRECISION)

    Returns:
        EvalResult with the formatted result, LaTeX, the simplified value
        and any parse diagnostics. ``ok`` is False when the input is too
        long or too deeply nested, or the value is the NaN sentinel of an invalid operation.

    Example:
        >>> from matcalc_pkg.api import evaluate
        >>> evaluate("(2+3)*4").result
        '20'
        >>> evaluate("5/0").ok
        False
    """
    precision = precision if precision is not None else OUTPUT_PRECISION
    try:
        tree, diagnostics = parse_expression(expression)
    except ValidationError as e:
        logger.info("Rejected input (%s): %s", e.code, e)
        return EvalResult(ok=False, error=str(e))

    value = simplify(tree)
    result = EvalResult(
        ok=not is_nan(value),
        result=format_value(value, precision),
        latex=value_to_latex(value, precision),
        value=value,
        diagnostics=diagnostics,
    )
    if not result.ok:
        result.error = "Invalid operation (result is NaN)"
        logger.debug("Evaluation of %s produced NaN", preview_expression(expression))
    return result


def validate_expression(expression: str) -> tuple[bool, list[str]]:
    """Check an expression for structural problems without evaluating it.

    Args:
        expression: Expression string to validate

    Returns:
        Tuple of (is_valid, messages)

    Example:
        >>> from matcalc_pkg.api import validate_expression
        >>> validate_expression("(1+2")
        (False, ['Expected RParen'])
    """
    try:
        _, diagnostics = parse_expression(expression)
    except ValidationError as e:
        return False, [str(e)]
    return not diagnostics, diagnostics


def render_latex(expression: str) -> str:
    """Render the parsed (not simplified) expression as LaTeX.

    Raises:
        ValidationError: As for :func:`parse_expression`
    """
    tree, _ = parse_expression(expression)
    return expression_to_latex(tree)


def plot(
    expressions: Mapping[str, str],
    viewport: Optional[Viewport] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    output_path: Optional[str] = None,
) -> EvalResult:
    """Plot named matrix expressions as vectors.

    Args:
        expressions: Mapping of label to expression text (e.g., {"v": "[1,2;3,4]"})
        viewport: Visible region of the graph
        width: Canvas width in pixels
        height: Canvas height in pixels
        output_path: PNG path; a temporary file when omitted

    Returns:
        EvalResult with the image path

    Example:
        >>> from matcalc_pkg.api import plot
        >>> result = plot({"u": "[1,0;0,1]", "w": "[2,3]^T^T"})
        >>> result.ok
        True
    """
    values = {}
    for name, text in expressions.items():
        try:
            tree, _ = parse_expression(text)
        except ValidationError as e:
            return EvalResult(ok=False, error=f"{name}: {e}")
        values[name] = simplify(tree)
    return plot_vectors(
        values,
        viewport=viewport,
        width=width,
        height=height,
        output_path=output_path,
    )
