"""Tests for LaTeX and text rendering."""

import math

import pytest

from matcalc_pkg.ast_nodes import MatrixExpression, NumberLiteral, Placeholder
from matcalc_pkg.lexer import lex
from matcalc_pkg.parser import parse
from matcalc_pkg.renderer import (
    expression_to_latex,
    format_number,
    format_value,
    value_to_latex,
    value_to_sympy,
)
from matcalc_pkg.simplifier import simplify


def latex_of(text):
    tree, _ = parse(lex(text))
    return expression_to_latex(tree)


def value_of(text):
    tree, _ = parse(lex(text))
    return simplify(tree)


class TestFormatNumber:
    def test_integer_valued_float(self):
        assert format_number(20.0) == "20"

    def test_precision(self):
        assert format_number(1 / 3, 3) == "0.333"
        assert format_number(0.1 + 0.2) == "0.3"

    def test_non_finite(self):
        assert format_number(math.nan) == "nan"
        assert format_number(math.inf) == "inf"

    def test_non_numeric_falls_back_to_str(self):
        assert format_number("abc") == "abc"


class TestExpressionLatex:
    """LaTeX for the parsed, unsimplified tree."""

    def test_fraction(self):
        assert latex_of("1/2") == r"\frac{1}{2}"

    def test_power(self):
        assert latex_of("2^3") == "{2}^{3}"

    def test_parentheses_and_product(self):
        assert latex_of("(1+2)*3") == r"\left(1 + 2\right) \cdot 3"

    def test_cross_and_dot(self):
        assert latex_of("2x3") == r"2 \times 3"
        assert latex_of("[1].[2]") == (
            r"\begin{bmatrix}1\end{bmatrix} \cdot \begin{bmatrix}2\end{bmatrix}"
        )

    def test_matrix_transpose(self):
        assert latex_of("[1,2;3,4]^T") == (
            r"{\begin{bmatrix}1 & 2 \\ 3 & 4\end{bmatrix}}^{\mathsf{T}}"
        )

    def test_placeholders_render_as_boxes(self):
        assert latex_of("1+") == r"1 + \square"
        assert latex_of("[1,,2]") == r"\begin{bmatrix}1 & \square & 2\end{bmatrix}"

    def test_bare_placeholder(self):
        assert expression_to_latex(Placeholder(0, 0)) == r"\square"


class TestValueRendering:
    """Rendering of simplified values through SymPy."""

    def test_scalar_latex(self):
        assert value_to_latex(value_of("(2+3)*4")) == "20"

    def test_fraction_value(self):
        assert "0.5" in value_to_latex(value_of("1/2"))

    def test_nan_latex(self):
        assert "NaN" in value_to_latex(value_of("5/0"))

    def test_matrix_latex_uses_brackets(self):
        latex = value_to_latex(value_of("[1,2;3,4]*[5,6;7,8]"))
        assert latex.startswith(r"\left[")
        assert "19 & 22" in latex
        assert "43 & 50" in latex

    def test_matrix_to_sympy(self):
        import sympy as sp

        assert value_to_sympy(value_of("[1,2;3,4]^T")) == sp.Matrix([[1, 3], [2, 4]])

    def test_non_scalar_element_becomes_symbol(self):
        matrix = MatrixExpression(((NumberLiteral(1.0), Placeholder()),))
        converted = value_to_sympy(matrix)
        assert converted[0, 0] == 1
        assert str(converted[0, 1]) == "□"

    def test_infinity(self):
        import sympy as sp

        assert value_to_sympy(value_of("0^-1")) == sp.oo

    @pytest.mark.parametrize("text,expected", [("7", "7"), ("2/3", "0.666667"), ("5/0", "nan")])
    def test_format_scalar(self, text, expected):
        assert format_value(value_of(text)) == expected

    def test_format_matrix_is_multiline(self):
        text = format_value(value_of("[1,2;3,4]"))
        assert len(text.splitlines()) >= 2
        assert "1" in text and "4" in text
