"""Tests for the simplifier: scalar and matrix semantics, NaN poisoning."""

import math

import pytest

from matcalc_pkg.ast_nodes import (
    BinaryExpression,
    CharLiteral,
    MatrixExpression,
    NumberLiteral,
    Placeholder,
    is_nan,
)
from matcalc_pkg.lexer import lex
from matcalc_pkg.parser import parse
from matcalc_pkg.simplifier import matrix_values, simplify


def run(text):
    tree, _ = parse(lex(text))
    return simplify(tree)


def scalar(text):
    value = run(text)
    assert isinstance(value, NumberLiteral), f"{text!r} gave {value!r}"
    return value.value


def grid(text):
    value = run(text)
    assert isinstance(value, MatrixExpression), f"{text!r} gave {value!r}"
    return matrix_values(value)


class TestScalars:
    """Scalar arithmetic."""

    @pytest.mark.parametrize("literal", ["0", "7", "3.25", ".5", "-12.75", "1000000"])
    def test_number_round_trip(self, literal):
        assert scalar(literal) == float(literal)

    def test_parenthesized_product(self):
        assert scalar("(2+3)*4") == 20

    def test_precedence(self):
        assert scalar("1+2*3") == 7
        assert scalar("2*3^2") == 18
        assert scalar("10-4-3") == 3
        assert scalar("8/4/2") == 1

    def test_exponent_chains_left_to_right(self):
        # (2^3)^2, not 2^(3^2)
        assert scalar("2^3^2") == 64

    def test_subtraction(self):
        assert scalar("5-7") == -2
        assert scalar("3--2") == 5

    def test_negated_group(self):
        assert scalar("-(2+3)") == -5
        assert scalar("--4") == 4

    def test_fractional_and_negative_exponents(self):
        assert scalar("4^0.5") == 2
        assert scalar("2^-1") == 0.5

    def test_zero_to_negative_power_is_infinite(self):
        assert scalar("0^-1") == math.inf

    def test_negative_base_fractional_exponent_is_nan(self):
        assert math.isnan(scalar("(-8)^(1/3)"))

    def test_division_by_zero_is_nan(self):
        assert is_nan(run("5/0"))

    def test_unterminated_paren_still_evaluates(self):
        assert scalar("(1+2") == 3


class TestMatrixArithmetic:
    """Element-wise and matrix operations."""

    def test_matrix_literal_is_returned_verbatim(self):
        tree, _ = parse(lex("[1,2;3,4]"))
        assert simplify(tree) is tree

    def test_addition(self):
        assert grid("[1,2]+[3,4]") == [[4, 6]]

    def test_subtraction(self):
        assert grid("[5,5;1,1]-[1,2;3,4]") == [[4, 3], [-2, -3]]

    def test_elements_are_simplified(self):
        assert grid("[1+1,2*3]+[0,0]") == [[2, 6]]

    def test_addition_shape_mismatch_is_nan(self):
        assert is_nan(run("[1,2]+[1,2,3]"))
        assert is_nan(run("[1,2]+[1;2]"))

    def test_scalar_plus_matrix_is_nan(self):
        assert is_nan(run("1+[1]"))
        assert is_nan(run("[1]-1"))

    def test_scalar_times_matrix(self):
        assert grid("2*[1,2]") == [[2, 4]]
        assert grid("[1,2]*3") == [[3, 6]]

    def test_matrix_product(self):
        assert grid("[1,2;3,4]*[5,6;7,8]") == [[19, 22], [43, 50]]

    def test_matrix_product_shapes(self):
        assert grid("[1,2]*[3;4]") == [[11]]
        assert grid("[1;2]*[3,4]") == [[3, 4], [6, 8]]

    def test_matrix_product_mismatch_is_nan(self):
        assert is_nan(run("[1,2]*[1,2]"))

    def test_division_by_scalar(self):
        assert grid("[2,4;6,8]/2") == [[1, 2], [3, 4]]

    def test_matrix_division_by_zero_is_nan(self):
        assert is_nan(run("[2,4]/0"))

    def test_matrix_by_matrix_division_is_nan(self):
        assert is_nan(run("[1]/[1]"))
        assert is_nan(run("2/[1]"))


class TestExponent:
    """Transpose and matrix powers."""

    def test_transpose(self):
        assert grid("[1,2;3,4]^T") == [[1, 3], [2, 4]]

    def test_transpose_row_vector(self):
        assert grid("[1,2,3]^T") == [[1], [2], [3]]

    def test_double_transpose_is_identity(self):
        assert grid("[1,2,3;4,5,6]^T^T") == [[1, 2, 3], [4, 5, 6]]

    def test_transpose_of_scalar_is_nan(self):
        assert is_nan(run("2^T"))

    def test_square(self):
        assert grid("[1,2;3,4]^2") == [[7, 10], [15, 22]]

    def test_cube(self):
        assert grid("[1,2;3,4]^3") == [[37, 54], [81, 118]]

    def test_first_power_returns_matrix_unchanged(self):
        value = run("[1,2;3,4]^1")
        assert isinstance(value, MatrixExpression)
        assert matrix_values(value) == [[1, 2], [3, 4]]

    @pytest.mark.parametrize(
        "text",
        [
            "[1,2;3,4]^-1",  # inverse is not supported
            "[1,2;3,4]^0",
            "[1,2;3,4]^1.5",
            "[1,2]^2",
            "[1,2;3,4]^[1]",
            "2^[1]",
        ],
    )
    def test_unsupported_powers_are_nan(self, text):
        assert is_nan(run(text))


class TestDotCross:
    """Vector dot and cross products."""

    def test_dot_row_vectors(self):
        assert scalar("[1,2].[3,4]") == 11

    def test_dot_column_vectors(self):
        assert scalar("[1;2;3].[4;5;6]") == 32

    def test_dot_orientation_mismatch_is_nan(self):
        assert is_nan(run("[1,2].[3;4]"))

    def test_cross_row_vectors(self):
        assert grid("[1,2,3]x[4,5,6]") == [[-3, 6, -3]]

    def test_cross_column_vectors(self):
        assert grid("[1;0;0]×[0;1;0]") == [[0], [0], [1]]

    def test_cross_requires_three_components(self):
        assert is_nan(run("[1,2]x[3,4]"))

    def test_scalars_are_nan(self):
        assert is_nan(run("2x3"))
        assert is_nan(run("[1,2;3,4].[1,2;3,4]"))


class TestPoisoning:
    """Invalid pieces collapse the whole result to NaN."""

    def test_placeholder_is_nan(self):
        assert is_nan(simplify(Placeholder(0, 0)))

    def test_char_literal_is_nan(self):
        assert is_nan(simplify(CharLiteral("T", 0, 1)))
        assert is_nan(run("T"))

    def test_dangling_operator_is_nan(self):
        assert is_nan(run("1+"))

    def test_nested_matrix_element_poisons_sum(self):
        assert is_nan(run("[1,[2]]+[1,1]"))

    def test_placeholder_element_poisons_product(self):
        assert is_nan(run("[1,,2]*2"))

    def test_ragged_matrix_is_nan(self):
        assert is_nan(run("[1,2;3]"))

    def test_nan_element_poisons_sum(self):
        value = run("[5/0, 1]+[1,1]")
        assert is_nan(value)

    def test_unknown_operator_is_nan(self):
        expr = BinaryExpression("%", NumberLiteral(1.0), NumberLiteral(2.0))
        assert is_nan(simplify(expr))


class TestPurity:
    """Idempotence and immutability."""

    @pytest.mark.parametrize(
        "text", ["42", "(2+3)*4", "[1,2;3,4]^2", "[1,2]+[3,4]", "5/0", "[1,2;3,4]^T"]
    )
    def test_simplify_is_idempotent(self, text):
        value = run(text)
        assert simplify(value) is value

    def test_input_tree_is_untouched(self):
        tree, _ = parse(lex("[1,2;3,4]*[5,6;7,8]"))
        snapshot = tree.to_dict()
        simplify(tree)
        assert tree.to_dict() == snapshot

    def test_result_span_covers_expression(self):
        value = run("(2+3)*4")
        assert (value.start, value.end) == (0, 7)


class TestMatrixValues:
    def test_scalar_is_not_a_matrix(self):
        assert matrix_values(NumberLiteral(1.0)) is None

    def test_extracts_floats(self):
        tree, _ = parse(lex("[1+1,2;3,4]"))
        assert matrix_values(tree) == [[2.0, 2.0], [3.0, 4.0]]


BIG = "1" + "0" * 308  # 1e308
HUGE = "1" + "0" * 400  # parses to inf


class TestNonFiniteArithmetic:
    """Overflow and NaN produced by float arithmetic."""

    def test_nan_scalar_times_matrix_is_nan(self):
        assert is_nan(run("(5/0)*[1,2]"))
        assert is_nan(run("[1,2]*(5/0)"))

    def test_matrix_divided_by_nan_is_nan(self):
        assert is_nan(run("[1,2]/(0/0)"))

    def test_nan_cell_from_arithmetic_poisons_matrix(self):
        # 0 * inf is NaN in the first cell
        assert is_nan(run(f"[0,1]*{HUGE}"))

    def test_infinite_cells_are_kept(self):
        assert grid(f"[1,2]*{HUGE}") == [[math.inf, math.inf]]

    def test_dot_overflow_is_infinite(self):
        assert scalar(f"[{BIG},{BIG}].[1,1]") == math.inf

    def test_dot_of_opposite_infinities_is_nan(self):
        assert is_nan(run(f"[{HUGE},{HUGE}].[1,-1]"))

    def test_cross_with_infinity_is_nan(self):
        assert is_nan(run(f"[{HUGE},0,0]x[0,1,0]"))

    def test_large_matrix_power(self):
        assert grid("[1,0;0,1]^1000000000") == [[1, 0], [0, 1]]
        assert grid("[1,1;0,1]^1000000") == [[1, 1000000], [0, 1]]
