"""Test that API functions return typed dataclasses."""

from matcalc_pkg.api import (
    evaluate,
    parse_expression,
    plot,
    render_latex,
    tokenize,
    validate_expression,
)
from matcalc_pkg.ast_nodes import MatrixExpression, NumberLiteral
from matcalc_pkg.tokens import Token
from matcalc_pkg.types import EvalResult


class TestAPITypedReturns:
    """Test that all API functions return typed dataclasses."""

    def test_evaluate_returns_eval_result(self):
        """Test that evaluate() returns EvalResult."""
        result = evaluate("2 + 2")
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert result.result == "4"
        assert result.latex == "4"
        assert isinstance(result.value, NumberLiteral)

    def test_evaluate_matrix(self):
        result = evaluate("[1,2;3,4]^T")
        assert result.ok is True
        assert isinstance(result.value, MatrixExpression)
        assert result.diagnostics == []

    def test_evaluate_error_returns_eval_result(self):
        """Test that evaluate() errors return EvalResult."""
        result = evaluate("[1,2]+[1,2,3]")
        assert isinstance(result, EvalResult)
        assert result.ok is False
        assert result.error == "Invalid operation (result is NaN)"
        assert result.result == "nan"

    def test_evaluate_carries_diagnostics(self):
        result = evaluate("(1+2")
        assert result.ok is True
        assert result.result == "3"
        assert result.diagnostics == ["Expected RParen"]

    def test_evaluate_precision(self):
        assert evaluate("2/3", precision=3).result == "0.667"

    def test_tokenize_returns_tokens(self):
        tokens = tokenize("[1, 2]")
        assert all(isinstance(token, Token) for token in tokens)
        assert [token.text for token in tokens] == ["[", "1", ",", "2", "]"]

    def test_parse_expression_returns_tree_and_diagnostics(self):
        tree, diagnostics = parse_expression("1+")
        assert tree.op == "+"
        assert diagnostics == ["Expected operand"]

    def test_validate_expression_returns_tuple(self):
        """Test that validate_expression() returns tuple."""
        is_valid, messages = validate_expression("[1,2;3,4]")
        assert is_valid is True
        assert messages == []

        is_valid, messages = validate_expression("(1+2")
        assert is_valid is False
        assert messages == ["Expected RParen"]

    def test_validate_does_not_judge_semantics(self):
        # Well-formed but poisoned at evaluation time
        assert validate_expression("5/0") == (True, [])

    def test_render_latex_returns_string(self):
        assert render_latex("1/2") == r"\frac{1}{2}"

    def test_plot_returns_eval_result(self, tmp_path):
        target = tmp_path / "plot.png"
        result = plot({"u": "[1,0;0,1]", "w": "[2,3]^T^T"}, output_path=str(target))
        assert isinstance(result, EvalResult)
        assert result.ok is True
        assert target.exists()

    def test_to_dict(self):
        data = evaluate("5/0").to_dict()
        assert data["ok"] is False
        assert data["value"]["value"] == "nan"
        assert "error" in data

    def test_parse_expression_rejects_deep_trees(self):
        import pytest

        from matcalc_pkg.types import ValidationError

        with pytest.raises(ValidationError):
            parse_expression("+".join(["1"] * 1000))
