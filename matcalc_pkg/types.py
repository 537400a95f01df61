"""Type definitions and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .ast_nodes import Value


@dataclass
class EvalResult:
    """Result of evaluating an expression or producing a plot."""

    ok: bool
    result: str | None = None
    latex: str | None = None
    value: Value | None = None
    diagnostics: list[str] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.latex is not None:
            result_dict["latex"] = self.latex
        if self.value is not None:
            result_dict["value"] = self.value.to_dict()
        if self.diagnostics:
            result_dict["diagnostics"] = list(self.diagnostics)
        if self.error is not None:
            result_dict["error"] = self.error
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return f"EvalResult(ok=False, error={self.error!r})"
        parts = [f"ok={self.ok}"]
        if self.result is not None:
            parts.append(f"result={self.result!r}")
        if self.latex is not None:
            parts.append(f"latex={self.latex!r}")
        if self.diagnostics:
            parts.append(f"diagnostics={self.diagnostics!r}")
        return f"EvalResult({', '.join(parts)})"


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message
