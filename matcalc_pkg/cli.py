from __future__ import annotations

import argparse
import json
from typing import Any

from . import config
from .api import evaluate, parse_expression, plot, render_latex, tokenize
from .coordinates import Viewport
from .logging_config import get_logger, preview_expression, setup_logging
from .types import EvalResult, ValidationError

logger = get_logger("cli")


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running matcalc health check...")
    print("-" * 50)

    import matplotlib
    import numpy
    import sympy

    for label, module in (("SymPy", sympy), ("NumPy", numpy), ("Matplotlib", matplotlib)):
        print(f"[OK] {label} {module.__version__} available")
        checks_passed += 1

    # Scalar pipeline
    res = evaluate("(2+3)*4")
    if res.ok and res.result == "20":
        print("[OK] Scalar evaluation works")
        checks_passed += 1
    else:
        print(f"[FAIL] Scalar evaluation failed: {res}")
        checks_failed += 1

    # Matrix pipeline
    res = evaluate("[1,2;3,4]*[5,6;7,8]")
    if res.ok and res.latex is not None and "19" in res.latex:
        print("[OK] Matrix evaluation works")
        checks_passed += 1
    else:
        print(f"[FAIL] Matrix evaluation failed: {res}")
        checks_failed += 1

    print("-" * 50)
    print(f"Results: {checks_passed} passed, {checks_failed} failed")

    if checks_failed > 0:
        print("\n[WARN] Some health checks failed. Core functionality may be impaired.")
        return 1

    print("\n[OK] All health checks passed!")
    return 0


def print_result_pretty(
    res: EvalResult, output_format: str = "human", show_latex: bool = False
) -> None:
    """Print result in specified format.

    Args:
        res: Evaluation result
        output_format: "json" for JSON output, "human" for human-readable
        show_latex: Also print the LaTeX form (human format only)
    """
    if output_format == "json":
        print(json.dumps(res.to_dict(), indent=2, ensure_ascii=False))
        return
    for message in res.diagnostics:
        print("Warning:", message)
    if res.result is not None:
        try:
            print(res.result)
        except UnicodeEncodeError:
            # Console cannot show box-drawing characters
            print(res.result.encode("ascii", "replace").decode("ascii"))
    if show_latex and res.latex is not None:
        print("LaTeX:", res.latex)
    if not res.ok:
        print("Error:", res.error)


def _print_tokens(text: str, output_format: str) -> None:
    tokens = tokenize(text)
    if output_format == "json":
        print(json.dumps([token.to_dict() for token in tokens], indent=2, ensure_ascii=False))
        return
    for token in tokens:
        print(f"{token.kind.value:<7} {token.text!r:<6} [{token.start}, {token.end})")


def _print_tree(text: str) -> int:
    try:
        tree, diagnostics = parse_expression(text)
    except ValidationError as e:
        print("Error:", e)
        return 1
    payload: dict[str, Any] = {"tree": tree.to_dict(), "diagnostics": diagnostics}
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def print_help_text() -> None:
    print(
        """Enter an expression to evaluate it, e.g.
  (2+3)*4          scalars: + - * / ^
  [1,2;3,4]        matrices: ',' separates columns, ';' separates rows
  [1,2;3,4]^T      transpose
  [1,2;3,4]^2      matrix power
  [1,2,3]x[4,5,6]  cross product ('.' for dot product)

Commands:
  tokens <expr>    show the tokens of an expression
  tree <expr>      show the parsed tree as JSON
  latex <expr>     show the parsed expression as LaTeX
  help             show this text
  quit, exit       leave"""
    )


def repl_loop(output_format: str = "human", precision: int | None = None) -> None:
    """Interactive REPL loop with graceful interrupt handling."""
    try:
        import readline  # noqa: F401
    except ImportError:
        # readline not available on Windows - that's fine
        pass

    print("matcalc - type 'help' for commands, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            return
        if not raw:
            continue

        command, _, rest = raw.partition(" ")
        command = command.lower()
        if command in ("quit", "exit"):
            print("Goodbye.")
            return
        if command == "help":
            print_help_text()
        elif command == "tokens":
            _print_tokens(rest, output_format)
        elif command == "tree":
            _print_tree(rest)
        elif command == "latex":
            try:
                print(render_latex(rest))
            except ValidationError as e:
                print("Error:", e)
        else:
            print_result_pretty(evaluate(raw, precision), output_format)


def _parse_plot_args(items: list[str]) -> dict[str, str]:
    expressions: dict[str, str] = {}
    for index, item in enumerate(items):
        name, sep, text = item.partition("=")
        if not sep:
            name, text = f"v{index + 1}", item
        expressions[name.strip()] = text.strip()
    return expressions


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for matcalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="matcalc")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument(
        "--latex", action="store_true", help="Also print the result as LaTeX"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the tokens of --eval instead"
    )
    parser.add_argument(
        "--tree", action="store_true", help="Print the parsed tree of --eval instead"
    )
    parser.add_argument(
        "--plot",
        action="append",
        metavar="NAME=EXPR",
        help="Plot a 1xn or 2xn matrix as vectors (repeatable)",
    )
    parser.add_argument("--output", type=str, help="PNG file for --plot")
    parser.add_argument(
        "--zoom", type=float, help="Pixels per graph unit for --plot"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=config.LOG_LEVEL.upper(),
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(config.VERSION)
        return 0

    if args.health_check:
        return _health_check()

    if args.plot:
        viewport = Viewport(zoom=args.zoom) if args.zoom else None
        res = plot(
            _parse_plot_args(args.plot), viewport=viewport, output_path=args.output
        )
        print_result_pretty(res, output_format=args.format)
        return 0 if res.ok else 1

    if args.eval_expr is not None:
        logger.debug("Evaluating %s", preview_expression(args.eval_expr))
        if args.tokens:
            _print_tokens(args.eval_expr, args.format)
            return 0
        if args.tree:
            return _print_tree(args.eval_expr)
        res = evaluate(args.eval_expr, args.precision)
        print_result_pretty(res, output_format=args.format, show_latex=args.latex)
        return 0 if res.ok else 1

    repl_loop(output_format=args.format, precision=args.precision)
    return 0


if __name__ == "__main__":
    """Allow running the CLI module directly with python -m matcalc_pkg.cli"""
    import sys

    sys.exit(main_entry())
