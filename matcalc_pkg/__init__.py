"""matcalc package: lexer, parser and simplifier for scalar/matrix expressions, plus API, plotting and CLI."""

__all__ = [
    "config",
    "tokens",
    "lexer",
    "ast_nodes",
    "parser",
    "simplifier",
    "renderer",
    "coordinates",
    "plotting",
    "types",
    "api",
    "cli",
    "logging_config",
]

# Public API exports

__api_exports__ = [
    "tokenize",
    "parse_expression",
    "evaluate",
    "validate_expression",
    "render_latex",
    "plot",
]
