"""Centralized configuration for matcalc.

This module defines:
- Output formatting precision
- Input validation limits
- Plot canvas and viewport defaults
- Default logging level

Configuration can be overridden via:
- CLI flags (see cli.py)
- Environment variables (prefixed with MATCALC_)
"""

import importlib.metadata
import os

# Version is defined in pyproject.toml [project] section
try:
    VERSION = importlib.metadata.version("matcalc")
except importlib.metadata.PackageNotFoundError:
    # Fallback if package not installed
    VERSION = "1.0.0"

# Output formatting
OUTPUT_PRECISION = int(
    os.getenv("MATCALC_OUTPUT_PRECISION", "6")
)  # significant digits

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("MATCALC_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_NESTING_DEPTH = int(
    os.getenv("MATCALC_MAX_NESTING_DEPTH", "50")
)  # brackets and unary minus the parser descends into
MAX_EXPRESSION_DEPTH = int(
    os.getenv("MATCALC_MAX_EXPRESSION_DEPTH", "100")
)  # levels in a parsed tree, including left-folded operator chains

# Plot configuration
PLOT_WIDTH = int(os.getenv("MATCALC_PLOT_WIDTH", "800"))  # pixels
PLOT_HEIGHT = int(os.getenv("MATCALC_PLOT_HEIGHT", "600"))  # pixels
PLOT_DPI = int(os.getenv("MATCALC_PLOT_DPI", "100"))
DEFAULT_ZOOM = float(
    os.getenv("MATCALC_DEFAULT_ZOOM", "50")
)  # pixels per graph unit

# Logging
LOG_LEVEL = os.getenv("MATCALC_LOG_LEVEL", "WARNING")
