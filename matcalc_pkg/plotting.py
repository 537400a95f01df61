"""Plotting of simplified matrices as plane vectors drawn from the origin."""

from __future__ import annotations

import os
import tempfile
from typing import Mapping, Optional

import matplotlib

matplotlib.use("Agg")  # Use non-GUI backend (no Tkinter required)
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.ticker import FuncFormatter, MultipleLocator  # noqa: E402

from .ast_nodes import Expression  # noqa: E402
from .config import PLOT_DPI, PLOT_HEIGHT, PLOT_WIDTH  # noqa: E402
from .coordinates import (  # noqa: E402
    Viewport,
    format_tick_value,
    grid_spacing,
    visible_bounds,
)
from .logging_config import get_logger  # noqa: E402
from .simplifier import matrix_values, simplify  # noqa: E402
from .types import EvalResult  # noqa: E402

logger = get_logger("plotting")

BACKGROUND_COLOR = "#AAAAAA"
GRID_COLOR = "#333333"


def extract_vectors(value: Expression) -> Optional[list[tuple[float, float]]]:
    """Read a 1×n or 2×n matrix as n plane vectors.

    Row 0 holds the x components and row 1 the y components; a missing
    row 1 means every y is 0.

    Args:
        value: A simplified value (or any expression, simplified here)

    Returns:
        List of (x, y) pairs, or None if the value is not such a matrix
    """
    grid = matrix_values(simplify(value))
    if grid is None or len(grid) > 2:
        return None
    xs = grid[0]
    ys = grid[1] if len(grid) == 2 else [0.0] * len(xs)
    return list(zip(xs, ys))


def _style_axes(ax: plt.Axes, viewport: Viewport, width: int, height: int) -> None:
    bounds = visible_bounds(viewport, width, height)
    spacing = grid_spacing(viewport.zoom)
    ticks = FuncFormatter(lambda value, _pos: format_tick_value(value, spacing))

    ax.set_facecolor(BACKGROUND_COLOR)
    ax.set_xlim(bounds.min_x, bounds.max_x)
    ax.set_ylim(bounds.min_y, bounds.max_y)
    ax.set_aspect("equal")
    for axis in (ax.xaxis, ax.yaxis):
        axis.set_major_locator(MultipleLocator(spacing))
        axis.set_major_formatter(ticks)
    ax.grid(True, color=GRID_COLOR, linewidth=1, alpha=0.4)
    ax.axhline(y=0, color="k", linewidth=1.5)
    ax.axvline(x=0, color="k", linewidth=1.5)


def _discard(temp_path: Optional[str]) -> None:
    """Remove a temporary image left behind by a failed plot."""
    if temp_path is not None and os.path.exists(temp_path):
        os.unlink(temp_path)


def plot_vectors(
    vectors: Mapping[str, Expression],
    viewport: Optional[Viewport] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    output_path: Optional[str] = None,
) -> EvalResult:
    """Draw every plottable entry of ``vectors`` as arrows from the origin.

    Args:
        vectors: Mapping from a label to a (simplified) matrix
        viewport: Visible region; defaults to the origin at DEFAULT_ZOOM
        width: Canvas width in pixels (default: PLOT_WIDTH)
        height: Canvas height in pixels (default: PLOT_HEIGHT)
        output_path: PNG file to write; a temporary file when omitted

    Returns:
        EvalResult whose ``result`` is the path of the saved image
    """
    viewport = viewport or Viewport()
    width = width or PLOT_WIDTH
    height = height or PLOT_HEIGHT

    plottable: dict[str, list[tuple[float, float]]] = {}
    for name, value in vectors.items():
        pairs = extract_vectors(value)
        if pairs is None:
            logger.warning("Skipping %r: not a 1xn or 2xn numeric matrix", name)
            continue
        plottable[name] = pairs

    if not plottable:
        return EvalResult(ok=False, error="Nothing to plot: no 1xn or 2xn numeric matrices")

    temp_path = None
    if output_path is None:
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as temp_file:
            output_path = temp_path = temp_file.name

    fig, ax = plt.subplots(figsize=(width / PLOT_DPI, height / PLOT_DPI), dpi=PLOT_DPI)
    try:
        _style_axes(ax, viewport, width, height)
        colors = plt.rcParams["axes.prop_cycle"].by_key()["color"]
        for index, (name, pairs) in enumerate(plottable.items()):
            components = np.array(pairs, dtype=float)
            origins = np.zeros(len(pairs))
            ax.quiver(
                origins,
                origins,
                components[:, 0],
                components[:, 1],
                angles="xy",
                scale_units="xy",
                scale=1,
                color=colors[index % len(colors)],
                label=name,
            )
        ax.legend(loc="upper right", fontsize=10)
        fig.savefig(output_path, dpi=PLOT_DPI)
    except (ValueError, OSError) as e:
        _discard(temp_path)
        return EvalResult(ok=False, error=f"Plotting error: {e}")
    except Exception as e:
        logger.error(f"Unexpected plotting error: {e}", exc_info=True)
        _discard(temp_path)
        return EvalResult(ok=False, error="Plotting failed unexpectedly")
    finally:
        plt.close(fig)

    logger.info("Plotted %d vector set(s) to %s", len(plottable), output_path)
    return EvalResult(ok=True, result=output_path)
