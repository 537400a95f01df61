"""Viewport math for the vector graph.

Graph coordinates have y pointing up; screen coordinates are pixels with
the origin at the top-left corner and y pointing down.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

from .config import DEFAULT_ZOOM

ZOOM_OUT_FACTOR = 0.9
ZOOM_IN_FACTOR = 1.1

# Target pixel distance between grid lines
MIN_GRID_PIXELS = 50
MAX_GRID_PIXELS = 100


@dataclass(frozen=True)
class Viewport:
    """Graph point shown at the canvas center, and pixels per graph unit."""

    center_x: float = 0.0
    center_y: float = 0.0
    zoom: float = DEFAULT_ZOOM


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float


def graph_to_screen(
    graph_x: float, graph_y: float, viewport: Viewport, width: float, height: float
) -> tuple[float, float]:
    """Convert graph coordinates to screen pixel coordinates."""
    screen_x = (graph_x - viewport.center_x) * viewport.zoom + width / 2
    screen_y = (viewport.center_y - graph_y) * viewport.zoom + height / 2
    return screen_x, screen_y


def screen_to_graph(
    screen_x: float, screen_y: float, viewport: Viewport, width: float, height: float
) -> tuple[float, float]:
    """Convert screen pixel coordinates to graph coordinates."""
    graph_x = (screen_x - width / 2) / viewport.zoom + viewport.center_x
    graph_y = viewport.center_y - (screen_y - height / 2) / viewport.zoom
    return graph_x, graph_y


def visible_bounds(viewport: Viewport, width: float, height: float) -> Bounds:
    """Calculate the visible region of the graph in graph coordinates."""
    left, top = screen_to_graph(0, 0, viewport, width, height)
    right, bottom = screen_to_graph(width, height, viewport, width, height)
    return Bounds(min_x=left, max_x=right, min_y=bottom, max_y=top)


def pan(viewport: Viewport, dx_pixels: float, dy_pixels: float) -> Viewport:
    """Move the view by a mouse drag of (dx, dy) pixels.

    The content follows the pointer, so the center moves the opposite way
    horizontally and, because screen y is inverted, the same way vertically.
    """
    return replace(
        viewport,
        center_x=viewport.center_x - dx_pixels / viewport.zoom,
        center_y=viewport.center_y + dy_pixels / viewport.zoom,
    )


def zoom(viewport: Viewport, scroll_delta: float) -> Viewport:
    """Zoom out on a positive scroll delta, in otherwise."""
    factor = ZOOM_OUT_FACTOR if scroll_delta > 0 else ZOOM_IN_FACTOR
    return replace(viewport, zoom=viewport.zoom * factor)


def grid_spacing(zoom_level: float) -> float:
    """Pick a power-of-two spacing that puts grid lines 50-100 pixels apart."""
    spacing = 1.0
    if not math.isfinite(zoom_level) or zoom_level <= 0:
        return spacing
    while spacing * zoom_level < MIN_GRID_PIXELS:
        spacing *= 2
    while spacing * zoom_level > MAX_GRID_PIXELS:
        spacing /= 2
    return spacing


def format_tick_value(value: float, spacing: float) -> str:
    """Format an axis tick label with just enough decimals for ``spacing``."""
    clamped = 0.0 if abs(value) < 1e-10 else value
    if spacing >= 1:
        decimals = 0
    else:
        decimals = min(6, max(0, math.ceil(-math.log10(spacing)) + 1))
    text = f"{clamped:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text
