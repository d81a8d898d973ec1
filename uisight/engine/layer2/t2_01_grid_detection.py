"""T2.01 — Grid Detection. ★★

Infer column/row tracks from line-shaped edge segments.

- Horizontal lines: width > 3 × height. Vertical lines: height > 3 × width.
- Line count per axis = 1 + number of gaps > 20 px between sorted positions.
- columns = vertical line count + 1, rows = horizontal line count + 1.
- Gaps: mean consecutive position delta. Gutters: image edge to outermost vertical line.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import BoundingBox, GridGaps, GridGutters, GridInfo


def split_lines(
    edges: Sequence[BoundingBox],
    aspect: float,
) -> tuple[list[BoundingBox], list[BoundingBox]]:
    """(horizontal, vertical) line-shaped segments."""
    horizontal = [e for e in edges if e.width > e.height * aspect]
    vertical = [e for e in edges if e.height > e.width * aspect]
    return horizontal, vertical


def _positions(lines: Sequence[BoundingBox], axis: str) -> np.ndarray:
    return np.sort(np.array([getattr(line, axis) for line in lines], dtype=np.float64))


def count_grid_lines(lines: Sequence[BoundingBox], axis: str, min_gap: float) -> int:
    if not lines:
        return 0
    positions = _positions(lines, axis)
    return 1 + int(np.count_nonzero(np.diff(positions) > min_gap))


def average_gap(lines: Sequence[BoundingBox], axis: str) -> float:
    if len(lines) < 2:
        return 0.0
    return float(np.mean(np.diff(_positions(lines, axis))))


def gutters(vertical_lines: Sequence[BoundingBox], image_width: int) -> GridGutters:
    if not vertical_lines:
        return GridGutters()
    leftmost = min(line.x for line in vertical_lines)
    rightmost = max(line.x for line in vertical_lines)
    return GridGutters(left=float(leftmost), right=float(image_width - rightmost))


def detect_grid(edges: Sequence[BoundingBox], image_width: int,
                config: AnalysisConfig | None = None) -> GridInfo:
    config = config or AnalysisConfig()
    horizontal, vertical = split_lines(edges, config.line_aspect_ratio)
    return GridInfo(
        columns=count_grid_lines(vertical, "x", config.grid_line_min_gap) + 1,
        rows=count_grid_lines(horizontal, "y", config.grid_line_min_gap) + 1,
        gaps=GridGaps(
            horizontal=average_gap(vertical, "x"),
            vertical=average_gap(horizontal, "y"),
        ),
        gutters=gutters(vertical, image_width),
    )


@transform(
    id="T2.01",
    layer=Layer.LAYOUT,
    dependencies=["T1.01"],
    description="Detect grid columns, rows, gaps and gutters from edge lines",
)
def grid_detection(ctx: AnalysisContext) -> None:
    ctx.grid = detect_grid(ctx.edges, ctx.width, ctx.config)
