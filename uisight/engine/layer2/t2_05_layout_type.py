"""T2.05 — Layout Type Inference. ★

≥3 columns and ≥3 rows → grid; otherwise more than two top- or left-aligned
segments → flexbox; otherwise unknown.
"""

from __future__ import annotations

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import GridInfo, LayoutType


def infer_layout_type(
    grid: GridInfo,
    alignment_groups: dict[str, int],
    config: AnalysisConfig | None = None,
) -> LayoutType:
    config = config or AnalysisConfig()
    if grid.columns >= config.grid_min_tracks and grid.rows >= config.grid_min_tracks:
        return LayoutType.GRID

    row_aligned = alignment_groups.get("y", 0)
    column_aligned = alignment_groups.get("x", 0)
    if row_aligned >= config.flex_min_aligned or column_aligned >= config.flex_min_aligned:
        return LayoutType.FLEXBOX

    return LayoutType.UNKNOWN


@transform(
    id="T2.05",
    layer=Layer.LAYOUT,
    dependencies=["T2.01", "T2.04"],
    description="Classify the page layout as grid, flexbox or unknown",
)
def layout_type(ctx: AnalysisContext) -> None:
    grid = ctx.grid or GridInfo()
    ctx.layout_type = infer_layout_type(grid, ctx.alignment_groups, ctx.config)
