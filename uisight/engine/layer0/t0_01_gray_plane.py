"""T0.01 — Gray Plane. ★★★

Cache the (R + G + B) / 3 intensity plane shared by the gradient stages.
"""

from __future__ import annotations

from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, transform


@transform(
    id="T0.01",
    layer=Layer.SAMPLING,
    description="Compute the grayscale intensity plane",
    tags={"always"},
)
def gray_plane(ctx: AnalysisContext) -> None:
    if ctx.pixels is None:
        return
    ctx.gray = ctx.pixels.gray_plane()
