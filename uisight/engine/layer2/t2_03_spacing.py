"""T2.03 — Spacing Analysis. ★

Pairwise distances between edge-segment centers closer than 100 px, and
their consistency max(0, 1 − std/mean). Margins are the distances from each
image border to the outermost edge segment.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from scipy.spatial import cKDTree

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import BoundingBox, SpacingAnalysis
from uisight.utils.math_helpers import consistency_score


def center_gaps(edges: Sequence[BoundingBox], max_distance: float) -> list[float]:
    """Sorted center-to-center distances strictly below ``max_distance``."""
    if len(edges) < 2:
        return []
    centers = np.array([(e.center_x, e.center_y) for e in edges], dtype=np.float64)
    pairs = cKDTree(centers).query_pairs(r=max_distance, output_type="ndarray")
    if len(pairs) == 0:
        return []
    deltas = centers[pairs[:, 0]] - centers[pairs[:, 1]]
    distances = np.hypot(deltas[:, 0], deltas[:, 1])
    return np.sort(distances[distances < max_distance]).tolist()


def outer_margins(edges: Sequence[BoundingBox], image_width: int, image_height: int) -> list[float]:
    """[top, right, bottom, left]; empty without edges."""
    if not edges:
        return []
    return [
        float(min(e.y for e in edges)),
        float(image_width - max(e.right for e in edges)),
        float(image_height - max(e.bottom for e in edges)),
        float(min(e.x for e in edges)),
    ]


def analyze_spacing(
    edges: Sequence[BoundingBox],
    image_width: int,
    image_height: int,
    config: AnalysisConfig | None = None,
) -> SpacingAnalysis:
    config = config or AnalysisConfig()
    gaps = center_gaps(edges, config.spacing_max_distance)
    return SpacingAnalysis(
        margins=outer_margins(edges, image_width, image_height),
        paddings=[],
        gaps=gaps,
        consistency=consistency_score(gaps),
    )


@transform(
    id="T2.03",
    layer=Layer.LAYOUT,
    dependencies=["T1.01"],
    description="Measure spacing between edge segments and its consistency",
)
def spacing(ctx: AnalysisContext) -> None:
    ctx.spacing = analyze_spacing(ctx.edges, ctx.width, ctx.height, ctx.config)
