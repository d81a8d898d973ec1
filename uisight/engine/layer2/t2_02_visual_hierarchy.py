"""T2.02 — Visual Hierarchy. ★★

Rank segmented regions by a weighted dominance score:
    (area / total_area) × 100 + (1 − y/H) × 50 + (1 − x/W) × 20 + confidence × 30
Top ceil(20%) → primary, next ceil(30%) → secondary, the rest → tertiary.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import BoundingBox, VisualHierarchy


def hierarchy_score(region: BoundingBox, image_width: int, image_height: int,
                    config: AnalysisConfig) -> float:
    total_area = image_width * image_height
    if total_area <= 0:
        return 0.0
    return (
        region.area / total_area * config.hierarchy_area_weight
        + (1 - region.y / image_height) * config.hierarchy_top_weight
        + (1 - region.x / image_width) * config.hierarchy_left_weight
        + region.confidence * config.hierarchy_confidence_weight
    )


def analyze_hierarchy(
    regions: Sequence[BoundingBox],
    image_width: int,
    image_height: int,
    config: AnalysisConfig | None = None,
) -> VisualHierarchy:
    config = config or AnalysisConfig()
    ranked = sorted(
        regions,
        key=lambda r: hierarchy_score(r, image_width, image_height, config),
        reverse=True,
    )
    total = len(ranked)
    n_primary = math.ceil(total * config.hierarchy_primary_share)
    n_secondary = math.ceil(total * config.hierarchy_secondary_share)
    return VisualHierarchy(
        primary=ranked[:n_primary],
        secondary=ranked[n_primary : n_primary + n_secondary],
        tertiary=ranked[n_primary + n_secondary :],
    )


@transform(
    id="T2.02",
    layer=Layer.LAYOUT,
    dependencies=["T1.02"],
    description="Rank regions into primary/secondary/tertiary visual tiers",
)
def visual_hierarchy(ctx: AnalysisContext) -> None:
    ctx.hierarchy = analyze_hierarchy(ctx.regions, ctx.width, ctx.height, ctx.config)
