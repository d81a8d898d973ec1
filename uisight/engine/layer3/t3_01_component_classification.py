"""T3.01 — Component Classification. ★★★ CRITICAL

Map each segmented region to a UI component type with an ordered rule chain
(first match wins), then estimate its visual properties:

1. aspect > 2 and height < 50           → button
2. aspect > 3 and height < 40           → input
3. area > 10000 and 0.5 < aspect < 2    → card
4. width > 0.8 × image width, h < 100   → header
5. height > 0.8 × image height, w < 200 → sidebar

Regions matching no rule are rejected (no component).
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Callable

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.pixels import PixelBuffer
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import (
    BoundingBox,
    Component,
    ComponentBorder,
    ComponentColor,
    ComponentEffect,
    ComponentProperties,
    ComponentSize,
    ComponentSpacing,
    ComponentState,
    ComponentType,
    ComponentTypography,
    Sides,
    SizeScale,
    interactions_for,
    role_for,
)
from uisight.utils.colors import rgb_to_hex

logger = logging.getLogger(__name__)

Rule = Callable[[BoundingBox, int, int, AnalysisConfig], bool]

# Ordered; earlier rules win.
CLASSIFICATION_RULES: list[tuple[Rule, ComponentType]] = [
    (
        lambda b, w, h, c: b.aspect_ratio > c.button_min_aspect and b.height < c.button_max_height,
        ComponentType.BUTTON,
    ),
    (
        lambda b, w, h, c: b.aspect_ratio > c.input_min_aspect and b.height < c.input_max_height,
        ComponentType.INPUT,
    ),
    (
        lambda b, w, h, c: (
            b.area > c.card_min_area and c.card_min_aspect < b.aspect_ratio < c.card_max_aspect
        ),
        ComponentType.CARD,
    ),
    (
        lambda b, w, h, c: b.width > w * c.header_min_width_share and b.height < c.header_max_height,
        ComponentType.HEADER,
    ),
    (
        lambda b, w, h, c: b.height > h * c.sidebar_min_height_share and b.width < c.sidebar_max_width,
        ComponentType.SIDEBAR,
    ),
]

# Upper area bounds (exclusive) for each size bucket; anything larger is xl.
_SIZE_BUCKETS = [
    (1000, SizeScale.XS),
    (5000, SizeScale.SM),
    (15000, SizeScale.MD),
    (50000, SizeScale.LG),
]

_COLOR_SLOTS = ("background", "foreground", "border", "accent")


def infer_component_type(
    region: BoundingBox,
    image_width: int,
    image_height: int,
    config: AnalysisConfig,
) -> ComponentType:
    for predicate, component_type in CLASSIFICATION_RULES:
        if predicate(region, image_width, image_height, config):
            return component_type
    return ComponentType.UNKNOWN


def size_scale(area: int) -> SizeScale:
    for limit, scale in _SIZE_BUCKETS:
        if area < limit:
            return scale
    return SizeScale.XL


def sample_region_colors(region: BoundingBox, pixels: PixelBuffer, step: int) -> list[str]:
    """Most frequent hex colours on a ``step``-strided grid inside ``region``.

    At most four; ties keep the order of first sighting (row-major).
    """
    patch = pixels.sub_region(region)[::step, ::step, :3]
    if patch.size == 0:
        return []
    counts = Counter(rgb_to_hex(*px) for px in patch.reshape(-1, 3).tolist())
    return [color for color, _ in counts.most_common(len(_COLOR_SLOTS))]


def extract_properties(region: BoundingBox, pixels: PixelBuffer, config: AnalysisConfig) -> ComponentProperties:
    sampled = sample_region_colors(region, pixels, config.color_sample_step)
    color = ComponentColor(**dict(zip(_COLOR_SLOTS, sampled)))

    font_size = max(12.0, min(region.height / 3, 24.0))
    padding = max(4.0, min(region.width, region.height) * 0.1)

    return ComponentProperties(
        size=ComponentSize(width=region.width, height=region.height, scale=size_scale(region.area)),
        color=color,
        typography=ComponentTypography(
            font_size=font_size,
            font_weight=400,
            line_height=float(region.height),
        ),
        spacing=ComponentSpacing(
            padding=Sides(top=padding, right=padding, bottom=padding, left=padding),
            margin=Sides(top=4.0, right=4.0, bottom=4.0, left=4.0),
        ),
        borders=ComponentBorder(radius=4 if region.height < 40 else 8),
        effects=ComponentEffect(),
        state=ComponentState.DEFAULT,
    )


def classify_region(
    region: BoundingBox,
    pixels: PixelBuffer,
    config: AnalysisConfig | None = None,
) -> Component | None:
    """Classify one region, or None if it is not a recognizable UI element."""
    config = config or AnalysisConfig()
    box = region.clamped(pixels.width, pixels.height)
    component_type = infer_component_type(box, pixels.width, pixels.height, config)
    if component_type is ComponentType.UNKNOWN:
        return None

    return Component(
        type=component_type,
        bounding_box=box,
        properties=extract_properties(box, pixels, config),
        states=[ComponentState.DEFAULT],
        interactions=interactions_for(component_type),
        semantic_role=role_for(component_type),
    )


def classify_regions(
    regions: list[BoundingBox],
    pixels: PixelBuffer,
    config: AnalysisConfig | None = None,
) -> list[Component]:
    """Classified components, highest confidence first (stable)."""
    config = config or AnalysisConfig()
    components = [c for c in (classify_region(r, pixels, config) for r in regions) if c is not None]
    components.sort(key=lambda c: c.bounding_box.confidence, reverse=True)
    return components


@transform(
    id="T3.01",
    layer=Layer.SEMANTICS,
    dependencies=["T1.02"],
    description="Classify regions into UI components and extract their properties",
)
def component_classification(ctx: AnalysisContext) -> None:
    if ctx.pixels is None:
        return
    ctx.components = classify_regions(ctx.regions, ctx.pixels, ctx.config)
    logger.debug("classified %d of %d regions", len(ctx.components), len(ctx.regions))
