"""T3.02 — Design Pattern Detection. ★★

Recognize recurring UI patterns from the classified components:
- Horizontal Navigation: > 2 small items (< 150×50) in the top 100 px band.
- Card Grid: ≥ 4 cards on ≥ 2 rows (±20 px), every row holding > 1 card.

Content and interaction detectors are extension points that find nothing
yet. Only patterns with confidence > 0.5 are reported.
"""

from __future__ import annotations

from collections.abc import Sequence

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import Component, ComponentType, DesignPattern, PatternType

_NAVIGATION_CONFIDENCE = 0.8
_CARD_GRID_CONFIDENCE = 0.9


def group_by_row(components: Sequence[Component], tolerance: float) -> list[list[Component]]:
    """Rows of components sorted by top edge. A component joins the first row
    whose first member's y is within ``tolerance``."""
    rows: list[list[Component]] = []
    for component in sorted(components, key=lambda c: c.bounding_box.y):
        y = component.bounding_box.y
        for row in rows:
            if abs(y - row[0].bounding_box.y) <= tolerance:
                row.append(component)
                break
        else:
            rows.append([component])
    return rows


def detect_navigation_patterns(components: Sequence[Component], config: AnalysisConfig) -> list[DesignPattern]:
    top_band = [c for c in components if c.bounding_box.y < config.top_band_height]
    items = [
        c for c in top_band
        if c.bounding_box.width < config.nav_item_max_width
        and c.bounding_box.height < config.nav_item_max_height
    ]
    if len(items) < config.nav_min_items:
        return []
    return [
        DesignPattern(
            name="Horizontal Navigation",
            type=PatternType.NAVIGATION,
            elements=[c.bounding_box for c in items],
            description="Horizontal navigation bar with several navigation items",
            common_usage="Primary site navigation at the top of the page",
            confidence=_NAVIGATION_CONFIDENCE,
        )
    ]


def detect_layout_patterns(components: Sequence[Component], config: AnalysisConfig) -> list[DesignPattern]:
    cards = [c for c in components if c.type is ComponentType.CARD]
    if len(cards) < config.card_grid_min_cards:
        return []
    rows = group_by_row(cards, config.row_tolerance)
    if len(rows) < 2 or any(len(row) < 2 for row in rows):
        return []
    return [
        DesignPattern(
            name="Card Grid",
            type=PatternType.LAYOUT,
            elements=[c.bounding_box for c in cards],
            description="Grid of cards laid out in rows",
            common_usage="Product listings and content browsing",
            confidence=_CARD_GRID_CONFIDENCE,
        )
    ]


def detect_content_patterns(components: Sequence[Component], config: AnalysisConfig) -> list[DesignPattern]:
    return []


def detect_interaction_patterns(components: Sequence[Component], config: AnalysisConfig) -> list[DesignPattern]:
    return []


_DETECTORS = (
    detect_navigation_patterns,
    detect_layout_patterns,
    detect_content_patterns,
    detect_interaction_patterns,
)


def detect_patterns(
    components: Sequence[Component],
    config: AnalysisConfig | None = None,
) -> list[DesignPattern]:
    config = config or AnalysisConfig()
    patterns = [p for detector in _DETECTORS for p in detector(components, config)]
    return [p for p in patterns if p.confidence > config.pattern_min_confidence]


@transform(
    id="T3.02",
    layer=Layer.SEMANTICS,
    dependencies=["T3.01"],
    description="Detect navigation bars, card grids and other design patterns",
)
def pattern_detection(ctx: AnalysisContext) -> None:
    ctx.patterns = detect_patterns(ctx.components, ctx.config)
