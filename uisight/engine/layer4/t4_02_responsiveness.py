"""T4.02 — Responsiveness. ★

Report the common breakpoints that fit inside the image width and mark every
component as adaptive with a fixed mobile/tablet/desktop width map. Nothing
here is measured; scalability is an optimistic default.
"""

from __future__ import annotations

from collections.abc import Sequence

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.pixels import PixelBuffer
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import (
    AdaptiveBehavior,
    AdaptiveElement,
    BreakpointAnalysis,
    Component,
    LayoutType,
    ResponsivenessAnalysis,
    ScalabilityAnalysis,
)


def infer_breakpoints(image_width: int, config: AnalysisConfig) -> list[BreakpointAnalysis]:
    return [
        BreakpointAnalysis(width=bp, layout=LayoutType.FLEXBOX, changes=[])
        for bp in config.breakpoints
        if bp <= image_width
    ]


def adaptive_elements(components: Sequence[Component], config: AnalysisConfig) -> list[AdaptiveElement]:
    behavior = AdaptiveBehavior(property="width", values=dict(config.adaptive_widths))
    return [AdaptiveElement(element=c.bounding_box, behaviors=[behavior]) for c in components]


def analyze_responsiveness(
    pixels: PixelBuffer | None,
    components: Sequence[Component],
    config: AnalysisConfig | None = None,
) -> ResponsivenessAnalysis:
    config = config or AnalysisConfig()
    width = pixels.width if pixels is not None else 0
    return ResponsivenessAnalysis(
        breakpoints=infer_breakpoints(width, config),
        adaptive_elements=adaptive_elements(components, config),
        scalability=ScalabilityAnalysis(
            text_scaling=True,
            image_scaling=True,
            layout_flexibility=config.layout_flexibility,
            issues=[],
        ),
    )


@transform(
    id="T4.02",
    layer=Layer.AUDIT,
    dependencies=["T3.01"],
    description="Infer breakpoints and adaptive behaviour of components",
)
def responsiveness(ctx: AnalysisContext) -> None:
    ctx.responsiveness = analyze_responsiveness(ctx.pixels, ctx.components, ctx.config)
