"""Public entry points — run the pipeline and assemble an AnalysisResult.

``analyze_image`` is synchronous. ``analyze_image_bytes`` awaits the decode in
the default executor, then runs the pipeline on the calling thread.
"""

from __future__ import annotations

import asyncio
import functools
import logging

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.pipeline import create_pipeline
from uisight.engine.pixels import PixelBuffer
from uisight.models.analysis import (
    AccessibilityAnalysis,
    AlignmentInfo,
    AnalysisResult,
    GridInfo,
    LayoutAnalysis,
    ResponsivenessAnalysis,
    SpacingAnalysis,
    StructureAnalysis,
    VisualHierarchy,
)
from uisight.utils.math_helpers import clamp_unit, safe_mean

logger = logging.getLogger(__name__)

# Transforms whose outputs make up LayoutAnalysis.
_LAYOUT_TARGETS = {"T2.01", "T2.02", "T2.03", "T2.04", "T2.05"}


def layout_from_context(ctx: AnalysisContext) -> LayoutAnalysis:
    return LayoutAnalysis(
        type=ctx.layout_type,
        grid=ctx.grid or GridInfo(),
        hierarchy=ctx.hierarchy or VisualHierarchy(),
        spacing=ctx.spacing or SpacingAnalysis(),
        alignment=ctx.alignment or AlignmentInfo(),
    )


def overall_confidence(grid: GridInfo, has_components: bool, has_patterns: bool) -> float:
    # columns is line count + 1, so any analysed grid counts as detected.
    grid_detected = grid.columns > 0
    signals = [
        0.8 if grid_detected else 0.3,
        0.9 if has_components else 0.2,
        0.7 if has_patterns else 0.4,
    ]
    return clamp_unit(safe_mean(signals))


def context_to_result(ctx: AnalysisContext) -> AnalysisResult:
    """Assemble the result; stages that failed or were skipped get empty defaults."""
    layout = layout_from_context(ctx)
    return AnalysisResult(
        width=ctx.width,
        height=ctx.height,
        layout=layout,
        components=ctx.components,
        patterns=ctx.patterns,
        structure=ctx.structure or StructureAnalysis(),
        accessibility=ctx.accessibility or AccessibilityAnalysis(),
        responsiveness=ctx.responsiveness or ResponsivenessAnalysis(),
        confidence=overall_confidence(layout.grid, bool(ctx.components), bool(ctx.patterns)),
    )


def run_analysis(
    pixels: PixelBuffer,
    config: AnalysisConfig | None = None,
    options: dict[str, bool] | None = None,
) -> tuple[AnalysisResult, AnalysisContext]:
    """Run the full pipeline; returns the result and the (released) context."""
    config = config or AnalysisConfig()
    ctx = AnalysisContext(pixels=pixels, config=config, options=dict(options or {}))
    try:
        create_pipeline(config).run(ctx)
        result = context_to_result(ctx)
    finally:
        ctx.release()
    return result, ctx


def analyze_image(
    pixels: PixelBuffer,
    config: AnalysisConfig | None = None,
    options: dict[str, bool] | None = None,
) -> AnalysisResult:
    result, ctx = run_analysis(pixels, config, options)
    if ctx.errors:
        logger.warning("analysis finished with %d failed transforms: %s", len(ctx.errors), sorted(ctx.errors))
    return result


def analyze_layout(pixels: PixelBuffer, config: AnalysisConfig | None = None) -> LayoutAnalysis:
    """Layout analysis only (grid, hierarchy, spacing, alignment, layout type)."""
    config = config or AnalysisConfig()
    ctx = AnalysisContext(pixels=pixels, config=config)
    try:
        create_pipeline(config).run(ctx, targets=_LAYOUT_TARGETS)
        return layout_from_context(ctx)
    finally:
        ctx.release()


async def analyze_image_bytes(
    data: bytes,
    config: AnalysisConfig | None = None,
    options: dict[str, bool] | None = None,
    max_bytes: int | None = None,
    max_pixels: int | None = None,
) -> AnalysisResult:
    """Decode encoded image bytes off the event loop, then analyze them.

    Raises ImageDecodeError if the bytes are not a decodable image.
    """
    from uisight.utils.image_io import DEFAULT_MAX_BYTES, DEFAULT_MAX_PIXELS, decode_image

    loop = asyncio.get_running_loop()
    decode = functools.partial(
        decode_image,
        data,
        max_bytes=max_bytes or DEFAULT_MAX_BYTES,
        max_pixels=max_pixels or DEFAULT_MAX_PIXELS,
    )
    pixels = await loop.run_in_executor(None, decode)
    return analyze_image(pixels, config, options)
