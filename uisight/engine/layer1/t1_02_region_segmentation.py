"""T1.02 — Region Segmentation. ★★★ CRITICAL

Flood-fill connected components over colour similarity, seeded from a coarse
grid. Produces the candidate element boxes fed to classification.

- Seeds every ``seed_stride`` px, row-major; seeds already filled are skipped.
- 4-connected fill, explicit stack, per-channel tolerance against the seed colour.
- One visited bitmap (width×height bytes) per ``segment_regions`` call, shared by
  every fill of that call: no pixel is ever filled twice.
- Fills narrower/shorter than ``min_region_side`` or with fewer than
  ``min_region_pixels`` pixels are dropped; confidence = min(pixels/1000, 1).
- A fill touching all four image borders is the page background and is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.pixels import PixelBuffer
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import BoundingBox

logger = logging.getLogger(__name__)


@dataclass
class FillResult:
    """Extent and size of one flood fill. Pixel membership is not retained."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int
    pixel_count: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1


class ColorPlanes:
    """Flat per-channel lists of a PixelBuffer, indexed by ``y * width + x``."""

    def __init__(self, pixels: PixelBuffer) -> None:
        self.width = pixels.width
        self.height = pixels.height
        rgb = pixels.data[:, :, :3]
        self.r: list[int] = rgb[:, :, 0].ravel().tolist()
        self.g: list[int] = rgb[:, :, 1].ravel().tolist()
        self.b: list[int] = rgb[:, :, 2].ravel().tolist()


def new_visited_mask(pixels: PixelBuffer) -> bytearray:
    """Run-scoped visited bitmap, one byte per pixel."""
    return bytearray(pixels.width * pixels.height)


def flood_fill(
    planes: ColorPlanes,
    visited: bytearray,
    start_x: int,
    start_y: int,
    tolerance: int,
) -> FillResult | None:
    """Fill the 4-connected area around (start_x, start_y) whose colour is within
    ``tolerance`` per channel of the seed colour, marking ``visited``.

    Returns None if the seed was already visited.
    """
    width, height = planes.width, planes.height
    r, g, b = planes.r, planes.g, planes.b
    start = start_y * width + start_x
    if visited[start]:
        return None

    tr, tg, tb = r[start], g[start], b[start]
    visited[start] = 1
    stack = [start]
    min_x = max_x = start_x
    min_y = max_y = start_y
    count = 0

    while stack:
        idx = stack.pop()
        y, x = divmod(idx, width)
        count += 1
        if x < min_x:
            min_x = x
        elif x > max_x:
            max_x = x
        if y < min_y:
            min_y = y
        elif y > max_y:
            max_y = y

        # Neighbours are claimed when pushed so each pixel enters the stack once.
        for nidx, inside in (
            (idx + 1, x + 1 < width),
            (idx - 1, x > 0),
            (idx + width, y + 1 < height),
            (idx - width, y > 0),
        ):
            if (
                inside
                and not visited[nidx]
                and abs(r[nidx] - tr) <= tolerance
                and abs(g[nidx] - tg) <= tolerance
                and abs(b[nidx] - tb) <= tolerance
            ):
                visited[nidx] = 1
                stack.append(nidx)

    return FillResult(min_x, min_y, max_x, max_y, count)


def _is_background(fill: FillResult, width: int, height: int) -> bool:
    return fill.min_x == 0 and fill.min_y == 0 and fill.max_x == width - 1 and fill.max_y == height - 1


def segment_regions(pixels: PixelBuffer, config: AnalysisConfig | None = None) -> list[BoundingBox]:
    """Candidate UI-element regions of ``pixels``, in seed order."""
    config = config or AnalysisConfig()
    width, height = pixels.width, pixels.height
    if width == 0 or height == 0:
        return []

    planes = ColorPlanes(pixels)
    visited = new_visited_mask(pixels)
    stride = max(1, config.seed_stride)
    regions: list[BoundingBox] = []
    fills = 0

    for y in range(0, height, stride):
        for x in range(0, width, stride):
            fill = flood_fill(planes, visited, x, y, config.color_tolerance)
            if fill is None:
                continue
            fills += 1
            if fill.width <= config.min_region_side or fill.height <= config.min_region_side:
                continue
            if fill.pixel_count < config.min_region_pixels:
                continue
            if config.drop_background_region and _is_background(fill, width, height):
                continue
            regions.append(BoundingBox(
                x=fill.min_x,
                y=fill.min_y,
                width=fill.width,
                height=fill.height,
                confidence=min(fill.pixel_count / config.full_confidence_pixels, 1.0),
            ).clamped(width, height))

    logger.debug("Segmentation: %d fills, %d regions kept", fills, len(regions))
    return regions


@transform(
    id="T1.02",
    layer=Layer.DETECTION,
    dependencies=["T0.01"],
    description="Segment colour regions by seeded flood fill",
)
def region_segmentation(ctx: AnalysisContext) -> None:
    if ctx.pixels is None:
        return
    ctx.regions = segment_regions(ctx.pixels, ctx.config)
