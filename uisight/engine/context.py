"""AnalysisContext — the single mutable state object flowing through all transforms.

One context per ``analyze_image`` call. Pixel planes live here for the
duration of the run and are dropped by ``release()`` once the result is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray

from uisight.engine.config import AnalysisConfig
from uisight.engine.pixels import PixelBuffer
from uisight.models.analysis import (
    AccessibilityAnalysis,
    AlignmentInfo,
    BoundingBox,
    Component,
    DesignPattern,
    GridInfo,
    LayoutType,
    ResponsivenessAnalysis,
    SpacingAnalysis,
    StructureAnalysis,
    VisualHierarchy,
)


@dataclass
class AnalysisContext:
    """Shared state for one analysis run."""

    pixels: PixelBuffer | None = None
    config: AnalysisConfig = field(default_factory=AnalysisConfig)
    # Per-request switches (skip_patterns, skip_accessibility, ...)
    options: dict[str, bool] = field(default_factory=dict)

    # --- Layer 0 ---
    gray: NDArray[np.float64] | None = None

    # --- Layer 1 ---
    edges: list[BoundingBox] = field(default_factory=list)
    regions: list[BoundingBox] = field(default_factory=list)

    # --- Layer 2 ---
    grid: GridInfo | None = None
    hierarchy: VisualHierarchy | None = None
    spacing: SpacingAnalysis | None = None
    alignment: AlignmentInfo | None = None
    # Size of the largest alignment group per key (x, center_x, right_x, y, center_y, bottom_y)
    alignment_groups: dict[str, int] = field(default_factory=dict)
    layout_type: LayoutType = LayoutType.UNKNOWN

    # --- Layer 3 ---
    components: list[Component] = field(default_factory=list)
    patterns: list[DesignPattern] = field(default_factory=list)
    structure: StructureAnalysis | None = None

    # --- Layer 4 ---
    accessibility: AccessibilityAnalysis | None = None
    responsiveness: ResponsivenessAnalysis | None = None

    # --- Pipeline metadata ---
    completed_transforms: set[str] = field(default_factory=set)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return self.pixels.width if self.pixels is not None else 0

    @property
    def height(self) -> int:
        return self.pixels.height if self.pixels is not None else 0

    def release(self) -> None:
        """Drop the O(width×height) buffers held by this run."""
        self.pixels = None
        self.gray = None
