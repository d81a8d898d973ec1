"""T2.04 — Alignment Detection. ★★

Group edge segments sharing a left/center/right x or top/middle/bottom y
within ±5 px. An alignment is present when its largest group has more than
one member.
"""

from __future__ import annotations

from collections.abc import Sequence

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import AlignmentInfo, AlignmentType, BoundingBox

# Alignment key → the coordinate it compares.
_ALIGNMENT_VALUE = {
    "x": lambda b: b.x,
    "center_x": lambda b: b.center_x,
    "right_x": lambda b: b.right,
    "y": lambda b: b.y,
    "center_y": lambda b: b.center_y,
    "bottom_y": lambda b: b.bottom,
}

_HORIZONTAL_KEYS = [
    ("x", AlignmentType.LEFT),
    ("center_x", AlignmentType.CENTER),
    ("right_x", AlignmentType.RIGHT),
]
_VERTICAL_KEYS = [
    ("y", AlignmentType.TOP),
    ("center_y", AlignmentType.MIDDLE),
    ("bottom_y", AlignmentType.BOTTOM),
]


def alignment_value(box: BoundingBox, key: str) -> float:
    return float(_ALIGNMENT_VALUE[key](box))


def find_aligned(boxes: Sequence[BoundingBox], key: str, tolerance: float) -> list[BoundingBox]:
    """Largest group of boxes whose ``key`` coordinate is within ``tolerance``
    of the group's first member. Earliest group wins ties."""
    groups: list[tuple[float, list[BoundingBox]]] = []
    for box in boxes:
        value = alignment_value(box, key)
        for anchor, members in groups:
            if abs(value - anchor) <= tolerance:
                members.append(box)
                break
        else:
            groups.append((value, [box]))

    largest: list[BoundingBox] = []
    for _, members in groups:
        if len(members) > len(largest):
            largest = members
    return largest


def alignment_group_sizes(edges: Sequence[BoundingBox], tolerance: float) -> dict[str, int]:
    return {key: len(find_aligned(edges, key, tolerance)) for key in _ALIGNMENT_VALUE}


def analyze_alignment(
    edges: Sequence[BoundingBox],
    config: AnalysisConfig | None = None,
) -> tuple[AlignmentInfo, dict[str, int]]:
    """Alignment info plus the largest group size per key."""
    config = config or AnalysisConfig()
    sizes = alignment_group_sizes(edges, config.alignment_tolerance)
    info = AlignmentInfo(
        horizontal=[kind for key, kind in _HORIZONTAL_KEYS if sizes[key] > 1],
        vertical=[kind for key, kind in _VERTICAL_KEYS if sizes[key] > 1],
        baseline=[],
    )
    return info, sizes


@transform(
    id="T2.04",
    layer=Layer.LAYOUT,
    dependencies=["T1.01"],
    description="Detect shared left/center/right and top/middle/bottom alignments",
)
def alignment(ctx: AnalysisContext) -> None:
    ctx.alignment, ctx.alignment_groups = analyze_alignment(ctx.edges, ctx.config)
