"""Leaf-node box geometry helpers. No engine imports."""

from __future__ import annotations

import functools
from collections.abc import Sequence

from shapely.geometry import box as shapely_box

from uisight.models.analysis import BoundingBox
from uisight.utils.math_helpers import safe_mean


def merge_boxes(boxes: Sequence[BoundingBox]) -> BoundingBox:
    """Tight union of ``boxes``; confidence is the mean of the members."""
    if not boxes:
        return BoundingBox(confidence=0.0)
    x0 = min(b.x for b in boxes)
    y0 = min(b.y for b in boxes)
    x1 = max(b.right for b in boxes)
    y1 = max(b.bottom for b in boxes)
    return BoundingBox(
        x=x0,
        y=y0,
        width=x1 - x0,
        height=y1 - y0,
        confidence=safe_mean([b.confidence for b in boxes]),
    )


def reading_order(boxes: Sequence[BoundingBox], row_tolerance: float) -> list[BoundingBox]:
    """Row-major order: boxes whose tops differ by ≤ row_tolerance share a row
    and sort left-to-right, otherwise top-to-bottom."""

    def _compare(a: BoundingBox, b: BoundingBox) -> int:
        if abs(a.y - b.y) <= row_tolerance:
            return a.x - b.x
        return a.y - b.y

    return sorted(boxes, key=functools.cmp_to_key(_compare))


def strictly_contains(outer: BoundingBox, inner: BoundingBox) -> bool:
    """True if ``inner`` lies inside ``outer`` and the two are not the same box."""
    if outer.area <= inner.area:
        return False
    outer_poly = shapely_box(outer.x, outer.y, outer.right, outer.bottom)
    inner_poly = shapely_box(inner.x, inner.y, inner.right, inner.bottom)
    return outer_poly.covers(inner_poly)
