"""T1.01 — Edge Detection. ★★★

Central-difference gradient on the gray plane, thresholded into edge points,
then greedily grouped into edge segments.

For every interior pixel:
    gx = gray(x+1, y) − gray(x−1, y)
    gy = gray(x, y+1) − gray(x, y−1)
    magnitude = √(gx² + gy²)
Points with magnitude > threshold are kept with confidence min(magnitude/255, 1).

Grouping is a single pass in row-major order: each ungrouped point seeds a
group that absorbs every ungrouped point within the cluster radius of the
seed. Singleton groups are noise and dropped; every other group collapses to
its tight bounding box with the mean member confidence.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy.spatial import cKDTree

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.pixels import PixelBuffer
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import BoundingBox


def gradient_magnitude(gray: NDArray[np.float64]) -> NDArray[np.float64]:
    """Gradient magnitude of the interior, shape (H−2, W−2)."""
    gx = gray[1:-1, 2:] - gray[1:-1, :-2]
    gy = gray[2:, 1:-1] - gray[:-2, 1:-1]
    return np.hypot(gx, gy)


def edge_points(
    gray: NDArray[np.float64],
    threshold: float,
) -> tuple[NDArray[np.int64], NDArray[np.float64]]:
    """Edge points as an N×2 (x, y) array in row-major order, plus confidences."""
    height, width = gray.shape
    if width < 3 or height < 3:
        return np.empty((0, 2), dtype=np.int64), np.empty(0)

    magnitude = gradient_magnitude(gray)
    rows, cols = np.nonzero(magnitude > threshold)
    points = np.column_stack([cols + 1, rows + 1]).astype(np.int64)
    confidence = np.minimum(magnitude[rows, cols] / 255.0, 1.0)
    return points, confidence


def group_edge_points(
    points: NDArray[np.int64],
    confidence: NDArray[np.float64],
    radius: float,
) -> list[BoundingBox]:
    """Greedy seed-radius grouping of edge points into segment boxes."""
    n = len(points)
    if n < 2:
        return []

    tree = cKDTree(points)
    grouped = np.zeros(n, dtype=bool)
    segments: list[BoundingBox] = []

    for seed in range(n):
        if grouped[seed]:
            continue
        grouped[seed] = True
        near = [j for j in tree.query_ball_point(points[seed], r=radius) if not grouped[j]]
        if not near:
            continue
        grouped[near] = True
        members = np.array([seed, *near])

        xs = points[members, 0]
        ys = points[members, 1]
        x0, y0 = int(xs.min()), int(ys.min())
        segments.append(BoundingBox(
            x=x0,
            y=y0,
            width=int(xs.max()) + 1 - x0,
            height=int(ys.max()) + 1 - y0,
            confidence=float(confidence[members].mean()),
        ))

    return segments


def detect_edges(pixels: PixelBuffer, config: AnalysisConfig | None = None,
                 gray: NDArray[np.float64] | None = None) -> list[BoundingBox]:
    """Edge segments of ``pixels``. Images under 3×3 yield ``[]``."""
    config = config or AnalysisConfig()
    if pixels.width < 3 or pixels.height < 3:
        return []
    if gray is None:
        gray = pixels.gray_plane()
    points, confidence = edge_points(gray, config.edge_threshold)
    return group_edge_points(points, confidence, config.edge_cluster_radius)


@transform(
    id="T1.01",
    layer=Layer.DETECTION,
    dependencies=["T0.01"],
    description="Detect gradient edges and group them into segments",
)
def edge_detection(ctx: AnalysisContext) -> None:
    if ctx.pixels is None:
        return
    ctx.edges = detect_edges(ctx.pixels, ctx.config, gray=ctx.gray)
