"""Tests for Layer 2 — grid, hierarchy, spacing, alignment, layout type."""

import pytest

from uisight.engine.analyzer import analyze_layout
from uisight.engine.config import AnalysisConfig
from uisight.engine.layer2.t2_01_grid_detection import count_grid_lines, detect_grid, split_lines
from uisight.engine.layer2.t2_02_visual_hierarchy import analyze_hierarchy
from uisight.engine.layer2.t2_03_spacing import analyze_spacing, center_gaps
from uisight.engine.layer2.t2_04_alignment import analyze_alignment, find_aligned
from uisight.engine.layer2.t2_05_layout_type import infer_layout_type
from uisight.models.analysis import AlignmentType, BoundingBox, GridInfo, LayoutType


def _box(x, y, w, h, confidence=1.0):
    return BoundingBox(x=x, y=y, width=w, height=h, confidence=confidence)


# -- grid ------------------------------------------------------------------

def test_split_lines_by_aspect():
    horizontal, vertical = split_lines([_box(0, 0, 40, 2), _box(0, 0, 2, 40), _box(0, 0, 10, 10)], 3)
    assert len(horizontal) == 1 and horizontal[0].width == 40
    assert len(vertical) == 1 and vertical[0].height == 40


def test_count_grid_lines_merges_close_positions():
    lines = [_box(x, 0, 2, 40) for x in (10, 15, 100, 300, 310)]
    assert count_grid_lines(lines, "x", 20) == 3
    assert count_grid_lines([], "x", 20) == 0


def test_detect_grid_columns_rows_gaps_gutters():
    vertical = [_box(x, 0, 2, 100) for x in (100, 300, 500)]
    horizontal = [_box(0, y, 100, 2) for y in (50, 250)]
    grid = detect_grid(vertical + horizontal, image_width=800)
    assert grid.columns == 4
    assert grid.rows == 3
    assert grid.gaps.horizontal == pytest.approx(200.0)
    assert grid.gaps.vertical == pytest.approx(200.0)
    assert grid.gutters.left == 100
    assert grid.gutters.right == 300


def test_detect_grid_without_lines_is_single_cell():
    grid = detect_grid([], image_width=800)
    assert (grid.columns, grid.rows) == (1, 1)
    assert grid.gaps.horizontal == 0.0


# -- hierarchy --------------------------------------------------------------

def test_hierarchy_tiers_use_ceiling_shares():
    regions = [_box(10 + 60 * i, 10 + 60 * i, 50, 50) for i in range(6)]
    h = analyze_hierarchy(regions, 1000, 1000)
    # ceil(6 × 0.2) = 2 primary, ceil(6 × 0.3) = 2 secondary, 2 tertiary
    assert (len(h.primary), len(h.secondary), len(h.tertiary)) == (2, 2, 2)
    # Higher and further left scores higher.
    assert h.primary[0] == regions[0]
    assert h.tertiary[-1] == regions[-1]


def test_hierarchy_prefers_large_regions():
    small = _box(0, 0, 10, 10)
    large = _box(0, 0, 800, 600)
    h = analyze_hierarchy([small, large], 1000, 1000)
    assert h.primary == [large]


def test_hierarchy_empty():
    h = analyze_hierarchy([], 100, 100)
    assert h.primary == h.secondary == h.tertiary == []


# -- spacing ----------------------------------------------------------------

def test_uniform_spacing_is_fully_consistent():
    edges = [_box(x, 0, 10, 10) for x in (0, 50, 100)]
    # Center distances: 50, 50, 100 (the last is not < 100).
    assert center_gaps(edges, 100) == [50.0, 50.0]
    spacing = analyze_spacing(edges, 200, 100)
    assert spacing.consistency == pytest.approx(1.0)
    assert spacing.margins == [0.0, 90.0, 90.0, 0.0]
    assert spacing.paddings == []


def test_irregular_spacing_lowers_consistency():
    edges = [_box(x, 0, 10, 10) for x in (0, 10, 90)]
    spacing = analyze_spacing(edges, 200, 100)
    assert 0.0 <= spacing.consistency < 1.0


def test_spacing_without_edges():
    spacing = analyze_spacing([], 100, 100)
    assert spacing.gaps == []
    assert spacing.margins == []
    assert spacing.consistency == 0.0


# -- alignment ---------------------------------------------------------------

def test_find_aligned_uses_tolerance():
    boxes = [_box(100, 0, 10, 10), _box(104, 50, 10, 10), _box(300, 90, 10, 10)]
    assert len(find_aligned(boxes, "x", 5)) == 2
    assert len(find_aligned(boxes, "x", 1)) == 1


def test_analyze_alignment_reports_present_types():
    edges = [_box(100, y, 50, 10) for y in (0, 40, 80)]
    info, groups = analyze_alignment(edges)
    assert info.horizontal == [AlignmentType.LEFT, AlignmentType.CENTER, AlignmentType.RIGHT]
    assert info.vertical == []
    assert groups["x"] == 3
    assert groups["y"] == 1


# -- layout type -------------------------------------------------------------

def test_layout_type_grid():
    assert infer_layout_type(GridInfo(columns=3, rows=3), {}) is LayoutType.GRID


def test_layout_type_flexbox_from_alignment():
    assert infer_layout_type(GridInfo(columns=2, rows=1), {"y": 3, "x": 1}) is LayoutType.FLEXBOX
    assert infer_layout_type(GridInfo(), {"y": 1, "x": 3}) is LayoutType.FLEXBOX


def test_layout_type_unknown():
    assert infer_layout_type(GridInfo(), {"y": 2, "x": 2}) is LayoutType.UNKNOWN


# -- public entry point ------------------------------------------------------

def test_analyze_layout_uniform_image(uniform_pixels):
    layout = analyze_layout(uniform_pixels)
    assert layout.type is LayoutType.UNKNOWN
    assert (layout.grid.columns, layout.grid.rows) == (1, 1)
    assert layout.hierarchy.primary == []
    assert layout.spacing.consistency == 0.0


def test_analyze_layout_card_grid(card_grid_pixels):
    layout = analyze_layout(card_grid_pixels, AnalysisConfig())
    tiers = layout.hierarchy.primary + layout.hierarchy.secondary + layout.hierarchy.tertiary
    assert len(tiers) == 4
    assert 0.0 <= layout.spacing.consistency <= 1.0
    assert len(layout.spacing.margins) == 4
