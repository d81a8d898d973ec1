"""Analysis configuration — every heuristic threshold used by the engine.

The defaults are empirically chosen pixel constants; they are parameters, not
invariants.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AnalysisConfig:
    """Thresholds and switches for one analysis run."""

    # Edge detection (0–255 gray scale)
    edge_threshold: float = 50.0
    edge_cluster_radius: float = 5.0

    # Region segmentation
    seed_stride: int = 10
    color_tolerance: int = 50
    min_region_side: int = 20
    min_region_pixels: int = 100
    full_confidence_pixels: int = 1000
    drop_background_region: bool = True

    # Grid / spacing / alignment
    line_aspect_ratio: float = 3.0
    grid_line_min_gap: float = 20.0
    spacing_max_distance: float = 100.0
    alignment_tolerance: float = 5.0
    grid_min_tracks: int = 3
    flex_min_aligned: int = 3

    # Visual hierarchy weights
    hierarchy_area_weight: float = 100.0
    hierarchy_top_weight: float = 50.0
    hierarchy_left_weight: float = 20.0
    hierarchy_confidence_weight: float = 30.0
    hierarchy_primary_share: float = 0.2
    hierarchy_secondary_share: float = 0.3

    # Component classification
    button_min_aspect: float = 2.0
    button_max_height: int = 50
    input_min_aspect: float = 3.0
    input_max_height: int = 40
    card_min_area: int = 10000
    card_min_aspect: float = 0.5
    card_max_aspect: float = 2.0
    header_min_width_share: float = 0.8
    header_max_height: int = 100
    sidebar_min_height_share: float = 0.8
    sidebar_max_width: int = 200
    color_sample_step: int = 10

    # Patterns and structure
    row_tolerance: float = 20.0
    top_band_height: int = 100
    nav_item_max_width: int = 150
    nav_item_max_height: int = 50
    nav_min_items: int = 3
    card_grid_min_cards: int = 4
    pattern_min_confidence: float = 0.5
    section_min_width: int = 200

    # Accessibility
    large_text_min_font: float = 18.0
    min_font_size: float = 12.0
    max_line_chars: float = 80.0
    char_width_ratio: float = 0.6
    focus_backward_jump: float = 50.0

    # Responsiveness
    breakpoints: tuple[int, ...] = (320, 768, 1024, 1280, 1920)
    adaptive_widths: dict[str, str] = field(
        default_factory=lambda: {"mobile": "100%", "tablet": "50%", "desktop": "33.333%"}
    )
    layout_flexibility: float = 0.8
