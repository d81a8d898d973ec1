"""UISight visual analysis engine."""

from uisight.engine.registry import transform, Layer, get_registry
from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.pixels import PixelBuffer
from uisight.engine.pipeline import Pipeline, create_pipeline
from uisight.engine.analyzer import analyze_image, analyze_image_bytes, analyze_layout
from uisight.engine.layer1.t1_01_edge_detection import detect_edges
from uisight.engine.layer1.t1_02_region_segmentation import flood_fill, segment_regions
from uisight.engine.layer3.t3_01_component_classification import classify_region
from uisight.engine.layer3.t3_02_pattern_detection import detect_patterns
from uisight.engine.layer3.t3_03_structure import analyze_structure
from uisight.engine.layer4.t4_01_accessibility import analyze_accessibility
from uisight.engine.layer4.t4_02_responsiveness import analyze_responsiveness

__all__ = [
    "transform",
    "Layer",
    "get_registry",
    "AnalysisConfig",
    "AnalysisContext",
    "PixelBuffer",
    "Pipeline",
    "create_pipeline",
    "analyze_image",
    "analyze_image_bytes",
    "analyze_layout",
    "detect_edges",
    "segment_regions",
    "flood_fill",
    "classify_region",
    "detect_patterns",
    "analyze_structure",
    "analyze_accessibility",
    "analyze_responsiveness",
]
