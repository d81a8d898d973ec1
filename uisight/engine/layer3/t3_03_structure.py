"""T3.03 — Page Structure. ★★

Split the page into header / main / footer sections by vertical band, derive
the reading path, and build container relationships from geometric
containment between component boxes.
"""

from __future__ import annotations

from collections.abc import Sequence

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import (
    BoundingBox,
    Component,
    ContentFlow,
    ElementRelationship,
    RelationshipType,
    SectionType,
    StructureAnalysis,
    StructureSection,
)
from uisight.utils.geometry import merge_boxes, reading_order, strictly_contains

_HEADER_IMPORTANCE = 1.0
_MAIN_IMPORTANCE = 0.9
_FOOTER_IMPORTANCE = 0.6


def _section(section_type: SectionType, members: list[Component], importance: float) -> StructureSection:
    return StructureSection(
        type=section_type,
        bounding_box=merge_boxes([c.bounding_box for c in members]),
        components=members,
        importance=importance,
    )


def identify_sections(
    components: Sequence[Component],
    image_height: int,
    config: AnalysisConfig,
) -> list[StructureSection]:
    band = config.top_band_height
    wide = config.section_min_width

    header = [c for c in components if c.bounding_box.y < band and c.bounding_box.width > wide]
    main = [c for c in components if band < c.bounding_box.y < image_height - band]
    footer = [
        c for c in components
        if c.bounding_box.y >= image_height - band and c.bounding_box.width > wide
    ]

    sections = []
    if header:
        sections.append(_section(SectionType.HEADER, header, _HEADER_IMPORTANCE))
    if main:
        sections.append(_section(SectionType.MAIN, main, _MAIN_IMPORTANCE))
    if footer:
        sections.append(_section(SectionType.FOOTER, footer, _FOOTER_IMPORTANCE))
    return sections


def analyze_content_flow(components: Sequence[Component], config: AnalysisConfig) -> ContentFlow:
    path = reading_order([c.bounding_box for c in components], config.row_tolerance)
    return ContentFlow(direction="ltr", reading_pattern="z", visual_path=path)


def _immediate_containers(boxes: Sequence[BoundingBox], contains: list[list[int]]) -> list[int | None]:
    """Index of the smallest box strictly containing each box, or None."""
    parents: list[int | None] = []
    for j in range(len(boxes)):
        containers = [i for i, children in enumerate(contains) if j in children]
        parents.append(min(containers, key=lambda i: boxes[i].area) if containers else None)
    return parents


def analyze_relationships(components: Sequence[Component]) -> list[ElementRelationship]:
    """One container relationship per component that strictly contains others.

    Siblings of a container are the other children of its own immediate
    container; top-level containers have none.
    """
    boxes = [c.bounding_box for c in components]
    n = len(boxes)
    contains = [[j for j in range(n) if j != i and strictly_contains(boxes[i], boxes[j])] for i in range(n)]
    parents = _immediate_containers(boxes, contains)

    relationships = []
    for i, children in enumerate(contains):
        if not children:
            continue
        parent = parents[i]
        siblings = [] if parent is None else [boxes[k] for k in range(n) if k != i and parents[k] == parent]
        relationships.append(
            ElementRelationship(
                parent=boxes[i],
                children=[boxes[j] for j in children],
                siblings=siblings,
                type=RelationshipType.CONTAINER,
            )
        )
    return relationships


def analyze_structure(
    components: Sequence[Component],
    image_height: int,
    config: AnalysisConfig | None = None,
) -> StructureAnalysis:
    config = config or AnalysisConfig()
    return StructureAnalysis(
        sections=identify_sections(components, image_height, config),
        flow=analyze_content_flow(components, config),
        relationships=analyze_relationships(components),
    )


@transform(
    id="T3.03",
    layer=Layer.SEMANTICS,
    dependencies=["T3.01"],
    description="Identify page sections, reading flow and container relationships",
)
def structure(ctx: AnalysisContext) -> None:
    ctx.structure = analyze_structure(ctx.components, ctx.height, ctx.config)
