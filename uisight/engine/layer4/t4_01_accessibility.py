"""T4.01 — Accessibility Audit. ★★★

WCAG-style checks over the classified components:
- Colour contrast between each component's background and foreground
  (AAA: ≥ 7 normal / ≥ 4.5 large; AA: ≥ 4.5 / ≥ 3; else fail).
- Readability: font size < 12 px, estimated line length > 80 characters.
- Focus order: interactive components in reading order; an upward jump of
  more than 50 px breaks the logical flow.
- Semantic structure: heading levels from font size, landmark roles, and
  a missing-heading check.
"""

from __future__ import annotations

from collections.abc import Sequence

from uisight.engine.config import AnalysisConfig
from uisight.engine.context import AnalysisContext
from uisight.engine.pixels import PixelBuffer
from uisight.engine.registry import Layer, transform
from uisight.models.analysis import (
    LANDMARK_ROLES,
    AccessibilityAnalysis,
    AccessibilityIssue,
    BoundingBox,
    ComplianceLevel,
    Component,
    ContrastAnalysis,
    ContrastRatio,
    FocusOrderAnalysis,
    HeadingLevel,
    IssueSeverity,
    IssueType,
    ReadabilityAnalysis,
    SemanticLandmark,
    SemanticRole,
    SemanticStructureAnalysis,
    TextLevel,
)
from uisight.utils.colors import contrast_ratio
from uisight.utils.geometry import reading_order

# Minimum ratios per text level.
_AA_MIN = {TextLevel.NORMAL: 4.5, TextLevel.LARGE: 3.0}
_AAA_MIN = {TextLevel.NORMAL: 7.0, TextLevel.LARGE: 4.5}

# (minimum font size, heading level), checked in order.
_HEADING_LEVELS = [(32, 1), (24, 2), (20, 3), (18, 4), (16, 5)]


# -- contrast ---------------------------------------------------------------

def determine_compliance(ratios: Sequence[ContrastRatio]) -> ComplianceLevel:
    if all(r.ratio >= _AAA_MIN[r.level] for r in ratios):
        return ComplianceLevel.AAA
    if all(r.ratio >= _AA_MIN[r.level] for r in ratios):
        return ComplianceLevel.AA
    return ComplianceLevel.FAIL


def analyze_color_contrast(components: Sequence[Component], config: AnalysisConfig) -> ContrastAnalysis:
    ratios = []
    for component in components:
        color = component.properties.color
        large = component.properties.typography.font_size > config.large_text_min_font
        ratios.append(
            ContrastRatio(
                foreground=color.foreground,
                background=color.background,
                ratio=contrast_ratio(color.background, color.foreground),
                level=TextLevel.LARGE if large else TextLevel.NORMAL,
            )
        )

    issues = []
    for r in ratios:
        minimum = _AA_MIN[r.level]
        if r.ratio < minimum:
            issues.append(f"Insufficient contrast: {r.ratio:.2f} < {minimum:g}")

    return ContrastAnalysis(ratios=ratios, compliance=determine_compliance(ratios), issues=issues)


# -- readability ------------------------------------------------------------

def analyze_text_readability(components: Sequence[Component], config: AnalysisConfig) -> ReadabilityAnalysis:
    font_sizes: list[float] = []
    line_heights: list[float] = []
    line_lengths: list[float] = []
    issues: list[str] = []

    for component in components:
        typography = component.properties.typography
        font_sizes.append(typography.font_size)
        line_heights.append(typography.line_height)

        chars = 0.0
        if typography.font_size > 0:
            chars = component.bounding_box.width / (typography.font_size * config.char_width_ratio)
        line_lengths.append(chars)

        if typography.font_size < config.min_font_size:
            issues.append("Font too small, may hurt readability")
        if chars > config.max_line_chars:
            issues.append("Line too long, may hurt reading")

    return ReadabilityAnalysis(
        font_size=font_sizes,
        line_height=line_heights,
        line_length=line_lengths,
        issues=issues,
    )


# -- focus order ------------------------------------------------------------

def has_logical_flow(tab_order: Sequence[BoundingBox], backward_jump: float) -> bool:
    return all(curr.y >= prev.y - backward_jump for prev, curr in zip(tab_order, tab_order[1:]))


def analyze_focus_order(components: Sequence[Component], config: AnalysisConfig) -> FocusOrderAnalysis:
    interactive = [c.bounding_box for c in components if c.is_interactive]
    tab_order = reading_order(interactive, config.row_tolerance)
    logical = has_logical_flow(tab_order, config.focus_backward_jump)
    return FocusOrderAnalysis(
        tab_order=tab_order,
        logical_flow=logical,
        issues=[] if logical else ["Focus order does not follow the visual reading flow"],
    )


# -- semantic structure -----------------------------------------------------

def infer_heading_level(font_size: float) -> int:
    for minimum, level in _HEADING_LEVELS:
        if font_size >= minimum:
            return level
    return 6


def analyze_semantic_structure(components: Sequence[Component]) -> SemanticStructureAnalysis:
    headings = []
    landmarks = []
    for component in components:
        if component.semantic_role is SemanticRole.HEADING:
            headings.append(
                HeadingLevel(
                    level=infer_heading_level(component.properties.typography.font_size),
                    text="",
                    bounding_box=component.bounding_box,
                )
            )
        if component.semantic_role in LANDMARK_ROLES:
            landmarks.append(SemanticLandmark(role=component.semantic_role, bounding_box=component.bounding_box))

    issues = [] if headings else ["Missing heading structure"]
    return SemanticStructureAnalysis(heading_structure=headings, landmarks=landmarks, issues=issues)


# -- aggregate --------------------------------------------------------------

def collect_issues(
    contrast: ContrastAnalysis,
    readability: ReadabilityAnalysis,
    focus: FocusOrderAnalysis,
    semantics: SemanticStructureAnalysis,
) -> list[AccessibilityIssue]:
    issues = []
    if contrast.compliance is ComplianceLevel.FAIL:
        issues.append(AccessibilityIssue(
            type=IssueType.CONTRAST,
            severity=IssueSeverity.HIGH,
            description="Colour contrast does not meet WCAG requirements",
            suggestion="Increase the contrast between foreground and background colours",
        ))
    if readability.issues:
        issues.append(AccessibilityIssue(
            type=IssueType.TEXT,
            severity=IssueSeverity.MEDIUM,
            description=", ".join(readability.issues),
            suggestion="Adjust font size and line length",
        ))
    if not focus.logical_flow:
        issues.append(AccessibilityIssue(
            type=IssueType.FOCUS,
            severity=IssueSeverity.MEDIUM,
            description=", ".join(focus.issues),
            suggestion="Order interactive elements top-to-bottom, left-to-right",
        ))
    if semantics.issues:
        issues.append(AccessibilityIssue(
            type=IssueType.SEMANTIC,
            severity=IssueSeverity.LOW,
            description=", ".join(semantics.issues),
            suggestion="Mark up page titles and section headings",
        ))
    return issues


def analyze_accessibility(
    pixels: PixelBuffer | None,
    components: Sequence[Component],
    config: AnalysisConfig | None = None,
) -> AccessibilityAnalysis:
    config = config or AnalysisConfig()
    contrast = analyze_color_contrast(components, config)
    readability = analyze_text_readability(components, config)
    focus = analyze_focus_order(components, config)
    semantics = analyze_semantic_structure(components)
    return AccessibilityAnalysis(
        color_contrast=contrast,
        text_readability=readability,
        focus_order=focus,
        semantic_structure=semantics,
        issues=collect_issues(contrast, readability, focus, semantics),
    )


@transform(
    id="T4.01",
    layer=Layer.AUDIT,
    dependencies=["T3.01"],
    description="Audit contrast, readability, focus order and semantic structure",
)
def accessibility(ctx: AnalysisContext) -> None:
    ctx.accessibility = analyze_accessibility(ctx.pixels, ctx.components, ctx.config)
