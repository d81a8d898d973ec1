"""Tests for Layer 4 — accessibility and responsiveness audits."""

import pytest

from uisight.engine.layer4.t4_01_accessibility import (
    analyze_accessibility,
    analyze_focus_order,
    analyze_semantic_structure,
    analyze_text_readability,
    determine_compliance,
    infer_heading_level,
)
from uisight.engine.layer4.t4_02_responsiveness import analyze_responsiveness
from uisight.engine.config import AnalysisConfig
from uisight.engine.pixels import PixelBuffer
from uisight.models.analysis import (
    BoundingBox,
    ComplianceLevel,
    Component,
    ComponentColor,
    ComponentProperties,
    ComponentType,
    ComponentTypography,
    ContrastRatio,
    InteractionType,
    IssueSeverity,
    IssueType,
    LayoutType,
    SemanticRole,
    TextLevel,
)
from tests.conftest import make_canvas


def _component(x=0, y=0, w=100, h=40, *, font_size=16.0, background="#ffffff", foreground="#000000",
               role=SemanticRole.GENERIC, interactions=(InteractionType.NONE,)):
    return Component(
        type=ComponentType.UNKNOWN,
        bounding_box=BoundingBox(x=x, y=y, width=w, height=h),
        properties=ComponentProperties(
            color=ComponentColor(background=background, foreground=foreground),
            typography=ComponentTypography(font_size=font_size),
        ),
        interactions=list(interactions),
        semantic_role=role,
    )


def _button(x, y):
    return _component(x, y, 100, 30, interactions=(InteractionType.CLICK, InteractionType.FOCUS))


# -- contrast ----------------------------------------------------------------

def test_black_on_white_is_aaa_for_both_sizes():
    components = [_component(font_size=14), _component(font_size=24)]
    contrast = analyze_accessibility(None, components).color_contrast
    assert [r.ratio for r in contrast.ratios] == [pytest.approx(21.0)] * 2
    assert [r.level for r in contrast.ratios] == [TextLevel.NORMAL, TextLevel.LARGE]
    assert contrast.compliance is ComplianceLevel.AAA
    assert contrast.issues == []


def test_compliance_levels():
    def ratio(value, level=TextLevel.NORMAL):
        return ContrastRatio(foreground="#000000", background="#ffffff", ratio=value, level=level)

    assert determine_compliance([]) is ComplianceLevel.AAA
    assert determine_compliance([ratio(5.0)]) is ComplianceLevel.AA
    assert determine_compliance([ratio(5.0, TextLevel.LARGE)]) is ComplianceLevel.AAA
    assert determine_compliance([ratio(3.5, TextLevel.LARGE)]) is ComplianceLevel.AA
    assert determine_compliance([ratio(8.0), ratio(2.0)]) is ComplianceLevel.FAIL


def test_low_contrast_is_reported_as_high_severity():
    result = analyze_accessibility(None, [_component(background="#777777", foreground="#888888")])
    assert result.color_contrast.compliance is ComplianceLevel.FAIL
    assert result.color_contrast.issues[0].startswith("Insufficient contrast:")
    assert result.color_contrast.issues[0].endswith("< 4.5")
    contrast_issues = [i for i in result.issues if i.type is IssueType.CONTRAST]
    assert contrast_issues[0].severity is IssueSeverity.HIGH


# -- readability -------------------------------------------------------------

def test_small_font_and_long_line():
    readability = analyze_text_readability([_component(w=1000, font_size=10)], AnalysisConfig())
    assert readability.line_length == [pytest.approx(1000 / 6)]
    issues = [i.lower() for i in readability.issues]
    assert any("font too small" in i for i in issues)
    assert any("line too long" in i for i in issues)


def test_readable_text_has_no_issues():
    readability = analyze_text_readability([_component(w=300, font_size=16)], AnalysisConfig())
    assert readability.issues == []
    assert readability.font_size == [16.0]


# -- focus order -------------------------------------------------------------

def test_focus_order_is_row_major():
    buttons = [_button(300, 100), _button(10, 110), _button(10, 300)]
    focus = analyze_focus_order(buttons + [_component(0, 0)], AnalysisConfig())
    assert [(b.x, b.y) for b in focus.tab_order] == [(10, 110), (300, 100), (10, 300)]
    assert focus.logical_flow is True
    assert focus.issues == []


def test_illogical_focus_order_is_medium_issue():
    config = AnalysisConfig(row_tolerance=100, focus_backward_jump=50)
    # Same row by tolerance, so ordered by x: (0, 90) comes before (500, 0).
    buttons = [_button(500, 0), _button(0, 90)]
    result = analyze_accessibility(None, buttons, config)
    assert result.focus_order.logical_flow is False
    focus_issues = [i for i in result.issues if i.type is IssueType.FOCUS]
    assert focus_issues[0].severity is IssueSeverity.MEDIUM


# -- semantic structure ------------------------------------------------------

@pytest.mark.parametrize(
    ("font_size", "level"),
    [(40, 1), (32, 1), (24, 2), (20, 3), (18, 4), (16, 5), (12, 6)],
)
def test_heading_levels(font_size, level):
    assert infer_heading_level(font_size) == level


def test_semantic_structure_headings_and_landmarks():
    components = [
        _component(font_size=24, role=SemanticRole.HEADING),
        _component(role=SemanticRole.HEADER),
        _component(role=SemanticRole.ASIDE),
        _component(role=SemanticRole.BUTTON),
    ]
    semantics = analyze_semantic_structure(components)
    assert [h.level for h in semantics.heading_structure] == [2]
    assert semantics.heading_structure[0].text == ""
    assert [lm.role for lm in semantics.landmarks] == [SemanticRole.HEADER, SemanticRole.ASIDE]
    assert semantics.issues == []


def test_missing_headings_is_low_issue():
    result = analyze_accessibility(None, [_component()])
    assert result.semantic_structure.issues == ["Missing heading structure"]
    semantic = [i for i in result.issues if i.type is IssueType.SEMANTIC]
    assert semantic[0].severity is IssueSeverity.LOW


# -- responsiveness ----------------------------------------------------------

def test_breakpoints_fit_image_width():
    pixels = PixelBuffer.from_array(make_canvas(1200, 10))
    result = analyze_responsiveness(pixels, [_component(), _component(200, 0)])
    assert [bp.width for bp in result.breakpoints] == [320, 768, 1024]
    assert all(bp.layout is LayoutType.FLEXBOX and bp.changes == [] for bp in result.breakpoints)
    assert len(result.adaptive_elements) == 2
    behavior = result.adaptive_elements[0].behaviors[0]
    assert behavior.property == "width"
    assert behavior.values == {"mobile": "100%", "tablet": "50%", "desktop": "33.333%"}


def test_scalability_defaults():
    pixels = PixelBuffer.from_array(make_canvas(100, 10))
    result = analyze_responsiveness(pixels, [])
    assert result.breakpoints == []
    assert result.adaptive_elements == []
    assert result.scalability.text_scaling is True
    assert result.scalability.image_scaling is True
    assert result.scalability.layout_flexibility == 0.8
    assert result.scalability.issues == []
