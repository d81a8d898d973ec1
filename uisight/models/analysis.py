"""Analysis data model — the structured, JSON-serializable output of the engine.

Every model is frozen: a result is built once per analysis run and never
mutated afterwards.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Closed enums
# ---------------------------------------------------------------------------

class ComponentType(str, enum.Enum):
    BUTTON = "button"
    INPUT = "input"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SWITCH = "switch"
    SLIDER = "slider"
    CARD = "card"
    MODAL = "modal"
    TOOLTIP = "tooltip"
    DROPDOWN = "dropdown"
    ACCORDION = "accordion"
    TABS = "tabs"
    CAROUSEL = "carousel"
    NAVIGATION = "navigation"
    SIDEBAR = "sidebar"
    HEADER = "header"
    FOOTER = "footer"
    BREADCRUMB = "breadcrumb"
    PAGINATION = "pagination"
    TABLE = "table"
    LIST = "list"
    GRID = "grid"
    CALENDAR = "calendar"
    CHART = "chart"
    PROGRESS = "progress"
    BADGE = "badge"
    AVATAR = "avatar"
    ICON = "icon"
    IMAGE = "image"
    VIDEO = "video"
    TEXT = "text"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    FORM = "form"
    SEARCH = "search"
    FILTER = "filter"
    TOOLBAR = "toolbar"
    STATUSBAR = "statusbar"
    UNKNOWN = "unknown"


class SemanticRole(str, enum.Enum):
    BUTTON = "button"
    LINK = "link"
    HEADING = "heading"
    TEXT = "text"
    IMAGE = "image"
    FORM = "form"
    NAVIGATION = "navigation"
    MAIN = "main"
    ASIDE = "aside"
    HEADER = "header"
    FOOTER = "footer"
    SECTION = "section"
    ARTICLE = "article"
    LIST = "list"
    LISTITEM = "listitem"
    TABLE = "table"
    ROW = "row"
    CELL = "cell"
    DIALOG = "dialog"
    ALERT = "alert"
    STATUS = "status"
    PROGRESSBAR = "progressbar"
    SLIDER = "slider"
    SPINBUTTON = "spinbutton"
    TEXTBOX = "textbox"
    COMBOBOX = "combobox"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SWITCH = "switch"
    TAB = "tab"
    TABPANEL = "tabpanel"
    MENUBAR = "menubar"
    MENU = "menu"
    MENUITEM = "menuitem"
    TOOLTIP = "tooltip"
    GENERIC = "generic"


class ComponentState(str, enum.Enum):
    DEFAULT = "default"
    HOVER = "hover"
    ACTIVE = "active"
    FOCUS = "focus"
    DISABLED = "disabled"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


class InteractionType(str, enum.Enum):
    CLICK = "click"
    HOVER = "hover"
    FOCUS = "focus"
    DRAG = "drag"
    SCROLL = "scroll"
    PINCH = "pinch"
    SWIPE = "swipe"
    NONE = "none"


class PatternType(str, enum.Enum):
    LAYOUT = "layout"
    NAVIGATION = "navigation"
    CONTENT = "content"
    INTERACTION = "interaction"
    FEEDBACK = "feedback"
    DATA_DISPLAY = "data-display"
    FORM = "form"
    MEDIA = "media"


class LayoutType(str, enum.Enum):
    GRID = "grid"
    FLEXBOX = "flexbox"
    ABSOLUTE = "absolute"
    FLOAT = "float"
    TABLE = "table"
    MASONRY = "masonry"
    UNKNOWN = "unknown"


class AlignmentType(str, enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"
    BASELINE = "baseline"


class SizeScale(str, enum.Enum):
    XS = "xs"
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"


class SectionType(str, enum.Enum):
    HEADER = "header"
    NAVIGATION = "navigation"
    MAIN = "main"
    SIDEBAR = "sidebar"
    FOOTER = "footer"
    HERO = "hero"
    CONTENT = "content"
    ASIDE = "aside"
    MODAL = "modal"
    OVERLAY = "overlay"


class RelationshipType(str, enum.Enum):
    CONTAINER = "container"
    GROUP = "group"
    LIST = "list"
    TABLE = "table"
    FORM = "form"
    NAVIGATION = "navigation"
    HIERARCHY = "hierarchy"


class ComplianceLevel(str, enum.Enum):
    AA = "AA"
    AAA = "AAA"
    FAIL = "fail"


class TextLevel(str, enum.Enum):
    NORMAL = "normal"
    LARGE = "large"


class IssueType(str, enum.Enum):
    CONTRAST = "contrast"
    FOCUS = "focus"
    SEMANTIC = "semantic"
    TEXT = "text"
    STRUCTURE = "structure"


class IssueSeverity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Fixed type → interaction / role tables. Types missing from a table fall
# back to {none} / generic.
INTERACTIONS_BY_TYPE: dict[ComponentType, tuple[InteractionType, ...]] = {
    ComponentType.BUTTON: (InteractionType.CLICK, InteractionType.HOVER, InteractionType.FOCUS),
    ComponentType.INPUT: (InteractionType.CLICK, InteractionType.FOCUS),
    ComponentType.CARD: (InteractionType.CLICK, InteractionType.HOVER),
}

ROLE_BY_TYPE: dict[ComponentType, SemanticRole] = {
    ComponentType.BUTTON: SemanticRole.BUTTON,
    ComponentType.INPUT: SemanticRole.TEXTBOX,
    ComponentType.CARD: SemanticRole.ARTICLE,
    ComponentType.HEADER: SemanticRole.HEADER,
    ComponentType.FOOTER: SemanticRole.FOOTER,
    ComponentType.NAVIGATION: SemanticRole.NAVIGATION,
    ComponentType.SIDEBAR: SemanticRole.ASIDE,
    ComponentType.HEADING: SemanticRole.HEADING,
    ComponentType.TEXT: SemanticRole.TEXT,
    ComponentType.PARAGRAPH: SemanticRole.TEXT,
    ComponentType.IMAGE: SemanticRole.IMAGE,
    ComponentType.FORM: SemanticRole.FORM,
    ComponentType.LIST: SemanticRole.LIST,
    ComponentType.TABLE: SemanticRole.TABLE,
    ComponentType.MODAL: SemanticRole.DIALOG,
    ComponentType.TOOLTIP: SemanticRole.TOOLTIP,
    ComponentType.PROGRESS: SemanticRole.PROGRESSBAR,
    ComponentType.SLIDER: SemanticRole.SLIDER,
    ComponentType.CHECKBOX: SemanticRole.CHECKBOX,
    ComponentType.RADIO: SemanticRole.RADIO,
    ComponentType.SWITCH: SemanticRole.SWITCH,
    ComponentType.SELECT: SemanticRole.COMBOBOX,
    ComponentType.TABS: SemanticRole.TAB,
}

LANDMARK_ROLES: frozenset[SemanticRole] = frozenset({
    SemanticRole.HEADER,
    SemanticRole.FOOTER,
    SemanticRole.NAVIGATION,
    SemanticRole.MAIN,
    SemanticRole.ASIDE,
})


def interactions_for(component_type: ComponentType) -> list[InteractionType]:
    return list(INTERACTIONS_BY_TYPE.get(component_type, (InteractionType.NONE,)))


def role_for(component_type: ComponentType) -> SemanticRole:
    return ROLE_BY_TYPE.get(component_type, SemanticRole.GENERIC)


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

class BoundingBox(_Frozen):
    """Axis-aligned rectangle in image pixels with a confidence score."""

    x: int = 0
    y: int = 0
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        if self.height <= 0:
            return 0.0
        return self.width / self.height

    def clamped(self, image_width: int, image_height: int) -> BoundingBox:
        """Clip the box to ``[0, image_width] × [0, image_height]``."""
        x0 = min(max(self.x, 0), image_width)
        y0 = min(max(self.y, 0), image_height)
        x1 = min(max(self.right, x0), image_width)
        y1 = min(max(self.bottom, y0), image_height)
        return BoundingBox(
            x=x0,
            y=y0,
            width=x1 - x0,
            height=y1 - y0,
            confidence=min(max(self.confidence, 0.0), 1.0),
        )


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

class GridGaps(_Frozen):
    horizontal: float = 0.0
    vertical: float = 0.0


class GridGutters(_Frozen):
    left: float = 0.0
    right: float = 0.0


class GridInfo(_Frozen):
    columns: int = 1
    rows: int = 1
    gaps: GridGaps = Field(default_factory=GridGaps)
    gutters: GridGutters = Field(default_factory=GridGutters)


class VisualHierarchy(_Frozen):
    primary: list[BoundingBox] = Field(default_factory=list)
    secondary: list[BoundingBox] = Field(default_factory=list)
    tertiary: list[BoundingBox] = Field(default_factory=list)


class SpacingAnalysis(_Frozen):
    margins: list[float] = Field(default_factory=list)  # top, right, bottom, left
    paddings: list[float] = Field(default_factory=list)
    gaps: list[float] = Field(default_factory=list)
    consistency: float = Field(default=0.0, ge=0.0, le=1.0)


class AlignmentInfo(_Frozen):
    horizontal: list[AlignmentType] = Field(default_factory=list)
    vertical: list[AlignmentType] = Field(default_factory=list)
    baseline: list[BoundingBox] = Field(default_factory=list)


class LayoutAnalysis(_Frozen):
    type: LayoutType = LayoutType.UNKNOWN
    grid: GridInfo = Field(default_factory=GridInfo)
    hierarchy: VisualHierarchy = Field(default_factory=VisualHierarchy)
    spacing: SpacingAnalysis = Field(default_factory=SpacingAnalysis)
    alignment: AlignmentInfo = Field(default_factory=AlignmentInfo)


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

class ComponentSize(_Frozen):
    width: int = 0
    height: int = 0
    scale: SizeScale = SizeScale.MD


class ComponentColor(_Frozen):
    background: str = "#ffffff"
    foreground: str = "#000000"
    border: str = "#cccccc"
    accent: str = "#3b82f6"


class ComponentTypography(_Frozen):
    font_size: float = 16.0
    font_weight: int = 400
    line_height: float = 24.0
    letter_spacing: float = 0.0
    text_align: str = "left"


class Sides(_Frozen):
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


class ComponentSpacing(_Frozen):
    padding: Sides = Field(default_factory=Sides)
    margin: Sides = Field(default_factory=Sides)


class ComponentBorder(_Frozen):
    width: int = 1
    style: str = "solid"
    radius: int = 4
    color: str = "#cccccc"


class ComponentEffect(_Frozen):
    shadow: str = "0 2px 4px rgba(0,0,0,0.1)"
    blur: float = 0.0
    opacity: float = 1.0
    transform: str = "none"


class ComponentProperties(_Frozen):
    size: ComponentSize = Field(default_factory=ComponentSize)
    color: ComponentColor = Field(default_factory=ComponentColor)
    typography: ComponentTypography = Field(default_factory=ComponentTypography)
    spacing: ComponentSpacing = Field(default_factory=ComponentSpacing)
    borders: ComponentBorder = Field(default_factory=ComponentBorder)
    effects: ComponentEffect = Field(default_factory=ComponentEffect)
    state: ComponentState = ComponentState.DEFAULT


class Component(_Frozen):
    """A classified UI element traced back to one segmented region."""

    type: ComponentType = ComponentType.UNKNOWN
    bounding_box: BoundingBox
    properties: ComponentProperties = Field(default_factory=ComponentProperties)
    states: list[ComponentState] = Field(default_factory=lambda: [ComponentState.DEFAULT])
    interactions: list[InteractionType] = Field(default_factory=lambda: [InteractionType.NONE])
    semantic_role: SemanticRole = SemanticRole.GENERIC

    @property
    def is_interactive(self) -> bool:
        return InteractionType.FOCUS in self.interactions or InteractionType.CLICK in self.interactions


# ---------------------------------------------------------------------------
# Patterns and structure
# ---------------------------------------------------------------------------

class DesignPattern(_Frozen):
    name: str
    type: PatternType
    elements: list[BoundingBox] = Field(default_factory=list)
    description: str = ""
    common_usage: str = ""
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class StructureSection(_Frozen):
    type: SectionType
    bounding_box: BoundingBox
    components: list[Component] = Field(default_factory=list)
    importance: float = Field(default=0.0, ge=0.0, le=1.0)


class ContentFlow(_Frozen):
    direction: str = "ltr"  # ltr, rtl, ttb, btt
    reading_pattern: str = "z"  # z, f, gutenberg, layer-cake, custom
    visual_path: list[BoundingBox] = Field(default_factory=list)


class ElementRelationship(_Frozen):
    parent: BoundingBox
    children: list[BoundingBox] = Field(default_factory=list)
    siblings: list[BoundingBox] = Field(default_factory=list)
    type: RelationshipType = RelationshipType.CONTAINER


class StructureAnalysis(_Frozen):
    sections: list[StructureSection] = Field(default_factory=list)
    flow: ContentFlow = Field(default_factory=ContentFlow)
    relationships: list[ElementRelationship] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Accessibility
# ---------------------------------------------------------------------------

class ContrastRatio(_Frozen):
    foreground: str
    background: str
    ratio: float
    level: TextLevel = TextLevel.NORMAL


class ContrastAnalysis(_Frozen):
    ratios: list[ContrastRatio] = Field(default_factory=list)
    compliance: ComplianceLevel = ComplianceLevel.AAA
    issues: list[str] = Field(default_factory=list)


class ReadabilityAnalysis(_Frozen):
    font_size: list[float] = Field(default_factory=list)
    line_height: list[float] = Field(default_factory=list)
    line_length: list[float] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)


class FocusOrderAnalysis(_Frozen):
    tab_order: list[BoundingBox] = Field(default_factory=list)
    logical_flow: bool = True
    issues: list[str] = Field(default_factory=list)


class HeadingLevel(_Frozen):
    level: int = Field(ge=1, le=6)
    text: str = ""  # no OCR: always empty
    bounding_box: BoundingBox


class SemanticLandmark(_Frozen):
    role: SemanticRole
    bounding_box: BoundingBox
    label: str | None = None


class SemanticStructureAnalysis(_Frozen):
    heading_structure: list[HeadingLevel] = Field(default_factory=list)
    landmarks: list[SemanticLandmark] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)


class AccessibilityIssue(_Frozen):
    type: IssueType
    severity: IssueSeverity
    description: str
    element: BoundingBox = Field(default_factory=BoundingBox)
    suggestion: str = ""


class AccessibilityAnalysis(_Frozen):
    color_contrast: ContrastAnalysis = Field(default_factory=ContrastAnalysis)
    text_readability: ReadabilityAnalysis = Field(default_factory=ReadabilityAnalysis)
    focus_order: FocusOrderAnalysis = Field(default_factory=FocusOrderAnalysis)
    semantic_structure: SemanticStructureAnalysis = Field(default_factory=SemanticStructureAnalysis)
    issues: list[AccessibilityIssue] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Responsiveness
# ---------------------------------------------------------------------------

class LayoutChange(_Frozen):
    element: BoundingBox
    property: str
    old_value: str
    new_value: str


class BreakpointAnalysis(_Frozen):
    width: int
    layout: LayoutType = LayoutType.FLEXBOX
    changes: list[LayoutChange] = Field(default_factory=list)


class AdaptiveBehavior(_Frozen):
    property: str
    values: dict[str, str] = Field(default_factory=dict)  # breakpoint name -> value


class AdaptiveElement(_Frozen):
    element: BoundingBox
    behaviors: list[AdaptiveBehavior] = Field(default_factory=list)


class ScalabilityAnalysis(_Frozen):
    text_scaling: bool = True
    image_scaling: bool = True
    layout_flexibility: float = Field(default=0.8, ge=0.0, le=1.0)
    issues: list[str] = Field(default_factory=list)


class ResponsivenessAnalysis(_Frozen):
    breakpoints: list[BreakpointAnalysis] = Field(default_factory=list)
    adaptive_elements: list[AdaptiveElement] = Field(default_factory=list)
    scalability: ScalabilityAnalysis = Field(default_factory=ScalabilityAnalysis)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

class AnalysisResult(_Frozen):
    """Complete output of one ``analyze_image`` run."""

    width: int = 0
    height: int = 0
    layout: LayoutAnalysis = Field(default_factory=LayoutAnalysis)
    components: list[Component] = Field(default_factory=list)
    patterns: list[DesignPattern] = Field(default_factory=list)
    structure: StructureAnalysis = Field(default_factory=StructureAnalysis)
    accessibility: AccessibilityAnalysis = Field(default_factory=AccessibilityAnalysis)
    responsiveness: ResponsivenessAnalysis = Field(default_factory=ResponsivenessAnalysis)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
