"""
Data models for the study-notes pipeline.

``NoteGenOptions`` is API-facing (camelCase on the wire). Everything else is
model-facing: the Gemini stages are asked for snake_case JSON and their
responses are validated against these classes before moving downstream.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PdfStyle = Literal["handwritten", "minimal", "dark", "academic", "creative"]
ComplexityLevel = Literal["simple", "moderate", "complex"]
VisualDensity = Literal["minimal", "balanced", "rich"]
ColorScheme = Literal["warm", "cool", "neutral", "vibrant", "pastel"]
FontStyle = Literal["handwritten", "clean", "academic", "creative"]
Difficulty = Literal["beginner", "intermediate", "advanced"]
SectionType = Literal[
    "heading", "bullet", "definition", "example", "formula", "callout", "diagram", "summary"
]
Importance = Literal["high", "medium", "low"]


class NoteGenOptions(BaseModel):
    """Rendering and export options for note generation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    generate_pdf: bool = Field(default=False, alias="generatePDF")
    pdf_style: PdfStyle = "handwritten"
    include_visuals: bool = True
    include_diagrams: bool = True
    language: str = "en"
    complexity_level: ComplexityLevel = "moderate"
    visual_density: VisualDensity = "balanced"
    color_scheme: ColorScheme = "warm"
    font_style: FontStyle = "handwritten"


# =============================================================================
# Classifier
# =============================================================================


class Classification(BaseModel):
    """Classifier output. Cached in the learning store when confident."""

    subject: str
    tone: str
    language: str
    tags: list[str] = Field(default_factory=list)
    difficulty: Difficulty
    content_category: Literal["academic", "business", "creative", "technical"] = "academic"
    visual_complexity: ComplexityLevel = "moderate"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


# =============================================================================
# Segmenter
# =============================================================================


class NoteSection(BaseModel):
    type: SectionType
    content: str
    level: int | None = None
    style: str | None = None
    importance: Importance = "medium"
    visual_hint: str | None = None


class SegmentedContent(BaseModel):
    title: str
    sections: list[NoteSection]
    structure: Literal["linear", "hierarchical", "network"] = "linear"
    estimated_read_time: float = 0


# =============================================================================
# Formatter
# =============================================================================


class FormattedSection(BaseModel):
    type: str
    content: str
    emoji: str | None = None
    color: str | None = None
    highlights: list[str] = Field(default_factory=list)
    level: int | None = None


class FormattedNotes(BaseModel):
    title: str
    emoji: str = ""
    color_theme: str
    design_language: str = ""
    sections: list[FormattedSection]


# =============================================================================
# Layout Designer
# =============================================================================


class BlockPosition(BaseModel):
    x: float
    y: float
    width: float
    height: float


class BlockStyle(BaseModel):
    font_family: str
    font_size: float
    color: str
    background: str | None = None
    border: str | None = None
    padding: float = 0


class LayoutBlock(BaseModel):
    """A positioned, styled content unit on the page."""

    type: str
    content: str
    position: BlockPosition
    style: BlockStyle


class PageMargins(BaseModel):
    top: float
    right: float
    bottom: float
    left: float


class FontFamilies(BaseModel):
    heading: str
    body: str
    accent: str
    code: str | None = None


class ColorPalette(BaseModel):
    primary: str
    secondary: str
    accent: str
    background: str
    gradient: str | None = None


class StyleConfig(BaseModel):
    page_size: str = "A4"
    margins: PageMargins
    font_families: FontFamilies
    color_palette: ColorPalette
    spacing_system: list[float] = Field(default_factory=list)
    typography_scale: list[float] = Field(default_factory=list)


class DesignedLayout(BaseModel):
    title: str
    theme: str
    layout_blocks: list[LayoutBlock]
    style_config: StyleConfig
