"""
Data models for the advanced notes engine (layout, styling, diagrams).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class LayoutHeading(BaseModel):
    level: int = Field(ge=1, le=6)
    text: str
    position: int = 0


class LayoutBullet(BaseModel):
    text: str
    level: int = 1
    type: Literal["bullet", "number", "arrow", "check"] = "bullet"


class LayoutParagraph(BaseModel):
    text: str
    type: Literal["introduction", "body", "conclusion", "definition"] = "body"


class SuggestedDiagram(BaseModel):
    type: Literal["flowchart", "cycle", "hierarchy", "timeline", "mindmap"]
    keywords: list[str] = Field(default_factory=list)
    description: str = ""


class LayoutData(BaseModel):
    """Layout agent output: the document's structural skeleton."""

    headings: list[LayoutHeading] = Field(default_factory=list)
    bullets: list[LayoutBullet] = Field(default_factory=list)
    paragraphs: list[LayoutParagraph] = Field(default_factory=list)
    suggested_diagrams: list[SuggestedDiagram] = Field(default_factory=list)


class ElementStyles(BaseModel):
    color: str
    background_color: str | None = None
    font_weight: Literal["normal", "bold", "bolder"] | None = None
    text_decoration: Literal["none", "underline", "line-through"] | None = None
    border: str | None = None
    icon: str | None = None


class StyledElement(BaseModel):
    # Not a Literal: unknown types are dropped by the designer, not rejected
    type: str
    content: str
    styles: ElementStyles
    importance: Literal["low", "medium", "high", "critical"] = "medium"


class StyledData(BaseModel):
    """Styling agent output: every element with colors and emphasis."""

    elements: list[StyledElement]
    color_mapping: dict[str, str] = Field(default_factory=dict)


class DiagramConnection(BaseModel):
    from_: str = Field(alias="from")
    to: str
    label: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class Diagram(BaseModel):
    type: str
    elements: list[str] = Field(default_factory=list)
    connections: list[DiagramConnection] = Field(default_factory=list)
    mermaid_code: str


class DiagramInstructions(BaseModel):
    diagrams: list[Diagram] = Field(default_factory=list)
