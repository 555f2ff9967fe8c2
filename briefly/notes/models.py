"""
Note domain models for Briefly.

A Note is the persisted result of ``POST /api/process``: a summary, key
points, action items and visual cards generated from one piece of content.
Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Return current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


class ContentType(str, Enum):
    """Acquisition path an inbound request went through."""

    TEXT = "text"
    PDF = "pdf"
    AUDIO = "audio"
    VIDEO_URL = "video_url"


class ProcessingStatus(str, Enum):
    """Coarse request lifecycle stamped on a Note."""

    PENDING = "pending"
    COMPLETED = "completed"


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class VisualCard(CamelModel):
    """A metric or concept tile shown alongside a note."""

    icon: str
    label: str
    value: str
    color: str


class NoteCreate(CamelModel):
    """Fields supplied when a note is created."""

    title: str
    summary: str
    key_points: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)
    visual_cards: list[VisualCard] = Field(default_factory=list)
    original_content: str
    content_type: ContentType
    processing_status: ProcessingStatus = ProcessingStatus.PENDING

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title cannot be empty")
        return v.strip()


class Note(NoteCreate):
    """A stored note."""

    id: str
    created_at: datetime = Field(default_factory=utc_now)


class NoteUpdate(CamelModel):
    """Partial update; only non-None fields are applied."""

    title: str | None = None
    summary: str | None = None
    key_points: list[str] | None = None
    action_items: list[str] | None = None
    visual_cards: list[VisualCard] | None = None
    processing_status: ProcessingStatus | None = None


class ProcessContentRequest(CamelModel):
    """JSON body of ``POST /api/process``."""

    content: str = Field(..., min_length=1)
    content_type: ContentType
    file_name: str | None = None


class AiNoteResponse(BaseModel):
    """Shape the summarizer asks the model to return."""

    title: str
    summary: str
    key_points: list[str]
    action_items: list[str]
    visual_cards: list[VisualCard]
