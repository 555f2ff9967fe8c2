"""
Learning cache records.

Four independent mappings make up the cache: classifications by content
pattern, design templates by ``<subject>_<difficulty>``, user preferences by
user id, and performance metrics by metric key.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Return current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


class DesignTemplate(BaseModel):
    """Formatter output remembered per subject and difficulty."""

    subject: str
    color_scheme: str
    font_combination: str
    layout_style: str
    success_score: float = 0.8
    usage_count: int = 1
    last_used: datetime = Field(default_factory=utc_now)


class FeedbackEntry(BaseModel):
    rating: float
    features: list[str]
    timestamp: datetime = Field(default_factory=utc_now)


class UserPreference(BaseModel):
    preferred_colors: list[str] = Field(default_factory=list)
    favorite_layouts: list[str] = Field(default_factory=list)
    complexity_level: Literal["simple", "moderate", "complex"] = "moderate"
    visual_density: Literal["minimal", "balanced", "rich"] = "balanced"
    # Append-only; nothing in the pipeline reads it back
    feedback_history: list[FeedbackEntry] = Field(default_factory=list)


class PerformanceMetric(BaseModel):
    """One timing/quality sample written by a pipeline stage."""

    agent_name: str
    processing_time: float  # milliseconds
    user_satisfaction: float = Field(default=8.0, ge=0.0, le=10.0)
    error_rate: float = 0.0
    input_size: int = 0
    output_quality: float = Field(default=0.0, ge=0.0, le=10.0)
    timestamp: datetime = Field(default_factory=utc_now)


class FeedbackRequest(BaseModel):
    """Body of ``POST /api/notegen-feedback``.

    Strict types: a string rating or a bare string for ``features`` is
    rejected rather than coerced.
    """

    model_config = ConfigDict(strict=True)

    rating: int | float
    features: list[StrictStr]

    @field_validator("rating")
    @classmethod
    def rating_in_range(cls, v: float) -> float:
        if isinstance(v, bool) or not 0 <= v <= 10:
            raise ValueError("rating must be a number between 0 and 10")
        return v


class LearningAnalytics(BaseModel):
    """Aggregate view returned by ``GET /api/notegen-analytics``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    average_processing_time: int = 0  # milliseconds
    average_satisfaction: float = 0.0  # 0..10
    total_notes_generated: int = 0
    total_metrics: int = 0
    successful_designs: int = 0
    learned_patterns: int = 0
    feedback_count: int = 0
    average_rating: float = 0.0
