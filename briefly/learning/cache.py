"""
Learning Cache - file-backed key-value store shared by the note pipelines.

Holds four mappings (content patterns, design templates, user preferences,
performance metrics). The classifier reads content patterns, the segmenter
and formatter read design templates; user preferences and metrics are
write-only telemetry that only the analytics endpoint aggregates.

Growth is bounded by an EvictionPolicy: every mapping is capped at
``max_entries`` (oldest inserted evicted first), and metrics/templates older
than ``max_age_days`` are pruned on save.
"""

from __future__ import annotations

import hashlib
import threading
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from pydantic import ValidationError

from briefly.config import (
    DEFAULT_USER_ID,
    LEARNING_CACHE_BACKEND,
    LEARNING_CACHE_MAX_AGE_DAYS,
    LEARNING_CACHE_MAX_ENTRIES,
    LEARNING_CACHE_PATH,
)
from briefly.errors import PayloadValidationError
from briefly.learning.backends import CacheBackend, InMemoryCacheBackend, JsonFileCacheBackend
from briefly.learning.models import (
    DesignTemplate,
    FeedbackEntry,
    FeedbackRequest,
    LearningAnalytics,
    PerformanceMetric,
    UserPreference,
    utc_now,
)
from briefly.notegen.models import Classification
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event

logger = get_logger(__name__)

CONTENT_PATTERN_PREFIX_CHARS = 500

# Metric agent names that count as one generated set of notes
PIPELINE_AGENTS = ("full_pipeline", "advanced_pipeline")


@dataclass(frozen=True)
class EvictionPolicy:
    max_entries: int = LEARNING_CACHE_MAX_ENTRIES
    max_age_days: int = LEARNING_CACHE_MAX_AGE_DAYS


def content_pattern_key(content: str) -> str:
    """Cache key for a document: sha256 of its first 500 characters."""
    prefix = content[:CONTENT_PATTERN_PREFIX_CHARS]
    return hashlib.sha256(prefix.encode("utf-8")).hexdigest()


class LearningCache:
    """
    In-memory mappings persisted through a CacheBackend.

    Access is guarded by a re-entrant lock; routes run pipelines in the
    threadpool, so two requests can touch the cache concurrently. Saves are
    whole-snapshot rewrites, last writer wins.
    """

    def __init__(self, backend: CacheBackend, policy: EvictionPolicy | None = None) -> None:
        self.backend = backend
        self.policy = policy or EvictionPolicy()
        self._lock = threading.RLock()
        self.content_patterns: dict[str, Classification] = {}
        self.design_templates: dict[str, DesignTemplate] = {}
        self.user_preferences: dict[str, UserPreference] = {}
        self.performance_metrics: dict[str, PerformanceMetric] = {}
        self._load()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> None:
        data = self.backend.load()
        self.content_patterns = self._load_section(data, "contentPatterns", Classification)
        self.design_templates = self._load_section(data, "successfulDesigns", DesignTemplate)
        self.user_preferences = self._load_section(data, "userPreferences", UserPreference)
        self.performance_metrics = self._load_section(data, "performanceMetrics", PerformanceMetric)
        logger.info(
            "Loaded learning cache: patterns=%d templates=%d users=%d metrics=%d",
            len(self.content_patterns),
            len(self.design_templates),
            len(self.user_preferences),
            len(self.performance_metrics),
        )

    @staticmethod
    def _load_section(data: dict[str, Any], key: str, model: type) -> dict[str, Any]:
        section = data.get(key) or {}
        if not isinstance(section, dict):
            logger.warning("Learning cache section %s is not an object, ignoring", key)
            return {}

        entries: dict[str, Any] = {}
        for entry_key, value in section.items():
            try:
                entries[entry_key] = model.model_validate(value)
            except ValidationError:
                counter("notegen.learning.invalid_entry")
                logger.warning("Dropping invalid %s entry %s", key, entry_key)
        return entries

    def snapshot(self) -> dict[str, Any]:
        """JSON-compatible view of every mapping."""
        with self._lock:
            return {
                "contentPatterns": {k: v.model_dump(mode="json") for k, v in self.content_patterns.items()},
                "successfulDesigns": {k: v.model_dump(mode="json") for k, v in self.design_templates.items()},
                "userPreferences": {k: v.model_dump(mode="json") for k, v in self.user_preferences.items()},
                "performanceMetrics": {k: v.model_dump(mode="json") for k, v in self.performance_metrics.items()},
                "timestamp": utc_now().isoformat(),
            }

    def save(self) -> bool:
        """
        Prune expired entries and persist the whole cache.

        Returns:
            True if the backend accepted the snapshot, False otherwise

        Side Effects:
            - Rewrites the backing store
        """
        with self._lock:
            self._prune_expired()
            data = self.snapshot()
            try:
                self.backend.save(data)
            except OSError as e:
                counter("notegen.learning.save_error")
                logger.error("Failed to save learning cache: %s", e)
                return False
        return True

    # ------------------------------------------------------------------
    # Eviction
    # ------------------------------------------------------------------

    def _put(self, mapping: dict[str, Any], key: str, value: Any) -> None:
        mapping[key] = value
        while len(mapping) > self.policy.max_entries:
            oldest = next(iter(mapping))
            del mapping[oldest]
            counter("notegen.learning.evicted")

    def _prune_expired(self) -> None:
        cutoff = utc_now() - timedelta(days=self.policy.max_age_days)
        expired_metrics = [k for k, m in self.performance_metrics.items() if m.timestamp < cutoff]
        for key in expired_metrics:
            del self.performance_metrics[key]
        expired_templates = [k for k, t in self.design_templates.items() if t.last_used < cutoff]
        for key in expired_templates:
            del self.design_templates[key]
        if expired_metrics or expired_templates:
            logger.info(
                "Pruned %d metrics and %d templates older than %d days",
                len(expired_metrics),
                len(expired_templates),
                self.policy.max_age_days,
            )

    # ------------------------------------------------------------------
    # Content patterns
    # ------------------------------------------------------------------

    def cached_classification(self, content: str, min_confidence: float) -> Classification | None:
        """Return a cached classification whose confidence exceeds ``min_confidence``."""
        cached = self.content_patterns.get(content_pattern_key(content))
        if cached is not None and cached.confidence > min_confidence:
            return cached
        return None

    def remember_classification(
        self, content: str, classification: Classification, min_confidence: float
    ) -> bool:
        if classification.confidence <= min_confidence:
            return False
        with self._lock:
            self._put(self.content_patterns, content_pattern_key(content), classification)
        return True

    def recent_subjects(self, limit: int = 3) -> list[str]:
        with self._lock:
            values = list(self.content_patterns.values())
        return [c.subject for c in values[-limit:]]

    # ------------------------------------------------------------------
    # Design templates
    # ------------------------------------------------------------------

    def best_template(self, subject: str) -> DesignTemplate | None:
        with self._lock:
            candidates = [t for t in self.design_templates.values() if t.subject == subject]
        if not candidates:
            return None
        return max(candidates, key=lambda t: t.success_score)

    def recent_layout_styles(self, limit: int = 2) -> list[str]:
        with self._lock:
            values = list(self.design_templates.values())
        return [t.layout_style for t in values[-limit:]]

    def record_template(
        self,
        subject: str,
        difficulty: str,
        color_scheme: str,
        font_combination: str,
        layout_style: str,
    ) -> DesignTemplate:
        """Create the template for ``<subject>_<difficulty>`` or bump its usage."""
        key = f"{subject}_{difficulty}"
        with self._lock:
            existing = self.design_templates.get(key)
            if existing is not None:
                existing.usage_count += 1
                existing.last_used = utc_now()
                return existing

            template = DesignTemplate(
                subject=subject,
                color_scheme=color_scheme,
                font_combination=font_combination,
                layout_style=layout_style,
            )
            self._put(self.design_templates, key, template)
        return template

    # ------------------------------------------------------------------
    # Metrics and feedback
    # ------------------------------------------------------------------

    def record_metric(
        self,
        agent_name: str,
        processing_time_ms: float,
        input_size: int = 0,
        output_quality: float = 0.0,
        user_satisfaction: float = 8.0,
    ) -> str:
        """Store one performance sample and return its key."""
        metric = PerformanceMetric(
            agent_name=agent_name,
            processing_time=processing_time_ms,
            input_size=input_size,
            output_quality=min(output_quality, 10.0),
            user_satisfaction=user_satisfaction,
        )
        key = f"{agent_name}_{uuid.uuid4().hex}"
        with self._lock:
            self._put(self.performance_metrics, key, metric)
        return key

    def get_preference(self, user_id: str = DEFAULT_USER_ID) -> UserPreference | None:
        return self.user_preferences.get(user_id)

    def record_feedback(
        self, rating: Any, features: Any, user_id: str = DEFAULT_USER_ID
    ) -> FeedbackEntry:
        """
        Append a rating to the user's feedback history and save immediately.

        Raises:
            PayloadValidationError: Rating outside 0..10 or features not a list
                of strings. Nothing is recorded in that case.
        """
        try:
            request = FeedbackRequest.model_validate({"rating": rating, "features": features})
        except ValidationError as e:
            counter("notegen.feedback.invalid")
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"])
            raise PayloadValidationError(f"Invalid feedback: {field}: {first['msg']}") from None

        entry = FeedbackEntry(rating=request.rating, features=request.features)
        with self._lock:
            preference = self.user_preferences.get(user_id)
            if preference is None:
                preference = UserPreference()
                self._put(self.user_preferences, user_id, preference)
            preference.feedback_history.append(entry)

        counter("notegen.feedback.recorded")
        log_event("notegen.feedback.recorded", rating=entry.rating, features=len(entry.features))
        self.save()
        return entry

    def analytics(self) -> LearningAnalytics:
        """Aggregate counters across the cache; all zeros when empty."""
        with self._lock:
            metrics = list(self.performance_metrics.values())
            ratings = [
                entry.rating
                for preference in self.user_preferences.values()
                for entry in preference.feedback_history
            ]
            designs = len(self.design_templates)
            patterns = len(self.content_patterns)

        if not metrics:
            avg_time, avg_satisfaction = 0, 0.0
        else:
            avg_time = round(sum(m.processing_time for m in metrics) / len(metrics))
            avg_satisfaction = round(sum(m.user_satisfaction for m in metrics) / len(metrics), 2)

        return LearningAnalytics(
            average_processing_time=avg_time,
            average_satisfaction=avg_satisfaction,
            total_notes_generated=sum(1 for m in metrics if m.agent_name in PIPELINE_AGENTS),
            total_metrics=len(metrics),
            successful_designs=designs,
            learned_patterns=patterns,
            feedback_count=len(ratings),
            average_rating=round(sum(ratings) / len(ratings), 2) if ratings else 0.0,
        )


def build_learning_cache() -> LearningCache:
    """Create the process-wide cache from configuration."""
    backend: CacheBackend
    if LEARNING_CACHE_BACKEND == "memory":
        backend = InMemoryCacheBackend()
    else:
        backend = JsonFileCacheBackend(LEARNING_CACHE_PATH)
    logger.info("Learning cache backend: %s", type(backend).__name__)
    return LearningCache(backend)
