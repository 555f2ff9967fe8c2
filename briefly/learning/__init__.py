"""
Briefly Learning module - classification/template cache, feedback and metrics.
"""

from briefly.learning.backends import CacheBackend, InMemoryCacheBackend, JsonFileCacheBackend
from briefly.learning.cache import (
    EvictionPolicy,
    LearningCache,
    build_learning_cache,
    content_pattern_key,
)
from briefly.learning.models import (
    DesignTemplate,
    FeedbackEntry,
    FeedbackRequest,
    LearningAnalytics,
    PerformanceMetric,
    UserPreference,
)

__all__ = [
    # Backends
    "CacheBackend",
    "InMemoryCacheBackend",
    "JsonFileCacheBackend",
    # Cache
    "EvictionPolicy",
    "LearningCache",
    "build_learning_cache",
    "content_pattern_key",
    # Models
    "DesignTemplate",
    "FeedbackEntry",
    "FeedbackRequest",
    "LearningAnalytics",
    "PerformanceMetric",
    "UserPreference",
]
