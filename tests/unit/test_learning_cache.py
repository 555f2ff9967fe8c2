"""Tests for the learning cache: feedback validation, eviction, analytics and persistence."""

from __future__ import annotations

import json
import os
from datetime import timedelta

import pytest

from briefly.errors import PayloadValidationError
from briefly.learning.backends import InMemoryCacheBackend, JsonFileCacheBackend
from briefly.learning.cache import EvictionPolicy, LearningCache, content_pattern_key
from briefly.learning.models import utc_now
from briefly.notegen.models import Classification
from tests.conftest import CLASSIFICATION


class TestRecordFeedback:
    def test_valid_feedback_appended_and_saved(self, learning, cache_backend):
        entry = learning.record_feedback(8, ["colors", "diagrams"])

        assert entry.rating == 8
        history = learning.get_preference("default").feedback_history
        assert [e.features for e in history] == [["colors", "diagrams"]]
        assert cache_backend.save_count == 1
        saved = cache_backend.data["userPreferences"]["default"]["feedback_history"]
        assert saved[0]["rating"] == 8

    @pytest.mark.parametrize("rating", [0, 10, 7.5])
    def test_boundary_ratings_accepted(self, learning, rating):
        assert learning.record_feedback(rating, []).rating == rating

    @pytest.mark.parametrize("rating", [-1, 11, 10.01, "5", None, True])
    def test_invalid_rating_rejected_without_mutation(self, learning, cache_backend, rating):
        with pytest.raises(PayloadValidationError, match="Invalid feedback: rating"):
            learning.record_feedback(rating, ["colors"])

        assert learning.user_preferences == {}
        assert cache_backend.save_count == 0

    @pytest.mark.parametrize("features", ["colors", None, [1, 2], {"a": "b"}])
    def test_invalid_features_rejected_without_mutation(self, learning, cache_backend, features):
        with pytest.raises(PayloadValidationError, match="Invalid feedback: features"):
            learning.record_feedback(5, features)

        assert learning.user_preferences == {}
        assert cache_backend.save_count == 0

    def test_separate_users(self, learning):
        learning.record_feedback(4, ["layout"], user_id="alice")
        learning.record_feedback(9, ["colors"])

        assert set(learning.user_preferences) == {"alice", "default"}


class TestClassificationPatterns:
    def test_key_uses_first_500_chars(self):
        base = "a" * 500
        assert content_pattern_key(base + "tail one") == content_pattern_key(base + "tail two")
        assert content_pattern_key("b" + base) != content_pattern_key(base)

    def test_thresholds(self, learning):
        classification = Classification(**{**CLASSIFICATION, "confidence": 0.75})

        assert learning.remember_classification("doc", classification, 0.7) is True
        assert learning.cached_classification("doc", 0.8) is None
        assert learning.cached_classification("doc", 0.7) == classification

    def test_recent_subjects(self, learning):
        for subject in ["math", "physics", "history", "art"]:
            learning.remember_classification(
                subject, Classification(**{**CLASSIFICATION, "subject": subject}), 0.7
            )

        assert learning.recent_subjects(3) == ["physics", "history", "art"]


class TestEviction:
    def test_oldest_entries_evicted_beyond_max(self):
        learning = LearningCache(InMemoryCacheBackend(), EvictionPolicy(max_entries=2, max_age_days=90))

        first = learning.record_metric("classifier", 10)
        second = learning.record_metric("classifier", 20)
        third = learning.record_metric("classifier", 30)

        assert list(learning.performance_metrics) == [second, third]
        assert first not in learning.performance_metrics

    def test_expired_entries_pruned_on_save(self, cache_backend):
        learning = LearningCache(cache_backend, EvictionPolicy(max_entries=100, max_age_days=30))
        old_key = learning.record_metric("classifier", 10)
        fresh_key = learning.record_metric("classifier", 20)
        learning.performance_metrics[old_key].timestamp = utc_now() - timedelta(days=31)
        template = learning.record_template("math", "beginner", "geometric", "Inter", "linear")
        template.last_used = utc_now() - timedelta(days=45)

        assert learning.save() is True

        assert list(learning.performance_metrics) == [fresh_key]
        assert learning.design_templates == {}
        assert list(cache_backend.data["performanceMetrics"]) == [fresh_key]


class TestAnalytics:
    def test_empty_cache_is_all_zeros(self, learning):
        analytics = learning.analytics().model_dump(by_alias=True)

        assert analytics == {
            "averageProcessingTime": 0,
            "averageSatisfaction": 0.0,
            "totalNotesGenerated": 0,
            "totalMetrics": 0,
            "successfulDesigns": 0,
            "learnedPatterns": 0,
            "feedbackCount": 0,
            "averageRating": 0.0,
        }

    def test_aggregates(self, learning):
        learning.record_metric("classifier", 100, user_satisfaction=8.0)
        learning.record_metric("full_pipeline", 300, user_satisfaction=9.0)
        learning.record_metric("advanced_pipeline", 200, user_satisfaction=10.0)
        learning.record_template("math", "beginner", "geometric", "Inter", "linear")
        learning.remember_classification("doc", Classification(**CLASSIFICATION), 0.7)
        learning.record_feedback(6, [])
        learning.record_feedback(9, ["colors"])

        analytics = learning.analytics()

        assert analytics.average_processing_time == 200
        assert analytics.average_satisfaction == 9.0
        assert analytics.total_notes_generated == 2
        assert analytics.total_metrics == 3
        assert analytics.successful_designs == 1
        assert analytics.learned_patterns == 1
        assert analytics.feedback_count == 2
        assert analytics.average_rating == 7.5


class TestPersistence:
    def test_snapshot_sections(self, learning):
        assert set(learning.snapshot()) == {
            "contentPatterns",
            "successfulDesigns",
            "userPreferences",
            "performanceMetrics",
            "timestamp",
        }

    def test_reload_from_backend(self, learning, cache_backend):
        learning.remember_classification("doc", Classification(**CLASSIFICATION), 0.7)
        learning.record_feedback(7, ["diagrams"])

        reloaded = LearningCache(InMemoryCacheBackend(cache_backend.data))

        assert reloaded.cached_classification("doc", 0.8).subject == "biology - cell biology"
        assert reloaded.get_preference().feedback_history[0].rating == 7

    def test_invalid_entries_dropped_on_load(self):
        backend = InMemoryCacheBackend(
            {
                "performanceMetrics": {
                    "ok": {"agent_name": "classifier", "processing_time": 12.5},
                    "bad": {"agent_name": "classifier"},
                },
                "successfulDesigns": ["not", "an", "object"],
            }
        )

        learning = LearningCache(backend)

        assert list(learning.performance_metrics) == ["ok"]
        assert learning.design_templates == {}

    def test_save_failure_returns_false(self):
        class BrokenBackend(InMemoryCacheBackend):
            def save(self, data):
                raise OSError("disk full")

        assert LearningCache(BrokenBackend()).save() is False


class TestJsonFileCacheBackend:
    def test_missing_file_loads_empty(self, tmp_path):
        assert JsonFileCacheBackend(str(tmp_path / "cache.json")).load() == {}

    @pytest.mark.parametrize("contents", ["{not json", "[1, 2]", ""])
    def test_unreadable_file_loads_empty(self, tmp_path, contents):
        path = tmp_path / "cache.json"
        path.write_text(contents)

        assert JsonFileCacheBackend(str(path)).load() == {}

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "cache.json"
        backend = JsonFileCacheBackend(str(path))

        backend.save({"performanceMetrics": {"k": {"agent_name": "x"}}})

        assert json.loads(path.read_text()) == {"performanceMetrics": {"k": {"agent_name": "x"}}}
        assert backend.load() == {"performanceMetrics": {"k": {"agent_name": "x"}}}
        assert os.listdir(path.parent) == ["cache.json"]

    def test_cache_survives_restart(self, tmp_path):
        path = str(tmp_path / "cache.json")
        LearningCache(JsonFileCacheBackend(path)).record_feedback(10, ["pdf"])

        restarted = LearningCache(JsonFileCacheBackend(path))

        assert restarted.analytics().feedback_count == 1
