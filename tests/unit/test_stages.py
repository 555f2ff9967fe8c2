"""Tests for the model-call stages of the study-notes pipeline."""

from __future__ import annotations

import pytest

from briefly.errors import PipelineStageError
from briefly.learning.cache import content_pattern_key
from briefly.notegen.models import Classification, FormattedNotes, SegmentedContent
from briefly.notegen.stages import (
    LAYOUT_INPUT_CHARS,
    ClassifierStage,
    FormatterStage,
    LayoutDesignerStage,
    SegmenterStage,
)
from briefly.observability.telemetry import get_counter
from tests.conftest import CLASSIFICATION, FORMATTED, SEGMENTED

CONTENT = "Mitochondria are membrane-bound organelles that produce ATP."


class TestStageErrorWrapping:
    """Every failure mode surfaces as a PipelineStageError naming the stage."""

    def test_remote_failure(self, fake_llm, learning):
        fake_llm.failures["classifier"] = RuntimeError("503 Service Unavailable")

        with pytest.raises(PipelineStageError) as exc_info:
            ClassifierStage(learning).classify(CONTENT)

        assert exc_info.value.stage == "classifier"
        assert exc_info.value.status_code == 500
        assert "503 Service Unavailable" in str(exc_info.value)
        assert get_counter("notegen.classifier.error") == 1

    def test_unparseable_response(self, fake_llm, learning):
        fake_llm.responses["segmenter"] = "Sorry, I cannot help with that."

        with pytest.raises(PipelineStageError, match="segmenter stage failed"):
            SegmenterStage(learning).segment(CONTENT, Classification(**CLASSIFICATION))

    def test_wrong_shape(self, fake_llm, learning):
        fake_llm.responses["formatter"] = {"title": "No sections here"}

        with pytest.raises(PipelineStageError, match="formatter stage failed"):
            FormatterStage(learning).format_notes(
                SegmentedContent(**SEGMENTED), Classification(**CLASSIFICATION)
            )

    def test_no_retry_on_failure(self, fake_llm, learning):
        fake_llm.responses["classifier"] = "not json"

        with pytest.raises(PipelineStageError):
            ClassifierStage(learning).classify(CONTENT)

        assert fake_llm.prefixes == ["classifier"]


class TestClassifierStage:
    def test_confident_result_cached_and_reused(self, fake_llm, learning):
        stage = ClassifierStage(learning)

        first = stage.classify(CONTENT)
        second = stage.classify(CONTENT)

        assert first == second
        assert fake_llm.prefixes == ["classifier"]
        assert get_counter("notegen.classifier.cache_hit") == 1
        assert content_pattern_key(CONTENT) in learning.content_patterns

    def test_low_confidence_not_cached(self, fake_llm, learning):
        fake_llm.responses["classifier"] = {**CLASSIFICATION, "confidence": 0.6}
        stage = ClassifierStage(learning)

        stage.classify(CONTENT)
        stage.classify(CONTENT)

        assert fake_llm.prefixes == ["classifier", "classifier"]
        assert learning.content_patterns == {}

    def test_stored_but_below_reuse_threshold(self, fake_llm, learning):
        fake_llm.responses["classifier"] = {**CLASSIFICATION, "confidence": 0.75}
        stage = ClassifierStage(learning)

        stage.classify(CONTENT)
        stage.classify(CONTENT)

        assert content_pattern_key(CONTENT) in learning.content_patterns
        assert fake_llm.prefixes == ["classifier", "classifier"]

    def test_prompt_lists_recent_subjects(self, fake_llm, learning):
        learning.remember_classification(
            "earlier document",
            Classification(**{**CLASSIFICATION, "subject": "chemistry - acids"}),
            0.7,
        )

        ClassifierStage(learning).classify(CONTENT)

        prompt = fake_llm.calls[0][1]
        assert "Previously learned subjects: chemistry - acids" in prompt
        assert CONTENT in prompt

    def test_records_metric(self, fake_llm, learning):
        ClassifierStage(learning).classify(CONTENT)

        metrics = list(learning.performance_metrics.values())
        assert [m.agent_name for m in metrics] == ["classifier"]
        assert metrics[0].output_quality == pytest.approx(9.2)
        assert metrics[0].input_size == len(CONTENT)


class TestSegmenterStage:
    def test_prompt_carries_classification_and_language(self, fake_llm, learning):
        result = SegmenterStage(learning).segment(
            CONTENT, Classification(**CLASSIFICATION), language="es"
        )

        prompt = fake_llm.calls[0][1]
        assert "biology - cell biology" in prompt
        assert "intermediate learners" in prompt
        assert "language: es" in prompt
        assert result.structure == "hierarchical"
        assert [s.type for s in result.sections] == ["heading", "bullet", "definition", "summary"]


class TestFormatterStage:
    def test_records_design_template(self, fake_llm, learning):
        FormatterStage(learning).format_notes(
            SegmentedContent(**SEGMENTED), Classification(**CLASSIFICATION)
        )

        template = learning.design_templates["biology - cell biology_intermediate"]
        assert template.color_scheme == "aurora"
        assert template.font_combination == "Inter + Playfair Display"
        assert template.layout_style == "hierarchical"
        assert template.usage_count == 1

    def test_reuses_best_template_hint(self, fake_llm, learning):
        stage = FormatterStage(learning)
        segmented = SegmentedContent(**SEGMENTED)
        classification = Classification(**CLASSIFICATION)

        stage.format_notes(segmented, classification)
        stage.format_notes(segmented, classification)

        assert "Use successful template" not in fake_llm.calls[0][1]
        assert "Use successful template: aurora with hierarchical" in fake_llm.calls[1][1]
        assert learning.design_templates["biology - cell biology_intermediate"].usage_count == 2


class TestLayoutDesignerStage:
    def test_input_truncated(self, fake_llm, learning):
        long_notes = FormattedNotes(
            **{**FORMATTED, "sections": [{"type": "bullet", "content": "x" * 5000}]}
        )

        result = LayoutDesignerStage(learning).design(long_notes)

        prompt = fake_llm.calls[0][1]
        assert "x" * LAYOUT_INPUT_CHARS not in prompt
        assert len(prompt) < LAYOUT_INPUT_CHARS + 100
        assert result.title == "Cell Biology Basics"
        assert len(result.layout_blocks) == 4
