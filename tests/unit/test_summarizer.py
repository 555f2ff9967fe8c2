"""Tests for NoteSummarizer."""

from __future__ import annotations

import pytest

from briefly.errors import PipelineStageError
from briefly.notes.models import ContentType
from briefly.notes.summarizer import NoteSummarizer
from briefly.observability.telemetry import get_counter


class TestNoteSummarizer:
    def test_summarize(self, fake_llm):
        result = NoteSummarizer().summarize("Mitochondria produce ATP.", ContentType.TEXT)

        assert result.title == "Mitochondria"
        assert len(result.key_points) == 3
        assert result.visual_cards[0].value == "ATP"
        assert fake_llm.prefixes == ["summarizer"]
        assert get_counter("notegen.summarizer.success") == 1

    def test_prompt_includes_content_type(self, fake_llm):
        NoteSummarizer().summarize("transcript text", "audio")

        prompt = fake_llm.calls[0][1]
        assert prompt.startswith("Content type: audio")
        assert "transcript text" in prompt

    def test_model_failure_wrapped(self, fake_llm):
        fake_llm.failures["summarizer"] = RuntimeError("quota exceeded")

        with pytest.raises(PipelineStageError, match="summarizer stage failed: quota exceeded"):
            NoteSummarizer().summarize("text", ContentType.TEXT)

        assert get_counter("notegen.summarizer.error") == 1

    def test_missing_fields_fail(self, fake_llm):
        fake_llm.responses["summarizer"] = {"title": "Only a title"}

        with pytest.raises(PipelineStageError) as exc_info:
            NoteSummarizer().summarize("text", ContentType.TEXT)

        assert exc_info.value.status_code == 500

    def test_unknown_content_type_rejected(self, fake_llm):
        with pytest.raises(ValueError):
            NoteSummarizer().summarize("text", "spreadsheet")

        assert fake_llm.calls == []
