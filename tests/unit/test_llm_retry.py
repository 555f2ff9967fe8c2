"""Tests for the shared Gemini call: request options and transport-error mapping."""

from __future__ import annotations

from typing import Any

import pytest
from google.api_core.exceptions import DeadlineExceeded, ResourceExhausted

from briefly.config import LLM_TIMEOUT_SECONDS
from briefly.llm.retry import call_llm
from briefly.observability.telemetry import get_counter


class FakeResponse:
    def __init__(self, text: str) -> None:
        self.text = text


class FakeModel:
    def __init__(self, text: str = '{"ok": true}', error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[tuple[Any, dict[str, Any]]] = []

    def generate_content(self, prompt: Any, **kwargs: Any) -> FakeResponse:
        self.calls.append((prompt, kwargs))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


@pytest.fixture
def install_model(monkeypatch):
    def install(model: FakeModel, backend: str = "genai") -> FakeModel:
        monkeypatch.setattr("briefly.llm.retry.get_gemini_model", lambda *args: model)
        monkeypatch.setattr("briefly.llm.gemini._backend", backend)
        return model

    return install


class TestCallLlm:
    def test_genai_call_carries_request_timeout(self, install_model):
        model = install_model(FakeModel())

        assert call_llm("prompt", counter_prefix="classifier") == '{"ok": true}'

        _, kwargs = model.calls[0]
        assert kwargs["request_options"] == {"timeout": LLM_TIMEOUT_SECONDS}
        assert kwargs["generation_config"]["response_mime_type"] == "application/json"

    def test_vertex_call_has_no_request_options(self, install_model):
        model = install_model(FakeModel(), backend="vertexai")

        call_llm("prompt", json_output=False)

        _, kwargs = model.calls[0]
        assert "request_options" not in kwargs
        assert "response_mime_type" not in kwargs["generation_config"]

    def test_deadline_becomes_timeout_error(self, install_model):
        install_model(FakeModel(error=DeadlineExceeded("deadline exceeded")))

        with pytest.raises(TimeoutError, match="LLM call timed out"):
            call_llm("prompt", counter_prefix="segmenter")

        assert get_counter("notegen.segmenter.timeout") == 1

    def test_rate_limit_becomes_os_error(self, install_model):
        install_model(FakeModel(error=ResourceExhausted("quota")))

        with pytest.raises(OSError, match="rate limited"):
            call_llm("prompt", counter_prefix="formatter")

        assert get_counter("notegen.formatter.rate_limited") == 1

    def test_empty_response_rejected(self, install_model):
        install_model(FakeModel(text=""))

        with pytest.raises(ValueError, match="Empty response"):
            call_llm("prompt")
