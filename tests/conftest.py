"""
Pytest configuration for Briefly tests

Provides canned model responses per stage, fake Playwright objects and a
TestClient wired to in-memory services.
"""

from __future__ import annotations

import copy
import json
from typing import Any

import pytest

from briefly.learning.backends import InMemoryCacheBackend
from briefly.learning.cache import LearningCache
from briefly.observability.telemetry import reset_counters

# =============================================================================
# Canned model responses, keyed by the counter_prefix each stage passes
# =============================================================================

CLASSIFICATION = {
    "subject": "biology - cell biology",
    "tone": "academic",
    "language": "en-US",
    "tags": ["cells", "mitochondria", "organelles", "energy", "biology"],
    "difficulty": "intermediate",
    "content_category": "academic",
    "visual_complexity": "moderate",
    "confidence": 0.92,
}

SEGMENTED = {
    "title": "Cell Biology Basics",
    "sections": [
        {"type": "heading", "content": "Organelles", "level": 1, "importance": "high"},
        {"type": "bullet", "content": "Mitochondria produce ATP", "importance": "high"},
        {"type": "definition", "content": "ATP: the cell's energy currency", "importance": "medium"},
        {"type": "summary", "content": "Cells run on ATP", "importance": "low"},
    ],
    "structure": "hierarchical",
    "estimated_read_time": 3,
}

FORMATTED = {
    "title": "Cell Biology Basics",
    "emoji": "🧬",
    "color_theme": "aurora",
    "design_language": "Inter + Playfair Display",
    "sections": [
        {"type": "heading", "content": "Organelles", "emoji": "🔬", "highlights": []},
        {"type": "bullet", "content": "Mitochondria produce ATP", "highlights": ["ATP"]},
        {"type": "definition", "content": "ATP: the cell's energy currency", "highlights": ["ATP"]},
        {"type": "summary", "content": "Cells run on ATP", "highlights": []},
    ],
}


def _block(block_type: str, content: str, y: float) -> dict[str, Any]:
    return {
        "type": block_type,
        "content": content,
        "position": {"x": 0, "y": y, "width": 100, "height": 10},
        "style": {"font_family": "Inter", "font_size": 16, "color": "#1f2937", "padding": 8},
    }


DESIGNED = {
    "title": "Cell Biology Basics",
    "theme": "aurora",
    "layout_blocks": [
        _block("heading", "🔬 Organelles", 0),
        _block("bullet", "Mitochondria produce ATP", 10),
        _block("definition", "ATP: the cell's energy currency", 20),
        _block("summary", "Cells run on ATP", 30),
    ],
    "style_config": {
        "page_size": "A4",
        "margins": {"top": 40, "right": 40, "bottom": 40, "left": 40},
        "font_families": {"heading": "Playfair Display", "body": "Inter", "accent": "Dancing Script"},
        "color_palette": {
            "primary": "#2563eb",
            "secondary": "#7c3aed",
            "accent": "#f59e0b",
            "background": "#ffffff",
        },
        "spacing_system": [4, 8, 16, 24, 32],
        "typography_scale": [1, 1.25, 1.563, 1.953],
    },
}

SUMMARY = {
    "title": "Mitochondria",
    "summary": "Mitochondria convert nutrients into ATP. They are the cell's power plants.",
    "key_points": ["Produce ATP", "Have their own DNA", "Double membrane"],
    "action_items": ["Review cellular respiration", "Draw the organelle", "Quiz yourself"],
    "visual_cards": [
        {"icon": "fas fa-bolt", "label": "Energy", "value": "ATP", "color": "amber"},
        {"icon": "fas fa-dna", "label": "Genome", "value": "mtDNA", "color": "blue"},
    ],
}

LAYOUT_DATA = {
    "headings": [{"level": 1, "text": "Photosynthesis", "position": 0}],
    "bullets": [
        {"text": "Light reactions then the Calvin cycle", "level": 1, "type": "arrow"},
        {"text": "Chlorophyll absorbs light", "level": 1, "type": "bullet"},
    ],
    "paragraphs": [{"text": "Plants turn light into sugar.", "type": "introduction"}],
    "suggested_diagrams": [
        {"type": "flowchart", "keywords": ["process"], "description": "Photosynthesis steps"}
    ],
}

STYLED_DATA = {
    "elements": [
        {"type": "heading", "content": "Photosynthesis", "styles": {"color": "#1e3a8a", "font_weight": "bold"}, "importance": "high"},
        {"type": "bullet", "content": "Light reactions then the Calvin cycle", "styles": {"color": "#111827"}, "importance": "medium"},
        {"type": "bullet", "content": "Chlorophyll absorbs light", "styles": {"color": "#111827"}, "importance": "medium"},
        {"type": "definition", "content": "Chlorophyll: green pigment", "styles": {"color": "#000000", "background_color": "#fef68a"}, "importance": "critical"},
        {"type": "paragraph", "content": "Plants turn light into sugar.", "styles": {"color": "#374151"}, "importance": "low"},
    ],
    "color_mapping": {"definitions": "#fef68a"},
}

DIAGRAMS = {
    "diagrams": [
        {
            "type": "flowchart",
            "elements": ["Light", "Calvin cycle", "Sugar"],
            "connections": [{"from": "Light", "to": "Calvin cycle", "label": "ATP"}],
            "mermaid_code": "flowchart TD\n    A[Light] --> B[Calvin cycle]\n    B --> C[Sugar]",
        }
    ]
}

STAGE_RESPONSES: dict[str, Any] = {
    "classifier": CLASSIFICATION,
    "segmenter": SEGMENTED,
    "formatter": FORMATTED,
    "layout_designer": DESIGNED,
    "summarizer": SUMMARY,
    "layout_agent": LAYOUT_DATA,
    "styling_agent": STYLED_DATA,
    "diagram_agent": DIAGRAMS,
}


class FakeLLM:
    """Stands in for ``briefly.llm.retry.call_llm``; answers by counter_prefix."""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = copy.deepcopy(STAGE_RESPONSES)
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, Any]] = []

    def __call__(
        self,
        prompt: Any,
        counter_prefix: str = "llm",
        model_name: str | None = None,
        system_instruction: str | None = None,
        json_output: bool = True,
    ) -> str:
        self.calls.append((counter_prefix, prompt))
        if counter_prefix in self.failures:
            raise self.failures[counter_prefix]
        response = self.responses[counter_prefix]
        return response if isinstance(response, str) else json.dumps(response)

    @property
    def prefixes(self) -> list[str]:
        return [prefix for prefix, _ in self.calls]


# =============================================================================
# Fake Playwright
# =============================================================================

FAKE_PDF = b"%PDF-1.4 fake document"


class FakePage:
    def __init__(self, browser: FakeBrowser) -> None:
        self.browser = browser
        self.content: str | None = None
        self.pdf_kwargs: dict[str, Any] = {}

    def set_content(self, html: str, wait_until: str, timeout: int) -> None:
        if self.browser.fail_on == "set_content":
            raise RuntimeError("Timeout 60000ms exceeded")
        self.content = html
        self.browser.wait_until = wait_until

    def evaluate(self, expression: str) -> bool:
        self.browser.evaluated.append(expression)
        return True

    def pdf(self, **kwargs: Any) -> bytes:
        if self.browser.fail_on == "pdf":
            raise RuntimeError("Printing failed")
        self.pdf_kwargs = kwargs
        return FAKE_PDF


class FakeBrowser:
    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.closed = False
        self.pages: list[FakePage] = []
        self.evaluated: list[str] = []
        self.wait_until: str | None = None

    def new_page(self) -> FakePage:
        page = FakePage(self)
        self.pages.append(page)
        return page

    def close(self) -> None:
        self.closed = True


class FakeChromium:
    def __init__(self, owner: FakePlaywright) -> None:
        self.owner = owner

    def launch(self, headless: bool = True, args: list[str] | None = None) -> FakeBrowser:
        if self.owner.fail_on == "launch":
            raise RuntimeError("Executable doesn't exist")
        browser = FakeBrowser(self.owner.fail_on)
        self.owner.browsers.append(browser)
        return browser


class FakePlaywright:
    """Replacement for ``sync_playwright``; records every browser it launches."""

    def __init__(self) -> None:
        self.fail_on: str | None = None
        self.browsers: list[FakeBrowser] = []
        self.chromium = FakeChromium(self)

    def __call__(self) -> FakePlaywright:
        return self

    def __enter__(self) -> FakePlaywright:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_telemetry():
    reset_counters()
    yield
    reset_counters()


@pytest.fixture
def fake_llm(monkeypatch):
    """Patch the shared Gemini call with canned per-stage JSON."""
    fake = FakeLLM()
    monkeypatch.setattr("briefly.llm.retry.call_llm", fake)
    return fake


@pytest.fixture
def fake_playwright(monkeypatch):
    fake = FakePlaywright()
    monkeypatch.setattr("briefly.pdf.exporter.sync_playwright", fake)
    return fake


@pytest.fixture
def cache_backend():
    return InMemoryCacheBackend()


@pytest.fixture
def learning(cache_backend):
    return LearningCache(cache_backend)


@pytest.fixture
def repository():
    from briefly.notes.repository import InMemoryNoteRepository

    return InMemoryNoteRepository()


@pytest.fixture
def client(fake_llm, fake_playwright, learning, repository):
    """TestClient with every service dependency overridden."""
    from fastapi.testclient import TestClient

    from briefly.advanced.engine import AdvancedNoteEngine
    from briefly.api import dependencies
    from briefly.api.app import app
    from briefly.notegen.pipeline import StudyNotesPipeline
    from briefly.notes.summarizer import NoteSummarizer
    from briefly.pdf.exporter import PdfExporter

    exporter = PdfExporter()
    pipeline = StudyNotesPipeline(learning)
    engine = AdvancedNoteEngine(learning, exporter)
    summarizer = NoteSummarizer()

    app.dependency_overrides[dependencies.get_note_repository] = lambda: repository
    app.dependency_overrides[dependencies.get_learning_cache] = lambda: learning
    app.dependency_overrides[dependencies.get_pdf_exporter] = lambda: exporter
    app.dependency_overrides[dependencies.get_study_notes_pipeline] = lambda: pipeline
    app.dependency_overrides[dependencies.get_advanced_engine] = lambda: engine
    app.dependency_overrides[dependencies.get_summarizer] = lambda: summarizer

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
