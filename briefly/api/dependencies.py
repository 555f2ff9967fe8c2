"""
Process-wide service getters for FastAPI ``Depends``.

Each getter builds its service once. Tests replace them through
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from briefly.advanced.engine import AdvancedNoteEngine
from briefly.learning.cache import LearningCache, build_learning_cache
from briefly.notegen.pipeline import StudyNotesPipeline
from briefly.notes.repository import InMemoryNoteRepository, NoteRepository
from briefly.notes.summarizer import NoteSummarizer
from briefly.pdf.exporter import PdfExporter


@lru_cache(maxsize=1)
def get_note_repository() -> NoteRepository:
    return InMemoryNoteRepository()


@lru_cache(maxsize=1)
def get_learning_cache() -> LearningCache:
    return build_learning_cache()


@lru_cache(maxsize=1)
def get_summarizer() -> NoteSummarizer:
    return NoteSummarizer()


@lru_cache(maxsize=1)
def get_pdf_exporter() -> PdfExporter:
    return PdfExporter()


@lru_cache(maxsize=1)
def get_study_notes_pipeline() -> StudyNotesPipeline:
    return StudyNotesPipeline(get_learning_cache())


@lru_cache(maxsize=1)
def get_advanced_engine() -> AdvancedNoteEngine:
    return AdvancedNoteEngine(get_learning_cache(), get_pdf_exporter())
