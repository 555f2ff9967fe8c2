"""
Briefly Notes module - stored notes produced by ``/api/process``.
"""

from briefly.notes.models import (
    AiNoteResponse,
    ContentType,
    Note,
    NoteCreate,
    NoteUpdate,
    ProcessContentRequest,
    ProcessingStatus,
    VisualCard,
)
from briefly.notes.repository import InMemoryNoteRepository, NoteRepository
from briefly.notes.summarizer import NoteSummarizer

__all__ = [
    # Models
    "AiNoteResponse",
    "ContentType",
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "ProcessContentRequest",
    "ProcessingStatus",
    "VisualCard",
    # Repository
    "InMemoryNoteRepository",
    "NoteRepository",
    # Summarizer
    "NoteSummarizer",
]
