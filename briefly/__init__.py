"""Briefly NoteGen - turn text, PDFs, audio and videos into study notes"""

from __future__ import annotations

__version__ = "1.0.0"


# Lazy imports for the main entry points
def __getattr__(name: str):
    """
    Lazy imports to avoid loading heavy dependencies when only importing lightweight modules.
    """
    if name in ("Note", "NoteGenOptions"):
        if name == "Note":
            from briefly.notes.models import Note

            return Note
        from briefly.notegen.models import NoteGenOptions

        return NoteGenOptions

    if name == "StudyNotesPipeline":
        from briefly.notegen.pipeline import StudyNotesPipeline

        return StudyNotesPipeline

    if name == "AdvancedNoteEngine":
        from briefly.advanced.engine import AdvancedNoteEngine

        return AdvancedNoteEngine

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "AdvancedNoteEngine",
    "Note",
    "NoteGenOptions",
    "StudyNotesPipeline",
]
