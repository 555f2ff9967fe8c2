"""
Briefly NoteGen module - the four-stage study-notes pipeline.

Exports are resolved lazily: the learning cache imports
``briefly.notegen.models`` while the stages import the learning cache.
"""

from __future__ import annotations

_EXPORTS = {
    "Classification": "briefly.notegen.models",
    "DesignedLayout": "briefly.notegen.models",
    "FormattedNotes": "briefly.notegen.models",
    "NoteGenOptions": "briefly.notegen.models",
    "SegmentedContent": "briefly.notegen.models",
    "ClassifierStage": "briefly.notegen.stages",
    "FormatterStage": "briefly.notegen.stages",
    "LayoutDesignerStage": "briefly.notegen.stages",
    "ModelStage": "briefly.notegen.stages",
    "SegmenterStage": "briefly.notegen.stages",
    "StudyNotesPipeline": "briefly.notegen.pipeline",
    "StudyNotesResult": "briefly.notegen.pipeline",
    "render_designed_notes": "briefly.notegen.renderer",
}


def __getattr__(name: str):
    if name in _EXPORTS:
        import importlib

        return getattr(importlib.import_module(_EXPORTS[name]), name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = sorted(_EXPORTS)
