"""
Error taxonomy for Briefly NoteGen.

Every error carries the HTTP status the API layer maps it to. Stages catch
their own external-call failures and re-raise one of these with the original
message appended; the API layer turns them into ``{"error": "..."}`` bodies.
"""

from __future__ import annotations


class BrieflyError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UnsupportedInputError(BrieflyError):
    """Unknown file extension, missing content, or oversized upload."""

    status_code = 400


class ExtractionError(BrieflyError):
    """PDF text extraction failed or recovered no text."""

    status_code = 400


class TranscriptionError(BrieflyError):
    """Audio transcription failed."""

    status_code = 400


class PipelineStageError(BrieflyError):
    """A model-call stage failed (remote error, bad JSON, or wrong shape)."""

    status_code = 500

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage} stage failed: {message}")
        self.stage = stage


class PdfRenderError(BrieflyError):
    """Headless browser failed to print the document."""

    status_code = 500


class PayloadValidationError(BrieflyError):
    """Malformed request payload (feedback, process body, options)."""

    status_code = 400
