"""
Content Acquirer - normalizes inbound content into plain text.

Uploads are dispatched by file extension; JSON payloads by their declared
content type. Unsupported extensions are rejected before any extraction
service is touched.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from briefly.config import MAX_UPLOAD_BYTES
from briefly.errors import UnsupportedInputError
from briefly.notes.models import ContentType, ProcessContentRequest
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event

logger = get_logger(__name__)

TEXT_EXTENSIONS = frozenset({".txt"})
PDF_EXTENSIONS = frozenset({".pdf"})
AUDIO_EXTENSIONS = frozenset({".mp3", ".wav", ".m4a"})
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS | PDF_EXTENSIONS | AUDIO_EXTENSIONS


@dataclass
class AcquiredContent:
    """Plain text plus the acquisition path it came through."""

    text: str
    content_type: ContentType
    file_name: str | None = None


def acquire_upload(file_name: str, data: bytes) -> AcquiredContent:
    """
    Extract text from an uploaded file.

    Raises:
        UnsupportedInputError: Unknown extension or payload over MAX_UPLOAD_BYTES
        ExtractionError: PDF without recoverable text
        TranscriptionError: Audio transcription failure
    """
    ext = os.path.splitext(file_name or "")[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        counter("notegen.acquire.unsupported")
        raise UnsupportedInputError("Unsupported file type")
    if len(data) > MAX_UPLOAD_BYTES:
        counter("notegen.acquire.too_large")
        raise UnsupportedInputError(
            f"File too large ({len(data)} bytes, limit {MAX_UPLOAD_BYTES} bytes)"
        )

    if ext in TEXT_EXTENSIONS:
        text = data.decode("utf-8", errors="replace")
        content_type = ContentType.TEXT
    elif ext in PDF_EXTENSIONS:
        from briefly.acquisition.pdf import extract_pdf_text

        text = extract_pdf_text(data)
        content_type = ContentType.PDF
    else:
        from briefly.acquisition.audio import AUDIO_MIME_TYPES, transcribe_audio

        text = transcribe_audio(data, AUDIO_MIME_TYPES[ext])
        content_type = ContentType.AUDIO

    if not text.strip():
        raise UnsupportedInputError("No content provided")

    counter(f"notegen.acquire.{content_type.value}")
    log_event("notegen.acquire.upload", extension=ext, bytes=len(data), chars=len(text))
    return AcquiredContent(text=text, content_type=content_type, file_name=file_name)


def acquire_payload(request: ProcessContentRequest) -> AcquiredContent:
    """
    Resolve a JSON content payload.

    Text, PDF and audio payloads already carry text and are used verbatim;
    a video_url payload is resolved through the video extractor.
    """
    content_type = ContentType(request.content_type)
    text = request.content
    if not text or not text.strip():
        raise UnsupportedInputError("No content provided")

    if content_type is ContentType.VIDEO_URL:
        from briefly.acquisition.video import extract_video_content

        text = extract_video_content(text)

    counter(f"notegen.acquire.{content_type.value}")
    log_event("notegen.acquire.payload", content_type=content_type.value, chars=len(text))
    return AcquiredContent(text=text, content_type=content_type, file_name=request.file_name)
