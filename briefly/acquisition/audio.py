"""Audio transcription through Gemini with inline audio bytes."""

from __future__ import annotations

from briefly.errors import TranscriptionError
from briefly.infrastructure.settings import GEMINI_PRO_MODEL
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter

logger = get_logger(__name__)

AUDIO_MIME_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
}

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe this audio accurately. Return only the spoken content as plain text, "
    "without timestamps, speaker labels or commentary."
)


def transcribe_audio(data: bytes, mime_type: str) -> str:
    """
    Transcribe audio bytes to text.

    Raises:
        TranscriptionError: On any model failure or an empty transcript.
    """
    from briefly.llm.retry import call_llm_with_media

    try:
        transcript = call_llm_with_media(
            data,
            mime_type,
            TRANSCRIPTION_INSTRUCTION,
            counter_prefix="transcription",
            model_name=GEMINI_PRO_MODEL,
        )
    except Exception as e:
        counter("notegen.acquire.transcription_error")
        logger.error("Audio transcription failed (%s, %d bytes): %s", mime_type, len(data), e)
        raise TranscriptionError(
            f"Failed to transcribe audio: {e}. Please check that GEMINI_API_KEY is configured."
        ) from e

    transcript = transcript.strip()
    if not transcript:
        raise TranscriptionError(
            "Audio transcription returned no text. Please check that GEMINI_API_KEY is configured."
        )

    counter("notegen.acquire.transcription_success")
    logger.info("Transcribed %d bytes of %s into %d chars", len(data), mime_type, len(transcript))
    return transcript
