"""
Gemini Model Manager - cached model instances shared by every stage.

Supports two backends:
  1. google-generativeai (default): uses GEMINI_API_KEY (or GOOGLE_API_KEY)
  2. Vertex AI SDK: used when only GOOGLE_CLOUD_PROJECT is configured
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from briefly.infrastructure.settings import GEMINI_LOCATION, GEMINI_MODEL, GOOGLE_CLOUD_PROJECT
from briefly.observability.logging import get_logger

logger = get_logger(__name__)

# Track which backend is active so media parts can be built for it
_backend: str | None = None  # "genai" or "vertexai"


class GeminiInitializationError(RuntimeError):
    """Raised when Gemini model cannot be initialized."""


def _api_key() -> str | None:
    # Read env vars fresh (settings.py may have stale values if loaded before dotenv)
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")


@lru_cache(maxsize=16)
def get_gemini_model(model_name: str | None = None, system_instruction: str | None = None):
    """
    Get or create a Gemini model instance.

    System instructions are per-model-instance in the Gemini API, so the cache
    is keyed by (model_name, system_instruction).

    Returns:
        GenerativeModel for the active backend

    Raises:
        GeminiInitializationError: If no credentials or SDK are available
    """
    global _backend
    name = model_name or GEMINI_MODEL

    api_key = _api_key()
    if api_key:
        try:
            import google.generativeai as genai
        except ImportError as e:
            raise GeminiInitializationError(
                "google-generativeai is not installed. Install it or unset GEMINI_API_KEY."
            ) from e

        genai.configure(api_key=api_key)
        _backend = "genai"
        logger.info("Initialized Gemini model (google-generativeai): model=%s", name)
        return genai.GenerativeModel(name, system_instruction=system_instruction)

    project = os.getenv("GOOGLE_CLOUD_PROJECT") or GOOGLE_CLOUD_PROJECT
    if not project:
        raise GeminiInitializationError(
            "Neither GEMINI_API_KEY nor GOOGLE_CLOUD_PROJECT is set. "
            "Set GEMINI_API_KEY to call the Gemini API."
        )

    try:
        import vertexai
        from vertexai.generative_models import GenerativeModel
    except ImportError as e:
        raise GeminiInitializationError(
            "No Gemini SDK available. Install google-generativeai or google-cloud-aiplatform."
        ) from e

    location = os.getenv("GEMINI_LOCATION", "") or GEMINI_LOCATION
    try:
        vertexai.init(project=project, location=location)
    except Exception as e:
        logger.error("Failed to initialize Vertex AI: %s", e)
        raise GeminiInitializationError(f"Failed to initialize Gemini: {e}") from e

    _backend = "vertexai"
    logger.info(
        "Initialized Gemini model (Vertex AI): project=%s, location=%s, model=%s",
        project,
        location,
        name,
    )
    return GenerativeModel(name, system_instruction=system_instruction)


def build_media_part(data: bytes, mime_type: str) -> Any:
    """Wrap raw bytes as an inline-data part for the active backend."""
    if _backend == "vertexai":
        from vertexai.generative_models import Part

        return Part.from_data(data=data, mime_type=mime_type)
    return {"mime_type": mime_type, "data": data}



def request_kwargs(timeout_seconds: int) -> dict[str, Any]:
    """Extra ``generate_content`` kwargs; only google-generativeai takes a request timeout."""
    if _backend == "genai":
        return {"request_options": {"timeout": timeout_seconds}}
    return {}
