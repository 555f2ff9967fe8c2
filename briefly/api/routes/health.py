"""Health check endpoint for the Briefly API.

Liveness probe; reports Gemini credential presence without calling the API.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from briefly.config import APP_VERSION, GEMINI_API_KEY, GOOGLE_CLOUD_PROJECT

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict[str, Any]:
    has_api_key = bool(GEMINI_API_KEY)
    has_project = bool(GOOGLE_CLOUD_PROJECT)

    return {
        "status": "healthy",
        "service": "Briefly NoteGen API",
        "version": APP_VERSION,
        "timestamp": datetime.now(UTC).isoformat(),
        "llm": {
            "ready": has_api_key or has_project,
            "gemini_api_key": has_api_key,
            "google_cloud_project": has_project,
        },
    }
