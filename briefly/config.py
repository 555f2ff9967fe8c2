"""Centralized configuration for the Briefly NoteGen backend.

Re-exports everything from briefly.infrastructure.settings so existing imports
continue to work, then adds typed constants for uploads, the LLM gateway,
video extraction, the learning cache and PDF rendering. Environment variable
overrides use safe defaults so the app starts without extra env configuration.
"""

from __future__ import annotations

import os

from briefly.infrastructure.settings import *  # noqa: F401, F403

# --- App ---
APP_VERSION: str = "1.0.0"

# --- Uploads ---
MAX_UPLOAD_BYTES: int = int(os.getenv("BRIEFLY_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# --- LLM ---
# Attempts per model call; 1 means a failed call is never repeated.
LLM_MAX_RETRIES: int = int(os.getenv("BRIEFLY_LLM_MAX_RETRIES", "1"))
LLM_TIMEOUT_SECONDS: int = int(os.getenv("BRIEFLY_LLM_TIMEOUT", "120"))

# --- Video extraction ---
VIDEO_CAPTION_LANGUAGE: str = os.getenv("BRIEFLY_VIDEO_CAPTION_LANGUAGE", "en")
VIDEO_AUDIO_MAX_SECONDS: int = int(os.getenv("BRIEFLY_VIDEO_AUDIO_MAX_SECONDS", "600"))
VIDEO_METADATA_TIMEOUT: int = 30
VIDEO_DOWNLOAD_TIMEOUT: int = 300

# --- Learning cache ---
LEARNING_CACHE_BACKEND: str = os.getenv("BRIEFLY_LEARNING_CACHE_BACKEND", "file")
LEARNING_CACHE_PATH: str = os.getenv(
    "BRIEFLY_LEARNING_CACHE_PATH", os.path.join(os.getcwd(), "notegen-cache.json")
)
LEARNING_CACHE_MAX_ENTRIES: int = int(os.getenv("BRIEFLY_LEARNING_CACHE_MAX_ENTRIES", "10000"))
LEARNING_CACHE_MAX_AGE_DAYS: int = int(os.getenv("BRIEFLY_LEARNING_CACHE_MAX_AGE_DAYS", "90"))
CLASSIFICATION_CACHE_MIN_CONFIDENCE: float = 0.8
CLASSIFICATION_CACHE_STORE_CONFIDENCE: float = 0.7
DEFAULT_USER_ID: str = "default"

# --- PDF ---
PDF_RENDER_TIMEOUT_MS: int = int(os.getenv("BRIEFLY_PDF_RENDER_TIMEOUT_MS", "60000"))
PDF_DEFAULT_FORMAT: str = "A4"
PDF_DEFAULT_MARGIN: str = "15mm"
