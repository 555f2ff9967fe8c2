"""
Video content extraction.

Order of attempts:
  1. Metadata via ``yt-dlp --dump-json`` (title, channel, description); failure tolerated
  2. Captions via youtube-transcript-api (manual > generated > any language)
  3. Audio via ``yt-dlp -x`` capped at VIDEO_AUDIO_MAX_SECONDS, transcribed by Gemini
  4. Placeholder document naming the URL and why nothing could be extracted

This path never raises for an unreachable video; the caller always gets text.
"""

from __future__ import annotations

import glob
import json
import os
import re
import subprocess
import tempfile
from typing import Any

from briefly.config import (
    VIDEO_AUDIO_MAX_SECONDS,
    VIDEO_CAPTION_LANGUAGE,
    VIDEO_DOWNLOAD_TIMEOUT,
    VIDEO_METADATA_TIMEOUT,
)
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event

logger = get_logger(__name__)

_VIDEO_ID_PATTERNS = [
    re.compile(r"(?:v=|/videos/|embed/|youtu\.be/|/v/|/e/|shorts/)([A-Za-z0-9_-]{11})"),
    re.compile(r"^([A-Za-z0-9_-]{11})$"),
]


def extract_video_id(url: str) -> str | None:
    """Return the YouTube video id in ``url``, if any."""
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(url.strip())
        if match:
            return match.group(1)
    return None


def fetch_video_metadata(url: str) -> dict[str, Any]:
    """Fetch title/channel/description with yt-dlp. Returns {} on any failure."""
    try:
        result = subprocess.run(
            ["yt-dlp", "--dump-json", "--no-download", "--no-warnings", "--no-playlist", url],
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=VIDEO_METADATA_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("yt-dlp metadata lookup failed for %s: %s", url, e)
        return {}

    if result.returncode != 0 or not result.stdout:
        logger.warning("yt-dlp metadata lookup returned %s for %s", result.returncode, url)
        return {}

    try:
        data = json.loads(result.stdout)
    except json.JSONDecodeError:
        return {}
    return {
        "title": data.get("title") or "",
        "channel": data.get("channel") or data.get("uploader") or "",
        "description": data.get("description") or "",
    }


def fetch_captions(video_id: str, preferred_lang: str = VIDEO_CAPTION_LANGUAGE) -> str | None:
    """
    Fetch captions for a YouTube video as plain text.

    Priority: manual (preferred language, then English), generated (same
    order), then whatever track exists.
    """
    from youtube_transcript_api import YouTubeTranscriptApi
    from youtube_transcript_api._errors import NoTranscriptFound, TranscriptsDisabled

    languages = [preferred_lang] if preferred_lang == "en" else [preferred_lang, "en"]
    try:
        transcript_list = YouTubeTranscriptApi().list(video_id)
        transcript = None
        try:
            transcript = transcript_list.find_manually_created_transcript(languages)
        except NoTranscriptFound:
            try:
                transcript = transcript_list.find_generated_transcript(languages)
            except NoTranscriptFound:
                transcript = next(iter(transcript_list), None)
        if transcript is None:
            return None
        snippets = transcript.fetch()
    except TranscriptsDisabled:
        logger.info("Captions disabled for video %s", video_id)
        return None
    except Exception as e:
        logger.warning("Caption lookup failed for video %s: %s", video_id, e)
        return None

    lines = []
    for item in snippets:
        text = item.text if hasattr(item, "text") else item.get("text", "")
        text = text.strip()
        if text and not (text.startswith("[") and text.endswith("]")):
            lines.append(text)
    return " ".join(lines) or None


def download_audio(url: str, max_seconds: int = VIDEO_AUDIO_MAX_SECONDS) -> bytes | None:
    """Download the first ``max_seconds`` of audio as mp3 bytes with yt-dlp."""
    with tempfile.TemporaryDirectory(prefix="briefly-video-") as tmp_dir:
        output_template = os.path.join(tmp_dir, "audio.%(ext)s")
        try:
            result = subprocess.run(
                [
                    "yt-dlp",
                    "-x",
                    "--audio-format",
                    "mp3",
                    "--no-playlist",
                    "--no-warnings",
                    "--download-sections",
                    f"*0-{max_seconds}",
                    "-o",
                    output_template,
                    url,
                ],
                capture_output=True,
                text=True,
                timeout=VIDEO_DOWNLOAD_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("yt-dlp audio download failed for %s: %s", url, e)
            return None

        if result.returncode != 0:
            logger.warning("yt-dlp audio download returned %s for %s", result.returncode, url)
            return None

        files = sorted(glob.glob(os.path.join(tmp_dir, "audio.*")))
        if not files:
            return None
        with open(files[0], "rb") as f:
            return f.read()


def _format_document(url: str, metadata: dict[str, Any], body: str, source: str) -> str:
    parts = []
    if metadata.get("title"):
        parts.append(f"Video: {metadata['title']}")
    if metadata.get("channel"):
        parts.append(f"Channel: {metadata['channel']}")
    parts.append(f"URL: {url}")
    parts.append(f"Transcript source: {source}")
    if metadata.get("description"):
        parts.append(f"\nDescription:\n{metadata['description']}")
    parts.append(f"\nTranscript:\n{body}")
    return "\n".join(parts)


def _placeholder_document(url: str, metadata: dict[str, Any], reason: str) -> str:
    title = metadata.get("title") or "Unknown video"
    lines = [
        f"Video: {title}",
        f"URL: {url}",
        "",
        "The content of this video could not be extracted automatically.",
        f"Reason: {reason}",
    ]
    if metadata.get("description"):
        lines += ["", "Description:", metadata["description"]]
    return "\n".join(lines)


def extract_video_content(url: str) -> str:
    """
    Turn a video URL into a text document.

    Returns:
        Transcript document, or a placeholder explaining why none was available
    """
    from briefly.acquisition.audio import transcribe_audio
    from briefly.errors import TranscriptionError

    url = url.strip()
    metadata = fetch_video_metadata(url)

    video_id = extract_video_id(url)
    if video_id:
        captions = fetch_captions(video_id)
        if captions:
            counter("notegen.acquire.video_captions")
            log_event("notegen.acquire.video", source="captions", chars=len(captions))
            return _format_document(url, metadata, captions, "captions")

    audio = download_audio(url)
    if audio:
        try:
            transcript = transcribe_audio(audio, "audio/mpeg")
        except TranscriptionError as e:
            logger.warning("Video audio transcription failed for %s: %s", url, e)
            reason = "no captions were found and the audio could not be transcribed"
        else:
            counter("notegen.acquire.video_audio")
            log_event("notegen.acquire.video", source="audio", chars=len(transcript))
            return _format_document(url, metadata, transcript, "audio transcription")
    else:
        reason = "no captions were found and the audio could not be downloaded"

    counter("notegen.acquire.video_placeholder")
    log_event("notegen.acquire.video", source="placeholder", reason=reason)
    return _placeholder_document(url, metadata, reason)
