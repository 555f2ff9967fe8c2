"""
Request body parsing shared by the note and notegen routes.

Two submission shapes are accepted:
- multipart/form-data with a ``file`` part (or a ``content`` field), plus
  optional ``contentType``, ``fileName``, ``title`` and ``options`` (JSON string)
- application/json ``{content, contentType, fileName?, title?, options?}``

Either way the content goes through the acquirer; extraction runs in the
threadpool because PDF parsing, transcription and video fetches block.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any

from fastapi import Request
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from briefly.acquisition.acquirer import AcquiredContent, acquire_payload, acquire_upload
from briefly.config import MAX_UPLOAD_BYTES
from briefly.errors import PayloadValidationError, UnsupportedInputError
from briefly.notegen.models import NoteGenOptions
from briefly.notes.models import ProcessContentRequest
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter

logger = get_logger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@dataclass
class Submission:
    acquired: AcquiredContent
    options: NoteGenOptions = field(default_factory=NoteGenOptions)
    title: str | None = None

    @property
    def file_stem(self) -> str | None:
        if not self.acquired.file_name:
            return None
        return os.path.splitext(os.path.basename(self.acquired.file_name))[0] or None


def _first_error(e: ValidationError) -> str:
    first = e.errors()[0]
    location = ".".join(str(p) for p in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def parse_options(raw: Any) -> NoteGenOptions:
    """Options arrive as a dict (JSON body) or a JSON string (multipart)."""
    if raw is None or raw == "":
        return NoteGenOptions()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raise PayloadValidationError("Invalid options: not valid JSON") from None
    if not isinstance(raw, dict):
        raise PayloadValidationError("Invalid options: expected an object")
    try:
        return NoteGenOptions.model_validate(raw)
    except ValidationError as e:
        raise PayloadValidationError(f"Invalid options: {_first_error(e)}") from None


def _content_request(fields: dict[str, Any]) -> ProcessContentRequest:
    content = fields.get("content")
    if not isinstance(content, str) or not content.strip():
        raise UnsupportedInputError("No content provided")
    try:
        return ProcessContentRequest.model_validate(
            {
                "content": content,
                "contentType": fields.get("contentType") or "text",
                "fileName": fields.get("fileName") or None,
            }
        )
    except ValidationError as e:
        raise PayloadValidationError(f"Invalid request: {_first_error(e)}") from None


async def read_json_object(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise PayloadValidationError("Request body must be valid JSON") from None
    if not isinstance(body, dict):
        raise PayloadValidationError("Request body must be a JSON object")
    return body


async def _read_upload(upload: UploadFile) -> bytes:
    """
    Read an uploaded file, refusing anything over MAX_UPLOAD_BYTES.

    At most MAX_UPLOAD_BYTES + 1 bytes are ever held in memory.
    """
    if upload.size is not None and upload.size > MAX_UPLOAD_BYTES:
        counter("notegen.acquire.too_large")
        raise UnsupportedInputError(_too_large(upload.size))
    data = await upload.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        counter("notegen.acquire.too_large")
        raise UnsupportedInputError(_too_large(len(data)))
    return data


def _too_large(size: int) -> str:
    return f"File too large ({size} bytes, limit {MAX_UPLOAD_BYTES} bytes)"


async def read_submission(request: Request) -> Submission:
    """
    Parse and acquire the submitted content.

    Raises:
        UnsupportedInputError: Unknown file type or no content
        PayloadValidationError: Malformed body or options
        ExtractionError / TranscriptionError: Acquisition failure
    """
    content_type_header = request.headers.get("content-type", "")

    if content_type_header.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        options = parse_options(form.get("options"))
        title = form.get("title") if isinstance(form.get("title"), str) else None
        upload = form.get("file")
        if isinstance(upload, UploadFile):
            data = await _read_upload(upload)
            acquired = await run_in_threadpool(acquire_upload, upload.filename or "", data)
        else:
            fields = {key: value for key, value in form.items() if isinstance(value, str)}
            acquired = await run_in_threadpool(acquire_payload, _content_request(fields))
    else:
        body = await read_json_object(request)
        options = parse_options(body.get("options"))
        title = body.get("title") if isinstance(body.get("title"), str) else None
        acquired = await run_in_threadpool(acquire_payload, _content_request(body))

    logger.info(
        "SUBMISSION: type=%s chars=%d file=%s",
        acquired.content_type.value,
        len(acquired.text),
        acquired.file_name,
    )
    return Submission(acquired=acquired, options=options, title=title or None)
