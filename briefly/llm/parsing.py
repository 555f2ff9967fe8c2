"""JSON parsing and shape validation for model responses.

Every model-call stage declares the JSON shape it wants in its prompt. The
response is parsed here and validated against the stage's pydantic model;
anything that does not match is rejected (fail closed) instead of being
passed downstream.
"""

from __future__ import annotations

import json
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


class ResponseShapeError(ValueError):
    """Model response is not JSON or does not match the declared shape."""


def parse_json_payload(text: str) -> Any:
    """Parse a model response as JSON.

    Handles markdown code fences and leading/trailing chatter around a single
    top-level object.

    Raises:
        ResponseShapeError: If no JSON document can be recovered.
    """
    json_text = (text or "").strip()
    if not json_text:
        raise ResponseShapeError("Empty response from model")

    if json_text.startswith("```"):
        counter("notegen.parse.code_fence_fallback")
        json_text = _FENCE_OPEN.sub("", json_text)
        json_text = _FENCE_CLOSE.sub("", json_text).strip()

    try:
        return json.loads(json_text)
    except json.JSONDecodeError as first_error:
        start = json_text.find("{")
        end = json_text.rfind("}")
        if start == -1 or end <= start:
            raise ResponseShapeError(f"Invalid JSON: {first_error}") from first_error
        try:
            return json.loads(json_text[start : end + 1])
        except json.JSONDecodeError as e:
            raise ResponseShapeError(f"Invalid JSON: {e}") from e


def validate_payload(text: str, model: type[ModelT]) -> ModelT:
    """Parse ``text`` and validate it against ``model``.

    Raises:
        ResponseShapeError: On parse failure or shape mismatch.
    """
    data = parse_json_payload(text)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        counter("notegen.parse.shape_mismatch")
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors()[:5])
        logger.warning("Response does not match %s: %s", model.__name__, fields)
        raise ResponseShapeError(f"Response does not match {model.__name__} ({fields})") from e
