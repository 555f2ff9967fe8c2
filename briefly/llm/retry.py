"""Shared LLM call with retry logic.

Provides the single function every model-call stage goes through. Each stage
wraps it in its own try/except to implement its final-failure policy
(PipelineStageError for the note stages, empty result for diagrams).

Transport errors from the Google SDKs are converted to built-in exception
types so tenacity can decide what is retryable. The attempt count comes from
LLM_MAX_RETRIES and defaults to a single attempt.
"""

from __future__ import annotations

from typing import Any

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from briefly.config import LLM_MAX_RETRIES, LLM_TIMEOUT_SECONDS
from briefly.infrastructure.settings import GEMINI_MAX_TOKENS, GEMINI_TEMPERATURE
from briefly.llm.gemini import build_media_part, get_gemini_model, request_kwargs
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter

logger = get_logger(__name__)


@retry(
    stop=stop_after_attempt(max(1, LLM_MAX_RETRIES)),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((TimeoutError, ConnectionError, OSError)),
    reraise=True,
)
def call_llm(
    prompt: str | list[Any],
    counter_prefix: str = "llm",
    model_name: str | None = None,
    system_instruction: str | None = None,
    json_output: bool = True,
) -> str:
    """Call Gemini once and return the response text.

    Args:
        prompt: Prompt text, or a list of parts (text and inline media).
        counter_prefix: Telemetry counter prefix (e.g., "classifier", "segmenter").
        model_name: Gemini model to use; defaults to GEMINI_MODEL.
        system_instruction: Optional system instruction.
        json_output: Ask the model for an application/json response.

    Returns:
        The model's response text.

    Raises:
        TimeoutError: On deadline exceeded (retryable).
        ConnectionError: On service unavailable or internal error (retryable).
        OSError: On resource exhausted / rate limited (retryable).
        Exception: On other errors (not retried, caller handles).
    """
    from google.api_core.exceptions import (
        DeadlineExceeded,
        InternalServerError,
        ResourceExhausted,
        ServiceUnavailable,
    )

    model = get_gemini_model(model_name, system_instruction)

    generation_config: dict[str, Any] = {
        "temperature": GEMINI_TEMPERATURE,
        "max_output_tokens": GEMINI_MAX_TOKENS,
    }

    # The JSON shape itself is declared in the prompt; the SDKs disagree on how
    # raw dict schemas are passed, so only the mime type is set here.
    if json_output:
        generation_config["response_mime_type"] = "application/json"

    try:
        response = model.generate_content(
            prompt,
            generation_config=generation_config,
            **request_kwargs(LLM_TIMEOUT_SECONDS),
        )
        text = response.text
    except DeadlineExceeded as e:
        counter(f"notegen.{counter_prefix}.timeout")
        logger.warning("LLM call timed out: %s", e)
        raise TimeoutError(f"LLM call timed out: {e}") from e
    except ServiceUnavailable as e:
        counter(f"notegen.{counter_prefix}.service_unavailable")
        logger.warning("LLM service unavailable: %s", e)
        raise ConnectionError(f"LLM service unavailable: {e}") from e
    except ResourceExhausted as e:
        counter(f"notegen.{counter_prefix}.rate_limited")
        logger.warning("LLM rate limited (429): %s", e)
        raise OSError(f"LLM rate limited: {e}") from e
    except InternalServerError as e:
        counter(f"notegen.{counter_prefix}.internal_error")
        logger.warning("LLM internal error (500): %s", e)
        raise ConnectionError(f"LLM internal error: {e}") from e
    except Exception as e:
        logger.error("LLM call failed: %s", e)
        raise

    if not text:
        raise ValueError("Empty response from Gemini model")
    return text


def call_llm_with_media(
    data: bytes,
    mime_type: str,
    instruction: str,
    counter_prefix: str = "media",
    model_name: str | None = None,
) -> str:
    """Send inline media bytes plus an instruction and return plain text."""
    # Initialize the model first so the media part matches the active backend
    get_gemini_model(model_name, None)
    parts = [build_media_part(data, mime_type), instruction]
    return call_llm(parts, counter_prefix=counter_prefix, model_name=model_name, json_output=False)
