"""
Note Summarizer - single Gemini call behind ``POST /api/process``.

Turns acquired text into a title, summary, key points, action items and a
handful of visual cards. The response must match ``AiNoteResponse``; anything
else fails the request.
"""

from __future__ import annotations

from briefly.errors import PipelineStageError
from briefly.infrastructure.settings import GEMINI_MODEL
from briefly.notes.models import AiNoteResponse, ContentType
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event

logger = get_logger(__name__)


SUMMARIZER_SYSTEM_INSTRUCTION = """You are an expert note-taker who turns raw content into clear, structured study notes.

Respond with a single JSON object with exactly these keys:
{
  "title": "short descriptive title",
  "summary": "2-3 sentence summary of the content",
  "key_points": ["3-5 key points"],
  "action_items": ["3-5 concrete action items or next steps"],
  "visual_cards": [
    {"icon": "FontAwesome class, e.g. fas fa-lightbulb", "label": "short label", "value": "short value", "color": "blue|green|amber|red"}
  ]
}

Rules:
- key_points and action_items: 3 to 5 entries each
- visual_cards: 2 to 4 entries highlighting metrics or core concepts
- color must be one of blue, green, amber, red
- Do not wrap the JSON in markdown"""


class NoteSummarizer:
    """Generates the AI fields of a Note from acquired text."""

    PROMPT_TEMPLATE = """Content type: {content_type}

Content:
{content}"""

    def _call_llm(self, prompt: str) -> str:
        from briefly.llm.retry import call_llm

        return call_llm(
            prompt,
            counter_prefix="summarizer",
            system_instruction=SUMMARIZER_SYSTEM_INSTRUCTION,
        )

    def summarize(self, content: str, content_type: ContentType | str) -> AiNoteResponse:
        """
        Summarize content into note fields.

        Raises:
            PipelineStageError: On any model, parse or shape failure.

        Side Effects:
            - Calls Gemini API
            - Increments telemetry counters
        """
        from briefly.llm.parsing import validate_payload

        kind = ContentType(content_type).value
        prompt = self.PROMPT_TEMPLATE.format(content_type=kind, content=content)

        try:
            logger.info("SUMMARIZER: Calling %s for %s content (%d chars)", GEMINI_MODEL, kind, len(content))
            response_text = self._call_llm(prompt)
            result = validate_payload(response_text, AiNoteResponse)
        except Exception as e:
            counter("notegen.summarizer.error")
            logger.error("SUMMARIZER ERROR: %s", e)
            log_event("notegen.summarizer.error", error=str(e), content_type=kind)
            raise PipelineStageError("summarizer", str(e)) from e

        counter("notegen.summarizer.success")
        log_event(
            "notegen.summarizer.result",
            content_type=kind,
            key_points=len(result.key_points),
            visual_cards=len(result.visual_cards),
        )
        return result
