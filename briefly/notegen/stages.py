"""
Model-call stages of the study-notes pipeline.

Classifier -> Segmenter -> Formatter -> Layout Designer. Each stage builds a
prompt, calls Gemini once, and validates the JSON it gets back against the
stage's pydantic model. Any remote failure, unparseable JSON or shape
mismatch raises PipelineStageError naming the stage; nothing is retried at
this level and no partial result is returned.

Input size is never checked locally; the model's context window is the only
bound.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

from briefly.config import (
    CLASSIFICATION_CACHE_MIN_CONFIDENCE,
    CLASSIFICATION_CACHE_STORE_CONFIDENCE,
)
from briefly.errors import PipelineStageError
from briefly.infrastructure.settings import GEMINI_MODEL, GEMINI_PRO_MODEL
from briefly.learning.cache import LearningCache
from briefly.notegen.models import (
    Classification,
    DesignedLayout,
    FormattedNotes,
    SegmentedContent,
)
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event, time_block

logger = get_logger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)

# Formatted notes are cut to this many characters before layout design
LAYOUT_INPUT_CHARS = 1000


class ModelStage(Generic[ResultT]):
    """
    One Gemini call with a declared JSON shape.

    Subclasses set ``name``, ``model_name``, ``response_model`` and
    ``system_instruction``, and expose a typed public method that builds the
    prompt and calls ``_invoke``.
    """

    name: str = "stage"
    model_name: str = GEMINI_MODEL
    response_model: type[ResultT]
    system_instruction: str | None = None

    def __init__(self, learning: LearningCache):
        self.learning = learning
        self.last_elapsed_ms: float = 0.0

    def _call_llm(self, prompt: str) -> str:
        from briefly.llm.retry import call_llm

        return call_llm(
            prompt,
            counter_prefix=self.name,
            model_name=self.model_name,
            system_instruction=self.system_instruction,
        )

    def _invoke(self, prompt: str) -> ResultT:
        """
        Call the model once and validate the response.

        Raises:
            PipelineStageError: On any model, parse or shape failure.
        """
        from briefly.llm.parsing import validate_payload

        logger.info("%s: calling %s (%d prompt chars)", self.name.upper(), self.model_name, len(prompt))
        try:
            with time_block(f"notegen.{self.name}") as timing:
                response_text = self._call_llm(prompt)
                result = validate_payload(response_text, self.response_model)
        except Exception as e:
            counter(f"notegen.{self.name}.error")
            logger.error("%s ERROR: %s (model=%s)", self.name.upper(), e, self.model_name)
            log_event(f"notegen.{self.name}.error", error=str(e), model=self.model_name)
            raise PipelineStageError(self.name, str(e)) from e

        self.last_elapsed_ms = timing["elapsed_ms"]
        counter(f"notegen.{self.name}.success")
        log_event(
            f"notegen.{self.name}.result",
            model=self.model_name,
            elapsed_ms=round(self.last_elapsed_ms),
        )
        return result


# =============================================================================
# Classifier
# =============================================================================

CLASSIFIER_SYSTEM_INSTRUCTION = """You classify study material so it can be turned into notes.

Respond with a single JSON object:
{
  "subject": "main academic subject with subcategory, e.g. biology - plant physiology",
  "tone": "writing style, e.g. formal, casual, academic, conversational",
  "language": "language and regional variant, e.g. en-US",
  "tags": ["5 to 10 relevant tags"],
  "difficulty": "beginner | intermediate | advanced",
  "content_category": "academic | business | creative | technical",
  "visual_complexity": "simple | moderate | complex",
  "confidence": 0.0
}

confidence is your certainty in the classification, from 0.0 to 1.0."""


class ClassifierStage(ModelStage[Classification]):
    name = "classifier"
    response_model = Classification
    system_instruction = CLASSIFIER_SYSTEM_INSTRUCTION

    PROMPT_TEMPLATE = """Previously learned subjects: {recent_subjects}

Content:
{content}"""

    def classify(self, content: str) -> Classification:
        """
        Classify content, reusing a confident cached result when available.

        Side Effects:
            - Stores confident classifications in the learning cache
            - Records a classifier performance metric
        """
        cached = self.learning.cached_classification(content, CLASSIFICATION_CACHE_MIN_CONFIDENCE)
        if cached is not None:
            counter("notegen.classifier.cache_hit")
            logger.info("CLASSIFIER: using cached classification (subject=%s)", cached.subject)
            return cached

        recent = self.learning.recent_subjects(3)
        prompt = self.PROMPT_TEMPLATE.format(
            recent_subjects=", ".join(recent) or "none",
            content=content,
        )
        result = self._invoke(prompt)

        self.learning.remember_classification(content, result, CLASSIFICATION_CACHE_STORE_CONFIDENCE)
        self.learning.record_metric(
            "classifier",
            self.last_elapsed_ms,
            input_size=len(content),
            output_quality=result.confidence * 10,
        )
        logger.info(
            "CLASSIFIER RESULT: subject=%s difficulty=%s confidence=%.2f",
            result.subject,
            result.difficulty,
            result.confidence,
        )
        return result


# =============================================================================
# Segmenter
# =============================================================================

SEGMENTER_SYSTEM_INSTRUCTION = """You break study material into typed note sections.

Respond with a single JSON object:
{
  "title": "engaging, memorable title",
  "sections": [
    {
      "type": "heading | bullet | definition | example | formula | callout | diagram | summary",
      "content": "clear, student-friendly text",
      "level": 1,
      "style": "optional visual style hint",
      "importance": "high | medium | low",
      "visual_hint": "optional suggestion for a visual element"
    }
  ],
  "structure": "linear | hierarchical | network",
  "estimated_read_time": 5
}

level is the hierarchy depth (1-4). estimated_read_time is in minutes."""


class SegmenterStage(ModelStage[SegmentedContent]):
    name = "segmenter"
    model_name = GEMINI_PRO_MODEL
    response_model = SegmentedContent
    system_instruction = SEGMENTER_SYSTEM_INSTRUCTION

    PROMPT_TEMPLATE = """Create segmented notes for {subject} content with {visual_complexity} visual complexity.
Optimize for {difficulty} learners in a {content_category} context.
Write the notes in language: {language}.
Layout styles that worked before: {layout_styles}

Content:
{content}"""

    def segment(
        self, content: str, classification: Classification, language: str = "en"
    ) -> SegmentedContent:
        prompt = self.PROMPT_TEMPLATE.format(
            subject=classification.subject,
            visual_complexity=classification.visual_complexity,
            difficulty=classification.difficulty,
            content_category=classification.content_category,
            language=language,
            layout_styles=", ".join(self.learning.recent_layout_styles(2)) or "none",
            content=content,
        )
        result = self._invoke(prompt)
        logger.info(
            "SEGMENTER RESULT: %d sections, structure=%s, read_time=%s min",
            len(result.sections),
            result.structure,
            result.estimated_read_time,
        )
        return result


# =============================================================================
# Formatter
# =============================================================================

FORMATTER_SYSTEM_INSTRUCTION = """You decorate segmented study notes for a premium visual design.

Themes by subject:
- Science: aurora gradients (blue/teal/purple)
- Math: geometric (purple/gold/silver)
- History: vintage (sepia/gold/burgundy)
- Language: nature-inspired (green/earth tones)
- Business: professional (navy/silver/accent)
- Art: creative (rainbow/pastels/bold)

Respond with a single JSON object:
{
  "title": "note title",
  "emoji": "one emoji for the whole document",
  "color_theme": "short theme label",
  "design_language": "font pairing / design language label",
  "sections": [
    {
      "type": "same type as the input section",
      "content": "section text",
      "emoji": "optional emoji",
      "color": "optional CSS color",
      "highlights": ["key terms to highlight"],
      "level": 1
    }
  ]
}"""


class FormatterStage(ModelStage[FormattedNotes]):
    name = "formatter"
    response_model = FormattedNotes
    system_instruction = FORMATTER_SYSTEM_INSTRUCTION

    PROMPT_TEMPLATE = """Subject: {subject} ({content_category})
Difficulty: {difficulty}
Visual complexity: {visual_complexity}
{template_hint}
Input:
{segmented}"""

    def format_notes(self, segmented: SegmentedContent, classification: Classification) -> FormattedNotes:
        """
        Decorate segmented notes.

        Side Effects:
            - Creates or refreshes the ``<subject>_<difficulty>`` design template
        """
        template = self.learning.best_template(classification.subject)
        template_hint = ""
        if template is not None:
            template_hint = (
                f"Use successful template: {template.color_scheme} with {template.layout_style}\n"
            )

        prompt = self.PROMPT_TEMPLATE.format(
            subject=classification.subject,
            content_category=classification.content_category,
            difficulty=classification.difficulty,
            visual_complexity=classification.visual_complexity,
            template_hint=template_hint,
            segmented=segmented.model_dump_json(),
        )
        result = self._invoke(prompt)

        self.learning.record_template(
            subject=classification.subject,
            difficulty=classification.difficulty,
            color_scheme=result.color_theme,
            font_combination=result.design_language,
            layout_style=segmented.structure,
        )
        return result


# =============================================================================
# Layout Designer
# =============================================================================

LAYOUT_SYSTEM_INSTRUCTION = """You design print layouts for study notes.

Font pairings:
- Academic: "Inter" + "JetBrains Mono" + "Playfair Display"
- Creative: "Poppins" + "Fira Code" + "Dancing Script"
- Professional: "Source Sans Pro" + "Source Code Pro" + "Merriweather"
- Playful: "Nunito" + "Ubuntu Mono" + "Pacifico"

Use golden-ratio spacing and a typographic scale (1.25, 1.333 or 1.414).

Respond with a single JSON object:
{
  "title": "note title",
  "theme": "theme label",
  "layout_blocks": [
    {
      "type": "heading | bullet | definition | example | formula | callout | diagram | summary",
      "content": "block text, optionally starting with an emoji",
      "position": {"x": 0, "y": 0, "width": 100, "height": 10},
      "style": {"font_family": "Inter", "font_size": 16, "color": "#1f2937",
                "background": "optional", "border": "optional", "padding": 8}
    }
  ],
  "style_config": {
    "page_size": "A4",
    "margins": {"top": 40, "right": 40, "bottom": 40, "left": 40},
    "font_families": {"heading": "Playfair Display", "body": "Inter", "accent": "Dancing Script", "code": "JetBrains Mono"},
    "color_palette": {"primary": "#2563eb", "secondary": "#7c3aed", "accent": "#f59e0b", "background": "#ffffff", "gradient": "optional CSS gradient"},
    "spacing_system": [4, 8, 16, 24, 32],
    "typography_scale": [1, 1.25, 1.563, 1.953]
  }
}"""


class LayoutDesignerStage(ModelStage[DesignedLayout]):
    name = "layout_designer"
    model_name = GEMINI_PRO_MODEL
    response_model = DesignedLayout
    system_instruction = LAYOUT_SYSTEM_INSTRUCTION

    PROMPT_TEMPLATE = """Input theme: {theme}
Content: {content}..."""

    def design(self, formatted: FormattedNotes) -> DesignedLayout:
        prompt = self.PROMPT_TEMPLATE.format(
            theme=formatted.color_theme,
            content=formatted.model_dump_json()[:LAYOUT_INPUT_CHARS],
        )
        result = self._invoke(prompt)
        logger.info("LAYOUT DESIGNER RESULT: %d blocks, theme=%s", len(result.layout_blocks), result.theme)
        return result
