"""
Study Notes Pipeline - orchestrates the four model-call stages and the renderer.

Pipeline:
1. ClassifierStage      -> subject, tone, difficulty (cached when confident)
2. SegmenterStage       -> typed sections
3. FormatterStage       -> emoji, color theme, highlights
4. LayoutDesignerStage  -> positioned, styled layout blocks
5. render_designed_notes -> HTML (deterministic, no model call)

Stages run strictly in order. Any stage failure aborts the run with a
PipelineStageError; there is no partial result. PDF export is left to the
caller so the HTML path never starts a browser.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from briefly.learning.cache import LearningCache
from briefly.notegen.models import Classification, NoteGenOptions
from briefly.notegen.renderer import render_designed_notes
from briefly.notegen.stages import (
    ClassifierStage,
    FormatterStage,
    LayoutDesignerStage,
    SegmenterStage,
)
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event, time_block
from briefly.utils.filenames import notes_filename

logger = get_logger(__name__)


@dataclass
class StudyNotesResult:
    """Output of one successful pipeline run."""

    html: str
    filename: str
    title: str
    classification: Classification
    processing_time_ms: float


class StudyNotesPipeline:
    """Classifier -> Segmenter -> Formatter -> Layout Designer -> Renderer."""

    def __init__(self, learning: LearningCache):
        self.learning = learning
        self.classifier = ClassifierStage(learning)
        self.segmenter = SegmenterStage(learning)
        self.formatter = FormatterStage(learning)
        self.layout_designer = LayoutDesignerStage(learning)

    def run(
        self,
        content: str,
        options: NoteGenOptions | None = None,
        generated_on: date | None = None,
    ) -> StudyNotesResult:
        """
        Generate study-notes HTML for ``content``.

        Args:
            content: Acquired plain text
            options: Rendering options; defaults to NoteGenOptions()
            generated_on: Footer date; defaults to today

        Returns:
            StudyNotesResult with HTML and a ``*_study_notes.pdf`` filename

        Raises:
            PipelineStageError: If any model-call stage fails

        Side Effects:
            - Calls Gemini API (up to 4 calls)
            - Updates and saves the learning cache
        """
        options = options or NoteGenOptions()
        counter("notegen.pipeline.started")
        logger.info("STUDY NOTES START: %d chars", len(content))

        with time_block("notegen.pipeline") as timing:
            classification = self.classifier.classify(content)
            segmented = self.segmenter.segment(content, classification, language=options.language)
            formatted = self.formatter.format_notes(segmented, classification)
            designed = self.layout_designer.design(formatted)
            html = render_designed_notes(
                designed,
                options,
                generated_on=generated_on or date.today(),
                document_emoji=formatted.emoji,
            )

        elapsed_ms = timing["elapsed_ms"]
        title = formatted.title or designed.title
        self.learning.record_metric(
            "full_pipeline",
            elapsed_ms,
            input_size=len(content),
            output_quality=min(10.0, 5.0 + len(designed.layout_blocks) / 5),
            user_satisfaction=9.0,
        )
        self.learning.save()

        counter("notegen.pipeline.completed")
        log_event(
            "notegen.pipeline.completed",
            subject=classification.subject,
            sections=len(segmented.sections),
            blocks=len(designed.layout_blocks),
            elapsed_ms=round(elapsed_ms),
        )
        return StudyNotesResult(
            html=html,
            filename=notes_filename(title, "study_notes"),
            title=title,
            classification=classification,
            processing_time_ms=elapsed_ms,
        )
