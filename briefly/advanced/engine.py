"""
Advanced Note Engine - layout, styling and diagram agents plus the designer.

Pipeline:
1. LayoutAgent   -> headings, bullets, paragraphs, diagram suggestions
2. StylingAgent  -> colors, emphasis and importance per element
3. DiagramAgent  -> Mermaid diagrams (empty list on failure or when disabled)
4. NoteDesigner  -> HTML (deterministic), optionally printed to PDF

Layout and styling failures abort the run with PipelineStageError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from briefly.advanced.agents import DiagramAgent, LayoutAgent, StylingAgent
from briefly.advanced.designer import NoteDesigner
from briefly.learning.cache import LearningCache
from briefly.notegen.models import NoteGenOptions
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event, time_block
from briefly.pdf.exporter import PdfExporter
from briefly.utils.filenames import notes_filename

logger = get_logger(__name__)

AGENT_PIPELINE = [
    {
        "agent": "Layout Designer",
        "description": "Converts raw text into headings, bullets, paragraphs and diagram suggestions",
    },
    {
        "agent": "Styling Designer",
        "description": "Applies highlight colors and emphasis by element type and importance",
    },
    {
        "agent": "Diagram Generator",
        "description": "Generates Mermaid flowcharts, cycles, hierarchies, timelines and mind maps",
    },
    {
        "agent": "PDF Note Designer",
        "description": "Renders the styled notes as a notebook-style page and prints it to PDF",
    },
]


@dataclass
class AdvancedNotesResult:
    html: str
    filename: str
    title: str
    pdf_bytes: bytes | None = None
    processing_metrics: dict[str, int] = field(default_factory=dict)


class AdvancedNoteEngine:
    """Coordinates the three agents and the designer."""

    def __init__(self, learning: LearningCache, exporter: PdfExporter | None = None):
        self.learning = learning
        self.exporter = exporter or PdfExporter()
        self.layout_agent = LayoutAgent(learning)
        self.styling_agent = StylingAgent(learning)
        self.diagram_agent = DiagramAgent(learning)
        self.designer = NoteDesigner()

    def generate(
        self,
        content: str,
        options: NoteGenOptions | None = None,
        title: str | None = None,
        generated_on: date | None = None,
    ) -> AdvancedNotesResult:
        """
        Generate advanced notes for ``content``.

        Args:
            content: Acquired plain text
            options: Options; ``generate_pdf`` also prints the HTML to PDF
            title: Document title; falls back to the first heading, then "Study Notes"
            generated_on: Footer date; defaults to today

        Raises:
            PipelineStageError: Layout or styling agent failure
            PdfRenderError: PDF printing failure (only when generate_pdf is set)

        Side Effects:
            - Calls Gemini API (2-3 calls)
            - Records metrics and saves the learning cache
        """
        options = options or NoteGenOptions()
        counter("notegen.advanced.started")
        logger.info("ADVANCED NOTES START: %d chars", len(content))

        with time_block("notegen.advanced") as timing:
            layout = self.layout_agent.process(content, options)
            styled = self.styling_agent.process(layout, options)
            diagrams = self.diagram_agent.process(styled, options)

            resolved_title = title or (layout.headings[0].text if layout.headings else "Study Notes")
            html = self.designer.render(
                styled,
                diagrams,
                options,
                resolved_title,
                generated_on=generated_on or date.today(),
            )
            pdf_bytes = self.exporter.export(html) if options.generate_pdf else None

        elapsed_ms = timing["elapsed_ms"]
        metrics = {
            "totalTime": round(elapsed_ms),
            "layoutElements": len(layout.headings) + len(layout.bullets),
            "styledElements": len(styled.elements),
            "diagramsGenerated": len(diagrams.diagrams),
            "pdfSize": len(pdf_bytes) if pdf_bytes else 0,
        }
        self.learning.record_metric(
            "advanced_pipeline",
            elapsed_ms,
            input_size=len(content),
            output_quality=LayoutAgent.output_quality(layout),
        )
        self.learning.save()

        counter("notegen.advanced.completed")
        log_event("notegen.advanced.completed", **metrics)
        return AdvancedNotesResult(
            html=html,
            filename=notes_filename(resolved_title, "advanced_notes"),
            title=resolved_title,
            pdf_bytes=pdf_bytes,
            processing_metrics=metrics,
        )
