"""
Model-call stages of the advanced notes engine.

LayoutAgent -> StylingAgent -> DiagramAgent. They share ModelStage's
call-and-validate contract; the difference is the DiagramAgent, which
degrades to an empty diagram list instead of failing the run.
"""

from __future__ import annotations

from briefly.advanced.models import DiagramInstructions, LayoutData, StyledData
from briefly.errors import PipelineStageError
from briefly.notegen.models import NoteGenOptions
from briefly.notegen.stages import ModelStage
from briefly.observability.logging import get_logger
from briefly.observability.telemetry import counter, log_event

logger = get_logger(__name__)


LAYOUT_SYSTEM_INSTRUCTION = """You are an expert layout designer who converts raw text into structured, educational layouts.

Extract:
1. A clear heading hierarchy (levels 1-6)
2. Bullet points with nesting; convert dense paragraphs into digestible bullets
3. Key paragraphs, each categorized as introduction, body, conclusion or definition
4. Diagram opportunities (process, cycle, structure, comparison, timeline)

Bullet types: bullet, number, arrow, check.

Respond with a single JSON object:
{
  "headings": [{"level": 1, "text": "Main Title", "position": 0}],
  "bullets": [{"text": "Key point", "level": 1, "type": "bullet"}],
  "paragraphs": [{"text": "Content", "type": "introduction"}],
  "suggested_diagrams": [{"type": "flowchart | cycle | hierarchy | timeline | mindmap", "keywords": ["process", "steps"], "description": "Process flow"}]
}"""


class LayoutAgent(ModelStage[LayoutData]):
    """Raw text -> headings, bullets, paragraphs and diagram suggestions."""

    name = "layout_agent"
    response_model = LayoutData
    system_instruction = LAYOUT_SYSTEM_INSTRUCTION

    PROMPT_TEMPLATE = """Write the layout in language: {language}.
Complexity level: {complexity_level}.

Content to structure:
{content}"""

    def process(self, content: str, options: NoteGenOptions) -> LayoutData:
        """
        Side Effects:
            - Records a LayoutDesigner performance metric with an output-quality score
        """
        prompt = self.PROMPT_TEMPLATE.format(
            language=options.language,
            complexity_level=options.complexity_level,
            content=content,
        )
        result = self._invoke(prompt)
        quality = self.output_quality(result)
        self.learning.record_metric(
            "LayoutDesigner",
            self.last_elapsed_ms,
            input_size=len(content),
            output_quality=quality,
        )
        logger.info(
            "LAYOUT AGENT RESULT: headings=%d bullets=%d paragraphs=%d diagrams=%d quality=%d",
            len(result.headings),
            len(result.bullets),
            len(result.paragraphs),
            len(result.suggested_diagrams),
            quality,
        )
        return result

    @staticmethod
    def output_quality(layout: LayoutData) -> int:
        """5 base points, +1 per non-empty section kind, capped at 10."""
        score = 5
        if layout.headings:
            score += 1
        if layout.bullets:
            score += 1
        if layout.suggested_diagrams:
            score += 1
        if layout.paragraphs:
            score += 1
        return min(score, 10)


STYLING_SYSTEM_INSTRUCTION = """You are an expert styling designer for educational content highlighting.

Color mapping rules:
- Definitions: light yellow background (#fef68a)
- Processes/steps: green background (#86efac)
- Warnings/important: red background (#fca5a5)
- Concepts: purple background (#ddd6fe)
- Examples: orange background (#fed7aa)
- Formulas/equations: blue background (#bfdbfe)

Respond with a single JSON object:
{
  "elements": [
    {
      "type": "heading | bullet | paragraph | highlight | definition | diagram",
      "content": "text content",
      "styles": {
        "color": "#000000",
        "background_color": "#fef68a",
        "font_weight": "normal | bold | bolder",
        "text_decoration": "none | underline | line-through",
        "border": "2px solid #000",
        "icon": "fas fa-lightbulb"
      },
      "importance": "low | medium | high | critical"
    }
  ],
  "color_mapping": {"definitions": "#fef68a", "processes": "#86efac"}
}"""


class StylingAgent(ModelStage[StyledData]):
    """Layout -> styled elements with emphasis and importance."""

    name = "styling_agent"
    response_model = StyledData
    system_instruction = STYLING_SYSTEM_INSTRUCTION

    PROMPT_TEMPLATE = """Color scheme preference: {color_scheme}. Visual density: {visual_density}.
Highlights enabled: {include_visuals}.

Layout data to style:
{layout}"""

    def process(self, layout: LayoutData, options: NoteGenOptions) -> StyledData:
        prompt = self.PROMPT_TEMPLATE.format(
            color_scheme=options.color_scheme,
            visual_density=options.visual_density,
            include_visuals="yes" if options.include_visuals else "no",
            layout=layout.model_dump_json(),
        )
        result = self._invoke(prompt)
        logger.info("STYLING AGENT RESULT: %d elements", len(result.elements))
        return result


DIAGRAM_SYSTEM_INSTRUCTION = """You are an expert diagram generator for educational visual content.

Create Mermaid.js code for diagrams that fit the content:
- Flowcharts for processes
- Cycles for circular processes
- Hierarchies for organizational structures
- Timelines for chronological events
- Mind maps for concept relationships

Respond with a single JSON object:
{
  "diagrams": [
    {
      "type": "flowchart",
      "elements": ["Start", "Process", "End"],
      "connections": [{"from": "Start", "to": "Process", "label": "begins"}],
      "mermaid_code": "flowchart TD\\n    A[Start] --> B[Process]\\n    B --> C[End]"
    }
  ]
}"""


class DiagramAgent(ModelStage[DiagramInstructions]):
    """
    Styled content -> Mermaid diagrams.

    Never fails the run: a disabled option or any model failure yields an
    empty diagram list.
    """

    name = "diagram_agent"
    response_model = DiagramInstructions
    system_instruction = DIAGRAM_SYSTEM_INSTRUCTION

    PROMPT_TEMPLATE = """Styled data for diagram generation:
{styled}"""

    def process(self, styled: StyledData, options: NoteGenOptions) -> DiagramInstructions:
        if not options.include_diagrams:
            counter("notegen.diagram_agent.skipped")
            return DiagramInstructions()

        prompt = self.PROMPT_TEMPLATE.format(styled=styled.model_dump_json())
        try:
            result = self._invoke(prompt)
        except PipelineStageError as e:
            counter("notegen.diagram_agent.degraded")
            logger.warning("DIAGRAM AGENT degraded to no diagrams: %s", e)
            log_event("notegen.diagram_agent.degraded", error=str(e))
            return DiagramInstructions()

        logger.info("DIAGRAM AGENT RESULT: %d diagrams", len(result.diagrams))
        return result
