"""
Note Designer - styled elements and diagrams to a notebook-style HTML page.

Deterministic like the study-notes renderer: output depends only on its
arguments. Element handling:

- heading    -> <h2>-<h4>, level from text length
- bullet     -> <li>, arrow/check class from text; consecutive bullets share a <ul>
- paragraph  -> <p>
- highlight / definition -> highlight span, class from importance
- anything else is dropped

Diagrams become Mermaid containers rendered client-side by mermaid.js.
"""

from __future__ import annotations

import html
from datetime import date

from briefly.advanced.models import DiagramInstructions, StyledData, StyledElement
from briefly.notegen.models import NoteGenOptions
from briefly.rendering.heuristics import bullet_class, highlight_class, infer_heading_level
from briefly.rendering.styles import (
    GOOGLE_FONTS_IMPORT,
    HIGHLIGHT_COLORS,
    css_value,
    theme_variables,
)

MERMAID_SCRIPT = (
    '<script src="https://cdn.jsdelivr.net/npm/mermaid/dist/mermaid.min.js"></script>\n'
    "<script>mermaid.initialize({startOnLoad: true});</script>"
)

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title} - Study Notes</title>
<style>
{fonts_import}
{theme_variables}
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{
  font-family: var(--font-body);
  font-size: var(--base-size);
  line-height: var(--line-height);
  color: var(--text);
  background: var(--body-bg);
  padding: 20px;
  -webkit-print-color-adjust: exact;
  print-color-adjust: exact;
}}
.notebook-page {{
  background: var(--page-bg);
  padding: 40px;
  border-radius: 8px;
  position: relative;
}}
.notebook-lines {{
  background-image: repeating-linear-gradient(transparent, transparent 24px, var(--lines) 24px, var(--lines) 25px);
  position: absolute;
  top: 0; left: 0; right: 0; bottom: 0;
  opacity: 0.3;
  pointer-events: none;
}}
h1, h2, h3, h4 {{
  margin: var(--section-gap) 0 12px 0;
  color: var(--heading);
  border-bottom: 2px solid var(--rule);
  padding-bottom: 5px;
}}
h1 {{ font-size: calc(var(--base-size) * var(--scale) * var(--scale) * var(--scale)); }}
h2 {{ font-size: calc(var(--base-size) * var(--scale) * var(--scale)); }}
h3 {{ font-size: calc(var(--base-size) * var(--scale)); }}
h4 {{ font-size: var(--base-size); }}
p {{ margin: var(--section-gap) 0; }}
ul {{ margin: 15px 0; padding-left: 25px; }}
li {{ margin: 8px 0; }}
.highlight-definition, .highlight-process, .highlight-warning, .highlight-concept {{
  padding: 3px 6px;
  border-radius: 4px;
}}
.highlight-definition {{ background-color: {definition_color}; border-left: 4px solid #f59e0b; }}
.highlight-process {{ background-color: {process_color}; border-left: 4px solid #059669; }}
.highlight-warning {{ background-color: {warning_color}; border-left: 4px solid #dc2626; }}
.highlight-concept {{ background-color: {concept_color}; border-left: 4px solid #7c3aed; }}
.bullet-arrow::marker {{ content: "\\2192  "; color: var(--scheme-primary); }}
.bullet-check::marker {{ content: "\\2713  "; color: #059669; }}
.diagram-container {{
  margin: 25px 0;
  padding: var(--block-padding);
  border: 2px dashed var(--scheme-secondary);
  border-radius: 8px;
  text-align: center;
}}
.handwritten-note {{
  font-style: italic;
  margin: 15px 0;
  padding: 10px;
  border-left: 3px solid var(--scheme-primary);
  background: var(--scheme-highlight);
  border-radius: 4px;
}}
.footer {{ margin-top: 40px; text-align: center; color: #718096; font-size: 0.9em; }}
@media print {{
  body {{ background: #ffffff; }}
}}
</style>
{scripts}
</head>
<body>
<div class="notebook-page">
<div class="notebook-lines"></div>
<h1>{title}</h1>
<div class="handwritten-note">Generated by the Briefly advanced notes engine</div>
{content}
<div class="footer">{footer}</div>
</div>
</body>
</html>
"""


class NoteDesigner:
    """Render StyledData plus diagrams as a complete HTML document."""

    def render(
        self,
        styled: StyledData,
        diagrams: DiagramInstructions,
        options: NoteGenOptions,
        title: str,
        generated_on: date | None = None,
    ) -> str:
        parts: list[str] = []
        bullets: list[str] = []

        def flush_bullets() -> None:
            if bullets:
                parts.append("<ul>\n" + "\n".join(bullets) + "\n</ul>")
                bullets.clear()

        for element in styled.elements:
            if element.type == "bullet":
                bullets.append(self._render_bullet(element))
                continue
            flush_bullets()
            rendered = self._render_element(element, options)
            if rendered:
                parts.append(rendered)
        flush_bullets()

        for diagram in diagrams.diagrams:
            parts.append(self._render_diagram(diagram.type, diagram.mermaid_code))

        footer = "AI-enhanced study notes"
        if generated_on is not None:
            footer = f"Created on {generated_on.isoformat()} &bull; {footer}"

        return HTML_TEMPLATE.format(
            lang=html.escape(options.language, quote=True),
            title=html.escape(title),
            fonts_import=GOOGLE_FONTS_IMPORT,
            theme_variables=theme_variables(options),
            definition_color=HIGHLIGHT_COLORS["definition"],
            process_color=HIGHLIGHT_COLORS["process"],
            warning_color=HIGHLIGHT_COLORS["warning"],
            concept_color=HIGHLIGHT_COLORS["concept"],
            scripts=MERMAID_SCRIPT if diagrams.diagrams else "",
            content="\n".join(parts),
            footer=footer,
        )

    @staticmethod
    def _style_attr(element: StyledElement) -> str:
        color = css_value(element.styles.color)
        return f' style="color: {html.escape(color, quote=True)};"'

    def _render_bullet(self, element: StyledElement) -> str:
        css_class = bullet_class(element.content)
        class_attr = f' class="{css_class}"' if css_class else ""
        return f"<li{class_attr}{self._style_attr(element)}>{html.escape(element.content)}</li>"

    def _render_element(self, element: StyledElement, options: NoteGenOptions) -> str:
        text = html.escape(element.content)

        if element.type == "heading":
            level = infer_heading_level(element.content)
            weight = element.styles.font_weight or "bold"
            color = html.escape(css_value(element.styles.color), quote=True)
            return f'<h{level} style="color: {color}; font-weight: {weight};">{text}</h{level}>'

        if element.type == "paragraph":
            return f"<p{self._style_attr(element)}>{text}</p>"

        if element.type in ("highlight", "definition"):
            if not options.include_visuals:
                return f"<p>{text}</p>"
            css_class = highlight_class(element.importance)
            background = element.styles.background_color
            style = ""
            if background:
                style = f' style="background-color: {html.escape(css_value(background), quote=True)};"'
            return f'<p><span class="{css_class}"{style}>{text}</span></p>'

        return ""

    @staticmethod
    def _render_diagram(diagram_type: str, mermaid_code: str) -> str:
        label = html.escape(diagram_type[:1].upper() + diagram_type[1:])
        return (
            '<div class="diagram-container">\n'
            f"<h4>📊 {label} Diagram</h4>\n"
            f'<pre class="mermaid">\n{html.escape(mermaid_code)}\n</pre>\n'
            "</div>"
        )
