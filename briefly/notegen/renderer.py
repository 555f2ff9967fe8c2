"""
Study Notes Renderer - DesignedLayout to a standalone HTML document.

Pure and deterministic: no model call, no clock read. The same design,
options and ``generated_on`` always produce byte-identical HTML.

Renders:
- Title with document emoji
- One element per layout block, by block type
- Footer with generation date (when given)

Unknown block types are dropped. All model text is HTML-escaped and every
model-supplied CSS value is sanitized before it reaches the stylesheet.
"""

from __future__ import annotations

import html
from datetime import date

from briefly.notegen.models import DesignedLayout, LayoutBlock, NoteGenOptions
from briefly.rendering.heuristics import bullet_class, infer_heading_level, split_leading_emoji
from briefly.rendering.styles import GOOGLE_FONTS_IMPORT, css_value, theme_variables

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title} - Study Notes</title>
<style>
{fonts_import}
{theme_variables}
:root {{
  --primary: {primary};
  --secondary: {secondary};
  --accent: {accent};
  --background: {background};
  --gradient: {gradient};
  --font-heading: '{heading_font}', var(--font-body);
  --font-accent: '{accent_font}', var(--font-body);
  --font-code: '{code_font}', monospace;
  --spacing-sm: {spacing_sm}px;
  --spacing-md: {spacing_md}px;
  --spacing-lg: {spacing_lg}px;
  --radius: 12px;
}}
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{
  font-family: '{body_font}', var(--font-body);
  font-size: var(--base-size);
  line-height: var(--line-height);
  color: var(--text);
  background: var(--body-bg);
  padding: {margin_top}px {margin_right}px {margin_bottom}px {margin_left}px;
  -webkit-print-color-adjust: exact;
  print-color-adjust: exact;
}}
.page {{
  background: var(--page-bg);
  border-radius: var(--radius);
  padding: 40px;
  background-image: repeating-linear-gradient(transparent, transparent 24px, var(--lines) 24px, var(--lines) 25px);
}}
.title {{
  font-family: var(--font-heading);
  font-size: calc(var(--base-size) * var(--scale) * var(--scale) * var(--scale));
  color: var(--heading);
  text-align: center;
  margin-bottom: var(--spacing-lg);
  border-bottom: 3px solid var(--rule);
  padding-bottom: var(--spacing-sm);
}}
.section {{ margin-bottom: var(--section-gap); }}
.heading {{
  font-family: var(--font-heading);
  color: var(--primary);
  margin: var(--spacing-md) 0 var(--spacing-sm);
  border-left: 4px solid var(--scheme-primary);
  padding-left: var(--spacing-sm);
}}
h2.heading {{ font-size: calc(var(--base-size) * var(--scale) * var(--scale)); }}
h3.heading {{ font-size: calc(var(--base-size) * var(--scale)); }}
h4.heading {{ font-size: var(--base-size); }}
.bullet {{ padding-left: var(--spacing-lg); margin-bottom: var(--spacing-sm); position: relative; }}
.bullet::before {{ content: "\\2022"; position: absolute; left: 8px; color: var(--scheme-secondary); }}
.bullet-arrow::before {{ content: "\\2192"; }}
.bullet-check::before {{ content: "\\2713"; color: #059669; }}
.definition, .example, .formula, .callout, .diagram, .summary {{
  padding: var(--block-padding);
  margin: var(--section-gap) 0;
  border-radius: var(--radius);
}}
.definition {{ background: var(--scheme-highlight); border-left: 4px solid var(--accent); }}
.example {{ background: #e3f2fd; border: 2px solid var(--primary); }}
.formula {{ background: #f3e5f5; border: 2px solid var(--accent); font-family: var(--font-code); text-align: center; }}
.callout {{ background: #fff3e0; border: 2px solid #ff9800; }}
.diagram {{ background: #f0f9ff; border: 2px dashed var(--primary); text-align: center; }}
.summary {{ background: var(--gradient); color: #ffffff; }}
.emoji {{ margin-right: var(--spacing-sm); }}
.footer {{ margin-top: var(--spacing-lg); text-align: center; color: #64748b; font-size: 0.9em; }}
@media print {{
  body {{ background: #ffffff; }}
}}
</style>
</head>
<body>
<div class="page">
<h1 class="title">{title_emoji}{title}</h1>
{blocks}
<div class="footer">{footer}</div>
</div>
</body>
</html>
"""

# Block type -> (css class, label prefix)
_LABELLED_BLOCKS = {
    "definition": ("definition", "Definition:"),
    "example": ("example", "Example:"),
    "formula": ("formula", ""),
    "callout": ("callout", ""),
    "diagram": ("diagram", "Diagram:"),
    "summary": ("summary", "Summary:"),
}


def _emoji_span(emoji: str) -> str:
    if not emoji:
        return ""
    return f'<span class="emoji">{html.escape(emoji)}</span>'


def render_block(block: LayoutBlock) -> str:
    """Render one layout block; returns "" for unknown block types."""
    emoji, text = split_leading_emoji(block.content)
    body = _emoji_span(emoji) + html.escape(text)

    if block.type == "heading":
        level = infer_heading_level(block.content)
        return f'<div class="section"><h{level} class="heading">{body}</h{level}></div>'

    if block.type == "bullet":
        classes = " ".join(c for c in ("bullet", bullet_class(block.content)) if c)
        return f'<div class="{classes}">{body}</div>'

    if block.type in _LABELLED_BLOCKS:
        css_class, label = _LABELLED_BLOCKS[block.type]
        label_html = f"<strong>{label}</strong> " if label else ""
        return f'<div class="{css_class}">{_emoji_span(emoji)}{label_html}{html.escape(text)}</div>'

    return ""


def render_designed_notes(
    design: DesignedLayout,
    options: NoteGenOptions | None = None,
    generated_on: date | None = None,
    document_emoji: str = "",
) -> str:
    """
    Render a designed layout as a complete HTML document.

    Args:
        design: Layout Designer output
        options: Style options; defaults to NoteGenOptions()
        generated_on: Date printed in the footer; omitted when None
        document_emoji: Optional emoji shown before the title

    Returns:
        HTML string
    """
    options = options or NoteGenOptions()
    config = design.style_config
    palette = config.color_palette
    fonts = config.font_families
    spacing = config.spacing_system

    def spacing_at(index: int, default: float) -> str:
        value = spacing[index] if len(spacing) > index else default
        return css_value(f"{value:g}", str(default))

    blocks = [render_block(block) for block in design.layout_blocks]
    footer = "Generated by Briefly NoteGen"
    if generated_on is not None:
        footer += f" &bull; {generated_on.isoformat()}"

    return HTML_TEMPLATE.format(
        lang=html.escape(options.language, quote=True),
        title=html.escape(design.title),
        title_emoji=_emoji_span(document_emoji),
        fonts_import=GOOGLE_FONTS_IMPORT,
        theme_variables=theme_variables(options),
        primary=css_value(palette.primary),
        secondary=css_value(palette.secondary),
        accent=css_value(palette.accent),
        background=css_value(palette.background),
        gradient=css_value(
            palette.gradient, "linear-gradient(135deg, var(--primary), var(--accent))"
        ),
        heading_font=css_value(fonts.heading).replace("'", ""),
        body_font=css_value(fonts.body).replace("'", ""),
        accent_font=css_value(fonts.accent).replace("'", ""),
        code_font=css_value(fonts.code, "JetBrains Mono").replace("'", ""),
        spacing_sm=spacing_at(1, 8),
        spacing_md=spacing_at(2, 16),
        spacing_lg=spacing_at(3, 24),
        margin_top=css_value(f"{config.margins.top:g}", "40"),
        margin_right=css_value(f"{config.margins.right:g}", "40"),
        margin_bottom=css_value(f"{config.margins.bottom:g}", "40"),
        margin_left=css_value(f"{config.margins.left:g}", "40"),
        blocks="\n".join(b for b in blocks if b),
        footer=footer,
    )
