"""
Fixed CSS building blocks keyed by NoteGenOptions values.

Both renderers pull from these tables so the same options produce the same
fonts, colors and spacing in either pipeline.
"""

from __future__ import annotations

import re

from briefly.notegen.models import NoteGenOptions

GOOGLE_FONTS_IMPORT = (
    "@import url('https://fonts.googleapis.com/css2?family=Caveat:wght@400;600;700"
    "&family=Patrick+Hand&family=Architects+Daughter&family=Inter:wght@300;400;600;700"
    "&family=Roboto:wght@400;500&family=Crimson+Text:ital,wght@0,400;0,600;1,400"
    "&family=Libre+Baskerville&family=Dancing+Script:wght@400;600;700&family=Pacifico"
    "&family=JetBrains+Mono:wght@400;500&family=Playfair+Display:wght@400;700&display=swap');"
)

FONT_STACKS: dict[str, str] = {
    "handwritten": "'Caveat', 'Patrick Hand', 'Architects Daughter', cursive",
    "clean": "'Inter', 'Roboto', sans-serif",
    "academic": "'Crimson Text', 'Libre Baskerville', serif",
    "creative": "'Dancing Script', 'Pacifico', cursive",
}

PDF_THEMES: dict[str, dict[str, str]] = {
    "handwritten": {
        "body_background": "#fafafa",
        "page_background": "#ffffff",
        "text": "#2d3748",
        "heading": "#1a202c",
        "rule": "#4299e1",
        "lines": "#e2e8f0",
    },
    "minimal": {
        "body_background": "#ffffff",
        "page_background": "#ffffff",
        "text": "#111827",
        "heading": "#111827",
        "rule": "#d1d5db",
        "lines": "transparent",
    },
    "dark": {
        "body_background": "#0f172a",
        "page_background": "#1e293b",
        "text": "#e2e8f0",
        "heading": "#f8fafc",
        "rule": "#38bdf8",
        "lines": "#334155",
    },
    "academic": {
        "body_background": "#f5f5f0",
        "page_background": "#fffef8",
        "text": "#1f2937",
        "heading": "#7f1d1d",
        "rule": "#7f1d1d",
        "lines": "transparent",
    },
    "creative": {
        "body_background": "#fdf4ff",
        "page_background": "#ffffff",
        "text": "#3b0764",
        "heading": "#a21caf",
        "rule": "#f472b6",
        "lines": "#fbcfe8",
    },
}

COLOR_SCHEMES: dict[str, dict[str, str]] = {
    "warm": {"primary": "#c2410c", "secondary": "#f59e0b", "accent": "#dc2626", "highlight": "#fef3c7"},
    "cool": {"primary": "#1d4ed8", "secondary": "#0d9488", "accent": "#7c3aed", "highlight": "#dbeafe"},
    "neutral": {"primary": "#374151", "secondary": "#6b7280", "accent": "#111827", "highlight": "#f3f4f6"},
    "vibrant": {"primary": "#db2777", "secondary": "#16a34a", "accent": "#ea580c", "highlight": "#fde68a"},
    "pastel": {"primary": "#93c5fd", "secondary": "#c4b5fd", "accent": "#f9a8d4", "highlight": "#ecfccb"},
}

DENSITY_SPACING: dict[str, dict[str, str]] = {
    "minimal": {"section_gap": "28px", "block_padding": "8px", "line_height": "1.8"},
    "balanced": {"section_gap": "20px", "block_padding": "12px", "line_height": "1.6"},
    "rich": {"section_gap": "12px", "block_padding": "16px", "line_height": "1.5"},
}

COMPLEXITY_SCALE: dict[str, dict[str, str]] = {
    "simple": {"base_size": "17px", "scale": "1.2"},
    "moderate": {"base_size": "16px", "scale": "1.25"},
    "complex": {"base_size": "15px", "scale": "1.333"},
}

HIGHLIGHT_COLORS: dict[str, str] = {
    "definition": "#fef68a",
    "process": "#86efac",
    "warning": "#fca5a5",
    "concept": "#ddd6fe",
    "example": "#fed7aa",
    "formula": "#bfdbfe",
}

_UNSAFE_CSS = re.compile(r"[;{}<>\\\n\r]")


def css_value(value: str | float | None, default: str = "inherit") -> str:
    """Sanitize a model-supplied value for use inside a CSS declaration."""
    if value is None:
        return default
    cleaned = _UNSAFE_CSS.sub("", str(value)).strip()
    return cleaned or default


def theme_variables(options: NoteGenOptions) -> str:
    """CSS custom properties for the selected theme, scheme, density and scale."""
    theme = PDF_THEMES[options.pdf_style]
    scheme = COLOR_SCHEMES[options.color_scheme]
    density = DENSITY_SPACING[options.visual_density]
    scale = COMPLEXITY_SCALE[options.complexity_level]

    declarations = [
        f"--font-body: {FONT_STACKS[options.font_style]};",
        f"--body-bg: {theme['body_background']};",
        f"--page-bg: {theme['page_background']};",
        f"--text: {theme['text']};",
        f"--heading: {theme['heading']};",
        f"--rule: {theme['rule']};",
        f"--lines: {theme['lines']};",
        f"--scheme-primary: {scheme['primary']};",
        f"--scheme-secondary: {scheme['secondary']};",
        f"--scheme-accent: {scheme['accent']};",
        f"--scheme-highlight: {scheme['highlight']};",
        f"--section-gap: {density['section_gap']};",
        f"--block-padding: {density['block_padding']};",
        f"--line-height: {density['line_height']};",
        f"--base-size: {scale['base_size']};",
        f"--scale: {scale['scale']};",
    ]
    return ":root {\n  " + "\n  ".join(declarations) + "\n}"
