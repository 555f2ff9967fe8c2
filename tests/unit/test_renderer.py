"""Tests for the study-notes renderer and the shared rendering heuristics."""

from __future__ import annotations

import copy
from datetime import date

import pytest

from briefly.notegen.models import DesignedLayout, LayoutBlock, NoteGenOptions
from briefly.notegen.renderer import render_block, render_designed_notes
from briefly.rendering.heuristics import (
    bullet_class,
    highlight_class,
    infer_heading_level,
    split_leading_emoji,
)
from briefly.rendering.styles import css_value
from tests.conftest import DESIGNED


def _design(**overrides) -> DesignedLayout:
    data = copy.deepcopy(DESIGNED)
    data.update(overrides)
    return DesignedLayout.model_validate(data)


def _block(block_type: str, content: str) -> LayoutBlock:
    return LayoutBlock.model_validate(
        {
            "type": block_type,
            "content": content,
            "position": {"x": 0, "y": 0, "width": 100, "height": 10},
            "style": {"font_family": "Inter", "font_size": 14, "color": "#000"},
        }
    )


class TestRenderDesignedNotes:
    def test_deterministic(self):
        design = _design()
        options = NoteGenOptions(pdf_style="dark", color_scheme="cool")
        day = date(2024, 5, 17)

        first = render_designed_notes(design, options, generated_on=day, document_emoji="🧬")
        second = render_designed_notes(design, options, generated_on=day, document_emoji="🧬")

        assert first == second

    def test_footer_date_only_when_given(self):
        with_date = render_designed_notes(_design(), generated_on=date(2024, 5, 17))
        without_date = render_designed_notes(_design())

        assert "Generated by Briefly NoteGen &bull; 2024-05-17" in with_date
        assert "Generated by Briefly NoteGen</div>" in without_date

    def test_title_and_emoji(self):
        html = render_designed_notes(_design(), document_emoji="🧬")
        assert '<h1 class="title"><span class="emoji">🧬</span>Cell Biology Basics</h1>' in html

    def test_model_text_is_escaped(self):
        design = _design(title="<b>Bold</b> & co")
        design.layout_blocks.append(_block("bullet", "<script>alert(1)</script>"))

        html = render_designed_notes(design)

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "&lt;b&gt;Bold&lt;/b&gt; &amp; co" in html

    def test_css_values_are_sanitized(self):
        data = copy.deepcopy(DESIGNED)
        data["style_config"]["color_palette"]["primary"] = "red;} body { display: none"

        html = render_designed_notes(DesignedLayout.model_validate(data))

        assert "red;}" not in html
        assert "--primary: red body  display: none;" in html

    def test_unknown_block_types_dropped(self):
        design = _design()
        design.layout_blocks.append(_block("hologram", "Invisible content"))

        html = render_designed_notes(design)

        assert "Invisible content" not in html

    @pytest.mark.parametrize("font_style,stack", [("clean", "'Inter', 'Roboto'"), ("creative", "'Dancing Script'")])
    def test_font_style_selects_stack(self, font_style, stack):
        html = render_designed_notes(_design(), NoteGenOptions(font_style=font_style))
        assert f"--font-body: {stack}" in html


class TestRenderBlock:
    def test_heading_level_and_emoji(self):
        html = render_block(_block("heading", "🔬 Organelles"))
        assert html == (
            '<div class="section"><h2 class="heading">'
            '<span class="emoji">🔬</span>Organelles</h2></div>'
        )

    def test_long_heading_is_smaller(self):
        html = render_block(_block("heading", "An unusually long heading about organelles"))
        assert "<h4" in html

    def test_bullet_decoration(self):
        assert 'class="bullet bullet-arrow"' in render_block(_block("bullet", "Heat, then cool"))
        assert 'class="bullet bullet-check"' in render_block(_block("bullet", "Lab complete"))
        assert 'class="bullet"' in render_block(_block("bullet", "Plain point"))

    @pytest.mark.parametrize(
        "content,css_class,marker,text",
        [
            ("✓ Reviewed", "bullet-check", "✓", "Reviewed"),
            ("→ Next step", "bullet-arrow", "→", "Next step"),
        ],
    )
    def test_leading_marker_decorates_bullet(self, content, css_class, marker, text):
        html = render_block(_block("bullet", content))

        assert html == f'<div class="bullet {css_class}"><span class="emoji">{marker}</span>{text}</div>'

    @pytest.mark.parametrize(
        "block_type,label",
        [
            ("definition", "<strong>Definition:</strong>"),
            ("example", "<strong>Example:</strong>"),
            ("diagram", "<strong>Diagram:</strong>"),
            ("summary", "<strong>Summary:</strong>"),
        ],
    )
    def test_labelled_blocks(self, block_type, label):
        html = render_block(_block(block_type, "Body text"))
        assert html == f'<div class="{block_type}">{label} Body text</div>'

    def test_formula_has_no_label(self):
        assert render_block(_block("formula", "E = mc^2")) == '<div class="formula">E = mc^2</div>'

    def test_unknown_type_renders_nothing(self):
        assert render_block(_block("sidebar", "text")) == ""


class TestHeuristics:
    @pytest.mark.parametrize("length,level", [(0, 2), (19, 2), (20, 3), (39, 3), (40, 4), (200, 4)])
    def test_infer_heading_level(self, length, level):
        assert infer_heading_level("x" * length) == level

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Mix, then stir", "bullet-arrow"),
            ("Input → output", "bullet-arrow"),
            ("Task COMPLETE", "bullet-check"),
            ("✓ Reviewed", "bullet-check"),
            ("Plain", ""),
        ],
    )
    def test_bullet_class(self, text, expected):
        assert bullet_class(text) == expected

    @pytest.mark.parametrize(
        "importance,css_class",
        [
            ("critical", "highlight-warning"),
            ("high", "highlight-process"),
            ("medium", "highlight-concept"),
            ("low", "highlight-definition"),
        ],
    )
    def test_highlight_class(self, importance, css_class):
        assert highlight_class(importance) == css_class

    def test_split_leading_emoji(self):
        assert split_leading_emoji("🧬 Cells") == ("🧬", "Cells")
        assert split_leading_emoji("Cells") == ("", "Cells")

    def test_css_value(self):
        assert css_value("#fff") == "#fff"
        assert css_value(None) == "inherit"
        assert css_value("{};", "#000") == "#000"
        assert css_value("url(x)</style>") == "url(x)/style"
