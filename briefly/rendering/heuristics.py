"""
Text heuristics shared by the renderers.

The model output carries no structural signal for heading depth or bullet
decoration, so both are derived from the text itself:

- heading level from content length (short text renders as a larger heading)
- bullet decoration from substrings ("then"/"→" arrow, "complete"/"✓" check)
"""

from __future__ import annotations

import re

_LEADING_SYMBOLS = re.compile(r"^[^\w\s]+")
_LEADING_SYMBOLS_AND_SPACE = re.compile(r"^[^\w\s]+\s*")


def infer_heading_level(content: str) -> int:
    """< 20 chars -> h2, < 40 chars -> h3, otherwise h4."""
    if len(content) < 20:
        return 2
    if len(content) < 40:
        return 3
    return 4


def bullet_class(content: str) -> str:
    lowered = content.lower()
    if "→" in content or "then" in lowered:
        return "bullet-arrow"
    if "✓" in content or "complete" in lowered:
        return "bullet-check"
    return ""


def highlight_class(importance: str) -> str:
    """Map element importance to a highlight CSS class."""
    if importance == "critical":
        return "highlight-warning"
    if importance == "high":
        return "highlight-process"
    if importance == "medium":
        return "highlight-concept"
    return "highlight-definition"


def split_leading_emoji(content: str) -> tuple[str, str]:
    """
    Split leading non-word symbols (usually an emoji) off block content.

    Returns:
        (emoji, remaining_text); emoji is "" when the text starts with a word
    """
    match = _LEADING_SYMBOLS.match(content)
    if not match:
        return "", content
    return match.group(0), _LEADING_SYMBOLS_AND_SPACE.sub("", content, count=1)
