"""
Text normalization for rendered runs.

Raw text from the tree builder keeps its entity references; everything that
reaches a TextRun goes through normalize_text() first.
"""

from __future__ import annotations

import html
import re

from .builder import build
from .dom import iter_nodes

# Comma glued to the next character, unless it is a digit (1,000) or space
COMMA_PATTERN = re.compile(r",(?!\d)(\S)")

TAG_PATTERN = re.compile(r"<[^>]*>?")

COLOR_PATTERN = re.compile(r"(?:^|;)\s*color\s*:\s*([^;]+)", re.IGNORECASE)

OPENING_QUOTES = ("“", "‘")
# ’ doubles as the apostrophe, so it is never padded
CLOSING_QUOTES = ("”",)

WHITESPACE = re.compile(r"\s+")


def normalize_text(raw: str | None) -> str:
    """
    Prepare raw node text for display.

    - collapses source line wraps and indentation to single spaces
    - inserts a space after a comma that runs into the next word
    - decodes HTML entities
    - pads a lone smart quote so it does not collide with the neighbouring run
    """
    if not raw:
        return ""
    text = WHITESPACE.sub(" ", raw)
    text = html.unescape(COMMA_PATTERN.sub(r", \1", text))
    bare = text.strip()
    if bare in OPENING_QUOTES:
        return " " + bare
    if bare in CLOSING_QUOTES:
        return bare + " "
    return text


def truncate_text(text: str, max_length: int) -> str:
    """Strip tags and cut to max_length, marking the cut with an ellipsis."""
    plain = TAG_PATTERN.sub("", text or "")
    if max_length < 0 or len(plain) <= max_length:
        return plain
    return plain[:max_length] + "..."


def plain_text(markup: str | None) -> str:
    """Decoded text of a markup string with all tags removed."""
    nodes = build(markup)
    return "".join(
        html.unescape(node.text or "")
        for node in iter_nodes(nodes)
        if node.is_text and not node.has_ancestor("script", "style")
    ).strip()


def highlight_color(style: str | None) -> str | None:
    """The color declared in an inline style attribute, if any."""
    if not style:
        return None
    match = COLOR_PATTERN.search(style)
    if not match:
        return None
    return match.group(1).strip().lower() or None
