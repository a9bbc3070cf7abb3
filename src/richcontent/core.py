"""
Rendering pipeline for richcontent.

markup -> build() -> plan_slots() -> render_nodes() -> display instructions

One synchronous pass with no shared state. The same inputs always give
structurally equal output, so callers may memoize on
(markup, viewport_width, is_network); ContentRenderer does exactly that.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from .builder import build
from .config import Config, get_config
from .instructions import DisplayInstruction, Passthrough
from .render import FormatContext, RenderOptions, render, render_nodes
from .slots import plan_slots

logger = logging.getLogger(__name__)


def render_content(
    markup: str | None,
    viewport_width: float | None = None,
    is_network: bool = False,
    config: Config | None = None,
    text_size: str | None = None,
) -> list[DisplayInstruction]:
    """Parse, plan ad slots and render a block of markup."""
    cfg = config or get_config()
    nodes = plan_slots(build(markup), is_network, cfg.slots)
    if not nodes:
        return []

    options = RenderOptions.from_config(cfg, viewport_width, text_size)

    # The first block gets image priority
    out: list[DisplayInstruction] = []
    lead = render(nodes[0], FormatContext(), replace(options, lead=True))
    if isinstance(lead, Passthrough):
        out.extend(lead.children)
    elif lead is not None:
        out.append(lead)
    out.extend(render_nodes(nodes[1:], options))
    return out


class ContentRenderer:
    """
    Memoizing front end over render_content().

    Results are cached per instance, keyed on everything that affects the
    output. Not thread-safe.
    """

    def __init__(self, config: Config | None = None, text_size: str | None = None, max_entries: int = 32):
        self.config = config or get_config()
        self.text_size = text_size
        self.max_entries = max_entries
        self._cache: dict[tuple, tuple[DisplayInstruction, ...]] = {}

    def render(
        self,
        markup: str | None,
        viewport_width: float | None = None,
        is_network: bool = False,
    ) -> list[DisplayInstruction]:
        key = (markup, viewport_width, bool(is_network))
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Render cache hit (%d chars)", len(markup or ""))
            return list(cached)

        result = render_content(
            markup, viewport_width, is_network, self.config, self.text_size
        )
        if len(self._cache) >= self.max_entries:
            # Drop the oldest entry; dicts keep insertion order
            self._cache.pop(next(iter(self._cache)))
        self._cache[key] = tuple(result)
        return result

    def clear(self) -> None:
        self._cache.clear()
