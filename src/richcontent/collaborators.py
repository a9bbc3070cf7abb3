"""
Contracts with the host application.

richcontent never fetches images, draws ads or opens URLs itself. It hands
URLs, sizes and unit ids to these collaborators and leaves retry, caching
and display to them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from .instructions import (
    AdSlot,
    DisplayInstruction,
    EmbeddedLinkCard,
    Image,
    TextRun,
    VideoEmbed,
    iter_instructions,
)

logger = logging.getLogger(__name__)


class ImageLoader(Protocol):
    def load(self, source: str, width: float, height: float) -> None:
        """Fetch, cache and display source at the given size."""
        ...


class AdSlotRenderer(Protocol):
    def render_slot(self, unit: str) -> None:
        """Display the monetization unit for unit."""
        ...


class LinkOpener(Protocol):
    def open_url(self, url: str) -> None:
        """Open an absolute URL outside the reader."""
        ...


def present(
    instructions: Iterable[DisplayInstruction],
    image_loader: ImageLoader,
    ad_renderer: AdSlotRenderer,
) -> int:
    """
    Hand every image, video thumbnail and ad slot to its collaborator.

    Returns the number of hand-offs made.
    """
    count = 0
    for instruction in iter_instructions(instructions):
        if isinstance(instruction, Image):
            image_loader.load(instruction.source, instruction.width, instruction.height)
        elif isinstance(instruction, VideoEmbed):
            image_loader.load(instruction.thumbnail_url, instruction.width, instruction.height)
        elif isinstance(instruction, AdSlot):
            ad_renderer.render_slot(instruction.unit)
        else:
            continue
        count += 1
    return count


def tap_url(target: TextRun | EmbeddedLinkCard | VideoEmbed) -> str | None:
    """The URL a tap on target should open, if any."""
    if isinstance(target, VideoEmbed):
        return target.watch_url
    return target.href or None


def tap(target: TextRun | EmbeddedLinkCard | VideoEmbed, opener: LinkOpener) -> bool:
    """
    Delegate a tap to the host. Failures to open are logged, never raised.
    """
    url = tap_url(target)
    if not url:
        return False
    try:
        opener.open_url(url)
    except Exception:
        logger.warning("Failed to open %s", url, exc_info=True)
        return False
    return True
