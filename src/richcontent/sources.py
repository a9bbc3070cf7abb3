"""
Responsive source resolver.

Pure functions that pick an image candidate for a viewport, size images and
video embeds for display, and pull video ids out of embed/watch/short URLs.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from urllib.parse import urlsplit

LEADING_INT = re.compile(r"^\s*(\d+)")

WATCH_PARAM = re.compile(r"[?&]v=([^&]+)")
SHORT_URL = re.compile(r"youtu\.be/([^?]+)")

TEXT_SIZE_SCALE = {"Small": 0.9, "Large": 1.3}


@dataclass(frozen=True)
class SrcsetCandidate:
    """One alternative rendering of an image at a given width."""
    url: str
    width: float


@dataclass(frozen=True)
class Dimensions:
    width: float
    height: float


def parse_int(value: object) -> int | None:
    """Leading integer of a value ("640", "640px"), or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    match = LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def parse_srcset(srcset: str | None) -> list[SrcsetCandidate]:
    """
    Split a srcset attribute into candidates.

    A candidate without a usable width descriptor counts as infinitely wide,
    so it only wins when nothing narrower qualifies.
    """
    if not srcset:
        return []
    candidates = []
    for entry in srcset.split(","):
        parts = entry.split()
        if not parts:
            continue
        width = parse_int(parts[1]) if len(parts) > 1 else None
        candidates.append(SrcsetCandidate(parts[0], width if width else math.inf))
    return candidates


def pick_srcset_candidate(
    candidates: list[SrcsetCandidate],
    viewport_width: float,
    default_src: str | None = None,
) -> str | None:
    """Narrowest candidate at least as wide as the viewport, else default_src."""
    for candidate in sorted(candidates, key=lambda c: c.width):
        if candidate.width >= viewport_width:
            return candidate.url or default_src
    return default_src


def best_source(attributes: dict[str, str] | None, viewport_width: float) -> str | None:
    """Resolve the display URL for an <img> from its src/srcset attributes."""
    if not attributes:
        return None
    src = attributes.get("src") or None
    chosen = pick_srcset_candidate(parse_srcset(attributes.get("srcset")), viewport_width, src)
    return chosen or None


def compute_display_dimensions(
    declared_width: object,
    declared_height: object,
    max_width: float,
    viewport_width: float | None = None,
) -> Dimensions:
    """
    Scale declared dimensions down to max_width, keeping the aspect ratio.

    Missing or non-numeric (or zero) dimensions fall back to the viewport
    width, which gives a square placeholder until the real size is known.
    """
    fallback = viewport_width if viewport_width is not None else max_width
    width = parse_int(declared_width) or fallback
    height = parse_int(declared_height) or fallback
    aspect_ratio = height / width if width else 1.0
    display_width = min(width, max_width)
    return Dimensions(display_width, display_width * aspect_ratio)


def video_dimensions(viewport_width: float, margin: float = 0) -> Dimensions:
    """16:9 frame spanning the viewport minus margin."""
    width = max(viewport_width - margin, 0)
    return Dimensions(width, math.floor(width * 9 / 16))


def extract_video_id(url: str | None) -> str | None:
    """Video id from an /embed/ path, a v= query parameter or a youtu.be link."""
    if not url:
        return None

    if "/embed/" in url:
        video_id = url.split("/embed/", 1)[1].split("?", 1)[0]
        return video_id or None

    match = WATCH_PARAM.search(url)
    if match:
        return match.group(1)

    match = SHORT_URL.search(url)
    return match.group(1) if match else None


def is_video_host(url: str | None, hosts: tuple[str, ...]) -> bool:
    """True when url points at one of hosts or a subdomain of one."""
    if not url:
        return False
    if url.startswith("//"):
        url = "https:" + url
    hostname = (urlsplit(url).hostname or "").lower()
    return any(hostname == host or hostname.endswith("." + host) for host in hosts)


def article_text_size(base: float, text_size: str | None) -> float:
    """Font size for the reader's text size setting."""
    return base * TEXT_SIZE_SCALE.get(text_size or "", 1.0)
