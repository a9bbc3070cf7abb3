"""
Display instructions - the only thing richcontent hands to the presentation
layer.

Every instruction is a frozen dataclass, so two renders of the same input can
be compared structurally. Collections are tuples for the same reason.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, fields
from enum import Enum
from typing import Union


class ListKind(str, Enum):
    ORDERED = "ordered"
    UNORDERED = "unordered"


@dataclass(frozen=True)
class TextRun:
    """A literal string plus its formatting flags."""
    text: str
    bold: bool = False
    italic: bool = False
    bold_italic: bool = False  # single combined style, never bold + italic
    href: str | None = None
    color: str | None = None

    @property
    def linked(self) -> bool:
        return self.href is not None


@dataclass(frozen=True)
class Paragraph:
    runs: tuple[TextRun, ...]
    font_size: float | None = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class Image:
    source: str
    width: float
    height: float
    caption: tuple[TextRun, ...] | None = None
    alt: str | None = None
    priority: bool = False  # first image of a block loads first


@dataclass(frozen=True)
class VideoEmbed:
    video_id: str
    width: float
    height: float

    @property
    def watch_url(self) -> str:
        return f"https://www.youtube.com/watch?v={self.video_id}"

    @property
    def thumbnail_url(self) -> str:
        return f"https://img.youtube.com/vi/{self.video_id}/maxresdefault.jpg"


@dataclass(frozen=True)
class ListItem:
    marker: str
    runs: tuple[TextRun, ...]

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(frozen=True)
class List:
    kind: ListKind
    items: tuple[ListItem, ...]


@dataclass(frozen=True)
class EmbeddedLinkCard:
    """A publisher's embedded-post widget, shown as a tappable title."""
    href: str
    title: str


@dataclass(frozen=True)
class Blockquote:
    children: tuple[DisplayInstruction, ...] = ()
    card: EmbeddedLinkCard | None = None


@dataclass(frozen=True)
class AdSlot:
    unit: str


@dataclass(frozen=True)
class Passthrough:
    children: tuple[DisplayInstruction, ...]


DisplayInstruction = Union[
    Paragraph, Image, VideoEmbed, List, Blockquote, AdSlot, Passthrough
]


def children_of(instruction: DisplayInstruction) -> tuple[DisplayInstruction, ...]:
    if isinstance(instruction, (Passthrough, Blockquote)):
        return instruction.children
    return ()


def iter_instructions(
    instructions: Iterable[DisplayInstruction],
) -> Iterator[DisplayInstruction]:
    """Depth-first walk over an instruction tree."""
    for instruction in instructions:
        yield instruction
        yield from iter_instructions(children_of(instruction))


def to_dict(value):
    """Plain JSON-ready data for an instruction tree, tagged with "type"."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, tuple):
        return [to_dict(item) for item in value]
    if hasattr(value, "__dataclass_fields__"):
        data = {"type": type(value).__name__}
        for f in fields(value):
            data[f.name] = to_dict(getattr(value, f.name))
        if isinstance(value, VideoEmbed):
            data["watch_url"] = value.watch_url
            data["thumbnail_url"] = value.thumbnail_url
        return data
    return value
