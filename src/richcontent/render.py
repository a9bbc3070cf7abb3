"""
Render dispatcher.

Turns MarkupNodes into display instructions. Block-level tags are looked up
in a closed dispatch table; anything not in the table passes through, so
unknown markup only loses its own styling and never breaks a render.

Inherited formatting (bold/italic, enclosing link, highlight colour, list
kind) travels down the recursion in an immutable FormatContext. Nothing is
ever written back onto the nodes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from .config import Config, get_config
from .dom import MarkupNode
from .instructions import (
    AdSlot,
    Blockquote,
    DisplayInstruction,
    EmbeddedLinkCard,
    Image,
    List,
    ListItem,
    ListKind,
    Paragraph,
    Passthrough,
    TextRun,
    VideoEmbed,
)
from .sources import (
    article_text_size,
    best_source,
    compute_display_dimensions,
    extract_video_id,
    is_video_host,
    video_dimensions,
)
from .text import highlight_color, normalize_text, truncate_text

logger = logging.getLogger(__name__)

BOLD_TAGS = ("strong", "b")
ITALIC_TAGS = ("em", "i")
INLINE_TAGS = BOLD_TAGS + ITALIC_TAGS + ("a", "span", "br")

# Content that must never reach the reader
SILENT_TAGS = frozenset({"script", "style", "noscript", "template", "head"})

EMBED_CLASS = "wp-embedded-content"
VIDEO_CONTAINER_CLASS = "youtube-container"


@dataclass(frozen=True)
class FormatContext:
    """Formatting inherited from ancestors, passed down the call stack."""
    bold: bool = False
    italic: bool = False
    bold_italic: bool = False
    list_kind: ListKind | None = None
    href: str | None = None
    color: str | None = None

    def run(self, text: str) -> TextRun:
        if self.bold_italic or (self.bold and self.italic):
            return TextRun(text, bold_italic=True, href=self.href, color=self.color)
        return TextRun(
            text, bold=self.bold, italic=self.italic, href=self.href, color=self.color
        )


@dataclass(frozen=True)
class RenderOptions:
    """Per-render inputs: viewport, reader settings and display tunables."""
    viewport_width: float = 390
    text_size: str = "Medium"
    base_font_size: float = 19.0
    image_margin: float = 40
    video_margin: float = 36
    embed_title_length: int = 120
    bullet: str = "• "
    ad_units: tuple[str, ...] = ("home", "article1", "article2", "article3", "ros")
    video_hosts: tuple[str, ...] = ("youtube.com", "youtube-nocookie.com", "youtu.be")
    lead: bool = False  # rendering the first block of the content

    @classmethod
    def from_config(
        cls,
        config: Config | None = None,
        viewport_width: float | None = None,
        text_size: str | None = None,
    ) -> RenderOptions:
        cfg = config or get_config()
        return cls(
            viewport_width=viewport_width if viewport_width is not None else cfg.render.viewport_width,
            text_size=text_size or cfg.render.text_size,
            base_font_size=cfg.render.base_font_size,
            image_margin=cfg.render.image_margin,
            video_margin=cfg.render.video_margin,
            embed_title_length=cfg.render.embed_title_length,
            bullet=cfg.render.bullet,
            ad_units=tuple(cfg.slots.units),
            video_hosts=tuple(cfg.video.hosts),
        )

    @property
    def max_image_width(self) -> float:
        return max(self.viewport_width - self.image_margin, 0)

    @property
    def font_size(self) -> float:
        return article_text_size(self.base_font_size, self.text_size)


# -- inline runs -------------------------------------------------------------


def render_runs(node: MarkupNode, context: FormatContext = FormatContext()) -> list[TextRun]:
    """Flatten a node into styled text runs."""
    if node.is_text:
        text = normalize_text(node.text)
        return [context.run(text)] if text else []

    name = node.name
    if name in SILENT_TAGS or name == "img":
        return []
    if name == "br":
        return [context.run("\n")]

    if name in BOLD_TAGS:
        context = replace(context, bold=True)
        if node.has_child(*ITALIC_TAGS):
            context = replace(context, bold_italic=True)
    elif name in ITALIC_TAGS:
        context = replace(context, italic=True)
    elif name == "a":
        context = replace(
            context,
            href=node.attributes.get("href") or context.href,
            color=highlight_color(node.attributes.get("style")) or context.color,
        )
    elif name == "span":
        color = highlight_color(node.attributes.get("style")) or context.color
        inner = _child_runs(node, replace(context, color=color))
        if not inner:
            return []
        return [TextRun(" ")] + inner + [TextRun(" ")]

    return _child_runs(node, context)


def _child_runs(node: MarkupNode, context: FormatContext) -> list[TextRun]:
    runs: list[TextRun] = []
    for child in node.children:
        runs.extend(render_runs(child, context))
    return runs


def _has_text(runs: list[TextRun]) -> bool:
    return any(run.text.strip() for run in runs)


def _caption_runs(node: MarkupNode) -> list[TextRun]:
    """Captions are italic throughout and only understand nested em/i."""
    runs: list[TextRun] = []
    for child in node.children:
        if child.is_text:
            text = normalize_text(child.text)
            if text:
                runs.append(TextRun(text, italic=True))
        elif child.name not in SILENT_TAGS:
            runs.extend(_caption_runs(child))
    return runs


# -- media -------------------------------------------------------------------


def _image(img: MarkupNode, options: RenderOptions, caption=None) -> Image | None:
    source = best_source(img.attributes, options.viewport_width)
    if not source:
        logger.debug("Dropping image without a usable src/srcset")
        return None
    dims = compute_display_dimensions(
        img.attributes.get("width"),
        img.attributes.get("height"),
        options.max_image_width,
        options.viewport_width,
    )
    return Image(
        source=source,
        width=dims.width,
        height=dims.height,
        caption=caption,
        alt=img.attributes.get("alt") or None,
        priority=options.lead,
    )


def _video(src: str | None, options: RenderOptions) -> VideoEmbed | None:
    if not is_video_host(src, options.video_hosts):
        logger.debug("Dropping embed from unrecognized host: %s", src)
        return None
    video_id = extract_video_id(src)
    if not video_id:
        logger.debug("Dropping embed without a video id: %s", src)
        return None
    dims = video_dimensions(options.viewport_width, options.video_margin)
    return VideoEmbed(video_id=video_id, width=dims.width, height=dims.height)


# -- block handlers ----------------------------------------------------------

Handler = Callable[[MarkupNode, FormatContext, RenderOptions], "DisplayInstruction | None"]


def _paragraph(runs: list[TextRun], options: RenderOptions) -> Paragraph | None:
    if not _has_text(runs):
        return None
    return Paragraph(runs=tuple(runs), font_size=options.font_size)


def _render_p(node, context, options):
    strong = node.find_child("strong")
    img = (strong.find_child("img") if strong else None) or node.find_child("img")
    runs = _child_runs(node, context)
    if img is None:
        return _paragraph(runs, options)

    parts = [_image(img, options), _paragraph(runs, options)]
    parts = [part for part in parts if part is not None]
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return Passthrough(tuple(parts))


def _render_inline(node, context, options):
    paragraph = _paragraph(render_runs(node, context), options)
    if paragraph is not None:
        return paragraph
    # e.g. <a><img></a>: no text, but the children may still render
    return _render_passthrough(node, context, options)


def _render_img(node, context, options):
    return _image(node, options)


def _render_figure(node, context, options):
    img = node.find_child("img")
    if img is None:
        return None
    caption_node = node.find_child("figcaption")
    caption = None
    if caption_node is not None:
        runs = _caption_runs(caption_node)
        caption = tuple(runs) if _has_text(runs) else None
    return _image(img, options, caption=caption)


def _render_iframe(node, context, options):
    if EMBED_CLASS in node.css_classes:
        return None
    return _video(node.attributes.get("src"), options)


def _render_div(node, context, options):
    if VIDEO_CONTAINER_CLASS in node.css_classes:
        iframe = node.find_child("iframe")
        if iframe is not None and iframe.attributes.get("src"):
            return _video(iframe.attributes["src"], options)
    return _render_passthrough(node, context, options)


def _render_list(node, context, options):
    kind = ListKind.UNORDERED if node.name == "ul" else ListKind.ORDERED
    item_context = replace(context, list_kind=kind)
    items = []
    # Markers come from the position among siblings at render time
    for position, child in enumerate(node.children, start=1):
        runs = (
            _child_runs(child, item_context)
            if child.name == "li"
            else render_runs(child, item_context)
        )
        if not _has_text(runs):
            continue
        marker = _list_marker(item_context, position, options) if child.name == "li" else ""
        items.append(ListItem(marker=marker, runs=tuple(runs)))
    if not items:
        return None
    return List(kind=kind, items=tuple(items))


def _list_marker(context: FormatContext, position: int, options: RenderOptions) -> str:
    if context.list_kind is ListKind.ORDERED:
        return f"{position}. "
    if context.list_kind is ListKind.UNORDERED:
        return options.bullet
    return ""


def _render_blockquote(node, context, options):
    if EMBED_CLASS in node.css_classes:
        card = _link_card(node, options)
        if card is not None:
            return Blockquote(card=card)
    children = render_nodes(node.children, options, context)
    if not children:
        return None
    return Blockquote(children=tuple(children))


def _link_card(node: MarkupNode, options: RenderOptions) -> EmbeddedLinkCard | None:
    paragraph = node.find_child("p")
    link = paragraph.find_child("a") if paragraph is not None else None
    href = link.attributes.get("href") if link is not None else None
    if not href:
        return None
    title = normalize_text(truncate_text(link.text_content(), options.embed_title_length))
    return EmbeddedLinkCard(href=href, title=title.strip())


def _render_ad(node, context, options):
    unit = node.attributes.get("unit")
    if unit not in options.ad_units:
        logger.debug("Dropping ad slot with unknown unit %r", unit)
        return None
    return AdSlot(unit=unit)


def _render_silent(node, context, options):
    return None


def _render_passthrough(node, context, options):
    children = render_nodes(node.children, options, context)
    if not children:
        return None
    if len(children) == 1:
        return children[0]
    return Passthrough(tuple(children))


BLOCK_HANDLERS: dict[str, Handler] = {
    "p": _render_p,
    "strong": _render_inline,
    "b": _render_inline,
    "em": _render_inline,
    "i": _render_inline,
    "a": _render_inline,
    "span": _render_inline,
    "br": _render_silent,
    "img": _render_img,
    "figure": _render_figure,
    "iframe": _render_iframe,
    "div": _render_div,
    "ul": _render_list,
    "ol": _render_list,
    "blockquote": _render_blockquote,
    "ad": _render_ad,
    **{name: _render_silent for name in SILENT_TAGS},
}


def render(
    node: MarkupNode,
    context: FormatContext = FormatContext(),
    options: RenderOptions | None = None,
) -> DisplayInstruction | None:
    """Render one node. None means the node produces nothing."""
    options = options or RenderOptions.from_config()
    if node.is_text:
        text = normalize_text(node.text)
        if not text.strip():
            return None
        return Paragraph(runs=(context.run(text),), font_size=options.font_size)
    handler = BLOCK_HANDLERS.get(node.name, _render_passthrough)
    return handler(node, context, options)


def render_nodes(
    nodes: list[MarkupNode],
    options: RenderOptions | None = None,
    context: FormatContext = FormatContext(),
) -> list[DisplayInstruction]:
    """
    Render a sibling sequence.

    Passthrough wrappers are spliced into the sequence, so an unknown wrapper
    renders exactly like its children would on their own.
    """
    options = options or RenderOptions.from_config()
    out: list[DisplayInstruction] = []
    for node in nodes:
        instruction = render(node, context, options)
        if isinstance(instruction, Passthrough):
            out.extend(instruction.children)
        elif instruction is not None:
            out.append(instruction)
    return out
