"""
Markup tree builder.

Feeds markup through the standard library's tolerant streaming parser and
assembles its open/text/close callbacks into a MarkupNode tree using an
explicit stack. Never raises on malformed input.
"""

from __future__ import annotations

import logging
from html.parser import HTMLParser

from .dom import MarkupNode, text_node

logger = logging.getLogger(__name__)

# Elements that never have content and never get a close tag
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

# Opening any of these closes an open <p>
_CLOSES_P = frozenset({
    "address", "article", "aside", "blockquote", "div", "dl", "figure",
    "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr",
    "ol", "p", "pre", "section", "table", "ul",
})

# A new <li> closes an open <li> unless a list sits between them
_LIST_SCOPE = frozenset({"ul", "ol"})


def _attributes(attrs: list[tuple[str, str | None]]) -> dict[str, str]:
    """First occurrence wins; valueless attributes map to an empty string."""
    attributes: dict[str, str] = {}
    for key, value in attrs:
        if key not in attributes:
            attributes[key] = value if value is not None else ""
    return attributes


class MarkupTreeBuilder(HTMLParser):
    """HTMLParser subclass that turns parser callbacks into a node tree."""

    def __init__(self):
        # Keep entity and character references raw; decoding happens at render.
        super().__init__(convert_charrefs=False)
        self.nodes: list[MarkupNode] = []
        self.stack: list[MarkupNode] = []
        self._pending: list[str] = []

    # -- helpers -------------------------------------------------------------

    def _attach(self, node: MarkupNode) -> None:
        if self.stack:
            self.stack[-1].add_child(node)
        else:
            self.nodes.append(node)

    def _flush_text(self) -> None:
        if not self._pending:
            return
        text = "".join(self._pending)
        self._pending = []
        if text.strip():
            self._attach(text_node(text))

    def _pop_to(self, name: str) -> bool:
        """Pop the stack down to and including the nearest open `name`."""
        for i in range(len(self.stack) - 1, -1, -1):
            if self.stack[i].name == name:
                del self.stack[i:]
                return True
        return False

    def _close_implied(self, name: str) -> None:
        if name in _CLOSES_P and self.stack and self.stack[-1].name == "p":
            self.stack.pop()
        elif name == "li":
            for i in range(len(self.stack) - 1, -1, -1):
                open_name = self.stack[i].name
                if open_name in _LIST_SCOPE:
                    break
                if open_name == "li":
                    del self.stack[i:]
                    break

    # -- parser callbacks ----------------------------------------------------

    def handle_starttag(self, tag, attrs):
        self._flush_text()
        self._close_implied(tag)
        node = MarkupNode(name=tag, attributes=_attributes(attrs))
        self._attach(node)
        if tag not in VOID_ELEMENTS:
            self.stack.append(node)

    def handle_startendtag(self, tag, attrs):
        # <tag/> never opens a scope
        self._flush_text()
        self._close_implied(tag)
        self._attach(MarkupNode(name=tag, attributes=_attributes(attrs)))

    def handle_endtag(self, tag):
        self._flush_text()
        if tag in VOID_ELEMENTS:
            return
        if not self._pop_to(tag):
            logger.debug("Ignoring stray close tag </%s>", tag)

    def handle_data(self, data):
        self._pending.append(data)

    def handle_entityref(self, name):
        self._pending.append(f"&{name};")

    def handle_charref(self, name):
        self._pending.append(f"&#{name};")

    def close(self):
        super().close()
        self._flush_text()
        self.stack = []

    # -- entry point ---------------------------------------------------------

    def build(self, markup: str) -> list[MarkupNode]:
        self.feed(markup)
        self.close()
        return self.nodes


def build(markup: str | None) -> list[MarkupNode]:
    """Parse markup into an ordered list of top-level nodes."""
    if not markup:
        return []
    return MarkupTreeBuilder().build(markup)
