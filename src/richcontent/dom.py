"""
DOM - Markup tree for richcontent

Every markup string parses into a list of top-level MarkupNodes. Tag nodes
carry a name, attributes and children; text nodes carry the raw text payload.

Key invariant: the parent link is a weak, non-owning reference. It exists only
for ancestor lookups during rendering and never keeps a node alive.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterator
from dataclasses import dataclass, field

TAG = "tag"
TEXT = "text"


@dataclass(eq=False)
class MarkupNode:
    """A parsed unit of markup: either a tag or a run of text."""
    kind: str = TAG
    name: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[MarkupNode] = field(default_factory=list)
    text: str | None = None
    _parent: weakref.ref[MarkupNode] | None = field(default=None, repr=False)

    def __post_init__(self):
        if self.kind == TAG and not self.name:
            raise ValueError("Tag node requires a name")
        if self.kind not in (TAG, TEXT):
            raise ValueError(f"Unknown node kind: {self.kind!r}")
        for child in self.children:
            child._parent = weakref.ref(self)

    @property
    def parent(self) -> MarkupNode | None:
        return self._parent() if self._parent is not None else None

    @property
    def is_tag(self) -> bool:
        return self.kind == TAG

    @property
    def is_text(self) -> bool:
        return self.kind == TEXT

    @property
    def css_classes(self) -> list[str]:
        return self.attributes.get("class", "").split()

    def add_child(self, child: MarkupNode) -> MarkupNode:
        """Add a child node and return it for chaining."""
        child._parent = weakref.ref(self)
        self.children.append(child)
        return child

    def depth_first(self) -> Iterator[MarkupNode]:
        """Traverse tree depth-first, yielding self then children."""
        yield self
        for child in self.children:
            yield from child.depth_first()

    def find_child(self, *names: str) -> MarkupNode | None:
        """First direct child whose tag name is one of names."""
        for child in self.children:
            if child.name in names:
                return child
        return None

    def has_child(self, *names: str) -> bool:
        return self.find_child(*names) is not None

    def has_ancestor(self, *names: str) -> bool:
        node = self.parent
        while node is not None:
            if node.name in names:
                return True
            node = node.parent
        return False

    def text_content(self) -> str:
        """Concatenated raw text of this node and its descendants."""
        return "".join(node.text or "" for node in self.depth_first() if node.is_text)


def text_node(text: str) -> MarkupNode:
    return MarkupNode(kind=TEXT, text=text)


def ad_slot(unit: str) -> MarkupNode:
    """Synthetic monetization marker, only ever produced by the slot planner."""
    return MarkupNode(kind=TAG, name="ad", attributes={"unit": unit})


def iter_nodes(nodes: list[MarkupNode]) -> Iterator[MarkupNode]:
    """Depth-first walk over a top-level node list."""
    for node in nodes:
        yield from node.depth_first()
