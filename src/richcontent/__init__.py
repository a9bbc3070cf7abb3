"""Rich-content parsing and display composition for article and video markup."""

from .builder import build
from .core import ContentRenderer, render_content
from .dom import MarkupNode
from .render import FormatContext, RenderOptions, render, render_nodes
from .slots import plan_slots

__all__ = [
    "ContentRenderer",
    "FormatContext",
    "MarkupNode",
    "RenderOptions",
    "build",
    "plan_slots",
    "render",
    "render_content",
    "render_nodes",
]
