"""
CLI interface for richcontent.

Reads article markup from a file or stdin and prints the display
instructions as JSON or as a readable outline.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import get_config
from .core import render_content
from .instructions import (
    AdSlot,
    Blockquote,
    DisplayInstruction,
    Image,
    List,
    Paragraph,
    Passthrough,
    TextRun,
    VideoEmbed,
    to_dict,
)
from .text import plain_text


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    cfg = get_config()

    parser = argparse.ArgumentParser(
        prog="richcontent",
        description="Render article markup into display instructions",
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Input file (reads from stdin if not provided)",
    )

    parser.add_argument(
        "--width",
        "-w",
        type=int,
        default=cfg.render.viewport_width,
        help=f"Viewport width in device pixels (default: {cfg.render.viewport_width})",
    )

    parser.add_argument(
        "--network",
        "-n",
        action="store_true",
        help="Render in network context (network ad units)",
    )

    parser.add_argument(
        "--text-size",
        choices=["Small", "Medium", "Large"],
        default=None,
        help="Reader text size setting",
    )

    parser.add_argument(
        "--format",
        "-f",
        choices=["json", "text"],
        default="json",
        dest="output_format",
        help="Output format (default: json)",
    )

    parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the plain text of the markup instead of instructions",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log pipeline decisions to stderr",
    )

    return parser.parse_args(args)


def read_input(filepath: str | None) -> str:
    """Read markup from file or stdin."""
    if filepath:
        with open(filepath, encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


def _runs_text(runs: tuple[TextRun, ...] | None) -> str:
    out = []
    for run in runs or ():
        text = run.text
        if run.bold_italic:
            text = f"***{text}***"
        elif run.bold:
            text = f"**{text}**"
        elif run.italic:
            text = f"*{text}*"
        if run.href:
            text = f"[{text}]({run.href})"
        out.append(text)
    return "".join(out)


def format_outline(instructions: list[DisplayInstruction], indent: int = 0) -> list[str]:
    """One readable line (or a few) per instruction."""
    pad = "  " * indent
    lines = []
    for ins in instructions:
        if isinstance(ins, Paragraph):
            lines.append(f"{pad}{_runs_text(ins.runs)}")
        elif isinstance(ins, Image):
            lines.append(f"{pad}[image {ins.width:g}x{ins.height:g}] {ins.source}")
            if ins.caption:
                lines.append(f"{pad}  {_runs_text(ins.caption)}")
        elif isinstance(ins, VideoEmbed):
            lines.append(f"{pad}[video {ins.width:g}x{ins.height:g}] {ins.watch_url}")
        elif isinstance(ins, List):
            for item in ins.items:
                lines.append(f"{pad}{item.marker}{_runs_text(item.runs)}")
        elif isinstance(ins, Blockquote):
            if ins.card is not None:
                lines.append(f"{pad}> [{ins.card.title}]({ins.card.href})")
            else:
                lines.extend(f"{pad}> {line}" for line in format_outline(list(ins.children)))
        elif isinstance(ins, AdSlot):
            lines.append(f"{pad}[ad {ins.unit}]")
        elif isinstance(ins, Passthrough):
            lines.extend(format_outline(list(ins.children), indent))
    return lines


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    if parsed.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    if parsed.width < 1:
        print(f"Error: Width must be >= 1, got {parsed.width}", file=sys.stderr)
        return 1

    # Read content
    try:
        content = read_input(parsed.file)
    except FileNotFoundError:
        print(f"Error: File not found: {parsed.file}", file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return 1

    if parsed.plain:
        print(plain_text(content))
        return 0

    instructions = render_content(
        content,
        viewport_width=parsed.width,
        is_network=parsed.network,
        text_size=parsed.text_size,
    )

    if parsed.output_format == "text":
        print("\n".join(format_outline(instructions)))
    else:
        print(json.dumps([to_dict(ins) for ins in instructions], ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
