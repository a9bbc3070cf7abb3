"""
Slot-insertion planner.

Decides where monetization markers go in the top-level node sequence.
Placement is measured in valid paragraphs: <p> nodes with content and no
direct <img> child.
"""

from __future__ import annotations

import logging

from .config import SlotConfig, get_config
from .dom import MarkupNode, ad_slot

logger = logging.getLogger(__name__)


def is_valid_paragraph(node: MarkupNode) -> bool:
    return (
        node.name == "p"
        and bool(node.children)
        and not node.has_child("img")
    )


def valid_paragraph_positions(nodes: list[MarkupNode]) -> list[int]:
    """Original indices of every valid paragraph, in order."""
    return [i for i, node in enumerate(nodes) if is_valid_paragraph(node)]


def plan_slots(
    nodes: list[MarkupNode],
    is_network: bool,
    config: SlotConfig | None = None,
) -> list[MarkupNode]:
    """
    Return a new top-level sequence with ad markers inserted.

    More than `first_threshold` valid paragraphs puts a marker after the
    `first_ordinal`-th one; more than `second_threshold` adds a second marker
    after the `second_ordinal`-th one. Both targets are resolved against the
    original sequence, so each marker sits directly after its paragraph.
    The input list is left untouched.
    """
    cfg = config or get_config().slots
    positions = valid_paragraph_positions(nodes)
    count = len(positions)

    # (original index, unit) pairs
    inserts: list[tuple[int, str]] = []
    if count > cfg.first_threshold and count >= cfg.first_ordinal:
        unit = cfg.network_unit if is_network else cfg.first_unit
        inserts.append((positions[cfg.first_ordinal - 1], unit))
    if count > cfg.second_threshold and count >= cfg.second_ordinal:
        unit = cfg.network_unit if is_network else cfg.second_unit
        inserts.append((positions[cfg.second_ordinal - 1], unit))

    planned = list(nodes)
    # Splice from the back so earlier indices stay valid
    for index, unit in sorted(inserts, reverse=True):
        planned.insert(index + 1, ad_slot(unit))
        logger.debug("Ad slot %r after top-level node %d", unit, index)

    return planned
