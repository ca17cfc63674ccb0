"""Free-text cards placed in empty space below the existing layout."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .colors import NodeColor
from .geometry import Point2D, Size2D
from .graph import Graph
from .model import LabelNode

logger = logging.getLogger(__name__)

ANNOTATION_CARD_SIZE = Size2D(300.0, 150.0)
GRID_COLUMNS = 3
GRID_SPACING = 50.0
CONTENT_GAP = 100.0


def find_empty_positions(
    graph: Graph,
    count: int,
    card_size: Size2D = ANNOTATION_CARD_SIZE,
) -> List[Point2D]:
    """Grid slots for ``count`` cards, three per row, below everything on the canvas."""

    bounds = graph.bounds()
    if bounds is None:
        start = Point2D.origin()
    else:
        start = Point2D(bounds.min.x, bounds.max.y + CONTENT_GAP)

    step_x = card_size.width + GRID_SPACING
    step_y = card_size.height + GRID_SPACING
    return [
        start.offset((i % GRID_COLUMNS) * step_x, (i // GRID_COLUMNS) * step_y)
        for i in range(max(0, count))
    ]


def add_annotation_cards(
    graph: Graph,
    texts: Sequence[str],
    card_size: Size2D = ANNOTATION_CARD_SIZE,
    color: Optional[NodeColor] = NodeColor("5"),
) -> List[LabelNode]:
    positions = find_empty_positions(graph, len(texts), card_size)
    cards = [
        LabelNode(graph.next_id("note"), position, card_size, text, color)
        for text, position in zip(texts, positions)
    ]
    graph.add_nodes(cards)
    logger.info("Added %d annotation card(s)", len(cards))
    return cards


__all__ = [
    "ANNOTATION_CARD_SIZE",
    "add_annotation_cards",
    "find_empty_positions",
]
