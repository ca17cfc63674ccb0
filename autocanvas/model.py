"""Input items, canvas nodes and edges.

Nodes are a tagged union of three plain dataclasses.  Geometry shared by every
variant lives in module-level functions that accept any :data:`Node`, so the
variants stay free of inheritance and serialization can switch on ``kind``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Literal, Optional, Sequence, Tuple, Union

from .colors import NodeColor
from .geometry import Point2D, Size2D

NodeKind = Literal["item", "label", "boundary"]
Directionality = Literal["none", "one-way", "two-way"]
EdgeSide = Literal["top", "right", "bottom", "left"]
EdgeEnd = Literal["none", "arrow"]

DIRECTIONALITIES: Tuple[str, ...] = ("none", "one-way", "two-way")
EDGE_SIDES: Tuple[str, ...] = ("top", "right", "bottom", "left")


@dataclass(frozen=True)
class EmbeddingItem:
    """One upstream item with its embedding vector."""

    id: str
    vector: Tuple[float, ...]
    display_name: str = ""
    source_ref: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "vector", tuple(float(v) for v in self.vector))
        if not self.display_name:
            object.__setattr__(self, "display_name", self.id)

    @property
    def dimension(self) -> int:
        return len(self.vector)


@dataclass
class ItemNode:
    id: str
    position: Point2D
    size: Size2D
    source_ref: str
    color: Optional[NodeColor] = None
    kind: NodeKind = field(default="item", init=False)


@dataclass
class LabelNode:
    id: str
    position: Point2D
    size: Size2D
    text: str
    color: Optional[NodeColor] = None
    kind: NodeKind = field(default="label", init=False)


@dataclass
class ClusterBoundaryNode:
    id: str
    position: Point2D
    size: Size2D
    label: Optional[str] = None
    color: Optional[NodeColor] = None
    kind: NodeKind = field(default="boundary", init=False)


Node = Union[ItemNode, LabelNode, ClusterBoundaryNode]
NODE_KINDS: Tuple[str, ...] = ("item", "label", "boundary")


def node_center(node: Node) -> Point2D:
    return Point2D(
        node.position.x + node.size.width * 0.5,
        node.position.y + node.size.height * 0.5,
    )


def node_bounds(node: Node) -> Tuple[Point2D, Point2D]:
    """Return ``(top_left, bottom_right)``."""

    top_left = node.position
    return top_left, top_left.offset(node.size.width, node.size.height)


def node_contains_point(node: Node, point: Point2D) -> bool:
    top_left, bottom_right = node_bounds(node)
    return top_left.x <= point.x <= bottom_right.x and top_left.y <= point.y <= bottom_right.y


def nodes_overlap(a: Node, b: Node) -> bool:
    """Axis-aligned box intersection; boxes that only touch count as overlapping."""

    a_tl, a_br = node_bounds(a)
    b_tl, b_br = node_bounds(b)
    return not (
        a_br.x < b_tl.x
        or b_br.x < a_tl.x
        or a_br.y < b_tl.y
        or b_br.y < a_tl.y
    )


def node_distance(a: Node, b: Node) -> float:
    return node_center(a).distance_to(node_center(b))


def move_node_to(node: Node, position: Point2D) -> None:
    node.position = position


def move_node_by(node: Node, dx: float, dy: float) -> None:
    node.position = node.position.offset(dx, dy)


def boundary_contains_node(boundary: Node, node: Node) -> bool:
    """Return ``True`` when ``node`` lies entirely inside ``boundary``."""

    outer_tl, outer_br = node_bounds(boundary)
    inner_tl, inner_br = node_bounds(node)
    return (
        inner_tl.x >= outer_tl.x
        and inner_tl.y >= outer_tl.y
        and inner_br.x <= outer_br.x
        and inner_br.y <= outer_br.y
    )


def enclosing_box(nodes: Iterable[Node], padding: float = 0.0) -> Optional[Tuple[Point2D, Size2D]]:
    """Return the padded bounding box of ``nodes`` or ``None`` when empty."""

    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    seen = False
    for node in nodes:
        seen = True
        top_left, bottom_right = node_bounds(node)
        min_x = min(min_x, top_left.x)
        min_y = min(min_y, top_left.y)
        max_x = max(max_x, bottom_right.x)
        max_y = max(max_y, bottom_right.y)
    if not seen:
        return None
    return (
        Point2D(min_x - padding, min_y - padding),
        Size2D(max_x - min_x + 2.0 * padding, max_y - min_y + 2.0 * padding),
    )


def boundary_around(
    node_id: str,
    members: Sequence[Node],
    padding: float = 50.0,
    label: Optional[str] = None,
    color: Optional[NodeColor] = None,
) -> ClusterBoundaryNode:
    """Build a boundary node enclosing ``members`` with ``padding`` on every side."""

    box = enclosing_box(members, padding)
    if box is None:
        return ClusterBoundaryNode(node_id, Point2D.origin(), Size2D(200.0, 150.0), label, color)
    position, size = box
    return ClusterBoundaryNode(node_id, position, size, label, color)


@dataclass(frozen=True)
class Edge:
    id: str
    from_node: str
    to_node: str
    directionality: Directionality = "one-way"
    label: Optional[str] = None
    color: Optional[NodeColor] = None
    from_side: Optional[EdgeSide] = None
    to_side: Optional[EdgeSide] = None

    def __post_init__(self) -> None:
        if self.directionality not in DIRECTIONALITIES:
            raise ValueError(f"unknown edge directionality {self.directionality!r}")
        for side in (self.from_side, self.to_side):
            if side is not None and side not in EDGE_SIDES:
                raise ValueError(f"unknown edge side {side!r}")

    @property
    def from_end(self) -> EdgeEnd:
        return "arrow" if self.directionality == "two-way" else "none"

    @property
    def to_end(self) -> EdgeEnd:
        return "none" if self.directionality == "none" else "arrow"

    def connects(self, a: str, b: str) -> bool:
        return (self.from_node == a and self.to_node == b) or (
            self.from_node == b and self.to_node == a
        )

    def involves(self, node_id: str) -> bool:
        return self.from_node == node_id or self.to_node == node_id

    def other_end(self, node_id: str) -> Optional[str]:
        if self.from_node == node_id:
            return self.to_node
        if self.to_node == node_id:
            return self.from_node
        return None


def directionality_from_ends(from_end: Optional[str], to_end: Optional[str]) -> Directionality:
    """Map canvas arrow ends back to a directionality.

    A missing ``toEnd`` means an arrow, a missing ``fromEnd`` means none.
    """

    head = (to_end or "arrow") == "arrow"
    tail = (from_end or "none") == "arrow"
    if head and tail:
        return "two-way"
    if head or tail:
        return "one-way"
    return "none"


__all__ = [
    "ClusterBoundaryNode",
    "DIRECTIONALITIES",
    "Directionality",
    "EDGE_SIDES",
    "Edge",
    "EdgeEnd",
    "EdgeSide",
    "EmbeddingItem",
    "ItemNode",
    "LabelNode",
    "NODE_KINDS",
    "Node",
    "NodeKind",
    "boundary_around",
    "boundary_contains_node",
    "directionality_from_ends",
    "enclosing_box",
    "move_node_by",
    "move_node_to",
    "node_bounds",
    "node_center",
    "node_contains_point",
    "node_distance",
    "nodes_overlap",
]
