"""Graph container holding canvas nodes and the edges between them."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from .geometry import Point2D, Size2D
from .model import (
    ClusterBoundaryNode,
    Edge,
    ItemNode,
    LabelNode,
    Node,
    NodeKind,
    enclosing_box,
)

logger = logging.getLogger(__name__)


class GraphIntegrityError(ValueError):
    """Raised when an insertion would break the graph's referential integrity."""


@dataclass(frozen=True)
class GraphBounds:
    min: Point2D
    max: Point2D
    size: Size2D


class Graph:
    """Nodes keyed by id plus edges whose endpoints must exist in the graph.

    Ids handed out by :meth:`next_id` come from a counter owned by this
    instance, so independent graphs never share id state.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}
        self._counter = itertools.count(1)

    def next_id(self, prefix: str = "node") -> str:
        while True:
            candidate = f"{prefix}-{next(self._counter)}"
            if candidate not in self._nodes and candidate not in self._edges:
                return candidate

    # nodes

    def add_node(self, node: Node) -> None:
        if node.id in self._nodes:
            raise GraphIntegrityError(f"duplicate node id {node.id!r}")
        self._nodes[node.id] = node

    def add_nodes(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            self.add_node(node)

    def remove_node(self, node_id: str) -> bool:
        """Remove a node together with every edge touching it."""

        if node_id not in self._nodes:
            return False
        for edge_id in [eid for eid, edge in self._edges.items() if edge.involves(node_id)]:
            del self._edges[edge_id]
        del self._nodes[node_id]
        return True

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def nodes_of_kind(self, kind: NodeKind) -> List[Node]:
        return [node for node in self._nodes.values() if node.kind == kind]

    def item_nodes(self) -> List[ItemNode]:
        return [node for node in self._nodes.values() if isinstance(node, ItemNode)]

    def label_nodes(self) -> List[LabelNode]:
        return [node for node in self._nodes.values() if isinstance(node, LabelNode)]

    def boundary_nodes(self) -> List[ClusterBoundaryNode]:
        return [node for node in self._nodes.values() if isinstance(node, ClusterBoundaryNode)]

    # edges

    def add_edge(self, edge: Edge) -> None:
        missing = [end for end in (edge.from_node, edge.to_node) if end not in self._nodes]
        if missing:
            raise GraphIntegrityError(
                f"cannot add edge {edge.id!r}: unknown node(s) {', '.join(repr(m) for m in missing)}"
            )
        if edge.id in self._edges:
            raise GraphIntegrityError(f"duplicate edge id {edge.id!r}")
        self._edges[edge.id] = edge

    def add_edges(self, edges: Iterable[Edge]) -> None:
        for edge in edges:
            self.add_edge(edge)

    def remove_edge(self, edge_id: str) -> bool:
        return self._edges.pop(edge_id, None) is not None

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def edges_for_node(self, node_id: str) -> List[Edge]:
        return [edge for edge in self._edges.values() if edge.involves(node_id)]

    def has_edge_between(self, a: str, b: str) -> bool:
        return any(edge.connects(a, b) for edge in self._edges.values())

    def neighbors(self, node_id: str) -> List[Node]:
        result: List[Node] = []
        for edge in self._edges.values():
            other = edge.other_end(node_id)
            if other is not None and other in self._nodes:
                result.append(self._nodes[other])
        return result

    # summary

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    def bounds(self) -> Optional[GraphBounds]:
        box = enclosing_box(self._nodes.values())
        if box is None:
            return None
        top_left, size = box
        return GraphBounds(
            min=top_left,
            max=top_left.offset(size.width, size.height),
            size=size,
        )

    def center(self) -> Point2D:
        bounds = self.bounds()
        if bounds is None:
            return Point2D.origin()
        return bounds.min.midpoint(bounds.max)

    def clear(self) -> None:
        self._nodes.clear()
        self._edges.clear()

    def __repr__(self) -> str:
        return f"Graph(nodes={len(self._nodes)}, edges={len(self._edges)})"


__all__ = [
    "Graph",
    "GraphBounds",
    "GraphIntegrityError",
]
