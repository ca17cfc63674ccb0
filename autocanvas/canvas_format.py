"""Read and write graphs in the JSON Canvas document format.

Node kinds map onto canvas node types as ``item -> file``, ``label -> text``
and ``boundary -> group``.  Group nodes are written first so that canvas
viewers paint them underneath the items they enclose.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import AbstractSet, Any, Dict, List, Mapping, Optional, Union

from .colors import NodeColor
from .geometry import DEFAULT_NODE_HEIGHT, DEFAULT_NODE_WIDTH, GeometryError, Point2D, Size2D
from .graph import Graph, GraphIntegrityError
from .model import (
    ClusterBoundaryNode,
    Edge,
    ItemNode,
    LabelNode,
    Node,
    directionality_from_ends,
)

logger = logging.getLogger(__name__)

CANVAS_TYPES: Dict[str, str] = {"item": "file", "label": "text", "boundary": "group"}


class CanvasFormatError(ValueError):
    """Raised when a canvas document is not a JSON object with node/edge lists."""


def _number(value: float) -> Union[int, float]:
    return int(value) if float(value).is_integer() else float(value)


def node_to_canvas(node: Node) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": node.id,
        "type": CANVAS_TYPES[node.kind],
        "x": _number(node.position.x),
        "y": _number(node.position.y),
        "width": _number(node.size.width),
        "height": _number(node.size.height),
    }
    if isinstance(node, ItemNode):
        data["file"] = node.source_ref
    elif isinstance(node, LabelNode):
        data["text"] = node.text
    elif node.label:
        data["label"] = node.label
    if node.color is not None:
        data["color"] = str(node.color)
    return data


def edge_to_canvas(edge: Edge) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": edge.id,
        "fromNode": edge.from_node,
        "toNode": edge.to_node,
    }
    if edge.from_side:
        data["fromSide"] = edge.from_side
    if edge.to_side:
        data["toSide"] = edge.to_side
    data["fromEnd"] = edge.from_end
    data["toEnd"] = edge.to_end
    if edge.color is not None:
        data["color"] = str(edge.color)
    if edge.label:
        data["label"] = edge.label
    return data


def graph_to_canvas(graph: Graph) -> Dict[str, List[Dict[str, Any]]]:
    nodes = graph.nodes()
    ordered = [n for n in nodes if isinstance(n, ClusterBoundaryNode)]
    ordered.extend(n for n in nodes if not isinstance(n, ClusterBoundaryNode))
    return {
        "nodes": [node_to_canvas(node) for node in ordered],
        "edges": [edge_to_canvas(edge) for edge in graph.edges()],
    }


def _optional_color(raw: Any, owner: str) -> Optional[NodeColor]:
    if raw is None or raw == "":
        return None
    try:
        return NodeColor.parse(raw)
    except GeometryError:
        logger.info("Ignoring invalid color %r on %s", raw, owner)
        return None


def _field(data: Mapping[str, Any], key: str, default: float) -> Any:
    value = data.get(key)
    return default if value is None else value


def _entry_id(
    data: Mapping[str, Any],
    graph: Graph,
    prefix: str,
    reserved: AbstractSet[str] = frozenset(),
) -> str:
    """Explicit id, or a fresh one that no entry of the document claims."""

    if data.get("id"):
        return str(data["id"])
    while True:
        candidate = graph.next_id(prefix)
        if candidate not in reserved:
            return candidate


def node_from_canvas(
    data: Mapping[str, Any],
    graph: Graph,
    reserved: AbstractSet[str] = frozenset(),
) -> Optional[Node]:
    """Build a node from one canvas entry, or return ``None`` for unsupported types."""

    node_type = data.get("type")
    node_id = _entry_id(data, graph, "node", reserved)
    try:
        position = Point2D(_field(data, "x", 0.0), _field(data, "y", 0.0))
        size = Size2D(
            _field(data, "width", DEFAULT_NODE_WIDTH),
            _field(data, "height", DEFAULT_NODE_HEIGHT),
        )
    except (TypeError, ValueError) as exc:
        logger.info("Skipping node %r with bad geometry: %s", node_id, exc)
        return None
    color = _optional_color(data.get("color"), f"node {node_id!r}")

    if node_type == "file":
        return ItemNode(node_id, position, size, str(data.get("file", "")), color)
    if node_type == "text":
        return LabelNode(node_id, position, size, str(data.get("text", "")), color)
    if node_type == "group":
        label = data.get("label")
        return ClusterBoundaryNode(node_id, position, size, str(label) if label else None, color)

    logger.info("Skipping node %r of unsupported type %r", node_id, node_type)
    return None


def edge_from_canvas(
    data: Mapping[str, Any],
    graph: Graph,
    reserved: AbstractSet[str] = frozenset(),
) -> Optional[Edge]:
    from_node = data.get("fromNode")
    to_node = data.get("toNode")
    edge_id = _entry_id(data, graph, "edge", reserved)
    if not from_node or not to_node:
        logger.info("Skipping edge %r without both endpoints", edge_id)
        return None

    from_end = data.get("fromEnd")
    to_end = data.get("toEnd")
    directionality = directionality_from_ends(from_end, to_end)
    from_side = data.get("fromSide")
    to_side = data.get("toSide")
    if directionality == "one-way" and from_end == "arrow":
        # arrow only on the tail: flip so the head points at the arrowed node
        from_node, to_node = to_node, from_node
        from_side, to_side = to_side, from_side

    label = data.get("label")
    try:
        return Edge(
            id=edge_id,
            from_node=str(from_node),
            to_node=str(to_node),
            directionality=directionality,
            label=str(label) if label else None,
            color=_optional_color(data.get("color"), f"edge {edge_id!r}"),
            from_side=from_side or None,
            to_side=to_side or None,
        )
    except ValueError as exc:
        logger.info("Skipping edge %r: %s", edge_id, exc)
        return None


def graph_from_canvas(data: Mapping[str, Any]) -> Graph:
    """Rebuild a :class:`Graph` from a parsed canvas document.

    Parsing is tolerant: unsupported node types, duplicate ids and edges
    pointing at unknown nodes are dropped with an INFO log entry.
    """

    if not isinstance(data, Mapping):
        raise CanvasFormatError(f"canvas document must be an object, got {type(data).__name__}")
    raw_nodes = data.get("nodes") or []
    raw_edges = data.get("edges") or []
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise CanvasFormatError("canvas 'nodes' and 'edges' must be lists")

    reserved = {
        str(raw["id"])
        for raw in raw_nodes + raw_edges
        if isinstance(raw, Mapping) and raw.get("id")
    }

    graph = Graph()
    for raw in raw_nodes:
        if not isinstance(raw, Mapping):
            logger.info("Skipping non-object node entry %r", raw)
            continue
        node = node_from_canvas(raw, graph, reserved)
        if node is None:
            continue
        try:
            graph.add_node(node)
        except GraphIntegrityError as exc:
            logger.info("Skipping node: %s", exc)

    for raw in raw_edges:
        if not isinstance(raw, Mapping):
            logger.info("Skipping non-object edge entry %r", raw)
            continue
        edge = edge_from_canvas(raw, graph, reserved)
        if edge is None:
            continue
        try:
            graph.add_edge(edge)
        except GraphIntegrityError as exc:
            logger.info("Skipping edge: %s", exc)

    logger.info("Parsed canvas into %r", graph)
    return graph


def dumps(graph: Graph) -> str:
    return json.dumps(graph_to_canvas(graph), indent=2, ensure_ascii=False)


def loads(text: str) -> Graph:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CanvasFormatError(f"canvas is not valid JSON: {exc}") from exc
    return graph_from_canvas(data)


def save_canvas(path: Union[str, Path], graph: Graph) -> Path:
    target = Path(path)
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(dumps(graph), encoding="utf-8")
    logger.info("Wrote %r to %s", graph, target)
    return target


def load_canvas(path: Union[str, Path]) -> Graph:
    return loads(Path(path).read_text(encoding="utf-8"))


__all__ = [
    "CANVAS_TYPES",
    "CanvasFormatError",
    "dumps",
    "edge_from_canvas",
    "edge_to_canvas",
    "graph_from_canvas",
    "graph_to_canvas",
    "load_canvas",
    "loads",
    "node_from_canvas",
    "node_to_canvas",
    "save_canvas",
]
