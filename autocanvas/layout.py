"""Layout assembly: embeddings in, positioned canvas graph out."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .colors import NodeColor
from .dbscan import Cluster, ClusterPoint, DBSCANOptions, run_dbscan
from .geometry import Point2D, Size2D
from .graph import Graph
from .logging_utils import apply_debug_logging
from .mds import MDSOptions, cosine_similarity_matrix, project
from .model import (
    ClusterBoundaryNode,
    Edge,
    EmbeddingItem,
    ItemNode,
    boundary_around,
    move_node_by,
    node_center,
    nodes_overlap,
)

logger = logging.getLogger(__name__)

OVERLAP_MARGIN = 20.0
OVERLAP_BUFFER = 10.0
JITTER_SPAN = 10.0


def similarity_label(similarity: float) -> str:
    """Whole percent, halves rounded up (``0.725 -> "73%"``)."""

    return f"{int(math.floor(similarity * 100.0 + 0.5))}%"


class LayoutError(RuntimeError):
    """Raised when a layout stage fails; no partial graph is produced."""


@dataclass
class LayoutOptions:
    """Tunables for a single layout run."""

    canvas_width: float = 2000.0
    canvas_height: float = 1500.0
    node_width: float = 250.0
    node_height: float = 150.0
    padding: float = 100.0
    cluster_eps: float = 200.0
    cluster_min_pts: int = 2
    edge_threshold: float = 0.7
    group_padding: float = 30.0
    overlap_iterations: int = 10
    include_clusters: bool = True
    show_edges: bool = True
    max_nodes: Optional[int] = None
    mds_max_iterations: int = 100
    mds_tolerance: float = 1e-6
    random_seed: Optional[int] = None

    @property
    def node_size(self) -> Size2D:
        return Size2D(self.node_width, self.node_height)

    def mds_options(self) -> MDSOptions:
        return MDSOptions(
            canvas_width=self.canvas_width,
            canvas_height=self.canvas_height,
            padding=self.padding,
            max_iterations=self.mds_max_iterations,
            tolerance=self.mds_tolerance,
            random_seed=self.random_seed,
        )

    def dbscan_options(self) -> DBSCANOptions:
        return DBSCANOptions(eps=self.cluster_eps, min_pts=self.cluster_min_pts)


@dataclass
class ClusterGroup:
    """A DBSCAN cluster mapped back onto the item nodes it contains."""

    cluster: Cluster
    nodes: List[ItemNode]


@dataclass
class LayoutStats:
    total_items: int
    items_included: int
    num_clusters: int
    num_edges: int
    processing_time_ms: int


@dataclass
class LayoutResult:
    success: bool
    graph: Optional[Graph] = None
    error: Optional[str] = None
    stats: Optional[LayoutStats] = None
    warnings: List[str] = field(default_factory=list)


class CanvasLayoutBuilder:
    """Runs projection, declutter, clustering, boundaries and edges in order.

    ``rng`` drives both the power-iteration start vectors and the jitter used
    for coincident nodes; pass a seeded generator for reproducible output.
    """

    def __init__(
        self,
        options: Optional[LayoutOptions] = None,
        *,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.options = options or LayoutOptions()
        self.rng = rng if rng is not None else np.random.default_rng(self.options.random_seed)

    def validate_items(self, items: Sequence[EmbeddingItem]) -> None:
        seen = set()
        dimension = None
        for item in items:
            if item.id in seen:
                raise LayoutError(f"duplicate item id {item.id!r}")
            seen.add(item.id)
            if dimension is None:
                dimension = item.dimension
            elif item.dimension != dimension:
                raise LayoutError(
                    f"item {item.id!r} has {item.dimension} components, expected {dimension}"
                )

    def compute_positions(self, items: Sequence[EmbeddingItem]) -> Dict[str, Point2D]:
        if not items:
            return {}
        return project(
            [item.vector for item in items],
            [item.id for item in items],
            self.options.mds_options(),
            rng=self.rng,
        )

    def create_item_nodes(
        self,
        items: Sequence[EmbeddingItem],
        positions: Mapping[str, Point2D],
        graph: Graph,
    ) -> List[ItemNode]:
        size = self.options.node_size
        return [
            ItemNode(
                id=graph.next_id("item"),
                position=positions.get(item.id, Point2D.origin()),
                size=size,
                source_ref=item.source_ref or item.id,
            )
            for item in items
        ]

    def resolve_overlaps(self, nodes: Sequence[ItemNode], iterations: Optional[int] = None) -> int:
        """Push overlapping nodes apart; return the number of passes that moved anything.

        Best effort: overlaps left after the last pass are accepted.
        """

        passes = self.options.overlap_iterations if iterations is None else iterations
        min_separation = max(self.options.node_width, self.options.node_height) + OVERLAP_MARGIN

        for pass_index in range(passes):
            moved = False
            for i in range(len(nodes)):
                for j in range(i + 1, len(nodes)):
                    a, b = nodes[i], nodes[j]
                    if not nodes_overlap(a, b):
                        continue
                    moved = True
                    ca, cb = node_center(a), node_center(b)
                    dx, dy = cb.x - ca.x, cb.y - ca.y
                    while dx == 0.0 and dy == 0.0:
                        jitter = (self.rng.random(2) - 0.5) * JITTER_SPAN
                        dx, dy = float(jitter[0]), float(jitter[1])
                    distance = math.hypot(dx, dy)
                    push = max(0.0, min_separation - distance) / 2.0 + OVERLAP_BUFFER
                    px, py = dx / distance * push, dy / distance * push
                    move_node_by(a, -px, -py)
                    move_node_by(b, px, py)
            if not moved:
                logger.info("Overlap resolution settled after %d pass(es)", pass_index)
                return pass_index

        logger.info("Overlap resolution stopped at the %d pass cap", passes)
        return passes

    def cluster_nodes(self, nodes: Sequence[ItemNode]) -> Tuple[List[ClusterGroup], List[ItemNode]]:
        points = [ClusterPoint(node.id, node.position) for node in nodes]
        result = run_dbscan(points, self.options.dbscan_options())
        by_id = {node.id: node for node in nodes}
        groups = [
            ClusterGroup(cluster=cluster, nodes=[by_id[p.id] for p in cluster.points if p.id in by_id])
            for cluster in result.clusters
        ]
        noise = [by_id[p.id] for p in result.noise if p.id in by_id]
        return groups, noise

    def create_boundary_nodes(
        self,
        groups: Sequence[ClusterGroup],
        labels: Optional[Mapping[int, str]],
        graph: Graph,
    ) -> List[ClusterBoundaryNode]:
        """One padded group node per cluster; ``labels`` maps cluster id to a caller label."""

        labels = labels or {}
        boundaries: List[ClusterBoundaryNode] = []
        for index, group in enumerate(groups):
            label = labels.get(group.cluster.cluster_id) or f"Cluster {index + 1}"
            boundaries.append(
                boundary_around(
                    graph.next_id("group"),
                    group.nodes,
                    padding=self.options.group_padding,
                    label=label,
                    color=NodeColor.by_index(index),
                )
            )
        return boundaries

    def create_similarity_edges(
        self,
        items: Sequence[EmbeddingItem],
        node_by_item: Mapping[str, ItemNode],
        threshold: float,
        graph: Graph,
    ) -> List[Edge]:
        """Connect every item pair whose vectors have cosine >= ``threshold``."""

        if len(items) < 2:
            return []
        sims = cosine_similarity_matrix(np.asarray([item.vector for item in items], dtype=float))

        edges: List[Edge] = []
        processed = set()
        for i in range(len(items)):
            for j in range(i + 1, len(items)):
                similarity = float(sims[i, j])
                if similarity < threshold:
                    continue
                node_a = node_by_item.get(items[i].id)
                node_b = node_by_item.get(items[j].id)
                if node_a is None or node_b is None:
                    continue
                key = tuple(sorted((node_a.id, node_b.id)))
                if key in processed:
                    continue
                processed.add(key)
                edges.append(
                    Edge(
                        id=graph.next_id("edge"),
                        from_node=node_a.id,
                        to_node=node_b.id,
                        directionality="none",
                        label=similarity_label(similarity),
                    )
                )
        return edges

    def build(
        self,
        items: Sequence[EmbeddingItem],
        cluster_labels: Optional[Mapping[int, str]] = None,
    ) -> Graph:
        """Assemble the complete graph for ``items``."""

        graph = Graph()
        items = list(items)
        if self.options.max_nodes is not None:
            items = items[: max(0, int(self.options.max_nodes))]
        if not items:
            return graph

        self.validate_items(items)
        try:
            positions = self.compute_positions(items)
            item_nodes = self.create_item_nodes(items, positions, graph)
            node_by_item = {item.id: node for item, node in zip(items, item_nodes)}
            self.resolve_overlaps(item_nodes)

            boundaries: List[ClusterBoundaryNode] = []
            if self.options.include_clusters:
                groups, noise = self.cluster_nodes(item_nodes)
                boundaries = self.create_boundary_nodes(groups, cluster_labels, graph)
                logger.info("Built %d cluster boundary node(s), %d noise item(s)", len(boundaries), len(noise))

            edges: List[Edge] = []
            if self.options.show_edges:
                edges = self.create_similarity_edges(
                    items, node_by_item, self.options.edge_threshold, graph
                )
                logger.info(
                    "Derived %d similarity edge(s) at threshold %.3f", len(edges), self.options.edge_threshold
                )

            graph.add_nodes(boundaries)
            graph.add_nodes(item_nodes)
            graph.add_edges(edges)
        except ValueError as exc:
            raise LayoutError(str(exc)) from exc

        logger.info("Layout finished: %r", graph)
        return graph


def generate_layout(
    items: Sequence[EmbeddingItem],
    options: Optional[LayoutOptions] = None,
    *,
    cluster_labels: Optional[Mapping[int, str]] = None,
    rng: Optional[np.random.Generator] = None,
) -> LayoutResult:
    """Run :class:`CanvasLayoutBuilder` and report the outcome instead of raising."""

    started = time.perf_counter()
    items = list(items)
    if not items:
        return LayoutResult(success=False, error="No items supplied")

    builder = CanvasLayoutBuilder(options, rng=rng)
    try:
        graph = builder.build(items, cluster_labels=cluster_labels)
    except LayoutError as exc:
        logger.warning("Layout failed: %s", exc)
        return LayoutResult(success=False, error=f"Failed to generate layout: {exc}")

    stats = LayoutStats(
        total_items=len(items),
        items_included=len(graph.item_nodes()),
        num_clusters=len(graph.boundary_nodes()),
        num_edges=graph.edge_count,
        processing_time_ms=int(round((time.perf_counter() - started) * 1000.0)),
    )
    warnings: List[str] = []
    if stats.items_included < stats.total_items:
        warnings.append(f"max_nodes kept {stats.items_included} of {stats.total_items} item(s)")
    return LayoutResult(success=True, graph=graph, stats=stats, warnings=warnings)


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "CanvasLayoutBuilder",
    "ClusterGroup",
    "LayoutError",
    "LayoutOptions",
    "LayoutResult",
    "LayoutStats",
    "generate_layout",
    "similarity_label",
]
