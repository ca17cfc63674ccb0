"""DBSCAN density clustering over canvas positions."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial.distance import cdist

from .geometry import Point2D
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

NOISE = -1


@dataclass
class DBSCANOptions:
    """``eps`` is the neighbourhood radius in canvas units, ``min_pts`` counts the point itself."""

    eps: float = 200.0
    min_pts: int = 2

    def validate(self) -> None:
        if not self.eps >= 0.0:
            raise ValueError(f"eps must be non-negative, got {self.eps}")
        if int(self.min_pts) < 1:
            raise ValueError(f"min_pts must be at least 1, got {self.min_pts}")


@dataclass(frozen=True)
class ClusterPoint:
    id: str
    position: Point2D


@dataclass
class Cluster:
    cluster_id: int
    points: List[ClusterPoint]
    centroid: Point2D

    @property
    def member_ids(self) -> frozenset:
        return frozenset(point.id for point in self.points)

    @property
    def size(self) -> int:
        return len(self.points)


@dataclass
class DBSCANResult:
    clusters: List[Cluster] = field(default_factory=list)
    noise: List[ClusterPoint] = field(default_factory=list)
    assignments: Dict[str, int] = field(default_factory=dict)

    def partition(self) -> List[frozenset]:
        """Member-id sets of every cluster, independent of cluster numbering."""

        return sorted((cluster.member_ids for cluster in self.clusters), key=sorted)


@dataclass
class ClusteringStats:
    num_clusters: int
    num_noise: int
    avg_cluster_size: float
    max_cluster_size: int
    min_cluster_size: int


def _neighbourhoods(points: Sequence[ClusterPoint], eps: float) -> List[np.ndarray]:
    coords = np.array([(p.position.x, p.position.y) for p in points], dtype=float)
    within = cdist(coords, coords) <= eps
    return [np.flatnonzero(row) for row in within]


def centroid(points: Sequence[ClusterPoint]) -> Point2D:
    if not points:
        return Point2D.origin()
    xs = [p.position.x for p in points]
    ys = [p.position.y for p in points]
    return Point2D(sum(xs) / len(xs), sum(ys) / len(ys))


def _expand(
    seed: int,
    neighbours: List[np.ndarray],
    labels: List[Optional[int]],
    cluster_id: int,
    min_pts: int,
) -> None:
    labels[seed] = cluster_id
    queue = deque(int(idx) for idx in neighbours[seed])
    visited = {seed}

    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)

        if labels[current] == NOISE:
            # reached by a core point: border member, never a core itself
            labels[current] = cluster_id
            continue
        if labels[current] is not None:
            continue

        labels[current] = cluster_id
        if len(neighbours[current]) >= min_pts:
            queue.extend(int(idx) for idx in neighbours[current] if int(idx) not in visited)


def run_dbscan(
    points: Sequence[ClusterPoint],
    options: DBSCANOptions = DBSCANOptions(),
) -> DBSCANResult:
    """Cluster ``points``; cluster ids are contiguous in discovery order."""

    options.validate()
    if not points:
        return DBSCANResult()

    min_pts = int(options.min_pts)
    neighbours = _neighbourhoods(points, float(options.eps))
    labels: List[Optional[int]] = [None] * len(points)
    next_cluster = 0

    for idx in range(len(points)):
        if labels[idx] is not None:
            continue
        if len(neighbours[idx]) < min_pts:
            labels[idx] = NOISE
            continue
        _expand(idx, neighbours, labels, next_cluster, min_pts)
        next_cluster += 1

    members: Dict[int, List[ClusterPoint]] = {}
    noise: List[ClusterPoint] = []
    assignments: Dict[str, int] = {}
    for point, label in zip(points, labels):
        final = NOISE if label is None else label
        assignments[point.id] = final
        if final == NOISE:
            noise.append(point)
        else:
            members.setdefault(final, []).append(point)

    clusters = [
        Cluster(cluster_id=cid, points=pts, centroid=centroid(pts))
        for cid, pts in sorted(members.items())
    ]
    logger.info(
        "DBSCAN eps=%s min_pts=%d: %d point(s) -> %d cluster(s), %d noise",
        options.eps,
        min_pts,
        len(points),
        len(clusters),
        len(noise),
    )
    return DBSCANResult(clusters=clusters, noise=noise, assignments=assignments)


def clustering_statistics(result: DBSCANResult) -> ClusteringStats:
    sizes: Tuple[int, ...] = tuple(cluster.size for cluster in result.clusters)
    return ClusteringStats(
        num_clusters=len(sizes),
        num_noise=len(result.noise),
        avg_cluster_size=(sum(sizes) / len(sizes)) if sizes else 0.0,
        max_cluster_size=max(sizes, default=0),
        min_cluster_size=min(sizes, default=0),
    )


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "Cluster",
    "ClusterPoint",
    "ClusteringStats",
    "DBSCANOptions",
    "DBSCANResult",
    "NOISE",
    "centroid",
    "clustering_statistics",
    "run_dbscan",
]
