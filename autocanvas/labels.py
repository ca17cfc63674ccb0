"""Name cluster boundaries after the items they enclose."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Protocol, Sequence

from .graph import Graph
from .model import boundary_contains_node

logger = logging.getLogger(__name__)


class ClusterLabeler(Protocol):
    def label_cluster(
        self, titles: Sequence[str], summaries: Optional[Sequence[str]] = None
    ) -> Optional[str]:
        ...


class MappingLabeler:
    """Look labels up by the sorted tuple of member titles.

    ``fallback`` is used for clusters missing from the mapping; when it is
    ``None`` such clusters are left unlabelled.
    """

    def __init__(self, labels: Mapping[Sequence[str], str], fallback: Optional[str] = None) -> None:
        self._labels: Dict[tuple, str] = {tuple(sorted(key)): value for key, value in labels.items()}
        self.fallback = fallback

    def label_cluster(
        self, titles: Sequence[str], summaries: Optional[Sequence[str]] = None
    ) -> Optional[str]:
        return self._labels.get(tuple(sorted(titles)), self.fallback)


@dataclass
class LabelingResult:
    success: bool
    labels_generated: int = 0
    error: Optional[str] = None


def label_boundaries(
    graph: Graph,
    labeler: ClusterLabeler,
    title_by_source: Mapping[str, str],
    summary_by_source: Optional[Mapping[str, str]] = None,
) -> LabelingResult:
    """Ask ``labeler`` for a name for every boundary that encloses titled items.

    Boundaries whose items have no known title are skipped.  A failing
    labeler aborts the run and is reported in the result, labels already
    assigned stay in place.
    """

    boundaries = graph.boundary_nodes()
    items = graph.item_nodes()
    generated = 0

    try:
        for boundary in boundaries:
            contained = [item for item in items if boundary_contains_node(boundary, item)]
            titles: List[str] = [
                title_by_source[item.source_ref] for item in contained if item.source_ref in title_by_source
            ]
            if not titles:
                continue
            summaries = None
            if summary_by_source is not None:
                summaries = [
                    summary_by_source[item.source_ref]
                    for item in contained
                    if item.source_ref in summary_by_source
                ]
            label = labeler.label_cluster(titles, summaries)
            if label and label.strip():
                boundary.label = label.strip()
                generated += 1
    except Exception as exc:
        logger.warning("Cluster labeling failed: %s", exc)
        return LabelingResult(
            success=False,
            labels_generated=generated,
            error=f"Failed to label clusters: {exc}",
        )

    logger.info("Labelled %d of %d boundary node(s)", generated, len(boundaries))
    return LabelingResult(success=True, labels_generated=generated)


__all__ = [
    "ClusterLabeler",
    "LabelingResult",
    "MappingLabeler",
    "label_boundaries",
]
