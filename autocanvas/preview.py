"""PNG previews of a laid-out graph."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

from .graph import Graph  # noqa: E402
from .model import ClusterBoundaryNode, ItemNode, LabelNode, node_center  # noqa: E402

logger = logging.getLogger(__name__)

_ITEM_FILL = "#dbe9f6"
_EDGE_COLOR = "#888888"


def render_graph_png(graph: Graph, path: Union[str, Path], title: Optional[str] = None) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(8, 6))
    for edge in graph.edges():
        a = graph.get_node(edge.from_node)
        b = graph.get_node(edge.to_node)
        if a is None or b is None:
            continue
        ca, cb = node_center(a), node_center(b)
        ax.plot([ca.x, cb.x], [ca.y, cb.y], color=_EDGE_COLOR, linewidth=0.8, zorder=1)

    for node in graph.nodes():
        color = node.color.hex_value if node.color is not None else None
        if isinstance(node, ClusterBoundaryNode):
            ax.add_patch(
                Rectangle(
                    (node.position.x, node.position.y),
                    node.size.width,
                    node.size.height,
                    fill=False,
                    linestyle="--",
                    edgecolor=color or "black",
                    zorder=0,
                )
            )
            if node.label:
                ax.text(node.position.x, node.position.y, node.label, fontsize=8, va="bottom")
        elif isinstance(node, ItemNode):
            ax.add_patch(
                Rectangle(
                    (node.position.x, node.position.y),
                    node.size.width,
                    node.size.height,
                    facecolor=color or _ITEM_FILL,
                    edgecolor="black",
                    linewidth=0.5,
                    zorder=2,
                )
            )
            center = node_center(node)
            ax.text(center.x, center.y, node.source_ref, fontsize=6, ha="center", va="center", zorder=3)
        elif isinstance(node, LabelNode):
            center = node_center(node)
            ax.text(center.x, center.y, node.text, fontsize=7, ha="center", va="center", zorder=3)

    bounds = graph.bounds()
    if bounds is not None:
        margin = 0.05 * max(bounds.size.width, bounds.size.height, 1.0)
        ax.set_xlim(bounds.min.x - margin, bounds.max.x + margin)
        ax.set_ylim(bounds.max.y + margin, bounds.min.y - margin)
    else:
        ax.invert_yaxis()
    ax.set_aspect("equal", adjustable="box")
    if title:
        ax.set_title(title)
    ax.grid(True, linestyle="--", linewidth=0.5, alpha=0.5)
    fig.tight_layout()
    fig.savefig(target)
    plt.close(fig)
    logger.info("Wrote preview to %s", target)
    return target


__all__ = ["render_graph_png"]
