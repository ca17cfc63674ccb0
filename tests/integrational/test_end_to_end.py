from __future__ import annotations

from pathlib import Path

import numpy as np

from autocanvas import EmbeddingItem, LayoutOptions, generate_layout, loads, dumps
from autocanvas.model import boundary_contains_node
from autocanvas.preview import render_graph_png

ARTIFACT_ROOT = Path("/tmp/autocanvas_tests")


def _orthogonal_items(count: int, dim: int, rng: np.random.Generator):
    items = []
    for idx in range(count):
        vector = np.zeros(dim)
        vector[idx] = 3.0
        vector += rng.normal(scale=0.01, size=dim)
        items.append(EmbeddingItem(f"item{idx}", vector.tolist(), source_ref=f"notes/item{idx}.md"))
    return items


def test_unrelated_items_get_no_edges_and_distinct_positions():
    rng = np.random.default_rng(123)
    items = _orthogonal_items(5, 8, rng)

    result = generate_layout(items, LayoutOptions(edge_threshold=0.9), rng=rng)

    assert result.success
    graph = result.graph
    assert graph.edge_count == 0
    item_nodes = graph.item_nodes()
    assert len(item_nodes) == 5
    positions = {(node.position.x, node.position.y) for node in item_nodes}
    assert len(positions) == 5


def test_near_duplicates_form_one_cluster_and_outlier_is_noise():
    items = [
        EmbeddingItem("A", [1.0, 0.01, 0.0, 0.0, 0.0], source_ref="A.md"),
        EmbeddingItem("B", [1.0, 0.0, 0.01, 0.0, 0.0], source_ref="B.md"),
        EmbeddingItem("C", [1.0, 0.0, 0.0, 0.01, 0.0], source_ref="C.md"),
        EmbeddingItem("D", [0.0, 0.0, 0.0, 0.0, 1.0], source_ref="D.md"),
    ]
    options = LayoutOptions(canvas_width=4000, canvas_height=1000, cluster_eps=1500, cluster_min_pts=2)

    result = generate_layout(items, options, rng=np.random.default_rng(2024))

    assert result.success
    graph = result.graph
    boundaries = graph.boundary_nodes()
    assert len(boundaries) == 1
    members = {n.source_ref for n in graph.item_nodes() if boundary_contains_node(boundaries[0], n)}
    assert members == {"A.md", "B.md", "C.md"}
    assert result.stats.num_clusters == 1

    restored = loads(dumps(graph))
    assert restored.node_count == graph.node_count
    assert restored.edge_count == graph.edge_count

    ARTIFACT_ROOT.mkdir(parents=True, exist_ok=True)
    render_graph_png(graph, ARTIFACT_ROOT / "near_duplicates.png", title="near duplicates")
