"""Example pipeline: lay out a handful of notes from synthetic topic vectors."""

import numpy as np

from autocanvas import EmbeddingItem, LayoutOptions, dumps, generate_layout

TOPICS = {
    "ml": ["intro.md", "backprop.md", "optimizers.md"],
    "cooking": ["bread.md", "ramen.md"],
    "travel": ["lisbon.md"],
}


def build_items(rng: np.random.Generator):
    items = []
    for axis, (topic, notes) in enumerate(TOPICS.items()):
        for note in notes:
            vector = np.zeros(16)
            vector[axis] = 1.0
            vector += rng.normal(scale=0.05, size=16)
            items.append(EmbeddingItem(f"{topic}/{note}", vector.tolist(), source_ref=f"{topic}/{note}"))
    return items


def main() -> None:
    rng = np.random.default_rng(123)
    options = LayoutOptions(canvas_width=3000, canvas_height=2000, cluster_eps=400)
    result = generate_layout(build_items(rng), options, rng=rng)
    print("Success:", result.success)
    if not result.success:
        print("Error:", result.error)
        return
    stats = result.stats
    print(f"Clusters: {stats.num_clusters}, edges: {stats.num_edges}, {stats.processing_time_ms} ms")
    for node in result.graph.item_nodes():
        print(f"{node.source_ref}: {node.position}")
    print(dumps(result.graph))


if __name__ == "__main__":
    main()
