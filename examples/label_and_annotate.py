"""Example: name the clusters of an existing canvas and add question cards."""

import sys

from autocanvas import MappingLabeler, add_annotation_cards, dumps, label_boundaries, load_canvas

TITLES = {
    "ml/intro.md": "Intro to ML",
    "ml/backprop.md": "Backpropagation",
    "ml/optimizers.md": "Optimizers",
}


def main(path: str) -> None:
    graph = load_canvas(path)
    labeler = MappingLabeler(
        {("Backpropagation", "Intro to ML", "Optimizers"): "Machine learning"},
        fallback=None,
    )
    result = label_boundaries(graph, labeler, TITLES)
    print("Labels generated:", result.labels_generated)
    add_annotation_cards(graph, ["What connects these topics?", "Which note is missing?"])
    print(dumps(graph))


if __name__ == "__main__":
    main(sys.argv[1])
