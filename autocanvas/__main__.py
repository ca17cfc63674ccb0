import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from autocanvas import (
    EmbeddingItem,
    dumps,
    generate_layout,
    get_default_layout_options,
    layout_options_from_settings,
    load_settings,
    render_graph_png,
    save_canvas,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _read_items(path: str) -> List[EmbeddingItem]:
    with open(path, "r", encoding="utf-8") as fin:
        data: Any = json.load(fin)
    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of items or an object with 'items'")

    items: List[EmbeddingItem] = []
    for idx, entry in enumerate(data):
        if not isinstance(entry, dict) or "id" not in entry or "vector" not in entry:
            raise ValueError(f"{path}: item {idx} needs 'id' and 'vector'")
        items.append(
            EmbeddingItem(
                id=str(entry["id"]),
                vector=entry["vector"],
                display_name=str(entry.get("displayName") or ""),
                source_ref=str(entry.get("sourceRef") or ""),
            )
        )
    return items


def _read_labels(path: Optional[str]) -> Optional[Dict[int, str]]:
    if not path:
        return None
    with open(path, "r", encoding="utf-8") as fin:
        data = json.load(fin)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: labels must be an object keyed by cluster id")
    return {int(key): str(value) for key, value in data.items()}


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Lay out embedding items on a canvas")
    parser.add_argument("path", help="Path to a JSON file with items and their vectors")
    parser.add_argument("--output", help="Write the canvas JSON here instead of stdout")
    parser.add_argument("--settings", help="JSON settings file with canvas/clustering sections")
    parser.add_argument("--seed", type=int, help="Random seed for projection and jitter")
    parser.add_argument("--edge-threshold", type=float, help="Cosine similarity needed for an edge")
    parser.add_argument("--eps", type=float, help="DBSCAN neighbourhood radius in canvas units")
    parser.add_argument("--min-pts", type=int, help="DBSCAN core point threshold")
    parser.add_argument("--no-edges", action="store_true", help="Skip similarity edges")
    parser.add_argument("--no-clusters", action="store_true", help="Skip cluster boundaries")
    parser.add_argument("--labels", help="JSON object mapping cluster id to boundary label")
    parser.add_argument("--png-output-path", help="Render a PNG preview of the layout to the given path")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    options = get_default_layout_options()
    if args.settings:
        options = layout_options_from_settings(load_settings(args.settings), options)
    if args.seed is not None:
        options.random_seed = args.seed
    if args.edge_threshold is not None:
        options.edge_threshold = args.edge_threshold
    if args.eps is not None:
        options.cluster_eps = args.eps
    if args.min_pts is not None:
        options.cluster_min_pts = args.min_pts
    if args.no_edges:
        options.show_edges = False
    if args.no_clusters:
        options.include_clusters = False

    logger.info("Reading items from %s", args.path)
    items = _read_items(args.path)
    result = generate_layout(items, options, cluster_labels=_read_labels(args.labels))

    if not result.success or result.graph is None:
        logger.error("%s", result.error)
        print(f"Layout failed: {result.error}", file=sys.stderr)
        raise SystemExit(1)

    for warning in result.warnings:
        logger.warning("%s", warning)

    stats = result.stats
    summary_stream = sys.stderr if not args.output else sys.stdout
    if stats is not None:
        print(f"Items: {stats.items_included}/{stats.total_items}", file=summary_stream)
        print(f"Clusters: {stats.num_clusters}", file=summary_stream)
        print(f"Edges: {stats.num_edges}", file=summary_stream)
        print(f"Time: {stats.processing_time_ms} ms", file=summary_stream)

    if args.output:
        save_canvas(Path(args.output), result.graph)
        print(f"Canvas written to {args.output}")
    else:
        print(dumps(result.graph))

    if args.png_output_path:
        render_graph_png(result.graph, Path(args.png_output_path), title=Path(args.path).stem)
        print(f"Preview written to {args.png_output_path}", file=summary_stream)


if __name__ == "__main__":
    main()
