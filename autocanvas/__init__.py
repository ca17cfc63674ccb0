from .geometry import GeometryError, Point2D, Size2D
from .colors import NodeColor, PRESET_COLORS
from .model import (
    ClusterBoundaryNode,
    Edge,
    EmbeddingItem,
    ItemNode,
    LabelNode,
    Node,
)
from .graph import Graph, GraphBounds, GraphIntegrityError
from .mds import MDSOptions, ProjectionError, cosine_similarity, project
from .dbscan import NOISE, DBSCANOptions, DBSCANResult, ClusterPoint, run_dbscan, clustering_statistics
from .layout import (
    CanvasLayoutBuilder,
    LayoutError,
    LayoutOptions,
    LayoutResult,
    LayoutStats,
    generate_layout,
)
from .canvas_format import (
    CanvasFormatError,
    dumps,
    graph_from_canvas,
    graph_to_canvas,
    load_canvas,
    loads,
    save_canvas,
)
from .config import get_default_layout_options, layout_options_from_settings, load_settings
from .labels import ClusterLabeler, LabelingResult, MappingLabeler, label_boundaries
from .annotations import add_annotation_cards, find_empty_positions
from .preview import render_graph_png

__all__ = [
    'GeometryError',
    'Point2D',
    'Size2D',
    'NodeColor',
    'PRESET_COLORS',
    'ClusterBoundaryNode',
    'Edge',
    'EmbeddingItem',
    'ItemNode',
    'LabelNode',
    'Node',
    'Graph',
    'GraphBounds',
    'GraphIntegrityError',
    'MDSOptions',
    'ProjectionError',
    'cosine_similarity',
    'project',
    'NOISE',
    'DBSCANOptions',
    'DBSCANResult',
    'ClusterPoint',
    'run_dbscan',
    'clustering_statistics',
    'CanvasLayoutBuilder',
    'LayoutError',
    'LayoutOptions',
    'LayoutResult',
    'LayoutStats',
    'generate_layout',
    'CanvasFormatError',
    'dumps',
    'graph_from_canvas',
    'graph_to_canvas',
    'load_canvas',
    'loads',
    'save_canvas',
    'get_default_layout_options',
    'layout_options_from_settings',
    'load_settings',
    'ClusterLabeler',
    'LabelingResult',
    'MappingLabeler',
    'label_boundaries',
    'add_annotation_cards',
    'find_empty_positions',
    'render_graph_png',
]
