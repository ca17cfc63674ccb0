from autocanvas.geometry import Point2D, Size2D
from autocanvas.graph import Graph
from autocanvas.model import ClusterBoundaryNode, Edge, ItemNode, LabelNode
from autocanvas.preview import render_graph_png


def test_render_graph_png_writes_file(tmp_path):
    graph = Graph()
    graph.add_node(ClusterBoundaryNode("g", Point2D(-30, -30), Size2D(710, 210), "Topic"))
    graph.add_node(ItemNode("a", Point2D(0, 0), Size2D(250, 150), "a.md"))
    graph.add_node(ItemNode("b", Point2D(400, 0), Size2D(250, 150), "b.md"))
    graph.add_node(LabelNode("t", Point2D(0, 400), Size2D(300, 150), "Why?"))
    graph.add_edge(Edge("e", "a", "b", "none"))

    path = render_graph_png(graph, tmp_path / "plots" / "layout.png", title="sample")

    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_render_empty_graph(tmp_path):
    path = render_graph_png(Graph(), tmp_path / "empty.png")
    assert path.stat().st_size > 0
