import json
from types import SimpleNamespace

import pytest

import autocanvas.__main__ as cli


def _write_items(path):
    items = [
        {"id": "a", "sourceRef": "notes/a.md", "vector": [1.0, 0.01, 0.0, 0.0, 0.0]},
        {"id": "b", "sourceRef": "notes/b.md", "vector": [1.0, 0.0, 0.01, 0.0, 0.0]},
        {"id": "c", "sourceRef": "notes/c.md", "vector": [1.0, 0.0, 0.0, 0.01, 0.0]},
        {"id": "d", "sourceRef": "notes/d.md", "vector": [0.0, 0.0, 0.0, 0.0, 1.0]},
    ]
    path.write_text(json.dumps({"items": items}), encoding="utf-8")


def test_main_writes_canvas_file(tmp_path, capsys):
    items_path = tmp_path / "items.json"
    _write_items(items_path)
    output = tmp_path / "out" / "layout.canvas"

    cli.main([str(items_path), "--output", str(output), "--seed", "3", "--no-clusters"])

    data = json.loads(output.read_text(encoding="utf-8"))
    assert sorted(node["file"] for node in data["nodes"]) == [
        "notes/a.md",
        "notes/b.md",
        "notes/c.md",
        "notes/d.md",
    ]
    assert len(data["edges"]) == 3
    out = capsys.readouterr().out
    assert "Items: 4/4" in out
    assert "Clusters: 0" in out


def test_main_applies_flags_and_settings(tmp_path, monkeypatch):
    items_path = tmp_path / "items.json"
    _write_items(items_path)
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"canvas": {"maxNodes": 10}}), encoding="utf-8")
    labels_path = tmp_path / "labels.json"
    labels_path.write_text(json.dumps({"0": "Drafts"}), encoding="utf-8")
    captured = {}

    def _fake_generate(items, options, cluster_labels=None):
        captured.update(items=items, options=options, labels=cluster_labels)
        return SimpleNamespace(success=False, graph=None, error="boom", warnings=[], stats=None)

    monkeypatch.setattr(cli, "generate_layout", _fake_generate)

    with pytest.raises(SystemExit) as exc:
        cli.main(
            [
                str(items_path),
                "--settings",
                str(settings_path),
                "--edge-threshold",
                "0.95",
                "--eps",
                "120",
                "--min-pts",
                "3",
                "--no-edges",
                "--labels",
                str(labels_path),
            ]
        )

    assert exc.value.code == 1
    options = captured["options"]
    assert options.max_nodes == 10
    assert options.edge_threshold == 0.95
    assert options.cluster_eps == 120
    assert options.cluster_min_pts == 3
    assert options.show_edges is False
    assert captured["labels"] == {0: "Drafts"}
    assert [item.id for item in captured["items"]] == ["a", "b", "c", "d"]
    assert captured["items"][0].source_ref == "notes/a.md"


def test_main_renders_preview_when_requested(tmp_path, monkeypatch):
    items_path = tmp_path / "items.json"
    _write_items(items_path)
    rendered = []

    monkeypatch.setattr(cli, "render_graph_png", lambda graph, path, title=None: rendered.append((path, title)))

    png_path = tmp_path / "preview.png"
    cli.main(
        [
            str(items_path),
            "--output",
            str(tmp_path / "layout.canvas"),
            "--seed",
            "1",
            "--png-output-path",
            str(png_path),
        ]
    )

    assert rendered == [(png_path, "items")]


def test_main_rejects_items_without_vectors(tmp_path):
    items_path = tmp_path / "items.json"
    items_path.write_text(json.dumps([{"id": "a"}]), encoding="utf-8")

    with pytest.raises(ValueError) as exc:
        cli.main([str(items_path)])
    assert "needs 'id' and 'vector'" in str(exc.value)
