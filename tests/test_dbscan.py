import pytest

from autocanvas.dbscan import (
    NOISE,
    ClusterPoint,
    DBSCANOptions,
    centroid,
    clustering_statistics,
    run_dbscan,
)
from autocanvas.geometry import Point2D


def _points(*coords):
    return [ClusterPoint(f"p{i}", Point2D(x, y)) for i, (x, y) in enumerate(coords)]


def test_close_points_cluster_and_far_point_is_noise():
    points = _points((0, 0), (100, 0), (50, 80), (1000, 1000))

    result = run_dbscan(points, DBSCANOptions(eps=150, min_pts=2))

    assert len(result.clusters) == 1
    assert result.clusters[0].member_ids == {"p0", "p1", "p2"}
    assert [p.id for p in result.noise] == ["p3"]
    assert result.assignments["p3"] == NOISE
    assert result.clusters[0].centroid == Point2D(50, 80 / 3)


def test_empty_input_yields_no_clusters():
    result = run_dbscan([])
    assert result.clusters == [] and result.noise == []


def test_zero_eps_makes_every_point_noise_or_singleton():
    points = _points((0, 0), (1, 0), (2, 0))

    strict = run_dbscan(points, DBSCANOptions(eps=0, min_pts=2))
    singletons = run_dbscan(points, DBSCANOptions(eps=0, min_pts=1))

    assert strict.clusters == []
    assert len(strict.noise) == 3
    assert [c.member_ids for c in singletons.clusters] == [{"p0"}, {"p1"}, {"p2"}]


def test_noise_point_is_reclaimed_as_border():
    # p0 is visited first and has too few neighbours, p1 is core and reaches it
    points = _points((0, 0), (100, 0), (200, 0))

    result = run_dbscan(points, DBSCANOptions(eps=100, min_pts=3))

    assert result.noise == []
    assert result.partition() == [frozenset({"p0", "p1", "p2"})]


def test_border_point_does_not_extend_cluster():
    points = _points((0, 0), (5, 0), (10, 0), (104, 0), (198, 0))

    result = run_dbscan(points, DBSCANOptions(eps=95, min_pts=4))

    assert len(result.clusters) == 1
    assert result.clusters[0].member_ids == {"p0", "p1", "p2", "p3"}
    assert [p.id for p in result.noise] == ["p4"]


def test_results_are_deterministic():
    points = _points((0, 0), (30, 40), (500, 500), (520, 510), (2000, 0))
    options = DBSCANOptions(eps=100, min_pts=2)

    first = run_dbscan(points, options)
    second = run_dbscan(points, options)

    assert first.assignments == second.assignments
    assert first.partition() == second.partition()
    assert [c.cluster_id for c in first.clusters] == [0, 1]


@pytest.mark.parametrize("options", [DBSCANOptions(eps=-1), DBSCANOptions(min_pts=0)])
def test_invalid_options_are_rejected(options):
    with pytest.raises(ValueError):
        run_dbscan(_points((0, 0)), options)


def test_clustering_statistics():
    points = _points((0, 0), (10, 0), (20, 0), (500, 0), (510, 0), (5000, 0))
    stats = clustering_statistics(run_dbscan(points, DBSCANOptions(eps=15, min_pts=2)))

    assert stats.num_clusters == 2
    assert stats.num_noise == 1
    assert stats.avg_cluster_size == pytest.approx(2.5)
    assert (stats.min_cluster_size, stats.max_cluster_size) == (2, 3)


def test_centroid_of_empty_group_is_origin():
    assert centroid([]) == Point2D.origin()
