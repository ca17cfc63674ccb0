import numpy as np
import pytest

from autocanvas.mds import (
    MDSOptions,
    ProjectionError,
    cosine_similarity,
    cosine_similarity_matrix,
    distance_matrix,
    double_center,
    power_iteration,
    project,
    rescale_axis,
)


def _random_vectors(n, dim, seed=123):
    rng = np.random.default_rng(seed)
    return rng.normal(size=(n, dim)).tolist()


def test_project_empty_and_single_item():
    assert project([], []) == {}

    coords = project([[0.3, 0.4]], ["only"])
    assert (coords["only"].x, coords["only"].y) == (1000.0, 750.0)


def test_project_stays_inside_padded_canvas():
    vectors = _random_vectors(12, 16)
    ids = [f"n{i}" for i in range(12)]
    options = MDSOptions(canvas_width=1200, canvas_height=800, padding=50)

    coords = project(vectors, ids, options, rng=np.random.default_rng(7))

    assert set(coords) == set(ids)
    for point in coords.values():
        assert 50 <= point.x <= 1150
        assert 50 <= point.y <= 750
    xs = [p.x for p in coords.values()]
    assert min(xs) == pytest.approx(50)
    assert max(xs) == pytest.approx(1150)


def test_project_is_reproducible_with_seed():
    vectors = _random_vectors(8, 6)
    ids = [str(i) for i in range(8)]

    first = project(vectors, ids, MDSOptions(random_seed=42))
    second = project(vectors, ids, MDSOptions(random_seed=42))

    assert first == second


def test_identical_vectors_land_on_canvas_center():
    coords = project([[1.0, 2.0]] * 3, ["a", "b", "c"], rng=np.random.default_rng(0))

    for point in coords.values():
        assert point.x == pytest.approx(1000.0)
        assert point.y == pytest.approx(750.0)


def test_project_rejects_dimension_mismatch():
    with pytest.raises(ProjectionError) as exc:
        project([[1.0, 0.0], [1.0, 0.0, 0.0]], ["a", "b"])
    assert "dimension mismatch" in str(exc.value)


def test_project_rejects_id_count_mismatch():
    with pytest.raises(ProjectionError):
        project([[1.0, 0.0]], ["a", "b"])


def test_project_rejects_padding_larger_than_canvas():
    with pytest.raises(ProjectionError):
        project([[1.0], [2.0]], ["a", "b"], MDSOptions(canvas_width=100, canvas_height=100, padding=60))


def test_cosine_similarity_edge_cases():
    assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
    assert cosine_similarity([1, 1], [2, 2]) == pytest.approx(1.0)
    assert cosine_similarity([0, 0], [1, 2]) == 0.0
    assert cosine_similarity([1, 2], [3, 4]) == cosine_similarity([3, 4], [1, 2])


def test_distance_matrix_is_symmetric_with_zero_diagonal():
    matrix = np.asarray(_random_vectors(5, 4), dtype=float)
    dist = distance_matrix(matrix)

    assert np.allclose(dist, dist.T)
    assert np.all(np.diag(dist) == 0.0)
    sims = cosine_similarity_matrix(matrix)
    assert np.all(sims <= 1.0) and np.all(sims >= -1.0)


def test_double_center_rows_sum_to_zero():
    dist = distance_matrix(np.asarray(_random_vectors(6, 3), dtype=float))
    gram = double_center(dist)

    assert np.allclose(gram.sum(axis=0), 0.0)
    assert np.allclose(gram.sum(axis=1), 0.0)


def test_power_iteration_finds_dominant_eigenvalue():
    matrix = np.diag([5.0, 1.0, 0.5])
    pair = power_iteration(matrix, np.random.default_rng(3), max_iterations=200, tolerance=1e-10)

    assert pair.value == pytest.approx(5.0, rel=1e-6)
    assert abs(pair.vector[0]) == pytest.approx(1.0, rel=1e-3)


def test_rescale_axis_constant_values_land_mid_range():
    scaled = rescale_axis(np.array([3.0, 3.0]), 100.0, 300.0)
    assert scaled.tolist() == [200.0, 200.0]
