"""Classical multidimensional scaling of embedding vectors onto the canvas plane.

The projection follows the textbook recipe:

1. cosine distances ``sqrt(2 * (1 - cos))`` between all vector pairs,
2. double centering of the squared distances into a Gram matrix,
3. the two dominant eigenpairs via power iteration with deflation,
4. per-axis rescaling into the padded canvas rectangle.

Power iteration starts from a random vector, so coordinates are only
reproducible when the caller passes a seeded :class:`numpy.random.Generator`
(or sets :attr:`MDSOptions.random_seed`).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .geometry import Point2D
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)


class ProjectionError(ValueError):
    """Raised when MDS input vectors or options are inconsistent."""


@dataclass
class MDSOptions:
    """Target rectangle and power-iteration knobs."""

    canvas_width: float = 2000.0
    canvas_height: float = 1500.0
    padding: float = 100.0
    max_iterations: int = 100
    tolerance: float = 1e-6
    random_seed: Optional[int] = None


@dataclass
class EigenPair:
    value: float
    vector: np.ndarray
    iterations: int
    converged: bool


def _as_matrix(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    if len(vectors) == 0:
        return np.zeros((0, 0), dtype=float)
    dims = [len(vec) for vec in vectors]
    expected = dims[0]
    for idx, dim in enumerate(dims):
        if dim != expected:
            raise ProjectionError(
                f"vector dimension mismatch: vector 0 has {expected} components, vector {idx} has {dim}"
            )
    if expected == 0:
        raise ProjectionError("vectors must have at least one component")
    matrix = np.asarray(vectors, dtype=float)
    if not np.isfinite(matrix).all():
        raise ProjectionError("vectors contain NaN or infinite values")
    return matrix


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``; ``0.0`` when either has zero norm."""

    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    if va.shape != vb.shape:
        raise ProjectionError(f"vector dimension mismatch: {va.shape[0]} != {vb.shape[0]}")
    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(va, vb) / (norm_a * norm_b))


def cosine_similarity_matrix(matrix: np.ndarray) -> np.ndarray:
    """Pairwise cosine similarities of the rows of ``matrix``."""

    norms = np.linalg.norm(matrix, axis=1)
    safe = np.where(norms > 0.0, norms, 1.0)
    unit = matrix / safe[:, None]
    sims = unit @ unit.T
    zero = norms == 0.0
    sims[zero, :] = 0.0
    sims[:, zero] = 0.0
    return np.clip(sims, -1.0, 1.0)


def distance_matrix(matrix: np.ndarray) -> np.ndarray:
    sims = cosine_similarity_matrix(matrix)
    dist = np.sqrt(np.maximum(2.0 * (1.0 - sims), 0.0))
    dist = 0.5 * (dist + dist.T)
    np.fill_diagonal(dist, 0.0)
    return dist


def double_center(dist: np.ndarray) -> np.ndarray:
    """Return ``B = -0.5 * (D² - row_means - col_means + grand_mean)``."""

    dist2 = dist**2
    row_means = dist2.mean(axis=1, keepdims=True)
    col_means = dist2.mean(axis=0, keepdims=True)
    grand_mean = float(dist2.mean())
    return -0.5 * (dist2 - row_means - col_means + grand_mean)


def power_iteration(
    matrix: np.ndarray,
    rng: np.random.Generator,
    *,
    max_iterations: int = 100,
    tolerance: float = 1e-6,
) -> EigenPair:
    """Estimate the dominant eigenpair of a symmetric ``matrix``."""

    n = matrix.shape[0]
    v = rng.random(n) - 0.5
    norm = float(np.linalg.norm(v))
    v = v / norm if norm > 0.0 else np.full(n, 1.0 / math.sqrt(n))

    eigenvalue = 0.0
    for iteration in range(1, max_iterations + 1):
        mv = matrix @ v
        estimate = float(mv @ v)
        norm = float(np.linalg.norm(mv))
        if norm == 0.0:
            return EigenPair(eigenvalue, v, iteration, False)
        v_next = mv / norm
        if abs(estimate - eigenvalue) < tolerance:
            return EigenPair(estimate, v_next, iteration, True)
        eigenvalue = estimate
        v = v_next

    logger.debug(
        "Power iteration hit max_iterations=%d (last eigenvalue %.6g)", max_iterations, eigenvalue
    )
    return EigenPair(eigenvalue, v, max_iterations, False)


def deflate(matrix: np.ndarray, pair: EigenPair) -> np.ndarray:
    return matrix - pair.value * np.outer(pair.vector, pair.vector)


def rescale_axis(values: np.ndarray, low: float, high: float) -> np.ndarray:
    """Map ``values`` linearly onto ``[low, high]``; a constant axis lands mid-range."""

    vmin = float(np.min(values))
    vmax = float(np.max(values))
    if vmax == vmin:
        vmin -= 1.0
        vmax += 1.0
    scaled = low + (values - vmin) / (vmax - vmin) * (high - low)
    return np.clip(scaled, low, high)


# eigenvalues below this are rounding noise from (near) identical vectors
EIGENVALUE_FLOOR = 1e-10


def _axis_scale(value: float) -> float:
    return math.sqrt(value) if value > EIGENVALUE_FLOOR else 0.0


def classical_mds(
    matrix: np.ndarray,
    rng: np.random.Generator,
    *,
    max_iterations: int = 100,
    tolerance: float = 1e-6,
) -> Tuple[np.ndarray, List[EigenPair]]:
    """Return unscaled ``(n, 2)`` coordinates and the two eigenpairs used."""

    gram = double_center(distance_matrix(matrix))
    first = power_iteration(gram, rng, max_iterations=max_iterations, tolerance=tolerance)
    second = power_iteration(
        deflate(gram, first), rng, max_iterations=max_iterations, tolerance=tolerance
    )
    coords = np.column_stack(
        [
            first.vector * _axis_scale(first.value),
            second.vector * _axis_scale(second.value),
        ]
    )
    if first.value < 0.0 or second.value < 0.0:
        logger.info(
            "Clamped negative eigenvalue(s) %.6g, %.6g to zero scale", first.value, second.value
        )
    return coords, [first, second]


def project(
    vectors: Sequence[Sequence[float]],
    ids: Sequence[str],
    options: MDSOptions = MDSOptions(),
    *,
    rng: Optional[np.random.Generator] = None,
) -> Dict[str, Point2D]:
    """Project ``vectors`` into the padded canvas rectangle, keyed by ``ids``."""

    if len(vectors) != len(ids):
        raise ProjectionError(
            f"number of vectors ({len(vectors)}) must match number of ids ({len(ids)})"
        )
    if options.canvas_width - 2.0 * options.padding < 0 or options.canvas_height - 2.0 * options.padding < 0:
        raise ProjectionError(
            f"padding {options.padding} leaves no room in a "
            f"{options.canvas_width}x{options.canvas_height} canvas"
        )

    matrix = _as_matrix(vectors)
    n = len(ids)
    if n == 0:
        return {}
    if n == 1:
        return {ids[0]: Point2D(options.canvas_width / 2.0, options.canvas_height / 2.0)}

    logger.info("Projecting %d vectors of dimension %d", n, matrix.shape[1])
    rng = rng if rng is not None else np.random.default_rng(options.random_seed)
    coords, pairs = classical_mds(
        matrix, rng, max_iterations=options.max_iterations, tolerance=options.tolerance
    )
    logger.info(
        "MDS eigenvalues %.6g (converged=%s), %.6g (converged=%s)",
        pairs[0].value,
        pairs[0].converged,
        pairs[1].value,
        pairs[1].converged,
    )

    xs = rescale_axis(coords[:, 0], options.padding, options.canvas_width - options.padding)
    ys = rescale_axis(coords[:, 1], options.padding, options.canvas_height - options.padding)
    return {item_id: Point2D(float(x), float(y)) for item_id, x, y in zip(ids, xs, ys)}


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "EigenPair",
    "MDSOptions",
    "ProjectionError",
    "classical_mds",
    "cosine_similarity",
    "cosine_similarity_matrix",
    "deflate",
    "distance_matrix",
    "double_center",
    "power_iteration",
    "project",
    "rescale_axis",
]
