"""
Lloyd's k-means for color quantization

Partitions N color vectors into K clusters by alternating an assignment
step (nearest centroid by squared Euclidean distance) and an update step
(centroid = mean of its points) until every centroid axis moves by at most
a relative tolerance, or the iteration cap is reached.

Objective Function: J(V) = Σ Σ ||xn - vl||²
"""

import logging
from dataclasses import dataclass
from numbers import Integral
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.01

RandomSource = Union[None, int, np.random.Generator]


# ============================================================================
# Results
# ============================================================================

@dataclass(frozen=True, eq=False)
class ClusteringResult:
    """
    Outcome of one clustering run.

    ``clusters`` and ``labels`` come from the last assignment pass, which
    ran before the final centroid update.
    """
    centroids: np.ndarray
    """Final centroids in index order. Shape: (K, D), float64"""

    clusters: List[np.ndarray]
    """Original point values per cluster, index-aligned with centroids.
    Each entry has shape (n_i, D); points keep their input order."""

    labels: np.ndarray
    """Cluster index of every input point. Shape: (N,)"""

    n_iter: int
    """Number of iterations executed, including the converging one."""

    converged: bool
    """False when max_iterations was reached first."""

    empty_cluster_count: int = 0
    """How many (iteration, cluster) pairs had no points assigned.
    Persistent empty clusters suggest k is larger than the data supports."""

    @property
    def n_clusters(self) -> int:
        return len(self.centroids)

    @property
    def cluster_sizes(self) -> np.ndarray:
        """Number of points in each cluster. Shape: (K,)"""
        return np.bincount(self.labels, minlength=self.n_clusters)


# ============================================================================
# Validation
# ============================================================================

def as_points(points: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
    """
    Convert input points to a float64 array of shape (N, D).

    Raises:
        InvalidArgumentError: If the input is empty, ragged, not 2D,
            or contains non-finite values
    """
    try:
        data = np.array(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgumentError(
            f"points must be a sequence of equal-length numeric vectors: {e}"
        ) from e

    if data.size == 0:
        raise InvalidArgumentError("points must not be empty")
    if data.ndim != 2:
        raise InvalidArgumentError(
            f"points must be a 2D array (N, D), got shape {data.shape}"
        )
    if not np.all(np.isfinite(data)):
        raise InvalidArgumentError("points must contain only finite values")

    return data


def validate_run(data: np.ndarray, k: int, max_iterations: int) -> None:
    """
    Check k and max_iterations against already converted points.

    Raises:
        InvalidArgumentError: If k < 1, max_iterations < 1, or k exceeds
            the number of distinct-valued points
    """
    if isinstance(k, bool) or not isinstance(k, Integral) or k < 1:
        raise InvalidArgumentError(f"k must be an integer >= 1, got {k!r}")
    if (isinstance(max_iterations, bool) or not isinstance(max_iterations, Integral)
            or max_iterations < 1):
        raise InvalidArgumentError(
            f"max_iterations must be an integer >= 1, got {max_iterations!r}"
        )

    n_distinct = len(np.unique(data, axis=0))
    if k > n_distinct:
        raise InvalidArgumentError(
            f"k={k} exceeds the number of distinct points ({n_distinct}); "
            f"cannot choose {k} distinct initial centroids"
        )


def _as_generator(rng: RandomSource):
    if rng is None or isinstance(rng, Integral):
        return np.random.default_rng(rng)
    # Anything exposing Generator.integers(high) is accepted
    return rng


# ============================================================================
# Algorithm steps
# ============================================================================

def init_centroids(data: np.ndarray, k: int, rng: RandomSource = None) -> np.ndarray:
    """
    Pick k distinct-valued points uniformly at random as initial centroids.

    A slot is re-sampled while its value equals an already chosen centroid.
    Terminates only if data has at least k distinct rows; validate_run()
    guarantees that.

    Args:
        data: Points, shape (N, D)
        k: Number of centroids
        rng: numpy Generator, integer seed, or None for fresh entropy

    Returns:
        centroids: Copies of the sampled points, shape (k, D)
    """
    generator = _as_generator(rng)
    n_points = data.shape[0]
    centroids = np.empty((k, data.shape[1]), dtype=np.float64)

    for slot in range(k):
        while True:
            candidate = data[int(generator.integers(n_points))]
            if not np.any(np.all(centroids[:slot] == candidate, axis=1)):
                break
        centroids[slot] = candidate

    return centroids


def squared_distances(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Squared Euclidean distance from every point to every centroid.

    Returns:
        distances: Shape (N, K)
    """
    distances = np.empty((data.shape[0], centroids.shape[0]), dtype=np.float64)
    for idx, centroid in enumerate(centroids):
        diff = data - centroid
        distances[:, idx] = np.einsum('ij,ij->i', diff, diff)
    return distances


def assign_points(data: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Assign each point to its nearest centroid.

    Exact ties go to the lowest centroid index.

    Returns:
        labels: Cluster index per point, shape (N,)
    """
    return np.argmin(squared_distances(data, centroids), axis=1)


def update_centroids(
    data: np.ndarray,
    labels: np.ndarray,
    centroids: np.ndarray
) -> Tuple[np.ndarray, int]:
    """
    Move every centroid to the mean of its assigned points.

    Centroids of empty clusters are left unchanged.

    Args:
        data: Points, shape (N, D)
        labels: Cluster index per point, shape (N,)
        centroids: Current centroids, shape (K, D). Not modified.

    Returns:
        (new_centroids, n_empty): New array of shape (K, D) and the number
        of clusters that received no points
    """
    k, n_dims = centroids.shape
    counts = np.bincount(labels, minlength=k)

    sums = np.empty((k, n_dims), dtype=np.float64)
    for axis in range(n_dims):
        sums[:, axis] = np.bincount(labels, weights=data[:, axis], minlength=k)

    new_centroids = centroids.copy()
    filled = counts > 0
    new_centroids[filled] = sums[filled] / counts[filled, np.newaxis]

    n_empty = int(k - np.count_nonzero(filled))
    if n_empty:
        logger.debug("Empty clusters kept frozen: %s", np.flatnonzero(~filled).tolist())

    return new_centroids, n_empty


def relative_shift(old: np.ndarray, new: np.ndarray) -> np.ndarray:
    """
    Per-axis relative change |new - old| / |old|.

    Where old is exactly zero the change is 0 if new is also zero and
    infinite otherwise.
    """
    delta = np.abs(new - old)
    denom = np.abs(old)
    zero = denom == 0

    shift = np.empty_like(delta)
    np.divide(delta, denom, out=shift, where=~zero)
    shift[zero] = np.where(delta[zero] == 0, 0.0, np.inf)
    return shift


def has_converged(old: np.ndarray, new: np.ndarray, tol: float = DEFAULT_TOLERANCE) -> bool:
    """True when every axis of every centroid moved by at most tol (relative)."""
    return bool(np.all(relative_shift(old, new) <= tol))


# ============================================================================
# Main loop
# ============================================================================

def cluster(
    points: Union[np.ndarray, Sequence[Sequence[float]]],
    k: int,
    max_iterations: int,
    rng: RandomSource = None,
    tol: float = DEFAULT_TOLERANCE,
    initial_centroids: Optional[np.ndarray] = None
) -> ClusteringResult:
    """
    Run Lloyd's k-means on a list of points.

    Args:
        points: N vectors of dimension D, e.g. (N, 3) RGB colors
        k: Number of clusters, 1 <= k <= number of distinct points
        max_iterations: Iteration cap, >= 1
        rng: numpy Generator, integer seed, or None. Same seed gives the
             same result.
        tol: Relative per-axis change below which centroids count as stable
        initial_centroids: Skip random initialization and start from these
             centroids, shape (k, D)

    Returns:
        result: ClusteringResult with centroids, clusters, labels,
                iteration count and convergence flag

    Raises:
        InvalidArgumentError: On any invalid input, before iterating

    Example:
        >>> pts = [[0, 0], [0, 1], [1, 0], [10, 10], [10, 11], [11, 10]]
        >>> result = cluster(pts, k=2, max_iterations=100, rng=0)
        >>> sorted(len(c) for c in result.clusters)
        [3, 3]
    """
    data = as_points(points)
    validate_run(data, k, max_iterations)
    if tol < 0:
        raise InvalidArgumentError(f"tol must be >= 0, got {tol}")

    if initial_centroids is None:
        centroids = init_centroids(data, k, rng)
    else:
        centroids = np.array(initial_centroids, dtype=np.float64)
        if centroids.shape != (k, data.shape[1]):
            raise InvalidArgumentError(
                f"initial_centroids must have shape {(k, data.shape[1])}, "
                f"got {centroids.shape}"
            )
        if not np.all(np.isfinite(centroids)):
            raise InvalidArgumentError("initial_centroids must contain only finite values")
        if len(np.unique(centroids, axis=0)) != k:
            raise InvalidArgumentError("initial_centroids must be pairwise distinct")

    converged = False
    n_iter = 0
    empty_total = 0
    labels = np.zeros(data.shape[0], dtype=np.intp)

    for n_iter in range(1, max_iterations + 1):
        labels = assign_points(data, centroids)
        new_centroids, n_empty = update_centroids(data, labels, centroids)
        empty_total += n_empty

        converged = has_converged(centroids, new_centroids, tol)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Iteration %d: max relative shift %.6g",
                n_iter, float(relative_shift(centroids, new_centroids).max())
            )
        centroids = new_centroids

        if converged:
            break

    if not converged:
        logger.info("k-means did not converge within %d iterations", max_iterations)

    clusters = [data[labels == idx] for idx in range(k)]

    return ClusteringResult(
        centroids=centroids,
        clusters=clusters,
        labels=labels,
        n_iter=n_iter,
        converged=converged,
        empty_cluster_count=empty_total
    )
