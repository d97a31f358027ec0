"""
K-Means Clustering for Color Quantization

Estimator interface around the clustering engine. Two backends share
the same fit/predict/fit_predict surface:

- LloydKMeans: the in-house Lloyd's algorithm (distinct random init,
  first-minimum tie-break, frozen empty clusters, relative tolerance)
- SklearnKMeans: scikit-learn's KMeans, for comparison runs
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import numpy as np
from sklearn.cluster import KMeans as SklearnKMeansAlgorithm

from ..errors import InvalidArgumentError
from .lloyd import (
    DEFAULT_TOLERANCE,
    ClusteringResult,
    as_points,
    assign_points,
    cluster,
    validate_run,
)

BACKENDS = ('lloyd', 'sklearn')


# ============================================================================
# Configuration
# ============================================================================

@dataclass
class KMeansConfig:
    """
    Configuration for K-means clustering.

    Attributes:
        n_clusters: Number of clusters (palette size)
        max_iter: Maximum number of iterations
        tol: Relative per-axis centroid change that counts as converged
        random_state: Seed for centroid initialization. None draws fresh entropy.
        backend: 'lloyd' or 'sklearn'
    """
    n_clusters: int = 8
    max_iter: int = 1000
    tol: float = DEFAULT_TOLERANCE
    random_state: Optional[int] = None
    backend: str = 'lloyd'

    def __post_init__(self):
        """Validate configuration parameters."""
        if self.n_clusters < 1:
            raise InvalidArgumentError(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.max_iter < 1:
            raise InvalidArgumentError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.tol < 0:
            raise InvalidArgumentError(f"tol must be >= 0, got {self.tol}")
        if self.backend not in BACKENDS:
            raise InvalidArgumentError(
                f"backend must be one of {BACKENDS}, got '{self.backend}'"
            )


# ============================================================================
# Abstract Base Class (Interface)
# ============================================================================

class BaseKMeans(ABC):
    """
    Abstract base class for k-means clustering implementations.

    All implementations:
    1. Accept points of shape (N, D), typically (N, 3) RGB colors
    2. Return a ClusteringResult with centroids, clusters and labels
    3. Support the fit/predict/fit_predict interface
    """

    def __init__(self, config: Optional[KMeansConfig] = None):
        self.config = config or KMeansConfig()
        self._result: Optional[ClusteringResult] = None

    @abstractmethod
    def _run(self, data: np.ndarray) -> ClusteringResult:
        """Cluster points of shape (N, D) and return the result."""

    def fit(self, points) -> 'BaseKMeans':
        """
        Fit k-means on points.

        Args:
            points: Shape (N, D)

        Returns:
            self (for method chaining)

        Raises:
            InvalidArgumentError: If points or n_clusters are invalid
        """
        self._result = self._run(as_points(points))
        return self

    def fit_predict(self, points) -> ClusteringResult:
        """Fit k-means and return the complete result."""
        return self.fit(points).result

    def predict(self, points) -> np.ndarray:
        """
        Assign points to the fitted centroids.

        Returns:
            labels: Cluster index per point, shape (N,)

        Raises:
            RuntimeError: If called before fit()
        """
        return assign_points(as_points(points), self.centroids)

    @property
    def result(self) -> ClusteringResult:
        if self._result is None:
            raise RuntimeError("Must call fit() before accessing the result")
        return self._result

    @property
    def labels(self) -> np.ndarray:
        return self.result.labels

    @property
    def centroids(self) -> np.ndarray:
        return self.result.centroids

    def compute_inertia(self, points, labels: Optional[np.ndarray] = None) -> float:
        """
        Compute the k-means objective J(V) against the fitted centroids.

        Args:
            points: Shape (N, D)
            labels: Cluster assignments. If None, uses the nearest centroid.

        Returns:
            inertia: Sum of squared distances to the assigned centroid
        """
        data = as_points(points)
        centroids = self.centroids
        if labels is None:
            labels = assign_points(data, centroids)

        diff = data - centroids[labels]
        return float(np.sum(diff * diff))


# ============================================================================
# Implementations
# ============================================================================

class LloydKMeans(BaseKMeans):
    """
    Lloyd's algorithm as implemented in colorquant.kmeans.lloyd.

    Example:
        >>> kmeans = LloydKMeans(KMeansConfig(n_clusters=4, random_state=0))
        >>> result = kmeans.fit_predict(image.reshape(-1, 3))
        >>> result.centroids.shape
        (4, 3)
    """

    def _run(self, data: np.ndarray) -> ClusteringResult:
        return cluster(
            data,
            self.config.n_clusters,
            self.config.max_iter,
            rng=self.config.random_state,
            tol=self.config.tol
        )


class SklearnKMeans(BaseKMeans):
    """
    K-means clustering using scikit-learn.

    Uses random initialization with a single run so results are comparable
    with LloydKMeans. Convergence follows sklearn's own tolerance rule, so
    config.tol is not forwarded. Empty clusters are relocated by sklearn
    and never reported.

    sklearn reports n_iter_ = max_iter both when it converged on the last
    allowed iteration and when it ran out of iterations. The model is
    therefore fitted with one spare iteration under a fixed seed; only if
    that spare iteration is used is the run repeated at the real cap and
    reported as not converged.
    """

    def _fit_model(self, data: np.ndarray, max_iter: int, seed: int) -> SklearnKMeansAlgorithm:
        model = SklearnKMeansAlgorithm(
            n_clusters=self.config.n_clusters,
            max_iter=max_iter,
            init='random',
            n_init=1,
            random_state=seed
        )
        return model.fit(data)

    def _run(self, data: np.ndarray) -> ClusteringResult:
        validate_run(data, self.config.n_clusters, self.config.max_iter)

        seed = self.config.random_state
        if seed is None:
            seed = int(np.random.default_rng().integers(2**31 - 1))

        max_iter = self.config.max_iter
        model = self._fit_model(data, max_iter + 1, seed)
        converged = int(model.n_iter_) <= max_iter
        if not converged:
            model = self._fit_model(data, max_iter, seed)

        labels = model.labels_.astype(np.intp)

        return ClusteringResult(
            centroids=np.asarray(model.cluster_centers_, dtype=np.float64),
            clusters=[data[labels == idx] for idx in range(self.config.n_clusters)],
            labels=labels,
            n_iter=int(model.n_iter_),
            converged=converged
        )


def create_kmeans(config: Optional[KMeansConfig] = None) -> BaseKMeans:
    """Build the estimator selected by config.backend."""
    config = config or KMeansConfig()
    if config.backend == 'sklearn':
        return SklearnKMeans(config)
    return LloydKMeans(config)
