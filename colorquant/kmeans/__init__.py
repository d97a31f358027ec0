"""
K-Means clustering module for color quantization.
"""

from .lloyd import (
    ClusteringResult,
    cluster,
    init_centroids,
    assign_points,
    update_centroids,
    relative_shift,
    has_converged,
    squared_distances,
)
from .kmeans import KMeansConfig, BaseKMeans, LloydKMeans, SklearnKMeans, create_kmeans

__all__ = [
    'ClusteringResult',
    'cluster',
    'init_centroids',
    'assign_points',
    'update_centroids',
    'relative_shift',
    'has_converged',
    'squared_distances',
    'KMeansConfig',
    'BaseKMeans',
    'LloydKMeans',
    'SklearnKMeans',
    'create_kmeans',
]
