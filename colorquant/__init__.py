"""
colorquant - Color quantization of raster images with k-means.

Reduces an image's palette to K representative colors using Lloyd's
algorithm and re-renders the image with only those colors.

Example:
    >>> from colorquant import QuantizeConfig, quantize_file
    >>> report = quantize_file('photo.png', 'photo_8.png', QuantizeConfig(n_clusters=8))
    >>> report.n_iter, report.converged
"""

from .errors import ColorQuantError, InvalidArgumentError, ImageFormatError
from .kmeans import (
    KMeansConfig,
    ClusteringResult,
    BaseKMeans,
    LloydKMeans,
    SklearnKMeans,
    cluster,
    create_kmeans,
)
from .pipeline import QuantizeConfig, QuantizeReport, quantize_image, quantize_file

__version__ = '0.1.0'

__all__ = [
    'ColorQuantError',
    'InvalidArgumentError',
    'ImageFormatError',
    'KMeansConfig',
    'ClusteringResult',
    'BaseKMeans',
    'LloydKMeans',
    'SklearnKMeans',
    'cluster',
    'create_kmeans',
    'QuantizeConfig',
    'QuantizeReport',
    'quantize_image',
    'quantize_file',
]
