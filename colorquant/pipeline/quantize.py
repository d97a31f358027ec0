"""
Image quantization pipeline.

load image -> extract pixels -> k-means -> paint centroids -> save image
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np

from ..image_io import extract_pixels, load_image, render_quantized, save_image
from ..kmeans import ClusteringResult, create_kmeans
from .config import QuantizeConfig
from .palette import palette_summary, save_palette_json

logger = logging.getLogger(__name__)


@dataclass
class QuantizeReport:
    """Summary of a quantize_file() run."""
    source: Path
    destination: Path
    n_pixels: int
    n_clusters: int
    n_iter: int
    converged: bool
    elapsed_ms: float
    """Wall time spent clustering, in milliseconds"""
    empty_cluster_count: int = 0
    palette: List[Dict] = field(default_factory=list)


def quantize_image(
    image: np.ndarray,
    config: Optional[QuantizeConfig] = None
) -> Tuple[np.ndarray, ClusteringResult]:
    """
    Reduce an image to config.n_clusters colors.

    Args:
        image: RGB image, shape (H, W, 3), values in [0, 255]
        config: Run settings. If None, uses defaults.

    Returns:
        (quantized, result): uint8 image of the same shape and the
        clustering result it was painted from

    Raises:
        InvalidArgumentError: If n_clusters exceeds the number of distinct
            colors in the image
        ImageFormatError: If image is not (H, W, C)
    """
    config = config or QuantizeConfig()

    points, indices = extract_pixels(image)
    kmeans = create_kmeans(config.to_kmeans_config())
    result = kmeans.fit_predict(points)

    quantized = render_quantized(result.labels, result.centroids, indices, image.shape[:2])
    return quantized, result


def quantize_file(
    source: Union[str, Path],
    destination: Union[str, Path],
    config: Optional[QuantizeConfig] = None
) -> QuantizeReport:
    """
    Quantize an image file and write the result.

    Also writes the palette report when config.palette_json is set.

    Example:
        >>> report = quantize_file('in.png', 'out.png', QuantizeConfig(n_clusters=16))
        >>> print(f"{report.n_iter} iterations, {report.elapsed_ms:.0f} ms")
    """
    config = config or QuantizeConfig()
    source = Path(source)
    destination = Path(destination)

    image = load_image(source)
    h, w = image.shape[:2]

    logger.info("Clustering is starting (k=%d, backend=%s).", config.n_clusters, config.backend)
    start = time.perf_counter()
    quantized, result = quantize_image(image, config)
    elapsed_ms = (time.perf_counter() - start) * 1000.0

    logger.info(
        "Finished clustering %s pixels in %.0f milliseconds. (%d iterations) Storing image...",
        f"{h * w:,}", elapsed_ms, result.n_iter
    )
    save_image(quantized, destination)

    if config.palette_json is not None:
        save_palette_json(result, config.palette_json)

    return QuantizeReport(
        source=source,
        destination=destination,
        n_pixels=h * w,
        n_clusters=result.n_clusters,
        n_iter=result.n_iter,
        converged=result.converged,
        elapsed_ms=elapsed_ms,
        empty_cluster_count=result.empty_cluster_count,
        palette=palette_summary(result)
    )
