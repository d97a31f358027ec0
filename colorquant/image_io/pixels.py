"""
Conversion between images and clustering points.

Every point carries the row-major index of the pixel it came from, so
cluster assignments can be painted back onto image coordinates without
relying on the point values themselves.
"""

from typing import Tuple

import numpy as np

from ..errors import ImageFormatError


def extract_pixels(image: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Extract color features from an image.

    Args:
        image: Image of shape (H, W, C), typically C = 3 for RGB

    Returns:
        (points, indices):
        - points: float64 colors, shape (H*W, C)
        - indices: row-major pixel index of each point, shape (H*W,)

    Example:
        >>> points, indices = extract_pixels(img)
        >>> print(points.shape)  # (H*W, 3)
    """
    if image.ndim != 3:
        raise ImageFormatError(f"image must have shape (H, W, C), got {image.shape}")

    h, w, c = image.shape
    points = image.reshape(-1, c).astype(np.float64)
    indices = np.arange(h * w)

    return points, indices


def render_quantized(
    labels: np.ndarray,
    centroids: np.ndarray,
    indices: np.ndarray,
    image_shape: Tuple[int, int]
) -> np.ndarray:
    """
    Paint each pixel with the color of its cluster centroid.

    Centroid colors are rounded to the nearest integer and clipped to
    [0, 255].

    Args:
        labels: Cluster index of each point, shape (N,)
        centroids: Cluster colors, shape (K, C)
        indices: Pixel index of each point, shape (N,)
        image_shape: (H, W) of the original image

    Returns:
        quantized: uint8 image with at most K colors, shape (H, W, C)

    Raises:
        ValueError: If labels and indices disagree in length or do not
            cover every pixel
    """
    h, w = image_shape
    n_pixels = h * w

    if len(labels) != len(indices):
        raise ValueError(
            f"labels ({len(labels)}) and indices ({len(indices)}) must have the same length"
        )
    if len(labels) != n_pixels:
        raise ValueError(
            f"Image shape {image_shape} doesn't match clustered data "
            f"({len(labels)} pixels)"
        )

    palette = np.clip(np.rint(centroids), 0, 255).astype(np.uint8)

    quantized_flat = np.zeros((n_pixels, palette.shape[1]), dtype=np.uint8)
    quantized_flat[indices] = palette[labels]

    return quantized_flat.reshape(h, w, palette.shape[1])
