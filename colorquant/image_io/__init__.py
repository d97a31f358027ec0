"""
Image loading, saving and pixel mapping for colorquant.

Components:
- load_image / save_image: file I/O through Pillow
- extract_pixels: image -> (points, pixel indices)
- render_quantized: (labels, centroids, pixel indices) -> image
"""

from .loader import load_image, save_image
from .pixels import extract_pixels, render_quantized

__all__ = [
    'load_image',
    'save_image',
    'extract_pixels',
    'render_quantized',
]
