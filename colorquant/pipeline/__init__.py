"""
Quantization pipeline: configuration, file-to-file runs and palette reports.

Example:
    >>> from colorquant.pipeline import QuantizeConfig, quantize_file
    >>> report = quantize_file('in.png', 'out.png', QuantizeConfig(n_clusters=8))
"""

from .config import QuantizeConfig
from .palette import palette_summary, save_palette_json
from .quantize import QuantizeReport, quantize_image, quantize_file

__all__ = [
    'QuantizeConfig',
    'QuantizeReport',
    'quantize_image',
    'quantize_file',
    'palette_summary',
    'save_palette_json',
]
