"""
Visualization of quantization results with matplotlib.
"""

from .palette import plot_palette, plot_quantization

__all__ = ['plot_palette', 'plot_quantization']
