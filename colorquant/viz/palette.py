"""
Palette visualization for quantization results.

Shows the dominant colors found by k-means and the share of pixels each
one covers.
"""

from typing import Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt

from ..kmeans import ClusteringResult


def plot_palette(
    result: ClusteringResult,
    ax: Optional[plt.Axes] = None,
    figsize: Tuple[int, int] = (8, 5)
) -> plt.Figure:
    """
    Bar chart of cluster frequencies, each bar painted with its centroid color.

    Args:
        result: Clustering result on RGB points in [0, 255]
        ax: Axes to draw into. If None, a new figure is created.
        figsize: Figure size when ax is None

    Returns:
        fig: Figure containing the chart

    Example:
        >>> fig = plot_palette(result)
        >>> fig.savefig('palette.png')
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    n_clusters = result.n_clusters
    cluster_percentages = result.cluster_sizes / len(result.labels) * 100

    # matplotlib expects RGB in [0, 1]
    colors = np.clip(result.centroids / 255.0, 0, 1)

    x_pos = np.arange(n_clusters)
    bars = ax.bar(
        x_pos,
        cluster_percentages,
        color=colors,
        edgecolor='black',
        linewidth=1.5
    )

    ax.set_xlabel('Cluster', fontsize=10)
    ax.set_ylabel('Frequency (%)', fontsize=10)
    ax.set_title(f'Dominant Colors (K={n_clusters})', fontsize=12, pad=10)
    ax.set_xticks(x_pos)
    ax.set_xticklabels([f'{i}' for i in range(n_clusters)])
    ax.set_ylim(0, max(cluster_percentages.max(), 1.0) * 1.1)

    for bar, percentage in zip(bars, cluster_percentages):
        ax.text(
            bar.get_x() + bar.get_width() / 2.,
            bar.get_height(),
            f'{percentage:.1f}%',
            ha='center',
            va='bottom',
            fontsize=8
        )

    return fig


def plot_quantization(
    original: np.ndarray,
    quantized: np.ndarray,
    result: ClusteringResult,
    figsize: Tuple[int, int] = (18, 6)
) -> plt.Figure:
    """
    Original image, quantized image and palette chart side by side.

    Args:
        original: RGB image, shape (H, W, 3), uint8
        quantized: Output of quantize_image(), same shape
        result: The clustering result quantized was rendered from

    Returns:
        fig: Figure with one row of three panels
    """
    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(original)
    axes[0].axis('off')
    axes[0].set_title('Original', fontsize=12, pad=10)

    axes[1].imshow(quantized)
    axes[1].axis('off')
    axes[1].set_title(
        f'Quantized (K={result.n_clusters}, {result.n_iter} iterations)',
        fontsize=12,
        pad=10
    )

    plot_palette(result, ax=axes[2])

    plt.tight_layout()

    return fig
