"""
Palette reports for clustering results.

A palette entry describes one cluster: its rounded color, how many points
it holds, and what fraction of all points that is.

JSON structure:
{
    "n_iter": 4,
    "converged": true,
    "empty_cluster_count": 0,
    "palette": [
        {"index": 0, "color": [12, 40, 97], "count": 5120, "fraction": 0.32},
        ...
    ]
}
"""

import json
from pathlib import Path
from typing import Dict, List, Union

import numpy as np

from ..kmeans import ClusteringResult


def palette_summary(result: ClusteringResult) -> List[Dict]:
    """
    Describe each cluster of a result, in cluster index order.

    Returns:
        List of dicts with keys index, color, count, fraction
    """
    counts = result.cluster_sizes
    total = int(counts.sum())
    colors = np.rint(result.centroids).astype(int)

    return [
        {
            "index": idx,
            "color": colors[idx].tolist(),
            "count": int(counts[idx]),
            "fraction": float(counts[idx] / total) if total else 0.0
        }
        for idx in range(result.n_clusters)
    ]


def save_palette_json(result: ClusteringResult, path: Union[str, Path]) -> Path:
    """Write the palette report of a result as JSON."""
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {
        "n_iter": int(result.n_iter),
        "converged": bool(result.converged),
        "empty_cluster_count": int(result.empty_cluster_count),
        "palette": palette_summary(result)
    }

    with open(out_path, 'w') as f:
        json.dump(payload, f, indent=2)

    return out_path
