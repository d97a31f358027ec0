"""
Quantization Configuration

Settings for one image quantization run.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..errors import InvalidArgumentError
from ..kmeans import KMeansConfig
from ..kmeans.kmeans import BACKENDS


@dataclass
class QuantizeConfig:
    """
    Configuration for quantizing an image to a fixed palette.

    Attributes:
        n_clusters: Number of colors in the output image
        max_iter: k-means iteration cap
        random_state: Seed for centroid initialization
        backend: 'lloyd' or 'sklearn'
        palette_json: Where to write the palette report, if anywhere
    """
    n_clusters: int = 8
    """Palette size (k)"""

    max_iter: int = 1000
    """Maximum number of k-means iterations"""

    random_state: Optional[int] = None
    """Seed for reproducible runs. None draws fresh entropy."""

    backend: str = 'lloyd'
    """Clustering backend"""

    palette_json: Optional[Union[str, Path]] = None
    """Optional path of a JSON palette report"""

    def __post_init__(self):
        """Validate configuration."""
        if self.n_clusters < 1:
            raise InvalidArgumentError(f"n_clusters must be >= 1, got {self.n_clusters}")
        if self.max_iter < 1:
            raise InvalidArgumentError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.backend not in BACKENDS:
            raise InvalidArgumentError(
                f"backend must be one of {BACKENDS}, got '{self.backend}'"
            )

        if isinstance(self.palette_json, str):
            self.palette_json = Path(self.palette_json)

    def to_kmeans_config(self) -> KMeansConfig:
        return KMeansConfig(
            n_clusters=self.n_clusters,
            max_iter=self.max_iter,
            random_state=self.random_state,
            backend=self.backend
        )
