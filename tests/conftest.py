import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


class ScriptedRng:
    """Stands in for numpy's Generator: returns preset indices in order."""

    def __init__(self, indices):
        self._indices = iter(indices)

    def integers(self, high):
        idx = next(self._indices)
        assert 0 <= idx < high
        return idx


@pytest.fixture
def scripted_rng():
    """Factory building a ScriptedRng from a list of indices."""
    return ScriptedRng


@pytest.fixture
def two_groups() -> np.ndarray:
    return np.array([[0, 0], [0, 1], [1, 0], [10, 10], [10, 11], [11, 10]], dtype=float)


@pytest.fixture
def two_color_image() -> np.ndarray:
    img = np.zeros((4, 6, 3), dtype=np.uint8)
    img[:, :3] = (200, 10, 10)
    img[:, 3:] = (10, 10, 200)
    return img
