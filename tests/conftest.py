import numpy as np
import pytest

from points_gen import DEFAULT_OFFSETS, gen_clustered_data


@pytest.fixture
def nine_points() -> np.ndarray:
    # Three points inside each unit box at (-6,6), (0,0), (6,-6), in blob order
    return np.array([
        [-5.8, 6.1], [-5.5, 6.6], [-5.2, 6.3],
        [0.2, 0.4], [0.7, 0.1], [0.5, 0.8],
        [6.3, -5.9], [6.8, -5.4], [6.1, -5.2],
    ])


@pytest.fixture
def blobs() -> np.ndarray:
    return gen_clustered_data(DEFAULT_OFFSETS, 40, seed=7)
