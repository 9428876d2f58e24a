import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest


def random_rod(N, seed=0):
    """Random-walk rod with N segments of length 1/N."""
    rng = np.random.default_rng(seed)
    steps = rng.normal(size=(N, 3))
    steps /= np.linalg.norm(steps, axis=1)[:, None] * N
    nodes = np.vstack([np.zeros(3), np.cumsum(steps, axis=0)])
    return nodes.ravel()


@pytest.fixture
def rod20():
    return random_rod(20, seed=1)
