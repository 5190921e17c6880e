import numpy as np
import pytest


@pytest.fixture
def unit_square():
    return np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0]])


@pytest.fixture
def random_points():
    rng = np.random.default_rng(7)
    return rng.uniform(0, 100, size=(60, 2))


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
