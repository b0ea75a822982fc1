"""
Models shared by several test modules
"""

import numpy as np
import pytest

from gpcore.kernels import Gaussian
from gpcore.models import GaussianProcess


def make_sinusoid_model(n=20, sigma=1.0e-5, length_scale=0.5):
    """
    n evenly spaced samples of sin(x) over [0, 2 pi), initialized.
    """
    gp = GaussianProcess(Gaussian(1, length_scales=length_scale), sigma=sigma)
    for i in range(n):
        x = i * 2.0 * np.pi / n
        gp.add_sample(np.array([x]), np.array([np.sin(x)]))
    return gp.initialize()


LANDMARKS = ((1.0, 0.0), (2.0, 1.0), (3.0, 0.5), (4.0, 1.0))
# Indices of the landmarks in the 50-point grid over [0, 5)
LANDMARK_INDICES = (10, 20, 30, 40)


@pytest.fixture
def sinusoid_gp():
    return make_sinusoid_model()


@pytest.fixture
def landmark_gp():
    """
    Noiseless GP through four landmarks at x = 1, 2, 3, 4, initialized.
    """
    gp = GaussianProcess(Gaussian(1, length_scales=1.0), sigma=0.0)
    for x, y in LANDMARKS:
        gp.add_sample([x], [y])
    return gp.initialize()


@pytest.fixture
def landmark_grid():
    n = 50
    return np.array([[i * 5.0 / n] for i in range(n)])


@pytest.fixture
def landmark_indices():
    return LANDMARK_INDICES
