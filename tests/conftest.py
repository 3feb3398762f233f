import numpy as np
import pytest

from constants import M_CHIC1, M_JPSI
from kinematics import ReactionKinematics
from t_channel import VectorExchange

SEED = 30087


@pytest.fixture
def rng():
    return np.random.default_rng(SEED)


@pytest.fixture
def chi_c1_kinematics():
    return ReactionKinematics(M_CHIC1, jp=(1, 1))


@pytest.fixture
def jpsi_kinematics():
    return ReactionKinematics(M_JPSI, jp=(1, -1))


@pytest.fixture
def omega_exchange(chi_c1_kinematics):
    return VectorExchange(chi_c1_kinematics, 0.780, "omega", params=(5.2e-4, 16.0, 0.0))


@pytest.fixture
def physical_point(chi_c1_kinematics):
    """(s, t) above threshold at a CM angle of 40 degrees."""
    s = 30.0
    return s, chi_c1_kinematics.t_man(s, np.radians(40.0))
