"""Dirac matrices and Lorentz tensors in the Dirac basis.

Metric signature is (+ - - -). Every Lorentz index runs over 0..3 and
four-vectors are stored as length-4 complex arrays with upper indices.
"""

import numpy as np
from itertools import permutations
from numba import jit

METRIC = np.array([1.0, -1.0, -1.0, -1.0])

GAMMA_0 = np.array(
    [
        [1, 0, 0, 0],
        [0, 1, 0, 0],
        [0, 0, -1, 0],
        [0, 0, 0, -1],
    ],
    dtype=complex,
)
GAMMA_1 = np.array(
    [
        [0, 0, 0, 1],
        [0, 0, 1, 0],
        [0, -1, 0, 0],
        [-1, 0, 0, 0],
    ],
    dtype=complex,
)
GAMMA_2 = np.array(
    [
        [0, 0, 0, -1j],
        [0, 0, 1j, 0],
        [0, 1j, 0, 0],
        [-1j, 0, 0, 0],
    ],
    dtype=complex,
)
GAMMA_3 = np.array(
    [
        [0, 0, 1, 0],
        [0, 0, 0, -1],
        [-1, 0, 0, 0],
        [0, 1, 0, 0],
    ],
    dtype=complex,
)
GAMMA_5 = np.array(
    [
        [0, 0, 1, 0],
        [0, 0, 0, 1],
        [1, 0, 0, 0],
        [0, 1, 0, 0],
    ],
    dtype=complex,
)

# GAMMA[mu] is gamma^mu
GAMMA = np.array([GAMMA_0, GAMMA_1, GAMMA_2, GAMMA_3])


def sigma(mu, nu):
    """sigma^{mu nu} = (gamma^mu gamma^nu - gamma^nu gamma^mu) / 2."""
    return 0.5 * (GAMMA[mu] @ GAMMA[nu] - GAMMA[nu] @ GAMMA[mu])


# SIGMA[mu, nu] is the 4x4 matrix sigma^{mu nu}
SIGMA = np.array([[sigma(mu, nu) for nu in range(4)] for mu in range(4)])


@jit(nopython=True, error_model="numpy")
def levi_civita(a, b, c, d):
    """Totally antisymmetric symbol with epsilon_{0123} = +1."""
    idx = (a, b, c, d)
    sign = 1.0
    for i in range(4):
        for j in range(i + 1, 4):
            if idx[i] == idx[j]:
                return 0.0
            if idx[i] > idx[j]:
                sign = -sign
    return sign


def _build_levi_civita():
    eps = np.zeros((4, 4, 4, 4))
    for perm in permutations(range(4)):
        eps[perm] = levi_civita(*perm)
    return eps


LEVI_CIVITA = _build_levi_civita()


def lorentz_dot(a, b):
    """Minkowski product a^mu g_{mu nu} b^nu (no complex conjugation)."""
    return np.sum(METRIC * a * b)


def slash(a):
    """Feynman slash a_mu gamma^mu as a 4x4 matrix."""
    return np.einsum("m,mij->ij", METRIC * a, GAMMA)
