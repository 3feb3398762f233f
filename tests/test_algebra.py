import numpy as np
import pytest

from gamma_technology import GAMMA, GAMMA_5, LEVI_CIVITA, METRIC, SIGMA, slash
from misc_math import kallen, wigner_d_half, wigner_d_int, wigner_d_int_cos
from regge_trajectory import LinearTrajectory


def test_clifford_algebra():
    identity = np.eye(4)
    for mu in range(4):
        for nu in range(4):
            anticommutator = GAMMA[mu] @ GAMMA[nu] + GAMMA[nu] @ GAMMA[mu]
            expected = 2.0 * METRIC[mu] * identity if mu == nu else np.zeros((4, 4))
            assert np.allclose(anticommutator, expected)


def test_gamma_5():
    assert np.allclose(GAMMA_5, 1j * GAMMA[0] @ GAMMA[1] @ GAMMA[2] @ GAMMA[3])
    assert np.allclose(GAMMA_5 @ GAMMA_5, np.eye(4))
    for mu in range(4):
        assert np.allclose(GAMMA_5 @ GAMMA[mu] + GAMMA[mu] @ GAMMA_5, 0.0)


def test_sigma_antisymmetric():
    for mu in range(4):
        assert np.allclose(SIGMA[mu, mu], 0.0)
        for nu in range(4):
            assert np.allclose(SIGMA[mu, nu], -SIGMA[nu, mu])


def test_slash_squares_to_invariant_mass():
    p = np.array([5.0, 1.0, -2.0, 3.0])
    p2 = p[0] ** 2 - p[1] ** 2 - p[2] ** 2 - p[3] ** 2
    assert np.allclose(slash(p) @ slash(p), p2 * np.eye(4))


def test_levi_civita():
    assert LEVI_CIVITA[0, 1, 2, 3] == 1.0
    assert LEVI_CIVITA[1, 0, 2, 3] == -1.0
    assert LEVI_CIVITA[3, 2, 1, 0] == 1.0
    assert LEVI_CIVITA[0, 0, 2, 3] == 0.0
    assert np.count_nonzero(LEVI_CIVITA) == 24


def test_kallen():
    # at threshold the triangle function vanishes
    assert kallen((1.0 + 2.0) ** 2, 1.0, 4.0) == pytest.approx(0.0, abs=1e-12)
    assert kallen(10.0, 0.0, 1.0) == pytest.approx(81.0)


@pytest.mark.parametrize("theta", [0.3, 1.1, 2.5])
def test_wigner_d_int_unitarity(theta):
    for lam2 in (-1, 0, 1):
        total = sum(wigner_d_int(1, lam1, lam2, theta) ** 2 for lam1 in (-1, 0, 1))
        assert total == pytest.approx(1.0)


@pytest.mark.parametrize("j", [1, 3])
def test_wigner_d_half_unitarity(j):
    theta = 0.9
    helicities = range(-j, j + 1, 2)
    for lam2 in helicities:
        total = sum(wigner_d_half(j, lam1, lam2, theta) ** 2 for lam1 in helicities)
        assert total == pytest.approx(1.0)


def test_wigner_d_cos_matches_angle():
    theta = 1.3
    for lam1 in (-1, 0, 1):
        for lam2 in (-1, 0, 1):
            d_cos = wigner_d_int_cos(1, lam1, lam2, np.cos(theta))
            assert np.real(d_cos) == pytest.approx(wigner_d_int(1, lam1, lam2, theta))


def test_wigner_d_half_spin_one_half():
    theta = 0.6
    assert wigner_d_half(1, 1, 1, theta) == pytest.approx(np.cos(theta / 2.0))
    assert wigner_d_half(1, 1, -1, theta) == pytest.approx(-np.sin(theta / 2.0))


def test_linear_trajectory():
    omega = LinearTrajectory.from_resonance(-1, 1, 0.782, 0.9, "omega")
    assert omega.consistent_with(1, 0.782)
    assert not omega.consistent_with(3, 0.782)
    assert omega(0.0) == pytest.approx(1.0 - 0.9 * 0.782**2)
    assert omega.slope() == 0.9


def test_trajectory_signature():
    with pytest.raises(ValueError):
        LinearTrajectory(0, 0.5, 0.9)
    # signature factor vanishes at wrong-signature points
    rho = LinearTrajectory(-1, 0.0, 1.0)
    assert abs(rho.signature_factor(0.0)) == pytest.approx(0.0, abs=1e-12)
    assert abs(rho.signature_factor(1.0)) == pytest.approx(1.0)


def test_wigner_d_half_identity_at_zero():
    for lam1 in (-3, -1, 1, 3):
        for lam2 in (-3, -1, 1, 3):
            expected = 1.0 if lam1 == lam2 else 0.0
            assert wigner_d_half(5, lam1, lam2, 0.0) == pytest.approx(expected, abs=1e-12)
