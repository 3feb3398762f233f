import numpy as np
import pytest

from constants import M_CHIC1, M_JPSI, M_PROTON, M_X3872, get_mass
from errors import InvalidHelicity, InvalidSpinParity, UnknownParticleLabel
from gamma_technology import lorentz_dot
from kinematics import E_beam, ReactionKinematics, W_cm, get_helicities
from misc_math import kallen


@pytest.mark.parametrize("mX, jp", [(M_CHIC1, (1, 1)), (M_JPSI, (1, -1)), (M_X3872, (0, -1))])
def test_threshold_consistency(mX, jp):
    kin = ReactionKinematics(mX, jp=jp)
    assert kin.t_man(kin.sth, 0.0) == pytest.approx(kin.t_man(kin.sth, np.pi), abs=1e-6)


def test_angle_round_trip(chi_c1_kinematics, rng):
    kin = chi_c1_kinematics
    for _ in range(20):
        s = rng.uniform(kin.sth + 0.5, 60.0)
        theta = rng.uniform(0.1, np.pi - 0.1)
        assert kin.theta_s(s, kin.t_man(s, theta)) == pytest.approx(theta, abs=1e-6)


def test_mandelstam_sum(chi_c1_kinematics):
    kin = chi_c1_kinematics
    s, theta = 25.0, 1.2
    total = s + kin.t_man(s, theta) + kin.u_man(s, theta)
    assert total == pytest.approx(kin.mX2 + kin.mT2 + kin.mR2)


def test_exchange_momenta_square_to_invariants(chi_c1_kinematics):
    kin = chi_c1_kinematics
    s, theta = 25.0, 0.8
    q_t = kin.t_exchange_momentum(s, theta)
    q_u = kin.u_exchange_momentum(s, theta)
    assert np.real(lorentz_dot(q_t, q_t)) == pytest.approx(kin.t_man(s, theta))
    assert np.real(lorentz_dot(q_u, q_u)) == pytest.approx(kin.u_man(s, theta))


def test_helicity_tables():
    assert len(get_helicities(0)) == 8
    assert len(get_helicities(1)) == 24
    assert len(get_helicities(2)) == 40

    table = get_helicities(1)
    assert table[0] == (1, -1, 1, -1)
    assert table[11] == (1, 1, -1, 1)
    assert table[12] == (-1, -1, 1, -1)
    # second half is the first with the photon helicity flipped
    assert [h[1:] for h in table[:12]] == [h[1:] for h in table[12:]]


def test_unsupported_spin_parity(chi_c1_kinematics):
    with pytest.raises(InvalidSpinParity):
        get_helicities(3)
    with pytest.raises(InvalidSpinParity):
        chi_c1_kinematics.set_JP(1, 0)


def test_set_JP_changes_table(chi_c1_kinematics):
    kin = chi_c1_kinematics
    assert kin.n_amps == 24
    kin.set_JP(0, -1)
    assert kin.jp == (0, -1)
    assert kin.n_amps == 8


def test_set_mX_moves_threshold(chi_c1_kinematics):
    kin = chi_c1_kinematics
    kin.set_mX(M_X3872)
    assert kin.sth == pytest.approx((M_X3872 + M_PROTON) ** 2)
    assert kin.final_state.mV2 == pytest.approx(M_X3872**2)


def test_spinor_normalization(jpsi_kinematics):
    kin = jpsi_kinematics
    s, theta = 20.0, 0.7
    for lam in (-1, 1):
        u = kin.recoil.component(lam, s, theta)
        ubar = kin.recoil.adjoint_component(lam, s, theta)
        assert np.real(ubar @ u) == pytest.approx(2.0 * M_PROTON)
        # opposite helicities are orthogonal
        assert abs(kin.recoil.adjoint_component(-lam, s, theta) @ u) == pytest.approx(0.0, abs=1e-12)


def test_spinor_rejects_helicity(jpsi_kinematics):
    with pytest.raises(InvalidHelicity):
        jpsi_kinematics.target.component(0, 20.0, 0.0)


def test_polarization_transverse(jpsi_kinematics):
    kin = jpsi_kinematics
    s, theta = 20.0, 0.7
    q = kin.final_state.q(s, theta)
    for lam in (-1, 0, 1):
        eps = kin.eps_vec.component(lam, s, theta)
        assert abs(lorentz_dot(eps, q)) == pytest.approx(0.0, abs=1e-12)
        assert np.real(lorentz_dot(eps, np.conj(eps))) == pytest.approx(-1.0)


def test_massless_photon_has_no_longitudinal_state(jpsi_kinematics):
    eps = jpsi_kinematics.eps_gamma.component(0, 20.0, 0.0)
    assert np.all(eps == 0)
    with pytest.raises(InvalidHelicity):
        jpsi_kinematics.eps_gamma.component(2, 20.0, 0.0)


def test_crossing_angle_labels(chi_c1_kinematics):
    kin = chi_c1_kinematics
    for particle in ("beam", "vector", "target", "recoil"):
        assert np.isfinite(kin.crossing_angle(particle, 30.0, 0.5))
    with pytest.raises(UnknownParticleLabel):
        kin.crossing_angle("gluon", 30.0, 0.5)


def test_lab_frame_round_trip():
    assert E_beam(W_cm(8.5)) == pytest.approx(8.5)


def test_get_mass():
    assert get_mass("J/psi") == M_JPSI
    assert get_mass("chi_c1") == M_CHIC1
    assert get_mass("X(3872)") == M_X3872
    with pytest.raises(UnknownParticleLabel):
        get_mass("glueball")


def test_t_channel_cosine(chi_c1_kinematics):
    kin = chi_c1_kinematics
    s, theta = 30.0, 0.9
    t = kin.t_man(s, theta)
    p_t = np.sqrt(complex(kallen(t, kin.mT2, kin.mR2))) / np.sqrt(complex(4.0 * t))
    q_t = np.sqrt(complex(kallen(t, kin.mX2, 0.0))) / np.sqrt(complex(4.0 * t))
    expected = (s - kin.u_man(s, theta)) / (4.0 * p_t * q_t)
    assert kin.z_t(s, theta) == pytest.approx(expected)


def test_u_channel_cosine(jpsi_kinematics):
    kin = jpsi_kinematics
    s, theta = 25.0, 2.2
    u = kin.u_man(s, theta)
    root_u = np.sqrt(complex(u))

    # beam and X in the u-channel CM frame, X at the angle arccos(z_u)
    z = kin.z_u(s, theta)
    sin = np.sqrt(complex(1.0 - z * z))
    E_beam_u = (u - kin.mR2) / (2.0 * root_u)
    E_X_u = (u + kin.mX2 - kin.mT2) / (2.0 * root_u)
    p_u = np.sqrt(complex(kallen(u, 0.0, kin.mR2))) / (2.0 * root_u)
    q_u = np.sqrt(complex(kallen(u, kin.mX2, kin.mT2))) / (2.0 * root_u)
    k = np.array([E_beam_u, 0.0, 0.0, p_u])
    q = np.array([E_X_u, q_u * sin, 0.0, q_u * z])

    assert lorentz_dot(k - q, k - q) == pytest.approx(kin.t_man(s, theta))
