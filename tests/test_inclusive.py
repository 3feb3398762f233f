import numpy as np
import pytest

from constants import M2_PION, M2_PROTON, M_ZC3900
from inclusive import (
    G_PPP,
    G_PPR,
    G_RRP,
    G_RRR,
    FieldFoxTerm,
    InclusiveKinematics,
    JpacTripleReggeTerm,
    TripleRegge,
    sigmatot_pi,
)
from regge_trajectory import LinearTrajectory


@pytest.fixture
def pion():
    return LinearTrajectory(1, -0.7 * M2_PION, 0.7, "pion")


@pytest.fixture
def zc_production(pion):
    g = 5.17e-2

    def beta_nonflip(t):
        return np.sqrt(0.7) / 2.0 * (g / M_ZC3900) * (M2_PION - t)

    zc = TripleRegge(M_ZC3900, "Zc(3900)")
    zc.add_term(pion, beta_nonflip, sigmatot_pi)
    return zc


# ----- KINEMATICS ----- #
def test_scattering_angle_round_trip(rng):
    kin = InclusiveKinematics(M_ZC3900)
    s = 50.0
    for _ in range(10):
        cos_theta = rng.uniform(-1.0, 1.0)
        M2 = rng.uniform(1.0, 8.0)
        t = kin.t_man(s, cos_theta, M2)
        assert kin.cos_theta_cm(s, t, M2) == pytest.approx(cos_theta)


def test_missing_mass_mapping():
    kin = InclusiveKinematics(M_ZC3900)
    assert kin.minM2 == pytest.approx(M2_PROTON)
    assert kin.M2(40.0, 1.0) == pytest.approx(M2_PROTON)
    assert kin.M2(40.0, 0.0) == pytest.approx(40.0)

    kin.set_minM2(2.0)
    assert kin.M2(40.0, 0.5) == pytest.approx(21.0)


def test_feynman_x_at_forward_elastic_point():
    kin = InclusiveKinematics(M_ZC3900)
    s = 50.0
    t = kin.t_man(s, 1.0, kin.minM2)
    assert kin.x_feynman(s, t, kin.minM2) == pytest.approx(1.0)


# ----- TERMS ----- #
def test_field_fox_term_value():
    kin = InclusiveKinematics(M_ZC3900)
    pomeron = LinearTrajectory(1, 1.0, 0.25, "pomeron")
    term = FieldFoxTerm(kin, [pomeron] * 3, G_PPP)

    s, t, M2 = 50.0, -0.4, 10.0
    nu = M2 - t - kin.mT2
    alpha_t = 1.0 - 0.25 * 0.4
    expected = (s / nu) ** (2.0 * alpha_t) * nu * G_PPP(t) / (np.pi * s)
    assert term.eval(s, t, M2) == pytest.approx(expected)


def test_field_fox_term_needs_three_trajectories(pion):
    with pytest.raises(ValueError):
        FieldFoxTerm(InclusiveKinematics(M_ZC3900), [pion, pion], G_RRR)


def test_field_fox_couplings_positive():
    for t in (0.0, -0.2, -1.0):
        for coupling in (G_PPP, G_RRP, G_RRR, G_PPR):
            assert coupling(t) > 0
    assert G_RRR(0.0) == pytest.approx(18.1)


def test_pion_total_cross_section():
    # a few tens of mb at W of order 10 GeV
    assert 2.0e7 < sigmatot_pi(100.0) < 4.0e7


def test_exchange_term_positive(pion):
    term = JpacTripleReggeTerm(InclusiveKinematics(M_ZC3900), pion, lambda t: 0.1, sigmatot_pi)
    assert term.eval(50.0, -0.5, 10.0) > 0
    assert abs(term.xi(-0.5)) > 0


def test_invariant_xsection_sums_terms(zc_production, pion):
    s, t, M2 = 50.0, -0.5, 10.0
    single = zc_production.invariant_xsection(s, t, M2)
    assert single > 0

    zc_production.add_term(pion, lambda t: 0.01, sigmatot_pi)
    first, second = zc_production.terms
    total = zc_production.invariant_xsection(s, t, M2)
    assert total == pytest.approx(first.eval(s, t, M2) + second.eval(s, t, M2))
    assert total > single


def test_add_term_picks_parameterization(zc_production, pion):
    term = zc_production.add_term([pion] * 3, G_RRR)
    assert isinstance(term, FieldFoxTerm)
    assert isinstance(zc_production.terms[0], JpacTripleReggeTerm)


# ----- INTEGRATED ----- #
def test_integrated_xsection_below_threshold(zc_production):
    kin = zc_production.kinematics
    s = (kin.mX + np.sqrt(kin.minM2)) ** 2 - 1.0
    assert zc_production.integrated_xsection(s) == 0


def test_integrated_xsection_positive(zc_production):
    result = zc_production.integrated_xsection(30.0, neval=500, nitn=3)
    assert np.isfinite(result)
    assert result > 0
