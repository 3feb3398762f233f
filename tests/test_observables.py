import numpy as np
import pytest

from constants import M_PROTON
from errors import InvalidHelicity, InvalidSpinParity
from kinematics import ReactionKinematics
from regge_trajectory import LinearTrajectory
from s_channel import BaryonResonance
from t_channel import PomeronExchange, PseudoscalarExchange, VectorExchange
from u_channel import DiracExchange


def test_omega_exchange_chi_c1_scenario(chi_c1_kinematics, omega_exchange):
    s = 16.0
    t = chi_c1_kinematics.t_man(s, 0.0)
    dxs = omega_exchange.differential_xsection(s, t)
    assert np.isfinite(dxs)
    assert 1e-3 < dxs < 1.0


def test_xsection_normalization(omega_exchange, physical_point):
    s, t = physical_point
    q2 = np.real(omega_exchange.kinematics.initial_state.momentum(s) ** 2)
    expected = omega_exchange.probability_distribution(s, t)
    expected /= 64.0 * np.pi * s * q2 * 2.56819e-6 * 4.0
    assert omega_exchange.differential_xsection(s, t) == pytest.approx(expected)


def _below_threshold_amplitudes():
    chi = ReactionKinematics(3.51067, jp=(1, 1))
    psi = ReactionKinematics(3.0969, jp=(1, -1))
    return [
        VectorExchange(chi, 0.780, "omega", params=(5.2e-4, 16.0, 0.0)),
        PseudoscalarExchange(chi, 0.13957, "pion", params=(1.0e-3, 13.26)),
        VectorExchange(psi, 2.01026, "dstar", params=(0.1, 1.0, 0.0)),
        PomeronExchange(psi, LinearTrajectory(1, 1.15, 0.11), params=(0.4, 1.0)),
        BaryonResonance(psi, 3, -1, 4.45, 0.04, params=(0.01, 0.5)),
        DiracExchange(psi, M_PROTON, params=(0.3, 1.6)),
    ]


@pytest.mark.parametrize("amp", _below_threshold_amplitudes(), ids=lambda a: type(a).__name__)
def test_integrated_xsection_below_threshold(amp):
    s = amp.kinematics.sth - 1.0
    assert amp.integrated_xsection(s) == 0


def test_integrated_xsection_positive(omega_exchange):
    assert omega_exchange.integrated_xsection(30.0) > 0


def test_spin_density_matrix_trace(omega_exchange, physical_point):
    s, t = physical_point
    rho_11 = omega_exchange.SDME(0, 1, 1, s, t)
    rho_00 = omega_exchange.SDME(0, 0, 0, s, t)
    rho_m1m1 = omega_exchange.SDME(0, -1, -1, s, t)
    assert np.real(rho_m1m1) == pytest.approx(np.real(rho_11))
    assert np.real(2.0 * rho_11 + rho_00) == pytest.approx(1.0)


def test_spin_density_matrix_indices(omega_exchange, physical_point):
    s, t = physical_point
    with pytest.raises(InvalidHelicity):
        omega_exchange.SDME(3, 0, 0, s, t)
    with pytest.raises(InvalidHelicity):
        omega_exchange.SDME(0, 2, 0, s, t)


def test_polarization_observables_bounded(omega_exchange, physical_point):
    s, t = physical_point
    for observable in (omega_exchange.K_LL, omega_exchange.A_LL):
        assert -1.0 <= observable(s, t) <= 1.0
    for observable in (
        omega_exchange.beam_asymmetry_y,
        omega_exchange.beam_asymmetry_4pi,
        omega_exchange.parity_asymmetry,
    ):
        assert np.isfinite(observable(s, t))


def test_polarization_observables_need_spin_one():
    kin = ReactionKinematics(3.87169, jp=(0, -1))
    amp = VectorExchange(kin, 0.780, "omega", params=(1.0, 1.0, 0.0))
    s = 30.0
    t = kin.t_man(s, 0.5)
    with pytest.raises(InvalidSpinParity):
        amp.K_LL(s, t)
    with pytest.raises(InvalidSpinParity):
        amp.SDME(0, 0, 0, s, t)


def test_helicity_amplitudes_cached(omega_exchange, physical_point):
    s, t = physical_point
    first = omega_exchange.helicity_amplitudes(s, t)
    assert omega_exchange.helicity_amplitudes(s, t) is first

    omega_exchange.set_params([1.0e-3, 16.0, 0.0])
    second = omega_exchange.helicity_amplitudes(s, t)
    assert second is not first
    assert np.abs(second[0]) == pytest.approx(np.abs(first[0]) * 1.0e-3 / 5.2e-4)
