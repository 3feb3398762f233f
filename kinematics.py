"""Kinematics of the reaction  beam + target -> X + recoil.

Everything is evaluated in the center-of-mass frame as a function of the
Mandelstam invariant s and the scattering angle theta of X relative to the
beam direction (the z-axis). Energies and momenta are complex so that
quantities remain defined below threshold, where the final state momentum
is imaginary.

Helicity quadruples are ordered (beam, target, X, recoil). Baryon
helicities are stored as twice their value (+-1), the helicities of the
beam and of X as their actual value.
"""

import logging

import numpy as np

from constants import M_PROTON
from errors import InvalidHelicity, InvalidSpinParity, UnknownParticleLabel
from misc_math import kallen

logger = logging.getLogger(__name__)


# ----- HELICITY TABLES ----- #
def _helicity_table(J):
    return [
        (lam_gam, lam_targ, lam_x, lam_rec)
        for lam_gam in (1, -1)
        for lam_targ in (-1, 1)
        for lam_x in range(J, -J - 1, -1)
        for lam_rec in (-1, 1)
    ]


SPIN_ZERO_HELICITIES = _helicity_table(0)
SPIN_ONE_HELICITIES = _helicity_table(1)
SPIN_TWO_HELICITIES = _helicity_table(2)


def get_helicities(J):
    tables = {
        0: SPIN_ZERO_HELICITIES,
        1: SPIN_ONE_HELICITIES,
        2: SPIN_TWO_HELICITIES,
    }
    if J not in tables:
        raise InvalidSpinParity(f"helicity amplitudes for spin J = {J} not available")
    return tables[J]


# ----- LAB FRAME ----- #
def W_cm(beam_energy, mT=M_PROTON):
    """Center-of-mass energy for a massless beam hitting a target at rest."""
    return np.sqrt(mT**2 + 2.0 * mT * beam_energy)


def E_beam(W, mT=M_PROTON):
    """Lab frame beam energy, inverse of W_cm."""
    return (W**2 - mT**2) / (2.0 * mT)


# ----- TWO BODY STATES ----- #
class TwoBodyState:
    """Two particles of squared masses mV2 and mB2 back-to-back in their CM frame.

    The first particle ("V") travels along the direction theta, the second
    ("B") along theta + pi.
    """

    def __init__(self, mV2, mB2):
        self.mV2 = mV2
        self.mB2 = mB2

    def set_mV2(self, mV2):
        self.mV2 = mV2

    @property
    def mV(self):
        return np.sqrt(complex(self.mV2))

    @property
    def mB(self):
        return np.sqrt(complex(self.mB2))

    def momentum(self, s):
        return np.sqrt(complex(kallen(s, self.mV2, self.mB2))) / (2.0 * np.sqrt(complex(s)))

    def energy_V(self, s):
        return (s + self.mV2 - self.mB2) / (2.0 * np.sqrt(complex(s)))

    def energy_B(self, s):
        return (s - self.mV2 + self.mB2) / (2.0 * np.sqrt(complex(s)))

    def q(self, s, theta):
        """Four-momentum of particle V at angle theta."""
        p = self.momentum(s)
        return np.array(
            [self.energy_V(s), p * np.sin(theta), 0.0, p * np.cos(theta)],
            dtype=complex,
        )

    def p(self, s, theta):
        """Four-momentum of particle B, recoiling against V at angle theta."""
        p = self.momentum(s)
        return np.array(
            [self.energy_B(s), -p * np.sin(theta), 0.0, -p * np.cos(theta)],
            dtype=complex,
        )


class DiracSpinor:
    """Helicity spinor of the baryon (particle B) of a two body state."""

    def __init__(self, state, anti=False):
        self.state = state
        self.anti = anti

    def _omega(self, sign, s):
        if self.anti:
            sign = -sign
        return np.sqrt(self.state.energy_B(s) + sign * self.state.mB)

    @staticmethod
    def _xi(lam, theta):
        return np.cos(theta / 2.0) if lam == 1 else np.sin(theta / 2.0)

    def component(self, lam, s, theta):
        """All four components of u(lam) for a baryon moving along theta."""
        if abs(lam) != 1:
            raise InvalidHelicity(f"spinor helicity 2*lambda = {lam} is not +-1")

        wp = self._omega(1, s)
        wm = self._omega(-1, s)
        return np.array(
            [
                wp * self._xi(lam, theta),
                lam * wp * self._xi(-lam, theta),
                lam * wm * self._xi(lam, theta),
                wm * self._xi(-lam, theta),
            ],
            dtype=complex,
        )

    def adjoint_component(self, lam, s, theta):
        """Components of ubar = u^dagger gamma^0 (for real energies)."""
        return self.component(lam, s, theta) * np.array([1.0, 1.0, -1.0, -1.0])


class PolarizationVector:
    """Polarization vector of the particle V of a two body state."""

    def __init__(self, state):
        self.state = state

    def component(self, lam, s, theta):
        if abs(lam) > 1:
            raise InvalidHelicity(f"polarization vector helicity {lam} is not 0 or +-1")

        if lam == 0:
            mV = self.state.mV
            # massless particles have no longitudinal polarization
            if abs(mV) < 0.01:
                return np.zeros(4, dtype=complex)
            E = self.state.energy_V(s)
            return np.array(
                [
                    self.state.momentum(s) / mV,
                    E * np.sin(theta) / mV,
                    0.0,
                    E * np.cos(theta) / mV,
                ],
                dtype=complex,
            )

        return np.array(
            [
                0.0,
                -lam * np.cos(theta) / np.sqrt(2.0),
                -1j / np.sqrt(2.0),
                lam * np.sin(theta) / np.sqrt(2.0),
            ],
            dtype=complex,
        )

    def conjugate_component(self, lam, s, theta):
        return np.conj(self.component(lam, s, theta))

    def field_tensor(self, lam, s, theta):
        """F^{mu nu} = q^mu eps^nu - q^nu eps^mu."""
        q = self.state.q(s, theta)
        eps = self.component(lam, s, theta)
        return np.outer(q, eps) - np.outer(eps, q)


# ----- REACTION KINEMATICS ----- #
class ReactionKinematics:
    """All kinematic quantities of  beam + target -> X + recoil.

    Parameters
    ----------
    mX : float
        Mass of the produced particle X.
    mR : float
        Mass of the recoil baryon. Defaults to the proton.
    mT : float
        Mass of the target baryon. Defaults to the proton.
    mB : float
        Mass of the beam, 0 for a real photon.
    jp : tuple
        Spin and parity of X. Determines which helicity table is used.
    """

    def __init__(self, mX, mR=M_PROTON, mT=M_PROTON, mB=0.0, jp=(1, 1)):
        self.mX, self.mX2 = mX, mX * mX
        self.mR, self.mR2 = mR, mR * mR
        self.mT, self.mT2 = mT, mT * mT
        self.mB, self.mB2 = mB, mB * mB

        self.initial_state = TwoBodyState(self.mB2, self.mT2)
        self.eps_gamma = PolarizationVector(self.initial_state)
        self.target = DiracSpinor(self.initial_state)

        self.final_state = TwoBodyState(self.mX2, self.mR2)
        self.eps_vec = PolarizationVector(self.final_state)
        self.recoil = DiracSpinor(self.final_state)

        self.set_JP(*jp)

    # ---- setters ---- #
    def set_mX(self, m):
        self.mX, self.mX2 = m, m * m
        self.final_state.set_mV2(m * m)

    def set_mX2(self, m2):
        self.mX, self.mX2 = np.sqrt(m2), m2
        self.final_state.set_mV2(m2)

    def set_Q2(self, Q2):
        """Virtuality of the beam, Q2 = -mB^2 > 0."""
        if Q2 < 0:
            logger.warning("set_Q2 expects Q2 > 0 but got %s", Q2)
        self.mB2 = -Q2
        self.mB = np.sqrt(complex(-Q2))
        self.initial_state.set_mV2(-Q2)

    def set_JP(self, J, P):
        if P not in (-1, 1):
            raise InvalidSpinParity(f"parity must be +1 or -1, got {P}")
        self.helicities = get_helicities(J)
        self.jp = (J, P)

    @property
    def n_amps(self):
        return len(self.helicities)

    # ---- thresholds ---- #
    @property
    def Wth(self):
        return self.mX + self.mR

    @property
    def sth(self):
        return self.Wth**2

    # ---- invariants ---- #
    def _products(self, s):
        qdotqp = self.initial_state.momentum(s) * self.final_state.momentum(s)
        E1E3 = self.initial_state.energy_V(s) * self.final_state.energy_V(s)
        return abs(qdotqp), abs(E1E3)

    def t_man(self, s, theta):
        qq, EE = self._products(s)
        return self.mX2 + np.real(self.mB2) - 2.0 * EE + 2.0 * qq * np.cos(theta)

    def u_man(self, s, theta):
        return (
            self.mX2 + np.real(self.mB2) + self.mT2 + self.mR2 - s - self.t_man(s, theta)
        )

    def z_s(self, s, t):
        """Cosine of the CM scattering angle, inverse of t_man."""
        qq, EE = self._products(s)
        return (t - self.mX2 - np.real(self.mB2) + 2.0 * EE) / (2.0 * qq)

    def theta_s(self, s, t):
        return np.arccos(np.clip(self.z_s(s, t), -1.0, 1.0))

    def z_t(self, s, theta):
        """Cosine of the scattering angle in the t-channel frame."""
        t = self.t_man(s, theta)
        p_t = np.sqrt(complex(kallen(t, self.mT2, self.mR2))) / np.sqrt(complex(4.0 * t))
        q_t = np.sqrt(complex(kallen(t, self.mX2, np.real(self.mB2)))) / np.sqrt(
            complex(4.0 * t)
        )

        # s - u
        result = 2.0 * s + t - self.mT2 - self.mR2 - self.mX2 - np.real(self.mB2)
        return result / (4.0 * p_t * q_t)

    def z_u(self, s, theta):
        """Cosine of the scattering angle in the u-channel frame, beam + anti-recoil -> X + anti-target."""
        t = self.t_man(s, theta)
        u = self.u_man(s, theta)
        mB2 = np.real(self.mB2)
        root_u = np.sqrt(complex(u))

        p_u = np.sqrt(complex(kallen(u, mB2, self.mR2))) / (2.0 * root_u)
        q_u = np.sqrt(complex(kallen(u, self.mX2, self.mT2))) / (2.0 * root_u)
        E_beam_u = (u + mB2 - self.mR2) / (2.0 * root_u)
        E_X_u = (u + self.mX2 - self.mT2) / (2.0 * root_u)

        return (t - mB2 - self.mX2 + 2.0 * E_beam_u * E_X_u) / (2.0 * p_u * q_u)

    def t_exchange_momentum(self, s, theta):
        return self.initial_state.q(s, 0.0) - self.final_state.q(s, theta)

    def u_exchange_momentum(self, s, theta):
        return self.final_state.p(s, theta + np.pi) - self.initial_state.q(s, np.pi)

    def crossing_angle(self, particle, s, theta):
        """Cosine of the crossing angle rotating the helicity of `particle`
        from the s-channel to the t-channel frame (massless beam)."""
        t = self.t_man(s, theta)
        mP2, mV2 = self.mT2, self.mX2

        S_gp = np.sqrt(complex(kallen(s, 0.0, mP2)))
        S_vp = np.sqrt(complex(kallen(s, mV2, mP2)))
        T_gv = np.sqrt(complex(kallen(t, 0.0, mV2)))
        T_pp = np.sqrt(complex(kallen(t, mP2, mP2)))

        if particle == "beam":
            return -(s - mP2) * (t - mV2) / (S_gp * T_gv)
        if particle == "vector":
            return (-(s + mV2 - mP2) * (t + mV2) + 2.0 * mV2**2) / (S_vp * T_gv)
        if particle == "target":
            return (-(s + mP2) * t + 2.0 * mP2 * mV2) / (S_gp * T_pp)
        if particle == "recoil":
            return ((s + mP2 - mV2) * t + 2.0 * mP2 * mV2) / (S_vp * T_pp)

        raise UnknownParticleLabel(f"no crossing angle for particle '{particle}'")
