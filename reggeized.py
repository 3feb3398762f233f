"""Reggeized exchanges with helicity residues written in the crossed channel.

Helicities are taken in the t-channel (mesons) or u-channel (baryons)
frame and are not rotated back to the s-channel. Amplitudes are therefore
only meaningful in observables summed over every helicity.
"""

import logging

import numpy as np

from amplitude import Amplitude
from constants import DEFAULT_VALUES, M_PROTON
from misc_math import cgamma, kallen
from s_channel import BaryonResonance

logger = logging.getLogger(__name__)


def _half_angle_factor(lam, lamp, z):
    """sin(theta/2)^|lam - lamp| cos(theta/2)^|lam + lamp| for doubled helicities."""
    sinhalf = np.sqrt((1.0 - z) / 2.0)
    coshalf = np.sqrt((1.0 + z) / 2.0)
    return sinhalf ** (abs(lam - lamp) / 2.0) * coshalf ** (abs(lam + lamp) / 2.0)


def _regge_propagator(trajectory, alpha, slope):
    if abs(alpha) > DEFAULT_VALUES["regge_cutoff"]:
        logger.debug("Regge propagator cut off, |alpha| = %s", abs(alpha))
        return 0.0

    result = -slope
    result *= 0.5 * (trajectory.signature + np.exp(-1j * np.pi * alpha))
    result *= cgamma(1.0 - alpha)
    return result


class ReggeonExchange(Amplitude):
    """Vector Reggeon exchange in the t-channel with factorized residues.

    Parameters
    ----------
    kinematics : ReactionKinematics
    trajectory : ReggeTrajectory
    identifier : str
    params : sequence of float
        (gGamma, gV, gT) as for VectorExchange.
    """

    n_params = 3
    allowed_jp = [(1, 1), (1, -1)]

    def __init__(self, kinematics, trajectory, identifier="reggeon_exchange", params=(0.0, 0.0, 0.0)):
        self.trajectory = trajectory
        super().__init__(kinematics, params, identifier)

    def set_params(self, params):
        super().set_params(params)
        self.gGam, self.gV, self.gT = self.params

    def helicity_amplitude(self, helicities, s, t):
        lam_gam, lam_targ, lam_vec, lam_rec = helicities
        kin = self.kinematics

        lam = lam_gam - lam_vec
        lamp = (lam_targ - lam_rec) // 2
        M = max(abs(lam), abs(lamp))
        # double flips are neglected
        if M == 2:
            return 0.0j

        theta = kin.theta_s(s, t)
        z_t = kin.z_t(s, theta)

        result = self.top_residue(lam_gam, lam, t) * self.bottom_residue(lamp, t)
        # nontrivial barrier factor only without helicity flip
        if M == 0:
            result /= self.barrier(t)
        result *= _half_angle_factor(2 * lam, 2 * lamp, z_t)

        alpha_t = self.trajectory.eval(t)
        result *= _regge_propagator(self.trajectory, alpha_t, self.trajectory.slope())
        result *= s ** (alpha_t - M)
        return complex(result)

    def _q(self, t):
        return (t - self.kinematics.mX2) / np.sqrt(complex(4.0 * t))

    def barrier(self, t):
        p = np.sqrt(complex(t - 4.0 * M_PROTON**2)) / 2.0
        return 2.0 * p * self._q(t)

    def top_residue(self, lam_gam, lam, t):
        result = 1.0 if lam == 0 else np.sqrt(complex(t)) / self.kinematics.mX
        return result * self._q(t) * self.gGam

    def bottom_residue(self, lamp, t):
        root_t = np.sqrt(complex(t))
        if lamp == 0:
            vector, tensor = 1.0, root_t / (2.0 * M_PROTON)
        else:
            vector, tensor = np.sqrt(2.0) * root_t / (2.0 * M_PROTON), np.sqrt(2.0)
        return 2.0 * M_PROTON * (self.gV * vector + self.gT * tensor * root_t / (2.0 * M_PROTON))


class ReggeizedMeson(ReggeonExchange):
    """ReggeonExchange with the photon helicity phase i lam_gamma at the top vertex."""

    def top_residue(self, lam_gam, lam, t):
        return 1j * lam_gam * super().top_residue(lam_gam, lam, t)


class ReggeizedBaryon(BaryonResonance):
    """Baryon trajectory exchanged in the u-channel.

    The residues are the couplings of the lowest resonance on the trajectory,
    continued to the exchanged u, and its parity is the signature of the
    trajectory.

    Parameters
    ----------
    kinematics : ReactionKinematics
    trajectory : ReggeTrajectory
    j : int
        Twice the spin of the lowest resonance.
    mass, width : float
        Mass and width of the lowest resonance.
    identifier : str
    params : sequence of float
        (branching ratio, photocoupling ratio) as for BaryonResonance.
    """

    def __init__(self, kinematics, trajectory, j, mass, width, identifier="reggeized_baryon", params=(0.0, 0.0)):
        self.trajectory = trajectory
        super().__init__(kinematics, j, trajectory.signature, mass, width, identifier, params)

    def helicity_amplitude(self, helicities, s, t):
        lam_gam, lam_targ, lam_vec, lam_rec = helicities
        kin = self.kinematics

        lam = 2 * lam_gam - lam_rec
        lamp = 2 * lam_vec - lam_targ
        M = max(abs(lam), abs(lamp))

        theta = kin.theta_s(s, t)
        u = kin.u_man(s, theta)
        z_u = kin.z_u(s, theta)

        # residues continued to the exchanged u
        result = self.photo_coupling(lam, u)
        result *= self.hadronic_coupling(lam_gam, lamp)
        if M == 3:
            result /= self.barrier(u)
        result *= _half_angle_factor(lam, lamp, z_u)

        alpha_u = self.trajectory.eval(u)
        result *= _regge_propagator(self.trajectory, alpha_u - 0.5, self.trajectory.slope())
        result *= (2.0 * s) ** (alpha_u - M / 2.0)
        return complex(result)

    def barrier(self, u):
        kin = self.kinematics
        root = np.sqrt(complex(4.0 * u))
        q = (u - kin.mT2) / root
        p = np.sqrt(complex(kallen(u, kin.mX2, kin.mR2))) / root
        return 4.0 * p * q
