"""Toy event generator for  gamma p -> X p -> l+ l- p.

Events are generated on flat phase space, in the production angles of X and
the decay angles of the massless lepton pair in the X rest frame, boosted to
the lab frame where the target is at rest. Each event is weighted by the
probability distribution of an amplitude at the generated (s, t).
"""

import logging

import numpy as np
from numba import jit

from kinematics import W_cm

logger = logging.getLogger(__name__)

COLUMNS = [
    "weight", "s", "t",
    "theta_X", "phi_X", "theta_l", "phi_l",
    "lp_E", "lp_px", "lp_py", "lp_pz",
    "lm_E", "lm_px", "lm_py", "lm_pz",
    "rec_E", "rec_px", "rec_py", "rec_pz",
]


# ----- LORENTZ TRANSFORMATIONS ----- #
@jit(nopython=True, error_model="numpy")
def boost_z(p, beta):
    """Boost four-vector p = (E, px, py, pz) by velocity beta along z."""
    gamma = 1.0 / np.sqrt(1.0 - beta * beta)
    result = p.copy()
    result[0] = gamma * (p[0] + beta * p[3])
    result[3] = gamma * (p[3] + beta * p[0])
    return result


@jit(nopython=True, error_model="numpy")
def rotate(p, theta, phi):
    """Rotate the spatial part of p by theta about y, then by phi about z."""
    x, y, z = p[1], p[2], p[3]
    x, z = np.cos(theta) * x + np.sin(theta) * z, -np.sin(theta) * x + np.cos(theta) * z
    x, y = np.cos(phi) * x - np.sin(phi) * y, np.sin(phi) * x + np.cos(phi) * y
    return np.array([p[0], x, y, z])


class ToyMonteCarlo:
    """
    Parameters
    ----------
    amplitude : Amplitude
        Weighting function. Its kinematics fix the masses of X, target and recoil.
    seed : int
        Seed of the numpy random generator.
    """

    def __init__(self, amplitude, seed=0):
        self.amplitude = amplitude
        self.kinematics = amplitude.kinematics
        self.rng = np.random.default_rng(seed)

    def generate(self, beam_energy, N):
        """N weighted events at fixed beam energy, one row per event with COLUMNS."""
        s = W_cm(beam_energy, self.kinematics.mT) ** 2
        if s <= self.kinematics.sth:
            logger.warning("beam energy %s below threshold, no events generated", beam_energy)
            return np.empty((0, len(COLUMNS)))

        return np.array([self.generate_event(s) for _ in range(N)])

    def generate_event(self, s):
        kin = self.kinematics
        mX, mT2 = kin.mX, kin.mT2
        W = np.sqrt(s)

        # flat in cos(theta) rather than theta
        phi_X = self.rng.uniform(0.0, 2.0 * np.pi)
        theta_X = np.arccos(self.rng.uniform(-1.0, 1.0))
        phi_l = self.rng.uniform(0.0, 2.0 * np.pi)
        theta_l = np.arccos(self.rng.uniform(-1.0, 1.0))

        # X rest frame, leptons back to back along z before rotating
        p_X = np.array([mX, 0.0, 0.0, 0.0])
        p_lp = rotate(np.array([mX / 2.0, 0.0, 0.0, mX / 2.0]), theta_l, phi_l)
        p_lm = rotate(np.array([mX / 2.0, 0.0, 0.0, -mX / 2.0]), theta_l, phi_l)

        # to the CM frame along the direction (theta_X, phi_X)
        beta_X = np.real(kin.final_state.momentum(s) / kin.final_state.energy_V(s))
        p_X, p_lp, p_lm = (rotate(boost_z(p, beta_X), theta_X, phi_X) for p in (p_X, p_lp, p_lm))
        p_rec = np.array([W - p_X[0], -p_X[1], -p_X[2], -p_X[3]])

        # to the lab frame where the target is at rest
        beta_lab = (s - mT2) / (s + mT2)
        p_lp, p_lm, p_rec = (boost_z(p, beta_lab) for p in (p_lp, p_lm, p_rec))

        t = kin.t_man(s, theta_X)
        weight = self.amplitude.probability_distribution(s, t)

        return np.concatenate(
            ([weight, s, t, theta_X, phi_X, theta_l, phi_l], p_lp, p_lm, p_rec)
        )

    def save(self, filename, events):
        np.savetxt(filename, events, delimiter=",", header=",".join(COLUMNS))
        logger.info("%d events saved to %s", len(events), filename)
