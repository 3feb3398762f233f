"""Semi-inclusive production  gamma p -> X + anything  in the triple-Regge limit.

The invariant cross section d sigma / dt dM^2 is a sum of terms, each the
square of a Regge exchange between the beam and X coupled to the total
cross section of the exchanged Reggeon on the target, M^2 being the
missing mass of the unobserved system.

Two parameterizations are available:
  - FieldFoxTerm, the triple-Regge form of Field and Fox,
    Nucl. Phys. B80 (1974) 367, with the couplings G_PPP, G_RRP, G_RRR, G_PPR
    extracted there.
  - JpacTripleReggeTerm, a single exchange whose bottom vertex is replaced
    by a measured total cross section such as sigmatot_pi.
"""

import logging

import numpy as np
import vegas

from constants import DEFAULT_VALUES, M2_PROTON, M_PROTON
from integrand import InclusiveIntegrand
from misc_math import cgamma, kallen

logger = logging.getLogger(__name__)

# Lower limit of the integration variable x, M^2 = M^2_min + (s - M^2_min)(1 - x)
X_MIN = 0.1


# ----- FIELD AND FOX COUPLINGS ----- #
def G_PPP(t):
    return 2.31 * np.exp(3.94 * t) + 0.33 * np.exp(1.12 * t)


def G_RRP(t):
    return 26.81 * np.exp(7.26 * t) + 4.80 * np.exp(-1.83 * t)


def G_RRR(t):
    return 18.1 * np.exp(12.0 * t)


def G_PPR(t):
    return 0.95 * np.exp(-0.01 * t) + 3.47 * np.exp(4.41 * t)


# ----- TOTAL CROSS SECTIONS ----- #
def sigmatot_pi(s):
    """Total pi p cross section in nb."""
    result = 13.63 * s**0.0808 + 31.79 * s ** (-0.425)
    return result * 1e6


# ----- KINEMATICS ----- #
class InclusiveKinematics:
    """CM kinematics of  gamma p -> X + (missing mass M^2).

    Parameters
    ----------
    mX : float
        Mass of the observed particle X.
    mT : float
        Mass of the target, which is also the default minimal missing mass.
    """

    def __init__(self, mX, mT=M_PROTON):
        self.mX, self.mX2 = mX, mX * mX
        self.mT, self.mT2 = mT, mT * mT
        self.minM2 = M2_PROTON

    def set_minM2(self, minM2):
        self.minM2 = minM2

    def M2(self, s, x):
        return self.minM2 + (s - self.minM2) * (1.0 - x)

    def pgamma_cm(self, s):
        return np.sqrt(kallen(s, 0.0, self.mT2)) / (2.0 * np.sqrt(s))

    def pX_cm(self, s, M2):
        return np.sqrt(kallen(s, self.mX2, M2)) / (2.0 * np.sqrt(s))

    def t_man(self, s, cos_theta, M2):
        result = 2.0 * self.pgamma_cm(s) * self.pX_cm(s, M2) * cos_theta
        result -= (s * (s - self.mT2 - self.mX2 - M2) - self.mT2 * (self.mX2 - M2)) / (2.0 * s)
        return result

    def cos_theta_cm(self, s, t, M2):
        """Inverse of t_man."""
        u = self.mX2 + self.mT2 + M2 - s - t
        result = s * (t - u) - self.mT2 * (self.mX2 - M2)
        result /= np.sqrt(kallen(s, 0.0, self.mT2) * kallen(s, self.mX2, M2))
        return result

    def p_long_cm(self, s, t, M2):
        """Momentum of X along the beam axis."""
        return self.pX_cm(s, M2) * self.cos_theta_cm(s, t, M2)

    def x_feynman(self, s, t, M2):
        return self.p_long_cm(s, t, M2) / self.pX_cm(s, self.minM2)


# ----- TRIPLE REGGE TERMS ----- #
class FieldFoxTerm:
    """
    Parameters
    ----------
    kinematics : InclusiveKinematics
    trajectories : sequence of ReggeTrajectory
        (alpha_i, alpha_j, alpha_k), the two exchanges between beam and X
        and the one coupling to the target.
    coupling : callable
        Triple-Regge coupling G(t), e.g. G_PPP.
    """

    s0 = 1.0

    def __init__(self, kinematics, trajectories, coupling):
        if len(trajectories) != 3:
            raise ValueError(f"a Field-Fox term needs 3 trajectories, got {len(trajectories)}")
        self.kinematics = kinematics
        self.trajectories = list(trajectories)
        self.coupling = coupling

    def eval(self, s, t, M2):
        alpha_i = np.real(self.trajectories[0].eval(t))
        alpha_j = np.real(self.trajectories[1].eval(t))
        alpha_k0 = np.real(self.trajectories[2].eval(0.0))

        nu = M2 - t - self.kinematics.mT2

        result = (s / nu) ** (alpha_i + alpha_j)
        result *= (nu / self.s0) ** alpha_k0
        return result * self.coupling(t) / (np.pi * self.s0 * s)


class JpacTripleReggeTerm:
    """
    Parameters
    ----------
    kinematics : InclusiveKinematics
    trajectory : ReggeTrajectory
        Exchange between beam and X.
    coupling : callable
        Residue g(t) of the exchange at the beam vertex.
    sigma_tot : callable
        Total cross section of the exchanged particle on the target, in nb,
        as a function of M^2.
    """

    def __init__(self, kinematics, trajectory, coupling, sigma_tot):
        self.kinematics = kinematics
        self.trajectory = trajectory
        self.coupling = coupling
        self.sigma_tot = sigma_tot

    def xi(self, t):
        """Signature factor times Gamma(1 - alpha(t))."""
        return self.trajectory.signature_factor(t) * cgamma(1.0 - self.trajectory.eval(t))

    def eval(self, s, t, M2):
        alpha = np.real(self.trajectory.eval(t))

        result = self.sigma_tot(M2)
        result *= (s / M2) ** (2.0 * alpha)
        result *= np.abs(self.xi(t)) ** 2
        result *= self.coupling(t) ** 2
        result *= M2 / s

        return self.trajectory.slope() / (16.0 * np.pi**3) * result


class TripleRegge:
    """Invariant and integrated cross sections from a sum of triple-Regge terms.

    Parameters
    ----------
    mass : float
        Mass of the observed particle X.
    identifier : str
    """

    def __init__(self, mass, identifier=""):
        self.kinematics = InclusiveKinematics(mass)
        self.identifier = identifier
        self.terms = []

    def add_term(self, trajectories, coupling, sigma_tot=None):
        """Add a Field-Fox term (three trajectories and G(t)) or, when `sigma_tot`
        is given, a single-exchange term (one trajectory, g(t) and sigma_tot)."""
        if sigma_tot is None:
            term = FieldFoxTerm(self.kinematics, trajectories, coupling)
        else:
            term = JpacTripleReggeTerm(self.kinematics, trajectories, coupling, sigma_tot)
        self.terms.append(term)
        return term

    def invariant_xsection(self, s, t, M2):
        """d sigma / dt dM^2."""
        return sum(term.eval(s, t, M2) for term in self.terms)

    def integrated_xsection(self, s, neval=DEFAULT_VALUES["neval"], nitn=DEFAULT_VALUES["nitn"]):
        """Integral of the invariant cross section over t and M^2."""
        if np.sqrt(s) <= self.kinematics.mX + np.sqrt(self.kinematics.minM2):
            logger.debug("integrated_xsection below threshold s = %s", s)
            return 0.0

        f = InclusiveIntegrand(self, s)
        integ = vegas.Integrator([[-1.0, 1.0], [X_MIN, 1.0]])

        # step 1 -- adapt to f; discard results
        integ(f, nitn=nitn, neval=neval, alpha=DEFAULT_VALUES["alpha"])

        # step 2 -- integ has adapted to f; keep results
        result = integ(f, nitn=nitn, neval=neval, alpha=False)
        logger.info("%s: sigma(s = %s) = %s, Q = %.2f", self.identifier, s, result, result.Q)
        return result.mean
