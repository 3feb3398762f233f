"""Integrand objects handed to the vegas Monte Carlo integrator.

Throughout this file we use a (+ - - -) metric signature and GeV units.


1. DISCONTINUITY OF A BOX DIAGRAM

A one-loop box for  gamma p -> X p  is built by gluing two tree amplitudes
through a two-body intermediate state (m, b):

        gamma p -> m b        (the "left" amplitude)
        X p     -> m b        (the "right" amplitude)

Unitarity fixes the discontinuity of the box across the s-channel cut as
the phase-space integral over the direction of the intermediate state,

            Disc(s') = p(s') / (32 pi^2 sqrt(s'))
                       *  ∫ sin(theta_g) dtheta_g dphi_g
                          sum_{lam_m, lam_b}  A_left(lam_gam, lam_targ, lam_m, lam_b; s', t_g)
                                            * A_right(lam_X, lam_rec, lam_m, lam_b; s', t_X)

where (theta_g, phi_g) is the direction of the intermediate meson relative
to the beam, t_g is the momentum transfer between beam and meson, and t_X
the one between X and meson. The angle between X and the intermediate
meson follows from the spherical law of cosines,

            cos(theta_X) = cos(theta) cos(theta_g)
                         + sin(theta) sin(theta_g) cos(phi_g).

The DiscontinuityIntegrand class evaluates the integrand above at a point
x = [theta_g, phi_g] and returns its real and imaginary parts as a length-2
array, which vegas integrates simultaneously.


2. TRIPLE-REGGE INCLUSIVE CROSS SECTIONS

The inclusive reaction  gamma p -> X + anything  is integrated over the CM
scattering angle and the missing mass M^2 of the unobserved system. We
integrate over

            cos(theta) in [-1, 1],   x in [x_min, 1],
            M^2 = M^2_min + (s - M^2_min) (1 - x),

so the Jacobian of (cos(theta), x) -> (t, M^2) is

            2 p_gamma(s) p_X(s, M^2) (s - M^2_min).

Points with M^2 above the kinematic limit (sqrt(s) - m_X)^2 carry no
weight.
"""

import numpy as np
from numba import jit


# ----- DISCONTINUITY INTEGRAND ----- #
class DiscontinuityIntegrand:
    """Callable object which evaluates the box discontinuity integrand at x = [theta_g, phi_g].

    Parameters
    ----------
    left, right : Amplitude
        Tree amplitudes  gamma p -> m b  and  X p -> m b.
    helicities : tuple
        External helicities (lam_gam, lam_targ, lam_X, lam_rec).
    s : float
        Invariant energy squared of the intermediate state.
    theta : float
        External CM scattering angle.
    """

    def __init__(self, left, right, helicities, s, theta):
        self.left = left
        self.right = right
        self.helicities = helicities
        self.s = s
        self.theta = theta

        # every (lam_m, lam_b) pair appears once among the first entries
        J = left.kinematics.jp[0]
        self.intermediate = left.kinematics.helicities[: 2 * (2 * J + 1)]

        p = np.real(left.kinematics.final_state.momentum(s))
        self.phase_space = two_body_phase_space(p, s)

    def __call__(self, x):
        theta_g, phi_g = x[0], x[1]
        lam_gam, lam_targ, lam_X, lam_rec = self.helicities

        t_g = self.left.kinematics.t_man(self.s, theta_g)
        theta_X = np.arccos(rotated_cosine(self.theta, theta_g, phi_g))
        t_X = self.right.kinematics.t_man(self.s, theta_X)

        result = 0.0j
        for hel in self.intermediate:
            lam_m, lam_b = hel[2], hel[3]
            temp = self.left.helicity_amplitude((lam_gam, lam_targ, lam_m, lam_b), self.s, t_g)
            temp *= self.right.helicity_amplitude((lam_X, lam_rec, lam_m, lam_b), self.s, t_X)
            result += temp

        result *= self.phase_space * np.sin(theta_g)
        return np.array([result.real, result.imag])


# ----- INCLUSIVE INTEGRAND ----- #
class InclusiveIntegrand:
    """Callable object which evaluates the invariant cross section times the Jacobian at x = [cos(theta), x].

    Parameters
    ----------
    triple_regge : TripleRegge
    s : float
    """

    def __init__(self, triple_regge, s):
        self.triple_regge = triple_regge
        self.kinematics = triple_regge.kinematics
        self.s = s

    def __call__(self, x):
        kin = self.kinematics
        s = self.s
        M2 = kin.M2(s, x[1])
        if M2 >= (np.sqrt(s) - kin.mX) ** 2:
            return 0.0

        t = kin.t_man(s, x[0], M2)
        jacobian = inclusive_jacobian(kin.pgamma_cm(s), kin.pX_cm(s, M2), s, kin.minM2)
        return jacobian * self.triple_regge.invariant_xsection(s, t, M2)


# ----- KERNELS ----- #
@jit(nopython=True, error_model="numpy")
def rotated_cosine(theta, theta_g, phi_g):
    """Cosine of the angle between two directions given in spherical coordinates
    relative to the beam. Clipped to [-1, 1] against rounding."""
    result = np.cos(theta) * np.cos(theta_g)
    result += np.sin(theta) * np.sin(theta_g) * np.cos(phi_g)
    return min(1.0, max(-1.0, result))


@jit(nopython=True, error_model="numpy")
def two_body_phase_space(p, s):
    """Two-body phase space p / (32 pi^2 sqrt(s)) including the 1/2 of the discontinuity."""
    return p / (32.0 * np.pi**2 * np.sqrt(s))


@jit(nopython=True, error_model="numpy")
def inclusive_jacobian(p_gamma, p_X, s, minM2):
    # dt / dcos(theta) * |dM2 / dx|
    return 2.0 * p_gamma * p_X * (s - minM2)
