"""Amplitudes for u-channel baryon exchanges.

The top vertex couples the beam to the recoil and the bottom vertex couples
X to the target, so the exchanged baryon carries momentum squared u.
Vertices are row (top) and column (bottom) Dirac spinors contracted with a
4x4 propagator matrix.
"""

import numpy as np

from amplitude import Amplitude
from gamma_technology import GAMMA, GAMMA_5, METRIC, slash


class DiracExchange(Amplitude):
    """Exchange of a spin-1/2 baryon in the u-channel.

    Parameters
    ----------
    kinematics : ReactionKinematics
        J^P of X must be 1- (vector) or 0- (pseudoscalar).
    mass : float
        Mass of the exchanged baryon.
    identifier : str
    params : sequence of float
        Couplings (gGamma, gVec) of the photon and of X to the baryons.
    """

    n_params = 2
    allowed_jp = [(1, -1), (0, -1)]

    def __init__(self, kinematics, mass, identifier="dirac_exchange", params=(0.0, 0.0)):
        self.mEx = mass
        self.mEx2 = mass * mass
        self.form_factor_type = 0
        self.cutoff = 0.0
        super().__init__(kinematics, params, identifier)

    def set_params(self, params):
        super().set_params(params)
        self.gGam, self.gVec = self.params

    def set_formfactor(self, form_factor_type, cutoff=0.0):
        """0 for none, 1 for exp((u - u_max) / cutoff^2), 2 for a monopole."""
        self.form_factor_type = form_factor_type
        self.cutoff = cutoff
        self._cache_key = None

    def form_factor(self, s, u):
        if self.form_factor_type == 1:
            return np.exp((u - self.kinematics.u_man(s, 0.0)) / self.cutoff**2)
        if self.form_factor_type == 2:
            return (self.cutoff**2 - self.mEx2) / (self.cutoff**2 - u)
        return 1.0

    def helicity_amplitude(self, helicities, s, t):
        lam_gam, lam_targ, lam_vec, lam_rec = helicities
        kin = self.kinematics
        theta = kin.theta_s(s, t)
        u = kin.u_man(s, theta)

        top = self.top_vertex(lam_gam, lam_rec, s, theta)
        bottom = self.bottom_vertex(lam_vec, lam_targ, s, theta)
        result = top @ self.propagator(s, theta) @ bottom
        return complex(result * self.form_factor(s, u))

    # ----- VERTICES ----- #
    def top_vertex(self, lam_gam, lam_rec, s, theta):
        """ubar(recoil) eps_gamma-slashed."""
        kin = self.kinematics
        ubar = kin.recoil.adjoint_component(lam_rec, s, theta + np.pi)
        eps_slash = slash(kin.eps_gamma.component(lam_gam, s, 0.0))
        return self.gGam * (ubar @ eps_slash)

    def bottom_vertex(self, lam_vec, lam_targ, s, theta):
        """eps*_X-slashed u(target) for a vector, i gamma_5 u(target) for a pseudoscalar."""
        kin = self.kinematics
        u = kin.target.component(lam_targ, s, np.pi)

        if kin.jp == (1, -1):
            eps_slash = slash(kin.eps_vec.conjugate_component(lam_vec, s, theta + np.pi))
            return self.gVec * (eps_slash @ u)
        return self.gVec * (1j * GAMMA_5 @ u)

    # ----- PROPAGATOR ----- #
    def exchange_momentum(self, s, theta):
        return self.kinematics.u_exchange_momentum(s, theta)

    def exchange_mass2(self, s, theta):
        q = self.exchange_momentum(s, theta)
        return np.real(np.sum(METRIC * q * q))

    def dirac_propagator(self, s, theta):
        """(q-slashed + m) / (q^2 - m^2)."""
        q = self.exchange_momentum(s, theta)
        numerator = slash(q) + self.mEx * np.eye(4)
        return numerator / (self.exchange_mass2(s, theta) - self.mEx2)

    def propagator(self, s, theta):
        return self.dirac_propagator(s, theta)


class RaritaExchange(DiracExchange):
    """Exchange of a spin-3/2 baryon in the u-channel.

    Same vertices as DiracExchange with the Rarita-Schwinger propagator,
    whose Lorentz indices are contracted with the relative momenta entering
    and leaving it.
    """

    allowed_jp = [(1, -1), (0, -1)]

    def g_bar(self, s, theta):
        """-g^{mu nu} + q^mu q^nu / m^2."""
        q = self.exchange_momentum(s, theta)
        return np.outer(q, q) / self.mEx2 - np.diag(METRIC)

    def relative_momentum(self, which, s, theta):
        kin = self.kinematics
        if which == "in":
            return kin.initial_state.q(s, 0.0) - kin.initial_state.p(s, np.pi)
        if which == "out":
            return kin.final_state.q(s, theta) - kin.final_state.p(s, theta + np.pi)
        raise ValueError(f"relative momentum is 'in' or 'out', not '{which}'")

    def propagator(self, s, theta):
        g_bar = self.g_bar(s, theta)
        k_in = METRIC * self.relative_momentum("in", s, theta)
        k_out = METRIC * self.relative_momentum("out", s, theta)
        gamma_lower = METRIC[:, None, None] * GAMMA

        # k_in . g_bar . k_out
        scalar = k_in @ g_bar @ k_out
        # (k_in g_bar gamma) (gamma g_bar k_out)
        left = np.einsum("m,mn,nij->ij", k_in, g_bar, gamma_lower)
        right = np.einsum("mij,mn,n->ij", gamma_lower, g_bar, k_out)

        spin_sum = -scalar * np.eye(4) + left @ right / 3.0
        return self.dirac_propagator(s, theta) @ spin_sum
