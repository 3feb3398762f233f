"""Amplitudes for t-channel meson exchanges.

Each amplitude is the contraction top vertex x propagator x bottom vertex,
where the top vertex couples the beam to X and the bottom vertex the target
to the recoil. In the fixed-spin case the propagator is a Feynman
propagator, in the Reggeized case a Regge propagator with residues
written analytically in the t-channel frame.

Helicities in the analytic expressions are not rotated to the s-channel,
so they only reproduce observables summed over all helicities.
"""

import logging

import numpy as np

from amplitude import Amplitude
from constants import DEFAULT_VALUES, E, M_PROTON
from errors import InvalidSpinParity
from gamma_technology import GAMMA, GAMMA_5, LEVI_CIVITA, METRIC, SIGMA, lorentz_dot
from misc_math import cgamma, wigner_d_int_cos, wigner_leading_coeff

logger = logging.getLogger(__name__)


def _nucleon_current(kin, lam_targ, lam_rec, s, theta):
    """ubar(recoil) gamma^mu u(target) for every mu, target along -z."""
    ubar = kin.recoil.adjoint_component(lam_rec, s, theta + np.pi)
    u = kin.target.component(lam_targ, s, np.pi)
    return np.einsum("i,mij,j->m", ubar, GAMMA, u)


class VectorExchange(Amplitude):
    """Exchange of a vector meson (omega, rho, phi, J/psi) in the t-channel.

    Parameters
    ----------
    kinematics : ReactionKinematics
    exchange : float or ReggeTrajectory
        Mass of the exchanged meson, or its trajectory for the Reggeized
        amplitude. Only J^P = 1+ can be Reggeized.
    identifier : str
    params : sequence of float
        Couplings (gGamma, gV, gT): photon coupling, vector and tensor
        nucleon couplings.
    use_covariant : bool
        Evaluate 1+ production with Feynman rules instead of the analytic
        residues.
    """

    n_params = 3
    allowed_jp = [(1, 1), (1, -1), (0, 1), (0, -1)]

    def __init__(self, kinematics, exchange, identifier="vector_exchange",
                 params=(0.0, 0.0, 0.0), use_covariant=False):
        if isinstance(exchange, (int, float)):
            self.reggeized = False
            self.mEx2 = float(exchange) ** 2
            self.trajectory = None
        else:
            self.reggeized = True
            self.mEx2 = 0.0
            self.trajectory = exchange
            if tuple(kinematics.jp) != (1, 1):
                raise InvalidSpinParity("Reggeized vector exchange only implemented for J^P = 1+")

        self.use_covariant = use_covariant
        self.form_factor_type = 0
        self.cutoff = 0.0
        super().__init__(kinematics, params, identifier)

    def set_params(self, params):
        super().set_params(params)
        self.gGam, self.gV, self.gT = self.params

    def set_formfactor(self, form_factor_type, cutoff=0.0):
        """0 for none, 1 for exp((t - t_min) / cutoff^2), 2 for a monopole."""
        self.form_factor_type = form_factor_type
        self.cutoff = cutoff
        self._cache_key = None

    def form_factor(self, s, t):
        if self.form_factor_type == 1:
            return np.exp((t - self.kinematics.t_man(s, 0.0)) / self.cutoff**2)
        if self.form_factor_type == 2:
            return (self.cutoff**2 - self.mEx2) / (self.cutoff**2 - t)
        return 1.0

    def helicity_amplitude(self, helicities, s, t):
        lam_gam, lam_targ, lam_vec, lam_rec = helicities
        kin = self.kinematics
        theta = kin.theta_s(s, t)

        if self.use_covariant or tuple(kin.jp) != (1, 1):
            result = self.covariant_amplitude(helicities, s, theta)
        else:
            z_t = np.real(kin.z_t(s, theta))
            lam = lam_gam - lam_vec
            lamp = (lam_targ - lam_rec) // 2
            # double helicity flip at the top vertex is forbidden
            if abs(lam) == 2:
                return 0.0j

            result = self.top_residue(lam_gam, lam_vec, t)
            result *= self.bottom_residue(lam_targ, lam_rec, t)
            if not self.reggeized:
                result *= wigner_d_int_cos(1, lam, lamp, z_t)
                result /= t - self.mEx2
            else:
                result *= self.regge_propagator(1, lam, lamp, s, t, z_t)

        return complex(result * self.form_factor(s, t))

    # ----- ANALYTIC RESIDUES ----- #
    def _q_t(self, t):
        return (t - self.kinematics.mX2) / np.sqrt(complex(4.0 * t))

    def top_residue(self, lam_gam, lam_vec, t):
        lam = lam_gam - lam_vec
        if abs(lam) == 0:
            result = 1.0
        else:
            result = np.sqrt(complex(t)) / self.kinematics.mX
        return 1j * lam_gam * result * self._q_t(t) * self.gGam

    def bottom_residue(self, lam_targ, lam_rec, t):
        lamp = (lam_targ - lam_rec) // 2
        root_t = np.sqrt(complex(t))
        if lamp == 0:
            vector, tensor = 1.0, root_t / (2.0 * M_PROTON)
        else:
            vector, tensor = np.sqrt(2.0) * root_t / (2.0 * M_PROTON), np.sqrt(2.0)

        result = self.gV * vector + self.gT * tensor * root_t / (2.0 * M_PROTON)
        return 2.0 * M_PROTON * result

    def half_angle_factor(self, lam, lamp, z_t):
        sinhalf = np.sqrt(complex((1.0 - z_t) / 2.0))
        coshalf = np.sqrt(complex((1.0 + z_t) / 2.0))
        return sinhalf ** abs(lam - lamp) * coshalf ** abs(lam + lamp)

    def barrier_factor(self, j, M, t):
        p = np.sqrt(complex(t - 4.0 * M_PROTON**2)) / 2.0
        return (2.0 * p * self._q_t(t)) ** (j - M)

    def regge_propagator(self, j, lam, lamp, s, t, z_t):
        M = max(abs(lam), abs(lamp))
        if M > j:
            return 0.0

        alpha_t = self.trajectory.eval(t)
        if abs(alpha_t) > DEFAULT_VALUES["regge_cutoff"]:
            logger.debug("Regge propagator cut off, |alpha(%s)| = %s", t, abs(alpha_t))
            return 0.0

        result = wigner_leading_coeff(j, lam, lamp)
        result /= self.barrier_factor(j, M, t)
        result *= self.half_angle_factor(lam, lamp, z_t)
        result *= -self.trajectory.slope()
        result *= self.trajectory.signature_factor(t)
        result *= cgamma(1.0 - alpha_t)
        result *= s ** (alpha_t - M)
        return result

    # ----- FEYNMAN RULES ----- #
    def exchange_momentum(self, s, theta):
        return self.kinematics.t_exchange_momentum(s, theta)

    def propagator_tensor(self, s, theta):
        """(q^mu q^nu / m^2 - g^{mu nu}) / (t - m^2) for the exchanged momentum q."""
        q = self.exchange_momentum(s, theta)
        t = self.kinematics.t_man(s, theta)
        return (np.outer(q, q) / self.mEx2 - np.diag(METRIC)) / (t - self.mEx2)

    def top_vertex(self, lam_gam, lam_vec, s, theta):
        """Photon - X - exchange vertex as a vector with an upper index."""
        kin = self.kinematics
        q_gam = kin.initial_state.q(s, 0.0)
        eps_gam = kin.eps_gamma.component(lam_gam, s, 0.0)
        eps_vec = kin.eps_vec.component(lam_vec, s, theta)
        J, P = kin.jp

        if (J, P) == (1, 1):
            # A-V-V
            result = METRIC * np.einsum("mabc,a,b,c->m", LEVI_CIVITA, q_gam, eps_gam, eps_vec)
        elif (J, P) == (1, -1):
            # V-V-V
            F = kin.eps_gamma.field_tensor(lam_gam, s, 0.0)
            result = 1j * F @ (METRIC * eps_vec)
        elif (J, P) == (0, 1):
            # S-V-V
            k = self.exchange_momentum(s, theta)
            result = lorentz_dot(k, q_gam) * eps_gam - lorentz_dot(eps_gam, k) * q_gam
            result /= kin.mX
        else:
            # P-V-V
            k = self.exchange_momentum(s, theta)
            F = kin.eps_gamma.field_tensor(lam_gam, s, 0.0)
            result = np.einsum("mabc,ab,c->m", LEVI_CIVITA, F, kin.final_state.q(s, theta) - k)

        return self.gGam * result

    def bottom_vertex(self, lam_targ, lam_rec, s, theta):
        kin = self.kinematics
        vector = _nucleon_current(kin, lam_targ, lam_rec, s, theta)

        tensor = np.zeros(4, dtype=complex)
        if abs(self.gT) > 0.001:
            ubar = kin.recoil.adjoint_component(lam_rec, s, theta + np.pi)
            u = kin.target.component(lam_targ, s, np.pi)
            k = self.exchange_momentum(s, theta)
            sigma_q = np.einsum("mnij,n->mij", SIGMA, METRIC * k) / (2.0 * M_PROTON)
            tensor = np.einsum("i,mij,j->m", ubar, sigma_q, u)

        return self.gV * vector - self.gT * tensor

    def covariant_amplitude(self, helicities, s, theta):
        lam_gam, lam_targ, lam_vec, lam_rec = helicities
        if self.reggeized:
            raise InvalidSpinParity("no Feynman propagator for a Reggeized exchange")

        top = self.top_vertex(lam_gam, lam_vec, s, theta)
        bottom = self.bottom_vertex(lam_targ, lam_rec, s, theta)
        return (METRIC * top) @ self.propagator_tensor(s, theta) @ (METRIC * bottom)


class PseudoscalarExchange(Amplitude):
    """Exchange of a pseudoscalar meson (pion) in the t-channel.

    Parameters
    ----------
    kinematics : ReactionKinematics
    exchange : float or ReggeTrajectory
        Mass of the exchanged meson, or its trajectory.
    identifier : str
    params : sequence of float
        Couplings (gGamma, gNN).
    """

    n_params = 2
    allowed_jp = [(1, 1), (1, -1)]

    def __init__(self, kinematics, exchange, identifier="pseudoscalar_exchange", params=(0.0, 0.0)):
        if isinstance(exchange, (int, float)):
            self.reggeized = False
            self.mEx2 = float(exchange) ** 2
            self.trajectory = None
        else:
            self.reggeized = True
            self.mEx2 = 0.0
            self.trajectory = exchange
            if tuple(kinematics.jp) != (1, 1):
                raise InvalidSpinParity("Reggeized pseudoscalar exchange only implemented for J^P = 1+")

        self.use_form_factor = False
        self.b = 0.0
        super().__init__(kinematics, params, identifier)

    def set_params(self, params):
        super().set_params(params)
        self.gGamma, self.gNN = self.params

    def set_formfactor(self, use_form_factor, b=0.0):
        """Exponential form factor exp(b (t - t_min))."""
        self.use_form_factor = use_form_factor
        self.b = b
        self._cache_key = None

    def helicity_amplitude(self, helicities, s, t):
        lam_gam, lam_targ, lam_vec, lam_rec = helicities
        kin = self.kinematics
        theta = kin.theta_s(s, t)

        if tuple(kin.jp) != (1, 1):
            result = self.top_vertex(lam_gam, lam_vec, s, theta)
            result *= self.scalar_propagator(s, t)
            result *= self.bottom_vertex(lam_targ, lam_rec, s, theta)
        else:
            if lam_vec != lam_gam or lam_targ != lam_rec:
                return 0.0j
            result = np.sqrt(2.0) * self.gNN
            result *= self.gGamma / kin.mX
            result *= np.sqrt(complex(t)) / 2.0
            result *= kin.mX2 - t
            result *= self.scalar_propagator(s, t)

        if self.use_form_factor:
            result *= np.exp(self.b * (t - kin.t_man(s, 0.0)))

        return complex(result)

    def bottom_vertex(self, lam_targ, lam_rec, s, theta):
        kin = self.kinematics
        ubar = kin.recoil.adjoint_component(lam_rec, s, theta + np.pi)
        u = kin.target.component(lam_targ, s, np.pi)
        # sqrt(2) from isospin for a charged pion
        return np.sqrt(2.0) * self.gNN * (ubar @ GAMMA_5 @ u)

    def top_vertex(self, lam_gam, lam_vec, s, theta):
        kin = self.kinematics
        eps_vec = kin.eps_vec.conjugate_component(lam_vec, s, theta)
        q_vec = kin.final_state.q(s, theta)

        # V-V-P, 1+ is handled by the analytic residues
        F = kin.eps_gamma.field_tensor(lam_gam, s, 0.0)
        k = kin.t_exchange_momentum(s, theta)
        result = np.einsum("mabc,m,ab,c->", LEVI_CIVITA, eps_vec, F, q_vec - k)

        return self.gGamma * result

    def scalar_propagator(self, s, t):
        if not self.reggeized:
            return 1.0 / (t - self.mEx2)

        alpha_t = self.trajectory.eval(t)
        if abs(alpha_t) > DEFAULT_VALUES["pseudoscalar_regge_cutoff"]:
            logger.debug("Regge propagator cut off, |alpha(%s)| = %s", t, abs(alpha_t))
            return 0.0

        result = -self.trajectory.slope()
        result *= self.trajectory.signature_factor(t)
        result *= cgamma(-alpha_t)
        result *= s**alpha_t
        return result


class PomeronExchange(Amplitude):
    """Vector meson photoproduction through Pomeron exchange.

    Parameters
    ----------
    kinematics : ReactionKinematics
        X must be a vector meson, J^P = 1-.
    trajectory : ReggeTrajectory
    model : int
        0: helicity non-conserving vector Pomeron (Lesniak, Szczepaniak),
        1: helicity conserving, 2: Wang et al. with nucleon and vector form factors.
    identifier : str
    params : sequence of float
        (norm, b0). For model 2 the second coupling is the cutoff of the
        vector meson form factor.
    """

    n_params = 2
    allowed_jp = [(1, -1)]

    # scale of the nucleon form factor in model 2, GeV^2
    mu_0_2 = 0.7

    def __init__(self, kinematics, trajectory, model=0, identifier="pomeron_exchange", params=(0.0, 0.0)):
        self.trajectory = trajectory
        self.model = int(model)
        if self.model not in (0, 1, 2):
            raise ValueError(f"unknown Pomeron model {model}")
        super().__init__(kinematics, params, identifier)

    def set_params(self, params):
        super().set_params(params)
        self.norm, self.b0 = self.params

    def helicity_amplitude(self, helicities, s, t):
        lam_gam, lam_targ, lam_vec, lam_rec = helicities
        kin = self.kinematics

        if self.model == 1:
            if lam_gam != lam_vec or lam_targ != lam_rec:
                return 0.0j
            return complex(self.regge_factor(s, t))

        theta = kin.theta_s(s, t)
        top = self.top_vertex(lam_gam, lam_vec, s, theta)
        bottom = _nucleon_current(kin, lam_targ, lam_rec, s, theta)
        return complex(self.regge_factor(s, t) * np.sum(top * METRIC * bottom))

    def top_vertex(self, lam_gam, lam_vec, s, theta):
        kin = self.kinematics
        q_gam = kin.initial_state.q(s, 0.0)
        eps_gam = kin.eps_gamma.component(lam_gam, s, 0.0)
        eps_vec = kin.eps_vec.conjugate_component(lam_vec, s, theta)
        return -eps_gam * lorentz_dot(q_gam, eps_vec) + q_gam * lorentz_dot(eps_gam, eps_vec)

    def regge_factor(self, s, t):
        kin = self.kinematics
        if s - kin.sth < 1e-3:
            if s < kin.sth:
                logger.debug("pomeron_exchange evaluated below threshold, sqrt(s) = %s", np.sqrt(s))
            return 0.0

        alpha_t = self.trajectory.eval(t)
        t_min = kin.t_man(s, 0.0)

        if self.model == 0:
            result = np.exp(self.b0 * (t - t_min)) / s
            result *= (s - kin.sth) ** alpha_t
            return 1j * self.norm * E * result

        if self.model == 1:
            result = np.exp(self.b0 * (t - t_min))
            result *= s**alpha_t
            return 1j * self.norm * E * result

        # Form factors of the nucleon and the vector meson, b0 is the cutoff
        mp2 = M_PROTON**2
        F_N = (4.0 * mp2 - 2.8 * t) / ((4.0 * mp2 - t) * (1.0 - t / self.mu_0_2) ** 2)
        F_V = 2.0 * self.b0**2 / (2.0 * self.b0**2 + kin.mX2 - t)
        result = F_N * F_V
        result *= (self.trajectory.slope() * s) ** (alpha_t - 1.0)
        result *= np.exp(-1j * np.pi * alpha_t / 2.0)
        return 1j * E * self.norm * result
