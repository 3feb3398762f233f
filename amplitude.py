"""Base class for helicity amplitudes and the observables built from them.

Every amplitude is bound to a ReactionKinematics instance and a fixed number
of couplings. Observables loop over the helicity table of the kinematics in
its fixed order and combine the squared helicity amplitudes.
"""

import logging

import numpy as np
from scipy.integrate import quad

from constants import DEFAULT_VALUES, GEV2_TO_NB
from errors import (
    CouplingCountMismatch,
    InvalidHelicity,
    InvalidSpinParity,
    UnsupportedOperation,
)

logger = logging.getLogger(__name__)


class Amplitude:
    """
    Parameters
    ----------
    kinematics : ReactionKinematics
        Shared, not copied. Must not be mutated while the amplitude is
        being evaluated.
    params : sequence of float
        Couplings, exactly `n_params` of them.
    identifier : str
        Label used in printouts and output filenames.
    """

    n_params = 0
    # list of (J, P) tuples the amplitude is defined for, None for any
    allowed_jp = None
    has_helicity_amplitudes = True

    def __init__(self, kinematics, params=(), identifier=""):
        self.kinematics = kinematics
        self.identifier = identifier
        self.check_JP(kinematics.jp)

        self._cache_key = None
        self._cached_amplitudes = None
        self.set_params(params)

    # ----- CONFIGURATION ----- #
    def check_JP(self, jp):
        if self.allowed_jp is not None and tuple(jp) not in self.allowed_jp:
            raise InvalidSpinParity(
                f"amplitude for spin {jp[0]} and parity {jp[1]} "
                f"not available for {type(self).__name__} '{self.identifier}'"
            )

    def check_n_params(self, params):
        if len(params) != self.n_params:
            raise CouplingCountMismatch(
                f"{type(self).__name__} '{self.identifier}' takes {self.n_params} "
                f"couplings, {len(params)} were given"
            )

    def set_params(self, params):
        self.check_n_params(params)
        self.params = list(params)
        self._cache_key = None

    # ----- AMPLITUDES ----- #
    def helicity_amplitude(self, helicities, s, t):
        """Complex helicity amplitude for the quadruple (lam_gam, lam_targ, lam_X, lam_rec)."""
        raise NotImplementedError

    def _state_key(self):
        """Trajectory parameters, which can change without the amplitude knowing."""
        trajectory = getattr(self, "trajectory", None)
        if trajectory is None:
            return ()
        return (trajectory.eval(0.0), trajectory.slope())

    def helicity_amplitudes(self, s, t):
        """All helicity amplitudes at (s, t), in the order of the kinematics table."""
        kin = self.kinematics
        key = (kin.mX2, kin.mB2, kin.mR2, kin.jp, s, t, self._state_key())
        if self._cache_key != key:
            self._cached_amplitudes = np.array(
                [self.helicity_amplitude(hel, s, t) for hel in kin.helicities],
                dtype=complex,
            )
            self._cache_key = key
        return self._cached_amplitudes

    # ----- OBSERVABLES ----- #
    def probability_distribution(self, s, t):
        """Sum of |A|^2 over all helicity combinations."""
        amps = self.helicity_amplitudes(s, t)
        return float(np.sum(np.abs(amps) ** 2))

    def differential_xsection(self, s, t):
        """dsigma/dt in nb/GeV^2, averaged over initial helicities."""
        norm = 1.0 / (64.0 * np.pi * s)
        norm /= np.real(self.kinematics.initial_state.momentum(s) ** 2)
        norm *= GEV2_TO_NB
        norm /= 4.0
        return norm * self.probability_distribution(s, t)

    def integrated_xsection(self, s):
        """Total cross section in nb, 0 below threshold."""
        kin = self.kinematics
        if s < kin.sth:
            logger.debug("integrated_xsection below threshold s = %s", s)
            return 0.0

        t_min = kin.t_man(s, 0.0)
        t_max = kin.t_man(s, np.pi)
        result, _ = quad(
            lambda t: self.differential_xsection(s, t),
            t_max,
            t_min,
            epsrel=DEFAULT_VALUES["quad_epsrel"],
            limit=DEFAULT_VALUES["quad_limit"],
        )
        return result

    def _require_spin_one(self, name):
        if self.kinematics.n_amps != 24:
            raise InvalidSpinParity(f"{name} needs a spin-1 particle X")

    def K_LL(self, s, t):
        """Helicity correlation between beam and recoil."""
        self._require_spin_one("K_LL")
        amps = np.abs(self.helicity_amplitudes(s, t)) ** 2
        # lam_gam = +1 amplitudes alternate recoil -, +
        sigma_pp = np.sum(amps[1:12:2])
        sigma_pm = np.sum(amps[0:12:2])
        return (sigma_pp - sigma_pm) / (sigma_pp + sigma_pm)

    def A_LL(self, s, t):
        """Helicity correlation between beam and target."""
        self._require_spin_one("A_LL")
        amps = np.abs(self.helicity_amplitudes(s, t)) ** 2
        sigma_pp = np.sum(amps[6:12])
        sigma_pm = np.sum(amps[0:6])
        return (sigma_pp - sigma_pm) / (sigma_pp + sigma_pm)

    def SDME(self, alpha, lam, lamp, s, t):
        """Spin density matrix element rho^alpha_{lam, lamp} of X.

        Parameters
        ----------
        alpha : int
            0 for unpolarized, 1 and 2 for the linearly polarized photon beam.
        lam, lamp : int
            Helicities of X, -1, 0 or 1.
        """
        if alpha not in (0, 1, 2) or abs(lam) > 1 or abs(lamp) > 1:
            raise InvalidHelicity(f"invalid SDME index ({alpha}, {lam}, {lamp})")
        self._require_spin_one("SDME")

        conjugate = False
        phase = 1.0

        if abs(lam) < abs(lamp):
            lam, lamp = lamp, lam
            conjugate = True
        if lam < 0:
            lam, lamp = -lam, -lamp
            phase *= (-1.0) ** (lam - lamp)

        amps = self.helicity_amplitudes(s, t)
        norm = np.sum(np.abs(amps) ** 2)
        helicities = self.kinematics.helicities

        # entries with lam_X = +1, and the same with the photon helicity flipped
        pos_iters = [0, 1, 6, 7, 12, 13, 18, 19]
        neg_iters = [12, 13, 18, 19, 0, 1, 6, 7]

        k = 2 if lam == 0 else 0
        j = {-1: 4, 0: 2, 1: 0}[lamp]

        result = 0.0j
        for i in range(8):
            index = pos_iters[i] if alpha == 0 else neg_iters[i]
            amp_i = amps[index + k]
            amp_j = amps[pos_iters[i] + j]
            if alpha == 2:
                amp_j *= 1j * helicities[pos_iters[i] + j][0]
            result += np.real(amp_i * np.conj(amp_j))

        if conjugate:
            result = np.conj(result)

        return phase * result / norm

    def beam_asymmetry_y(self, s, t):
        rho100 = np.real(self.SDME(1, 0, 0, s, t))
        rho111 = np.real(self.SDME(1, 1, 1, s, t))
        rho000 = np.real(self.SDME(0, 0, 0, s, t))
        rho011 = np.real(self.SDME(0, 1, 1, s, t))
        return -(rho100 + 2.0 * rho111) / (rho000 + 2.0 * rho011)

    def beam_asymmetry_4pi(self, s, t):
        rho111 = np.real(self.SDME(1, 1, 1, s, t))
        rho11m1 = np.real(self.SDME(1, 1, -1, s, t))
        rho011 = np.real(self.SDME(0, 1, 1, s, t))
        rho01m1 = np.real(self.SDME(0, 1, -1, s, t))
        return (rho111 + rho11m1) / (rho011 + rho01m1)

    def parity_asymmetry(self, s, t):
        rho100 = np.real(self.SDME(1, 0, 0, s, t))
        rho11m1 = np.real(self.SDME(1, 1, -1, s, t))
        return 2.0 * rho11m1 - rho100

    def __repr__(self):
        return f"{type(self).__name__}('{self.identifier}')"


class AmplitudeSum(Amplitude):
    """Coherent sum of amplitudes sharing the same kinematics.

    Parameters
    ----------
    kinematics : ReactionKinematics
    amplitudes : list of Amplitude
        Every component must be bound to `kinematics` itself.
    identifier : str
    """

    def __init__(self, kinematics, amplitudes=(), identifier=""):
        self.amplitudes = []
        super().__init__(kinematics, (), identifier)
        for amp in amplitudes:
            self.add(amp)

    def add(self, amp):
        if isinstance(amp, AmplitudeSum):
            for sub in amp.amplitudes:
                self.add(sub)
            return

        if not amp.has_helicity_amplitudes:
            raise UnsupportedOperation(
                f"'{amp.identifier}' has no helicity amplitudes and cannot be summed"
            )
        if amp.kinematics is not self.kinematics:
            raise ValueError(
                f"'{amp.identifier}' is bound to a different kinematics than '{self.identifier}'"
            )
        self.amplitudes.append(amp)

    def helicity_amplitude(self, helicities, s, t):
        return sum(
            (amp.helicity_amplitude(helicities, s, t) for amp in self.amplitudes),
            0.0j,
        )

    def helicity_amplitudes(self, s, t):
        # no cache of its own, the components may have changed since the last call
        return sum(
            (amp.helicity_amplitudes(s, t) for amp in self.amplitudes),
            np.zeros(self.kinematics.n_amps, dtype=complex),
        )
