"""Production of X off the Coulomb field of a heavy nucleus by a virtual photon.

The nucleus is described by a Fermi charge distribution whose Fourier
transform gives the electric form factor. Only the spin-summed squared
amplitude is available, separately for longitudinal and transverse beam
photons.
"""

import logging

import numpy as np
from scipy.integrate import quad
from scipy.special import expit

from amplitude import Amplitude
from constants import DEFAULT_VALUES, E, GEV2_TO_NB
from errors import UnsupportedOperation

logger = logging.getLogger(__name__)


class PrimakoffEffect(Amplitude):
    """
    Parameters
    ----------
    kinematics : ReactionKinematics
        Target and recoil masses are the mass of the nucleus, and the beam
        virtuality is set with `kinematics.set_Q2`.
    identifier : str
    params : sequence of float
        (Z, R, a, g): atomic number, radius and skin thickness of the charge
        distribution in GeV^-1, and the X -> gamma gamma* coupling.
    """

    n_params = 4
    allowed_jp = [(1, 1)]
    has_helicity_amplitudes = False

    def __init__(self, kinematics, identifier="primakoff_effect", params=(0, 1.0, 1.0, 0.0)):
        self.LT = 0
        super().__init__(kinematics, params, identifier)

    def set_params(self, params):
        super().set_params(params)
        self.Z, self.R, self.a, self.g = self.params
        self.rho0 = self._normalization()

    def set_LT(self, LT):
        """0 for longitudinal, 1 for transverse photons."""
        if LT not in (0, 1):
            raise ValueError("LT = 0 for longitudinal and 1 for transverse photons")
        self.LT = LT

    def helicity_amplitude(self, helicities, s, t):
        raise UnsupportedOperation(
            f"individual helicity amplitudes not available for '{self.identifier}'"
        )

    # ----- NUCLEUS ----- #
    def charge_distribution(self, r):
        return expit((self.R - r) / self.a)

    def _normalization(self):
        if self.a <= 0:
            return 0.0
        integral, _ = quad(
            lambda r: r * r * self.charge_distribution(r),
            0.0,
            np.inf,
            limit=DEFAULT_VALUES["quad_limit"],
        )
        return 1.0 / integral

    def form_factor(self, t):
        """Fourier transform of the charge distribution at momentum transfer t."""
        mA2 = self.kinematics.mT2
        q = np.sqrt(t * (t - 4.0 * mA2)) / (2.0 * np.sqrt(mA2))
        if q < 1e-8:
            return 1.0

        integral, _ = quad(
            lambda r: r * self.charge_distribution(r),
            0.0,
            np.inf,
            weight="sin",
            wvar=q,
            limit=DEFAULT_VALUES["quad_limit"],
        )
        return self.rho0 * integral / q

    def W_00(self, t):
        mA2 = self.kinematics.mT2
        F = self.form_factor(t)
        return 64.0 * self.Z**2 * mA2**3 * F**2 / (t - 4.0 * mA2) ** 2

    # ----- LAB FRAME ----- #
    def photon_energy(self, s):
        """Energy nu of the virtual photon in the rest frame of the nucleus."""
        kin = self.kinematics
        Q2 = -np.real(kin.mB2)
        return (s - kin.mT2 + Q2) / (2.0 * kin.mT)

    def lab_angle(self, s, t):
        """Cosine of the angle between X and the photon in the rest frame of the nucleus."""
        kin = self.kinematics
        Q2 = -np.real(kin.mB2)
        mA = kin.mT
        nu = self.photon_energy(s)

        p_gam = np.sqrt(nu * nu + Q2)
        p_X = np.sqrt(t * t + 4.0 * mA * t * nu + 4.0 * mA**2 * (nu * nu - kin.mX2)) / (2.0 * mA)
        E_X = np.sqrt(p_X * p_X + kin.mX2)
        return (t + Q2 - kin.mX2 + 2.0 * nu * E_X) / (2.0 * p_X * p_gam)

    # ----- OBSERVABLES ----- #
    def top_tensor_00(self, s, t):
        """Photon vertex contracted with the nucleus current for the chosen projection."""
        kin = self.kinematics
        mX2 = kin.mX2
        Q2 = -np.real(kin.mB2)

        if self.LT == 0:
            nu = self.photon_energy(s)
            return -t * Q2 / mX2**2 * (1.0 - Q2 / mX2) * nu**2

        result = (mX2 - Q2) * (mX2 + Q2) ** 2
        result -= 2.0 * t * (mX2 + Q2) ** 2
        result += t * t * (mX2 - Q2)
        return result * Q2 / (4.0 * mX2**3)

    def amplitude_squared(self, s, t):
        result = self.g**2 * self.top_tensor_00(s, t) * self.W_00(t)
        # photon propagator
        return E**2 / t**2 * result

    def differential_xsection(self, s, t):
        norm = 1.0 / (64.0 * np.pi * s)
        norm /= np.real(self.kinematics.initial_state.momentum(s) ** 2)
        norm *= GEV2_TO_NB
        return norm * self.amplitude_squared(s, t)
