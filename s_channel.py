"""Resonant amplitudes in the s-channel, e.g. hidden-charm pentaquarks in gamma p -> J/psi p."""

import numpy as np

from amplitude import Amplitude
from constants import F_JPSI, M_JPSI
from errors import InvalidSpinParity
from misc_math import wigner_d_half


# (lowest orbital angular momentum, fraction of transversely polarized X)
# keyed by parity * 2J of the resonance
_DECAY_WAVES = {
    1: (0, 2.0 / 3.0),
    -1: (1, 3.0 / 5.0),
    3: (1, 3.0 / 5.0),
    -3: (0, 2.0 / 3.0),
    5: (1, 3.0 / 5.0),
    -5: (2, 1.0 / 3.0),
}


class BaryonResonance(Amplitude):
    """Breit-Wigner resonance with photo-couplings fixed by vector meson dominance.

    Parameters
    ----------
    kinematics : ReactionKinematics
    j : int
        Twice the spin of the resonance, 1, 3 or 5.
    parity : int
    mass, width : float
        Breit-Wigner parameters in GeV.
    identifier : str
    params : sequence of float
        (branching ratio into X + recoil, photocoupling ratio
        A_1/2 / sqrt(A_1/2^2 + A_3/2^2)).
    """

    n_params = 2
    allowed_jp = [(1, -1)]

    def __init__(self, kinematics, j, parity, mass, width, identifier="baryon_resonance", params=(0.0, 0.0)):
        if parity not in (-1, 1) or parity * j not in _DECAY_WAVES:
            raise InvalidSpinParity(
                f"baryon resonance with spin {j}/2 and parity {parity} not available"
            )

        self.j, self.parity = j, parity
        self.naturality = parity * (-1) ** ((j - 1) // 2)
        self.lmin, self.pt = _DECAY_WAVES[parity * j]
        self.mass, self.width = mass, width

        # moduli, finite also for a mass below threshold
        self.pibar = abs(kinematics.initial_state.momentum(mass**2))
        self.pfbar = abs(kinematics.final_state.momentum(mass**2))
        super().__init__(kinematics, params, identifier)

    def set_params(self, params):
        super().set_params(params)
        self.xBR, self.photo_ratio = self.params

    def helicity_amplitude(self, helicities, s, t):
        lam_gam, lam_targ, lam_vec, lam_rec = helicities
        kin = self.kinematics
        if s < kin.sth:
            return 0.0j

        theta = kin.theta_s(s, t)
        lam_i = 2 * lam_gam - lam_targ
        lam_f = 2 * lam_vec - lam_rec

        residue = self.photo_coupling(lam_i, s)
        residue *= self.hadronic_coupling(lam_gam, lam_f)
        residue *= wigner_d_half(self.j, lam_i, lam_f, theta)
        residue *= self.threshold_factor(s, 1.5)

        return complex(residue / (s - self.mass**2 + 1j * self.mass * self.width))

    def threshold_factor(self, s, beta):
        """Suppression of the resonance near threshold, 1 at the resonance mass."""
        sth = self.kinematics.sth
        m2 = self.mass**2
        return ((s - sth) / s) ** beta / ((m2 - sth) / m2) ** beta

    def photo_coupling(self, lam_i, s):
        """Helicity amplitude for gamma p -> R, proportional to A_1/2 or A_3/2.

        Complex valued so it can be continued to s < 0.
        """
        if abs(lam_i) == 1:
            a = self.photo_ratio
        else:
            a = np.sqrt(1.0 - self.photo_ratio**2)

        # electromagnetic width from vector meson dominance, without its pibar^(2 lmin + 1)
        em_width = self.xBR * self.width * (F_JPSI / M_JPSI) ** 2
        em_width *= self.pt / self.pfbar ** (2 * self.lmin + 1)

        mT = self.kinematics.mT
        A_lam = em_width * np.pi * self.mass * (self.j + 1) / (2.0 * mT)
        A_lam = np.sqrt(A_lam) * a

        # pibar * A_lam, with A_lam ~ pibar^(lmin - 1/2)
        result = np.sqrt(complex(s)) * self.pibar ** (self.lmin + 0.5) / self.mass
        result *= np.sqrt(8.0 * mT * self.mass / self.kinematics.initial_state.momentum(s))
        return result * A_lam

    def hadronic_coupling(self, lam_gam, lam_f):
        """Coupling of the resonance to X + recoil, fixed by the branching ratio."""
        g = 8.0 * np.pi * self.xBR * self.width
        g *= (self.j + 1) / 6.0
        g *= self.mass**2 / self.pfbar
        g = np.sqrt(g)

        # extra phases for unnatural parity
        if self.naturality == -1:
            if lam_gam < 0:
                g = -g
            if lam_f < 0:
                g = -g

        return g
