"""Regge trajectories alpha(t) relating the spin of exchanged particles to their mass."""

import logging
from abc import ABC, abstractmethod

import numpy as np

logger = logging.getLogger(__name__)


class ReggeTrajectory(ABC):
    """Base class for a Regge trajectory.

    Any trajectory deriving from this class can be used by the Regge
    amplitudes, which only need `eval`, `slope` and `signature`.
    """

    def __init__(self, signature, name=""):
        if signature not in (-1, 1):
            raise ValueError(f"signature must be +1 or -1, got {signature}")
        self.signature = signature
        self.name = name

    @abstractmethod
    def eval(self, t):
        """Value of alpha(t)."""

    @abstractmethod
    def slope(self, t=0.0):
        """Derivative alpha'(t)."""

    def signature_factor(self, t):
        """(signature + exp(-i pi alpha(t))) / 2."""
        return 0.5 * (self.signature + np.exp(-1j * np.pi * self.eval(t)))

    def __call__(self, t):
        return self.eval(t)


class LinearTrajectory(ReggeTrajectory):
    """alpha(t) = intercept + slope * t.

    Parameters
    ----------
    signature : int
        +1 or -1.
    intercept : float
    slope : float
        In GeV^-2.
    name : str
        Label used in printouts.
    """

    def __init__(self, signature, intercept, slope, name=""):
        super().__init__(signature, name)
        self.intercept = intercept
        self.alpha_prime = slope

    @classmethod
    def from_resonance(cls, signature, j_min, m_min, slope, name=""):
        """Trajectory passing through the lowest resonance of spin j_min and mass m_min."""
        return cls(signature, j_min - slope * m_min**2, slope, name)

    def set_params(self, intercept, slope):
        self.intercept = intercept
        self.alpha_prime = slope

    def eval(self, t):
        return complex(self.intercept + self.alpha_prime * t)

    def slope(self, t=0.0):
        return self.alpha_prime

    def consistent_with(self, j, m, tol=1e-3):
        """Whether a particle of spin j and mass m lies on the trajectory."""
        ok = abs(self.eval(m**2) - j) < tol
        if not ok:
            logger.debug(
                "trajectory %s gives alpha(%.3f) = %.3f, not %s",
                self.name, m**2, np.real(self.eval(m**2)), j,
            )
        return ok

    def __repr__(self):
        return (
            f"LinearTrajectory(signature={self.signature}, "
            f"intercept={self.intercept}, slope={self.alpha_prime}, name='{self.name}')"
        )
