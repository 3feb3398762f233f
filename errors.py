"""Exceptions raised for invalid configuration of kinematics and amplitudes.

Domain edges (below threshold, Regge poles too far from the physical
region) are not errors: they evaluate to 0.
"""


class PhotoproductionError(Exception):
    """Base class for every configuration error raised by this project."""


class InvalidSpinParity(PhotoproductionError, ValueError):
    """Spin-parity combination not available for a kinematics or amplitude."""


class CouplingCountMismatch(PhotoproductionError, ValueError):
    """Wrong number of couplings passed to an amplitude."""


class UnknownParticleLabel(PhotoproductionError, KeyError):
    """Particle label that has no mass or crossing angle associated to it."""


class InvalidHelicity(PhotoproductionError, ValueError):
    """Helicity projection outside the range allowed for a particle."""


class UnsupportedOperation(PhotoproductionError, NotImplementedError):
    """Operation not provided by a given amplitude variant."""
