"""Small math kernels used throughout the amplitude code.

Wigner little-d functions follow the Wikipedia sign convention. Functions
for half-integer spin take twice the spin and twice the helicities as
integer arguments, e.g. wigner_d_half(3, 1, -1, theta) = d^{3/2}_{1/2,-1/2}.
"""

import numpy as np
from math import factorial
from numba import jit
from scipy.special import gamma


@jit(nopython=True, error_model="numpy")
def kallen(x, y, z):
    """Källén triangle function."""
    return x * x + y * y + z * z - 2.0 * (x * y + x * z + y * z)


def cgamma(z):
    """Gamma function of a complex argument."""
    return complex(gamma(complex(z)))


def wigner_leading_coeff(j, lam1, lam2):
    """Coefficient of the leading power of cos(theta) in d^j_{lam1, lam2}."""
    M = max(abs(lam1), abs(lam2))
    N = min(abs(lam1), abs(lam2))

    lam = abs(lam1 - lam2) + lam1 - lam2

    result = float(factorial(2 * j))
    result /= np.sqrt(factorial(j - M))
    result /= np.sqrt(factorial(j + M))
    result /= np.sqrt(factorial(j - N))
    result /= np.sqrt(factorial(j + N))
    result /= 2.0 ** (j - M)
    result *= (-1.0) ** (lam // 2)

    return result


@jit(nopython=True, error_model="numpy")
def _half_spin_phase(lam1, lam2):
    return -1.0 if ((lam1 - lam2) // 2) % 2 else 1.0


@jit(nopython=True, error_model="numpy")
def _int_spin_phase(lam1, lam2):
    return -1.0 if (lam1 - lam2) % 2 else 1.0


@jit(nopython=True, error_model="numpy")
def wigner_d_half(j, lam1, lam2, theta):
    """Wigner d^{j/2}_{lam1/2, lam2/2}(theta) for spin 1/2, 3/2 and 5/2."""
    phase = 1.0

    # use the symmetries to bring lam1 >= |lam2|
    if abs(lam1) < abs(lam2):
        lam1, lam2 = lam2, lam1
        phase *= _half_spin_phase(lam1, lam2)
    if lam1 < 0:
        lam1, lam2 = -lam1, -lam2
        phase *= _half_spin_phase(lam1, lam2)

    c = np.cos(theta)
    ch = np.cos(theta / 2.0)
    sh = np.sin(theta / 2.0)

    result = 0.0
    if j == 1:
        if lam1 == 1 and lam2 == 1:
            result = ch
        elif lam1 == 1 and lam2 == -1:
            result = -sh
    elif j == 3:
        if lam1 == 3 and lam2 == 3:
            result = ch * (1.0 + c) / 2.0
        elif lam1 == 3 and lam2 == 1:
            result = -np.sqrt(3.0) / 2.0 * sh * (1.0 + c)
        elif lam1 == 3 and lam2 == -1:
            result = np.sqrt(3.0) / 2.0 * ch * (1.0 - c)
        elif lam1 == 3 and lam2 == -3:
            result = -sh * (1.0 - c) / 2.0
        elif lam1 == 1 and lam2 == 1:
            result = (3.0 * c - 1.0) * ch / 2.0
        elif lam1 == 1 and lam2 == -1:
            result = -(3.0 * c + 1.0) * sh / 2.0
    elif j == 5:
        if lam1 == 3 and lam2 == 3:
            result = -ch * (1.0 + c) * (3.0 - 5.0 * c) / 4.0
        elif lam1 == 3 and lam2 == 1:
            result = np.sqrt(2.0) / 4.0 * sh * (1.0 + c) * (1.0 - 5.0 * c)
        elif lam1 == 3 and lam2 == -1:
            result = np.sqrt(2.0) / 4.0 * ch * (1.0 - c) * (1.0 + 5.0 * c)
        elif lam1 == 3 and lam2 == -3:
            result = -sh * (1.0 - c) * (3.0 + 5.0 * c) / 4.0
        elif lam1 == 1 and lam2 == 1:
            result = -ch * (1.0 + 2.0 * c - 5.0 * c * c) / 2.0
        elif lam1 == 1 and lam2 == -1:
            result = sh * (1.0 - 2.0 * c - 5.0 * c * c) / 2.0

    return phase * result


@jit(nopython=True, error_model="numpy")
def wigner_d_int(j, lam1, lam2, theta):
    """Wigner d^j_{lam1, lam2}(theta) for integer spin j = 1."""
    phase = 1.0

    if abs(lam1) < abs(lam2):
        lam1, lam2 = lam2, lam1
        phase *= _int_spin_phase(lam1, lam2)
    if lam1 < 0:
        lam1, lam2 = -lam1, -lam2
        phase *= _int_spin_phase(lam1, lam2)

    result = 0.0
    if j == 1:
        if lam1 == 1 and lam2 == 1:
            result = (1.0 + np.cos(theta)) / 2.0
        elif lam1 == 1 and lam2 == 0:
            result = -np.sin(theta) / np.sqrt(2.0)
        elif lam1 == 1 and lam2 == -1:
            result = (1.0 - np.cos(theta)) / 2.0
        elif lam1 == 0 and lam2 == 0:
            result = np.cos(theta)

    return phase * result


@jit(nopython=True, error_model="numpy")
def wigner_d_int_cos(j, lam1, lam2, z):
    """Same as wigner_d_int but in terms of a (possibly complex) cosine z.

    The sine is taken as the principal branch of sqrt(1 - z^2), which loses
    the sign of sin(theta) outside [0, pi].
    """
    z = complex(z)
    sine = np.sqrt(1.0 - z * z)

    phase = 1.0
    if abs(lam1) < abs(lam2):
        lam1, lam2 = lam2, lam1
        phase *= _int_spin_phase(lam1, lam2)
    if lam1 < 0:
        lam1, lam2 = -lam1, -lam2
        phase *= _int_spin_phase(lam1, lam2)

    result = 0.0j
    if j == 1:
        if lam1 == 1 and lam2 == 1:
            result = (1.0 + z) / 2.0
        elif lam1 == 1 and lam2 == 0:
            result = -sine / np.sqrt(2.0)
        elif lam1 == 1 and lam2 == -1:
            result = (1.0 - z) / 2.0
        elif lam1 == 0 and lam2 == 0:
            result = z

    return phase * result
