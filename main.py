"""MAIN ROUTINE
Evaluates observables of photoproduction amplitudes on a grid and writes
the results to disk.
"""

import logging, sys
import time
from functools import partial
from multiprocessing import Pool
from pathlib import Path

import numpy as np

from amplitude import AmplitudeSum
from constants import DEFAULT_VALUES, M_CHIC1, Parameters
from kinematics import ReactionKinematics
from t_channel import VectorExchange

logging.basicConfig(stream=sys.stderr, level=logging.WARNING)
logger = logging.getLogger(__name__)


def quick_print(filename, x, *columns):
    """Write x and the columns f(x) as whitespace-aligned text.

    Complex columns are expanded to their real part, imaginary part and
    modulus.
    """
    data = [np.asarray(x, dtype=float)]
    for col in columns:
        col = np.asarray(col)
        if np.iscomplexobj(col):
            data += [np.real(col), np.imag(col), np.abs(col)]
        else:
            data.append(col.astype(float))

    np.savetxt(filename, np.column_stack(data), fmt="%-20.10e")
    print(f"file written at {filename}")


def _safe_eval(function, x):
    try:
        return function(x)
    except (ArithmeticError, ValueError) as e:
        logger.warning("evaluation failed at %s: %s", x, e)
        return np.nan


def scan(function, xs, nproc=1):
    """Evaluate function at every point of xs.

    Points where the evaluation fails are logged and recorded as NaN, the
    scan carries on. With nproc > 1 the points are spread over a process
    pool, so `function` must be picklable.
    """
    f = partial(_safe_eval, function)
    if nproc > 1:
        with Pool(nproc) as pool:
            return np.array(pool.map(f, xs))
    return np.array([f(x) for x in xs])


def save_file(filepath, header, data):
    """Merge the rows of a scan into the CSV file at filepath.

    The file stays sorted in the dependent variable (first column). Points
    already on disk at the same value of the dependent variable are replaced
    by the new ones, so rerunning a scan refreshes it.

    Parameters
    ----------
    filepath : str or Path
    header : str
        Written above the data, see `Parameters.header`.
    data : array_like
        Rows of (dependent variable, observable).
    """
    data = np.atleast_2d(data)

    filepath = Path(filepath)
    if filepath.is_file():
        old = np.loadtxt(filepath, delimiter=",", ndmin=2)
        old = old[~np.isin(old[:, 0], data[:, 0])]
        logger.debug("merging %d new points with %d from %s", len(data), len(old), filepath)
        data = np.vstack([old, data])

    data = data[data[:, 0].argsort()]
    np.savetxt(filepath, data, delimiter=",", header=header)


def calc_observable(function, observable, dep, xs, params, identifier, directory=None, save=False, nproc=1):
    """
    Scan an observable over the dependent variable.

    Parameters
    ----------
    function : callable
        The observable as a function of the dependent variable only, e.g.
        lambda s: amp.differential_xsection(s, t).
    observable : str
        Name of the observable, used in the output filename.
    dep : str
        Name of the dependent variable, e.g. "s".
    xs : array_like
        Values of the dependent variable.
    params : dict
        Fixed values of the scan, must contain "mX". See the `Parameters`
        class in `constants.py`.
    identifier : str
        Identifier of the amplitude, used as the output subdirectory.
    directory : str
        This controls where the results are saved to disk if the `save`
        flag is set to True.
    save : bool
        Whether or not to save the results to disk. If True, a .dat file is
        written at f"{directory}/{identifier}/{observable}-vs-{dep}-....dat".
    """
    parameters = Parameters(observable, dep, identifier, params)
    print(f"{identifier}: {observable} vs {dep}, {len(xs)} points")

    # ------------------- COMPUTE THE SCAN ------------------- #
    t1 = time.perf_counter()
    result = scan(function, xs, nproc=nproc)
    t2 = time.perf_counter()
    print(f"Time elapsed: {t2 - t1:.2f}")
    # --------------------- end of main part --------------------- #

    # -------------------------- DATA IO -------------------------- #
    if save:
        filepath = Path(directory) / parameters.filename
        Path(filepath).parent.mkdir(exist_ok=True, parents=True)

        data = np.column_stack([xs, result])
        save_file(filepath, header=parameters.header, data=data)
        print(f"file updated at {str(filepath)}")

    return result


def main():
    """
    chi_c1(1P) photoproduction from vector meson exchanges.
    Whenever I use this script I manually change the parameters.
    """
    theta = 45.0  # CM scattering angle in degrees
    N = 50
    s_max = 100.0

    kinematics = ReactionKinematics(M_CHIC1, jp=(1, 1))

    exchanges = [
        VectorExchange(kinematics, 0.770, "rho", params=(9.2e-4, 2.4, 14.6)),
        VectorExchange(kinematics, 0.780, "omega", params=(5.2e-4, 16.0, 0.0)),
        VectorExchange(kinematics, 1.10, "phi", params=(4.2e-4, -6.2, 2.1)),
        VectorExchange(kinematics, 3.097, "psi", params=(1.0, 3.3e-3, 0.0)),
    ]
    total = AmplitudeSum(kinematics, exchanges, "sum")

    s_vals = np.linspace(kinematics.sth + DEFAULT_VALUES["threshold_eps"], s_max, N + 1)
    params = {"mX": M_CHIC1, "theta": theta}

    RESULTS_DIRECTORY = f"./results/chi_c1/"

    for amp in [total] + exchanges:
        calc_observable(
            lambda s: amp.differential_xsection(s, kinematics.t_man(s, np.radians(theta))),
            "dxs",
            "s",
            s_vals,
            params,
            amp.identifier,
            directory=RESULTS_DIRECTORY,
            save=True,
        )


if __name__ == "__main__":
    main()
