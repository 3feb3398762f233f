import numpy as np

from errors import UnknownParticleLabel

# Masses in GeV
M_PROTON = 0.938272
M_NEUTRON = 0.939565
M_PION = 0.13957
M_KAON = 0.493677
M_ETA = 0.547862
M_RHO = 0.77526
M_OMEGA = 0.78265
M_PHI = 1.019461
M_D = 1.86965
M_DSTAR = 2.01026
M_LAMBDAC = 2.28646
M_JPSI = 3.0969
M_PSI2S = 3.686097
M_CHIC1 = 3.51067
M_X3872 = 3.87169
M_Y4260 = 4.2225
M_ZC3900 = 3.8884
M_UPSILON = 9.4603
M_ZB10610 = 10.6072
M_ZB10650 = 10.6522

M2_PROTON = M_PROTON**2
M2_PION = M_PION**2

# Couplings
ALPHA = 1.0 / 137.0
E = np.sqrt(4.0 * np.pi * ALPHA)
LAMBDA_QCD = 0.25

# J/psi decay constant and the mass it is quoted at
F_JPSI = 0.278

# Conversion factor from GeV^-2 to nb
GEV2_TO_NB = 2.56819e-6 ** -1

# Default numerical settings
DEFAULT_VALUES = dict(
    quad_epsrel=1e-6,
    quad_limit=200,
    neval=2000,  # vegas evaluations per iteration
    nitn=10,  # vegas iterations
    alpha=0.3,  # vegas grid damping while adapting
    regge_cutoff=30.0,  # |alpha(t)| above which Regge propagators vanish
    pseudoscalar_regge_cutoff=20.0,
    box_cutoff=30.0,  # upper end of dispersion integrals in GeV^2
    threshold_eps=1e-6,
)


# Particles
def get_mass(label):
    """
    Parameters
    ----------
    label : str
        name of a particle, e.g. "proton", "omega", "chi_c1", "jpsi".
        Lookup ignores case and the characters " ", "-", "(", ")".
    """
    masses = {
        "proton": M_PROTON,
        "p": M_PROTON,
        "neutron": M_NEUTRON,
        "pion": M_PION,
        "pi": M_PION,
        "kaon": M_KAON,
        "eta": M_ETA,
        "rho": M_RHO,
        "omega": M_OMEGA,
        "phi": M_PHI,
        "d": M_D,
        "dstar": M_DSTAR,
        "d*": M_DSTAR,
        "lambdac": M_LAMBDAC,
        "lambda_c": M_LAMBDAC,
        "jpsi": M_JPSI,
        "j/psi": M_JPSI,
        "psi2s": M_PSI2S,
        "chi_c1": M_CHIC1,
        "chic1": M_CHIC1,
        "x3872": M_X3872,
        "y4260": M_Y4260,
        "zc3900": M_ZC3900,
        "upsilon": M_UPSILON,
        "zb10610": M_ZB10610,
        "zb10650": M_ZB10650,
    }
    key = label.lower()
    for char in " -()":
        key = key.replace(char, "")
    try:
        return masses[key]
    except KeyError:
        raise UnknownParticleLabel(f"no mass registered for particle '{label}'") from None


class Parameters:
    """Bookkeeping for a grid scan: output filename and file header.

    The filename will be of the form
      "{identifier}/{observable}-vs-{dep}-var1=val1-var2=val2.dat"
    where var1, var2, ... are the fixed values of the scan, i.e. everything
    except the dependent variable dep.

    Floats are formatted using f"{float_value:.3e}", and ints as f"{int_value}".

    Parameters
    ----------
    observable : str
        Name of the scanned observable, e.g. "dxs", "integrated_xs", "K_LL".
    dep : str
        Name of the dependent variable, e.g. "s", "t" or "theta".
    identifier : str
        Identifier of the amplitude being scanned.
    params : dict
        Fixed values of the scan. Must contain "mX".
    """

    def __init__(self, observable: str, dep: str, identifier: str, params: dict):
        assert "mX" in params.keys()
        assert dep not in params.keys()

        self.observable = observable
        self.dep = dep
        self.identifier = identifier
        self.params = params

    @property
    def filename(self):
        fn = f"{self.identifier.replace(' ', '_')}/{self.observable}-vs-{self.dep}"

        for key, val in self.params.items():
            if isinstance(val, int):
                fn += f"-{key}={val}"
            else:
                fn += f"-{key}={val:.3e}"
        fn += ".dat"

        return fn

    @property
    def header(self):
        res = f"amplitude = {self.identifier}"
        for key, val in self.params.items():
            res += f"\n{key} = {val}"
        res += f"\nColumns:{self.dep},{self.observable}"
        return res
