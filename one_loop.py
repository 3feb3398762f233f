"""One-loop box amplitudes reconstructed from their s-channel discontinuity.

The discontinuity is the phase-space integral of two tree amplitudes sharing
an intermediate two-body state, evaluated with vegas (see integrand.py). The
full amplitude follows from an unsubtracted dispersion relation, cut off at
a finite s.
"""

import logging

import numpy as np
import vegas
from scipy.integrate import quad

from amplitude import Amplitude
from constants import (
    DEFAULT_VALUES,
    LAMBDA_QCD,
    M_D,
    M_DSTAR,
    M_JPSI,
    M_LAMBDAC,
    M_PROTON,
)
from integrand import DiscontinuityIntegrand
from kinematics import ReactionKinematics
from t_channel import VectorExchange

logger = logging.getLogger(__name__)


class BoxDiscontinuity:
    """Discontinuity of the box  gamma p -> (m b) -> X p  across the s-channel cut.

    Parameters
    ----------
    left : Amplitude
        Tree amplitude for  gamma p -> m b.
    right : Amplitude
        Tree amplitude for  X p -> m b. Must share J^P and masses of the
        intermediate state with `left`, otherwise the discontinuity is 0.
    neval, nitn : int
        vegas evaluations per iteration and number of iterations.
    seed : int
        Seed of the random numbers fed to vegas, None for a fresh one.
    """

    def __init__(self, left, right, neval=DEFAULT_VALUES["neval"], nitn=DEFAULT_VALUES["nitn"], seed=None):
        self.left = left
        self.right = right
        self.neval = neval
        self.nitn = nitn
        self.rng = np.random.default_rng(seed)
        self.match_error = not self._intermediate_states_match()

    def _intermediate_states_match(self):
        kin_l, kin_r = self.left.kinematics, self.right.kinematics

        if tuple(kin_l.jp) != tuple(kin_r.jp):
            logger.warning(
                "intermediate states of '%s' %s and '%s' %s do not match, box discontinuity is 0",
                self.left.identifier,
                kin_l.jp,
                self.right.identifier,
                kin_r.jp,
            )
            return False

        if abs(kin_l.mX - kin_r.mX) > 1e-4 or abs(kin_l.mR - kin_r.mR) > 1e-4:
            logger.warning(
                "intermediate masses of '%s' and '%s' do not match, box discontinuity is 0",
                self.left.identifier,
                self.right.identifier,
            )
            return False

        return True

    def eval(self, helicities, s, theta):
        """Discontinuity at intermediate energy s for external helicities and CM angle theta."""
        if self.match_error or s <= self.left.kinematics.sth:
            return 0.0j

        f = DiscontinuityIntegrand(self.left, self.right, helicities, s, theta)
        integ = vegas.Integrator(
            [[0.0, np.pi], [0.0, 2.0 * np.pi]], ran_array_generator=self.rng.random
        )

        # step 1 -- adapt to f; discard results
        integ(f, nitn=self.nitn, neval=self.neval, alpha=DEFAULT_VALUES["alpha"])

        # step 2 -- integ has adapted to f; keep results
        result = integ(f, nitn=self.nitn, neval=self.neval, alpha=False)
        logger.debug("Disc(%s) = %s", s, result)
        return complex(result[0].mean, result[1].mean)


class BoxAmplitude(Amplitude):
    """Box amplitude from the dispersion integral of a BoxDiscontinuity.

        A(s) = 1/pi PV ∫_{s_thr}^{s_cut} Disc(s') / (s' - s) ds' + i Disc(s)

    where the second term only contributes for s inside the integration range.

    Parameters
    ----------
    kinematics : ReactionKinematics
        External kinematics, X must be a vector.
    left, right : Amplitude
        See BoxDiscontinuity.
    identifier : str
    cutoff : float
        Upper limit s_cut of the dispersion integral in GeV^2.
    params : sequence of float
        Couplings of subclasses, none for a plain box.
    """

    allowed_jp = [(1, -1)]

    def __init__(
        self, kinematics, left, right, identifier="box_amplitude", cutoff=DEFAULT_VALUES["box_cutoff"], params=()
    ):
        self.discontinuity = BoxDiscontinuity(left, right)
        self.s_thr = left.kinematics.sth
        self.s_cut = cutoff
        super().__init__(kinematics, params, identifier)

    def set_cutoff(self, s_cut):
        if s_cut <= self.s_thr:
            logger.warning(
                "cutoff %s below the intermediate threshold %s, box amplitude is 0", s_cut, self.s_thr
            )
        self.s_cut = s_cut
        self._cache_key = None

    def helicity_amplitude(self, helicities, s, t):
        theta = self.kinematics.theta_s(s, t)
        return self.dispersion(lambda sp: self.discontinuity.eval(helicities, sp, theta), s)

    def dispersion(self, disc, s):
        """Unsubtracted dispersion integral of the complex function disc over [s_thr, s_cut]."""
        a = self.s_thr + DEFAULT_VALUES["threshold_eps"]
        b = self.s_cut
        if b <= a:
            return 0.0j

        # each Disc(s') is an integral of its own, evaluate once for both parts
        memo = {}

        def f(sp):
            if sp not in memo:
                memo[sp] = complex(disc(sp))
            return memo[sp]

        options = dict(epsrel=DEFAULT_VALUES["quad_epsrel"], limit=DEFAULT_VALUES["quad_limit"])
        if a < s < b:
            re, _ = quad(lambda sp: f(sp).real, a, b, weight="cauchy", wvar=s, **options)
            im, _ = quad(lambda sp: f(sp).imag, a, b, weight="cauchy", wvar=s, **options)
            return (re + 1j * im) / np.pi + 1j * f(s)

        re, _ = quad(lambda sp: f(sp).real / (sp - s), a, b, **options)
        im, _ = quad(lambda sp: f(sp).imag / (sp - s), a, b, **options)
        return (re + 1j * im) / np.pi


class CharmLoop(BoxAmplitude):
    """Open-charm box  gamma p -> D Lambda_c -> J/psi p  with D* exchanges on both sides.

    Parameters
    ----------
    kinematics : ReactionKinematics
        External kinematics, X must be a vector.
    identifier : str
    params : sequence of float
        (eta, q_max): form factor cutoff M_D* + eta Lambda_QCD of the D*
        exchanges, and the maximal intermediate CM momentum fixing s_cut.
    """

    n_params = 2

    # photon and J/psi couplings to D D*, and the D* N Lambda_c coupling
    g_gamma_DDstar = 0.134
    g_psi_DDstar = 7.44 / np.sqrt(M_D * M_DSTAR)
    g_Dstar_NLambda = -13.2

    def __init__(self, kinematics, identifier="charm_loop", params=(1.0, 1.0)):
        self.kgamD = ReactionKinematics(M_D, M_LAMBDAC, M_PROTON, jp=(0, -1))
        self.kpsiD = ReactionKinematics(M_D, M_LAMBDAC, M_PROTON, mB=M_JPSI, jp=(0, -1))

        left = VectorExchange(
            self.kgamD,
            M_DSTAR,
            "gamma p -> D Lambda_c",
            params=(self.g_gamma_DDstar, self.g_Dstar_NLambda, 0.0),
        )
        right = VectorExchange(
            self.kpsiD,
            M_DSTAR,
            "J/psi p -> D Lambda_c",
            params=(self.g_psi_DDstar, self.g_Dstar_NLambda, 0.0),
        )
        super().__init__(kinematics, left, right, identifier, params=params)

    def set_params(self, params):
        super().set_params(params)
        self.eta, self.q_max = self.params
        cutoff = M_DSTAR + self.eta * LAMBDA_QCD
        self.discontinuity.left.set_formfactor(2, cutoff)
        self.discontinuity.right.set_formfactor(2, cutoff)

        E_lambda = np.sqrt(self.q_max**2 + M_LAMBDAC**2)
        E_D = np.sqrt(self.q_max**2 + M_D**2)
        self.set_cutoff((E_lambda + E_D) ** 2)
