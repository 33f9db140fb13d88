"""Affine-invariant ensemble MCMC for (Gμ, P) inference.

Implements the Goodman & Weare (2010) stretch move over a population of
walkers in the two-dimensional space (Gμ, logP). Walkers are updated one
at a time: a proposal for walker w is built from the current position of
a randomly chosen complementary walker j, and an accepted move replaces
walker w immediately, so later walkers in the same sweep see it.

    z ~ g(z) ∝ 1/√z on [1/a, a],  drawn as z = ((a-1)u + 1)² / a
    Y = X_j + z (X_w - X_j)
    accept with probability min(1, z^(n-1) p(Y)/p(X_w)),  n = 2
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union
import logging
import math
import warnings
import numpy as np
from numpy.typing import NDArray
import emcee

from ..cosmology import CosmologyCache
from ..observables.datasets import LISADataset, PTADataset
from ..observables.likelihoods import PosteriorTarget
from ..utils.config import SamplerConfig
from ..utils.numerics import safe_divide

logger = logging.getLogger(__name__)

# Fiducial start point; walkers are scattered around it
FIDUCIAL_GMU = 1e-11
FIDUCIAL_LOG_P = -2.0

RandomSource = Union[int, np.random.Generator, None]


@dataclass(frozen=True)
class ProgressEvent:
    """Progress report emitted between sweeps."""

    step: int  # 0-based sweep index
    total_steps: int
    acceptance_rate: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "step": self.step,
            "totalSteps": self.total_steps,
            "acceptanceRate": self.acceptance_rate,
        }


@dataclass
class MCMCResult:
    """Posterior samples retained after burn-in, with diagnostics."""

    samples: NDArray[np.floating]  # Shape: (n_samples, 2) as (Gmu, logP)
    log_probs: NDArray[np.floating]  # Shape: (n_samples,)
    acceptance_rate: float
    n_walkers: int
    n_steps: int
    burn_in: float
    steps_completed: int
    cancelled: bool = False

    @property
    def burn_in_steps(self) -> int:
        return int(math.floor(self.n_steps * self.burn_in))

    @property
    def Gmu(self) -> NDArray[np.floating]:
        return self.samples[:, 0]

    @property
    def logP(self) -> NDArray[np.floating]:
        return self.samples[:, 1]

    @property
    def log_gmu(self) -> NDArray[np.floating]:
        return np.log10(self.samples[:, 0])

    def chain(self) -> NDArray[np.floating]:
        """Samples in (log10 Gμ, logP) reshaped to (n_sweeps, n_walkers, 2)."""
        log_space = np.column_stack([self.log_gmu, self.logP])
        n_sweeps = len(self.samples) // self.n_walkers
        return log_space[: n_sweeps * self.n_walkers].reshape(n_sweeps, self.n_walkers, 2)

    def autocorr_time(self, quiet: bool = False) -> Optional[NDArray[np.floating]]:
        """Integrated autocorrelation time per parameter, in sweeps.

        Returns None when the retained chain is too short for a reliable
        estimate (unless ``quiet``, in which case the estimate is returned
        anyway).
        """
        chain = self.chain()
        if chain.shape[0] < 2:
            return None
        try:
            return emcee.autocorr.integrated_time(chain, quiet=quiet)
        except emcee.autocorr.AutocorrError as e:
            logger.debug(f"Autocorrelation estimate unreliable: {e}")
            return None

    def summary(self) -> Dict[str, Dict[str, float]]:
        """Mean, spread and quantiles of log10 Gμ and logP."""
        summary = {}
        for name, values in (("log10_Gmu", self.log_gmu), ("logP", self.logP)):
            summary[name] = {
                "mean": float(np.mean(values)),
                "std": float(np.std(values)),
                "median": float(np.median(values)),
                "q16": float(np.percentile(values, 16)),
                "q84": float(np.percentile(values, 84)),
            }
        return summary

    def to_dict(self) -> Dict:
        """Plain-data form using the exported key names."""
        return {
            "samples": [
                {"Gmu": float(g), "logP": float(p)} for g, p in self.samples
            ],
            "logProbs": [float(lp) for lp in self.log_probs],
            "acceptanceRate": float(self.acceptance_rate),
            "nWalkers": self.n_walkers,
            "nSteps": self.n_steps,
            "burnIn": self.burn_in,
            "cancelled": self.cancelled,
        }


def _log_uniform(rng: np.random.Generator) -> float:
    u = rng.random()
    return math.log(u) if u > 0 else -math.inf


def _log_accept_ratio(z: float, proposed: float, current: float) -> float:
    """log(z) + Δ log p, with Δ := 0 when both endpoints are -inf."""
    if proposed == -np.inf and current == -np.inf:
        delta = 0.0
    else:
        delta = proposed - current
    return math.log(z) + delta


class EnsembleSampler:
    """Stretch-move ensemble sampler over (Gμ, logP).

    Args:
        log_prob_fn: Callable (Gmu, logP) -> log-posterior
        n_walkers: Ensemble size (>= 2)
        stretch_scale: Stretch parameter a
        rng: Seed or numpy Generator; same seed gives identical output
    """

    ndim = 2

    def __init__(
        self,
        log_prob_fn: Callable[[float, float], float],
        n_walkers: int = 32,
        stretch_scale: float = 2.0,
        rng: RandomSource = None,
    ):
        if n_walkers < 2:
            raise ValueError(
                f"n_walkers = {n_walkers}; the stretch move needs at least 2 walkers"
            )
        if not stretch_scale > 1:
            raise ValueError(f"stretch_scale = {stretch_scale} must be > 1")

        self.log_prob_fn = log_prob_fn
        self.n_walkers = n_walkers
        self.a = stretch_scale
        self.rng = np.random.default_rng(rng)

        self._accepted = 0
        self._proposed = 0

    @property
    def acceptance_rate(self) -> float:
        """Accepted / proposed moves over the whole run so far."""
        return safe_divide(self._accepted, self._proposed)

    def initial_walkers(
        self,
    ) -> Tuple[NDArray[np.floating], NDArray[np.floating], NDArray[np.floating]]:
        """Scatter walkers around the fiducial point and evaluate them.

        Returns:
            Tuple of (Gmu, logP, log_prob) arrays
        """
        Gmu = np.empty(self.n_walkers)
        logP = np.empty(self.n_walkers)
        for w in range(self.n_walkers):
            Gmu[w] = FIDUCIAL_GMU * math.exp(0.3 * (self.rng.random() - 0.5))
            logP[w] = FIDUCIAL_LOG_P + 0.5 * (self.rng.random() - 0.5)

        log_prob = np.array([self.log_prob_fn(g, p) for g, p in zip(Gmu, logP)])

        if not np.any(np.isfinite(log_prob)):
            warnings.warn(
                "Every initial walker has zero posterior probability; "
                "moves will be accepted on the stretch factor alone"
            )
        return Gmu, logP, log_prob

    def _stretch_factor(self) -> float:
        return ((self.a - 1.0) * self.rng.random() + 1.0) ** 2 / self.a

    def _complement(self, w: int) -> int:
        j = int(self.rng.integers(self.n_walkers - 1))
        return j + 1 if j >= w else j

    def run(
        self,
        n_steps: int,
        burn_in: float = 0.5,
        progress: Optional[Callable[[ProgressEvent], None]] = None,
        progress_every: int = 50,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> MCMCResult:
        """Run ``n_steps`` sweeps of sequential stretch moves.

        Args:
            n_steps: Number of sweeps over the ensemble
            burn_in: Fraction of sweeps discarded, in [0, 1)
            progress: Called every ``progress_every`` sweeps and on the last
            progress_every: Progress cadence in sweeps
            should_stop: Checked after each sweep; returning True ends the
                run early with ``cancelled=True``

        Returns:
            MCMCResult with one sample per walker per post-burn-in sweep
        """
        if n_steps < 1:
            raise ValueError(f"n_steps = {n_steps} must be >= 1")
        if not 0.0 <= burn_in < 1.0:
            raise ValueError(f"burn_in = {burn_in} must lie in [0, 1)")
        if progress_every < 1:
            raise ValueError(f"progress_every = {progress_every} must be >= 1")

        n_walkers = self.n_walkers
        burn_start = int(math.floor(n_steps * burn_in))
        n_keep = n_walkers * (n_steps - burn_start)
        samples = np.empty((n_keep, 2))
        log_probs = np.empty(n_keep)
        n_filled = 0

        self._accepted = 0
        self._proposed = 0

        logger.info(
            f"Running ensemble MCMC with {n_walkers} walkers for {n_steps} sweeps "
            f"(burn-in {burn_start})"
        )
        Gmu, logP, lp = self.initial_walkers()

        cancelled = False
        steps_completed = 0
        for step in range(n_steps):
            for w in range(n_walkers):
                j = self._complement(w)
                z = self._stretch_factor()

                Gmu_new = Gmu[j] + z * (Gmu[w] - Gmu[j])
                logP_new = logP[j] + z * (logP[w] - logP[j])
                lp_new = self.log_prob_fn(Gmu_new, logP_new)

                if _log_uniform(self.rng) < _log_accept_ratio(z, lp_new, lp[w]):
                    Gmu[w] = Gmu_new
                    logP[w] = logP_new
                    lp[w] = lp_new
                    self._accepted += 1
                self._proposed += 1

                if step >= burn_start:
                    samples[n_filled] = (Gmu[w], logP[w])
                    log_probs[n_filled] = lp[w]
                    n_filled += 1

            steps_completed = step + 1

            if progress is not None and (step % progress_every == 0 or step == n_steps - 1):
                progress(ProgressEvent(step, n_steps, self.acceptance_rate))

            if should_stop is not None and step < n_steps - 1 and should_stop():
                cancelled = True
                logger.info(f"MCMC cancelled after {steps_completed} sweeps")
                break

        logger.info(f"MCMC finished: acceptance rate {self.acceptance_rate:.2%}")

        return MCMCResult(
            samples=samples[:n_filled],
            log_probs=log_probs[:n_filled],
            acceptance_rate=self.acceptance_rate,
            n_walkers=n_walkers,
            n_steps=n_steps,
            burn_in=burn_in,
            steps_completed=steps_completed,
            cancelled=cancelled,
        )


def run_ensemble_mcmc(
    pta: Union[PTADataset, dict],
    config: Optional[SamplerConfig] = None,
    progress: Optional[Callable[[ProgressEvent], None]] = None,
    rng: RandomSource = None,
    lisa: Union[LISADataset, dict, None] = None,
    should_stop: Optional[Callable[[], bool]] = None,
    cache: Optional[CosmologyCache] = None,
) -> MCMCResult:
    """Sample the (Gμ, logP) posterior given PTA limits.

    Args:
        pta: PTA upper limits
        config: Sampler settings (defaults when None)
        progress: Progress callback
        rng: Seed or numpy Generator
        lisa: Optional LISA forecast, used when ``config.use_lisa``
        should_stop: Cancellation check run once per sweep
        cache: Cosmology table cache for this run

    Returns:
        MCMCResult
    """
    config = config or SamplerConfig()
    valid, errors = config.validate()
    if not valid:
        raise ValueError(f"Invalid sampler configuration: {errors}")

    target = PosteriorTarget(
        pta,
        physics=config.physics,
        lisa=lisa,
        use_lisa=config.use_lisa,
        cache=cache,
    )
    sampler = EnsembleSampler(
        target,
        n_walkers=config.n_walkers,
        stretch_scale=config.stretch_scale,
        rng=rng,
    )
    return sampler.run(
        config.n_steps,
        burn_in=config.burn_in,
        progress=progress,
        progress_every=config.progress_every,
        should_stop=should_stop,
    )
