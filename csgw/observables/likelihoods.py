"""Likelihoods for PTA upper limits and LISA forecasts.

PTA non-detections enter as a one-sided Gaussian: a model below the limit
is unpenalised, a model above it pays -½((Ω - Ω_UL)/σ)². A LISA forecast
enters as an ordinary two-sided Gaussian on the residual.
"""

from typing import Optional, Union
import numpy as np

from ..cosmology import CosmologyCache
from ..spectrum import SpectrumModel
from ..sampling.priors import log_prior
from ..utils.config import PhysicsOptions
from .datasets import LISADataset, PTADataset, as_lisa_dataset, as_pta_dataset


def upper_limit_log_likelihood(model: float, upper_limit: float, sigma: float) -> float:
    """One-sided Gaussian penalty for exceeding an upper limit.

    Args:
        model: Predicted Ω_gw
        upper_limit: Ω_gw upper limit
        sigma: Penalty width

    Returns:
        -inf for sigma <= 0, 0 when model <= upper_limit,
        otherwise -½((model - upper_limit)/sigma)²
    """
    if not sigma > 0:
        return -np.inf
    if model > upper_limit:
        delta = (model - upper_limit) / sigma
        return -0.5 * delta * delta
    return 0.0


def gaussian_log_likelihood(model: float, observed: float, sigma: float) -> float:
    """Two-sided Gaussian residual term -½((model - observed)/sigma)²."""
    r = (model - observed) / sigma
    return -0.5 * r * r


def _model(physics, cache) -> SpectrumModel:
    if isinstance(physics, SpectrumModel):
        return physics
    return SpectrumModel(physics, cache)


def log_likelihood_pta(
    Gmu: float,
    logP: float,
    dataset: Union[PTADataset, dict],
    physics: Union[PhysicsOptions, dict, SpectrumModel, None] = None,
    cache: Optional[CosmologyCache] = None,
) -> float:
    """Sum of upper-limit terms over every PTA frequency bin."""
    dataset = as_pta_dataset(dataset)
    model = _model(physics, cache)
    P = 10.0**logP

    logL = 0.0
    for f, limit, err in zip(dataset.frequencies, dataset.upper_limits, dataset.errors):
        logL += upper_limit_log_likelihood(model.omega_gw(f, Gmu, P), limit, err)
    return logL


def log_likelihood_lisa(
    Gmu: float,
    logP: float,
    dataset: Union[LISADataset, dict, None],
    physics: Union[PhysicsOptions, dict, SpectrumModel, None] = None,
    cache: Optional[CosmologyCache] = None,
) -> float:
    """Gaussian likelihood against a LISA forecast.

    Bins with sigma <= 0 are skipped; an absent or empty dataset gives 0.
    """
    dataset = as_lisa_dataset(dataset)
    if dataset is None or len(dataset) == 0:
        return 0.0

    model = _model(physics, cache)
    P = 10.0**logP

    logL = 0.0
    for f, omega, s in zip(dataset.frequencies, dataset.omega_forecast, dataset.sigma):
        if not s > 0:
            continue
        logL += gaussian_log_likelihood(model.omega_gw(f, Gmu, P), omega, s)
    return logL


def log_posterior(
    Gmu: float,
    logP: float,
    pta: Union[PTADataset, dict],
    physics: Union[PhysicsOptions, dict, SpectrumModel, None] = None,
    lisa: Union[LISADataset, dict, None] = None,
    use_lisa: bool = False,
    cache: Optional[CosmologyCache] = None,
) -> float:
    """Log-posterior: prior + PTA likelihood (+ LISA likelihood).

    Returns -inf as soon as a component is non-finite, so points outside the
    prior box never reach the spectrum model.
    """
    lp = log_prior(Gmu, logP)
    if not np.isfinite(lp):
        return -np.inf

    model = _model(physics, cache)

    ll_pta = log_likelihood_pta(Gmu, logP, pta, model)
    if not np.isfinite(ll_pta):
        return -np.inf

    ll_lisa = log_likelihood_lisa(Gmu, logP, lisa, model) if use_lisa else 0.0
    if not np.isfinite(ll_lisa):
        return -np.inf

    return lp + ll_pta + ll_lisa


class PosteriorTarget:
    """Log-posterior of (Gμ, logP) bound to datasets and physics options.

    Args:
        pta: PTA upper limits
        physics: Physics options
        lisa: Optional LISA forecast
        use_lisa: Include the LISA term
        cache: Cosmology table cache
    """

    def __init__(
        self,
        pta: Union[PTADataset, dict],
        physics: Union[PhysicsOptions, dict, None] = None,
        lisa: Union[LISADataset, dict, None] = None,
        use_lisa: bool = False,
        cache: Optional[CosmologyCache] = None,
    ):
        self.pta = as_pta_dataset(pta)
        self.lisa = as_lisa_dataset(lisa)
        self.use_lisa = use_lisa
        self.model = SpectrumModel(physics, cache)

    @property
    def physics(self) -> PhysicsOptions:
        return self.model.options

    def __call__(self, Gmu: float, logP: float) -> float:
        return log_posterior(
            Gmu,
            logP,
            self.pta,
            self.model,
            lisa=self.lisa,
            use_lisa=self.use_lisa,
        )
