"""MCMC sampling modules for (Gμ, P) inference."""

from .priors import Prior, UniformPrior, PriorSet, default_string_priors, log_prior
from .mcmc import EnsembleSampler, MCMCResult, ProgressEvent, run_ensemble_mcmc

__all__ = [
    "Prior",
    "UniformPrior",
    "PriorSet",
    "default_string_priors",
    "log_prior",
    "EnsembleSampler",
    "MCMCResult",
    "ProgressEvent",
    "run_ensemble_mcmc",
]
