"""Observational datasets and likelihoods."""

from .datasets import (
    PTADataset,
    LISADataset,
    load_pta,
    load_pta_json,
    load_pta_csv,
    load_lisa_json,
    generate_mock_pta_limits,
)
from .likelihoods import (
    upper_limit_log_likelihood,
    gaussian_log_likelihood,
    log_likelihood_pta,
    log_likelihood_lisa,
    log_posterior,
    PosteriorTarget,
)

__all__ = [
    # Datasets
    "PTADataset",
    "LISADataset",
    "load_pta",
    "load_pta_json",
    "load_pta_csv",
    "load_lisa_json",
    "generate_mock_pta_limits",
    # Likelihoods
    "upper_limit_log_likelihood",
    "gaussian_log_likelihood",
    "log_likelihood_pta",
    "log_likelihood_lisa",
    "log_posterior",
    "PosteriorTarget",
]
