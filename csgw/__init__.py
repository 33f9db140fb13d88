"""Cosmic-superstring gravitational-wave background inference.

Constrains the string tension Gμ and reconnection probability P of a
cosmic-superstring network with pulsar-timing upper limits on the
stochastic gravitational-wave background (and optionally a LISA forecast).

Key modules:
    cosmology: Cached background tables t(z), |dt/dz|, H(z)
    spectrum: Ω_gw(f; Gμ, P) from the loop harmonic sum
    conversions: S_h, h_c and Ω_gw conversions
    observables: PTA/LISA datasets and likelihoods
    sampling: Priors and the stretch-move ensemble sampler
    analysis: 2D KDE, credible levels and export
    plots: Spectrum and posterior figures

Example usage:
    >>> from csgw import generate_mock_pta_limits, run_ensemble_mcmc, SamplerConfig
    >>> from csgw import kde_2d, find_credible_levels
    >>> pta = generate_mock_pta_limits()
    >>> result = run_ensemble_mcmc(pta, SamplerConfig(n_steps=200), rng=1)
    >>> kde = kde_2d(result.samples, grid_size=60, bandwidth=0.18)
    >>> levels = find_credible_levels(kde)
"""

__version__ = "1.0.0"

from .utils.config import PhysicsOptions, SamplerConfig
from .utils.constants import SI_UNITS, BACKGROUND, LOOP_RADIATION

from .cosmology import (
    CosmologyTable,
    CosmologyCache,
    build_cosmology_table,
)
from .spectrum import SpectrumModel, calculate_omega_gw
from .conversions import (
    sh_to_omega_gw,
    omega_gw_to_sh,
    hc_to_sh,
    hc_to_omega_gw,
    omega_gw_to_hc,
)

from .sampling import (
    log_prior,
    EnsembleSampler,
    MCMCResult,
    ProgressEvent,
    run_ensemble_mcmc,
)
from .observables import (
    PTADataset,
    LISADataset,
    load_pta,
    load_lisa_json,
    generate_mock_pta_limits,
    upper_limit_log_likelihood,
    log_likelihood_pta,
    log_likelihood_lisa,
    log_posterior,
)
from .analysis import KDEResult, CredibleLevels, kde_2d, find_credible_levels

__all__ = [
    "__version__",
    # Configuration
    "PhysicsOptions",
    "SamplerConfig",
    "SI_UNITS",
    "BACKGROUND",
    "LOOP_RADIATION",
    # Forward model
    "CosmologyTable",
    "CosmologyCache",
    "build_cosmology_table",
    "SpectrumModel",
    "calculate_omega_gw",
    "sh_to_omega_gw",
    "omega_gw_to_sh",
    "hc_to_sh",
    "hc_to_omega_gw",
    "omega_gw_to_hc",
    # Inference
    "log_prior",
    "EnsembleSampler",
    "MCMCResult",
    "ProgressEvent",
    "run_ensemble_mcmc",
    "PTADataset",
    "LISADataset",
    "load_pta",
    "load_lisa_json",
    "generate_mock_pta_limits",
    "upper_limit_log_likelihood",
    "log_likelihood_pta",
    "log_likelihood_lisa",
    "log_posterior",
    # Analysis
    "KDEResult",
    "CredibleLevels",
    "kde_2d",
    "find_credible_levels",
]
