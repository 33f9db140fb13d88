"""Posterior analysis: density estimation, credible levels and export."""

from .density import (
    KDEResult,
    CredibleLevels,
    kde_2d,
    find_credible_levels,
    DEFAULT_GRID_SIZE,
    DEFAULT_BANDWIDTH,
)
from .export import (
    samples_to_csv,
    kde_to_csv,
    results_payload,
    results_to_json,
    write_text,
)

__all__ = [
    "KDEResult",
    "CredibleLevels",
    "kde_2d",
    "find_credible_levels",
    "DEFAULT_GRID_SIZE",
    "DEFAULT_BANDWIDTH",
    "samples_to_csv",
    "kde_to_csv",
    "results_payload",
    "results_to_json",
    "write_text",
]
