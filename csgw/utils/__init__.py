"""Utility modules: constants, configuration and numerics."""

from .constants import PhysicalConstants, SI_UNITS, BACKGROUND, LOOP_RADIATION
from .config import PhysicsOptions, SamplerConfig
from .numerics import interpolate, adaptive_simpson, safe_divide

__all__ = [
    "PhysicalConstants",
    "SI_UNITS",
    "BACKGROUND",
    "LOOP_RADIATION",
    "PhysicsOptions",
    "SamplerConfig",
    "interpolate",
    "adaptive_simpson",
    "safe_divide",
]
