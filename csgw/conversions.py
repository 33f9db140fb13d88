"""Conversions between representations of a GW background amplitude.

PTA limits are quoted as strain power spectral density S_h(f) [1/Hz],
characteristic strain h_c(f), or energy density Ω_gw(f). They are related by

    h_c² = f S_h
    Ω_gw = (2π² / 3H₀²) f³ S_h

All functions are pure and return 0 for non-positive inputs.
"""

from typing import Sequence
import numpy as np
from numpy.typing import NDArray

from .utils.constants import SI_UNITS

OMEGA_FORMATS = ("omegagw", "sh", "hc")

FREQUENCY_UNITS = {
    "hz": 1.0,
    "mhz": 1e-3,
    "nhz": 1e-9,
}


def _omega_prefactor() -> float:
    return 2.0 * np.pi**2 / (3.0 * SI_UNITS.H0**2)


def sh_to_omega_gw(f: float, Sh: float) -> float:
    """Convert strain PSD to Ω_gw: Ω = (2π²/3H₀²) f³ S_h."""
    if not (f > 0) or not (Sh > 0):
        return 0.0
    return _omega_prefactor() * f**3 * Sh


def omega_gw_to_sh(f: float, omega: float) -> float:
    """Inverse of :func:`sh_to_omega_gw`."""
    if not (f > 0) or not (omega > 0):
        return 0.0
    return omega / (_omega_prefactor() * f**3)


def hc_to_sh(f: float, hc: float) -> float:
    """Characteristic strain to strain PSD: S_h = (h_c/f)².

    This is the convention used by the PTA limit files.
    """
    if not (f > 0) or not (hc > 0):
        return 0.0
    return (hc / f) ** 2


def sh_to_hc(f: float, Sh: float) -> float:
    """Inverse of :func:`hc_to_sh`."""
    if not (f > 0) or not (Sh > 0):
        return 0.0
    return f * np.sqrt(Sh)


def hc_to_omega_gw(f: float, hc: float) -> float:
    """Characteristic strain to Ω_gw via S_h."""
    return sh_to_omega_gw(f, hc_to_sh(f, hc))


def omega_gw_to_hc(f: float, omega: float) -> float:
    """Ω_gw to characteristic strain via S_h."""
    return sh_to_hc(f, omega_gw_to_sh(f, omega))


def frequency_scale(unit: str) -> float:
    """Multiplier converting a frequency in ``unit`` to Hz."""
    key = unit.lower()
    if key not in FREQUENCY_UNITS:
        raise ValueError(
            f"Unknown frequency unit: {unit!r} (expected one of Hz, mHz, nHz)"
        )
    return FREQUENCY_UNITS[key]


def to_omega_gw(
    frequencies: Sequence[float],
    values: Sequence[float],
    fmt: str = "OmegaGW",
) -> NDArray[np.floating]:
    """Normalise upper limits in ``fmt`` to Ω_gw.

    Args:
        frequencies: Frequencies [Hz]
        values: Limits in the given format
        fmt: 'OmegaGW', 'Sh' or 'hc' (case-insensitive)

    Returns:
        Array of Ω_gw upper limits
    """
    key = fmt.lower()
    if key not in OMEGA_FORMATS:
        raise ValueError(
            f"Unknown upper-limit format: {fmt!r} (expected one of OmegaGW, Sh, hc)"
        )
    if key == "omegagw":
        return np.asarray(values, dtype=float).copy()
    if key == "sh":
        return np.array([sh_to_omega_gw(f, v) for f, v in zip(frequencies, values)])
    return np.array([hc_to_omega_gw(f, v) for f, v in zip(frequencies, values)])
