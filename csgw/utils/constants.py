"""Physical constants for the cosmic-superstring SGWB model.

All constants are in SI units; the Hubble rate is expressed in Hz.
"""

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class PhysicalConstants:
    """Physical constants used by the spectrum model."""

    H0: float  # Hubble constant [Hz] (~67.4 km/s/Mpc)
    G_N: float  # Newton's constant [m³/(kg·s²)]
    c: float  # Speed of light [m/s]


@dataclass(frozen=True)
class BackgroundCosmologyValues:
    """Flat matter + Λ background used for the cosmology table."""

    Omega_m: float = 0.315
    Omega_Lambda: float = 0.685


@dataclass(frozen=True)
class LoopRadiationValues:
    """Fixed parameters of loop gravitational radiation."""

    Gamma: float = 50.0  # Total GW power coefficient
    harmonic_index: float = 4.0 / 3.0  # P_k ∝ k^(-4/3) for cusps
    C_norm: float = 0.1  # Loop-formation normalisation
    P_exponent: float = -0.6  # Ceff ∝ P^-0.6


SI_UNITS: Final[PhysicalConstants] = PhysicalConstants(
    H0=2.184e-18,
    G_N=6.674e-11,
    c=2.998e8,
)

BACKGROUND: Final[BackgroundCosmologyValues] = BackgroundCosmologyValues()

LOOP_RADIATION: Final[LoopRadiationValues] = LoopRadiationValues()


def hubble_time(H0_hz: float = SI_UNITS.H0) -> float:
    """Return the Hubble time 1/H0 in seconds."""
    return 1.0 / H0_hz
