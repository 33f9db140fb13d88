"""Gravitational-wave background from a cosmic-superstring loop network.

The energy density per logarithmic frequency interval is

    Ω_gw(f) = ∫₀^z_max dz |dt/dz| Σ_k (2k / f_obs) P_k Gμ² (dρ/dt) / ρ_c

with
    f_obs = f (1+z)
    P_k = Γ / k^(4/3),                       k = 1..N_k
    dρ/dt = C_eff / (α t⁴) Gμ^-β
    C_eff = 0.1 P^-0.6                       (reconnection enhancement)
    ρ_c = 3H₀² / (8πG)

C_eff is a stylised velocity-dependent one-scale parametrisation: a lower
reconnection probability P leaves a denser network.
"""

from typing import Optional, Sequence, Union
import numpy as np
from numpy.typing import NDArray

from .cosmology import CosmologyCache, CosmologyTable, DEFAULT_CACHE
from .conversions import sh_to_omega_gw
from .utils.config import PhysicsOptions
from .utils.constants import SI_UNITS, LOOP_RADIATION
from .utils.numerics import adaptive_simpson

INTEGRATION_DEPTH = 22


def critical_density() -> float:
    """ρ_c = 3H₀²/(8πG) in kg/m³."""
    return 3.0 * SI_UNITS.H0**2 / (8.0 * np.pi * SI_UNITS.G_N)


def harmonic_weights(Nk: int) -> NDArray[np.floating]:
    """Mode weights Γ/(k+1)^(4/3) for k = 0..Nk-1."""
    k = np.arange(1, Nk + 1, dtype=float)
    return LOOP_RADIATION.Gamma / k**LOOP_RADIATION.harmonic_index


def effective_loop_coefficient(P: float) -> float:
    """C_eff = 0.1 P^-0.6."""
    return LOOP_RADIATION.C_norm * P**LOOP_RADIATION.P_exponent


def _coerce_options(options: Union[PhysicsOptions, dict, None]) -> PhysicsOptions:
    if isinstance(options, PhysicsOptions):
        return options
    return PhysicsOptions.from_dict(options)


class SpectrumModel:
    """Ω_gw(f; Gμ, P) evaluator bound to physics options and a table cache.

    Args:
        options: Physics options (defaults when None)
        cache: Cosmology table cache (process-wide default when None)
    """

    def __init__(
        self,
        options: Union[PhysicsOptions, dict, None] = None,
        cache: Optional[CosmologyCache] = None,
    ):
        self.options = _coerce_options(options)
        self.cache = cache if cache is not None else DEFAULT_CACHE

        # Σ_k 2k P_k does not depend on z, so the harmonic sum collapses to
        # (1/f_obs) times this constant.
        k = np.arange(1, self.options.Nk + 1, dtype=float)
        self._mode_sum = float(np.sum(2.0 * k * harmonic_weights(self.options.Nk)))
        self._rho_c = critical_density()

    @property
    def table(self) -> CosmologyTable:
        return self.cache.build(self.options.z_max, self.options.nz)

    def integrand(self, z: float, f: float, Gmu: float, P: float) -> float:
        """dΩ_gw/dz at redshift z."""
        table = self.table
        return self._integrand(z, table, f, Gmu, P)

    def _integrand(
        self,
        z: float,
        table: CosmologyTable,
        f: float,
        Gmu: float,
        P: float,
    ) -> float:
        t = table.t_at(z)
        if not t > 0:
            return 0.0
        dtdz = table.dtdz_at(z)

        opts = self.options
        drho_dt = (
            effective_loop_coefficient(P) / (opts.alpha * t**4)
        ) * Gmu ** (-opts.beta)
        f_obs = f * (1.0 + z)

        harmonic_sum = self._mode_sum * Gmu**2 * drho_dt / (f_obs * self._rho_c)
        return harmonic_sum * dtdz

    def omega_gw(self, f: float, Gmu: float, P: float) -> float:
        """Predicted Ω_gw at frequency f [Hz].

        Returns 0 when any of f, Gμ, P is non-positive.
        """
        if not (f > 0) or not (Gmu > 0) or not (P > 0):
            return 0.0

        table = self.table
        return adaptive_simpson(
            lambda z: self._integrand(z, table, f, Gmu, P),
            0.0,
            self.options.z_max,
            self.options.adaptive_tol,
            INTEGRATION_DEPTH,
        )

    def spectrum(
        self,
        frequencies: Sequence[float],
        Gmu: float,
        P: float,
    ) -> NDArray[np.floating]:
        """Ω_gw evaluated at each frequency."""
        return np.array([self.omega_gw(f, Gmu, P) for f in frequencies])


def calculate_omega_gw(
    f: float,
    Gmu: float,
    P: float,
    options: Union[PhysicsOptions, dict, None] = None,
    cache: Optional[CosmologyCache] = None,
) -> float:
    """Predicted Ω_gw(f; Gμ, P).

    Args:
        f: Observed frequency [Hz]
        Gmu: String tension Gμ
        P: Reconnection probability
        options: Physics options
        cache: Cosmology table cache

    Returns:
        Ω_gw, or 0 for non-positive inputs
    """
    return SpectrumModel(options, cache).omega_gw(f, Gmu, P)


__all__ = [
    "SpectrumModel",
    "calculate_omega_gw",
    "critical_density",
    "harmonic_weights",
    "effective_loop_coefficient",
    "sh_to_omega_gw",
]
