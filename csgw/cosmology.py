"""Background cosmology lookup tables.

The spectrum integrand needs the cosmic age t(z), |dt/dz| and H(z) at many
redshifts. These are tabulated once on a uniform grid and interpolated.

For a flat matter + Λ universe:
    E(z) = sqrt(Ω_m (1+z)³ + Ω_Λ)
    H(z) = H₀ E(z)
    |dt/dz| = 1 / (H(z)(1+z))

The age uses the closed-form matter-dominated scaling
    t(z) ≈ (2/3H₀) a^(3/2),    a = 1/(1+z)
which is fast but not the exact integral ∫ dz / ((1+z) H(z)).
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging
import threading
import numpy as np
from numpy.typing import NDArray

from .utils.constants import SI_UNITS, BACKGROUND, hubble_time
from .utils.numerics import interpolate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CosmologyTable:
    """Tabulated background quantities on a uniform redshift grid."""

    z_max: float
    nz: int
    z: NDArray[np.floating]
    t: NDArray[np.floating]  # Cosmic age [s]
    dtdz: NDArray[np.floating]  # |dt/dz| [s]
    H: NDArray[np.floating]  # Hubble rate [Hz]

    @property
    def key(self) -> Tuple[float, int]:
        return (self.z_max, self.nz)

    def t_at(self, z: float) -> float:
        """Interpolate t(z)."""
        return interpolate(z, self.z, self.t)

    def dtdz_at(self, z: float) -> float:
        """Interpolate |dt/dz|(z)."""
        return interpolate(z, self.z, self.dtdz)

    def H_at(self, z: float) -> float:
        """Interpolate H(z)."""
        return interpolate(z, self.z, self.H)


def hubble_rate(z: NDArray[np.floating]) -> NDArray[np.floating]:
    """H(z) in Hz for the flat matter + Λ background."""
    E = np.sqrt(BACKGROUND.Omega_m * (1.0 + z) ** 3 + BACKGROUND.Omega_Lambda)
    return SI_UNITS.H0 * E


def build_cosmology_table(z_max: float = 10.0, nz: int = 600) -> CosmologyTable:
    """Tabulate t(z), |dt/dz| and H(z) on z_i = z_max i/(nz-1).

    Args:
        z_max: Upper redshift (> 0)
        nz: Number of grid points (>= 2)

    Returns:
        CosmologyTable with read-only arrays
    """
    if nz < 2:
        raise ValueError(f"nz = {nz} must be >= 2")
    if not z_max > 0:
        raise ValueError(f"z_max = {z_max} must be > 0")

    z = z_max * np.arange(nz) / (nz - 1)
    a = 1.0 / (1.0 + z)
    H = hubble_rate(z)
    t = (2.0 / 3.0) * hubble_time() * a**1.5
    dtdz = 1.0 / (H * (1.0 + z))

    for arr in (z, t, dtdz, H):
        arr.setflags(write=False)

    return CosmologyTable(z_max=z_max, nz=nz, z=z, t=t, dtdz=dtdz, H=H)


class CosmologyCache:
    """Single-slot memo of the most recent cosmology table.

    A request with the cached (z_max, nz) returns the identical table; any
    other key rebuilds and replaces the slot. The slot is guarded by a lock
    so one cache may be shared between threads, though parallel runs with
    different keys should each own a cache to avoid rebuilding on every call.
    """

    def __init__(self):
        self._table: Optional[CosmologyTable] = None
        self._lock = threading.Lock()
        self.n_builds = 0

    @property
    def key(self) -> Optional[Tuple[float, int]]:
        """Key of the cached table, or None when empty."""
        table = self._table
        return table.key if table is not None else None

    def build(self, z_max: float = 10.0, nz: int = 600) -> CosmologyTable:
        """Return the table for (z_max, nz), building it if needed."""
        with self._lock:
            table = self._table
            if table is not None and table.key == (z_max, nz):
                return table

            logger.debug(f"Building cosmology table for z_max={z_max}, nz={nz}")
            table = build_cosmology_table(z_max, nz)
            self._table = table
            self.n_builds += 1
            return table

    def clear(self) -> None:
        """Drop the cached table."""
        with self._lock:
            self._table = None


# Process-wide default used when no cache is injected
DEFAULT_CACHE = CosmologyCache()
