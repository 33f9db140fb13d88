"""Kernel density estimate and credible levels of the (log10 Gμ, logP) posterior."""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Union
import logging
import numpy as np
from numpy.typing import NDArray
from scipy.spatial.distance import cdist

logger = logging.getLogger(__name__)

DEFAULT_GRID_SIZE = 60
DEFAULT_BANDWIDTH = 0.2


@dataclass
class KDEResult:
    """Density on a regular (log10 Gμ, logP) grid.

    ``density_grid[j][i]`` holds the density at logP_j (row) and
    log10 Gμ_i (column).
    """

    density_grid: NDArray[np.floating]  # Shape: (grid_size, grid_size)
    log_gmu_axis: NDArray[np.floating]
    log_p_axis: NDArray[np.floating]
    log_gmu_min: float
    log_gmu_max: float
    log_p_min: float
    log_p_max: float
    grid_size: int
    bandwidth: float

    def grid_records(self) -> Iterator[Dict[str, float]]:
        """Flat ``{logGmu, logP, density}`` records, logP outer, logGmu inner."""
        for j, logP in enumerate(self.log_p_axis):
            for i, logGmu in enumerate(self.log_gmu_axis):
                yield {
                    "logGmu": float(logGmu),
                    "logP": float(logP),
                    "density": float(self.density_grid[j, i]),
                }

    @property
    def grid(self) -> List[Dict[str, float]]:
        return list(self.grid_records())

    def to_dict(self) -> Dict:
        return {
            "grid": self.grid,
            "densityGrid": self.density_grid.tolist(),
            "logGmuMin": self.log_gmu_min,
            "logGmuMax": self.log_gmu_max,
            "logPMin": self.log_p_min,
            "logPMax": self.log_p_max,
            "gridSize": self.grid_size,
            "bandwidth": self.bandwidth,
        }


@dataclass(frozen=True)
class CredibleLevels:
    """Density thresholds enclosing 68% and 95% of the posterior mass."""

    level68: float
    level95: float

    def to_dict(self) -> Dict[str, float]:
        return {"level68": self.level68, "level95": self.level95}


def _log_space(samples) -> NDArray[np.floating]:
    """(log10 Gμ, logP) pairs from an (N, 2) array, MCMCResult or dict list."""
    if hasattr(samples, "samples"):
        samples = samples.samples
    if len(samples) and isinstance(samples[0], dict):
        samples = [(s["Gmu"], s["logP"]) for s in samples]
    arr = np.asarray(samples, dtype=float).reshape(-1, 2)
    return np.column_stack([np.log10(arr[:, 0]), arr[:, 1]])


def kde_2d(
    samples,
    grid_size: int = DEFAULT_GRID_SIZE,
    bandwidth: float = DEFAULT_BANDWIDTH,
) -> KDEResult:
    """Isotropic Gaussian KDE on a grid_size x grid_size grid.

    density(x, y) = 1/(N 2π h²) Σ_k exp(-½((x - x_k)² + (y - y_k)²)/h²)

    Grid bounds are the sample extrema widened by one bandwidth per side.

    Args:
        samples: (N, 2) array of (Gmu, logP), an MCMCResult, or a list of
            ``{"Gmu", "logP"}`` dicts
        grid_size: Points per axis (>= 2)
        bandwidth: Kernel width h (> 0), in dex

    Returns:
        KDEResult
    """
    if grid_size < 2:
        raise ValueError(f"grid_size = {grid_size} must be >= 2")
    if not bandwidth > 0:
        raise ValueError(f"bandwidth = {bandwidth} must be > 0")

    points = _log_space(samples)
    n = len(points)
    if n == 0:
        raise ValueError("kde_2d needs at least one sample")

    log_gmu_min = float(points[:, 0].min()) - bandwidth
    log_gmu_max = float(points[:, 0].max()) + bandwidth
    log_p_min = float(points[:, 1].min()) - bandwidth
    log_p_max = float(points[:, 1].max()) + bandwidth

    x_axis = np.linspace(log_gmu_min, log_gmu_max, grid_size)
    y_axis = np.linspace(log_p_min, log_p_max, grid_size)

    norm = n * 2.0 * np.pi * bandwidth**2
    density = np.empty((grid_size, grid_size))
    # One logP row at a time keeps the distance matrix at grid_size x N
    for j, y in enumerate(y_axis):
        row = np.column_stack([x_axis, np.full(grid_size, y)])
        d2 = cdist(row, points, "sqeuclidean")
        density[j] = np.exp(-0.5 * d2 / bandwidth**2).sum(axis=1) / norm

    return KDEResult(
        density_grid=density,
        log_gmu_axis=x_axis,
        log_p_axis=y_axis,
        log_gmu_min=log_gmu_min,
        log_gmu_max=log_gmu_max,
        log_p_min=log_p_min,
        log_p_max=log_p_max,
        grid_size=grid_size,
        bandwidth=bandwidth,
    )


def find_credible_levels(
    density_grid: Union[NDArray[np.floating], Sequence[Sequence[float]], KDEResult],
    level_a: float = 0.68,
    level_b: float = 0.95,
) -> CredibleLevels:
    """Density thresholds whose superlevel sets hold level_a and level_b of the mass.

    Cells are ranked by density; the threshold is the density of the first
    cell at which the cumulative mass fraction reaches the level. A grid with
    no mass yields thresholds of 0.
    """
    if isinstance(density_grid, KDEResult):
        density_grid = density_grid.density_grid

    flat = np.sort(np.asarray(density_grid, dtype=float).ravel())[::-1]
    total = float(flat.sum())
    if flat.size == 0 or not total > 0:
        logger.warning("Density grid carries no mass; credible levels set to 0")
        return CredibleLevels(level68=0.0, level95=0.0)

    frac = np.cumsum(flat) / total
    # Guard against the last cumulative sum rounding just below 1
    frac[-1] = 1.0

    idx_a = int(np.argmax(frac >= level_a))
    idx_b = int(np.argmax(frac >= level_b))
    return CredibleLevels(level68=float(flat[idx_a]), level95=float(flat[idx_b]))
