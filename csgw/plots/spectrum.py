"""Model spectrum against PTA limits."""

from typing import Dict, List, Optional, Tuple, Union
import numpy as np

from ..cosmology import CosmologyCache
from ..observables.datasets import PTADataset, as_pta_dataset
from ..spectrum import SpectrumModel
from ..utils.config import PhysicsOptions

# Floor applied before taking log10 so zero predictions stay plottable
LOG_FLOOR = 1e-40


def spectrum_preview(
    dataset: Union[PTADataset, dict],
    Gmu: float,
    P: float,
    physics: Union[PhysicsOptions, dict, None] = None,
    cache: Optional[CosmologyCache] = None,
) -> List[Dict[str, float]]:
    """Per-bin log10 of frequency, model Ω_gw and the PTA limit.

    Returns:
        List of ``{logFreq, logOmegaModel, logOmegaLimit}`` records
    """
    dataset = as_pta_dataset(dataset)
    model = SpectrumModel(physics, cache)

    out = []
    for f, limit in zip(dataset.frequencies, dataset.upper_limits):
        omega = model.omega_gw(f, Gmu, P)
        out.append({
            "logFreq": float(np.log10(f)),
            "logOmegaModel": float(np.log10(max(omega, LOG_FLOOR))),
            "logOmegaLimit": float(np.log10(max(limit, LOG_FLOOR))),
        })
    return out


def plot_spectrum(
    dataset: Union[PTADataset, dict],
    Gmu: float,
    P: float,
    physics: Union[PhysicsOptions, dict, None] = None,
    ax=None,
    figsize: Tuple[float, float] = (8, 5),
):
    """Plot the predicted Ω_gw(f) over the PTA upper limits.

    Args:
        dataset: PTA upper limits
        Gmu: String tension
        P: Reconnection probability
        physics: Physics options
        ax: Matplotlib axes
        figsize: Figure size

    Returns:
        Matplotlib axes object
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)

    preview = spectrum_preview(dataset, Gmu, P, physics)
    log_f = [p["logFreq"] for p in preview]

    ax.plot(log_f, [p["logOmegaLimit"] for p in preview], 'kv', ms=6,
            label='PTA upper limit')
    ax.plot(log_f, [p["logOmegaModel"] for p in preview], 'b-', lw=2,
            label=rf'Model: $G\mu = {Gmu:.1e}$, $P = {P:.2g}$')

    ax.set_xlabel(r'$\log_{10}(f\,/\,{\rm Hz})$', fontsize=12)
    ax.set_ylabel(r'$\log_{10}\,\Omega_{\rm gw}$', fontsize=12)
    ax.legend(loc='best', fontsize=10)
    ax.grid(True, alpha=0.3)

    return ax
