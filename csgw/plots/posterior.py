"""Posterior density and credible-region contours."""

from typing import Optional, Tuple

from ..analysis.density import CredibleLevels, KDEResult, find_credible_levels


def plot_posterior_contours(
    kde: KDEResult,
    levels: Optional[CredibleLevels] = None,
    ax=None,
    show_density: bool = True,
    figsize: Tuple[float, float] = (7, 6),
):
    """Plot the KDE with its 68% and 95% credible contours.

    Args:
        kde: Density grid from kde_2d
        levels: Credible levels (computed from kde when None)
        ax: Matplotlib axes
        show_density: Shade the density underneath the contours
        figsize: Figure size

    Returns:
        Matplotlib axes object
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)

    if levels is None:
        levels = find_credible_levels(kde)

    X, Y = kde.log_gmu_axis, kde.log_p_axis

    if show_density:
        ax.pcolormesh(X, Y, kde.density_grid, cmap='Blues', shading='auto')

    # contour needs strictly increasing levels
    contour_levels = sorted({levels.level95, levels.level68})
    if contour_levels[-1] > 0:
        cs = ax.contour(X, Y, kde.density_grid, levels=contour_levels,
                        colors=['navy', 'crimson'][:len(contour_levels)],
                        linewidths=1.5)
        labels = {levels.level95: '95%', levels.level68: '68%'}
        ax.clabel(cs, fmt=labels, fontsize=9)

    ax.set_xlabel(r'$\log_{10} G\mu$', fontsize=12)
    ax.set_ylabel(r'$\log_{10} P$', fontsize=12)
    ax.set_title('Posterior credible regions', fontsize=12)
    ax.grid(True, alpha=0.3)

    return ax
