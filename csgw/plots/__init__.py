"""Plotting modules for spectra and posteriors."""

from .spectrum import spectrum_preview, plot_spectrum
from .posterior import plot_posterior_contours

__all__ = [
    "spectrum_preview",
    "plot_spectrum",
    "plot_posterior_contours",
]
