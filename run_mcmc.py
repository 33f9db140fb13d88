#!/usr/bin/env python3
"""
MCMC Analysis for Cosmic-Superstring Gravitational-Wave Backgrounds

Constrains the string tension Gμ and reconnection probability P with PTA
upper limits on Ω_gw(f), optionally adding a LISA forecast, then builds
a 2D KDE of the posterior and its 68%/95% credible levels.

Usage:
    python run_mcmc.py [--pta FILE] [--n_walkers N] [--n_steps N] [--output DIR]

Without --pta, mock NANOGrav-like limits are used.

Outputs (in --output):
    cosmic_superstring_results.json   samples, KDE grid and levels
    mcmc_samples.csv                  logGmu, logP, Gmu, P
    kde_grid.csv                      logGmu, logP, density
    posterior.png, spectrum.png       with --plot
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from csgw.utils.config import PhysicsOptions, SamplerConfig
from csgw.observables.datasets import (
    generate_mock_pta_limits,
    load_lisa_json,
    load_pta,
)
from csgw.sampling.mcmc import ProgressEvent, run_ensemble_mcmc
from csgw.analysis.density import find_credible_levels, kde_2d
from csgw.analysis.export import (
    kde_to_csv,
    results_to_json,
    samples_to_csv,
    write_text,
)

logger = logging.getLogger("run_mcmc")


def log_progress(event: ProgressEvent) -> None:
    """Report sampler progress."""
    logger.info(
        f"Sweep {event.step + 1}/{event.total_steps}, "
        f"acceptance: {event.acceptance_rate:.2%}"
    )


def save_plots(result, kde, levels, pta, physics, output_dir: Path) -> None:
    """Write posterior contours and the median-model spectrum."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    from csgw.plots import plot_posterior_contours, plot_spectrum

    ax = plot_posterior_contours(kde, levels)
    ax.figure.savefig(output_dir / "posterior.png", dpi=150, bbox_inches='tight')
    plt.close(ax.figure)

    Gmu = 10.0 ** np.median(result.log_gmu)
    P = 10.0 ** np.median(result.logP)
    ax = plot_spectrum(pta, Gmu, P, physics)
    ax.figure.savefig(output_dir / "spectrum.png", dpi=150, bbox_inches='tight')
    plt.close(ax.figure)


def run_analysis(args: argparse.Namespace) -> int:
    """Run the full pipeline; returns a process exit status."""
    output_dir = Path(args.output)

    pta = load_pta(args.pta) if args.pta else generate_mock_pta_limits()
    lisa = load_lisa_json(args.lisa) if args.lisa else None
    logger.info(f"PTA dataset: {pta.name} ({len(pta)} bins)")

    physics = PhysicsOptions(
        Nk=args.nk,
        z_max=args.z_max,
        nz=args.nz,
        adaptive_tol=args.adaptive_tol,
    )
    config = SamplerConfig(
        n_steps=args.n_steps,
        n_walkers=args.n_walkers,
        burn_in=args.burn_in,
        progress_every=args.progress_every,
        use_lisa=args.use_lisa and lisa is not None,
        physics=physics,
    )
    logger.info(
        f"Sampling {config.n_walkers} walkers for {config.n_steps} sweeps, "
        f"retaining {config.n_retained} samples"
    )

    result = run_ensemble_mcmc(pta, config, progress=log_progress, rng=args.seed, lisa=lisa)

    kde = kde_2d(result.samples, grid_size=args.grid_size, bandwidth=args.bandwidth)
    levels = find_credible_levels(kde)

    for name, stats in result.summary().items():
        logger.info(
            f"{name:10s} = {stats['median']:8.4f} "
            f"+{stats['q84'] - stats['median']:.4f} -{stats['median'] - stats['q16']:.4f}"
        )
    tau = result.autocorr_time()
    if tau is not None:
        logger.info(f"Autocorrelation time (sweeps): {np.round(tau, 1).tolist()}")

    settings = config.to_dict()
    settings["seed"] = args.seed
    write_text(
        output_dir / "cosmic_superstring_results.json",
        results_to_json(result, kde, levels, settings=settings, pta_name=pta.name),
    )
    write_text(output_dir / "mcmc_samples.csv", samples_to_csv(result))
    write_text(output_dir / "kde_grid.csv", kde_to_csv(kde))

    if args.plot:
        save_plots(result, kde, levels, pta, physics, output_dir)

    logger.info(f"Results saved in: {output_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='MCMC analysis of cosmic-superstring SGWB parameters'
    )
    parser.add_argument('--pta', type=str, default=None,
                        help='PTA limits (JSON or CSV); mock limits if omitted')
    parser.add_argument('--lisa', type=str, default=None,
                        help='LISA forecast JSON')
    parser.add_argument('--use_lisa', action='store_true',
                        help='Include the LISA likelihood')
    parser.add_argument('--n_walkers', type=int, default=24,
                        help='Number of MCMC walkers (default: 24)')
    parser.add_argument('--n_steps', type=int, default=1200,
                        help='Number of MCMC sweeps (default: 1200)')
    parser.add_argument('--burn_in', type=float, default=0.5,
                        help='Fraction of sweeps discarded (default: 0.5)')
    parser.add_argument('--nk', type=int, default=40,
                        help='Harmonic modes (default: 40)')
    parser.add_argument('--z_max', type=float, default=8.0,
                        help='Maximum redshift (default: 8)')
    parser.add_argument('--nz', type=int, default=600,
                        help='Cosmology table points (default: 600)')
    parser.add_argument('--adaptive_tol', type=float, default=1e-4,
                        help='Integrator tolerance (default: 1e-4)')
    parser.add_argument('--progress_every', type=int, default=50,
                        help='Progress cadence in sweeps (default: 50)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed')
    parser.add_argument('--grid_size', type=int, default=60,
                        help='KDE grid points per axis (default: 60)')
    parser.add_argument('--bandwidth', type=float, default=0.18,
                        help='KDE bandwidth in dex (default: 0.18)')
    parser.add_argument('--output', type=str, default='./results',
                        help='Output directory (default: ./results)')
    parser.add_argument('--plot', action='store_true',
                        help='Save posterior and spectrum figures')
    parser.add_argument('--quick', action='store_true',
                        help='Quick run with fewer samples')
    return parser


def main(argv=None) -> int:
    """Command-line interface."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s: %(message)s")

    args = build_parser().parse_args(argv)
    if args.quick:
        args.n_walkers = 16
        args.n_steps = 200

    try:
        return run_analysis(args)
    except (OSError, ValueError, KeyError) as e:
        logger.error(f"Analysis failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
