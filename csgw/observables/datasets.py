"""PTA upper-limit and LISA forecast datasets.

PTA files (JSON or CSV) may quote limits as Ω_gw, S_h or h_c; they are
normalised to Ω_gw and to frequencies in Hz when loaded. Missing errors
default to 20% of the limit.

JSON schema for PTA limits::

    {"name": str, "format": "OmegaGW" | "Sh" | "hc",
     "frequency_unit": "Hz" | "nHz",
     "frequencies": [...], "upper_limits": [...], "errors": [...]}

JSON schema for a LISA forecast::

    {"name": str, "frequency_unit": "Hz" | "mHz",
     "frequencies": [...], "omega_forecast": [...], "sigma": [...],
     "notes": str}
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import csv
import json
import logging
import numpy as np
from numpy.typing import NDArray

from ..conversions import frequency_scale, hc_to_omega_gw, to_omega_gw

logger = logging.getLogger(__name__)

DEFAULT_RELATIVE_ERROR = 0.2

PathLike = Union[str, Path]


def _check_aligned(name: str, frequencies: NDArray, **arrays: NDArray) -> None:
    for label, arr in arrays.items():
        if arr.shape != frequencies.shape:
            raise ValueError(
                f"{name}: '{label}' has length {arr.size}, "
                f"expected {frequencies.size} to match 'frequencies'"
            )
    if frequencies.ndim != 1:
        raise ValueError(f"{name}: frequencies must be one-dimensional")
    if np.any(~(frequencies > 0)):
        raise ValueError(f"{name}: frequencies must be strictly positive")


@dataclass
class PTADataset:
    """PTA upper limits on Ω_gw, index-aligned per frequency bin."""

    frequencies: NDArray[np.floating]  # [Hz]
    upper_limits: NDArray[np.floating]  # Ω_gw upper limits
    errors: NDArray[np.floating]  # 1σ width of the penalty
    name: str = "PTA dataset"

    def __post_init__(self):
        self.frequencies = np.asarray(self.frequencies, dtype=float)
        self.upper_limits = np.asarray(self.upper_limits, dtype=float)
        self.errors = np.asarray(self.errors, dtype=float)
        _check_aligned(
            self.name,
            self.frequencies,
            upper_limits=self.upper_limits,
            errors=self.errors,
        )

    def __len__(self) -> int:
        return self.frequencies.size


@dataclass
class LISADataset:
    """Forecast Ω_gw curve with Gaussian uncertainties."""

    frequencies: NDArray[np.floating]  # [Hz]
    omega_forecast: NDArray[np.floating]
    sigma: NDArray[np.floating]
    name: str = "LISA dataset"
    notes: str = ""

    def __post_init__(self):
        self.frequencies = np.asarray(self.frequencies, dtype=float)
        self.omega_forecast = np.asarray(self.omega_forecast, dtype=float)
        self.sigma = np.asarray(self.sigma, dtype=float)
        _check_aligned(
            self.name,
            self.frequencies,
            omega_forecast=self.omega_forecast,
            sigma=self.sigma,
        )

    def __len__(self) -> int:
        return self.frequencies.size


def load_pta_json(path: PathLike) -> PTADataset:
    """Load PTA limits from a JSON file."""
    with open(path) as fh:
        data = json.load(fh)

    fmt = data.get("format", "OmegaGW")
    scale = frequency_scale(data.get("frequency_unit", "Hz"))
    frequencies = np.asarray(data["frequencies"], dtype=float) * scale
    upper = to_omega_gw(frequencies, data["upper_limits"], fmt)

    errors = data.get("errors")
    if errors is not None and len(errors) == upper.size:
        errors = np.asarray(errors, dtype=float)
    else:
        errors = DEFAULT_RELATIVE_ERROR * upper

    dataset = PTADataset(
        frequencies=frequencies,
        upper_limits=upper,
        errors=errors,
        name=data.get("name", "PTA dataset"),
    )
    logger.info(f"Loaded {len(dataset)} PTA bins from {path} (format {fmt})")
    return dataset


def load_pta_csv(
    path: PathLike,
    frequency_unit: str = "Hz",
    fmt: str = "OmegaGW",
) -> PTADataset:
    """Load PTA limits from CSV with header ``frequency,upper_limit,error``.

    The error column may be empty, in which case 20% of the limit is used.
    """
    with open(path, newline="") as fh:
        rows = [
            (n, [c.strip() for c in row])
            for n, row in enumerate(csv.reader(fh), start=1)
            if any(c.strip() for c in row)
        ]
    if len(rows) < 2:
        raise ValueError(f"CSV file {path} appears empty")

    scale = frequency_scale(frequency_unit)
    frequencies, raw_limits, raw_errors = [], [], []
    for n, cols in rows[1:]:
        if len(cols) < 2 or not cols[0] or not cols[1]:
            raise ValueError(f"{path}: line {n} needs frequency and upper_limit")
        frequencies.append(float(cols[0]) * scale)
        raw_limits.append(float(cols[1]))
        raw_errors.append(float(cols[2]) if len(cols) > 2 and cols[2] else np.nan)

    frequencies = np.asarray(frequencies)
    upper = to_omega_gw(frequencies, raw_limits, fmt)
    errors = np.asarray(raw_errors)
    errors = np.where(np.isfinite(errors), errors, DEFAULT_RELATIVE_ERROR * upper)

    return PTADataset(
        frequencies=frequencies,
        upper_limits=upper,
        errors=errors,
        name="PTA CSV",
    )


def load_pta(path: PathLike, **kwargs) -> PTADataset:
    """Load PTA limits, dispatching on the file suffix.

    Keyword arguments are passed to :func:`load_pta_csv`. JSON files carry
    their own ``format`` and ``frequency_unit``, so they accept none.
    """
    if Path(path).suffix.lower() == ".csv":
        return load_pta_csv(path, **kwargs)
    if kwargs:
        raise TypeError(
            f"load_pta got unexpected arguments for JSON file {path}: "
            f"{', '.join(sorted(kwargs))}"
        )
    return load_pta_json(path)


def load_lisa_json(path: PathLike) -> LISADataset:
    """Load a LISA forecast from a JSON file."""
    with open(path) as fh:
        data = json.load(fh)

    scale = frequency_scale(data.get("frequency_unit", "Hz"))
    frequencies = np.asarray(data["frequencies"], dtype=float) * scale
    omega_forecast = np.asarray(data["omega_forecast"], dtype=float)
    sigma = np.asarray(data["sigma"], dtype=float)

    if frequencies.size != omega_forecast.size or frequencies.size != sigma.size:
        raise ValueError(
            "LISA JSON arrays must have same length: frequencies, omega_forecast, sigma"
        )

    return LISADataset(
        frequencies=frequencies,
        omega_forecast=omega_forecast,
        sigma=sigma,
        name=data.get("name", "LISA dataset"),
        notes=data.get("notes", ""),
    )


def generate_mock_pta_limits(n_bins: int = 15) -> PTADataset:
    """Mock NANOGrav-like limits for offline use.

    h_c(f) = 1e-15 (f / 1e-8 Hz)^(-2/3) on f = 10^(-9 + 0.15 i), converted
    to Ω_gw with 20% errors.
    """
    frequencies = 10.0 ** (-9.0 + 0.15 * np.arange(n_bins))
    hc = 1e-15 * (frequencies / 1e-8) ** (-2.0 / 3.0)
    upper = np.array([hc_to_omega_gw(f, h) for f, h in zip(frequencies, hc)])

    return PTADataset(
        frequencies=frequencies,
        upper_limits=upper,
        errors=DEFAULT_RELATIVE_ERROR * upper,
        name="NANOGrav 15yr (Mock)",
    )


def as_pta_dataset(data: Union[PTADataset, dict, None]) -> Optional[PTADataset]:
    """Accept a PTADataset or a mapping in the exported key convention."""
    if data is None or isinstance(data, PTADataset):
        return data
    return PTADataset(
        frequencies=data["frequencies"],
        upper_limits=data.get("upper_limits", data.get("upperLimits")),
        errors=data["errors"],
        name=data.get("name", "PTA dataset"),
    )


def as_lisa_dataset(data: Union[LISADataset, dict, None]) -> Optional[LISADataset]:
    """Accept a LISADataset or a mapping in the exported key convention."""
    if data is None or isinstance(data, LISADataset):
        return data
    return LISADataset(
        frequencies=data["frequencies"],
        omega_forecast=data.get("omega_forecast", data.get("omegaForecast")),
        sigma=data["sigma"],
        name=data.get("name", "LISA dataset"),
    )
