"""CSV and JSON export of sampler output and KDE grids."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Union
import csv
import io
import json
import numpy as np

from ..sampling.mcmc import MCMCResult
from .density import CredibleLevels, KDEResult

SAMPLE_COLUMNS = ["logGmu", "logP", "Gmu", "P"]
KDE_COLUMNS = ["logGmu", "logP", "density"]


def _convert(obj):
    """Make numpy containers JSON serialisable."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, dict):
        return {k: _convert(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [_convert(v) for v in obj]
    return obj


def to_csv(rows: Iterable[Mapping], header: List[str]) -> str:
    """Render rows as CSV text with the given column order."""
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=header, extrasaction="ignore", lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buf.getvalue()


def samples_to_csv(result: MCMCResult) -> str:
    """Posterior samples as CSV with columns logGmu, logP, Gmu, P."""
    rows = (
        {
            "logGmu": repr(float(np.log10(g))),
            "logP": repr(float(p)),
            "Gmu": repr(float(g)),
            "P": repr(float(10.0**p)),
        }
        for g, p in result.samples
    )
    return to_csv(rows, SAMPLE_COLUMNS)


def kde_to_csv(kde: KDEResult) -> str:
    """KDE grid records as CSV with columns logGmu, logP, density."""
    rows = (
        {k: repr(v) for k, v in record.items()} for record in kde.grid_records()
    )
    return to_csv(rows, KDE_COLUMNS)


def results_payload(
    result: MCMCResult,
    kde: KDEResult,
    levels: CredibleLevels,
    settings: Optional[Dict] = None,
    pta_name: Optional[str] = None,
) -> Dict:
    """Assemble the full results document."""
    mcmc = result.to_dict()
    return {
        "meta": {
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "settings": settings or {},
            "ptaName": pta_name,
        },
        "mcmc": {
            "samples": mcmc["samples"],
            "logProbs": mcmc["logProbs"],
            "acceptanceRate": mcmc["acceptanceRate"],
        },
        "kde": kde.to_dict(),
        "levels": levels.to_dict(),
    }


def results_to_json(
    result: MCMCResult,
    kde: KDEResult,
    levels: CredibleLevels,
    settings: Optional[Dict] = None,
    pta_name: Optional[str] = None,
) -> str:
    """Results document as indented JSON.

    -inf log-probabilities are written as ``null``.
    """
    payload = _convert(results_payload(result, kde, levels, settings, pta_name))
    payload["mcmc"]["logProbs"] = [
        lp if np.isfinite(lp) else None for lp in payload["mcmc"]["logProbs"]
    ]
    return json.dumps(payload, indent=2)


def write_text(path: Union[str, Path], text: str) -> Path:
    """Write text to ``path``, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path
