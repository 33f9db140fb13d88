"""Prior distributions for (Gμ, P) inference.

Both parameters carry flat priors in log space: log10 Gμ ∈ [-15, -6] and
logP = log10 P ∈ [-4, 0]. The prior is improper (log-density 0 inside the
box) since only posterior ratios enter the sampler.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional
import math
import numpy as np


class Prior(ABC):
    """Base class for one-dimensional priors."""

    @abstractmethod
    def log_prob(self, value: float) -> float:
        """Compute log-probability of value under prior."""
        pass

    @abstractmethod
    def in_bounds(self, value: float) -> bool:
        """Check if value is within prior support."""
        pass


@dataclass
class UniformPrior(Prior):
    """Flat prior on the closed interval [low, high].

    Returns log-density 0 inside (unnormalised) and -inf outside.
    """

    low: float
    high: float
    name: str = ""

    def __post_init__(self):
        if self.high <= self.low:
            raise ValueError(f"high ({self.high}) must be > low ({self.low})")

    def log_prob(self, value: float) -> float:
        if self.in_bounds(value):
            return 0.0
        return -np.inf

    def in_bounds(self, value: float) -> bool:
        return self.low <= value <= self.high


class PriorSet:
    """Independent priors over named parameters."""

    def __init__(self, priors: Optional[Dict[str, Prior]] = None):
        self.priors = priors or {}
        self.param_names = list(self.priors.keys())

    def add(self, name: str, prior: Prior) -> None:
        """Add a prior."""
        self.priors[name] = prior
        self.param_names = list(self.priors.keys())

    def log_prob(self, params: Dict[str, float]) -> float:
        """Compute total log-prior probability."""
        total = 0.0
        for name, value in params.items():
            if name in self.priors:
                lp = self.priors[name].log_prob(value)
                if lp == -np.inf:
                    return -np.inf
                total += lp
        return total


LOG_GMU_RANGE = (-15.0, -6.0)
LOG_P_RANGE = (-4.0, 0.0)


def default_string_priors() -> PriorSet:
    """Flat-in-log prior box on log10 Gμ and logP."""
    priors = PriorSet()
    priors.add("log10_Gmu", UniformPrior(*LOG_GMU_RANGE, name="log10_Gmu"))
    priors.add("logP", UniformPrior(*LOG_P_RANGE, name="logP"))
    return priors


DEFAULT_PRIORS = default_string_priors()


def log_prior(Gmu: float, logP: float, priors: Optional[PriorSet] = None) -> float:
    """Log-prior of (Gμ, logP): 0 inside the closed box, -inf outside.

    Args:
        Gmu: String tension (non-positive values lie outside the box)
        logP: log10 of the reconnection probability
        priors: Prior set (default box when None)
    """
    if not Gmu > 0:
        return -np.inf
    priors = priors or DEFAULT_PRIORS
    return priors.log_prob({"log10_Gmu": math.log10(Gmu), "logP": logP})
