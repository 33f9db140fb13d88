"""Configuration classes for the spectrum model and the sampler."""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional
import math


# camelCase keys used by exported settings and dataset-side tooling
_PHYSICS_ALIASES = {
    "zMax": "z_max",
    "adaptiveTol": "adaptive_tol",
}


@dataclass(frozen=True)
class PhysicsOptions:
    """Options for the Ω_gw(f; Gμ, P) forward model.

    Attributes:
        Nk: Number of harmonic modes in the loop emission sum
        alpha: Loop-size scaling exponent α in dρ/dt ∝ 1/(α t⁴)
        beta: Tension scaling exponent β in dρ/dt ∝ Gμ^-β
        z_max: Upper redshift of the integration domain
        nz: Number of points in the cosmology lookup table
        adaptive_tol: Absolute tolerance of the adaptive Simpson integrator
    """

    Nk: int = 50
    alpha: float = 0.1
    beta: float = 1.0
    z_max: float = 10.0
    nz: int = 600
    adaptive_tol: float = 1e-4

    @classmethod
    def from_dict(cls, options: Optional[Mapping[str, Any]] = None) -> "PhysicsOptions":
        """Build options from a mapping; unknown keys raise ValueError."""
        if not options:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = _PHYSICS_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown physics option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Return the options using the exported (camelCase) key names."""
        return {
            "Nk": self.Nk,
            "alpha": self.alpha,
            "beta": self.beta,
            "zMax": self.z_max,
            "nz": self.nz,
            "adaptiveTol": self.adaptive_tol,
        }

    def validate(self) -> tuple[bool, list[str]]:
        """Validate option values.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []

        if self.Nk < 1:
            errors.append(f"Nk = {self.Nk} must be >= 1")
        if not self.alpha > 0:
            errors.append(f"alpha = {self.alpha} must be > 0")
        if not self.z_max > 0:
            errors.append(f"z_max = {self.z_max} must be > 0")
        if self.nz < 2:
            errors.append(f"nz = {self.nz} must be >= 2")
        if not self.adaptive_tol > 0:
            errors.append(f"adaptive_tol = {self.adaptive_tol} must be > 0")

        return len(errors) == 0, errors


@dataclass
class SamplerConfig:
    """Settings for an ensemble MCMC run.

    The stretch scale ``a`` is fixed at 2.0; it is exposed only so that the
    value travels with exported settings.
    """

    n_steps: int = 2000
    n_walkers: int = 32
    burn_in: float = 0.5  # Fraction of sweeps discarded
    progress_every: int = 50
    stretch_scale: float = 2.0
    use_lisa: bool = False
    physics: PhysicsOptions = field(default_factory=PhysicsOptions)

    @property
    def burn_in_steps(self) -> int:
        """Number of sweeps discarded before samples are recorded."""
        return int(math.floor(self.n_steps * self.burn_in))

    @property
    def n_retained(self) -> int:
        """Total number of samples a complete run retains."""
        return self.n_walkers * (self.n_steps - self.burn_in_steps)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nSteps": self.n_steps,
            "nWalkers": self.n_walkers,
            "burnIn": self.burn_in,
            "progressEvery": self.progress_every,
            "useLISA": self.use_lisa,
            "physicsOptions": self.physics.to_dict(),
        }

    def validate(self) -> tuple[bool, list[str]]:
        """Validate sampler settings together with the physics options."""
        valid, errors = self.physics.validate()

        if self.n_walkers < 2:
            errors.append(
                f"n_walkers = {self.n_walkers}; the stretch move needs at least 2 walkers"
            )
        if self.n_steps < 1:
            errors.append(f"n_steps = {self.n_steps} must be >= 1")
        if not 0.0 <= self.burn_in < 1.0:
            errors.append(f"burn_in = {self.burn_in} must lie in [0, 1)")
        if self.progress_every < 1:
            errors.append(f"progress_every = {self.progress_every} must be >= 1")
        if self.stretch_scale != 2.0:
            errors.append(f"stretch_scale = {self.stretch_scale}; only a = 2.0 is supported")

        return len(errors) == 0, errors
