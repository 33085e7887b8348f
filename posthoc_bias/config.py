"""Simulation configuration.

All tunables of the post-hoc selection experiment and its random seed live
here so that every component can access them in a single import. Config
objects can be created programmatically or loaded from YAML files to ease
batch experiments.
"""

from __future__ import annotations

import math
import numbers
import os
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict

import numpy as np
import yaml

__all__ = [
    "InvalidConfiguration",
    "SimulationConfig",
]

DEFAULT_YAML_INDENT = 2


class InvalidConfiguration(ValueError):
    """Raised when a simulation parameter violates its constraint."""


def _require_count(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidConfiguration(f"{name} must be an integer >= 1 (got {value!r})")
    if value < 1:
        raise InvalidConfiguration(f"{name} must be >= 1 (got {value})")


@dataclass(frozen=True)
class SimulationConfig:
    """Container for the simulation parameters.

    Attributes
    ----------
    subjects_count
        Number of participants in the simulated study.
    trials_count
        Number of treatment conditions measured once per participant.
    noise_std
        Standard deviation of the measurement noise (fraction of baseline,
        0.05 = 5 %).
    rollout_count
        Number of independent repetitions of the whole experiment.
    selection
        Per-subject extremum policy, ``"minimum"`` or ``"maximum"``.
    seed
        Seed of the random generator, for reproducible runs.
    """

    subjects_count: int = 8
    trials_count: int = 7
    noise_std: float = 0.05
    rollout_count: int = 10000
    selection: str = "minimum"
    seed: int = 0

    # Free-form field to store arbitrary user metadata (e.g., experiment name).
    tag: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        _require_count("subjects_count", self.subjects_count)
        _require_count("trials_count", self.trials_count)
        _require_count("rollout_count", self.rollout_count)

        noise = self.noise_std
        if isinstance(noise, bool) or not isinstance(noise, numbers.Real):
            raise InvalidConfiguration(f"noise_std must be a real number > 0 (got {noise!r})")
        if not math.isfinite(noise) or noise <= 0:
            raise InvalidConfiguration(f"noise_std must be finite and > 0 (got {noise})")
        # YAML may hand us an int such as 1
        object.__setattr__(self, "noise_std", float(noise))

        # Local import: the policy registry itself depends on this module.
        from .simulator.selection import get_policy

        get_policy(self.selection)

        seed = self.seed
        if isinstance(seed, bool) or not isinstance(seed, numbers.Integral) or seed < 0:
            raise InvalidConfiguration(f"seed must be an integer >= 0 (got {seed!r})")

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimulationConfig":
        known = {f for f in cls.__dataclass_fields__}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: os.PathLike | str) -> "SimulationConfig":
        """Load a configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise InvalidConfiguration(f"{path}: expected a mapping of parameters")
        return cls.from_dict(data)

    def to_yaml(self, path: os.PathLike | str) -> None:
        """Save the config to YAML."""
        with open(path, "w", encoding="utf-8") as fh:
            yaml.safe_dump(asdict(self), fh, indent=DEFAULT_YAML_INDENT, sort_keys=False)

    def with_overrides(self, **overrides: Any) -> "SimulationConfig":
        """Return a copy with the non-``None`` overrides applied (CLI flags)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    # ------------------------------------------------------------------
    # Random source
    # ------------------------------------------------------------------
    def make_rng(self) -> np.random.Generator:
        """Fresh generator seeded from `seed`. Nothing global is touched."""
        return np.random.default_rng(self.seed)

    # Convenience str representation for logging
    def __str__(self) -> str:  # noqa: DunderStr
        return (
            f"SimulationConfig(subjects={self.subjects_count}, trials={self.trials_count}, "
            f"noise_std={self.noise_std}, rollouts={self.rollout_count}, "
            f"selection={self.selection}, seed={self.seed})"
        )
