"""Statistics on the distribution of spurious effects."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

import numpy as np

from .engine import SimulationOutput

__all__ = [
    "REFERENCE_EFFECTS",
    "SimulationSummary",
    "reference_thresholds",
    "empirical_cdf",
    "fraction_beyond",
    "summarize",
]

# Published effects from Barazesh & Sharbafi (2020), exosuit walking study.
REFERENCE_EFFECTS: Dict[str, float] = {
    "normal_walking": -0.0468,  # "reduced by 4.68 +- 4.24%"
    "optimal_stiffness": -0.147,  # "14.7 +- 4.27% reduction in metabolic cost"
}


def reference_thresholds(selection: str = "minimum") -> Dict[str, float]:
    """Reference effects oriented for the selection policy.

    The published values are reductions (negative). For the ``maximum``
    policy the comparable effects are their mirror images.
    """
    sign = -1.0 if selection == "maximum" else 1.0
    return {name: sign * value for name, value in REFERENCE_EFFECTS.items()}


def empirical_cdf(values) -> Tuple[np.ndarray, np.ndarray]:
    """Return sorted values and their cumulative probabilities."""
    sorted_values = np.sort(np.asarray(values, dtype=float))
    if sorted_values.size == 0:
        raise ValueError("empirical_cdf needs at least one value")
    cdf = np.arange(1, sorted_values.size + 1) / sorted_values.size
    return sorted_values, cdf


def fraction_beyond(values, threshold: float, selection: str = "minimum") -> float:
    """Fraction of rollouts at or beyond `threshold` in the selected direction.

    For ``minimum`` this is P(value <= threshold), for ``maximum``
    P(value >= threshold).
    """
    values = np.asarray(values, dtype=float)
    if values.size == 0:
        raise ValueError("fraction_beyond needs at least one value")
    if selection == "maximum":
        hits = values >= threshold
    else:
        hits = values <= threshold
    return float(np.mean(hits))


@dataclass(frozen=True)
class SimulationSummary:
    n_rollouts: int
    mean_effect: float
    std_effect: float
    mean_subject_std: float
    fraction_beyond: Dict[str, float] = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "n_rollouts": self.n_rollouts,
            "mean_effect": self.mean_effect,
            "std_effect": self.std_effect,
            "mean_subject_std": self.mean_subject_std,
            "fraction_beyond": dict(self.fraction_beyond),
        }


def summarize(output: SimulationOutput, thresholds: Optional[Mapping[str, float]] = None) -> SimulationSummary:
    """Aggregate a simulation run against the reference thresholds."""
    selection = output.config.selection
    if thresholds is None:
        thresholds = reference_thresholds(selection)
    means = output.means
    std_effect = float(np.std(means, ddof=1)) if means.size > 1 else 0.0
    return SimulationSummary(
        n_rollouts=len(output),
        mean_effect=float(np.mean(means)),
        std_effect=std_effect,
        mean_subject_std=float(np.mean(output.stds)),
        fraction_beyond={
            name: fraction_beyond(means, value, selection) for name, value in thresholds.items()
        },
    )
