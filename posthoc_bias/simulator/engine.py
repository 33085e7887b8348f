"""Execution engine: repeats the flawed per-subject selection on pure noise."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from ..config import SimulationConfig
from .selection import select_extremum

__all__ = [
    "RolloutResult",
    "SimulationOutput",
    "draw_measurements",
    "summarize_extrema",
    "run_rollout",
    "run_rollouts",
    "run_simulation",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RolloutResult:
    """Summary of one rollout's per-subject extrema."""

    mean_across_subjects: float
    std_across_subjects: float


@dataclass(frozen=True)
class SimulationOutput:
    """Container returned by `run_simulation`, one entry per rollout."""

    config: SimulationConfig
    rollouts: Tuple[RolloutResult, ...]

    def __len__(self) -> int:
        return len(self.rollouts)

    def __iter__(self) -> Iterator[RolloutResult]:
        return iter(self.rollouts)

    def __getitem__(self, idx: int) -> RolloutResult:
        return self.rollouts[idx]

    @property
    def means(self) -> np.ndarray:
        """Per-rollout mean of the selected extrema (the spurious effect)."""
        return np.fromiter((r.mean_across_subjects for r in self.rollouts), dtype=float, count=len(self))

    @property
    def stds(self) -> np.ndarray:
        return np.fromiter((r.std_across_subjects for r in self.rollouts), dtype=float, count=len(self))


# ------------------------------------------------------------------
# Single rollout building blocks
# ------------------------------------------------------------------

def draw_measurements(cfg: SimulationConfig, rng: np.random.Generator) -> np.ndarray:
    """Noise-only measurements, shape ``(subjects_count, trials_count)``.

    Every condition has a true effect of zero; each entry is
    ``noise_std * Z`` with ``Z`` a fresh standard-normal draw.
    """
    return cfg.noise_std * rng.standard_normal((cfg.subjects_count, cfg.trials_count))


def summarize_extrema(extrema: Sequence[float]) -> RolloutResult:
    """Mean and sample standard deviation (``ddof=1``) across subjects.

    A single subject has no spread; its standard deviation is reported as 0.
    """
    extrema = np.asarray(extrema, dtype=float)
    mean = float(np.mean(extrema))
    std = float(np.std(extrema, ddof=1)) if extrema.size > 1 else 0.0
    return RolloutResult(mean_across_subjects=mean, std_across_subjects=std)


def run_rollout(cfg: SimulationConfig, rng: np.random.Generator) -> RolloutResult:
    """Generate noise, select each subject's extremum and aggregate."""
    measurements = draw_measurements(cfg, rng)
    extrema = select_extremum(measurements, cfg.selection)
    return summarize_extrema(extrema)


def run_rollouts(cfg: SimulationConfig, n_rollouts: int, rng: np.random.Generator) -> List[RolloutResult]:
    """Run `n_rollouts` independent rollouts sharing one generator."""
    results: List[RolloutResult] = []
    for _ in range(n_rollouts):
        results.append(run_rollout(cfg, rng))
    return results


# ------------------------------------------------------------------
# Engine entry-point
# ------------------------------------------------------------------

def run_simulation(cfg: SimulationConfig, rng: Optional[np.random.Generator] = None) -> SimulationOutput:
    """Run `cfg.rollout_count` rollouts and collect their summaries.

    Parameters
    ----------
    cfg
        Validated configuration (validation happens when it is built).
    rng
        Source of standard-normal variates. Defaults to a generator seeded
        from `cfg.seed`; pass your own to control seeding explicitly.
    """
    if rng is None:
        rng = cfg.make_rng()

    logger.info("Running %d rollouts: %s", cfg.rollout_count, cfg)
    results = run_rollouts(cfg, cfg.rollout_count, rng)
    logger.debug("Finished %d rollouts", len(results))
    return SimulationOutput(config=cfg, rollouts=tuple(results))
