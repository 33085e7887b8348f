"""Parallel execution helpers using multiprocessing.

Rollouts are split into contiguous chunks. Each chunk draws from its own
child of ``SeedSequence(cfg.seed)``, so the output depends on the seed and
the chunk count but not on how many worker processes run the chunks.
"""
from __future__ import annotations

import logging
import multiprocessing as mp
import os
from typing import List, Optional

import numpy as np

from .config import SimulationConfig
from .simulator.engine import RolloutResult, SimulationOutput, run_rollouts

__all__ = ["chunk_sizes", "run_simulation_parallel"]

logger = logging.getLogger(__name__)


def chunk_sizes(total: int, n_chunks: int) -> List[int]:
    """Split `total` rollouts into at most `n_chunks` near-equal positive parts."""
    if n_chunks < 1:
        raise ValueError(f"n_chunks must be >= 1 (got {n_chunks})")
    n_chunks = min(n_chunks, total)
    base, extra = divmod(total, n_chunks)
    return [base + (1 if i < extra else 0) for i in range(n_chunks)]


def _worker(args):  # type: ignore
    cfg, n_rollouts, seed_seq = args
    return run_rollouts(cfg, n_rollouts, np.random.default_rng(seed_seq))


def run_simulation_parallel(
    cfg: SimulationConfig,
    n_chunks: Optional[int] = None,
    processes: int | None = None,
) -> SimulationOutput:
    """Run `cfg.rollout_count` rollouts in parallel on a process pool."""
    if n_chunks is None:
        n_chunks = processes or os.cpu_count() or 1
    sizes = chunk_sizes(cfg.rollout_count, n_chunks)
    seeds = np.random.SeedSequence(cfg.seed).spawn(len(sizes))

    logger.info("Running %d rollouts in %d chunks: %s", cfg.rollout_count, len(sizes), cfg)
    with mp.Pool(processes=processes) as pool:
        chunks = pool.map(_worker, [(cfg, n, s) for n, s in zip(sizes, seeds)])

    rollouts: List[RolloutResult] = [r for chunk in chunks for r in chunk]
    return SimulationOutput(config=cfg, rollouts=tuple(rollouts))
