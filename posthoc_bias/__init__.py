"""Monte Carlo demonstration of post-hoc per-subject selection bias."""
from __future__ import annotations

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("posthoc-bias")
except _metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "InvalidConfiguration",
    "SimulationConfig",
    "RolloutResult",
    "SimulationOutput",
    "run_simulation",
]

from .config import InvalidConfiguration, SimulationConfig
from .simulator.engine import RolloutResult, SimulationOutput, run_simulation
