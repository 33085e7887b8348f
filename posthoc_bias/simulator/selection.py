"""Per-subject extremum selection: registry and built-in policies.

A policy reduces each row of the measurement matrix (one subject, all of
their conditions) to the single value an over-eager analyst would report for
that subject.

Usage Example:
--------------

from posthoc_bias.simulator.selection import register_policy, get_policy

@register_policy("median")
def median_policy(matrix):
    return np.median(matrix, axis=1)

extrema = get_policy("minimum")(matrix)
"""
from __future__ import annotations

from typing import Callable, Dict

import numpy as np

from ..config import InvalidConfiguration

__all__ = [
    "SelectionPolicy",
    "register_policy",
    "get_policy",
    "available_policies",
    "select_extremum",
]

SelectionPolicy = Callable[[np.ndarray], np.ndarray]

# Policy registry: maps policy names to row-wise reducers
_REGISTRY: Dict[str, SelectionPolicy] = {}


# ------------------------------------------------------------------
# Registry helpers
# ------------------------------------------------------------------

def register_policy(name: str) -> Callable[[SelectionPolicy], SelectionPolicy]:
    """
    Decorator registering a row-wise reducer under `name`.
    Raises if the name is already taken.
    """
    def decorator(func: SelectionPolicy) -> SelectionPolicy:
        if not callable(func):
            raise TypeError("@register_policy can only decorate callables")
        if name in _REGISTRY:
            raise KeyError(f"Selection policy '{name}' is already registered")
        _REGISTRY[name] = func
        return func

    return decorator


def get_policy(name: str) -> SelectionPolicy:
    """
    Retrieve a selection policy by name from the registry.
    Raises InvalidConfiguration if not found.
    """
    try:
        return _REGISTRY[name]
    except (KeyError, TypeError) as exc:
        raise InvalidConfiguration(
            f"selection must be one of {available_policies()} (got {name!r})"
        ) from exc


def available_policies() -> list[str]:
    return sorted(_REGISTRY)


# ------------------------------------------------------------------
# Built-in policies
# ------------------------------------------------------------------

@register_policy("minimum")
def minimum_policy(matrix: np.ndarray) -> np.ndarray:
    """Lowest value per subject, i.e. the largest apparent reduction."""
    return np.min(matrix, axis=1)


@register_policy("maximum")
def maximum_policy(matrix: np.ndarray) -> np.ndarray:
    """Highest value per subject, for measures where larger is better."""
    return np.max(matrix, axis=1)


def select_extremum(matrix: np.ndarray, selection: str = "minimum") -> np.ndarray:
    """Apply the named policy to a ``(subjects, trials)`` matrix."""
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim != 2 or 0 in matrix.shape:
        raise ValueError(f"Expected a non-empty 2-D matrix, got shape {matrix.shape}")
    return get_policy(selection)(matrix)
