"""Visualisation helpers (Matplotlib)."""
from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .metrics import reference_thresholds

__all__ = [
    "plot_effect_distribution",
]

DEFAULT_CMAP = plt.get_cmap("tab10")
EFFECT_XLIM = (-0.15, 0.0)
PROBABILITY_YLIM = (0.0, 0.1)


def _save_or_show(fig, save_path: Path | None) -> None:
    if save_path is not None:
        save_path = Path(save_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path.with_suffix(".png"), dpi=300, bbox_inches="tight")
        fig.savefig(save_path.with_suffix(".svg"), bbox_inches="tight")
    else:
        plt.show()

    plt.close(fig)


def plot_effect_distribution(
    means,
    thresholds: Optional[Mapping[str, float]] = None,
    selection: str = "minimum",
    xlabel: str = "Average metabolic rate reduction",
    save_path: Path | None = None,
) -> None:
    """Probability histogram (top) and CDF (bottom) of per-rollout means.

    Reference effects are drawn as vertical lines on both axes.
    """
    means = np.asarray(means, dtype=float)
    if means.size == 0:
        raise ValueError("Nothing to plot: no rollout means")
    if thresholds is None:
        thresholds = reference_thresholds(selection)

    xlim: Tuple[float, float] = EFFECT_XLIM
    if selection == "maximum":
        xlim = (-EFFECT_XLIM[1], -EFFECT_XLIM[0])

    weights = np.full(means.size, 1.0 / means.size)
    fig, (ax_pdf, ax_cdf) = plt.subplots(2, 1, figsize=(6, 7))

    ax_pdf.hist(means, bins="auto", weights=weights)
    ax_pdf.set_xlim(*xlim)
    ax_pdf.set_ylim(*PROBABILITY_YLIM)
    ax_pdf.set_xlabel(xlabel)
    ax_pdf.set_ylabel("Probability")

    ax_cdf.hist(means, bins="auto", weights=weights, cumulative=True)
    ax_cdf.set_xlim(*xlim)
    ax_cdf.set_ylim(0.0, 1.0)
    ax_cdf.set_xlabel(xlabel)
    ax_cdf.set_ylabel("Cumulative Density Function")

    for ax in (ax_pdf, ax_cdf):
        for idx, (label, value) in enumerate(thresholds.items()):
            ax.axvline(value, color=DEFAULT_CMAP(idx + 1), lw=1, label=f"{label} ({value:+.4f})")
        ax.grid(True, ls=":", lw=0.5)
    ax_pdf.legend(loc="upper left")

    fig.tight_layout()
    _save_or_show(fig, save_path)
