"""Command‐line interface entry‐point.

Usage examples
--------------
Run with the default study design (8 subjects, 7 conditions, 5 % noise):
    python -m posthoc_bias.cli run

Same, spread over worker processes:
    python -m posthoc_bias.cli batch --processes 4 --chunks 8

Render the histogram / CDF figure:
    python -m posthoc_bias.cli plot --config cfgs/default.yaml --save_path figs/effect
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from .config import InvalidConfiguration, SimulationConfig
from .parallel import run_simulation_parallel
from .simulator.engine import SimulationOutput, run_simulation
from .simulator.metrics import SimulationSummary, reference_thresholds, summarize
from .simulator.selection import available_policies


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be an integer >= 1 (got {value})")
    return value


def _add_config_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", type=Path, default=None, help="YAML config file (defaults used if omitted)")
    p.add_argument("--subjects", type=int, default=None, help="Number of subjects")
    p.add_argument("--trials", type=int, default=None, help="Number of conditions per subject")
    p.add_argument("--noise-std", dest="noise_std", type=float, default=None, help="Measurement noise standard deviation")
    p.add_argument("--rollouts", type=int, default=None, help="Number of Monte Carlo rollouts")
    p.add_argument("--selection", choices=available_policies(), default=None, help="Per-subject extremum policy")
    p.add_argument("--seed", type=int, default=None, help="Random seed")


def _parse_args(argv: List[str] | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="posthoc_bias", description="Post-hoc selection bias Monte Carlo simulator")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # ------------------------------------------------------------------
    # run
    # ------------------------------------------------------------------
    p_run = subparsers.add_parser("run", help="Run the simulation serially and print a summary")
    _add_config_args(p_run)

    # ------------------------------------------------------------------
    # batch
    # ------------------------------------------------------------------
    p_batch = subparsers.add_parser("batch", help="Run the rollouts on a process pool")
    _add_config_args(p_batch)
    p_batch.add_argument("--processes", type=_positive_int, default=None, help="Number of worker processes")
    p_batch.add_argument("--chunks", type=_positive_int, default=None, help="Number of seeded rollout chunks (fixes reproducibility)")

    # ------------------------------------------------------------------
    # plot
    # ------------------------------------------------------------------
    p_plot = subparsers.add_parser("plot", help="Run the simulation and plot the effect distribution")
    _add_config_args(p_plot)
    p_plot.add_argument("--save_path", type=Path, default=None, help="Save PNG/SVG here instead of showing the figure")
    return parser


def _build_config(args: argparse.Namespace) -> SimulationConfig:
    cfg = SimulationConfig.from_yaml(args.config) if args.config is not None else SimulationConfig()
    return cfg.with_overrides(
        subjects_count=args.subjects,
        trials_count=args.trials,
        noise_std=args.noise_std,
        rollout_count=args.rollouts,
        selection=args.selection,
        seed=args.seed,
    )


def _print_summary(output: SimulationOutput, summary: SimulationSummary) -> None:
    cfg = output.config
    print(f"[INFO] {cfg}")
    print(f"Mean spurious effect = {summary.mean_effect:+.4f} (sd across rollouts {summary.std_effect:.4f})")
    print(f"Mean between-subject sd = {summary.mean_subject_std:.4f}")
    thresholds = reference_thresholds(cfg.selection)
    for name, frac in summary.fraction_beyond.items():
        print(f"P(effect at or beyond {thresholds[name]:+.4f}, {name}) = {frac:.3f}")


def main(argv: List[str] | None = None) -> int:  # noqa: D401
    """Main entry point for the command-line interface."""
    parser = _parse_args(argv)
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        cfg = _build_config(args)
    except InvalidConfiguration as exc:
        print(f"[ERROR] Invalid configuration: {exc}", file=sys.stderr)
        return 2

    if args.cmd == "batch":
        output = run_simulation_parallel(cfg, n_chunks=args.chunks, processes=args.processes)
    else:
        output = run_simulation(cfg)

    _print_summary(output, summarize(output))

    if args.cmd == "plot":
        # matplotlib is only needed for this subcommand
        from .simulator.visualize import plot_effect_distribution

        plot_effect_distribution(output.means, selection=cfg.selection, save_path=args.save_path)
        if args.save_path is not None:
            print(f"[INFO] Figure saved to {args.save_path.with_suffix('.png')}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
