"""
Command-Line Runner for the Cart-Pole Boxes Learner

Loads a YAML configuration, lets the learner practice for a fixed number
of iterations and reports the failure count and maximum balance duration.
"""

import argparse
import os
from dataclasses import replace
from typing import List, Optional

from controller.ase_ace import AseAceLearner
from controller.base import LearningController
from controller.constant import ConstantLearner
from env.closedloop import EpisodeController, EpisodeStatistics
from lib.config import LEARNERS, RunConfig, load_config
from lib.presentation import StepLimitPresenter, TrajectoryRecorder


def build_learner(config: RunConfig) -> LearningController:
    """Instantiate the learner selected in the configuration."""
    sim = config.simulation
    if sim.learner == "ase":
        return AseAceLearner(config.learner)
    elif sim.learner == "constant":
        return ConstantLearner(sim.constant_action)
    else:
        raise ValueError(f"Unknown learner '{sim.learner}'")


def run(config: RunConfig, plot: Optional[str] = None) -> EpisodeStatistics:
    """Run the learning loop described by `config`."""
    sim = config.simulation
    recorder = TrajectoryRecorder(StepLimitPresenter(sim.steps, render_every=sim.render_every))
    loop = EpisodeController(build_learner(config), recorder)
    stats = loop.run()

    if plot:
        from lib.visualizer import plot_box_occupancy, plot_learning_curve, plot_trajectory

        stem, ext = os.path.splitext(plot)
        ext = ext or ".png"
        plot_learning_curve(recorder.failures, save_path=f"{stem}_learning{ext}")
        if recorder.states:
            dt = loop.params.dt * max(sim.render_every, 1)
            plot_trajectory(recorder.trajectory(), dt=dt, save_path=f"{stem}_trajectory{ext}")
            plot_box_occupancy(recorder.trajectory(), save_path=f"{stem}_boxes{ext}")

    return stats


def print_summary(stats: EpisodeStatistics) -> None:
    print(f"\n{'='*50}")
    print("RUN SUMMARY")
    print(f"{'='*50}")
    print(f"Total steps:      {stats.total_steps}")
    print(f"Failures:         {stats.failure_count}")
    print(f"Max duration:     {stats.max_duration}")
    print(f"{'='*50}")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the cart-pole boxes runner."""
    parser = argparse.ArgumentParser(
        description="Cart-pole balancing with a box-based learner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_simulation.py --steps 500000
  python run_simulation.py --learner constant --steps 1000
  python run_simulation.py --config custom_config.yaml --plot run.png
        """
    )

    parser.add_argument(
        "--config",
        default=os.environ.get("CONFIG_PATH", "config.yaml"),
        help="Path to YAML configuration file (default: config.yaml)"
    )
    parser.add_argument("--steps", type=int, help="Override simulation.steps")
    parser.add_argument("--learner", choices=LEARNERS, help="Override simulation.learner")
    parser.add_argument("--seed", type=int, help="Override learner.seed")
    parser.add_argument(
        "--render-every",
        type=int,
        help="Record every N-th state for the trajectory plot"
    )
    parser.add_argument("--plot", help="Save plots under results/ with this file name stem")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    sim_overrides = {
        key: value for key, value in (
            ("steps", args.steps),
            ("learner", args.learner),
            ("render_every", args.render_every),
        ) if value is not None
    }
    if sim_overrides:
        config.simulation = replace(config.simulation, **sim_overrides)
    if args.seed is not None:
        config.learner = replace(config.learner, seed=args.seed)

    stats = run(config, plot=args.plot)
    print_summary(stats)


if __name__ == "__main__":
    main()
