"""Visualization utilities for cart-pole boxes runs."""

from __future__ import annotations
import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import jax.numpy as jnp

from env.boxes import NUM_BOXES, ZERO_STATE_BOX, quantize_batch
from env.cartpole import CartPoleParams, TrackLimits


_RESULTS_DIR = Path("results")


def _ensure_dir() -> Path:
    """Ensure results directory exists."""
    _RESULTS_DIR.mkdir(exist_ok=True)
    return _RESULTS_DIR


def _save_and_show_plot(fig: plt.Figure, save_path: Optional[str] = None,
                        show_plot: bool = False) -> plt.Figure:
    """Helper function to save and/or show plots consistently."""
    if save_path:
        try:
            fig.savefig(_ensure_dir() / save_path, dpi=150, bbox_inches="tight")
        except OSError as e:
            print(f"Failed to save plot to {save_path}: {e}")

    if show_plot:
        plt.show()

    return fig


def plot_trajectory(
    trajectory: Union[jnp.ndarray, np.ndarray],
    dt: float = CartPoleParams().dt,
    limits: TrackLimits = TrackLimits(),
    title: str = "Cart-Pole Trajectory",
    save_path: Optional[str] = None,
    show_plot: bool = False
) -> plt.Figure:
    """
    Plot the four state variables of a recorded run.

    Args:
        trajectory: (N, 4) array of [x, ẋ, θ, θ̇] rows
        dt: Time between consecutive rows [s]
        limits: Failure region, drawn as dashed lines
        title: Plot title
        save_path: File name under results/, not saved if None
        show_plot: Whether to display the plot interactively

    Returns:
        matplotlib Figure object
    """
    trajectory = np.asarray(trajectory)
    if trajectory.ndim != 2 or trajectory.shape[-1] != 4:
        raise ValueError(f"Expected trajectory with shape (N, 4), got {trajectory.shape}")

    time_points = np.arange(len(trajectory)) * dt

    fig, axes = plt.subplots(2, 2, figsize=(12, 8))
    fig.suptitle(title, fontsize=16)

    plot_configs = [
        (0, 0, trajectory[:, 0], 'Cart Position', 'Position (m)'),
        (0, 1, np.degrees(trajectory[:, 2]), 'Pole Angle', 'Angle (degrees)'),
        (1, 0, trajectory[:, 1], 'Cart Velocity', 'Velocity (m/s)'),
        (1, 1, trajectory[:, 3], 'Angular Velocity', 'Angular Velocity (rad/s)')
    ]

    for row, col, data, plot_title, ylabel in plot_configs:
        axes[row, col].plot(time_points, data)
        axes[row, col].set_title(plot_title)
        axes[row, col].set_xlabel('Time (s)')
        axes[row, col].set_ylabel(ylabel)
        axes[row, col].grid(True)

    for y in (limits.left, limits.right):
        axes[0, 0].axhline(y, c='r', ls='--')
    for y in (-limits.angle, limits.angle):
        axes[0, 1].axhline(np.degrees(y), c='r', ls='--')

    plt.tight_layout()
    return _save_and_show_plot(fig, save_path, show_plot)


def plot_learning_curve(
    failures: Sequence[Tuple[int, int]],
    title: str = "Balancing Progress",
    save_path: Optional[str] = None,
    show_plot: bool = False
) -> Optional[plt.Figure]:
    """
    Plot the best balance duration against the number of failures.

    Args:
        failures: (failure_count, max_duration) pairs, one per failure
        title: Plot title
        save_path: File name under results/
        show_plot: Whether to display the plot interactively

    Returns:
        matplotlib Figure object or None if there were no failures
    """
    if not failures:
        print("No failures to plot")
        return None

    counts, durations = zip(*failures)

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.step(counts, durations, 'b-', where='post', linewidth=2)
    ax.set_title(title)
    ax.set_xlabel('Failures')
    ax.set_ylabel('Max duration (steps)')
    ax.grid(True, alpha=0.3)

    # Log scale if useful
    if max(durations) > 0 and max(durations) / max(min(durations), 1) > 100:
        ax.set_yscale('log')
        ax.set_ylabel('Max duration (steps, log scale)')

    plt.tight_layout()
    return _save_and_show_plot(fig, save_path, show_plot)


def plot_box_occupancy(
    trajectory: Union[jnp.ndarray, np.ndarray],
    title: str = "Box Occupancy",
    save_path: Optional[str] = None,
    show_plot: bool = False
) -> plt.Figure:
    """Histogram of the boxes visited by a recorded (N, 4) trajectory."""
    boxes = np.asarray(quantize_batch(trajectory))
    counts = np.bincount(boxes, minlength=NUM_BOXES)

    fig, ax = plt.subplots(figsize=(12, 4))
    ax.bar(np.arange(NUM_BOXES), counts, width=1.0)
    ax.axvline(ZERO_STATE_BOX, c='r', ls='--', label='Start box')
    ax.set_title(title)
    ax.set_xlabel('Box')
    ax.set_ylabel('Visits')
    ax.set_xlim(-0.5, NUM_BOXES - 0.5)
    ax.legend()

    plt.tight_layout()
    return _save_and_show_plot(fig, save_path, show_plot)
