"""
lib/presentation.py

Presentation/input collaborators for the episode loop.
The loop queries `should_stop` and `should_render` once per iteration,
passes the current state to `render`, and reports every failure through
`notify_failure`.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Tuple

import numpy as np

from env.cartpole import CartPoleState


class Presenter(ABC):
    """Stop/view queries plus render and failure callbacks."""

    @abstractmethod
    def should_stop(self) -> bool: ...

    @abstractmethod
    def should_render(self) -> bool: ...

    @abstractmethod
    def render(self, state: CartPoleState) -> None: ...

    @abstractmethod
    def notify_failure(self, failure_count: int, max_duration: int) -> None: ...


class NullPresenter(Presenter):
    """Never stops, never renders."""

    def should_stop(self) -> bool:
        return False

    def should_render(self) -> bool:
        return False

    def render(self, state: CartPoleState) -> None:
        pass

    def notify_failure(self, failure_count: int, max_duration: int) -> None:
        pass


class StepLimitPresenter(Presenter):
    """
    Requests a stop once `max_steps` iterations have been allowed.

    Args:
        max_steps: Number of stop-queries answered with False
        render_every: Ask for a render every N iterations (0 disables)
    """

    def __init__(self, max_steps: int, render_every: int = 0):
        if max_steps < 0:
            raise ValueError(f"max_steps must be non-negative, got {max_steps}")
        if render_every < 0:
            raise ValueError(f"render_every must be non-negative, got {render_every}")
        self.max_steps = max_steps
        self.render_every = render_every
        self.iteration = 0

    def should_stop(self) -> bool:
        if self.iteration >= self.max_steps:
            return True
        self.iteration += 1
        return False

    def should_render(self) -> bool:
        return self.render_every > 0 and (self.iteration - 1) % self.render_every == 0

    def render(self, state: CartPoleState) -> None:
        pass

    def notify_failure(self, failure_count: int, max_duration: int) -> None:
        pass


class TrajectoryRecorder(Presenter):
    """Forwards queries to `inner` and records rendered states and failures."""

    def __init__(self, inner: Presenter):
        self.inner = inner
        self.states: List[CartPoleState] = []
        self.failures: List[Tuple[int, int]] = []

    def should_stop(self) -> bool:
        return self.inner.should_stop()

    def should_render(self) -> bool:
        return self.inner.should_render()

    def render(self, state: CartPoleState) -> None:
        self.states.append(state)
        self.inner.render(state)

    def notify_failure(self, failure_count: int, max_duration: int) -> None:
        self.failures.append((failure_count, max_duration))
        self.inner.notify_failure(failure_count, max_duration)

    def trajectory(self) -> np.ndarray:
        """Recorded states as an (N, 4) array of [x, ẋ, θ, θ̇] rows."""
        if not self.states:
            return np.zeros((0, 4), dtype=np.float32)
        return np.stack([s.as_array() for s in self.states])
