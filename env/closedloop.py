"""
env/closedloop.py
Episodic closed-loop control of the cart-pole by a box-based learner.

One iteration: quantize -> act -> integrate -> requantize -> reinforce ->
update weights -> decay/clear traces. A failure resets the cart-pole to
the zero state and starts a new episode.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional

from controller.base import LearningController, check_action
from env.boxes import NUM_BOXES, quantize
from env.cartpole import CartPoleParams, CartPoleState, TrackLimits, is_failure, step
from lib.presentation import NullPresenter, Presenter

FAILURE_REINFORCEMENT = -1.0


@dataclass
class EpisodeStatistics:
    """Run counters; `max_duration` only grows."""
    total_steps: int = 0
    current_duration: int = 0
    max_duration: int = 0
    failure_count: int = 0


@dataclass(frozen=True)
class StepResult:
    """Trace record of one iteration."""
    box: int
    action: int
    force: float
    next_box: int
    failed: bool
    reinforcement: float


class EpisodeController:
    """
    Owns the cart-pole state and the run statistics and drives the learner.

    Args:
        learner: Learning controller, initialized here for NUM_BOXES boxes
        presenter: Stop/view/render/notify collaborator (no-op by default)
        params: Physical parameters
        limits: Failure region
    """

    def __init__(
        self,
        learner: LearningController,
        presenter: Optional[Presenter] = None,
        params: CartPoleParams = CartPoleParams(),
        limits: TrackLimits = TrackLimits(),
    ):
        self.learner = learner
        self.presenter = presenter if presenter is not None else NullPresenter()
        self.params = params
        self.limits = limits
        self._stats = EpisodeStatistics()

        learner.initialize(NUM_BOXES)
        learner.clear_eligibility()
        self._reset_state()

    # ------------------------------------------------------------------ #
    # Read-only views                                                    #
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> CartPoleState:
        return self._state

    @property
    def box(self) -> int:
        return self._box

    @property
    def statistics(self) -> EpisodeStatistics:
        """Snapshot of the run counters."""
        return replace(self._stats)

    # ------------------------------------------------------------------ #
    # Control loop                                                       #
    # ------------------------------------------------------------------ #

    def _reset_state(self) -> None:
        self._state = CartPoleState.zero()
        self._box = quantize(self._state)

    def step_once(self) -> StepResult:
        """Run one iteration of the learning loop."""
        learner = self.learner
        stats = self._stats
        box = self._box

        action = check_action(learner.choose_action(box))
        learner.record_eligibility(box, action)

        force = action * self.params.force_mag
        self._state = step(self._state, force, self.params)
        self._box = quantize(self._state)
        failed = is_failure(self._state, self.limits)

        if failed:
            reinforcement = FAILURE_REINFORCEMENT
            stats.failure_count += 1
            stats.max_duration = max(stats.max_duration, stats.current_duration)
            stats.current_duration = 0
            self._reset_state()
            self.presenter.notify_failure(stats.failure_count, stats.max_duration)
        else:
            reinforcement = 0.0
            learner.predict_value(self._box)

        secondary = learner.compute_secondary_reinforcement(reinforcement)
        learner.apply_weight_update(secondary)

        if failed:
            learner.clear_eligibility()
        else:
            learner.decay_eligibility()

        stats.total_steps += 1
        if not failed:
            stats.current_duration += 1

        return StepResult(
            box=box,
            action=action,
            force=force,
            next_box=self._box,
            failed=failed,
            reinforcement=reinforcement,
        )

    def run(self) -> EpisodeStatistics:
        """
        Iterate until the presenter requests a stop.

        The stop flag is checked once per iteration before anything is
        mutated. On exit the running episode's duration is folded into
        `max_duration`.

        Returns:
            Final statistics snapshot
        """
        presenter = self.presenter
        while not presenter.should_stop():
            if presenter.should_render():
                presenter.render(self._state)
            self.step_once()
        return self.finish()

    def finish(self) -> EpisodeStatistics:
        """Fold the unfinished episode into `max_duration` and return a snapshot."""
        stats = self._stats
        stats.max_duration = max(stats.max_duration, stats.current_duration)
        return self.statistics
