"""
controller/base.py

Base class for box-based learning controllers.
The episode loop talks to a learner only through these methods.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

LEFT = -1
RIGHT = 1
ACTIONS = (LEFT, RIGHT)


def check_action(action: int) -> int:
    """Return `action` if it is -1 or +1, raise ValueError otherwise."""
    if action not in ACTIONS:
        raise ValueError(f"Action must be -1 or +1, got {action!r}")
    return int(action)


class LearningController(ABC):
    """
    Abstract learner driven by the episode loop.

    Call order within one iteration:
        choose_action -> record_eligibility -> [predict_value] ->
        compute_secondary_reinforcement -> apply_weight_update ->
        decay_eligibility | clear_eligibility

    `predict_value` is skipped on failure steps, where the prediction
    counts as zero.
    """

    @abstractmethod
    def initialize(self, num_boxes: int) -> None:
        """Allocate tables for `num_boxes` boxes."""

    @abstractmethod
    def choose_action(self, box: int) -> int:
        """Return -1 (push left) or +1 (push right) for `box`."""

    @abstractmethod
    def record_eligibility(self, box: int, action: int) -> None: ...

    @abstractmethod
    def predict_value(self, box: int) -> float: ...

    @abstractmethod
    def compute_secondary_reinforcement(self, primary: float) -> float: ...

    @abstractmethod
    def apply_weight_update(self, secondary: float) -> None: ...

    @abstractmethod
    def decay_eligibility(self) -> None: ...

    @abstractmethod
    def clear_eligibility(self) -> None: ...
