"""
controller/constant.py

Learner that always pushes the same way and never learns.
Serves as a regression baseline for the physics and the episode loop.
"""

from __future__ import annotations

from controller.base import LearningController, RIGHT, check_action


class ConstantLearner(LearningController):
    """Always returns `action`; predicts 0 and ignores reinforcement."""

    def __init__(self, action: int = RIGHT):
        self.action = check_action(action)
        self.num_boxes = 0

    def initialize(self, num_boxes: int) -> None:
        self.num_boxes = num_boxes

    def choose_action(self, box: int) -> int:
        return self.action

    def record_eligibility(self, box: int, action: int) -> None:
        pass

    def predict_value(self, box: int) -> float:
        return 0.0

    def compute_secondary_reinforcement(self, primary: float) -> float:
        return float(primary)

    def apply_weight_update(self, secondary: float) -> None:
        pass

    def decay_eligibility(self) -> None:
        pass

    def clear_eligibility(self) -> None:
        pass
