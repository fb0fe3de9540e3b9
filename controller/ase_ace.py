"""
controller/ase_ace.py

Adaptive search element (ASE) + adaptive critic element (ACE) learner
over the 162-box partition (Barto, Sutton & Anderson, 1983).

The ASE holds one action weight per box and picks the push direction
stochastically; the ACE holds one value per box and turns the sparse
failure signal into a per-step temporal-difference reinforcement.
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from controller.base import LearningController, LEFT, RIGHT, check_action


@dataclass(frozen=True)
class LearnerParams:
    """ASE/ACE learning parameters."""
    alpha: float = 1000.0   # ASE learning rate
    beta: float = 0.5       # ACE learning rate
    gamma: float = 0.95     # Discount for the critic's prediction
    lambda_w: float = 0.9   # ASE trace decay
    lambda_v: float = 0.8   # ACE trace decay
    seed: int = 0           # Exploration noise seed


class AseAceLearner(LearningController):
    """Box-based actor-critic learner with eligibility traces."""

    def __init__(self, params: LearnerParams = LearnerParams()):
        self.params = params
        self.num_boxes = 0
        self.w: np.ndarray | None = None     # action weights
        self.v: np.ndarray | None = None     # critic values
        self.e: np.ndarray | None = None     # action traces
        self.xbar: np.ndarray | None = None  # critic traces
        self._rng = np.random.default_rng(params.seed)
        self._old_prediction = 0.0
        self._prediction: float | None = None

    # ------------------------------------------------------------------ #
    # Internals                                                          #
    # ------------------------------------------------------------------ #

    def _require_tables(self) -> None:
        if self.w is None:
            raise RuntimeError("Learner tables are not allocated; call initialize() first")

    def _check_box(self, box: int) -> int:
        self._require_tables()
        if not 0 <= box < self.num_boxes:
            raise IndexError(f"Box {box} out of range [0, {self.num_boxes})")
        return int(box)

    def push_right_probability(self, box: int) -> float:
        """Probability of choosing +1 in `box` (logistic of the weight)."""
        box = self._check_box(box)
        s = np.clip(self.w[box], -50.0, 50.0)
        return float(1.0 / (1.0 + np.exp(-s)))

    # ------------------------------------------------------------------ #
    # LearningController                                                 #
    # ------------------------------------------------------------------ #

    def initialize(self, num_boxes: int) -> None:
        if num_boxes <= 0:
            raise ValueError(f"num_boxes must be positive, got {num_boxes}")
        self.num_boxes = int(num_boxes)
        self.w = np.zeros(num_boxes)
        self.v = np.zeros(num_boxes)
        self.e = np.zeros(num_boxes)
        self.xbar = np.zeros(num_boxes)
        self._old_prediction = 0.0
        self._prediction = None

    def choose_action(self, box: int) -> int:
        prob = self.push_right_probability(box)
        self._old_prediction = float(self.v[box])
        return RIGHT if self._rng.random() < prob else LEFT

    def record_eligibility(self, box: int, action: int) -> None:
        box = self._check_box(box)
        action = check_action(action)
        p = self.params
        self.e[box] += (1.0 - p.lambda_w) * 0.5 * action
        self.xbar[box] += 1.0 - p.lambda_v

    def predict_value(self, box: int) -> float:
        box = self._check_box(box)
        self._prediction = float(self.v[box])
        return self._prediction

    def compute_secondary_reinforcement(self, primary: float) -> float:
        # No prediction this step means the episode ended: p = 0
        p = 0.0 if self._prediction is None else self._prediction
        self._prediction = None
        return float(primary) + self.params.gamma * p - self._old_prediction

    def apply_weight_update(self, secondary: float) -> None:
        self._require_tables()
        self.w += self.params.alpha * secondary * self.e
        self.v += self.params.beta * secondary * self.xbar

    def decay_eligibility(self) -> None:
        self._require_tables()
        self.e *= self.params.lambda_w
        self.xbar *= self.params.lambda_v

    def clear_eligibility(self) -> None:
        self._require_tables()
        self.e[:] = 0.0
        self.xbar[:] = 0.0
