"""
lib/config.py

YAML run configuration.

    simulation:
      steps: 100000        # iterations before the runner asks to stop
      render_every: 0      # record every N-th state (0 = never)
      learner: ase         # 'ase' | 'constant'
      constant_action: 1   # push direction for the constant learner
    learner:
      alpha: 1000.0
      beta: 0.5
      gamma: 0.95
      lambda_w: 0.9
      lambda_v: 0.8
      seed: 0
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
import os
from typing import Any, Mapping, Optional

import yaml

from controller.ase_ace import LearnerParams

LEARNERS = ("ase", "constant")


@dataclass
class SimulationConfig:
    """Loop-level settings for a run."""
    steps: int = 100_000
    render_every: int = 0
    learner: str = "ase"
    constant_action: int = 1

    def __post_init__(self):
        if self.steps < 0:
            raise ValueError(f"steps must be non-negative, got {self.steps}")
        if self.render_every < 0:
            raise ValueError(f"render_every must be non-negative, got {self.render_every}")
        if self.learner not in LEARNERS:
            raise ValueError(f"Unknown learner '{self.learner}'. Use one of {LEARNERS}")
        if self.constant_action not in (-1, 1):
            raise ValueError(f"constant_action must be -1 or +1, got {self.constant_action}")


@dataclass
class RunConfig:
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    learner: LearnerParams = field(default_factory=LearnerParams)


def _build(cls, section: Optional[Mapping[str, Any]], name: str):
    section = dict(section or {})
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown keys in '{name}' section: {unknown}")
    return cls(**section)


def parse_config(raw: Optional[Mapping[str, Any]]) -> RunConfig:
    """Build a RunConfig from an already-loaded mapping."""
    raw = dict(raw or {})
    unknown = sorted(set(raw) - {"simulation", "learner"})
    if unknown:
        raise ValueError(f"Unknown config sections: {unknown}")
    return RunConfig(
        simulation=_build(SimulationConfig, raw.get("simulation"), "simulation"),
        learner=_build(LearnerParams, raw.get("learner"), "learner"),
    )


def load_config(path: Optional[str] = None) -> RunConfig:
    """Load run configuration from YAML (defaults to $CONFIG_PATH or config.yaml)."""
    path = path or os.environ.get("CONFIG_PATH", "config.yaml")
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file '{path}' not found")

    with open(path, 'r') as f:
        return parse_config(yaml.safe_load(f))
