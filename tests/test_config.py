"""Tests for YAML run configuration and the command-line runner"""
from pathlib import Path

import pytest
from controller.ase_ace import AseAceLearner, LearnerParams
from controller.constant import ConstantLearner
from lib.config import RunConfig, SimulationConfig, load_config, parse_config

import run_simulation


def test_default_config_file(monkeypatch):
    """The shipped config.yaml parses to the defaults"""
    monkeypatch.chdir(Path(__file__).resolve().parents[1])
    config = load_config("config.yaml")
    assert config.simulation == SimulationConfig()
    assert config.learner == LearnerParams()


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "run.yaml"
    path.write_text("simulation:\n  steps: 12\n  learner: constant\nlearner:\n  seed: 4\n")
    monkeypatch.setenv("CONFIG_PATH", str(path))

    config = load_config()
    assert config.simulation.steps == 12
    assert config.simulation.learner == "constant"
    assert config.learner.seed == 4
    assert config.learner.alpha == 1000.0


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError, match="not found"):
        load_config(str(tmp_path / "missing.yaml"))


def test_empty_config_uses_defaults():
    assert parse_config(None) == RunConfig()


@pytest.mark.parametrize("raw, match", [
    ({"simulation": {"stpes": 10}}, "Unknown keys in 'simulation'"),
    ({"learner": {"alpah": 1.0}}, "Unknown keys in 'learner'"),
    ({"physics": {}}, "Unknown config sections"),
    ({"simulation": {"learner": "dqn"}}, "Unknown learner"),
    ({"simulation": {"steps": -1}}, "steps must be non-negative"),
    ({"simulation": {"constant_action": 0}}, "constant_action"),
])
def test_invalid_config(raw, match):
    with pytest.raises(ValueError, match=match):
        parse_config(raw)


def test_build_learner():
    assert isinstance(run_simulation.build_learner(RunConfig()), AseAceLearner)
    config = parse_config({"simulation": {"learner": "constant", "constant_action": -1}})
    learner = run_simulation.build_learner(config)
    assert isinstance(learner, ConstantLearner)
    assert learner.action == -1


def test_run_stops_after_configured_steps():
    config = parse_config({"simulation": {"steps": 200, "learner": "constant"}})
    stats = run_simulation.run(config)
    assert stats.total_steps == 200
    assert stats.failure_count > 0
    assert stats.max_duration > 0


def test_main_prints_summary(tmp_path, capsys):
    path = tmp_path / "run.yaml"
    path.write_text("simulation:\n  steps: 50\n")
    run_simulation.main(["--config", str(path), "--learner", "constant", "--steps", "30"])
    out = capsys.readouterr().out
    assert "RUN SUMMARY" in out
    assert "Total steps:      30" in out
    assert "Failures:" in out and "Max duration:" in out
