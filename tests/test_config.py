"""Tests for parameters, the JSON/CLI config layer and logging setup."""

import json
import logging
from pathlib import Path

import pytest

from fpvsim.params import SimParams
from fpvsim.config import (
    FullConfig,
    RunConfig,
    config_from_dict,
    load_config,
    load_config_from_args,
    save_config,
)
from fpvsim.logging_config import LOGGER_NAME, setup_logging
from fpvsim.main import main


# ---- Test 1: Parameter validation --------------------------------------------

def test_default_params():
    p = SimParams()
    assert p.dt == pytest.approx(1 / 60)
    assert p.rate_hz == pytest.approx(60.0)
    assert p.hover_throttle == pytest.approx(9.8 / 15.0)


@pytest.mark.parametrize("kw", [{"dt": 0.0}, {"drag": 1.0}, {"drag": 0.0}, {"arrival_radius": -1.0}])
def test_invalid_params_raise(kw):
    with pytest.raises(ValueError):
        SimParams(**kw)


# ---- Test 2: JSON config -----------------------------------------------------

def test_save_and_load(tmp_path):
    cfg = FullConfig(sim=SimParams(drag=0.95), run=RunConfig(scenario="patrol", plot=False))
    path = tmp_path / "cfg" / "flight.json"
    save_config(cfg, path)
    assert json.loads(path.read_text())["run"]["scenario"] == "patrol"
    loaded = load_config(path)
    assert loaded.sim.drag == 0.95
    assert loaded.run.plot is False


def test_partial_dict_keeps_defaults():
    cfg = config_from_dict({"sim": {"arrival_radius": 5.0}})
    assert cfg.sim.arrival_radius == 5.0
    assert cfg.sim.dt == pytest.approx(1 / 60)
    assert cfg.run.scenario == "climb"


def test_unknown_keys_raise():
    with pytest.raises(ValueError):
        config_from_dict({"sim": {"warp_factor": 9}})
    with pytest.raises(ValueError):
        config_from_dict({"physics": {}})


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.json")


# ---- Test 3: CLI overrides ---------------------------------------------------

def test_cli_overrides():
    cfg, args = load_config_from_args(
        ["--dt", "0.01", "--no-plot", "--scenario", "patrol", "--t-final", "12"]
    )
    assert cfg.sim.dt == 0.01
    assert cfg.run.plot is False
    assert cfg.run.scenario == "patrol"
    assert cfg.run.t_final == 12.0
    assert not args.list_scenarios


def test_cli_defaults_keep_plot_on():
    cfg, _ = load_config_from_args([])
    assert cfg.run.plot is True
    assert cfg.run.scenario == "climb"


def test_cli_overrides_file(tmp_path):
    path = tmp_path / "flight.json"
    save_config(FullConfig(sim=SimParams(drag=0.9)), path)
    cfg, _ = load_config_from_args(["--config", str(path), "--drag", "0.97"])
    assert cfg.sim.drag == 0.97


def test_cli_invalid_value_raises():
    with pytest.raises(ValueError):
        load_config_from_args(["--drag", "1.5"])


# ---- Test 4: Logging setup ---------------------------------------------------

def test_setup_logging_is_idempotent():
    setup_logging("DEBUG")
    logger = setup_logging("WARNING")
    assert logger.name == LOGGER_NAME
    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING
    assert not logger.propagate


# ---- Test 5: CLI and packaging -----------------------------------------------

def test_cli_zero_duration_is_reported(capsys):
    main(["--scenario", "climb", "--t-final", "0", "--no-plot", "--log-level", "WARNING"])
    out = capsys.readouterr().out
    assert "Duration: 0.0 s" in out, "An explicit zero duration must not fall back to the default"


def test_package_readme_points_at_a_readme():
    tomllib = pytest.importorskip("tomllib")
    root = Path(__file__).resolve().parents[1]
    with open(root / "pyproject.toml", "rb") as f:
        project = tomllib.load(f)["project"]
    readme = project.get("readme")
    if readme is not None:
        assert Path(readme).stem.upper() == "README"
        assert (root / readme).exists()
