"""Tests for the gymnasium environment."""

import numpy as np
import pytest

from fpvsim.types import Waypoint
from fpvsim.mission import MissionPlan
from fpvsim.envs import EnvConfig, FpvEnv
from fpvsim.envs.fpv_env import OBS_DIM


ZERO = np.zeros(8, dtype=np.int8)


# ---- Test 1: Reset and spaces ------------------------------------------------

def test_reset_observation():
    env = FpvEnv()
    obs, info = env.reset(seed=0)
    assert obs.shape == (OBS_DIM,)
    assert obs.dtype == np.float32
    assert env.observation_space.contains(obs)
    assert info["wp_index"] == 0
    assert info["battery"] == 100.0
    # Default mission: first waypoint 50 m straight ahead
    assert obs[11:14] == pytest.approx([0.0, 0.0, 50.0])


def test_step_returns_gym_tuple():
    env = FpvEnv()
    env.reset(seed=0)
    obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
    assert obs.shape == (OBS_DIM,)
    assert isinstance(reward, float)
    assert not terminated and not truncated
    assert info["step_count"] == 1


# ---- Test 2: Termination -----------------------------------------------------

def test_free_fall_ends_in_crash():
    env = FpvEnv()
    env.reset(seed=0)
    for _ in range(1000):
        _, reward, terminated, truncated, info = env.step(ZERO)
        if terminated or truncated:
            break
    assert terminated, "Falling from 50 m at zero throttle should crash"
    assert info["term_reason"] == "crash"
    assert reward < -40.0


def test_truncation_at_max_steps():
    env = FpvEnv(config=EnvConfig(max_steps=10))
    env.reset(seed=0)
    for _ in range(10):
        _, _, terminated, truncated, info = env.step(ZERO)
        assert not terminated
    assert truncated
    assert info["term_reason"] == "max_steps"


# ---- Test 3: Waypoint reward -------------------------------------------------

def test_arrival_bonus():
    env = FpvEnv(mission=MissionPlan([Waypoint(0.0, 50.0, 5.0), Waypoint(0.0, 50.0, 90.0)]))
    env.reset(seed=0)
    _, reward, _, _, info = env.step(ZERO)
    assert info["wps_reached"] == 1
    assert info["wp_index"] == 1
    assert reward > 5.0


def test_arrival_paid_once_while_inside_radius():
    env = FpvEnv(mission=MissionPlan([Waypoint(0.0, 50.0, 5.0)]))
    env.reset(seed=0)
    up = np.zeros(8, dtype=np.int8)
    up[6] = 1  # throttle_up
    for _ in range(60):
        _, _, terminated, truncated, info = env.step(up)
        assert not terminated and not truncated
    assert info["wps_reached"] == 1, "Hovering on a waypoint must not farm arrivals"
    assert info["total_reward"] < 2 * EnvConfig().R_arrival


def test_empty_mission_is_allowed():
    env = FpvEnv(mission=MissionPlan())
    obs, info = env.reset(seed=0)
    assert np.all(obs[11:14] == 0.0)
    _, reward, _, _, _ = env.step(ZERO)
    assert np.isfinite(reward)


def test_random_mission_is_seeded():
    env = FpvEnv(config=EnvConfig(randomize_mission=True, n_random_waypoints=3))
    a, _ = env.reset(seed=123)
    b, _ = env.reset(seed=123)
    assert np.array_equal(a, b)


# ---- Test 4: Rendering -------------------------------------------------------

def test_ansi_render():
    env = FpvEnv(render_mode="ansi")
    env.reset(seed=0)
    env.step(ZERO)
    text = env.render()
    assert "step" in text and "wp_idx=0" in text


def test_step_before_reset_raises():
    with pytest.raises(AssertionError):
        FpvEnv().step(ZERO)
