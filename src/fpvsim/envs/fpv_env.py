"""
Gymnasium environment wrapping the flight simulation.

The policy flies with the same eight stick flags a pilot would hold; one
env step is one 60 Hz simulation tick. The waypoint mission is taken from
a :class:`~fpvsim.mission.MissionPlan` template (or scattered randomly
around the spawn point on every reset) and the reward is shaped by
horizontal progress toward the active waypoint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

import gymnasium as gym
from gymnasium import spaces

from fpvsim.types import StickInputs, VehicleState, Waypoint
from fpvsim.params import SimParams, default_params
from fpvsim.control import horizontal_distance
from fpvsim.dynamics import is_on_ground
from fpvsim.mission import MissionPlan, line_mission
from fpvsim.sim import SimulationSession


# ---------------------------------------------------------------------------
# Environment config
# ---------------------------------------------------------------------------

@dataclass
class EnvConfig:
    """Configuration for :class:`FpvEnv`.

    Episode
    -------
    max_steps : int
        Episode length in ticks.
    randomize_mission : bool
        Replace the mission with ``n_random_waypoints`` random waypoints
        on every reset.
    n_random_waypoints : int
        Number of waypoints drawn when ``randomize_mission`` is set.

    Reward coefficients
    -------------------
    k_progress : float
        Reward per metre of horizontal distance reduction.
    k_time : float
        Per-step time penalty.
    R_arrival : float
        Bonus for reaching a waypoint, paid once per entry into the
        arrival radius.
    R_crash : float
        Penalty for a hard touchdown or divergence.

    Crash thresholds
    ----------------
    crash_speed : float
        Descent rate [m/s] at touchdown above which the landing is a crash.
    pos_limit : float
        Maximum distance from the origin [m].

    Misc
    ----
    render_every : int
        Print a status line every N steps when render_mode="human".
    """

    max_steps: int = 3600               # 60 s at 60 Hz
    randomize_mission: bool = False
    n_random_waypoints: int = 3

    k_progress: float = 1.0
    k_time: float = 0.001
    R_arrival: float = 10.0
    R_crash: float = 50.0

    crash_speed: float = 5.0
    pos_limit: float = 1000.0

    render_every: int = 60


# ---------------------------------------------------------------------------
# Observation helpers
# ---------------------------------------------------------------------------

OBS_DIM = 14
# Layout:
#   [0:3]   position (x, y, z)
#   [3:6]   velocity
#   [6:8]   pitch, roll normalised by the attitude limit
#   [8:10]  sin(yaw), cos(yaw)
#   [10]    throttle
#   [11:14] vector to active waypoint (zeros without one)


def _build_obs(
    state: VehicleState,
    waypoint: Optional[Waypoint],
    params: SimParams,
) -> NDArray[np.float32]:
    """Construct a flat float32 observation vector."""
    yaw = np.radians(state.yaw)
    lim = params.attitude_limit_deg
    wp_rel = waypoint.as_array() - state.position if waypoint is not None else np.zeros(3)

    obs = np.concatenate([
        state.position,                          # 3
        state.velocity,                          # 3
        [state.pitch / lim, state.roll / lim],   # 2
        [np.sin(yaw), np.cos(yaw)],              # 2
        [state.throttle],                        # 1
        wp_rel,                                  # 3
    ]).astype(np.float32)

    return obs


def _obs_space() -> spaces.Box:
    hi = np.full(OBS_DIM, 2000.0, dtype=np.float32)  # generous bounds
    return spaces.Box(low=-hi, high=hi, dtype=np.float32)


# ---------------------------------------------------------------------------
# FpvEnv
# ---------------------------------------------------------------------------

class FpvEnv(gym.Env):
    """Gymnasium environment for stick-level waypoint flying.

    Action: ``MultiBinary(8)`` in :class:`~fpvsim.types.StickInputs` field
    order (pitch_forward, pitch_back, roll_left, roll_right, yaw_left,
    yaw_right, throttle_up, throttle_down).

    Parameters
    ----------
    mission : MissionPlan, optional
        Waypoints to fly.  Defaults to two waypoints straight ahead.
    params : SimParams, optional
        Simulation parameters.
    config : EnvConfig, optional
        Environment configuration.
    render_mode : str, optional
        ``"human"`` prints periodic status lines; ``"ansi"`` returns a string.
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 60}

    def __init__(
        self,
        mission: Optional[MissionPlan] = None,
        params: Optional[SimParams] = None,
        config: Optional[EnvConfig] = None,
        render_mode: Optional[str] = None,
    ):
        super().__init__()

        self.cfg = config or EnvConfig()
        self.params = params or default_params()
        self._mission_template = mission if mission is not None else line_mission()
        self.render_mode = render_mode

        self.observation_space = _obs_space()
        self.action_space = spaces.MultiBinary(8)

        # Internal state (populated in reset)
        self._session: Optional[SimulationSession] = None
        self._mission: Optional[MissionPlan] = None
        self._step_count: int = 0
        self._total_reward: float = 0.0
        self._wps_reached: int = 0
        self._prev_dist: float = np.inf
        self._inside_radius: bool = False

    # ------------------------------------------------------------------
    # reset
    # ------------------------------------------------------------------

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[NDArray[np.float32], Dict[str, Any]]:
        super().reset(seed=seed)

        if self.cfg.randomize_mission:
            self._mission = MissionPlan()
            spawn = VehicleState.initial(
                self.params.spawn_x, self.params.spawn_y, self.params.spawn_z,
            )
            for _ in range(self.cfg.n_random_waypoints):
                self._mission.add_random(spawn, self.np_random)
        else:
            self._mission = MissionPlan(self._mission_template.waypoints)

        self._session = SimulationSession(self.params, self._mission)
        self._session.arm()
        self._session.start()

        self._step_count = 0
        self._total_reward = 0.0
        self._wps_reached = 0
        self._prev_dist = self._dist_to_wp()
        self._inside_radius = False

        return self._get_obs(), self._info()

    # ------------------------------------------------------------------
    # step
    # ------------------------------------------------------------------

    def step(
        self, action: NDArray[np.int8],
    ) -> Tuple[NDArray[np.float32], float, bool, bool, Dict[str, Any]]:
        assert self._session is not None, "Call reset() before step()"
        session = self._session

        inputs = StickInputs.from_array(action)
        descent_rate = -session.state.vy
        was_airborne = not is_on_ground(session.state)

        session.tick(inputs)
        self._step_count += 1

        # --- Waypoint progress (horizontal, like the autopilot) ---
        dist = self._dist_to_wp()
        progress = self._prev_dist - dist if np.isfinite(self._prev_dist) else 0.0
        # One arrival per entry into the radius
        wp_reached = False
        radius = self.params.arrival_radius
        if dist >= radius:
            self._inside_radius = False
        elif not self._inside_radius:
            wp_reached = session.sequencer.advance(len(self._mission))
            if wp_reached:
                self._wps_reached += 1
                dist = self._dist_to_wp()
                self._inside_radius = dist < radius
        self._prev_dist = dist

        # --- Reward ---
        reward = self.cfg.k_progress * progress - self.cfg.k_time
        if wp_reached:
            reward += self.cfg.R_arrival

        # --- Termination / truncation ---
        terminated = False
        truncated = False
        term_reason = ""

        touchdown = was_airborne and is_on_ground(session.state)
        if touchdown and descent_rate > self.cfg.crash_speed:
            terminated = True
            reward -= self.cfg.R_crash
            term_reason = "crash"
        elif self._is_diverged():
            terminated = True
            reward -= self.cfg.R_crash
            term_reason = "diverged"

        if not terminated and self._step_count >= self.cfg.max_steps:
            truncated = True
            term_reason = "max_steps"

        self._total_reward += reward

        obs = self._get_obs()
        info = self._info()
        info["term_reason"] = term_reason

        # Render if human mode
        if self.render_mode == "human" and (
            self._step_count % self.cfg.render_every == 0
            or terminated
            or truncated
        ):
            self._render_human()

        return obs, float(reward), terminated, truncated, info

    # ------------------------------------------------------------------
    # render / close
    # ------------------------------------------------------------------

    def render(self) -> Optional[str]:
        if self.render_mode == "ansi":
            return self._render_ansi()
        elif self.render_mode == "human":
            self._render_human()
        return None

    def close(self) -> None:
        pass  # no resources to clean up

    # ==================================================================
    # Internal helpers
    # ==================================================================

    def _active_waypoint(self) -> Optional[Waypoint]:
        return self._session.sequencer.active_waypoint(self._mission)

    def _dist_to_wp(self) -> float:
        wp = self._active_waypoint()
        if wp is None:
            return np.inf
        return horizontal_distance(self._session.state, wp)

    def _get_obs(self) -> NDArray[np.float32]:
        return _build_obs(self._session.state, self._active_waypoint(), self.params)

    def _is_diverged(self) -> bool:
        s = self._session.state
        arr = s.as_array()
        if not np.all(np.isfinite(arr)):
            return True
        return bool(np.linalg.norm(s.position) > self.cfg.pos_limit)

    def _info(self) -> Dict[str, Any]:
        session = self._session
        return {
            "sim_time": session.clock.sim_time,
            "step_count": self._step_count,
            "total_reward": self._total_reward,
            "wps_reached": self._wps_reached,
            "wp_index": session.sequencer.current_index,
            "dist_to_wp": self._prev_dist,
            "position": session.state.position,
            "battery": session.telemetry.battery,
        }

    def _render_human(self) -> None:
        print(self._render_ansi())

    def _render_ansi(self) -> str:
        info = self._info()
        pos = info["position"]
        return (
            f"[step {info['step_count']:5d}]  "
            f"t={info['sim_time']:6.2f}s  "
            f"pos=({pos[0]:+7.1f}, {pos[1]:+7.1f}, {pos[2]:+7.1f})  "
            f"dist_wp={info['dist_to_wp']:.1f}m  "
            f"wp_idx={info['wp_index']}  wps={info['wps_reached']}  "
            f"R={info['total_reward']:+8.2f}"
        )
