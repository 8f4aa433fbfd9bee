"""
Attitude / throttle control law.

Turns the active control source into updated attitude and throttle
targets for one tick:

* **manual** - held sticks nudge pitch, roll, yaw and throttle by fixed
  steps, then pitch and roll self-level by a constant decay factor.
* **autonomous** - a proportional heading controller steers toward the
  active waypoint at constant cruise throttle, banking in proportion to
  the heading error and using pitch as a climb/descend proxy.

All functions are pure: the input state is never mutated. Nothing here
fails; out-of-range values are clamped.
"""

from typing import NamedTuple, Optional

import numpy as np

from fpvsim.types import (
    AUTONOMOUS,
    FLIGHT_MODES,
    MANUAL,
    StickInputs,
    VehicleState,
    Waypoint,
)
from fpvsim.params import SimParams


class ControlOutput(NamedTuple):
    """Result of one control-law evaluation."""
    state: VehicleState   # state with updated attitude / throttle
    arrived: bool         # autopilot reached the active waypoint this tick


def _clamp(value: float, lo: float, hi: float) -> float:
    return float(np.clip(value, lo, hi))


# ---------------------------------------------------------------------------
# Geometry helpers
# ---------------------------------------------------------------------------

def horizontal_offset(state: VehicleState, waypoint: Waypoint) -> tuple[float, float]:
    """Horizontal vector (dx, dz) from the vehicle to *waypoint* [m]."""
    return waypoint.x - state.x, waypoint.z - state.z


def horizontal_distance(state: VehicleState, waypoint: Waypoint) -> float:
    """Distance from the vehicle to *waypoint* in the x/z plane [m]."""
    dx, dz = horizontal_offset(state, waypoint)
    return float(np.hypot(dx, dz))


def heading_error(target_yaw: float, yaw: float) -> float:
    """
    Signed shortest angle from *yaw* to *target_yaw* [deg].

    Result lies in [-180, 180). The running yaw value may be any size.
    """
    return ((target_yaw - yaw + 540.0) % 360.0) - 180.0


# ---------------------------------------------------------------------------
# Control laws
# ---------------------------------------------------------------------------

def manual_control(
    state: VehicleState,
    inputs: StickInputs,
    params: SimParams,
) -> VehicleState:
    """
    Apply one tick of manual stick input followed by self-levelling.

    Pitch-forward / roll-left / yaw-left decrease their axis, the opposite
    sticks increase it. Pitch and roll are clamped to the attitude limit,
    throttle to [0, 1]; yaw is unbounded. Pitch and roll are then damped by
    ``params.stabilization`` whether or not a stick is held.

    Args:
        state: Current state
        inputs: Held sticks at tick start
        params: Simulation parameters

    Returns:
        New state with updated attitude and throttle
    """
    s = state.copy()
    step = params.attitude_step_deg
    lim = params.attitude_limit_deg

    # Each nudge saturates on its own, so opposing sticks held at a limit
    # do not cancel exactly.
    if inputs.pitch_forward:
        s.pitch = max(s.pitch - step, -lim)
    if inputs.pitch_back:
        s.pitch = min(s.pitch + step, lim)
    if inputs.roll_left:
        s.roll = max(s.roll - step, -lim)
    if inputs.roll_right:
        s.roll = min(s.roll + step, lim)
    if inputs.yaw_left:
        s.yaw -= params.yaw_step_deg
    if inputs.yaw_right:
        s.yaw += params.yaw_step_deg
    if inputs.throttle_up:
        s.throttle = min(s.throttle + params.throttle_step, 1.0)
    if inputs.throttle_down:
        s.throttle = max(s.throttle - params.throttle_step, 0.0)

    # Out-of-range incoming values
    s.pitch = _clamp(s.pitch, -lim, lim)
    s.roll = _clamp(s.roll, -lim, lim)
    s.throttle = _clamp(s.throttle, 0.0, 1.0)

    # Self-levelling, after the stick step
    s.pitch *= params.stabilization
    s.roll *= params.stabilization

    return s


def autonomous_control(
    state: VehicleState,
    waypoint: Waypoint,
    params: SimParams,
) -> ControlOutput:
    """
    Steer toward *waypoint* for one tick.

    Inside ``params.arrival_radius`` (horizontal) the attitude is left
    untouched and arrival is signalled. Otherwise:

        target_yaw = atan2(dx, dz)                    [deg]
        yaw       += yaw_gain * heading_error
        pitch      = clamp(-pitch_gain * dy, ±auto_limit)
        roll       = clamp(roll_gain * heading_error, ±auto_limit)
        throttle   = cruise_throttle

    Args:
        state: Current state
        waypoint: Active navigation target
        params: Simulation parameters

    Returns:
        ControlOutput(state, arrived)
    """
    dx, dz = horizontal_offset(state, waypoint)
    dy = waypoint.y - state.y

    if np.hypot(dx, dz) < params.arrival_radius:
        return ControlOutput(state.copy(), True)

    s = state.copy()
    lim = params.auto_attitude_limit_deg

    target_yaw = float(np.degrees(np.arctan2(dx, dz)))
    yaw_diff = heading_error(target_yaw, s.yaw)

    s.yaw += yaw_diff * params.yaw_gain
    s.pitch = _clamp(-dy * params.pitch_gain, -lim, lim)
    s.roll = _clamp(yaw_diff * params.roll_gain, -lim, lim)
    s.throttle = _clamp(params.cruise_throttle, 0.0, 1.0)

    return ControlOutput(s, False)


def apply_control(
    state: VehicleState,
    mode: str,
    inputs: StickInputs,
    waypoint: Optional[Waypoint],
    params: SimParams,
) -> ControlOutput:
    """
    Dispatch to the control law for *mode*.

    Autonomous mode without a waypoint leaves attitude and throttle as they
    are for this tick.

    Raises:
        ValueError: If *mode* is not a known flight mode.
    """
    if mode == MANUAL:
        return ControlOutput(manual_control(state, inputs, params), False)
    if mode == AUTONOMOUS:
        if waypoint is None:
            return ControlOutput(state.copy(), False)
        return autonomous_control(state, waypoint, params)
    raise ValueError(f"Unknown flight mode '{mode}'. Choose from {list(FLIGHT_MODES)}")
