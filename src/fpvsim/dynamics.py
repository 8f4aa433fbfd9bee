"""
Translational flight dynamics.

Simplified, decoupled model: attitude is commanded directly by the control
law (no rotational dynamics) and only the translational state is
integrated, with forward Euler on a fixed step.
"""

import numpy as np

from fpvsim.types import VehicleState
from fpvsim.params import SimParams


def step_physics(
    state: VehicleState,
    params: SimParams,
    dt: float | None = None,
) -> VehicleState:
    """
    Advance position and velocity by one timestep.

    Order of operations:
        1. thrust = throttle * thrust_coeff
        2. vy += (thrust - g) * dt
        3. vx += sin(roll)  * thrust * lateral_gain * dt
           vz += cos(pitch) * thrust * lateral_gain * dt
        4. (vx, vz) rotated by yaw -> world-frame horizontal velocity
        5. position integrated with the rotated velocity
        6. drag multiplies the *unrotated* vx, vy, vz
        7. ground contact: y < 0 -> y = 0, vy = 0, throttle = 0

    The stored vx/vz are never converted back from the rotated frame, so
    body-frame acceleration and world-frame velocity share one variable
    across ticks. Separate body and world velocities would be needed for
    a physically consistent model.

    Args:
        state: State with attitude/throttle already updated for this tick
        params: Simulation parameters
        dt: Timestep [s] (default: params.dt)

    Returns:
        New state
    """
    if dt is None:
        dt = params.dt

    s = state.copy()

    pitch = np.radians(s.pitch)
    roll = np.radians(s.roll)
    yaw = np.radians(s.yaw)

    thrust = s.throttle * params.thrust_coeff
    gravity = -params.g

    s.vy += (thrust + gravity) * dt
    s.vx += float(np.sin(roll)) * thrust * params.lateral_gain * dt
    s.vz += float(np.cos(pitch)) * thrust * params.lateral_gain * dt

    # Rotate horizontal velocity by yaw
    c, sn = float(np.cos(yaw)), float(np.sin(yaw))
    vx_world = s.vx * c - s.vz * sn
    vz_world = s.vx * sn + s.vz * c

    s.x += vx_world * dt
    s.y += s.vy * dt
    s.z += vz_world * dt

    # Drag
    s.vx *= params.drag
    s.vy *= params.drag
    s.vz *= params.drag

    # Ground contact: cut-off, not a fault
    if s.y < 0.0:
        s.y = 0.0
        s.vy = 0.0
        s.throttle = 0.0

    return s


def is_on_ground(state: VehicleState) -> bool:
    """True if the vehicle is resting on the ground plane."""
    return state.y <= 0.0
