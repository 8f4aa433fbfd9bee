"""
Telemetry derived from the vehicle state.

Everything here is recomputed from scratch each tick except the battery,
which is a counter that only runs down while ticks execute.
"""

import numpy as np

from fpvsim.types import TelemetrySnapshot, VehicleState
from fpvsim.params import SimParams


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round halves away from -inf (display rounding, not banker's rounding)."""
    scale = 10.0 ** decimals
    return float(np.floor(value * scale + 0.5) / scale)


def initial_telemetry(params: SimParams) -> TelemetrySnapshot:
    """Telemetry shown before the first tick and after a reset."""
    return TelemetrySnapshot(
        altitude=int(round_half_up(params.spawn_y)),
        speed=0.0,
        battery=params.battery_initial,
        satellites=params.satellites,
        distance=int(round_half_up(np.hypot(params.spawn_x, params.spawn_z))),
    )


def derive_telemetry(
    state: VehicleState,
    previous: TelemetrySnapshot,
    params: SimParams,
) -> TelemetrySnapshot:
    """
    Compute the telemetry snapshot after one executed tick.

    Args:
        state: Vehicle state after physics
        previous: Snapshot from the previous tick (source of battery level)
        params: Simulation parameters

    Returns:
        New TelemetrySnapshot
    """
    speed = float(np.linalg.norm(state.velocity))
    return TelemetrySnapshot(
        altitude=int(round_half_up(state.y)),
        speed=round_half_up(speed, 1),
        battery=max(0.0, previous.battery - params.battery_drain),
        satellites=params.satellites,
        distance=int(round_half_up(np.hypot(state.x, state.z))),
    )
