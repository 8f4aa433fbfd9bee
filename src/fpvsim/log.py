"""
Flight log utilities.

Provides pre-allocated in-memory logging for efficient data collection
during a flight, plus summary statistics.
"""

import numpy as np

from fpvsim.types import FlightLog, TelemetrySnapshot, VehicleState


def allocate_log(n_steps: int) -> FlightLog:
    """
    Allocate a FlightLog with pre-allocated arrays.

    This is a convenience wrapper around FlightLog.allocate().

    Args:
        n_steps: Number of ticks to allocate

    Returns:
        Pre-allocated FlightLog
    """
    return FlightLog.allocate(n_steps)


def record_step(
    log: FlightLog,
    t: float,
    state: VehicleState,
    telemetry: TelemetrySnapshot,
    wp_index: int,
    arrived: bool = False,
    grounded: bool = False,
) -> None:
    """
    Record one tick of flight data.

    This is a convenience wrapper around FlightLog.record().
    """
    log.record(t, state, telemetry, wp_index, arrived, grounded)


def compute_statistics(log: FlightLog) -> dict:
    """
    Compute summary statistics from a flight log.

    Args:
        log: Completed flight log

    Returns:
        Dictionary with statistics:
        - duration: Simulated time covered [s]
        - max_altitude / min_altitude: Altitude extremes [m]
        - max_speed / mean_speed: Speed statistics [m/s]
        - max_distance: Farthest horizontal distance from origin [m]
        - battery_final: Battery at the end of the log [%]
        - arrivals: Number of waypoint arrivals
        - ground_ticks: Number of ticks spent on the ground
    """
    if len(log.t) == 0:
        return {
            "duration": 0.0,
            "max_altitude": 0.0,
            "min_altitude": 0.0,
            "max_speed": 0.0,
            "mean_speed": 0.0,
            "max_distance": 0.0,
            "battery_final": 0.0,
            "arrivals": 0,
            "ground_ticks": 0,
        }

    speed = np.linalg.norm(log.v, axis=1)
    horiz = np.hypot(log.p[:, 0], log.p[:, 2])

    return {
        "duration": float(log.t[-1] - log.t[0]),
        "max_altitude": float(np.max(log.p[:, 1])),
        "min_altitude": float(np.min(log.p[:, 1])),
        "max_speed": float(np.max(speed)),
        "mean_speed": float(np.mean(speed)),
        "max_distance": float(np.max(horiz)),
        "battery_final": float(log.battery[-1]),
        "arrivals": int(np.count_nonzero(log.arrived)),
        "ground_ticks": int(np.count_nonzero(log.grounded)),
    }


def print_statistics(log: FlightLog, name: str = "Flight") -> None:
    """
    Print summary statistics to console.

    Args:
        log: Completed flight log
        name: Name of the flight for display
    """
    stats = compute_statistics(log)

    print(f"\n{name} Statistics:")
    print(f"  Duration:        {stats['duration']:.2f} s")
    print(f"  Altitude range:  {stats['min_altitude']:.1f} .. {stats['max_altitude']:.1f} m")
    print(f"  Max speed:       {stats['max_speed']:.2f} m/s")
    print(f"  Mean speed:      {stats['mean_speed']:.2f} m/s")
    print(f"  Max distance:    {stats['max_distance']:.1f} m")
    print(f"  Battery left:    {stats['battery_final']:.2f} %")
    print(f"  WP arrivals:     {stats['arrivals']}")
    print(f"  Ticks on ground: {stats['ground_ticks']}")
