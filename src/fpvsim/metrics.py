"""
Evaluation metrics for flight logs.

All functions take a ``FlightLog`` and return scalar or dict values
suitable for tabulation.
"""

from __future__ import annotations

import numpy as np

from fpvsim.types import FlightLog


def max_speed(log: FlightLog) -> float:
    """Maximum speed over the flight [m/s]."""
    if len(log.t) == 0:
        return 0.0
    return float(np.max(np.linalg.norm(log.v, axis=1)))


def min_altitude(log: FlightLog) -> float:
    """Lowest altitude reached [m]."""
    if len(log.t) == 0:
        return 0.0
    return float(np.min(log.p[:, 1]))


def path_length(log: FlightLog) -> float:
    """Total 3-D distance flown [m]."""
    if len(log.t) < 2:
        return 0.0
    return float(np.sum(np.linalg.norm(np.diff(log.p, axis=0), axis=1)))


def ground_contact_count(log: FlightLog) -> int:
    """Number of touchdowns (airborne -> on ground transitions)."""
    g = log.grounded.astype(bool)
    if len(g) < 2:
        return 0
    return int(np.count_nonzero(g[1:] & ~g[:-1]))


def waypoints_reached(log: FlightLog) -> int:
    """Number of waypoint arrivals recorded."""
    return int(np.count_nonzero(log.arrived))


def battery_used(log: FlightLog) -> float:
    """Battery consumed between the first and last entry [%]."""
    if len(log.t) == 0:
        return 0.0
    return float(log.battery[0] - log.battery[-1])


def detect_divergence(log: FlightLog, speed_limit: float = 200.0) -> bool:
    """Detect if the simulation blew up.

    Checks for:
      - NaN / inf in any state array
      - speed above *speed_limit* [m/s]
      - negative altitude (ground clamp violated)
    """
    for arr in (log.p, log.v, log.att, log.throttle):
        if np.any(~np.isfinite(arr)):
            return True

    if np.any(np.linalg.norm(log.v, axis=1) > speed_limit):
        return True

    if np.any(log.p[:, 1] < 0.0):
        return True

    return False


def compute_all_metrics(log: FlightLog) -> dict[str, float]:
    """Compute all metrics and return a flat dict.

    The ``diverged`` key is 1.0 if divergence was detected, 0.0 otherwise.
    """
    diverged = detect_divergence(log)

    return {
        "max_speed": max_speed(log),
        "min_altitude": min_altitude(log),
        "path_length": path_length(log),
        "ground_contacts": float(ground_contact_count(log)),
        "waypoints_reached": float(waypoints_reached(log)),
        "battery_used": battery_used(log),
        "diverged": 1.0 if diverged else 0.0,
    }
