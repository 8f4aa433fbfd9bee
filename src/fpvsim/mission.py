"""
Mission planning: ownership of the waypoint list.

The simulation only reads waypoints; adding and clearing them happens
here, between ticks.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional, Sequence

import numpy as np

from fpvsim.types import VehicleState, Waypoint

logger = logging.getLogger(__name__)


class MissionPlan:
    """Ordered, mutable list of :class:`Waypoint` objects."""

    def __init__(self, waypoints: Optional[Sequence[Waypoint]] = None):
        self._waypoints: list[Waypoint] = list(waypoints or [])

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._waypoints)

    def __getitem__(self, idx: int) -> Waypoint:
        return self._waypoints[idx]

    def __iter__(self) -> Iterator[Waypoint]:
        return iter(self._waypoints)

    @property
    def waypoints(self) -> tuple[Waypoint, ...]:
        """Immutable snapshot of the current list."""
        return tuple(self._waypoints)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def add(self, waypoint: Waypoint) -> int:
        """Append *waypoint*; returns its index."""
        self._waypoints.append(waypoint)
        logger.info(
            "Added waypoint %d at (%.1f, %.1f, %.1f)",
            len(self._waypoints), waypoint.x, waypoint.y, waypoint.z,
        )
        return len(self._waypoints) - 1

    def add_xyz(self, x: float, y: float, z: float) -> int:
        return self.add(Waypoint(float(x), float(y), float(z)))

    def add_random(
        self,
        state: VehicleState,
        rng: np.random.Generator,
        spread: float = 50.0,
        alt_range: tuple[float, float] = (50.0, 100.0),
    ) -> int:
        """Append a waypoint scattered around the vehicle.

        Horizontal position is uniform within ``±spread`` of the vehicle,
        altitude uniform in ``alt_range``.
        """
        return self.add(Waypoint(
            x=float(state.x + rng.uniform(-spread, spread)),
            y=float(rng.uniform(*alt_range)),
            z=float(state.z + rng.uniform(-spread, spread)),
        ))

    def clear(self) -> None:
        if self._waypoints:
            logger.info("Cleared %d waypoints", len(self._waypoints))
        self._waypoints.clear()


# ---------------------------------------------------------------------------
# Mission constructors
# ---------------------------------------------------------------------------

def line_mission(
    length: float = 100.0,
    altitude: float = 50.0,
    n_pts: int = 2,
    x: float = 0.0,
) -> MissionPlan:
    """Evenly spaced waypoints along +z at a fixed altitude.

    The first waypoint sits ``length / n_pts`` ahead of the origin so that
    the vehicle does not start inside it.
    """
    zs = np.linspace(length / n_pts, length, n_pts)
    return MissionPlan([Waypoint(float(x), float(altitude), float(z)) for z in zs])


def box_mission(size: float = 60.0, altitude: float = 50.0) -> MissionPlan:
    """Four corners of a square in the x/z plane, starting straight ahead."""
    corners = np.array([
        [0.0, size],
        [size, size],
        [size, 0.0],
        [0.0, 0.0],
    ])
    return MissionPlan([
        Waypoint(float(cx), float(altitude), float(cz)) for cx, cz in corners
    ])
