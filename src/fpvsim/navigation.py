"""
Waypoint sequencing for the autopilot.

The waypoint list itself belongs to the mission planner and may grow or
be cleared between ticks; the sequencer only keeps the cursor into it.
Sequencing loops forever: after the last waypoint the cursor wraps to 0.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from fpvsim.types import Waypoint

logger = logging.getLogger(__name__)


@dataclass
class WaypointSequencer:
    """Navigation cursor over an externally owned waypoint list.

    Attributes
    ----------
    current_index : int
        Index of the active waypoint.
    arrivals : int
        Number of arrivals since the last reset.  With a single waypoint
        the index wraps onto itself, so this is the only visible trace of
        an arrival.
    """

    current_index: int = 0
    arrivals: int = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def active_waypoint(self, waypoints: Sequence[Waypoint]) -> Optional[Waypoint]:
        """Return the waypoint under the cursor, or ``None`` if the list is empty.

        If the list shrank since the cursor last moved, the index is wrapped
        back into range first.
        """
        n = len(waypoints)
        if n == 0:
            return None
        if self.current_index >= n:
            self.current_index %= n
        return waypoints[self.current_index]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def advance(self, n_waypoints: int) -> bool:
        """Handle an arrival signal.

        Moves the cursor to ``(index + 1) % n_waypoints``.  Returns ``False``
        and leaves the cursor alone when there are no waypoints.
        """
        if n_waypoints <= 0:
            return False
        prev = self.current_index
        self.current_index = (self.current_index + 1) % n_waypoints
        self.arrivals += 1
        logger.info(
            "Reached waypoint %d, next is %d of %d",
            prev + 1, self.current_index + 1, n_waypoints,
        )
        return True

    def reset(self) -> None:
        """Return the cursor to the first waypoint."""
        self.current_index = 0
        self.arrivals = 0

    def copy(self) -> WaypointSequencer:
        return WaypointSequencer(
            current_index=self.current_index,
            arrivals=self.arrivals,
        )
