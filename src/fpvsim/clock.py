"""
Fixed-timestep simulation clock.

The clock is a two-state machine, ``stopped <-> running``, that is
orthogonal to the vehicle's armed flag. A tick executes only while the
clock is running *and* the vehicle is armed. Every tick consumes exactly
``dt`` of simulated time regardless of wall time; when the driving loop
falls behind, simulated time simply lags (there is no catch-up).
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable, Optional

from fpvsim.types import NO_INPUT, StickInputs

if TYPE_CHECKING:
    from fpvsim.sim import SimulationSession

logger = logging.getLogger(__name__)


class SimulationClock:
    """Start/pause state plus tick and simulated-time counters.

    Parameters
    ----------
    dt : float
        Simulated seconds consumed by each executed tick.
    """

    def __init__(self, dt: float = 1.0 / 60.0):
        if dt <= 0:
            raise ValueError(f"dt must be positive, got {dt}")
        self.dt = dt
        self.running = False
        self.ticks = 0

    @property
    def sim_time(self) -> float:
        """Simulated time elapsed over executed ticks [s]."""
        return self.ticks * self.dt

    def start(self) -> None:
        if not self.running:
            logger.info("Clock started")
        self.running = True

    def pause(self) -> None:
        if self.running:
            logger.info("Clock paused at t=%.2fs", self.sim_time)
        self.running = False

    def toggle(self) -> bool:
        """Flip start/pause; returns the new running flag."""
        if self.running:
            self.pause()
        else:
            self.start()
        return self.running

    def should_tick(self, armed: bool) -> bool:
        """Gate for the per-tick update."""
        return self.running and armed

    def advance(self) -> None:
        """Count one executed tick."""
        self.ticks += 1

    def reset(self) -> None:
        """Zero the counters; the running flag is left as is."""
        self.ticks = 0


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

InputFn = Callable[[float], StickInputs]


def run_fixed_rate(
    session: SimulationSession,
    duration_s: float,
    input_fn: Optional[InputFn] = None,
    rate_hz: float = 60.0,
    realtime: bool = True,
    on_tick: Optional[Callable[[SimulationSession], None]] = None,
) -> int:
    """Drive *session* for *duration_s* of wall (or loop) time.

    One tick is requested per loop iteration. With ``realtime=True`` the
    loop sleeps to hold roughly *rate_hz*; ticks that run late are not
    made up. ``input_fn`` receives the session's simulated time and returns
    the stick snapshot for that tick.

    Args:
        session: Session to drive
        duration_s: Loop duration [s]
        input_fn: Stick snapshot provider (default: no sticks held)
        rate_hz: Target loop rate [Hz]
        realtime: Pace against the wall clock
        on_tick: Called after every loop iteration (e.g. a draw step)

    Returns:
        Number of ticks that actually executed (gated ticks excluded)
    """
    if rate_hz <= 0:
        raise ValueError(f"rate_hz must be positive, got {rate_hz}")

    period = 1.0 / rate_hz
    n_iter = int(round(duration_s * rate_hz))
    executed = 0
    next_deadline = time.perf_counter()

    for _ in range(n_iter):
        inputs = input_fn(session.clock.sim_time) if input_fn else NO_INPUT
        if session.tick(inputs):
            executed += 1
        if on_tick is not None:
            on_tick(session)

        if realtime:
            next_deadline += period
            delay = next_deadline - time.perf_counter()
            if delay > 0:
                time.sleep(delay)
            else:
                # Behind schedule: restart pacing from now
                next_deadline = time.perf_counter()

    return executed
