"""
Simulation session and per-tick pipeline.

The pipeline for one tick is:
    1. Control law      ->  attitude / throttle for this tick
    2. Waypoint cursor  ->  advanced if the autopilot signalled arrival
    3. Physics step     ->  position / velocity, ground contact
    4. Telemetry        ->  read-only snapshot for displays

``sim_step`` is the pure transition. ``SimulationSession`` owns the one
mutable vehicle state plus the cursor, clock, mode and latest telemetry,
and publishes a ``SessionSnapshot`` for rendering collaborators to read
at whatever rate they draw.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Sequence

import numpy as np

from fpvsim.types import (
    AUTONOMOUS,
    FLIGHT_MODES,
    MANUAL,
    NO_INPUT,
    FlightLog,
    StickInputs,
    TelemetrySnapshot,
    VehicleState,
    Waypoint,
)
from fpvsim.params import SimParams, default_params
from fpvsim.control import apply_control
from fpvsim.dynamics import step_physics, is_on_ground
from fpvsim.navigation import WaypointSequencer
from fpvsim.telemetry import derive_telemetry, initial_telemetry
from fpvsim.clock import SimulationClock
from fpvsim.mission import MissionPlan
from fpvsim.log import allocate_log, record_step

logger = logging.getLogger(__name__)


class StepResult(NamedTuple):
    """Outcome of one pure simulation tick."""
    state: VehicleState
    sequencer: WaypointSequencer
    arrived: bool    # cursor advanced this tick
    grounded: bool   # vehicle on the ground after physics


def sim_step(
    state: VehicleState,
    sequencer: WaypointSequencer,
    inputs: StickInputs,
    mode: str,
    waypoints: Sequence[Waypoint],
    params: SimParams,
) -> StepResult:
    """
    Advance the simulation by one fixed tick of ``params.dt``.

    Neither *state* nor *sequencer* is mutated. A disarmed state is
    returned unchanged.

    Args:
        state: Vehicle state at tick start
        sequencer: Navigation cursor at tick start
        inputs: Stick snapshot taken at tick start
        mode: ``"manual"`` or ``"autonomous"``
        waypoints: Waypoint list, not modified during the tick
        params: Simulation parameters

    Returns:
        StepResult(state, sequencer, arrived, grounded)
    """
    seq = sequencer.copy()
    if not state.armed:
        return StepResult(state.copy(), seq, False, is_on_ground(state))

    waypoint = seq.active_waypoint(waypoints) if mode == AUTONOMOUS else None
    ctrl = apply_control(state, mode, inputs, waypoint, params)

    arrived = False
    if ctrl.arrived:
        arrived = seq.advance(len(waypoints))

    new_state = step_physics(ctrl.state, params)
    return StepResult(new_state, seq, arrived, is_on_ground(new_state))


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view published after each tick."""

    state: VehicleState
    telemetry: TelemetrySnapshot
    mode: str
    armed: bool
    running: bool
    waypoint_index: int
    arrivals: int
    tick: int
    sim_time: float


class SimulationSession:
    """Owner of one simulated vehicle and its flight-control state.

    Parameters
    ----------
    params : SimParams, optional
        Simulation constants.  Defaults to :func:`default_params`.
    mission : MissionPlan, optional
        Waypoint list shared with the mission planner.  A new empty plan is
        created if omitted.
    """

    def __init__(
        self,
        params: Optional[SimParams] = None,
        mission: Optional[MissionPlan] = None,
    ):
        self.params = params or default_params()
        self.mission = mission if mission is not None else MissionPlan()
        self.clock = SimulationClock(self.params.dt)
        self.sequencer = WaypointSequencer()
        self.mode = MANUAL
        self.state = self._initial_state()
        self.telemetry = initial_telemetry(self.params)

    def _initial_state(self) -> VehicleState:
        p = self.params
        return VehicleState.initial(p.spawn_x, p.spawn_y, p.spawn_z)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def armed(self) -> bool:
        return self.state.armed

    @property
    def running(self) -> bool:
        return self.clock.running

    # ------------------------------------------------------------------
    # External commands
    # ------------------------------------------------------------------

    def arm(self) -> None:
        if not self.state.armed:
            logger.info("Armed")
        self.state.armed = True

    def disarm(self) -> None:
        if self.state.armed:
            logger.info("Disarmed")
        self.state.armed = False

    def toggle_arm(self) -> bool:
        """Arm/disarm toggle event; returns the new armed flag."""
        if self.state.armed:
            self.disarm()
        else:
            self.arm()
        return self.state.armed

    def start(self) -> None:
        self.clock.start()

    def pause(self) -> None:
        self.clock.pause()

    def toggle_running(self) -> bool:
        return self.clock.toggle()

    def set_mode(self, mode: str) -> bool:
        """Select the control source.

        Switching to autonomous mode with no waypoints is refused: the mode
        is left unchanged and ``False`` is returned.

        Raises:
            ValueError: If *mode* is not a known flight mode.
        """
        if mode not in FLIGHT_MODES:
            raise ValueError(f"Unknown flight mode '{mode}'. Choose from {list(FLIGHT_MODES)}")
        if mode == AUTONOMOUS and len(self.mission) == 0:
            logger.warning("Autonomous mode needs at least one waypoint; staying in %s", self.mode)
            return False
        if mode != self.mode:
            logger.info("Mode %s -> %s", self.mode, mode)
        self.mode = mode
        return True

    def reset(self) -> None:
        """Restore the power-on vehicle state, cursor and battery.

        The mission, the flight mode and the clock's running flag are kept.
        """
        self.state = self._initial_state()
        self.sequencer.reset()
        self.telemetry = initial_telemetry(self.params)
        self.clock.reset()
        logger.info("Session reset")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, inputs: StickInputs = NO_INPUT) -> bool:
        """Run one tick if the clock is running and the vehicle is armed.

        Returns:
            True if the tick executed, False if it was gated off.
        """
        if not self.clock.should_tick(self.state.armed):
            return False

        was_airborne = not is_on_ground(self.state)
        battery_before = self.telemetry.battery

        result = sim_step(
            self.state,
            self.sequencer,
            inputs,
            self.mode,
            self.mission.waypoints,
            self.params,
        )
        self.state = result.state
        self.sequencer = result.sequencer
        self.telemetry = derive_telemetry(self.state, self.telemetry, self.params)
        self.clock.advance()

        if result.grounded and was_airborne:
            logger.debug("Ground contact at (%.1f, %.1f), throttle cut", self.state.x, self.state.z)
        if self.telemetry.battery <= 0.0 < battery_before:
            logger.warning("Battery depleted")

        return True

    def snapshot(self) -> SessionSnapshot:
        """Copy of everything a display needs after the latest tick."""
        return SessionSnapshot(
            state=self.state.copy(),
            telemetry=self.telemetry,
            mode=self.mode,
            armed=self.state.armed,
            running=self.clock.running,
            waypoint_index=self.sequencer.current_index,
            arrivals=self.sequencer.arrivals,
            tick=self.clock.ticks,
            sim_time=self.clock.sim_time,
        )


# ---------------------------------------------------------------------------
# Batch runner
# ---------------------------------------------------------------------------

InputFn = Callable[[float], StickInputs]


def run_sim(
    params: SimParams,
    inputs_fn: Optional[InputFn],
    t_final: float,
    mode: str = MANUAL,
    mission: Optional[MissionPlan] = None,
    x0: Optional[VehicleState] = None,
    arm: bool = True,
    verbose: bool = False,
) -> FlightLog:
    """
    Run a complete flight with a scripted stick schedule.

    The session is started (and armed unless ``arm=False``) before the
    first tick. The initial state is logged at t=0, then one entry per tick.

    Args:
        params: Simulation parameters
        inputs_fn: Stick schedule t -> StickInputs (default: hands off)
        t_final: Flight duration [s]
        mode: Flight mode to request at start
        mission: Waypoints (default: empty)
        x0: Initial state (default: spawn state)
        arm: Arm the vehicle before the first tick
        verbose: Print progress updates

    Returns:
        FlightLog containing the complete flight history
    """
    session = SimulationSession(params, mission)
    if x0 is not None:
        session.state = x0.copy()
    if arm:
        session.arm()
    else:
        session.disarm()
    session.start()
    if mode != MANUAL and not session.set_mode(mode):
        if verbose:
            print(f"  Mode '{mode}' refused, flying {session.mode}")

    n_steps = int(np.ceil(t_final / params.dt - 1e-9))
    log = allocate_log(n_steps + 1)
    record_step(log, 0.0, session.state, session.telemetry, session.sequencer.current_index)

    if verbose:
        print(f"Starting flight: t_final={t_final}s, dt={params.dt*1000:.1f}ms, "
              f"ticks={n_steps}, mode={session.mode}")

    for step in range(1, n_steps + 1):
        t = step * params.dt
        inputs = inputs_fn(t - params.dt) if inputs_fn is not None else NO_INPUT
        arrivals_before = session.sequencer.arrivals
        session.tick(inputs)
        record_step(
            log,
            t=t,
            state=session.state,
            telemetry=session.telemetry,
            wp_index=session.sequencer.current_index,
            arrived=session.sequencer.arrivals > arrivals_before,
            grounded=is_on_ground(session.state),
        )

        if verbose and step % 600 == 0:
            s = session.state
            print(f"  t={t:.1f}s  alt={s.y:.1f}m  speed={session.telemetry.speed:.1f}m/s  "
                  f"wp={session.sequencer.current_index}")

    log = log.trim()

    if verbose:
        print(f"Flight complete: {len(log)} entries recorded")

    return log
