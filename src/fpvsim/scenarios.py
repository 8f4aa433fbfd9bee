"""
Flight scenario definitions.

Provides stick-schedule builders and a registry of named scenarios
(stick schedule + flight mode + mission + duration) used by the CLI and
the tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from fpvsim.types import AUTONOMOUS, MANUAL, NO_INPUT, FlightLog, StickInputs
from fpvsim.params import SimParams, default_params
from fpvsim.mission import MissionPlan, line_mission
from fpvsim.sim import InputFn, run_sim


# ---------------------------------------------------------------------------
# Stick schedules
# ---------------------------------------------------------------------------

def hold(**flags: bool) -> InputFn:
    """Hold the given sticks for the whole flight, e.g. ``hold(throttle_up=True)``."""
    inputs = StickInputs(**flags)

    def inputs_fn(t: float) -> StickInputs:
        return inputs

    return inputs_fn


def schedule(segments: Sequence[tuple[float, StickInputs]]) -> InputFn:
    """Piecewise-constant stick schedule.

    ``segments`` is a list of ``(t_end, inputs)`` pairs in increasing
    ``t_end``; each snapshot applies while ``t < t_end``. After the last
    segment no stick is held.
    """
    segs = list(segments)

    def inputs_fn(t: float) -> StickInputs:
        for t_end, inputs in segs:
            if t < t_end:
                return inputs
        return NO_INPUT

    return inputs_fn


# ---------------------------------------------------------------------------
# Scenario registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ScenarioSpec:
    """Definition of a named flight."""

    name: str
    t_final: float
    inputs_fn: Callable[[], Optional[InputFn]]  # factory, call to get schedule
    mode: str = MANUAL
    mission_fn: Optional[Callable[[], MissionPlan]] = None
    arm: bool = True
    description: str = ""


_SCENARIOS: dict[str, ScenarioSpec] = {}


def _register(spec: ScenarioSpec) -> None:
    _SCENARIOS[spec.name] = spec


_register(ScenarioSpec(
    name="climb",
    t_final=5.0,
    inputs_fn=lambda: hold(throttle_up=True),
    description="Full throttle from the spawn point",
))

_register(ScenarioSpec(
    name="freefall",
    t_final=10.0,
    inputs_fn=lambda: None,
    description="Hands off at zero throttle until ground contact",
))

_register(ScenarioSpec(
    name="yaw_spin",
    t_final=6.0,
    inputs_fn=lambda: schedule([
        (14 / 60, StickInputs(throttle_up=True)),
        (6.0, StickInputs(yaw_right=True)),
    ]),
    description="Throttle to 70 % then hold yaw right",
))

_register(ScenarioSpec(
    name="forward",
    t_final=8.0,
    inputs_fn=lambda: schedule([
        (14 / 60, StickInputs(throttle_up=True)),
        (4.0, StickInputs(pitch_forward=True)),
        (8.0, StickInputs(roll_right=True)),
    ]),
    description="Throttle to 70 %, pitch forward, then roll right",
))

_register(ScenarioSpec(
    name="patrol",
    t_final=60.0,
    inputs_fn=lambda: None,
    mode=AUTONOMOUS,
    mission_fn=lambda: line_mission(length=80.0, altitude=50.0, n_pts=2),
    description="Autopilot over two waypoints straight ahead",
))

_register(ScenarioSpec(
    name="idle_disarmed",
    t_final=2.0,
    inputs_fn=lambda: hold(throttle_up=True),
    arm=False,
    description="Sticks held while disarmed: nothing moves",
))


def get_scenario(name: str) -> ScenarioSpec:
    """Return a scenario by name. Raises ``KeyError`` if unknown."""
    return _SCENARIOS[name]


def list_scenarios() -> list[str]:
    """Return sorted list of registered scenario names."""
    return sorted(_SCENARIOS)


def run_scenario(
    name: str,
    params: Optional[SimParams] = None,
    t_final: Optional[float] = None,
    verbose: bool = False,
) -> tuple[FlightLog, MissionPlan]:
    """Fly a registered scenario.

    Args:
        name: Registered scenario name
        params: Parameters (default: default_params())
        t_final: Override the scenario duration [s]
        verbose: Print progress updates

    Returns:
        (FlightLog, MissionPlan) so plots can show the waypoints flown
    """
    spec = get_scenario(name)
    if params is None:
        params = default_params()
    mission = spec.mission_fn() if spec.mission_fn is not None else MissionPlan()

    log = run_sim(
        params,
        spec.inputs_fn(),
        t_final if t_final is not None else spec.t_final,
        mode=spec.mode,
        mission=mission,
        arm=spec.arm,
        verbose=verbose,
    )
    return log, mission
