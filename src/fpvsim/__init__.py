"""
FPV Sim: quadrotor flight dynamics and flight control on a fixed timestep.

Manual stick flying with self-levelling, a waypoint-following autopilot,
simplified translational physics with ground contact, and derived
telemetry, all driven by a pure per-tick transition.
"""

from fpvsim.types import (
    AUTONOMOUS,
    MANUAL,
    StickInputs,
    TelemetrySnapshot,
    VehicleState,
    Waypoint,
)
from fpvsim.params import SimParams, default_params
from fpvsim.mission import MissionPlan
from fpvsim.sim import SessionSnapshot, SimulationSession, run_sim, sim_step

__version__ = "0.1.0"

__all__ = [
    "AUTONOMOUS",
    "MANUAL",
    "StickInputs",
    "TelemetrySnapshot",
    "VehicleState",
    "Waypoint",
    "SimParams",
    "default_params",
    "MissionPlan",
    "SessionSnapshot",
    "SimulationSession",
    "run_sim",
    "sim_step",
]
