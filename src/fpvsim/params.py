"""
Simulation constants and control-law gains.

Default values reproduce the behaviour of the FPV simulator this package
models: a 60 Hz fixed step, a 15 m/s² thrust coefficient and a 0.98
per-tick velocity drag factor.
"""

from dataclasses import dataclass


@dataclass
class SimParams:
    """
    Complete parameter set for the flight simulation.

    Timing:
        dt: Fixed simulation timestep [s]

    Physics:
        thrust_coeff: Vertical acceleration at full throttle [m/s²]
        g: Gravitational acceleration [m/s²] (positive, applied downward)
        lateral_gain: Fraction of thrust fed into horizontal acceleration
        drag: Velocity multiplier applied every tick (must be < 1)

    Manual control:
        attitude_step_deg: Pitch/roll nudge per tick while a stick is held [deg]
        yaw_step_deg: Yaw nudge per tick [deg]
        throttle_step: Throttle nudge per tick
        attitude_limit_deg: Pitch/roll clamp [deg]
        stabilization: Pitch/roll self-levelling factor applied every tick

    Autopilot:
        arrival_radius: Horizontal distance that counts as reaching a waypoint [m]
        yaw_gain: Fraction of the heading error corrected per tick
        pitch_gain: Pitch command per metre of altitude error [deg/m]
        roll_gain: Bank command per degree of heading error
        auto_attitude_limit_deg: Pitch/roll clamp in autonomous mode [deg]
        cruise_throttle: Constant throttle in autonomous mode

    Telemetry:
        battery_initial: Battery level after reset [%]
        battery_drain: Battery consumed per executed tick [%]
        satellites: Reported GNSS satellite count

    Spawn:
        spawn_x, spawn_y, spawn_z: Initial / reset position [m]
    """

    # Timing
    dt: float = 1.0 / 60.0  # s, 60 Hz

    # Physics
    thrust_coeff: float = 15.0  # m/s² at throttle = 1
    g: float = 9.8  # m/s²
    lateral_gain: float = 0.3
    drag: float = 0.98

    # Manual control
    attitude_step_deg: float = 2.0
    yaw_step_deg: float = 2.0
    throttle_step: float = 0.05
    attitude_limit_deg: float = 30.0
    stabilization: float = 0.95

    # Autopilot
    arrival_radius: float = 10.0  # m
    yaw_gain: float = 0.05
    pitch_gain: float = 0.5
    roll_gain: float = 0.3
    auto_attitude_limit_deg: float = 20.0
    cruise_throttle: float = 0.6

    # Telemetry
    battery_initial: float = 100.0
    battery_drain: float = 0.01
    satellites: int = 12

    # Spawn
    spawn_x: float = 0.0
    spawn_y: float = 50.0
    spawn_z: float = 0.0

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        if self.dt <= 0:
            raise ValueError(f"dt must be positive, got {self.dt}")
        if not 0.0 < self.drag < 1.0:
            raise ValueError(f"drag must be in (0, 1), got {self.drag}")
        if self.arrival_radius <= 0:
            raise ValueError(
                f"arrival_radius must be positive, got {self.arrival_radius}"
            )

    @property
    def rate_hz(self) -> float:
        """Tick rate implied by dt."""
        return 1.0 / self.dt

    @property
    def hover_throttle(self) -> float:
        """Throttle at which thrust cancels gravity."""
        return self.g / self.thrust_coeff


def default_params() -> SimParams:
    """
    Create default parameters.

    Returns a SimParams instance with the stock 60 Hz tuning.
    """
    return SimParams()
