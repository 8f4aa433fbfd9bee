"""
Core data types for the flight simulation.

World frame convention: ``y`` is altitude (ground at y = 0), ``x``/``z``
span the horizontal plane. Angles are stored in degrees.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Mapping

import numpy as np
from numpy.typing import NDArray


# Flight modes
MANUAL = "manual"
AUTONOMOUS = "autonomous"
FLIGHT_MODES = (MANUAL, AUTONOMOUS)


@dataclass
class VehicleState:
    """
    Complete vehicle state.

    Attributes:
        x, y, z: Position in world frame [m], y is altitude
        vx, vy, vz: Velocity [m/s]
        pitch, roll: Attitude [deg], kept within the attitude limit
        yaw: Heading [deg], running value (not wrapped)
        throttle: Normalized throttle [0, 1]
        armed: Whether ticks affect the vehicle
    """

    x: float = 0.0
    y: float = 50.0
    z: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    yaw: float = 0.0
    throttle: float = 0.0
    armed: bool = False

    def copy(self) -> "VehicleState":
        """Create a copy of this state."""
        return replace(self)

    @staticmethod
    def initial(x: float = 0.0, y: float = 50.0, z: float = 0.0) -> "VehicleState":
        """Create the power-on state: at rest, level, throttle cut, disarmed."""
        return VehicleState(x=float(x), y=float(y), z=float(z))

    @property
    def position(self) -> NDArray[np.float64]:
        """Position [x, y, z], shape (3,)."""
        return np.array([self.x, self.y, self.z])

    @property
    def velocity(self) -> NDArray[np.float64]:
        """Velocity [vx, vy, vz], shape (3,)."""
        return np.array([self.vx, self.vy, self.vz])

    def as_array(self) -> NDArray[np.float64]:
        """Flatten to [x, y, z, vx, vy, vz, pitch, roll, yaw, throttle, armed]."""
        return np.array([
            self.x, self.y, self.z,
            self.vx, self.vy, self.vz,
            self.pitch, self.roll, self.yaw,
            self.throttle,
            1.0 if self.armed else 0.0,
        ])


@dataclass(frozen=True)
class Waypoint:
    """Navigation target in the world frame [m]."""

    x: float
    y: float
    z: float

    def as_array(self) -> NDArray[np.float64]:
        return np.array([self.x, self.y, self.z])


# Key name (lower-case) -> StickInputs field
KEY_BINDINGS = {
    "w": "pitch_forward",
    "s": "pitch_back",
    "a": "roll_left",
    "d": "roll_right",
    "q": "yaw_left",
    "e": "yaw_right",
    "arrowup": "throttle_up",
    "arrowdown": "throttle_down",
}


@dataclass(frozen=True)
class StickInputs:
    """
    Snapshot of the held manual controls at the start of a tick.

    Each flag nudges one axis while held. Flags apply in turn, so at a
    limit opposing flags do not cancel.
    """

    pitch_forward: bool = False
    pitch_back: bool = False
    roll_left: bool = False
    roll_right: bool = False
    yaw_left: bool = False
    yaw_right: bool = False
    throttle_up: bool = False
    throttle_down: bool = False

    @staticmethod
    def from_keys(keys: Mapping[str, bool]) -> "StickInputs":
        """Build a snapshot from a key-name -> pressed mapping."""
        flags = {}
        for key, pressed in keys.items():
            name = KEY_BINDINGS.get(key.lower())
            if name is not None:
                flags[name] = flags.get(name, False) or bool(pressed)
        return StickInputs(**flags)

    @staticmethod
    def from_array(values) -> "StickInputs":
        """Build a snapshot from 8 truthy values in field order."""
        names = [f.name for f in fields(StickInputs)]
        values = np.asarray(values).ravel()
        if values.shape[0] != len(names):
            raise ValueError(f"expected {len(names)} stick flags, got {values.shape[0]}")
        return StickInputs(**{n: bool(v) for n, v in zip(names, values)})

    def as_array(self) -> NDArray[np.int8]:
        return np.array([getattr(self, f.name) for f in fields(self)], dtype=np.int8)


NO_INPUT = StickInputs()


@dataclass(frozen=True)
class TelemetrySnapshot:
    """
    Derived read-only metrics, recomputed each tick.

    Attributes:
        altitude: Rounded altitude [m]
        speed: Velocity norm rounded to 0.1 [m/s]
        battery: Remaining battery [%]
        satellites: GNSS satellite count
        distance: Rounded horizontal distance from the origin [m]
    """

    altitude: int
    speed: float
    battery: float
    satellites: int
    distance: int


@dataclass
class FlightLog:
    """
    Flight log storing time histories of the simulation.

    All arrays have shape (N,) or (N, 3) where N is number of recorded ticks.
    Kept in memory only.
    """

    # Time
    t: NDArray[np.float64]  # (N,)

    # State histories
    p: NDArray[np.float64]  # (N, 3) x, y, z
    v: NDArray[np.float64]  # (N, 3) vx, vy, vz
    att: NDArray[np.float64]  # (N, 3) pitch, roll, yaw [deg]
    throttle: NDArray[np.float64]  # (N,)

    # Telemetry histories
    altitude: NDArray[np.float64]  # (N,)
    speed: NDArray[np.float64]  # (N,)
    battery: NDArray[np.float64]  # (N,)
    distance: NDArray[np.float64]  # (N,)

    # Navigation
    wp_index: NDArray[np.int64]  # (N,)
    arrived: NDArray[np.bool_]  # (N,) arrival signalled this tick
    grounded: NDArray[np.bool_]  # (N,) ground contact this tick

    # Current write index
    _idx: int = field(default=0, repr=False)

    @staticmethod
    def allocate(n_steps: int) -> "FlightLog":
        """Pre-allocate arrays for n_steps ticks."""
        return FlightLog(
            t=np.zeros(n_steps),
            p=np.zeros((n_steps, 3)),
            v=np.zeros((n_steps, 3)),
            att=np.zeros((n_steps, 3)),
            throttle=np.zeros(n_steps),
            altitude=np.zeros(n_steps),
            speed=np.zeros(n_steps),
            battery=np.zeros(n_steps),
            distance=np.zeros(n_steps),
            wp_index=np.zeros(n_steps, dtype=np.int64),
            arrived=np.zeros(n_steps, dtype=bool),
            grounded=np.zeros(n_steps, dtype=bool),
            _idx=0,
        )

    def __len__(self) -> int:
        return self._idx

    def record(
        self,
        t: float,
        state: VehicleState,
        telemetry: TelemetrySnapshot,
        wp_index: int,
        arrived: bool = False,
        grounded: bool = False,
    ) -> None:
        """Record one tick of data."""
        i = self._idx
        self.t[i] = t
        self.p[i] = (state.x, state.y, state.z)
        self.v[i] = (state.vx, state.vy, state.vz)
        self.att[i] = (state.pitch, state.roll, state.yaw)
        self.throttle[i] = state.throttle
        self.altitude[i] = telemetry.altitude
        self.speed[i] = telemetry.speed
        self.battery[i] = telemetry.battery
        self.distance[i] = telemetry.distance
        self.wp_index[i] = wp_index
        self.arrived[i] = arrived
        self.grounded[i] = grounded
        self._idx += 1

    def trim(self) -> "FlightLog":
        """Trim arrays to actual recorded length."""
        n = self._idx
        return FlightLog(
            t=self.t[:n],
            p=self.p[:n],
            v=self.v[:n],
            att=self.att[:n],
            throttle=self.throttle[:n],
            altitude=self.altitude[:n],
            speed=self.speed[:n],
            battery=self.battery[:n],
            distance=self.distance[:n],
            wp_index=self.wp_index[:n],
            arrived=self.arrived[:n],
            grounded=self.grounded[:n],
            _idx=n,
        )
