"""Tests for derived telemetry."""

import pytest

from fpvsim.types import TelemetrySnapshot, VehicleState
from fpvsim.params import SimParams
from fpvsim.telemetry import derive_telemetry, initial_telemetry, round_half_up


P = SimParams()


def test_initial_telemetry():
    t = initial_telemetry(P)
    assert t == TelemetrySnapshot(altitude=50, speed=0.0, battery=100.0,
                                  satellites=12, distance=0)


def test_derived_values():
    s = VehicleState(x=3.0, y=49.5, z=4.0, vx=1.0, vy=2.0, vz=2.0)
    t = derive_telemetry(s, initial_telemetry(P), P)
    assert t.altitude == 50, "Halves round up"
    assert t.speed == pytest.approx(3.0)
    assert t.distance == 5
    assert t.battery == pytest.approx(99.99)
    assert t.satellites == 12


def test_battery_floors_at_zero():
    prev = TelemetrySnapshot(altitude=50, speed=0.0, battery=0.005, satellites=12, distance=0)
    t = derive_telemetry(VehicleState(), prev, P)
    assert t.battery == 0.0
    t = derive_telemetry(VehicleState(), t, P)
    assert t.battery == 0.0


@pytest.mark.parametrize("value,decimals,expected", [
    (2.5, 0, 3.0),
    (-2.5, 0, -2.0),
    (0.25, 1, 0.3),
    (1.04, 1, 1.0),
])
def test_round_half_up(value, decimals, expected):
    assert round_half_up(value, decimals) == pytest.approx(expected)
