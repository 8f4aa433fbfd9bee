"""Tests for the manual and autonomous control laws."""

import pytest

from fpvsim.types import AUTONOMOUS, MANUAL, StickInputs, VehicleState, Waypoint
from fpvsim.params import SimParams
from fpvsim.control import (
    apply_control,
    autonomous_control,
    heading_error,
    horizontal_distance,
    manual_control,
)


P = SimParams()


def _armed(**kw) -> VehicleState:
    s = VehicleState(**kw)
    s.armed = True
    return s


# ---- Test 1: Single stick step then self-levelling ---------------------------

def test_pitch_forward_single_tick():
    s = manual_control(_armed(), StickInputs(pitch_forward=True), P)
    assert s.pitch == pytest.approx(-1.9), f"Expected -2 * 0.95, got {s.pitch}"
    assert s.roll == 0.0
    assert s.throttle == 0.0


def test_self_levelling_without_input():
    s = manual_control(_armed(pitch=20.0, roll=-10.0), StickInputs(), P)
    assert s.pitch == pytest.approx(19.0)
    assert s.roll == pytest.approx(-9.5)


# ---- Test 2: Attitude limit under a held stick -------------------------------

def test_held_pitch_never_exceeds_limit():
    s = _armed()
    pitches = []
    for _ in range(200):
        s = manual_control(s, StickInputs(pitch_forward=True), P)
        pitches.append(s.pitch)
    assert min(pitches) >= -30.0, "Pitch must stay within the attitude limit"
    # Clamped at -30 before the 0.95 decay
    assert pitches[-1] == pytest.approx(-28.5), f"Got steady pitch {pitches[-1]}"


def test_out_of_range_state_is_clamped():
    s = manual_control(_armed(pitch=45.0, roll=-45.0, throttle=1.5), StickInputs(), P)
    assert s.pitch == pytest.approx(28.5)
    assert s.roll == pytest.approx(-28.5)
    assert s.throttle == 1.0


# ---- Test 3: Throttle range --------------------------------------------------

def test_throttle_saturates_at_one():
    s = _armed()
    for _ in range(30):
        s = manual_control(s, StickInputs(throttle_up=True), P)
    assert s.throttle == 1.0


def test_throttle_down_stops_at_zero():
    s = manual_control(_armed(), StickInputs(throttle_down=True), P)
    assert s.throttle == 0.0


def test_opposing_throttle_at_max():
    # Each nudge saturates separately: up is clipped, down is not
    s = manual_control(_armed(throttle=1.0), StickInputs(throttle_up=True, throttle_down=True), P)
    assert s.throttle == pytest.approx(0.95)


# ---- Test 4: Yaw is unbounded ------------------------------------------------

def test_yaw_accumulates_without_wrap():
    s = _armed()
    for _ in range(200):
        s = manual_control(s, StickInputs(yaw_right=True), P)
    assert s.yaw == pytest.approx(400.0), f"Yaw should not wrap, got {s.yaw}"


def test_manual_control_does_not_mutate_input():
    s = _armed(pitch=10.0)
    manual_control(s, StickInputs(pitch_back=True, throttle_up=True), P)
    assert s.pitch == 10.0 and s.throttle == 0.0


# ---- Test 5: Heading error ---------------------------------------------------

@pytest.mark.parametrize("target,yaw,expected", [
    (90.0, 0.0, 90.0),
    (-170.0, 170.0, 20.0),
    (180.0, 0.0, -180.0),
    (10.0, 370.0, 0.0),
    (0.0, 1000.0, 80.0),
])
def test_heading_error(target, yaw, expected):
    assert heading_error(target, yaw) == pytest.approx(expected)


# ---- Test 6: Autopilot -------------------------------------------------------

def test_arrival_inside_radius_leaves_attitude():
    s = _armed(pitch=3.0, roll=-2.0, throttle=0.4)
    out = autonomous_control(s, Waypoint(5.0, 60.0, 5.0), P)
    assert out.arrived, "Waypoint 7.07 m away should count as reached"
    assert out.state == s, "Attitude must be untouched on arrival"


def test_arrival_ignores_altitude():
    out = autonomous_control(_armed(), Waypoint(0.0, 500.0, 9.0), P)
    assert out.arrived, "Arrival is judged in the horizontal plane only"


def test_autopilot_steering_outputs():
    out = autonomous_control(_armed(), Waypoint(100.0, 40.0, 0.0), P)
    s = out.state
    assert not out.arrived
    assert s.yaw == pytest.approx(4.5), "90 deg error * 0.05"
    assert s.pitch == pytest.approx(5.0), "Target 10 m below -> pitch +5"
    assert s.roll == pytest.approx(20.0), "Roll clamped to the autopilot limit"
    assert s.throttle == pytest.approx(0.6)


def test_autopilot_straight_ahead_has_no_bank():
    out = autonomous_control(_armed(), Waypoint(0.0, 50.0, 40.0), P)
    assert out.state.roll == 0.0
    assert out.state.yaw == 0.0
    assert out.state.pitch == 0.0


# ---- Test 7: Dispatch --------------------------------------------------------

def test_autonomous_without_waypoint_is_noop():
    s = _armed(pitch=4.0, throttle=0.3)
    out = apply_control(s, AUTONOMOUS, StickInputs(throttle_up=True), None, P)
    assert out.state == s
    assert not out.arrived


def test_manual_mode_ignores_waypoint():
    out = apply_control(_armed(), MANUAL, StickInputs(), Waypoint(0.0, 50.0, 1.0), P)
    assert not out.arrived


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        apply_control(_armed(), "acro", StickInputs(), None, P)


def test_horizontal_distance():
    assert horizontal_distance(_armed(x=3.0, y=0.0), Waypoint(0.0, 99.0, 4.0)) == pytest.approx(5.0)


# ---- Test 8: Key mapping -----------------------------------------------------

def test_from_keys_mapping():
    inputs = StickInputs.from_keys({"ArrowUp": True, "w": False, "W": True, "x": True})
    assert inputs.throttle_up, "Key names are matched case-insensitively"
    assert inputs.pitch_forward, "Duplicate keys are OR-merged"
    assert inputs == StickInputs(throttle_up=True, pitch_forward=True), "Unknown keys ignored"


def test_from_keys_released():
    assert StickInputs.from_keys({"q": False, "arrowdown": False}) == StickInputs()
