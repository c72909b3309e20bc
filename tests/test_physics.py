#!/usr/bin/env python3
"""
Test Suite for the Physics Module

Tests cover:
1. Heading normalisation helpers
2. Vector2D operations and compass-heading displacements
3. AircraftState construction and copying
4. Position integration with crosswind drift and engine power
"""

import math

import pytest

from navtrainer.physics import (
    CROSSWIND_DRIFT_X,
    UNITS_PER_NM,
    AircraftState,
    Vector2D,
    heading_difference,
    normalize_180,
    normalize_heading,
    position_on_radial,
    propagate_aircraft,
)

ONE_TICK = 1.0 / 60.0


# =============================================================================
# HEADING HELPERS
# =============================================================================

class TestHeadingHelpers:
    """Wrapping of headings and angle differences."""

    @pytest.mark.parametrize("raw,expected", [
        (0.0, 0.0),
        (360.0, 0.0),
        (370.0, 10.0),
        (-10.0, 350.0),
        (-720.0, 0.0),
        (359.5, 359.5),
    ])
    def test_normalize_heading(self, raw, expected):
        assert normalize_heading(raw) == pytest.approx(expected)

    def test_normalize_heading_never_returns_360(self):
        assert normalize_heading(-1e-15) < 360.0

    @pytest.mark.parametrize("raw,expected", [
        (190.0, -170.0),
        (-190.0, 170.0),
        (45.0, 45.0),
        (540.0, 180.0),
    ])
    def test_normalize_180(self, raw, expected):
        assert normalize_180(raw) == pytest.approx(expected)

    def test_heading_difference_wraps_through_north(self):
        assert heading_difference(355.0, 5.0) == pytest.approx(10.0)
        assert heading_difference(5.0, 355.0) == pytest.approx(10.0)
        assert heading_difference(90.0, 270.0) == pytest.approx(180.0)


# =============================================================================
# VECTOR2D
# =============================================================================

class TestVector2D:
    """Vector arithmetic and compass displacements."""

    def test_arithmetic(self):
        a = Vector2D(1.0, 2.0)
        b = Vector2D(3.0, -1.0)
        assert a + b == Vector2D(4.0, 1.0)
        assert a - b == Vector2D(-2.0, 3.0)
        assert a * 2 == Vector2D(2.0, 4.0)
        assert 2 * a == Vector2D(2.0, 4.0)
        assert -a == Vector2D(-1.0, -2.0)

    def test_magnitude_and_distance(self):
        assert Vector2D(3.0, 4.0).magnitude == pytest.approx(5.0)
        assert Vector2D(0.0, 0.0).distance_to(Vector2D(-3.0, 4.0)) == pytest.approx(5.0)

    def test_tuple_round_trip(self):
        v = Vector2D.from_tuple((1.5, -2.5))
        assert v.to_tuple() == (1.5, -2.5)
        assert Vector2D.zero() == Vector2D(0.0, 0.0)

    @pytest.mark.parametrize("heading,dx,dy", [
        (0.0, 0.0, -1.0),    # north is -y
        (90.0, 1.0, 0.0),    # east is +x
        (180.0, 0.0, 1.0),
        (270.0, -1.0, 0.0),
    ])
    def test_from_heading(self, heading, dx, dy):
        v = Vector2D.from_heading(heading)
        assert v.x == pytest.approx(dx, abs=1e-12)
        assert v.y == pytest.approx(dy, abs=1e-12)

    def test_position_on_radial(self):
        station = Vector2D(0.0, -5000.0)
        pos = position_on_radial(station, 90, 1.0)
        assert pos.x == pytest.approx(UNITS_PER_NM)
        assert pos.y == pytest.approx(-5000.0)


# =============================================================================
# AIRCRAFT STATE
# =============================================================================

class TestAircraftState:

    def test_angles_are_normalised(self):
        aircraft = AircraftState(heading_deg=-10.0, heading_bug_deg=370.0, obs_deg=720.0)
        assert aircraft.heading_deg == pytest.approx(350.0)
        assert aircraft.heading_bug_deg == pytest.approx(10.0)
        assert aircraft.obs_deg == pytest.approx(0.0)

    def test_effective_velocity_scales_with_power(self):
        aircraft = AircraftState(velocity=0.4, power_fraction=0.5)
        assert aircraft.effective_velocity == pytest.approx(0.2)

    def test_copy_is_independent(self):
        aircraft = AircraftState(position=Vector2D(1.0, 2.0), heading_deg=45.0)
        clone = aircraft.copy()
        clone.position.x = 99.0
        clone.heading_deg = 10.0
        assert aircraft.position.x == 1.0
        assert aircraft.heading_deg == 45.0


# =============================================================================
# POSITION INTEGRATION
# =============================================================================

class TestPropagation:
    """Kinematic integration per reference tick."""

    def test_one_tick_east(self):
        aircraft = AircraftState(heading_deg=90.0, velocity=1.0)
        moved = propagate_aircraft(aircraft, ONE_TICK)
        assert moved.position.x == pytest.approx(1.0)
        assert moved.position.y == pytest.approx(0.0, abs=1e-12)

    def test_north_decreases_y(self):
        aircraft = AircraftState(heading_deg=0.0, velocity=0.4)
        moved = propagate_aircraft(aircraft, ONE_TICK)
        assert moved.position.y == pytest.approx(-0.4)

    def test_displacement_scales_with_time_step(self):
        aircraft = AircraftState(heading_deg=90.0, velocity=1.0)
        moved = propagate_aircraft(aircraft, 2 * ONE_TICK)
        assert moved.position.x == pytest.approx(2.0)

    def test_crosswind_drift_applied_while_moving(self):
        aircraft = AircraftState(heading_deg=0.0, velocity=0.4)
        moved = propagate_aircraft(aircraft, ONE_TICK, CROSSWIND_DRIFT_X)
        assert moved.position.x == pytest.approx(0.12)
        assert moved.position.y == pytest.approx(-0.4)

    def test_no_drift_when_stopped(self):
        aircraft = AircraftState(heading_deg=0.0, velocity=0.0)
        moved = propagate_aircraft(aircraft, ONE_TICK, CROSSWIND_DRIFT_X)
        assert moved.position == aircraft.position

    def test_power_loss_slows_aircraft(self):
        aircraft = AircraftState(heading_deg=90.0, velocity=1.0, power_fraction=0.5)
        moved = propagate_aircraft(aircraft, ONE_TICK)
        assert moved.position.x == pytest.approx(0.5)

    def test_input_state_unchanged(self):
        aircraft = AircraftState(heading_deg=90.0, velocity=1.0)
        propagate_aircraft(aircraft, ONE_TICK)
        assert aircraft.position == Vector2D(0.0, 0.0)

    def test_distance_over_one_second(self):
        aircraft = AircraftState(heading_deg=45.0, velocity=0.4)
        for _ in range(60):
            aircraft = propagate_aircraft(aircraft, ONE_TICK)
        assert aircraft.position.magnitude == pytest.approx(24.0)
        assert math.degrees(math.atan2(aircraft.position.y, aircraft.position.x)) == pytest.approx(-45.0)
