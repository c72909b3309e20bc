#!/usr/bin/env python3
"""
Test Suite for VOR Navigation

Tests cover:
1. Radial computation and half-up rounding
2. TO/FROM sense and the cone of confusion
3. Course deviation sign and full-scale clamping
4. Needle centring
"""

import pytest

from navtrainer.navigation import (
    CONE_OF_CONFUSION_NM,
    NavFlag,
    bearing_from_station,
    centered_course,
    compute_reading,
    round_half_up,
)
from navtrainer.physics import UNITS_PER_NM, Vector2D, position_on_radial


@pytest.fixture
def station():
    return Vector2D(0.0, -5000.0)


def offset(station, dx, dy):
    return Vector2D(station.x + dx, station.y + dy)


# =============================================================================
# RADIALS
# =============================================================================

class TestRadials:

    @pytest.mark.parametrize("value,expected", [
        (0.5, 1),
        (1.5, 2),
        (2.5, 3),
        (2.49, 2),
        (-0.5, 0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    @pytest.mark.parametrize("dx,dy,radial", [
        (0.0, -1000.0, 0),     # north of the station
        (1000.0, 0.0, 90),
        (0.0, 1000.0, 180),
        (-1000.0, 0.0, 270),
    ])
    def test_cardinal_radials(self, station, dx, dy, radial):
        reading = compute_reading(offset(station, dx, dy), station, 0.0)
        assert reading.radial_deg == radial

    def test_radial_near_north_wraps_to_zero(self, station):
        pos = position_on_radial(station, 359.6, 5.0)
        assert compute_reading(pos, station, 0.0).radial_deg == 0

    def test_bearing_is_unrounded(self, station):
        pos = position_on_radial(station, 123.4, 5.0)
        assert bearing_from_station(pos, station) == pytest.approx(123.4)

    def test_distance(self, station):
        reading = compute_reading(offset(station, 300.0, 400.0), station, 0.0)
        assert reading.distance_units == pytest.approx(500.0)
        assert reading.distance_nm == pytest.approx(5.0)


# =============================================================================
# TO / FROM
# =============================================================================

class TestToFrom:

    def test_south_of_station_tracking_north_reads_to(self, station):
        reading = compute_reading(offset(station, 0.0, 1000.0), station, 0.0)
        assert reading.is_to
        assert reading.flag == NavFlag.TO
        assert reading.course_deviation == pytest.approx(0.0)

    def test_north_of_station_course_360_reads_from(self, station):
        reading = compute_reading(offset(station, 0.0, -1000.0), station, 0.0)
        assert not reading.is_to
        assert reading.flag == NavFlag.FROM
        assert reading.course_deviation == pytest.approx(0.0)

    def test_flag_sequence_through_passage(self, station):
        flags = [
            compute_reading(offset(station, 0.0, dy), station, 180.0).flag
            for dy in (-1000.0, -10.0, 1000.0)
        ]
        assert flags == [NavFlag.TO, NavFlag.OFF, NavFlag.FROM]

    def test_cone_of_confusion(self, station):
        inside = compute_reading(offset(station, 0.0, 20.0), station, 0.0)
        edge = compute_reading(offset(station, 0.0, CONE_OF_CONFUSION_NM * UNITS_PER_NM), station, 0.0)
        assert inside.flag == NavFlag.OFF
        assert inside.is_to  # raw sense still reported
        assert edge.flag == NavFlag.TO

    def test_abeam_reads_from(self, station):
        # exactly 90 degrees off the course is not TO
        reading = compute_reading(offset(station, 1000.0, 0.0), station, 0.0)
        assert not reading.is_to


# =============================================================================
# COURSE DEVIATION
# =============================================================================

class TestCourseDeviation:

    @pytest.mark.parametrize("obs,expected", [
        (0.0, 0.0),
        (5.0, 0.5),
        (355.0, -0.5),
        (10.0, 1.0),
        (30.0, 1.0),
        (330.0, -1.0),
    ])
    def test_from_deviation(self, station, obs, expected):
        reading = compute_reading(offset(station, 0.0, -1000.0), station, obs)
        assert reading.course_deviation == pytest.approx(expected)

    def test_to_deviation_is_reversed(self, station):
        # south of the station, slightly east, course 360 inbound: course lies to the left
        reading = compute_reading(offset(station, 100.0, 1000.0), station, 0.0)
        assert reading.radial_deg == 174
        assert reading.is_to
        assert reading.course_deviation == pytest.approx(-0.6)

    def test_deviation_bounded(self, station):
        for obs in range(0, 360, 15):
            reading = compute_reading(offset(station, 700.0, 300.0), station, float(obs))
            assert -1.0 <= reading.course_deviation <= 1.0


# =============================================================================
# CENTRING
# =============================================================================

class TestCenteredCourse:

    def test_from_uses_radial(self, station):
        pos = position_on_radial(station, 30, 5.0)
        reading = compute_reading(pos, station, 30.0)
        assert centered_course(reading) == 30

    def test_to_uses_reciprocal(self, station):
        reading = compute_reading(offset(station, 0.0, 1000.0), station, 350.0)
        assert reading.is_to
        assert centered_course(reading) == 0

    def test_centering_zeroes_deviation(self, station):
        pos = position_on_radial(station, 212, 7.0)
        reading = compute_reading(pos, station, 100.0)
        centred = compute_reading(pos, station, float(centered_course(reading)))
        assert centred.course_deviation == pytest.approx(0.0, abs=0.05)
