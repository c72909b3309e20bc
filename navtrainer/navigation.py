#!/usr/bin/env python3
"""
Radio Navigation Model for the VOR/HSI Navigation Trainer.

Computes what the cockpit VOR receiver shows for a given aircraft position,
station position and selected course (OBS):

- Radial: bearing FROM the station to the aircraft
- DME: slant-free distance to the station in nautical miles
- CDI: course deviation as a fraction of full-scale deflection
- TO/FROM/OFF flag

The CDI reproduces VOR "reverse sensing": the needle sense depends on
whether the selected course leads TO or FROM the station, not merely on
the raw bearing. Full-scale deflection is 10 degrees.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .physics import UNITS_PER_NM, Vector2D, normalize_180, normalize_heading


# =============================================================================
# CONSTANTS
# =============================================================================

# Degrees of course error at full-scale needle deflection
CDI_FULL_SCALE_DEG = 10.0

# Inside this DME the flag shows OFF (cone of confusion)
CONE_OF_CONFUSION_NM = 0.25


class NavFlag(Enum):
    """TO/FROM/OFF ambiguity indicator."""
    TO = "TO"
    FROM = "FROM"
    OFF = "OFF"


@dataclass
class NavigationReading:
    """
    Instrument reading derived from the current geometry.

    Attributes:
        radial_deg: Radial the aircraft is on (integer degrees, 0-359).
        distance_units: Distance to the station in map units.
        is_to: Raw TO sense of the selected course, ignoring the OFF zone.
        course_deviation: Needle deflection in [-1, 1]; 1.0 = 10 degrees.
        flag: TO, FROM, or OFF inside the cone of confusion.
    """
    radial_deg: int
    distance_units: float
    is_to: bool
    course_deviation: float
    flag: NavFlag

    @property
    def distance_nm(self) -> float:
        """DME readout in nautical miles."""
        return self.distance_units / UNITS_PER_NM


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def bearing_from_station(aircraft_pos: Vector2D, station_pos: Vector2D) -> float:
    """Unrounded bearing from the station to the aircraft, [0, 360)."""
    dx = aircraft_pos.x - station_pos.x
    dy = aircraft_pos.y - station_pos.y
    return normalize_heading(math.degrees(math.atan2(dy, dx)) + 90)


def compute_reading(
    aircraft_pos: Vector2D,
    station_pos: Vector2D,
    obs_deg: float,
) -> NavigationReading:
    """
    Compute the VOR indication for the aircraft.

    Args:
        aircraft_pos: Aircraft map position.
        station_pos: VOR station map position.
        obs_deg: Selected course on the OBS.

    Returns:
        NavigationReading with radial, DME, deviation and flag.
    """
    distance = aircraft_pos.distance_to(station_pos)
    radial = round_half_up(bearing_from_station(aircraft_pos, station_pos)) % 360

    diff = normalize_180(obs_deg - radial)
    is_to = abs(diff) > 90

    cdi_error = diff
    if is_to:
        to_diff = diff + (-180 if diff > 0 else 180)
        cdi_error = -to_diff

    clamped = max(-CDI_FULL_SCALE_DEG, min(CDI_FULL_SCALE_DEG, cdi_error))
    deviation = clamped / CDI_FULL_SCALE_DEG

    if distance / UNITS_PER_NM < CONE_OF_CONFUSION_NM:
        flag = NavFlag.OFF
    else:
        flag = NavFlag.TO if is_to else NavFlag.FROM

    return NavigationReading(
        radial_deg=radial,
        distance_units=distance,
        is_to=is_to,
        course_deviation=deviation,
        flag=flag,
    )


def centered_course(reading: NavigationReading) -> int:
    """
    OBS setting that centres the needle at the current position.

    FROM the station that is the radial itself; TO the station it is the
    reciprocal.
    """
    if reading.is_to:
        return (reading.radial_deg + 180) % 360
    return reading.radial_deg
