"""
Pilot control inputs.

Inputs are discrete events applied between ticks. Each handler is a pure
function returning new state; out-of-range values are clamped, never
rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .navigation import NavigationReading, centered_course
from .physics import MAX_VELOCITY, MIN_VELOCITY, AircraftState, normalize_heading


STEER_STEP_DEG = 2.0
STEER_FAST_STEP_DEG = 4.0
STEER_REPEAT_WINDOW_MS = 400.0
STEER_FAST_AFTER_PRESSES = 2

THROTTLE_STEP = 0.1


class SteerDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class ThrottleDirection(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass
class SteerCombo:
    """Repeat tracking for steer presses."""
    direction: Optional[SteerDirection] = None
    count: int = 0
    last_time_ms: float = 0.0


def apply_steer(
    aircraft: AircraftState,
    combo: SteerCombo,
    direction: SteerDirection,
    now_ms: float,
    couple_heading_bug: bool = True,
) -> tuple[AircraftState, SteerCombo]:
    """
    Turn the aircraft by one steer press.

    Presses in the same direction within 400 ms of the previous one build a
    combo; from the third such press the step doubles to 4 degrees.

    Args:
        aircraft: Current aircraft state.
        combo: Repeat-tracking state.
        direction: LEFT or RIGHT.
        now_ms: Timestamp of the press in milliseconds.
        couple_heading_bug: Drag the heading bug along with the heading.

    Returns:
        (new aircraft state, new combo state)
    """
    direction = SteerDirection(direction)
    count = 1
    if combo.direction == direction and now_ms - combo.last_time_ms < STEER_REPEAT_WINDOW_MS:
        count = combo.count + 1
    step = STEER_FAST_STEP_DEG if count > STEER_FAST_AFTER_PRESSES else STEER_STEP_DEG

    new_aircraft = aircraft.copy()
    delta = -step if direction == SteerDirection.LEFT else step
    new_aircraft.heading_deg = normalize_heading(aircraft.heading_deg + delta)
    if couple_heading_bug:
        new_aircraft.heading_bug_deg = new_aircraft.heading_deg

    return new_aircraft, SteerCombo(direction=direction, count=count, last_time_ms=now_ms)


def apply_throttle(aircraft: AircraftState, direction: ThrottleDirection) -> AircraftState:
    """Change ground speed by one throttle step, clamped to [0, 5]."""
    direction = ThrottleDirection(direction)
    step = THROTTLE_STEP if direction == ThrottleDirection.UP else -THROTTLE_STEP
    new_aircraft = aircraft.copy()
    # Round away float accumulation from repeated 0.1 steps
    new_aircraft.velocity = round(max(MIN_VELOCITY, min(MAX_VELOCITY, aircraft.velocity + step)), 6)
    return new_aircraft


def twist_course(aircraft: AircraftState, delta_deg: float) -> AircraftState:
    new_aircraft = aircraft.copy()
    new_aircraft.obs_deg = normalize_heading(aircraft.obs_deg + delta_deg)
    return new_aircraft


def twist_heading_bug(aircraft: AircraftState, delta_deg: float) -> AircraftState:
    new_aircraft = aircraft.copy()
    new_aircraft.heading_bug_deg = normalize_heading(aircraft.heading_bug_deg + delta_deg)
    return new_aircraft


def sync_heading_bug(aircraft: AircraftState) -> AircraftState:
    """Set the heading bug to the current heading."""
    new_aircraft = aircraft.copy()
    new_aircraft.heading_bug_deg = aircraft.heading_deg
    return new_aircraft


def center_cdi(aircraft: AircraftState, reading: NavigationReading) -> AircraftState:
    """Set the OBS to the course that centres the needle."""
    new_aircraft = aircraft.copy()
    new_aircraft.obs_deg = float(centered_course(reading))
    return new_aircraft
