#!/usr/bin/env python3
"""
Kinematics Module for the VOR/HSI Navigation Trainer

Implements the simplified 2D aircraft model used by the radio-navigation
missions:
- 2D vector operations in abstract map units (100 units = 1 nautical mile)
- Heading normalisation helpers
- Aircraft state with heading, velocity and pilot-set instruments
- Per-tick position integration with optional crosswind drift

Coordinate convention (screen space):
- X grows to the east
- Y grows to the south
- Heading 0 = North, increasing clockwise, so the velocity direction in
  standard math-angle terms is heading - 90 degrees.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field


# =============================================================================
# CONSTANTS
# =============================================================================

# Map scale
UNITS_PER_NM = 100.0

# Reference frame rate the per-tick displacements are tuned for
REFERENCE_TICK_RATE_HZ = 60.0

# Constant crosswind drift along X (units per reference tick)
CROSSWIND_DRIFT_X = 0.12

# Throttle limits (units per reference tick)
MIN_VELOCITY = 0.0
MAX_VELOCITY = 5.0
DEFAULT_VELOCITY = 0.4

# Engine power fraction limits
MIN_POWER_FRACTION = 0.4
MAX_POWER_FRACTION = 1.0


# =============================================================================
# HEADING HELPERS
# =============================================================================

def normalize_heading(heading_deg: float) -> float:
    """Wrap a heading into [0, 360)."""
    heading = math.fmod(heading_deg, 360.0)
    if heading < 0:
        heading += 360.0
    # fmod of a tiny negative value can round back up to 360.0
    if heading >= 360.0:
        heading -= 360.0
    return heading


def normalize_180(angle_deg: float) -> float:
    """Wrap an angle difference into [-180, 180]."""
    angle = angle_deg
    while angle > 180:
        angle -= 360
    while angle < -180:
        angle += 360
    return angle


def heading_difference(a_deg: float, b_deg: float) -> float:
    """Smallest absolute angle between two headings (0-180)."""
    return abs(normalize_180(a_deg - b_deg))


# =============================================================================
# VECTOR2D CLASS
# =============================================================================

@dataclass
class Vector2D:
    """
    2D vector for map positions and displacements.

    Units are abstract map units (100 units = 1 NM).
    """
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2D:
        return Vector2D(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2D:
        return self.__mul__(scalar)

    def __neg__(self) -> Vector2D:
        return Vector2D(-self.x, -self.y)

    def __eq__(self, other: object) -> bool:
        """Equality check with tolerance."""
        if not isinstance(other, Vector2D):
            return False
        eps = 1e-10
        return abs(self.x - other.x) < eps and abs(self.y - other.y) < eps

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vector2D) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, t: tuple[float, float]) -> Vector2D:
        return cls(t[0], t[1])

    @classmethod
    def zero(cls) -> Vector2D:
        return cls(0.0, 0.0)

    @classmethod
    def from_heading(cls, heading_deg: float, length: float = 1.0) -> Vector2D:
        """Displacement of `length` units flown along a compass heading."""
        rad = math.radians(heading_deg - 90)
        return cls(math.cos(rad) * length, math.sin(rad) * length)

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.6g}, {self.y:.6g})"


# =============================================================================
# AIRCRAFT STATE CLASS
# =============================================================================

@dataclass
class AircraftState:
    """
    Kinematic and instrument state of the training aircraft.

    Attributes:
        position: Map position (units)
        heading_deg: Magnetic heading, [0, 360)
        velocity: Ground speed in units per reference tick, [0, 5]
        heading_bug_deg: Heading bug setting on the HSI
        obs_deg: Omni bearing selector (selected course)
        power_fraction: Available engine power, [0.4, 1.0]
    """
    position: Vector2D = field(default_factory=Vector2D.zero)
    heading_deg: float = 0.0
    velocity: float = DEFAULT_VELOCITY
    heading_bug_deg: float = 0.0
    obs_deg: float = 0.0
    power_fraction: float = MAX_POWER_FRACTION

    def __post_init__(self) -> None:
        self.heading_deg = normalize_heading(self.heading_deg)
        self.heading_bug_deg = normalize_heading(self.heading_bug_deg)
        self.obs_deg = normalize_heading(self.obs_deg)

    @property
    def effective_velocity(self) -> float:
        """Ground speed after engine power loss."""
        return self.velocity * self.power_fraction

    def copy(self) -> AircraftState:
        """Create a deep copy of the state."""
        return AircraftState(
            position=Vector2D(self.position.x, self.position.y),
            heading_deg=self.heading_deg,
            velocity=self.velocity,
            heading_bug_deg=self.heading_bug_deg,
            obs_deg=self.obs_deg,
            power_fraction=self.power_fraction,
        )


# =============================================================================
# POSITION INTEGRATION
# =============================================================================

def propagate_aircraft(
    state: AircraftState,
    dt: float,
    drift_x: float = 0.0,
) -> AircraftState:
    """
    Advance the aircraft position by one time step.

    Displacements are defined per reference tick (60 Hz). A step of
    dt = 1/60 s reproduces exactly one tick of motion; other step sizes
    scale linearly.

    Args:
        state: Current aircraft state
        dt: Time step in seconds
        drift_x: Crosswind drift along X in units per reference tick.
            Only applied while the aircraft is moving.

    Returns:
        New aircraft state after the time step
    """
    new_state = state.copy()
    ticks = dt * REFERENCE_TICK_RATE_HZ

    displacement = Vector2D.from_heading(state.heading_deg, state.effective_velocity)
    drift = drift_x if state.velocity > 0 else 0.0

    new_state.position = Vector2D(
        state.position.x + (displacement.x + drift) * ticks,
        state.position.y + displacement.y * ticks,
    )
    return new_state


def position_on_radial(station: Vector2D, radial_deg: float, distance_nm: float) -> Vector2D:
    """Map position lying on a radial of the station at a DME distance."""
    return station + Vector2D.from_heading(radial_deg, distance_nm * UNITS_PER_NM)
