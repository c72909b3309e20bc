#!/usr/bin/env python3
"""
Crosswind Landing Physics for the VOR/HSI Navigation Trainer.

An arcade integrator for the final approach segment:
- Fixed forward speed (120 kt), so the distance to the threshold always
  decreases at the same rate
- Vertical speed commanded by pitch (150 fpm per degree) with a
  first-order lag
- Lateral offset from constant crosswind, crab (yaw) and bank (roll)
- Touchdown classification into SUCCESS or CRASH, exactly once

Units are feet, feet per minute for vertical speed, and degrees.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .physics import normalize_heading

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

KNOTS_TO_FPS = 6076.12 / 3600.0

APPROACH_SPEED_KT = 120.0
APPROACH_SPEED_FPS = APPROACH_SPEED_KT * KNOTS_TO_FPS

VS_PER_PITCH_DEG_FPM = 150.0
VS_RESPONSE_PER_S = 1.0
BANK_DRIFT_FPS_PER_DEG = 1.5

# Control limits
PITCH_LIMIT_DEG = 10.0
ROLL_LIMIT_DEG = 45.0
PITCH_STEP_DEG = 1.0
ROLL_STEP_DEG = 2.0
YAW_STEP_DEG = 2.0

# Touchdown limits
MAX_SINK_RATE_FPM = 500.0
MAX_LATERAL_OFFSET_FT = 100.0
MAX_TOUCHDOWN_BANK_DEG = 15.0
MAX_THRESHOLD_DISTANCE_FT = 100.0

# Initial approach (roughly a 3 degree glide path)
INITIAL_ALTITUDE_FT = 500.0
INITIAL_DISTANCE_FT = 9500.0
INITIAL_PITCH_DEG = -4.0

DEFAULT_CROSSWIND_KT = 10.0


class LandingOutcome(Enum):
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    CRASH = "crash"


class WindSide(str, Enum):
    """Side the crosswind blows from."""
    LEFT = "left"
    RIGHT = "right"


@dataclass
class LandingWind:
    """Crosswind configuration; wind from the left pushes the aircraft right."""
    side: WindSide = WindSide.LEFT
    speed_kt: float = DEFAULT_CROSSWIND_KT

    @property
    def lateral_drift_fps(self) -> float:
        sign = 1.0 if self.side == WindSide.LEFT else -1.0
        return sign * self.speed_kt * KNOTS_TO_FPS


@dataclass
class LandingControls:
    """Pilot control deltas applied before integration (degrees)."""
    pitch_delta: float = 0.0
    roll_delta: float = 0.0
    yaw_delta: float = 0.0


@dataclass
class LandingState:
    """
    Approach and touchdown state.

    Attributes:
        altitude_ft: Height above ground, never negative.
        distance_to_threshold_ft: Remaining distance to the threshold.
            Negative once past it.
        lateral_offset_ft: Offset from the centreline, positive right.
        pitch_deg: Pitch attitude, [-10, 10].
        roll_deg: Bank angle, [-45, 45].
        yaw_deg: Heading relative to the runway, [0, 360).
        vertical_speed_fpm: Current vertical speed.
        outcome: IN_PROGRESS until touchdown, then SUCCESS or CRASH.
        crash_reasons: Limits exceeded at touchdown.
    """
    altitude_ft: float = INITIAL_ALTITUDE_FT
    distance_to_threshold_ft: float = INITIAL_DISTANCE_FT
    lateral_offset_ft: float = 0.0
    pitch_deg: float = INITIAL_PITCH_DEG
    roll_deg: float = 0.0
    yaw_deg: float = 0.0
    vertical_speed_fpm: float = INITIAL_PITCH_DEG * VS_PER_PITCH_DEG_FPM
    outcome: LandingOutcome = LandingOutcome.IN_PROGRESS
    crash_reasons: list[str] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.outcome != LandingOutcome.IN_PROGRESS

    @property
    def target_vertical_speed_fpm(self) -> float:
        return self.pitch_deg * VS_PER_PITCH_DEG_FPM

    def copy(self) -> LandingState:
        return replace(self, crash_reasons=list(self.crash_reasons))


# =============================================================================
# CONTROL INPUT
# =============================================================================

def apply_landing_controls(state: LandingState, controls: LandingControls) -> LandingState:
    """Apply clamped pitch/roll and wrapping yaw. Ignored once terminal."""
    if state.is_terminal:
        return state
    new_state = state.copy()
    new_state.pitch_deg = max(-PITCH_LIMIT_DEG, min(PITCH_LIMIT_DEG, state.pitch_deg + controls.pitch_delta))
    new_state.roll_deg = max(-ROLL_LIMIT_DEG, min(ROLL_LIMIT_DEG, state.roll_deg + controls.roll_delta))
    new_state.yaw_deg = normalize_heading(state.yaw_deg + controls.yaw_delta)
    return new_state


# =============================================================================
# TOUCHDOWN CLASSIFICATION
# =============================================================================

def classify_touchdown(state: LandingState) -> tuple[LandingOutcome, list[str]]:
    """
    Judge a touchdown.

    Returns:
        (outcome, reasons) - reasons is empty for a successful landing.
    """
    reasons = []
    if abs(state.vertical_speed_fpm) > MAX_SINK_RATE_FPM:
        reasons.append("sink_rate")
    if abs(state.lateral_offset_ft) > MAX_LATERAL_OFFSET_FT:
        reasons.append("lateral_offset")
    if abs(state.roll_deg) > MAX_TOUCHDOWN_BANK_DEG:
        reasons.append("bank_angle")
    if state.distance_to_threshold_ft > MAX_THRESHOLD_DISTANCE_FT:
        reasons.append("short_of_runway")

    if reasons:
        return LandingOutcome.CRASH, reasons
    return LandingOutcome.SUCCESS, reasons


# =============================================================================
# INTEGRATION
# =============================================================================

def advance_landing(
    state: LandingState,
    dt: float,
    controls: Optional[LandingControls] = None,
    wind: Optional[LandingWind] = None,
) -> LandingState:
    """
    Integrate the approach by one time step.

    Args:
        state: Current landing state.
        dt: Time step in seconds.
        controls: Optional control deltas applied first.
        wind: Crosswind; defaults to 10 kt from the left.

    Returns:
        New landing state. Terminal states are returned unchanged.
    """
    if state.is_terminal:
        return state
    if controls is not None:
        state = apply_landing_controls(state, controls)
    if wind is None:
        wind = LandingWind()

    new_state = state.copy()

    target_vs = state.target_vertical_speed_fpm
    blend = min(1.0, VS_RESPONSE_PER_S * dt)
    new_state.vertical_speed_fpm = state.vertical_speed_fpm + (target_vs - state.vertical_speed_fpm) * blend

    new_state.altitude_ft = max(0.0, state.altitude_ft + new_state.vertical_speed_fpm / 60.0 * dt)
    new_state.distance_to_threshold_ft = state.distance_to_threshold_ft - APPROACH_SPEED_FPS * dt

    crab_drift = math.sin(math.radians(state.yaw_deg)) * APPROACH_SPEED_FPS
    bank_drift = -state.roll_deg * BANK_DRIFT_FPS_PER_DEG
    new_state.lateral_offset_ft = (
        state.lateral_offset_ft + (wind.lateral_drift_fps + crab_drift + bank_drift) * dt
    )

    if new_state.altitude_ft <= 0:
        outcome, reasons = classify_touchdown(new_state)
        new_state.outcome = outcome
        new_state.crash_reasons = reasons
        logger.info(
            "Touchdown: %s (vs=%.0f fpm, offset=%.1f ft, roll=%.1f, threshold=%.0f ft)",
            outcome.name, new_state.vertical_speed_fpm, new_state.lateral_offset_ft,
            new_state.roll_deg, new_state.distance_to_threshold_ft,
        )

    return new_state
