#!/usr/bin/env python3
"""
Training Mission Definitions for the VOR/HSI Navigation Trainer.

Each mission archetype is a variant of `Mission` with its own transition
function. All of them follow the same pattern:

    gate on a DME or heading condition -> change phase -> raise an event
    -> optionally tune the pilot's instruments

Missions:
- f-vor: basic inbound / station passage / outbound tracking
- f-inbound: outbound leg, 45/180 procedure turn, inbound interception
- f-outbound: outbound course change with radial interception
- f-homing: direct station homing with a progressive engine failure
- landing: crosswind final approach with touchdown classification

Thresholds are fixed per archetype. Nothing here is retryable: a wrong
pilot action simply fails to satisfy a gate and the mission carries on
until reset or abort.

Usage:
    mission = create_mission("f-inbound")
    aircraft = mission.initial_aircraft(random.Random(7))
"""

from __future__ import annotations

import logging
import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from .controls import SteerDirection
from .environment import DEFAULT_ENVIRONMENT_SEED, EnvironmentFeature, generate_environment
from .events import SimulationEvent, SimulationEventType
from .landing import LandingOutcome, LandingState, LandingWind, advance_landing
from .navigation import NavigationReading, compute_reading
from .physics import (
    CROSSWIND_DRIFT_X,
    DEFAULT_VELOCITY,
    MIN_POWER_FRACTION,
    AircraftState,
    Vector2D,
    heading_difference,
    normalize_heading,
    position_on_radial,
    propagate_aircraft,
)
from .procedure_turn import ProcedureTurnTimer, tick_procedure_turn

if TYPE_CHECKING:
    from .simulation import EngineState

logger = logging.getLogger(__name__)

Emit = Callable[..., SimulationEvent]


# =============================================================================
# CONSTANTS
# =============================================================================

STATION_POSITION = (0.0, -5000.0)
DEFAULT_MISSION_ID = "f-vor"

# f-vor
PASSAGE_BRIEFING_DME_NM = 0.5
OUTBOUND_COMPLETE_DME_NM = 12.0
OUTBOUND_COMPLETE_RADIAL = 360
RADIAL_TOLERANCE_DEG = 5.0

# f-inbound
PT_OUTBOUND_RADIAL = 90
PT_START_DME_NM = 1.0
PT_TURN_CHOICE_DME_NM = 5.0
PT_INTERCEPT_ANGLE_DEG = 45.0
PT_INBOUND_COURSE = 270
NEEDLE_ALIVE_DEVIATION = 0.95
TURN_INBOUND_DEVIATION = 0.15
INBOUND_Y_WINDOW_UNITS = 300.0
INBOUND_HEADING_TOLERANCE_DEG = 60.0
STATION_REACHED_DME_NM = 0.5

# f-outbound
CC_OUTBOUND_RADIAL = 170
CC_START_DME_NM = 1.0
CC_INTERCEPT_DME_NM = 6.0
CC_NEW_COURSE = 160
CC_INTERCEPT_HEADING = 215
CC_TRACKING_DEVIATION = 0.8
CC_COMPLETE_DME_NM = 15.0
CC_COMPLETE_DEVIATION = 0.2

# f-homing
HOMING_MIN_RADIUS = 3500.0
HOMING_RADIUS_SPREAD = 2000.0
HOMING_COMPLETE_DME_NM = 0.3
ENGINE_FAILURE_ONSET_POINTS = 200
ENGINE_FAILURE_ALERT_POINTS = 300
POWER_DECAY_PER_TICK = 0.0005


# =============================================================================
# ENUMERATIONS
# =============================================================================

class MissionPhase(Enum):
    """Phases across all mission archetypes."""
    OUTBOUND = "outbound"
    INBOUND = "inbound"
    INTERCEPT = "intercept"
    TRACKING = "tracking"
    PROC_TURN = "proc_turn"
    INBOUND_TRACK = "inbound_track"
    HOMING = "homing"
    FINAL_APPROACH = "final_approach"


class Briefing(Enum):
    """Modal explanations that freeze the simulation until dismissed."""
    STATION_PASSAGE = "station_passage"
    INTERCEPT = "intercept"


# =============================================================================
# MISSION PROGRESS
# =============================================================================

@dataclass
class MissionProgress:
    """
    Phase machine state shared by all mission variants.

    Attributes:
        phase: Current mission phase.
        completed: Mission finished (terminal until reset).
        briefing: Open modal briefing, if any.
        awaiting_turn_choice: Procedure turn direction must be chosen.
        turn_direction: Chosen procedure turn direction ("left"/"right").
        mission_ticks: Number of ticks the mission has advanced.
        announced: One-shot cues already raised.
    """
    phase: MissionPhase
    completed: bool = False
    briefing: Optional[Briefing] = None
    awaiting_turn_choice: bool = False
    turn_direction: Optional[str] = None
    mission_ticks: int = 0
    announced: List[str] = field(default_factory=list)


# =============================================================================
# MISSION BASE CLASS
# =============================================================================

class Mission(ABC):
    """
    Base class for mission archetypes.

    Subclasses define the initial conditions and implement `evaluate`, the
    phase transition function run after each integration step.
    """

    mission_id: str = ""
    display_name: str = ""
    description: str = ""
    initial_phase: MissionPhase = MissionPhase.INBOUND

    # Constant crosswind drift during integration
    crosswind_drift: bool = True
    # Steering drags the heading bug along
    couples_heading_bug: bool = True
    # Uses LandingPhysicsModel instead of kinematics + VOR
    uses_landing_model: bool = False

    def __init__(self) -> None:
        self.station = Vector2D(*STATION_POSITION)

    # -------------------------------------------------------------------------
    # Initial conditions
    # -------------------------------------------------------------------------

    @abstractmethod
    def initial_aircraft(self, rng: random.Random) -> AircraftState:
        """Aircraft state at mission (re)start."""
        ...

    def initial_progress(self) -> MissionProgress:
        return MissionProgress(phase=self.initial_phase)

    def initial_landing(self) -> Optional[LandingState]:
        return None

    def build_environment(self) -> List[EnvironmentFeature]:
        return []

    # -------------------------------------------------------------------------
    # Per-tick update
    # -------------------------------------------------------------------------

    def advance(self, state: EngineState, dt: float, emit: Emit) -> None:
        """
        Advance the mission by one tick, mutating the working state.

        Integrates the aircraft, records the track, recomputes the VOR
        reading and runs the phase machine.
        """
        self.before_integration(state, dt, emit)
        drift = CROSSWIND_DRIFT_X if self.crosswind_drift else 0.0
        state.aircraft = propagate_aircraft(state.aircraft, dt, drift)
        state.path.record(state.aircraft.position)
        state.reading = compute_reading(state.aircraft.position, state.station, state.aircraft.obs_deg)
        self.evaluate(state, state.reading, dt, emit)

    def before_integration(self, state: EngineState, dt: float, emit: Emit) -> None:
        """Hook run before the aircraft moves."""

    @abstractmethod
    def evaluate(
        self,
        state: EngineState,
        reading: NavigationReading,
        dt: float,
        emit: Emit,
    ) -> None:
        """Phase transition function."""
        ...

    # -------------------------------------------------------------------------
    # Pilot decisions
    # -------------------------------------------------------------------------

    def choose_turn_direction(self, state: EngineState, direction: SteerDirection, emit: Emit) -> bool:
        """Procedure turn choice. Ignored unless the mission asks for it."""
        return False

    def dismiss_briefing(self, state: EngineState, emit: Emit) -> bool:
        briefing = state.progress.briefing
        if briefing is None:
            return False
        state.progress.briefing = None
        emit(SimulationEventType.BRIEFING_DISMISSED, briefing=briefing.value)
        self.on_briefing_dismissed(state, briefing, emit)
        return True

    def on_briefing_dismissed(self, state: EngineState, briefing: Briefing, emit: Emit) -> None:
        """Hook run after a briefing closes."""

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def set_phase(self, state: EngineState, phase: MissionPhase, emit: Emit) -> None:
        previous = state.progress.phase
        if previous == phase:
            return
        state.progress.phase = phase
        logger.info("%s: phase %s -> %s", self.mission_id, previous.name, phase.name)
        emit(SimulationEventType.PHASE_CHANGED, f"{phase.name}", previous=previous.value, phase=phase.value)

    def open_briefing(self, state: EngineState, briefing: Briefing, emit: Emit) -> None:
        state.progress.briefing = briefing
        emit(SimulationEventType.BRIEFING_OPENED, briefing=briefing.value)

    def announce_once(
        self,
        state: EngineState,
        cue: str,
        event_type: SimulationEventType,
        message: str,
        emit: Emit,
        **data: Any,
    ) -> bool:
        """Raise a one-shot cue. Returns True the first time only."""
        if cue in state.progress.announced:
            return False
        state.progress.announced.append(cue)
        emit(event_type, message, **data)
        return True

    def complete(self, state: EngineState, emit: Emit, **data: Any) -> None:
        if state.progress.completed:
            return
        state.progress.completed = True
        logger.info("%s: mission completed at tick %d", self.mission_id, state.tick)
        emit(SimulationEventType.MISSION_COMPLETED, "Mission complete", **data)

    def info(self) -> Dict[str, Any]:
        return {
            "mission_id": self.mission_id,
            "display_name": self.display_name,
            "description": self.description,
            "initial_phase": self.initial_phase.value,
        }


# =============================================================================
# F-VOR: INBOUND / OUTBOUND
# =============================================================================

class InboundOutboundMission(Mission):
    """
    Track the 360 course inbound, pass the station, track outbound.

    Passage inside 0.5 NM opens the station-passage briefing; dismissing it
    starts the outbound phase. A wide passage (flag flips to FROM outside
    0.5 NM) switches to outbound directly.
    """

    mission_id = "f-vor"
    display_name = "Tracking radials: inbound & outbound"
    description = "Fly the 360 course to the station, cross it, and track R-360 outbound to 12 NM."
    initial_phase = MissionPhase.INBOUND

    def initial_aircraft(self, rng: random.Random) -> AircraftState:
        return AircraftState(
            position=Vector2D(0.0, 0.0),
            heading_deg=0.0,
            velocity=DEFAULT_VELOCITY,
            heading_bug_deg=0.0,
            obs_deg=0.0,
        )

    def advance(self, state, dt, emit) -> None:
        held = state.aircraft.copy()
        super().advance(state, dt, emit)
        if state.progress.briefing == Briefing.STATION_PASSAGE:
            # the passage gate freezes the aircraft short of the station
            state.aircraft = held
            state.reading = compute_reading(held.position, state.station, held.obs_deg)

    def evaluate(self, state, reading, dt, emit) -> None:
        phase = state.progress.phase
        if phase == MissionPhase.INBOUND:
            if reading.distance_nm < PASSAGE_BRIEFING_DME_NM:
                self.open_briefing(state, Briefing.STATION_PASSAGE, emit)
                return
            if not reading.is_to:
                self.set_phase(state, MissionPhase.OUTBOUND, emit)
                emit(SimulationEventType.STATION_PASSAGE, "Station passage detected",
                     radial=reading.radial_deg)
        elif phase == MissionPhase.OUTBOUND:
            if (reading.distance_nm >= OUTBOUND_COMPLETE_DME_NM
                    and heading_difference(reading.radial_deg, OUTBOUND_COMPLETE_RADIAL) < RADIAL_TOLERANCE_DEG):
                self.complete(state, emit, radial=reading.radial_deg, dme=reading.distance_nm)

    def on_briefing_dismissed(self, state, briefing, emit) -> None:
        if briefing == Briefing.STATION_PASSAGE:
            self.set_phase(state, MissionPhase.OUTBOUND, emit)
            emit(SimulationEventType.STATION_PASSAGE, "Station passage detected")


# =============================================================================
# F-INBOUND: PROCEDURE TURN
# =============================================================================

class ProcedureTurnMission(Mission):
    """
    Outbound on R-090, 45/180 procedure turn, intercept the 270 course inbound.

    Stages:
    1. OUTBOUND until 5 NM, then the pilot picks a turn direction.
    2. PROC_TURN: heading bug at 045 (left) or 135 (right). The timer arms
       once the heading is captured and expires after the 45 s leg; the bug
       flips 180 and the OBS is set to the inbound course.
    3. Needle-alive and turn-inbound cues as the CDI comes in.
    4. INBOUND_TRACK once back near the course line heading westbound;
       complete inside 0.5 NM.
    """

    mission_id = "f-inbound"
    display_name = "Inbound navigation: procedure turn"
    description = "Track R-090 outbound, fly a timed procedure turn and intercept the 270 course inbound."
    initial_phase = MissionPhase.OUTBOUND
    couples_heading_bug = False

    def initial_aircraft(self, rng: random.Random) -> AircraftState:
        return AircraftState(
            position=position_on_radial(self.station, PT_OUTBOUND_RADIAL, PT_START_DME_NM),
            heading_deg=PT_OUTBOUND_RADIAL,
            velocity=DEFAULT_VELOCITY,
            heading_bug_deg=PT_OUTBOUND_RADIAL,
            obs_deg=PT_OUTBOUND_RADIAL,
        )

    def intercept_heading(self, direction: SteerDirection) -> float:
        sign = -1.0 if SteerDirection(direction) == SteerDirection.LEFT else 1.0
        return normalize_heading(PT_OUTBOUND_RADIAL + sign * PT_INTERCEPT_ANGLE_DEG)

    def choose_turn_direction(self, state, direction, emit) -> bool:
        progress = state.progress
        if progress.phase != MissionPhase.OUTBOUND or not progress.awaiting_turn_choice:
            return False

        direction = SteerDirection(direction)
        bug = self.intercept_heading(direction)
        progress.awaiting_turn_choice = False
        progress.turn_direction = direction.value
        state.aircraft.heading_bug_deg = bug
        state.timer = ProcedureTurnTimer()
        emit(SimulationEventType.PROCEDURE_TURN_SELECTED, f"Turn {progress.turn_direction} to {bug:03.0f}",
             direction=progress.turn_direction, heading_bug=bug)
        self.set_phase(state, MissionPhase.PROC_TURN, emit)
        return True

    def evaluate(self, state, reading, dt, emit) -> None:
        progress = state.progress
        aircraft = state.aircraft

        if progress.phase == MissionPhase.OUTBOUND:
            if not progress.awaiting_turn_choice and reading.distance_nm >= PT_TURN_CHOICE_DME_NM:
                progress.awaiting_turn_choice = True
                emit(SimulationEventType.TURN_CHOICE_REQUIRED, "Choose procedure turn direction",
                     dme=reading.distance_nm)

        elif progress.phase == MissionPhase.PROC_TURN:
            self._advance_timer(state, dt, emit)
            timer = state.timer
            if not timer.completed:
                return

            if not timer.advisory:
                deviation = abs(reading.course_deviation)
                if deviation < NEEDLE_ALIVE_DEVIATION:
                    self.announce_once(state, "needle_alive", SimulationEventType.NEEDLE_ALIVE,
                                       "Needle alive", emit, deviation=reading.course_deviation)
                if deviation < TURN_INBOUND_DEVIATION:
                    self.announce_once(state, "turn_inbound", SimulationEventType.TURN_INBOUND_NOW,
                                       "Turn inbound now", emit, deviation=reading.course_deviation)

            if (abs(aircraft.position.y - state.station.y) < INBOUND_Y_WINDOW_UNITS
                    and heading_difference(aircraft.heading_deg, PT_INBOUND_COURSE) < INBOUND_HEADING_TOLERANCE_DEG):
                self.set_phase(state, MissionPhase.INBOUND_TRACK, emit)

        elif progress.phase == MissionPhase.INBOUND_TRACK:
            if reading.distance_nm < STATION_REACHED_DME_NM:
                self.complete(state, emit, dme=reading.distance_nm)

    def _advance_timer(self, state: EngineState, dt: float, emit: Emit) -> None:
        aircraft = state.aircraft
        before = state.timer
        timer, bug = tick_procedure_turn(before, dt, aircraft.heading_deg, aircraft.heading_bug_deg)
        state.timer = timer

        if timer.armed and not before.armed:
            emit(SimulationEventType.TIMER_ARMED, "Outbound heading captured, timing",
                 remaining=timer.remaining_seconds)

        if timer.completed and not before.completed:
            aircraft.heading_bug_deg = bug
            aircraft.obs_deg = float(PT_INBOUND_COURSE)
            emit(SimulationEventType.TIMER_EXPIRED, "Time expired - turn inbound", heading_bug=bug)
            emit(SimulationEventType.INSTRUMENTS_TUNED, f"OBS set to {PT_INBOUND_COURSE:03d}",
                 obs=PT_INBOUND_COURSE, heading_bug=bug)

        if before.advisory and not timer.advisory:
            emit(SimulationEventType.ADVISORY_CLEARED, "Established on reversal heading",
                 heading=aircraft.heading_deg)


# =============================================================================
# F-OUTBOUND: COURSE CHANGE
# =============================================================================

class CourseChangeMission(Mission):
    """
    Track R-170 outbound, then intercept and track R-160.

    At 6 NM the OBS is tuned to 160 and the heading bug to 215, and the
    intercept briefing opens.
    """

    mission_id = "f-outbound"
    display_name = "Outbound navigation: course change"
    description = "Track R-170 outbound to 6 NM, intercept R-160 and track it to 15 NM."
    initial_phase = MissionPhase.OUTBOUND
    couples_heading_bug = False

    def initial_aircraft(self, rng: random.Random) -> AircraftState:
        return AircraftState(
            position=position_on_radial(self.station, CC_OUTBOUND_RADIAL, CC_START_DME_NM),
            heading_deg=CC_OUTBOUND_RADIAL,
            velocity=DEFAULT_VELOCITY,
            heading_bug_deg=CC_OUTBOUND_RADIAL,
            obs_deg=CC_OUTBOUND_RADIAL,
        )

    def evaluate(self, state, reading, dt, emit) -> None:
        phase = state.progress.phase
        aircraft = state.aircraft

        if phase == MissionPhase.OUTBOUND:
            if reading.distance_nm >= CC_INTERCEPT_DME_NM:
                aircraft.obs_deg = float(CC_NEW_COURSE)
                aircraft.heading_bug_deg = float(CC_INTERCEPT_HEADING)
                emit(SimulationEventType.INSTRUMENTS_TUNED,
                     f"OBS {CC_NEW_COURSE:03d}, heading bug {CC_INTERCEPT_HEADING:03d}",
                     obs=CC_NEW_COURSE, heading_bug=CC_INTERCEPT_HEADING)
                self.set_phase(state, MissionPhase.INTERCEPT, emit)
                self.open_briefing(state, Briefing.INTERCEPT, emit)

        elif phase == MissionPhase.INTERCEPT:
            if (math.isclose(aircraft.obs_deg, CC_NEW_COURSE)
                    and abs(reading.course_deviation) < CC_TRACKING_DEVIATION):
                self.set_phase(state, MissionPhase.TRACKING, emit)

        elif phase == MissionPhase.TRACKING:
            if (reading.distance_nm >= CC_COMPLETE_DME_NM
                    and abs(reading.course_deviation) < CC_COMPLETE_DEVIATION):
                self.complete(state, emit, dme=reading.distance_nm, deviation=reading.course_deviation)


# =============================================================================
# F-HOMING: STATION HOMING WITH ENGINE FAILURE
# =============================================================================

class HomingMission(Mission):
    """
    Fly direct to the airport from a random position and heading.

    Crosswind drift is disabled to isolate raw homing. Once the track holds
    200 recorded points the engine loses power progressively down to 40%;
    the emergency alert fires once past 300 points.
    """

    mission_id = "f-homing"
    display_name = "Station homing"
    description = "Navigate directly to the station by following the bearing pointer."
    initial_phase = MissionPhase.HOMING
    crosswind_drift = False

    def __init__(self, environment_seed: int = DEFAULT_ENVIRONMENT_SEED) -> None:
        super().__init__()
        self.environment_seed = environment_seed

    def initial_aircraft(self, rng: random.Random) -> AircraftState:
        radius = HOMING_MIN_RADIUS + rng.random() * HOMING_RADIUS_SPREAD
        angle = rng.random() * math.pi * 2
        heading = float(math.floor(rng.random() * 360))
        return AircraftState(
            position=Vector2D(
                self.station.x + math.cos(angle) * radius,
                self.station.y + math.sin(angle) * radius,
            ),
            heading_deg=heading,
            velocity=DEFAULT_VELOCITY,
            heading_bug_deg=heading,
            obs_deg=0.0,
        )

    def build_environment(self) -> List[EnvironmentFeature]:
        return generate_environment(self.environment_seed)

    def before_integration(self, state, dt, emit) -> None:
        aircraft = state.aircraft
        # runtime is counted in recorded track points
        runtime = len(state.path)
        if runtime <= ENGINE_FAILURE_ONSET_POINTS or aircraft.power_fraction <= MIN_POWER_FRACTION:
            return

        aircraft.power_fraction = max(MIN_POWER_FRACTION, aircraft.power_fraction - POWER_DECAY_PER_TICK)
        if runtime > ENGINE_FAILURE_ALERT_POINTS:
            if self.announce_once(state, "engine_failure", SimulationEventType.ENGINE_FAILURE,
                                  "Engine failure - power degrading", emit,
                                  power_fraction=aircraft.power_fraction):
                logger.warning("%s: engine failure after %d track points (power %.3f)",
                               self.mission_id, runtime, aircraft.power_fraction)

    def evaluate(self, state, reading, dt, emit) -> None:
        if reading.distance_nm < HOMING_COMPLETE_DME_NM:
            self.complete(state, emit, dme=reading.distance_nm)


# =============================================================================
# LANDING: CROSSWIND FINAL APPROACH
# =============================================================================

class LandingMission(Mission):
    """
    Crosswind landing. The landing physics produce the terminal outcome;
    there are no DME gates.
    """

    mission_id = "landing"
    display_name = "Crosswind landing"
    description = "Hold the centreline in a crosswind and touch down gently."
    initial_phase = MissionPhase.FINAL_APPROACH
    uses_landing_model = True
    crosswind_drift = False

    def __init__(self, wind: Optional[LandingWind] = None) -> None:
        super().__init__()
        self.wind = wind or LandingWind()

    def initial_aircraft(self, rng: random.Random) -> AircraftState:
        # Parked on the airport; LandingState carries the approach
        return AircraftState(
            position=Vector2D(self.station.x, self.station.y),
            heading_deg=0.0,
            velocity=0.0,
            heading_bug_deg=0.0,
            obs_deg=0.0,
        )

    def initial_landing(self) -> Optional[LandingState]:
        return LandingState()

    def advance(self, state, dt, emit) -> None:
        state.landing = advance_landing(state.landing, dt, wind=self.wind)
        self.evaluate(state, None, dt, emit)

    def evaluate(self, state, reading, dt, emit) -> None:
        landing = state.landing
        if landing.outcome == LandingOutcome.SUCCESS:
            emit(SimulationEventType.LANDING_SUCCESS, "Touchdown - successful landing",
                 vertical_speed_fpm=landing.vertical_speed_fpm,
                 lateral_offset_ft=landing.lateral_offset_ft)
            self.complete(state, emit, outcome=landing.outcome.value)
        elif landing.outcome == LandingOutcome.CRASH:
            emit(SimulationEventType.CRASH, "Crash", reasons=list(landing.crash_reasons),
                 vertical_speed_fpm=landing.vertical_speed_fpm,
                 lateral_offset_ft=landing.lateral_offset_ft)
            self.complete(state, emit, outcome=landing.outcome.value)


# =============================================================================
# MISSION REGISTRY
# =============================================================================

MISSION_REGISTRY: Dict[str, Callable[[], Mission]] = {
    "f-vor": InboundOutboundMission,
    "f-homing": HomingMission,
    "f-inbound": ProcedureTurnMission,
    "f-outbound": CourseChangeMission,
    "landing": LandingMission,
}


def list_missions() -> List[str]:
    return list(MISSION_REGISTRY.keys())


def create_mission(mission_id: Optional[str]) -> Mission:
    """
    Build a mission by id.

    Unknown or missing ids fall back to the basic f-vor mission.
    """
    factory = MISSION_REGISTRY.get(mission_id or "")
    if factory is None:
        logger.warning("Unknown mission id %r, falling back to %s", mission_id, DEFAULT_MISSION_ID)
        factory = MISSION_REGISTRY[DEFAULT_MISSION_ID]
    return factory()
