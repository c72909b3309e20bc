#!/usr/bin/env python3
"""
Simulation Clock for the VOR/HSI Navigation Trainer.

This module implements the frame-stepped update loop that:
- Runs in fixed time steps tied to the display cadence (default 60 Hz)
- Owns the single serialisable EngineState of the session
- Applies pilot inputs between ticks
- Advances the active mission (kinematics, VOR, phase machine, or landing)
- Produces an event log plus callbacks for presentation and audio

Advancement is frozen while paused, while a briefing is open, once the
mission is complete, and after abort. Pilot inputs are still accepted while
paused; a briefing only accepts its dismissal.

Usage:
    clock = SimulationClock("f-vor")
    clock.resume()
    clock.steer("left")
    clock.run(600)
    state = clock.snapshot()
"""

from __future__ import annotations

import copy
import logging
import random
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .config import SimulatorSettings
from .controls import (
    SteerCombo,
    SteerDirection,
    ThrottleDirection,
    apply_steer,
    apply_throttle,
    center_cdi,
    sync_heading_bug,
    twist_course,
    twist_heading_bug,
)
from .environment import EnvironmentFeature
from .events import SimulationEvent, SimulationEventType
from .landing import (
    PITCH_STEP_DEG,
    ROLL_STEP_DEG,
    YAW_STEP_DEG,
    LandingControls,
    LandingState,
    apply_landing_controls,
)
from .missions import Mission, MissionPhase, MissionProgress, create_mission
from .navigation import NavigationReading, compute_reading
from .physics import AircraftState, Vector2D
from .procedure_turn import ProcedureTurnTimer
from .recorder import FlightPathTrace, ReviewViewport, review_viewport

logger = logging.getLogger(__name__)


# =============================================================================
# ENGINE STATE
# =============================================================================

@dataclass
class EngineState:
    """
    Complete state of a training session.

    Collaborators receive deep copies from SimulationClock.snapshot() and
    must treat them as read-only.

    Attributes:
        mission_id: Active mission archetype.
        aircraft: Aircraft kinematics and instrument settings.
        station: VOR station / airport position.
        progress: Mission phase machine state.
        reading: Latest VOR reading (None for the landing mission).
        timer: Procedure turn timer (procedure turn mission only).
        landing: Landing telemetry (landing mission only).
        steer_combo: Steering repeat tracking.
        path: Ground track of the session.
        tick: Number of ticks advanced.
        elapsed_s: Simulated seconds advanced.
        paused: Explicit pause flag.
        aborted: Session terminated.
    """
    mission_id: str
    aircraft: AircraftState
    station: Vector2D
    progress: MissionProgress
    reading: Optional[NavigationReading] = None
    timer: Optional[ProcedureTurnTimer] = None
    landing: Optional[LandingState] = None
    steer_combo: SteerCombo = field(default_factory=SteerCombo)
    path: FlightPathTrace = field(default_factory=FlightPathTrace)
    tick: int = 0
    elapsed_s: float = 0.0
    paused: bool = True
    aborted: bool = False

    @property
    def phase(self) -> MissionPhase:
        return self.progress.phase

    @property
    def completed(self) -> bool:
        return self.progress.completed

    @property
    def frozen(self) -> bool:
        """True when ticks do not advance the simulation."""
        return (
            self.paused
            or self.aborted
            or self.progress.completed
            or self.progress.briefing is not None
        )

    def copy(self) -> EngineState:
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-compatible representation."""
        return _jsonable(asdict(self))


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


# =============================================================================
# SIMULATION CLOCK
# =============================================================================

class SimulationClock:
    """
    Fixed-cadence update loop for one training session.

    Attributes:
        mission: Active mission variant.
        time_step: Seconds per tick.
        state: Live engine state (owned by the clock).
        environment: Static terrain features (homing mission only).
        events: Events raised since the last (re)start.
    """

    def __init__(
        self,
        mission_id: Optional[str] = None,
        settings: Optional[SimulatorSettings] = None,
        seed: Optional[int] = None,
        mission: Optional[Mission] = None,
    ) -> None:
        """
        Initialise a session.

        Args:
            mission_id: Mission archetype id; unknown ids fall back to f-vor.
            settings: Engine settings (defaults when None).
            seed: Seed for random initial conditions (homing start).
            mission: Pre-built mission variant, overrides mission_id.
        """
        self.settings = settings or SimulatorSettings()
        self.time_step = self.settings.time_step
        if seed is None:
            seed = self.settings.homing_seed
        self.rng = random.Random(seed)

        self.mission = mission or create_mission(mission_id or self.settings.default_mission)
        self.events: List[SimulationEvent] = []
        self._event_callbacks: List[Callable[[SimulationEvent], None]] = []
        self.environment: List[EnvironmentFeature] = self.mission.build_environment()
        self.state = self._initial_state()
        logger.info("Mission %s ready (%s)", self.mission.mission_id, self.mission.display_name)
        self._log_event(SimulationEventType.MISSION_STARTED, self.mission.display_name,
                        mission_id=self.mission.mission_id)

    @property
    def mission_id(self) -> str:
        return self.mission.mission_id

    def _initial_state(self) -> EngineState:
        aircraft = self.mission.initial_aircraft(self.rng)
        state = EngineState(
            mission_id=self.mission.mission_id,
            aircraft=aircraft,
            station=Vector2D(self.mission.station.x, self.mission.station.y),
            progress=self.mission.initial_progress(),
            landing=self.mission.initial_landing(),
            paused=self.settings.start_paused,
        )
        if not self.mission.uses_landing_model:
            state.reading = compute_reading(aircraft.position, state.station, aircraft.obs_deg)
            state.path.record(aircraft.position)
        return state

    # -------------------------------------------------------------------------
    # Update loop
    # -------------------------------------------------------------------------

    def tick(self) -> List[SimulationEvent]:
        """
        Execute a single simulation step.

        Returns:
            List of events raised during this step.
        """
        if self.state.frozen:
            return []

        start = len(self.events)
        state = self.state
        state.tick += 1
        state.elapsed_s += self.time_step
        state.progress.mission_ticks += 1

        self.mission.advance(state, self.time_step, self._emit)
        return self.events[start:]

    def run(self, ticks: int) -> List[SimulationEvent]:
        """
        Step the clock `ticks` times (headless use).

        Stops early once the session can no longer advance on its own
        (completed, aborted or waiting on a briefing).
        """
        raised: List[SimulationEvent] = []
        for _ in range(ticks):
            if self.state.frozen:
                break
            raised.extend(self.tick())
        return raised

    def pause(self) -> None:
        if self.state.aborted or self.state.paused:
            return
        self.state.paused = True
        self._log_event(SimulationEventType.PAUSED)

    def resume(self) -> None:
        if self.state.aborted or not self.state.paused:
            return
        self.state.paused = False
        self._log_event(SimulationEventType.RESUMED)

    def reset(self) -> None:
        """Restart the mission from its initial conditions, discarding the track."""
        if self.state.aborted:
            return
        logger.info("Mission %s reset", self.mission_id)
        self.events.clear()
        self.state = self._initial_state()
        self._log_event(SimulationEventType.RESET, mission_id=self.mission_id)
        self._log_event(SimulationEventType.MISSION_STARTED, self.mission.display_name,
                        mission_id=self.mission_id)

    def abort(self) -> None:
        """Terminate the session. Nothing advances or accepts input afterwards."""
        if self.state.aborted:
            return
        self.state.aborted = True
        logger.info("Mission %s aborted at tick %d", self.mission_id, self.state.tick)
        self._log_event(SimulationEventType.ABORTED)

    # -------------------------------------------------------------------------
    # Pilot inputs
    # -------------------------------------------------------------------------

    def _accepts_input(self) -> bool:
        return not (
            self.state.aborted
            or self.state.progress.completed
            or self.state.progress.briefing is not None
        )

    def _accepts_flight_input(self) -> bool:
        return self._accepts_input() and not self.mission.uses_landing_model

    def _accepts_landing_input(self) -> bool:
        return (
            self._accepts_input()
            and self.mission.uses_landing_model
            and self.state.landing is not None
            and not self.state.landing.is_terminal
        )

    def steer(self, direction: SteerDirection, timestamp_ms: Optional[float] = None) -> bool:
        """
        Turn left or right by one press.

        Args:
            direction: "left" or "right".
            timestamp_ms: Press time in ms; defaults to a monotonic clock.
        """
        direction = SteerDirection(direction)
        if not self._accepts_flight_input():
            return False
        if timestamp_ms is None:
            timestamp_ms = time.monotonic() * 1000.0
        self.state.aircraft, self.state.steer_combo = apply_steer(
            self.state.aircraft,
            self.state.steer_combo,
            direction,
            timestamp_ms,
            couple_heading_bug=self.mission.couples_heading_bug,
        )
        return True

    def throttle(self, direction: ThrottleDirection) -> bool:
        direction = ThrottleDirection(direction)
        if not self._accepts_flight_input():
            return False
        self.state.aircraft = apply_throttle(self.state.aircraft, direction)
        return True

    def twist_course(self, delta_deg: float) -> bool:
        if not self._accepts_flight_input():
            return False
        self.state.aircraft = twist_course(self.state.aircraft, delta_deg)
        self._refresh_reading()
        return True

    def twist_heading_bug(self, delta_deg: float) -> bool:
        if not self._accepts_flight_input():
            return False
        self.state.aircraft = twist_heading_bug(self.state.aircraft, delta_deg)
        return True

    def sync_heading_bug(self) -> bool:
        if not self._accepts_flight_input():
            return False
        self.state.aircraft = sync_heading_bug(self.state.aircraft)
        return True

    def center_cdi(self) -> bool:
        if not self._accepts_flight_input() or self.state.reading is None:
            return False
        self.state.aircraft = center_cdi(self.state.aircraft, self.state.reading)
        self._refresh_reading()
        return True

    def choose_procedure_turn_direction(self, direction: SteerDirection) -> bool:
        """Pick the procedure turn side; ignored unless the mission is waiting for it."""
        direction = SteerDirection(direction)
        if not self._accepts_flight_input():
            return False
        return self.mission.choose_turn_direction(self.state, direction, self._emit)

    def dismiss_briefing(self) -> bool:
        if self.state.aborted:
            return False
        return self.mission.dismiss_briefing(self.state, self._emit)

    def adjust_pitch(self, delta_deg: float = PITCH_STEP_DEG) -> bool:
        return self._apply_landing_controls(LandingControls(pitch_delta=delta_deg))

    def adjust_roll(self, delta_deg: float = ROLL_STEP_DEG) -> bool:
        return self._apply_landing_controls(LandingControls(roll_delta=delta_deg))

    def adjust_yaw(self, delta_deg: float = YAW_STEP_DEG) -> bool:
        return self._apply_landing_controls(LandingControls(yaw_delta=delta_deg))

    def _apply_landing_controls(self, controls: LandingControls) -> bool:
        if not self._accepts_landing_input():
            return False
        self.state.landing = apply_landing_controls(self.state.landing, controls)
        return True

    def _refresh_reading(self) -> None:
        aircraft = self.state.aircraft
        self.state.reading = compute_reading(aircraft.position, self.state.station, aircraft.obs_deg)

    # -------------------------------------------------------------------------
    # Outputs
    # -------------------------------------------------------------------------

    def snapshot(self) -> EngineState:
        """Read-only copy of the current engine state."""
        return self.state.copy()

    def review(self, width: float, height: float) -> ReviewViewport:
        """Fit the flown track into a width x height review map."""
        return review_viewport(
            self.state.path, self.state.station, self.state.aircraft.position, width, height
        )

    def add_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        """
        Register a callback to be called for each simulation event.

        Args:
            callback: Function that takes a SimulationEvent.
        """
        self._event_callbacks.append(callback)

    def remove_event_callback(self, callback: Callable[[SimulationEvent], None]) -> None:
        if callback in self._event_callbacks:
            self._event_callbacks.remove(callback)

    def get_events_by_type(self, event_type: SimulationEventType) -> List[SimulationEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def _emit(self, event_type: SimulationEventType, message: str = "", **data: Any) -> SimulationEvent:
        return self._log_event(event_type, message, **data)

    def _log_event(self, event_type: SimulationEventType, message: str = "", **data: Any) -> SimulationEvent:
        """Log a simulation event and notify callbacks."""
        event = SimulationEvent(
            event_type=event_type,
            timestamp=self.state.elapsed_s,
            tick=self.state.tick,
            message=message,
            data=data,
        )
        self.events.append(event)
        logger.debug("%s", event)

        for callback in self._event_callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Event callback failed for %s", event.event_type.name)

        return event
