"""
Flight Recorder - in-memory flight path and event capture for post-mission review.

Captures:
- The aircraft ground track (a point whenever the aircraft moved more than
  5 units since the last recorded point)
- Every simulation event raised during the session
- Final mission outcome

Nothing is written to disk: the recording lives for the session only and is
discarded on reset. `to_json()` exists so a front end can hand the review
data to its own widgets.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .events import SimulationEvent, SimulationEventType
from .physics import Vector2D


# Minimum spacing between recorded track points (map units)
TRACE_MIN_SPACING = 5.0

# Review map layout
REVIEW_PADDING_PX = 60.0


# =============================================================================
# FLIGHT PATH TRACE
# =============================================================================

@dataclass
class FlightPathTrace:
    """Ordered ground track of the current session."""
    points: List[Tuple[float, float]] = field(default_factory=list)
    min_spacing: float = TRACE_MIN_SPACING

    def record(self, position: Vector2D) -> bool:
        """
        Append `position` if it is far enough from the last point.

        Returns:
            True if the point was recorded.
        """
        if self.points:
            last_x, last_y = self.points[-1]
            if Vector2D(last_x, last_y).distance_to(position) <= self.min_spacing:
                return False
        self.points.append((position.x, position.y))
        return True

    def clear(self) -> None:
        self.points.clear()

    def as_array(self) -> np.ndarray:
        if not self.points:
            return np.empty((0, 2), dtype=float)
        return np.asarray(self.points, dtype=float)

    def track_length(self) -> float:
        """Total flown distance along the trace (map units)."""
        pts = self.as_array()
        if len(pts) < 2:
            return 0.0
        return float(np.sum(np.hypot(*np.diff(pts, axis=0).T)))

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class ReviewViewport:
    """
    Fit of the track and station into a review canvas.

    Screen = (map - min) * scale + offset.
    """
    min_x: float
    min_y: float
    scale: float
    offset_x: float
    offset_y: float

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return (
            (x - self.min_x) * self.scale + self.offset_x,
            (y - self.min_y) * self.scale + self.offset_y,
        )


def review_viewport(
    trace: FlightPathTrace,
    station: Vector2D,
    current: Vector2D,
    width: float,
    height: float,
    padding: float = REVIEW_PADDING_PX,
) -> ReviewViewport:
    """
    Scale and centre the flown track, the station and the aircraft into a
    width x height canvas with uniform scale and `padding` pixels margin.
    """
    pts = np.vstack([
        trace.as_array(),
        np.array([[station.x, station.y], [current.x, current.y]], dtype=float),
    ])
    min_x, min_y = pts.min(axis=0)
    max_x, max_y = pts.max(axis=0)

    data_width = (max_x - min_x) or 1.0
    data_height = (max_y - min_y) or 1.0
    available_width = width - padding * 2
    available_height = height - padding * 2
    scale = min(available_width / data_width, available_height / data_height)

    return ReviewViewport(
        min_x=float(min_x),
        min_y=float(min_y),
        scale=float(scale),
        offset_x=float((available_width - data_width * scale) / 2 + padding),
        offset_y=float((available_height - data_height * scale) / 2 + padding),
    )


# =============================================================================
# SESSION RECORDING
# =============================================================================

@dataclass
class SessionRecording:
    """Complete recording of one training session."""
    recording_version: str = "1.0"
    recorded_at: str = ""
    mission_id: str = ""
    mission_name: str = ""

    events: List[Dict[str, Any]] = field(default_factory=list)
    path: List[Tuple[float, float]] = field(default_factory=list)

    # Result
    completed: bool = False
    outcome: Optional[str] = None
    duration_s: float = 0.0
    ticks: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class SessionRecorder:
    """
    Collects events from a SimulationClock for the post-mission review.

    Usage:
        recorder = SessionRecorder()
        clock.add_event_callback(recorder.on_event)
        recorder.start_recording(clock.mission_id, clock.mission.display_name)

        # ... fly ...

        recorder.end_recording(clock.snapshot())
        print(recorder.recording.to_json())
    """

    def __init__(self) -> None:
        self.recording = SessionRecording()

    def start_recording(self, mission_id: str, mission_name: str = "") -> None:
        self.recording = SessionRecording(
            recorded_at=datetime.now().isoformat(),
            mission_id=mission_id,
            mission_name=mission_name,
        )

    def on_event(self, event: SimulationEvent) -> None:
        """Event callback for SimulationClock.add_event_callback."""
        if event.event_type == SimulationEventType.RESET:
            self.recording.events.clear()
        self.recording.events.append(event.to_dict())

    def end_recording(self, state: Any) -> SessionRecording:
        """
        Close the recording with the final engine state.

        Args:
            state: EngineState snapshot at the end of the session.
        """
        self.recording.path = list(state.path.points)
        self.recording.completed = state.progress.completed
        self.recording.duration_s = state.elapsed_s
        self.recording.ticks = state.tick
        if state.landing is not None:
            self.recording.outcome = state.landing.outcome.value
        elif state.progress.completed:
            self.recording.outcome = "completed"
        elif state.aborted:
            self.recording.outcome = "aborted"
        return self.recording
