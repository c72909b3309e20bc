#!/usr/bin/env python3
"""
Simulation events for the VOR/HSI Navigation Trainer.

Events are side-effect notifications (alerts, phase changes, lifecycle) for
presentation and audio collaborators. They are never errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict


class SimulationEventType(Enum):
    """Types of events that can occur during a training session."""
    # Session lifecycle
    MISSION_STARTED = auto()
    PAUSED = auto()
    RESUMED = auto()
    RESET = auto()
    ABORTED = auto()

    # Mission flow
    PHASE_CHANGED = auto()
    MISSION_COMPLETED = auto()
    BRIEFING_OPENED = auto()
    BRIEFING_DISMISSED = auto()
    INSTRUMENTS_TUNED = auto()

    # Navigation alerts
    STATION_PASSAGE = auto()
    TURN_CHOICE_REQUIRED = auto()
    PROCEDURE_TURN_SELECTED = auto()
    TIMER_ARMED = auto()
    TIMER_EXPIRED = auto()
    ADVISORY_CLEARED = auto()
    NEEDLE_ALIVE = auto()
    TURN_INBOUND_NOW = auto()

    # Emergencies and outcomes
    ENGINE_FAILURE = auto()
    LANDING_SUCCESS = auto()
    CRASH = auto()


@dataclass
class SimulationEvent:
    """
    An event raised during a session.

    Attributes:
        event_type: The type of event.
        timestamp: Simulated time when the event occurred (seconds).
        tick: Engine tick counter at the time of the event.
        message: Short human-readable alert text.
        data: Additional event-specific data.
    """
    event_type: SimulationEventType
    timestamp: float
    tick: int = 0
    message: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type.name,
            "timestamp": self.timestamp,
            "tick": self.tick,
            "message": self.message,
            "data": dict(self.data),
        }

    def __str__(self) -> str:
        text = f" {self.message}" if self.message else ""
        return f"T+{self.timestamp:.1f}s {self.event_type.name}{text}"
