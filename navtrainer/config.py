"""
Runtime settings for the navigation trainer.

Settings come from the environment (a local .env file is honoured). Mission
thresholds are fixed per mission archetype and are deliberately absent here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_TICK_RATE_HZ = 60.0
DEFAULT_MISSION_ID = "f-vor"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class SimulatorSettings:
    """
    Engine settings.

    Attributes:
        tick_rate_hz: Update cadence; the clock steps 1/tick_rate_hz seconds.
        default_mission: Mission id used when none is given.
        log_level: Logging level name.
        homing_seed: Seed for the homing start position (None = random).
        start_paused: Missions wait for resume() before flying.
    """
    tick_rate_hz: float = DEFAULT_TICK_RATE_HZ
    default_mission: str = DEFAULT_MISSION_ID
    log_level: str = "INFO"
    homing_seed: Optional[int] = None
    start_paused: bool = True

    def __post_init__(self) -> None:
        if self.tick_rate_hz <= 0:
            raise ValueError(f"tick_rate_hz must be positive, got {self.tick_rate_hz}")

    @property
    def time_step(self) -> float:
        return 1.0 / self.tick_rate_hz

    @classmethod
    def from_env(cls) -> SimulatorSettings:
        """Build settings from NAVTRAINER_* environment variables."""
        seed = os.getenv("NAVTRAINER_HOMING_SEED")
        paused = os.getenv("NAVTRAINER_START_PAUSED")
        return cls(
            tick_rate_hz=float(os.getenv("NAVTRAINER_TICK_RATE_HZ", DEFAULT_TICK_RATE_HZ)),
            default_mission=os.getenv("NAVTRAINER_DEFAULT_MISSION", DEFAULT_MISSION_ID),
            log_level=os.getenv("NAVTRAINER_LOG_LEVEL", "INFO").upper(),
            homing_seed=int(seed) if seed not in (None, "") else None,
            start_paused=paused.strip().lower() in _TRUE_VALUES if paused else True,
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a basic console handler unless the host already configured logging."""
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
