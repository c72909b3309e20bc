#!/usr/bin/env python3
"""
Fly a training mission headless and print the event log and review summary.

Usage:
    python scripts/run_mission.py --list
    python scripts/run_mission.py f-vor --ticks 20000 --autopilot
    python scripts/run_mission.py f-homing --seed 7 --autopilot --json
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from navtrainer.config import SimulatorSettings, configure_logging
from navtrainer.controls import SteerDirection
from navtrainer.missions import MISSION_REGISTRY, create_mission
from navtrainer.navigation import centered_course
from navtrainer.physics import normalize_180
from navtrainer.recorder import SessionRecorder
from navtrainer.simulation import SimulationClock

logger = logging.getLogger("run_mission")

# Ticks between autopilot steer presses (keeps presses outside the combo window)
AUTOPILOT_INTERVAL_TICKS = 30


def autopilot_step(clock: SimulationClock) -> None:
    """Point the nose along the radial through the aircraft's position."""
    state = clock.state
    if state.reading is None:
        return
    error = normalize_180(centered_course(state.reading) - state.aircraft.heading_deg)
    if abs(error) < 2.0:
        return
    direction = SteerDirection.RIGHT if error > 0 else SteerDirection.LEFT
    clock.steer(direction, timestamp_ms=state.elapsed_s * 1000.0)


def main():
    parser = argparse.ArgumentParser(
        description="Fly a VOR/HSI training mission headless",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python scripts/run_mission.py f-vor --autopilot
    python scripts/run_mission.py f-inbound --turn right --ticks 30000
    python scripts/run_mission.py landing --json
        """,
    )
    parser.add_argument(
        "mission",
        nargs="?",
        default=None,
        help="Mission id (default: NAVTRAINER_DEFAULT_MISSION or f-vor)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=20000,
        help="Maximum number of ticks to simulate (default: 20000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for random initial conditions",
    )
    parser.add_argument(
        "--autopilot",
        action="store_true",
        help="Steer along the current radial while flying",
    )
    parser.add_argument(
        "--turn",
        choices=["left", "right"],
        default="left",
        help="Procedure turn direction when asked (default: left)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the session recording as JSON",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available missions and exit",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )

    args = parser.parse_args()

    settings = SimulatorSettings.from_env()
    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if args.list:
        for mission_id in MISSION_REGISTRY:
            info = create_mission(mission_id).info()
            print(f"{mission_id:12s} {info['display_name']}")
        return 0

    clock = SimulationClock(args.mission, settings=settings, seed=args.seed)
    recorder = SessionRecorder()
    clock.add_event_callback(recorder.on_event)
    recorder.start_recording(clock.mission_id, clock.mission.display_name)

    print(f"Mission: {clock.mission.display_name} ({clock.mission_id})")
    clock.resume()

    for _ in range(args.ticks):
        if clock.state.aborted or clock.state.completed:
            break
        if clock.state.progress.briefing is not None:
            clock.dismiss_briefing()
        if clock.state.progress.awaiting_turn_choice:
            clock.choose_procedure_turn_direction(args.turn)
        if args.autopilot and clock.state.tick % AUTOPILOT_INTERVAL_TICKS == 0:
            autopilot_step(clock)
        for event in clock.tick():
            print(f"  {event}")

    state = clock.snapshot()
    if not state.completed:
        logger.info("Stopped after %d ticks without completing", state.tick)
        clock.abort()

    recording = recorder.end_recording(state)
    print(f"Result: {recording.outcome or 'incomplete'} after {recording.duration_s:.1f}s "
          f"({recording.ticks} ticks, {len(recording.path)} track points)")
    if args.json:
        print(recording.to_json())

    return 0 if state.completed else 1


if __name__ == "__main__":
    sys.exit(main())
