#!/usr/bin/env python3
"""
Procedure Turn Timer for the VOR/HSI Navigation Trainer.

Models the timed leg of a 45/180 procedure turn:

1. The timer arms (once) when the aircraft heading settles within 5 degrees
   of the outbound intercept heading set on the heading bug.
2. It counts down the nominal 45 second leg at 3 simulated seconds per
   real second so training sessions stay short.
3. On expiry it clamps to zero, flips the heading bug by 180 degrees and
   raises the "turn inbound" advisory.
4. The advisory clears once the heading is within 10 degrees of the new
   bug. The timer never re-arms.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .physics import heading_difference, normalize_heading


# =============================================================================
# CONSTANTS
# =============================================================================

PROCEDURE_TURN_LEG_SECONDS = 45.0
TIMER_RATE = 3.0  # simulated seconds per real second
ARM_TOLERANCE_DEG = 5.0
ADVISORY_CLEAR_TOLERANCE_DEG = 10.0
REVERSAL_DEG = 180.0


@dataclass
class ProcedureTurnTimer:
    """
    Countdown state for the outbound timing leg.

    Attributes:
        remaining_seconds: Simulated seconds left on the leg.
        armed: True once the outbound heading was captured.
        completed: True once the leg expired (terminal).
        advisory: "Turn inbound" advisory active after expiry.
    """
    remaining_seconds: float = PROCEDURE_TURN_LEG_SECONDS
    armed: bool = False
    completed: bool = False
    advisory: bool = False

    @property
    def running(self) -> bool:
        return self.armed and not self.completed


def tick_procedure_turn(
    timer: ProcedureTurnTimer,
    dt: float,
    heading_deg: float,
    heading_bug_deg: float,
) -> tuple[ProcedureTurnTimer, float]:
    """
    Advance the timer by one step.

    Args:
        timer: Current timer state.
        dt: Real seconds elapsed this step.
        heading_deg: Aircraft heading.
        heading_bug_deg: Heading bug (outbound heading before expiry).

    Returns:
        (new timer, heading bug) - the bug is flipped on the expiry step.
    """
    new_timer = replace(timer)
    bug = heading_bug_deg

    if new_timer.completed:
        if new_timer.advisory and heading_difference(heading_deg, bug) <= ADVISORY_CLEAR_TOLERANCE_DEG:
            new_timer.advisory = False
        return new_timer, bug

    if not new_timer.armed and heading_difference(heading_deg, bug) <= ARM_TOLERANCE_DEG:
        new_timer.armed = True

    if new_timer.armed:
        new_timer.remaining_seconds -= TIMER_RATE * dt
        if new_timer.remaining_seconds <= 0:
            new_timer.remaining_seconds = 0.0
            new_timer.completed = True
            new_timer.advisory = True
            bug = normalize_heading(bug + REVERSAL_DEG)

    return new_timer, bug
