#!/usr/bin/env python3
"""
Tests for the procedure turn timer.

The timer arms once the heading is within 5 degrees of the bug, runs at
3x real time over a 45 second leg, flips the bug 180 degrees on expiry and
holds a turn-inbound advisory until the aircraft is within 10 degrees of
the reversed bug.
"""

import pytest

from navtrainer.procedure_turn import (
    PROCEDURE_TURN_LEG_SECONDS,
    TIMER_RATE,
    ProcedureTurnTimer,
    tick_procedure_turn,
)

ONE_TICK = 1.0 / 60.0


class TestArming:

    def test_not_armed_off_heading(self):
        timer, bug = tick_procedure_turn(ProcedureTurnTimer(), 1.0, 90.0, 45.0)
        assert not timer.armed
        assert timer.remaining_seconds == pytest.approx(PROCEDURE_TURN_LEG_SECONDS)
        assert bug == 45.0

    def test_arming_tick_counts_down(self):
        timer, _ = tick_procedure_turn(ProcedureTurnTimer(), 1.0, 47.0, 45.0)
        assert timer.armed
        assert timer.running
        assert timer.remaining_seconds == pytest.approx(PROCEDURE_TURN_LEG_SECONDS - TIMER_RATE)

    def test_arming_across_north(self):
        timer, _ = tick_procedure_turn(ProcedureTurnTimer(), ONE_TICK, 358.0, 2.0)
        assert timer.armed

    def test_stays_armed_after_heading_wanders(self):
        timer, _ = tick_procedure_turn(ProcedureTurnTimer(), 1.0, 45.0, 45.0)
        timer, _ = tick_procedure_turn(timer, 1.0, 90.0, 45.0)
        assert timer.armed
        assert timer.remaining_seconds == pytest.approx(PROCEDURE_TURN_LEG_SECONDS - 2 * TIMER_RATE)

    def test_input_timer_unchanged(self):
        fresh = ProcedureTurnTimer()
        tick_procedure_turn(fresh, 1.0, 45.0, 45.0)
        assert not fresh.armed


class TestExpiry:

    def test_expiry_flips_bug(self):
        timer = ProcedureTurnTimer(remaining_seconds=1.0, armed=True)
        timer, bug = tick_procedure_turn(timer, 1.0, 45.0, 45.0)
        assert timer.completed
        assert timer.advisory
        assert not timer.running
        assert timer.remaining_seconds == 0.0
        assert bug == pytest.approx(225.0)

    @pytest.mark.parametrize("bug,reversed_bug", [(45.0, 225.0), (135.0, 315.0)])
    def test_reversal_for_both_turn_directions(self, bug, reversed_bug):
        timer = ProcedureTurnTimer(remaining_seconds=0.01, armed=True)
        _, flipped = tick_procedure_turn(timer, 1.0, bug, bug)
        assert flipped == pytest.approx(reversed_bug)

    def test_leg_takes_fifteen_real_seconds(self):
        timer = ProcedureTurnTimer()
        bug = 45.0
        for _ in range(890):
            timer, bug = tick_procedure_turn(timer, ONE_TICK, 45.0, bug)
        assert timer.running
        assert bug == 45.0

        for _ in range(20):
            timer, bug = tick_procedure_turn(timer, ONE_TICK, 45.0, bug)
        assert timer.completed
        assert bug == pytest.approx(225.0)

    def test_completed_timer_does_not_flip_again(self):
        timer = ProcedureTurnTimer(remaining_seconds=0.0, armed=True, completed=True, advisory=True)
        timer, bug = tick_procedure_turn(timer, 1.0, 45.0, 225.0)
        assert bug == 225.0
        assert timer.remaining_seconds == 0.0


class TestAdvisory:

    def test_advisory_persists_until_established(self):
        timer = ProcedureTurnTimer(remaining_seconds=0.0, armed=True, completed=True, advisory=True)
        timer, _ = tick_procedure_turn(timer, ONE_TICK, 150.0, 225.0)
        assert timer.advisory

    def test_advisory_clears_within_ten_degrees(self):
        timer = ProcedureTurnTimer(remaining_seconds=0.0, armed=True, completed=True, advisory=True)
        timer, _ = tick_procedure_turn(timer, ONE_TICK, 216.0, 225.0)
        assert not timer.advisory
