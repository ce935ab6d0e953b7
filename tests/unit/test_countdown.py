"""Tests for the countdown transition table and scheduler."""

import asyncio

from humantyper.keyboard.countdown import CountdownScheduler, Tick, countdown_tick
from humantyper.keyboard.state import RunState


class TestCountdownTick:

    def test_decrements_while_above_one(self):
        state = RunState(countdown_remaining=3)
        assert countdown_tick(state) is Tick.CONTINUE
        assert state.countdown_remaining == 2

    def test_fires_at_one(self):
        state = RunState(countdown_remaining=1)
        assert countdown_tick(state) is Tick.FIRE
        assert state.countdown_remaining == 0

    def test_cancel_wins_and_zeroes(self):
        state = RunState(countdown_remaining=4, cancel_requested=True)
        assert countdown_tick(state) is Tick.CANCELLED
        assert state.countdown_remaining == 0


class TestCountdownScheduler:

    def test_ticks_once_per_second_then_fires(self, fake_sleep):
        state = RunState(countdown_remaining=3, generation=1)
        seen = []
        fired = []
        scheduler = CountdownScheduler(
            state,
            1,
            on_change=lambda: seen.append(state.countdown_remaining),
            on_fire=lambda: fired.append(True),
            sleep=fake_sleep,
        )

        outcome = asyncio.run(scheduler.run())

        assert outcome is Tick.FIRE
        assert seen == [2, 1]
        assert fired == [True]
        assert fake_sleep.calls == [1.0, 1.0, 1.0]

    def test_superseded_generation_leaves_state_alone(self, fake_sleep):
        state = RunState(countdown_remaining=3, generation=2)
        scheduler = CountdownScheduler(
            state, 1, on_change=lambda: None, on_fire=lambda: None, sleep=fake_sleep
        )

        assert asyncio.run(scheduler.run()) is Tick.CANCELLED
        assert state.countdown_remaining == 3
