"""Tests for the HumanTyper start/countdown/stop lifecycle."""

import asyncio
import logging

import pytest

from humantyper.keyboard.engine import HumanTyper, StartOutcome
from humantyper.keyboard.request import TypingRequest
from humantyper.keyboard.state import RunStatus

FAST = dict(wpm=300, jitter=0.0)


class StoppingSink:
    """Calls engine.stop() right after delivering the k-th character."""

    def __init__(self, k):
        self.k = k
        self.chars = []
        self.engine = None

    async def emit(self, ch):
        self.chars.append(ch)
        if len(self.chars) == self.k:
            self.engine.stop()


class FlakySink:
    """Raises for one specific character."""

    def __init__(self, bad):
        self.bad = bad
        self.chars = []

    async def emit(self, ch):
        if ch == self.bad:
            raise OSError("no focused window")
        self.chars.append(ch)


class TestEmission:

    def test_every_character_in_order(self, sink, fake_sleep):
        text = "Hello, world.\nSecond paragraph!"
        engine = HumanTyper(sink, seed=1, sleep=fake_sleep)

        outcome = asyncio.run(engine.run(TypingRequest(text, **FAST)))

        assert outcome is StartOutcome.STARTED
        assert sink.text == text
        assert len(fake_sleep.calls) == len(text)
        assert engine.status == RunStatus(False, 0)
        assert engine.recorder.delivered() == list(text)
        assert not engine.recorder.cancelled

    def test_is_typing_while_running(self, sink, fake_sleep):
        engine = HumanTyper(sink, sleep=fake_sleep)

        async def scenario():
            outcome = engine.start(TypingRequest("abc"))
            during = engine.is_typing
            await engine.wait()
            return outcome, during

        outcome, during = asyncio.run(scenario())

        assert outcome is StartOutcome.STARTED
        assert during is True
        assert engine.is_typing is False

    def test_delivery_failure_is_skipped_not_fatal(self, fake_sleep, caplog):
        flaky = FlakySink("x")
        engine = HumanTyper(flaky, sleep=fake_sleep)

        with caplog.at_level(logging.WARNING):
            asyncio.run(engine.run(TypingRequest("axbxc", **FAST)))

        assert flaky.chars == ["a", "b", "c"]
        # the failed characters still cost their delay
        assert len(fake_sleep.calls) == 5
        assert engine.recorder.failed_count == 2
        assert "Could not deliver" in caplog.text

    def test_seeded_runs_repeat(self, sink, sleep_factory):
        first, second = sleep_factory(), sleep_factory()
        request = TypingRequest("Same text, same rhythm.\n")
        asyncio.run(HumanTyper(sink, seed=9, sleep=first).run(request))
        asyncio.run(HumanTyper(sink, seed=9, sleep=second).run(request))

        assert first.calls == second.calls


class TestStartRejection:

    def test_empty_text_is_rejected(self, sink, fake_sleep):
        engine = HumanTyper(sink, sleep=fake_sleep)
        seen = []
        engine.add_listener(seen.append)

        outcome = asyncio.run(engine.run(TypingRequest("")))

        assert outcome is StartOutcome.REJECTED_EMPTY
        assert not outcome.accepted
        assert sink.chars == []
        assert seen == []
        assert engine.is_typing is False

    def test_busy_engine_rejects_second_start(self, sink, fake_sleep):
        engine = HumanTyper(sink, sleep=fake_sleep)

        async def scenario():
            first = engine.start(TypingRequest("one"))
            second = engine.start(TypingRequest("two"))
            await engine.wait()
            return first, second

        first, second = asyncio.run(scenario())

        assert first is StartOutcome.STARTED
        assert second is StartOutcome.REJECTED_BUSY
        assert sink.text == "one"


class TestStop:

    @pytest.mark.parametrize("k", [1, 3, 7])
    def test_stop_halts_within_one_character(self, fake_sleep, k):
        stopping = StoppingSink(k)
        engine = HumanTyper(stopping, sleep=fake_sleep)
        stopping.engine = engine
        seen = []
        engine.add_listener(seen.append)

        asyncio.run(engine.run(TypingRequest("abcdefghijklmnop")))

        assert k <= len(stopping.chars) <= k + 1
        assert engine.is_typing is False
        assert engine.recorder.cancelled
        assert seen[-1] == RunStatus(False, 0)

    def test_stop_on_idle_engine_is_noop(self, sink):
        engine = HumanTyper(sink)
        seen = []
        engine.add_listener(seen.append)

        engine.stop()
        engine.stop()

        assert engine.status == RunStatus(False, 0)
        assert seen == []

    def test_restart_after_stop_does_not_revive_old_run(self, fake_sleep):
        class RestartingSink(StoppingSink):
            async def emit(self, ch):
                self.chars.append(ch)
                if len(self.chars) == self.k:
                    self.engine.stop()
                    self.engine.start(TypingRequest("XY"))

        restarting = RestartingSink(2)
        engine = HumanTyper(restarting, sleep=fake_sleep)
        restarting.engine = engine

        async def scenario():
            engine.start(TypingRequest("abcdef"))
            await engine.wait()
            # let the superseded run reach its next checkpoint
            for _ in range(5):
                await asyncio.sleep(0)

        asyncio.run(scenario())

        assert restarting.chars == ["a", "b", "X", "Y"]
        assert engine.is_typing is False

    def test_stop_threadsafe_from_another_thread(self, sink):
        engine = HumanTyper(sink)
        text = "a" * 50
        request = TypingRequest(
            text,
            pause_spaces=False,
            pause_punctuation=False,
            pause_paragraphs=False,
            **FAST,
        )

        async def scenario():
            engine.start(request)
            await asyncio.sleep(0.1)
            await asyncio.to_thread(engine.stop_threadsafe)
            await engine.wait()

        asyncio.run(scenario())

        assert 0 < len(sink.chars) < len(text)
        assert engine.is_typing is False

    def test_stop_threadsafe_before_any_start(self, sink):
        HumanTyper(sink).stop_threadsafe()


class TestCountdown:

    def test_counts_three_two_one_then_types(self, sink, fake_sleep):
        engine = HumanTyper(sink, sleep=fake_sleep)
        seen = []
        engine.add_listener(seen.append)

        outcome = asyncio.run(engine.run(TypingRequest("hi", countdown=3)))

        assert outcome is StartOutcome.COUNTING_DOWN
        assert seen == [
            RunStatus(False, 3),
            RunStatus(False, 2),
            RunStatus(False, 1),
            RunStatus(True, 0),
            RunStatus(False, 0),
        ]
        assert fake_sleep.calls[:3] == [1.0, 1.0, 1.0]
        assert sink.text == "hi"

    def test_stop_during_countdown_prevents_typing(self, sink, fake_sleep):
        engine = HumanTyper(sink, sleep=fake_sleep)
        seen = []

        def listener(status):
            seen.append(status)
            if status.countdown_remaining == 2:
                engine.stop()

        engine.add_listener(listener)

        asyncio.run(engine.run(TypingRequest("never", countdown=3)))

        assert not any(s.is_typing for s in seen)
        assert seen[-1] == RunStatus(False, 0)
        assert sink.chars == []

    def test_start_with_countdown_defaults_to_five(self, sink, fake_sleep):
        engine = HumanTyper(sink, sleep=fake_sleep)
        seen = []
        engine.add_listener(seen.append)

        async def scenario():
            outcome = engine.start_with_countdown(TypingRequest("ok"))
            await engine.wait()
            return outcome

        assert asyncio.run(scenario()) is StartOutcome.COUNTING_DOWN
        assert seen[0] == RunStatus(False, 5)
        assert fake_sleep.calls[:5] == [1.0] * 5

    def test_start_during_countdown_restarts_it(self, sink, fake_sleep):
        engine = HumanTyper(sink, sleep=fake_sleep)

        async def scenario():
            engine.start(TypingRequest("old", countdown=3))
            await asyncio.sleep(0)
            outcome = engine.start(TypingRequest("new", countdown=2))
            await engine.wait()
            return outcome

        assert asyncio.run(scenario()) is StartOutcome.COUNTING_DOWN
        assert sink.text == "new"


def test_failing_listener_does_not_break_run(sink, fake_sleep, caplog):
    engine = HumanTyper(sink, sleep=fake_sleep)

    def broken(status):
        raise RuntimeError("display went away")

    engine.add_listener(broken)
    with caplog.at_level(logging.ERROR):
        asyncio.run(engine.run(TypingRequest("abc")))

    assert sink.text == "abc"
    assert "Status listener" in caplog.text

    engine.remove_listener(broken)
    assert engine._listeners == []
