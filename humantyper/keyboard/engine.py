from __future__ import annotations
import asyncio
import dataclasses
import enum
import logging
import random
from typing import Callable, List, Optional

from ..utils import sleep as _sleep
from .config import kcfg
from .countdown import CountdownScheduler
from .emitter import Sleeper, run_emission
from .request import TypingRequest
from .sinks import KeystrokeSink
from .state import RunState, RunStatus
from .telemetry import KeystrokeRecorder

logger = logging.getLogger(__name__)

StatusListener = Callable[[RunStatus], None]


class StartOutcome(enum.Enum):
    STARTED = "started"
    COUNTING_DOWN = "counting_down"
    REJECTED_EMPTY = "rejected_empty"
    REJECTED_BUSY = "rejected_busy"

    @property
    def accepted(self) -> bool:
        return self in (StartOutcome.STARTED, StartOutcome.COUNTING_DOWN)


class HumanTyper:
    """Start/countdown/stop lifecycle around the emission loop.

    ``start`` and ``stop`` must be called on the event loop thread; every
    observable state change happens there and is pushed to the registered
    listeners. Use ``stop_threadsafe`` from other threads (hotkey listeners).
    """

    def __init__(
        self,
        sink: KeystrokeSink,
        *,
        seed: Optional[int] = None,
        sleep: Sleeper = _sleep,
    ):
        self.sink = sink
        self.seed = seed
        self.state = RunState()
        # replaced at the start of every run; holds the latest run's events
        self.recorder = KeystrokeRecorder(seed=seed)
        self._rng = random.Random(seed)
        self._sleep = sleep
        self._listeners: List[StatusListener] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._countdown_task: Optional[asyncio.Task] = None
        self._emission_task: Optional[asyncio.Task] = None

    # ---- observation -------------------------------------------------

    @property
    def status(self) -> RunStatus:
        return self.state.snapshot()

    @property
    def is_typing(self) -> bool:
        return self.state.is_typing

    @property
    def countdown_remaining(self) -> int:
        return self.state.countdown_remaining

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        status = self.status
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Status listener %r failed", listener)

    # ---- control -----------------------------------------------------

    def start(self, request: TypingRequest) -> StartOutcome:
        if not request.text:
            logger.debug("Ignoring start: no text")
            return StartOutcome.REJECTED_EMPTY
        if self.state.is_typing:
            logger.debug("Ignoring start: already typing")
            return StartOutcome.REJECTED_BUSY

        self._loop = asyncio.get_running_loop()
        self._cancel_countdown()
        self.state.cancel_requested = False
        self.state.generation += 1
        generation = self.state.generation

        if request.countdown > 0:
            self.state.countdown_remaining = request.countdown
            self.state.is_typing = False
            self._notify()
            scheduler = CountdownScheduler(
                self.state,
                generation,
                on_change=self._notify,
                on_fire=lambda: self._begin_typing(request, generation),
                sleep=self._sleep,
            )
            self._countdown_task = self._loop.create_task(scheduler.run())
            logger.info(
                "Typing %d characters in %ds", len(request.text), request.countdown
            )
            return StartOutcome.COUNTING_DOWN

        self._begin_typing(request, generation)
        return StartOutcome.STARTED

    def start_with_countdown(
        self, request: TypingRequest, seconds: int = kcfg.DEFAULT_COUNTDOWN_S
    ) -> StartOutcome:
        return self.start(dataclasses.replace(request, countdown=seconds))

    def stop(self) -> None:
        """Cancel any countdown or run; state reads idle immediately."""
        self.state.cancel_requested = True
        self._cancel_countdown()
        if self.status.idle:
            return
        self.state.countdown_remaining = 0
        self.state.is_typing = False
        logger.info("Stop requested")
        self._notify()

    def stop_threadsafe(self) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self.stop)

    async def wait(self) -> None:
        """Return once no countdown or typing task is pending."""
        while True:
            pending = [
                task
                for task in (self._countdown_task, self._emission_task)
                if task is not None and not task.done()
            ]
            if not pending:
                return
            await asyncio.wait(pending)

    async def run(self, request: TypingRequest) -> StartOutcome:
        """start() and wait for the run to end."""
        outcome = self.start(request)
        if outcome.accepted:
            await self.wait()
        return outcome

    # ---- internals ---------------------------------------------------

    def _cancel_countdown(self) -> None:
        task, self._countdown_task = self._countdown_task, None
        if task is not None and not task.done():
            task.cancel()

    def _begin_typing(self, request: TypingRequest, generation: int) -> None:
        self.state.countdown_remaining = 0
        self.state.is_typing = True
        self.recorder = KeystrokeRecorder(seed=self.seed)
        self._notify()
        self._emission_task = self._loop.create_task(
            self._emit(request, generation, self.recorder)
        )

    async def _emit(
        self, request: TypingRequest, generation: int, recorder: KeystrokeRecorder
    ) -> None:
        logger.info(
            "Typing %d characters at %.0f WPM", len(request.text), request.wpm
        )
        try:
            delivered = await run_emission(
                request,
                self.state,
                generation,
                self.sink,
                recorder=recorder,
                rng=self._rng,
                sleep=self._sleep,
            )
            logger.info("Typed %d/%d characters", delivered, len(request.text))
        except Exception:
            logger.exception("Typing run failed")
        finally:
            if generation == self.state.generation and self.state.is_typing:
                self.state.is_typing = False
                self._notify()
