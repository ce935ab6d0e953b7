"""Countdown before typing begins.

Idle -> Counting(n) -> ... -> Counting(1) -> Typing, with a Cancelled exit
from any Counting state. One tick per second; the transition table lives in
``countdown_tick`` so it can be exercised without a clock.
"""
from __future__ import annotations
import enum
import logging
from typing import Awaitable, Callable

from ..utils import sleep as _sleep
from .config import kcfg
from .state import RunState

logger = logging.getLogger(__name__)


class Tick(enum.Enum):
    CONTINUE = "continue"
    FIRE = "fire"
    CANCELLED = "cancelled"


def countdown_tick(state: RunState) -> Tick:
    if state.cancel_requested:
        state.countdown_remaining = 0
        return Tick.CANCELLED
    if state.countdown_remaining <= 1:
        state.countdown_remaining = 0
        return Tick.FIRE
    state.countdown_remaining -= 1
    return Tick.CONTINUE


class CountdownScheduler:
    def __init__(
        self,
        state: RunState,
        generation: int,
        *,
        on_change: Callable[[], None],
        on_fire: Callable[[], None],
        sleep: Callable[[float], Awaitable[None]] = _sleep,
        tick_s: float = kcfg.COUNTDOWN_TICK_S,
    ):
        self.state = state
        self.generation = generation
        self._on_change = on_change
        self._on_fire = on_fire
        self._sleep = sleep
        self.tick_s = tick_s

    async def run(self) -> Tick:
        while True:
            await self._sleep(self.tick_s)
            if self.state.generation != self.generation:
                # a newer start() owns the state now
                return Tick.CANCELLED

            outcome = countdown_tick(self.state)
            if outcome is Tick.FIRE:
                logger.debug("Countdown finished")
                self._on_fire()
                return outcome
            if outcome is Tick.CANCELLED:
                logger.debug("Countdown cancelled")
                return outcome

            self._on_change()
