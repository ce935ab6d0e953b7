from __future__ import annotations
import logging
import random
from typing import Awaitable, Callable, Optional

from ..utils import HiResTimer, sleep as _sleep
from .delays import base_delay, per_character_delay
from .request import TypingRequest
from .sinks import KeystrokeSink
from .state import RunState
from .telemetry import KeystrokeRecorder

logger = logging.getLogger(__name__)

# Route per-character traces in this module through logging
print = logger.debug

Sleeper = Callable[[float], Awaitable[None]]


async def run_emission(
    request: TypingRequest,
    state: RunState,
    generation: int,
    sink: KeystrokeSink,
    *,
    recorder: KeystrokeRecorder,
    rng: Optional[random.Random] = None,
    sleep: Sleeper = _sleep,
) -> int:
    """Emit ``request.text`` one character at a time through ``sink``.

    Before each character the run checks ``state``; a stop() or a newer
    start() ends it before anything else is emitted. A character the sink
    fails to deliver is logged and skipped, but its delay is still slept.
    Returns the number of characters delivered.
    """
    base_dt = base_delay(request.wpm)
    delivered = 0

    with HiResTimer():
        for index, ch in enumerate(request.text):
            if state.should_halt(generation):
                recorder.log_cancelled()
                logger.info(
                    "Typing cancelled after %d of %d characters",
                    index,
                    len(request.text),
                )
                break

            dt = per_character_delay(ch, base_dt, request.jitter, request, rng)

            try:
                await sink.emit(ch)
            except Exception:
                logger.warning("Could not deliver %r (skipped)", ch, exc_info=True)
                recorder.log_failed(ch)
            else:
                recorder.log("char", ch, dt)
                delivered += 1

            recorder.log("pause", "<char-delay>", dt)
            print("emitted %r, sleeping %.3fs", ch, dt)
            await sleep(dt)

    return delivered
