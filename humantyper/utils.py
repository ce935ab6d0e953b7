from __future__ import annotations
import asyncio
import ctypes
import platform
import random
from typing import Awaitable


class HiResTimer:
    """Context manager to request 1ms Windows system timer resolution.

    On Windows this reduces sleep jitter/latency between keystrokes.
    On other platforms, it is a no-op.
    """

    def __enter__(self):
        if ctypes and platform.system() == "Windows":
            ctypes.windll.winmm.timeBeginPeriod(1)
        return self

    def __exit__(self, exc_type, exc, tb):
        if ctypes and platform.system() == "Windows":
            ctypes.windll.winmm.timeEndPeriod(1)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Restrict value to [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def ordered(a: float, b: float):
    """Return (a, b) sorted ascending."""
    return (a, b) if a <= b else (b, a)


def random_uniform(a: float, b: float, rng=None) -> float:
    """Return a random float between a and b, agnostic to order."""
    lo, hi = ordered(a, b)
    return (rng or random).uniform(lo, hi)


def sleep(dt: float) -> Awaitable[None]:
    return asyncio.sleep(max(0.0, dt))
