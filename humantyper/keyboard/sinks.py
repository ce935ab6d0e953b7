"""Keystroke sinks: where emitted characters actually go."""
from __future__ import annotations
import asyncio
import sys
from typing import Optional, Protocol, TextIO

from . import primitives


class DeliveryError(RuntimeError):
    """A sink could not deliver one character."""


class KeystrokeSink(Protocol):
    async def emit(self, ch: str) -> None:
        ...


class PynputSink:
    """Types into whichever application currently has keyboard focus."""

    def __init__(self, controller=None):
        if controller is None:
            # pynput binds to the display server on import
            from pynput.keyboard import Controller

            controller = Controller()
        self._keyboard = controller

    async def emit(self, ch: str) -> None:
        await asyncio.to_thread(self._keyboard.type, ch)


class ZendriverSink:
    """Delivers characters into an already-focused element of a zendriver page."""

    def __init__(self, page):
        self.page = page

    async def emit(self, ch: str) -> None:
        if ch in primitives.NAMED_KEYS:
            ok = await primitives.press_named_key(self.page, ch)
        else:
            ok = await primitives.insert_text(self.page, ch)
        if not ok:
            raise DeliveryError(f"CDP rejected {ch!r}")


class EchoSink:
    """Writes characters to a text stream; handy for previews and dry runs."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    async def emit(self, ch: str) -> None:
        self.stream.write(ch)
        self.stream.flush()
