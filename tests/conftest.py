"""Shared test fixtures for humantyper tests."""

import asyncio
import os
import sys

import pytest

# Add project root to path so `humantyper` is importable without installing
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))


class RecordingSink:
    """Keystroke sink that remembers every character it is asked to emit."""

    def __init__(self):
        self.chars = []

    async def emit(self, ch):
        self.chars.append(ch)

    @property
    def text(self):
        return "".join(self.chars)


class FakeSleep:
    """Instant stand-in for asyncio.sleep that records requested durations."""

    def __init__(self):
        self.calls = []

    async def __call__(self, dt):
        self.calls.append(dt)
        await asyncio.sleep(0)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def sleep_factory():
    return FakeSleep
