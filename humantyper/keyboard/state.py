from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class RunStatus:
    """Immutable snapshot of the observable part of RunState."""

    is_typing: bool = False
    countdown_remaining: int = 0

    @property
    def idle(self) -> bool:
        return not self.is_typing and self.countdown_remaining == 0


@dataclass
class RunState:
    """The engine's single live state record.

    ``is_typing`` and ``countdown_remaining`` are observable; the cancel flag
    and generation are read by the countdown and emission tasks at every step.
    """

    is_typing: bool = False
    countdown_remaining: int = 0
    cancel_requested: bool = False
    generation: int = 0  # bumped by every accepted start()

    def snapshot(self) -> RunStatus:
        return RunStatus(self.is_typing, self.countdown_remaining)

    def should_halt(self, generation: int) -> bool:
        return self.cancel_requested or generation != self.generation


def status_text(status: RunStatus) -> str:
    """One-line status for a UI or terminal."""
    if status.countdown_remaining > 0:
        return f"Starting in {status.countdown_remaining}s…"
    if status.is_typing:
        return "Typing… (Esc to stop)"
    return "Paste text · Set WPM · Start"
