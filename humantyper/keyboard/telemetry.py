from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional
import time


@dataclass(frozen=True)
class KeystrokeEvent:
    t: float
    kind: str  # 'char' | 'failed' | 'pause' | 'cancelled'
    value: str  # character, pause tag, or ''
    dt: float  # planned delay attached to this event (seconds)


@dataclass
class KeystrokeRecorder:
    events: List[KeystrokeEvent] = field(default_factory=list)
    start_ts: float = field(default_factory=lambda: time.perf_counter())
    seed: Optional[int] = None
    failed_count: int = 0  # characters the sink could not deliver
    cancelled: bool = False

    def _now(self) -> float:
        return time.perf_counter() - self.start_ts

    def log(self, kind: str, value: str, dt: float = 0.0) -> None:
        self.events.append(KeystrokeEvent(self._now(), kind, value, dt))

    def log_failed(self, ch: str) -> None:
        self.failed_count += 1
        self.log("failed", ch)

    def log_cancelled(self) -> None:
        self.cancelled = True
        self.log("cancelled", "")

    def delivered(self) -> List[str]:
        """Characters in the order the sink accepted them."""
        return [e.value for e in self.events if e.kind == "char"]

    def planned_delays(self) -> List[float]:
        return [e.dt for e in self.events if e.kind == "pause"]

