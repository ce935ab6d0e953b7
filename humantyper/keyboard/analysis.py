from __future__ import annotations
import logging
from typing import Optional

from .config import kcfg
from .telemetry import KeystrokeRecorder

# Route debug prints in this module through logging
print = logging.getLogger(__name__).debug

_PRINTABLE_EXCEPTIONS = set("\n\t\r")


def _is_printable(ch: str) -> bool:
    if not ch or ch in _PRINTABLE_EXCEPTIONS:
        return False
    return 32 <= ord(ch) <= 0x10FFFF


def _wpm(chars: int, seconds: float) -> float:
    if seconds <= 0:
        return 0.0
    return (chars / seconds) * 60.0 / kcfg.CHARS_PER_WORD


def summarize_typing(rec: KeystrokeRecorder, seed: Optional[int] = None) -> str:
    """
    Reports:
      - Total duration (first to last recorded event)
      - Overall Avg WPM (includes every pause)
      - Keystroke Avg WPM (mean planned per-character delay)
      - Printable chars, delivered chars & failed deliveries
      - Whether the run was cancelled
      - Seed used
    """
    evs = rec.events
    if len(evs) < 2:
        return "No typing data"

    total_time = max(0.0, evs[-1].t - evs[0].t)
    printable = sum(1 for ch in rec.delivered() if _is_printable(ch))
    delivered = len(rec.delivered())
    delays = rec.planned_delays()

    overall_wpm = _wpm(printable, total_time)
    if delays:
        avg_dt = sum(delays) / len(delays)
        keystroke_wpm = _wpm(1, avg_dt)
    else:
        avg_dt = keystroke_wpm = 0.0

    used_seed = rec.seed if rec.seed is not None else seed

    return (
        "Typing Summary:\n"
        f"  Total duration: {total_time:.2f}s\n"
        f"  Overall Avg WPM (with pauses): {overall_wpm:.2f}\n"
        f"  Keystroke Avg WPM (planned delays): {keystroke_wpm:.2f}\n"
        f"  Mean delay per char: {avg_dt * 1000.0:.0f} ms\n"
        f"  Printable chars: {printable}\n"
        f"  Delivered chars: {delivered}\n"
        f"  Failed deliveries: {rec.failed_count}\n"
        f"  Cancelled: {'yes' if rec.cancelled else 'no'}\n"
        f"  Random seed: {used_seed if used_seed is not None else 'N/A'}"
    )


def print_typing_summary(rec: KeystrokeRecorder, seed: Optional[int] = None) -> None:
    print(summarize_typing(rec, seed))
