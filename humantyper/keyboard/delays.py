"""Delay model: converts speed, jitter and pause settings into seconds.

No state and no I/O; randomness comes from an injectable ``random.Random``
so runs can be reproduced from a seed.
"""
from __future__ import annotations
import random
from typing import Optional

from ..utils import clamp as _clamp, random_uniform as _rand
from .config import kcfg
from .request import TypingRequest


def clamp_wpm(wpm: float) -> float:
    return _clamp(float(wpm), kcfg.WPM_MIN, kcfg.WPM_MAX)


def clamp_jitter(jitter: float) -> float:
    return _clamp(float(jitter), 0.0, kcfg.JITTER_MAX)


def base_delay(wpm: float) -> float:
    """Seconds per character at ``wpm``, assuming 5 characters per word."""
    return 60.0 / (clamp_wpm(wpm) * kcfg.CHARS_PER_WORD)


def ms_per_char(wpm: float) -> int:
    """Whole milliseconds per character, for display next to a speed control."""
    return int(base_delay(wpm) * 1000)


def pause_bonus(
    ch: str, request: TypingRequest, rng: Optional[random.Random] = None
) -> float:
    """Extra seconds earned by ``ch`` on top of the jittered base delay.

    A space bonus and a punctuation bonus never stack; the newline bonus is
    checked independently and always applies to ``\\n``.
    """
    extra = 0.0
    if request.pause_spaces and ch == " ":
        extra += _rand(*request.space_range.bounds, rng=rng)
    elif request.pause_punctuation:
        if ch in kcfg.SENTENCE_PUNCT:
            extra += _rand(*request.punctuation_range.bounds, rng=rng)
        elif ch in kcfg.CLAUSE_PUNCT:
            extra += _rand(*kcfg.CLAUSE_PUNCT_PAUSE, rng=rng)

    if ch == "\n":
        if request.pause_paragraphs:
            extra += _rand(*request.paragraph_range.bounds, rng=rng)
        else:
            extra += _rand(*kcfg.NEWLINE_FALLBACK_PAUSE, rng=rng)
    return extra


def per_character_delay(
    ch: str,
    base_dt: float,
    jitter: float,
    request: TypingRequest,
    rng: Optional[random.Random] = None,
) -> float:
    j = clamp_jitter(jitter)
    dt = base_dt * (1.0 + _rand(-j, j, rng=rng))
    dt += pause_bonus(ch, request, rng)
    return max(kcfg.MIN_CHAR_DELAY_S, dt)
