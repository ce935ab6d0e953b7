from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Tuple

from ..utils import ordered
from .config import kcfg


@dataclass(frozen=True)
class PauseRange:
    """Closed interval of extra seconds added after a character.

    Callers may hand in ``lo > hi``; consumers read ``bounds`` which is
    always ascending.
    """

    lo: float
    hi: float

    @property
    def bounds(self) -> Tuple[float, float]:
        return ordered(float(self.lo), float(self.hi))

    @classmethod
    def of(cls, value: Any) -> "PauseRange":
        """Coerce a PauseRange, a 2-sequence, or a single number."""
        if isinstance(value, PauseRange):
            return value
        if isinstance(value, (int, float)):
            return cls(float(value), float(value))
        lo, hi = value
        return cls(float(lo), float(hi))

    def __str__(self) -> str:
        lo, hi = self.bounds
        return f"{lo:.2f}–{hi:.2f} s"


@dataclass(frozen=True)
class TypingRequest:
    """Everything one run needs: the text plus its timing knobs."""

    text: str
    wpm: float = kcfg.DEFAULT_WPM
    jitter: float = kcfg.DEFAULT_JITTER
    pause_spaces: bool = True
    space_range: PauseRange = field(
        default_factory=lambda: PauseRange(*kcfg.DEFAULT_SPACE_PAUSE)
    )
    pause_punctuation: bool = True
    punctuation_range: PauseRange = field(
        default_factory=lambda: PauseRange(*kcfg.DEFAULT_PUNCT_PAUSE)
    )
    pause_paragraphs: bool = True
    paragraph_range: PauseRange = field(
        default_factory=lambda: PauseRange(*kcfg.DEFAULT_PARAGRAPH_PAUSE)
    )
    countdown: int = 0

    def __post_init__(self):
        # frozen: coerce through object.__setattr__
        for name in ("space_range", "punctuation_range", "paragraph_range"):
            object.__setattr__(self, name, PauseRange.of(getattr(self, name)))
        object.__setattr__(self, "countdown", max(0, int(self.countdown)))

    @classmethod
    def field_names(cls):
        return [f.name for f in fields(cls) if f.name != "text"]

    @classmethod
    def from_mapping(cls, text: str, mapping: Mapping[str, Any]) -> "TypingRequest":
        """Build a request from a flat mapping of field names (e.g. a profile)."""
        known = set(cls.field_names())
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise KeyError(f"unknown request field(s): {', '.join(unknown)}")
        return cls(text=text, **dict(mapping))
