from __future__ import annotations
from .keyboard import (
    HumanTyper,
    StartOutcome,
    TypingRequest,
    PauseRange,
    summarize_typing,
    save_typing_timeline_jpeg,
)
from .profile import load_profile, request_from_profile, ProfileError

__all__ = [
    "HumanTyper",
    "StartOutcome",
    "TypingRequest",
    "PauseRange",
    "summarize_typing",
    "save_typing_timeline_jpeg",
    "load_profile",
    "request_from_profile",
    "ProfileError",
]
