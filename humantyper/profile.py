"""YAML typing profiles.

A profile is a flat mapping of TypingRequest fields, for example::

    wpm: 70
    jitter: 0.3
    pause_spaces: true
    space_range: [0.05, 0.15]
    pause_punctuation: true
    punctuation_range: [0.28, 0.55]
    pause_paragraphs: false
    countdown: 3
"""
from __future__ import annotations
import os
from typing import Any, Dict

import yaml

from .keyboard.request import TypingRequest

_RANGE_KEYS = ("space_range", "punctuation_range", "paragraph_range")
_BOOL_KEYS = ("pause_spaces", "pause_punctuation", "pause_paragraphs")
_NUMBER_KEYS = ("wpm", "jitter", "countdown")


class ProfileError(ValueError):
    """The profile file is missing or does not describe a typing request."""


def _check(data: Dict[str, Any], path: str) -> None:
    unknown = sorted(set(data) - set(TypingRequest.field_names()))
    if unknown:
        raise ProfileError(f"{path}: unknown key(s): {', '.join(unknown)}")
    for key in _RANGE_KEYS:
        if key not in data:
            continue
        value = data[key]
        if not (
            isinstance(value, (list, tuple))
            and len(value) == 2
            and all(isinstance(v, (int, float)) for v in value)
        ):
            raise ProfileError(f"{path}: {key} must be a [min, max] pair of numbers")
    for key in _BOOL_KEYS:
        if key in data and not isinstance(data[key], bool):
            raise ProfileError(f"{path}: {key} must be true or false")
    for key in _NUMBER_KEYS:
        if key in data and (
            isinstance(data[key], bool) or not isinstance(data[key], (int, float))
        ):
            raise ProfileError(f"{path}: {key} must be a number")
    if data.get("countdown", 0) < 0:
        raise ProfileError(f"{path}: countdown must not be negative")


def load_profile(path: str) -> Dict[str, Any]:
    """Load and validate a profile, returning the raw mapping."""
    path = os.path.expanduser(path)
    if not os.path.exists(path):
        raise ProfileError(f"profile not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ProfileError(f"{path}: invalid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ProfileError(f"{path}: expected a mapping at the top level")
    _check(data, path)
    return data


def request_from_profile(text: str, path: str, **overrides: Any) -> TypingRequest:
    """Build a request from a profile; keyword overrides win over the file."""
    data = load_profile(path)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return TypingRequest.from_mapping(text, data)
