from .engine import HumanTyper, StartOutcome
from .request import PauseRange, TypingRequest
from .delays import base_delay, per_character_delay, ms_per_char
from .state import RunState, RunStatus, status_text
from .sinks import KeystrokeSink, PynputSink, ZendriverSink, EchoSink, DeliveryError
from .analysis import summarize_typing, print_typing_summary
from .render import save_typing_timeline_jpeg
from .telemetry import KeystrokeRecorder

__all__ = [
    "HumanTyper",
    "StartOutcome",
    "PauseRange",
    "TypingRequest",
    "base_delay",
    "per_character_delay",
    "ms_per_char",
    "RunState",
    "RunStatus",
    "status_text",
    "KeystrokeSink",
    "PynputSink",
    "ZendriverSink",
    "EchoSink",
    "DeliveryError",
    "summarize_typing",
    "print_typing_summary",
    "save_typing_timeline_jpeg",
    "KeystrokeRecorder",
]
