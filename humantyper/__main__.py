"""Command line entry point: ``python -m humantyper``."""
from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, Optional

from .keyboard import (
    EchoSink,
    HumanTyper,
    PynputSink,
    TypingRequest,
    save_typing_timeline_jpeg,
    status_text,
    summarize_typing,
)
from .keyboard.config import kcfg
from .keyboard.delays import ms_per_char
from .profile import ProfileError, load_profile

logger = logging.getLogger("humantyper")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="humantyper",
        description="Type text into the focused window at a human-like pace.",
    )
    p.add_argument("text", nargs="?", help="text to type (default: --file or stdin)")
    p.add_argument("-f", "--file", help="read the text from this file")
    p.add_argument("-p", "--profile", help="YAML profile with timing settings")
    p.add_argument("--wpm", type=float, help=f"words per minute (default {kcfg.DEFAULT_WPM:g})")
    p.add_argument("--jitter", type=float, help="timing randomness, 0..0.8")
    p.add_argument("--no-space-pauses", action="store_true")
    p.add_argument("--no-punct-pauses", action="store_true")
    p.add_argument("--no-paragraph-pauses", action="store_true")
    p.add_argument("--space-range", type=float, nargs=2, metavar=("MIN", "MAX"))
    p.add_argument("--punct-range", type=float, nargs=2, metavar=("MIN", "MAX"))
    p.add_argument("--paragraph-range", type=float, nargs=2, metavar=("MIN", "MAX"))
    p.add_argument(
        "--countdown",
        type=int,
        help=f"seconds to wait before typing (default {kcfg.DEFAULT_COUNTDOWN_S})",
    )
    p.add_argument(
        "--sink",
        choices=("pynput", "echo"),
        default="pynput",
        help="pynput types into the focused app; echo prints to stdout",
    )
    p.add_argument("--seed", type=int, help="seed the timing randomness")
    p.add_argument("--summary", action="store_true", help="print a typing summary")
    p.add_argument("--timeline", metavar="OUT.jpg", help="save a delay chart")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def read_text(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    if args.file:
        with open(args.file, "r", encoding="utf-8") as f:
            return f.read()
    if not sys.stdin.isatty():
        return sys.stdin.read()
    return ""


def build_request(args: argparse.Namespace, text: str) -> TypingRequest:
    settings: Dict[str, Any] = {"countdown": kcfg.DEFAULT_COUNTDOWN_S}
    if args.profile:
        settings.update(load_profile(args.profile))

    overrides: Dict[str, Optional[Any]] = {
        "wpm": args.wpm,
        "jitter": args.jitter,
        "countdown": args.countdown,
        "space_range": args.space_range,
        "punctuation_range": args.punct_range,
        "paragraph_range": args.paragraph_range,
        "pause_spaces": False if args.no_space_pauses else None,
        "pause_punctuation": False if args.no_punct_pauses else None,
        "pause_paragraphs": False if args.no_paragraph_pauses else None,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})
    return TypingRequest.from_mapping(text, settings)


def _listen_for_escape(engine: HumanTyper):
    from pynput import keyboard

    def on_press(key):
        if key == keyboard.Key.esc:
            engine.stop_threadsafe()

    listener = keyboard.Listener(on_press=on_press)
    listener.daemon = True
    listener.start()
    return listener


async def run(args: argparse.Namespace, request: TypingRequest, sink) -> None:
    engine = HumanTyper(sink, seed=args.seed)
    engine.add_listener(lambda status: logger.info(status_text(status)))

    logger.info(
        "%.0f WPM (~%d ms/char), jitter %.2f",
        request.wpm,
        ms_per_char(request.wpm),
        request.jitter,
    )
    engine.start(request)
    listener = _listen_for_escape(engine) if args.sink == "pynput" else None
    try:
        await engine.wait()
    finally:
        if listener is not None:
            listener.stop()

    if args.summary:
        sys.stderr.write(summarize_typing(engine.recorder) + "\n")
    if args.timeline:
        path = await save_typing_timeline_jpeg(engine.recorder, args.timeline)
        logger.info("Timeline saved to %s", path)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        text = read_text(args)
    except OSError as e:
        logger.error("%s", e)
        return 1
    if not text:
        logger.error("Nothing to type")
        return 1

    try:
        request = build_request(args, text)
    except ProfileError as e:
        logger.error("%s", e)
        return 2

    try:
        sink = PynputSink() if args.sink == "pynput" else EchoSink()
    except (ImportError, OSError) as e:
        logger.error("cannot type into the focused window: %s; try --sink echo", e)
        return 1

    try:
        asyncio.run(run(args, request, sink))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
