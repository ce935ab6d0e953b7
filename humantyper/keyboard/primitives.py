"""CDP keystroke delivery for zendriver pages."""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Tuple

from zendriver import cdp

from .config import kcfg

logger = logging.getLogger(__name__)

# char -> (key, code, virtual key code, down event type)
NAMED_KEYS: Dict[str, Tuple[str, str, int, str]] = {
    "\n": ("Enter", "Enter", 13, "keyDown"),
    "\r": ("Enter", "Enter", 13, "keyDown"),
    "\t": ("Tab", "Tab", 9, "rawKeyDown"),
    "\b": ("Backspace", "Backspace", 8, "rawKeyDown"),
}


def _log_late_failure(task: asyncio.Future, label: str) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("CDP %s failed after stalling", label, exc_info=exc)


async def send_cdp_event(
    page, fn: Callable[[], Awaitable[Any]], *, label: str
) -> bool:
    """Send a CDP event with a short timeout.

    Returns False when the send failed outright. A send that stalls past the
    timeout keeps running in the background and counts as delivered; if it
    fails later the failure is only logged.
    """
    task = asyncio.ensure_future(fn())
    try:
        await asyncio.wait_for(asyncio.shield(task), timeout=kcfg.CDP_SEND_TIMEOUT_S)
    except asyncio.TimeoutError:
        task.add_done_callback(lambda t: _log_late_failure(t, label))
        logger.warning(
            "CDP %s stalled >%.0f ms; continuing in background",
            label,
            kcfg.CDP_SEND_TIMEOUT_S * 1000.0,
        )
    except Exception:
        logger.warning("CDP %s failed (skipped this event)", label, exc_info=True)
        return False
    return True


async def insert_text(page, text: str) -> bool:
    return await send_cdp_event(
        page,
        lambda: page.send(cdp.input_.insert_text(text=text)),
        label="insertText",
    )


async def press_named_key(page, ch: str) -> bool:
    key, code, vk, down_type = NAMED_KEYS[ch]
    ok = True
    for type_ in (down_type, "keyUp"):
        sent = await send_cdp_event(
            page,
            lambda type_=type_: page.send(
                cdp.input_.dispatch_key_event(
                    type_=type_,
                    key=key,
                    code=code,
                    windows_virtual_key_code=vk,
                    native_virtual_key_code=vk,
                )
            ),
            label=f"{key}:{type_}",
        )
        ok = ok and sent
    return ok
