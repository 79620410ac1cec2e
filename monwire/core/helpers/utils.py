import asyncio
import contextlib
import logging
import signal
import sys
import threading
from types import FrameType
from typing import Generator

SHUTDOWN_SIGNALS = (
    signal.SIGINT,
    signal.SIGTERM,
)

if sys.platform == "win32":
    SHUTDOWN_SIGNALS += (signal.SIGBREAK,)


@contextlib.contextmanager
def setup_signal_handler() -> Generator[asyncio.Event, None, None]:
    """
    Turn SIGINT/SIGTERM into a stop event while the block runs. The previous
    handlers are restored on exit. Must be entered from a running loop.
    """
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    if threading.current_thread() is not threading.main_thread():
        yield stop_event
        return

    def handle(sig: int, frame: FrameType | None) -> None:
        # wakes the selector, unlike a plain set() from the handler
        loop.call_soon_threadsafe(stop_event.set)

    original_handlers = {
        sig: signal.signal(sig, handle)
        for sig in SHUTDOWN_SIGNALS
    }

    try:
        yield stop_event
    finally:
        for sig, old in original_handlers.items():
            signal.signal(sig, old)


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s] : %(message)s',
    )
