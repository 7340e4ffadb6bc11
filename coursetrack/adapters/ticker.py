"""
Thread Ticker Adapter.

Repeating timer backed by a daemon thread and a stop event.

Key behaviors:
- Callback runs on the ticker thread, never concurrently with itself
- cancel() is idempotent and does not block on the callback when called
  from inside it
- Exceptions in the callback are logged; the ticker keeps running
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ThreadTick:
    """A single scheduled repeating callback."""

    def __init__(self, interval_seconds: float, callback: Callable[[], None]) -> None:
        self._interval = interval_seconds
        self._callback = callback
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._loop, daemon=True, name="coursetrack-ticker")

    def start(self) -> None:
        self._thread.start()
        logger.debug("Ticker started (interval: %.1fs)", self._interval)

    def cancel(self) -> None:
        if self._stop_event.is_set():
            return

        self._stop_event.set()
        if threading.current_thread() is not self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.debug("Ticker cancelled")

    @property
    def active(self) -> bool:
        return not self._stop_event.is_set()

    def _loop(self) -> None:
        while not self._stop_event.wait(timeout=self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Error in ticker callback")


class ThreadTicker:
    """TickerPort implementation using one thread per scheduled callback."""

    def every(self, interval_seconds: float, callback: Callable[[], None]) -> ThreadTick:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        tick = ThreadTick(interval_seconds, callback)
        tick.start()
        return tick
