from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from typing import Protocol


class ClockPort(Protocol):
    def now(self) -> datetime:
        """Return current UTC time."""
        ...

    def today(self) -> date:
        """Return the current calendar day (UTC)."""
        ...


class TickHandle(Protocol):
    """Handle for a scheduled repeating callback."""

    def cancel(self) -> None:
        """Stop further callbacks. Safe to call more than once."""
        ...

    @property
    def active(self) -> bool:
        ...


class TickerPort(Protocol):
    """
    Periodic wake-ups.

    The only scheduling primitive the engagement tracker needs: a repeating
    timer that can be cancelled.
    """

    def every(self, interval_seconds: float, callback: Callable[[], None]) -> TickHandle:
        """Invoke callback every interval_seconds until the handle is cancelled."""
        ...
