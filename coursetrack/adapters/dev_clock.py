"""
Deterministic clock and ticker for development and testing.

ManualClock only moves when told to. ManualTicker never fires on its own:
advance() moves the shared clock forward and fires every due callback in
order, so a test can replay hours of watching in microseconds.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta


class ManualClock:
    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, 9, 0, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._now.date()

    def advance(self, seconds: float) -> datetime:
        self._now = self._now + timedelta(seconds=seconds)
        return self._now

    def set(self, when: datetime) -> None:
        self._now = when


class ManualTick:
    def __init__(self, interval_seconds: float, callback: Callable[[], None], due: datetime) -> None:
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.due = due
        self._active = True

    def cancel(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active


class ManualTicker:
    """TickerPort driven by a ManualClock."""

    def __init__(self, clock: ManualClock) -> None:
        self.clock = clock
        self.ticks: list[ManualTick] = []

    def every(self, interval_seconds: float, callback: Callable[[], None]) -> ManualTick:
        due = self.clock.now() + timedelta(seconds=interval_seconds)
        tick = ManualTick(interval_seconds, callback, due)
        self.ticks.append(tick)
        return tick

    @property
    def active_ticks(self) -> list[ManualTick]:
        return [t for t in self.ticks if t.active]

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing callbacks at their due times.

        Returns:
            Number of callbacks fired
        """
        target = self.clock.now() + timedelta(seconds=seconds)
        fired = 0

        while True:
            due = [t for t in self.active_ticks if t.due <= target]
            if not due:
                break
            nxt = min(due, key=lambda t: t.due)
            self.clock.set(nxt.due)
            nxt.due = nxt.due + timedelta(seconds=nxt.interval_seconds)
            nxt.callback()
            fired += 1

        self.clock.set(target)
        return fired

    def skip(self, seconds: float) -> None:
        """Move the clock without firing anything (a frozen or sleeping tab)."""
        self.clock.advance(seconds)
        for t in self.active_ticks:
            while t.due <= self.clock.now():
                t.due = t.due + timedelta(seconds=t.interval_seconds)
