import threading
import time
from datetime import UTC, datetime

import pytest

from coursetrack.adapters.clock import SystemClock
from coursetrack.adapters.dev_clock import ManualClock, ManualTicker
from coursetrack.adapters.ticker import ThreadTicker


def test_system_clock_is_utc():
    now = SystemClock().now()

    assert now.tzinfo is not None
    assert abs((datetime.now(UTC) - now).total_seconds()) < 1.0


def test_system_clock_today_matches_now():
    clock = SystemClock()

    assert clock.today() == clock.now().date()


class TestManualTicker:
    def test_fires_at_interval(self):
        clock = ManualClock()
        ticker = ManualTicker(clock)
        calls: list[datetime] = []
        ticker.every(3, lambda: calls.append(clock.now()))

        fired = ticker.advance(10)

        assert fired == 3
        assert [(c - calls[0]).total_seconds() for c in calls] == [0, 3, 6]

    def test_cancelled_tick_does_not_fire(self):
        clock = ManualClock()
        ticker = ManualTicker(clock)
        calls: list[int] = []
        handle = ticker.every(3, lambda: calls.append(1))

        handle.cancel()

        assert ticker.advance(30) == 0
        assert handle.active is False
        assert ticker.active_ticks == []

    def test_skip_moves_clock_without_firing(self):
        clock = ManualClock()
        ticker = ManualTicker(clock)
        calls: list[int] = []
        ticker.every(3, lambda: calls.append(1))
        start = clock.now()

        ticker.skip(600)

        assert calls == []
        assert (clock.now() - start).total_seconds() == 600
        assert ticker.advance(3) == 1


class TestThreadTicker:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            ThreadTicker().every(0, lambda: None)

    def test_fires_until_cancelled(self):
        fired = threading.Event()
        count = [0]

        def callback() -> None:
            count[0] += 1
            fired.set()

        handle = ThreadTicker().every(0.01, callback)
        assert fired.wait(timeout=2.0)
        handle.cancel()
        seen = count[0]

        assert handle.active is False
        time.sleep(0.05)
        assert count[0] == seen

    def test_cancel_is_idempotent(self):
        handle = ThreadTicker().every(10, lambda: None)

        handle.cancel()
        handle.cancel()

        assert handle.active is False

    def test_callback_errors_do_not_stop_ticker(self):
        calls = [0]
        second = threading.Event()

        def callback() -> None:
            calls[0] += 1
            if calls[0] == 1:
                raise RuntimeError("boom")
            second.set()

        handle = ThreadTicker().every(0.01, callback)
        try:
            assert second.wait(timeout=2.0)
        finally:
            handle.cancel()

    def test_cancel_from_inside_callback(self):
        done = threading.Event()
        holder: dict = {}

        def callback() -> None:
            holder["handle"].cancel()
            done.set()

        holder["handle"] = ThreadTicker().every(0.01, callback)

        assert done.wait(timeout=2.0)
        assert holder["handle"].active is False
