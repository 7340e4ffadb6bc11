"""
Login attempt limiter.

Sliding window per client: at most ``max_attempts`` login attempts within
the last ``window_seconds``. Attempts are counted whether or not they
succeed.
"""

from __future__ import annotations

import math
from collections import defaultdict, deque
from datetime import datetime, timedelta
from threading import Lock

from coursetrack.adapters.clock import SystemClock
from coursetrack.ports.clock import ClockPort
from coursetrack.rules.models import RateLimitRules


class RateLimiter:
    def __init__(self, rules: RateLimitRules, clock: ClockPort | None = None):
        self.rules = rules
        self._clock = clock if clock is not None else SystemClock()
        self._attempts: defaultdict[str, deque[datetime]] = defaultdict(deque)
        self._lock = Lock()

    @property
    def _window(self) -> timedelta:
        return timedelta(seconds=self.rules.login.window_seconds)

    def _expire(self, client_key: str, now: datetime) -> deque[datetime]:
        attempts = self._attempts[client_key]
        cutoff = now - self._window
        while attempts and attempts[0] <= cutoff:
            attempts.popleft()
        return attempts

    def check_login(self, client_key: str) -> bool:
        """Record a login attempt. Returns False once the client is over its limit."""
        now = self._clock.now()
        with self._lock:
            attempts = self._expire(client_key, now)
            if len(attempts) >= self.rules.login.max_attempts:
                return False
            attempts.append(now)
            return True

    def retry_after(self, client_key: str) -> int:
        """Whole seconds until the client's oldest attempt leaves the window (0 if unlimited)."""
        now = self._clock.now()
        with self._lock:
            attempts = self._expire(client_key, now)
            if len(attempts) < self.rules.login.max_attempts:
                if not attempts:
                    del self._attempts[client_key]
                return 0
            remaining = (attempts[0] + self._window - now).total_seconds()
        return max(1, math.ceil(remaining))

    def reset(self) -> None:
        with self._lock:
            self._attempts.clear()
