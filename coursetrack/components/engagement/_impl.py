"""
EngagementStateMachine - infers lecture completion from active watch time.

No player telemetry is available, so "watching" means the learner is
interacting with the page and the tab is visible. Watch time accumulates
from wall-clock deltas (robust to irregular or missed ticks); each delta is
clamped so a suspended tab cannot credit more than one interval at once.

Functional Core - pure helpers plus a small, lock-guarded state object.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime

from .models import (
    DEFAULT_ESTIMATED_DURATION_SECONDS,
    CompletionEvent,
    EngagementConfig,
    EngagementState,
    ViewingSession,
)
from .ports import (
    ClockPort,
    CompletionListener,
    DurationPolicyPort,
    TickerPort,
    TickHandle,
)

logger = logging.getLogger(__name__)


# --- Pure Functions ---


def completion_threshold(estimated_duration_seconds: float, ratio: float) -> float:
    """
    Seconds of active watching required before a lecture counts as completed.

    >>> completion_threshold(1800, 0.80)
    1440.0
    """
    if estimated_duration_seconds <= 0:
        raise ValueError("estimated duration must be positive")
    return float(estimated_duration_seconds) * ratio


def clamp_delta(seconds: float, max_delta: float) -> float:
    """Bound a single wall-clock delta to [0, max_delta]."""
    return max(0.0, min(seconds, max_delta))


# --- Duration Policies ---


class FixedDurationPolicy:
    """Every lecture is assumed to be the same length."""

    def __init__(self, seconds: float = DEFAULT_ESTIMATED_DURATION_SECONDS) -> None:
        if seconds <= 0:
            raise ValueError("estimated duration must be positive")
        self.seconds = float(seconds)

    def estimate_seconds(self, lecture_id: str) -> float:
        return self.seconds


class DeclaredDurationPolicy:
    """Use the catalog's declared duration when there is one."""

    def __init__(
        self,
        declared: dict[str, float],
        fallback: DurationPolicyPort | None = None,
    ) -> None:
        self._declared = {str(k): float(v) for k, v in declared.items() if v and v > 0}
        self._fallback = fallback or FixedDurationPolicy()

    def estimate_seconds(self, lecture_id: str) -> float:
        declared = self._declared.get(lecture_id)
        if declared is not None:
            return declared
        return self._fallback.estimate_seconds(lecture_id)


# --- State Machine ---


class EngagementStateMachine:
    """
    Idle -> Watching <-> Paused -> Completed.

    Invariants:
    - completion is emitted at most once per session
    - completion is emitted only once accumulated_seconds >= threshold
    - Completed is terminal: signals and ticks are ignored
    - time spent Paused or Idle is never credited
    """

    def __init__(
        self,
        lecture_id: str,
        *,
        clock: ClockPort,
        ticker: TickerPort,
        duration_policy: DurationPolicyPort | None = None,
        config: EngagementConfig | None = None,
        already_completed: bool = False,
    ) -> None:
        self.config = config or EngagementConfig()
        policy = duration_policy or FixedDurationPolicy()
        threshold = completion_threshold(
            policy.estimate_seconds(lecture_id), self.config.completion_ratio
        )

        self.session = ViewingSession(lecture_id=lecture_id, threshold_seconds=threshold)
        self._clock = clock
        self._ticker = ticker
        self._tick_handle: TickHandle | None = None
        self._listeners: list[CompletionListener] = []
        self._lock = threading.RLock()

        if already_completed:
            # Nothing to track; never emits.
            self.session.state = EngagementState.COMPLETED

    # --- Properties ---

    @property
    def state(self) -> EngagementState:
        return self.session.state

    @property
    def is_tracking(self) -> bool:
        return self._tick_handle is not None and self._tick_handle.active

    # --- Lifecycle ---

    def add_listener(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    def start(self) -> bool:
        """
        Schedule periodic ticks.

        Returns:
            True if tracking started, False if the session is already completed
        """
        with self._lock:
            if self.session.state is EngagementState.COMPLETED:
                return False
            if self._tick_handle is None:
                self._tick_handle = self._ticker.every(
                    self.config.tick_interval_seconds, self.tick
                )
            return True

    def stop(self) -> None:
        """Cancel the ticker. Accumulated time is kept but no longer grows."""
        with self._lock:
            if self.session.state is EngagementState.WATCHING:
                self._flush(self._clock.now())
                self.session.state = EngagementState.PAUSED
                self.session.is_active = False
            handle = self._detach_ticker()
        # Cancel outside the lock: a thread ticker joins its thread.
        if handle is not None:
            handle.cancel()

    # --- Signals ---

    def resume(self) -> None:
        with self._lock:
            if self.session.state in (EngagementState.IDLE, EngagementState.PAUSED):
                self.session.state = EngagementState.WATCHING
                self.session.is_active = True
                self.session.last_tick_at = self._clock.now()

    def pause(self) -> None:
        with self._lock:
            if self.session.state is not EngagementState.WATCHING:
                return
            self._flush(self._clock.now())
            self.session.state = EngagementState.PAUSED
            self.session.is_active = False

    def tick(self) -> CompletionEvent | None:
        """Credit elapsed watch time; emit completion once the threshold is met."""
        with self._lock:
            if self.session.state is not EngagementState.WATCHING:
                return None

            now = self._clock.now()
            self._flush(now)
            self.session.last_tick_at = now

            if (
                self.session.accumulated_seconds < self.session.threshold_seconds
                or self.session.completion_fired
            ):
                return None

            self.session.completion_fired = True
            self.session.state = EngagementState.COMPLETED
            self.session.is_active = False
            handle = self._detach_ticker()
            event = CompletionEvent(
                lecture_id=self.session.lecture_id,
                accumulated_seconds=self.session.accumulated_seconds,
                threshold_seconds=self.session.threshold_seconds,
                completed_at=now,
            )

        if handle is not None:
            handle.cancel()

        logger.info(
            "Lecture %s completed (%.0fs of %.0fs threshold)",
            event.lecture_id,
            event.accumulated_seconds,
            event.threshold_seconds,
        )
        self._notify(event)
        return event

    # --- Internals ---

    def _flush(self, now: datetime) -> None:
        if self.session.last_tick_at is None:
            return
        elapsed = (now - self.session.last_tick_at).total_seconds()
        self.session.accumulated_seconds += clamp_delta(
            elapsed, self.config.effective_max_delta
        )

    def _detach_ticker(self) -> TickHandle | None:
        handle, self._tick_handle = self._tick_handle, None
        return handle

    def _notify(self, event: CompletionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Completion listener failed for lecture %s", event.lecture_id)
