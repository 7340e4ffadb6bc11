"""
Engagement component - Data models.

Per-lecture viewing session state for the completion heuristic.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._impl import EngagementStateMachine

# --- Defaults ---

DEFAULT_ESTIMATED_DURATION_SECONDS = 1800.0  # 30 minute lecture
DEFAULT_COMPLETION_RATIO = 0.80
DEFAULT_TICK_INTERVAL_SECONDS = 3.0


class EngagementState(Enum):
    """Viewing session state."""

    IDLE = "idle"
    WATCHING = "watching"
    PAUSED = "paused"
    COMPLETED = "completed"  # terminal


@dataclass(frozen=True)
class EngagementConfig:
    """Tuning for the engagement state machine."""

    completion_ratio: float = DEFAULT_COMPLETION_RATIO
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS
    # None means "clamp to the tick interval"
    max_delta_seconds: float | None = None

    def __post_init__(self) -> None:
        if not 0 < self.completion_ratio <= 1:
            raise ValueError("completion_ratio must be in (0, 1]")
        if self.tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be positive")
        if self.max_delta_seconds is not None and self.max_delta_seconds <= 0:
            raise ValueError("max_delta_seconds must be positive")

    @property
    def effective_max_delta(self) -> float:
        if self.max_delta_seconds is None:
            return self.tick_interval_seconds
        return self.max_delta_seconds


@dataclass
class ViewingSession:
    """
    One (principal, lecture, page-load) viewing session.

    Never persisted; destroyed when the learner leaves the lecture.
    """

    lecture_id: str
    threshold_seconds: float
    accumulated_seconds: float = 0.0
    is_active: bool = False
    last_tick_at: datetime | None = None
    completion_fired: bool = False
    state: EngagementState = EngagementState.IDLE

    @property
    def progress_ratio(self) -> float:
        if self.threshold_seconds <= 0:
            return 1.0
        return min(1.0, self.accumulated_seconds / self.threshold_seconds)


@dataclass(frozen=True)
class CompletionEvent:
    """Raised exactly once per viewing session."""

    lecture_id: str
    accumulated_seconds: float
    threshold_seconds: float
    completed_at: datetime


# --- Component I/O ---


@dataclass(frozen=True)
class OpenSessionInput:
    """Input for opening a viewing session."""

    lecture_id: str
    already_completed: bool = False


@dataclass
class OpenSessionOutput:
    """Output from opening a viewing session."""

    machine: EngagementStateMachine
    tracking: bool  # False when the lecture was already completed
    threshold_seconds: float
