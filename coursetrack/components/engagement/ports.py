"""
Engagement component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from coursetrack.ports.clock import ClockPort, TickerPort, TickHandle

from .models import CompletionEvent

CompletionListener = Callable[[CompletionEvent], None]


class DurationPolicyPort(Protocol):
    """Source of the estimated lecture duration."""

    def estimate_seconds(self, lecture_id: str) -> float:
        """Return estimated duration in seconds (must be positive)."""
        ...


class EngagementRulesPort(Protocol):
    """Rules interface for engagement tuning."""

    def get_estimated_duration_seconds(self) -> float:
        ...

    def get_completion_ratio(self) -> float:
        ...

    def get_tick_interval_seconds(self) -> float:
        ...

    def get_max_delta_seconds(self) -> float | None:
        ...


__all__ = [
    "ClockPort",
    "CompletionListener",
    "DurationPolicyPort",
    "EngagementRulesPort",
    "TickHandle",
    "TickerPort",
]
