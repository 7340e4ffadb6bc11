"""
Sync component - Port definitions.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Protocol

from coursetrack.domain.entities import LearnerRecord

from .models import PrincipalNotFoundError, SyncResult


class SyncClockPort(Protocol):
    """Client clock; decides which day a check-in belongs to."""

    def today(self) -> date:
        ...


class CompletionReporterPort(Protocol):
    """Anything that can persist an inferred completion."""

    @property
    def record(self) -> LearnerRecord | None:
        ...

    def report_completion(self, lecture_id: object) -> SyncResult:
        ...


PrincipalLostHandler = Callable[[PrincipalNotFoundError], None]
