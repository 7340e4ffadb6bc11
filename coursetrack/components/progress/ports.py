"""
Progress component - Port interfaces.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol

from coursetrack.ports.repo import ProgressRepoPort


class ProgressClockPort(Protocol):
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...


class ProgressRulesPort(Protocol):
    def get_max_note_length(self) -> int:
        ...


__all__ = ["ProgressClockPort", "ProgressRepoPort", "ProgressRulesPort"]
