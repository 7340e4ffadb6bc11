"""
Progress component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from coursetrack.domain.entities import LearnerRecord

DEFAULT_MAX_NOTE_LENGTH = 20_000

PRINCIPAL_NOT_FOUND = "principal_not_found"

# --- Validation Errors ---


@dataclass(frozen=True)
class ProgressValidationError:
    """Progress validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class GetRecordInput:
    principal_id: UUID


@dataclass(frozen=True)
class MarkCompletedInput:
    principal_id: UUID
    lecture_id: object


@dataclass(frozen=True)
class ToggleStarInput:
    principal_id: UUID
    lecture_id: object


@dataclass(frozen=True)
class SetNoteInput:
    principal_id: UUID
    lecture_id: object
    text: str


@dataclass(frozen=True)
class RecordCheckInInput:
    """day defaults to today (service clock) when omitted."""

    principal_id: UUID
    day: str | None = None


# --- Output Models ---


@dataclass
class ProgressOperationOutput:
    """Output from a progress operation. record is the full current state."""

    record: LearnerRecord | None
    errors: list[ProgressValidationError] = field(default_factory=list)
    success: bool = True
    changed: bool = False

    @property
    def not_found(self) -> bool:
        return any(e.code == PRINCIPAL_NOT_FOUND for e in self.errors)
