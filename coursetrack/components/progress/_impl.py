"""
ProgressService - Idempotent merges over a learner's progress record.

Every operation returns the full, current record so callers can
resynchronise without a second fetch.

Concurrency:
- mark_completed / record_check_in rely on the repo's atomic set-insert
- toggle_star is read-then-write; two tabs toggling the same lecture at
  the same moment can interleave. Accepted: stars are low stakes.
- set_note is last write wins; no history is kept.

Functional Core - validation plus orchestration over the repo port.
"""

from __future__ import annotations

import logging
from uuid import UUID

from coursetrack.domain.entities import (
    LearnerRecord,
    format_day,
    normalize_lecture_id,
    parse_day,
)

from .models import (
    DEFAULT_MAX_NOTE_LENGTH,
    PRINCIPAL_NOT_FOUND,
    ProgressValidationError,
)
from .ports import ProgressClockPort, ProgressRepoPort

logger = logging.getLogger(__name__)

OperationResult = tuple[LearnerRecord | None, list[ProgressValidationError], bool]

# --- Validation Functions ---


def validate_lecture_id(value: object) -> tuple[str | None, list[ProgressValidationError]]:
    """Normalise a lecture id, reporting a validation error if unusable."""
    try:
        return normalize_lecture_id(value), []
    except ValueError as e:
        return None, [
            ProgressValidationError(
                code="lecture_id_required",
                message=str(e),
                field="lectureId",
            )
        ]


def validate_note_text(text: object, max_length: int) -> list[ProgressValidationError]:
    if not isinstance(text, str):
        return [
            ProgressValidationError(
                code="note_text_invalid",
                message="Note text must be a string",
                field="text",
            )
        ]
    if len(text) > max_length:
        return [
            ProgressValidationError(
                code="note_too_long",
                message=f"Note must be {max_length} characters or less",
                field="text",
            )
        ]
    return []


def validate_day(day: str) -> list[ProgressValidationError]:
    try:
        parse_day(day)
    except (TypeError, ValueError):
        return [
            ProgressValidationError(
                code="day_invalid",
                message="Check-in day must be YYYY-MM-DD",
                field="day",
            )
        ]
    return []


def principal_not_found_errors(principal_id: UUID) -> list[ProgressValidationError]:
    return [
        ProgressValidationError(
            code=PRINCIPAL_NOT_FOUND,
            message=f"Principal {principal_id} not found",
        )
    ]


class ProgressService:
    """Server-side store of completed, starred, notes and check-ins."""

    def __init__(
        self,
        repo: ProgressRepoPort,
        clock: ProgressClockPort,
        max_note_length: int = DEFAULT_MAX_NOTE_LENGTH,
    ) -> None:
        self.repo = repo
        self.clock = clock
        self.max_note_length = max_note_length

    def get_record(self, principal_id: UUID) -> LearnerRecord | None:
        return self.repo.get_record(principal_id)

    def mark_completed(self, principal_id: UUID, lecture_id: object) -> OperationResult:
        """Add lecture to completed. Already completed is a no-op, not an error."""
        lid, errors = validate_lecture_id(lecture_id)
        if errors or lid is None:
            return None, errors, False
        if not self.repo.exists(principal_id):
            return None, principal_not_found_errors(principal_id), False

        changed = self.repo.add_completed(principal_id, lid)
        if changed:
            logger.info("Principal %s completed lecture %s", principal_id, lid)
        return self.repo.get_record(principal_id), [], changed

    def toggle_star(self, principal_id: UUID, lecture_id: object) -> OperationResult:
        lid, errors = validate_lecture_id(lecture_id)
        if errors or lid is None:
            return None, errors, False
        if not self.repo.exists(principal_id):
            return None, principal_not_found_errors(principal_id), False

        self.repo.toggle_starred(principal_id, lid)
        return self.repo.get_record(principal_id), [], True

    def set_note(self, principal_id: UUID, lecture_id: object, text: object) -> OperationResult:
        lid, errors = validate_lecture_id(lecture_id)
        errors = errors + validate_note_text(text, self.max_note_length)
        if errors or lid is None:
            return None, errors, False
        if not self.repo.exists(principal_id):
            return None, principal_not_found_errors(principal_id), False

        self.repo.set_note(principal_id, lid, str(text), self.clock.now())
        return self.repo.get_record(principal_id), [], True

    def record_check_in(self, principal_id: UUID, day: str | None = None) -> OperationResult:
        """Record that the principal was active on day (default: today)."""
        today = day if day is not None else format_day(self.clock.today())
        errors = validate_day(today)
        if errors:
            return None, errors, False
        if not self.repo.exists(principal_id):
            return None, principal_not_found_errors(principal_id), False

        changed = self.repo.add_check_in(principal_id, today)
        return self.repo.get_record(principal_id), [], changed
