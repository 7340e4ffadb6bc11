"""
Progress component - Learner progress persistence.

Shell Layer - wraps ProgressService results into operation outputs.
"""

from __future__ import annotations

from ._impl import OperationResult, ProgressService, principal_not_found_errors
from .models import (
    GetRecordInput,
    MarkCompletedInput,
    ProgressOperationOutput,
    RecordCheckInInput,
    SetNoteInput,
    ToggleStarInput,
)


def _to_output(result: OperationResult) -> ProgressOperationOutput:
    record, errors, changed = result
    return ProgressOperationOutput(
        record=record,
        errors=errors,
        success=record is not None and not errors,
        changed=changed,
    )


def run_get_record(inp: GetRecordInput, service: ProgressService) -> ProgressOperationOutput:
    """Fetch the full learner record."""
    record = service.get_record(inp.principal_id)
    if record is None:
        return ProgressOperationOutput(
            record=None,
            errors=principal_not_found_errors(inp.principal_id),
            success=False,
        )
    return ProgressOperationOutput(record=record)


def run_mark_completed(
    inp: MarkCompletedInput, service: ProgressService
) -> ProgressOperationOutput:
    """Mark a lecture completed (idempotent)."""
    return _to_output(service.mark_completed(inp.principal_id, inp.lecture_id))


def run_toggle_star(inp: ToggleStarInput, service: ProgressService) -> ProgressOperationOutput:
    """Flip a lecture's starred membership."""
    return _to_output(service.toggle_star(inp.principal_id, inp.lecture_id))


def run_set_note(inp: SetNoteInput, service: ProgressService) -> ProgressOperationOutput:
    """Overwrite the note for a lecture."""
    return _to_output(service.set_note(inp.principal_id, inp.lecture_id, inp.text))


def run_record_check_in(
    inp: RecordCheckInInput, service: ProgressService
) -> ProgressOperationOutput:
    """Record a daily check-in (idempotent per day)."""
    return _to_output(service.record_check_in(inp.principal_id, inp.day))
