"""
Progress component - Completed, starred, notes and check-ins per principal.
"""

from ._impl import (
    ProgressService,
    principal_not_found_errors,
    validate_day,
    validate_lecture_id,
    validate_note_text,
)
from .component import (
    run_get_record,
    run_mark_completed,
    run_record_check_in,
    run_set_note,
    run_toggle_star,
)
from .models import (
    DEFAULT_MAX_NOTE_LENGTH,
    PRINCIPAL_NOT_FOUND,
    GetRecordInput,
    MarkCompletedInput,
    ProgressOperationOutput,
    ProgressValidationError,
    RecordCheckInInput,
    SetNoteInput,
    ToggleStarInput,
)
from .ports import ProgressClockPort, ProgressRepoPort, ProgressRulesPort

__all__ = [
    # Entry points
    "run_get_record",
    "run_mark_completed",
    "run_toggle_star",
    "run_set_note",
    "run_record_check_in",
    # Service
    "ProgressService",
    "principal_not_found_errors",
    "validate_day",
    "validate_lecture_id",
    "validate_note_text",
    # Models
    "GetRecordInput",
    "MarkCompletedInput",
    "ToggleStarInput",
    "SetNoteInput",
    "RecordCheckInInput",
    "ProgressOperationOutput",
    "ProgressValidationError",
    "DEFAULT_MAX_NOTE_LENGTH",
    "PRINCIPAL_NOT_FOUND",
    # Ports
    "ProgressClockPort",
    "ProgressRepoPort",
    "ProgressRulesPort",
]
