from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from coursetrack.api.deps import get_progress_service, require_access
from coursetrack.api.schemas import LectureRequest, NoteRequest
from coursetrack.components.progress import (
    GetRecordInput,
    MarkCompletedInput,
    ProgressOperationOutput,
    ProgressService,
    RecordCheckInInput,
    SetNoteInput,
    ToggleStarInput,
    run_get_record,
    run_mark_completed,
    run_record_check_in,
    run_set_note,
    run_toggle_star,
)
from coursetrack.domain.entities import LearnerRecord

router = APIRouter()


def _respond(result: ProgressOperationOutput) -> LearnerRecord:
    if result.not_found:
        raise HTTPException(status_code=404, detail=result.errors[0].message)
    if not result.success or result.record is None:
        detail: list[dict[str, Any]] = [
            {"code": e.code, "message": e.message, "field": e.field} for e in result.errors
        ]
        raise HTTPException(status_code=422, detail=detail)
    return result.record


@router.get("/{user_id}/progress", response_model=LearnerRecord)
def get_progress(
    user_id: UUID = Depends(require_access),
    service: ProgressService = Depends(get_progress_service),
) -> LearnerRecord:
    """Fetch the learner's full record."""
    return _respond(run_get_record(GetRecordInput(user_id), service))


@router.put("/{user_id}/progress", response_model=LearnerRecord)
def mark_completed(
    req: LectureRequest,
    user_id: UUID = Depends(require_access),
    service: ProgressService = Depends(get_progress_service),
) -> LearnerRecord:
    """Mark a lecture completed. Repeating it is a no-op."""
    return _respond(run_mark_completed(MarkCompletedInput(user_id, req.lecture_id), service))


@router.put("/{user_id}/starred", response_model=LearnerRecord)
def toggle_star(
    req: LectureRequest,
    user_id: UUID = Depends(require_access),
    service: ProgressService = Depends(get_progress_service),
) -> LearnerRecord:
    return _respond(run_toggle_star(ToggleStarInput(user_id, req.lecture_id), service))


@router.put("/{user_id}/notes", response_model=LearnerRecord)
def set_note(
    req: NoteRequest,
    user_id: UUID = Depends(require_access),
    service: ProgressService = Depends(get_progress_service),
) -> LearnerRecord:
    return _respond(run_set_note(SetNoteInput(user_id, req.lecture_id, req.text), service))


@router.put("/{user_id}/check-ins", response_model=LearnerRecord)
def record_check_in(
    user_id: UUID = Depends(require_access),
    service: ProgressService = Depends(get_progress_service),
) -> LearnerRecord:
    """Record today's check-in (server clock)."""
    return _respond(run_record_check_in(RecordCheckInInput(user_id), service))
