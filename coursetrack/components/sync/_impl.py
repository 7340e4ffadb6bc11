"""
ProgressSyncClient - Persists learner actions and reconciles the local view.

The server is the source of truth: every successful call returns the full
record, which replaces the local view wholesale. On failure:
- completed is never advanced locally (a reload re-attempts tracking)
- starred and note drafts stay optimistic until the next successful call
- nothing is retried automatically

A not-found principal is raised rather than returned; the session is over.
"""

from __future__ import annotations

import logging
import threading
from typing import Any
from uuid import UUID

import httpx
from pydantic import ValidationError

from coursetrack.domain.entities import (
    LearnerRecord,
    LectureId,
    format_day,
    normalize_lecture_id,
)

from .models import (
    PrincipalNotFoundError,
    Session,
    SyncAuthError,
    SyncError,
    SyncRejectedError,
    SyncResult,
    SyncTransportError,
)
from .ports import SyncClockPort

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)


def _parse_record(payload: Any) -> LearnerRecord:
    try:
        return LearnerRecord.model_validate(payload)
    except ValidationError as e:
        raise SyncTransportError(f"Unusable learner record in response: {e}") from e


class LocalView:
    """Thread-safe local copy of the learner record."""

    def __init__(self, record: LearnerRecord | None = None):
        self._lock = threading.Lock()
        self._record = record

    def snapshot(self) -> LearnerRecord | None:
        with self._lock:
            return self._record.model_copy(deep=True) if self._record else None

    def replace(self, record: LearnerRecord | None) -> LearnerRecord | None:
        with self._lock:
            self._record = record.model_copy(deep=True) if record else None
            return self._record.model_copy(deep=True) if self._record else None

    def clear(self) -> None:
        self.replace(None)

    def is_completed(self, lecture_id: LectureId) -> bool:
        with self._lock:
            return self._record is not None and self._record.is_completed(lecture_id)

    def is_starred(self, lecture_id: LectureId) -> bool:
        with self._lock:
            return self._record is not None and self._record.is_starred(lecture_id)

    def has_checked_in(self, day: str) -> bool:
        with self._lock:
            return self._record is not None and self._record.has_checked_in(day)

    def set_starred(self, lecture_id: LectureId, starred: bool) -> None:
        with self._lock:
            if self._record is None:
                return
            members = [lid for lid in self._record.starred if lid != lecture_id]
            if starred:
                members.append(lecture_id)
            self._record.starred = members

    def set_note(self, lecture_id: LectureId, text: str) -> None:
        with self._lock:
            if self._record is not None:
                self._record.notes[lecture_id] = text


class ProgressSyncClient:
    """
    Client half of the progress store.

    http is any httpx.Client whose base_url points at the API; a FastAPI
    TestClient works as well.
    """

    def __init__(
        self,
        http: httpx.Client,
        clock: SyncClockPort,
        view: LocalView | None = None,
    ):
        self.http = http
        self.clock = clock
        self.view = view or LocalView()
        self._session: Session | None = None

    # --- Session ---

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def principal_id(self) -> UUID | None:
        return self._session.principal_id if self._session else None

    @property
    def record(self) -> LearnerRecord | None:
        return self.view.snapshot()

    def login(self, username: str, password: str) -> SyncResult:
        """Authenticate; the server records today's check-in as part of login."""
        try:
            response = self.http.post(
                LOGIN_PATH, json={"username": username, "password": password}
            )
        except httpx.TransportError as e:
            return self._failed("login", SyncTransportError(str(e)))

        if response.status_code in (400, 401, 403):
            return self._failed(
                "login", SyncAuthError(_error_detail(response), response.status_code)
            )
        if response.status_code >= 400:
            return self._failed(
                "login", SyncRejectedError(_error_detail(response), response.status_code)
            )

        try:
            body = response.json()
            record = _parse_record(body["user"])
            token = body["accessToken"]
        except (ValueError, KeyError, TypeError) as e:
            return self._failed("login", SyncTransportError(f"Unusable login response: {e}"))
        except SyncError as e:
            return self._failed("login", e)

        self._session = Session(
            principal_id=record.principal_id,
            access_token=token,
            token_type=body.get("tokenType", "bearer"),
        )
        logger.info("Logged in as %s", record.principal_id)
        return SyncResult(success=True, record=self.view.replace(record))

    def logout(self) -> None:
        self._session = None
        self.view.clear()

    # --- Operations ---

    def report_completion(self, lecture_id: object) -> SyncResult:
        """
        Persist an inferred completion.

        Already completed locally is a no-op. On failure the local
        completed set is left as it was.
        """
        try:
            lid = normalize_lecture_id(lecture_id)
        except ValueError as e:
            return self._failed("report completion", SyncRejectedError(str(e)))

        if self.view.is_completed(lid):
            return SyncResult(success=True, record=self.view.snapshot(), skipped=True)

        return self._reconcile(
            "report completion", "PUT", "progress", {"lectureId": lid}
        )

    def toggle_star(self, lecture_id: object) -> SyncResult:
        """Flip the star locally, then let the server's answer decide."""
        try:
            lid = normalize_lecture_id(lecture_id)
        except ValueError as e:
            return self._failed("toggle star", SyncRejectedError(str(e)))

        self.view.set_starred(lid, not self.view.is_starred(lid))
        return self._reconcile("toggle star", "PUT", "starred", {"lectureId": lid})

    def save_note(self, lecture_id: object, text: str) -> SyncResult:
        """Last write wins; the draft stays local if the request fails."""
        try:
            lid = normalize_lecture_id(lecture_id)
        except ValueError as e:
            return self._failed("save note", SyncRejectedError(str(e)))

        self.view.set_note(lid, text)
        return self._reconcile(
            "save note", "PUT", "notes", {"lectureId": lid, "text": text}
        )

    def record_check_in(self) -> SyncResult:
        today = format_day(self.clock.today())
        if self.view.has_checked_in(today):
            return SyncResult(success=True, record=self.view.snapshot(), skipped=True)
        return self._reconcile("record check-in", "PUT", "check-ins", None)

    def refresh(self) -> SyncResult:
        return self._reconcile("refresh", "GET", "progress", None)

    # --- Plumbing ---

    def _reconcile(
        self,
        action: str,
        method: str,
        resource: str,
        payload: dict[str, Any] | None,
    ) -> SyncResult:
        try:
            record = self._send(method, resource, payload)
        except PrincipalNotFoundError:
            logger.error("%s failed: principal %s no longer exists", action, self.principal_id)
            self.logout()
            raise
        except SyncError as e:
            return self._failed(action, e)
        return SyncResult(success=True, record=self.view.replace(record))

    def _send(self, method: str, resource: str, payload: dict[str, Any] | None) -> LearnerRecord:
        session = self._session
        if session is None:
            raise SyncAuthError("Not logged in")

        path = f"/api/users/{session.principal_id}/{resource}"
        headers = {"Authorization": f"Bearer {session.access_token}"}
        try:
            response = self.http.request(method, path, json=payload, headers=headers)
        except httpx.TransportError as e:
            raise SyncTransportError(str(e)) from e

        if response.status_code == 404:
            raise PrincipalNotFoundError(session.principal_id, _error_detail(response))
        if response.status_code in (401, 403):
            raise SyncAuthError(_error_detail(response), response.status_code)
        if response.status_code >= 400:
            raise SyncRejectedError(_error_detail(response), response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise SyncTransportError("Response was not JSON") from e
        return _parse_record(body)

    def _failed(self, action: str, error: SyncError) -> SyncResult:
        logger.warning("Sync %s failed: %s", action, error)
        return SyncResult(success=False, record=self.view.snapshot(), error=error)
