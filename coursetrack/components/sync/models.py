"""
Sync component - Data models and error kinds.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from coursetrack.domain.entities import LearnerRecord

# --- Errors ---


class SyncError(Exception):
    """Base error for a failed round trip to the progress store."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SyncTransportError(SyncError):
    """Network unreachable, timeout or an unusable response."""


class SyncRejectedError(SyncError):
    """The store answered with a client or server error (e.g. malformed input)."""


class SyncAuthError(SyncRejectedError):
    """Credentials rejected or the bearer token is no longer valid."""


class PrincipalNotFoundError(SyncError):
    """The store does not know this principal. Fatal for the session."""

    def __init__(self, principal_id: UUID | None, message: str | None = None):
        super().__init__(message or f"Principal {principal_id} not found", status_code=404)
        self.principal_id = principal_id


# --- Results ---


@dataclass(frozen=True)
class SyncResult:
    """
    Outcome of one client operation.

    record is the local view after the operation (reconciled with the
    server on success, optimistic or untouched on failure).
    """

    success: bool
    record: LearnerRecord | None = None
    error: SyncError | None = None
    skipped: bool = False  # no request was needed (already completed / checked in)


@dataclass(frozen=True)
class Session:
    """Authenticated client session."""

    principal_id: UUID
    access_token: str
    token_type: str = "bearer"
