"""In-memory progress repository adapter.

Implements ProgressRepoPort with one lock per principal, so concurrent
updates for the same learner are serialised while different learners
never contend. Suitable for single-process deployments and tests.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from coursetrack.domain.entities import LearnerRecord, Principal, RoleType


@dataclass
class _Entry:
    username: str
    role: RoleType
    completed: list[str] = field(default_factory=list)
    starred: list[str] = field(default_factory=list)
    notes: dict[str, str] = field(default_factory=dict)
    check_ins: list[str] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)


class InMemoryProgressRepo:
    def __init__(self) -> None:
        self._entries: dict[UUID, _Entry] = {}
        self._registry_lock = threading.Lock()

    def register(self, principal: Principal) -> None:
        """Create an empty record for a principal (no-op if present)."""
        with self._registry_lock:
            self._entries.setdefault(principal.id, _Entry(principal.username, principal.role))

    def exists(self, principal_id: UUID) -> bool:
        return principal_id in self._entries

    def get_record(self, principal_id: UUID) -> LearnerRecord | None:
        entry = self._entries.get(principal_id)
        if entry is None:
            return None
        with entry.lock:
            return LearnerRecord(
                principal_id=principal_id,
                username=entry.username,
                role=entry.role,
                completed=list(entry.completed),
                starred=list(entry.starred),
                notes=dict(entry.notes),
                check_ins=list(entry.check_ins),
            )

    def add_completed(self, principal_id: UUID, lecture_id: str) -> bool:
        entry = self._entries[principal_id]
        with entry.lock:
            if lecture_id in entry.completed:
                return False
            entry.completed.append(lecture_id)
            return True

    def toggle_starred(self, principal_id: UUID, lecture_id: str) -> bool:
        entry = self._entries[principal_id]
        with entry.lock:
            if lecture_id in entry.starred:
                entry.starred.remove(lecture_id)
                return False
            entry.starred.append(lecture_id)
            return True

    def set_note(self, principal_id: UUID, lecture_id: str, text: str, updated_at: datetime) -> None:
        entry = self._entries[principal_id]
        with entry.lock:
            entry.notes[lecture_id] = text

    def add_check_in(self, principal_id: UUID, day: str) -> bool:
        entry = self._entries[principal_id]
        with entry.lock:
            if day in entry.check_ins:
                return False
            entry.check_ins.append(day)
            return True

    def clear(self) -> None:
        """Clear all records - useful for testing."""
        with self._registry_lock:
            self._entries.clear()
