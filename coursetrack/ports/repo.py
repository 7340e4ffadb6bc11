from datetime import datetime
from typing import Protocol
from uuid import UUID

from coursetrack.domain.entities import LearnerRecord, Principal


class PrincipalRepoPort(Protocol):
    def get_by_username(self, username: str) -> Principal | None:
        ...

    def get_by_id(self, principal_id: UUID) -> Principal | None:
        ...

    def save(self, principal: Principal) -> None:
        ...


class ProgressRepoPort(Protocol):
    """
    Per-principal progress storage.

    add_completed and add_check_in must be atomic set-inserts: two
    concurrent calls with the same arguments leave exactly one entry.
    """

    def exists(self, principal_id: UUID) -> bool:
        ...

    def get_record(self, principal_id: UUID) -> LearnerRecord | None:
        ...

    def add_completed(self, principal_id: UUID, lecture_id: str) -> bool:
        """Insert if absent. Returns True if a row was added."""
        ...

    def toggle_starred(self, principal_id: UUID, lecture_id: str) -> bool:
        """Flip membership. Returns the new membership."""
        ...

    def set_note(self, principal_id: UUID, lecture_id: str, text: str, updated_at: datetime) -> None:
        ...

    def add_check_in(self, principal_id: UUID, day: str) -> bool:
        """Insert if absent. Returns True if a row was added."""
        ...
