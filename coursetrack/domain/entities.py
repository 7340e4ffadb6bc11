from datetime import UTC, date, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
RoleType = Literal["student", "admin"]
LectureId = str

DAY_FORMAT = "%Y-%m-%d"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def normalize_lecture_id(value: object) -> LectureId:
    """
    Normalise an opaque lecture id to its string form.

    Accepts ints and strings (numeric ids arrive as numbers from older
    clients). Raises ValueError for missing or blank ids.
    """
    if value is None or isinstance(value, bool):
        raise ValueError("lecture id is required")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValueError("lecture id is required")
        return stripped
    raise ValueError(f"unsupported lecture id type: {type(value).__name__}")


def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


def parse_day(value: str) -> date:
    """Parse a YYYY-MM-DD check-in day. Raises ValueError if malformed."""
    return datetime.strptime(value, DAY_FORMAT).date()


# --- Principals ---

class Principal(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    username: str
    password_hash: str
    role: RoleType = "student"
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


# --- Progress ---

class LearnerRecord(BaseModel):
    """
    Everything the tracker persists for one principal.

    completed/starred are ordered sets (insertion order, no duplicates),
    notes are last-write-wins, check_ins holds one YYYY-MM-DD per active day.
    """

    model_config = ConfigDict(populate_by_name=True)

    principal_id: UUID = Field(alias="id")
    username: str = ""
    role: RoleType = "student"
    completed: list[LectureId] = Field(default_factory=list)
    starred: list[LectureId] = Field(default_factory=list)
    notes: dict[LectureId, str] = Field(default_factory=dict)
    check_ins: list[str] = Field(default_factory=list, alias="checkIns")

    def is_completed(self, lecture_id: LectureId) -> bool:
        return lecture_id in self.completed

    def is_starred(self, lecture_id: LectureId) -> bool:
        return lecture_id in self.starred

    def has_checked_in(self, day: str) -> bool:
        return day in self.check_ins

    @property
    def check_in_streak(self) -> int:
        """Number of distinct days the principal checked in."""
        return len(set(self.check_ins))
