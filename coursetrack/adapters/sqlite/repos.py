import sqlite3
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from coursetrack.domain.entities import LearnerRecord, Principal


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteRepoBase:
    """Base class for SQLite repositories. One connection per operation."""

    # Seconds to wait on a locked database before failing.
    busy_timeout = 30.0

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.busy_timeout)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLitePrincipalRepo(SQLiteRepoBase):
    def save(self, principal: Principal) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO principals (
                    id, username, password_hash, role, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    username=excluded.username,
                    password_hash=excluded.password_hash,
                    role=excluded.role,
                    updated_at=excluded.updated_at
            """,
                (
                    str(principal.id),
                    principal.username,
                    principal.password_hash,
                    principal.role,
                    principal.created_at.isoformat(),
                    principal.updated_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def get_by_username(self, username: str) -> Principal | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM principals WHERE username = ?", (username,)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def get_by_id(self, principal_id: UUID) -> Principal | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM principals WHERE id = ?", (str(principal_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Principal:
        return Principal(
            id=UUID(row["id"]),
            username=row["username"],
            password_hash=row["password_hash"],
            role=row["role"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class SQLiteProgressRepo(SQLiteRepoBase):
    """
    Progress sets stored as rows keyed by (principal_id, lecture_id).

    add_completed / add_check_in are single INSERT OR IGNORE statements,
    so concurrent inserts of the same entry can never duplicate it.
    """

    def exists(self, principal_id: UUID) -> bool:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT 1 AS found FROM principals WHERE id = ?", (str(principal_id),)
            ).fetchone()
            return row is not None
        finally:
            conn.close()

    def get_record(self, principal_id: UUID) -> LearnerRecord | None:
        pid = str(principal_id)
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT username, role FROM principals WHERE id = ?", (pid,)
            ).fetchone()
            if not row:
                return None

            completed = conn.execute(
                "SELECT lecture_id FROM completed_lectures WHERE principal_id = ? ORDER BY rowid",
                (pid,),
            ).fetchall()
            starred = conn.execute(
                "SELECT lecture_id FROM starred_lectures WHERE principal_id = ? ORDER BY rowid",
                (pid,),
            ).fetchall()
            notes = conn.execute(
                "SELECT lecture_id, text FROM lecture_notes WHERE principal_id = ? ORDER BY rowid",
                (pid,),
            ).fetchall()
            check_ins = conn.execute(
                "SELECT day FROM check_ins WHERE principal_id = ? ORDER BY rowid", (pid,)
            ).fetchall()

            return LearnerRecord(
                principal_id=principal_id,
                username=row["username"],
                role=row["role"],
                completed=[r["lecture_id"] for r in completed],
                starred=[r["lecture_id"] for r in starred],
                notes={r["lecture_id"]: r["text"] for r in notes},
                check_ins=[r["day"] for r in check_ins],
            )
        finally:
            conn.close()

    def add_completed(self, principal_id: UUID, lecture_id: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "INSERT OR IGNORE INTO completed_lectures (principal_id, lecture_id, created_at) "
                "VALUES (?, ?, ?)",
                (str(principal_id), lecture_id, datetime.now(UTC).isoformat()),
            )
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()

    def toggle_starred(self, principal_id: UUID, lecture_id: str) -> bool:
        # Read-then-write: two concurrent toggles may interleave.
        pid = str(principal_id)
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT 1 AS found FROM starred_lectures WHERE principal_id = ? AND lecture_id = ?",
                (pid, lecture_id),
            ).fetchone()
            if row:
                conn.execute(
                    "DELETE FROM starred_lectures WHERE principal_id = ? AND lecture_id = ?",
                    (pid, lecture_id),
                )
                starred = False
            else:
                conn.execute(
                    "INSERT OR IGNORE INTO starred_lectures (principal_id, lecture_id, created_at) "
                    "VALUES (?, ?, ?)",
                    (pid, lecture_id, datetime.now(UTC).isoformat()),
                )
                starred = True
            conn.commit()
            return starred
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def set_note(self, principal_id: UUID, lecture_id: str, text: str, updated_at: datetime) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO lecture_notes (principal_id, lecture_id, text, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(principal_id, lecture_id) DO UPDATE SET
                    text=excluded.text,
                    updated_at=excluded.updated_at
            """,
                (str(principal_id), lecture_id, text, updated_at.isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def add_check_in(self, principal_id: UUID, day: str) -> bool:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "INSERT OR IGNORE INTO check_ins (principal_id, day) VALUES (?, ?)",
                (str(principal_id), day),
            )
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()
