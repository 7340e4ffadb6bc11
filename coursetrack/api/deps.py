import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from coursetrack.adapters.auth.crypto import Argon2JWTAuthAdapter
from coursetrack.adapters.clock import SystemClock
from coursetrack.adapters.sqlite.repos import SQLitePrincipalRepo, SQLiteProgressRepo
from coursetrack.api.auth_utils import decode_access_token
from coursetrack.app_shell.config import ProgressRulesAdapter
from coursetrack.app_shell.rate_limit import RateLimiter
from coursetrack.components.progress import ProgressService
from coursetrack.domain.entities import RoleType
from coursetrack.rules.loader import load_rules
from coursetrack.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("COURSETRACK_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "coursetrack.db")
        self.migrations_dir = str(self.base_dir / "migrations")
        self.rules_path = Path(
            os.environ.get("COURSETRACK_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_principal_repo(settings: Settings = Depends(get_settings)) -> SQLitePrincipalRepo:
    return SQLitePrincipalRepo(settings.db_path)


def get_progress_repo(settings: Settings = Depends(get_settings)) -> SQLiteProgressRepo:
    return SQLiteProgressRepo(settings.db_path)


# Clock singleton; tests override with a ManualClock
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Component Services ---
def get_progress_service(
    repo: SQLiteProgressRepo = Depends(get_progress_repo),
    clock: SystemClock = Depends(get_clock),
    rules: Rules = Depends(get_rules),
) -> ProgressService:
    """Get progress component service."""
    return ProgressService(
        repo=repo,
        clock=clock,
        max_note_length=ProgressRulesAdapter(rules).get_max_note_length(),
    )


def get_auth_adapter() -> Argon2JWTAuthAdapter:
    return Argon2JWTAuthAdapter()


_rate_limiter_instance: RateLimiter | None = None


def get_rate_limiter(rules: Rules = Depends(get_rules)) -> RateLimiter:
    """Get rate limiter singleton (history is process-wide)."""
    global _rate_limiter_instance
    if _rate_limiter_instance is None:
        _rate_limiter_instance = RateLimiter(rules.rate_limit)
    return _rate_limiter_instance


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass(frozen=True)
class CurrentPrincipal:
    """Identity resolved from the bearer token. Existence is checked per operation."""

    id: UUID
    role: RoleType = "student"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_current_principal(
    token: Annotated[str | None, Depends(oauth2_scheme)],
) -> CurrentPrincipal:
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    sub = payload.get("sub")
    try:
        principal_id = UUID(sub) if isinstance(sub, str) else None
    except ValueError:
        principal_id = None
    if principal_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    role = "admin" if payload.get("role") == "admin" else "student"
    return CurrentPrincipal(id=principal_id, role=role)


def require_access(
    user_id: UUID,
    caller: CurrentPrincipal = Depends(get_current_principal),
) -> UUID:
    """A principal may touch only its own record; admins may touch any."""
    if caller.id != user_id and not caller.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to access another learner's progress",
        )
    return user_id
