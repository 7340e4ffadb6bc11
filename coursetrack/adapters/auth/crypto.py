from datetime import timedelta
from typing import Any

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

from coursetrack.api.auth_utils import create_access_token


class Argon2JWTAuthAdapter:
    """Argon2 password hashing with JWT bearer tokens (sub = principal id)."""

    def __init__(self) -> None:
        self.ph = PasswordHasher()

    def hash_password(self, password: str) -> str:
        return str(self.ph.hash(password))

    def verify_password(self, password: str, hash_str: str) -> bool:
        try:
            self.ph.verify(hash_str, password)
            return True
        except (VerifyMismatchError, InvalidHashError):
            return False

    def create_token(self, principal_id: Any, ttl_minutes: int, role: str = "student") -> str:
        return create_access_token(
            {"sub": str(principal_id), "role": role}, timedelta(minutes=ttl_minutes)
        )
