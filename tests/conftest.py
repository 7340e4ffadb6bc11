from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from coursetrack.adapters.auth.crypto import Argon2JWTAuthAdapter
from coursetrack.adapters.dev_clock import ManualClock
from coursetrack.adapters.sqlite.migrator import SQLiteMigrator
from coursetrack.adapters.sqlite.repos import SQLitePrincipalRepo, SQLiteProgressRepo
from coursetrack.api.deps import Settings, get_clock, get_rate_limiter, get_settings
from coursetrack.api.main import app
from coursetrack.app_shell.rate_limit import RateLimiter
from coursetrack.domain.entities import Principal
from coursetrack.rules.loader import load_rules
from coursetrack.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent
MIGRATIONS_DIR = str(PROJECT_ROOT / "migrations")
RULES_PATH = PROJECT_ROOT / "rules.yaml"

PASSWORD = "secret123"


@pytest.fixture
def db_path(tmp_path) -> str:
    """Temporary SQLite database with the schema applied."""
    path = str(tmp_path / "coursetrack.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path


@pytest.fixture
def rules() -> Rules:
    return load_rules(RULES_PATH)


@pytest.fixture
def principal_repo(db_path) -> SQLitePrincipalRepo:
    return SQLitePrincipalRepo(db_path)


@pytest.fixture
def progress_repo(db_path) -> SQLiteProgressRepo:
    return SQLiteProgressRepo(db_path)


@pytest.fixture(scope="session")
def password_hash() -> str:
    # argon2 is deliberately slow; hash once per run
    return Argon2JWTAuthAdapter().hash_password(PASSWORD)


@pytest.fixture
def student(principal_repo, password_hash) -> Principal:
    p = Principal(username="student", password_hash=password_hash, role="student")
    principal_repo.save(p)
    return p


@pytest.fixture
def admin(principal_repo, password_hash) -> Principal:
    p = Principal(username="admin", password_hash=password_hash, role="admin")
    principal_repo.save(p)
    return p


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def client(tmp_path, db_path, rules, clock):
    """TestClient over a migrated temp database and a manual clock."""
    settings = Settings()
    settings.data_dir = tmp_path
    settings.db_path = db_path
    settings.migrations_dir = MIGRATIONS_DIR
    settings.rules_path = RULES_PATH
    limiter = RateLimiter(rules.rate_limit, clock=clock)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as(client):
    """Log in and return (login body, auth headers)."""

    def _login(username: str, password: str = PASSWORD) -> tuple[dict, dict[str, str]]:
        response = client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        assert response.status_code == 200, response.text
        body = response.json()
        return body, {"Authorization": f"Bearer {body['accessToken']}"}

    return _login
