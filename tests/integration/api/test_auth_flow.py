from datetime import timedelta

from coursetrack.api.auth_utils import create_access_token
from coursetrack.api.deps import get_rate_limiter
from coursetrack.api.main import app
from coursetrack.app_shell.rate_limit import RateLimiter
from coursetrack.rules.models import RateLimitRules, RateLimitWindow


def test_login_returns_token_and_record(client, student):
    response = client.post(
        "/api/auth/login", json={"username": "student", "password": "secret123"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["tokenType"] == "bearer"
    assert body["accessToken"]
    assert body["user"]["id"] == str(student.id)
    assert body["user"]["completed"] == []
    assert body["user"]["notes"] == {}


def test_login_records_check_in_once_per_day(client, student, login_as):
    first, _ = login_as("student")
    second, _ = login_as("student")

    assert first["user"]["checkIns"] == ["2024-01-01"]
    assert second["user"]["checkIns"] == ["2024-01-01"]


def test_login_on_next_day_adds_check_in(client, student, clock, login_as):
    login_as("student")
    clock.advance(24 * 3600)

    body, _ = login_as("student")

    assert body["user"]["checkIns"] == ["2024-01-01", "2024-01-02"]


def test_wrong_password(client, student):
    response = client.post("/api/auth/login", json={"username": "student", "password": "nope"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_unknown_user(client):
    response = client.post("/api/auth/login", json={"username": "ghost", "password": "x"})

    assert response.status_code == 401


def test_failed_login_records_no_check_in(client, student, progress_repo):
    client.post("/api/auth/login", json={"username": "student", "password": "nope"})

    assert progress_repo.get_record(student.id).check_ins == []


def test_login_rate_limited(client, student, clock):
    limiter = RateLimiter(
        RateLimitRules(login=RateLimitWindow(window_seconds=60, max_attempts=2)), clock=clock
    )
    app.dependency_overrides[get_rate_limiter] = lambda: limiter

    responses = [
        client.post("/api/auth/login", json={"username": "student", "password": "nope"})
        for _ in range(3)
    ]

    assert [r.status_code for r in responses] == [401, 401, 429]
    assert responses[2].headers["Retry-After"] == "60"

    clock.advance(61)
    response = client.post("/api/auth/login", json={"username": "student", "password": "nope"})
    assert response.status_code == 401


def test_missing_token_is_401(client, student):
    response = client.get(f"/api/users/{student.id}/progress")

    assert response.status_code == 401


def test_garbage_token_is_401(client, student):
    response = client.get(
        f"/api/users/{student.id}/progress", headers={"Authorization": "Bearer not-a-jwt"}
    )

    assert response.status_code == 401


def test_expired_token_is_401(client, student):
    token = create_access_token({"sub": str(student.id)}, expires_delta=timedelta(seconds=-1))

    response = client.get(
        f"/api/users/{student.id}/progress", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401


def test_token_without_uuid_subject_is_401(client, student):
    token = create_access_token({"sub": "student"})

    response = client.get(
        f"/api/users/{student.id}/progress", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "coursetrack"}
