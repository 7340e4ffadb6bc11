from uuid import uuid4

import pytest

from coursetrack.api.auth_utils import create_access_token


@pytest.fixture
def auth(student, login_as) -> dict[str, str]:
    _, headers = login_as("student")
    return headers


@pytest.fixture
def base(student) -> str:
    return f"/api/users/{student.id}"


class TestMarkCompleted:
    def test_marks_and_returns_full_record(self, client, auth, base):
        response = client.put(f"{base}/progress", json={"lectureId": 7}, headers=auth)

        assert response.status_code == 200
        body = response.json()
        assert body["completed"] == ["7"]
        assert body["checkIns"] == ["2024-01-01"]

    def test_idempotent(self, client, auth, base):
        client.put(f"{base}/progress", json={"lectureId": "7"}, headers=auth)
        response = client.put(f"{base}/progress", json={"lectureId": 7}, headers=auth)

        assert response.status_code == 200
        assert response.json()["completed"] == ["7"]

    def test_order_is_insertion_order(self, client, auth, base):
        for lid in ["3", "1", "2"]:
            client.put(f"{base}/progress", json={"lectureId": lid}, headers=auth)

        response = client.get(f"{base}/progress", headers=auth)

        assert response.json()["completed"] == ["3", "1", "2"]

    def test_missing_lecture_id_rejected_without_mutation(self, client, auth, base):
        response = client.put(f"{base}/progress", json={}, headers=auth)

        assert response.status_code == 422
        assert response.json()["detail"][0]["code"] == "lecture_id_required"
        assert client.get(f"{base}/progress", headers=auth).json()["completed"] == []

    def test_blank_lecture_id_rejected(self, client, auth, base):
        response = client.put(f"{base}/progress", json={"lectureId": "   "}, headers=auth)

        assert response.status_code == 422

    @pytest.mark.parametrize("lecture_id", [True, 5.5, 5.0, [7]])
    def test_non_integer_non_string_lecture_id_rejected_without_mutation(
        self, client, auth, base, lecture_id
    ):
        response = client.put(f"{base}/progress", json={"lectureId": lecture_id}, headers=auth)

        assert response.status_code == 422
        assert client.get(f"{base}/progress", headers=auth).json()["completed"] == []


class TestToggleStar:
    def test_star_then_unstar(self, client, auth, base):
        starred = client.put(f"{base}/starred", json={"lectureId": 4}, headers=auth).json()
        unstarred = client.put(f"{base}/starred", json={"lectureId": 4}, headers=auth).json()

        assert starred["starred"] == ["4"]
        assert unstarred["starred"] == []

    def test_missing_lecture_id(self, client, auth, base):
        response = client.put(f"{base}/starred", json={"lectureId": None}, headers=auth)

        assert response.status_code == 422

    def test_boolean_lecture_id_rejected(self, client, auth, base):
        response = client.put(f"{base}/starred", json={"lectureId": False}, headers=auth)

        assert response.status_code == 422
        assert client.get(f"{base}/progress", headers=auth).json()["starred"] == []


class TestNotes:
    def test_last_write_wins(self, client, auth, base):
        client.put(f"{base}/notes", json={"lectureId": 5, "text": "a"}, headers=auth)
        response = client.put(f"{base}/notes", json={"lectureId": 5, "text": "b"}, headers=auth)

        assert response.json()["notes"] == {"5": "b"}

    def test_note_need_not_be_completed(self, client, auth, base):
        body = client.put(
            f"{base}/notes", json={"lectureId": "intro", "text": "later"}, headers=auth
        ).json()

        assert body["notes"] == {"intro": "later"}
        assert body["completed"] == []

    def test_too_long(self, client, auth, base, rules):
        text = "x" * (rules.progress.max_note_length + 1)

        response = client.put(
            f"{base}/notes", json={"lectureId": 5, "text": text}, headers=auth
        )

        assert response.status_code == 422
        assert response.json()["detail"][0]["code"] == "note_too_long"

    def test_missing_text(self, client, auth, base):
        response = client.put(f"{base}/notes", json={"lectureId": 5}, headers=auth)

        assert response.status_code == 422


class TestCheckIns:
    def test_same_day_is_noop(self, client, auth, base):
        response = client.put(f"{base}/check-ins", headers=auth)

        assert response.status_code == 200
        assert response.json()["checkIns"] == ["2024-01-01"]

    def test_next_day(self, client, auth, base, clock):
        clock.advance(24 * 3600)

        response = client.put(f"{base}/check-ins", headers=auth)

        assert response.json()["checkIns"] == ["2024-01-01", "2024-01-02"]


class TestAccess:
    def test_foreign_principal_forbidden(self, client, student, admin, login_as):
        _, student_auth = login_as("student")

        response = client.get(f"/api/users/{admin.id}/progress", headers=student_auth)

        assert response.status_code == 403

    def test_admin_may_read_others(self, client, student, admin, login_as):
        _, admin_auth = login_as("admin")

        response = client.get(f"/api/users/{student.id}/progress", headers=admin_auth)

        assert response.status_code == 200
        assert response.json()["id"] == str(student.id)

    def test_unknown_principal_is_404(self, client, db_path):
        ghost = uuid4()
        token = create_access_token({"sub": str(ghost)})

        response = client.put(
            f"/api/users/{ghost}/progress",
            json={"lectureId": 1},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 404

    def test_malformed_user_id(self, client, auth):
        response = client.get("/api/users/not-a-uuid/progress", headers=auth)

        assert response.status_code == 422
