# /tests/test_routers.py

import pytest
from fastapi.testclient import TestClient

from app.db.database import get_db
from app.main import app
from app.services import user_service


@pytest.fixture
def client(session, db_service):
    """A TestClient bound to the test database. The lifespan hook is not run."""
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    user_service.ensure_default_admin(db_service)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _login(client, username, password):
    body = client.post("/api/auth/login", json={"username": username, "password": password}).json()
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def admin_headers(client):
    return _login(client, "admin", "Admin123")


@pytest.fixture
def student_headers(client, make_user):
    make_user("ravi", "secret")
    return _login(client, "ravi", "secret")


def test_health_check(client):
    assert client.get("/").json()["status"] == "Exam Portal is running!"


def test_failed_login_is_a_business_failure(client):
    response = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})

    assert response.status_code == 200
    assert response.json() == {"success": False, "message": "Incorrect password"}


def test_me_requires_a_valid_session(client, student_headers):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer bogus"}).status_code == 401

    me = client.get("/api/auth/me", headers=student_headers).json()
    assert me["username"] == "ravi"
    assert me["is_admin"] is False


def test_logout_invalidates_the_token(client, student_headers):
    client.post("/api/auth/logout", headers=student_headers)

    assert client.get("/api/auth/me", headers=student_headers).status_code == 401


def test_admin_routes_reject_students(client, student_headers):
    assert client.get("/api/admin/users", headers=student_headers).status_code == 403


def test_exam_flow_over_http(client, admin_headers, student_headers, add_questions):
    add_questions("EVS", 4, correct_answer="B")
    client.post("/api/admin/config/total-questions", json={"total": 3}, headers=admin_headers)

    first = client.post("/api/exam/question", json={"subject": "EVS", "index": 0}, headers=student_headers).json()
    assert first["success"] is True
    assert first["question"]["total"] == 3
    assert "correct_answer" not in first["question"]

    past_end = client.post("/api/exam/question", json={"subject": "EVS", "index": 3}, headers=student_headers).json()
    assert past_end["question"] is None

    answers = {str(first["question"]["id"]): "B"}
    submitted = client.post("/api/exam/submit", json={"subject": "EVS", "answers": answers}, headers=student_headers).json()
    assert submitted == {"success": True, "score": 1, "total": 3}

    again = client.post("/api/exam/submit", json={"subject": "EVS", "answers": answers}, headers=student_headers).json()
    assert again["success"] is False

    status = client.get("/api/exam/status", params={"subject": "EVS"}, headers=student_headers).json()
    assert status["submitted"] is True


def test_insufficient_pool_is_reported_not_raised(client, student_headers, add_questions):
    add_questions("EVS", 2)

    body = client.post("/api/exam/question", json={"subject": "EVS", "index": 0}, headers=student_headers).json()

    assert body == {"success": False, "message": "Not enough questions for EVS (need 50, have 2)", "question": None}


def test_disabled_exam(client, admin_headers, student_headers):
    client.post("/api/admin/config/exam-active", json={"active": False}, headers=admin_headers)

    body = client.post("/api/exam/question", json={"subject": "EVS", "index": 0}, headers=student_headers).json()

    assert body["message"] == "Exam is disabled by admin"


def test_admin_csv_upload_and_delete(client, admin_headers):
    csv_text = "EVS,Which is a mammal?,Shark,Whale,Trout,Eel,B\n"
    uploaded = client.post("/api/admin/uploads/csv", json={"csvText": csv_text, "filename": "evs.csv"}, headers=admin_headers).json()
    assert uploaded["added"] == 1

    uploads = client.get("/api/admin/uploads", headers=admin_headers).json()["uploads"]
    assert uploads[0]["filename"] == "evs.csv"

    deleted = client.post("/api/admin/uploads/delete", json={"uploadId": uploaded["uploadId"]}, headers=admin_headers).json()
    assert deleted == {"success": True, "message": 'Deleted "evs.csv" (1 questions)'}


def test_admin_word_upload(client, admin_headers, mocker):
    mocker.patch(
        "app.services.question_bank_service.docx_converter.convert_docx_to_html",
        return_value="<p>1. Pick the fruit.</p><p>a) Apple</p><p>b) Brick</p><p>c) Chair</p><p>d) Door</p><p>Answer: A</p>",
    )

    body = client.post(
        "/api/admin/uploads/word",
        data={"subject": "EVS"},
        files={"file": ("paper.docx", b"PK\x03\x04", "application/octet-stream")},
        headers=admin_headers,
    ).json()

    assert body["added"] == 1


def test_admin_reports(client, admin_headers):
    assert client.get("/api/admin/reports/summary", headers=admin_headers).json() == {"success": True, "data": []}
    analytics = client.get("/api/admin/reports/analytics", headers=admin_headers).json()["analytics"]
    assert analytics["totalExams"] == 0


def test_any_logged_in_user_can_read_a_setting(client, student_headers):
    assert client.get("/api/exam/config", params={"key": "ActiveSubject"}).status_code == 401

    body = client.get("/api/exam/config", params={"key": "ActiveSubject"}, headers=student_headers).json()
    assert body == {"success": True, "key": "ActiveSubject", "value": "EVS"}

    missing = client.get("/api/exam/config", params={"key": "NoSuchKey"}, headers=student_headers).json()
    assert missing["value"] is None
