"""
Integration tests for the HTTP API.
Tests the complete flow: endpoint -> grading_service -> grading engine -> database
"""

import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from classquiz import models  # noqa
from classquiz.core.config import settings
from classquiz.db.base import Base
from classquiz.db.session import get_db
from classquiz.main import app

# Test database (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

SAMPLE_TEST = {
    "title": "Warm-up",
    "creator_id": 7,
    "questions": [
        {"text": "2 + 2 = ?", "type": "single", "options": ["3", "4", "5"], "correct": 1, "points": 2},
        {
            "text": "Which are prime?",
            "type": "multiple",
            "options": ["2", "4", "5"],
            "correct": [0, 2],
            "points": 3,
        },
        {"text": "Explain evaporation.", "type": "open", "points": 4},
    ],
}


@pytest.fixture(scope="function")
def db_session_factory():
    """Session factory over a fresh in-memory database."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session_factory):
    """API client backed by the in-memory database."""
    TestingSessionLocal = db_session_factory

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def test_id(client):
    """Create the sample test."""
    response = client.post("/api/v1/tests/", json=SAMPLE_TEST)
    assert response.status_code == 201
    return response.json()["id"]


def _store_test(db_session_factory, questions):
    """Write a tests row directly, bypassing authoring validation."""
    db = db_session_factory()
    try:
        row = models.Test(title="Imported", questions=questions)
        db.add(row)
        db.commit()
        return row.id
    finally:
        db.close()


def _submit(client, test_id, answers, name="Ana"):
    response = client.post(
        f"/api/v1/grade/{test_id}",
        json={"student_name": name, "student_class": "7b", "answers": answers},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestTestsEndpoints:
    def test_create_and_list(self, client, test_id):
        response = client.get("/api/v1/tests/")
        assert response.status_code == 200
        [summary] = response.json()
        assert summary["id"] == test_id
        assert summary["question_count"] == 3
        assert summary["creator_id"] == 7

    def test_filter_by_creator(self, client, test_id):
        assert client.get("/api/v1/tests/", params={"creator_id": 7}).json()[0]["id"] == test_id
        assert client.get("/api/v1/tests/", params={"creator_id": 8}).json() == []

    def test_teacher_view_has_answer_key(self, client, test_id):
        body = client.get(f"/api/v1/tests/{test_id}").json()
        assert [q["correct"] for q in body["questions"]] == [1, [0, 2], None]

    def test_student_view_hides_answer_key(self, client, test_id):
        body = client.get(f"/api/v1/tests/{test_id}/take").json()
        assert [q["text"] for q in body["questions"]] == [q["text"] for q in SAMPLE_TEST["questions"]]
        assert all("correct" not in q for q in body["questions"])

    def test_invalid_questions_are_rejected(self, client):
        bad_index = {
            "title": "Bad",
            "questions": [{"text": "?", "type": "single", "options": ["a"], "correct": 4}],
        }
        bad_type = {"title": "Bad", "questions": [{"text": "?", "type": "essay"}]}
        assert client.post("/api/v1/tests/", json=bad_index).status_code == 422
        assert client.post("/api/v1/tests/", json=bad_type).status_code == 422

    def test_missing_test(self, client):
        assert client.get("/api/v1/tests/999").status_code == 404
        assert client.delete("/api/v1/tests/999").status_code == 404


class TestGradeEndpoint:
    def test_all_correct(self, client, test_id):
        body = _submit(client, test_id, {"q0": "1", "q1": ["0", "2"], "q2": "Heat"})
        assert body["auto_score"]["earned"] == 5
        assert body["auto_score"]["total"] == 5
        assert body["auto_score"]["percent"] == 100
        assert body["auto_score"]["grade"] == "6.00"
        assert body["mistakes"] == []
        assert body["open_answers"][0]["answer"] == "Heat"

    def test_flat_form_post(self, client, test_id):
        response = client.post(
            f"/api/v1/grade/{test_id}",
            json={"studentName": "Bo", "studentClass": "7a", "q0": "0", "q1": ["0"]},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["auto_score"]["grade"] == "2.00"
        assert len(body["mistakes"]) == 2
        assert body["mistakes"][1]["correct_answer"] == ["2", "5"]

        detail = client.get(f"/api/v1/submissions/{body['submission_id']}").json()
        assert detail["student_name"] == "Bo"
        assert detail["student_class"] == "7a"
        assert [a["student_answer"] for a in detail["answers"]] == ["0", ["0"], None]

    def test_fractional_points_survive_storage(self, client):
        fractional = {
            "title": "Eighths",
            "questions": [
                {"text": "a?", "type": "single", "options": ["x", "y"], "correct": 0, "points": 0.125},
                {"text": "b?", "type": "single", "options": ["x", "y"], "correct": 1, "points": 0.125},
            ],
        }
        test_id = client.post("/api/v1/tests/", json=fractional).json()["id"]
        body = _submit(client, test_id, {"q0": "0", "q1": "0"})
        assert body["auto_score"]["earned"] == 0.125
        assert body["auto_score"]["total"] == 0.25
        assert body["auto_score"]["percent"] == 50

        detail = client.get(f"/api/v1/submissions/{body['submission_id']}").json()
        assert detail["auto_score"] == body["auto_score"]

    def test_invalid_stored_question_keeps_positions(self, client, db_session_factory):
        questions = json.dumps(
            [
                {"text": "broken", "type": "single", "options": ["a"], "correct": 5},
                {"text": "ok", "type": "single", "options": ["a", "b"], "correct": 1},
            ]
        )
        test_id = _store_test(db_session_factory, questions)

        body = _submit(client, test_id, {"q1": "1"})
        assert len(body["warnings"]) == 1
        assert "question 0" in body["warnings"][0]
        assert body["auto_score"]["total"] == 1
        assert body["auto_score"]["grade"] == "6.00"

        detail = client.get(f"/api/v1/submissions/{body['submission_id']}").json()
        assert [a["type"] for a in detail["answers"]] == ["unknown", "single"]
        assert [a["is_correct"] for a in detail["answers"]] == [None, True]

    def test_unreadable_stored_questions(self, client, db_session_factory):
        test_id = _store_test(db_session_factory, "not json")

        [summary] = client.get("/api/v1/tests/").json()
        assert summary["question_count"] == 0

        body = _submit(client, test_id, {"q0": "1"})
        assert body["auto_score"]["total"] == 0
        assert body["auto_score"]["grade"] == "2.00"

    def test_configured_letter_scale(self, client, test_id, monkeypatch):
        monkeypatch.setattr(settings, "GRADE_SCALE", "letter")
        body = _submit(client, test_id, {"q0": "1", "q1": ["0", "2"]})
        assert body["auto_score"]["scale"] == "letter"
        assert body["auto_score"]["grade"] == "A"

        submission_id = body["submission_id"]
        response = client.post(f"/api/v1/submissions/{submission_id}/review", json={"manual_grade": "b"})
        assert response.status_code == 200
        assert response.json()["manual_grade"] == "B"
        assert response.json()["effective_grade"] == "B"

        response = client.post(f"/api/v1/submissions/{submission_id}/review", json={"manual_grade": "5"})
        assert response.status_code == 422

    def test_unknown_test(self, client):
        response = client.post("/api/v1/grade/999", json={"answers": {"q0": "1"}})
        assert response.status_code == 404


class TestSubmissionReview:
    def test_dashboard(self, client, test_id):
        _submit(client, test_id, {"q0": "1"}, name="Ana")
        _submit(client, test_id, {"q0": "0"}, name="Bo")

        rows = client.get("/api/v1/submissions/").json()
        assert [r["student_name"] for r in rows] == ["Bo", "Ana"]
        assert all(r["test_title"] == "Warm-up" for r in rows)
        assert all(r["status"] == "submitted" for r in rows)
        assert rows[0]["effective_grade"] == rows[0]["auto_grade"]

    def test_dashboard_filter_by_test(self, client, test_id):
        other_id = client.post("/api/v1/tests/", json={**SAMPLE_TEST, "title": "Quiz 2"}).json()["id"]
        _submit(client, test_id, {"q0": "1"}, name="Ana")
        _submit(client, other_id, {"q0": "1"}, name="Bo")
        _submit(client, other_id, {}, name="Cy")

        rows = client.get("/api/v1/submissions/", params={"test_id": other_id}).json()
        assert [r["student_name"] for r in rows] == ["Cy", "Bo"]
        assert all(r["test_id"] == other_id and r["test_title"] == "Quiz 2" for r in rows)

        [row] = client.get("/api/v1/submissions/", params={"test_id": test_id}).json()
        assert row["student_name"] == "Ana"
        assert client.get("/api/v1/submissions/", params={"test_id": 999}).json() == []

    def test_detail(self, client, test_id):
        submission_id = _submit(client, test_id, {"q0": "1", "q1": ["0"], "q2": "Heat"})["submission_id"]

        detail = client.get(f"/api/v1/submissions/{submission_id}").json()
        assert detail["test_title"] == "Warm-up"
        assert detail["student_name"] == "Ana"
        assert [a["is_correct"] for a in detail["answers"]] == [True, False, None]
        assert [m["index"] for m in detail["mistakes"]] == [1]
        assert detail["status"] == "submitted"

    def test_manual_points_then_review(self, client, test_id):
        submission_id = _submit(client, test_id, {"q0": "1", "q2": "Heat"})["submission_id"]

        response = client.post(
            f"/api/v1/submissions/{submission_id}/points",
            json={"question_index": 2, "points": 3.5},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "under_review"

        detail = client.get(f"/api/v1/submissions/{submission_id}").json()
        assert [a["manual_points"] for a in detail["answers"]] == [None, None, 3.5]
        assert detail["manual_points"] == {"2": 3.5}
        auto_grade = detail["auto_score"]["grade"]

        response = client.post(
            f"/api/v1/submissions/{submission_id}/review",
            json={"manual_grade": 5.5, "teacher_comment": "Good explanation"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "reviewed"
        assert body["manual_grade"] == "5.50"
        assert body["effective_grade"] == "5.50"
        assert body["manual_points"] == {"2": 3.5}

        detail = client.get(f"/api/v1/submissions/{submission_id}").json()
        assert detail["auto_score"]["grade"] == auto_grade
        assert detail["teacher_comment"] == "Good explanation"

    def test_invalid_review_input(self, client, test_id):
        submission_id = _submit(client, test_id, {})["submission_id"]
        assert client.post(
            f"/api/v1/submissions/{submission_id}/review", json={"manual_grade": "9"}
        ).status_code == 422
        assert client.post(
            f"/api/v1/submissions/{submission_id}/points",
            json={"question_index": 0, "points": -1},
        ).status_code == 422

    def test_legacy_manual_grade(self, client, test_id):
        submission_id = _submit(client, test_id, {})["submission_id"]
        response = client.post(
            f"/api/v1/submissions/{submission_id}/manual-grade", json={"manual_grade": "4"}
        )
        assert response.status_code == 200
        assert response.json()["effective_grade"] == "4.00"

    def test_deleted_test_keeps_submission(self, client, test_id):
        submission_id = _submit(client, test_id, {"q1": ["0", "2"], "q0": "1"})["submission_id"]
        assert client.delete(f"/api/v1/tests/{test_id}").status_code == 204

        [row] = client.get("/api/v1/submissions/").json()
        assert row["test_title"] is None

        detail = client.get(f"/api/v1/submissions/{submission_id}").json()
        assert detail["test_deleted"] is True
        assert [a["index"] for a in detail["answers"]] == [0, 1]
        assert all(a["points"] == 0 and a["type"] == "unknown" for a in detail["answers"])
        assert detail["auto_score"]["grade"] == "6.00"

    def test_delete_submission(self, client, test_id):
        submission_id = _submit(client, test_id, {})["submission_id"]
        assert client.delete(f"/api/v1/submissions/{submission_id}").status_code == 204
        assert client.get(f"/api/v1/submissions/{submission_id}").status_code == 404


class TestHealth:
    def test_probes(self, client):
        assert client.get("/api/v1/health/live").json() == {"status": "ok"}
        assert client.get("/api/v1/health/db").json() == {"status": "ok"}
