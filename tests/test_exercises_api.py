"""Tests for the /api/exercises and /api/results endpoints."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from bukva.models import Exercise, ExerciseType, Result


@pytest.fixture
def mc_payload(grammar_tree) -> dict:
    return {
        "sentence": "She ___ to school every day.",
        "section_id": grammar_tree["Tenses"].id,
        "exercise_type": "multiple_choice",
        "options": ["go", "goes", "is going", "went"],
        "correct_index": 1,
    }


@pytest.fixture
def exercise(db_session, grammar_tree) -> Exercise:
    item = Exercise(
        sentence="They ___ football.",
        options_json=json.dumps(["plays", "is playing", "play", "played"]),
        correct_index=2,
        section_id=grammar_tree["Tenses"].id,
        exercise_type=ExerciseType.MULTIPLE_CHOICE,
    )
    db_session.add(item)
    db_session.commit()
    db_session.refresh(item)
    return item


class TestCreateExercise:
    def test_multiple_choice(self, client: TestClient, teacher_headers, mc_payload, db_session) -> None:
        resp = client.post("/api/exercises", json=mc_payload, headers=teacher_headers)
        assert resp.status_code == 201

        stored = db_session.get(Exercise, resp.json()["id"])
        assert json.loads(stored.options_json) == mc_payload["options"]
        assert stored.correct_index == 1
        assert stored.exercise_type == ExerciseType.MULTIPLE_CHOICE

    def test_text_input_drops_options(self, client, teacher_headers, mc_payload, db_session) -> None:
        payload = dict(mc_payload, exercise_type="text_input")
        resp = client.post("/api/exercises", json=payload, headers=teacher_headers)
        assert resp.status_code == 201

        stored = db_session.get(Exercise, resp.json()["id"])
        assert stored.options_json == "[]"
        assert stored.correct_index == -1

    @pytest.mark.parametrize(
        ("changes", "detail"),
        [
            ({"options": ["a", "b", "c"]}, "Multiple choice requires 4 options"),
            ({"options": ["a", "b", " ", "d"]}, "Multiple choice requires 4 options"),
            ({"correct_index": 4}, "Invalid correct_index for multiple_choice"),
            ({"correct_index": None}, "Invalid correct_index for multiple_choice"),
            ({"exercise_type": "essay"}, "Unsupported exercise_type"),
            ({"sentence": "  "}, "section_id, exercise_type and sentence are required"),
            ({"section_id": 999}, "Section not found"),
        ],
    )
    def test_validation(self, client, teacher_headers, mc_payload, changes, detail) -> None:
        resp = client.post("/api/exercises", json=dict(mc_payload, **changes), headers=teacher_headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == detail

    def test_inactive_section_accepted(self, client, teacher_headers, mc_payload, grammar_tree) -> None:
        payload = dict(mc_payload, section_id=grammar_tree["Vocabulary"].id)
        resp = client.post("/api/exercises", json=payload, headers=teacher_headers)
        assert resp.status_code == 201

    def test_students_cannot_author(self, client, student_headers, mc_payload) -> None:
        resp = client.post("/api/exercises", json=mc_payload, headers=student_headers)
        assert resp.status_code == 403


class TestListExercises:
    def test_filter_by_section(self, client, student_headers, exercise, grammar_tree) -> None:
        resp = client.get(
            f"/api/exercises?section_id={grammar_tree['Tenses'].id}", headers=student_headers
        )
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 1
        assert data[0]["options"] == ["plays", "is playing", "play", "played"]
        assert data[0]["exercise_type"] == "multiple_choice"

        other = client.get(
            f"/api/exercises?section_id={grammar_tree['Grammar'].id}", headers=student_headers
        )
        assert other.json() == []

    def test_all_exercises(self, client, student_headers, exercise) -> None:
        resp = client.get("/api/exercises", headers=student_headers)
        assert [item["id"] for item in resp.json()] == [exercise.id]


class TestResults:
    def test_student_records_answer(self, client, student, student_headers, exercise, db_session) -> None:
        resp = client.post(
            "/api/results",
            json={"exercise_id": exercise.id, "answer_index": 2, "is_correct": True},
            headers=student_headers,
        )
        assert resp.status_code == 201

        stored = db_session.get(Result, resp.json()["id"])
        assert stored.user_id == student.id
        assert stored.is_correct is True

    def test_unknown_exercise(self, client, student_headers) -> None:
        resp = client.post(
            "/api/results",
            json={"exercise_id": 999, "answer_index": 0, "is_correct": False},
            headers=student_headers,
        )
        assert resp.status_code == 404

    def test_teacher_cannot_record(self, client, teacher_headers, exercise) -> None:
        resp = client.post(
            "/api/results",
            json={"exercise_id": exercise.id, "answer_index": 0, "is_correct": False},
            headers=teacher_headers,
        )
        assert resp.status_code == 403

    def test_teacher_reviews_results(
        self, client, student_headers, teacher_headers, exercise
    ) -> None:
        for answer_index, is_correct in ((0, False), (2, True)):
            client.post(
                "/api/results",
                json={"exercise_id": exercise.id, "answer_index": answer_index, "is_correct": is_correct},
                headers=student_headers,
            )

        resp = client.get("/api/results", headers=teacher_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 2
        assert data[0]["answer_index"] == 2
        assert data[0]["student_email"] == "learner@example.com"
        assert data[0]["sentence"] == "They ___ football."

    def test_students_cannot_review(self, client, student_headers) -> None:
        assert client.get("/api/results", headers=student_headers).status_code == 403
