from datetime import datetime, timedelta

from fastapi.testclient import TestClient
import pytest

from sedetok_live.core.services.evaluation_events import EvaluationEventRegistry
from sedetok_live.server.api_server import create_api_app

QUESTIONS = [
    {
        "question_text": "¿Capital de Perú?",
        "options": ["Lima", "Quito", "Bogotá"],
        "correct_option_index": 0,
        "feedback": "Lima desde 1535.",
    },
    {
        "question_text": "¿Capital de Chile?",
        "options": ["Santiago", "Valparaíso"],
        "correct_option_index": 0,
        "time_limit_seconds": 10,
    },
]


@pytest.fixture
def client(manager):
    app = create_api_app(manager, EvaluationEventRegistry())
    return TestClient(app)


@pytest.fixture
def created(client):
    response = client.post("/games", json={"title": "Capitales", "questions": QUESTIONS})
    assert response.status_code == 201
    return response.json()


def test_create_and_lookup_game(client, created):
    assert created["status"] == "waiting"
    assert len(created["pin"]) == 6

    by_pin = client.get(f"/games/pin/{created['pin']}")
    assert by_pin.status_code == 200
    assert by_pin.json()["id"] == created["id"]

    assert client.get(f"/games/{created['id']}").json()["title"] == "Capitales"
    assert [g["id"] for g in client.get("/games").json()] == [created["id"]]


def test_invalid_requests(client, created):
    assert client.get("/games/pin/12").status_code == 422
    assert client.get("/games/missing").status_code == 404
    bad = client.post(
        "/games",
        json={"title": "Mal", "questions": [{"question_text": "¿?", "options": ["a"], "correct_option_index": 0}]},
    )
    assert bad.status_code == 422


def test_player_question_view_hides_answers(client, created):
    questions = client.get(f"/games/{created['id']}/questions").json()
    assert "correct_option_index" not in questions[0]
    assert "feedback" not in questions[0]
    assert questions[0]["options"][0]["text"] == "Lima"

    host_view = client.get(f"/games/{created['id']}/questions", params={"include_answers": True}).json()
    assert host_view[0]["correct_option_index"] == 0


def test_full_round_over_http(client, created):
    game_id = created["id"]
    ana = client.post(f"/games/{game_id}/players", json={"player_name": "Ana"})
    assert ana.status_code == 201
    duplicate = client.post(f"/games/{game_id}/players", json={"player_name": "ana"})
    assert duplicate.status_code == 409

    assert client.post(f"/games/{game_id}/start").json()["status"] == "in_progress"
    assert client.post(f"/games/{game_id}/start").status_code == 409

    question_id = client.get(f"/games/{game_id}/questions").json()[0]["id"]
    payload = {
        "player_id": ana.json()["id"],
        "question_id": question_id,
        "selected_option_index": 0,
        "response_time_ms": 0,
    }
    answer = client.post(f"/games/{game_id}/answers", json=payload)
    assert answer.status_code == 201
    assert answer.json()["points_earned"] == 1000
    assert answer.json()["duplicate"] is False

    retry = client.post(f"/games/{game_id}/answers", json=payload)
    assert retry.json()["duplicate"] is True
    assert retry.json()["total_score"] == 1000

    stats = client.get(f"/games/{game_id}/questions/{question_id}/stats").json()
    assert stats["answers_received"] == 1
    assert stats["option_counts"] == [1, 0, 0]

    leaderboard = client.get(f"/games/{game_id}/leaderboard").json()
    assert leaderboard[0]["player_name"] == "Ana"
    assert leaderboard[0]["rank"] == 1

    assert client.post(f"/games/{game_id}/next").json()["current_question_index"] == 1
    assert client.post(f"/games/{game_id}/next").json()["status"] == "finished"

    late = client.post(f"/games/{game_id}/players", json={"player_name": "Beto"})
    assert late.status_code == 409

    replay = client.post(f"/games/{game_id}/replay")
    assert replay.status_code == 201
    assert replay.json()["pin"] != created["pin"]


def test_negative_response_time_is_rejected(client, created):
    game_id = created["id"]
    player = client.post(f"/games/{game_id}/players", json={"player_name": "Ana"}).json()
    client.post(f"/games/{game_id}/start")
    question_id = client.get(f"/games/{game_id}/questions").json()[0]["id"]
    response = client.post(
        f"/games/{game_id}/answers",
        json={"player_id": player["id"], "question_id": question_id, "selected_option_index": 0, "response_time_ms": -1},
    )
    assert response.status_code == 422


def test_answers_before_start_are_refused(client, created):
    game_id = created["id"]
    player = client.post(f"/games/{game_id}/players", json={"player_name": "Ana"}).json()
    question_id = client.get(f"/games/{game_id}/questions").json()[0]["id"]
    response = client.post(
        f"/games/{game_id}/answers",
        json={"player_id": player["id"], "question_id": question_id, "selected_option_index": 0, "response_time_ms": 10},
    )
    assert response.status_code == 409


def test_delete_game(client, created):
    game_id = created["id"]
    client.post(f"/games/{game_id}/start")
    assert client.delete(f"/games/{game_id}").status_code == 409
    client.post(f"/games/{game_id}/finish")
    assert client.delete(f"/games/{game_id}").status_code == 204
    assert client.get(f"/games/{game_id}").status_code == 404


def test_evaluation_event_access(client):
    now = datetime.utcnow()
    response = client.post(
        "/evaluation-events",
        json={
            "title": "Parcial",
            "content_id": "quiz-1",
            "content_kind": "quiz",
            "start_at": (now - timedelta(hours=1)).isoformat(),
            "end_at": (now + timedelta(hours=1)).isoformat(),
            "require_authentication": True,
        },
    )
    assert response.status_code == 201
    code = response.json()["access_code"]

    anonymous = client.get(f"/evaluation-events/{code.lower()}")
    assert anonymous.status_code == 401
    assert anonymous.headers["X-Return-Path"] == f"/quiz-evaluation/{code}"

    signed_in = client.get(f"/evaluation-events/{code}", params={"user_id": "u1"})
    assert signed_in.status_code == 200
    assert signed_in.json()["title"] == "Parcial"

    assert client.get("/evaluation-events/NOPE1234").status_code == 404


def test_evaluation_event_with_utc_offsets(client):
    now = datetime.utcnow()
    response = client.post(
        "/evaluation-events",
        json={
            "title": "Parcial",
            "content_id": "quiz-1",
            "content_kind": "quiz",
            "start_at": (now - timedelta(hours=1)).isoformat() + "Z",
            "end_at": (now + timedelta(hours=1)).isoformat() + "Z",
        },
    )
    assert response.status_code == 201
    code = response.json()["access_code"]

    resolved = client.get(f"/evaluation-events/{code}")
    assert resolved.status_code == 200
    assert resolved.json()["access_code"] == code
