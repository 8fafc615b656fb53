"""FastAPI server exposing live games to hosts and remote players."""

from __future__ import annotations

from datetime import datetime
import logging
from threading import Thread

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field
import uvicorn

from sedetok_live.constants.about import APP_NAME, APP_VERSION
from sedetok_live.constants.game_constants import (
    DEFAULT_POINTS,
    DEFAULT_TIME_LIMIT_SECONDS,
    LEADERBOARD_SIZE,
)
from sedetok_live.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from sedetok_live.core.codes import is_valid_pin, normalize_pin
from sedetok_live.core.errors import (
    AccessCodeNotFoundError,
    AttemptLimitError,
    AuthenticationRequiredError,
    DuplicatePlayerError,
    EventEndedError,
    EventNotStartedError,
    GameFinishedError,
    GameNotActiveError,
    GameNotFoundError,
    InvalidTransitionError,
    LiveGameError,
    PlayerNotFoundError,
    QuestionNotFoundError,
    TransientBackendError,
)
from sedetok_live.core.game_manager import GameManager
from sedetok_live.core.models import (
    AnswerSubmission,
    ContentKind,
    EvaluationEvent,
    LiveGame,
    LiveGamePlayer,
    LiveGameQuestion,
    QuestionDraft,
)
from sedetok_live.core.services.evaluation_events import EvaluationEventRegistry

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[Exception], int]] = [
    (GameNotFoundError, 404),
    (PlayerNotFoundError, 404),
    (QuestionNotFoundError, 404),
    (AccessCodeNotFoundError, 404),
    (GameFinishedError, 409),
    (DuplicatePlayerError, 409),
    (InvalidTransitionError, 409),
    (GameNotActiveError, 409),
    (AttemptLimitError, 409),
    (AuthenticationRequiredError, 401),
    (EventNotStartedError, 403),
    (EventEndedError, 403),
    (TransientBackendError, 503),
]


class QuestionPayload(BaseModel):
    """Payload schema for one question of a new game."""

    question_text: str
    options: list[str]
    correct_option_index: int
    points: int = DEFAULT_POINTS
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS
    image_url: str | None = None
    video_url: str | None = None
    feedback: str | None = None


class CreateGamePayload(BaseModel):
    title: str
    questions: list[QuestionPayload]
    creator_id: str | None = None


class JoinPayload(BaseModel):
    """Payload schema for the join flow."""

    player_name: str
    user_id: str | None = None


class AnswerPayload(BaseModel):
    """Payload schema for submitted answers. `selected_option_index` is null on timeout."""

    player_id: str
    question_id: str
    selected_option_index: int | None = None
    response_time_ms: int = Field(ge=0)


class EvaluationEventPayload(BaseModel):
    title: str
    content_id: str
    content_kind: ContentKind
    start_at: datetime
    end_at: datetime
    require_authentication: bool = False
    allow_multiple_attempts: bool = False
    show_results_immediately: bool = True
    description: str | None = None
    creator_id: str | None = None


def _http_error(exc: Exception) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            headers = None
            if isinstance(exc, AuthenticationRequiredError):
                headers = {"X-Return-Path": exc.return_path}
            return HTTPException(status_code=status_code, detail=str(exc), headers=headers)
    if isinstance(exc, ValueError):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def _game_to_dict(game: LiveGame) -> dict[str, object]:
    return {
        "id": game.id,
        "title": game.title,
        "pin": game.pin,
        "status": game.status.value,
        "current_question_index": game.current_question_index,
        "created_at": game.created_at.isoformat(),
        "started_at": game.started_at.isoformat() if game.started_at else None,
        "finished_at": game.finished_at.isoformat() if game.finished_at else None,
        "creator_id": game.creator_id,
    }


def _question_to_dict(question: LiveGameQuestion, include_answer: bool) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "order_index": question.order_index,
        "question_text": question.question_text,
        "options": [{"text": o.text, "image_url": o.image_url} for o in question.options],
        "points": question.points,
        "time_limit_seconds": question.time_limit_seconds,
        "image_url": question.image_url,
        "video_url": question.video_url,
    }
    # Correct answers and explanations stay with the host.
    if include_answer:
        payload["correct_option_index"] = question.correct_option_index
        payload["feedback"] = question.feedback
    return payload


def _player_to_dict(player: LiveGamePlayer) -> dict[str, object]:
    return {
        "id": player.id,
        "game_id": player.game_id,
        "player_name": player.player_name,
        "total_score": player.total_score,
        "joined_at": player.joined_at.isoformat(),
    }


def _event_to_dict(event: EvaluationEvent) -> dict[str, object]:
    return {
        "id": event.id,
        "title": event.title,
        "description": event.description,
        "content_id": event.content_id,
        "content_kind": event.content_kind.value,
        "access_code": event.access_code,
        "start_at": event.start_at.isoformat(),
        "end_at": event.end_at.isoformat(),
        "require_authentication": event.require_authentication,
        "allow_multiple_attempts": event.allow_multiple_attempts,
        "show_results_immediately": event.show_results_immediately,
    }


def _get_dependency(instance):
    def dependency():
        return instance

    return dependency


def create_api_app(
    game_manager: GameManager,
    evaluation_events: EvaluationEventRegistry | None = None,
) -> FastAPI:
    """Create a FastAPI application wired to the provided game manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    manager_dep = _get_dependency(game_manager)
    events_dep = _get_dependency(evaluation_events or EvaluationEventRegistry())

    @app.post("/games", status_code=201)
    def create_game(
        payload: CreateGamePayload,
        manager: GameManager = Depends(manager_dep),
    ) -> dict[str, object]:
        drafts = [QuestionDraft(**question.model_dump()) for question in payload.questions]
        try:
            game = manager.create_game(payload.title, drafts, creator_id=payload.creator_id)
        except ValueError as exc:
            raise _http_error(exc) from exc
        return _game_to_dict(game)

    @app.get("/games")
    def list_games(
        creator_id: str | None = None,
        manager: GameManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        return [_game_to_dict(game) for game in manager.list_games(creator_id)]

    @app.get("/games/pin/{pin}")
    def get_game_by_pin(pin: str, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        normalized = normalize_pin(pin)
        if not is_valid_pin(normalized):
            raise HTTPException(status_code=422, detail="PIN must contain 6 digits.")
        try:
            return _game_to_dict(manager.get_game_by_pin(normalized))
        except LiveGameError as exc:
            raise _http_error(exc) from exc

    @app.get("/games/{game_id}")
    def get_game(game_id: str, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return _game_to_dict(manager.get_game(game_id))
        except LiveGameError as exc:
            raise _http_error(exc) from exc

    @app.delete("/games/{game_id}", status_code=204)
    def delete_game(game_id: str, manager: GameManager = Depends(manager_dep)) -> None:
        try:
            manager.delete_game(game_id)
        except LiveGameError as exc:
            raise _http_error(exc) from exc

    @app.post("/games/{game_id}/start")
    def start_game(game_id: str, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return _game_to_dict(manager.start_game(game_id))
        except LiveGameError as exc:
            raise _http_error(exc) from exc

    @app.post("/games/{game_id}/next")
    def next_question(game_id: str, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return _game_to_dict(manager.next_question(game_id))
        except LiveGameError as exc:
            raise _http_error(exc) from exc

    @app.post("/games/{game_id}/finish")
    def finish_game(game_id: str, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return _game_to_dict(manager.finish_game(game_id))
        except LiveGameError as exc:
            raise _http_error(exc) from exc

    @app.post("/games/{game_id}/replay", status_code=201)
    def replay_game(game_id: str, manager: GameManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return _game_to_dict(manager.replay_game(game_id))
        except LiveGameError as exc:
            raise _http_error(exc) from exc

    @app.get("/games/{game_id}/questions")
    def get_questions(
        game_id: str,
        include_answers: bool = False,
        manager: GameManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        try:
            questions = manager.get_questions(game_id)
        except LiveGameError as exc:
            raise _http_error(exc) from exc
        return [_question_to_dict(q, include_answers) for q in questions]

    @app.get("/games/{game_id}/questions/{question_id}/stats")
    def get_question_stats(
        game_id: str,
        question_id: str,
        manager: GameManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            stats = manager.get_question_stats(game_id, question_id)
        except LiveGameError as exc:
            raise _http_error(exc) from exc
        return {
            "question_id": stats.question_id,
            "answers_received": stats.answers_received,
            "option_counts": stats.option_counts,
            "correct_percentage": stats.correct_percentage,
        }

    @app.get("/games/{game_id}/players")
    def list_players(game_id: str, manager: GameManager = Depends(manager_dep)) -> list[dict[str, object]]:
        try:
            return [_player_to_dict(player) for player in manager.list_players(game_id)]
        except LiveGameError as exc:
            raise _http_error(exc) from exc

    @app.post("/games/{game_id}/players", status_code=201)
    def register_player(
        game_id: str,
        payload: JoinPayload,
        manager: GameManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            player = manager.register_player(game_id, payload.player_name, payload.user_id)
        except (LiveGameError, ValueError) as exc:
            raise _http_error(exc) from exc
        return _player_to_dict(player)

    @app.get("/games/{game_id}/leaderboard")
    def get_leaderboard(
        game_id: str,
        limit: int = LEADERBOARD_SIZE,
        manager: GameManager = Depends(manager_dep),
    ) -> list[dict[str, object]]:
        try:
            rows = manager.get_leaderboard(game_id, limit)
        except LiveGameError as exc:
            raise _http_error(exc) from exc
        return [
            {
                "rank": row.rank,
                "player_id": row.player_id,
                "player_name": row.player_name,
                "total_score": row.total_score,
            }
            for row in rows
        ]

    @app.post("/games/{game_id}/answers", status_code=201)
    def submit_answer(
        game_id: str,
        payload: AnswerPayload,
        manager: GameManager = Depends(manager_dep),
    ) -> dict[str, object]:
        submission = AnswerSubmission(
            game_id=game_id,
            player_id=payload.player_id,
            question_id=payload.question_id,
            selected_option_index=payload.selected_option_index,
            response_time_ms=payload.response_time_ms,
        )
        try:
            result = manager.submit_answer(submission)
        except LiveGameError as exc:
            raise _http_error(exc) from exc
        return {
            "question_id": result.question_id,
            "is_correct": result.is_correct,
            "points_earned": result.points_earned,
            "total_score": result.total_score,
            "duplicate": result.duplicate,
            "answered_at": result.answered_at.isoformat(),
        }

    @app.post("/evaluation-events", status_code=201)
    def create_evaluation_event(
        payload: EvaluationEventPayload,
        registry: EvaluationEventRegistry = Depends(events_dep),
    ) -> dict[str, object]:
        try:
            event = registry.create_event(**payload.model_dump())
        except ValueError as exc:
            raise _http_error(exc) from exc
        return _event_to_dict(event)

    @app.get("/evaluation-events/{access_code}")
    def resolve_access_code(
        access_code: str,
        user_id: str | None = None,
        registry: EvaluationEventRegistry = Depends(events_dep),
    ) -> dict[str, object]:
        try:
            event = registry.resolve_access_code(access_code, user_id=user_id)
        except LiveGameError as exc:
            raise _http_error(exc) from exc
        return _event_to_dict(event)

    return app


def start_api_server(
    game_manager: GameManager,
    evaluation_events: EvaluationEventRegistry | None = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(game_manager, evaluation_events)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="SedetokApiServer", daemon=True)
    thread.start()
    logger.info("API server listening on %s:%d", host, port)
    return thread
