"""Business logic for live games shared between the host UI, the API and players."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
import logging
from threading import Lock

from sedetok_live.core.backend import GameListener
from sedetok_live.core.errors import (
    GameFinishedError,
    GameNotActiveError,
    InvalidTransitionError,
)
from sedetok_live.core.models import (
    AnswerResult,
    AnswerSubmission,
    GameEvent,
    GameEventKind,
    GameStatus,
    LiveGame,
    LiveGamePlayer,
    LiveGameQuestion,
    QuestionDraft,
    QuestionStats,
)
from sedetok_live.core.scoring import calculate_points
from sedetok_live.core.services.event_bus import GameEventBus, GameSubscription
from sedetok_live.core.services.game_repository import GameRepository
from sedetok_live.core.services.leaderboard import LeaderboardRow, rank_players, top_players
from sedetok_live.core.services.player_registry import PlayerRegistry

logger = logging.getLogger(__name__)


class GameManager:
    """Facade over the game repository, player registry and event bus.

    Also serves as the in-process `GameBackend` for player screens. Every
    method returns snapshots, so callers never hold live rows.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._repository = GameRepository()
        self._players = PlayerRegistry()
        self._events = GameEventBus()

    # --- Host actions ---

    def create_game(
        self,
        title: str,
        questions: list[QuestionDraft],
        creator_id: str | None = None,
    ) -> LiveGame:
        with self._lock:
            game = self._repository.create_game(title, questions, creator_id)
            snapshot = replace(game)
        logger.info("Created game %s (PIN %s) with %d questions", game.id, game.pin, len(questions))
        return snapshot

    def start_game(self, game_id: str) -> LiveGame:
        with self._lock:
            game = self._repository.get_game(game_id)
            if game.status is not GameStatus.WAITING:
                raise InvalidTransitionError(f"Game {game_id} cannot start from status {game.status.value}.")
            game.status = GameStatus.IN_PROGRESS
            game.started_at = datetime.utcnow()
            game.current_question_index = 0
            snapshot = replace(game)
        logger.info("Started game %s", game_id)
        self._publish(GameEventKind.GAME_UPDATED, snapshot)
        return snapshot

    def next_question(self, game_id: str) -> LiveGame:
        """Advance to the next question, finishing the game after the last one."""
        with self._lock:
            game = self._repository.get_game(game_id)
            if game.status is not GameStatus.IN_PROGRESS:
                raise InvalidTransitionError(f"Game {game_id} is not in progress.")
            next_index = game.current_question_index + 1
            if next_index >= self._repository.get_question_count(game_id):
                self._finish_locked(game)
            else:
                game.current_question_index = next_index
            snapshot = replace(game)
        logger.info(
            "Game %s now at question %d (%s)",
            game_id,
            snapshot.current_question_index,
            snapshot.status.value,
        )
        self._publish(GameEventKind.GAME_UPDATED, snapshot)
        return snapshot

    def finish_game(self, game_id: str) -> LiveGame:
        with self._lock:
            game = self._repository.get_game(game_id)
            if game.status is GameStatus.FINISHED:
                raise InvalidTransitionError(f"Game {game_id} is already finished.")
            self._finish_locked(game)
            snapshot = replace(game)
        logger.info("Finished game %s", game_id)
        self._publish(GameEventKind.GAME_UPDATED, snapshot)
        return snapshot

    def replay_game(self, game_id: str) -> LiveGame:
        """Create a new waiting game (new id and PIN) with the same questions."""
        with self._lock:
            game = self._repository.copy_game(game_id)
            snapshot = replace(game)
        logger.info("Replayed game %s as %s (PIN %s)", game_id, snapshot.id, snapshot.pin)
        return snapshot

    def delete_game(self, game_id: str) -> None:
        with self._lock:
            game = self._repository.get_game(game_id)
            if game.status is GameStatus.IN_PROGRESS:
                raise InvalidTransitionError("A game in progress cannot be deleted.")
            self._repository.delete_game(game_id)
            self._players.drop_game(game_id)
        self._events.drop_game(game_id)
        logger.info("Deleted game %s", game_id)

    def list_games(self, creator_id: str | None = None) -> list[LiveGame]:
        with self._lock:
            return [replace(game) for game in self._repository.list_games(creator_id)]

    def get_question_stats(self, game_id: str, question_id: str) -> QuestionStats:
        with self._lock:
            question = self._repository.get_question(game_id, question_id)
            answers = self._players.get_answers_for_question(question_id)
        counts = [0] * len(question.options)
        for answer in answers:
            index = answer.selected_option_index
            if index is not None and 0 <= index < len(counts):
                counts[index] += 1
        correct = sum(1 for answer in answers if answer.is_correct)
        percentage = (correct / len(answers)) * 100 if answers else 0.0
        return QuestionStats(
            question_id=question_id,
            answers_received=len(answers),
            option_counts=counts,
            correct_percentage=percentage,
        )

    def get_leaderboard(self, game_id: str, limit: int | None = None) -> list[LeaderboardRow]:
        players = self.list_players(game_id)
        if limit is None:
            return rank_players(players)
        return top_players(players, limit)

    def get_current_question(self, game_id: str) -> LiveGameQuestion | None:
        with self._lock:
            game = self._repository.get_game(game_id)
            if game.status is not GameStatus.IN_PROGRESS:
                return None
            index = game.current_question_index
            questions = self._repository.get_questions(game_id)
        if 0 <= index < len(questions):
            return questions[index]
        return None

    # --- GameBackend ---

    def get_game(self, game_id: str) -> LiveGame:
        with self._lock:
            return replace(self._repository.get_game(game_id))

    def get_game_by_pin(self, pin: str) -> LiveGame:
        with self._lock:
            return replace(self._repository.find_by_pin(pin))

    def get_questions(self, game_id: str) -> list[LiveGameQuestion]:
        with self._lock:
            return self._repository.get_questions(game_id)

    def list_players(self, game_id: str) -> list[LiveGamePlayer]:
        with self._lock:
            self._repository.get_game(game_id)
            return [replace(player) for player in self._players.get_players(game_id)]

    def register_player(
        self, game_id: str, player_name: str, user_id: str | None = None
    ) -> LiveGamePlayer:
        with self._lock:
            game = self._repository.get_game(game_id)
            if game.status is GameStatus.FINISHED:
                raise GameFinishedError(f"Game {game_id} has already finished.")
            player = self._players.register_player(game_id, player_name, user_id)
            snapshot = replace(player)
            game_snapshot = replace(game)
        logger.info("Player '%s' joined game %s", snapshot.player_name, game_id)
        self._publish(GameEventKind.PLAYER_JOINED, game_snapshot, snapshot)
        return snapshot

    def submit_answer(self, submission: AnswerSubmission) -> AnswerResult:
        """Score and record an answer.

        The (player, question) pair is an idempotency key: a repeated
        submission returns the stored result flagged as duplicate and never
        scores twice.
        """
        with self._lock:
            game = self._repository.get_game(submission.game_id)
            question = self._repository.get_question(submission.game_id, submission.question_id)
            player = self._players.get_player(submission.game_id, submission.player_id)

            existing = self._players.get_recorded_answer(player.id, question.id)
            if existing is not None:
                logger.warning(
                    "Duplicate answer from player %s for question %s ignored",
                    player.id,
                    question.id,
                )
                return replace(existing, duplicate=True)

            if game.status is not GameStatus.IN_PROGRESS:
                raise GameNotActiveError(f"Game {game.id} is not accepting answers.")

            selected = submission.selected_option_index
            is_correct = selected is not None and selected == question.correct_option_index
            points = calculate_points(
                is_correct,
                question.points,
                submission.response_time_ms,
                question.time_limit_ms,
            )
            result = self._players.record_answer(
                player,
                question.id,
                selected,
                is_correct,
                points,
                max(0, min(submission.response_time_ms, question.time_limit_ms)),
            )
            player_snapshot = replace(player)
            game_snapshot = replace(game)
        logger.info(
            "Player %s answered question %s: correct=%s points=%d total=%d",
            player_snapshot.id,
            question.id,
            result.is_correct,
            result.points_earned,
            result.total_score,
        )
        self._publish(GameEventKind.PLAYER_UPDATED, game_snapshot, player_snapshot)
        return result

    def subscribe_to_game(self, game_id: str, listener: GameListener) -> GameSubscription:
        with self._lock:
            self._repository.get_game(game_id)
        return self._events.subscribe(game_id, listener)

    # --- Internal ---

    @staticmethod
    def _finish_locked(game: LiveGame) -> None:
        game.status = GameStatus.FINISHED
        game.finished_at = datetime.utcnow()

    def _publish(
        self,
        kind: GameEventKind,
        game: LiveGame,
        player: LiveGamePlayer | None = None,
    ) -> None:
        self._events.publish(GameEvent(kind=kind, game=game, player=player))
