"""State machine behind the play screen.

The host paces the game: the session only reacts to changes of the game row
(status and `current_question_index`), runs a local countdown per question and
accepts exactly one answer per question.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
import logging
from threading import Lock
from typing import Callable

from sedetok_live.constants.game_constants import (
    COUNTDOWN_TICK_MS,
    FEEDBACK_DELAY_MS,
    GAME_POLL_INTERVAL_MS,
)
from sedetok_live.constants.ui_constants import ERROR_SUBMIT_FAILED
from sedetok_live.core.backend import GameBackend, Subscription
from sedetok_live.core.errors import LiveGameError
from sedetok_live.core.models import (
    AnswerResult,
    AnswerSubmission,
    GameEvent,
    GameEventKind,
    GameStatus,
    LiveGame,
    LiveGamePlayer,
    LiveGameQuestion,
)
from sedetok_live.core.scheduler import Scheduler, TimerGroup
from sedetok_live.core.services.answer_submitter import AnswerSubmitter
from sedetok_live.core.services.leaderboard import player_rank

logger = logging.getLogger(__name__)


class PlayPhase(Enum):
    WAITING_FOR_QUESTION = auto()
    QUESTION_ACTIVE = auto()
    ANSWERED = auto()
    FINISHED = auto()


@dataclass(slots=True)
class AnswerFeedback:
    """What the play screen shows after the player answered or ran out of time."""

    question_id: str
    is_correct: bool = False
    points_earned: int = 0
    timed_out: bool = False
    pending: bool = False
    error_message: str | None = None
    explanation: str | None = None


class GameplaySession:
    def __init__(
        self,
        backend: GameBackend,
        scheduler: Scheduler,
        game_id: str,
        player_id: str,
        submitter: AnswerSubmitter | None = None,
        on_change: Callable[[GameplaySession], None] | None = None,
        poll_interval_ms: int = GAME_POLL_INTERVAL_MS,
        feedback_delay_ms: int = FEEDBACK_DELAY_MS,
    ) -> None:
        self._backend = backend
        self._scheduler = scheduler
        self._submitter = submitter or AnswerSubmitter(backend, scheduler)
        self._on_change = on_change
        self._poll_interval_ms = poll_interval_ms
        self._feedback_delay_ms = feedback_delay_ms
        self._timers = TimerGroup()
        self._subscription: Subscription | None = None
        self._phase_lock = Lock()
        self._started_at_ms: int = 0
        self._closed = False

        self.game_id = game_id
        self.player_id = player_id
        self.phase = PlayPhase.WAITING_FOR_QUESTION
        self.game: LiveGame | None = None
        self.questions: list[LiveGameQuestion] = []
        self.players: list[LiveGamePlayer] = []
        self.current_question: LiveGameQuestion | None = None
        self.selected_option: int | None = None
        self.seconds_left: int = 0
        self.feedback: AnswerFeedback | None = None

    # --- Lifecycle ---

    def start(self) -> None:
        """Load the game and begin following it. Nothing is left running if loading fails."""
        self._closed = False
        try:
            self.questions = sorted(self._backend.get_questions(self.game_id), key=lambda q: q.order_index)
            self.players = self._backend.list_players(self.game_id)
            self._subscription = self._backend.subscribe_to_game(self.game_id, self._on_game_event)
            self._timers.replace("poll", self._scheduler.call_every(self._poll_interval_ms, self._poll))
            self._apply_game(self._backend.get_game(self.game_id))
        except LiveGameError:
            self.close()
            raise

    def close(self) -> None:
        # Callbacks already queued on the scheduler check this flag.
        self._closed = True
        self._timers.cancel_all()
        self._submitter.cancel_all()
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    # --- Player input ---

    def select_option(self, option_index: int) -> bool:
        """Answer the current question. Only the first call per question counts."""
        question = self.current_question
        if question is None:
            return False
        if not 0 <= option_index < len(question.options):
            raise ValueError(f"Option index {option_index} out of range")
        if not self._claim_answer(question.id):
            return False

        elapsed = max(0, self._scheduler.now_ms() - self._started_at_ms)
        self._timers.cancel("countdown")
        self.selected_option = option_index
        self.feedback = AnswerFeedback(question_id=question.id, pending=True)
        self._notify()
        self._submit(question, option_index, elapsed)
        return True

    # --- Derived state ---

    @property
    def my_player(self) -> LiveGamePlayer | None:
        return next((p for p in self.players if p.id == self.player_id), None)

    @property
    def total_score(self) -> int:
        player = self.my_player
        return player.total_score if player else 0

    @property
    def rank(self) -> int | None:
        return player_rank(self.players, self.player_id)

    @property
    def question_number(self) -> int:
        if self.current_question is None:
            return 0
        return self.current_question.order_index + 1

    # --- Game row handling ---

    def _on_game_event(self, event: GameEvent) -> None:
        # Push notifications may arrive on a foreign thread.
        if self._closed:
            return
        if event.kind is GameEventKind.GAME_UPDATED:
            self._scheduler.call_soon(lambda: self._apply_game(event.game))
        else:
            self._scheduler.call_soon(self._refresh_players)

    def _poll(self) -> None:
        if self._closed:
            return
        try:
            game = self._backend.get_game(self.game_id)
        except LiveGameError as exc:
            logger.warning("Game poll for %s failed: %s", self.game_id, exc)
            return
        self._apply_game(game)
        self._refresh_players()

    def _refresh_players(self) -> None:
        if self._closed:
            return
        try:
            self.players = self._backend.list_players(self.game_id)
        except LiveGameError as exc:
            logger.warning("Player refresh for %s failed: %s", self.game_id, exc)
            return
        self._notify()

    def _apply_game(self, game: LiveGame) -> None:
        if self._closed or self.phase is PlayPhase.FINISHED:
            return
        self.game = game

        if game.status is GameStatus.FINISHED:
            self._finish()
            return
        if game.status is GameStatus.WAITING:
            self._notify()
            return

        index = game.current_question_index
        if not 0 <= index < len(self.questions):
            self._notify()
            return
        question = self.questions[index]
        if self.current_question is None or question.id != self.current_question.id:
            self._begin_question(question)

    def _begin_question(self, question: LiveGameQuestion) -> None:
        if self._closed:
            return
        self._timers.cancel("countdown")
        self._timers.cancel("explanation")
        with self._phase_lock:
            self.current_question = question
            self.phase = PlayPhase.QUESTION_ACTIVE
        self.selected_option = None
        self.feedback = None
        self.seconds_left = question.time_limit_seconds
        self._started_at_ms = self._scheduler.now_ms()
        self._timers.replace(
            "countdown",
            self._scheduler.call_every(COUNTDOWN_TICK_MS, lambda: self._tick(question.id)),
        )
        logger.debug("Question %d active for player %s", question.order_index + 1, self.player_id)
        self._notify()

    def _tick(self, question_id: str) -> None:
        question = self.current_question
        if question is None or question.id != question_id or self.phase is not PlayPhase.QUESTION_ACTIVE:
            return
        self.seconds_left = max(0, self.seconds_left - 1)
        if self.seconds_left == 0:
            self._time_out(question)
        else:
            self._notify()

    def _time_out(self, question: LiveGameQuestion) -> None:
        if not self._claim_answer(question.id):
            return
        self._timers.cancel("countdown")
        self.feedback = AnswerFeedback(question_id=question.id, timed_out=True)
        self._schedule_explanation(question)
        self._notify()
        # Recorded so the store also refuses a late answer for this question.
        self._submit(question, None, question.time_limit_ms)

    def _finish(self) -> None:
        self._timers.cancel_all()
        self._submitter.cancel_all()
        with self._phase_lock:
            self.phase = PlayPhase.FINISHED
        try:
            self.players = self._backend.list_players(self.game_id)
        except LiveGameError as exc:
            logger.warning("Final standings for %s unavailable: %s", self.game_id, exc)
        logger.info("Game %s finished for player %s (rank %s)", self.game_id, self.player_id, self.rank)
        self._notify()

    # --- Answer path ---

    def _claim_answer(self, question_id: str) -> bool:
        """Atomically move QUESTION_ACTIVE -> ANSWERED for `question_id`."""
        with self._phase_lock:
            if (
                self.phase is not PlayPhase.QUESTION_ACTIVE
                or self.current_question is None
                or self.current_question.id != question_id
            ):
                return False
            self.phase = PlayPhase.ANSWERED
            return True

    def _submit(self, question: LiveGameQuestion, option_index: int | None, elapsed_ms: int) -> None:
        submission = AnswerSubmission(
            game_id=self.game_id,
            player_id=self.player_id,
            question_id=question.id,
            selected_option_index=option_index,
            response_time_ms=elapsed_ms,
        )
        self._submitter.submit(
            submission,
            on_success=self._on_submitted,
            on_failure=lambda exc: self._on_submit_failed(submission, exc),
        )

    def _on_submitted(self, result: AnswerResult) -> None:
        if self._closed or self.phase is PlayPhase.FINISHED:
            return
        question = self.current_question
        if question is None or question.id != result.question_id:
            return
        player = self.my_player
        if player is not None and result.total_score > player.total_score:
            self.players = [
                replace(p, total_score=result.total_score) if p.id == player.id else p
                for p in self.players
            ]
        if self.feedback is not None and self.feedback.timed_out:
            self._notify()
            return
        self.feedback = AnswerFeedback(
            question_id=result.question_id,
            is_correct=result.is_correct,
            points_earned=result.points_earned,
        )
        self._schedule_explanation(question)
        self._notify()

    def _on_submit_failed(self, submission: AnswerSubmission, exc: LiveGameError) -> None:
        if self._closed or self.phase is PlayPhase.FINISHED:
            return
        question = self.current_question
        if question is None or question.id != submission.question_id:
            return
        if submission.selected_option_index is None:
            return
        logger.error("Answer for question %s was not recorded: %s", submission.question_id, exc)
        self.feedback = AnswerFeedback(
            question_id=submission.question_id,
            error_message=ERROR_SUBMIT_FAILED,
        )
        self._notify()

    def _schedule_explanation(self, question: LiveGameQuestion) -> None:
        if not question.feedback:
            return

        def show() -> None:
            if self.feedback is not None and self.feedback.question_id == question.id:
                self.feedback.explanation = question.feedback
                self._notify()

        self._timers.replace("explanation", self._scheduler.call_later(self._feedback_delay_ms, show))

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)
