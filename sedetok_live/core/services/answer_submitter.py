"""At-least-once delivery of answer submissions."""

from __future__ import annotations

import logging
from typing import Callable

from sedetok_live.constants.game_constants import (
    SUBMIT_BASE_DELAY_MS,
    SUBMIT_MAX_ATTEMPTS,
    SUBMIT_MAX_DELAY_MS,
)
from sedetok_live.core.backend import GameBackend
from sedetok_live.core.errors import LiveGameError, TransientBackendError
from sedetok_live.core.models import AnswerResult, AnswerSubmission
from sedetok_live.core.scheduler import Scheduler, TimerGroup

logger = logging.getLogger(__name__)


class AnswerSubmitter:
    """Sends submissions off the caller's stack and retries transient failures.

    Retries are safe because the store treats (player, question) as an
    idempotency key.
    """

    def __init__(
        self,
        backend: GameBackend,
        scheduler: Scheduler,
        max_attempts: int = SUBMIT_MAX_ATTEMPTS,
        base_delay_ms: int = SUBMIT_BASE_DELAY_MS,
        max_delay_ms: int = SUBMIT_MAX_DELAY_MS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self._backend = backend
        self._scheduler = scheduler
        self._max_attempts = max_attempts
        self._base_delay_ms = base_delay_ms
        self._max_delay_ms = max_delay_ms
        self._timers = TimerGroup()

    def backoff_delay_ms(self, attempt: int) -> int:
        """Delay before retrying after failed attempt number `attempt` (1-based)."""
        return min(self._base_delay_ms * (2 ** (attempt - 1)), self._max_delay_ms)

    def submit(
        self,
        submission: AnswerSubmission,
        on_success: Callable[[AnswerResult], None],
        on_failure: Callable[[LiveGameError], None],
    ) -> None:
        name = self._timer_name(submission)
        self._timers.replace(
            name,
            self._scheduler.call_soon(lambda: self._attempt(submission, 1, on_success, on_failure)),
        )

    def has_pending(self, submission: AnswerSubmission) -> bool:
        return self._timer_name(submission) in self._timers

    def cancel_all(self) -> None:
        self._timers.cancel_all()

    def _attempt(
        self,
        submission: AnswerSubmission,
        attempt: int,
        on_success: Callable[[AnswerResult], None],
        on_failure: Callable[[LiveGameError], None],
    ) -> None:
        name = self._timer_name(submission)
        try:
            result = self._backend.submit_answer(submission)
        except TransientBackendError as exc:
            if attempt >= self._max_attempts:
                logger.error(
                    "Giving up on answer %s after %d attempts: %s",
                    submission.idempotency_key,
                    attempt,
                    exc,
                )
                self._timers.cancel(name)
                on_failure(exc)
                return
            delay = self.backoff_delay_ms(attempt)
            logger.warning(
                "Answer %s failed (attempt %d/%d), retrying in %d ms: %s",
                submission.idempotency_key,
                attempt,
                self._max_attempts,
                delay,
                exc,
            )
            self._timers.replace(
                name,
                self._scheduler.call_later(
                    delay,
                    lambda: self._attempt(submission, attempt + 1, on_success, on_failure),
                ),
            )
            return
        except LiveGameError as exc:
            logger.error("Answer %s rejected: %s", submission.idempotency_key, exc)
            self._timers.cancel(name)
            on_failure(exc)
            return

        self._timers.cancel(name)
        on_success(result)

    @staticmethod
    def _timer_name(submission: AnswerSubmission) -> str:
        return f"{submission.player_id}:{submission.question_id}"
