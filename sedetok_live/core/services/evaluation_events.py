"""Access-code gated evaluation windows for quizzes, learning paths and games."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from threading import Lock
from uuid import uuid4

from sedetok_live.core.codes import generate_access_code, normalize_access_code
from sedetok_live.core.errors import (
    AccessCodeNotFoundError,
    AttemptLimitError,
    AuthenticationRequiredError,
    EventEndedError,
    EventNotStartedError,
)
from sedetok_live.core.models import ContentKind, EvaluationEvent

logger = logging.getLogger(__name__)

_RETURN_PATHS = {
    ContentKind.QUIZ: "/quiz-evaluation/{code}",
    ContentKind.LEARNING_PATH: "/path-evaluation/{code}",
    ContentKind.GAME: "/game-evaluation/{code}",
}


def _as_naive_utc(value: datetime) -> datetime:
    """Offset-aware datetimes are converted to naive UTC; naive ones are taken as UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class EvaluationEventRegistry:
    def __init__(self) -> None:
        self._lock = Lock()
        self._events: dict[str, EvaluationEvent] = {}
        self._codes: dict[str, str] = {}
        self._attempts: dict[str, dict[str, int]] = {}

    def create_event(
        self,
        title: str,
        content_id: str,
        content_kind: ContentKind,
        start_at: datetime,
        end_at: datetime,
        *,
        require_authentication: bool = False,
        allow_multiple_attempts: bool = False,
        show_results_immediately: bool = True,
        description: str | None = None,
        creator_id: str | None = None,
    ) -> EvaluationEvent:
        start_at = _as_naive_utc(start_at)
        end_at = _as_naive_utc(end_at)
        if not title.strip():
            raise ValueError("Event title must not be empty.")
        if end_at <= start_at:
            raise ValueError("Event end must be after its start.")

        with self._lock:
            event = EvaluationEvent(
                id=uuid4().hex,
                title=title.strip(),
                content_id=content_id,
                content_kind=content_kind,
                access_code=generate_access_code(set(self._codes)),
                start_at=start_at,
                end_at=end_at,
                require_authentication=require_authentication,
                allow_multiple_attempts=allow_multiple_attempts,
                show_results_immediately=show_results_immediately,
                description=description,
                creator_id=creator_id,
            )
            self._events[event.id] = event
            self._codes[event.access_code] = event.id
        logger.info("Created evaluation event %s with code %s", event.id, event.access_code)
        return event

    def resolve_access_code(
        self,
        code: str,
        user_id: str | None = None,
        now: datetime | None = None,
    ) -> EvaluationEvent:
        """Return the open event behind `code` or raise why it cannot be taken."""
        normalized = normalize_access_code(code)
        with self._lock:
            event_id = self._codes.get(normalized)
            event = self._events.get(event_id) if event_id else None
        if event is None:
            raise AccessCodeNotFoundError("Código de acceso inválido o evento no encontrado")

        now = _as_naive_utc(now) if now is not None else datetime.utcnow()
        if now < event.start_at:
            raise EventNotStartedError("Este evento aún no ha comenzado")
        if now > event.end_at:
            raise EventEndedError("Este evento ha finalizado")
        if event.require_authentication and not user_id:
            raise AuthenticationRequiredError(
                "Debes iniciar sesión para realizar esta evaluación",
                return_path=_RETURN_PATHS[event.content_kind].format(code=event.access_code),
            )
        return event

    def record_attempt(self, event_id: str, user_id: str) -> int:
        """Count an attempt and return how many this user has made."""
        with self._lock:
            event = self._events.get(event_id)
            if event is None:
                raise AccessCodeNotFoundError(f"Evaluation event {event_id} does not exist.")
            attempts = self._attempts.setdefault(event_id, {})
            if attempts.get(user_id, 0) and not event.allow_multiple_attempts:
                raise AttemptLimitError("Ya realizaste esta evaluación")
            attempts[user_id] = attempts.get(user_id, 0) + 1
            return attempts[user_id]
