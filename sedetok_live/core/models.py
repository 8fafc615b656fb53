"""Domain models for live games and evaluation events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from sedetok_live.constants.game_constants import DEFAULT_POINTS, DEFAULT_TIME_LIMIT_SECONDS


class GameStatus(str, Enum):
    """Lifecycle phase of a live game. Transitions only move forward."""

    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(slots=True, frozen=True)
class QuestionOption:
    """One selectable answer of a question."""

    text: str
    image_url: str | None = None


@dataclass(slots=True, frozen=True)
class LiveGameQuestion:
    """Multiple-choice question belonging to a game. Immutable once created."""

    id: str
    game_id: str
    order_index: int
    question_text: str
    options: tuple[QuestionOption, ...]
    correct_option_index: int
    points: int = DEFAULT_POINTS
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS
    image_url: str | None = None
    video_url: str | None = None
    feedback: str | None = None

    @property
    def time_limit_ms(self) -> int:
        return self.time_limit_seconds * 1000


@dataclass(slots=True)
class QuestionDraft:
    """Question data supplied by the host before the game assigns ids."""

    question_text: str
    options: list[str]
    correct_option_index: int
    points: int = DEFAULT_POINTS
    time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS
    image_url: str | None = None
    video_url: str | None = None
    feedback: str | None = None
    option_image_urls: list[str | None] = field(default_factory=list)


@dataclass(slots=True)
class LiveGame:
    """A live game row. `pin` never changes after creation."""

    id: str
    title: str
    pin: str
    status: GameStatus = GameStatus.WAITING
    current_question_index: int = 0
    created_at: datetime = field(default_factory=datetime.utcnow)
    started_at: datetime | None = None
    finished_at: datetime | None = None
    creator_id: str | None = None


@dataclass(slots=True)
class LiveGamePlayer:
    """A player registered in one game."""

    id: str
    game_id: str
    player_name: str
    total_score: int = 0
    total_response_time_ms: int = 0
    joined_at: datetime = field(default_factory=datetime.utcnow)
    user_id: str | None = None


@dataclass(slots=True, frozen=True)
class AnswerSubmission:
    """A player's answer as sent to the scoring path.

    `selected_option_index` is None when the countdown ran out.
    """

    game_id: str
    player_id: str
    question_id: str
    selected_option_index: int | None
    response_time_ms: int

    @property
    def idempotency_key(self) -> tuple[str, str]:
        return (self.player_id, self.question_id)


@dataclass(slots=True, frozen=True)
class AnswerResult:
    """Scored outcome of a submission."""

    player_id: str
    question_id: str
    selected_option_index: int | None
    is_correct: bool
    points_earned: int
    response_time_ms: int
    total_score: int
    answered_at: datetime
    duplicate: bool = False


class GameEventKind(str, Enum):
    GAME_UPDATED = "game_updated"
    PLAYER_JOINED = "player_joined"
    PLAYER_UPDATED = "player_updated"


@dataclass(slots=True, frozen=True)
class GameEvent:
    """Row-change notification pushed to game subscribers."""

    kind: GameEventKind
    game: LiveGame
    player: LiveGamePlayer | None = None


@dataclass(slots=True, frozen=True)
class QuestionStats:
    """Aggregated answers for one question, shown on the host console."""

    question_id: str
    answers_received: int
    option_counts: list[int]
    correct_percentage: float


class ContentKind(str, Enum):
    QUIZ = "quiz"
    LEARNING_PATH = "learning_path"
    GAME = "game"


@dataclass(slots=True)
class EvaluationEvent:
    """A scheduled evaluation window gated by an access code."""

    id: str
    title: str
    content_id: str
    content_kind: ContentKind
    access_code: str
    start_at: datetime
    end_at: datetime
    require_authentication: bool = False
    allow_multiple_attempts: bool = False
    show_results_immediately: bool = True
    description: str | None = None
    creator_id: str | None = None
