"""Collaborator interface between player screens and the game store."""

from __future__ import annotations

from typing import Callable, Protocol

from sedetok_live.core.models import (
    AnswerResult,
    AnswerSubmission,
    GameEvent,
    LiveGame,
    LiveGamePlayer,
    LiveGameQuestion,
)

GameListener = Callable[[GameEvent], None]


class Subscription(Protocol):
    def unsubscribe(self) -> None: ...


class GameBackend(Protocol):
    """Operations the join and gameplay state machines rely on.

    `GameManager` implements this in-process; tests substitute fakes.
    """

    def get_game(self, game_id: str) -> LiveGame: ...

    def get_game_by_pin(self, pin: str) -> LiveGame: ...

    def get_questions(self, game_id: str) -> list[LiveGameQuestion]: ...

    def list_players(self, game_id: str) -> list[LiveGamePlayer]: ...

    def register_player(
        self, game_id: str, player_name: str, user_id: str | None = None
    ) -> LiveGamePlayer: ...

    def submit_answer(self, submission: AnswerSubmission) -> AnswerResult: ...

    def subscribe_to_game(self, game_id: str, listener: GameListener) -> Subscription: ...
