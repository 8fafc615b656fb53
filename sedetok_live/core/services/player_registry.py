"""Service for player registration and the answer ledger."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sedetok_live.core.errors import DuplicatePlayerError, PlayerNotFoundError
from sedetok_live.core.models import AnswerResult, LiveGamePlayer


class PlayerRegistry:
    """Tracks players per game and at most one scored answer per question."""

    def __init__(self) -> None:
        self._players: dict[str, dict[str, LiveGamePlayer]] = {}
        self._answers: dict[tuple[str, str], AnswerResult] = {}

    def register_player(
        self, game_id: str, player_name: str, user_id: str | None = None
    ) -> LiveGamePlayer:
        cleaned = player_name.strip()
        if not cleaned:
            raise ValueError("Player name must not be empty.")

        roster = self._players.setdefault(game_id, {})
        if any(p.player_name.casefold() == cleaned.casefold() for p in roster.values()):
            raise DuplicatePlayerError(f"Player name '{cleaned}' is already taken in this game.")

        player = LiveGamePlayer(
            id=uuid4().hex,
            game_id=game_id,
            player_name=cleaned,
            joined_at=datetime.utcnow(),
            user_id=user_id,
        )
        roster[player.id] = player
        return player

    def get_player(self, game_id: str, player_id: str) -> LiveGamePlayer:
        player = self._players.get(game_id, {}).get(player_id)
        if player is None:
            raise PlayerNotFoundError(f"Player {player_id} is not part of game {game_id}.")
        return player

    def get_players(self, game_id: str) -> list[LiveGamePlayer]:
        """Return players in join order."""
        return sorted(self._players.get(game_id, {}).values(), key=lambda p: p.joined_at)

    def get_recorded_answer(self, player_id: str, question_id: str) -> AnswerResult | None:
        return self._answers.get((player_id, question_id))

    def record_answer(
        self,
        player: LiveGamePlayer,
        question_id: str,
        selected_option_index: int | None,
        is_correct: bool,
        points_earned: int,
        response_time_ms: int,
    ) -> AnswerResult:
        """Store a first answer and credit the player. Scores never decrease."""
        key = (player.id, question_id)
        if key in self._answers:
            raise RuntimeError("Answer already recorded for this player and question.")

        player.total_score += max(0, points_earned)
        player.total_response_time_ms += max(0, response_time_ms)
        result = AnswerResult(
            player_id=player.id,
            question_id=question_id,
            selected_option_index=selected_option_index,
            is_correct=is_correct,
            points_earned=max(0, points_earned),
            response_time_ms=response_time_ms,
            total_score=player.total_score,
            answered_at=datetime.utcnow(),
        )
        self._answers[key] = result
        return result

    def get_answers_for_question(self, question_id: str) -> list[AnswerResult]:
        return [answer for (_, qid), answer in self._answers.items() if qid == question_id]

    def drop_game(self, game_id: str) -> None:
        roster = self._players.pop(game_id, {})
        for key in [key for key in self._answers if key[0] in roster]:
            del self._answers[key]
