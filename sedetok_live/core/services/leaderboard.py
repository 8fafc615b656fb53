"""Ranking of players by total score."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from sedetok_live.core.models import LiveGamePlayer


@dataclass(slots=True, frozen=True)
class LeaderboardRow:
    """Immutable snapshot returned to consumers."""

    rank: int
    player_id: str
    player_name: str
    total_score: int


def ranking_key(player: LiveGamePlayer) -> tuple:
    """Sort key for the leaderboard.

    Higher score first. Ties go to the lower cumulative response time, then
    the earlier join, then the player id so the order is total.
    """
    return (
        -player.total_score,
        player.total_response_time_ms,
        player.joined_at,
        player.id,
    )


def rank_players(players: Iterable[LiveGamePlayer]) -> list[LeaderboardRow]:
    ordered = sorted(players, key=ranking_key)
    return [
        LeaderboardRow(
            rank=position,
            player_id=player.id,
            player_name=player.player_name,
            total_score=player.total_score,
        )
        for position, player in enumerate(ordered, start=1)
    ]


def top_players(players: Iterable[LiveGamePlayer], limit: int = 3) -> list[LeaderboardRow]:
    return rank_players(players)[:max(0, limit)]


def player_rank(players: Iterable[LiveGamePlayer], player_id: str) -> int | None:
    """Return the 1-based ordinal of `player_id`, or None if absent."""
    for row in rank_players(players):
        if row.player_id == player_id:
            return row.rank
    return None
