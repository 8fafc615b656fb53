from datetime import datetime, timedelta

from sedetok_live.core.models import LiveGamePlayer
from sedetok_live.core.services.leaderboard import player_rank, rank_players, top_players

BASE = datetime(2024, 5, 1, 9, 0, 0)


def _player(player_id, name, score, response_ms=0, joined_offset=0):
    return LiveGamePlayer(
        id=player_id,
        game_id="g1",
        player_name=name,
        total_score=score,
        total_response_time_ms=response_ms,
        joined_at=BASE + timedelta(seconds=joined_offset),
    )


def test_rank_players_orders_by_score_then_tiebreakers():
    players = [
        _player("a", "Ana", 300, joined_offset=0),
        _player("b", "Beto", 500, response_ms=9_000, joined_offset=1),
        _player("c", "Caro", 500, response_ms=4_000, joined_offset=2),
        _player("d", "Dani", 100, joined_offset=3),
    ]

    rows = rank_players(players)

    assert [row.player_name for row in rows] == ["Caro", "Beto", "Ana", "Dani"]
    assert [row.rank for row in rows] == [1, 2, 3, 4]


def test_equal_response_time_falls_back_to_join_order():
    players = [
        _player("late", "Tarde", 500, joined_offset=10),
        _player("early", "Temprano", 500, joined_offset=1),
    ]
    assert player_rank(players, "early") == 1
    assert player_rank(players, "late") == 2


def test_top_players_and_missing_rank():
    players = [_player(str(i), f"P{i}", i * 100, joined_offset=i) for i in range(5)]
    top = top_players(players, 3)
    assert [row.total_score for row in top] == [400, 300, 200]
    assert top_players(players, 0) == []
    assert player_rank(players, "nobody") is None
