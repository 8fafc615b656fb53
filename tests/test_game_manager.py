import pytest

from sedetok_live.core.errors import (
    DuplicatePlayerError,
    GameFinishedError,
    GameNotActiveError,
    GameNotFoundError,
    InvalidTransitionError,
)
from sedetok_live.core.models import AnswerSubmission, GameEventKind, GameStatus, QuestionDraft
from tests.fakes import make_drafts


def _answer(game, player, question, option, response_ms=1_000):
    return AnswerSubmission(
        game_id=game.id,
        player_id=player.id,
        question_id=question.id,
        selected_option_index=option,
        response_time_ms=response_ms,
    )


def test_create_game_assigns_pin_and_ordered_questions(manager, game):
    assert game.status is GameStatus.WAITING
    assert len(game.pin) == 6 and game.pin.isdigit()
    assert manager.get_game_by_pin(game.pin).id == game.id

    questions = manager.get_questions(game.id)
    assert [q.order_index for q in questions] == [0, 1, 2]
    assert questions[0].time_limit_ms == 20_000


def test_create_game_rejects_invalid_questions(manager):
    with pytest.raises(ValueError):
        manager.create_game("Vacío", [])
    with pytest.raises(ValueError):
        manager.create_game(
            "Una opción",
            [QuestionDraft(question_text="¿?", options=["Sí"], correct_option_index=0)],
        )
    with pytest.raises(ValueError):
        manager.create_game(
            "Índice",
            [QuestionDraft(question_text="¿?", options=["Sí", "No"], correct_option_index=2)],
        )


def test_lifecycle_transitions(manager, game):
    started = manager.start_game(game.id)
    assert started.status is GameStatus.IN_PROGRESS
    assert started.started_at is not None
    assert started.current_question_index == 0

    with pytest.raises(InvalidTransitionError):
        manager.start_game(game.id)

    assert manager.next_question(game.id).current_question_index == 1
    assert manager.next_question(game.id).current_question_index == 2

    finished = manager.next_question(game.id)
    assert finished.status is GameStatus.FINISHED
    assert finished.finished_at is not None

    with pytest.raises(InvalidTransitionError):
        manager.next_question(game.id)
    with pytest.raises(InvalidTransitionError):
        manager.finish_game(game.id)


def test_next_question_requires_running_game(manager, game):
    with pytest.raises(InvalidTransitionError):
        manager.next_question(game.id)


def test_returned_games_are_snapshots(manager, game):
    snapshot = manager.get_game(game.id)
    manager.start_game(game.id)
    assert snapshot.status is GameStatus.WAITING


def test_register_player_rules(manager, game):
    ana = manager.register_player(game.id, "  Ana ")
    assert ana.player_name == "Ana"
    assert ana.total_score == 0

    with pytest.raises(DuplicatePlayerError):
        manager.register_player(game.id, "ana")
    with pytest.raises(ValueError):
        manager.register_player(game.id, "   ")

    manager.finish_game(game.id)
    with pytest.raises(GameFinishedError):
        manager.register_player(game.id, "Beto")


def test_same_name_allowed_in_different_games(manager, game):
    other = manager.create_game("Otro", make_drafts(1))
    manager.register_player(game.id, "Ana")
    manager.register_player(other.id, "Ana")


def test_unknown_game_raises(manager):
    with pytest.raises(GameNotFoundError):
        manager.get_game("missing")
    with pytest.raises(GameNotFoundError):
        manager.get_game_by_pin("000000")


def test_submit_answer_scores_once(manager, game):
    player = manager.register_player(game.id, "Ana")
    manager.start_game(game.id)
    question = manager.get_questions(game.id)[0]

    result = manager.submit_answer(_answer(game, player, question, 0, response_ms=5_000))
    assert result.is_correct
    assert result.points_earned == 875
    assert result.total_score == 875
    assert not result.duplicate

    # A retried or double-clicked submission must not score again.
    again = manager.submit_answer(_answer(game, player, question, 0, response_ms=1))
    assert again.duplicate
    assert again.points_earned == 875
    assert manager.list_players(game.id)[0].total_score == 875


def test_submit_answer_requires_running_game(manager, game):
    player = manager.register_player(game.id, "Ana")
    question = manager.get_questions(game.id)[0]
    with pytest.raises(GameNotActiveError):
        manager.submit_answer(_answer(game, player, question, 0))


def test_timeout_record_blocks_later_answer(manager, game):
    player = manager.register_player(game.id, "Ana")
    manager.start_game(game.id)
    question = manager.get_questions(game.id)[0]

    timeout = manager.submit_answer(_answer(game, player, question, None, response_ms=20_000))
    assert timeout.points_earned == 0
    assert not timeout.is_correct

    late = manager.submit_answer(_answer(game, player, question, 0, response_ms=100))
    assert late.duplicate
    assert late.points_earned == 0


def test_question_stats(manager, game):
    ana = manager.register_player(game.id, "Ana")
    beto = manager.register_player(game.id, "Beto")
    caro = manager.register_player(game.id, "Caro")
    manager.start_game(game.id)
    question = manager.get_questions(game.id)[0]

    manager.submit_answer(_answer(game, ana, question, 0))
    manager.submit_answer(_answer(game, beto, question, 1))
    manager.submit_answer(_answer(game, caro, question, None, response_ms=20_000))

    stats = manager.get_question_stats(game.id, question.id)
    assert stats.answers_received == 3
    assert stats.option_counts == [1, 1, 0, 0]
    assert round(stats.correct_percentage) == 33


def test_current_question_and_leaderboard(manager, game):
    ana = manager.register_player(game.id, "Ana")
    beto = manager.register_player(game.id, "Beto")
    assert manager.get_current_question(game.id) is None

    manager.start_game(game.id)
    question = manager.get_current_question(game.id)
    assert question.order_index == 0

    manager.submit_answer(_answer(game, ana, question, 1))
    manager.submit_answer(_answer(game, beto, question, 0, response_ms=2_000))

    rows = manager.get_leaderboard(game.id)
    assert [row.player_name for row in rows] == ["Beto", "Ana"]
    assert manager.get_leaderboard(game.id, limit=1)[0].player_id == beto.id


def test_replay_creates_fresh_waiting_game(manager, game):
    manager.start_game(game.id)
    manager.finish_game(game.id)

    replay = manager.replay_game(game.id)

    assert replay.id != game.id
    assert replay.pin != game.pin
    assert replay.status is GameStatus.WAITING
    original_questions = manager.get_questions(game.id)
    copied_questions = manager.get_questions(replay.id)
    assert [q.question_text for q in copied_questions] == [q.question_text for q in original_questions]
    assert {q.id for q in copied_questions}.isdisjoint({q.id for q in original_questions})
    assert manager.list_players(replay.id) == []


def test_delete_game(manager, game):
    manager.start_game(game.id)
    with pytest.raises(InvalidTransitionError):
        manager.delete_game(game.id)

    manager.finish_game(game.id)
    manager.delete_game(game.id)
    with pytest.raises(GameNotFoundError):
        manager.get_game(game.id)
    with pytest.raises(GameNotFoundError):
        manager.get_game_by_pin(game.pin)


def test_list_games_filters_by_creator(manager):
    mine = manager.create_game("Mío", make_drafts(1), creator_id="profe")
    manager.create_game("Ajeno", make_drafts(1), creator_id="otro")
    assert [g.id for g in manager.list_games("profe")] == [mine.id]
    assert len(manager.list_games()) == 2


def test_subscribers_receive_events_until_unsubscribed(manager, game):
    received = []
    subscription = manager.subscribe_to_game(game.id, received.append)

    manager.register_player(game.id, "Ana")
    manager.start_game(game.id)

    assert [event.kind for event in received] == [
        GameEventKind.PLAYER_JOINED,
        GameEventKind.GAME_UPDATED,
    ]
    assert received[1].game.status is GameStatus.IN_PROGRESS

    subscription.unsubscribe()
    subscription.unsubscribe()
    manager.next_question(game.id)
    assert len(received) == 2


def test_failing_listener_does_not_block_others(manager, game):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    manager.subscribe_to_game(game.id, broken)
    manager.subscribe_to_game(game.id, received.append)
    manager.start_game(game.id)
    assert len(received) == 1


def test_subscribe_to_unknown_game(manager):
    with pytest.raises(GameNotFoundError):
        manager.subscribe_to_game("missing", lambda event: None)
