import pytest

from sedetok_live.constants.ui_constants import ERROR_SUBMIT_FAILED
from sedetok_live.core.errors import GameNotFoundError, LiveGameError
from sedetok_live.core.services.answer_submitter import AnswerSubmitter
from sedetok_live.core.services.gameplay import GameplaySession, PlayPhase
from tests.fakes import FlakyBackend


@pytest.fixture
def player(manager, game):
    return manager.register_player(game.id, "Ana")


def _session(backend, scheduler, game, player, **kwargs):
    session = GameplaySession(backend, scheduler, game.id, player.id, **kwargs)
    session.start()
    return session


def test_waits_until_host_starts(manager, scheduler, game, player):
    session = _session(manager, scheduler, game, player)
    assert session.phase is PlayPhase.WAITING_FOR_QUESTION
    assert session.current_question is None

    manager.start_game(game.id)
    scheduler.flush()

    assert session.phase is PlayPhase.QUESTION_ACTIVE
    assert session.question_number == 1
    assert session.seconds_left == 20


def test_only_first_selection_counts(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)

    assert session.select_option(0) is True
    assert session.select_option(1) is False
    assert session.selected_option == 0
    assert session.phase is PlayPhase.ANSWERED
    assert session.feedback.pending

    scheduler.flush()

    assert session.feedback.is_correct
    assert session.feedback.points_earned == 1000
    assert session.total_score == 1000
    question = session.current_question
    assert manager.get_question_stats(game.id, question.id).answers_received == 1


def test_select_option_rejects_unknown_option(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)
    with pytest.raises(ValueError):
        session.select_option(4)
    assert session.phase is PlayPhase.QUESTION_ACTIVE


def test_explanation_appears_after_delay(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)
    session.select_option(1)
    scheduler.flush()

    assert not session.feedback.is_correct
    assert session.feedback.explanation is None
    scheduler.advance(1_499)
    assert session.feedback.explanation is None
    scheduler.advance(1)
    assert session.feedback.explanation == "Explicación 1"


def test_countdown_expiry_counts_as_wrong_answer(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)

    scheduler.advance(19_000)
    assert session.seconds_left == 1
    assert session.phase is PlayPhase.QUESTION_ACTIVE

    scheduler.advance(1_000)
    assert session.phase is PlayPhase.ANSWERED
    assert session.feedback.timed_out
    assert session.select_option(0) is False

    question = session.current_question
    stats = manager.get_question_stats(game.id, question.id)
    assert stats.answers_received == 1
    assert session.total_score == 0
    assert session.feedback.timed_out


def test_feedback_stays_until_host_advances(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)
    session.select_option(0)
    scheduler.advance(30_000)
    assert session.phase is PlayPhase.ANSWERED
    assert session.question_number == 1

    manager.next_question(game.id)
    scheduler.flush()

    assert session.phase is PlayPhase.QUESTION_ACTIVE
    assert session.question_number == 2
    assert session.selected_option is None
    assert session.feedback is None
    assert session.seconds_left == 20


def test_stale_result_is_ignored(manager, scheduler, game, player):
    backend = FlakyBackend(manager, failures=1)
    manager.start_game(game.id)
    session = _session(backend, scheduler, game, player)

    session.select_option(0)
    scheduler.flush()
    manager.next_question(game.id)
    scheduler.flush()
    assert session.question_number == 2

    scheduler.advance(500)

    assert backend.submit_calls == 2
    assert session.feedback is None
    assert session.phase is PlayPhase.QUESTION_ACTIVE


def test_exhausted_retries_surface_an_error(manager, scheduler, game, player):
    backend = FlakyBackend(manager, failures=10)
    manager.start_game(game.id)
    session = _session(backend, scheduler, game, player, submitter=AnswerSubmitter(backend, scheduler))

    session.select_option(0)
    scheduler.advance(3_500)

    assert session.feedback.error_message == ERROR_SUBMIT_FAILED
    assert session.phase is PlayPhase.ANSWERED


def test_finish_shows_final_rank(manager, scheduler, game, player):
    beto = manager.register_player(game.id, "Beto")
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)
    rival = _session(manager, scheduler, game, beto)

    scheduler.advance(2_000)
    rival.select_option(0)
    scheduler.advance(2_000)
    session.select_option(0)
    scheduler.flush()

    manager.finish_game(game.id)
    scheduler.flush()

    assert session.phase is PlayPhase.FINISHED
    assert rival.phase is PlayPhase.FINISHED
    assert rival.rank == 1
    assert session.rank == 2
    assert session.total_score == 900
    assert rival.total_score == 950
    assert scheduler.active_count == 0


def test_close_cancels_timers_and_subscription(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)
    session.close()

    assert scheduler.active_count == 0
    manager.next_question(game.id)
    scheduler.advance(30_000)
    assert session.question_number == 1
    assert session.phase is PlayPhase.QUESTION_ACTIVE



def test_push_queued_before_close_is_ignored(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)
    session.select_option(0)
    scheduler.flush()

    manager.next_question(game.id)
    session.close()
    scheduler.advance(25_000)

    second = manager.get_questions(game.id)[1]
    assert manager.get_question_stats(game.id, second.id).answers_received == 0
    assert session.question_number == 1
    assert scheduler.active_count == 0


def test_finish_drops_pending_retries(manager, scheduler, game, player):
    backend = FlakyBackend(manager, failures=1)
    manager.start_game(game.id)
    session = _session(backend, scheduler, game, player, submitter=AnswerSubmitter(backend, scheduler))

    session.select_option(0)
    scheduler.flush()
    assert backend.submit_calls == 1

    manager.finish_game(game.id)
    scheduler.flush()
    scheduler.advance(10_000)

    assert backend.submit_calls == 1
    assert session.phase is PlayPhase.FINISHED
    assert scheduler.active_count == 0


class _VanishedGameBackend:
    """Game disappears between loading its questions and reading its row."""

    def __init__(self, backend) -> None:
        self._backend = backend

    def get_game(self, game_id: str):
        raise GameNotFoundError(f"Game {game_id} not found")

    def __getattr__(self, name: str):
        return getattr(self._backend, name)


def test_failed_start_leaves_nothing_running(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = GameplaySession(_VanishedGameBackend(manager), scheduler, game.id, player.id)

    with pytest.raises(LiveGameError):
        session.start()

    assert scheduler.active_count == 0
    manager.next_question(game.id)
    scheduler.flush()
    assert session.current_question is None

def test_full_game_scenario(manager, scheduler, game, player):
    manager.start_game(game.id)
    session = _session(manager, scheduler, game, player)

    # Question 1: correct after 5 seconds.
    scheduler.advance(5_000)
    session.select_option(0)
    scheduler.flush()
    assert session.feedback.points_earned == 875

    # Question 2: no answer before the countdown ends.
    manager.next_question(game.id)
    scheduler.flush()
    scheduler.advance(20_000)
    assert session.feedback.timed_out

    # Question 3: wrong answer after 10 seconds.
    manager.next_question(game.id)
    scheduler.flush()
    scheduler.advance(10_000)
    session.select_option(0)
    scheduler.flush()
    assert session.feedback.points_earned == 0
    assert not session.feedback.is_correct

    manager.next_question(game.id)
    scheduler.flush()

    assert session.phase is PlayPhase.FINISHED
    assert session.total_score == 875
    assert session.rank == 1
    assert manager.list_players(game.id)[0].total_score == 875
