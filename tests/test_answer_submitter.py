import pytest

from sedetok_live.core.errors import GameNotActiveError, TransientBackendError
from sedetok_live.core.models import AnswerSubmission
from sedetok_live.core.services.answer_submitter import AnswerSubmitter
from tests.fakes import FlakyBackend


@pytest.fixture
def running(manager, game):
    player = manager.register_player(game.id, "Ana")
    manager.start_game(game.id)
    question = manager.get_questions(game.id)[0]
    submission = AnswerSubmission(
        game_id=game.id,
        player_id=player.id,
        question_id=question.id,
        selected_option_index=0,
        response_time_ms=2_000,
    )
    return submission


def test_backoff_doubles_and_caps(manager, scheduler):
    submitter = AnswerSubmitter(manager, scheduler)
    assert [submitter.backoff_delay_ms(n) for n in range(1, 6)] == [500, 1000, 2000, 4000, 4000]


def test_submission_runs_off_the_caller_stack(manager, scheduler, running):
    results = []
    submitter = AnswerSubmitter(manager, scheduler)

    submitter.submit(running, results.append, pytest.fail)
    assert results == []
    assert submitter.has_pending(running)

    scheduler.flush()
    assert len(results) == 1
    assert results[0].points_earned == 950
    assert not submitter.has_pending(running)


def test_transient_failures_are_retried_with_backoff(manager, scheduler, running):
    backend = FlakyBackend(manager, failures=2)
    results = []
    submitter = AnswerSubmitter(backend, scheduler)

    submitter.submit(running, results.append, pytest.fail)
    scheduler.flush()
    assert backend.submit_calls == 1

    scheduler.advance(499)
    assert backend.submit_calls == 1
    scheduler.advance(1)
    assert backend.submit_calls == 2

    scheduler.advance(1_000)
    assert backend.submit_calls == 3
    assert len(results) == 1
    assert manager.list_players(running.game_id)[0].total_score == results[0].total_score


def test_gives_up_after_max_attempts(manager, scheduler, running):
    backend = FlakyBackend(manager, failures=10)
    failures = []
    submitter = AnswerSubmitter(backend, scheduler)

    submitter.submit(running, pytest.fail, failures.append)
    scheduler.advance(10_000)

    assert backend.submit_calls == 4
    assert len(failures) == 1
    assert isinstance(failures[0], TransientBackendError)
    assert manager.list_players(running.game_id)[0].total_score == 0


def test_permanent_errors_fail_immediately(manager, scheduler, running):
    manager.finish_game(running.game_id)
    failures = []
    submitter = AnswerSubmitter(manager, scheduler)

    submitter.submit(running, pytest.fail, failures.append)
    scheduler.advance(10_000)

    assert len(failures) == 1
    assert isinstance(failures[0], GameNotActiveError)


def test_cancel_all_drops_pending_retries(manager, scheduler, running):
    backend = FlakyBackend(manager, failures=1)
    submitter = AnswerSubmitter(backend, scheduler)

    submitter.submit(running, pytest.fail, pytest.fail)
    scheduler.flush()
    submitter.cancel_all()
    scheduler.advance(10_000)

    assert backend.submit_calls == 1


def test_max_attempts_must_be_positive(manager, scheduler):
    with pytest.raises(ValueError):
        AnswerSubmitter(manager, scheduler, max_attempts=0)
