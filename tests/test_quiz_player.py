import pytest

from learn_app.core.models import QuizPhase
from learn_app.core.quiz_player import QuizPlayer
from learn_app.core.services.progress_store import MemoryProgressStore
from learn_app.core.services.quiz_loader import QuizLoader

from conftest import StaticQuizSource, make_quiz


class RecordingCountdown:
    """Countdown that hands its tick callback back to the test."""

    def __init__(self) -> None:
        self.started = []

    def start(self, on_tick, token):
        self.started.append((on_tick, token))


@pytest.fixture()
def countdown() -> RecordingCountdown:
    return RecordingCountdown()


@pytest.fixture()
def player(store, clock, countdown) -> QuizPlayer:
    loader = QuizLoader(StaticQuizSource(make_quiz(), make_quiz(quiz_id="chem-02", question_count=2)))
    return QuizPlayer(loader, store, clock=clock, countdown=countdown)


def test_load_starts_active_session_and_countdown(player, countdown):
    view = player.load("chem-01", chapter="Chemical%20kinetics")
    assert view.phase == "active"
    assert view.quiz_id == "chem-01"
    assert view.chapter == "Chemical%20kinetics"
    assert len(countdown.started) == 1
    assert player.get_chapters("kinetics")[0].active


def test_load_unknown_quiz_shows_empty_state(player, countdown):
    view = player.load("missing")
    assert view.phase == "empty"
    assert countdown.started == []


def test_load_without_id_shows_empty_state(player):
    assert player.load(None).phase == "empty"


def test_load_resumes_saved_progress(store, clock, countdown):
    source = StaticQuizSource(make_quiz())
    first = QuizPlayer(QuizLoader(source), store, clock=clock, countdown=countdown)
    first.load("chem-01")
    first.select_answer("3", 2)
    first.go_to_question(1)

    second = QuizPlayer(QuizLoader(source), store, clock=clock, countdown=countdown)
    view = second.load("chem-01")
    assert view.current_question == 1
    assert view.answered_count == 1


def test_countdown_ticks_through_player(player, countdown):
    player.load("chem-01")
    on_tick, token = countdown.started[0]
    on_tick(token)
    assert player.get_view().time_remaining == make_quiz().time_allowed_seconds - 1


def test_tick_after_submit_is_ignored(player, countdown):
    player.load("chem-01")
    on_tick, token = countdown.started[0]
    submitted = player.submit()
    assert token.cancelled
    on_tick(token)
    assert player.get_view().time_remaining == submitted.time_remaining


def test_loading_another_quiz_cancels_previous_countdown(player, countdown):
    player.load("chem-01")
    player.load("chem-02")
    first_token = countdown.started[0][1]
    second_token = countdown.started[1][1]
    assert first_token.cancelled
    assert not second_token.cancelled


def test_submitted_restore_does_not_start_countdown(player, countdown):
    player.load("chem-01")
    player.submit()
    player.load("chem-01")
    assert player.get_phase() is QuizPhase.SUBMITTED
    assert len(countdown.started) == 1


def test_reset_reloads_fresh_session(player, store, countdown):
    player.load("chem-01", chapter="Solutions")
    player.select_answer("1", 0)
    player.next_question()
    player.submit()

    view = player.reset()
    assert view.phase == "active"
    assert view.answered_count == 0
    assert view.current_question == 0
    assert view.chapter == "Solutions"
    assert store.load("chem-01")["quizSubmitted"] is False
    assert len(countdown.started) == 2


def test_shutdown_cancels_countdown(player, countdown):
    player.load("chem-01")
    player.shutdown()
    assert countdown.started[0][1].cancelled


def test_navigation_and_summary(player):
    player.load("chem-02")
    quiz = make_quiz(quiz_id="chem-02", question_count=2)
    player.select_answer("1", quiz.questions[0].correct)
    assert player.next_question().current_question == 1
    assert player.previous_question().current_question == 0
    view = player.submit()
    assert view.submitted
    assert view.summary.score == 50
    assert view.summary.passed is True


def test_player_without_countdown(store, clock):
    player = QuizPlayer(QuizLoader(StaticQuizSource(make_quiz())), MemoryProgressStore(), clock=clock)
    assert player.load("chem-01").phase == "active"
