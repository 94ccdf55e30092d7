from __future__ import annotations

import pytest

from learn_app.core.models import Question, Quiz
from learn_app.core.services.progress_store import MemoryProgressStore
from learn_app.core.services.quiz_session import QuizSession


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class StaticQuizSource:
    def __init__(self, *quizzes: Quiz) -> None:
        self.quizzes = {quiz.quiz_id: quiz for quiz in quizzes}
        self.requests: list[str] = []

    def fetch_quiz(self, quiz_id: str) -> Quiz | None:
        self.requests.append(quiz_id)
        return self.quizzes.get(quiz_id)


def make_quiz(quiz_id: str = "chem-01", question_count: int = 3, time_allowed: int = 2, passing_score: int | None = 50) -> Quiz:
    questions = tuple(
        Question(
            id=str(i + 1),
            text=f"Question {i + 1}?",
            options=("first", "second", "third", "fourth"),
            correct=i % 4,
            difficulty="easy",
        )
        for i in range(question_count)
    )
    return Quiz(
        quiz_id=quiz_id,
        questions=questions,
        name="Thermodynamics",
        time_allowed_minutes=time_allowed,
        passing_score=passing_score,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store() -> MemoryProgressStore:
    return MemoryProgressStore()


@pytest.fixture()
def quiz() -> Quiz:
    return make_quiz()


@pytest.fixture()
def session(store, clock, quiz) -> QuizSession:
    s = QuizSession(store=store, clock=clock)
    s.initialize(quiz)
    return s
