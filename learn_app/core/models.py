"""Domain models for the quiz player."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Any, Mapping

from learn_app.constants.quiz_constants import DEFAULT_QUIZ_NAME, DEFAULT_TIME_ALLOWED_MINUTES


class QuizPhase(Enum):
    """Lifecycle phase of a quiz session."""

    LOADING = "loading"
    EMPTY = "empty"
    ACTIVE = "active"
    SUBMITTED = "submitted"


class QuestionStatus(Enum):
    """Palette status of a single question."""

    ANSWERED = "answered"
    CURRENT = "current"
    UNANSWERED = "unanswered"


@dataclass(slots=True, frozen=True)
class Question:
    """Multiple-choice question as stored in the quiz document."""

    id: str
    text: str
    options: tuple[str, ...]
    correct: int
    difficulty: str | None = None


@dataclass(slots=True, frozen=True)
class Quiz:
    """Quiz definition; immutable for the lifetime of a session."""

    quiz_id: str
    questions: tuple[Question, ...]
    name: str = DEFAULT_QUIZ_NAME
    time_allowed_minutes: int = DEFAULT_TIME_ALLOWED_MINUTES
    passing_score: int | None = None

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def question_ids(self) -> frozenset[str]:
        return frozenset(question.id for question in self.questions)

    @property
    def time_allowed_seconds(self) -> int:
        return self.time_allowed_minutes * 60


def _is_number(value: Any) -> bool:
    # bool is an int subclass; a stray true/false must not become 1/0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # json.loads accepts NaN and Infinity
    return isinstance(value, int) or math.isfinite(value)


def _as_int(value: Any, default: int) -> int:
    if not _is_number(value):
        return default
    return int(value)


@dataclass(slots=True)
class SessionState:
    """Complete mutable record of one attempt at one quiz."""

    current_question: int = 0
    selected_answers: dict[str, int] = field(default_factory=dict)
    time_remaining: int = 0
    start_time: int = 0
    quiz_submitted: bool = False
    score: int = 0
    question_times: dict[int, int] = field(default_factory=dict)
    last_saved: int | None = None

    def copy(self) -> SessionState:
        return SessionState(
            current_question=self.current_question,
            selected_answers=dict(self.selected_answers),
            time_remaining=self.time_remaining,
            start_time=self.start_time,
            quiz_submitted=self.quiz_submitted,
            score=self.score,
            question_times=dict(self.question_times),
            last_saved=self.last_saved,
        )

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize into the persisted snapshot layout (JSON-compatible)."""
        return {
            "currentQuestion": self.current_question,
            "selectedAnswers": dict(self.selected_answers),
            "timeRemaining": self.time_remaining,
            "startTime": self.start_time,
            "quizSubmitted": self.quiz_submitted,
            "score": self.score,
            "questionTimes": {str(index): ms for index, ms in self.question_times.items()},
            "lastSaved": self.last_saved,
        }

    @classmethod
    def from_snapshot(
        cls,
        data: Mapping[str, Any],
        *,
        default_time_remaining: int,
        now: int,
    ) -> SessionState:
        """Rebuild a state from a snapshot, substituting defaults field by field.

        Snapshots carry no version marker, so anything missing or of the wrong
        type falls back to what a fresh session would have.
        """
        raw_answers = data.get("selectedAnswers")
        answers: dict[str, int] = {}
        if isinstance(raw_answers, Mapping):
            for question_id, option_index in raw_answers.items():
                if isinstance(option_index, bool) or not isinstance(option_index, int):
                    continue
                answers[str(question_id)] = option_index

        raw_times = data.get("questionTimes")
        times: dict[int, int] = {}
        if isinstance(raw_times, Mapping):
            for index, elapsed in raw_times.items():
                try:
                    key = int(index)
                except (TypeError, ValueError):
                    continue
                times[key] = _as_int(elapsed, 0)

        raw_remaining = data.get("timeRemaining")
        if not _is_number(raw_remaining):
            time_remaining = default_time_remaining
        else:
            time_remaining = max(0, int(raw_remaining))

        last_saved = data.get("lastSaved")
        return cls(
            current_question=_as_int(data.get("currentQuestion"), 0),
            selected_answers=answers,
            time_remaining=time_remaining,
            start_time=_as_int(data.get("startTime"), now) or now,
            quiz_submitted=data.get("quizSubmitted") is True,
            score=_as_int(data.get("score"), 0),
            question_times=times,
            last_saved=_as_int(last_saved, 0) if last_saved is not None else None,
        )


@dataclass(slots=True, frozen=True)
class SessionSummary:
    """Results revealed after submission."""

    score: int
    correct_count: int
    question_count: int
    total_time_spent_ms: int
    avg_time_per_question_ms: float
    passed: bool | None = None


@dataclass(slots=True, frozen=True)
class QuestionView:
    """Read-only view of the question currently on screen."""

    index: int
    id: str
    text: str
    options: tuple[str, ...]
    difficulty: str | None
    selected_option: int | None


@dataclass(slots=True, frozen=True)
class SessionView:
    """Read-only snapshot consumed by presentation layers."""

    phase: str
    quiz_id: str | None = None
    quiz_name: str | None = None
    chapter: str | None = None
    question_count: int = 0
    current_question: int = 0
    question: QuestionView | None = None
    statuses: tuple[str, ...] = ()
    answered_count: int = 0
    progress_percentage: float = 0.0
    time_allowed_minutes: int | None = None
    time_remaining: int = 0
    formatted_time_remaining: str = "0:00"
    submitted: bool = False
    summary: SessionSummary | None = None
    question_times: dict[int, int] = field(default_factory=dict)
