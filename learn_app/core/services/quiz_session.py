"""State machine for one student's attempt at one quiz."""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from learn_app.core.models import (
    Question,
    QuestionStatus,
    QuestionView,
    Quiz,
    QuizPhase,
    SessionState,
    SessionSummary,
    SessionView,
)
from learn_app.core.services.answer_ledger import AnswerLedger
from learn_app.core.services.progress_store import ProgressStore
from learn_app.core.services.timers import (
    CancellationToken,
    Clock,
    QuestionStopwatch,
    epoch_millis,
    format_time_remaining,
)

logger = logging.getLogger(__name__)


class QuizSession:
    """Drives navigation, answering, the countdown and submission.

    Phases run ``LOADING -> EMPTY | ACTIVE -> SUBMITTED``. Only ``ACTIVE``
    accepts mutations; everything else is a silent no-op so that a late
    timer tick or a double click never corrupts a finished attempt. Each
    mutation is persisted to the progress store straight away.
    """

    def __init__(self, store: ProgressStore, clock: Clock = epoch_millis) -> None:
        self._store = store
        self._clock = clock
        self._phase = QuizPhase.LOADING
        self._quiz: Quiz | None = None
        self._state = SessionState()
        self._ledger = AnswerLedger()
        self._stopwatch = QuestionStopwatch()
        self._countdown: CancellationToken | None = None
        self._summary: SessionSummary | None = None

    # --- Lifecycle ---

    def initialize(self, quiz: Quiz, restored: Mapping[str, Any] | None = None) -> None:
        """Start a fresh attempt or resume a persisted snapshot."""
        now = self._clock()
        self._quiz = quiz
        self._summary = None
        self._stopwatch.stop()

        if restored is not None:
            state = SessionState.from_snapshot(
                restored,
                default_time_remaining=quiz.time_allowed_seconds,
                now=now,
            )
            state.current_question = min(max(state.current_question, 0), quiz.question_count - 1)
            known_ids = quiz.question_ids
            dropped = [qid for qid in state.selected_answers if qid not in known_ids]
            for question_id in dropped:
                del state.selected_answers[question_id]
            if dropped:
                logger.warning("Dropped answers for unknown questions %s in quiz %s", dropped, quiz.quiz_id)
            logger.info("Resuming quiz %s at question %d", quiz.quiz_id, state.current_question + 1)
        else:
            state = SessionState(
                current_question=0,
                time_remaining=quiz.time_allowed_seconds,
                start_time=now,
            )
            logger.info("Starting quiz %s with %d questions", quiz.quiz_id, quiz.question_count)

        self._state = state
        self._ledger = AnswerLedger(state.selected_answers)

        if state.quiz_submitted:
            self._phase = QuizPhase.SUBMITTED
            self._summary = self._build_summary(end_time=state.last_saved or now)
            return

        self._phase = QuizPhase.ACTIVE
        self._stopwatch.start(now)
        self._persist()
        if state.time_remaining <= 0:
            self.submit()

    def enter_empty_state(self) -> None:
        """No quiz to show; the session stays inert."""
        self._cancel_countdown()
        self._quiz = None
        self._state = SessionState()
        self._ledger = AnswerLedger()
        self._stopwatch.stop()
        self._summary = None
        self._phase = QuizPhase.EMPTY

    def attach_countdown(self, token: CancellationToken) -> None:
        """Register the token that stops the running countdown."""
        self._cancel_countdown()
        self._countdown = token
        if self._phase is not QuizPhase.ACTIVE:
            token.cancel()

    def reset(self) -> None:
        """Forget the attempt and its snapshot; the caller reloads afterwards."""
        self._cancel_countdown()
        if self._quiz is not None:
            self._store.clear(self._quiz.quiz_id)
            logger.info("Reset progress for quiz %s", self._quiz.quiz_id)
        self._quiz = None
        self._state = SessionState()
        self._ledger = AnswerLedger()
        self._stopwatch.stop()
        self._summary = None
        self._phase = QuizPhase.LOADING

    # --- Mutations ---

    def select_answer(self, question_id: str, option_index: int) -> None:
        if self._phase is not QuizPhase.ACTIVE or self._quiz is None:
            return
        question_id = str(question_id)
        if question_id not in self._quiz.question_ids:
            logger.warning("Ignoring answer for unknown question %s", question_id)
            return
        self._ledger.select(question_id, option_index)
        self._persist()

    def go_to_question(self, index: int) -> None:
        if self._phase is not QuizPhase.ACTIVE or self._quiz is None:
            return
        if not 0 <= index < self._quiz.question_count:
            return
        now = self._clock()
        self._record_question_time(now)
        self._state.current_question = index
        self._stopwatch.start(now)
        self._persist()

    def next_question(self) -> None:
        self.go_to_question(self._state.current_question + 1)

    def previous_question(self) -> None:
        self.go_to_question(self._state.current_question - 1)

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if self._phase is not QuizPhase.ACTIVE:
            return
        self._state.time_remaining = max(0, self._state.time_remaining - 1)
        self._persist()
        if self._state.time_remaining <= 0:
            logger.info("Time is up for quiz %s", self._quiz.quiz_id)
            self.submit()

    def submit(self) -> None:
        if self._phase is not QuizPhase.ACTIVE or self._quiz is None:
            return
        self._cancel_countdown()
        now = self._clock()
        self._record_question_time(now)
        self._stopwatch.stop()
        self._state.score = self.calculate_score()
        self._state.quiz_submitted = True
        self._phase = QuizPhase.SUBMITTED
        self._summary = self._build_summary(end_time=now)
        self._persist()
        logger.info(
            "Submitted quiz %s: score %d%% (%d/%d)",
            self._quiz.quiz_id,
            self._summary.score,
            self._summary.correct_count,
            self._summary.question_count,
        )

    # --- Queries ---

    @property
    def phase(self) -> QuizPhase:
        return self._phase

    @property
    def quiz(self) -> Quiz | None:
        return self._quiz

    @property
    def state(self) -> SessionState:
        """Copy of the current state, ledger included."""
        snapshot = self._state.copy()
        snapshot.selected_answers = self._ledger.as_dict()
        return snapshot

    @property
    def summary(self) -> SessionSummary | None:
        return self._summary

    @property
    def passed(self) -> bool | None:
        """Pass/fail against the quiz pass mark; None before submission or without one."""
        if self._summary is None:
            return None
        return self._summary.passed

    @property
    def answered_count(self) -> int:
        return len(self._ledger)

    @property
    def progress_percentage(self) -> float:
        if self._quiz is None or self._quiz.question_count == 0:
            return 0.0
        return (self._state.current_question + 1) / self._quiz.question_count * 100

    @property
    def formatted_time_remaining(self) -> str:
        return format_time_remaining(self._state.time_remaining)

    @property
    def current_question_data(self) -> Question | None:
        if self._quiz is None:
            return None
        return self._quiz.questions[self._state.current_question]

    def calculate_score(self) -> int:
        if self._quiz is None or self._quiz.question_count == 0:
            return 0
        correct = self._ledger.correct_count(self._quiz.questions)
        # half-up, so 12.5 scores 13 rather than banker's 12
        return math.floor(correct * 100 / self._quiz.question_count + 0.5)

    def is_selected(self, question_id: str, option_index: int) -> bool:
        return self._ledger.is_selected(str(question_id), option_index)

    def question_status(self, index: int) -> QuestionStatus:
        if self._quiz is None or not 0 <= index < self._quiz.question_count:
            return QuestionStatus.UNANSWERED
        if self._ledger.has_answer(self._quiz.questions[index].id):
            return QuestionStatus.ANSWERED
        if index == self._state.current_question:
            return QuestionStatus.CURRENT
        return QuestionStatus.UNANSWERED

    def view(self) -> SessionView:
        quiz = self._quiz
        if quiz is None:
            return SessionView(phase=self._phase.value)
        question = quiz.questions[self._state.current_question]
        return SessionView(
            phase=self._phase.value,
            quiz_id=quiz.quiz_id,
            quiz_name=quiz.name,
            question_count=quiz.question_count,
            current_question=self._state.current_question,
            question=QuestionView(
                index=self._state.current_question,
                id=question.id,
                text=question.text,
                options=question.options,
                difficulty=question.difficulty,
                selected_option=self._ledger.get(question.id),
            ),
            statuses=tuple(self.question_status(i).value for i in range(quiz.question_count)),
            answered_count=self.answered_count,
            progress_percentage=self.progress_percentage,
            time_allowed_minutes=quiz.time_allowed_minutes,
            time_remaining=self._state.time_remaining,
            formatted_time_remaining=self.formatted_time_remaining,
            submitted=self._state.quiz_submitted,
            summary=self._summary,
            question_times=dict(self._state.question_times),
        )

    # --- Internals ---

    def _record_question_time(self, now: int) -> None:
        elapsed = self._stopwatch.elapsed(now)
        if elapsed is not None:
            # revisits overwrite the previous figure
            self._state.question_times[self._state.current_question] = elapsed

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _build_summary(self, end_time: int) -> SessionSummary:
        assert self._quiz is not None
        count = self._quiz.question_count
        total = max(0, end_time - self._state.start_time)
        passed = None
        if self._quiz.passing_score is not None:
            passed = self._state.score >= self._quiz.passing_score
        return SessionSummary(
            score=self._state.score,
            correct_count=self._ledger.correct_count(self._quiz.questions),
            question_count=count,
            total_time_spent_ms=total,
            avg_time_per_question_ms=total / count if count else 0.0,
            passed=passed,
        )

    def _persist(self) -> None:
        if self._quiz is None:
            return
        self._state.selected_answers = self._ledger.as_dict()
        self._state.last_saved = self._clock()
        self._store.save(self._quiz.quiz_id, self._state)
