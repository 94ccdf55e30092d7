"""Thread-safe facade shared by the API server, the countdown and the Qt shell."""

from __future__ import annotations

from dataclasses import replace
import logging
from threading import Lock

from learn_app.core.chapters import Chapter, ChapterCatalog
from learn_app.core.models import QuizPhase, SessionView
from learn_app.core.services.progress_store import ProgressStore
from learn_app.core.services.quiz_loader import QuizLoader
from learn_app.core.services.quiz_session import QuizSession
from learn_app.core.services.timers import (
    CancellationToken,
    Clock,
    CountdownTimer,
    epoch_millis,
)

logger = logging.getLogger(__name__)


class QuizPlayer:
    """Facade over loader, session, progress store and countdown."""

    def __init__(
        self,
        loader: QuizLoader,
        store: ProgressStore,
        clock: Clock = epoch_millis,
        countdown: CountdownTimer | None = None,
    ) -> None:
        self._lock = Lock()
        self._loader = loader
        self._store = store
        self._countdown = countdown
        self._session = QuizSession(store=store, clock=clock)
        self._chapters = ChapterCatalog()
        self._quiz_id: str | None = None
        self._chapter: str | None = None
        self._token: CancellationToken | None = None

    # --- Loading ---

    def load(self, quiz_id: str | None, chapter: str | None = None) -> SessionView:
        with self._lock:
            self._load_locked(quiz_id, chapter)
            return self._view_locked()

    def _load_locked(self, quiz_id: str | None, chapter: str | None) -> None:
        self._stop_countdown()
        self._quiz_id = quiz_id
        if chapter:
            self._chapter = chapter
            self._chapters.select(chapter)

        quiz = self._loader.load(quiz_id)
        if quiz is None:
            self._session.enter_empty_state()
            return

        self._session.initialize(quiz, self._store.load(quiz.quiz_id))
        if self._session.phase is QuizPhase.ACTIVE and self._countdown is not None:
            token = CancellationToken()
            self._session.attach_countdown(token)
            self._token = token
            self._countdown.start(self._handle_tick, token)

    def reset(self) -> SessionView:
        """Drop saved progress and reload the same quiz from scratch."""
        with self._lock:
            self._stop_countdown()
            self._session.reset()
            self._load_locked(self._quiz_id, self._chapter)
            return self._view_locked()

    def shutdown(self) -> None:
        with self._lock:
            self._stop_countdown()

    # --- Session delegation ---

    def select_answer(self, question_id: str, option_index: int) -> SessionView:
        with self._lock:
            self._session.select_answer(question_id, option_index)
            return self._view_locked()

    def go_to_question(self, index: int) -> SessionView:
        with self._lock:
            self._session.go_to_question(index)
            return self._view_locked()

    def next_question(self) -> SessionView:
        with self._lock:
            self._session.next_question()
            return self._view_locked()

    def previous_question(self) -> SessionView:
        with self._lock:
            self._session.previous_question()
            return self._view_locked()

    def submit(self) -> SessionView:
        with self._lock:
            self._session.submit()
            return self._view_locked()

    def get_view(self) -> SessionView:
        with self._lock:
            return self._view_locked()

    def get_phase(self) -> QuizPhase:
        with self._lock:
            return self._session.phase

    def get_chapters(self, search: str | None = None) -> list[Chapter]:
        with self._lock:
            return self._chapters.filter(search)

    # --- Internals ---

    def _handle_tick(self, token: CancellationToken) -> None:
        with self._lock:
            # a tick that lost the race against submit/reset must not act
            if token.cancelled:
                return
            self._session.tick()

    def _stop_countdown(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None

    def _view_locked(self) -> SessionView:
        return replace(self._session.view(), chapter=self._chapter)
