"""Fetches quiz definitions from the quiz store or from local files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import httpx

from learn_app.constants.network_constants import QUIZ_API_URL, QUIZ_FETCH_TIMEOUT_SECONDS
from learn_app.core.models import Quiz
from learn_app.core.quiz_importer import QuizImportError, load_quiz_from_file, parse_quiz_document

logger = logging.getLogger(__name__)


class QuizFetchError(Exception):
    """Raised when the quiz store cannot be reached or answers nonsense."""


class QuizSource(Protocol):
    def fetch_quiz(self, quiz_id: str) -> Quiz | None:
        """Return the quiz, or None when the store has no such record."""


class RemoteQuizSource:
    """Reads quizzes through the serverless ``getQuiz`` action."""

    def __init__(
        self,
        base_url: str = QUIZ_API_URL,
        timeout: float = QUIZ_FETCH_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = httpx.Timeout(timeout)
        self._transport = transport

    def fetch_quiz(self, quiz_id: str) -> Quiz | None:
        params = {"action": "getQuiz", "quizId": quiz_id}
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(self._base_url, params=params)
        except httpx.HTTPError as exc:
            raise QuizFetchError(f"Quiz store unreachable: {exc}") from exc

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise QuizFetchError(f"Quiz store answered HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise QuizFetchError("Quiz store returned invalid JSON") from exc
        if not isinstance(payload, dict) or not payload.get("quiz"):
            return None
        return parse_quiz_document(payload["quiz"])


class FileQuizSource:
    """Reads ``<quiz id>.json`` or ``<quiz id>.txt`` from a directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def fetch_quiz(self, quiz_id: str) -> Quiz | None:
        # quiz ids come from URLs; never let one walk out of the directory
        if not quiz_id or Path(quiz_id).name != quiz_id:
            return None
        for suffix in (".json", ".txt"):
            path = self._directory / f"{quiz_id}{suffix}"
            if not path.is_file():
                continue
            try:
                return load_quiz_from_file(path)
            except OSError as exc:
                raise QuizFetchError(f"Cannot read {path}: {exc}") from exc
        return None


class QuizLoader:
    """Resolves a quiz identifier to a ``Quiz`` or to the empty state (None).

    Every failure mode (no id, unknown id, unreachable store, malformed
    document) ends in the same empty state; none of them is fatal.
    """

    def __init__(self, source: QuizSource) -> None:
        self._source = source

    def load(self, quiz_id: str | None) -> Quiz | None:
        if quiz_id is None or not quiz_id.strip():
            logger.info("No quiz ID provided - showing empty state")
            return None
        quiz_id = quiz_id.strip()
        try:
            quiz = self._source.fetch_quiz(quiz_id)
        except QuizFetchError:
            logger.warning("Failed to fetch quiz %s", quiz_id, exc_info=True)
            return None
        except QuizImportError as exc:
            logger.warning("Quiz %s is malformed: %s", quiz_id, exc)
            return None
        if quiz is None:
            logger.info("Quiz %s not found - showing empty state", quiz_id)
            return None
        logger.info("Loaded quiz %s (%s, %d questions)", quiz.quiz_id, quiz.name, quiz.question_count)
        return quiz
