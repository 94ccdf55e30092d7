"""Mapping of question identifiers to the option a student picked."""

from __future__ import annotations

from typing import Iterable, Mapping

from learn_app.core.models import Question


class AnswerLedger:
    """Holds the selected option per question.

    Option indices are stored exactly as given; range checking is left to
    whoever renders the options.
    """

    def __init__(self, answers: Mapping[str, int] | None = None) -> None:
        self._answers: dict[str, int] = dict(answers or {})

    def select(self, question_id: str, option_index: int) -> None:
        self._answers[question_id] = option_index

    def get(self, question_id: str) -> int | None:
        return self._answers.get(question_id)

    def has_answer(self, question_id: str) -> bool:
        return question_id in self._answers

    def is_selected(self, question_id: str, option_index: int) -> bool:
        return self._answers.get(question_id) == option_index

    def correct_count(self, questions: Iterable[Question]) -> int:
        """Count questions whose recorded option matches the correct one."""
        return sum(1 for q in questions if self._answers.get(q.id) == q.correct)

    def as_dict(self) -> dict[str, int]:
        return dict(self._answers)

    def clear(self) -> None:
        self._answers.clear()

    def __len__(self) -> int:
        return len(self._answers)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._answers
