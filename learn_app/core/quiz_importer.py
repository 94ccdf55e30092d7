"""Utilities for turning quiz documents and quiz files into ``Quiz`` objects.

Two inputs are supported:

* The JSON quiz document served by the quiz store::

      {"quizId": "chem-01", "quizName": "Thermodynamics", "timeAllowed": 10,
       "passingScore": 60,
       "questions": [{"id": 1, "text": "...", "options": ["...", "..."],
                      "correct": 0, "difficulty": "easy"}]}

* A human-friendly text file (blocks separated by blank lines or '---')::

      QUIZ: Thermodynamics basics
      ID: chem-01            (optional; defaults to the file name)
      TIMEALLOWED: 10        (minutes, optional)
      PASSINGSCORE: 60       (optional)

      Q: What is the SI unit of energy?
      A: Joule
      B: Watt
      C: Pascal
      CORRECT: A
      DIFFICULTY: easy     (optional)

  The header block is optional and must come first. Questions take between
  two and eight options (A-H) and are numbered by position.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from learn_app.constants.quiz_constants import DEFAULT_QUIZ_NAME, DEFAULT_TIME_ALLOWED_MINUTES
from learn_app.core.models import Question, Quiz


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""


_OPTION_ORDER = ["A", "B", "C", "D", "E", "F", "G", "H"]
_HEADER_KEYS = ("QUIZ:", "ID:", "TIMEALLOWED:", "PASSINGSCORE:")


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    return None


def _passing_score(value: Any) -> int:
    score = _positive_int(value)
    if score is None or score > 100:
        raise QuizImportError("Passing score must be an integer between 1 and 100.")
    return score

def parse_quiz_document(data: Mapping[str, Any]) -> Quiz:
    """Convert a quiz store document into a ``Quiz``."""
    if not isinstance(data, Mapping):
        raise QuizImportError("Quiz document must be an object.")

    quiz_id = data.get("quizId")
    if quiz_id is None or not str(quiz_id).strip():
        raise QuizImportError("Quiz document is missing quizId.")

    raw_questions = data.get("questions")
    if not isinstance(raw_questions, list) or not raw_questions:
        raise QuizImportError("Quiz document does not contain any questions.")

    questions = tuple(_parse_document_question(raw, position) for position, raw in enumerate(raw_questions, 1))
    seen: set[str] = set()
    for question in questions:
        if question.id in seen:
            raise QuizImportError(f"Duplicate question id {question.id!r}.")
        seen.add(question.id)

    name = data.get("quizName")
    passing_score = data.get("passingScore")
    return Quiz(
        quiz_id=str(quiz_id).strip(),
        questions=questions,
        name=str(name).strip() if name else DEFAULT_QUIZ_NAME,
        time_allowed_minutes=_positive_int(data.get("timeAllowed")) or DEFAULT_TIME_ALLOWED_MINUTES,
        passing_score=_passing_score(passing_score) if passing_score is not None else None,
    )


def _parse_document_question(raw: Any, position: int) -> Question:
    if not isinstance(raw, Mapping):
        raise QuizImportError(f"Question {position} must be an object.")
    question_id = raw.get("id")
    if question_id is None or isinstance(question_id, bool):
        raise QuizImportError(f"Question {position} is missing an id.")

    text = str(raw.get("text") or "").strip()
    if not text:
        raise QuizImportError(f"Question {position} has no text.")

    options = raw.get("options")
    if not isinstance(options, list) or len(options) < 2:
        raise QuizImportError(f"Question {position} needs at least two options.")

    correct = raw.get("correct")
    if isinstance(correct, bool) or not isinstance(correct, int):
        raise QuizImportError(f"Question {position} has no correct option index.")

    difficulty = raw.get("difficulty")
    return Question(
        id=str(question_id),
        text=text,
        options=tuple(str(option) for option in options),
        correct=correct,
        difficulty=str(difficulty) if difficulty else None,
    )


def load_quiz_from_file(file_path: Path) -> Quiz:
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise QuizImportError(f"{file_path.name} is not UTF-8 encoded.") from exc
    if file_path.suffix.lower() == ".json":
        try:
            document = json.loads(text)
        except ValueError as exc:
            raise QuizImportError(f"{file_path.name} is not valid JSON.") from exc
        return parse_quiz_document(document)
    return parse_quiz_text(text, default_quiz_id=file_path.stem)


def parse_quiz_text(text: str, default_quiz_id: str) -> Quiz:
    blocks = _split_blocks(text)
    header: dict[str, str] = {}
    if blocks and _is_header_block(blocks[0]):
        header = _parse_header(blocks.pop(0))

    questions = tuple(_parse_block(block, str(position)) for position, block in enumerate(blocks, 1))
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")

    time_allowed = DEFAULT_TIME_ALLOWED_MINUTES
    if "TIMEALLOWED" in header:
        time_allowed = _positive_int(header["TIMEALLOWED"])
        if time_allowed is None:
            raise QuizImportError("TIMEALLOWED must be a positive integer number of minutes.")

    passing_score = None
    if "PASSINGSCORE" in header:
        passing_score = _passing_score(header["PASSINGSCORE"])

    return Quiz(
        quiz_id=header.get("ID") or default_quiz_id,
        questions=questions,
        name=header.get("QUIZ") or DEFAULT_QUIZ_NAME,
        time_allowed_minutes=time_allowed,
        passing_score=passing_score,
    )


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _is_header_block(block: str) -> bool:
    first_line = block.splitlines()[0].strip().upper()
    return first_line.startswith(_HEADER_KEYS)


def _parse_header(block: str) -> dict[str, str]:
    header: dict[str, str] = {}
    for raw_line in block.splitlines():
        line = raw_line.strip()
        key, separator, value = line.partition(":")
        key = key.strip().upper()
        if not separator or f"{key}:" not in _HEADER_KEYS:
            raise QuizImportError(f"Unknown header line: '{line}'.")
        header[key] = value.strip()
    return header


def _parse_block(block: str, question_id: str) -> Question:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    difficulty: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = line.split(":", 1)[1].strip().upper()
            current_section = None
            continue

        if upper.startswith("DIFFICULTY:"):
            difficulty = line.split(":", 1)[1].strip() or None
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_ORDER and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in _OPTION_ORDER:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    if not question_lines:
        raise QuizImportError("Question text missing (Q: ...)")

    letters = _OPTION_ORDER[: len(options)]
    if len(options) < 2 or sorted(options) != letters:
        raise QuizImportError("Options must be consecutive letters starting at A, at least A and B.")

    option_list = [options[letter].strip() for letter in letters]
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuizImportError("CORRECT is required for every question.")
    if correct_letter not in letters:
        raise QuizImportError(f"CORRECT must be one of {', '.join(letters)}.")

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError("Question text cannot be empty.")

    return Question(
        id=question_id,
        text=question_text,
        options=tuple(option_list),
        correct=letters.index(correct_letter),
        difficulty=difficulty,
    )
