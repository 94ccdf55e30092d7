import json

import httpx
import pytest

from learn_app.core.quiz_importer import QuizImportError
from learn_app.core.services.quiz_loader import (
    FileQuizSource,
    QuizFetchError,
    QuizLoader,
    RemoteQuizSource,
)

from conftest import StaticQuizSource, make_quiz

QUIZ_DOCUMENT = {
    "quizId": "chem-01",
    "quizName": "Thermodynamics",
    "timeAllowed": 10,
    "questions": [
        {"id": 1, "text": "First?", "options": ["a", "b"], "correct": 0},
        {"id": 2, "text": "Second?", "options": ["a", "b"], "correct": 1},
    ],
}


def _remote(handler) -> RemoteQuizSource:
    return RemoteQuizSource(base_url="https://quiz.test/api", transport=httpx.MockTransport(handler))


def test_remote_source_sends_get_quiz_action():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"quiz": QUIZ_DOCUMENT})

    quiz = _remote(handler).fetch_quiz("chem-01")
    assert quiz.quiz_id == "chem-01"
    assert quiz.question_count == 2
    assert seen[0].method == "GET"
    assert seen[0].url.params["action"] == "getQuiz"
    assert seen[0].url.params["quizId"] == "chem-01"


def test_remote_source_not_found_returns_none():
    assert _remote(lambda request: httpx.Response(404)).fetch_quiz("missing") is None


def test_remote_source_without_quiz_record_returns_none():
    assert _remote(lambda request: httpx.Response(200, json={"quiz": None})).fetch_quiz("x") is None


def test_remote_source_server_error_raises():
    with pytest.raises(QuizFetchError):
        _remote(lambda request: httpx.Response(500)).fetch_quiz("chem-01")


def test_remote_source_invalid_json_raises():
    with pytest.raises(QuizFetchError):
        _remote(lambda request: httpx.Response(200, text="<html>")).fetch_quiz("chem-01")


def test_remote_source_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(QuizFetchError):
        _remote(handler).fetch_quiz("chem-01")


def test_remote_source_malformed_document_raises_import_error():
    with pytest.raises(QuizImportError):
        _remote(lambda request: httpx.Response(200, json={"quiz": {"quizId": "x"}})).fetch_quiz("x")


def test_file_source_prefers_json(tmp_path):
    (tmp_path / "chem-01.json").write_text(json.dumps(QUIZ_DOCUMENT), encoding="utf-8")
    (tmp_path / "chem-01.txt").write_text("Q: Other?\nA: a\nB: b\nCORRECT: A\n", encoding="utf-8")
    quiz = FileQuizSource(tmp_path).fetch_quiz("chem-01")
    assert quiz.name == "Thermodynamics"


def test_file_source_reads_text(tmp_path):
    (tmp_path / "kin.txt").write_text("Q: Other?\nA: a\nB: b\nCORRECT: B\n", encoding="utf-8")
    quiz = FileQuizSource(tmp_path).fetch_quiz("kin")
    assert quiz.quiz_id == "kin"
    assert quiz.questions[0].correct == 1


def test_file_source_rejects_path_like_ids(tmp_path):
    nested = tmp_path / "inner"
    nested.mkdir()
    (tmp_path / "secret.json").write_text(json.dumps(QUIZ_DOCUMENT), encoding="utf-8")
    source = FileQuizSource(nested)
    assert source.fetch_quiz("../secret") is None
    assert source.fetch_quiz("missing") is None


def test_loader_returns_quiz():
    quiz = make_quiz()
    loader = QuizLoader(StaticQuizSource(quiz))
    assert loader.load(" chem-01 ") is quiz


@pytest.mark.parametrize("quiz_id", [None, "", "   "])
def test_loader_without_id_skips_source(quiz_id):
    source = StaticQuizSource(make_quiz())
    assert QuizLoader(source).load(quiz_id) is None
    assert source.requests == []


def test_loader_unknown_id_returns_none():
    assert QuizLoader(StaticQuizSource(make_quiz())).load("nope") is None


def test_loader_swallows_fetch_failures():
    loader = QuizLoader(_remote(lambda request: httpx.Response(503)))
    assert loader.load("chem-01") is None


def test_loader_swallows_malformed_documents():
    loader = QuizLoader(_remote(lambda request: httpx.Response(200, json={"quiz": {"quizId": "x"}})))
    assert loader.load("x") is None


def test_loader_treats_non_utf8_file_as_missing(tmp_path):
    (tmp_path / "latin.txt").write_bytes("Q: Café?\nA: yes\nB: no\nCORRECT: A\n".encode("latin-1"))
    assert QuizLoader(FileQuizSource(tmp_path)).load("latin") is None
