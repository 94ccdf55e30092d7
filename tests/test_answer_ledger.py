from learn_app.core.models import Question
from learn_app.core.services.answer_ledger import AnswerLedger


def _question(qid: str, correct: int) -> Question:
    return Question(id=qid, text="?", options=("a", "b", "c", "d"), correct=correct)


def test_select_overwrites_previous_choice():
    ledger = AnswerLedger()
    ledger.select("1", 0)
    ledger.select("1", 2)
    assert ledger.get("1") == 2
    assert len(ledger) == 1
    assert ledger.is_selected("1", 2)
    assert not ledger.is_selected("1", 0)


def test_correct_count_treats_unanswered_as_wrong():
    ledger = AnswerLedger({"1": 0, "2": 3})
    questions = [_question("1", 0), _question("2", 1), _question("3", 2)]
    assert ledger.correct_count(questions) == 1


def test_as_dict_is_a_copy():
    ledger = AnswerLedger({"1": 0})
    exported = ledger.as_dict()
    exported["2"] = 1
    assert "2" not in ledger
    ledger.clear()
    assert len(ledger) == 0


def test_has_answer():
    ledger = AnswerLedger({"1": 0})
    assert ledger.has_answer("1")
    assert not ledger.has_answer("2")
