import json

from learn_app.core.models import SessionState
from learn_app.core.services.progress_store import JsonFileProgressStore, MemoryProgressStore


def _sample_state() -> SessionState:
    return SessionState(
        current_question=2,
        selected_answers={"1": 0, "q-7": 3},
        time_remaining=95,
        start_time=1_700_000_000_000,
        quiz_submitted=True,
        score=67,
        question_times={0: 1200, 2: 800},
        last_saved=1_700_000_090_000,
    )


def _restore(data) -> SessionState:
    return SessionState.from_snapshot(data, default_time_remaining=600, now=0)


def test_file_store_round_trip(tmp_path):
    store = JsonFileProgressStore(tmp_path / "progress")
    state = _sample_state()
    store.save("chem-01", state)
    assert _restore(store.load("chem-01")) == state


def test_memory_store_round_trip():
    store = MemoryProgressStore()
    state = _sample_state()
    store.save("chem-01", state)
    assert _restore(store.load("chem-01")) == state


def test_snapshot_uses_wire_field_names(tmp_path):
    store = JsonFileProgressStore(tmp_path)
    store.save("chem-01", _sample_state())
    raw = json.loads(store.path_for("chem-01").read_text(encoding="utf-8"))
    assert set(raw) == {
        "currentQuestion",
        "selectedAnswers",
        "timeRemaining",
        "startTime",
        "quizSubmitted",
        "score",
        "questionTimes",
        "lastSaved",
    }
    assert store.path_for("chem-01").name == "quiz_chem-01.json"


def test_clear_removes_snapshot(tmp_path):
    store = JsonFileProgressStore(tmp_path)
    store.save("chem-01", _sample_state())
    store.clear("chem-01")
    assert store.load("chem-01") is None
    store.clear("chem-01")


def test_unsafe_ids_stay_inside_directory(tmp_path):
    store = JsonFileProgressStore(tmp_path)
    path = store.path_for("../../etc/passwd")
    assert path.parent == tmp_path


def test_unreadable_snapshot_loads_as_none(tmp_path):
    store = JsonFileProgressStore(tmp_path)
    store.path_for("broken").write_text("{not json", encoding="utf-8")
    assert store.load("broken") is None


def test_write_failure_is_swallowed(tmp_path, caplog):
    blocker = tmp_path / "occupied"
    blocker.write_text("a file where the directory should be", encoding="utf-8")
    store = JsonFileProgressStore(blocker)
    store.save("chem-01", _sample_state())
    assert store.load("chem-01") is None
    assert "Failed to save progress" in caplog.text
