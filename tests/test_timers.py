import threading

from learn_app.core.services.timers import (
    CancellationToken,
    CountdownTimer,
    QuestionStopwatch,
    format_time_remaining,
)


def test_format_time_remaining():
    assert format_time_remaining(125) == "2:05"
    assert format_time_remaining(59) == "0:59"
    assert format_time_remaining(600) == "10:00"
    assert format_time_remaining(0) == "0:00"
    assert format_time_remaining(-3) == "0:00"


def test_stopwatch_reports_elapsed_only_when_started():
    watch = QuestionStopwatch()
    assert watch.elapsed(5_000) is None
    watch.start(1_000)
    assert watch.elapsed(4_500) == 3_500
    watch.stop()
    assert not watch.running


def test_countdown_stops_when_token_cancelled():
    ticks = []
    three_ticks = threading.Event()
    token = CancellationToken()

    def on_tick(tick_token):
        ticks.append(tick_token)
        if len(ticks) == 3:
            tick_token.cancel()
            three_ticks.set()

    thread = CountdownTimer(interval_seconds=0.01).start(on_tick, token)
    assert three_ticks.wait(timeout=5)
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert len(ticks) == 3
    assert all(t is token for t in ticks)


def test_failing_tick_cancels_countdown():
    token = CancellationToken()

    def on_tick(_token):
        raise RuntimeError("boom")

    thread = CountdownTimer(interval_seconds=0.01).start(on_tick, token)
    thread.join(timeout=5)
    assert token.cancelled
