"""Clock, countdown and stopwatch primitives used by the quiz session."""

from __future__ import annotations

import logging
from threading import Event, Thread
import time
from typing import Callable

from learn_app.constants.quiz_constants import COUNTDOWN_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def epoch_millis() -> int:
    """Wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def format_time_remaining(seconds: int) -> str:
    """Format seconds as ``M:SS`` (minutes unpadded)."""
    seconds = max(0, int(seconds))
    minutes, rest = divmod(seconds, 60)
    return f"{minutes}:{rest:02d}"


class CancellationToken:
    """One-way stop signal shared between a countdown and its owner."""

    def __init__(self) -> None:
        self._event = Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Block up to ``timeout`` seconds; True once cancelled."""
        return self._event.wait(timeout)


class CountdownTimer:
    """Calls a tick callback at a fixed interval until its token is cancelled."""

    def __init__(self, interval_seconds: float = COUNTDOWN_INTERVAL_SECONDS) -> None:
        self._interval = interval_seconds

    def start(
        self,
        on_tick: Callable[[CancellationToken], None],
        token: CancellationToken,
    ) -> Thread:
        """Start ticking in a daemon thread and return the thread."""

        def run() -> None:
            while not token.wait(self._interval):
                try:
                    on_tick(token)
                except Exception:
                    # stop ticking after a failed tick
                    logger.exception("Countdown tick failed; stopping countdown")
                    token.cancel()

        thread = Thread(target=run, name="QuizCountdown", daemon=True)
        thread.start()
        return thread


class QuestionStopwatch:
    """Wall-clock start mark for the question on screen."""

    def __init__(self) -> None:
        self._started_at: int | None = None

    def start(self, now: int) -> None:
        self._started_at = now

    def stop(self) -> None:
        self._started_at = None

    def elapsed(self, now: int) -> int | None:
        if self._started_at is None:
            return None
        return now - self._started_at

    @property
    def running(self) -> bool:
        return self._started_at is not None
