"""Quiz-related constants shared across core, server and UI layers."""

import os
from pathlib import Path

DEFAULT_QUIZ_NAME: str = "Quiz"
DEFAULT_TIME_ALLOWED_MINUTES: int = 30
COUNTDOWN_INTERVAL_SECONDS: float = 1.0
PROGRESS_KEY_PREFIX: str = "quiz_"

PROGRESS_DIR: Path = Path(
    os.environ.get("LEARN_APP_PROGRESS_DIR", str(Path.home() / ".learn_app" / "progress"))
)
# When set, quizzes are read from this directory instead of the remote store.
QUIZ_DIR: str | None = os.environ.get("LEARN_APP_QUIZ_DIR") or None
