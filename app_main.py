"""Application entry point for the LearnQt quiz player."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication

from learn_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, QUIZ_API_URL
from learn_app.constants.quiz_constants import PROGRESS_DIR, QUIZ_DIR
from learn_app.core.quiz_player import QuizPlayer
from learn_app.core.services.progress_store import JsonFileProgressStore
from learn_app.core.services.quiz_loader import (
    FileQuizSource,
    QuizLoader,
    QuizSource,
    RemoteQuizSource,
)
from learn_app.core.services.timers import CountdownTimer
from learn_app.server.api_server import start_api_server
from learn_app.ui.player_main_window import PlayerMainWindow
from learn_app.utils.logging_config import configure_logging


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Take a rural-learn quiz.")
    parser.add_argument("--quiz", "-q", help="quiz identifier")
    parser.add_argument("--chapter", "-c", help="chapter name shown in the sidebar")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--quiz-dir", type=Path, default=QUIZ_DIR, help="read quizzes from this directory")
    parser.add_argument("--progress-dir", type=Path, default=PROGRESS_DIR)
    return parser.parse_args(argv)


def build_quiz_player(quiz_dir: Path | None, progress_dir: Path) -> QuizPlayer:
    source: QuizSource
    if quiz_dir is not None:
        source = FileQuizSource(Path(quiz_dir))
    else:
        source = RemoteQuizSource(QUIZ_API_URL)
    return QuizPlayer(
        loader=QuizLoader(source),
        store=JsonFileProgressStore(progress_dir),
        countdown=CountdownTimer(),
    )


def main() -> None:
    """Initialize logging, start the API server, and launch the Qt UI."""
    args = _parse_args(sys.argv[1:])
    logger = configure_logging()
    logger.info("Starting LearnQt quiz player…")

    quiz_player = build_quiz_player(args.quiz_dir, args.progress_dir)
    quiz_player.load(args.quiz, chapter=args.chapter)
    start_api_server(quiz_player=quiz_player, host=args.host, port=args.port)
    server_url = f"http://{args.host}:{args.port}/"
    logger.info("Player page available at %s", server_url)

    app = QApplication(sys.argv[:1])
    window = PlayerMainWindow(
        quiz_player=quiz_player,
        server_url=server_url,
        quiz_id=args.quiz,
        chapter=args.chapter,
    )
    window.resize(1200, 800)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
