"""Qt main window hosting the quiz player page."""

from __future__ import annotations

from urllib.parse import urlencode

from PySide6.QtCore import QTimer, QUrl
from PySide6.QtGui import QCloseEvent
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from learn_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION
from learn_app.constants.ui_constants import (
    ABOUT_BUTTON,
    EMPTY_STATE_MESSAGE,
    HEADER_REFRESH_INTERVAL_MS,
    LOADING_MESSAGE,
    LOW_TIME_WARNING_SECONDS,
    RESET_BUTTON,
    SUBMITTED_TEMPLATE,
    TIME_REMAINING_TEMPLATE,
    WINDOW_TITLE,
)
from learn_app.core.models import QuizPhase
from learn_app.core.quiz_player import QuizPlayer
from learn_app.styling.styles import Styles
from learn_app.ui.dialog_helpers import confirm_reset_quiz, show_info


def build_player_url(server_url: str, quiz_id: str | None, chapter: str | None) -> str:
    """Player page URL carrying the ``q`` and ``ch`` parameters."""
    params = {key: value for key, value in (("q", quiz_id), ("ch", chapter)) if value}
    if not params:
        return server_url
    return f"{server_url}?{urlencode(params)}"


class PlayerMainWindow(QMainWindow):
    """Header with quiz name and countdown above the embedded player page."""

    def __init__(
        self,
        quiz_player: QuizPlayer,
        server_url: str,
        quiz_id: str | None = None,
        chapter: str | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(WINDOW_TITLE)
        self.quiz_player = quiz_player
        self.player_url = build_player_url(server_url, quiz_id, chapter)

        self._build_ui()
        self._configure_refresh_timer()
        self.setStyleSheet(Styles.get_main_window_style())
        self._refresh_header()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)

        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        header_row = QHBoxLayout()
        self.quiz_label = QLabel(LOADING_MESSAGE, self)
        self.quiz_label.setStyleSheet(Styles.get_header_label_style())
        header_row.addWidget(self.quiz_label)
        header_row.addStretch()

        self.time_label = QLabel("", self)
        self.time_label.setStyleSheet(Styles.get_timer_label_style(low_time=False))
        header_row.addWidget(self.time_label)

        self.reset_button = QPushButton(RESET_BUTTON, self)
        self.reset_button.setObjectName("resetButton")
        self.reset_button.clicked.connect(self._handle_reset)
        header_row.addWidget(self.reset_button)

        self.about_button = QPushButton(ABOUT_BUTTON, self)
        self.about_button.clicked.connect(self._handle_about)
        header_row.addWidget(self.about_button)

        root_layout.addLayout(header_row)

        self.player_view = QWebEngineView(self)
        self.player_view.setUrl(QUrl(self.player_url))
        root_layout.addWidget(self.player_view, stretch=1)

    def _configure_refresh_timer(self) -> None:
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(HEADER_REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self._refresh_header)
        self.refresh_timer.start()

    def _refresh_header(self) -> None:
        view = self.quiz_player.get_view()
        phase = QuizPhase(view.phase)
        self.reset_button.setEnabled(phase in (QuizPhase.ACTIVE, QuizPhase.SUBMITTED))

        if phase is QuizPhase.EMPTY:
            self.quiz_label.setText(EMPTY_STATE_MESSAGE)
            self.time_label.setText("")
            return
        if phase is QuizPhase.LOADING:
            self.quiz_label.setText(LOADING_MESSAGE)
            self.time_label.setText("")
            return

        self.quiz_label.setText(view.quiz_name or "")
        if phase is QuizPhase.SUBMITTED and view.summary is not None:
            self.time_label.setText(SUBMITTED_TEMPLATE.format(score=view.summary.score))
            self.time_label.setStyleSheet(Styles.get_timer_label_style(low_time=False))
            return
        self.time_label.setText(TIME_REMAINING_TEMPLATE.format(time=view.formatted_time_remaining))
        self.time_label.setStyleSheet(
            Styles.get_timer_label_style(low_time=view.time_remaining < LOW_TIME_WARNING_SECONDS)
        )

    def _handle_reset(self) -> None:
        view = self.quiz_player.get_view()
        if not confirm_reset_quiz(self, view.quiz_name or ""):
            return
        self.quiz_player.reset()
        # the page keeps its own render cache; reload it like a browser would
        self.player_view.reload()
        self._refresh_header()

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt override
        self.refresh_timer.stop()
        self.quiz_player.shutdown()
        super().closeEvent(event)
