"""Qt UI components for the player shell."""

from .dialog_helpers import confirm_reset_quiz, show_info
from .player_main_window import PlayerMainWindow

__all__ = [
    "PlayerMainWindow",
    "confirm_reset_quiz",
    "show_info",
]
