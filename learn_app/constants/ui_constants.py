"""Qt UI constants for the player window."""

WINDOW_TITLE: str = "LearnQt Quiz Player"
HEADER_REFRESH_INTERVAL_MS: int = 1000
LOW_TIME_WARNING_SECONDS: int = 60

RESET_BUTTON: str = "Reset Quiz"
ABOUT_BUTTON: str = "About"

EMPTY_STATE_MESSAGE: str = "No quiz available"
LOADING_MESSAGE: str = "Loading quiz…"
SUBMITTED_TEMPLATE: str = "Submitted: score {score}%"
TIME_REMAINING_TEMPLATE: str = "Time left {time}"
