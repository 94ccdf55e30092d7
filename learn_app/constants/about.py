"""Static metadata describing LearnQt."""

APP_NAME = "LearnQt"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "LearnQt is the student quiz player of the rural-learn tutoring platform. "
    "Pick a quiz, answer against the clock, and pick up where you left off after a restart."
)
