"""Network configuration for the player server and the remote quiz store."""

import os

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 8000

QUIZ_API_URL: str = os.environ.get(
    "LEARN_APP_QUIZ_API_URL",
    "https://tawf54kc575lndv6wj2woqq5uy0fbfez.lambda-url.ap-south-1.on.aws/",
)
QUIZ_FETCH_TIMEOUT_SECONDS: float = 10.0
