"""Durable per-quiz snapshots of session progress.

Persistence is best-effort: a failed write is logged and the session keeps
running from memory. Nothing here raises to the caller and nothing retries.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import re
from typing import Any, Protocol

from learn_app.constants.quiz_constants import PROGRESS_KEY_PREFIX
from learn_app.core.models import SessionState

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def storage_key(quiz_id: str) -> str:
    return f"{PROGRESS_KEY_PREFIX}{quiz_id}"


class ProgressStore(Protocol):
    """Keyed snapshot storage, one record per quiz identifier."""

    def save(self, quiz_id: str, state: SessionState) -> None: ...

    def load(self, quiz_id: str) -> dict[str, Any] | None: ...

    def clear(self, quiz_id: str) -> None: ...


def _decode(raw: str, key: str) -> dict[str, Any] | None:
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Discarding unreadable snapshot %s", key)
        return None
    if not isinstance(data, dict):
        logger.warning("Discarding snapshot %s: expected an object", key)
        return None
    return data


class MemoryProgressStore:
    """Process-local store; snapshots go through the same JSON encoding."""

    def __init__(self) -> None:
        self._records: dict[str, str] = {}

    def save(self, quiz_id: str, state: SessionState) -> None:
        key = storage_key(quiz_id)
        try:
            self._records[key] = json.dumps(state.to_snapshot())
        except (TypeError, ValueError):
            logger.exception("Failed to save progress for %s", key)

    def load(self, quiz_id: str) -> dict[str, Any] | None:
        key = storage_key(quiz_id)
        raw = self._records.get(key)
        if raw is None:
            return None
        return _decode(raw, key)

    def clear(self, quiz_id: str) -> None:
        self._records.pop(storage_key(quiz_id), None)


class JsonFileProgressStore:
    """Stores each snapshot as ``quiz_<id>.json`` inside a directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def path_for(self, quiz_id: str) -> Path:
        safe_key = _UNSAFE_KEY_CHARS.sub("_", storage_key(quiz_id))
        return self._directory / f"{safe_key}.json"

    def save(self, quiz_id: str, state: SessionState) -> None:
        path = self.path_for(quiz_id)
        try:
            document = json.dumps(state.to_snapshot())
            path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = path.with_suffix(".json.tmp")
            temp_path.write_text(document, encoding="utf-8")
            temp_path.replace(path)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save progress to %s", path)

    def load(self, quiz_id: str) -> dict[str, Any] | None:
        path = self.path_for(quiz_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            logger.exception("Failed to read progress from %s", path)
            return None
        return _decode(raw, path.name)

    def clear(self, quiz_id: str) -> None:
        path = self.path_for(quiz_id)
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Failed to delete progress at %s", path)
