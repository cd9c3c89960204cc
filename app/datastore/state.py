"""Durable client-side state for the dashboard.

Three keys survive restarts: the active backend name, the admin login flag
and the last-activity time used by the inactivity timeout. They live in one
small JSON file that is rewritten on every change.
"""

import json
import logging
from pathlib import Path
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)

ACTIVE_DATABASE_KEY = "activeDatabase"
LOGGED_IN_KEY = "isAdminLoggedIn"
LAST_ACTIVITY_KEY = "lastActivity"

DEFAULT_STATE: dict[str, Any] = {
    ACTIVE_DATABASE_KEY: None,
    LOGGED_IN_KEY: False,
    LAST_ACTIVITY_KEY: None,
}


class ClientState:
    """Key/value store backed by a JSON file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return dict(DEFAULT_STATE)
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Client state file %s is unreadable; using defaults", self._path)
            data = {}
        if not isinstance(data, dict):
            data = {}
        return {**DEFAULT_STATE, **data}

    def _write(self, data: dict[str, Any]) -> None:
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        value = self._read().get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, *keys: str) -> None:
        data = self._read()
        for key in keys:
            data[key] = DEFAULT_STATE.get(key)
        self._write(data)

    # --- Typed accessors -----------------------------------------------------

    @property
    def active_database(self) -> str | None:
        return self.get(ACTIVE_DATABASE_KEY)

    @active_database.setter
    def active_database(self, value: str) -> None:
        self.set(ACTIVE_DATABASE_KEY, value)

    @property
    def is_admin_logged_in(self) -> bool:
        return bool(self.get(LOGGED_IN_KEY, False))

    @property
    def last_activity(self) -> int | None:
        value = self.get(LAST_ACTIVITY_KEY)
        return int(value) if value is not None else None
