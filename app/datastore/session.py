"""Admin session: login against the active backend plus an inactivity timeout."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.datastore.errors import BackendError
from app.datastore.records import BackendKind
from app.datastore.repository import StudentRepository
from app.datastore.state import LAST_ACTIVITY_KEY, LOGGED_IN_KEY, ClientState
from app.datastore.timestamps import now_millis

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MINUTES = 30


@dataclass
class LoginResult:
    """Outcome of a login attempt."""

    success: bool
    backend: BackendKind
    message: str
    warning: str | None = None


class AdminSession:
    """Login flag and last-activity time, persisted in :class:`ClientState`.

    Login is the one place with an automatic fallback: if the REST backend
    fails while it is active, the selector reverts to Firestore and the login
    is retried there once. CRUD calls never do this.
    """

    def __init__(
        self,
        repository: StudentRepository,
        state: ClientState,
        timeout_minutes: int = DEFAULT_TIMEOUT_MINUTES,
    ):
        self.repository = repository
        self.state = state
        self.timeout_ms = timeout_minutes * 60 * 1000

    async def login(self, username: str, password: str, now: int | None = None) -> LoginResult:
        selector = self.repository.selector
        kind = selector.active
        warning = None
        try:
            ok = await self.repository.backend(kind).authenticate(username, password)
        except BackendError as exc:
            if kind is not BackendKind.MONGO:
                raise
            warning = selector.fall_back(exc.message)
            kind = selector.active
            ok = await self.repository.backend(kind).authenticate(username, password)

        if not ok:
            logger.info("Admin login rejected by %s", kind.value)
            return LoginResult(False, kind, "Invalid username or password", warning)

        self.state.set(LOGGED_IN_KEY, True)
        self.touch(now)
        logger.info("Admin logged in via %s", kind.value)
        return LoginResult(True, kind, "Login successful", warning)

    def touch(self, now: int | None = None) -> None:
        """Record activity; resets the inactivity timer."""
        self.state.set(LAST_ACTIVITY_KEY, now if now is not None else now_millis())

    def is_authenticated(self, now: int | None = None) -> bool:
        """Logged in and active within the timeout; a stale session is cleared."""
        if not self.state.is_admin_logged_in:
            return False
        now = now if now is not None else now_millis()
        last = self.state.last_activity
        if last is None or now - last > self.timeout_ms:
            logger.info("Admin session expired after inactivity")
            self.logout()
            return False
        return True

    def logout(self) -> None:
        self.state.remove(LOGGED_IN_KEY, LAST_ACTIVITY_KEY)
