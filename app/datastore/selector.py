"""Active-backend selector.

Single owner of "which backend serves this session". Firestore is the
default; the REST (Mongo) backend is honoured only while it is reachable.
Every change is persisted and announced to subscribers.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Union

from app.datastore.errors import ConfirmationDeclined
from app.datastore.prober import BackendProber
from app.datastore.records import BackendKind
from app.datastore.state import ClientState

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], Union[bool, Awaitable[bool]]]
Listener = Callable[[BackendKind], None]

DEFAULT_BACKEND = BackendKind.FIRESTORE


def switch_prompt(target: BackendKind) -> str:
    return (
        f"Switch to {target.value.upper()}?\n\n"
        f"All future operations will use the {target.value} database.\n"
        f"Current data will remain unchanged."
    )


def decline_all(message: str) -> bool:
    """Confirmation gate used when no interactive prompt is wired in."""
    return False


class ActiveBackendSelector:
    """Holds the active backend and applies the switching rules."""

    def __init__(
        self,
        state: ClientState,
        prober: BackendProber,
        confirm: ConfirmCallback | None = None,
    ):
        self._state = state
        self._prober = prober
        self._confirm = confirm or decline_all
        self._active = DEFAULT_BACKEND
        self._listeners: list[Listener] = []

    @property
    def active(self) -> BackendKind:
        return self._active

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def initialize(self) -> BackendKind:
        """Restore the persisted preference, probing before honouring Mongo."""
        saved = BackendKind.parse(self._state.active_database)
        if saved is BackendKind.MONGO:
            if await self._prober.probe():
                self._set(BackendKind.MONGO)
                return self._active
            logger.warning("Saved preference is MongoDB but the backend is unreachable; using Firestore")
        self._set(DEFAULT_BACKEND, force_persist=True)
        return self._active

    async def switch_database(self, target: BackendKind) -> bool:
        """Switch after explicit confirmation. Returns whether the switch happened."""
        target = BackendKind(target)
        if target is self._active:
            return False

        try:
            answer = self._confirm(switch_prompt(target))
            if inspect.isawaitable(answer):
                answer = await answer
        except ConfirmationDeclined:
            answer = False

        if not answer:
            logger.info("Switch to %s declined", target.value)
            return False

        self._set(target)
        logger.info("Active backend switched to %s", target.value)
        return True

    def fall_back(self, reason: str) -> str:
        """Implicitly revert to Firestore; returns the warning for the caller."""
        failed = self._active
        self._set(DEFAULT_BACKEND, force_persist=True)
        warning = (
            f"{failed.value} backend unavailable ({reason}); "
            f"switched to {DEFAULT_BACKEND.value}"
        )
        logger.warning(warning)
        return warning

    def _set(self, kind: BackendKind, force_persist: bool = False) -> None:
        changed = kind is not self._active
        self._active = kind
        if changed or force_persist:
            self._state.active_database = kind.value
        if changed:
            for listener in list(self._listeners):
                listener(kind)
