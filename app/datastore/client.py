"""Builds the dashboard data layer from settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from app.core.config import Settings, get_settings
from app.datastore.backends.firestore import FirestoreStudentBackend
from app.datastore.backends.rest import RestStudentBackend
from app.datastore.prober import BackendProber
from app.datastore.records import BackendKind
from app.datastore.repository import StudentRepository
from app.datastore.selector import ActiveBackendSelector, ConfirmCallback
from app.datastore.session import AdminSession
from app.datastore.state import ClientState

logger = logging.getLogger(__name__)


@dataclass
class Dashboard:
    """Everything the admin dashboard talks to."""

    state: ClientState
    selector: ActiveBackendSelector
    repository: StudentRepository
    session: AdminSession

    async def start(self) -> BackendKind:
        """Restore the active backend; call once at process start."""
        active = await self.selector.initialize()
        logger.info("Dashboard using %s", active.value)
        return active


def create_dashboard(
    settings: Settings | None = None,
    confirm: ConfirmCallback | None = None,
    firestore_client: Any = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Dashboard:
    """Wire state, prober, backends, selector, repository and session.

    ``firestore_client`` defaults to a ``google.cloud.firestore.AsyncClient``
    for ``FIRESTORE_PROJECT_ID``; ``transport`` is handed to every HTTP client
    talking to the REST backend.
    """
    settings = settings or get_settings()
    if firestore_client is None:
        from google.cloud import firestore

        firestore_client = firestore.AsyncClient(project=settings.FIRESTORE_PROJECT_ID)

    state = ClientState(settings.CLIENT_STATE_FILE)
    prober = BackendProber(
        settings.REST_API_URL,
        path=settings.PROBE_PATH,
        timeout=settings.PROBE_TIMEOUT_SECONDS,
        transport=transport,
    )
    selector = ActiveBackendSelector(state, prober, confirm=confirm)
    backends = {
        BackendKind.FIRESTORE: FirestoreStudentBackend(
            firestore_client,
            students_collection=settings.FIRESTORE_STUDENTS_COLLECTION,
            admins_collection=settings.FIRESTORE_ADMINS_COLLECTION,
        ),
        BackendKind.MONGO: RestStudentBackend(
            settings.REST_API_URL,
            timeout=settings.REQUEST_TIMEOUT_SECONDS,
            transport=transport,
        ),
    }
    repository = StudentRepository(selector, backends)
    session = AdminSession(repository, state, timeout_minutes=settings.SESSION_TIMEOUT_MINUTES)
    return Dashboard(state=state, selector=selector, repository=repository, session=session)
