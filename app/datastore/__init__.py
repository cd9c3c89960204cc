"""Dashboard data layer: one repository over Firestore or the REST backend."""

from app.datastore.adapter import (
    FirestoreDocument,
    NativeDoc,
    RestDocument,
    from_native,
    join_full_name,
    split_full_name,
    to_native,
)
from app.datastore.aggregator import Aggregator, StudentStatistics
from app.datastore.client import Dashboard, create_dashboard
from app.datastore.errors import (
    BackendError,
    BulkDeleteError,
    ConfirmationDeclined,
    DataStoreError,
    NotFoundError,
    StaleResponseError,
    ValidationError,
)
from app.datastore.prober import BackendProber
from app.datastore.records import BackendKind, StudentRecord, validate_record
from app.datastore.repository import StudentRepository
from app.datastore.selector import ActiveBackendSelector
from app.datastore.session import AdminSession, LoginResult
from app.datastore.state import ClientState

__all__ = [
    # Records
    "BackendKind",
    "StudentRecord",
    "validate_record",
    # Adapter
    "FirestoreDocument",
    "NativeDoc",
    "RestDocument",
    "from_native",
    "to_native",
    "join_full_name",
    "split_full_name",
    # Backend selection
    "ActiveBackendSelector",
    "BackendProber",
    "ClientState",
    # Repository and session
    "StudentRepository",
    "AdminSession",
    "LoginResult",
    # Statistics
    "Aggregator",
    "StudentStatistics",
    # Wiring
    "Dashboard",
    "create_dashboard",
    # Errors
    "DataStoreError",
    "ValidationError",
    "NotFoundError",
    "BackendError",
    "BulkDeleteError",
    "StaleResponseError",
    "ConfirmationDeclined",
]
