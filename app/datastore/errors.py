"""Errors raised by the dashboard data layer.

Every error names the backend it came from so the message shown to the
admin says which store failed.
"""

from typing import Any


class DataStoreError(Exception):
    """Base error for repository, selector and backend failures."""

    def __init__(
        self,
        message: str,
        backend: Any = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.backend = backend
        self.details = details or {}
        super().__init__(self.__str__())

    @property
    def backend_name(self) -> str | None:
        if self.backend is None:
            return None
        return getattr(self.backend, "value", str(self.backend))

    def __str__(self) -> str:
        if self.backend_name:
            return f"[{self.backend_name}] {self.message}"
        return self.message


class ValidationError(DataStoreError):
    """Required field missing or malformed; raised before any network call."""


class NotFoundError(DataStoreError):
    """Id absent in the active backend."""

    def __init__(self, student_id: str, backend: Any = None):
        self.student_id = student_id
        super().__init__(
            f"Student {student_id} not found",
            backend=backend,
            details={"identifier": student_id},
        )


class BackendError(DataStoreError):
    """Network failure, non-success status or malformed response."""


class BulkDeleteError(BackendError):
    """Some deletes of a bulk delete failed; the successful ones stay applied."""

    def __init__(
        self,
        message: str,
        deleted_count: int,
        failed_ids: list[str],
        backend: Any = None,
    ):
        self.deleted_count = deleted_count
        self.failed_ids = failed_ids
        super().__init__(
            message,
            backend=backend,
            details={"deleted_count": deleted_count, "failed_ids": failed_ids},
        )


class StaleResponseError(BackendError):
    """The active backend changed while a read was in flight."""

    def __init__(self, origin: Any, current: Any):
        self.origin = origin
        self.current = current
        super().__init__(
            f"Response discarded: active backend changed to "
            f"{getattr(current, 'value', current)} while the request was in flight",
            backend=origin,
        )


class ConfirmationDeclined(DataStoreError):
    """The user rejected a backend switch. A no-op signal, not a failure."""

    def __init__(self, target: Any = None):
        super().__init__("Backend switch declined", backend=target)
