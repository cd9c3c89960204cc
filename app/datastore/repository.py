"""Record repository: the single entry point for student CRUD.

Every call goes to whichever backend the selector says is active at the
moment the call starts, through the adapter. No write is mirrored to the
other backend, and a failing backend is reported, not retried elsewhere.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as SchemaValidationError

from app.datastore.adapter import from_native, to_native
from app.datastore.backends.base import StudentBackend
from app.datastore.errors import StaleResponseError, ValidationError
from app.datastore.records import (
    IMMUTABLE_FIELDS,
    BackendKind,
    StudentRecord,
    validate_record,
)
from app.datastore.selector import ActiveBackendSelector

logger = logging.getLogger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def sort_newest_first(records: list[StudentRecord]) -> list[StudentRecord]:
    """Order by submission time descending; records without one go last."""
    return sorted(
        records,
        key=lambda r: (r.submitted_at is not None, r.submitted_at or _OLDEST),
        reverse=True,
    )


class StudentRepository:
    """CRUD over the active backend."""

    def __init__(
        self,
        selector: ActiveBackendSelector,
        backends: Mapping[BackendKind, StudentBackend],
    ):
        missing = set(BackendKind) - set(backends)
        if missing:
            raise ValueError(f"No backend configured for: {sorted(k.value for k in missing)}")
        self.selector = selector
        self._backends = dict(backends)

    def backend(self, kind: BackendKind | None = None) -> StudentBackend:
        return self._backends[kind or self.selector.active]

    def _check_current(self, origin: BackendKind) -> None:
        if self.selector.active is not origin:
            logger.info("Discarding %s response after switch to %s", origin.value, self.selector.active.value)
            raise StaleResponseError(origin, self.selector.active)

    async def create(self, record: StudentRecord) -> StudentRecord:
        """Store a new record; the backend assigns id and submission time."""
        kind = self.selector.active
        record = validate_record(record, backend=kind)
        record = record.model_copy(update={"id": None, "submitted_at": None})
        stored = await self.backend(kind).create(to_native(record, kind))
        logger.info("Created student %s in %s", stored.id, kind.value)
        return from_native(stored)

    async def list(self) -> list[StudentRecord]:
        kind = self.selector.active
        docs = await self.backend(kind).list()
        self._check_current(kind)
        return sort_newest_first([from_native(doc) for doc in docs])

    async def get_by_id(self, student_id: str) -> StudentRecord:
        kind = self.selector.active
        doc = await self.backend(kind).get(student_id)
        self._check_current(kind)
        return from_native(doc)

    async def update(self, student_id: str, fields: Mapping[str, Any]) -> StudentRecord:
        """Merge ``fields`` onto the stored record and write the result back.

        Fields not named in ``fields`` keep their stored values. ``id`` and
        ``submitted_at`` cannot be changed.
        """
        kind = self.selector.active
        unknown = set(fields) - set(StudentRecord.model_fields)
        if unknown:
            raise ValidationError(
                f"Unknown fields: {', '.join(sorted(unknown))}",
                backend=kind,
                details={"fields": sorted(unknown)},
            )
        immutable = IMMUTABLE_FIELDS & set(fields)
        if immutable:
            raise ValidationError(
                f"Fields cannot be changed: {', '.join(sorted(immutable))}",
                backend=kind,
                details={"fields": sorted(immutable)},
            )

        backend = self.backend(kind)
        current = from_native(await backend.get(student_id))
        try:
            merged = StudentRecord.model_validate({**current.model_dump(), **dict(fields)})
        except SchemaValidationError as exc:
            errors = {
                ".".join(str(part) for part in err["loc"]): err["msg"] for err in exc.errors()
            }
            raise ValidationError(
                "Please fix the highlighted fields: " + ", ".join(sorted(errors)),
                backend=kind,
                details={"fields": errors},
            ) from exc
        merged = validate_record(merged, backend=kind)

        native = to_native(merged, kind)
        stored = await backend.update(student_id, native.payload())
        logger.info("Updated student %s in %s", student_id, kind.value)
        return from_native(stored)

    async def delete(self, student_id: str) -> None:
        kind = self.selector.active
        await self.backend(kind).delete(student_id)
        logger.info("Deleted student %s from %s", student_id, kind.value)

    async def bulk_delete(self, ids: list[str]) -> int:
        """Delete several records; returns how many were actually removed.

        Not atomic. See the backends for the exact partial-failure behaviour.
        """
        kind = self.selector.active
        ids = [student_id for student_id in dict.fromkeys(ids) if student_id]
        if not ids:
            raise ValidationError("Please provide at least one student ID", backend=kind)
        deleted = await self.backend(kind).bulk_delete(ids)
        logger.info("Bulk deleted %d of %d students from %s", deleted, len(ids), kind.value)
        return deleted
