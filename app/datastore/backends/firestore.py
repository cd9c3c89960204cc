"""Firestore backend: the ``students`` and ``admins`` collections, queried directly."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.datastore.adapter import FirestoreDocument
from app.datastore.errors import BackendError, BulkDeleteError, NotFoundError
from app.datastore.records import BackendKind

logger = logging.getLogger(__name__)


class FirestoreStudentBackend:
    """Student CRUD and admin lookup against Firestore."""

    kind = BackendKind.FIRESTORE

    def __init__(
        self,
        client: firestore.AsyncClient,
        students_collection: str = "students",
        admins_collection: str = "admins",
    ):
        self._client = client
        self._students = client.collection(students_collection)
        self._admins = client.collection(admins_collection)

    @asynccontextmanager
    async def _errors(self, action: str):
        try:
            yield
        except gcp_exceptions.GoogleAPIError as exc:
            logger.error("Firestore %s failed: %s", action, exc)
            raise BackendError(f"Failed to {action}: {exc}", backend=self.kind) from exc

    @staticmethod
    def _from_snapshot(snapshot: Any) -> FirestoreDocument:
        return FirestoreDocument.model_validate({**(snapshot.to_dict() or {}), "id": snapshot.id})

    async def _existing(self, student_id: str):
        ref = self._students.document(student_id)
        snapshot = await ref.get()
        if not snapshot.exists:
            raise NotFoundError(student_id, backend=self.kind)
        return ref, snapshot

    async def create(self, doc: FirestoreDocument) -> FirestoreDocument:
        data = {**doc.payload(), "submittedAt": firestore.SERVER_TIMESTAMP}
        async with self._errors("add student"):
            _, ref = await self._students.add(data)
            snapshot = await ref.get()
        return self._from_snapshot(snapshot)

    async def list(self) -> list[FirestoreDocument]:
        query = self._students.order_by("submittedAt", direction=firestore.Query.DESCENDING)
        async with self._errors("fetch students"):
            return [self._from_snapshot(snapshot) async for snapshot in query.stream()]

    async def get(self, student_id: str) -> FirestoreDocument:
        async with self._errors("fetch student"):
            _, snapshot = await self._existing(student_id)
        return self._from_snapshot(snapshot)

    async def update(self, student_id: str, fields: dict[str, Any]) -> FirestoreDocument:
        async with self._errors("update student"):
            ref, _ = await self._existing(student_id)
            await ref.update(fields)
            snapshot = await ref.get()
        return self._from_snapshot(snapshot)

    async def delete(self, student_id: str) -> None:
        async with self._errors("delete student"):
            ref, _ = await self._existing(student_id)
            await ref.delete()

    async def bulk_delete(self, ids: list[str]) -> int:
        """N independent deletes run concurrently; nothing is rolled back.

        Ids that are already gone are skipped. If any other delete fails,
        :class:`BulkDeleteError` reports how many did go through.
        """
        results = await asyncio.gather(
            *(self.delete(student_id) for student_id in ids),
            return_exceptions=True,
        )
        deleted = 0
        failed: list[str] = []
        for student_id, result in zip(ids, results):
            if result is None:
                deleted += 1
            elif isinstance(result, NotFoundError):
                continue
            elif isinstance(result, Exception):
                failed.append(student_id)
            else:
                raise result

        if failed:
            raise BulkDeleteError(
                f"Deleted {deleted} of {len(ids)} students; {len(failed)} failed",
                deleted_count=deleted,
                failed_ids=failed,
                backend=self.kind,
            )
        return deleted

    async def authenticate(self, username: str, password: str) -> bool:
        query = (
            self._admins.where(filter=FieldFilter("username", "==", username))
            .where(filter=FieldFilter("password", "==", password))
            .limit(1)
        )
        async with self._errors("check admin credentials"):
            async for _ in query.stream():
                return True
        return False
