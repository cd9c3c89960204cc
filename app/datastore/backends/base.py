"""Interface every concrete backend implements.

Backends speak their own native document shape; translation to the
canonical record happens in the repository through the adapter.
"""

from __future__ import annotations

from typing import Any, Protocol

from app.datastore.adapter import NativeDoc
from app.datastore.records import BackendKind


class StudentBackend(Protocol):
    kind: BackendKind

    async def create(self, doc: NativeDoc) -> NativeDoc: ...

    async def list(self) -> list[NativeDoc]: ...

    async def get(self, student_id: str) -> NativeDoc: ...

    async def update(self, student_id: str, fields: dict[str, Any]) -> NativeDoc: ...

    async def delete(self, student_id: str) -> None: ...

    async def bulk_delete(self, ids: list[str]) -> int: ...

    async def authenticate(self, username: str, password: str) -> bool: ...
