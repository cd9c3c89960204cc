"""REST backend client (the Express/Mongo replacement served by ``app.main``)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.datastore.adapter import RestDocument
from app.datastore.errors import BackendError, NotFoundError
from app.datastore.records import BackendKind

logger = logging.getLogger(__name__)


class RestStudentBackend:
    """Talks to ``/students`` and ``/admin/login`` under ``base_url``."""

    kind = BackendKind.MONGO

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        allowed: tuple[int, ...] = (),
    ) -> tuple[int, dict[str, Any]]:
        """Send one request; returns (status, body) or raises BackendError."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise BackendError(f"Request to {path} failed: {exc}", backend=self.kind) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise BackendError(
                f"Malformed response from {path} (status {response.status_code})",
                backend=self.kind,
            ) from exc
        if not isinstance(body, dict):
            raise BackendError(f"Malformed response from {path}", backend=self.kind)

        if response.is_success or response.status_code in allowed:
            return response.status_code, body

        message = body.get("message") or f"HTTP {response.status_code}"
        raise BackendError(
            f"{method} {path} failed: {message}",
            backend=self.kind,
            details={"status_code": response.status_code},
        )

    def _document(self, body: dict[str, Any], path: str) -> RestDocument:
        data = body.get("data")
        if not body.get("success") or not isinstance(data, dict):
            raise BackendError(
                body.get("message") or f"Unexpected response from {path}",
                backend=self.kind,
            )
        return RestDocument.model_validate(data)

    async def create(self, doc: RestDocument) -> RestDocument:
        _, body = await self._request("POST", "/students", json=doc.payload())
        return self._document(body, "/students")

    async def list(self) -> list[RestDocument]:
        _, body = await self._request("GET", "/students")
        data = body.get("data")
        if not body.get("success") or not isinstance(data, list):
            raise BackendError("Unexpected response from /students", backend=self.kind)
        return [RestDocument.model_validate(item) for item in data]

    async def get(self, student_id: str) -> RestDocument:
        path = f"/students/{student_id}"
        status, body = await self._request("GET", path, allowed=(404,))
        if status == 404:
            raise NotFoundError(student_id, backend=self.kind)
        return self._document(body, path)

    async def update(self, student_id: str, fields: dict[str, Any]) -> RestDocument:
        path = f"/students/{student_id}"
        status, body = await self._request("PUT", path, json=fields, allowed=(404,))
        if status == 404:
            raise NotFoundError(student_id, backend=self.kind)
        return self._document(body, path)

    async def delete(self, student_id: str) -> None:
        status, _ = await self._request("DELETE", f"/students/{student_id}", allowed=(404,))
        if status == 404:
            raise NotFoundError(student_id, backend=self.kind)

    async def bulk_delete(self, ids: list[str]) -> int:
        """One request; the server reports how many were actually removed."""
        _, body = await self._request("POST", "/students/bulk-delete", json={"ids": ids})
        count = body.get("deletedCount")
        if not isinstance(count, int):
            raise BackendError("Bulk delete response has no deletedCount", backend=self.kind)
        return count

    async def authenticate(self, username: str, password: str) -> bool:
        status, _ = await self._request(
            "POST",
            "/admin/login",
            json={"email": username, "password": password},
            allowed=(401,),
        )
        return status != 401
