"""Reachability check for the REST backend."""

import logging

import httpx

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 2.0


class BackendProber:
    """Answers "is the REST backend reachable right now?".

    Any network error, timeout or non-2xx status counts as unavailable; the
    probe never raises and never touches selector state.
    """

    def __init__(
        self,
        base_url: str,
        path: str = "/students",
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = base_url.rstrip("/") + "/" + path.lstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def probe(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url)
        except httpx.HTTPError as exc:
            logger.info("REST backend not reachable at %s: %s", self.url, exc)
            return False
        if not response.is_success:
            logger.info("REST backend at %s answered %d", self.url, response.status_code)
            return False
        return True
