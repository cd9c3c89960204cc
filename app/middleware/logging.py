"""Request logging middleware."""

import logging
import time
from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request and tags the response with X-Request-ID."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s failed after %.2f ms",
                request.method,
                request.url.path,
                (time.perf_counter() - start_time) * 1000,
                extra={"request_id": request_id},
            )
            raise

        logger.info(
            "%s %s -> %d (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start_time) * 1000,
            extra={"request_id": request_id},
        )
        response.headers["X-Request-ID"] = request_id
        return response
