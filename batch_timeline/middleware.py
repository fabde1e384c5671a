"""FastAPI middleware for cross-cutting concerns."""

import logging
import time
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from batch_timeline.logging_config import correlation_id_var

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that scopes each request for logging.

    - Reads ``X-Correlation-ID`` from incoming headers or generates a UUID4.
    - Stores the ID in a ``ContextVar`` for every log statement in the request.
    - Echoes the ID back and logs method, path, status and duration once the
      response is ready.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        token = correlation_id_var.set(correlation_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            logger.info(
                "%s %s -> %s",
                request.method,
                request.url.path,
                response.status_code,
                extra={"duration_ms": round((time.perf_counter() - started) * 1000, 2)},
            )
            return response
        finally:
            correlation_id_var.reset(token)
