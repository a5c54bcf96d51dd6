"""Request-context middleware — request IDs, timing and access logging.

Every response carries ``X-Request-ID`` and ``X-Process-Time-Ms``.  The
request ID is bound into the structlog context while the request is
handled, so scheduler log lines triggered by an API call can be tied
back to it.
"""

from __future__ import annotations

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from smalljob.core.logging import bind_context, get_logger, unbind_context

logger = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Attach a request ID and measure processing time."""

    def __init__(self, app, quiet_paths: tuple[str, ...] = ()) -> None:
        super().__init__(app)
        # the browser client polls status every few seconds
        self._quiet_paths = quiet_paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        bind_context(request_id=request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            unbind_context("request_id")
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time-Ms"] = str(elapsed_ms)

        log = logger.debug if request.url.path in self._quiet_paths else logger.info
        log(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            elapsed_ms=elapsed_ms,
            request_id=request_id,
        )
        return response
