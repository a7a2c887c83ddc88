"""
TaskBoard Backend — Request Logging Middleware
================================================

What:  One access log line per HTTP request.
How:   Measures the handler with ``time.perf_counter`` and logs method, path,
       status, duration, request id and client on the ``taskboard.access``
       logger. The level follows the status class: 5xx ERROR, 4xx WARNING,
       everything else INFO.
When:  After RequestIDMiddleware, so the id is already set.

Request bodies and the X-User-ID header are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from taskboard.middleware.request_id import request_id_var

logger = logging.getLogger("taskboard.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Typical durations:
        - GET /health: 1-5ms
        - PATCH /api/cards/{id}/move: 5-30ms (one snapshot query, one flush)
        - same, with a rebalance: grows with the number of cards in the list
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()

        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        # Health probes run every few seconds
        if path == "/health":
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
