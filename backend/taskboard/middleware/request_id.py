"""
TaskBoard Backend — Request ID Middleware
===========================================

What:  Assigns a short id to each request and returns it in ``X-Request-ID``.
How:   Uses the client's X-Request-ID when present, otherwise a new UUID
       prefix; stores it in a ContextVar for loggers and exception handlers
       and in ``request.state`` for route handlers.
When:  First middleware in the chain.

Error responses carry the same id in their body, so a failed move reported
by the frontend can be matched to the server log.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
