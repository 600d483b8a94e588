"""
DysNote Backend — Request ID Middleware
========================================

What:  Gives each incoming request a correlation ID and returns it in the
       X-Request-ID response header.
Why:   Error bodies stay minimal ({"message": ...}); the header is how a
       client report is matched to server-side log lines.
How:   Reuses a client-supplied X-Request-ID, otherwise generates a short
       UUID prefix, and stores it in a ContextVar for loggers and handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local storage for the current request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns a unique ID to each request for tracing.

    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate an 8-character ID
        3. Store it in request_id_var and request.state
        4. Echo it in the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
