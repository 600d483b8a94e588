"""
DysNote Backend — Request Logging Middleware
=============================================

What:  One structured access-log line per HTTP request.
How:   Measures the time spent in the rest of the chain and logs method,
       path, status, duration, request ID and client IP.
When:  Runs inside RequestIDMiddleware so the request ID is already set.

Privacy:
    Bodies are never logged: note content is the user's handwriting.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from dysnote.middleware.request_id import request_id_var

logger = logging.getLogger("dysnote.access")

# Probed every few seconds by containers; logging them buries real traffic
SILENT_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration of each request.

    Level by status class:
        5xx → ERROR, 4xx → WARNING, everything else → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SILENT_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

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
