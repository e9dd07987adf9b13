"""
SeaFood Delivery Backend — Request Logging Middleware
======================================================

What:  One access log line per HTTP request.
How:   Measures wall time around the handler and logs method, path, status,
       duration, request id and client IP on the `seafood.access` logger.

Level by status: 5xx → ERROR, 4xx → WARNING (a rejected withdrawal or an
invalid transition shows up here), everything else → INFO.

Request bodies are never logged: they carry UPI ids and customer addresses.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from seafood.middleware.request_id import request_id_var

logger = logging.getLogger("seafood.access")

# Probed every few seconds by the orchestrator
QUIET_PATHS = {"/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
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
