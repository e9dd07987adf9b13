"""
SeaFood Delivery Backend — Request ID Middleware
=================================================

What:  Assigns a correlation id to each request and echoes it back.
Why:   The driver and admin apps show the id on error screens, so a support
       ticket points straight at the matching log lines.
How:   Reuses the client's X-Request-ID header when present, otherwise a
       short UUID; stores it in a ContextVar for loggers and handlers.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one thread each see their own id
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
