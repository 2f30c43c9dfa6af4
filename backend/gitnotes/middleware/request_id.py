"""
GitNotes Backend — Request ID Middleware
==========================================

What:  Assigns a correlation id to each request and echoes it back.
How:   Reuses the client's X-Request-ID header or generates a short UUID,
       stores it in a ContextVar for loggers and error handlers, and sets it
       on the response.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that tags every request/response pair with an id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]
        request_id_var.set(rid)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
