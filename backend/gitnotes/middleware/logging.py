"""
GitNotes Backend — Access Logging Middleware
==============================================

What:  One log line per HTTP request: method, path, status, duration, id.
How:   Times the downstream call and logs on the "gitnotes.access" logger,
       at ERROR for 5xx, WARNING for 4xx and INFO otherwise.

Request bodies are never logged; note text stays out of the logs.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from gitnotes.middleware.request_id import request_id_var

logger = logging.getLogger("gitnotes.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request after its response is produced.

    Duration covers everything downstream, including the GitHub and Gemini
    round trips; GET /notes grows linearly with the number of stored notes.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")
        status = response.status_code
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
