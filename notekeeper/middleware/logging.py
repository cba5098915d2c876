"""
Notekeeper Backend: Request Logging Middleware
===============================================

What:  One access log line per HTTP request.
How:   Measures the time spent below this middleware and logs method, path,
       status, duration, request id and client address. The level follows the
       status class: 5xx → ERROR, 4xx → WARNING, everything else → INFO.
When:  Runs inside RequestIDMiddleware so the request id is already set.

An exception that escapes every route and handler is logged with its
traceback here and answered with the generic error envelope, so the response
still passes back through RequestIDMiddleware and gets its access line.

Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notekeeper.middleware.request_id import request_id_var
from notekeeper.responses import error_response

logger = logging.getLogger("notekeeper.access")
error_logger = logging.getLogger(__name__)

# Polled every few seconds by probes; not worth an access line each
SKIP_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        try:
            response = await call_next(request)
        except Exception as e:
            error_logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid,
                method,
                path,
                str(e),
                exc_info=True,
            )
            response = error_response()

        if path in SKIP_PATHS:
            return response

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code

        logger.log(
            level_for_status(status),
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
