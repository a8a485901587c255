"""
Snippetbox Backend - Request Logging Middleware
================================================

What:  One access-log record per HTTP request.
Why:   Method, path, status and duration for every request, correlated
       by request id.
How:   Wraps `call_next`, times it, and picks the level from the status:
       5xx → ERROR, 4xx → WARNING, otherwise INFO. An exception no handler
       claimed is answered here with a 500 (via `server_error`), so it is
       still logged with its request id and still gets an access record.

What we DON'T log: request bodies and headers.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.error_responses import server_error
from snippetbox.middleware.request_id import request_id_var

logger = logging.getLogger("snippetbox.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as exc:
            response = server_error(exc)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
