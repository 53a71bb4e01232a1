"""
Products API - Request Logging Middleware
=========================================

What:  One access-log line for every HTTP request.
How:   Measures the time spent in the rest of the stack and logs method,
       path, status, duration, request ID and client IP once the response
       (or an exception) comes back.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Example line:
    2024-01-15T12:00:00 [INFO] products_api.access: GET /api/products 200 1.3ms [a1b2c3d4] from 127.0.0.1

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, IP, request ID
    ❌ Don't log: request bodies, the API key header
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from products_api.middleware.request_id import request_id_var

logger = logging.getLogger("products_api.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each HTTP request with its outcome.

    Level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.
    A request whose handler raises is logged as 500 and the exception
    continues to the server error handler. The middleware never rejects
    a request itself.
    """

    # Health checkers hit these every few seconds
    EXCLUDED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            self._log(request, 500, start_time)
            raise

        self._log(request, response.status_code, start_time)
        return response

    def _log(self, request: Request, status: int, start_time: float) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

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
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
