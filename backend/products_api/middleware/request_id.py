"""
Products API - Request ID Middleware
====================================

What:  Assigns an ID to each incoming request and adds it to the response.
How:   Reuses the client's X-Request-ID header or creates a short UUID,
       stores it in a ContextVar and echoes it back.
When:  Outermost middleware (runs before logging).
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
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate the first 8 chars of a UUID4
        3. Store in ContextVar (loggers, exception handlers)
        4. Add to response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid

        return response
