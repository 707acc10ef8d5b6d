"""
FoodHub Backend - Request Logging Middleware
=============================================

What:  One access log line per HTTP request: method, path, status, duration,
       request ID, principal and client IP.
How:   Measures from middleware entry to response return; chooses the log
       level from the status class (5xx ERROR, 4xx WARNING, else INFO).
Who:   Applied to every request except /health.

Request bodies are never logged (delivery addresses are personal data).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from foodhub.middleware.request_id import request_id_var

logger = logging.getLogger("foodhub.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs structured information about each HTTP request and response."""

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
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

        principal_id = getattr(request.state, "principal_id", "-")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            principal_id,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "principal_id": principal_id,
                "client_ip": client_ip,
            },
        )

        return response
