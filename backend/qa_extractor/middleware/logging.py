"""
QA Extractor: Request Logging Middleware
===========================================

What:  One access log line per HTTP request with status and duration.
How:   Measures time around call_next() and logs at a level chosen by the
       status class.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Log line:
    POST /extract_qa 200 2456.1ms [a1b2c3d4] from 192.168.1.100

Request bodies are never logged (uploads can be large and private).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from qa_extractor.middleware.request_id import request_id_var

logger = logging.getLogger("qa_extractor.access")

# Probe endpoints that would flood the log
SKIP_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status, duration, request ID and client IP.

    Typical durations:
        - GET /:             1-5ms
        - POST /extract_qa:  2000-8000ms (the Gemini call dominates)
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

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
