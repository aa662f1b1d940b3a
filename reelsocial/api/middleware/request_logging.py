# =============================================================================
# REELSOCIAL BACKEND - REQUEST MIDDLEWARE
# =============================================================================
# File: api/middleware/request_logging.py
# Description: Request ID propagation and access logging
# =============================================================================

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Client IP, honouring proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    REQUEST ID MIDDLEWARE                                 │
    │  Generates unique request ID for tracing and logging                    │
    └─────────────────────────────────────────────────────────────────────────┘

    An incoming ``X-Request-ID`` is reused, otherwise a UUID4 is generated.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    LOGGING MIDDLEWARE                                    │
    │  Logs request/response details for monitoring and debugging             │
    └─────────────────────────────────────────────────────────────────────────┘
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        start_time = time.perf_counter()

        method = request.method
        path = request.url.path
        client_ip = get_client_ip(request)
        request_id = getattr(request.state, "request_id", "unknown")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error(
                "%s %s - ERROR - %sms - IP: %s - RequestID: %s - %s",
                method, path, duration_ms, client_ip, request_id, e,
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            "%s %s - %d - %sms - IP: %s - RequestID: %s",
            method, path, response.status_code, duration_ms, client_ip, request_id,
        )
        return response
