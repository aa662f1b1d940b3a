# =============================================================================
# MIDDLEWARE MODULE INITIALIZATION
# =============================================================================
# File: api/middleware/__init__.py
# Description: Middleware module exports
# =============================================================================

from reelsocial.api.middleware.request_logging import (
    RequestIDMiddleware,
    LoggingMiddleware,
)

__all__ = [
    "RequestIDMiddleware",
    "LoggingMiddleware",
]
