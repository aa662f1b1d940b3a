# =============================================================================
# API MODULE INITIALIZATION
# =============================================================================
# File: api/__init__.py
# Description: API module exports
# =============================================================================

from reelsocial.api.v1 import api_router, health_router
from reelsocial.api.middleware import (
    RequestIDMiddleware,
    LoggingMiddleware,
)

__all__ = [
    "api_router",
    "health_router",
    "RequestIDMiddleware",
    "LoggingMiddleware",
]
