# =============================================================================
# API V1 MODULE INITIALIZATION
# =============================================================================
# File: api/v1/__init__.py
# Description: API v1 module exports and router aggregation
# =============================================================================

from fastapi import APIRouter

from reelsocial.api.v1.user_routes import router as user_router
from reelsocial.api.v1.post_routes import router as post_router
from reelsocial.api.v1.comment_routes import router as comment_router
from reelsocial.api.v1.file_routes import router as file_router
from reelsocial.api.v1.ai_routes import router as ai_router
from reelsocial.api.v1.health_routes import router as health_router


# The web client calls these paths at the root, without a version prefix
api_router = APIRouter()

api_router.include_router(user_router)
api_router.include_router(post_router)
api_router.include_router(comment_router)
api_router.include_router(file_router)
api_router.include_router(ai_router)


__all__ = [
    "api_router",
    "user_router",
    "post_router",
    "comment_router",
    "file_router",
    "ai_router",
    "health_router",
]
