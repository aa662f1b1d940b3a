# =============================================================================
# REELSOCIAL BACKEND - HEALTH ROUTES
# =============================================================================
# File: api/v1/health_routes.py
# Description: Health check endpoints for monitoring and orchestration
# =============================================================================

import logging
from datetime import datetime
from typing import Dict, Any

from fastapi import APIRouter
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from reelsocial import __version__
from reelsocial.auth.dependencies import AppContextDep
from reelsocial.utils.helpers import utc_now


logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Overall status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(..., description="Check timestamp")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Environment name")


class DetailedHealthResponse(HealthResponse):
    """Detailed health check with component statuses."""
    components: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Individual component health"
    )


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Basic health check",
)
async def health_check(context: AppContextDep) -> HealthResponse:
    """
    Basic health check.

    Does not touch the database; meant for load balancer probes.
    """
    return HealthResponse(
        status="healthy",
        timestamp=utc_now(),
        version=__version__,
        environment=context.settings.app_env,
    )


@router.get(
    "/health/ready",
    response_model=DetailedHealthResponse,
    summary="Readiness check",
)
async def readiness_check(context: AppContextDep) -> DetailedHealthResponse:
    """
    Readiness check: database reachable, auth configured, AI status.
    """
    components: Dict[str, Dict[str, Any]] = {}
    overall_status = "healthy"

    try:
        reachable = await context.db.ping()
        components["database"] = {
            "status": "healthy" if reachable else "unhealthy",
            "type": context.settings.db_type,
        }
        if not reachable:
            overall_status = "unhealthy"
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database readiness probe failed: %s", e)
        components["database"] = {"status": "unhealthy", "error": str(e)}
        overall_status = "unhealthy"

    if context.jwt.is_configured:
        components["auth"] = {"status": "healthy"}
    else:
        components["auth"] = {"status": "unhealthy", "error": "TOKEN_SECRET not set"}
        overall_status = "unhealthy"

    components["ai"] = {
        "status": "healthy" if context.ai.is_configured else "disabled",
        "scheduler": "running" if context.scheduler.is_running else "stopped",
    }

    return DetailedHealthResponse(
        status=overall_status,
        timestamp=utc_now(),
        version=__version__,
        environment=context.settings.app_env,
        components=components,
    )
