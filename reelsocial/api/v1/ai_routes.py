# =============================================================================
# REELSOCIAL BACKEND - AI ROUTES
# =============================================================================
# File: api/v1/ai_routes.py
# Description: Review enhancement endpoint
# =============================================================================

from fastapi import APIRouter
from pydantic import Field

from reelsocial.auth.dependencies import AppContextDep, AuthContextDep
from reelsocial.auth.schemas import BaseSchema


router = APIRouter(prefix="/ai", tags=["AI"])


class EnhanceRequest(BaseSchema):
    content: str = Field(..., min_length=1, max_length=2000, description="Movie name or draft review")


class EnhanceResponse(BaseSchema):
    text: str


@router.post(
    "/enhance",
    response_model=EnhanceResponse,
    summary="Turn a draft into a short movie recommendation",
)
async def enhance_review(
    data: EnhanceRequest,
    caller: AuthContextDep,
    context: AppContextDep,
) -> EnhanceResponse:
    """
    Returns at most 300 characters. 503 when no AI provider is configured,
    502 when the provider call fails.
    """
    return EnhanceResponse(text=await context.ai.enhance_review(data.content))
