# =============================================================================
# REELSOCIAL BACKEND - COMMENT ROUTES
# =============================================================================
# File: api/v1/comment_routes.py
# Description: Comment CRUD endpoints
# =============================================================================

from typing import List

from fastapi import APIRouter, status

from reelsocial.auth.dependencies import AuthContextDep, CommentServiceDep
from reelsocial.auth.schemas import MessageResponse
from reelsocial.content.schemas import CommentCreate, CommentUpdate, CommentResponse


router = APIRouter(tags=["Comments"])


@router.post(
    "/add-comment",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post",
)
async def add_comment(
    data: CommentCreate,
    caller: AuthContextDep,
    comment_service: CommentServiceDep,
) -> CommentResponse:
    """The post must exist; the author is the caller."""
    return await comment_service.create_comment(caller, data)


@router.get(
    "/comments",
    response_model=List[CommentResponse],
    summary="List all comments",
)
async def list_comments(comment_service: CommentServiceDep) -> List[CommentResponse]:
    return await comment_service.list_all()


@router.get(
    "/comments/{post_id}",
    response_model=List[CommentResponse],
    summary="List the comments of a post",
)
async def list_post_comments(
    post_id: str,
    comment_service: CommentServiceDep,
) -> List[CommentResponse]:
    return await comment_service.list_for_post(post_id)


@router.get(
    "/comment/{comment_id}",
    response_model=CommentResponse,
    summary="Get comment by ID",
)
async def get_comment(
    comment_id: str,
    comment_service: CommentServiceDep,
) -> CommentResponse:
    return await comment_service.get_comment(comment_id)


@router.put(
    "/comment/{comment_id}",
    response_model=CommentResponse,
    summary="Edit one of the caller's comments",
)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    caller: AuthContextDep,
    comment_service: CommentServiceDep,
) -> CommentResponse:
    return await comment_service.update_comment(caller, comment_id, data)


@router.delete(
    "/comment/{comment_id}",
    response_model=MessageResponse,
    summary="Delete one of the caller's comments",
)
async def delete_comment(
    comment_id: str,
    caller: AuthContextDep,
    comment_service: CommentServiceDep,
) -> MessageResponse:
    await comment_service.delete_comment(caller, comment_id)
    return MessageResponse(message="Comment deleted")
