# =============================================================================
# REELSOCIAL BACKEND - POST ROUTES
# =============================================================================
# File: api/v1/post_routes.py
# Description: Post CRUD and like endpoints
# =============================================================================

from typing import List

from fastapi import APIRouter, Query, status

from reelsocial.auth.dependencies import AuthContextDep, PostServiceDep
from reelsocial.auth.schemas import MessageResponse
from reelsocial.content.schemas import (
    PostCreate,
    PostUpdate,
    PostResponse,
    LikeStatusResponse,
)


router = APIRouter(tags=["Posts"])


# =============================================================================
# CREATE / READ
# =============================================================================

@router.post(
    "/post",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
)
async def create_post(
    data: PostCreate,
    caller: AuthContextDep,
    post_service: PostServiceDep,
) -> PostResponse:
    """The author is the caller; ``sender`` in the body is ignored."""
    return await post_service.create_post(caller, data)


@router.get(
    "/posts",
    response_model=List[PostResponse],
    summary="List all posts, newest first",
)
async def list_posts(post_service: PostServiceDep) -> List[PostResponse]:
    return await post_service.list_posts()


@router.get(
    "/post",
    response_model=List[PostResponse],
    summary="List posts by sender",
)
async def list_posts_by_sender(
    post_service: PostServiceDep,
    sender: str = Query(..., min_length=1, description="Author username"),
) -> List[PostResponse]:
    return await post_service.list_by_sender(sender)


@router.get(
    "/post/isliked/{post_id}",
    response_model=LikeStatusResponse,
    summary="Whether the caller likes a post",
)
async def is_liked(
    post_id: str,
    caller: AuthContextDep,
    post_service: PostServiceDep,
) -> LikeStatusResponse:
    return await post_service.is_liked(caller, post_id)


@router.get(
    "/post/{post_id}",
    response_model=PostResponse,
    summary="Get post by ID",
)
async def get_post(post_id: str, post_service: PostServiceDep) -> PostResponse:
    return await post_service.get_post(post_id)


# =============================================================================
# LIKES
# =============================================================================

@router.put(
    "/post/like/{post_id}",
    response_model=LikeStatusResponse,
    summary="Like a post",
)
async def like_post(
    post_id: str,
    caller: AuthContextDep,
    post_service: PostServiceDep,
) -> LikeStatusResponse:
    return await post_service.like(caller, post_id)


@router.put(
    "/post/unlike/{post_id}",
    response_model=LikeStatusResponse,
    summary="Remove a like",
)
async def unlike_post(
    post_id: str,
    caller: AuthContextDep,
    post_service: PostServiceDep,
) -> LikeStatusResponse:
    return await post_service.unlike(caller, post_id)


# =============================================================================
# UPDATE / DELETE
# =============================================================================

@router.put(
    "/post/{post_id}",
    response_model=PostResponse,
    summary="Edit one of the caller's posts",
)
async def update_post(
    post_id: str,
    data: PostUpdate,
    caller: AuthContextDep,
    post_service: PostServiceDep,
) -> PostResponse:
    return await post_service.update_post(caller, post_id, data)


@router.delete(
    "/post/{post_id}",
    response_model=MessageResponse,
    summary="Delete one of the caller's posts",
)
async def delete_post(
    post_id: str,
    caller: AuthContextDep,
    post_service: PostServiceDep,
) -> MessageResponse:
    """Comments on the post are deleted with it."""
    await post_service.delete_post(caller, post_id)
    return MessageResponse(message="Post deleted")
