# =============================================================================
# REELSOCIAL BACKEND - CONTENT SERVICE
# =============================================================================
# File: content/service.py
# Description: Business logic for posts, likes and comments
#              Ownership checks, author stamping and delete cascades
# =============================================================================

import logging
from typing import List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from reelsocial.auth.repository import UserRepository
from reelsocial.auth.schemas import AuthContext
from reelsocial.content.repository import PostRepository, CommentRepository
from reelsocial.content.schemas import (
    PostCreate,
    PostUpdate,
    PostResponse,
    LikeStatusResponse,
    CommentCreate,
    CommentUpdate,
    CommentResponse,
)
from reelsocial.core.exceptions import (
    NotOwnerError,
    PostNotFoundError,
    CommentNotFoundError,
    UserNotFoundError,
)
from reelsocial.db.models import Post, Comment, User


logger = logging.getLogger(__name__)


async def _require_existing_caller(users: UserRepository, caller: AuthContext) -> User:
    """The caller's account may have been deleted after its token was minted."""
    user = await users.get_by_id(caller.user_id)
    if user is None:
        raise UserNotFoundError(caller.user_id)
    return user


def _is_author(item: Union[Post, Comment], caller: AuthContext) -> bool:
    if item.sender_id is not None:
        return item.sender_id == caller.user_id
    return item.sender == caller.username


class PostService:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    POST SERVICE                                          │
    │  Create, read, update and delete posts; manage likes                    │
    └─────────────────────────────────────────────────────────────────────────┘

    The author of a new post is always the authenticated caller. Deleting a
    post removes its comments in the same transaction.
    """

    def __init__(self, session: AsyncSession):
        self._posts = PostRepository(session)
        self._comments = CommentRepository(session)
        self._users = UserRepository(session)

    # =========================================================================
    # CREATE
    # =========================================================================

    async def create_post(
        self,
        caller: AuthContext,
        data: PostCreate,
        image_url: Optional[str] = None,
    ) -> PostResponse:
        """
        Publish a post as the caller.

        Raises:
            UserNotFoundError: If the caller's account no longer exists
        """
        user = await _require_existing_caller(self._users, caller)

        post = await self._posts.create(
            title=data.title,
            content=data.content,
            sender=user.username,
            sender_id=user.id,
            image_url=image_url or data.image_url,
            profile_pic=user.profile_pic,
        )
        logger.debug("User %s created post %s", user.id, post.id)
        return PostResponse.model_validate(post)

    # =========================================================================
    # READ
    # =========================================================================

    async def get_post(self, post_id: str) -> PostResponse:
        return PostResponse.model_validate(await self._get(post_id))

    async def list_posts(self) -> List[PostResponse]:
        return [PostResponse.model_validate(p) for p in await self._posts.list_all()]

    async def list_by_sender(self, sender: str) -> List[PostResponse]:
        posts = await self._posts.find_by_sender(sender.lower())
        return [PostResponse.model_validate(p) for p in posts]

    # =========================================================================
    # UPDATE / DELETE
    # =========================================================================

    async def update_post(
        self,
        caller: AuthContext,
        post_id: str,
        data: PostUpdate,
        image_url: Optional[str] = None,
    ) -> PostResponse:
        """
        Edit a post of the caller.

        Raises:
            UserNotFoundError: If the caller's account no longer exists
            PostNotFoundError: If the post does not exist
            NotOwnerError: If the caller is not the author
        """
        await _require_existing_caller(self._users, caller)
        post = await self._get(post_id)
        if not _is_author(post, caller):
            raise NotOwnerError("post")

        post = await self._posts.update(
            post,
            title=data.title,
            content=data.content,
            image_url=image_url or data.image_url,
        )
        return PostResponse.model_validate(post)

    async def delete_post(self, caller: AuthContext, post_id: str) -> int:
        """
        Delete a post of the caller together with its comments.

        Returns:
            int: Number of comments removed
        """
        post = await self._get(post_id)
        if not _is_author(post, caller):
            raise NotOwnerError("post")

        removed = await self._comments.delete_by_post(post.id)
        await self._posts.delete(post)
        logger.debug("Deleted post %s with %d comment(s)", post_id, removed)
        return removed

    # =========================================================================
    # LIKES
    # =========================================================================

    async def like(self, caller: AuthContext, post_id: str) -> LikeStatusResponse:
        """Like a post; liking twice keeps a single like."""
        await _require_existing_caller(self._users, caller)
        post = await self._get(post_id)
        await self._posts.add_like(post, caller.user_id)
        return LikeStatusResponse(liked=True, likes=len(post.likes))

    async def unlike(self, caller: AuthContext, post_id: str) -> LikeStatusResponse:
        await _require_existing_caller(self._users, caller)
        post = await self._get(post_id)
        await self._posts.remove_like(post, caller.user_id)
        return LikeStatusResponse(liked=False, likes=len(post.likes))

    async def is_liked(self, caller: AuthContext, post_id: str) -> LikeStatusResponse:
        post = await self._get(post_id)
        return LikeStatusResponse(
            liked=caller.user_id in post.like_user_ids,
            likes=len(post.likes),
        )

    async def _get(self, post_id: str) -> Post:
        post = await self._posts.get_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return post


class CommentService:
    """Comments on posts; same ownership rules as posts."""

    def __init__(self, session: AsyncSession):
        self._comments = CommentRepository(session)
        self._posts = PostRepository(session)
        self._users = UserRepository(session)

    async def create_comment(
        self,
        caller: AuthContext,
        data: CommentCreate,
    ) -> CommentResponse:
        """
        Comment on an existing post as the caller.

        Raises:
            UserNotFoundError: If the caller's account no longer exists
            PostNotFoundError: If the post does not exist
        """
        user = await _require_existing_caller(self._users, caller)
        if await self._posts.get_by_id(data.post_id) is None:
            raise PostNotFoundError(data.post_id)

        comment = await self._comments.create(
            post_id=data.post_id,
            content=data.content,
            sender=user.username,
            sender_id=user.id,
        )
        return CommentResponse.model_validate(comment)

    async def get_comment(self, comment_id: str) -> CommentResponse:
        return CommentResponse.model_validate(await self._get(comment_id))

    async def list_for_post(self, post_id: str) -> List[CommentResponse]:
        """
        Raises:
            PostNotFoundError: If the post does not exist
        """
        if await self._posts.get_by_id(post_id) is None:
            raise PostNotFoundError(post_id)
        comments = await self._comments.find_by_post(post_id)
        return [CommentResponse.model_validate(c) for c in comments]

    async def list_all(self) -> List[CommentResponse]:
        return [CommentResponse.model_validate(c) for c in await self._comments.list_all()]

    async def update_comment(
        self,
        caller: AuthContext,
        comment_id: str,
        data: CommentUpdate,
    ) -> CommentResponse:
        await _require_existing_caller(self._users, caller)
        comment = await self._get(comment_id)
        if not _is_author(comment, caller):
            raise NotOwnerError("comment")

        comment = await self._comments.update(comment, content=data.content)
        return CommentResponse.model_validate(comment)

    async def delete_comment(self, caller: AuthContext, comment_id: str) -> None:
        comment = await self._get(comment_id)
        if not _is_author(comment, caller):
            raise NotOwnerError("comment")
        await self._comments.delete(comment)

    async def _get(self, comment_id: str) -> Comment:
        comment = await self._comments.get_by_id(comment_id)
        if comment is None:
            raise CommentNotFoundError(comment_id)
        return comment
