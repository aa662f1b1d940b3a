# =============================================================================
# REELSOCIAL BACKEND - IDENTITY PROPAGATION
# =============================================================================
# File: content/propagation.py
# Description: Keeps the denormalized ``sender`` copies on posts and comments
#              in step with renames and deletions of their author
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from reelsocial.content.repository import PostRepository, CommentRepository


logger = logging.getLogger(__name__)


@dataclass
class PropagationResult:
    """Rows touched by one propagation step."""
    posts: int = 0
    comments: int = 0

    @property
    def total(self) -> int:
        return self.posts + self.comments


class IdentityPropagator:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    IDENTITY PROPAGATOR                                   │
    │  Rewrites or removes content authored under a username                  │
    └─────────────────────────────────────────────────────────────────────────┘

    Posts and comments store their author's username as ``sender`` instead
    of joining users on read. Whenever a username changes or a user goes
    away, every copy has to follow.

    The propagator never commits. It works inside the session that also
    carries the user write, so both land in the same transaction or not at
    all.
    """

    def __init__(self, session: AsyncSession):
        self._posts = PostRepository(session)
        self._comments = CommentRepository(session)

    async def rename(
        self,
        old_username: str,
        new_username: str,
        profile_pic: Optional[str] = None,
    ) -> PropagationResult:
        """
        Move all posts and comments from ``old_username`` to ``new_username``.

        If ``profile_pic`` is given it is also copied onto every post of the
        renamed user.
        """
        result = PropagationResult()

        if old_username != new_username:
            result.posts = await self._posts.update_many_by_sender(
                old_username, sender=new_username
            )
            result.comments = await self._comments.update_many_by_sender(
                old_username, sender=new_username
            )
            logger.info(
                "Renamed sender %r -> %r on %d post(s) and %d comment(s)",
                old_username,
                new_username,
                result.posts,
                result.comments,
            )

        if profile_pic is not None:
            result.posts = max(
                result.posts,
                await self.update_profile_pic(new_username, profile_pic),
            )

        return result

    async def update_profile_pic(self, username: str, profile_pic: str) -> int:
        """Copy a new profile picture onto every post of ``username``."""
        count = await self._posts.update_many_by_sender(
            username, profile_pic=profile_pic
        )
        logger.debug("Updated profile picture on %d post(s) of %r", count, username)
        return count

    async def delete_identity(self, username: str) -> PropagationResult:
        """
        Remove everything authored by ``username``.

        Deletes the user's comments, every comment on the user's posts,
        then the posts themselves, so no comment is left pointing at a
        missing post.
        """
        result = PropagationResult()

        own_comments = await self._comments.delete_many_by_sender(username)
        post_ids = await self._posts.ids_by_sender(username)
        thread_comments = await self._comments.delete_by_posts(post_ids)
        result.comments = own_comments + thread_comments
        result.posts = await self._posts.delete_many_by_sender(username)

        logger.info(
            "Deleted %d post(s) and %d comment(s) of %r",
            result.posts,
            result.comments,
            username,
        )
        return result
