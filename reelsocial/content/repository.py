# =============================================================================
# REELSOCIAL BACKEND - CONTENT REPOSITORY
# =============================================================================
# File: content/repository.py
# Description: Data access for posts, likes and comments
#              Generic CRUD base with bulk operations keyed on ``sender``
# =============================================================================

from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from reelsocial.db.models import Post, PostLike, Comment


ModelT = TypeVar("ModelT", Post, Comment)


class BaseRepository(Generic[ModelT]):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    GENERIC CONTENT REPOSITORY                            │
    │  CRUD over one table plus "update/delete many where sender = X"         │
    └─────────────────────────────────────────────────────────────────────────┘

    Subclasses set ``model``. The repository never commits; it only flushes
    so the caller's transaction decides what sticks.
    """

    model: Type[ModelT]

    def __init__(self, session: AsyncSession):
        self._session = session

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_id(self, item_id: str) -> Optional[ModelT]:
        result = await self._session.execute(
            select(self.model).where(self.model.id == item_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> List[ModelT]:
        """All rows, newest first."""
        result = await self._session.execute(
            select(self.model).order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())

    async def find_by_sender(self, sender: str) -> List[ModelT]:
        result = await self._session.execute(
            select(self.model)
            .where(self.model.sender == sender)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())

    async def count_by_sender(self, sender: str) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(self.model).where(
                self.model.sender == sender
            )
        )
        return result.scalar() or 0

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    async def create(self, **values: Any) -> ModelT:
        item = self.model(**values)
        self._session.add(item)
        await self._session.flush()
        await self._session.refresh(item)
        return item

    async def update(self, item: ModelT, **values: Any) -> ModelT:
        """Set the given fields; ``None`` values are skipped."""
        for key, value in values.items():
            if value is not None:
                setattr(item, key, value)
        await self._session.flush()
        return item

    async def delete(self, item: ModelT) -> None:
        await self._session.delete(item)
        await self._session.flush()

    # =========================================================================
    # BULK OPERATIONS BY SENDER
    # =========================================================================

    async def update_many_by_sender(self, match_sender: str, **values: Any) -> int:
        """
        Update every row whose ``sender`` equals ``match_sender``.

        Returns:
            int: Number of rows changed
        """
        result = await self._session.execute(
            update(self.model)
            .where(self.model.sender == match_sender)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    async def delete_many_by_sender(self, sender: str) -> int:
        """
        Delete every row whose ``sender`` equals the given username.

        Returns:
            int: Number of rows removed
        """
        result = await self._session.execute(
            delete(self.model)
            .where(self.model.sender == sender)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0


class PostRepository(BaseRepository[Post]):
    """Posts and their likes."""

    model = Post

    async def create(self, **values: Any) -> Post:
        values.setdefault("likes", [])
        return await super().create(**values)

    async def ids_by_sender(self, sender: str) -> List[str]:
        result = await self._session.execute(
            select(Post.id).where(Post.sender == sender)
        )
        return list(result.scalars().all())

    async def delete_many_by_sender(self, sender: str) -> int:
        post_ids = await self.ids_by_sender(sender)
        if post_ids:
            await self._session.execute(
                delete(PostLike).where(PostLike.post_id.in_(post_ids))
            )
        return await super().delete_many_by_sender(sender)

    # =========================================================================
    # LIKES
    # =========================================================================

    async def add_like(self, post: Post, user_id: str) -> bool:
        """
        Record a like. Returns False if the user already liked the post.

        The (post_id, user_id) unique constraint backs up this check.
        """
        if user_id in post.like_user_ids:
            return False

        post.likes.append(PostLike(user_id=user_id))
        await self._session.flush()
        return True

    async def remove_like(self, post: Post, user_id: str) -> bool:
        """Drop a like. Returns False if there was none."""
        for like in list(post.likes):
            if like.user_id == user_id:
                post.likes.remove(like)
                await self._session.flush()
                return True
        return False


class CommentRepository(BaseRepository[Comment]):
    """Comments; attached to posts by ``post_id``."""

    model = Comment

    async def find_by_post(self, post_id: str) -> List[Comment]:
        """Comments of a post, oldest first."""
        result = await self._session.execute(
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at)
        )
        return list(result.scalars().all())

    async def delete_by_post(self, post_id: str) -> int:
        return await self.delete_by_posts([post_id])

    async def delete_by_posts(self, post_ids: Sequence[str]) -> int:
        if not post_ids:
            return 0
        result = await self._session.execute(
            delete(Comment)
            .where(Comment.post_id.in_(list(post_ids)))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0
