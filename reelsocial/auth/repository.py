# =============================================================================
# REELSOCIAL BACKEND - AUTH REPOSITORY
# =============================================================================
# File: auth/repository.py
# Description: Data access layer for users and their refresh-token lists
#              Implements repository pattern with SQLAlchemy async
# =============================================================================

from typing import Optional, List, Any
from datetime import datetime

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from reelsocial.db.models import User, RefreshToken


class UserRepository:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    USER REPOSITORY                                       │
    │  Data access layer for User entity operations                           │
    │  Provides clean separation between business logic and data access       │
    └─────────────────────────────────────────────────────────────────────────┘

    All methods are async and work with SQLAlchemy AsyncSession.
    The repository does not handle transactions - that's the caller's
    responsibility.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    # =========================================================================
    # CREATE OPERATIONS
    # =========================================================================

    async def create(
        self,
        email: str,
        username: str,
        password_hash: str,
        description: Optional[str] = None,
    ) -> User:
        """
        Create a new user.

        Args:
            email: User's email address
            username: User's username
            password_hash: Hashed password
            description: Optional "about me" text (model default otherwise)

        Returns:
            User: Created user entity
        """
        user = User(
            email=email.lower(),
            username=username.lower(),
            password_hash=password_hash,
        )
        if description:
            user.description = description

        self._session.add(user)
        await self._session.flush()
        await self._session.refresh(user)

        return user

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Returns:
            User if found, None otherwise
        """
        result = await self._session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Returns:
            User if found, None otherwise
        """
        result = await self._session.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.

        Returns:
            User if found, None otherwise
        """
        result = await self._session.execute(
            select(User).where(User.username == username.lower())
        )
        return result.scalar_one_or_none()

    async def exists_email(
        self,
        email: str,
        exclude_id: Optional[str] = None,
    ) -> bool:
        """
        Check if email already exists.

        Args:
            email: Email to check
            exclude_id: User whose own record must not count as a match

        Returns:
            True if another user has this email
        """
        query = select(func.count()).select_from(User).where(
            User.email == email.lower()
        )
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)

        result = await self._session.execute(query)
        return result.scalar() > 0

    async def exists_username(
        self,
        username: str,
        exclude_id: Optional[str] = None,
    ) -> bool:
        """
        Check if username already exists.

        Args:
            username: Username to check
            exclude_id: User whose own record must not count as a match

        Returns:
            True if another user has this username
        """
        query = select(func.count()).select_from(User).where(
            User.username == username.lower()
        )
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)

        result = await self._session.execute(query)
        return result.scalar() > 0

    async def list_users(
        self,
        skip: int = 0,
        limit: int = 50,
    ) -> List[User]:
        """
        List users with pagination, oldest account first.
        """
        result = await self._session.execute(
            select(User)
            .order_by(User.created_at)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    # =========================================================================
    # UPDATE OPERATIONS
    # =========================================================================

    async def update(self, user: User, **values: Any) -> User:
        """
        Apply field changes to a user and flush them.

        Keys with a ``None`` value are ignored.
        """
        for key, value in values.items():
            if value is None:
                continue
            if key in ("email", "username"):
                value = value.lower()
            setattr(user, key, value)

        await self._session.flush()
        return user

    async def update_password(self, user: User, password_hash: str) -> None:
        """Replace the stored password hash (used on rehash after login)."""
        user.password_hash = password_hash
        await self._session.flush()

    # =========================================================================
    # DELETE OPERATIONS
    # =========================================================================

    async def delete(self, user: User) -> None:
        """
        Delete a user. Refresh tokens go with it (FK cascade).
        """
        await self._session.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user.id)
        )
        await self._session.delete(user)
        await self._session.flush()


class RefreshTokenRepository:
    """
    Repository for the per-user list of valid refresh tokens.

    Tokens are looked up by their SHA-256 hash; the list order is
    insertion order.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(
        self,
        user_id: str,
        token_hash: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """Append a token hash to the user's list."""
        token = RefreshToken(
            user_id=user_id,
            token_hash=token_hash,
            expires_at=expires_at,
        )
        self._session.add(token)
        await self._session.flush()
        return token

    async def get_for_user(
        self,
        user_id: str,
        token_hash: str,
    ) -> Optional[RefreshToken]:
        """Get the row for this hash if it belongs to the user's list."""
        result = await self._session.execute(
            select(RefreshToken).where(
                RefreshToken.user_id == user_id,
                RefreshToken.token_hash == token_hash,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> List[RefreshToken]:
        result = await self._session.execute(
            select(RefreshToken)
            .where(RefreshToken.user_id == user_id)
            .order_by(RefreshToken.id)
        )
        return list(result.scalars().all())

    async def delete_one(self, token: RefreshToken) -> None:
        await self._session.delete(token)
        await self._session.flush()

    async def clear_for_user(self, user_id: str) -> int:
        """
        Remove every token in the user's list.

        Returns:
            int: Number of tokens removed
        """
        result = await self._session.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        await self._session.flush()
        return result.rowcount or 0
