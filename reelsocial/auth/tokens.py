# =============================================================================
# REELSOCIAL BACKEND - TOKEN SERVICE
# =============================================================================
# File: auth/tokens.py
# Description: Refresh-token lifecycle on top of the stateless JWT manager
#              Issue, rotate (single use, replay detection), revoke
# =============================================================================

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from reelsocial.auth.repository import UserRepository, RefreshTokenRepository
from reelsocial.core.security import JWTManager, TokenPair, TokenPayload, TokenType
from reelsocial.core.exceptions import TokenOwnerNotFoundError, TokenReplayedError
from reelsocial.db.models import User
from reelsocial.utils.helpers import hash_token, utc_now


logger = logging.getLogger(__name__)


class TokenService:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    TOKEN SERVICE                                         │
    │  Access/refresh pairs backed by a per-user list of valid refresh tokens │
    └─────────────────────────────────────────────────────────────────────────┘

    Refresh token states:
        Issued -> Active (in the owner's list)
        Active -> Consumed     (rotated out)
        Active -> Revoked      (logout)
        Active -> Invalidated  (whole list cleared after a replay)
        Expired is detected lazily by ``verify``.

    All writes go through the caller's session. The only commit this class
    performs itself is the replay clear in ``rotate``, which has to outlive
    the rollback triggered by the error it raises.
    """

    def __init__(self, session: AsyncSession, jwt_manager: JWTManager):
        self._session = session
        self._jwt = jwt_manager
        self._user_repo = UserRepository(session)
        self._token_repo = RefreshTokenRepository(session)

    # =========================================================================
    # ISSUE / VERIFY
    # =========================================================================

    async def issue(self, user: User) -> TokenPair:
        """
        Mint a token pair and append its refresh token to the user's list.

        Raises:
            MissingSecretError: If no signing secret is configured
        """
        pair = self._jwt.create_token_pair(user.id, user.username)
        await self._store(user.id, pair.refresh_token)
        return pair

    def verify(self, token: str, expected_type: TokenType = "access") -> TokenPayload:
        """
        Validate signature, expiry and claims of a token.

        Raises:
            TokenError: Expired, malformed or forged token
            MissingSecretError: If no signing secret is configured
        """
        return self._jwt.verify_token(token, expected_type=expected_type)

    # =========================================================================
    # ROTATION
    # =========================================================================

    async def rotate(self, old_refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a new pair.

        The old token leaves the owner's list and the new one enters it in
        the same transaction. Presenting a token that verifies but is no
        longer listed revokes every refresh token of its owner.

        Raises:
            TokenError: If the token does not verify
            TokenOwnerNotFoundError: If the owner no longer exists
            TokenReplayedError: If the token was already used or revoked
        """
        payload = self.verify(old_refresh_token, expected_type="refresh")

        user = await self._user_repo.get_by_id(payload.sub)
        if user is None:
            raise TokenOwnerNotFoundError()

        stored = await self._token_repo.get_for_user(
            user.id, hash_token(old_refresh_token)
        )
        if stored is None:
            revoked = await self._token_repo.clear_for_user(user.id)
            await self._session.commit()
            logger.warning(
                "Refresh token replay detected for user %s; revoked %d token(s)",
                user.id,
                revoked,
            )
            raise TokenReplayedError()

        await self._token_repo.delete_one(stored)
        pair = self._jwt.create_token_pair(user.id, user.username)
        await self._store(user.id, pair.refresh_token)

        logger.debug("Rotated refresh token for user %s", user.id)
        return pair

    # =========================================================================
    # REVOCATION
    # =========================================================================

    async def revoke(self, refresh_token: str) -> None:
        """
        Remove one refresh token from its owner's list (logout).

        A token that verifies but is already gone is accepted silently.

        Raises:
            TokenError: If the token does not verify
            TokenOwnerNotFoundError: If the owner no longer exists
            MissingSecretError: If no signing secret is configured
        """
        payload = self.verify(refresh_token, expected_type="refresh")

        user = await self._user_repo.get_by_id(payload.sub)
        if user is None:
            raise TokenOwnerNotFoundError()

        stored = await self._token_repo.get_for_user(
            user.id, hash_token(refresh_token)
        )
        if stored is not None:
            await self._token_repo.delete_one(stored)

    async def revoke_all(self, user_id: str) -> int:
        """Clear a user's whole refresh-token list."""
        count = await self._token_repo.clear_for_user(user_id)
        if count:
            logger.info("Revoked %d refresh token(s) for user %s", count, user_id)
        return count

    async def _store(self, user_id: str, refresh_token: str) -> None:
        await self._token_repo.add(
            user_id=user_id,
            token_hash=hash_token(refresh_token),
            expires_at=utc_now() + self._jwt.refresh_token_lifetime,
        )
