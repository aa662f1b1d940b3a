# =============================================================================
# REELSOCIAL BACKEND - TOKEN SERVICE TESTS
# =============================================================================
# File: tests/test_token_service.py
# Description: Refresh-token list: issue, rotation, replay, revocation
# =============================================================================

import pytest

from reelsocial.auth.repository import RefreshTokenRepository, UserRepository
from reelsocial.auth.tokens import TokenService
from reelsocial.context import AppContext
from reelsocial.core.exceptions import (
    TokenMalformedError,
    TokenOwnerNotFoundError,
    TokenReplayedError,
)
from reelsocial.utils.helpers import hash_token


async def _create_user(context: AppContext, username: str = "noa") -> str:
    async with context.db.get_session() as session:
        user = await UserRepository(session).create(
            email=f"{username}@mail.com",
            username=username,
            password_hash=context.passwords.hash_password("Secret123"),
        )
        return user.id


async def _issue(context: AppContext, user_id: str):
    async with context.db.get_session() as session:
        user = await UserRepository(session).get_by_id(user_id)
        return await TokenService(session, context.jwt).issue(user)


async def _rotate(context: AppContext, refresh_token: str):
    async with context.db.get_session() as session:
        return await TokenService(session, context.jwt).rotate(refresh_token)


async def _stored_hashes(context: AppContext, user_id: str) -> list:
    async with context.db.get_session() as session:
        tokens = await RefreshTokenRepository(session).list_for_user(user_id)
        return [t.token_hash for t in tokens]


class TestIssue:
    """Issuing appends to the user's list."""

    async def test_issue_stores_only_the_hash(self, app_context: AppContext):
        user_id = await _create_user(app_context)

        pair = await _issue(app_context, user_id)

        assert await _stored_hashes(app_context, user_id) == [hash_token(pair.refresh_token)]

    async def test_issue_twice_gives_distinct_pairs(self, app_context: AppContext):
        user_id = await _create_user(app_context)

        first = await _issue(app_context, user_id)
        second = await _issue(app_context, user_id)

        assert first.access_token != second.access_token
        assert first.refresh_token != second.refresh_token
        assert await _stored_hashes(app_context, user_id) == [
            hash_token(first.refresh_token),
            hash_token(second.refresh_token),
        ]


class TestRotate:
    """Rotation is single use; replays revoke everything."""

    async def test_rotate_replaces_token(self, app_context: AppContext):
        user_id = await _create_user(app_context)
        old = await _issue(app_context, user_id)

        new = await _rotate(app_context, old.refresh_token)

        assert new.refresh_token != old.refresh_token
        assert await _stored_hashes(app_context, user_id) == [hash_token(new.refresh_token)]

    async def test_replay_clears_whole_list(self, app_context: AppContext):
        """The clear survives the rollback caused by the raised error."""
        user_id = await _create_user(app_context)
        old = await _issue(app_context, user_id)
        other_device = await _issue(app_context, user_id)
        new = await _rotate(app_context, old.refresh_token)

        with pytest.raises(TokenReplayedError):
            await _rotate(app_context, old.refresh_token)

        assert await _stored_hashes(app_context, user_id) == []
        with pytest.raises(TokenReplayedError):
            await _rotate(app_context, new.refresh_token)
        with pytest.raises(TokenReplayedError):
            await _rotate(app_context, other_device.refresh_token)

    async def test_rotate_rejects_access_token(self, app_context: AppContext):
        user_id = await _create_user(app_context)
        pair = await _issue(app_context, user_id)

        with pytest.raises(TokenMalformedError):
            await _rotate(app_context, pair.access_token)

        assert await _stored_hashes(app_context, user_id) == [hash_token(pair.refresh_token)]

    async def test_rotate_for_deleted_owner(self, app_context: AppContext):
        user_id = await _create_user(app_context)
        pair = await _issue(app_context, user_id)
        async with app_context.db.get_session() as session:
            repo = UserRepository(session)
            await repo.delete(await repo.get_by_id(user_id))

        assert await _stored_hashes(app_context, user_id) == []
        with pytest.raises(TokenOwnerNotFoundError):
            await _rotate(app_context, pair.refresh_token)


class TestRevoke:
    """Logout removes one token; revoke_all removes the list."""

    async def test_revoke_one(self, app_context: AppContext):
        user_id = await _create_user(app_context)
        first = await _issue(app_context, user_id)
        second = await _issue(app_context, user_id)

        async with app_context.db.get_session() as session:
            await TokenService(session, app_context.jwt).revoke(first.refresh_token)

        assert await _stored_hashes(app_context, user_id) == [hash_token(second.refresh_token)]

    async def test_revoke_is_idempotent(self, app_context: AppContext):
        user_id = await _create_user(app_context)
        pair = await _issue(app_context, user_id)

        for _ in range(2):
            async with app_context.db.get_session() as session:
                await TokenService(session, app_context.jwt).revoke(pair.refresh_token)

        assert await _stored_hashes(app_context, user_id) == []

    async def test_revoke_all(self, app_context: AppContext):
        user_id = await _create_user(app_context)
        await _issue(app_context, user_id)
        await _issue(app_context, user_id)

        async with app_context.db.get_session() as session:
            revoked = await TokenService(session, app_context.jwt).revoke_all(user_id)

        assert revoked == 2
        assert await _stored_hashes(app_context, user_id) == []
