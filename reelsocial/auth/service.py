# =============================================================================
# REELSOCIAL BACKEND - AUTH SERVICE
# =============================================================================
# File: auth/service.py
# Description: Business logic layer for accounts and sessions
#              Orchestrates repositories, token service and propagation
# =============================================================================

import logging
from typing import Optional, List

from sqlalchemy.ext.asyncio import AsyncSession

from reelsocial.auth.google import GoogleTokenVerifier
from reelsocial.auth.repository import UserRepository
from reelsocial.auth.schemas import (
    UserCreate,
    UserUpdate,
    UserResponse,
    LoginResponse,
    TokenPairResponse,
)
from reelsocial.auth.tokens import TokenService
from reelsocial.content.propagation import IdentityPropagator
from reelsocial.core.security import JWTManager, PasswordManager, PasswordValidator, TokenPair
from reelsocial.core.exceptions import (
    InvalidCredentialsError,
    DuplicateEmailError,
    DuplicateUsernameError,
    UserNotFoundError,
    NotOwnerError,
    GoogleAuthError,
)
from reelsocial.db.models import User
from reelsocial.utils.helpers import mask_email, slugify_username


logger = logging.getLogger(__name__)


class AuthService:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    AUTHENTICATION SERVICE                                │
    │  Business logic layer handling accounts and token sessions              │
    │  Coordinates repositories, token service and identity propagation      │
    └─────────────────────────────────────────────────────────────────────────┘

    Responsibilities:
        - Registration with uniqueness and password checks
        - Password and Google login
        - Token refresh (rotation) and logout
        - Profile updates that rename or delete an identity
    """

    def __init__(
        self,
        session: AsyncSession,
        jwt_manager: JWTManager,
        password_manager: PasswordManager,
        google_verifier: Optional[GoogleTokenVerifier] = None,
        reserved_username: Optional[str] = None,
        reserved_email: Optional[str] = None,
    ):
        self._session = session
        self._passwords = password_manager
        self._google = google_verifier
        self._user_repo = UserRepository(session)
        self._tokens = TokenService(session, jwt_manager)
        self._propagator = IdentityPropagator(session)
        self._reserved_username = reserved_username.lower() if reserved_username else None
        self._reserved_email = reserved_email.lower() if reserved_email else None

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    async def register(self, user_data: UserCreate) -> UserResponse:
        """
        Register a new user.

        Raises:
            DuplicateEmailError: If the email is taken
            DuplicateUsernameError: If the username is taken
            PasswordValidationError: If password doesn't meet requirements
        """
        if await self._email_taken(user_data.email):
            raise DuplicateEmailError()

        if await self._username_taken(user_data.username):
            raise DuplicateUsernameError()

        PasswordValidator.ensure_valid(user_data.password)

        user = await self._user_repo.create(
            email=user_data.email,
            username=user_data.username,
            password_hash=self._passwords.hash_password(user_data.password),
            description=user_data.description,
        )

        logger.info("Registered user %s (%s)", user.id, mask_email(user.email))
        return UserResponse.model_validate(user)

    # =========================================================================
    # LOGIN
    # =========================================================================

    async def login(self, email: str, password: str) -> LoginResponse:
        """
        Authenticate with email and password and start a token session.

        Unknown email and wrong password fail identically.

        Raises:
            InvalidCredentialsError: Invalid email/password
            MissingSecretError: If no signing secret is configured
        """
        user = await self._user_repo.get_by_email(email)
        if user is None:
            logger.info("Login failed for %s: unknown email", mask_email(email))
            raise InvalidCredentialsError()

        is_valid, needs_rehash = self._passwords.verify_password(
            password, user.password_hash
        )
        if not is_valid:
            logger.info("Login failed for user %s: wrong password", user.id)
            raise InvalidCredentialsError()

        if needs_rehash:
            await self._user_repo.update_password(
                user, self._passwords.hash_password(password)
            )

        return await self._start_session(user)

    async def google_login(self, credential: str) -> LoginResponse:
        """
        Log in with a Google ID token, creating the account on first use.

        Raises:
            GoogleAuthError: If the credential does not verify
            MissingSecretError: If no signing secret is configured
        """
        if self._google is None:
            raise GoogleAuthError(details={"reason": "Google sign-in is not configured"})

        identity = await self._google.verify(credential)

        user = await self._user_repo.get_by_email(identity.email)
        if user is None:
            username = await self._available_username(
                identity.name or identity.email.split("@", 1)[0]
            )
            user = await self._user_repo.create(
                email=identity.email,
                username=username,
                password_hash=self._passwords.unusable_password(),
            )
            if identity.picture:
                await self._user_repo.update(user, profile_pic=identity.picture)
            logger.info("Created user %s from Google sign-in", user.id)

        return await self._start_session(user)

    async def _start_session(self, user: User) -> LoginResponse:
        pair = await self._tokens.issue(user)
        logger.info("User %s logged in", user.id)
        return LoginResponse(
            id=user.id,
            email=user.email,
            username=user.username,
            profile_pic=user.profile_pic,
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    async def _available_username(self, preferred: str) -> str:
        """``preferred`` slugified, with a numeric suffix if it is taken."""
        base = slugify_username(preferred)
        candidate = base
        suffix = 1
        while await self._username_taken(candidate):
            suffix += 1
            candidate = f"{base[:45]}{suffix}"
        return candidate

    # =========================================================================
    # TOKEN SESSION
    # =========================================================================

    async def refresh(self, refresh_token: str) -> TokenPairResponse:
        """
        Rotate a refresh token.

        Raises:
            TokenError: Invalid, expired, orphaned or replayed token
        """
        pair = await self._tokens.rotate(refresh_token)
        return self._pair_response(pair)

    async def logout(self, refresh_token: str) -> None:
        """Revoke one refresh token."""
        await self._tokens.revoke(refresh_token)

    @staticmethod
    def _pair_response(pair: TokenPair) -> TokenPairResponse:
        return TokenPairResponse(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
        )

    # =========================================================================
    # USER OPERATIONS
    # =========================================================================

    async def get_user(self, user_id: str) -> UserResponse:
        return UserResponse.model_validate(await self._require_user(user_id))

    async def list_users(self, skip: int = 0, limit: int = 50) -> List[UserResponse]:
        users = await self._user_repo.list_users(skip=skip, limit=limit)
        return [UserResponse.model_validate(u) for u in users]

    async def get_profile_pic(self, user_id: str) -> str:
        return (await self._require_user(user_id)).profile_pic

    async def update_user(
        self,
        caller_id: str,
        user_id: str,
        update_data: UserUpdate,
    ) -> UserResponse:
        """
        Update a profile. A username change is carried over to every post
        and comment of the user in the same transaction.

        Raises:
            NotOwnerError: If the caller is not this user
            UserNotFoundError: If user doesn't exist
            DuplicateUsernameError: If the new username belongs to someone else
            DuplicateEmailError: If the new email belongs to someone else
        """
        if caller_id != user_id:
            raise NotOwnerError("account")

        user = await self._require_user(user_id)
        old_username = user.username

        if update_data.username and await self._username_taken(
            update_data.username, exclude_id=user.id
        ):
            raise DuplicateUsernameError()

        if update_data.email and await self._email_taken(
            update_data.email, exclude_id=user.id
        ):
            raise DuplicateEmailError()

        await self._user_repo.update(
            user,
            username=update_data.username,
            email=update_data.email,
            description=update_data.description,
            profile_pic=update_data.profile_pic,
        )

        if user.username != old_username or update_data.profile_pic is not None:
            await self._propagator.rename(
                old_username,
                user.username,
                profile_pic=update_data.profile_pic,
            )

        return UserResponse.model_validate(user)

    async def update_profile_pic(
        self,
        caller_id: str,
        user_id: str,
        profile_pic: str,
    ) -> UserResponse:
        """Set a new profile picture and copy it onto the user's posts."""
        if caller_id != user_id:
            raise NotOwnerError("account")

        user = await self._require_user(user_id)
        await self._user_repo.update(user, profile_pic=profile_pic)
        await self._propagator.update_profile_pic(user.username, profile_pic)
        return UserResponse.model_validate(user)

    async def delete_user(self, caller_id: str, user_id: str) -> None:
        """
        Delete an account with all its posts, comments and refresh tokens.

        Raises:
            NotOwnerError: If the caller is not this user
            UserNotFoundError: If user doesn't exist
        """
        if caller_id != user_id:
            raise NotOwnerError("account")

        user = await self._require_user(user_id)
        await self._propagator.delete_identity(user.username)
        await self._tokens.revoke_all(user.id)
        await self._user_repo.delete(user)
        logger.info("Deleted user %s", user_id)

    async def _require_user(self, user_id: str) -> User:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def _username_taken(self, username: str, exclude_id: Optional[str] = None) -> bool:
        """Taken by another account, or reserved for the AI author."""
        if username.lower() == self._reserved_username:
            return True
        return await self._user_repo.exists_username(username, exclude_id=exclude_id)

    async def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        if email.lower() == self._reserved_email:
            return True
        return await self._user_repo.exists_email(email, exclude_id=exclude_id)
