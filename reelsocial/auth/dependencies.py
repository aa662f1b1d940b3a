# =============================================================================
# REELSOCIAL BACKEND - AUTH DEPENDENCIES
# =============================================================================
# File: auth/dependencies.py
# Description: FastAPI dependencies for authentication and service wiring
#              The request gate every protected route declares
# =============================================================================

import logging
from typing import Optional, Annotated, AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from reelsocial.auth.schemas import AuthContext, RefreshRequest
from reelsocial.auth.service import AuthService
from reelsocial.content.service import PostService, CommentService
from reelsocial.context import AppContext
from reelsocial.core.exceptions import (
    AccessDeniedError,
    MissingSecretError,
    TokenError,
    TokenMalformedError,
)


logger = logging.getLogger(__name__)


# =============================================================================
# SECURITY SCHEME
# =============================================================================

bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="JWT access token",
    auto_error=False,
)

# Older clients send "Authorization: JWT <token>"
ACCEPTED_SCHEMES = {"bearer", "jwt"}


# =============================================================================
# CONTEXT & DATABASE DEPENDENCIES
# =============================================================================

def get_app_context(request: Request) -> AppContext:
    return request.app.state.context


AppContextDep = Annotated[AppContext, Depends(get_app_context)]


async def get_db_session_dep(
    context: AppContextDep,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for database session.

    Yields:
        AsyncSession: Database session with auto-commit/rollback
    """
    async with context.db.get_session() as session:
        yield session


DBSession = Annotated[AsyncSession, Depends(get_db_session_dep)]


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

async def get_auth_service(
    session: DBSession,
    context: AppContextDep,
) -> AuthService:
    return AuthService(
        session,
        jwt_manager=context.jwt,
        password_manager=context.passwords,
        google_verifier=context.google,
        reserved_username=context.settings.ai_username,
        reserved_email=context.settings.ai_author_email,
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def get_post_service(session: DBSession) -> PostService:
    return PostService(session)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


async def get_comment_service(session: DBSession) -> CommentService:
    return CommentService(session)


CommentServiceDep = Annotated[CommentService, Depends(get_comment_service)]


# =============================================================================
# TOKEN EXTRACTION
# =============================================================================

def _extract_token(request: Request) -> Optional[str]:
    """
    Token from ``Authorization: Bearer <token>`` (or ``JWT <token>``).

    The scheme word is matched case-insensitively.
    """
    header = request.headers.get("Authorization")
    if not header:
        return None

    scheme, _, token = header.strip().partition(" ")
    token = token.strip()
    if scheme.lower() not in ACCEPTED_SCHEMES or not token:
        return None
    return token


# =============================================================================
# REQUEST GATE
# =============================================================================

async def get_auth_context(
    request: Request,
    context: AppContextDep,
    _credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthContext:
    """
    Authenticate the request with its access token.

    Any failure (missing header, bad token, missing server secret) ends in
    the same ``AccessDeniedError``. The actual cause is only logged.

    Returns:
        AuthContext: Verified caller identity
    """
    token = _extract_token(request)
    if token is None:
        raise AccessDeniedError()

    try:
        payload = context.jwt.verify_token(token, expected_type="access")
    except (TokenError, MissingSecretError) as e:
        logger.debug("Access denied for %s: %s", request.url.path, e.error_code)
        raise AccessDeniedError()

    return AuthContext(user_id=payload.sub, username=payload.username, token=token)


AuthContextDep = Annotated[AuthContext, Depends(get_auth_context)]


async def get_refresh_token(
    request: Request,
    body: Optional[RefreshRequest] = None,
) -> str:
    """
    Refresh token for ``/user/refresh`` and ``/user/logout``.

    Read from the JSON body (``refreshToken``) or, failing that, from the
    Authorization header.

    Raises:
        TokenMalformedError: If neither carries a token
    """
    if body is not None and body.refresh_token:
        return body.refresh_token

    token = _extract_token(request)
    if token is None:
        raise TokenMalformedError(details={"reason": "Refresh token missing"})
    return token


RefreshTokenDep = Annotated[str, Depends(get_refresh_token)]
