# =============================================================================
# AUTH MODULE INITIALIZATION
# =============================================================================
# File: auth/__init__.py
# Description: Auth module exports
#              (FastAPI dependencies live in auth.dependencies)
# =============================================================================

from reelsocial.auth.schemas import (
    AuthContext,
    UserCreate,
    UserUpdate,
    UserResponse,
    LoginRequest,
    LoginResponse,
    GoogleLoginRequest,
    RefreshRequest,
    TokenPairResponse,
    MessageResponse,
)
from reelsocial.auth.repository import UserRepository, RefreshTokenRepository
from reelsocial.auth.tokens import TokenService
from reelsocial.auth.service import AuthService

__all__ = [
    # Schemas
    "AuthContext",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "LoginRequest",
    "LoginResponse",
    "GoogleLoginRequest",
    "RefreshRequest",
    "TokenPairResponse",
    "MessageResponse",

    # Repository
    "UserRepository",
    "RefreshTokenRepository",

    # Services
    "TokenService",
    "AuthService",
]
