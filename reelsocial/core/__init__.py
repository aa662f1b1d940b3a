# =============================================================================
# CORE MODULE INITIALIZATION
# =============================================================================
# File: core/__init__.py
# Description: Core module exports for centralized access
# =============================================================================

from reelsocial.core.config import get_settings, Settings
from reelsocial.core.exceptions import (
    AppException,
    AuthError,
    AccessDeniedError,
    TokenError,
    ConflictError,
    NotFoundError,
    ConfigError,
    MissingSecretError,
)
from reelsocial.core.security import (
    PasswordManager,
    JWTManager,
    PasswordValidator,
    TokenPayload,
    TokenPair,
)

__all__ = [
    # Config
    "get_settings",
    "Settings",

    # Exceptions
    "AppException",
    "AuthError",
    "AccessDeniedError",
    "TokenError",
    "ConflictError",
    "NotFoundError",
    "ConfigError",
    "MissingSecretError",

    # Security
    "PasswordManager",
    "JWTManager",
    "PasswordValidator",
    "TokenPayload",
    "TokenPair",
]
