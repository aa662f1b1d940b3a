# =============================================================================
# REELSOCIAL BACKEND - CORE EXCEPTIONS MODULE
# =============================================================================
# File: core/exceptions.py
# Description: Custom exception hierarchy for the application
#              Provides granular error handling with HTTP status code mapping
# =============================================================================

from typing import Optional, Dict, Any
from fastapi import HTTPException, status


class AppException(Exception):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    BASE EXCEPTION CLASS                                  │
    │  All custom exceptions inherit from this base class                      │
    │  Provides consistent error structure across the application             │
    └─────────────────────────────────────────────────────────────────────────┘

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        status_code: HTTP status code for API responses
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: str = "APP_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def to_http_exception(self) -> HTTPException:
        """Convert to FastAPI HTTPException for API responses."""
        return HTTPException(
            status_code=self.status_code,
            detail=self.to_dict()
        )


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthError(AppException):
    """
    Raised when authentication fails.

    Examples:
        - Malformed, expired or forged JWT token
        - Refresh token whose owner no longer exists
        - Replayed (already rotated) refresh token
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_FAILED",
        status_code: int = status.HTTP_401_UNAUTHORIZED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status_code,
            details=details
        )


class AccessDeniedError(AuthError):
    """
    Uniform denial returned to clients of protected routes.

    Every token failure collapses into this one error so the response
    carries no hint about why the credential was refused.
    """

    def __init__(self):
        super().__init__(
            message="Access denied",
            error_code="ACCESS_DENIED",
        )


class InvalidCredentialsError(AuthError):
    """Raised when email/password combination is invalid."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid email or password",
            error_code="INVALID_CREDENTIALS",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class GoogleAuthError(AuthError):
    """Raised when a Google ID token cannot be verified."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid Google credential",
            error_code="GOOGLE_AUTH_FAILED",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class TokenError(AuthError):
    """Base class for all token-related errors."""

    def __init__(
        self,
        message: str = "Token error",
        error_code: str = "TOKEN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details
        )


class TokenMalformedError(TokenError):
    """Raised when a token cannot be parsed or carries unexpected claims."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Malformed token",
            error_code="TOKEN_MALFORMED",
            details=details
        )


class TokenExpiredError(TokenError):
    """Raised when JWT token has expired."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Token has expired",
            error_code="TOKEN_EXPIRED",
            details=details
        )


class TokenInvalidSignatureError(TokenError):
    """Raised when JWT signature does not match the configured secret."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid token signature",
            error_code="TOKEN_INVALID_SIGNATURE",
            details=details
        )


class TokenOwnerNotFoundError(TokenError):
    """Raised when a verified token names a user that no longer exists."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid token",
            error_code="TOKEN_OWNER_NOT_FOUND",
            details=details
        )


class TokenReplayedError(TokenError):
    """
    Raised when a verified refresh token is not in its owner's list.

    By the time this is raised every refresh token of the owner has
    already been revoked.
    """

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid token",
            error_code="TOKEN_REPLAYED",
            details=details
        )


# =============================================================================
# AUTHORIZATION EXCEPTIONS
# =============================================================================

class AuthorizationError(AppException):
    """Raised when the caller lacks permission to act on a resource."""

    def __init__(
        self,
        message: str = "Forbidden",
        error_code: str = "AUTHORIZATION_FAILED",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class NotOwnerError(AuthorizationError):
    """Raised when a user tries to modify something that isn't theirs."""

    def __init__(self, resource: str = "resource"):
        super().__init__(
            message=f"You can only modify your own {resource}",
            error_code="NOT_OWNER",
        )


# =============================================================================
# CONFLICT EXCEPTIONS
# =============================================================================

class ConflictError(AppException):
    """Base class for uniqueness violations."""

    def __init__(
        self,
        message: str = "Conflict",
        error_code: str = "CONFLICT",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )


class DuplicateUsernameError(ConflictError):
    """Raised when a username is already taken by another user."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="User with this username already exists",
            error_code="DUPLICATE_USERNAME",
            details=details
        )


class DuplicateEmailError(ConflictError):
    """Raised when an email is already registered by another user."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="User with this email already exists",
            error_code="DUPLICATE_EMAIL",
            details=details
        )


# =============================================================================
# NOT FOUND EXCEPTIONS
# =============================================================================

class NotFoundError(AppException):
    """Base class for missing resources."""

    def __init__(
        self,
        resource: str,
        resource_id: Optional[str] = None,
        error_code: str = "NOT_FOUND",
    ):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' not found"
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_404_NOT_FOUND,
        )


class UserNotFoundError(NotFoundError):
    """Raised when requested user does not exist."""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__("User", user_id, error_code="USER_NOT_FOUND")


class PostNotFoundError(NotFoundError):
    """Raised when requested post does not exist."""

    def __init__(self, post_id: Optional[str] = None):
        super().__init__("Post", post_id, error_code="POST_NOT_FOUND")


class CommentNotFoundError(NotFoundError):
    """Raised when requested comment does not exist."""

    def __init__(self, comment_id: Optional[str] = None):
        super().__init__("Comment", comment_id, error_code="COMMENT_NOT_FOUND")


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigError(AppException):
    """Raised when a required piece of configuration is absent."""

    def __init__(
        self,
        message: str = "Server misconfigured",
        error_code: str = "CONFIG_ERROR",
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class MissingSecretError(ConfigError):
    """Raised when no token signing secret is configured."""

    def __init__(self):
        super().__init__(
            message="Missing auth configuration",
            error_code="MISSING_SECRET",
        )


# =============================================================================
# VALIDATION EXCEPTIONS
# =============================================================================

class ValidationError(AppException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if field and message == "Validation failed":
            message = f"Validation failed for field: {field}"
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            details=details
        )


class PasswordValidationError(ValidationError):
    """Raised when password does not meet requirements."""

    def __init__(
        self,
        message: str = "Password does not meet requirements",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            field="password",
            details=details
        )
        self.error_code = "PASSWORD_VALIDATION_ERROR"


class UploadError(AppException):
    """Raised when an uploaded file is missing, too large or of a wrong type."""

    def __init__(self, message: str = "Error uploading file"):
        super().__init__(
            message=message,
            error_code="UPLOAD_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


# =============================================================================
# AI EXCEPTIONS
# =============================================================================

class AIServiceUnavailableError(AppException):
    """Raised when the AI helper is not configured."""

    def __init__(self):
        super().__init__(
            message="AI service is not configured",
            error_code="AI_UNAVAILABLE",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


class AIProviderError(AppException):
    """Raised when the AI provider call fails or returns garbage."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="AI provider request failed",
            error_code="AI_PROVIDER_ERROR",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details
        )


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================

class DatabaseError(AppException):
    """Base class for database-related errors."""

    def __init__(
        self,
        message: str = "Database error",
        error_code: str = "DATABASE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )
