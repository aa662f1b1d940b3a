# =============================================================================
# REELSOCIAL BACKEND - AUTH SCHEMAS
# =============================================================================
# File: auth/schemas.py
# Description: Pydantic models for request/response validation
#              Type-safe data transfer objects for the user/auth API
# =============================================================================

from typing import Optional
from datetime import datetime
import re

from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict


USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_.-]*$")


def _normalize_username(v: str) -> str:
    if not USERNAME_PATTERN.match(v):
        raise ValueError(
            "Username must start with a letter or digit and contain only "
            "letters, numbers, dots, dashes and underscores"
        )
    return v.lower()


# =============================================================================
# BASE SCHEMAS
# =============================================================================

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )


# =============================================================================
# USER SCHEMAS
# =============================================================================

class UserCreate(BaseSchema):
    """
    Schema for user registration request.

    Validation Rules:
        - email: Valid email format (RFC 5322)
        - username: 1-50 characters, lower-cased
        - password: checked by ``PasswordValidator`` in the service
    """
    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["user@example.com"]
    )
    username: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Unique username",
        examples=["noa"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Password (min 8 chars, requires uppercase, lowercase, digit)",
        examples=["Secret123"]
    )
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _normalize_username(v)


class UserUpdate(BaseSchema):
    """Schema for updating a user profile. Omitted fields stay unchanged."""
    username: Optional[str] = Field(
        None,
        min_length=1,
        max_length=50,
        description="New username"
    )
    email: Optional[EmailStr] = Field(
        None,
        description="New email address"
    )
    description: Optional[str] = Field(None, max_length=2000)
    profile_pic: Optional[str] = Field(
        None,
        alias="profilePic",
        max_length=512,
        description="Stored image name of the new profile picture"
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            return _normalize_username(v)
        return v


class UserResponse(BaseSchema):
    """Public view of a user (never includes the password hash)."""
    id: str = Field(..., serialization_alias="_id", description="User UUID")
    email: str = Field(..., description="Email address")
    username: str = Field(..., description="Username")
    description: str = Field(..., description="About me text")
    profile_pic: str = Field(..., serialization_alias="profilePic")
    created_at: datetime = Field(..., serialization_alias="createdAt")


class ProfilePicResponse(BaseSchema):
    profile_pic: str = Field(..., serialization_alias="profilePic")


# =============================================================================
# AUTHENTICATION SCHEMAS
# =============================================================================

class LoginRequest(BaseSchema):
    """Schema for login request."""
    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["user@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        description="User's password"
    )
    username: Optional[str] = Field(
        None,
        description="Accepted for compatibility, ignored"
    )


class GoogleLoginRequest(BaseSchema):
    """Google Sign-In credential (the ID token from the client library)."""
    credential: str = Field(..., min_length=1)


class LoginResponse(BaseSchema):
    """
    Login result: the public identity plus a fresh token pair.

    Field names on the wire follow the web client (``_id``, ``accessToken``,
    ``refreshToken``).
    """
    id: str = Field(..., serialization_alias="_id")
    email: str
    username: str
    profile_pic: Optional[str] = Field(None, serialization_alias="profilePic")
    access_token: str = Field(..., serialization_alias="accessToken")
    refresh_token: str = Field(..., serialization_alias="refreshToken")


class RefreshRequest(BaseSchema):
    """
    Refresh or logout body. The token may instead arrive as a bearer header.
    """
    refresh_token: Optional[str] = Field(
        None,
        alias="refreshToken",
        description="Refresh token"
    )


class TokenPairResponse(BaseSchema):
    """Schema for token refresh response."""
    access_token: str = Field(..., serialization_alias="accessToken")
    refresh_token: str = Field(..., serialization_alias="refreshToken")
    token_type: str = Field("bearer", serialization_alias="tokenType")
    expires_in: int = Field(..., serialization_alias="expiresIn")


class MessageResponse(BaseSchema):
    """Generic message response."""
    message: str
    success: bool = True


# =============================================================================
# IDENTITY CONTEXT
# =============================================================================

class AuthContext(BaseModel):
    """
    Verified identity of the caller, taken from its access token.

    Handlers get "who is calling" only from here, never from the body.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str
    username: str
    token: str = Field(..., repr=False)
