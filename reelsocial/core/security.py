# =============================================================================
# REELSOCIAL BACKEND - CORE SECURITY MODULE
# =============================================================================
# File: core/security.py
# Description: Security utilities including password hashing and JWT management
#              Argon2id/Bcrypt password hashing, HMAC-signed access/refresh JWTs
# =============================================================================

from typing import Optional, Literal
from datetime import datetime, timezone
import secrets

from passlib.context import CryptContext
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, InvalidHash, VerificationError
from jose import jwt, JWTError, ExpiredSignatureError
from jose.exceptions import JWTClaimsError
from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError

from reelsocial.core.config import Settings
from reelsocial.core.exceptions import (
    MissingSecretError,
    TokenExpiredError,
    TokenMalformedError,
    TokenInvalidSignatureError,
    PasswordValidationError,
)
from reelsocial.utils.helpers import parse_duration, utc_now


TokenType = Literal["access", "refresh"]


# =============================================================================
# PASSWORD HASHER CONFIGURATION
# =============================================================================

class PasswordManager:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    PASSWORD HASHING MANAGER                              │
    │  Argon2id for new passwords, Bcrypt accepted for legacy hashes         │
    └─────────────────────────────────────────────────────────────────────────┘

    Accounts imported from the previous deployment carry bcrypt hashes
    (``$2b$...``); they keep verifying and are flagged for rehash.
    """

    def __init__(self, settings: Settings):
        self._argon2_hasher = PasswordHasher(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
            hash_len=32,
            salt_len=16,
        )

        self._bcrypt_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=settings.bcrypt_rounds,
        )

        self._preferred_algorithm = settings.password_hash_algorithm

    def hash_password(self, password: str) -> str:
        """
        Hash a password using the configured algorithm.

        Example:
            >>> hashed = pm.hash_password("SecurePassword123")
            >>> hashed.startswith("$argon2id$")
            True
        """
        if self._preferred_algorithm == "argon2":
            return self._argon2_hasher.hash(password)
        return self._bcrypt_context.hash(password)

    def verify_password(
        self,
        plain_password: str,
        hashed_password: str
    ) -> tuple[bool, bool]:
        """
        Verify a password against its hash with algorithm detection.

        Returns:
            tuple[bool, bool]: (is_valid, needs_rehash)
        """
        if hashed_password.startswith("$argon2"):
            try:
                self._argon2_hasher.verify(hashed_password, plain_password)
            except (VerifyMismatchError, VerificationError, InvalidHash):
                return False, False
            needs_rehash = (
                self._preferred_algorithm != "argon2"
                or self._argon2_hasher.check_needs_rehash(hashed_password)
            )
            return True, needs_rehash

        if hashed_password.startswith("$2"):
            try:
                is_valid = self._bcrypt_context.verify(plain_password, hashed_password)
            except ValueError:
                return False, False
            return is_valid, is_valid and self._preferred_algorithm == "argon2"

        # Unknown hash format (e.g. the unusable marker of Google accounts)
        return False, False

    def unusable_password(self) -> str:
        """Hash of a random secret nobody knows, for password-less accounts."""
        return self.hash_password(secrets.token_urlsafe(32))


# =============================================================================
# JWT TOKEN PAYLOAD MODELS
# =============================================================================

class TokenPayload(BaseModel):
    """
    Decoded JWT claims.

    Unknown claims are rejected, as are tokens missing any of these.

    Attributes:
        sub: Subject (user ID)
        username: Subject's username at issue time
        type: Token type (access or refresh)
        nonce: Random value making every token unique
        iat: Issued at timestamp
        exp: Expiration timestamp
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    sub: str
    username: str
    type: TokenType
    nonce: str
    iat: datetime
    exp: datetime


class TokenPair(BaseModel):
    """Token pair minted together for one subject."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


# =============================================================================
# JWT TOKEN MANAGER
# =============================================================================

class JWTManager:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    JWT TOKEN MANAGER                                     │
    │  Stateless creation and validation of access and refresh tokens        │
    └─────────────────────────────────────────────────────────────────────────┘

    Token Types:
        - Access Token:  Short-lived (TOKEN_EXPIRES, default 1h)
        - Refresh Token: Long-lived (REFRESH_TOKEN_EXPIRES, default 7d)

    Both are signed with the same secret. Each token carries its own random
    nonce, so two tokens minted in the same second never collide.
    Persisting refresh tokens is the caller's job.
    """

    def __init__(self, settings: Settings):
        self._secret_key = settings.token_secret
        self._algorithm = settings.jwt_algorithm
        self._access_token_expire = parse_duration(settings.token_expires)
        self._refresh_token_expire = parse_duration(settings.refresh_token_expires)

    @property
    def is_configured(self) -> bool:
        return bool(self._secret_key)

    @property
    def refresh_token_lifetime(self):
        return self._refresh_token_expire

    def _require_secret(self) -> str:
        if not self._secret_key:
            raise MissingSecretError()
        return self._secret_key

    def create_token(
        self,
        user_id: str,
        username: str,
        token_type: TokenType,
    ) -> str:
        """
        Create a signed JWT token.

        Args:
            user_id: User identifier (subject)
            username: Username embedded for downstream handlers
            token_type: Type of token to create

        Returns:
            str: Encoded JWT token

        Raises:
            MissingSecretError: If no signing secret is configured
        """
        secret = self._require_secret()
        now = utc_now()

        if token_type == "access":
            expires_delta = self._access_token_expire
        else:
            expires_delta = self._refresh_token_expire

        claims = {
            "sub": user_id,
            "username": username,
            "type": token_type,
            "nonce": secrets.token_hex(16),
            "iat": now,
            "exp": now + expires_delta,
        }

        return jwt.encode(claims, secret, algorithm=self._algorithm)

    def create_token_pair(self, user_id: str, username: str) -> TokenPair:
        """
        Create a complete token pair (access + refresh).

        Raises:
            MissingSecretError: If no signing secret is configured
        """
        self._require_secret()

        return TokenPair(
            access_token=self.create_token(user_id, username, "access"),
            refresh_token=self.create_token(user_id, username, "refresh"),
            token_type="bearer",
            expires_in=int(self._access_token_expire.total_seconds()),
        )

    def decode_token(self, token: str) -> TokenPayload:
        """
        Decode and validate a JWT token.

        Raises:
            MissingSecretError: If no signing secret is configured
            TokenExpiredError: If token has expired
            TokenInvalidSignatureError: If the signature does not verify
            TokenMalformedError: If token is unparseable or its claims are off
        """
        secret = self._require_secret()

        try:
            claims = jwt.decode(token, secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTClaimsError as e:
            raise TokenMalformedError(details={"error": str(e)})
        except JWTError as e:
            if self._is_well_formed(token):
                raise TokenInvalidSignatureError()
            raise TokenMalformedError(details={"error": str(e)})

        try:
            return TokenPayload(
                **{
                    **claims,
                    "iat": datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
                    "exp": datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
                }
            )
        except (KeyError, TypeError, PydanticValidationError) as e:
            raise TokenMalformedError(details={"error": str(e)})

    def verify_token(
        self,
        token: str,
        expected_type: Optional[TokenType] = None,
    ) -> TokenPayload:
        """
        Verify a token and optionally check its type.

        A token of the wrong type is reported as malformed.
        """
        payload = self.decode_token(token)

        if expected_type and payload.type != expected_type:
            raise TokenMalformedError(
                details={"expected_type": expected_type, "actual_type": payload.type}
            )

        return payload

    @staticmethod
    def _is_well_formed(token: str) -> bool:
        """True if the token parses as a JWT, ignoring its signature."""
        try:
            jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError:
            return False
        return True


# =============================================================================
# PASSWORD VALIDATION
# =============================================================================

class PasswordValidator:
    """
    Password strength validation.

    Rules:
        - Minimum 8 characters
        - Maximum 128 characters
        - At least one uppercase letter
        - At least one lowercase letter
        - At least one digit
    """

    @classmethod
    def validate(cls, password: str) -> tuple[bool, list[str]]:
        errors = []

        if len(password) < 8:
            errors.append("Password must be at least 8 characters long")

        if len(password) > 128:
            errors.append("Password must not exceed 128 characters")

        if not any(c.isupper() for c in password):
            errors.append("Password must contain at least one uppercase letter")

        if not any(c.islower() for c in password):
            errors.append("Password must contain at least one lowercase letter")

        if not any(c.isdigit() for c in password):
            errors.append("Password must contain at least one digit")

        return len(errors) == 0, errors

    @classmethod
    def ensure_valid(cls, password: str) -> None:
        """
        Validate password and raise exception if invalid.

        Raises:
            PasswordValidationError: If password doesn't meet requirements
        """
        is_valid, errors = cls.validate(password)
        if not is_valid:
            raise PasswordValidationError(
                message="; ".join(errors),
                details={"validation_errors": errors}
            )
