# =============================================================================
# REELSOCIAL BACKEND - SECURITY TESTS
# =============================================================================
# File: tests/test_security.py
# Description: Unit tests for password hashing, JWT handling and helpers
# =============================================================================

from datetime import timedelta

import pytest
from jose import jwt

from reelsocial.core.config import Settings
from reelsocial.core.exceptions import (
    MissingSecretError,
    PasswordValidationError,
    TokenExpiredError,
    TokenInvalidSignatureError,
    TokenMalformedError,
)
from reelsocial.core.security import JWTManager, PasswordManager, PasswordValidator
from reelsocial.utils.helpers import hash_token, parse_duration, slugify_username, utc_now


class TestPasswordManager:
    """Test suite for PasswordManager."""

    def test_hash_password_argon2(self, settings: Settings):
        """New hashes use Argon2id."""
        pm = PasswordManager(settings)

        hashed = pm.hash_password("Secret123")

        assert hashed != "Secret123"
        assert hashed.startswith("$argon2id$")

    def test_verify_password_correct(self, settings: Settings):
        pm = PasswordManager(settings)
        hashed = pm.hash_password("Secret123")

        is_valid, needs_rehash = pm.verify_password("Secret123", hashed)

        assert is_valid is True
        assert needs_rehash is False

    def test_verify_password_incorrect(self, settings: Settings):
        pm = PasswordManager(settings)
        hashed = pm.hash_password("Secret123")

        is_valid, _ = pm.verify_password("Secret124", hashed)

        assert is_valid is False

    def test_same_password_different_hashes(self, settings: Settings):
        """Salting makes every hash unique."""
        pm = PasswordManager(settings)

        assert pm.hash_password("Secret123") != pm.hash_password("Secret123")

    def test_legacy_bcrypt_hash_verifies_and_needs_rehash(self, settings: Settings):
        """Imported bcrypt hashes keep working and get upgraded."""
        legacy = PasswordManager(settings.model_copy(update={"password_hash_algorithm": "bcrypt"}))
        bcrypt_hash = legacy.hash_password("Secret123")
        assert bcrypt_hash.startswith("$2")

        is_valid, needs_rehash = PasswordManager(settings).verify_password(
            "Secret123", bcrypt_hash
        )

        assert is_valid is True
        assert needs_rehash is True

    def test_unusable_password_never_verifies(self, settings: Settings):
        pm = PasswordManager(settings)

        hashed = pm.unusable_password()

        assert pm.verify_password("", hashed) == (False, False)

    def test_unknown_hash_format(self, settings: Settings):
        assert PasswordManager(settings).verify_password("x", "plain") == (False, False)


class TestJWTManager:
    """Test suite for JWTManager."""

    def test_create_token_pair(self, settings: Settings):
        manager = JWTManager(settings)

        pair = manager.create_token_pair("user-1", "noa")

        assert pair.access_token != pair.refresh_token
        assert pair.token_type == "bearer"
        assert pair.expires_in == 3600

    def test_pairs_minted_back_to_back_differ(self, settings: Settings):
        """The per-token nonce keeps same-second tokens apart."""
        manager = JWTManager(settings)

        first = manager.create_token_pair("user-1", "noa")
        second = manager.create_token_pair("user-1", "noa")

        assert first.access_token != second.access_token
        assert first.refresh_token != second.refresh_token

    def test_verify_round_trip_claims(self, settings: Settings):
        manager = JWTManager(settings)
        pair = manager.create_token_pair("user-1", "noa")

        payload = manager.verify_token(pair.refresh_token, expected_type="refresh")

        assert payload.sub == "user-1"
        assert payload.username == "noa"
        assert payload.type == "refresh"
        assert payload.exp - payload.iat == timedelta(days=7)

    def test_wrong_token_type_is_malformed(self, settings: Settings):
        manager = JWTManager(settings)
        pair = manager.create_token_pair("user-1", "noa")

        with pytest.raises(TokenMalformedError):
            manager.verify_token(pair.refresh_token, expected_type="access")

    def test_expired_token(self, settings: Settings):
        now = utc_now()
        token = jwt.encode(
            {
                "sub": "user-1",
                "username": "noa",
                "type": "access",
                "nonce": "abc",
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
            },
            settings.token_secret,
            algorithm="HS256",
        )

        with pytest.raises(TokenExpiredError):
            JWTManager(settings).verify_token(token)

    def test_foreign_signature(self, settings: Settings):
        other = JWTManager(settings.model_copy(update={"token_secret": "another-secret-value-0123456789"}))
        token = other.create_token("user-1", "noa", "access")

        with pytest.raises(TokenInvalidSignatureError):
            JWTManager(settings).verify_token(token)

    def test_garbage_token(self, settings: Settings):
        with pytest.raises(TokenMalformedError):
            JWTManager(settings).verify_token("not-a-jwt")

    def test_unknown_claim_rejected(self, settings: Settings):
        now = utc_now()
        token = jwt.encode(
            {
                "sub": "user-1",
                "username": "noa",
                "type": "access",
                "nonce": "abc",
                "iat": now,
                "exp": now + timedelta(hours=1),
                "admin": True,
            },
            settings.token_secret,
            algorithm="HS256",
        )

        with pytest.raises(TokenMalformedError):
            JWTManager(settings).verify_token(token)

    def test_missing_claim_rejected(self, settings: Settings):
        now = utc_now()
        token = jwt.encode(
            {"sub": "user-1", "type": "access", "iat": now, "exp": now + timedelta(hours=1)},
            settings.token_secret,
            algorithm="HS256",
        )

        with pytest.raises(TokenMalformedError):
            JWTManager(settings).verify_token(token)

    def test_missing_secret_fails_closed(self, settings: Settings):
        configured = JWTManager(settings).create_token("user-1", "noa", "access")
        manager = JWTManager(settings.model_copy(update={"token_secret": None}))

        assert manager.is_configured is False
        with pytest.raises(MissingSecretError):
            manager.create_token_pair("user-1", "noa")
        with pytest.raises(MissingSecretError):
            manager.verify_token(configured)

    def test_blank_secret_counts_as_missing(self):
        assert Settings(_env_file=None, token_secret="   ").token_secret is None


class TestPasswordValidator:
    """Test suite for password policy."""

    def test_valid_password(self):
        is_valid, errors = PasswordValidator.validate("Secret123")

        assert is_valid is True
        assert errors == []

    @pytest.mark.parametrize(
        "password",
        ["Sh0rt", "alllowercase1", "ALLUPPERCASE1", "NoDigitsHere"],
    )
    def test_weak_passwords(self, password: str):
        with pytest.raises(PasswordValidationError):
            PasswordValidator.ensure_valid(password)


class TestHelpers:
    """Test suite for small helpers."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("30s", timedelta(seconds=30)),
            ("15m", timedelta(minutes=15)),
            ("1h", timedelta(hours=1)),
            ("7d", timedelta(days=7)),
            ("2w", timedelta(weeks=2)),
            ("90", timedelta(seconds=90)),
        ],
    )
    def test_parse_duration(self, value: str, expected: timedelta):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "0h", "-1d", "5y"])
    def test_parse_duration_rejects(self, value: str):
        with pytest.raises(ValueError):
            parse_duration(value)

    def test_invalid_duration_setting(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, token_expires="soon")

    def test_hash_token_is_stable_sha256(self):
        assert hash_token("abc") == hash_token("abc")
        assert len(hash_token("abc")) == 64

    def test_slugify_username(self):
        assert slugify_username("Noa Levi") == "noa_levi"
        assert slugify_username("123") == "user_123"
        assert slugify_username("!!!") == "user"
