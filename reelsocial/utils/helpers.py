# =============================================================================
# REELSOCIAL BACKEND - UTILITIES
# =============================================================================
# File: utils/helpers.py
# Description: Common utility functions used across the application
# =============================================================================

from datetime import datetime, timedelta, timezone
import hashlib
import re


_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$")

_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def utc_now() -> datetime:
    """
    Get current UTC timestamp.

    Returns:
        datetime: Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def parse_duration(value: str) -> timedelta:
    """
    Parse a compact duration string into a timedelta.

    Accepts a positive integer followed by an optional unit: ``s``, ``m``,
    ``h``, ``d`` or ``w``. A bare number is read as seconds.

    Args:
        value: Duration such as "15m", "1h" or "7d"

    Returns:
        timedelta: Parsed duration

    Raises:
        ValueError: If the string is not a positive duration

    Example:
        >>> parse_duration("7d")
        datetime.timedelta(days=7)
    """
    match = _DURATION_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    amount = int(match.group(1))
    if amount <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")

    unit = match.group(2).lower()
    return timedelta(**{_DURATION_UNITS[unit]: amount})


def hash_token(token: str) -> str:
    """
    Create SHA-256 hash of a token for storage.

    Args:
        token: Raw token string

    Returns:
        str: Hex-encoded digest
    """
    return hashlib.sha256(token.encode()).hexdigest()


def mask_email(email: str) -> str:
    """
    Mask email address for display/logging.

    Example: test@example.com -> t***@example.com
    """
    if "@" not in email:
        return email

    local, domain = email.split("@", 1)
    if len(local) <= 1:
        return f"*@{domain}"
    return f"{local[0]}***@{domain}"


def slugify_username(value: str) -> str:
    """
    Reduce a display name or email local part to a valid username.

    Keeps letters, digits and underscores; guarantees a leading letter.
    """
    slug = re.sub(r"[^a-z0-9_]+", "_", value.strip().lower()).strip("_")
    if not slug or not slug[0].isalpha():
        slug = f"user_{slug}" if slug else "user"
    return slug[:50]
