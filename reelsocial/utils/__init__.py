# =============================================================================
# UTILS MODULE INITIALIZATION
# =============================================================================
# File: utils/__init__.py
# Description: Utils module exports
# =============================================================================

from reelsocial.utils.helpers import (
    utc_now,
    parse_duration,
    hash_token,
    mask_email,
    slugify_username,
)

__all__ = [
    "utc_now",
    "parse_duration",
    "hash_token",
    "mask_email",
    "slugify_username",
]
