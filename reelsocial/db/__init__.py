# =============================================================================
# DATABASE MODULE INITIALIZATION
# =============================================================================
# File: db/__init__.py
# Description: Database module exports
# =============================================================================

from reelsocial.db.base import Base, BaseDBAdapter
from reelsocial.db.factory import DatabaseType, create_db_adapter
from reelsocial.db.models import (
    User,
    RefreshToken,
    Post,
    PostLike,
    Comment,
)

__all__ = [
    "Base",
    "BaseDBAdapter",
    "DatabaseType",
    "create_db_adapter",
    "User",
    "RefreshToken",
    "Post",
    "PostLike",
    "Comment",
]
