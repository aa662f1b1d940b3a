# =============================================================================
# CONTENT MODULE INITIALIZATION
# =============================================================================
# File: content/__init__.py
# Description: Posts, comments and identity propagation
# =============================================================================

from reelsocial.content.repository import (
    BaseRepository,
    PostRepository,
    CommentRepository,
)
from reelsocial.content.propagation import IdentityPropagator, PropagationResult

__all__ = [
    "BaseRepository",
    "PostRepository",
    "CommentRepository",
    "IdentityPropagator",
    "PropagationResult",
]
