# =============================================================================
# STORAGE MODULE INITIALIZATION
# =============================================================================

from reelsocial.storage.files import ImageStorage, ALLOWED_CONTENT_TYPES

__all__ = ["ImageStorage", "ALLOWED_CONTENT_TYPES"]
