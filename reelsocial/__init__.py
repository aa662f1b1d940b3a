# =============================================================================
# REELSOCIAL BACKEND
# =============================================================================
# Movie-review social network API: accounts with rotating refresh tokens,
# posts, comments, likes and an AI helper.
# =============================================================================

__version__ = "1.0.0"
