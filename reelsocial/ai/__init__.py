# =============================================================================
# AI MODULE INITIALIZATION
# =============================================================================

from reelsocial.ai.service import AIService, MOVIE_SUBJECTS
from reelsocial.ai.scheduler import AIPostScheduler, seconds_until_next_run

__all__ = [
    "AIService",
    "MOVIE_SUBJECTS",
    "AIPostScheduler",
    "seconds_until_next_run",
]
