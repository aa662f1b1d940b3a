# =============================================================================
# REELSOCIAL BACKEND - APPLICATION CONTEXT
# =============================================================================
# File: context.py
# Description: Explicitly constructed container of process-wide services
#              with defined startup and shutdown
# =============================================================================

import logging
from typing import Optional

from reelsocial.ai.scheduler import AIPostScheduler
from reelsocial.ai.service import AIService
from reelsocial.auth.google import GoogleTokenVerifier
from reelsocial.core.config import Settings
from reelsocial.core.security import JWTManager, PasswordManager
from reelsocial.db.base import BaseDBAdapter
from reelsocial.db.factory import create_db_adapter
from reelsocial.storage.files import ImageStorage


logger = logging.getLogger(__name__)


class AppContext:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    APPLICATION CONTEXT                                   │
    │  Everything that lives as long as the process, in one place             │
    └─────────────────────────────────────────────────────────────────────────┘

    Built once per application from ``Settings`` and stored on
    ``app.state.context``. Request dependencies read their collaborators
    from here; nothing is kept in module globals.

    Any collaborator can be passed in to replace the default one (tests
    swap in fakes for the AI provider and Google verification).
    """

    def __init__(
        self,
        settings: Settings,
        db: Optional[BaseDBAdapter] = None,
        ai: Optional[AIService] = None,
        google: Optional[GoogleTokenVerifier] = None,
    ):
        self.settings = settings
        self.db = db or create_db_adapter(settings)
        self.jwt = JWTManager(settings)
        self.passwords = PasswordManager(settings)
        self.storage = ImageStorage(settings.upload_path, settings.max_upload_bytes)
        self.ai = ai or AIService.from_settings(settings)
        self.google = google or GoogleTokenVerifier(settings.google_client_id)
        self.scheduler = AIPostScheduler(
            db=self.db,
            ai=self.ai,
            storage=self.storage,
            password_manager=self.passwords,
            ai_username=settings.ai_username,
            ai_email=settings.ai_author_email,
            hour_utc=settings.ai_post_hour_utc,
            enabled=settings.ai_posts_enabled,
        )

    async def startup(self) -> None:
        """Connect the database, create tables and start background jobs."""
        if not self.jwt.is_configured:
            logger.error("TOKEN_SECRET is not set: login and protected routes will fail")

        await self.db.connect()
        await self.db.create_tables()
        self.storage.ensure_directory()
        await self.scheduler.start()
        logger.info("Application context started")

    async def shutdown(self) -> None:
        """Stop background jobs and release connections."""
        await self.scheduler.stop()
        await self.ai.close()
        await self.db.disconnect()
        logger.info("Application context stopped")
