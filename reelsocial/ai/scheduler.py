# =============================================================================
# REELSOCIAL BACKEND - AI POST SCHEDULER
# =============================================================================
# File: ai/scheduler.py
# Description: Daily background job publishing an AI-generated movie post
#              Single asyncio task owned by the application context
# =============================================================================

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from reelsocial.ai.service import AIService
from reelsocial.auth.repository import UserRepository
from reelsocial.content.repository import PostRepository
from reelsocial.core.security import PasswordManager
from reelsocial.db.base import BaseDBAdapter
from reelsocial.db.models import Post, User
from reelsocial.storage.files import ImageStorage
from reelsocial.utils.helpers import utc_now


logger = logging.getLogger(__name__)


def seconds_until_next_run(now: datetime, hour_utc: int) -> float:
    """
    Seconds from ``now`` to the next ``hour_utc``:00:00 UTC.

    Exactly on the hour counts as the next day.
    """
    target = now.replace(hour=hour_utc, minute=0, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class AIPostScheduler:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    AI POST SCHEDULER                                     │
    │  Once a day: pick a movie, write a caption, draw an image, post it      │
    └─────────────────────────────────────────────────────────────────────────┘

    Lifecycle:
        start()     - spawn the loop task (no-op when disabled)
        stop()      - cancel it and wait for it to finish
        run_once()  - one job execution, usable without the loop

    A failing run is logged and the loop waits for the next day.
    """

    def __init__(
        self,
        db: BaseDBAdapter,
        ai: AIService,
        storage: ImageStorage,
        password_manager: PasswordManager,
        ai_username: str,
        ai_email: str,
        hour_utc: int = 0,
        enabled: bool = False,
    ):
        self._db = db
        self._ai = ai
        self._storage = storage
        self._passwords = password_manager
        self._ai_username = ai_username.lower()
        self._ai_email = ai_email.lower()
        self._hour_utc = hour_utc
        self._enabled = enabled
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the daily loop."""
        if not self._enabled:
            logger.info("AI post scheduler disabled")
            return
        if not self._ai.is_configured:
            logger.warning("AI post scheduler enabled but no OpenAI key is set; not starting")
            return
        if self.is_running:
            logger.warning("AI post scheduler already running")
            return

        self._task = asyncio.create_task(self._loop(), name="ai_post_scheduler")
        logger.info("AI post scheduler started: daily at %02d:00 UTC", self._hour_utc)

    async def stop(self) -> None:
        """Cancel the loop and wait for it."""
        if self._task is None:
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("AI post scheduler stopped")

    async def _loop(self) -> None:
        while True:
            delay = seconds_until_next_run(utc_now(), self._hour_utc)
            logger.debug("Next AI post in %.0f seconds", delay)
            await asyncio.sleep(delay)

            try:
                await self.run_once()
            except Exception:
                logger.exception("Scheduled AI post failed")

    # =========================================================================
    # JOB
    # =========================================================================

    async def run_once(self, subject: Optional[str] = None) -> Post:
        """
        Generate and publish one AI post.

        Raises:
            AIServiceUnavailableError: No API key configured
            AIProviderError: The provider call failed
        """
        subject = subject or self._ai.pick_subject()
        description = await self._ai.generate_post_description(subject)
        image = await self._ai.generate_post_image(subject)
        image_name = self._storage.save_bytes(image, "ai-post.png")

        async with self._db.get_session() as session:
            author = await self._get_or_create_author(session)
            post = await PostRepository(session).create(
                title=subject,
                content=description,
                sender=author.username,
                sender_id=author.id,
                image_url=image_name,
                profile_pic=author.profile_pic,
            )

        logger.info("Published AI post %s about %r", post.id, subject)
        return post

    async def _get_or_create_author(self, session) -> User:
        users = UserRepository(session)
        author = await users.get_by_email(self._ai_email)
        if author is None:
            author = await users.create(
                email=self._ai_email,
                username=self._ai_username,
                password_hash=self._passwords.unusable_password(),
                description="Daily movie picks, written by AI.",
            )
            logger.info("Created AI author account %s", author.id)
        return author
