# =============================================================================
# REELSOCIAL BACKEND - AI SERVICE
# =============================================================================
# File: ai/service.py
# Description: OpenAI-backed helpers: review enhancement, post text and
#              post images for the daily AI post
# =============================================================================

import base64
import binascii
import json
import logging
import random
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from reelsocial.core.config import Settings
from reelsocial.core.exceptions import AIServiceUnavailableError, AIProviderError


logger = logging.getLogger(__name__)


MOVIE_SUBJECTS = [
    "Harry Potter and the Philosopher's Stone",
    "The Lord of the Rings: The Return of the King",
    "Inception",
    "Fight Club",
    "The Matrix",
    "Interstellar",
    "The Social Network",
    "Mad Max: Fury Road",
    "The Wolf of Wall Street",
    "Parasite",
    "Whiplash",
    "Joker",
    "Avengers: Endgame",
    "La La Land",
    "Black Panther",
    "Spider-Man: Into the Spider-Verse",
    "Toy Story 3",
    "Frozen",
    "The Grand Budapest Hotel",
    "Guardians of the Galaxy",
    "Get Out",
    "Coco",
    "A Star is Born",
    "Once Upon a Time in Hollywood",
]

ENHANCE_PROMPT = (
    "Make a positive recommendation about the movie named: {content}. "
    "Use at most 300 characters. If the movie exists, respond with a JSON "
    'object with a single "text" field holding your answer. If it does not '
    'exist, respond with {{"text": "I don\'t know this film"}}.'
)

DESCRIPTION_PROMPT = (
    "Write a 10 word description of the movie {subject} that reads like an "
    "Instagram post caption, and include the movie's name."
)

IMAGE_PROMPT = "Generate a poster-style image for the movie: {subject}"

MAX_ENHANCED_LENGTH = 300


class AIService:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    AI HELPER                                             │
    │  Thin async wrapper over the OpenAI chat and image endpoints            │
    └─────────────────────────────────────────────────────────────────────────┘

    Without an API key the service exists but every call raises
    ``AIServiceUnavailableError``. Provider failures surface as
    ``AIProviderError``.
    """

    def __init__(
        self,
        api_key: Optional[str],
        chat_model: str = "gpt-4o-mini",
        image_size: str = "512x512",
        timeout: float = 60.0,
        client: Optional[Any] = None,
    ):
        self._chat_model = chat_model
        self._image_size = image_size
        if client is not None:
            self._client = client
        elif api_key:
            self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=2)
        else:
            self._client = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AIService":
        return cls(
            api_key=settings.openai_api_key,
            chat_model=settings.openai_chat_model,
            image_size=settings.openai_image_size,
            timeout=settings.openai_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def _require_client(self) -> Any:
        if self._client is None:
            raise AIServiceUnavailableError()
        return self._client

    async def close(self) -> None:
        if isinstance(self._client, AsyncOpenAI):
            await self._client.close()

    # =========================================================================
    # TEXT
    # =========================================================================

    async def enhance_review(self, content: str) -> str:
        """
        Turn a movie name or rough review into a short positive
        recommendation (at most 300 characters).

        Raises:
            AIServiceUnavailableError: No API key configured
            AIProviderError: The call failed or the answer had no ``text``
        """
        client = self._require_client()

        try:
            response = await client.chat.completions.create(
                model=self._chat_model,
                messages=[
                    {"role": "user", "content": ENHANCE_PROMPT.format(content=content)}
                ],
                response_format={"type": "json_object"},
                max_tokens=200,
            )
        except OpenAIError as e:
            logger.error("Review enhancement failed: %s", e)
            raise AIProviderError(details={"error": str(e)})

        raw = response.choices[0].message.content or ""
        try:
            text = json.loads(raw)["text"]
        except (ValueError, KeyError, TypeError):
            logger.warning("Unexpected enhancement answer: %r", raw[:200])
            raise AIProviderError(details={"error": "Malformed model answer"})

        return str(text).strip()[:MAX_ENHANCED_LENGTH]

    async def generate_post_description(self, subject: str) -> str:
        """Ten-word caption about ``subject``."""
        client = self._require_client()

        try:
            response = await client.chat.completions.create(
                model=self._chat_model,
                messages=[
                    {"role": "user", "content": DESCRIPTION_PROMPT.format(subject=subject)}
                ],
                max_tokens=100,
            )
        except OpenAIError as e:
            logger.error("Post description generation failed: %s", e)
            raise AIProviderError(details={"error": str(e)})

        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise AIProviderError(details={"error": "Empty model answer"})
        return text

    # =========================================================================
    # IMAGES
    # =========================================================================

    async def generate_post_image(self, subject: str) -> bytes:
        """
        Generate an image about ``subject``.

        Returns:
            bytes: Decoded PNG data
        """
        client = self._require_client()

        try:
            response = await client.images.generate(
                prompt=IMAGE_PROMPT.format(subject=subject),
                n=1,
                size=self._image_size,
                response_format="b64_json",
            )
        except OpenAIError as e:
            logger.error("Post image generation failed: %s", e)
            raise AIProviderError(details={"error": str(e)})

        encoded = response.data[0].b64_json or ""
        if "," in encoded and encoded.startswith("data:"):
            encoded = encoded.split(",", 1)[1]
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise AIProviderError(details={"error": "Malformed image data"})

    @staticmethod
    def pick_subject() -> str:
        return random.choice(MOVIE_SUBJECTS)
