# =============================================================================
# REELSOCIAL BACKEND - TEST CONFIGURATION
# =============================================================================
# File: tests/conftest.py
# Description: Pytest fixtures: temporary SQLite database, application
#              context with fake AI and Google collaborators, HTTP client
# =============================================================================

import base64
import json
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from reelsocial.ai.service import AIService
from reelsocial.auth.google import GoogleIdentity, GoogleTokenVerifier
from reelsocial.context import AppContext
from reelsocial.core.config import Settings
from reelsocial.core.exceptions import GoogleAuthError
from reelsocial.main import create_application


TEST_SECRET = "test-secret-key-for-signing-tokens-0123456789"
TEST_PASSWORD = "Secret123"
FAKE_IMAGE = b"\x89PNG\r\n\x1a\nfake-image-bytes"
GOOGLE_CREDENTIAL = "valid-google-id-token"


# =============================================================================
# FAKE COLLABORATORS
# =============================================================================

class FakeOpenAI:
    """
    Stands in for ``AsyncOpenAI``: same ``chat.completions.create`` and
    ``images.generate`` call shapes, canned answers.
    """

    def __init__(self):
        self.chat_reply = json.dumps({"text": "A must-see movie."})
        self.image_bytes = FAKE_IMAGE
        self.error: Optional[Exception] = None
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))
        self.images = SimpleNamespace(generate=self._generate)

    async def _create(self, **kwargs):
        self.calls.append(("chat", kwargs))
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.chat_reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def _generate(self, **kwargs):
        self.calls.append(("image", kwargs))
        if self.error:
            raise self.error
        encoded = base64.b64encode(self.image_bytes).decode()
        return SimpleNamespace(data=[SimpleNamespace(b64_json=encoded)])


class FakeGoogleVerifier(GoogleTokenVerifier):
    """Accepts exactly one credential without calling Google."""

    identity = GoogleIdentity(
        subject="google-sub-1",
        email="noa.levi@gmail.com",
        name="Noa Levi",
        picture="https://lh3.googleusercontent.com/noa.png",
    )

    async def verify(self, credential: str) -> GoogleIdentity:
        if credential != GOOGLE_CREDENTIAL:
            raise GoogleAuthError()
        return self.identity


# =============================================================================
# SETTINGS & CONTEXT FIXTURES
# =============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    """Fast hashing, temporary database and upload directory."""
    return Settings(
        _env_file=None,
        app_env="development",
        token_secret=TEST_SECRET,
        database_url_override=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=64 * 1024,
        argon2_time_cost=1,
        argon2_memory_cost=1024,
        argon2_parallelism=1,
        bcrypt_rounds=4,
        google_client_id="test-client-id.apps.googleusercontent.com",
        ai_posts_enabled=False,
        log_level="DEBUG",
    )


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def make_context(fake_openai: FakeOpenAI):
    """Build an ``AppContext`` wired to the fakes for any settings."""

    def _make(settings: Settings) -> AppContext:
        return AppContext(
            settings,
            ai=AIService(api_key=None, client=fake_openai),
            google=FakeGoogleVerifier(settings.google_client_id),
        )

    return _make


@asynccontextmanager
async def running_app(context: AppContext) -> AsyncGenerator[AsyncClient, None]:
    """
    Start the context, serve the app over ASGI and tear everything down.

    ``ASGITransport`` does not run the lifespan, so startup and shutdown
    are driven here.
    """
    await context.startup()
    try:
        app = create_application(context=context)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        await context.db.drop_tables()
        await context.shutdown()


@pytest.fixture
def serve():
    """``async with serve(context) as client`` for tests that need their own app."""
    return running_app


@pytest_asyncio.fixture
async def app_context(settings: Settings, make_context) -> AsyncGenerator[AppContext, None]:
    """Started context for tests that work below the HTTP layer."""
    context = make_context(settings)
    await context.startup()
    yield context
    await context.db.drop_tables()
    await context.shutdown()


@pytest_asyncio.fixture
async def db_session(app_context: AppContext) -> AsyncGenerator[AsyncSession, None]:
    """Session that commits when the test body finishes."""
    async with app_context.db.get_session() as session:
        yield session


@pytest.fixture
def api_context(settings: Settings, make_context) -> AppContext:
    """Context behind the ``client`` fixture (started by it)."""
    return make_context(settings)


@pytest_asyncio.fixture
async def client(api_context: AppContext) -> AsyncGenerator[AsyncClient, None]:
    async with running_app(api_context) as client:
        yield client


# =============================================================================
# USER FIXTURES
# =============================================================================

@pytest.fixture
def google_credential() -> str:
    return GOOGLE_CREDENTIAL


@pytest.fixture
def auth_headers():
    """``auth_headers(token)`` -> Authorization header dict."""

    def _headers(token: str, scheme: str = "Bearer") -> dict:
        return {"Authorization": f"{scheme} {token}"}

    return _headers


@pytest.fixture
def signup(client: AsyncClient):
    """
    Register and log in a user through the API.

    Returns the login body (``_id``, ``username``, ``accessToken``,
    ``refreshToken``, ...).
    """

    async def _signup(username: str, email: Optional[str] = None) -> dict:
        email = email or f"{username}@mail.com"
        response = await client.post(
            "/user",
            json={"email": email, "username": username, "password": TEST_PASSWORD},
        )
        assert response.status_code == 201, response.text

        response = await client.post(
            "/user/login",
            json={"email": email, "password": TEST_PASSWORD},
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _signup
