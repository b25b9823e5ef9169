"""
Shared fixtures: isolated SQLite database per test, fake AI gateway, HTTP client with overrides.
Environment is set before repurposer is imported so the module-level engine never targets Postgres.
"""
import os
import tempfile
import uuid
from typing import Callable, List, Optional, Union

_TMP_DIR = tempfile.mkdtemp(prefix="repurposer-tests-")
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/default.db"
os.environ["STORAGE_DIR"] = os.path.join(_TMP_DIR, "storage")
os.environ["OPENAI_API_KEY"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import repurposer.models  # noqa: F401
from repurposer.db import Base, get_session_factory
from repurposer.dependencies import get_llm_service, get_storage
from repurposer.exceptions import GenerationFailed
from repurposer.services.storage_service import LocalObjectStorage

# First line of each platform template -> platform id.
PROMPT_MARKERS = {
    "Twitter thread": "twitter",
    "LinkedIn post": "linkedin",
    "Facebook post": "facebook",
    "Instagram post": "instagram",
    "YouTube video": "youtube",
    "TikTok video": "tiktok",
}
ANALYSIS_MARKER = "As an expert content strategist"

Reply = Union[str, Exception]


def platform_of(prompt: str) -> Optional[str]:
    for marker, platform in PROMPT_MARKERS.items():
        if marker in prompt:
            return platform
    return None


class FakeLLM:
    """
    Stand-in for LLMService. replies maps platform id (or "analysis") to the text to return
    or the exception to raise; anything unmapped raises GenerationFailed.
    """

    def __init__(self, replies: Optional[dict] = None, responder: Optional[Callable[[str], Reply]] = None):
        self.replies = replies or {}
        self.responder = responder
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.responder is not None:
            reply = self.responder(prompt)
        else:
            key = "analysis" if ANALYSIS_MARKER in prompt else platform_of(prompt)
            reply = self.replies.get(key, GenerationFailed("Failed to generate content with AI"))
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest.fixture
def storage(tmp_path) -> LocalObjectStorage:
    return LocalObjectStorage(str(tmp_path / "storage"), "content-files")


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest_asyncio.fixture
async def client(session_factory, storage, fake_llm, user_id):
    """AsyncClient against the app with DB, storage and AI gateway overridden; X-User-ID preset."""
    from repurposer.main import app

    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_llm_service] = lambda: fake_llm
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-User-ID": str(user_id)},
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
