"""
Shared fixtures for the guide generator tests.

Each test gets its own SQLite database file (aiosqlite) with the tables
created up front.  The LLM and web-search providers are replaced with
scripted fakes that record every call, so no test touches the network.
"""
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import AsyncGenerator, Callable, Dict, List, Optional, Union

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

# Point the global engine at a throwaway database *before* any app module
# is imported; the per-test sessions below never use it.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-guides.db")
os.environ["ANTHROPIC_API_KEY"] = "test-anthropic-key"
os.environ["BRAVE_SEARCH_API_KEY"] = "test-brave-key"

from app.database import Base, get_db  # noqa: E402
from app.dependencies.services import get_llm_service, get_search_service  # noqa: E402
from app.main import app  # noqa: E402
from app.models import database_models  # noqa: E402,F401
from app.models.schemas import (  # noqa: E402
    GeneratedGuide,
    GuideMetadata,
    GuidePreferences,
    ResearchResult,
    ResearchSource,
)
from app.services.errors import ProviderError  # noqa: E402
from app.services.llm import LLMReply  # noqa: E402


# ---------------------------------------------------------------------------
# Provider fakes
# ---------------------------------------------------------------------------

Scripted = Union[str, LLMReply, Exception, Callable[[str], Union[str, LLMReply]]]


def prompt_kind(prompt: str) -> str:
    """Classify a prompt by the generation step that built it."""
    if prompt.startswith("You are editing an existing guide"):
        return "edit"
    if "create a comprehensive outline" in prompt:
        return "outline"
    if "SEO-friendly title" in prompt:
        return "title"
    if prompt.startswith("Write a comprehensive"):
        return "content"
    return "unknown"


DEFAULT_REPLIES: Dict[str, Scripted] = {
    "outline": '["Introduction", "Installing Docker", "Images and Containers", "Conclusion"]',
    "title": '"Docker Basics: A Friendly Guide to Your First Containers"',
    "content": "## Introduction\n\nDocker packages applications into containers.\n\n"
               "## Conclusion\n\nYou are ready to ship.",
    "edit": "## Introduction\n\nDocker packages apps into portable containers.",
}


class FakeLLM:
    """Replies per prompt kind; records (kind, prompt, max_tokens) for every call."""

    def __init__(self, replies: Optional[Dict[str, Scripted]] = None) -> None:
        self.replies: Dict[str, Scripted] = dict(DEFAULT_REPLIES)
        self.replies.update(replies or {})
        self.calls: List[tuple] = []

    async def complete(self, prompt: str, max_tokens: int, model: Optional[str] = None) -> LLMReply:
        kind = prompt_kind(prompt)
        self.calls.append((kind, prompt, max_tokens))
        reply = self.replies[kind]
        if callable(reply):
            reply = reply(prompt)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, LLMReply):
            return reply
        return LLMReply(block_type="text", text=reply)

    async def check_health(self) -> bool:
        return True

    def kinds(self) -> List[str]:
        return [kind for kind, _prompt, _max in self.calls]


def make_hits(query: str, n: int = 5) -> List[ResearchSource]:
    """n hits for *query*; the first always points at a shared url."""
    hits = [
        ResearchSource(
            title="Docker overview",
            url="https://docs.docker.com/get-started/overview/",
            snippet="Docker is an open platform for developing and running applications.",
        )
    ]
    for i in range(1, n):
        slug = query.replace(" ", "-")
        hits.append(
            ResearchSource(
                title=f"{query} result {i}",
                url=f"https://example.com/{slug}/{i}",
                snippet=f"Snippet {i} about {query}.",
            )
        )
    return hits


class FakeSearch:
    """Search provider double; ``failures`` maps queries to the error they raise."""

    def __init__(
        self,
        results: Optional[Dict[str, List[ResearchSource]]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        default: Optional[Callable[[str], List[ResearchSource]]] = make_hits,
    ) -> None:
        self.results = results or {}
        self.failures = failures or {}
        self.default = default
        self.calls: List[tuple] = []

    async def search(self, query: str, count: int = 10) -> List[ResearchSource]:
        self.calls.append((query, count))
        if query in self.failures:
            raise self.failures[query]
        if query in self.results:
            return list(self.results[query])
        return self.default(query) if self.default else []

    async def check_health(self) -> bool:
        return True

    def queries(self) -> List[str]:
        return [query for query, _count in self.calls]


def failing_search(topic: str) -> FakeSearch:
    """Every research query for *topic* fails, so research comes back empty."""
    from app.services.research import ResearchService

    error = ProviderError("brave-search", "HTTP 500")
    return FakeSearch(failures={q: error for q in ResearchService.generate_queries(topic)})


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

DOCKER_PREFERENCES = {
    "depth": "standard",
    "audience": "beginner",
    "style": "tutorial",
    "length": "short",
    "images": "without-images",
    "format": "blog-post",
    "tone": "casual",
}


@pytest.fixture
def preferences() -> GuidePreferences:
    return GuidePreferences(**DOCKER_PREFERENCES)


@pytest.fixture
def research() -> List[ResearchResult]:
    return [
        ResearchResult(query=q, sources=make_hits(q), summary="")
        for q in ("Docker basics", "Docker basics guide")
    ]


def make_guide(**overrides) -> GeneratedGuide:
    values = dict(
        id="guide_1700000000000_abc123def",
        topic="Docker basics",
        title="Docker Basics for Beginners",
        content="## Intro\n\nContainers are light.",
        outline=["Intro", "Images", "Conclusion"],
        metadata=GuideMetadata(word_count=5, reading_time=1),
        sources=make_hits("Docker basics", 3),
        preferences=GuidePreferences(**DOCKER_PREFERENCES),
        created_at=datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return GeneratedGuide(**values)


# ---------------------------------------------------------------------------
# Per-test fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def search() -> FakeSearch:
    return FakeSearch()


@pytest_asyncio.fixture
async def db_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """Provide a DB session on a fresh SQLite file for each test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'guides.db'}", echo=False, poolclass=NullPool
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    await engine.dispose()


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, llm: FakeLLM, search: FakeSearch
) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx AsyncClient wired to the FastAPI app with the DB session and both
    providers overridden.
    """

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_llm_service] = lambda: llm
    app.dependency_overrides[get_search_service] = lambda: search

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
