"""
Snippetbox Backend - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   A throw-away SQLite database (aiosqlite driver) per test, the real
       SnippetRepository on top of it, and an HTTPX AsyncClient talking to a
       fresh app whose repository dependency points at that database.

Fixture Hierarchy (all function-scoped):
    engine ─▶ repository ─▶ app ─▶ test_client
    (schema created from Base.metadata; dropped with the temp directory)
"""

import os
from datetime import datetime, timedelta, timezone

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert

from snippetbox.database import Base, create_engine
from snippetbox.main import create_app
from snippetbox.models.snippet import snippets_table
from snippetbox.routes.snippets import get_snippet_repository
from snippetbox.services.snippet_repository import SnippetRepository


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

async def insert_snippet_row(engine, title="old", content="gone", *, expires_delta):
    """
    Insert a row directly, bypassing the repository's clock.

    Used to plant snippets that are already expired (negative delta).
    """
    now = datetime.now(timezone.utc)
    async with engine.begin() as conn:
        result = await conn.execute(
            insert(snippets_table).values(
                title=title,
                content=content,
                created=now - timedelta(days=30),
                expires=now + expires_delta,
            )
        )
        return result.inserted_primary_key[0]


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'snippetbox.db'}"


@pytest_asyncio.fixture
async def engine(database_url):
    """Async engine on a fresh SQLite file with the snippets table created."""
    engine = create_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def plant_snippet(engine):
    """Async callable: `await plant_snippet(expires_delta=timedelta(days=-1))`."""

    async def plant(title="old", content="gone", *, expires_delta):
        return await insert_snippet_row(engine, title, content, expires_delta=expires_delta)

    return plant


@pytest_asyncio.fixture
async def repository(engine):
    repository = await SnippetRepository.open(engine)
    yield repository
    await repository.close()


@pytest.fixture
def app(repository):
    """Fresh app instance; the lifespan is skipped so the repository is injected."""
    app = create_app()
    app.dependency_overrides[get_snippet_repository] = lambda: repository
    return app


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Redirects are not followed so tests can assert on 303 responses.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=False,
    ) as client:
        yield client
