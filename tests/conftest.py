"""
Pytest configuration and shared fixtures.

Fixtures available to all tests:
  • test_settings   — Settings pointing at a temp SQLite file and upload dir
  • database        — a ready ``Database`` with tables created
  • app / client    — the FastAPI app with its lifespan entered, and an httpx client
  • make_idea(...)  — insert an Idea row directly, bypassing validation
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import httpx
import pytest
import pytest_asyncio

from ideaboard.config import Settings
from ideaboard.database import Database
from ideaboard.main import create_app
from ideaboard.models.idea import Idea
from ideaboard.services.ideas import IdeaStore

ADMIN_KEY = "test-admin-key"


# ---------------------------------------------------------------------------
# Settings / database
# ---------------------------------------------------------------------------

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'ideas.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        ADMIN_KEY=ADMIN_KEY,
        MAX_UPLOAD_BYTES=1024,
        MAX_UPLOAD_FILES=3,
        LOG_LEVEL="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database(test_settings.DATABASE_URL, timeout=test_settings.DB_TIMEOUT)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def make_idea(database):
    async def _factory(
        title: str = "Shared bikes",
        author: str = "",
        category: str = "",
        votes: int = 0,
        created_at: Optional[datetime] = None,
        email: str = "",
    ) -> int:
        async with database.session() as session:
            idea_id = await IdeaStore(session).insert(
                Idea(
                    title=title,
                    author=author,
                    category=category,
                    email=email,
                    problem="Too many cars on campus",
                    solution_hint="Rent bikes by the hour",
                    votes=votes,
                    created_at=created_at or datetime.now(timezone.utc),
                )
            )
            await session.commit()
            return idea_id
    return _factory


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def app(test_settings):
    application = create_app(test_settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}
