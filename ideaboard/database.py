"""
Idea Board – Async SQLAlchemy engine, session, and declarative base.

The engine lives on a ``Database`` object built during application startup
and disposed on shutdown; routes reach it through ``request.app.state``.
"""

from __future__ import annotations

from datetime import timezone
from pathlib import Path
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy import DateTime
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes, including on SQLite which drops the offset."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


# ── Declarative base ──
class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class Database:
    """Owns one async engine and its session factory."""

    def __init__(self, url: str, *, echo: bool = False, timeout: float = 15.0):
        engine_kwargs = {
            "echo": echo,
        }

        # If using PostgreSQL (Render/Supabase), disable prepared statement caching
        # because PgBouncer (transaction mode) does not support it properly.
        if "postgresql" in url:
            engine_kwargs["connect_args"] = {"statement_cache_size": 0}
        elif url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"timeout": timeout}
            _ensure_sqlite_parent(url)

        self.url = url
        self.engine = create_async_engine(url, **engine_kwargs)

        # ── Session factory ──
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        # Make sure every model is registered on Base.metadata
        import ideaboard.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def _ensure_sqlite_parent(url: str) -> None:
    database = make_url(url).database
    if database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)


# ── Dependencies for FastAPI routes ──
def get_database(request: Request) -> Database:
    return request.app.state.db


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield an async database session, auto-closed on exit."""
    async with get_database(request).session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
