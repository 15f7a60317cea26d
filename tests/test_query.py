from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.dialects import sqlite

from ideaboard.services.ideas import IdeaStore
from ideaboard.services.query import build_ideas_query

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


async def _titles(database, **kwargs):
    async with database.session() as session:
        return [i.title for i in await IdeaStore(session).list(**kwargs)]


@pytest.mark.asyncio
async def test_top_sort_orders_by_votes_then_newest(database, make_idea):
    await make_idea(title="t1", votes=3, created_at=T0)
    await make_idea(title="t2", votes=3, created_at=T0 + timedelta(minutes=1))
    await make_idea(title="t3", votes=1, created_at=T0 + timedelta(minutes=2))

    assert await _titles(database, sort="top") == ["t2", "t1", "t3"]
    # Unknown or missing sort behaves like "top"
    assert await _titles(database) == ["t2", "t1", "t3"]
    assert await _titles(database, sort="bogus") == ["t2", "t1", "t3"]


@pytest.mark.asyncio
async def test_new_sort_is_strict_creation_desc(database, make_idea):
    await make_idea(title="t1", votes=3, created_at=T0)
    await make_idea(title="t2", votes=3, created_at=T0 + timedelta(minutes=1))
    await make_idea(title="t3", votes=1, created_at=T0 + timedelta(minutes=2))

    assert await _titles(database, sort="new") == ["t3", "t2", "t1"]


@pytest.mark.asyncio
async def test_search_is_case_insensitive_over_title_author_category(database, make_idea):
    await make_idea(title="Solar benches", author="Dana")
    await make_idea(title="Night bus", author="ALICE")
    await make_idea(title="Library hours", category="Campus Life")
    await make_idea(title="Quiet rooms", author="bob")

    assert await _titles(database, search="SOLAR") == ["Solar benches"]
    assert await _titles(database, search="alice") == ["Night bus"]
    assert await _titles(database, search="campus") == ["Library hours"]
    assert sorted(await _titles(database, search="")) == [
        "Library hours", "Night bus", "Quiet rooms", "Solar benches",
    ]
    assert sorted(await _titles(database, search="   ")) == [
        "Library hours", "Night bus", "Quiet rooms", "Solar benches",
    ]


@pytest.mark.asyncio
async def test_search_wildcards_match_literally(database, make_idea):
    await make_idea(title="100% recycled cups")
    await make_idea(title="Recycled paper")
    await make_idea(title="snake_case signs")

    assert await _titles(database, search="%") == ["100% recycled cups"]
    assert await _titles(database, search="_") == ["snake_case signs"]


def test_search_text_is_bound_not_inlined():
    stmt = build_ideas_query("top", "x' OR 1=1 --")
    compiled = stmt.compile(dialect=sqlite.dialect())
    assert "OR 1=1" not in str(compiled)
    assert "%x' OR 1=1 --%" in compiled.params.values()
