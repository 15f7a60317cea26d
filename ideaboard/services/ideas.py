"""Idea store and idea creation.

``IdeaStore`` is the only code that touches the ``ideas`` table. It works on
the caller's ``AsyncSession`` and leaves commit/rollback to the operation
that owns the unit of work.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.errors import NotFoundError, StoreError, ValidationError
from ideaboard.models.idea import (
    PROBLEM_MAX_LENGTH,
    SOLUTION_HINT_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Idea,
)
from ideaboard.schemas.idea import IdeaCreate
from ideaboard.services.query import build_ideas_query

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    ("title", TITLE_MAX_LENGTH),
    ("problem", PROBLEM_MAX_LENGTH),
    ("solution_hint", SOLUTION_HINT_MAX_LENGTH),
)


class IdeaStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, idea: Idea) -> int:
        self.session.add(idea)
        await self.session.flush()
        return idea.id

    async def get(self, idea_id: int) -> Optional[Idea]:
        # populate_existing: the counter is bumped with a bulk UPDATE,
        # so a cached instance may hold a stale value
        result = await self.session.execute(
            select(Idea)
            .where(Idea.id == idea_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list(self, sort: Optional[str] = None, search: Optional[str] = None) -> List[Idea]:
        result = await self.session.execute(build_ideas_query(sort, search))
        return list(result.scalars().all())

    async def increment_votes(self, idea_id: int) -> bool:
        """Add one vote in a single SQL statement; False if the idea is gone."""
        result = await self.session.execute(
            update(Idea)
            .where(Idea.id == idea_id)
            .values(votes=Idea.votes + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def delete(self, idea_id: int) -> bool:
        result = await self.session.execute(
            delete(Idea)
            .where(Idea.id == idea_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def export_all(self) -> Sequence[Idea]:
        result = await self.session.execute(select(Idea).order_by(Idea.id.asc()))
        return result.scalars().all()


def validate_idea(payload: IdeaCreate) -> dict:
    """Trim the submission and check required fields and length limits."""
    values = {}
    for field, max_length in REQUIRED_FIELDS:
        value = (getattr(payload, field) or "").strip()
        if not value:
            raise ValidationError("Missing required fields (title/problem/solution_hint)")
        if len(value) > max_length:
            raise ValidationError(f"Field '{field}' must be at most {max_length} characters")
        values[field] = value

    for field in ("author", "email", "category"):
        values[field] = (getattr(payload, field) or "").strip()
    return values


async def create_idea(session: AsyncSession, payload: IdeaCreate) -> Idea:
    values = validate_idea(payload)
    store = IdeaStore(session)
    try:
        idea_id = await store.insert(Idea(votes=0, **values))
        await session.commit()
        idea = await store.get(idea_id)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to save idea")
        raise StoreError("Failed to save idea", operation="create_idea") from exc

    logger.info(f"Idea {idea.id} created")
    return idea


async def list_ideas(
    session: AsyncSession, sort: Optional[str] = None, search: Optional[str] = None
) -> List[Idea]:
    try:
        return await IdeaStore(session).list(sort, search)
    except SQLAlchemyError as exc:
        logger.exception("Failed to fetch ideas")
        raise StoreError("Failed to fetch ideas", operation="list_ideas") from exc


async def delete_idea(session: AsyncSession, idea_id: int) -> None:
    """Admin moderation; vote ledger rows for the idea are kept."""
    try:
        deleted = await IdeaStore(session).delete(idea_id)
        if not deleted:
            await session.rollback()
        else:
            await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception(f"Failed to delete idea {idea_id}")
        raise StoreError("Error deleting idea", operation="delete_idea", target_id=idea_id) from exc

    if not deleted:
        logger.warning(f"Delete requested for missing idea {idea_id}")
        raise NotFoundError("Idea not found")
    logger.info(f"Idea {idea_id} deleted")


async def export_ideas(session: AsyncSession) -> Sequence[Idea]:
    try:
        return await IdeaStore(session).export_all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to export ideas")
        raise StoreError("Failed to export ideas", operation="export_ideas") from exc
