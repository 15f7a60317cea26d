"""Vote ledger and vote coordination — one counted vote per (idea, identity).

The ledger's unique constraint is the single arbitration point for racing
requests. The ``ideas.votes`` counter is a cache of the ledger, bumped with an
atomic ``votes + 1`` in the same transaction as the ledger insert.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.errors import NotFoundError, StoreError
from ideaboard.models.idea import Idea
from ideaboard.models.idea_vote import IdeaVote
from ideaboard.services.ideas import IdeaStore

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class VoteOutcome(str, enum.Enum):
    INSERTED = "inserted"
    ALREADY_EXISTS = "already_exists"


@dataclass
class VoteResult:
    already_voted: bool
    idea: Optional[Idea] = None


class VoteLedger:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(self, idea_id: int, identity: str) -> VoteOutcome:
        """Append (idea_id, identity) unless the pair is already present."""
        dialect = self.session.get_bind().dialect.name
        dialect_insert = _UPSERT_DIALECTS.get(dialect)

        if dialect_insert is not None:
            result = await self.session.execute(
                dialect_insert(IdeaVote.__table__)
                .values(idea_id=idea_id, voter_identity=identity)
                .on_conflict_do_nothing(index_elements=["idea_id", "voter_identity"])
            )
            return VoteOutcome.INSERTED if result.rowcount == 1 else VoteOutcome.ALREADY_EXISTS

        # Other backends: let the unique constraint raise inside a savepoint
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    insert(IdeaVote.__table__).values(idea_id=idea_id, voter_identity=identity)
                )
        except IntegrityError:
            return VoteOutcome.ALREADY_EXISTS
        return VoteOutcome.INSERTED


class VoteCoordinator:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.ledger = VoteLedger(session)
        self.ideas = IdeaStore(session)

    async def cast_vote(self, idea_id: int, identity: str) -> VoteResult:
        """Record a vote and bump the counter, or report a repeat vote.

        Ledger insert and counter increment commit together. A vote for a
        missing idea rolls both back and raises ``NotFoundError``.
        """
        try:
            outcome = await self.ledger.record(idea_id, identity)
            if outcome is VoteOutcome.ALREADY_EXISTS:
                await self.session.rollback()
                logger.info(f"Duplicate vote ignored for idea {idea_id}")
                return VoteResult(already_voted=True)

            if not await self.ideas.increment_votes(idea_id):
                await self.session.rollback()
                logger.warning(f"Vote for missing idea {idea_id}")
                raise NotFoundError("Idea not found")

            await self.session.commit()
            idea = await self.ideas.get(idea_id)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception(f"Failed to record vote for idea {idea_id}")
            raise StoreError("Failed to support idea", operation="cast_vote", target_id=idea_id) from exc

        if idea is None:
            # Deleted between commit and reload
            raise NotFoundError("Idea not found")

        logger.info(f"Vote recorded for idea {idea_id} (now {idea.votes})")
        return VoteResult(already_voted=False, idea=idea)
