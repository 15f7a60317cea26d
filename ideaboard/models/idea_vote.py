"""IdeaVote model — append-only ledger of (idea, voter identity) pairs."""

from datetime import datetime

from sqlalchemy import Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ideaboard.database import Base, UTCDateTime
from ideaboard.models.idea import utcnow


class IdeaVote(Base):
    __tablename__ = "idea_votes"
    __table_args__ = (
        UniqueConstraint("idea_id", "voter_identity", name="uq_idea_votes_idea_identity"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    # Logical reference only: ledger rows outlive deleted ideas
    idea_id: Mapped[int] = mapped_column(nullable=False, index=True)
    voter_identity: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )
