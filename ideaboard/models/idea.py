"""Idea model — a public suggestion with a denormalized vote counter."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ideaboard.database import Base, UTCDateTime

TITLE_MAX_LENGTH = 160
PROBLEM_MAX_LENGTH = 1000
SOLUTION_HINT_MAX_LENGTH = 600


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Idea(Base):
    __tablename__ = "ideas"
    __table_args__ = (
        CheckConstraint("votes >= 0", name="ck_ideas_votes_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    author: Mapped[Optional[str]] = mapped_column(Text, default="")
    # Never exposed publicly, only in the admin export
    email: Mapped[Optional[str]] = mapped_column(Text, default="")
    category: Mapped[Optional[str]] = mapped_column(Text, default="")

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    problem: Mapped[str] = mapped_column(Text, nullable=False)
    solution_hint: Mapped[str] = mapped_column(Text, nullable=False)

    votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow, index=True
    )
