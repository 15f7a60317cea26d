"""Idea Pydantic schemas — submission payload and public/admin projections."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class IdeaCreate(BaseModel):
    """Fields submitted by the public form.

    Required-ness and length limits are checked after trimming in
    ``services.ideas.create_idea`` so that blank strings are rejected too.
    """
    author: Optional[str] = None
    email: Optional[str] = None
    category: Optional[str] = None
    title: Optional[str] = None
    problem: Optional[str] = None
    solution_hint: Optional[str] = None


class IdeaOut(BaseModel):
    """Public idea representation; never carries the submitter's email."""
    id: int
    author: Optional[str] = None
    category: Optional[str] = None
    title: str
    problem: str
    solution_hint: str
    votes: int
    created_at: datetime

    model_config = {"from_attributes": True}


class IdeaExport(IdeaOut):
    """Admin export row, including the contact email."""
    email: Optional[str] = None
