"""Search/sort query construction for the public ideas list."""

from typing import Optional

from sqlalchemy import Select, or_, select

from ideaboard.models.idea import Idea

SORT_NEW = "new"
SORT_TOP = "top"

_LIKE_ESCAPE = "\\"


def _like_pattern(search: str) -> str:
    escaped = (
        search.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def build_ideas_query(sort: Optional[str] = None, search: Optional[str] = None) -> Select:
    """Build the SELECT behind ``GET /api/ideas``.

    ``search`` is a case-insensitive substring filter over title, author and
    category, always sent as a bound parameter. ``sort="new"`` orders by
    creation time, anything else by votes.
    """
    stmt = select(Idea)

    term = (search or "").strip()
    if term:
        pattern = _like_pattern(term)
        stmt = stmt.where(
            or_(
                Idea.title.ilike(pattern, escape=_LIKE_ESCAPE),
                Idea.author.ilike(pattern, escape=_LIKE_ESCAPE),
                Idea.category.ilike(pattern, escape=_LIKE_ESCAPE),
            )
        )

    if sort == SORT_NEW:
        stmt = stmt.order_by(Idea.created_at.desc(), Idea.votes.desc(), Idea.id.desc())
    else:
        stmt = stmt.order_by(Idea.votes.desc(), Idea.created_at.desc(), Idea.id.desc())

    return stmt
