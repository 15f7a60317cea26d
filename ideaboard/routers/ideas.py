"""Ideas router — public listing, submission and one-vote-per-identity upvotes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.database import get_db
from ideaboard.schemas.idea import IdeaCreate, IdeaOut
from ideaboard.services.identity import identity_from_request
from ideaboard.services.ideas import create_idea, list_ideas
from ideaboard.services.votes import VoteCoordinator

router = APIRouter(prefix="/api/ideas", tags=["ideas"])


def parse_id(raw: str, label: str = "idea") -> int:
    """Path ids arrive as text so a malformed one is a 400, not a 422."""
    try:
        return int(raw.strip())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} id")


# ═══════════════════════════════════════════════════════════════
#  GET /api/ideas?sort=&search= → public list
# ═══════════════════════════════════════════════════════════════

@router.get("", response_model=List[IdeaOut])
async def get_ideas(
    sort: Optional[str] = None,
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
):
    return await list_ideas(db, sort=sort, search=search)


# ═══════════════════════════════════════════════════════════════
#  POST /api/ideas → submit an idea
# ═══════════════════════════════════════════════════════════════

@router.post("", response_model=IdeaOut, status_code=status.HTTP_201_CREATED)
async def post_idea(
    payload: IdeaCreate,
    db: AsyncSession = Depends(get_db),
):
    return await create_idea(db, payload)


# ═══════════════════════════════════════════════════════════════
#  POST /api/ideas/{idea_id}/vote → upvote once per identity
# ═══════════════════════════════════════════════════════════════

@router.post("/{idea_id}/vote")
async def vote_idea(
    idea_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    target = parse_id(idea_id)
    identity = identity_from_request(request)

    result = await VoteCoordinator(db).cast_vote(target, identity)
    if result.already_voted:
        return {"alreadyVoted": True}
    return IdeaOut.model_validate(result.idea)
