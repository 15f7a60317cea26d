"""Products router — public catalog browsing and comments."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.database import get_db
from ideaboard.routers.ideas import parse_id
from ideaboard.schemas.product import CommentCreate, CommentOut, ProductDetail, ProductSummary
from ideaboard.services import products

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=List[ProductSummary])
async def list_products(db: AsyncSession = Depends(get_db)):
    return await products.list_products(db)


@router.get("/{product_id}", response_model=ProductDetail)
async def product_detail(product_id: str, db: AsyncSession = Depends(get_db)):
    """Product with gallery, updates and comments."""
    return await products.get_product(db, parse_id(product_id, "product"))


@router.post("/{product_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def post_comment(
    product_id: str,
    payload: CommentCreate,
    db: AsyncSession = Depends(get_db),
):
    target = parse_id(product_id, "product")
    return await products.add_comment(db, target, payload.author, payload.content)
