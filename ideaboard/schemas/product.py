"""Product catalog Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class ProductSummary(BaseModel):
    """Public list entry; ``cover`` is the URL of the first image, if any."""
    id: int
    name: str
    short_desc: Optional[str] = None
    status: Optional[str] = None
    release_date: Optional[str] = None
    price: Optional[str] = None
    creator: Optional[str] = None
    created_at: datetime
    cover: Optional[str] = None


class ProductOut(BaseModel):
    id: int
    name: str
    short_desc: Optional[str] = None
    long_desc: Optional[str] = None
    status: Optional[str] = None
    release_date: Optional[str] = None
    price: Optional[str] = None
    creator: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductUpdateOut(BaseModel):
    id: int
    product_id: int
    title: Optional[str] = None
    body: Optional[str] = None
    images: List[str] = []
    created_at: datetime


class CommentCreate(BaseModel):
    author: Optional[str] = None
    content: Optional[str] = None


class CommentOut(BaseModel):
    id: int
    product_id: int
    author: Optional[str] = None
    content: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductDetail(ProductOut):
    images: List[str] = []
    updates: List[ProductUpdateOut] = []
    comments: List[CommentOut] = []
