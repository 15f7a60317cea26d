"""Product catalog models — products plus their images, updates and comments."""

from datetime import datetime
from typing import Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ideaboard.database import Base, UTCDateTime
from ideaboard.models.idea import utcnow


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    short_desc: Mapped[Optional[str]] = mapped_column(Text, default="")
    long_desc: Mapped[Optional[str]] = mapped_column(Text, default="")
    status: Mapped[Optional[str]] = mapped_column(Text, default="")
    release_date: Mapped[Optional[str]] = mapped_column(Text, default="")
    price: Mapped[Optional[str]] = mapped_column(Text, default="")
    creator: Mapped[Optional[str]] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )


class ProductImage(Base):
    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    filename: Mapped[str] = mapped_column(String(300), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )


class ProductUpdate(Base):
    """An admin post about a product; ``images`` is a JSON array of filenames."""

    __tablename__ = "product_updates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[Optional[str]] = mapped_column(Text, default="")
    body: Mapped[Optional[str]] = mapped_column(Text, default="")
    images: Mapped[Optional[str]] = mapped_column(Text, default="[]")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )


class ProductComment(Base):
    __tablename__ = "product_comments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author: Mapped[Optional[str]] = mapped_column(Text, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )
