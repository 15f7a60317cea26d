"""Product catalog — products, gallery images, admin updates and public comments."""

import json
import logging
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.errors import NotFoundError, StoreError, ValidationError
from ideaboard.models.product import Product, ProductComment, ProductImage, ProductUpdate
from ideaboard.schemas.product import (
    CommentOut,
    ProductDetail,
    ProductOut,
    ProductSummary,
    ProductUpdateOut,
)
from ideaboard.services.uploads import upload_url

logger = logging.getLogger(__name__)

PRODUCT_TEXT_FIELDS = ("short_desc", "long_desc", "status", "release_date", "price", "creator")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _update_out(update: ProductUpdate) -> ProductUpdateOut:
    try:
        filenames = json.loads(update.images or "[]")
    except ValueError:
        filenames = []
    return ProductUpdateOut(
        id=update.id,
        product_id=update.product_id,
        title=update.title,
        body=update.body,
        images=[upload_url(name) for name in filenames or []],
        created_at=update.created_at,
    )


async def _get_product(session: AsyncSession, product_id: int) -> Product:
    result = await session.execute(select(Product).where(Product.id == product_id))
    product = result.scalar_one_or_none()
    if not product:
        raise NotFoundError("Product not found")
    return product


async def list_products(session: AsyncSession) -> List[ProductSummary]:
    """Public listing with the first gallery image as cover."""
    products = (
        await session.execute(select(Product).order_by(Product.created_at.desc(), Product.id.desc()))
    ).scalars().all()

    # First image per product, in one pass over the images table
    covers = {}
    images = await session.execute(
        select(ProductImage.product_id, ProductImage.filename).order_by(ProductImage.id.asc())
    )
    for product_id, filename in images.all():
        covers.setdefault(product_id, upload_url(filename))

    return [
        ProductSummary(
            id=p.id,
            name=p.name,
            short_desc=p.short_desc,
            status=p.status,
            release_date=p.release_date,
            price=p.price,
            creator=p.creator,
            created_at=p.created_at,
            cover=covers.get(p.id),
        )
        for p in products
    ]


async def list_products_admin(session: AsyncSession) -> List[ProductOut]:
    result = await session.execute(
        select(Product).order_by(Product.created_at.desc(), Product.id.desc())
    )
    return [ProductOut.model_validate(p) for p in result.scalars().all()]


async def get_product(session: AsyncSession, product_id: int) -> ProductDetail:
    product = await _get_product(session, product_id)

    images = await session.execute(
        select(ProductImage.filename)
        .where(ProductImage.product_id == product_id)
        .order_by(ProductImage.id.asc())
    )
    updates = await session.execute(
        select(ProductUpdate)
        .where(ProductUpdate.product_id == product_id)
        .order_by(ProductUpdate.created_at.desc(), ProductUpdate.id.desc())
    )
    comments = await session.execute(
        select(ProductComment)
        .where(ProductComment.product_id == product_id)
        .order_by(ProductComment.created_at.desc(), ProductComment.id.desc())
    )

    return ProductDetail(
        **ProductOut.model_validate(product).model_dump(),
        images=[upload_url(name) for name in images.scalars().all()],
        updates=[_update_out(u) for u in updates.scalars().all()],
        comments=[CommentOut.model_validate(c) for c in comments.scalars().all()],
    )


async def create_product(
    session: AsyncSession, name: Optional[str], fields: dict, filenames: Sequence[str]
) -> ProductOut:
    if not _clean(name):
        raise ValidationError("Product name is required")

    product = Product(
        name=_clean(name),
        **{field: _clean(fields.get(field)) for field in PRODUCT_TEXT_FIELDS},
    )
    try:
        session.add(product)
        await session.flush()
        session.add_all(
            [ProductImage(product_id=product.id, filename=filename) for filename in filenames]
        )
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to create product")
        raise StoreError("Failed to create product", operation="create_product") from exc

    logger.info(f"Product {product.id} created with {len(filenames)} image(s)")
    return ProductOut.model_validate(product)


async def add_update(
    session: AsyncSession,
    product_id: int,
    title: Optional[str],
    body: Optional[str],
    filenames: Sequence[str],
) -> ProductUpdateOut:
    await _get_product(session, product_id)

    update = ProductUpdate(
        product_id=product_id,
        title=_clean(title),
        body=_clean(body),
        images=json.dumps(list(filenames)),
    )
    try:
        session.add(update)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception(f"Failed to create update for product {product_id}")
        raise StoreError(
            "Failed to create update", operation="add_update", target_id=product_id
        ) from exc

    return _update_out(update)


async def delete_product(session: AsyncSession, product_id: int) -> None:
    await _get_product(session, product_id)
    try:
        for model in (ProductImage, ProductUpdate, ProductComment):
            await session.execute(delete(model).where(model.product_id == product_id))
        await session.execute(delete(Product).where(Product.id == product_id))
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception(f"Failed to delete product {product_id}")
        raise StoreError(
            "Failed to delete product", operation="delete_product", target_id=product_id
        ) from exc

    logger.info(f"Product {product_id} deleted")


async def add_comment(
    session: AsyncSession, product_id: int, author: Optional[str], content: Optional[str]
) -> CommentOut:
    if not _clean(content):
        raise ValidationError("Empty comment")
    await _get_product(session, product_id)

    comment = ProductComment(product_id=product_id, author=_clean(author), content=_clean(content))
    try:
        session.add(comment)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception(f"Failed to save comment for product {product_id}")
        raise StoreError(
            "Failed to save comment", operation="add_comment", target_id=product_id
        ) from exc

    return CommentOut.model_validate(comment)
