"""Admin router — moderation and product management behind a shared admin key.

Endpoints:
    DELETE /api/admin/ideas/{id}            → delete an idea
    GET    /api/admin/ideas/{id}            → same, for link-based moderation
    GET    /api/admin/export                → JSON download of every idea
    GET    /api/admin/products              → full product list
    POST   /api/admin/products              → create product (multipart, images)
    POST   /api/admin/products/{id}/updates → post a product update (multipart, images)
    DELETE /api/admin/products/{id}         → delete product and its children
"""

import json
import logging
import secrets
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.database import get_db
from ideaboard.routers.ideas import parse_id
from ideaboard.schemas.idea import IdeaExport
from ideaboard.schemas.product import ProductOut, ProductUpdateOut
from ideaboard.services import products
from ideaboard.services.ideas import delete_idea, export_ideas
from ideaboard.services.uploads import UploadStorage

logger = logging.getLogger(__name__)

ADMIN_KEY_HEADER = "x-admin-key"


def require_admin(request: Request) -> None:
    """Accept the key from ``?admin_key=`` or the ``X-Admin-Key`` header."""
    key = request.query_params.get("admin_key") or request.headers.get(ADMIN_KEY_HEADER)
    expected = request.app.state.settings.ADMIN_KEY
    if not key or not secrets.compare_digest(key.encode(), expected.encode()):
        logger.warning(f"Admin access denied for {request.method} {request.url.path}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access denied")


def get_uploads(request: Request) -> UploadStorage:
    return request.app.state.uploads


router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


# ═══════════════════════════════════════════════════════════════
#  Ideas moderation
# ═══════════════════════════════════════════════════════════════

@router.api_route("/ideas/{idea_id}", methods=["DELETE", "GET"])
async def admin_delete_idea(idea_id: str, db: AsyncSession = Depends(get_db)):
    target = parse_id(idea_id, "idea")
    await delete_idea(db, target)
    return {"success": True, "deletedId": target}


@router.get("/export")
async def admin_export(db: AsyncSession = Depends(get_db)):
    rows = [IdeaExport.model_validate(i).model_dump(mode="json") for i in await export_ideas(db)]
    stamp = datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")
    filename = f"ideaboard-ideas-export-{stamp}.json"
    return Response(
        content=json.dumps(rows, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ═══════════════════════════════════════════════════════════════
#  Products
# ═══════════════════════════════════════════════════════════════

@router.get("/products", response_model=List[ProductOut])
async def admin_list_products(db: AsyncSession = Depends(get_db)):
    return await products.list_products_admin(db)


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def admin_create_product(
    name: Optional[str] = Form(None),
    short_desc: Optional[str] = Form(""),
    long_desc: Optional[str] = Form(""),
    status_: Optional[str] = Form("", alias="status"),
    release_date: Optional[str] = Form(""),
    price: Optional[str] = Form(""),
    creator: Optional[str] = Form(""),
    images: List[UploadFile] = File(default=[]),
    uploads: UploadStorage = Depends(get_uploads),
    db: AsyncSession = Depends(get_db),
):
    if not (name or "").strip():
        raise HTTPException(status_code=400, detail="Product name is required")

    filenames = await uploads.save_all(images)
    fields = {
        "short_desc": short_desc,
        "long_desc": long_desc,
        "status": status_,
        "release_date": release_date,
        "price": price,
        "creator": creator,
    }
    try:
        return await products.create_product(db, name, fields, filenames)
    except Exception:
        uploads.remove(filenames)
        raise


@router.post(
    "/products/{product_id}/updates",
    response_model=ProductUpdateOut,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_update(
    product_id: str,
    title: Optional[str] = Form(""),
    body: Optional[str] = Form(""),
    images: List[UploadFile] = File(default=[]),
    uploads: UploadStorage = Depends(get_uploads),
    db: AsyncSession = Depends(get_db),
):
    target = parse_id(product_id, "product")
    filenames = await uploads.save_all(images)
    try:
        return await products.add_update(db, target, title, body, filenames)
    except Exception:
        uploads.remove(filenames)
        raise


@router.delete("/products/{product_id}")
async def admin_delete_product(product_id: str, db: AsyncSession = Depends(get_db)):
    target = parse_id(product_id, "product")
    await products.delete_product(db, target)
    return {"success": True, "deletedId": target}
