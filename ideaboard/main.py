"""
Idea Board — FastAPI application entry-point.

Run with:
    uvicorn ideaboard.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from ideaboard.config import Settings, settings as default_settings
from ideaboard.database import Database, get_db
from ideaboard.errors import NotFoundError, StoreError, ValidationError
from ideaboard.models.idea import Idea
from ideaboard.models.product import Product
from ideaboard.services.uploads import UPLOADS_URL_PREFIX, UploadStorage

# ── Import routers ──
from ideaboard.routers import admin, ideas, products

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent
templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": "Invalid request body"})

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"Store failure during {exc.operation} (target={exc.target_id})")
        return JSONResponse(status_code=500, content={"detail": exc.message})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    _configure_logging(settings.LOG_LEVEL)

    uploads = UploadStorage(settings.UPLOAD_DIR, settings.MAX_UPLOAD_BYTES, settings.MAX_UPLOAD_FILES)

    # ── Lifespan: open the database and create tables on startup ──
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        uploads.ensure_directory()
        db = Database(settings.DATABASE_URL, echo=settings.DEBUG, timeout=settings.DB_TIMEOUT)
        await db.create_all()
        app.state.db = db
        logger.info(f"{settings.APP_NAME} connected to {db.dialect_name} database")
        try:
            yield
        finally:
            await db.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Public idea board — submit, search and upvote ideas.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.uploads = uploads

    # Client address from X-Forwarded-For when behind a proxy (Render etc.)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    # ── Static files ──
    app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")
    app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

    # ── Register API routers ──
    app.include_router(ideas.router)
    app.include_router(products.router)
    app.include_router(admin.router)

    _register_error_handlers(app)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # ── Landing page ──
    @app.get("/")
    async def homepage(request: Request, db: AsyncSession = Depends(get_db)):
        ideas_count = (await db.execute(select(func.count(Idea.id)))).scalar() or 0
        products_count = (await db.execute(select(func.count(Product.id)))).scalar() or 0
        return templates.TemplateResponse(
            request,
            "home.html",
            {
                "app_name": settings.APP_NAME,
                "stats": {"ideas": ideas_count, "products": products_count},
            },
        )

    return app


app = create_app()
