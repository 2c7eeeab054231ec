# app/main.py
import os
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.config import settings
from app.db.init_db import init_models
from app.db.session import engine, AsyncSessionLocal
from app.feed.errors import CommentNotFoundError, FeedStoreError
from app.feed.store import FeedStore
from app.media.storage import PostImageBucket

# routers
from app.feed.router import router as feed_router
from app.comments.router import router as comments_router

log = logging.getLogger("uvicorn")

app = FastAPI(title="Trends Feed API")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# imágenes del bucket → /media/<bucket>/<archivo>
app.mount(
    "/media",
    StaticFiles(directory=settings.MEDIA_DIR, check_dir=False),
    name="media",
)


@app.middleware("http")
async def cache_bucket_images(request: Request, call_next):
    """
    Cache-Control para las imágenes de posts (nombre único por subida).
    """
    response = await call_next(request)
    if request.url.path.startswith(f"/media/{settings.POST_IMAGES_BUCKET}/"):
        response.headers["Cache-Control"] = f"public, max-age={settings.IMAGE_CACHE_CONTROL}"
    return response


# -------------------------
# errores → un solo mensaje (banner en el front)
# -------------------------
@app.exception_handler(CommentNotFoundError)
async def comment_not_found_handler(request: Request, exc: CommentNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(FeedStoreError)
async def feed_store_error_handler(request: Request, exc: FeedStoreError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    return JSONResponse(status_code=409, content={"detail": str(exc.orig)})


@app.exception_handler(SQLAlchemyError)
async def db_error_handler(request: Request, exc: SQLAlchemyError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.on_event("startup")
async def on_startup():
    log.info("🚀 Iniciando servicio…")
    os.makedirs(settings.MEDIA_DIR, exist_ok=True)
    await init_models(engine)
    app.state.feed_store = FeedStore(
        AsyncSessionLocal,
        PostImageBucket(),
        user_id=settings.FIXED_USER_ID,
    )
    log.info("✅ Startup listo.")


@app.get("/api/health/")
async def health():
    return {"ok": True, "service": "fastapi", "msg": "healthy ✨"}


# routers
app.include_router(feed_router)      # /api/feed/...
app.include_router(comments_router)  # /api/comments/...
