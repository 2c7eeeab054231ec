import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from app.db.base import Base

# 👇 registra los modelos en Base.metadata
from app.feed.models import Post, PostLike  # noqa: F401
from app.comments.models import Comment  # noqa: F401

log = logging.getLogger("uvicorn")


async def init_models(engine: AsyncEngine) -> None:
    """
    Crea/verifica todas las tablas declaradas en Base.metadata
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("✅ DB init: tablas creadas/verificadas.")
    except Exception as e:
        log.error(f"❌ DB init falló: {e!r}")
        raise
