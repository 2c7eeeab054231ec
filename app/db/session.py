# app/db/session.py
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.core.config import settings


def _enable_sqlite_fks(dbapi_conn, _record) -> None:
    # SQLite no aplica ON DELETE CASCADE si no se activa por conexión
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


def build_engine(db_url: str) -> AsyncEngine:
    """
    Crea el engine async según el driver de la URL.
    Timeouts cortos para postgres: si la DB no responde → falla rápido (5s).
    """
    if db_url.startswith("sqlite"):
        kwargs: dict = {}
        if db_url.endswith("://") or ":memory:" in db_url:
            # una sola conexión compartida, si no cada sesión ve una DB vacía
            kwargs = {
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            }
        engine = create_async_engine(db_url, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_fks)
        return engine

    if db_url.startswith("postgresql+psycopg"):
        connect_args = {"connect_timeout": 5}
    elif db_url.startswith("postgresql+asyncpg"):
        connect_args = {
            "timeout": 5,
            "server_settings": {"client_encoding": "UTF8"},
        }
    else:
        connect_args = {}

    return create_async_engine(
        db_url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=5,
        max_overflow=10,
        connect_args=connect_args,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_session_factory(engine)
