"""
Database connection and session management.

Uses SQLite with aiosqlite for async support by default; any SQLAlchemy
async URL can be configured through DATABASE_URL.
"""

import os
import logging
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from stockbars.db.models import Base
from stockbars.core.config import DATA_DIR, settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.resolved_database_url


def is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine.

    In-memory SQLite shares one connection, otherwise every session would see
    its own empty database. File-backed SQLite keeps the default pool so each
    session gets its own connection and transaction.
    """
    if is_memory_sqlite(url):
        # Note: SQLite requires check_same_thread=False for async
        return create_async_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_async_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(url, echo=echo, pool_pre_ping=True)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


# Created lazily so importing this module never touches the filesystem
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        if not settings.database_url:
            os.makedirs(DATA_DIR, exist_ok=True)
        _engine = build_engine(DATABASE_URL, echo=settings.database_echo)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = build_session_factory(get_engine())
    return _session_factory


async def init_db(engine: Optional[AsyncEngine] = None) -> None:
    """
    Initialize the database - create all tables.
    Called on application startup.
    """
    engine = engine or get_engine()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Database initialized at: {engine.url.render_as_string(hide_password=True)}")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


async def close_db() -> None:
    """
    Close database connections.
    Called on application shutdown.
    """
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connections closed")

