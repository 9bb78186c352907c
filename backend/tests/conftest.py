"""Pytest configuration and fixtures for StockBars testing."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from stockbars.db.database import build_engine, build_session_factory, init_db
from stockbars.db.repository import DailyBarRepository
from stockbars.services.cache import BarCache


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: marks tests requiring network or external services",
    )


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator:
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def repository(session_factory) -> DailyBarRepository:
    return DailyBarRepository(session_factory)


@pytest.fixture
def bar_cache() -> BarCache:
    """Cache without Redis, so the in-memory fallback is used."""
    return BarCache(redis_client=None, region="test", ttl_seconds=0)


@pytest_asyncio.fixture
async def file_repository(tmp_path) -> AsyncGenerator:
    """Repository on a SQLite file, with one connection per session."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'stockbars.db'}")
    await init_db(engine)
    yield DailyBarRepository(build_session_factory(engine))
    await engine.dispose()
