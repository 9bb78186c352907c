"""
Database module for StockBars.

Provides the async engine, session factory, models and bar repository.
"""

from stockbars.db.database import (
    build_engine,
    build_session_factory,
    close_db,
    get_engine,
    get_session_factory,
    init_db,
)
from stockbars.db.models import Base, DailyBarRecord
from stockbars.db.repository import DailyBarRepository

__all__ = [
    "build_engine",
    "build_session_factory",
    "close_db",
    "get_engine",
    "get_session_factory",
    "init_db",
    "Base",
    "DailyBarRecord",
    "DailyBarRepository",
]
