"""
SQLAlchemy models for the StockBars database.

One row per (symbol, trading date) daily bar.
"""

from sqlalchemy import (
    BigInteger,
    Column,
    Date,
    Float,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class DailyBarRecord(Base):
    """
    Daily OHLCV bar ingested from Polygon.
    The (symbol, date) pair is unique; inserts that collide fail.
    """
    __tablename__ = "stock_price"

    id = Column(Integer, primary_key=True, autoincrement=True)
    symbol = Column("company_symbol", String(20), nullable=False)
    trading_date = Column("date", Date, nullable=False)

    open_price = Column(Float, nullable=True)
    close_price = Column(Float, nullable=True)
    high_price = Column(Float, nullable=True)
    low_price = Column(Float, nullable=True)
    volume = Column(BigInteger, nullable=True)

    __table_args__ = (
        UniqueConstraint("company_symbol", "date", name="uq_stock_price_symbol_date"),
        Index("idx_company_symbol", "company_symbol"),
        Index("idx_date", "date"),
    )
