"""
StockBars Schema Contracts

JSON contracts between the HTTP boundary and the services.
"""

from stockbars.schemas.market import (
    DailyBar,
    FetchRequest,
    Page,
    normalize_symbol,
)

__all__ = [
    "DailyBar",
    "FetchRequest",
    "Page",
    "normalize_symbol",
]
