"""
Data Ingestion Service

CONTRACT:
    Input:  FetchRequest
    Output: Page[DailyBar]

RESPONSIBILITIES:
    - Fetch daily aggregates from the Polygon API
    - Parse and normalize bars, skipping malformed records
    - Insert bars once per (symbol, date)
    - Return the stored page for the requested range
"""

from stockbars.services.data_ingestion.interface import DataIngestionServiceInterface
from stockbars.services.data_ingestion.parser import (
    ParseResult,
    SkippedRecord,
    iter_bars,
    parse_aggregates,
    parse_trading_date,
)
from stockbars.services.data_ingestion.polygon_client import PolygonClient
from stockbars.services.data_ingestion.service import DataIngestionService

__all__ = [
    "DataIngestionServiceInterface",
    "DataIngestionService",
    "PolygonClient",
    "ParseResult",
    "SkippedRecord",
    "iter_bars",
    "parse_aggregates",
    "parse_trading_date",
]
