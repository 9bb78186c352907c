"""
Stock Price API Endpoints

Ingest daily bars from Polygon and read stored bars back.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from stockbars.api.deps import get_ingestion_service, get_query_service
from stockbars.core.config import settings
from stockbars.schemas.market import DailyBar, Page
from stockbars.services.base import ValidationError
from stockbars.services.data_ingestion import DataIngestionService
from stockbars.services.query import QueryService

router = APIRouter()


@router.get("/fetch", response_model=Page[DailyBar])
async def fetch_and_save_stock_prices(
    company_symbol: str = Query(..., alias="companySymbol", description="Stock symbol (e.g., AAPL)"),
    from_date: date = Query(..., alias="fromDate", description="Start date (YYYY-MM-DD)"),
    to_date: date = Query(..., alias="toDate", description="End date (YYYY-MM-DD)"),
    page: int = Query(default=0, ge=0, description="Page number (zero-based)"),
    size: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    service: DataIngestionService = Depends(get_ingestion_service),
):
    """
    Fetch daily bars from Polygon for the date range, store them,
    and return a page of stored bars for that range.
    """
    if from_date > to_date:
        raise ValidationError("StockPriceAPI", "From date cannot be after to date")

    return await service.fetch_and_save(
        company_symbol,
        from_date.isoformat(),
        to_date.isoformat(),
        page=page,
        size=size,
    )


@router.get("/{symbol}", response_model=DailyBar)
async def get_stock_price(
    symbol: str,
    trading_date: date = Query(..., alias="date", description="Date (YYYY-MM-DD)"),
    service: QueryService = Depends(get_query_service),
):
    """
    Get the stored bar for a symbol on a given date.
    """
    return await service.get_bar(symbol, trading_date)
