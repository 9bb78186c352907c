"""
Query Service Implementation

Read-through lookup of one bar: cache first, storage on miss.
"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from stockbars.db.repository import DailyBarRepository
from stockbars.schemas.market import DailyBar, normalize_symbol
from stockbars.services.base import BarNotFoundError, ValidationError
from stockbars.services.cache.redis_client import BarCache
from stockbars.services.query.interface import BarLookup, QueryServiceInterface

logger = logging.getLogger(__name__)


class QueryService(QueryServiceInterface):
    """Serves stored bars; the cache is an explicit collaborator."""

    def __init__(self, repository: DailyBarRepository, cache: Optional[BarCache] = None):
        self._repository = repository
        self._cache = cache

    async def execute(self, input_data: BarLookup) -> DailyBar:
        return await self.get_bar(input_data.symbol, input_data.trading_date)

    async def get_bar(self, symbol: str, trading_date: date) -> DailyBar:
        """
        Get the stored bar for symbol on trading_date.

        Raises:
            ValidationError: blank symbol or missing date
            BarNotFoundError: nothing stored for (symbol, trading_date)
        """
        if symbol is None or not symbol.strip():
            raise ValidationError(self.name, "Stock symbol cannot be null or empty")
        if trading_date is None:
            raise ValidationError(self.name, "Date cannot be null")

        symbol = normalize_symbol(symbol)
        logger.info(f"Retrieving stock price for symbol {symbol} on date {trading_date}")

        if self._cache is not None:
            cached = await self._cache.get(symbol, trading_date)
            if cached is not None:
                logger.debug(f"Cache hit for {symbol} {trading_date}")
                return cached

        bar = await self._repository.find_one(symbol, trading_date)
        if bar is None:
            logger.warning(f"Stock data not found for symbol {symbol} on date {trading_date}")
            raise BarNotFoundError(symbol, trading_date)

        if self._cache is not None:
            await self._cache.set(bar)
        return bar

    async def health_check(self) -> bool:
        try:
            return await self._repository.ping()
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False
