"""
Data Ingestion Service Implementation

Fetches daily bars from Polygon, stores them, and returns the stored page.
Polygon → parse → insert (fail on conflict) → paginated read-back.
"""

import logging
from datetime import date
from typing import Optional

from stockbars.core.config import settings
from stockbars.db.repository import DailyBarRepository
from stockbars.schemas.market import DailyBar, FetchRequest, Page, normalize_symbol
from stockbars.services.base import (
    IngestionError,
    ParsingError,
    ProviderError,
    StorageIntegrityError,
    ValidationError,
)
from stockbars.services.cache.redis_client import BarCache
from stockbars.services.data_ingestion.interface import DataIngestionServiceInterface
from stockbars.services.data_ingestion.parser import parse_aggregates
from stockbars.services.data_ingestion.polygon_client import PolygonClient

logger = logging.getLogger(__name__)


def _parse_iso_date(value: str, label: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError("IngestionService", f"{label} must be YYYY-MM-DD: {value}") from e


class DataIngestionService(DataIngestionServiceInterface):
    """
    Data Ingestion Service.

    Collaborators are passed in; nothing here is a process-wide singleton.
    """

    def __init__(
        self,
        client: PolygonClient,
        repository: DailyBarRepository,
        cache: Optional[BarCache] = None,
        provider_limit: Optional[int] = None,
    ):
        self._client = client
        self._repository = repository
        self._cache = cache
        self._provider_limit = provider_limit or settings.polygon_default_limit

    async def execute(self, input_data: FetchRequest) -> Page[DailyBar]:
        return await self.fetch_and_save(
            input_data.symbol,
            input_data.from_date,
            input_data.to_date,
            page=input_data.page,
            size=input_data.size,
            limit=input_data.limit,
        )

    async def fetch_and_save(
        self,
        symbol: str,
        from_date: str,
        to_date: str,
        page: int = 0,
        size: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Page[DailyBar]:
        """
        Fetch bars for symbol between from_date and to_date, store them and
        return the requested page of stored bars in that range.

        Raises:
            ValidationError: blank symbol or dates
            ProviderError: Polygon call failed or returned an error payload
            ParsingError: Polygon body was not valid JSON
            StorageIntegrityError: a bar for (symbol, date) is already stored
            IngestionError: anything else
        """
        if symbol is None or not symbol.strip():
            raise ValidationError(self.name, "Stock symbol cannot be null or empty")
        if from_date is None or not from_date.strip():
            raise ValidationError(self.name, "From date cannot be null or empty")
        if to_date is None or not to_date.strip():
            raise ValidationError(self.name, "To date cannot be null or empty")

        if size is None:
            size = settings.default_page_size
        if page < 0 or size < 1:
            raise ValidationError(self.name, "Page must be >= 0 and size >= 1")

        symbol = normalize_symbol(symbol)
        logger.info(f"Fetching stock prices for symbol {symbol} from {from_date} to {to_date}")

        try:
            start = _parse_iso_date(from_date, "From date")
            end = _parse_iso_date(to_date, "To date")

            body = await self._client.fetch(
                symbol, from_date.strip(), to_date.strip(), limit or self._provider_limit
            )
            parsed = parse_aggregates(symbol, body)

            if not parsed.bars:
                logger.warning(
                    f"No stock price data found for symbol {symbol} in the specified date range"
                )
                return Page[DailyBar].empty_page(page, size)

            logger.info(f"Saving {len(parsed.bars)} stock price records for symbol {symbol}")
            await self._repository.save_all(parsed.bars)

            if self._cache is not None:
                await self._cache.evict_many(bar.key for bar in parsed.bars)

            return await self._repository.find_range(symbol, start, end, page, size)

        except (ValidationError, ProviderError, ParsingError, StorageIntegrityError):
            raise
        except Exception as e:
            logger.error(f"Unexpected error in fetch_and_save: {e}")
            raise IngestionError(f"Error processing stock price data: {e}") from e

    async def health_check(self) -> bool:
        """Provider client has a key and an open session."""
        return self._client.has_api_key and self._client.is_open
