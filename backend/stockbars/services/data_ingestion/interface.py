"""
Data Ingestion Service Interface

Defines the contract for the data ingestion layer.
"""

from abc import abstractmethod
from typing import Optional

from stockbars.services.base import BaseService
from stockbars.schemas.market import DailyBar, FetchRequest, Page


class DataIngestionServiceInterface(BaseService[FetchRequest, Page[DailyBar]]):
    """
    Data Ingestion Service Contract.

    INPUT: FetchRequest
        - symbol: Ticker to fetch
        - from_date / to_date: Inclusive date range (YYYY-MM-DD)
        - page / size: Page of stored bars to return

    OUTPUT: Page[DailyBar]
        - Stored bars for the symbol and range after the insert,
          including rows ingested earlier
    """

    @property
    def name(self) -> str:
        return "IngestionService"

    @abstractmethod
    async def execute(self, input_data: FetchRequest) -> Page[DailyBar]:
        """Fetch, normalize and store daily bars."""
        pass

    @abstractmethod
    async def fetch_and_save(
        self,
        symbol: str,
        from_date: str,
        to_date: str,
        page: int = 0,
        size: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Page[DailyBar]:
        """Fetch a date range from the provider and store it."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the provider client is usable."""
        pass
