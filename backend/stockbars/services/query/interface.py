"""
Query Service Interface

Defines the contract for reading stored bars.
"""

from abc import abstractmethod
from datetime import date

from pydantic import BaseModel, Field

from stockbars.services.base import BaseService
from stockbars.schemas.market import DailyBar


class BarLookup(BaseModel):
    """Key of one stored bar."""

    symbol: str = Field(..., min_length=1, description="Ticker symbol (e.g., 'AAPL')")
    trading_date: date


class QueryServiceInterface(BaseService[BarLookup, DailyBar]):
    """
    Query Service Contract.

    INPUT: BarLookup
        - symbol, trading_date

    OUTPUT: DailyBar
        - Raises BarNotFoundError when nothing is stored for the key
    """

    @property
    def name(self) -> str:
        return "QueryService"

    @abstractmethod
    async def execute(self, input_data: BarLookup) -> DailyBar:
        pass

    @abstractmethod
    async def get_bar(self, symbol: str, trading_date: date) -> DailyBar:
        """Get the stored bar for symbol on trading_date."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check the backing store answers."""
        pass
