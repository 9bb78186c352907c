"""
CONTRACT: Daily Bar Ingestion & Query

Input: FetchRequest
Output: Page[DailyBar]

Daily bars fetched from Polygon, stored once per (symbol, trading date)
and served back by date or by paginated date range.
"""

import math
from datetime import date
from typing import Generic, Optional, TypeVar
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, computed_field, field_validator

T = TypeVar("T")


def normalize_symbol(symbol: str) -> str:
    """Ticker symbols are stored and looked up upper-cased."""
    return symbol.strip().upper()


# =============================================================================
# INPUT: FetchRequest
# =============================================================================


class FetchRequest(BaseModel):
    """
    Request to ingest a date range of daily bars.
    Sent by: HTTP boundary
    Received by: Ingestion Service
    """

    symbol: str = Field(..., description="Ticker symbol (e.g., 'AAPL')")
    from_date: str = Field(..., description="Start date (YYYY-MM-DD), inclusive")
    to_date: str = Field(..., description="End date (YYYY-MM-DD), inclusive")
    page: int = Field(default=0, ge=0, description="Zero-based page number")
    size: int = Field(default=20, ge=1, le=500, description="Rows per page")
    limit: int = Field(default=120, ge=1, description="Provider result limit")

    @field_validator("symbol", "from_date", "to_date")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


# =============================================================================
# OUTPUT: DailyBar
# =============================================================================


class DailyBar(BaseModel):
    """One trading day's aggregated prices for a symbol."""

    model_config = ConfigDict(from_attributes=True)

    symbol: str
    trading_date: date = Field(
        ...,
        validation_alias=AliasChoices("trading_date", "date"),
        serialization_alias="date",
    )
    open_price: Optional[float] = None
    close_price: Optional[float] = None
    high_price: Optional[float] = None
    low_price: Optional[float] = None
    volume: Optional[int] = None

    @property
    def key(self) -> tuple[str, date]:
        return self.symbol, self.trading_date


# =============================================================================
# OUTPUT: Page
# =============================================================================


class Page(BaseModel, Generic[T]):
    """A bounded slice of an ordered result set."""

    content: list[T]
    page: int = Field(..., ge=0)
    size: int = Field(..., ge=1)
    total_elements: int = Field(..., ge=0)

    @computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.total_elements else 0

    @computed_field
    @property
    def first(self) -> bool:
        return self.page == 0

    @computed_field
    @property
    def last(self) -> bool:
        return self.page + 1 >= self.total_pages

    @computed_field
    @property
    def empty(self) -> bool:
        return not self.content

    @classmethod
    def empty_page(cls, page: int, size: int) -> "Page[T]":
        return cls(content=[], page=page, size=size, total_elements=0)
