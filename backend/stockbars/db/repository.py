"""
Daily bar repository.

Point lookup, paginated range query and all-or-nothing bulk insert over the
stock_price table.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockbars.db.models import DailyBarRecord
from stockbars.schemas.market import DailyBar, Page
from stockbars.services.base import StorageIntegrityError

logger = logging.getLogger(__name__)


class DailyBarRepository:
    """Storage access for daily bars. Each call runs in its own session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find_one(self, symbol: str, trading_date: date) -> Optional[DailyBar]:
        """Get the bar stored for (symbol, trading_date), or None."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(DailyBarRecord).where(
                    DailyBarRecord.symbol == symbol,
                    DailyBarRecord.trading_date == trading_date,
                )
            )
            row = result.scalar_one_or_none()
            return DailyBar.model_validate(row) if row is not None else None

    async def find_range(
        self,
        symbol: str,
        from_date: date,
        to_date: date,
        page: int,
        size: int,
    ) -> Page[DailyBar]:
        """
        Get one page of bars for symbol with from_date <= date <= to_date,
        ordered by trading date ascending.
        """
        criteria = (
            DailyBarRecord.symbol == symbol,
            DailyBarRecord.trading_date >= from_date,
            DailyBarRecord.trading_date <= to_date,
        )
        async with self._session_factory() as session:
            total = await session.scalar(
                select(func.count()).select_from(DailyBarRecord).where(*criteria)
            )
            result = await session.execute(
                select(DailyBarRecord)
                .where(*criteria)
                .order_by(DailyBarRecord.trading_date.asc())
                .offset(page * size)
                .limit(size)
            )
            rows = result.scalars().all()

        return Page[DailyBar](
            content=[DailyBar.model_validate(row) for row in rows],
            page=page,
            size=size,
            total_elements=total or 0,
        )

    async def save_all(self, bars: Iterable[DailyBar]) -> int:
        """
        Insert all bars in a single transaction.

        Raises:
            StorageIntegrityError: a bar collides with a stored (symbol, date)
                or with another bar in the batch; nothing is written.
        """
        records = [
            DailyBarRecord(
                symbol=bar.symbol,
                trading_date=bar.trading_date,
                open_price=bar.open_price,
                close_price=bar.close_price,
                high_price=bar.high_price,
                low_price=bar.low_price,
                volume=bar.volume,
            )
            for bar in bars
        ]
        if not records:
            return 0

        async with self._session_factory() as session:
            try:
                async with session.begin():
                    session.add_all(records)
            except IntegrityError as e:
                logger.error(f"Unique constraint violated saving {len(records)} bars: {e.orig}")
                raise StorageIntegrityError(
                    "Stock price already exists for symbol and date",
                    {"symbol": records[0].symbol, "count": len(records)},
                ) from e

        logger.debug(f"Saved {len(records)} bars")
        return len(records)

    async def ping(self) -> bool:
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True
