"""
Polygon API Client

Fetches daily aggregate bars for one symbol and date range.

API Documentation: https://polygon.io/docs/stocks/get_v2_aggs_ticker__stocksticker__range__multiplier___timespan___from___to
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from stockbars.core.config import settings
from stockbars.services.base import (
    ProviderError,
    ProviderErrorKind,
    RateLimitError,
    ValidationError,
)

logger = logging.getLogger(__name__)

AGGS_PATH = "/v2/aggs/ticker/{symbol}/range/1/day/{from_date}/{to_date}"
DEFAULT_LIMIT = 120


class PolygonClient:
    """
    Polygon aggregates client.

    The aiohttp session is passed in by the caller; a client built without
    one creates its own on first use and closes it in close().
    No retries and no caching: every fetch is one GET.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self._api_key = api_key if api_key is not None else settings.polygon_api_key
        self._base_url = (base_url or settings.polygon_base_url).rstrip("/")
        self._timeout = aiohttp.ClientTimeout(
            total=timeout_seconds or settings.polygon_timeout_seconds
        )
        self._session = session
        self._owns_session = session is None

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    @property
    def is_open(self) -> bool:
        return self._session is None or not self._session.closed

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or (self._owns_session and self._session.closed):
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    def build_url(self, symbol: str, from_date: str, to_date: str) -> str:
        return self._base_url + AGGS_PATH.format(
            symbol=symbol, from_date=from_date, to_date=to_date
        )

    def build_params(self, limit: int) -> dict:
        return {
            "adjusted": "true",
            "sort": "asc",
            "limit": str(limit),
            "apiKey": self._api_key or "",
        }

    async def fetch(
        self,
        symbol: str,
        from_date: str,
        to_date: str,
        limit: int = DEFAULT_LIMIT,
    ) -> str:
        """
        Fetch daily bars for symbol between from_date and to_date (YYYY-MM-DD).

        Args:
            symbol: Ticker symbol (e.g., "AAPL")
            from_date: Range start, inclusive
            to_date: Range end, inclusive
            limit: Maximum number of bars Polygon should return

        Returns:
            Raw JSON response body

        Raises:
            ValidationError: blank arguments or non-positive limit
            ProviderError: any transport or HTTP failure, classified by kind
        """
        if symbol is None or not symbol.strip():
            raise ValidationError("PolygonClient", "Stock symbol cannot be null or empty")
        if from_date is None or not from_date.strip():
            raise ValidationError("PolygonClient", "From date cannot be null or empty")
        if to_date is None or not to_date.strip():
            raise ValidationError("PolygonClient", "To date cannot be null or empty")
        if limit < 1:
            raise ValidationError("PolygonClient", "Limit must be a positive integer")

        url = self.build_url(symbol, from_date, to_date)
        logger.info(f"Fetching stock data for symbol {symbol} from {from_date} to {to_date}")

        try:
            session = await self._ensure_session()
            async with session.get(
                url, params=self.build_params(limit), timeout=self._timeout
            ) as resp:
                body = await resp.text()
                if resp.status >= 400:
                    raise self._classify_status(resp.status, symbol, body)
        except ProviderError:
            raise
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
            logger.error(f"Network error when connecting to Polygon API: {e}")
            raise ProviderError(
                "Network error when connecting to Polygon API",
                ProviderErrorKind.NETWORK_ERROR,
            ) from e
        except Exception as e:
            logger.error(f"Unexpected error when fetching stock data: {e}")
            raise ProviderError(
                f"Unexpected error when fetching stock data: {e}",
                ProviderErrorKind.UNEXPECTED,
            ) from e

        if body is None or not body.strip():
            logger.error(f"Empty response from Polygon API for {symbol}")
            raise ProviderError(
                "Received empty response from Polygon API",
                ProviderErrorKind.EMPTY_RESPONSE,
            )

        return body

    def _classify_status(self, status: int, symbol: str, body: str) -> ProviderError:
        """Map an HTTP error status to a ProviderError."""
        if status in (401, 403):
            logger.error("Authentication error with Polygon API. Check your API key.")
            return ProviderError(
                "Authentication error with Polygon API. Check your API key.",
                ProviderErrorKind.AUTHENTICATION,
                status,
            )
        if status == 404:
            logger.error(f"Resource not found for symbol: {symbol}")
            return ProviderError(
                f"Stock data not found for symbol: {symbol}",
                ProviderErrorKind.NOT_FOUND,
                status,
            )
        if status == 429:
            logger.error("Rate limit exceeded for Polygon API")
            return RateLimitError("Rate limit exceeded for Polygon API", status)
        if status < 500:
            detail = (body or "").strip()[:200]
            logger.error(f"Client error when calling Polygon API: {status} {detail}")
            return ProviderError(
                f"Error fetching stock data: {status} {detail}".rstrip(),
                ProviderErrorKind.CLIENT_ERROR,
                status,
            )
        logger.error(f"Polygon API server error: {status}")
        return ProviderError(
            f"Polygon API server error: {status}",
            ProviderErrorKind.SERVER_ERROR,
            status,
        )
