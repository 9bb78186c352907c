"""
Polygon aggregates response parser.

Turns the JSON body of /v2/aggs into DailyBar values. A bad record is skipped
and reported in ParseResult.skipped; only an undecodable body or an upstream
error payload fails the whole response.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterator, Optional

from stockbars.schemas.market import DailyBar
from stockbars.services.base import ParsingError, ProviderError, ProviderErrorKind

logger = logging.getLogger(__name__)

REQUIRED_PRICE_FIELDS = ("o", "h", "l", "c", "v")
_DIGITS = re.compile(r"[0-9]+")


@dataclass
class SkippedRecord:
    """A results element that could not be mapped to a bar."""

    index: int
    reason: str


@dataclass
class ParseResult:
    bars: list[DailyBar] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def __len__(self) -> int:
        return len(self.bars)


def parse_trading_date(value: Any) -> date:
    """
    Normalize a Polygon "t" value to a calendar date.

    All-digit values are epoch milliseconds, read in the local time zone.
    Anything else must be an ISO date (YYYY-MM-DD).
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid timestamp: {value!r}")
    text = str(value).strip()
    if _DIGITS.fullmatch(text):
        return datetime.fromtimestamp(int(text) / 1000).date()
    return datetime.strptime(text, "%Y-%m-%d").date()


def _to_float(value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise ValueError(f"invalid number: {value!r}")
    return float(value)


def _to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        raise ValueError(f"invalid volume: {value!r}")
    if isinstance(value, int):
        return value
    return int(float(value))


def _map_record(symbol: str, record: Any) -> tuple[Optional[DailyBar], Optional[str]]:
    """Map one results element to a bar, or return the reason it was skipped."""
    if not isinstance(record, dict):
        return None, "record is not an object"
    if "t" not in record:
        return None, "missing timestamp field"
    try:
        trading_date = parse_trading_date(record["t"])
    except (ValueError, OverflowError, OSError) as e:
        return None, f"unparseable timestamp: {e}"

    missing = [name for name in REQUIRED_PRICE_FIELDS if name not in record]
    if missing:
        return None, f"missing required price fields {missing} on {trading_date}"

    try:
        bar = DailyBar(
            symbol=symbol,
            trading_date=trading_date,
            open_price=_to_float(record["o"]),
            high_price=_to_float(record["h"]),
            low_price=_to_float(record["l"]),
            close_price=_to_float(record["c"]),
            volume=_to_int(record["v"]),
        )
    except (TypeError, ValueError, OverflowError) as e:
        return None, f"malformed values on {trading_date}: {e}"
    return bar, None


def iter_bars(
    symbol: str,
    results: list[Any],
    skipped: Optional[list[SkippedRecord]] = None,
) -> Iterator[DailyBar]:
    """
    Yield a bar for each well-formed element of results.
    Skipped elements are appended to skipped when given.
    """
    for index, record in enumerate(results):
        bar, reason = _map_record(symbol, record)
        if bar is None:
            logger.warning(f"Skipping day data #{index} for symbol {symbol}: {reason}")
            if skipped is not None:
                skipped.append(SkippedRecord(index=index, reason=reason))
            continue
        yield bar


def parse_aggregates(symbol: str, raw_json: str) -> ParseResult:
    """
    Parse a Polygon aggregates response body.

    Raises:
        ProviderError: body carries an "error" field or a non-OK "status"
        ParsingError: body is not valid JSON
    """
    try:
        root = json.loads(raw_json)
    except (TypeError, ValueError) as e:
        logger.error(f"Error parsing Polygon API JSON response: {e}")
        raise ParsingError("Error parsing Polygon API JSON response") from e

    result = ParseResult()
    if not isinstance(root, dict):
        logger.warning(f"Polygon response for {symbol} is not an object; no results")
        return result

    if "error" in root:
        message = str(root["error"])
        logger.error(f"Polygon API returned an error: {message}")
        raise ProviderError(f"Polygon API error: {message}", ProviderErrorKind.UPSTREAM_ERROR)

    if "status" in root and str(root["status"]).upper() != "OK":
        status = str(root["status"])
        logger.error(f"Polygon API returned non-OK status: {status}")
        raise ProviderError(
            f"Polygon API returned status: {status}", ProviderErrorKind.UPSTREAM_STATUS
        )

    results = root.get("results")
    if not isinstance(results, list) or not results:
        logger.warning(f"No results found in Polygon API response for symbol {symbol}")
        return result

    result.bars.extend(iter_bars(symbol, results, result.skipped))
    if result.skipped:
        logger.info(
            f"Parsed {len(result.bars)} bars for {symbol}, skipped {result.skipped_count}"
        )
    return result
