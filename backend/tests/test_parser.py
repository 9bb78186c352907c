"""
Tests for parsing Polygon aggregates responses.
"""

import json
from datetime import date, datetime

import pytest

from stockbars.services.base import ParsingError, ProviderError, ProviderErrorKind
from stockbars.services.data_ingestion.parser import (
    iter_bars,
    parse_aggregates,
    parse_trading_date,
)
from tests.fakes import AAPL_RESULTS, polygon_body


class TestTopLevel:
    def test_error_field_raises_provider_error(self):
        body = json.dumps({"status": "ERROR", "error": "API Key Invalid"})
        with pytest.raises(ProviderError) as exc_info:
            parse_aggregates("AAPL", body)
        assert exc_info.value.kind == ProviderErrorKind.UPSTREAM_ERROR
        assert "API Key Invalid" in exc_info.value.message

    def test_non_ok_status_raises_provider_error(self):
        with pytest.raises(ProviderError) as exc_info:
            parse_aggregates("AAPL", polygon_body(AAPL_RESULTS, status="NOT_AUTHORIZED"))
        assert exc_info.value.kind == ProviderErrorKind.UPSTREAM_STATUS
        assert "NOT_AUTHORIZED" in exc_info.value.message

    def test_status_check_is_case_insensitive(self):
        result = parse_aggregates("AAPL", polygon_body(AAPL_RESULTS, status="ok"))
        assert len(result.bars) == 3

    def test_missing_status_is_accepted(self):
        result = parse_aggregates("AAPL", json.dumps({"results": AAPL_RESULTS}))
        assert len(result.bars) == 3

    @pytest.mark.parametrize(
        "body",
        [
            polygon_body(),
            polygon_body([]),
            json.dumps({"status": "OK", "results": None}),
            json.dumps({"status": "OK", "results": {"t": 1}}),
            json.dumps([1, 2, 3]),
        ],
    )
    def test_no_results_is_empty_not_error(self, body):
        result = parse_aggregates("AAPL", body)
        assert result.bars == []
        assert result.skipped == []

    @pytest.mark.parametrize("body", ["not json", "{\"status\": ", ""])
    def test_undecodable_body_raises_parsing_error(self, body):
        with pytest.raises(ParsingError) as exc_info:
            parse_aggregates("AAPL", body)
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestRecords:
    def test_maps_fields(self):
        result = parse_aggregates("AAPL", polygon_body(AAPL_RESULTS))

        bar = result.bars[1]
        assert bar.symbol == "AAPL"
        assert bar.trading_date == date(2023, 1, 15)
        assert bar.open_price == 173.97
        assert bar.close_price == 173.57
        assert bar.high_price == 174.3
        assert bar.low_price == 173.12
        assert bar.volume == 77287356

    def test_partial_tolerance(self):
        results = [
            AAPL_RESULTS[0],
            {"o": 1.0, "h": 1.0, "l": 1.0, "c": 1.0, "v": 1},  # no timestamp
            {"t": "2023-01-14", "o": 1.0, "h": 1.0, "l": 1.0, "c": 1.0},  # no volume
            {"t": "2023-01-16", "o": "abc", "h": 1.0, "l": 1.0, "c": 1.0, "v": 1},
            {"t": "not-a-date", "o": 1.0, "h": 1.0, "l": 1.0, "c": 1.0, "v": 1},
            {"t": "2023-01-18", "o": None, "h": 1.0, "l": 1.0, "c": 1.0, "v": 1},
            "garbage",
            AAPL_RESULTS[2],
        ]

        result = parse_aggregates("AAPL", polygon_body(results))

        assert len(result.bars) == 2
        assert result.skipped_count == 6
        assert [s.index for s in result.skipped] == [1, 2, 3, 4, 5, 6]
        assert "timestamp" in result.skipped[0].reason

    def test_numeric_strings_are_accepted(self):
        results = [{"t": "2023-01-15", "o": "10.5", "h": "11", "l": "10", "c": "10.75", "v": "1200"}]
        bar = parse_aggregates("AAPL", polygon_body(results)).bars[0]
        assert bar.open_price == 10.5
        assert bar.volume == 1200

    def test_fractional_volume_is_truncated(self):
        results = [{"t": "2023-01-15", "o": 1, "h": 1, "l": 1, "c": 1, "v": 1234.0}]
        assert parse_aggregates("AAPL", polygon_body(results)).bars[0].volume == 1234

    def test_iter_bars_is_lazy(self):
        skipped = []
        bars = iter_bars("AAPL", [AAPL_RESULTS[0], {"t": "2023-01-14"}, AAPL_RESULTS[2]], skipped)

        first = next(bars)
        assert first.trading_date == date(2023, 1, 13)
        assert skipped == []

        rest = list(bars)
        assert len(rest) == 1
        assert len(skipped) == 1


class TestTradingDate:
    def test_epoch_millis_uses_local_time_zone(self):
        expected = datetime.fromtimestamp(1710374400000 / 1000).date()
        assert parse_trading_date(1710374400000) == expected
        assert parse_trading_date("1710374400000") == expected

    def test_iso_date(self):
        assert parse_trading_date("2023-01-15") == date(2023, 1, 15)

    @pytest.mark.parametrize("value", ["2023/01/15", "15-01-2023", "1.7103744E12", True, ""])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_trading_date(value)

    def test_epoch_record_round_trip(self):
        results = [{"t": 1710374400000, "o": 1, "h": 2, "l": 0.5, "c": 1.5, "v": 10}]
        bar = parse_aggregates("MSFT", polygon_body(results)).bars[0]
        assert bar.trading_date == datetime.fromtimestamp(1710374400).date()
