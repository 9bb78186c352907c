"""
Tests for the HTTP boundary: routing, parameter handling and error mapping.
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from stockbars.main import create_app
from stockbars.schemas.market import DailyBar, Page
from stockbars.services.base import (
    BarNotFoundError,
    IngestionError,
    ParsingError,
    ProviderError,
    ProviderErrorKind,
    StorageIntegrityError,
)

BAR = DailyBar(
    symbol="AAPL",
    trading_date=date(2023, 1, 15),
    open_price=173.97,
    close_price=173.57,
    high_price=174.3,
    low_price=173.12,
    volume=77287356,
)


class StubIngestionService:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def fetch_and_save(self, symbol, from_date, to_date, page=0, size=None, limit=None):
        self.calls.append((symbol, from_date, to_date, page, size))
        if self.error is not None:
            raise self.error
        return self.result

    async def health_check(self):
        return True


class StubQueryService:
    def __init__(self, bar=None, error=None):
        self.bar = bar
        self.error = error

    async def get_bar(self, symbol, trading_date):
        if self.error is not None:
            raise self.error
        return self.bar

    async def health_check(self):
        return True


def make_client(ingestion=None, query=None) -> TestClient:
    # No context manager: the lifespan (database, Redis, HTTP session) is not started
    app = create_app()
    app.state.ingestion_service = ingestion or StubIngestionService()
    app.state.query_service = query or StubQueryService()
    return TestClient(app, raise_server_exceptions=False)


FETCH_PARAMS = {"companySymbol": "AAPL", "fromDate": "2023-01-01", "toDate": "2023-01-31"}


class TestFetchEndpoint:
    def test_returns_page(self):
        page = Page[DailyBar](content=[BAR], page=0, size=20, total_elements=1)
        ingestion = StubIngestionService(result=page)
        client = make_client(ingestion=ingestion)

        response = client.get("/api/v1/stocks/fetch", params={**FETCH_PARAMS, "page": 0, "size": 20})

        assert response.status_code == 200
        body = response.json()
        assert body["total_elements"] == 1
        assert body["total_pages"] == 1
        assert body["content"][0]["date"] == "2023-01-15"
        assert body["content"][0]["close_price"] == 173.57
        assert ingestion.calls == [("AAPL", "2023-01-01", "2023-01-31", 0, 20)]

    def test_from_after_to_is_bad_request(self):
        ingestion = StubIngestionService()
        client = make_client(ingestion=ingestion)

        response = client.get(
            "/api/v1/stocks/fetch",
            params={"companySymbol": "AAPL", "fromDate": "2023-02-01", "toDate": "2023-01-01"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "From date cannot be after to date"
        assert ingestion.calls == []

    @pytest.mark.parametrize(
        "params",
        [
            {"fromDate": "2023-01-01", "toDate": "2023-01-31"},
            {**FETCH_PARAMS, "fromDate": "January"},
            {**FETCH_PARAMS, "size": 0},
            {**FETCH_PARAMS, "page": -1},
        ],
    )
    def test_invalid_parameters(self, params):
        response = make_client().get("/api/v1/stocks/fetch", params=params)
        assert response.status_code == 400
        assert response.json()["error"] == "Bad Request"

    @pytest.mark.parametrize(
        "error,status,label",
        [
            (ProviderError("Polygon API error: API Key Invalid", ProviderErrorKind.UPSTREAM_ERROR), 503, "Polygon API Error"),
            (ParsingError("Error parsing Polygon API JSON response"), 500, "Data Processing Error"),
            (StorageIntegrityError("Stock price already exists for symbol and date"), 409, "Conflict"),
            (IngestionError("Error processing stock price data: boom"), 500, "Internal Server Error"),
        ],
    )
    def test_error_mapping(self, error, status, label):
        client = make_client(ingestion=StubIngestionService(error=error))

        response = client.get("/api/v1/stocks/fetch", params=FETCH_PARAMS)

        assert response.status_code == status
        body = response.json()
        assert body["status"] == status
        assert body["error"] == label
        assert body["path"] == "/api/v1/stocks/fetch"

    def test_provider_error_message_is_exposed(self):
        error = ProviderError("Polygon API error: API Key Invalid", ProviderErrorKind.UPSTREAM_ERROR)
        client = make_client(ingestion=StubIngestionService(error=error))

        body = client.get("/api/v1/stocks/fetch", params=FETCH_PARAMS).json()

        assert "API Key Invalid" in body["message"]
        assert body["kind"] == "upstream_error"


class TestGetEndpoint:
    def test_returns_bar(self):
        client = make_client(query=StubQueryService(bar=BAR))

        response = client.get("/api/v1/stocks/AAPL", params={"date": "2023-01-15"})

        assert response.status_code == 200
        assert response.json() == {
            "symbol": "AAPL",
            "date": "2023-01-15",
            "open_price": 173.97,
            "close_price": 173.57,
            "high_price": 174.3,
            "low_price": 173.12,
            "volume": 77287356,
        }

    def test_not_found(self):
        error = BarNotFoundError("MISSING", date(2023, 1, 15))
        client = make_client(query=StubQueryService(error=error))

        response = client.get("/api/v1/stocks/MISSING", params={"date": "2023-01-15"})

        assert response.status_code == 404
        body = response.json()
        assert body["symbol"] == "MISSING"
        assert body["date"] == "2023-01-15"

    def test_missing_date(self):
        response = make_client().get("/api/v1/stocks/AAPL")
        assert response.status_code == 400


class TestHealth:
    def test_health(self):
        response = make_client().get("/health")
        assert response.status_code == 200
        assert response.json()["services"] == {"ingestion": True, "query": True}
