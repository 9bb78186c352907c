import os

import pytest

from stockbars.services.data_ingestion import PolygonClient, parse_aggregates

POLYGON_API_KEY = os.getenv("POLYGON_API_KEY")


@pytest.mark.integration
@pytest.mark.skipif(not POLYGON_API_KEY, reason="POLYGON_API_KEY not set")
class TestPolygonIntegration:
    """Calls the live Polygon aggregates endpoint."""

    @pytest.mark.asyncio
    async def test_fetch_daily_bars(self):
        client = PolygonClient(api_key=POLYGON_API_KEY)
        try:
            body = await client.fetch("AAPL", "2023-01-03", "2023-01-06")
        finally:
            await client.close()

        result = parse_aggregates("AAPL", body)
        assert result.bars
        assert all(bar.symbol == "AAPL" for bar in result.bars)
        assert all(bar.close_price is not None for bar in result.bars)
