"""
Cache module for StockBars.

Provides Redis caching for stored daily bars.
"""

from stockbars.services.cache.redis_client import (
    BarCache,
    init_redis,
    close_redis,
)

__all__ = [
    "BarCache",
    "init_redis",
    "close_redis",
]
