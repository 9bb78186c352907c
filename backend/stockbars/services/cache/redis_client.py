"""
Redis cache client for daily bars.

Backs the read-through lookup of one bar by (symbol, date).
Falls back to an in-process dict when Redis is unavailable.
"""

import asyncio
import json
import logging
from datetime import date
from typing import Optional, Dict, Iterable

import redis.asyncio as redis
from redis.exceptions import RedisError

from stockbars.core.config import settings
from stockbars.schemas.market import DailyBar

logger = logging.getLogger(__name__)


async def init_redis(url: Optional[str] = None) -> Optional[redis.Redis]:
    """
    Connect to Redis.
    Called on application startup; returns None when Redis is unreachable.
    """
    url = url or settings.redis_url
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
    )
    try:
        # Test connection
        await client.ping()
        logger.info(f"Redis connected: {url}")
        return client
    except (RedisError, OSError) as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory fallback.")
        await client.aclose()
        return None


async def close_redis(client: Optional[redis.Redis]) -> None:
    """Close a Redis connection pool."""
    if client is not None:
        await client.aclose()
        logger.info("Redis connection closed")


class BarCache:
    """
    Cache of stored daily bars.

    Keys:
    - {region}:{SYMBOL}:{YYYY-MM-DD} → JSON DailyBar
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        region: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
    ):
        self._redis = redis_client
        self.region = region or settings.cache_region
        self.ttl_seconds = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        # In-memory fallback when Redis is unavailable
        self._memory_cache: Dict[str, str] = {}
        self._memory_lock = asyncio.Lock()

    @property
    def redis(self) -> Optional[redis.Redis]:
        return self._redis

    def key(self, symbol: str, trading_date: date) -> str:
        return f"{self.region}:{symbol.upper()}:{trading_date.isoformat()}"

    async def get(self, symbol: str, trading_date: date) -> Optional[DailyBar]:
        """Get a cached bar, or None on miss."""
        key = self.key(symbol, trading_date)
        value: Optional[str] = None

        if self.redis:
            try:
                value = await self.redis.get(key)
            except RedisError as e:
                logger.warning(f"Redis get failed for {key}, using memory cache: {e}")
                value = await self._memory_get(key)
        else:
            value = await self._memory_get(key)

        if not value:
            return None
        try:
            return DailyBar.model_validate(json.loads(value))
        except ValueError as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            await self.evict(symbol, trading_date)
            return None

    async def set(self, bar: DailyBar) -> bool:
        """Store a bar under its (symbol, date) key."""
        key = self.key(bar.symbol, bar.trading_date)
        value = bar.model_dump_json()

        if self.redis:
            try:
                await self.redis.set(key, value, ex=self.ttl_seconds or None)
                return True
            except RedisError as e:
                logger.warning(f"Redis set failed for {key}, using memory cache: {e}")

        await self._memory_set(key, value)
        return True

    async def evict(self, symbol: str, trading_date: date) -> None:
        await self.evict_many([(symbol, trading_date)])

    async def evict_many(self, keys: Iterable[tuple[str, date]]) -> int:
        """Drop cached entries; returns how many keys were requested."""
        cache_keys = [self.key(symbol, trading_date) for symbol, trading_date in keys]
        if not cache_keys:
            return 0

        if self.redis:
            try:
                await self.redis.delete(*cache_keys)
            except RedisError as e:
                logger.warning(
                    f"Redis eviction failed for {len(cache_keys)} keys, entries may be stale: {e}"
                )

        async with self._memory_lock:
            for key in cache_keys:
                self._memory_cache.pop(key, None)
        return len(cache_keys)

    async def _memory_get(self, key: str) -> Optional[str]:
        """Fallback to memory cache."""
        async with self._memory_lock:
            return self._memory_cache.get(key)

    async def _memory_set(self, key: str, value: str) -> None:
        """Fallback to memory cache."""
        async with self._memory_lock:
            self._memory_cache[key] = value
