"""
Unit tests for the Redis group cache.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import fakeredis
import fakeredis.aioredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from service_groups.app.caching.group_cache import GroupCache
from service_groups.app.exceptions import CacheMissError, CacheReadError, CacheWriteError


class TestGroupCache:
    """Test cases for GroupCache."""

    @pytest.fixture
    def redis_client(self):
        return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)

    @pytest.fixture
    def cache(self, redis_client):
        return GroupCache(client=redis_client, key_prefix="groups")

    def test_requires_url_or_client(self):
        with pytest.raises(ValueError):
            GroupCache()

    @pytest.mark.asyncio
    async def test_get_missing_key_raises_cache_miss(self, cache):
        with pytest.raises(CacheMissError):
            await cache.get("golangsf")

    @pytest.mark.asyncio
    async def test_set_then_get_returns_record(self, cache, sample_group):
        await cache.set("golangsf", sample_group, 3600)

        assert await cache.get("golangsf") == sample_group

    @pytest.mark.asyncio
    async def test_set_stores_json_with_expiration(self, cache, redis_client, sample_group):
        await cache.set("golangsf", sample_group, 3600)

        stored = await redis_client.get("groups:golangsf")
        ttl = await redis_client.ttl("groups:golangsf")

        assert json.loads(stored) == sample_group.to_dict()
        assert 0 < ttl <= 3600

    @pytest.mark.asyncio
    async def test_malformed_entry_raises_cache_read_error(self, cache, redis_client):
        await redis_client.set("groups:golangsf", "{not json")

        with pytest.raises(CacheReadError):
            await cache.get("golangsf")

    @pytest.mark.asyncio
    async def test_entry_with_wrong_shape_raises_cache_read_error(self, cache, redis_client):
        await redis_client.set("groups:golangsf", json.dumps({"Name": "only a name"}))

        with pytest.raises(CacheReadError):
            await cache.get("golangsf")

    @pytest.mark.asyncio
    async def test_store_failure_on_get_raises_cache_read_error(self):
        client = MagicMock()
        client.get = AsyncMock(side_effect=RedisConnectionError("down"))
        cache = GroupCache(client=client)

        with pytest.raises(CacheReadError) as exc_info:
            await cache.get("golangsf")

        assert "down" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_store_failure_on_set_raises_cache_write_error(self, sample_group):
        client = MagicMock()
        client.set = AsyncMock(side_effect=RedisConnectionError("down"))
        cache = GroupCache(client=client)

        with pytest.raises(CacheWriteError):
            await cache.set("golangsf", sample_group, 3600)

    @pytest.mark.asyncio
    async def test_ping(self, cache):
        assert await cache.ping() is True

    @pytest.mark.asyncio
    async def test_ping_failure_returns_false(self):
        client = MagicMock()
        client.ping = AsyncMock(side_effect=RedisConnectionError("down"))

        assert await GroupCache(client=client).ping() is False
