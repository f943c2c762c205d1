"""
Redis lookaside cache for group records.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import redis.asyncio as redis

from shared.logging import get_logger

from service_groups.app.domain.models import GroupRecord
from service_groups.app.exceptions import CacheMissError, CacheReadError, CacheWriteError


DEFAULT_KEY_PREFIX = "groups"


class GroupCache:
    """Reads and writes JSON-encoded group records keyed by identifier."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        *,
        client: Optional[Any] = None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ) -> None:
        if client is None and redis_url is None:
            raise ValueError("either redis_url or client is required")

        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self.logger = get_logger("groups.cache")
        self._redis = client if client is not None else redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
        )

    async def close(self) -> None:
        """Close Redis connections."""
        await self._redis.aclose()

    def _make_key(self, identifier: str) -> str:
        return f"{self.key_prefix}:{identifier}"

    async def get(self, identifier: str) -> GroupRecord:
        """
        Return the cached record for ``identifier``.

        Raises CacheMissError when nothing is stored under the key and
        CacheReadError when Redis fails or the stored entry is not a group.
        """
        key = self._make_key(identifier)
        try:
            value = await self._redis.get(key)
        except Exception as exc:
            raise CacheReadError(f"redis get {key!r}: {exc}") from exc

        if value is None:
            raise CacheMissError(key)

        if isinstance(value, bytes):
            value = value.decode("utf-8")

        try:
            return GroupRecord.from_dict(json.loads(value))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise CacheReadError(f"malformed entry {key!r}: {exc}") from exc

    async def set(self, identifier: str, record: GroupRecord, ttl_seconds: int) -> None:
        """Store ``record`` under ``identifier`` expiring after ``ttl_seconds``."""
        key = self._make_key(identifier)
        payload = json.dumps(record.to_dict())
        try:
            await self._redis.set(key, payload, ex=ttl_seconds)
        except Exception as exc:
            raise CacheWriteError(f"redis set {key!r}: {exc}") from exc

        self.logger.debug("Cached group", key=key, ttl=ttl_seconds)

    async def ping(self) -> bool:
        """Return True when Redis responds to a ping."""
        try:
            return bool(await self._redis.ping())
        except Exception as exc:
            self.logger.error("Redis health check failed", error=str(exc))
            return False
