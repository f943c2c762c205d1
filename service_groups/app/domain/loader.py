"""
Cache-aside loading of a single group.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from shared.logging import get_logger

from service_groups.app.domain.models import GroupRecord
from service_groups.app.exceptions import CacheMissError

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from service_groups.app.adapters.meetup_client import MeetupClient
    from service_groups.app.caching.group_cache import GroupCache
    from shared.metrics import MetricsCollector


DEFAULT_GROUP_TTL = 3600


class GroupLoader:
    """Returns a cached group, or fetches it upstream and caches the result."""

    def __init__(
        self,
        cache: "GroupCache",
        client: "MeetupClient",
        *,
        ttl_seconds: int = DEFAULT_GROUP_TTL,
        logger: Optional[Any] = None,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.cache = cache
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.logger = logger or get_logger("groups.loader")
        self.metrics = metrics

    async def load(self, identifier: str) -> GroupRecord:
        """
        Load one group.

        Cache problems are logged and never fail the load. Upstream failures
        (FetchError) propagate and leave the cache untouched.
        """
        try:
            group = await self.cache.get(identifier)
        except CacheMissError:
            self._record("group_cache_lookups_total", result="miss")
        except Exception as exc:
            self._record("group_cache_lookups_total", result="error")
            self.logger.error("Group cache read failed", identifier=identifier, error=str(exc))
        else:
            self._record("group_cache_lookups_total", result="hit")
            return group

        try:
            group = await self.client.fetch(identifier)
        except Exception:
            self._record("group_upstream_fetch_total", result="error")
            raise
        self._record("group_upstream_fetch_total", result="ok")

        try:
            await self.cache.set(identifier, group, self.ttl_seconds)
        except Exception as exc:
            self.logger.error("Group cache write failed", identifier=identifier, error=str(exc))

        return group

    def _record(self, metric_name: str, **labels) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name, **labels)
