"""
Meetup Groups service.
"""

from typing import Dict, List, Optional

from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig

from service_groups.app.adapters.meetup_client import MeetupClient
from service_groups.app.caching.group_cache import GroupCache
from service_groups.app.domain.aggregator import GroupAggregator
from service_groups.app.domain.loader import GroupLoader
from service_groups.app.domain.models import AggregateResponse


class GroupsService(BaseService):
    """Serves the aggregated view of every configured group."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        cache: Optional[GroupCache] = None,
        meetup_client: Optional[MeetupClient] = None,
    ):
        super().__init__("groups", 8000, config=config)
        self.group_ids: List[str] = list(self.config.group_ids)

        self.cache = cache or GroupCache(
            self.config.redis_url,
            key_prefix=self.config.group_cache_prefix,
        )
        self.meetup_client = meetup_client or MeetupClient(
            self.config.meetup_api_url,
            self.config.meetup_api_key,
            timeout=self.config.meetup_timeout_seconds,
        )
        self.loader = GroupLoader(
            self.cache,
            self.meetup_client,
            ttl_seconds=self.config.group_cache_ttl_seconds,
            metrics=self.metrics,
        )
        self.aggregator = GroupAggregator(
            self.loader,
            max_concurrency=self.config.group_fetch_concurrency,
            metrics=self.metrics,
        )

        self._setup_groups_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.groups_service = self

    def _setup_groups_routes(self):
        """Set up groups routes."""

        @self.app.get("/api/groups")
        async def get_groups():
            """Return every configured group, with per-group fetch errors."""
            result = await self.aggregator.aggregate_all(self.group_ids)
            return self._encode(result)

    def _encode(self, result: AggregateResponse) -> JSONResponse:
        """Render the aggregate; partial failure never changes the status."""
        try:
            return JSONResponse(status_code=200, content=result.to_dict())
        except (TypeError, ValueError) as exc:
            self.logger.error("Encode response failed", error=str(exc))
            self.metrics.record_error("ENCODE_ERROR")
            return JSONResponse(status_code=200, content=AggregateResponse().to_dict())

    async def _shutdown(self) -> None:
        await self.meetup_client.close()
        await self.cache.close()

    async def _check_dependencies(self) -> Dict[str, str]:
        return {"redis": "ok" if await self.cache.ping() else "error"}


def create_app(config: Optional[ServiceConfig] = None, **components):
    """Create FastAPI application."""
    service = GroupsService(config, **components)
    return service.app


if __name__ == "__main__":
    service = GroupsService()
    service.run()
