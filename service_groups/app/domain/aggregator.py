"""
Concurrent fan-out of group loads and fan-in of their results.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, Optional, Sequence

from shared.logging import get_logger

from service_groups.app.domain.models import AggregateResponse, PartialResult
from service_groups.app.exceptions import FetchError

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from service_groups.app.domain.loader import GroupLoader
    from shared.metrics import MetricsCollector


class GroupAggregator:
    """Loads every identifier concurrently and merges the outcomes.

    All loads start at once. One failing identifier never cancels the others;
    its error is reported in the response instead. ``max_concurrency`` bounds
    the number of loads in flight and is unlimited by default.
    """

    def __init__(
        self,
        loader: "GroupLoader",
        *,
        max_concurrency: Optional[int] = None,
        logger: Optional[Any] = None,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.loader = loader
        self.max_concurrency = max_concurrency
        self.logger = logger or get_logger("groups.aggregator")
        self.metrics = metrics

    async def aggregate_all(self, identifiers: Sequence[str]) -> AggregateResponse:
        """Load all ``identifiers`` and return groups and errors in completion order."""
        start = time.perf_counter()
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        tasks = [
            asyncio.create_task(self._load_partial(identifier, semaphore))
            for identifier in identifiers
        ]

        response = AggregateResponse()
        for completed in asyncio.as_completed(tasks):
            response.add(await completed)

        duration = time.perf_counter() - start
        self.logger.info(
            "Group aggregation completed",
            requested=len(tasks),
            groups=len(response.groups),
            errors=len(response.errors),
            duration_ms=round(duration * 1000, 2),
        )
        if self.metrics:
            self.metrics.observe_histogram("group_aggregate_duration_seconds", duration)
            if response.errors:
                self.metrics.increment_counter("group_aggregate_errors_total", len(response.errors))

        return response

    async def _load_partial(
        self,
        identifier: str,
        semaphore: Optional[asyncio.Semaphore],
    ) -> PartialResult:
        if semaphore is None:
            return await self._load_one(identifier)
        async with semaphore:
            return await self._load_one(identifier)

    async def _load_one(self, identifier: str) -> PartialResult:
        try:
            group = await self.loader.load(identifier)
        except FetchError as exc:
            self.logger.warning("Group fetch failed", identifier=identifier, error=str(exc), code=exc.code)
            return PartialResult(identifier, error=exc)
        except Exception as exc:
            self.logger.error("Unexpected group load failure", identifier=identifier, error=str(exc), exc_info=True)
            return PartialResult(identifier, error=exc)
        return PartialResult(identifier, group=group)
