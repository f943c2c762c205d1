"""
Unit tests for the group aggregator.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from service_groups.app.domain.aggregator import GroupAggregator
from service_groups.app.domain.loader import GroupLoader
from service_groups.app.domain.models import GroupRecord
from service_groups.app.exceptions import TransportError


def _record(name: str) -> GroupRecord:
    return GroupRecord(name=name, url="", members=0, city="", country="")


class TestGroupAggregator:
    """Test cases for GroupAggregator."""

    @pytest.fixture
    def logger(self):
        return MagicMock()

    @pytest.mark.asyncio
    async def test_partial_failure_is_reported_per_identifier(self, logger):
        """Test one failing identifier does not affect the others."""
        records = {"a": _record("A"), "c": _record("C")}

        async def load(identifier):
            if identifier == "b":
                raise TransportError("boom")
            return records[identifier]

        loader = MagicMock()
        loader.load = AsyncMock(side_effect=load)
        aggregator = GroupAggregator(loader, logger=logger)

        result = await aggregator.aggregate_all(["a", "b", "c"])

        assert sorted(group.name for group in result.groups) == ["A", "C"]
        assert result.errors == ["fetch b: get: boom"]

    @pytest.mark.asyncio
    async def test_plain_error_message_is_formatted(self, logger):
        async def load(identifier):
            if identifier == "b":
                raise RuntimeError("boom")
            return _record(identifier.upper())

        loader = MagicMock()
        loader.load = AsyncMock(side_effect=load)

        result = await GroupAggregator(loader, logger=logger).aggregate_all(["a", "b", "c"])

        assert result.errors == ["fetch b: boom"]
        assert len(result.groups) == 2
        logger.error.assert_called_once()

    @pytest.mark.asyncio
    async def test_every_identifier_is_accounted_for(self, logger):
        identifiers = [f"group-{index}" for index in range(25)]

        async def load(identifier):
            if int(identifier.split("-")[1]) % 3 == 0:
                raise TransportError("unreachable")
            return _record(identifier)

        loader = MagicMock()
        loader.load = AsyncMock(side_effect=load)

        result = await GroupAggregator(loader, logger=logger).aggregate_all(identifiers)

        assert len(result.groups) + len(result.errors) == len(identifiers)
        assert len(result.errors) == 9
        assert loader.load.await_count == len(identifiers)

    @pytest.mark.asyncio
    async def test_all_failures_still_produce_response(self, logger):
        loader = MagicMock()
        loader.load = AsyncMock(side_effect=TransportError("down"))

        result = await GroupAggregator(loader, logger=logger).aggregate_all(["a", "b"])

        assert result.groups == []
        assert sorted(result.errors) == ["fetch a: get: down", "fetch b: get: down"]

    @pytest.mark.asyncio
    async def test_empty_identifier_set(self, logger):
        loader = MagicMock()
        loader.load = AsyncMock()

        result = await GroupAggregator(loader, logger=logger).aggregate_all([])

        assert result.to_dict() == {"Groups": [], "Errors": []}
        loader.load.assert_not_called()

    @pytest.mark.asyncio
    async def test_results_arrive_in_completion_order(self, logger):
        """Test a slow first identifier is collected last."""
        release = asyncio.Event()

        async def load(identifier):
            if identifier == "slow":
                await release.wait()
            else:
                release.set()
            return _record(identifier)

        loader = MagicMock()
        loader.load = AsyncMock(side_effect=load)

        result = await GroupAggregator(loader, logger=logger).aggregate_all(["slow", "fast"])

        assert [group.name for group in result.groups] == ["fast", "slow"]

    @pytest.mark.asyncio
    async def test_loads_run_concurrently(self, logger):
        """Test all loads are in flight before any completes."""
        identifiers = ["a", "b", "c", "d"]
        started = []
        all_started = asyncio.Event()

        async def load(identifier):
            started.append(identifier)
            if len(started) == len(identifiers):
                all_started.set()
            await asyncio.wait_for(all_started.wait(), timeout=1)
            return _record(identifier)

        loader = MagicMock()
        loader.load = AsyncMock(side_effect=load)

        result = await GroupAggregator(loader, logger=logger).aggregate_all(identifiers)

        assert result.errors == []
        assert len(result.groups) == 4

    @pytest.mark.asyncio
    async def test_max_concurrency_bounds_in_flight_loads(self, logger):
        in_flight = 0
        peak = 0

        async def load(identifier):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return _record(identifier)

        loader = MagicMock()
        loader.load = AsyncMock(side_effect=load)
        aggregator = GroupAggregator(loader, max_concurrency=2, logger=logger)

        result = await aggregator.aggregate_all([str(index) for index in range(6)])

        assert len(result.groups) == 6
        assert peak == 2

    def test_rejects_non_positive_concurrency(self):
        with pytest.raises(ValueError):
            GroupAggregator(MagicMock(), max_concurrency=0)

    @pytest.mark.asyncio
    async def test_repeated_aggregation_is_served_from_cache(
        self, memory_cache, meetup_client_factory, payload_factory
    ):
        """Test a second run within the TTL makes no upstream calls."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            identifier = request.url.path.lstrip("/")
            calls.append(identifier)
            if identifier == "broken":
                return httpx.Response(200, json={"errors": [{"message": "group not found"}]})
            return httpx.Response(200, json=payload_factory(identifier))

        client = meetup_client_factory(handler)
        loader = GroupLoader(memory_cache, client, ttl_seconds=3600)
        aggregator = GroupAggregator(loader)
        identifiers = ["golangsf", "golang-paris", "broken"]

        first = await aggregator.aggregate_all(identifiers)
        second = await aggregator.aggregate_all(identifiers)
        await client.close()

        assert sorted(calls) == ["broken", "broken", "golang-paris", "golangsf"]
        assert sorted(g.name for g in first.groups) == sorted(g.name for g in second.groups)
        assert first.errors == second.errors == ["fetch broken: group not found"]
        assert sorted(identifier for identifier, _, _ in memory_cache.writes) == ["golang-paris", "golangsf"]
        assert all(ttl == 3600 for _, _, ttl in memory_cache.writes)
