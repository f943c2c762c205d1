"""
Shared fixtures for Groups service tests.
"""

from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest

from service_groups.app.adapters.meetup_client import MeetupClient
from service_groups.app.domain.models import GroupRecord
from service_groups.app.exceptions import CacheMissError


class InMemoryGroupCache:
    """Dictionary-backed stand-in for GroupCache that records writes."""

    def __init__(self, entries: Dict[str, GroupRecord] = None):
        self.entries: Dict[str, GroupRecord] = dict(entries or {})
        self.writes: List[Tuple[str, GroupRecord, int]] = []
        self.closed = False

    async def get(self, identifier: str) -> GroupRecord:
        try:
            return self.entries[identifier]
        except KeyError:
            raise CacheMissError(identifier)

    async def set(self, identifier: str, record: GroupRecord, ttl_seconds: int) -> None:
        self.writes.append((identifier, record, ttl_seconds))
        self.entries[identifier] = record

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


def group_payload(identifier: str, **overrides: Any) -> Dict[str, Any]:
    """Upstream JSON document for a group."""
    payload = {
        "name": f"Group {identifier}",
        "link": f"https://www.meetup.com/{identifier}/",
        "city": "San Francisco",
        "country": "US",
        "members": 42,
    }
    payload.update(overrides)
    return payload


def make_meetup_client(handler: Callable[[httpx.Request], httpx.Response], api_key: str = "secret") -> MeetupClient:
    """MeetupClient whose HTTP traffic is answered by ``handler``."""
    transport = httpx.MockTransport(handler)
    return MeetupClient(
        "https://api.meetup.test",
        api_key,
        client=httpx.AsyncClient(transport=transport),
    )


@pytest.fixture
def sample_group() -> GroupRecord:
    return GroupRecord(
        name="GoSF",
        url="https://www.meetup.com/golangsf/",
        members=1200,
        city="San Francisco",
        country="US",
    )


@pytest.fixture
def memory_cache() -> InMemoryGroupCache:
    return InMemoryGroupCache()


@pytest.fixture
def payload_factory() -> Callable[..., Dict[str, Any]]:
    return group_payload


@pytest.fixture
def meetup_client_factory() -> Callable[..., MeetupClient]:
    return make_meetup_client
