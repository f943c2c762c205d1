"""
Records exchanged between the group loader, the aggregator and the API.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class GroupRecord:
    """A meetup group as exposed by the API and stored in the cache."""

    name: str
    url: str
    members: int
    city: str
    country: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the group using the public JSON field names."""
        return {
            "Name": self.name,
            "URL": self.url,
            "Members": self.members,
            "City": self.city,
            "Country": self.country,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "GroupRecord":
        """Rehydrate a group from cached JSON state.

        Raises KeyError, TypeError or ValueError when the payload does not
        describe a group.
        """
        if not isinstance(payload, dict):
            raise TypeError(f"expected object, got {type(payload).__name__}")

        members = payload["Members"]
        if isinstance(members, bool) or not isinstance(members, int):
            raise TypeError("Members must be an integer")
        if members < 0:
            raise ValueError("Members must be non-negative")

        strings = {}
        for key in ("Name", "URL", "City", "Country"):
            value = payload[key]
            if not isinstance(value, str):
                raise TypeError(f"{key} must be a string")
            strings[key] = value

        return cls(
            name=strings["Name"],
            url=strings["URL"],
            members=members,
            city=strings["City"],
            country=strings["Country"],
        )


@dataclass(frozen=True)
class PartialResult:
    """Outcome of loading one identifier; exactly one of group and error is set."""

    identifier: str
    group: Optional[GroupRecord] = None
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        if (self.group is None) == (self.error is None):
            raise ValueError("exactly one of group or error must be set")

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class AggregateResponse:
    """Groups and per-identifier errors, in completion order."""

    groups: List[GroupRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def add(self, partial: PartialResult) -> None:
        if partial.failed:
            self.errors.append(f"fetch {partial.identifier}: {partial.error}")
        else:
            self.groups.append(partial.group)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Groups": [group.to_dict() for group in self.groups],
            "Errors": list(self.errors),
        }
