"""
Exceptions raised while loading groups.

Fetch errors describe why a single identifier could not be loaded and end up
as entries in the aggregate response. Cache errors never leave the loader.
"""

from typing import Any, Dict, List, Optional, Sequence

from shared.errors import AccessLayerException


class FetchError(AccessLayerException):
    """Base class for failures loading a group from the upstream API."""


class TransportError(FetchError):
    """The HTTP request to the upstream API failed."""

    def __init__(self, cause: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", f"get: {cause}", details)


class DecodeError(FetchError):
    """The upstream response body could not be decoded into a group."""

    def __init__(self, cause: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", f"decode: {cause}", details)


class UpstreamAPIError(FetchError):
    """The upstream API answered with one or more error messages.

    ``messages`` keeps them individually; the string form joins them with
    newlines so existing consumers of the error text see the same output.
    """

    def __init__(self, messages: Sequence[str], details: Optional[Dict[str, Any]] = None):
        self.messages: List[str] = list(messages)
        super().__init__("UPSTREAM_API_ERROR", "\n".join(self.messages), details)


class CacheError(Exception):
    """Base class for group cache failures."""


class CacheMissError(CacheError):
    """No cache entry exists for the key."""


class CacheReadError(CacheError):
    """The cache could not be read or held an undecodable entry."""


class CacheWriteError(CacheError):
    """The cache rejected a write."""
