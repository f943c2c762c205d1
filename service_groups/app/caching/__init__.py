"""
Groups caching package.

Lookaside cache for group records. Entries are only written after a fresh
upstream fetch and expire on their own.
"""

from .group_cache import GroupCache

__all__ = ["GroupCache"]
