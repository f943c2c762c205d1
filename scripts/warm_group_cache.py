#!/usr/bin/env python3
"""
Warm the Redis group cache.

Runs one aggregation over the configured groups (or the ones passed with
--group) so that the next /api/groups request is served from cache. Groups
already cached are left as they are.
"""

import argparse
import asyncio
import json
from pathlib import Path
from typing import Optional, Sequence
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.config import BaseConfig  # noqa: E402
from shared.logging import configure_logging  # noqa: E402
from service_groups.app.adapters.meetup_client import MeetupClient  # noqa: E402
from service_groups.app.caching.group_cache import GroupCache  # noqa: E402
from service_groups.app.domain.aggregator import GroupAggregator  # noqa: E402
from service_groups.app.domain.loader import GroupLoader  # noqa: E402


async def warm(
    *,
    redis_url: str,
    meetup_url: str,
    api_key: str,
    group_ids: Sequence[str],
    ttl_seconds: int,
    key_prefix: str,
    concurrency: Optional[int],
) -> dict:
    """Execute cache warming and return the summary."""
    cache = GroupCache(redis_url, key_prefix=key_prefix)
    client = MeetupClient(meetup_url, api_key)
    try:
        loader = GroupLoader(cache, client, ttl_seconds=ttl_seconds)
        aggregator = GroupAggregator(loader, max_concurrency=concurrency)
        result = await aggregator.aggregate_all(group_ids)
    finally:
        await client.close()
        await cache.close()

    return {
        "requested": len(group_ids),
        "loaded": len(result.groups),
        "errors": result.errors,
    }


def _parse_args(settings: BaseConfig, argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Warm the Redis cache for meetup groups.")
    parser.add_argument("--redis-url", default=settings.redis_url, help="Redis connection URL")
    parser.add_argument("--meetup-url", default=settings.meetup_api_url, help="Meetup API base URL")
    parser.add_argument("--group", action="append", dest="groups", default=None, help="Group identifier to warm (repeatable)")
    parser.add_argument("--ttl", type=int, default=settings.group_cache_ttl_seconds, help="Cache TTL in seconds")
    parser.add_argument("--concurrency", type=int, default=settings.group_fetch_concurrency, help="Concurrent loads (default: unlimited)")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write JSON summary")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = BaseConfig()
    args = _parse_args(settings, argv)
    configure_logging("groups", settings.log_level)

    try:
        summary = asyncio.run(
            warm(
                redis_url=args.redis_url,
                meetup_url=args.meetup_url,
                api_key=settings.meetup_api_key,
                group_ids=args.groups or settings.group_ids,
                ttl_seconds=args.ttl,
                key_prefix=settings.group_cache_prefix,
                concurrency=args.concurrency,
            )
        )
    except KeyboardInterrupt:
        return 130
    except Exception as exc:  # pragma: no cover - CLI surface
        print(f"[group-cache-warm] failed: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(summary, indent=2))

    if args.output:
        args.output.write_text(json.dumps(summary, indent=2))

    return 1 if summary["errors"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
