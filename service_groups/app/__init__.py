"""
Meetup Groups service package.

The service answers ``GET /api/groups`` with the merged details of every
configured group, loading each one concurrently through a Redis lookaside
cache in front of the Meetup API.

Structure:
- app.main: FastAPI app, routes, and lifecycle wiring.
- app.adapters: HTTP client for the Meetup API.
- app.caching: Redis cache for group records.
- app.domain: Records, the cache-aside loader and the aggregator.
- app.exceptions: Fetch and cache error types.
"""
