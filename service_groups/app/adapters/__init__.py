"""
Adapters package for the Groups service.

Contains the HTTP client wrapper for the Meetup API. Adapters encapsulate
base URLs, request shapes and decoding, and map failures to the fetch errors
in ``app.exceptions``.
"""

from .meetup_client import MeetupClient

__all__ = ["MeetupClient"]
