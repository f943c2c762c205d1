"""
Domain layer for the Groups service.
"""

from .aggregator import GroupAggregator
from .loader import GroupLoader
from .models import AggregateResponse, GroupRecord, PartialResult

__all__ = [
    "AggregateResponse",
    "GroupAggregator",
    "GroupLoader",
    "GroupRecord",
    "PartialResult",
]
