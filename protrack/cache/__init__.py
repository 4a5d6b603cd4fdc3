"""
Client-side cache for ProTrack.

Provides:
- ClientCache with cascade-aware add/update/remove
- Two-tier CacheLoader (users/clients first, the rest in background)
- PendingValue for optimistic status changes
- Statistics tracking
"""

from .cascade import UPDATE_RULES, EMBED_RULES, DELETE_RULES, cascade_update, cascade_delete
from .client_cache import ClientCache, CollectionState, kind_of
from .loader import CacheLoader
from .pending import PendingValue
from .stats import CacheStats

__all__ = [
    "UPDATE_RULES",
    "EMBED_RULES",
    "DELETE_RULES",
    "cascade_update",
    "cascade_delete",
    "ClientCache",
    "CollectionState",
    "kind_of",
    "CacheLoader",
    "PendingValue",
    "CacheStats",
]
